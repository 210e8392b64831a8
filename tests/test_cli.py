"""Tests for the calrule CLI."""

import pytest

from calrule.cli import main


def test_text(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["text", "DayOfWeek", "1"]) == 0
    assert capsys.readouterr().out.strip() == "Monday"


def test_text_style_and_locale(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["text", "ISO.MonthOfYear", "3", "--style", "SHORT"]) == 0
    assert main(["text", "MonthOfYear", "3", "--locale", "de"]) == 0
    assert capsys.readouterr().out.split() == ["Mar", "3"]


def test_bad_style_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["text", "DayOfWeek", "1", "--style", "tiny"])
    assert exc.value.code == 2
    assert "invalid style 'tiny'" in capsys.readouterr().err


def test_parse(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", "DayOfWeek", "wednesday", "--ignore-case"]) == 0
    assert capsys.readouterr().out.strip() == "value=3 length=9"


def test_parse_no_match(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", "DayOfWeek", "wednesday"]) == 1
    assert capsys.readouterr().out.strip() == "no match"


def test_parse_unsupported(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", "HourOfDay", "noon"]) == 1
    assert capsys.readouterr().out.strip() == "unsupported"


def test_fraction_and_value(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["fraction", "SecondOfMinute", "15"]) == 0
    assert main(["value", "SecondOfMinute", "0.25"]) == 0
    assert capsys.readouterr().out.split() == ["0.25", "15"]


def test_rules(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["rules"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("ISO.SecondOfMinute")
    assert lines[-1].startswith("ISO.Year")
    dom = next(line for line in lines if line.startswith("ISO.DayOfMonth"))
    assert "[1, 31] variable" in dom
    dow = next(line for line in lines if line.startswith("ISO.DayOfWeek"))
    assert dow.endswith("fixed text")


@pytest.mark.parametrize(
    "argv, message",
    [
        (["text", "DayOfFortnight", "1"], "Unknown rule 'ISO.DayOfFortnight'"),
        (["text", "DayOfWeek", "9"], "value 9 is not in the range 1 to 7"),
        (["value", "SecondOfMinute", "1.5"], "fractional value 1.5"),
        (["fraction", "DayOfMonth", "3"], "range is not fixed"),
    ],
)
def test_errors_exit_2(argv, message, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(argv) == 2
    err = capsys.readouterr().err
    assert err.startswith(f"calrule {argv[0]}: ")
    assert message in err
