from __future__ import annotations

import argparse
import sys

import structlog

from calrule.config.logging import configure_logging
from calrule.config.settings import get_settings
from calrule.core.errors import CalruleError
from calrule.core.types import TextStyle

logger = structlog.get_logger(__name__)


def _style(s: str) -> TextStyle:
    try:
        return TextStyle(s.lower())
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid style '{s}' (choose from {', '.join(t.value for t in TextStyle)})"
        ) from None


def cmd_rules(args: argparse.Namespace) -> int:
    import calrule

    for rule in calrule.ordered_rules():
        unit = rule.period_unit.name if rule.period_unit else "-"
        rng = rule.period_range.name if rule.period_range else "-"
        fixed = "fixed" if rule.is_fixed_value_set() else "variable"
        text = " text" if rule.has_text else ""
        print(
            f"{rule.id:<22} {unit:>8} / {rng:<8} "
            f"[{rule.get_minimum_value()}, {rule.get_maximum_value()}] {fixed}{text}"
        )
    return 0


def cmd_text(args: argparse.Namespace) -> int:
    import calrule

    print(calrule.get_text(args.rule, args.value, locale=args.locale, style=args.style))
    return 0


def cmd_parse(args: argparse.Namespace) -> int:
    import calrule

    m = calrule.parse_text(
        args.rule, args.text, locale=args.locale, style=args.style, ignore_case=args.ignore_case
    )
    if m.is_matched:
        print(f"value={m.value} length={m.length}")
        return 0
    print("unsupported" if not m.is_supported else "no match")
    return 1


def cmd_fraction(args: argparse.Namespace) -> int:
    import calrule

    print(calrule.value_to_fraction(args.rule, args.value))
    return 0


def cmd_value(args: argparse.Namespace) -> int:
    import calrule

    print(calrule.fraction_to_value(args.rule, args.fraction))
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    settings = get_settings()

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", action="store_true", default=settings.verbose)
    common.add_argument("--log-json", action="store_true", default=settings.log_json)

    text_opts = argparse.ArgumentParser(add_help=False)
    text_opts.add_argument("--locale", default=settings.default_locale)
    text_opts.add_argument("--style", type=_style, default=settings.default_style)

    p = argparse.ArgumentParser(prog="calrule", description="Calendar field rule toolkit CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("rules", parents=[common], help="List registered field rules in order")

    p_text = sub.add_parser("text", parents=[common, text_opts], help="Localized text of a field value")
    p_text.add_argument("rule", help="rule id, or ISO field name (e.g. DayOfWeek)")
    p_text.add_argument("value", type=int)

    p_parse = sub.add_parser("parse", parents=[common, text_opts], help="Longest-match parse of field text")
    p_parse.add_argument("rule")
    p_parse.add_argument("text")
    p_parse.add_argument("--ignore-case", action="store_true")

    p_frac = sub.add_parser("fraction", parents=[common], help="Field value -> fraction of its range")
    p_frac.add_argument("rule")
    p_frac.add_argument("value", type=int)

    p_val = sub.add_parser("value", parents=[common], help="Fraction of range -> field value")
    p_val.add_argument("rule")
    p_val.add_argument("fraction")

    args = p.parse_args(argv)
    configure_logging(verbose=args.verbose, log_json=args.log_json)

    try:
        if args.cmd == "rules":
            return cmd_rules(args)

        if args.cmd == "text":
            return cmd_text(args)

        if args.cmd == "parse":
            return cmd_parse(args)

        if args.cmd == "fraction":
            return cmd_fraction(args)

        if args.cmd == "value":
            return cmd_value(args)
    except CalruleError as e:
        logger.debug("command_failed", cmd=args.cmd, error=str(e))
        print(f"calrule {args.cmd}: {e}", file=sys.stderr)
        return 2

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
