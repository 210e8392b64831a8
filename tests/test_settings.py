# tests/test_settings.py

import pytest
from pydantic import ValidationError

from calrule.config.settings import CalruleSettings, get_settings, reset_settings
from calrule.core.types import TextStyle


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


class TestCalruleSettings:
    def test_defaults(self) -> None:
        s = CalruleSettings()
        assert s.default_locale == "en"
        assert s.default_style is TextStyle.FULL
        assert s.soft_cache_size == 64
        assert not s.verbose and not s.log_json

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CALRULE_SOFT_CACHE_SIZE", "3")
        monkeypatch.setenv("CALRULE_DEFAULT_STYLE", "short")
        monkeypatch.setenv("CALRULE_DEFAULT_LOCALE", "fr-ca")
        s = CalruleSettings()
        assert s.soft_cache_size == 3
        assert s.default_style is TextStyle.SHORT
        assert s.default_locale == "fr_CA"

    def test_init_kwargs_win_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CALRULE_SOFT_CACHE_SIZE", "3")
        assert CalruleSettings(soft_cache_size=5).soft_cache_size == 5

    def test_negative_cache_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CalruleSettings(soft_cache_size=-1)

    def test_empty_locale_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CalruleSettings(default_locale="")

    def test_frozen(self) -> None:
        s = CalruleSettings()
        with pytest.raises(ValidationError):
            s.soft_cache_size = 10


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    assert get_settings() is first
    monkeypatch.setenv("CALRULE_SOFT_CACHE_SIZE", "7")
    assert get_settings().soft_cache_size == first.soft_cache_size
    reset_settings()
    assert get_settings().soft_cache_size == 7
