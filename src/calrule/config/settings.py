"""Runtime settings for calrule.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags or explicit construction
  2. Env vars: ``CALRULE_*`` prefix
  3. Code defaults
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from calrule.core.locale import normalize_locale
from calrule.core.types import TextStyle


class CalruleSettings(BaseSettings):
    """Settings shared by the text cache and the CLI.

    Attributes:
        default_locale: Locale used when a caller does not name one.
        default_style: Text style used when a caller does not name one.
        soft_cache_size: How many per-locale text tables stay strongly
            reachable. Older tables may be reclaimed and are rebuilt on
            demand. Zero keeps nothing alive beyond its current users.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CALRULE_",
    }

    default_locale: str = "en"
    default_style: TextStyle = TextStyle.FULL
    soft_cache_size: int = Field(default=64, ge=0)
    verbose: bool = False
    log_json: bool = False

    @field_validator("default_locale")
    @classmethod
    def _normalize_locale(cls, v: str) -> str:
        return normalize_locale(v)


@lru_cache(maxsize=1)
def get_settings() -> CalruleSettings:
    return CalruleSettings()


def reset_settings() -> None:
    get_settings.cache_clear()
