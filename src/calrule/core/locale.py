"""
calrule.core.locale
-------------------
Locale tags and locale-sensitive case folding.

Locales are plain string tags such as ``"en"``, ``"en_US"`` or ``"tr-TR"``.
They are normalized to ``lang_REGION`` so that equivalent spellings share
a single text cache entry.
"""

from __future__ import annotations

from typing import Optional

# Languages whose dotted/dotless i do not follow the default Unicode mapping.
_TURKIC = frozenset({"tr", "az"})


def normalize_locale(tag: Optional[str]) -> str:
    if tag is None or not str(tag).strip():
        raise ValueError("Locale must not be empty")
    parts = str(tag).strip().replace("-", "_").split("_")
    lang = parts[0].lower()
    rest = [p.upper() if len(p) == 2 else p for p in parts[1:] if p]
    return "_".join([lang, *rest])


def language(tag: str) -> str:
    return normalize_locale(tag).split("_", 1)[0]


def to_upper(text: str, locale: str) -> str:
    if language(locale) in _TURKIC:
        text = text.replace("i", "İ")
    return text.upper()


def to_lower(text: str, locale: str) -> str:
    if language(locale) in _TURKIC:
        text = text.replace("I", "ı").replace("İ", "i")
    return text.lower()
