"""
calrule.fields.text_store
-------------------------
Immutable value <-> text mapping for one field rule, locale and style.

Besides the value-to-text table, a store keeps two reverse tables (case
sensitive, and upper/lower-cased keys for case-insensitive parsing) plus the
sorted distinct lengths of every stored text. Parsing probes prefixes of the
input at those lengths only, longest first, so "Tuesday" against
{"Tue", "Tuesday"} yields "Tuesday" and "Tuesday" against {"Tue"} yields "Tue".

If two values share a text, parsing would be ambiguous: the reverse tables are
left empty and ``match_text`` reports ``TextMatch.UNSUPPORTED``.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple

from calrule.core.errors import InvalidTextStoreError
from calrule.core.locale import normalize_locale, to_lower, to_upper
from calrule.core.types import TextMatch

logger = logging.getLogger(__name__)


class TextStore:
    __slots__ = ("_locale", "_value_text", "_text_value", "_insensitive", "_lengths")

    def __init__(self, locale: str, value_text_map: Mapping[int, str]) -> None:
        if locale is None:
            raise InvalidTextStoreError("Locale must not be None")
        if value_text_map is None:
            raise InvalidTextStoreError("Map must not be None")
        try:
            locale = normalize_locale(locale)
        except ValueError as e:
            raise InvalidTextStoreError(str(e)) from e

        copy: Dict[int, str] = {}
        for value, text in value_text_map.items():
            if value is None or not isinstance(text, str) or text == "":
                raise InvalidTextStoreError("The map must not contain None or empty text")
            copy[int(value)] = text

        reverse: Dict[str, int] = {}
        insensitive: Dict[str, int] = {}
        lengths = set()
        for value, text in copy.items():
            reverse[text] = value
            lengths.add(len(text))
            for folded in (to_lower(text, locale), to_upper(text, locale)):
                insensitive[folded] = value
                lengths.add(len(folded))

        self._locale = locale
        self._value_text = MappingProxyType(copy)
        self._lengths: Optional[Tuple[int, ...]]
        if len(reverse) < len(copy):
            logger.debug("Duplicate text in %s store, parsing disabled", locale)
            self._text_value = MappingProxyType({})
            self._insensitive = MappingProxyType({})
            self._lengths = None
        else:
            self._text_value = MappingProxyType(reverse)
            self._insensitive = MappingProxyType(insensitive)
            self._lengths = tuple(sorted(lengths))

    # ---------------------------------------------------------
    # Accessors
    # ---------------------------------------------------------

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def value_text_map(self) -> Mapping[int, str]:
        return self._value_text

    @property
    def text_value_map(self) -> Mapping[str, int]:
        """Text to value; empty when the store holds duplicate text."""
        return self._text_value

    @property
    def distinct_lengths(self) -> Optional[Tuple[int, ...]]:
        return self._lengths

    @property
    def can_parse(self) -> bool:
        return self._lengths is not None

    def text_for(self, value: int) -> Optional[str]:
        return self._value_text.get(value)

    # ---------------------------------------------------------
    # Parsing
    # ---------------------------------------------------------

    def match_text(self, ignore_case: bool, parse_text: str) -> TextMatch:
        """
        Greedy longest-prefix match of ``parse_text`` against the stored text.

        With ``ignore_case`` the upper-cased, then the lower-cased input is
        tried against the case-folded table before falling back to an exact
        lookup.
        """
        if parse_text is None:
            raise ValueError("Search text must not be None")
        if self._lengths is None:
            return TextMatch.UNSUPPORTED

        # index of the largest stored length that fits the unfolded input
        start = bisect_right(self._lengths, len(parse_text)) - 1
        if ignore_case:
            for folded in (to_upper(parse_text, self._locale), to_lower(parse_text, self._locale)):
                found = _longest_prefix(self._insensitive, self._lengths, start, folded)
                if found is not None:
                    return found
        found = _longest_prefix(self._text_value, self._lengths, start, parse_text)
        return found if found is not None else TextMatch.NO_MATCH

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextStore):
            return NotImplemented
        return self._locale == other._locale and self._value_text == other._value_text

    def __hash__(self) -> int:
        return hash((self._locale, frozenset(self._value_text.items())))

    def __repr__(self) -> str:
        return f"TextStore(locale={self._locale!r}, values={dict(self._value_text)!r})"


def _longest_prefix(
    table: Mapping[str, int], lengths: Sequence[int], start: int, text: str
) -> Optional[TextMatch]:
    for i in range(start, -1, -1):
        n = lengths[i]
        if n > len(text):
            continue
        value = table.get(text[:n])
        if value is not None:
            return TextMatch.matched(n, value)
    return None
