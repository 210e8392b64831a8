"""
calrule.fields.text_cache
-------------------------
Per-rule cache of text stores, keyed by locale and then by style.

All styles of one locale are built together by the rule's population hook and
held behind a single ``SoftReference``. A reclaimed reference is just a miss:
the hook runs again and a fresh holder replaces the dead one.

No lock guards population. Two threads missing on the same locale may both
run the hook and both install a holder; the last write wins. The hook is a
pure function of (rule, locale), so either result is correct.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Mapping, Optional

from calrule.core.locale import normalize_locale
from calrule.core.softref import SoftReference, SoftReferencePool, default_pool
from calrule.core.types import TextStyle
from calrule.fields.text_store import TextStore

logger = logging.getLogger(__name__)

PopulateHook = Callable[[str], Mapping[TextStyle, Mapping[int, str]]]


class StyleStores(Mapping[TextStyle, TextStore]):
    """Immutable snapshot of the text stores of one locale, keyed by style."""
    __slots__ = ("_stores", "__weakref__")

    def __init__(self, stores: Mapping[TextStyle, TextStore]) -> None:
        self._stores: Dict[TextStyle, TextStore] = dict(stores)

    def __getitem__(self, style: TextStyle) -> TextStore:
        return self._stores[style]

    def __iter__(self) -> Iterator[TextStyle]:
        return iter(self._stores)

    def __len__(self) -> int:
        return len(self._stores)


class TextStoreCache:
    def __init__(
        self,
        owner: str,
        populate: PopulateHook,
        pool: Optional[SoftReferencePool] = None,
    ) -> None:
        self._owner = owner
        self._populate = populate
        self._pool = pool
        self._holders: Dict[str, SoftReference[StyleStores]] = {}

    @property
    def pool(self) -> SoftReferencePool:
        return self._pool if self._pool is not None else default_pool()

    def store_for(self, locale: str, style: TextStyle) -> Optional[TextStore]:
        locale = normalize_locale(locale)
        ref = self._holders.get(locale)
        if ref is not None:
            stores = ref.get()
            if stores is not None:
                return stores.get(style)
            logger.debug("Text stores of %s for %s were reclaimed", self._owner, locale)
        self._prune()
        stores = self._build(locale)
        self._holders[locale] = SoftReference(stores, self.pool)
        return stores.get(style)

    def cached_locales(self) -> list[str]:
        """Locales whose holder is still alive."""
        self._prune()
        return sorted(self._holders)

    def invalidate(self, locale: Optional[str] = None) -> None:
        if locale is None:
            self._holders.clear()
        else:
            self._holders.pop(normalize_locale(locale), None)

    def _prune(self) -> None:
        # drops holders of reclaimed stores, e.g. for locales asked for once
        for loc, ref in list(self._holders.items()):
            if not ref.alive and self._holders.get(loc) is ref:
                self._holders.pop(loc, None)

    def _build(self, locale: str) -> StyleStores:
        raw = self._populate(locale) or {}
        stores = {style: TextStore(locale, texts) for style, texts in raw.items() if texts}
        logger.debug(
            "Populated text stores of %s for %s: %s",
            self._owner,
            locale,
            sorted(s.value for s in stores),
        )
        return StyleStores(stores)
