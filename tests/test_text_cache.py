# tests/test_text_cache.py

import gc
import threading

import pytest

from calrule.core.softref import SoftReference, SoftReferencePool
from calrule.core.types import TextMatch, TextStyle
from calrule.fields.text_cache import StyleStores, TextStoreCache

from conftest import TextRule, WEEKDAYS, make_rule


def test_store_is_built_once_per_locale(weekday_rule):
    short = weekday_rule.get_text_store("en", TextStyle.SHORT)
    narrow = weekday_rule.get_text_store("en", TextStyle.NARROW)
    again = weekday_rule.get_text_store("en", TextStyle.SHORT)
    assert short is again
    assert narrow.text_for(1) == "M"
    assert weekday_rule.populate_calls == 1


def test_equivalent_locale_spellings_share_an_entry(weekday_rule):
    weekday_rule.get_text_store("en-US", TextStyle.SHORT)
    weekday_rule.get_text_store("en_us", TextStyle.SHORT)
    assert weekday_rule.populate_calls == 1


def test_missing_style_is_none(weekday_rule):
    assert weekday_rule.get_text_store("en", TextStyle.FULL) is None
    assert weekday_rule.get_text(3, "en", TextStyle.FULL) == "3"


def test_locale_without_text_falls_back_to_decimal(weekday_rule):
    assert weekday_rule.get_text_store("fr", TextStyle.SHORT) is None
    assert weekday_rule.get_text(3, "fr", TextStyle.SHORT) == "3"
    assert weekday_rule.get_text(3, "en", TextStyle.SHORT) == "Wed"


def test_reclaimed_holder_is_rebuilt_transparently(weekday_rule, pool):
    first = weekday_rule.get_text_store("en", TextStyle.SHORT)
    pool.clear()
    gc.collect()
    second = weekday_rule.get_text_store("en", TextStyle.SHORT)
    assert weekday_rule.populate_calls == 2
    assert second is not first
    assert second == first
    for value, text in WEEKDAYS.items():
        assert second.text_for(value) == text
        assert second.match_text(False, text) == TextMatch.matched(len(text), value)


def test_zero_capacity_pool_repopulates_on_every_access():
    rule = TextRule({"en": {TextStyle.SHORT: dict(WEEKDAYS)}}, SoftReferencePool(0))
    for expected in (1, 2, 3):
        assert rule.get_text(1, "en", TextStyle.SHORT) == "Mon"
        gc.collect()
        assert rule.populate_calls == expected


def test_rule_without_text_never_allocates_a_cache():
    rule = make_rule()
    assert not rule.has_text
    assert rule.get_text_store("en", TextStyle.FULL) is None
    assert rule.get_text(42, "en") == "42"
    assert rule.match_text("en", TextStyle.FULL, "42") is TextMatch.UNSUPPORTED


def test_match_text_through_rule(weekday_rule):
    assert weekday_rule.match_text("en", TextStyle.SHORT, "friday", ignore_case=True) == TextMatch.matched(3, 5)
    # narrow names repeat (T, S) so that store is display only
    assert weekday_rule.match_text("en", TextStyle.NARROW, "T") is TextMatch.UNSUPPORTED
    assert weekday_rule.get_text(2, "en", TextStyle.NARROW) == "T"


def test_invalidate_and_cached_locales(weekday_rule):
    weekday_rule.get_text_store("en", TextStyle.SHORT)
    weekday_rule.get_text_store("fr", TextStyle.SHORT)
    assert weekday_rule._text_cache.cached_locales() == ["en", "fr"]
    weekday_rule.clear_text_cache("fr")
    assert weekday_rule._text_cache.cached_locales() == ["en"]
    weekday_rule.clear_text_cache()
    weekday_rule.get_text_store("en", TextStyle.SHORT)
    assert weekday_rule.populate_calls == 3


def test_concurrent_population_is_consistent(weekday_rule):
    n = 16
    barrier = threading.Barrier(n)
    results = [None] * n
    errors = []

    def worker(i):
        try:
            barrier.wait()
            results[i] = weekday_rule.get_text_store("en", TextStyle.SHORT)
        except Exception as e:  # pragma: no cover - surfaced by the assert below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert 1 <= weekday_rule.populate_calls <= n
    assert all(r == results[0] for r in results)


def test_cache_ignores_empty_style_tables(pool):
    cache = TextStoreCache("Test.X", lambda locale: {TextStyle.FULL: {}, TextStyle.SHORT: {1: "A"}}, pool)
    assert cache.store_for("en", TextStyle.FULL) is None
    assert cache.store_for("en", TextStyle.SHORT).text_for(1) == "A"


def test_style_stores_is_read_only():
    stores = StyleStores({})
    with pytest.raises(TypeError):
        stores[TextStyle.FULL] = None


def test_soft_reference_pool_evicts_least_recently_used():
    pool = SoftReferencePool(2)
    a, b, c = StyleStores({}), StyleStores({}), StyleStores({})
    ref_a = SoftReference(a, pool)
    SoftReference(b, pool)
    ref_a.get()  # a is now most recent
    SoftReference(c, pool)
    assert len(pool) == 2
    del a, b, c
    gc.collect()
    assert ref_a.get() is not None


def test_soft_reference_pool_rejects_negative_capacity():
    with pytest.raises(ValueError):
        SoftReferencePool(-1)


def test_reclaimed_holders_of_other_locales_are_dropped(weekday_rule, pool):
    for locale in ("fr", "de", "it"):
        weekday_rule.get_text_store(locale, TextStyle.SHORT)
    pool.clear()
    gc.collect()
    weekday_rule.get_text_store("en", TextStyle.SHORT)
    assert list(weekday_rule._text_cache._holders) == ["en"]


def test_cached_locales_skips_reclaimed_holders(weekday_rule, pool):
    weekday_rule.get_text_store("fr", TextStyle.SHORT)
    pool.clear()
    gc.collect()
    assert weekday_rule._text_cache.cached_locales() == []
    assert weekday_rule._text_cache._holders == {}


def test_alive_does_not_touch_the_pool():
    pool = SoftReferencePool(1)
    a, b = StyleStores({}), StyleStores({})
    ref_a = SoftReference(a, pool)
    SoftReference(b, pool)  # evicts a from the pool
    assert ref_a.alive
    assert len(pool) == 1
    del a
    gc.collect()
    assert not ref_a.alive
