"""Unit tests for DocCommentCache.

Tests cover:
- Cache hits (a docstring already parsed never reaches the parser again)
- LRU eviction (silent eviction at max_size; evicted text is re-parsed)
- Instance isolation (separate DocCommentCache instances do not share state)
- None and empty input share one entry
- Properties (max_size and curr_size return correct values)
"""

from __future__ import annotations

from value_inspector.docs.cache import DocCommentCache
from value_inspector.docs.parser import CommentParser, DocComment

# ---------------------------------------------------------------------------
# Spy helper
# ---------------------------------------------------------------------------


class _SpyParser(CommentParser):
    """CommentParser that records every text it is asked to parse."""

    def __init__(self) -> None:
        self.calls: list[str | None] = []

    def parse(self, raw: str | None) -> DocComment:
        self.calls.append(raw)
        return super().parse(raw)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestCacheHits:
    def test_second_parse_does_not_hit_parser(self) -> None:
        spy = _SpyParser()
        cache = DocCommentCache(parser=spy)
        cache.parse("Title.")
        cache.parse("Title.")
        assert spy.calls == ["Title."]

    def test_same_object_returned(self) -> None:
        cache = DocCommentCache()
        assert cache.parse("Title.") is cache.parse("Title.")

    def test_result_matches_parser(self) -> None:
        cache = DocCommentCache()
        assert cache.parse("Title. Body.") == CommentParser().parse("Title. Body.")

    def test_none_and_empty_share_entry(self) -> None:
        spy = _SpyParser()
        cache = DocCommentCache(parser=spy)
        assert cache.parse(None) == DocComment()
        assert cache.parse("") == DocComment()
        assert len(spy.calls) == 1
        assert cache.curr_size == 1


class TestEviction:
    def test_size_capped_at_max_size(self) -> None:
        cache = DocCommentCache(max_size=2)
        for text in ("a.", "b.", "c."):
            cache.parse(text)
        assert cache.curr_size == 2

    def test_evicted_text_is_reparsed(self) -> None:
        spy = _SpyParser()
        cache = DocCommentCache(parser=spy, max_size=2)
        for text in ("a.", "b.", "c.", "a."):
            cache.parse(text)
        assert spy.calls == ["a.", "b.", "c.", "a."]

    def test_recently_used_entry_survives(self) -> None:
        spy = _SpyParser()
        cache = DocCommentCache(parser=spy, max_size=2)
        cache.parse("a.")
        cache.parse("b.")
        cache.parse("a.")  # a is now most recently used
        cache.parse("c.")  # evicts b
        cache.parse("a.")
        assert spy.calls == ["a.", "b.", "c."]


class TestIsolation:
    def test_instances_do_not_share_entries(self) -> None:
        first = DocCommentCache()
        second = DocCommentCache()
        first.parse("Title.")
        assert first.curr_size == 1
        assert second.curr_size == 0


class TestProperties:
    def test_max_size(self) -> None:
        assert DocCommentCache(max_size=8).max_size == 8

    def test_default_max_size(self) -> None:
        assert DocCommentCache().max_size == 256

    def test_curr_size_starts_at_zero(self) -> None:
        assert DocCommentCache().curr_size == 0
