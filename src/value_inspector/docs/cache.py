"""DocCommentCache: LRU-backed memo around CommentParser.parse.

Methods of one class are reflected once per inspected instance, so the same
docstrings are parsed again and again while walking a list of objects.
``DocCommentCache`` keys parsed results by the raw comment text and evicts
the least-recently-used entry silently when ``max_size`` is exceeded.

Each ``DocCommentCache`` instance maintains its own ``LRUCache``; there is
no class-level shared state, so two instances never interfere.

Example::

    from value_inspector.docs.cache import DocCommentCache

    cache = DocCommentCache(max_size=128)
    doc = cache.parse(some_function.__doc__)
    doc_again = cache.parse(some_function.__doc__)   # served from memory
"""

from __future__ import annotations

from cachetools import LRUCache

from value_inspector.docs.parser import CommentParser, DocComment


class DocCommentCache:
    """LRU-backed caching proxy around a CommentParser.

    Exposes the same ``parse`` surface as ``CommentParser`` so either can be
    handed to ``ClassDescriptorBuilder``.

    Args:
        parser: The parser to delegate to.  Defaults to ``CommentParser()``.
        max_size: Maximum number of parsed comments held in memory.
            Defaults to 256.
    """

    def __init__(self, parser: CommentParser | None = None, max_size: int = 256) -> None:
        self._parser = parser if parser is not None else CommentParser()
        self._cache: LRUCache[str, DocComment] = LRUCache(maxsize=max_size)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # CommentParser surface
    # ------------------------------------------------------------------

    def parse(self, raw: str | None) -> DocComment:
        """Return the parsed form of ``raw``; only unseen text hits the parser."""
        key = raw or ""
        cached = self._cache.get(key)
        if cached is None:
            cached = self._parser.parse(key)
            self._cache[key] = cached
        return cached
