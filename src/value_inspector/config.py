"""InspectorConfig: immutable knobs for a ValueInspector.

InspectorConfig is a frozen (immutable) dataclass.  It controls which
members are listed, whether computed properties are evaluated, how deep
the walk may go, how long rendered strings may get, the size of the docstring cache, and which
escape function prepares rendered values for the output medium.
"""

from __future__ import annotations

import html
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InspectorConfig:
    """Immutable configuration for value inspection.

    Attributes:
        show_protected: List ``_protected`` properties and methods.  Default True.
        show_inherited: List methods declared on parent classes.  Default True.
        show_dunder_methods: List special ``__dunder__`` methods besides
            ``__init__``.  Default False.
        evaluate_properties: Read ``property`` descriptors on the instance.  When
            False, computed properties are listed without a value.  Default False.
        max_depth: Containers and objects nested deeper than this are shown
            truncated, without members (>= 1).  Default 32.
        max_string_length: Truncate rendered strings to this many characters.
            The type label still reports the full length.  None disables it.
        doc_cache_size: Capacity of the per-inspector DocComment LRU cache (>= 1).
        escape: Escapes text for the output medium.  Defaults to
            ``html.escape`` (quotes included).
    """

    show_protected: bool = True
    show_inherited: bool = True
    show_dunder_methods: bool = False
    evaluate_properties: bool = False
    max_depth: int = 32
    max_string_length: int | None = None
    doc_cache_size: int = 256
    escape: Callable[[str], str] = html.escape

    def __post_init__(self) -> None:
        if self.max_string_length is not None and self.max_string_length < 0:
            msg = f"max_string_length must be >= 0, got {self.max_string_length}"
            raise ValueError(msg)
        if self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ValueError(msg)
        if self.doc_cache_size < 1:
            msg = f"doc_cache_size must be >= 1, got {self.doc_cache_size}"
            raise ValueError(msg)
