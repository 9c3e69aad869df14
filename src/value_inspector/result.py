"""DumpResult dataclass for rendered inspection output.

This module provides the result type returned by describe() calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from value_inspector.tree.nodes import Node

__all__ = ["DumpResult"]


@dataclass(frozen=True, slots=True)
class DumpResult:
    """One rendered value from a describe() call.

    Attributes:
        index: Position of the value among the arguments passed to describe().
        node: Root of the inspection tree.
        output: The tree rendered by the chosen renderer.
        computation_time_ms: Wall-clock duration of inspection plus rendering
            in milliseconds.
    """

    index: int
    node: Node
    output: str
    computation_time_ms: float
