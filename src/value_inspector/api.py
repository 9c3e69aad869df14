"""Public API functions for value-inspector.

This module provides the user-facing functions: inspect, inspect_all,
describe and r.  Each call creates a fresh ValueInspector so that no
inspection state (path stack, docstring cache) leaks between calls.  The
only process-wide state is the HTML renderer's asset flag.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from value_inspector.config import InspectorConfig
from value_inspector.render.text import TextRenderer
from value_inspector.result import DumpResult
from value_inspector.tree.inspector import ValueInspector

if TYPE_CHECKING:
    from value_inspector.reflection.protocols import Reflector
    from value_inspector.render.protocols import Renderer
    from value_inspector.tree.nodes import Node

__all__ = ["describe", "inspect", "inspect_all", "r"]

logger = logging.getLogger(__name__)


def inspect(
    value: Any,
    config: InspectorConfig | None = None,
    reflector: Reflector | None = None,
) -> Node:
    """Inspect one value and return the root of its Node tree.

    Args:
        value:     Any Python value.
        config:    Inspection knobs.  Defaults to ``InspectorConfig()`` when None.
        reflector: Reflection capability for objects.  Defaults to
                   ``PythonReflector()`` when None.

    Returns:
        The root Node, with ``expanded_by_default`` set on it alone.
    """
    return ValueInspector(config=config, reflector=reflector).inspect(value)


def inspect_all(
    values: Iterable[Any],
    config: InspectorConfig | None = None,
    reflector: Reflector | None = None,
) -> list[Node]:
    """Inspect each value independently.

    Every value gets a fresh inspector, so a value shared between two
    arguments is rendered in full both times.
    """
    return [ValueInspector(config=config, reflector=reflector).inspect(value) for value in values]


def describe(
    *values: Any,
    renderer: Renderer | None = None,
    config: InspectorConfig | None = None,
) -> list[DumpResult]:
    """Inspect and render each value, timing every dump.

    The renderer's ``escape`` replaces ``config.escape`` so rendered values
    arrive prepared for the output medium.

    Args:
        *values:  Values to dump, in order.
        renderer: Output renderer.  Defaults to ``TextRenderer()`` when None.
        config:   Inspection knobs.  Defaults to ``InspectorConfig()`` when None.

    Returns:
        One DumpResult per value, in argument order.
    """
    renderer = renderer if renderer is not None else TextRenderer()
    config = config if config is not None else InspectorConfig()
    inspector = ValueInspector(config=dataclasses.replace(config, escape=renderer.escape))

    results: list[DumpResult] = []
    for index, value in enumerate(values):
        start = time.perf_counter()
        node = inspector.inspect(value)
        output = renderer.render(node)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug("Dumped value %d (%s) in %.3f ms", index, node.display_type, elapsed_ms)
        results.append(
            DumpResult(index=index, node=node, output=output, computation_time_ms=elapsed_ms)
        )
    return results


def r(*values: Any) -> None:
    """Print a plain-text dump of each value to standard output."""
    for result in describe(*values):
        print(result.output)
