"""Renderer Protocol: the contract between the inspection core and output.

A renderer consumes one Node tree and produces final text.  It also owns
escaping for its medium: ``describe`` hands ``renderer.escape`` to the
inspector so rendered values arrive ready for the target format.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from value_inspector.tree.nodes import Node


@runtime_checkable
class Renderer(Protocol):
    """Structural protocol for renderers.

    Any class implementing ``render(node) -> str`` and ``escape(text) -> str``
    satisfies this protocol at runtime; no inheritance required.
    """

    def escape(self, text: str) -> str: ...

    def render(self, node: Node) -> str: ...
