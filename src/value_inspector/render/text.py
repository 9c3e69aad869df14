"""TextRenderer: plain indented text for terminals and logs.

Output is one line per value.  Composite and object nodes open a ``{``
block whose edges are indented by ``indent`` spaces::

    list (2) {
      0 => int 1
      1 => list *RECURSION*
    }

A truncated composite or object (its members were not walked) ends in
``{...}``.

The text renderer does not escape: ``describe`` hands its identity
``escape`` to the inspector, so rendered values arrive verbatim.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from value_inspector.tree.nodes import EdgeKind, Modifier, NodeKind

if TYPE_CHECKING:
    from value_inspector.tree.nodes import Node, NodeEdge

__all__ = ["TextRenderer"]


class TextRenderer:
    """Renders a Node tree as indented plain text.

    Args:
        indent:        Spaces per nesting level.  Default 2.
        show_tooltips: Append the first line of each tooltip as a ``#``
            comment.  Default False.
    """

    def __init__(self, indent: int = 2, show_tooltips: bool = False) -> None:
        if indent < 0:
            msg = f"indent must be >= 0, got {indent}"
            raise ValueError(msg)
        self._pad = " " * indent
        self._show_tooltips = show_tooltips

    def escape(self, text: str) -> str:
        return text

    def render(self, node: Node) -> str:
        return "\n".join(self._lines(node))

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _lines(self, node: Node) -> list[str]:
        head = self._head(node)
        tip = self._tip(node.tooltip)
        if node.truncated:
            return [f"{head} {{...}}{tip}"]
        if not node.children:
            return [head + tip]
        lines = [f"{head} {{{tip}"]
        for edge in node.children:
            lines.extend(self._pad + line for line in self._edge_lines(edge))
        lines.append("}")
        return lines

    def _head(self, node: Node) -> str:
        match node.kind:
            case NodeKind.NULL:
                return "None"
            case NodeKind.BOOL | NodeKind.INT | NodeKind.FLOAT:
                return f"{node.display_type} {node.rendered_value}"
            case NodeKind.STRING:
                return f'{node.display_type} "{node.rendered_value}"'
            case NodeKind.RESOURCE:
                return f"resource {node.rendered_value}"
            case NodeKind.COMPOSITE:
                return node.display_type
            case NodeKind.OBJECT:
                return f"{node.rendered_value} object"
            case NodeKind.RECURSION:
                return f"{node.rendered_value} *RECURSION*"
            case _ as unreachable:
                assert_never(unreachable)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def _edge_lines(self, edge: NodeEdge) -> list[str]:
        badges = "".join(f"[{modifier}] " for modifier in edge.modifiers)
        arrow = "::" if Modifier.STATIC in edge.modifiers else "->"
        match edge.edge_kind:
            case EdgeKind.ARRAY_ELEMENT:
                prefix = f"{edge.label} => "
            case EdgeKind.CONSTANT:
                prefix = f"const {edge.label} = "
            case EdgeKind.PROPERTY:
                prefix = f"{badges}{arrow} {edge.label} = "
            case EdgeKind.INTERFACE:
                return [f"implements {badges}{edge.label}{self._tip(edge.tooltip)}"]
            case EdgeKind.TRAIT:
                return [f"uses {badges}{edge.label}{self._tip(edge.tooltip)}"]
            case EdgeKind.METHOD:
                origin = f" ({edge.origin})" if edge.origin else ""
                return [f"{badges}{arrow} {edge.label}{origin}{self._tip(edge.tooltip)}"]
            case _ as unreachable:
                assert_never(unreachable)

        if edge.child is None:
            return [prefix.rstrip(" =") + " (not evaluated)"]
        child_lines = self._lines(edge.child)
        return [prefix + child_lines[0], *child_lines[1:]]

    def _tip(self, tooltip: str) -> str:
        if not (self._show_tooltips and tooltip):
            return ""
        return f"  # {tooltip.splitlines()[0]}"
