"""HtmlRenderer: nested ``<span>``/``<dl>`` markup with hover tooltips.

Every value is an "entity"::

    <span class="rInt rHasTip">42<code>int</code></span>

The ``<code>`` child holds the tooltip and is shown on hover by the inline
style sheet.  Composite and object nodes add an ``rToggle`` anchor followed
by a ``<div>`` of members; the anchor is ``exp`` (expanded) on the root and
``col`` (collapsed) everywhere else.  The whole dump is wrapped in
``<div class="ref">``.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, assert_never

from value_inspector.render.assets import ASSET_MARKUP, ASSETS, AssetState
from value_inspector.tree.nodes import MODIFIER_TIPS, EdgeKind, Modifier, NodeKind

if TYPE_CHECKING:
    from value_inspector.tree.nodes import ClassDescriptor, Node, NodeEdge, ParameterEdge

__all__ = ["HtmlRenderer"]

_BADGES: dict[Modifier, str] = {
    Modifier.ABSTRACT: "A",
    Modifier.FINAL: "F",
    Modifier.STATIC: "S",
    Modifier.PROTECTED: "P",
    Modifier.CLONEABLE: "C",
    Modifier.ITERABLE: "X",
    Modifier.INHERITED: "I",
}

_SECTIONS: dict[EdgeKind, str] = {
    EdgeKind.INTERFACE: "Implements:",
    EdgeKind.CONSTANT: "Constants:",
    EdgeKind.TRAIT: "Uses:",
    EdgeKind.PROPERTY: "Properties:",
    EdgeKind.METHOD: "Methods:",
}


class HtmlRenderer:
    """Renders a Node tree as self-contained HTML.

    Args:
        assets: Asset state deciding whether the ``<style>``/``<script>``
            blocks are prepended.  Defaults to the process-wide ``ASSETS``.
    """

    def __init__(self, assets: AssetState | None = None) -> None:
        self._assets = assets if assets is not None else ASSETS

    def escape(self, text: str) -> str:
        return html.escape(text, quote=True)

    def render(self, node: Node) -> str:
        body = f'<div class="ref">{self._node(node)}</div>'
        if self._assets.claim():
            return ASSET_MARKUP + body
        return body

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _node(self, node: Node) -> str:
        match node.kind:
            case NodeKind.NULL:
                return self._entity("null", "None")
            case NodeKind.BOOL | NodeKind.INT | NodeKind.FLOAT | NodeKind.STRING:
                return self._entity(node.kind, node.rendered_value, node.display_type)
            case NodeKind.RESOURCE:
                return self._entity("resource", node.rendered_value, "resource")
            case NodeKind.COMPOSITE:
                return self._composite(node)
            case NodeKind.OBJECT:
                return self._object(node)
            case NodeKind.RECURSION:
                name = self._classes(node.classes) if node.classes else node.rendered_value
                return self._entity("recursion", f"{name} <b>*RECURSION*</b>")
            case _ as unreachable:
                assert_never(unreachable)

    def _composite(self, node: Node) -> str:
        label = self._entity("array", node.rendered_value, node.display_type)
        if node.truncated:
            return f"{label}(<b>...</b>)"
        if not node.children:
            return f"{label}()"
        rows = "".join(self._element(edge) for edge in node.children)
        return (
            f"{label}(<b>{len(node.children)}</b>"
            f"{self._toggle(node)}<div>{rows}</div>)"
        )

    def _object(self, node: Node) -> str:
        label = self._classes(node.classes) if node.classes else node.rendered_value
        head = self._entity("object", label)
        if node.truncated:
            return f"{head} <b>...</b>"
        if not node.children:
            return head
        sections: list[str] = []
        for kind, heading in _SECTIONS.items():
            rows = "".join(
                self._member(edge) for edge in node.children if edge.edge_kind is kind
            )
            if rows:
                sections.append(f"<h4>{heading}</h4>{rows}")
        return f"{head}{self._toggle(node)}<div>{''.join(sections)}</div>"

    def _classes(self, classes: tuple[ClassDescriptor, ...]) -> str:
        parts = [
            self._badges(descriptor.modifiers)
            + self._entity("class", self.escape(descriptor.name), descriptor.tooltip)
            for descriptor in classes
        ]
        return " :: ".join(parts)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def _element(self, edge: NodeEdge) -> str:
        key = self._node(edge.key) if edge.key is not None else edge.label
        value = self._node(edge.child) if edge.child is not None else ""
        return f"<dl><dt>{key} =&gt;</dt><dd>{value}</dd></dl>"

    def _member(self, edge: NodeEdge) -> str:
        badges = self._badges(edge.modifiers)
        arrow = "::" if Modifier.STATIC in edge.modifiers else "-&gt;"
        match edge.edge_kind:
            case EdgeKind.INTERFACE | EdgeKind.TRAIT:
                return f"<dl><dt>{badges}{self._entity('class', edge.label, edge.tooltip)}</dt></dl>"
            case EdgeKind.CONSTANT:
                value = self._node(edge.child) if edge.child is not None else ""
                return (
                    f"<dl><dt>::</dt><dt>{self._entity('const', edge.label, edge.tooltip)}"
                    f" =</dt><dd>{value}</dd></dl>"
                )
            case EdgeKind.PROPERTY:
                value = (
                    self._node(edge.child)
                    if edge.child is not None
                    else self._entity("null", "(not evaluated)")
                )
                return (
                    f"<dl><dt>{arrow}</dt><dt>{badges}</dt>"
                    f"<dt>{self._entity('prop', edge.label, edge.tooltip)} =</dt>"
                    f"<dd>{value}</dd></dl>"
                )
            case EdgeKind.METHOD:
                return self._method(edge, badges, arrow)
            case EdgeKind.ARRAY_ELEMENT:
                return self._element(edge)
            case _ as unreachable:
                assert_never(unreachable)

    def _method(self, edge: NodeEdge, badges: str, arrow: str) -> str:
        name = edge.label.partition("(")[0]
        css = "methodInherited" if Modifier.INHERITED in edge.modifiers else "method"
        tooltip = f"{edge.tooltip}\n\n{edge.origin}".strip() if edge.origin else edge.tooltip
        params = ", ".join(self._parameter(param) for param in edge.parameters)
        return (
            f"<dl><dt>{arrow}</dt><dt>{badges}</dt>"
            f"<dd>{self._entity(css, name, tooltip)}({params})</dd></dl>"
        )

    def _parameter(self, param: ParameterEdge) -> str:
        if not param.optional:
            return self._entity("param", param.label, param.tooltip)
        entity = self._entity("paramOpt", param.label, param.tooltip)
        if param.default is None:
            return entity
        return f"{entity} = {self._node(param.default)}"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _badges(self, modifiers: tuple[Modifier, ...]) -> str:
        return "".join(
            self._entity("mod", _BADGES[modifier], MODIFIER_TIPS[modifier])
            for modifier in modifiers
        )

    def _entity(self, css: str, text: str, tooltip: str = "") -> str:
        """Wrap ``text`` (already escaped) in a span; ``tooltip`` is escaped here."""
        css_class = "r" + css[:1].upper() + css[1:]
        if not tooltip:
            return f'<span class="{css_class}">{text}</span>'
        return (
            f'<span class="{css_class} rHasTip">{text}'
            f"<code>{html.escape(tooltip)}</code></span>"
        )

    @staticmethod
    def _toggle(node: Node) -> str:
        state = "exp" if node.expanded_by_default else "col"
        return f'<a class="rToggle {state}"></a>'
