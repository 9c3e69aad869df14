"""Inspection tree: node types and the ValueInspector that builds them."""

from value_inspector.tree.nodes import (
    MODIFIER_TIPS,
    ClassDescriptor,
    EdgeKind,
    Modifier,
    Node,
    NodeEdge,
    NodeKind,
    ParameterEdge,
)

__all__ = [
    "MODIFIER_TIPS",
    "ClassDescriptor",
    "EdgeKind",
    "Modifier",
    "Node",
    "NodeEdge",
    "NodeKind",
    "ParameterEdge",
]
