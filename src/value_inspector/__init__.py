"""Value inspector - structured, documented dumps of arbitrary Python values."""

from __future__ import annotations

import logging

from value_inspector.api import describe, inspect, inspect_all, r
from value_inspector.config import InspectorConfig
from value_inspector.docs.parser import CommentParser, DocComment
from value_inspector.errors import InspectorError, MemberAccessError
from value_inspector.reflection.protocols import Reflector
from value_inspector.reflection.python import PythonReflector
from value_inspector.render import AssetState, HtmlRenderer, Renderer, TextRenderer
from value_inspector.result import DumpResult
from value_inspector.tree.inspector import ValueInspector
from value_inspector.tree.nodes import EdgeKind, Modifier, Node, NodeEdge, NodeKind

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "AssetState",
    "CommentParser",
    "DocComment",
    "DumpResult",
    "EdgeKind",
    "HtmlRenderer",
    "InspectorConfig",
    "InspectorError",
    "MemberAccessError",
    "Modifier",
    "Node",
    "NodeEdge",
    "NodeKind",
    "PythonReflector",
    "Reflector",
    "Renderer",
    "TextRenderer",
    "ValueInspector",
    "describe",
    "inspect",
    "inspect_all",
    "r",
]
