"""ValueInspector: converts any Python value into a Node tree.

Uses recursive dispatch to classify a value and walk containers and object
graphs.  Classification order is significant and mutually exclusive:

    None -> bool -> resource -> int/float -> str/bytes -> container -> object

Cycle detection follows path-stack semantics: the identity (``id()``) of
every container or object is pushed when descending into it and popped on
the way out.  A value is rendered as RECURSION only when it is already open
on the current descent path; the same value reached again through an
unrelated branch is rendered in full.

Three more bounds keep the walk finite when values are produced on the fly
rather than reached by reference:

- containers and objects deeper than ``config.max_depth`` are truncated;
- an evaluated property getter already open on the path (``Path.parent``
  of ``Path.parent``) yields a truncated value;
- modules below the root are truncated.
"""

from __future__ import annotations

import io
import logging
import mmap
import selectors
import socket
import types
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from value_inspector.config import InspectorConfig
from value_inspector.reflection.descriptor import ClassDescriptorBuilder, ObjectReport
from value_inspector.reflection.protocols import ParameterKind
from value_inspector.tree.nodes import (
    EdgeKind,
    Node,
    NodeEdge,
    NodeKind,
    ParameterEdge,
    chain_name,
)

if TYPE_CHECKING:
    from value_inspector.reflection.descriptor import MethodReport, PropertyReport
    from value_inspector.reflection.protocols import Reflector

__all__ = ["ValueInspector"]

logger = logging.getLogger(__name__)

_RESOURCE_TYPES = (io.IOBase, socket.socket, mmap.mmap, selectors.BaseSelector)
_STRING_TYPES = (str, bytes, bytearray)
_SEQUENCE_TYPES = (list, tuple, deque, set, frozenset)

_VARIADIC_PREFIX = {ParameterKind.VAR_POSITIONAL: "*", ParameterKind.VAR_KEYWORD: "**"}


@dataclass(slots=True)
class _DescentPath:
    """What is open on the current descent path.

    Attributes:
        values:  ``id()`` of every container and object being walked.
        getters: (declaring class, name) of every evaluated property whose
                 value is being walked.
    """

    values: set[int] = field(default_factory=set)
    getters: set[tuple[type, str]] = field(default_factory=set)

    @property
    def depth(self) -> int:
        return len(self.values)


class ValueInspector:
    """Converts any Python value into a typed Node tree.

    The dispatch order is critical: bool MUST be checked before int because
    bool is a subclass of int in Python (isinstance(True, int) is True), and
    resources before strings because some stream types are also iterable.

    State: the inspector itself only holds configuration, the descriptor
    builder and its docstring cache.  The descent path used for cycle
    detection is created per ``inspect`` call and passed down the recursion,
    so a single inspector can be reused for many values.

    Example::

        inspector = ValueInspector()
        node = inspector.inspect({"user": "Ada"})
        # node: COMPOSITE "dict (1)" -> ARRAY_ELEMENT(key "str (4)") -> STRING
    """

    def __init__(
        self,
        config: InspectorConfig | None = None,
        reflector: Reflector | None = None,
        builder: ClassDescriptorBuilder | None = None,
    ) -> None:
        """Initialise the inspector.

        Args:
            config:    Inspection knobs.  Defaults to ``InspectorConfig()``.
            reflector: Reflection capability for objects.  Defaults to
                ``PythonReflector()``.  Ignored when ``builder`` is given.
            builder:   A preconfigured descriptor builder.
        """
        self._config = config if config is not None else InspectorConfig()
        self._builder = (
            builder
            if builder is not None
            else ClassDescriptorBuilder(reflector=reflector, config=self._config)
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def inspect(self, value: Any) -> Node:
        """Convert ``value`` into a Node tree whose root alone is expanded.

        Args:
            value: Any Python value.

        Returns:
            The root Node.  Never raises for a supported value; unreadable
            members are left out of the tree and values nested deeper than
            ``max_depth`` are truncated.
        """
        root = self._inspect(value, _DescentPath())
        root.expanded_by_default = True
        return root

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _inspect(self, value: Any, path: _DescentPath, expand: bool = True) -> Node:
        if value is None:
            return Node(NodeKind.NULL, "None", "None")

        # bool MUST be checked before int: bool subclasses int
        if isinstance(value, (bool, np.bool_)):
            return Node(NodeKind.BOOL, type(value).__name__, str(bool(value)))

        if isinstance(value, _RESOURCE_TYPES):
            return Node(NodeKind.RESOURCE, "resource", self._escape(_resource_label(value)))

        if isinstance(value, (int, np.integer)):
            return Node(NodeKind.INT, type(value).__name__, self._escape(repr(int(value))))

        if isinstance(value, (float, complex, np.floating, np.complexfloating)):
            return Node(NodeKind.FLOAT, type(value).__name__, self._escape(str(value)))

        if isinstance(value, _STRING_TYPES):
            return self._string(value)

        if isinstance(value, np.ndarray) and value.ndim == 0:
            return self._inspect(value[()], path, expand)

        if isinstance(value, (Mapping, np.ndarray, *_SEQUENCE_TYPES)):
            return self._composite(value, path, expand)

        if isinstance(value, types.ModuleType) and path.depth > 0:
            expand = False
        return self._object(value, path, expand)

    def _string(self, value: str | bytes | bytearray) -> Node:
        text = value if isinstance(value, str) else repr(bytes(value))[2:-1]
        limit = self._config.max_string_length
        if limit is not None and len(text) > limit:
            text = text[:limit] + "..."
        return Node(
            NodeKind.STRING,
            f"{type(value).__name__} ({len(value)})",
            self._escape(text),
        )

    def _walks_into(self, path: _DescentPath, expand: bool) -> bool:
        return expand and path.depth < self._config.max_depth

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def _composite(self, value: Any, path: _DescentPath, expand: bool) -> Node:
        """Build a COMPOSITE node with one ARRAY_ELEMENT edge per entry."""
        type_name = type(value).__name__
        size = len(value)
        display_type = (
            f"{type_name} {value.shape} {value.dtype}"
            if isinstance(value, np.ndarray)
            else f"{type_name} ({size})"
        )

        if size == 0:
            return Node(NodeKind.COMPOSITE, display_type, self._escape(type_name))

        identity = id(value)
        if identity in path.values:
            return Node(NodeKind.RECURSION, type_name, self._escape(type_name))

        if not self._walks_into(path, expand):
            return Node(
                NodeKind.COMPOSITE, display_type, self._escape(type_name), truncated=True
            )

        path.values.add(identity)
        try:
            node = Node(NodeKind.COMPOSITE, display_type, self._escape(type_name))
            for key, item in _entries(value):
                key_node = self._key(key)
                node.children.append(
                    NodeEdge(
                        label=key_node.rendered_value,
                        edge_kind=EdgeKind.ARRAY_ELEMENT,
                        child=self._inspect(item, path),
                        key=key_node,
                    )
                )
            return node
        finally:
            path.values.discard(identity)

    def _key(self, key: Any) -> Node:
        """Build a key node: type label (with length for strings) and text."""
        if key is None or isinstance(key, (bool, int, float, complex, *_STRING_TYPES)):
            return self._inspect(key, _DescentPath())
        kind = NodeKind.COMPOSITE if isinstance(key, (tuple, frozenset)) else NodeKind.OBJECT
        return Node(kind, type(key).__name__, self._escape(_safe_repr(key)))

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _object(self, value: Any, path: _DescentPath, expand: bool) -> Node:
        classes = self._builder.class_chain(value)
        display_name = self._escape(chain_name(classes))

        identity = id(value)
        if identity in path.values:
            return Node(NodeKind.RECURSION, "object", display_name, classes=classes)

        if not self._walks_into(path, expand):
            return Node(
                NodeKind.OBJECT,
                "object",
                display_name,
                tooltip=classes[-1].tooltip,
                classes=classes,
                truncated=True,
            )

        path.values.add(identity)
        try:
            report = self._builder.describe(value, classes=classes)
            node = Node(
                NodeKind.OBJECT,
                "object",
                display_name,
                tooltip=classes[-1].tooltip,
                classes=classes,
            )
            if not report.is_empty:
                node.children.extend(self._object_edges(report, path))
            return node
        finally:
            path.values.discard(identity)

    def _object_edges(self, report: ObjectReport, path: _DescentPath) -> list[NodeEdge]:
        """One edge per interface, constant, trait, property and method, in that order."""
        edges: list[NodeEdge] = [
            NodeEdge(
                label=self._escape(descriptor.name),
                edge_kind=EdgeKind.INTERFACE,
                modifiers=descriptor.modifiers,
                tooltip=descriptor.tooltip,
            )
            for descriptor in report.interfaces
        ]

        for name, constant in report.constants.items():
            edges.append(
                NodeEdge(
                    label=self._escape(name),
                    edge_kind=EdgeKind.CONSTANT,
                    child=self._inspect(constant, path),
                )
            )

        edges.extend(
            NodeEdge(
                label=self._escape(descriptor.name),
                edge_kind=EdgeKind.TRAIT,
                modifiers=descriptor.modifiers,
                tooltip=descriptor.tooltip,
            )
            for descriptor in report.traits
        )

        for prop in report.properties:
            edges.append(
                NodeEdge(
                    label=self._escape(prop.info.name),
                    edge_kind=EdgeKind.PROPERTY,
                    modifiers=prop.modifiers,
                    child=self._property_value(prop, path),
                    tooltip=prop.tooltip,
                )
            )

        edges.extend(self._method_edge(method, path) for method in report.methods)
        return edges

    def _property_value(self, prop: PropertyReport, path: _DescentPath) -> Node | None:
        """Value node of a property; None when it was left unevaluated.

        A getter may build a fresh object on every call, so identity alone
        cannot stop ``succ.succ.succ...``: a getter already open on the path
        yields a truncated value instead.
        """
        if not prop.has_value:
            return None
        if not prop.info.is_computed:
            return self._inspect(prop.value, path)

        getter = (prop.info.declaring_class, prop.info.name)
        if getter in path.getters:
            return self._inspect(prop.value, path, expand=False)
        path.getters.add(getter)
        try:
            return self._inspect(prop.value, path)
        finally:
            path.getters.discard(getter)

    def _method_edge(self, method: MethodReport, path: _DescentPath) -> NodeEdge:
        parameters: list[ParameterEdge] = []
        signature: list[str] = []
        for param in method.parameters:
            info = param.info
            label = self._escape(_VARIADIC_PREFIX.get(info.kind, "") + info.name)
            signature.append(
                f"{label}={self._escape(_safe_repr(info.default))}" if info.has_default else label
            )
            parameters.append(
                ParameterEdge(
                    name=info.name,
                    label=label,
                    optional=info.optional,
                    tooltip=param.tooltip,
                    default=self._inspect(info.default, path) if info.has_default else None,
                )
            )
        return NodeEdge(
            label=f"{self._escape(method.info.name)}({', '.join(signature)})",
            edge_kind=EdgeKind.METHOD,
            modifiers=method.modifiers,
            tooltip=method.tooltip,
            origin=method.origin,
            parameters=tuple(parameters),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _escape(self, text: str) -> str:
        return self._config.escape(text)


def _safe_repr(value: Any) -> str:
    """``repr(value)``, or ``"<TypeName object>"`` when ``__repr__`` raises."""
    try:
        return repr(value)
    except Exception as exc:
        logger.debug("repr() of %s failed: %s", type(value).__qualname__, exc)
        return f"<{type(value).__name__} object>"


def _entries(value: Any) -> list[tuple[Any, Any]]:
    """Return (key, item) pairs in iteration order.

    Mappings yield their keys, named tuples their field names, everything
    else its position.
    """
    if isinstance(value, Mapping):
        return list(value.items())
    fields = getattr(type(value), "_fields", None)
    if isinstance(value, tuple) and isinstance(fields, tuple):
        return list(zip(fields, value, strict=False))
    return list(enumerate(value))


def _resource_label(value: Any) -> str:
    """Describe a resource as ``"<category>: <detail>"``.

    A resource whose state cannot be read (a detached buffer, a socket torn
    down underneath us) gets the detail ``"[unavailable]"``.
    """
    if isinstance(value, io.IOBase):
        category = "stream"
    elif isinstance(value, socket.socket):
        category = "socket"
    elif isinstance(value, mmap.mmap):
        category = "mmap"
    else:
        return f"selector: {type(value).__name__}"

    try:
        detail = _resource_detail(value)
    except (OSError, ValueError) as exc:
        logger.debug("Cannot describe %s resource: %s", category, exc)
        detail = "[unavailable]"
    return f"{category}: {detail}"


def _resource_detail(value: Any) -> str:
    if isinstance(value, io.IOBase):
        name = getattr(value, "name", None)
        detail = str(name) if name is not None else type(value).__name__
        mode = getattr(value, "mode", None)
        if mode:
            detail += f" ({mode})"
        if value.closed:
            detail += " [closed]"
        return detail
    if isinstance(value, socket.socket):
        fileno = value.fileno()
        return f"fd {fileno}" if fileno >= 0 else "[closed]"
    return "[closed]" if value.closed else f"{len(value)} bytes"
