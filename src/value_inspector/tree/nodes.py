"""Node, NodeEdge and the StrEnum variants that make up an inspection tree.

A ``Node`` describes one inspected value (or key, or recursion marker).
Composite and object nodes own an ordered list of ``NodeEdge`` links, one
per container entry or object member, each pointing at a nested ``Node``.
The tree is built fresh by ``ValueInspector.inspect`` and handed to a
renderer; nothing in it is shared between top-level calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto


class NodeKind(StrEnum):
    """What an inspected value was classified as.

    StrEnum values are the lowercased member names:
    - NULL       -> "null"       : ``None``
    - BOOL       -> "bool"       : ``bool`` / ``numpy.bool_``
    - INT        -> "int"        : integers, including numpy integers
    - FLOAT      -> "float"      : floats and complex numbers
    - STRING     -> "string"     : ``str``, ``bytes``, ``bytearray``
    - RESOURCE   -> "resource"   : streams, sockets, memory maps, selectors
    - COMPOSITE  -> "composite"  : mappings, sequences, sets, ndarrays
    - OBJECT     -> "object"     : everything else
    - RECURSION  -> "recursion"  : a value already open on the current path
    """

    NULL = auto()
    BOOL = auto()
    INT = auto()
    FLOAT = auto()
    STRING = auto()
    RESOURCE = auto()
    COMPOSITE = auto()
    OBJECT = auto()
    RECURSION = auto()


class EdgeKind(StrEnum):
    """Which section of a composite or object node an edge belongs to."""

    ARRAY_ELEMENT = auto()
    PROPERTY = auto()
    METHOD = auto()
    CONSTANT = auto()
    INTERFACE = auto()
    TRAIT = auto()


class Modifier(StrEnum):
    """Badges attached to classes, members and edges."""

    ABSTRACT = auto()
    FINAL = auto()
    STATIC = auto()
    PROTECTED = auto()
    CLONEABLE = auto()
    ITERABLE = auto()
    INHERITED = auto()


MODIFIER_TIPS: dict[Modifier, str] = {
    Modifier.ABSTRACT: "This is abstract",
    Modifier.FINAL: "This is final and cannot be overridden",
    Modifier.STATIC: "This member belongs to the class, not the instance",
    Modifier.PROTECTED: "This member is protected",
    Modifier.CLONEABLE: "Instances of this class can be copied",
    Modifier.ITERABLE: "Instances of this class are iterable",
    Modifier.INHERITED: "This member is inherited from a parent class",
}


@dataclass(frozen=True, slots=True)
class ClassDescriptor:
    """One class in the ancestor chain of an inspected object.

    Attributes:
        name:      Short class name (``__name__``).
        qualname:  Module-qualified name, e.g. ``"collections.OrderedDict"``.
        modifiers: Class badges in fixed order (abstract, final, cloneable,
                   iterable).
        tooltip:   Class docstring summary, or built-in provenance text.
        parent:    Descriptor of the parent class; ``None`` for the oldest
                   ancestor in the chain.
    """

    name: str
    qualname: str
    modifiers: tuple[Modifier, ...] = ()
    tooltip: str = ""
    parent: ClassDescriptor | None = None


def chain_name(classes: tuple[ClassDescriptor, ...]) -> str:
    """Join a class chain into its display name, e.g. ``"Base :: Child"``."""
    return " :: ".join(descriptor.name for descriptor in classes)


@dataclass(slots=True)
class Node:
    """A node in the inspection tree.

    Attributes:
        kind:                How the value was classified (see NodeKind).
        display_type:        Type label, e.g. ``"str (12)"`` or ``"list (3)"``.
        rendered_value:      Textual form of the value, already escaped with
                             the configured escape function.
        tooltip:             Optional documentation text.
        children:            Ordered member edges; empty for scalar kinds.
                             Must use field(default_factory=list) so every
                             instance gets its own list.
        expanded_by_default: True only on the root of a top-level call.
        truncated:           True for a composite or object whose members were
                             not walked (depth limit, nested module, or a
                             property getter already open on the path).
        classes:             Ancestor chain (oldest first) for OBJECT nodes and
                             for RECURSION nodes that stand in for an object.
    """

    kind: NodeKind
    display_type: str
    rendered_value: str
    tooltip: str = ""
    children: list[NodeEdge] = field(default_factory=list)
    expanded_by_default: bool = False
    classes: tuple[ClassDescriptor, ...] = ()
    truncated: bool = False

    def walk(self) -> list[Node]:
        """Return this node and every node below it, depth first.

        Key nodes and parameter default nodes are included.
        """
        found: list[Node] = [self]
        for edge in self.children:
            if edge.key is not None:
                found.extend(edge.key.walk())
            for param in edge.parameters:
                if param.default is not None:
                    found.extend(param.default.walk())
            if edge.child is not None:
                found.extend(edge.child.walk())
        return found


@dataclass(frozen=True, slots=True)
class ParameterEdge:
    """One parameter in a method signature.

    Attributes:
        name:     Parameter name.
        label:    Name as displayed; variadics carry ``*`` / ``**``.
        optional: True when a default is declared or the parameter is variadic.
        tooltip:  Description from the method's matching ``param`` tag.
        default:  Node for the declared default; None when none is declared.
    """

    name: str
    label: str
    optional: bool = False
    tooltip: str = ""
    default: Node | None = None


@dataclass(slots=True)
class NodeEdge:
    """A labelled link from a composite/object node to one of its members.

    Attributes:
        label:      Rendered key (containers) or declaration signature (members).
        edge_kind:  Section the member belongs to (see EdgeKind).
        modifiers:  Ordered badges without duplicates.
        child:      Nested value node. None for interface and trait edges, for
                    methods, and for computed properties left unevaluated.
        key:        Key node for ARRAY_ELEMENT edges.
        tooltip:    Documentation of the declaration.
        origin:     Provenance note, e.g. ``"Inherited from Base"``.
        parameters: Signature parameters, METHOD edges only.
    """

    label: str
    edge_kind: EdgeKind
    modifiers: tuple[Modifier, ...] = ()
    child: Node | None = None
    key: Node | None = None
    tooltip: str = ""
    origin: str = ""
    parameters: tuple[ParameterEdge, ...] = ()
