"""Reflector Protocol and the member records it produces.

The descriptor builder never touches the object model directly; it asks an
injected ``Reflector`` to enumerate classes and members, read member values
and fetch documentation.  Any class with conformant methods passes
``isinstance`` checks, so tests can substitute a recording or failing
reflector without inheriting from anything.

Example::

    from value_inspector.reflection import PythonReflector, Reflector

    assert isinstance(PythonReflector(), Reflector)  # structural conformance
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from value_inspector.tree.nodes import Modifier


class Visibility(StrEnum):
    """Member visibility derived from naming conventions.

    - PUBLIC    -> "public"    : ``name``
    - PROTECTED -> "protected" : ``_name``
    - PRIVATE   -> "private"   : name-mangled ``__name`` (``_Owner__name``)
    """

    PUBLIC = auto()
    PROTECTED = auto()
    PRIVATE = auto()


class ParameterKind(StrEnum):
    """How an argument is passed to a parameter."""

    POSITIONAL = auto()
    KEYWORD = auto()
    VAR_POSITIONAL = auto()
    VAR_KEYWORD = auto()


@dataclass(frozen=True, slots=True)
class PropertyInfo:
    """A readable data member of an object or its class.

    Attributes:
        name:            Attribute name.
        declaring_class: Class that declares the member (runtime class for
                         instance attributes).
        visibility:      PUBLIC or PROTECTED; private members are never listed.
        is_static:       True for class-level attributes.
        is_computed:     True for ``property`` descriptors.
        doc:             Raw documentation of the member, if any.
    """

    name: str
    declaring_class: type
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_computed: bool = False
    doc: str = ""


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    name: str
    kind: ParameterKind = ParameterKind.POSITIONAL
    has_default: bool = False
    default: Any = None

    @property
    def is_variadic(self) -> bool:
        return self.kind in (ParameterKind.VAR_POSITIONAL, ParameterKind.VAR_KEYWORD)

    @property
    def optional(self) -> bool:
        return self.has_default or self.is_variadic


@dataclass(frozen=True, slots=True)
class MethodInfo:
    """A callable member of an object's class.

    Attributes:
        name:            Method name.
        declaring_class: Class whose namespace defines the method.
        visibility:      PUBLIC or PROTECTED.
        parameters:      Signature parameters with the bound ``self``/``cls``
                         removed; empty when the signature is unavailable.
        is_static:       True for ``staticmethod`` and ``classmethod``.
        is_abstract:     True for ``abc.abstractmethod`` members.
        is_final:        True for ``typing.final`` members.
        target:          The underlying function object, used for docs and
                         provenance lookups.
    """

    name: str
    declaring_class: type
    visibility: Visibility = Visibility.PUBLIC
    parameters: tuple[ParameterInfo, ...] = ()
    is_static: bool = False
    is_abstract: bool = False
    is_final: bool = False
    target: Any = None


@runtime_checkable
class Reflector(Protocol):
    """Structural protocol for the host's reflection capability.

    A conforming reflector must:
    - walk the class/parent relation (``class_of``, ``parent_of``);
    - enumerate interfaces, mixins, constants, properties and methods, in
      declaration order, listing public and protected members only;
    - read a property's value (``read_property``), raising
      ``MemberAccessError`` when it cannot, and offer scoped access elevation
      through the ``access`` context manager, which must restore access on
      every exit path;
    - return raw documentation (``doc_of``) and built-in provenance text
      (``provenance_of``, None for user-defined declarations).
    """

    def class_of(self, obj: Any) -> type: ...

    def parent_of(self, cls: type) -> type | None: ...

    def interfaces_of(self, cls: type) -> list[type]: ...

    def traits_of(self, cls: type) -> list[type]: ...

    def class_modifiers(self, cls: type) -> list[Modifier]: ...

    def constants_of(self, cls: type) -> dict[str, Any]: ...

    def properties_of(self, obj: Any) -> list[PropertyInfo]: ...

    def methods_of(self, obj: Any) -> list[MethodInfo]: ...

    def access(self, obj: Any, prop: PropertyInfo) -> AbstractContextManager[None]: ...

    def read_property(self, obj: Any, prop: PropertyInfo) -> Any: ...

    def doc_of(self, target: Any) -> str: ...

    def provenance_of(self, target: Any) -> str | None: ...
