"""PythonReflector: the Reflector implementation over Python's object model.

Maps the host-neutral reflection vocabulary onto Python:
- the parent relation is the first entry of ``__bases__``; ``object``,
  ``abc.ABC``, ``typing.Generic`` and ``typing.Protocol`` end the chain
- interfaces are abstract classes and Protocols in the MRO outside the parent
  chain; every other class there is a mixin ("trait")
- visibility follows naming conventions: ``_name`` is protected and
  name-mangled ``__name`` is private (never listed)
- constants are UPPER_CASE class attributes holding plain values
- properties are instance attributes (``__dict__`` then ``__slots__``),
  ``property`` descriptors, and plain class attributes (static)

This reflector satisfies the Reflector Protocol structurally, without
inheriting from it.
"""

from __future__ import annotations

import abc
import functools
import inspect
import re
import typing
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from value_inspector.errors import MemberAccessError
from value_inspector.reflection.protocols import (
    MethodInfo,
    ParameterInfo,
    ParameterKind,
    PropertyInfo,
    Visibility,
)
from value_inspector.tree.nodes import Modifier

# Classes that terminate the parent chain and are never listed as mixins
_ROOTS: tuple[type, ...] = (object, abc.ABC, typing.Generic, typing.Protocol)  # type: ignore[arg-type]

# Modules whose class-level attributes are implementation detail
_OPAQUE_MODULES = frozenset(
    {"builtins", "abc", "enum", "typing", "numbers", "collections.abc", "_collections_abc"}
)

# Bookkeeping attributes planted on user classes by abc and typing
_INTERNAL_ATTRIBUTES = frozenset({"_abc_impl", "_is_protocol", "_is_runtime_protocol"})

# UPPER_CASE names are constants
_CONSTANT_NAME = re.compile(r"^[A-Z][A-Z0-9_]*$")

_PARAMETER_KINDS = {
    inspect.Parameter.POSITIONAL_ONLY: ParameterKind.POSITIONAL,
    inspect.Parameter.POSITIONAL_OR_KEYWORD: ParameterKind.POSITIONAL,
    inspect.Parameter.KEYWORD_ONLY: ParameterKind.KEYWORD,
    inspect.Parameter.VAR_POSITIONAL: ParameterKind.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD: ParameterKind.VAR_KEYWORD,
}


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _is_sunder(name: str) -> bool:
    return (
        len(name) > 2
        and name.startswith("_")
        and name.endswith("_")
        and not name.startswith("__")
    )


def _visibility(name: str, mro: Iterable[type]) -> Visibility:
    """Classify ``name`` by naming convention, recognising mangled privates."""
    if _is_dunder(name):
        return Visibility.PUBLIC
    if name.startswith("__"):
        return Visibility.PRIVATE
    for klass in mro:
        if name.startswith(f"_{klass.__name__.lstrip('_')}__"):
            return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def _is_plain_value(attr: Any) -> bool:
    """True for class attributes that hold data rather than behaviour."""
    if isinstance(attr, type) or inspect.isroutine(attr):
        return False
    if isinstance(attr, (staticmethod, classmethod)):
        return False
    # Descriptors (slots, properties, cached properties) are not plain data
    return not hasattr(type(attr), "__get__")


def _slots_of(klass: type) -> tuple[str, ...]:
    slots = vars(klass).get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


def _unwrap(attr: Any) -> Any:
    """Return the function behind a method-like class attribute, else None."""
    if isinstance(attr, (staticmethod, classmethod)):
        return attr.__func__
    if inspect.isroutine(attr):
        return attr
    return None


class PythonReflector:
    """Reflection over live Python objects.

    Scoped access elevation: reading a protected member inside ``access()``
    bypasses the class's own attribute hooks (``__getattr__`` /
    ``__getattribute__`` overrides) and reads the slot, instance dict or
    descriptor directly.  The elevation is released when the ``with`` block
    exits, whether or not the read succeeded.

    Example::

        from value_inspector.reflection import PythonReflector

        reflector = PythonReflector()
        for prop in reflector.properties_of(obj):
            with reflector.access(obj, prop):
                value = reflector.read_property(obj, prop)
    """

    def __init__(self) -> None:
        self._elevated: set[tuple[int, str]] = set()

    # ------------------------------------------------------------------
    # Class structure
    # ------------------------------------------------------------------

    def class_of(self, obj: Any) -> type:
        return type(obj)

    def parent_of(self, cls: type) -> type | None:
        """Return the primary base of ``cls``; None at the root of the chain."""
        if not cls.__bases__:
            return None
        parent = cls.__bases__[0]
        return None if parent in _ROOTS else parent

    def interfaces_of(self, cls: type) -> list[type]:
        chain = self._chain(cls)
        return [
            klass
            for klass in cls.__mro__
            if klass not in chain and klass not in _ROOTS and self._is_interface(klass)
        ]

    def traits_of(self, cls: type) -> list[type]:
        chain = self._chain(cls)
        return [
            klass
            for klass in cls.__mro__
            if klass not in chain and klass not in _ROOTS and not self._is_interface(klass)
        ]

    def class_modifiers(self, cls: type) -> list[Modifier]:
        """Return the class badges in fixed order: abstract, final, cloneable, iterable."""
        modifiers: list[Modifier] = []
        if inspect.isabstract(cls):
            modifiers.append(Modifier.ABSTRACT)
        if vars(cls).get("__final__", False):
            modifiers.append(Modifier.FINAL)
        if any(
            "__copy__" in vars(klass) or "__deepcopy__" in vars(klass)
            for klass in cls.__mro__
            if klass is not object
        ):
            modifiers.append(Modifier.CLONEABLE)
        if issubclass(cls, Iterable):
            modifiers.append(Modifier.ITERABLE)
        return modifiers

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def constants_of(self, cls: type) -> dict[str, Any]:
        """Return UPPER_CASE class attributes holding plain values, own class first.

        Values that are instances of ``cls`` itself (enum members) are left
        out: they describe the class, not the inspected instance.
        """
        constants: dict[str, Any] = {}
        for owner in cls.__mro__:
            if owner in _ROOTS:
                continue
            for name, value in vars(owner).items():
                if name in constants or not _CONSTANT_NAME.match(name):
                    continue
                if not _is_plain_value(value) or isinstance(value, cls):
                    continue
                constants[name] = value
        return constants

    def properties_of(self, obj: Any) -> list[PropertyInfo]:
        cls = type(obj)
        mro = cls.__mro__
        found: dict[str, PropertyInfo] = {}

        try:
            instance_dict = object.__getattribute__(obj, "__dict__")
        except AttributeError:
            instance_dict = {}

        for name in list(instance_dict):
            if not isinstance(name, str) or _is_dunder(name) or _is_sunder(name):
                continue
            visibility = _visibility(name, mro)
            if visibility is not Visibility.PRIVATE:
                found[name] = PropertyInfo(name, cls, visibility)

        for owner in mro:
            for name in _slots_of(owner):
                if name in found or _is_dunder(name):
                    continue
                visibility = _visibility(name, mro)
                if visibility is not Visibility.PRIVATE:
                    found[name] = PropertyInfo(name, owner, visibility)

        for owner in mro:
            if owner in _ROOTS or owner.__module__ in _OPAQUE_MODULES:
                continue
            for name, attr in vars(owner).items():
                if name in found or _is_dunder(name) or _is_sunder(name):
                    continue
                if _CONSTANT_NAME.match(name) or name in _INTERNAL_ATTRIBUTES:
                    continue
                visibility = _visibility(name, mro)
                if visibility is Visibility.PRIVATE:
                    continue
                if isinstance(attr, (property, functools.cached_property)):
                    doc = attr.__doc__ if isinstance(attr.__doc__, str) else ""
                    found[name] = PropertyInfo(
                        name, owner, visibility, is_computed=True, doc=doc
                    )
                elif _is_plain_value(attr):
                    found[name] = PropertyInfo(name, owner, visibility, is_static=True)

        return list(found.values())

    def methods_of(self, obj: Any) -> list[MethodInfo]:
        """Return methods most-derived first; a name is listed once, where it is defined last."""
        cls = type(obj)
        seen: set[str] = set()
        methods: list[MethodInfo] = []

        for owner in cls.__mro__:
            if owner is object:
                continue
            for name, attr in vars(owner).items():
                if name in seen:
                    continue
                seen.add(name)
                func = _unwrap(attr)
                if func is None:
                    continue
                visibility = _visibility(name, cls.__mro__)
                if visibility is Visibility.PRIVATE:
                    continue
                methods.append(
                    MethodInfo(
                        name=name,
                        declaring_class=owner,
                        visibility=visibility,
                        parameters=self._parameters(obj, attr),
                        is_static=isinstance(attr, (staticmethod, classmethod)),
                        is_abstract=bool(getattr(attr, "__isabstractmethod__", False)),
                        is_final=bool(getattr(func, "__final__", False)),
                        target=func,
                    )
                )
        return methods

    # ------------------------------------------------------------------
    # Reading values
    # ------------------------------------------------------------------

    @contextmanager
    def access(self, obj: Any, prop: PropertyInfo) -> Iterator[None]:
        """Elevate access to a non-public ``prop`` of ``obj`` for one ``with`` block."""
        if prop.visibility is Visibility.PUBLIC:
            yield
            return
        key = (id(obj), prop.name)
        self._elevated.add(key)
        try:
            yield
        finally:
            self._elevated.discard(key)

    def is_elevated(self, obj: Any, prop: PropertyInfo) -> bool:
        return (id(obj), prop.name) in self._elevated

    def read_property(self, obj: Any, prop: PropertyInfo) -> Any:
        """Return the current value of ``prop``.

        Raises:
            MemberAccessError: When the read raises for any reason (unset
                slot, failing property getter, refusing attribute hook).
        """
        target: Any = type(obj) if prop.is_static else obj
        try:
            if not self.is_elevated(obj, prop):
                return getattr(target, prop.name)
            if prop.is_static:
                return type.__getattribute__(target, prop.name)
            return object.__getattribute__(target, prop.name)
        except Exception as exc:
            msg = f"cannot read {prop.name!r} of {type(obj).__qualname__}: {exc}"
            raise MemberAccessError(prop.name, msg) from exc

    # ------------------------------------------------------------------
    # Documentation
    # ------------------------------------------------------------------

    def doc_of(self, target: Any) -> str:
        doc = getattr(target, "__doc__", None)
        return doc if isinstance(doc, str) else ""

    def provenance_of(self, target: Any) -> str | None:
        """Return ``"Built-in - part of <module>"`` for built-in declarations, else None."""
        if isinstance(target, type):
            if target.__module__ == "builtins":
                return "Built-in - part of builtins"
            return None
        if inspect.isfunction(target) or inspect.ismethod(target):
            return None
        if inspect.isroutine(target):
            owner = getattr(target, "__objclass__", None)
            module = getattr(target, "__module__", None) or getattr(owner, "__module__", None)
            return f"Built-in - part of {module or 'builtins'}"
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _chain(self, cls: type) -> set[type]:
        chain: set[type] = set()
        current: type | None = cls
        while current is not None:
            chain.add(current)
            current = self.parent_of(current)
        return chain

    @staticmethod
    def _is_interface(klass: type) -> bool:
        return inspect.isabstract(klass) or bool(vars(klass).get("_is_protocol", False))

    @staticmethod
    def _parameters(obj: Any, attr: Any) -> tuple[ParameterInfo, ...]:
        """Read the signature of ``attr`` bound to ``obj``; empty when unavailable."""
        try:
            binder = getattr(attr, "__get__", None)
            bound = binder(obj, type(obj)) if binder is not None else attr
            signature = inspect.signature(bound)
        except (AttributeError, TypeError, ValueError):
            return ()
        return tuple(
            ParameterInfo(
                name=param.name,
                kind=_PARAMETER_KINDS[param.kind],
                has_default=param.default is not param.empty,
                default=None if param.default is param.empty else param.default,
            )
            for param in signature.parameters.values()
        )
