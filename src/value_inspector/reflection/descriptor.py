"""ClassDescriptorBuilder: reflective report of an object's class and members.

This is the wiring layer between a Reflector and the docstring parser.  For
one object it produces an ``ObjectReport``:

- the ancestor chain as ClassDescriptors, oldest ancestor first, each with
  its modifier badges and documentation tooltip;
- interfaces and mixins ("traits") of the runtime class;
- constants (name -> value);
- properties with their current values, read under scoped access
  elevation.  A property that cannot be read is skipped and logged; the rest
  of the report is unaffected;
- methods with parameters annotated from the method's own ``param`` tags.

Visibility filters (protected, inherited, dunder) come from
``InspectorConfig``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from value_inspector.config import InspectorConfig
from value_inspector.docs.cache import DocCommentCache
from value_inspector.errors import MemberAccessError
from value_inspector.reflection.protocols import (
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    Visibility,
)
from value_inspector.reflection.python import PythonReflector
from value_inspector.tree.nodes import ClassDescriptor, Modifier, chain_name

if TYPE_CHECKING:
    from value_inspector.docs.parser import DocComment
    from value_inspector.reflection.protocols import Reflector

__all__ = [
    "ClassDescriptorBuilder",
    "MethodReport",
    "ObjectReport",
    "ParameterReport",
    "PropertyReport",
]

logger = logging.getLogger(__name__)


class _Parser(Protocol):
    def parse(self, raw: str | None) -> DocComment: ...


@dataclass(frozen=True, slots=True)
class PropertyReport:
    """A property together with the value read for it.

    ``has_value`` is False for computed properties left unevaluated.
    """

    info: PropertyInfo
    modifiers: tuple[Modifier, ...] = ()
    tooltip: str = ""
    value: Any = None
    has_value: bool = True


@dataclass(frozen=True, slots=True)
class ParameterReport:
    info: ParameterInfo
    tooltip: str = ""


@dataclass(frozen=True, slots=True)
class MethodReport:
    info: MethodInfo
    parameters: tuple[ParameterReport, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    tooltip: str = ""
    origin: str = ""


@dataclass(frozen=True, slots=True)
class ObjectReport:
    """Everything reflection reveals about one object.

    Attributes:
        classes:    Ancestor chain, oldest ancestor first, runtime class last.
        interfaces: Interface classes as descriptors (no parent links).
        traits:     Mixin classes as descriptors (no parent links).
        constants:  Constant name -> value, own class first.
        properties: Readable properties with their values.
        methods:    Listed methods, most-derived first.
    """

    classes: tuple[ClassDescriptor, ...]
    interfaces: tuple[ClassDescriptor, ...] = ()
    traits: tuple[ClassDescriptor, ...] = ()
    constants: dict[str, Any] = field(default_factory=dict)
    properties: tuple[PropertyReport, ...] = ()
    methods: tuple[MethodReport, ...] = ()

    @property
    def display_name(self) -> str:
        return chain_name(self.classes)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing but the class chain to show."""
        return not (self.interfaces or self.constants or self.properties or self.methods)


class ClassDescriptorBuilder:
    """Builds ObjectReports through an injected Reflector.

    Example::

        from value_inspector.reflection.descriptor import ClassDescriptorBuilder

        builder = ClassDescriptorBuilder()
        report = builder.describe(some_object)
        print(report.display_name)            # "Base :: Child"
        for method in report.methods:
            print(method.info.name, method.modifiers)
    """

    def __init__(
        self,
        reflector: Reflector | None = None,
        parser: _Parser | None = None,
        config: InspectorConfig | None = None,
    ) -> None:
        """Initialise the builder.

        Args:
            reflector: Reflection capability.  Defaults to ``PythonReflector()``.
            parser:    Anything with ``parse(raw) -> DocComment``.  Defaults to
                a ``DocCommentCache`` sized by ``config.doc_cache_size``.
            config:    Member filters.  Defaults to ``InspectorConfig()``.
        """
        self._config = config if config is not None else InspectorConfig()
        self._reflector: Reflector = reflector if reflector is not None else PythonReflector()
        self._parser: _Parser = (
            parser if parser is not None else DocCommentCache(max_size=self._config.doc_cache_size)
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def class_chain(self, obj: Any) -> tuple[ClassDescriptor, ...]:
        """Return the ancestor chain of ``obj``'s class, oldest ancestor first."""
        walk: list[type] = []
        current: type | None = self._reflector.class_of(obj)
        while current is not None:
            walk.append(current)
            current = self._reflector.parent_of(current)

        chain: list[ClassDescriptor] = []
        parent: ClassDescriptor | None = None
        for cls in reversed(walk):
            parent = self._class_descriptor(cls, parent=parent)
            chain.append(parent)
        return tuple(chain)

    def describe(
        self, obj: Any, classes: tuple[ClassDescriptor, ...] | None = None
    ) -> ObjectReport:
        """Reflect ``obj`` into an ObjectReport.

        Args:
            obj:     The object to describe.
            classes: A chain already computed by ``class_chain(obj)``; computed
                here when omitted.
        """
        cls = self._reflector.class_of(obj)
        return ObjectReport(
            classes=classes if classes is not None else self.class_chain(obj),
            interfaces=tuple(
                self._class_descriptor(klass) for klass in self._reflector.interfaces_of(cls)
            ),
            traits=tuple(
                self._class_descriptor(klass) for klass in self._reflector.traits_of(cls)
            ),
            constants=self._reflector.constants_of(cls),
            properties=tuple(self._properties(obj)),
            methods=tuple(self._methods(obj, cls)),
        )

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _properties(self, obj: Any) -> list[PropertyReport]:
        reports: list[PropertyReport] = []
        for prop in self._reflector.properties_of(obj):
            if not self._config.show_protected and prop.visibility is Visibility.PROTECTED:
                continue

            modifiers: list[Modifier] = []
            if prop.is_static:
                modifiers.append(Modifier.STATIC)
            if prop.visibility is Visibility.PROTECTED:
                modifiers.append(Modifier.PROTECTED)
            tooltip = self._parser.parse(prop.doc).summary

            if prop.is_computed and not self._config.evaluate_properties:
                reports.append(
                    PropertyReport(prop, tuple(modifiers), tooltip, has_value=False)
                )
                continue

            try:
                with self._reflector.access(obj, prop):
                    value = self._reflector.read_property(obj, prop)
            except MemberAccessError as exc:
                logger.debug("Skipping property %r: %s", prop.name, exc)
                continue
            reports.append(PropertyReport(prop, tuple(modifiers), tooltip, value))
        return reports

    def _methods(self, obj: Any, cls: type) -> list[MethodReport]:
        reports: list[MethodReport] = []
        for method in self._reflector.methods_of(obj):
            if not self._is_listed(method, cls):
                continue

            doc = self._parser.parse(self._reflector.doc_of(method.target))
            parameters = tuple(
                ParameterReport(param, self._param_tip(doc, param.name))
                for param in method.parameters
            )

            inherited = method.declaring_class is not cls
            modifiers: list[Modifier] = []
            if method.is_abstract:
                modifiers.append(Modifier.ABSTRACT)
            if method.is_final:
                modifiers.append(Modifier.FINAL)
            if method.is_static:
                modifiers.append(Modifier.STATIC)
            if method.visibility is Visibility.PROTECTED:
                modifiers.append(Modifier.PROTECTED)
            if inherited:
                modifiers.append(Modifier.INHERITED)

            provenance = self._reflector.provenance_of(method.target)
            reports.append(
                MethodReport(
                    info=method,
                    parameters=parameters,
                    modifiers=tuple(modifiers),
                    tooltip=provenance if provenance is not None else doc.summary,
                    origin=f"Inherited from {method.declaring_class.__name__}" if inherited else "",
                )
            )
        return reports

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _is_listed(self, method: MethodInfo, cls: type) -> bool:
        name = method.name
        if name.startswith("__") and name.endswith("__") and name != "__init__":
            if not self._config.show_dunder_methods:
                return False
        if not self._config.show_protected and method.visibility is Visibility.PROTECTED:
            return False
        return self._config.show_inherited or method.declaring_class is cls

    def _class_descriptor(
        self, cls: type, parent: ClassDescriptor | None = None
    ) -> ClassDescriptor:
        provenance = self._reflector.provenance_of(cls)
        tooltip = (
            provenance
            if provenance is not None
            else self._parser.parse(self._reflector.doc_of(cls)).summary
        )
        return ClassDescriptor(
            name=cls.__name__,
            qualname=f"{cls.__module__}.{cls.__qualname__}",
            modifiers=tuple(self._reflector.class_modifiers(cls)),
            tooltip=tooltip,
            parent=parent,
        )

    @staticmethod
    def _param_tip(doc: DocComment, name: str) -> str:
        tag = doc.param(name)
        return tag.description if tag is not None else ""
