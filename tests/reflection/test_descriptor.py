"""Tests for ClassDescriptorBuilder.

Covers:
- Ancestor chain oldest first with parent links and tooltips
- Interfaces, traits and constants of the runtime class
- Property values, static/protected badges, visibility filters
- Computed properties are listed unevaluated unless evaluation is enabled
- Unreadable properties are skipped and logged; the rest of the report survives
- Scoped access elevation is released even when the read fails
- Methods: inherited badge and origin, param tooltips matched by name,
  dunder and inherited filters, built-in provenance tooltips
- A custom Reflector can be injected without inheriting from anything
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from value_inspector.config import InspectorConfig
from value_inspector.errors import MemberAccessError
from value_inspector.reflection.descriptor import ClassDescriptorBuilder, ObjectReport
from value_inspector.reflection.protocols import PropertyInfo, Visibility
from value_inspector.reflection.python import PythonReflector
from value_inspector.tree.nodes import Modifier

_EVALUATING = InspectorConfig(evaluate_properties=True)

# ---------------------------------------------------------------------------
# Sample classes
# ---------------------------------------------------------------------------


class Animal:
    """An animal.

    Lives somewhere.
    """

    LEGS = 4

    def __init__(self, name: str) -> None:
        self.name = name
        self._mood = "calm"

    def speak(self, loud: bool = False) -> str:
        """Make a sound.

        @param bool $loud Shout instead of talking
        """
        return "..."

    def _rest(self) -> None: ...


class Dog(Animal):
    """A dog."""

    species = "canis"

    def fetch(self, item: str, times: int = 1) -> str:
        """Fetch something.

        Args:
            item: What to fetch.
            times: How often.
        """
        return item * times

    @property
    def loud_name(self) -> str:
        """Name in capitals."""
        return self.name.upper()


class Fragile:
    def __init__(self) -> None:
        self.ok = 1

    @property
    def broken(self) -> int:
        raise RuntimeError("cannot compute")

    @property
    def _secret(self) -> int:
        raise RuntimeError("locked")


class MyDict(dict):  # type: ignore[type-arg]
    pass


class RecordingReflector(PythonReflector):
    """PythonReflector that records the elevation state around every read."""

    def __init__(self) -> None:
        super().__init__()
        self.during: list[tuple[str, bool]] = []

    def read_property(self, obj: Any, prop: PropertyInfo) -> Any:
        self.during.append((prop.name, self.is_elevated(obj, prop)))
        return super().read_property(obj, prop)


# ---------------------------------------------------------------------------
# Fixtures and helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def builder() -> ClassDescriptorBuilder:
    return ClassDescriptorBuilder(config=_EVALUATING)


@pytest.fixture
def dog_report(builder: ClassDescriptorBuilder) -> ObjectReport:
    return builder.describe(Dog("rex"))


def _property(report: ObjectReport, name: str) -> Any:
    return next(p for p in report.properties if p.info.name == name)


def _method(report: ObjectReport, name: str) -> Any:
    return next(m for m in report.methods if m.info.name == name)


# ---------------------------------------------------------------------------
# Class chain
# ---------------------------------------------------------------------------


class TestClassChain:
    def test_oldest_first(self, builder: ClassDescriptorBuilder) -> None:
        chain = builder.class_chain(Dog("rex"))
        assert [c.name for c in chain] == ["Animal", "Dog"]

    def test_parent_links(self, builder: ClassDescriptorBuilder) -> None:
        animal, dog = builder.class_chain(Dog("rex"))
        assert dog.parent is animal
        assert animal.parent is None

    def test_tooltip_from_docstring(self, builder: ClassDescriptorBuilder) -> None:
        animal, dog = builder.class_chain(Dog("rex"))
        assert animal.tooltip == "An animal.\n\nLives somewhere."
        assert dog.tooltip == "A dog."

    def test_qualname(self, builder: ClassDescriptorBuilder) -> None:
        (_, dog) = builder.class_chain(Dog("rex"))
        assert dog.qualname == f"{__name__}.Dog"

    def test_builtin_parent_provenance(self, builder: ClassDescriptorBuilder) -> None:
        base, mine = builder.class_chain(MyDict())
        assert base.name == "dict"
        assert base.tooltip == "Built-in - part of builtins"
        assert mine.name == "MyDict"

    def test_display_name(self, dog_report: ObjectReport) -> None:
        assert dog_report.display_name == "Animal :: Dog"


# ---------------------------------------------------------------------------
# Constants and properties
# ---------------------------------------------------------------------------


class TestConstants:
    def test_inherited_constant(self, dog_report: ObjectReport) -> None:
        assert dog_report.constants == {"LEGS": 4}


class TestProperties:
    def test_instance_value(self, dog_report: ObjectReport) -> None:
        assert _property(dog_report, "name").value == "rex"

    def test_protected_badge(self, dog_report: ObjectReport) -> None:
        mood = _property(dog_report, "_mood")
        assert mood.modifiers == (Modifier.PROTECTED,)
        assert mood.value == "calm"

    def test_static_badge(self, dog_report: ObjectReport) -> None:
        species = _property(dog_report, "species")
        assert species.modifiers == (Modifier.STATIC,)
        assert species.value == "canis"

    def test_computed_value_and_tooltip(self, dog_report: ObjectReport) -> None:
        loud = _property(dog_report, "loud_name")
        assert loud.value == "REX"
        assert loud.tooltip == "Name in capitals."

    def test_hide_protected(self) -> None:
        builder = ClassDescriptorBuilder(config=InspectorConfig(show_protected=False))
        report = builder.describe(Dog("rex"))
        assert "_mood" not in {p.info.name for p in report.properties}
        assert "_rest" not in {m.info.name for m in report.methods}

    def test_computed_property_unevaluated_by_default(self) -> None:
        loud = _property(ClassDescriptorBuilder().describe(Dog("rex")), "loud_name")
        assert loud.has_value is False
        assert loud.value is None


class TestInaccessibleProperties:
    def test_failing_property_skipped(self, builder: ClassDescriptorBuilder) -> None:
        report = builder.describe(Fragile())
        names = [p.info.name for p in report.properties]
        assert names == ["ok"]

    def test_failure_is_logged(
        self, builder: ClassDescriptorBuilder, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="value_inspector.reflection.descriptor"):
            builder.describe(Fragile())
        assert "broken" in caplog.text
        assert "_secret" in caplog.text

    def test_elevation_released_after_failed_read(self) -> None:
        reflector = RecordingReflector()
        obj = Fragile()
        ClassDescriptorBuilder(reflector=reflector, config=_EVALUATING).describe(obj)

        assert ("_secret", True) in reflector.during
        secret = PropertyInfo("_secret", Fragile, Visibility.PROTECTED, is_computed=True)
        assert not reflector.is_elevated(obj, secret)

    def test_public_read_not_elevated(self) -> None:
        reflector = RecordingReflector()
        ClassDescriptorBuilder(reflector=reflector, config=_EVALUATING).describe(Fragile())
        assert ("ok", False) in reflector.during


# ---------------------------------------------------------------------------
# Methods
# ---------------------------------------------------------------------------


class TestMethods:
    def test_inherited_badge_and_origin(self, dog_report: ObjectReport) -> None:
        speak = _method(dog_report, "speak")
        assert Modifier.INHERITED in speak.modifiers
        assert speak.origin == "Inherited from Animal"

    def test_own_method_not_inherited(self, dog_report: ObjectReport) -> None:
        fetch = _method(dog_report, "fetch")
        assert Modifier.INHERITED not in fetch.modifiers
        assert fetch.origin == ""

    def test_method_tooltip(self, dog_report: ObjectReport) -> None:
        assert _method(dog_report, "speak").tooltip == "Make a sound."

    def test_param_tooltip_from_tag(self, dog_report: ObjectReport) -> None:
        (loud,) = _method(dog_report, "speak").parameters
        assert loud.tooltip == "Shout instead of talking"

    def test_param_tooltips_matched_by_name(self, dog_report: ObjectReport) -> None:
        tips = {p.info.name: p.tooltip for p in _method(dog_report, "fetch").parameters}
        assert tips == {"item": "What to fetch.", "times": "How often."}

    def test_undocumented_param_has_empty_tooltip(self, dog_report: ObjectReport) -> None:
        (name,) = _method(dog_report, "__init__").parameters
        assert name.tooltip == ""

    def test_protected_method_badge(self, dog_report: ObjectReport) -> None:
        rest = _method(dog_report, "_rest")
        assert rest.modifiers == (Modifier.PROTECTED, Modifier.INHERITED)

    def test_dunders_hidden_except_init(self) -> None:
        report = ClassDescriptorBuilder().describe(MyDict())
        names = {m.info.name for m in report.methods}
        assert "__getitem__" not in names
        assert "keys" in names

    def test_dunders_shown_when_configured(self) -> None:
        builder = ClassDescriptorBuilder(config=InspectorConfig(show_dunder_methods=True))
        names = {m.info.name for m in builder.describe(MyDict()).methods}
        assert "__getitem__" in names

    def test_hide_inherited(self) -> None:
        builder = ClassDescriptorBuilder(config=InspectorConfig(show_inherited=False))
        names = [m.info.name for m in builder.describe(Dog("rex")).methods]
        assert names == ["fetch"]

    def test_builtin_method_provenance(self) -> None:
        keys = _method(ClassDescriptorBuilder().describe(MyDict()), "keys")
        assert keys.tooltip == "Built-in - part of builtins"
        assert keys.origin == "Inherited from dict"


# ---------------------------------------------------------------------------
# Injected reflector
# ---------------------------------------------------------------------------


class _DenyAllReflector(PythonReflector):
    def read_property(self, obj: Any, prop: PropertyInfo) -> Any:
        raise MemberAccessError(prop.name, "denied")


class TestInjectedReflector:
    def test_all_reads_denied_leaves_empty_properties(self) -> None:
        builder = ClassDescriptorBuilder(reflector=_DenyAllReflector(), config=_EVALUATING)
        report = builder.describe(Dog("rex"))
        assert report.properties == ()
        assert report.methods

    def test_is_empty(self) -> None:
        class Bare:
            pass

        assert ClassDescriptorBuilder().describe(Bare()).is_empty
