"""Reflection layer: the Reflector protocol, its Python implementation and
the descriptor builder that turns reflected members into reports."""

from value_inspector.reflection.descriptor import (
    ClassDescriptorBuilder,
    MethodReport,
    ObjectReport,
    ParameterReport,
    PropertyReport,
)
from value_inspector.reflection.protocols import (
    MethodInfo,
    ParameterInfo,
    ParameterKind,
    PropertyInfo,
    Reflector,
    Visibility,
)
from value_inspector.reflection.python import PythonReflector

__all__ = [
    "ClassDescriptorBuilder",
    "MethodInfo",
    "MethodReport",
    "ObjectReport",
    "ParameterInfo",
    "ParameterKind",
    "ParameterReport",
    "PropertyInfo",
    "PropertyReport",
    "PythonReflector",
    "Reflector",
    "Visibility",
]
