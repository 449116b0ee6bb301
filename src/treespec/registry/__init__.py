"""Type registry: classifies values and holds custom container registrations."""

from treespec.registry.standard import register_standard_types
from treespec.registry.type_registry import (
    FormatterFn,
    FromChildrenFn,
    Registration,
    ToChildrenFn,
    TypeRegistry,
    default_registry,
)

__all__ = [
    "Registration",
    "TypeRegistry",
    "default_registry",
    "register_standard_types",
    "ToChildrenFn",
    "FromChildrenFn",
    "FormatterFn",
]
