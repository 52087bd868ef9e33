"""Type descriptors: the engine's description of an expected JSON shape."""

from __future__ import annotations

import importlib
import inspect
import types
import typing
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Final

from strict_json.constants import (
    ARRAY_TYPE_NAME,
    NULL_TYPE_NAME,
    OBJECT_TYPE_NAME,
)
from strict_json.errors import ConfigurationError
from strict_json.path import JsonPath


class TypeKind(StrEnum):
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    ARRAY = ARRAY_TYPE_NAME
    OBJECT = OBJECT_TYPE_NAME
    CLASS = "class"


SCALAR_KINDS: Final[frozenset[TypeKind]] = frozenset(
    {TypeKind.INT, TypeKind.FLOAT, TypeKind.BOOL, TypeKind.STRING}
)

_SCALAR_ANNOTATIONS: Final[tuple[tuple[type, TypeKind], ...]] = (
    (bool, TypeKind.BOOL),
    (int, TypeKind.INT),
    (float, TypeKind.FLOAT),
    (str, TypeKind.STRING),
)
_ARRAY_ANNOTATIONS: Final[tuple[object, ...]] = (list, tuple, Sequence)
_UNION_ORIGINS: Final[tuple[object, ...]] = (typing.Union, types.UnionType)
_NON_MAPPABLE_MODULES: Final[frozenset[str]] = frozenset(
    {"builtins", "typing", "typing_extensions"}
)


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Expected shape of a decoded JSON value.

    ``target`` is only set for ``TypeKind.CLASS`` and holds the class that
    values of this type are constructed as. Scalar checks are strict: a
    ``bool`` never satisfies ``int`` and an ``int`` never satisfies ``float``.
    """

    kind: TypeKind
    target: type | None = None
    nullable: bool = False

    def __post_init__(self) -> None:
        if (self.kind is TypeKind.CLASS) != (self.target is not None):
            raise ValueError("target must be set for class kind and only for class kind")

    @classmethod
    def int(cls) -> TypeDescriptor:
        return cls(TypeKind.INT)

    @classmethod
    def float(cls) -> TypeDescriptor:
        return cls(TypeKind.FLOAT)

    @classmethod
    def bool(cls) -> TypeDescriptor:
        return cls(TypeKind.BOOL)

    @classmethod
    def string(cls) -> TypeDescriptor:
        return cls(TypeKind.STRING)

    @classmethod
    def array(cls) -> TypeDescriptor:
        return cls(TypeKind.ARRAY)

    @classmethod
    def object(cls) -> TypeDescriptor:
        return cls(TypeKind.OBJECT)

    @classmethod
    def of_class(cls, identifier: type | str) -> TypeDescriptor:
        """Describe a class given the class itself or its dotted import path."""

        target = resolve_class(identifier)
        if target is None:
            name = identifier if isinstance(identifier, str) else _annotation_name(identifier)
            raise ConfigurationError(f'Type "{name}" is not a valid class', JsonPath.root())
        return cls(TypeKind.CLASS, target)

    @classmethod
    def coerce(cls, target: TypeDescriptor | type | str) -> TypeDescriptor:
        if isinstance(target, TypeDescriptor):
            return target
        return cls.of_class(target)

    @classmethod
    def from_parameter(
        cls,
        owner: type,
        parameter: inspect.Parameter,
        annotation: object,
        path: JsonPath,
    ) -> TypeDescriptor:
        """Resolve the descriptor for one constructor parameter.

        ``annotation`` is the evaluated type hint, or ``inspect.Parameter.empty``
        when the parameter is not annotated.
        """

        if annotation is inspect.Parameter.empty:
            raise ConfigurationError(
                f"{qualified_name(owner)}.__init__ has parameter named "
                f"{parameter.name} with no specified type",
                path,
            )
        return cls._from_annotation(annotation, path)

    @classmethod
    def _from_annotation(cls, annotation: object, path: JsonPath) -> TypeDescriptor:
        origin = typing.get_origin(annotation)
        if origin in _UNION_ORIGINS:
            members = typing.get_args(annotation)
            non_null = [member for member in members if member is not type(None)]
            if len(non_null) == 1 and len(non_null) < len(members):
                return cls._from_annotation(non_null[0], path).as_nullable()
            raise ConfigurationError(f"Unsupported type {_annotation_name(annotation)}", path)

        for scalar_type, kind in _SCALAR_ANNOTATIONS:
            if annotation is scalar_type:
                return cls(kind)

        if annotation in _ARRAY_ANNOTATIONS or origin in _ARRAY_ANNOTATIONS:
            return cls.array()

        if is_mappable_class(annotation):
            return cls(TypeKind.CLASS, typing.cast("type", annotation))

        raise ConfigurationError(f"Unsupported type {_annotation_name(annotation)}", path)

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS

    @property
    def is_array(self) -> bool:
        return self.kind is TypeKind.ARRAY

    @property
    def is_object(self) -> bool:
        return self.kind is TypeKind.OBJECT

    @property
    def is_class(self) -> bool:
        return self.kind is TypeKind.CLASS

    @property
    def identifier(self) -> type | str:
        """Registration key for type-level adapters; ignores nullability."""

        if self.target is not None:
            return self.target
        return self.kind.value

    def as_nullable(self) -> TypeDescriptor:
        return replace(self, nullable=True)

    def allows_value(self, value: object) -> bool:
        if value is None:
            return self.nullable
        kind = self.kind
        if kind is TypeKind.INT:
            return isinstance(value, int) and not isinstance(value, bool)
        if kind is TypeKind.FLOAT:
            return isinstance(value, float)
        if kind is TypeKind.BOOL:
            return isinstance(value, bool)
        if kind is TypeKind.STRING:
            return isinstance(value, str)
        if kind is TypeKind.ARRAY:
            return isinstance(value, (list, tuple))
        if kind is TypeKind.OBJECT:
            return isinstance(value, Mapping)
        return type(value) is self.target

    def __str__(self) -> str:
        name = qualified_name(self.target) if self.target is not None else self.kind.value
        return f"?{name}" if self.nullable else name


def qualified_name(target: type) -> str:
    module = getattr(target, "__module__", None)
    qualname = getattr(target, "__qualname__", None) or getattr(target, "__name__", repr(target))
    if not module or module == "builtins":
        return qualname
    return f"{module}.{qualname}"


def json_type_name(value: object) -> str:
    """Name the JSON kind of a decoded value for error messages."""

    if value is None:
        return NULL_TYPE_NAME
    if isinstance(value, bool):
        return TypeKind.BOOL.value
    if isinstance(value, int):
        return TypeKind.INT.value
    if isinstance(value, float):
        return TypeKind.FLOAT.value
    if isinstance(value, str):
        return TypeKind.STRING.value
    if isinstance(value, (list, tuple)):
        return ARRAY_TYPE_NAME
    if isinstance(value, Mapping):
        return OBJECT_TYPE_NAME
    return qualified_name(type(value))


def is_mappable_class(candidate: object) -> bool:
    """True for user-level classes; builtins and typing special forms are excluded."""

    if not inspect.isclass(candidate):
        return False
    if candidate.__module__ in _NON_MAPPABLE_MODULES:
        return False
    return typing.get_origin(candidate) is None


def resolve_class(identifier: object) -> type | None:
    if isinstance(identifier, str):
        candidate = _import_dotted(identifier)
    else:
        candidate = identifier
    if not is_mappable_class(candidate):
        return None
    return typing.cast("type", candidate)


def _import_dotted(dotted: str) -> object | None:
    parts = dotted.strip().split(".")
    if len(parts) < 2 or not all(parts):
        return None
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            resolved: object = importlib.import_module(module_name)
        except ImportError:
            continue
        try:
            for attribute in parts[split:]:
                resolved = getattr(resolved, attribute)
        except AttributeError:
            return None
        return resolved
    return None


def _annotation_name(annotation: object) -> str:
    if inspect.isclass(annotation) and typing.get_origin(annotation) is None:
        return qualified_name(annotation)
    return str(annotation).replace("typing.", "")


__all__ = [
    "SCALAR_KINDS",
    "TypeDescriptor",
    "TypeKind",
    "is_mappable_class",
    "json_type_name",
    "qualified_name",
    "resolve_class",
]
