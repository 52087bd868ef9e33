"""Adapter contracts: pluggable conversions for types and parameter slots."""

from __future__ import annotations

import abc
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, TypeAlias

from strict_json.errors import JsonFormatError
from strict_json.path import JsonPath
from strict_json.types import TypeDescriptor, json_type_name

if TYPE_CHECKING:
    from strict_json.engine import StrictJson

AdapterFunction: TypeAlias = Callable[[object, "StrictJson", JsonPath], object]


class Adapter(abc.ABC):
    """Converts one decoded JSON value into the value an adapter is registered for.

    The engine checks the decoded value against ``from_types()`` before calling
    ``from_json``, so implementations only see values of a declared kind.
    Data problems must be reported as ``JsonFormatError``; any other exception
    is treated as a configuration problem by the engine.
    """

    @abc.abstractmethod
    def from_types(self) -> Sequence[TypeDescriptor]:
        """Decoded JSON kinds this adapter accepts. Must not be empty."""

    @abc.abstractmethod
    def from_json(self, decoded: object, delegate: StrictJson, path: JsonPath) -> object:
        """Convert ``decoded``; use ``delegate`` and ``path`` to recurse into children."""


class ArrayAdapter(Adapter):
    """Maps a JSON array onto a list whose items all have ``element_type``."""

    def __init__(self, element_type: TypeDescriptor | type | str) -> None:
        self.element_type = TypeDescriptor.coerce(element_type)

    def from_types(self) -> Sequence[TypeDescriptor]:
        return (TypeDescriptor.array(),)

    def from_json(self, decoded: object, delegate: StrictJson, path: JsonPath) -> list[object]:
        if not isinstance(decoded, (list, tuple)):
            raise JsonFormatError(f"Expected array, found {json_type_name(decoded)}", path)
        return [
            delegate.map_decoded(item, self.element_type, path.with_array_index(index))
            for index, item in enumerate(decoded)
        ]

    def __repr__(self) -> str:
        return f"ArrayAdapter({self.element_type})"


class CallableAdapter(Adapter):
    """Adapter backed by a plain function ``(decoded, delegate, path) -> value``."""

    def __init__(self, function: AdapterFunction, *types: TypeDescriptor) -> None:
        if not callable(function):
            raise TypeError("adapter function must be callable")
        self.function = function
        self.types = tuple(types)

    def from_types(self) -> Sequence[TypeDescriptor]:
        return self.types

    def from_json(self, decoded: object, delegate: StrictJson, path: JsonPath) -> object:
        return self.function(decoded, delegate, path)

    def __repr__(self) -> str:
        name = getattr(self.function, "__qualname__", repr(self.function))
        return f"CallableAdapter({name})"


__all__ = ["Adapter", "AdapterFunction", "ArrayAdapter", "CallableAdapter"]
