"""Fluent configuration surface producing configured ``StrictJson`` engines."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import Any

from strict_json.adapters import Adapter, ArrayAdapter
from strict_json.engine import JsonLoader, StrictJson, TargetType
from strict_json.parameters import ParameterSpec, TypeSchema
from strict_json.types import TypeDescriptor


class StrictJsonBuilder:
    """Accumulates adapter and schema registrations.

    ``build()`` copies the accumulated state, so engines already built are
    not affected by later registrations on the same builder.
    """

    def __init__(self) -> None:
        self._type_adapters: dict[Hashable, Adapter] = {}
        self._parameter_adapters: dict[type, dict[str, Adapter]] = {}
        self._schemas: dict[type, TypeSchema] = {}
        self._loads: JsonLoader | None = None
        self._logger: Any | None = None

    def add_class_adapter(self, class_name: type | str, adapter: Adapter) -> StrictJsonBuilder:
        return self.add_type_adapter(TypeDescriptor.of_class(class_name), adapter)

    def add_type_adapter(self, type_: TypeDescriptor, adapter: Adapter) -> StrictJsonBuilder:
        _require_adapter(adapter)
        if not isinstance(type_, TypeDescriptor):
            raise TypeError("type adapters must be registered for a TypeDescriptor")
        self._type_adapters[type_.identifier] = adapter
        return self

    def add_parameter_adapter(
        self,
        class_name: type | str,
        parameter_name: str,
        adapter: Adapter,
    ) -> StrictJsonBuilder:
        _require_adapter(adapter)
        owner = _owner(class_name)
        if not isinstance(parameter_name, str) or not parameter_name:
            raise ValueError("parameter_name must be a non-empty string")
        self._parameter_adapters.setdefault(owner, {})[parameter_name] = adapter
        return self

    def add_array_parameter_adapter(
        self,
        class_name: type | str,
        parameter_name: str,
        array_item_type: TargetType,
    ) -> StrictJsonBuilder:
        return self.add_parameter_adapter(
            class_name, parameter_name, ArrayAdapter(TypeDescriptor.coerce(array_item_type))
        )

    def add_schema(
        self,
        class_name: type | str,
        parameters: Iterable[ParameterSpec],
        *,
        factory: Callable[..., object] | None = None,
    ) -> StrictJsonBuilder:
        self._schemas[_owner(class_name)] = TypeSchema.of(parameters, factory=factory)
        return self

    def with_json_loader(self, loads: JsonLoader) -> StrictJsonBuilder:
        if not callable(loads):
            raise TypeError("loads must be callable")
        self._loads = loads
        return self

    def with_logger(self, logger: Any) -> StrictJsonBuilder:
        self._logger = logger
        return self

    def build(self) -> StrictJson:
        return StrictJson(
            type_adapters=dict(self._type_adapters),
            parameter_adapters={
                owner: dict(by_name) for owner, by_name in self._parameter_adapters.items()
            },
            schemas=dict(self._schemas),
            loads=self._loads,
            logger=self._logger,
        )


def _owner(class_name: type | str) -> type:
    descriptor = TypeDescriptor.of_class(class_name)
    assert descriptor.target is not None
    return descriptor.target


def _require_adapter(adapter: object) -> None:
    if not isinstance(adapter, Adapter):
        raise TypeError(f"expected an Adapter instance, got {type(adapter).__name__}")


__all__ = ["StrictJsonBuilder"]
