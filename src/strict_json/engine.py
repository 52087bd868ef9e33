"""
Strict JSON mapping engine.

Decoded JSON is walked depth-first, guided by the requested type descriptor:
type-level adapters take precedence, scalars are checked strictly, classes
are constructed from their introspected (or explicitly registered)
constructor parameters, and arrays are only mapped through adapters.

Errors are split by cause. ``JsonFormatError`` means the input does not have
the requested shape; ``ConfigurationError`` means the mapping setup is
broken. Both carry the JSON path at which the problem was detected.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Hashable, Mapping
from typing import TYPE_CHECKING, Any, TypeAlias

import structlog

from strict_json.adapters import Adapter, ArrayAdapter
from strict_json.constants import LOG_ADAPTER_FAILED, LOG_CONSTRUCTION_FAILED
from strict_json.errors import ConfigurationError, JsonFormatError
from strict_json.parameters import ParameterAdapters, ParameterCache, TypeSchema
from strict_json.path import JsonPath
from strict_json.types import TypeDescriptor, json_type_name, qualified_name

if TYPE_CHECKING:
    from strict_json.builder import StrictJsonBuilder

JsonLoader: TypeAlias = Callable[[str | bytes], Any]
TargetType: TypeAlias = TypeDescriptor | type | str


def _reject_constant(token: str) -> object:
    raise ValueError(f"{token} is not valid JSON")


def strict_loads(text: str | bytes) -> Any:
    """Decode JSON text, rejecting the ``NaN``/``Infinity`` extensions."""

    return json.loads(text, parse_constant=_reject_constant)


class StrictJson:
    """Maps JSON text or decoded JSON trees onto typed objects.

    Instances are immutable after construction apart from the parameter
    metadata cache, and can be shared between threads.
    """

    def __init__(
        self,
        type_adapters: Mapping[Hashable, Adapter] | None = None,
        parameter_adapters: ParameterAdapters | None = None,
        schemas: Mapping[type, TypeSchema] | None = None,
        *,
        loads: JsonLoader | None = None,
        logger: Any | None = None,
    ) -> None:
        self._type_adapters: dict[Hashable, Adapter] = dict(type_adapters or {})
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._parameters = ParameterCache(parameter_adapters, schemas, logger=self._logger)
        self._loads: JsonLoader = loads if loads is not None else strict_loads

    @staticmethod
    def builder() -> StrictJsonBuilder:
        from strict_json.builder import StrictJsonBuilder

        return StrictJsonBuilder()

    @property
    def parameter_cache(self) -> ParameterCache:
        return self._parameters

    def map(self, json_text: str | bytes, target_type: TargetType) -> Any:
        """Decode ``json_text`` and map it onto ``target_type``."""

        target = TypeDescriptor.coerce(target_type)
        return self.map_decoded(self._safe_decode(json_text), target, JsonPath.root())

    def map_to_array_of(self, json_text: str | bytes, element_type: TargetType) -> list[Any]:
        """Decode a JSON array and map every item onto ``element_type``."""

        adapter = ArrayAdapter(TypeDescriptor.coerce(element_type))
        return self.map_with_adapter(self._safe_decode(json_text), adapter, JsonPath.root())

    def map_decoded(self, value: object, target_type: TypeDescriptor, path: JsonPath) -> Any:
        """Map an already decoded JSON value; also the recursion entry point for adapters."""

        adapter = self._type_adapters.get(target_type.identifier)
        if adapter is not None:
            return self.map_with_adapter(value, adapter, path)

        if value is None and target_type.nullable:
            return None

        if target_type.is_scalar:
            return self._map_scalar(value, target_type, path)

        if target_type.is_class:
            return self._map_class(value, target_type, path)

        if target_type.is_array:
            raise ConfigurationError(
                "Cannot map to arrays directly, use StrictJson.map_to_array_of()", path
            )

        if target_type.is_object:
            raise ConfigurationError(
                "Cannot map to untyped objects directly, map to a class or register a type "
                "adapter",
                path,
            )

        raise ConfigurationError(
            f'Target type "{target_type}" is not a scalar type or valid class and has no '
            "registered type adapter",
            path,
        )

    def map_with_adapter(self, value: object, adapter: Adapter, path: JsonPath) -> Any:
        """Run ``adapter`` on ``value`` after checking the value is of an accepted kind."""

        accepted = tuple(adapter.from_types())
        adapter_name = _adapter_name(adapter)
        if not accepted:
            raise ConfigurationError(
                f"Adapter {adapter_name} does not support any types! "
                "(from_types must return a non-empty sequence)",
                path,
            )

        if not any(supported.allows_value(value) for supported in accepted):
            if len(accepted) > 1:
                expectation = "one of [" + ", ".join(str(item) for item in accepted) + "]"
            else:
                expectation = str(accepted[0])
            raise JsonFormatError(
                f"Expected {expectation}, found {json_type_name(value)} (using {adapter_name})",
                path,
            )

        try:
            return adapter.from_json(value, self, path)
        except JsonFormatError:
            raise
        except Exception as exc:
            self._logger.warning(
                LOG_ADAPTER_FAILED,
                adapter=adapter_name,
                path=str(path),
                error_type=type(exc).__name__,
            )
            raise ConfigurationError(
                f"Adapter {adapter_name} threw an exception", path, exc
            ) from exc

    def _map_scalar(self, value: object, target_type: TypeDescriptor, path: JsonPath) -> Any:
        if target_type.allows_value(value):
            return value
        raise JsonFormatError(
            f"Value is of type {json_type_name(value)}, expected type {target_type}", path
        )

    def _map_class(self, value: object, target_type: TypeDescriptor, path: JsonPath) -> Any:
        owner = target_type.target
        assert owner is not None
        type_name = qualified_name(owner)
        parameters = self._parameters.get_parameters(owner, path)

        if not isinstance(value, Mapping):
            raise JsonFormatError(f"Expected object, found {json_type_name(value)}", path)

        positional: list[object] = []
        keywords: dict[str, object] = {}
        arguments: list[object] = []
        for parameter in parameters:
            if parameter.name in value:
                child_path = path.with_property(parameter.name)
                if parameter.adapter is not None:
                    argument = self.map_with_adapter(
                        value[parameter.name], parameter.adapter, child_path
                    )
                else:
                    argument = self.map_decoded(value[parameter.name], parameter.type, child_path)
            elif parameter.has_default:
                argument = parameter.default_value()
            else:
                raise JsonFormatError(
                    f"{type_name}.__init__ has non-optional parameter named {parameter.name} "
                    "that does not exist in JSON",
                    path,
                )
            arguments.append(argument)
            if parameter.positional_only:
                positional.append(argument)
            else:
                keywords[parameter.name] = argument

        factory = self._parameters.factory_for(owner)
        try:
            return factory(*positional, **keywords)
        except ValueError as exc:
            self._log_construction_failure(type_name, path, "validation")
            raise JsonFormatError(
                f"{type_name}.__init__ threw a validation exception for args "
                f"{_encode_arguments(arguments)}",
                path,
                exc,
            ) from exc
        except Exception as exc:
            self._log_construction_failure(type_name, path, "configuration")
            raise ConfigurationError(
                f"Unable to construct object of type {type_name} with args "
                f"{_encode_arguments(arguments)}",
                path,
                exc,
            ) from exc

    def _log_construction_failure(self, type_name: str, path: JsonPath, classification: str) -> None:
        self._logger.debug(
            LOG_CONSTRUCTION_FAILED,
            type=type_name,
            path=str(path),
            classification=classification,
        )

    def _safe_decode(self, json_text: str | bytes) -> Any:
        try:
            return self._loads(json_text)
        except (ValueError, RecursionError) as exc:
            raw = json_text.decode("utf-8", "replace") if isinstance(json_text, bytes) else json_text
            raise JsonFormatError(
                f"Unable to parse invalid JSON ({exc}): {raw}", JsonPath.root(), exc
            ) from exc


def _adapter_name(adapter: Adapter) -> str:
    if type(adapter).__repr__ is object.__repr__:
        return qualified_name(type(adapter))
    return repr(adapter)


def _encode_arguments(arguments: list[object]) -> str:
    try:
        return json.dumps(arguments, default=repr, ensure_ascii=False)
    except (TypeError, ValueError):
        # Non-string keys or circular containers.
        return repr(arguments)


__all__ = ["JsonLoader", "StrictJson", "TargetType", "strict_loads"]
