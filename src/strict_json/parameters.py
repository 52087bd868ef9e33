"""Constructor parameter metadata and its per-engine memoization cache."""

from __future__ import annotations

import dataclasses
import inspect
import threading
import typing
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from strict_json.constants import LOG_PARAMETER_ADAPTER_UNMATCHED, LOG_PARAMETERS_RESOLVED
from strict_json.errors import ConfigurationError
from strict_json.path import JsonPath
from strict_json.types import TypeDescriptor, is_mappable_class, qualified_name

if TYPE_CHECKING:
    from strict_json.adapters import Adapter

ParameterAdapters = Mapping[type, Mapping[str, "Adapter"]]

_VARIADIC_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class DefaultKind(StrEnum):
    NONE = "no_default"
    NULL = "null"
    VALUE = "value"
    FACTORY = "factory"


@dataclass(frozen=True, slots=True)
class DefaultValue:
    """Default of a constructor parameter.

    "No default" and "default is ``None``" are distinct states. ``FACTORY``
    covers dataclass ``default_factory`` fields so every constructed object
    receives a fresh value.
    """

    kind: DefaultKind = DefaultKind.NONE
    value: object = None
    factory: Callable[[], object] | None = None

    @classmethod
    def absent(cls) -> DefaultValue:
        return cls(DefaultKind.NONE)

    @classmethod
    def of(cls, value: object) -> DefaultValue:
        if value is None:
            return cls(DefaultKind.NULL)
        return cls(DefaultKind.VALUE, value)

    @classmethod
    def from_factory(cls, factory: Callable[[], object]) -> DefaultValue:
        if not callable(factory):
            raise TypeError("default factory must be callable")
        return cls(DefaultKind.FACTORY, factory=factory)

    @property
    def is_present(self) -> bool:
        return self.kind is not DefaultKind.NONE

    def resolve(self) -> object:
        if self.kind is DefaultKind.NONE:
            raise LookupError("Called resolve on a parameter with no default value")
        if self.kind is DefaultKind.FACTORY:
            assert self.factory is not None
            return self.factory()
        return self.value


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """Explicitly declared constructor parameter, used instead of introspection."""

    name: str
    type: TypeDescriptor
    default: DefaultValue = field(default_factory=DefaultValue.absent)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("parameter name must be a non-empty string")
        if not isinstance(self.type, TypeDescriptor):
            raise TypeError(f"parameter {self.name!r} type must be a TypeDescriptor")
        if not isinstance(self.default, DefaultValue):
            raise TypeError(f"parameter {self.name!r} default must be a DefaultValue")


@dataclass(frozen=True, slots=True)
class TypeSchema:
    """Ordered parameter list for one target type plus an optional factory.

    When ``factory`` is ``None`` the target type itself is called with the
    resolved arguments as keywords.
    """

    parameters: tuple[ParameterSpec, ...]
    factory: Callable[..., object] | None = None

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for spec in self.parameters:
            if spec.name in seen:
                raise ValueError(f"duplicate parameter name {spec.name!r} in schema")
            seen.add(spec.name)
        if self.factory is not None and not callable(self.factory):
            raise TypeError("schema factory must be callable")

    @classmethod
    def of(
        cls,
        parameters: Iterable[ParameterSpec],
        *,
        factory: Callable[..., object] | None = None,
    ) -> TypeSchema:
        return cls(parameters=tuple(parameters), factory=factory)


@dataclass(frozen=True, slots=True)
class ParameterMetadata:
    """Resolved description of one constructor parameter."""

    name: str
    type: TypeDescriptor
    default: DefaultValue
    adapter: Adapter | None = None
    positional_only: bool = False

    @property
    def has_default(self) -> bool:
        return self.default.is_present

    def default_value(self) -> object:
        return self.default.resolve()


class ParameterCache:
    """Lazily computed, never evicted parameter lists keyed by target class.

    Population is idempotent; concurrent callers may compute the same entry
    twice but only the first stored tuple is ever returned.
    """

    def __init__(
        self,
        parameter_adapters: ParameterAdapters | None = None,
        schemas: Mapping[type, TypeSchema] | None = None,
        *,
        logger: Any | None = None,
    ) -> None:
        self._parameter_adapters: dict[type, dict[str, Adapter]] = {
            owner: dict(by_name) for owner, by_name in (parameter_adapters or {}).items()
        }
        self._schemas: dict[type, TypeSchema] = dict(schemas or {})
        self._parameters_by_type: dict[type, tuple[ParameterMetadata, ...]] = {}
        self._lock = threading.Lock()
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    def get_parameters(self, target: object, path: JsonPath) -> tuple[ParameterMetadata, ...]:
        if not is_mappable_class(target):
            raise ConfigurationError(f"Type {_display_name(target)} is not a valid class", path)
        owner = typing.cast("type", target)

        cached = self._parameters_by_type.get(owner)
        if cached is not None:
            return cached

        parameters = self._find_parameters(owner, path)
        with self._lock:
            return self._parameters_by_type.setdefault(owner, parameters)

    def factory_for(self, target: type) -> Callable[..., object]:
        schema = self._schemas.get(target)
        if schema is not None and schema.factory is not None:
            return schema.factory
        return target

    def is_cached(self, target: type) -> bool:
        return target in self._parameters_by_type

    def _find_parameters(self, owner: type, path: JsonPath) -> tuple[ParameterMetadata, ...]:
        schema = self._schemas.get(owner)
        if schema is not None:
            source = "schema"
            parameters = tuple(
                self._build(owner, spec.name, spec.type, spec.default, False, path)
                for spec in schema.parameters
            )
        else:
            source = "signature"
            parameters = self._introspect(owner, path)

        declared = {parameter.name for parameter in parameters}
        for name in sorted(self._parameter_adapters.get(owner, {})):
            if name not in declared:
                self._logger.warning(
                    LOG_PARAMETER_ADAPTER_UNMATCHED,
                    type=qualified_name(owner),
                    parameter=name,
                )

        self._logger.debug(
            LOG_PARAMETERS_RESOLVED,
            type=qualified_name(owner),
            parameters=[parameter.name for parameter in parameters],
            source=source,
        )
        return parameters

    def _introspect(self, owner: type, path: JsonPath) -> tuple[ParameterMetadata, ...]:
        constructor = _constructor_of(owner)
        if constructor is None:
            raise ConfigurationError(
                f"Type {qualified_name(owner)} does not have a valid constructor", path
            )
        try:
            signature = inspect.signature(owner)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Type {qualified_name(owner)} does not have a valid constructor", path, exc
            ) from exc

        # NamedTuple's generated __new__ cannot resolve hints in its own namespace.
        hint_source = owner if _is_named_tuple(owner) else constructor
        try:
            hints = typing.get_type_hints(hint_source)
        except Exception as exc:
            raise ConfigurationError(
                f"Unable to resolve type hints for {qualified_name(owner)}.__init__: {exc}",
                path,
                exc,
            ) from exc

        factories = _dataclass_factories(owner)
        parameters: list[ParameterMetadata] = []
        for parameter in signature.parameters.values():
            if parameter.kind in _VARIADIC_KINDS:
                stars = "*" if parameter.kind is inspect.Parameter.VAR_POSITIONAL else "**"
                raise ConfigurationError(
                    f"{qualified_name(owner)}.__init__ has variadic parameter "
                    f"{stars}{parameter.name} that cannot be mapped from JSON",
                    path,
                )
            descriptor = TypeDescriptor.from_parameter(
                owner,
                parameter,
                hints.get(parameter.name, inspect.Parameter.empty),
                path,
            )
            if parameter.name in factories:
                default = DefaultValue.from_factory(factories[parameter.name])
            elif parameter.default is inspect.Parameter.empty:
                default = DefaultValue.absent()
            else:
                default = DefaultValue.of(parameter.default)
            parameters.append(
                self._build(
                    owner,
                    parameter.name,
                    descriptor,
                    default,
                    parameter.kind is inspect.Parameter.POSITIONAL_ONLY,
                    path,
                )
            )
        return tuple(parameters)

    def _build(
        self,
        owner: type,
        name: str,
        descriptor: TypeDescriptor,
        default: DefaultValue,
        positional_only: bool,
        path: JsonPath,
    ) -> ParameterMetadata:
        adapter = self._parameter_adapters.get(owner, {}).get(name)
        # Unadaptable arrays fail here, where the owner and parameter are known.
        if descriptor.is_array and adapter is None:
            raise ConfigurationError(
                f"{qualified_name(owner)}.__init__ has parameter name {name} of type array "
                "with no parameter adapter\n"
                "(Use StrictJson.builder().add_array_parameter_adapter(...) to register an "
                "array adapter for this class)",
                path,
            )
        return ParameterMetadata(
            name=name,
            type=descriptor,
            default=default,
            adapter=adapter,
            positional_only=positional_only,
        )


def _constructor_of(owner: type) -> Callable[..., object] | None:
    init = owner.__init__
    if init is not object.__init__:
        return init
    new = owner.__new__
    if new is not object.__new__:
        return new
    return None


def _is_named_tuple(owner: type) -> bool:
    return issubclass(owner, tuple) and hasattr(owner, "_fields")


def _dataclass_factories(owner: type) -> dict[str, Callable[[], object]]:
    if not dataclasses.is_dataclass(owner):
        return {}
    return {
        item.name: item.default_factory
        for item in dataclasses.fields(owner)
        if item.default_factory is not dataclasses.MISSING
    }


def _display_name(target: object) -> str:
    if inspect.isclass(target):
        return qualified_name(target)
    return str(target)


__all__ = [
    "DefaultKind",
    "DefaultValue",
    "ParameterCache",
    "ParameterMetadata",
    "ParameterSpec",
    "TypeSchema",
]
