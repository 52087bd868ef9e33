"""
strict-json: strict, introspection-driven JSON to object mapping.

Public API: the ``StrictJson`` engine and its builder, type descriptors,
adapter contracts, JSON paths, and the two error kinds. Importing the
package has no side effects (no logging configuration, no I/O).
"""

from strict_json.adapters import Adapter, AdapterFunction, ArrayAdapter, CallableAdapter
from strict_json.builder import StrictJsonBuilder
from strict_json.engine import StrictJson, strict_loads
from strict_json.errors import ConfigurationError, JsonFormatError, StrictJsonError
from strict_json.parameters import (
    DefaultKind,
    DefaultValue,
    ParameterCache,
    ParameterMetadata,
    ParameterSpec,
    TypeSchema,
)
from strict_json.path import JsonPath
from strict_json.types import TypeDescriptor, TypeKind, json_type_name, qualified_name

__version__ = "0.1.0"

__all__ = [
    "Adapter",
    "AdapterFunction",
    "ArrayAdapter",
    "CallableAdapter",
    "ConfigurationError",
    "DefaultKind",
    "DefaultValue",
    "JsonFormatError",
    "JsonPath",
    "ParameterCache",
    "ParameterMetadata",
    "ParameterSpec",
    "StrictJson",
    "StrictJsonBuilder",
    "StrictJsonError",
    "TypeDescriptor",
    "TypeKind",
    "TypeSchema",
    "__version__",
    "json_type_name",
    "qualified_name",
]
