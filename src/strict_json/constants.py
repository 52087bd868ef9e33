"""Stable constants shared across the mapping engine."""

from __future__ import annotations

from typing import Final

# Path rendering.
ROOT_PATH_SYMBOL: Final[str] = "$"
ROOT_PATH_PLACEHOLDER: Final[str] = "<json_root>"

# Non-scalar kind names as they appear in error messages.
ARRAY_TYPE_NAME: Final[str] = "array"
OBJECT_TYPE_NAME: Final[str] = "object"
NULL_TYPE_NAME: Final[str] = "null"

# Structured log event names.
LOG_PARAMETERS_RESOLVED: Final[str] = "strict_json_parameters_resolved"
LOG_PARAMETER_ADAPTER_UNMATCHED: Final[str] = "strict_json_parameter_adapter_unmatched"
LOG_ADAPTER_FAILED: Final[str] = "strict_json_adapter_failed"
LOG_CONSTRUCTION_FAILED: Final[str] = "strict_json_construction_failed"

__all__ = [
    "ARRAY_TYPE_NAME",
    "LOG_ADAPTER_FAILED",
    "LOG_CONSTRUCTION_FAILED",
    "LOG_PARAMETERS_RESOLVED",
    "LOG_PARAMETER_ADAPTER_UNMATCHED",
    "NULL_TYPE_NAME",
    "OBJECT_TYPE_NAME",
    "ROOT_PATH_PLACEHOLDER",
    "ROOT_PATH_SYMBOL",
]
