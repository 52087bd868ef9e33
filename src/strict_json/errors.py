"""Error taxonomy: bad input versus broken mapping setup."""

from __future__ import annotations

from strict_json.path import JsonPath


class StrictJsonError(Exception):
    """Base class for mapping failures.

    ``reason`` is the bare message, ``path`` the JSON location where the
    failure was detected. ``str(error)`` renders both. An underlying cause,
    when given, is chained through ``__cause__``.
    """

    def __init__(
        self,
        reason: str,
        path: JsonPath | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.reason = reason
        self.path = path if path is not None else JsonPath.root()
        super().__init__(f"{reason} at path {self.path}")
        if cause is not None:
            self.__cause__ = cause


class JsonFormatError(StrictJsonError, ValueError):
    """Raised when decoded JSON does not match the requested shape."""


class ConfigurationError(StrictJsonError, RuntimeError):
    """Raised when the mapping setup itself is invalid."""


__all__ = ["ConfigurationError", "JsonFormatError", "StrictJsonError"]
