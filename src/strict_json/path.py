"""Immutable JSON locations used to qualify mapping errors."""

from __future__ import annotations

from dataclasses import dataclass

from strict_json.constants import ROOT_PATH_PLACEHOLDER, ROOT_PATH_SYMBOL

PathStep = int | str


@dataclass(frozen=True, slots=True)
class JsonPath:
    """Append-only trail of array indices and property names.

    Integer steps index into arrays, string steps access object properties.
    Every traversal returns a new path; instances are never mutated.
    """

    steps: tuple[PathStep, ...] = ()

    @classmethod
    def root(cls) -> JsonPath:
        return cls()

    @property
    def is_root(self) -> bool:
        return not self.steps

    @property
    def depth(self) -> int:
        return len(self.steps)

    def with_array_index(self, index: int) -> JsonPath:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"array index must be an int, got {type(index).__name__}")
        return JsonPath((*self.steps, index))

    def with_property(self, name: str) -> JsonPath:
        if not isinstance(name, str):
            raise TypeError(f"property name must be a string, got {type(name).__name__}")
        return JsonPath((*self.steps, name))

    def __str__(self) -> str:
        if self.is_root:
            return ROOT_PATH_PLACEHOLDER
        rendered = [ROOT_PATH_SYMBOL]
        for step in self.steps:
            if isinstance(step, int):
                rendered.append(f"[{step}]")
            else:
                rendered.append(f".{step}")
        return "".join(rendered)


__all__ = ["JsonPath", "PathStep"]
