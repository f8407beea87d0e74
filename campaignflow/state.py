"""Run state shared by all steps of one run."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Iterator

from pydantic_core import to_jsonable_python


class RunState:
    """Versioned key/value record for a single run.

    Values are stored in JSON-compatible form. Fields can be added or
    overwritten but never removed; every write bumps ``version``.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, version: int = 0) -> None:
        self._values: dict[str, Any] = copy.deepcopy(dict(values or {}))
        self._version = version

    @property
    def version(self) -> int:
        return self._version

    def get(self, field: str, default: Any = None) -> Any:
        """Return a copy of ``field``'s value, or ``default`` when absent."""
        if field not in self._values:
            return default
        return copy.deepcopy(self._values[field])

    def set(self, field: str, value: Any) -> None:
        self._values[field] = to_jsonable_python(value)
        self._version += 1

    def update(self, values: Mapping[str, Any]) -> None:
        """Set several fields at once, skipping ``None`` values."""
        for field, value in values.items():
            if value is not None:
                self.set(field, value)

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self._values)

    def __contains__(self, field: object) -> bool:
        return field in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RunState(version={self._version}, fields={sorted(self._values)})"
