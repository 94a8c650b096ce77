"""Base repository implementation for loot configuration sections."""
from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Dict, Generic, Mapping, TypeVar

from fishloot.data.errors import DataValidationError
from fishloot.data.json_loader import load_sections
from fishloot.data import paths

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories.

    Definitions come either from already-parsed ``sections`` handed in by the
    caller or, when none are given, from ``filename`` under the definitions
    directory.
    """

    def __init__(
        self,
        filename: str,
        base_path: Path | str | None = None,
        sections: object | None = None,
    ) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._sections = sections
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        definitions_dir = paths.get_definitions_path(self._base_path)
        return definitions_dir / self._filename

    def _load_raw(self) -> object:
        if self._sections is not None:
            return self._sections
        return load_sections(self._get_file_path())

    def _build(self, raw: object) -> Dict[str, T]:
        """Convert raw sections into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> Dict[str, T]:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)
        return self._definitions

    def refresh(self, sections: object | None = None) -> None:
        """Drop cached definitions so the next access rebuilds them."""
        if sections is not None:
            self._sections = sections
        self._definitions = None

    def get(self, def_id: str) -> T:
        """Return a definition by id."""
        definitions = self._ensure_loaded()
        try:
            return definitions[def_id]
        except KeyError as exc:
            raise KeyError(def_id) from exc

    def __contains__(self, def_id: object) -> bool:
        return def_id in self._ensure_loaded()

    def all(self) -> list[T]:
        """Return all definitions in configuration order."""
        return list(self._ensure_loaded().values())

    def as_mapping(self) -> Mapping[str, T]:
        """Return a read-only snapshot of the definitions keyed by id."""
        return MappingProxyType(dict(self._ensure_loaded()))

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise DataValidationError(f"{context} must be a non-empty string.")
        return value

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_float(value: object, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} must be a number.")
        return float(value)

    @staticmethod
    def _require_str_list(value: object, context: str) -> list[str]:
        """Accept a list of strings, or a single string as a one-item list."""
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        result: list[str] = []
        for entry in value:
            if not isinstance(entry, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(entry)
        return result
