"""Data layer utilities for loading loot definitions."""

from .errors import (
    ConfigurationReferenceError,
    CyclicGroupError,
    DataLoadError,
    DataReferenceError,
    DataValidationError,
    DuplicateLootError,
)
from .paths import get_definitions_path, get_repo_root

__all__ = [
    "ConfigurationReferenceError",
    "CyclicGroupError",
    "DataLoadError",
    "DataReferenceError",
    "DataValidationError",
    "DuplicateLootError",
    "get_definitions_path",
    "get_repo_root",
]
