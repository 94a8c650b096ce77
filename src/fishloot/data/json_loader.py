"""Low-level JSON helpers for repositories."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError


def load_json(path: Path) -> object:
    """Load JSON from disk and raise DataLoadError on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Definition file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read definition file: {path}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc


def load_sections(path: Path) -> object:
    """Load one definition file, or every ``*.json`` file of a directory.

    A directory yields a list with one parsed document per file, ordered by
    file name, so that sections split across files keep a stable order.
    """
    if path.is_dir():
        return [load_json(child) for child in sorted(path.glob("*.json"))]
    return load_json(path)
