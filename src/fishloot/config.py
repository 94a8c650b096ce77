"""Engine settings persistence."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from fishloot.data import paths
from fishloot.domain.weights import DEFAULT_ESTIMATE_WEIGHT

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EngineSettings:
    seed: int | None = None
    log_level: str = "WARNING"
    analysis_fallback_weight: float = DEFAULT_ESTIMATE_WEIGHT


def get_default_settings_path() -> Path:
    """Return the settings file next to the loot definitions."""
    return paths.get_definitions_path() / "settings.json"


def _normalize_seed(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()
    return EngineSettings.log_level


def _normalize_fallback(value: object) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0:
        return float(value)
    return EngineSettings.analysis_fallback_weight


def load_settings(path: Path | None = None) -> EngineSettings:
    """Load settings from disk or return defaults."""
    settings_path = path or get_default_settings_path()
    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return EngineSettings()
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", settings_path, exc)
        return EngineSettings()
    if not isinstance(raw, dict):
        return EngineSettings()
    return EngineSettings(
        seed=_normalize_seed(raw.get("seed")),
        log_level=_normalize_log_level(raw.get("log_level")),
        analysis_fallback_weight=_normalize_fallback(raw.get("analysis_fallback_weight")),
    )


def save_settings(settings: EngineSettings, path: Path | None = None) -> None:
    """Persist settings to disk."""
    settings_path = path or get_default_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(asdict(settings), indent=2, sort_keys=True), encoding="utf-8")
