"""User configuration stored in ~/.icolamp/icolamp.cfg (JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

CONFIG_DIR = Path.home() / ".icolamp"
CONFIG_FILE = CONFIG_DIR / "icolamp.cfg"
DEFAULT_UNITS = "millimeters"
DEFAULT_CONFIG: Dict[str, Any] = {
    "_comment": (
        "units: millimeters (default), meters or inches, used when exporting meshes. "
        "parameters: lamp parameter overrides, e.g. {\"wall_width\": 1.2}."
    ),
    "units": DEFAULT_UNITS,
    "parameters": {},
}

# name -> (label, millimetres per unit, accepted spellings)
_UNITS: Dict[str, tuple[str, float, tuple[str, ...]]] = {
    "millimeters": ("mm", 1.0, ("mm", "millimeter")),
    "meters": ("m", 1000.0, ("m", "meter")),
    "inches": ("in", 25.4, ("in", "inch")),
}


@dataclass(frozen=True)
class UnitSettings:
    """Export units and the conversion from the millimetres parts are built in."""

    name: str
    label: str
    scale_to_mm: float


@dataclass(frozen=True)
class UserConfig:
    units: str = DEFAULT_UNITS
    parameters: Dict[str, Any] = field(default_factory=dict)


def _canonical_units(value: str) -> str | None:
    key = value.strip().lower()
    for name, (_, _, aliases) in _UNITS.items():
        if key == name or key in aliases:
            return name
    return None


def ensure_user_config() -> None:
    """Write the default config on first use; an unwritable home is not an error."""

    if CONFIG_FILE.exists():
        return
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        CONFIG_FILE.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        pass


def load_user_config() -> UserConfig:
    ensure_user_config()
    try:
        raw = json.loads(CONFIG_FILE.read_text())
    except (OSError, json.JSONDecodeError):
        return UserConfig()
    if not isinstance(raw, dict):
        return UserConfig()
    parameters = raw.get("parameters")
    return UserConfig(
        units=str(raw.get("units", DEFAULT_UNITS)),
        parameters=dict(parameters) if isinstance(parameters, dict) else {},
    )


def get_unit_settings(override: str | None = None) -> UnitSettings:
    """Resolve export units; a bad override is an error, a bad config value falls back to mm."""

    if override is not None:
        name = _canonical_units(override)
        if name is None:
            raise ValueError(f"Unknown units '{override}'. Use one of: {', '.join(_UNITS)}.")
    else:
        name = _canonical_units(load_user_config().units) or DEFAULT_UNITS
    label, scale, _ = _UNITS[name]
    return UnitSettings(name=name, label=label, scale_to_mm=scale)


def get_parameter_overrides() -> Dict[str, Any]:
    return load_user_config().parameters
