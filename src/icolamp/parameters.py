"""The single parameter set driving every part of the lamp."""

from __future__ import annotations

import json
import math
import re
import warnings
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from icolamp.validation import InvalidParameter

# one LED per lens-bearing face; the remaining face is the base
NUM_LEDS = 19

JACK_BODY_DIAMETER = 13.0


@dataclass(frozen=True)
class LampParameters:
    """Lengths in millimetres."""

    lens_depth: float = 30.0
    cavity_depth: float = 40.0
    wall_width: float = 1.0
    led_hole_size: float = 10.0
    lens_thickness: float = 1.0
    tolerance: float = 0.2
    lid_lip_size: float = 2.0
    base_additional_height: float = 25.0
    base_square_height: float = 8.0
    power_horiz_diameter: float = 7.5
    power_vert_diameter: float = 9.0
    power_height_from_base: float = 12.0
    switch_diameter: float = 7.0
    nozzle_diameter: float = 0.4

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidParameter(f"{item.name} must be a number, got {value!r}.")
            if not math.isfinite(value):
                raise InvalidParameter(f"{item.name} must be finite, got {value!r}.")
            if item.name == "tolerance":
                if value < 0:
                    raise InvalidParameter(f"tolerance must be >= 0, got {value:g}.")
            elif value <= 0:
                raise InvalidParameter(f"{item.name} must be > 0, got {value:g}.")
            object.__setattr__(self, item.name, float(value))

    @property
    def outer_depth(self) -> float:
        return self.lens_depth + self.cavity_depth

    @property
    def power_outer_diameter(self) -> float:
        return JACK_BODY_DIAMETER + 2.0 * self.wall_width

    def with_overrides(self, overrides: Mapping[str, Any]) -> "LampParameters":
        changes = {normalize_name(key): value for key, value in overrides.items()}
        return replace(self, **changes)

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    def check_printability(self) -> list[str]:
        """Warn about features thinner than the nozzle can lay down."""

        thin = [
            name
            for name in ("wall_width", "lens_thickness", "lid_lip_size")
            if getattr(self, name) < self.nozzle_diameter
        ]
        for name in thin:
            warnings.warn(
                f"{name} {getattr(self, name):.3f}mm is below nozzle diameter {self.nozzle_diameter:.3f}mm.",
                RuntimeWarning,
            )
        return thin


_FIELD_NAMES = {item.name for item in fields(LampParameters)}


def normalize_name(name: str) -> str:
    """Accept `lens_depth`, `lensDepth` or `lens-depth`."""

    key = re.sub(r"(?<!^)(?=[A-Z])", "_", name.strip()).replace("-", "_").lower()
    if key not in _FIELD_NAMES:
        raise InvalidParameter(f"Unknown parameter '{name}'. Valid names: {', '.join(sorted(_FIELD_NAMES))}.")
    return key


def parse_assignment(text: str) -> tuple[str, float]:
    """Parse a `name=value` override."""

    if "=" not in text:
        raise InvalidParameter(f"Expected name=value, got '{text}'.")
    name, raw = text.split("=", 1)
    try:
        value = float(raw)
    except ValueError as exc:
        raise InvalidParameter(f"Value for {name.strip()} must be a number, got '{raw}'.") from exc
    return normalize_name(name), value


def load_parameters(path: Path, base: LampParameters | None = None) -> LampParameters:
    """Read a JSON object of overrides; `parameters` may nest them."""

    try:
        raw = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise InvalidParameter(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(raw, dict) and isinstance(raw.get("parameters"), dict):
        raw = raw["parameters"]
    if not isinstance(raw, dict):
        raise InvalidParameter(f"{path} must contain a JSON object of parameters.")
    raw = {key: value for key, value in raw.items() if not key.startswith("_")}
    return (base or LampParameters()).with_overrides(raw)
