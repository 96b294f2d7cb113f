from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

MeshLOD = Literal["preview", "final"]


@dataclass(frozen=True)
class MeshQuality:
    """Controls tessellation of the round bores."""

    circular_segments: int = 64
    lod: MeshLOD = "final"

    def __post_init__(self) -> None:
        if self.circular_segments < 3:
            raise ValueError("circular_segments must be >= 3.")
        if self.lod not in ("preview", "final"):
            raise ValueError("lod must be 'preview' or 'final'.")


def apply_lod(quality: MeshQuality) -> MeshQuality:
    if quality.lod == "final":
        return quality
    return replace(quality, circular_segments=max(12, int(quality.circular_segments * 0.5)))


def resolve_segments(quality: MeshQuality | None) -> int:
    return apply_lod(quality or MeshQuality()).circular_segments
