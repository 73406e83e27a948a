from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .clock import AnimationState
from .config import LoopConfig
from .pointer import PointerSample, PointerSnapshot


@dataclass(frozen=True)
class ViewTransform:
    """Maps local geometry onto the drawing surface.

    surface = centre + R(rotation) * (scale * p), with
    scale = responsive_scale * progress_scale.
    """

    width: int
    height: int
    rotation: float = 0.0
    responsive_scale: float = 1.0
    progress_scale: float = 1.0

    @classmethod
    def for_frame(cls, width: int, height: int, state: AnimationState, config: LoopConfig) -> "ViewTransform":
        width = max(0, int(width))
        height = max(0, int(height))
        responsive = min(width, height) / config.reference_size
        progress_scale = 1.0 - state.progress * (1.0 - config.progress_size_scale)
        return cls(
            width=width,
            height=height,
            rotation=state.frame * config.rotation_speed,
            responsive_scale=responsive,
            progress_scale=progress_scale,
        )

    @property
    def scale(self) -> float:
        return self.responsive_scale * self.progress_scale

    @property
    def centre(self) -> tuple[float, float]:
        return (self.width / 2.0, self.height / 2.0)

    def pointer_to_local(self, snap: PointerSnapshot) -> Optional[PointerSample]:
        """Rotate surface pointer coordinates into the geometry's frame.

        The result is not divided by ``scale``; vertex positions are scaled up
        to meet it instead, so the pull radius stays in surface pixels.
        """
        if not snap.present:
            return None
        cx, cy = self.centre
        sx = snap.x - cx
        sy = snap.y - cy
        rot = -self.rotation
        c, s = math.cos(rot), math.sin(rot)
        return PointerSample(sx * c - sy * s, sx * s + sy * c, snap.pressed)

    def local_to_surface(self, points: np.ndarray) -> np.ndarray:
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2) * self.scale
        c, s = math.cos(self.rotation), math.sin(self.rotation)
        cx, cy = self.centre
        out = np.empty_like(pts)
        out[:, 0] = pts[:, 0] * c - pts[:, 1] * s + cx
        out[:, 1] = pts[:, 0] * s + pts[:, 1] * c + cy
        return out
