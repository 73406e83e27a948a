from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

# distance floor when a vertex sits exactly under the pointer
EPS = 1e-3


def attract(
    point: Tuple[float, float],
    pointer: Tuple[float, float],
    influence: float,
    radius: float,
    falloff: float,
) -> Tuple[float, float]:
    """Pull of ``pointer`` on ``point``; exactly (0, 0) at distance >= radius."""
    dx = pointer[0] - point[0]
    dy = pointer[1] - point[1]
    d = max(math.hypot(dx, dy), EPS)
    if d >= radius:
        return (0.0, 0.0)
    strength = (1.0 - d / radius) ** falloff
    pull = (influence / radius) * strength
    return (dx * pull, dy * pull)


def attract_many(
    points: np.ndarray,
    pointer: Tuple[float, float],
    influence: float,
    radius: float,
    falloff: float,
) -> np.ndarray:
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    delta = np.asarray(pointer, dtype=np.float64) - pts
    d = np.maximum(np.hypot(delta[:, 0], delta[:, 1]), EPS)
    inside = d < radius
    nd = np.where(inside, d / radius, 0.0)
    pull = (influence / radius) * np.power(1.0 - nd, falloff)
    return np.where(inside[:, None], delta * pull[:, None], 0.0)


@dataclass(frozen=True)
class PointerSnapshot:
    x: float = 0.0
    y: float = 0.0
    pressed: bool = False
    present: bool = False


@dataclass(frozen=True)
class PointerSample:
    """Pointer position in local geometry space."""

    x: float
    y: float
    pressed: bool

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


class PointerInput:
    # Written by input handlers, read once per frame by the render loop.
    def __init__(self):
        self._lock = threading.Lock()
        self._snap = PointerSnapshot()

    def move(self, x: float, y: float) -> None:
        with self._lock:
            self._snap = PointerSnapshot(float(x), float(y), self._snap.pressed, True)

    def press(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        with self._lock:
            s = self._snap
            if x is None or y is None:
                self._snap = PointerSnapshot(s.x, s.y, True, s.present)
            else:
                self._snap = PointerSnapshot(float(x), float(y), True, True)

    def release(self) -> None:
        with self._lock:
            s = self._snap
            self._snap = PointerSnapshot(s.x, s.y, False, s.present)

    def leave(self) -> None:
        with self._lock:
            s = self._snap
            self._snap = PointerSnapshot(s.x, s.y, s.pressed, False)

    def snapshot(self) -> PointerSnapshot:
        with self._lock:
            return self._snap
