from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Sequence

import numpy as np

from etherloop.utils.svg_path import OutlineError, load_first_path

logger = logging.getLogger(__name__)

DEFAULT_SAMPLES = 500


class OutlineRing:
    """Fixed-length cyclic ring of outline points centred on the origin.

    Index ``k`` and ``k % len(ring)`` name the same sample. The point array is
    read-only; an empty ring means there is nothing to draw.
    """

    __slots__ = ("_points",)

    def __init__(self, points: np.ndarray | Sequence[Sequence[float]] = ()):
        pts = np.array(points, dtype=np.float64).reshape(-1, 2)
        pts.setflags(write=False)
        self._points = pts

    @classmethod
    def empty(cls) -> "OutlineRing":
        return cls()

    @property
    def points(self) -> np.ndarray:
        return self._points

    def __len__(self) -> int:
        return len(self._points)

    def __bool__(self) -> bool:
        return len(self._points) > 0

    def __getitem__(self, k: int) -> np.ndarray:
        if not len(self._points):
            raise IndexError("empty ring")
        return self._points[k % len(self._points)]

    def __repr__(self) -> str:
        return f"OutlineRing({len(self)} points)"


def sample_outline(polylines: Sequence[np.ndarray], count: int = DEFAULT_SAMPLES) -> OutlineRing:
    """Resample subpaths to ``count`` points evenly spaced by arc length.

    Sample ``i`` sits at arc length ``L * i / count``; moves between subpaths
    add no length. The samples are shifted so their centroid is the origin.
    """
    segs_a = []
    segs_b = []
    for poly in polylines:
        pts = np.asarray(poly, dtype=np.float64).reshape(-1, 2)
        if len(pts) >= 2:
            segs_a.append(pts[:-1])
            segs_b.append(pts[1:])
    if not segs_a or count < 1:
        return OutlineRing.empty()
    a = np.concatenate(segs_a)
    b = np.concatenate(segs_b)
    seg_len = np.hypot(*(b - a).T)
    total = float(seg_len.sum())
    if not math.isfinite(total) or total <= 0:
        return OutlineRing.empty()

    cum = np.concatenate(([0.0], np.cumsum(seg_len)))
    targets = total * np.arange(count, dtype=np.float64) / count
    idx = np.searchsorted(cum, targets, side="right") - 1
    idx = np.clip(idx, 0, len(seg_len) - 1)
    # side="right" skips zero-length segments except trailing ones
    span = np.where(seg_len[idx] > 0, seg_len[idx], 1.0)
    local_t = np.clip((targets - cum[idx]) / span, 0.0, 1.0)
    samples = a[idx] + (b[idx] - a[idx]) * local_t[:, None]
    if not np.all(np.isfinite(samples)):
        return OutlineRing.empty()
    return OutlineRing(samples - samples.mean(axis=0))


def load_outline(path: str | Path, count: int = DEFAULT_SAMPLES, curve_steps: int = 24) -> OutlineRing:
    """Ring from the first ``<path>`` of an SVG file, or an empty ring on failure."""
    try:
        polylines = load_first_path(path, curve_steps=curve_steps)
    except FileNotFoundError:
        logger.warning("Outline %s not found; nothing will be drawn", path)
        return OutlineRing.empty()
    except (OSError, OutlineError) as e:
        logger.warning("Outline %s unusable (%s); nothing will be drawn", path, e)
        return OutlineRing.empty()

    ring = sample_outline(polylines, count)
    if not ring:
        logger.warning("Outline %s has no measurable length; nothing will be drawn", path)
    else:
        logger.info("Outline %s sampled to %d points", path, len(ring))
    return ring
