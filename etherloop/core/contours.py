from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np

from .clock import AnimationState
from .config import LoopConfig
from .noise import NoiseField
from .outline import OutlineRing
from .pointer import PointerSample, attract_many
from .view import ViewTransform

# per-band shift in noise space so bands do not trace the same line
BAND_NOISE_OFFSET = 0.01


def band_offset(band_index: int, config: LoopConfig) -> float:
    """Radial offset spreading the bands evenly across ``thickness``."""
    if config.num_bands <= 1:
        return 0.0
    t = band_index / (config.num_bands - 1)
    return -config.thickness / 2.0 + config.thickness * t


def generate_band(
    band_index: int,
    ring: OutlineRing,
    state: AnimationState,
    config: LoopConfig,
    noise: NoiseField,
    pointer: Optional[PointerSample] = None,
    view: Optional[ViewTransform] = None,
) -> np.ndarray:
    """Closed polyline for one band as an ``(S + 1, 2)`` array.

    The sampling angle is ``2*pi*k/S`` by ring index, not the geometric angle
    of the outline point. The last vertex repeats the first, so angle 2*pi
    samples exactly what angle 0 does. An empty ring gives an empty array.
    """
    base = ring.points
    count = len(base)
    if count == 0:
        return np.empty((0, 2), dtype=np.float64)

    progress = state.progress
    angle = 2.0 * math.pi * np.arange(count, dtype=np.float64) / count

    # circle in noise space: cos/sin mapped from [-1, 1] to [0, noise_scale]
    xoff = (np.cos(angle) + 1.0) * 0.5 * config.noise_scale
    yoff = (np.sin(angle) + 1.0) * 0.5 * config.noise_scale
    shift = band_index * BAND_NOISE_OFFSET
    n = noise.sample(xoff + shift, yoff + shift, state.noise_time)

    mag = np.hypot(base[:, 0], base[:, 1])
    safe = np.where(mag > 0, mag, 1.0)
    direction = np.where((mag > 0)[:, None], base / safe[:, None], 0.0)

    lo = -config.noise_range * 0.5
    hi = config.noise_range * 1.0
    noise_disp = (lo + (hi - lo) * n) * progress
    wave_disp = np.sin(angle * config.wave_freq_angle + state.wave_phase) * config.wave_amp * progress
    offset_len = band_offset(band_index, config) + noise_disp + wave_disp

    pts = base + direction * offset_len[:, None]

    if pointer is not None and view is not None and view.scale > 0:
        s = view.scale
        pull = attract_many(
            pts * s,
            pointer.position,
            config.pointer_influence,
            config.pointer_radius,
            config.pointer_falloff,
        )
        pts = pts + pull / s

    return np.vstack((pts, pts[:1]))


def generate_bands(
    ring: OutlineRing,
    state: AnimationState,
    config: LoopConfig,
    noise: NoiseField,
    pointer: Optional[PointerSample] = None,
    view: Optional[ViewTransform] = None,
) -> List[np.ndarray]:
    """All bands in draw order (band 0 first)."""
    if not ring:
        return []
    return [generate_band(i, ring, state, config, noise, pointer, view) for i in range(config.num_bands)]


def band_style(band_index: int, state: AnimationState, config: LoopConfig) -> Tuple[float, float]:
    """(hue in [0, 360), alpha in [alpha_min, alpha_max]) for one band."""
    hue = state.color_hue + math.sin(state.elapsed + band_index * 0.1) * config.hue_wobble
    s = math.sin(state.elapsed + band_index)
    alpha = config.alpha_min + (s + 1.0) / 2.0 * (config.alpha_max - config.alpha_min)
    return hue % 360.0, alpha
