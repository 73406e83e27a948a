from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .clock import AnimationClock, AnimationState
from .config import ConfigError, LoopConfig
from .contours import band_style, generate_bands
from .noise import NoiseField
from .outline import OutlineRing
from .pointer import PointerSample, PointerSnapshot
from .view import ViewTransform


@dataclass
class Band:
    index: int
    points: np.ndarray
    hue: float
    alpha: float


@dataclass
class Frame:
    index: int
    state: AnimationState
    view: ViewTransform
    pointer: Optional[PointerSample] = None
    bands: List[Band] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.bands


class LoopEngine:
    """Advances the clock and builds the bands for one frame at a time."""

    def __init__(
        self,
        ring: OutlineRing,
        config: LoopConfig | None = None,
        noise: NoiseField | None = None,
        state: AnimationState | None = None,
    ):
        self.ring = ring
        self.config = config or LoopConfig()
        self.noise = noise or self._make_noise(self.config)
        self.clock = AnimationClock(self.config, state)

    @staticmethod
    def _make_noise(config: LoopConfig) -> NoiseField:
        return NoiseField(config.noise_seed, config.noise_octaves, config.noise_falloff)

    @property
    def state(self) -> AnimationState:
        return self.clock.state

    def reconfigure(self, **overrides) -> LoopConfig:
        """Swap in new parameters; accumulators carry on from where they are."""
        if "sample_count" in overrides:
            # the ring is sampled once at load time
            raise ConfigError("sample_count cannot change on a running engine; reload the outline")
        old = self.config
        self.config = old.with_overrides(**overrides)
        self.clock.config = self.config
        noise_keys = (old.noise_seed, old.noise_octaves, old.noise_falloff)
        if noise_keys != (self.config.noise_seed, self.config.noise_octaves, self.config.noise_falloff):
            self.noise = self._make_noise(self.config)
        return self.config

    def step(self, width: int, height: int, pointer: PointerSnapshot | None = None) -> Frame:
        snap = pointer or PointerSnapshot()
        state = self.clock.advance(snap.pressed)
        view = ViewTransform.for_frame(width, height, state, self.config)
        local = view.pointer_to_local(snap)
        frame = Frame(index=state.frame, state=state, view=view, pointer=local)
        polylines = generate_bands(self.ring, state, self.config, self.noise, local, view)
        for i, pts in enumerate(polylines):
            hue, alpha = band_style(i, state, self.config)
            frame.bands.append(Band(i, pts, hue, alpha))
        return frame
