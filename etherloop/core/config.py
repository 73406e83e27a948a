from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Tuple


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class LoopConfig:
    # bands
    num_bands: int = 100
    thickness: float = 150.0
    # noise
    noise_scale: float = 0.075
    noise_range: float = 125.0
    noise_time_scale: float = 0.25
    noise_time_pressed: float = 0.5
    noise_seed: int = 0
    noise_octaves: int = 4
    noise_falloff: float = 0.5
    # waves
    wave_amp: float = 25.0
    wave_freq_angle: float = 6.0
    wave_freq_time: float = 3.0
    # time
    speed: float = 0.01
    rotation_speed: float = 0.0
    # color (HSB, hue in degrees)
    hue_released: float = 212.0
    hue_pressed: float = 50.0
    hue_smoothing: float = 0.05
    hue_wobble: float = 10.0
    saturation: float = 100.0
    brightness: float = 90.0
    alpha_min: float = 0.6
    alpha_max: float = 0.8
    background: Tuple[float, float, float] = (0.0, 0.0, 100.0)
    stroke_weight: float = 1.5
    # pointer
    pointer_influence: float = 50.0
    pointer_radius: float = 200.0
    pointer_falloff: float = 1.5
    # layout
    progress_size_scale: float = 0.85
    sample_count: int = 500
    reference_size: float = 800.0

    def __post_init__(self):
        validate(self)

    def with_overrides(self, **overrides) -> "LoopConfig":
        unknown = set(overrides) - _FIELD_NAMES
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")
        if "background" in overrides:
            overrides["background"] = _as_hsb(overrides["background"])
        return replace(self, **overrides)

    def to_dict(self) -> dict:
        return asdict(self)


_FIELD_NAMES = {f.name for f in fields(LoopConfig)}
_INT_FIELDS = {"num_bands", "noise_seed", "noise_octaves", "sample_count"}


def _as_hsb(value) -> Tuple[float, float, float]:
    try:
        h, s, b = value
        return (float(h), float(s), float(b))
    except (TypeError, ValueError):
        raise ConfigError(f"background must be three numbers (hue, saturation, brightness), got {value!r}")


def validate(cfg: LoopConfig) -> None:
    for f in fields(cfg):
        value = getattr(cfg, f.name)
        values = value if f.name == "background" else (value,)
        for v in values:
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise ConfigError(f"{f.name} must be numeric, got {v!r}")
            if not math.isfinite(v):
                raise ConfigError(f"{f.name} must be finite, got {v!r}")
        if f.name in _INT_FIELDS and not isinstance(value, int):
            raise ConfigError(f"{f.name} must be an integer, got {value!r}")
    if cfg.num_bands < 1:
        raise ConfigError("num_bands must be >= 1")
    if cfg.sample_count < 1:
        raise ConfigError("sample_count must be >= 1")
    if cfg.noise_octaves < 1:
        raise ConfigError("noise_octaves must be >= 1")
    if cfg.pointer_radius <= 0:
        raise ConfigError("pointer_radius must be > 0")
    if cfg.reference_size <= 0:
        raise ConfigError("reference_size must be > 0")
    if not 0.0 <= cfg.hue_smoothing <= 1.0:
        raise ConfigError("hue_smoothing must be within [0, 1]")


def load_config(path: str | Path, base: LoopConfig | None = None) -> LoopConfig:
    """Load a JSON object of overrides on top of ``base`` (defaults if omitted)."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"{p}: invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: expected a JSON object")
    return (base or LoopConfig()).with_overrides(**data)
