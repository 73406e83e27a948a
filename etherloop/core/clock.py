from __future__ import annotations

from dataclasses import dataclass, replace

from .config import LoopConfig


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp01(x: float) -> float:
    return min(1.0, max(0.0, x))


@dataclass(frozen=True)
class AnimationState:
    elapsed: float = 0.0
    wave_phase: float = 0.0
    noise_time: float = 0.0
    color_hue: float = 212.0
    frame: int = 0

    @property
    def progress(self) -> float:
        return clamp01(self.elapsed)

    @classmethod
    def initial(cls, config: LoopConfig) -> "AnimationState":
        return cls(color_hue=config.hue_released)


def advance(state: AnimationState, config: LoopConfig, pressed: bool) -> AnimationState:
    """Return the state one frame later.

    The pressed flag only changes how fast each accumulator grows; no
    accumulator is ever set to a mode-dependent value, so toggling the pointer
    never makes the shape jump. ``color_hue`` tracks its target exponentially.
    """
    wave_rate = 0.0 if pressed else config.wave_freq_time
    noise_rate = config.noise_time_pressed if pressed else config.noise_time_scale
    target_hue = config.hue_pressed if pressed else config.hue_released
    return replace(
        state,
        elapsed=state.elapsed + config.speed,
        wave_phase=state.wave_phase + wave_rate * config.speed,
        noise_time=state.noise_time + noise_rate * config.speed,
        color_hue=lerp(state.color_hue, target_hue, config.hue_smoothing),
        frame=state.frame + 1,
    )


class AnimationClock:
    def __init__(self, config: LoopConfig, state: AnimationState | None = None):
        self.config = config
        self.state = state if state is not None else AnimationState.initial(config)

    def advance(self, pressed: bool) -> AnimationState:
        self.state = advance(self.state, self.config, pressed)
        return self.state

    @property
    def elapsed(self) -> float:
        return self.state.elapsed

    @property
    def wave_phase(self) -> float:
        return self.state.wave_phase

    @property
    def noise_time(self) -> float:
        return self.state.noise_time

    @property
    def color_hue(self) -> float:
        return self.state.color_hue

    @property
    def progress(self) -> float:
        return self.state.progress

    @property
    def frame(self) -> int:
        return self.state.frame
