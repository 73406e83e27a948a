from __future__ import annotations

import colorsys
from typing import Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from etherloop.core.config import LoopConfig
from etherloop.core.engine import Frame


def clamp01(x: float) -> float:
    return min(1.0, max(0.0, float(x)))


def hsb_to_rgb(hue: float, saturation: float, brightness: float) -> Tuple[int, int, int]:
    """HSB with hue in degrees and saturation/brightness in 0..100 to 8-bit RGB."""
    r, g, b = colorsys.hsv_to_rgb(
        (hue % 360.0) / 360.0,
        clamp01(saturation / 100.0),
        clamp01(brightness / 100.0),
    )
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def hsba_to_rgba(hue: float, saturation: float, brightness: float, alpha: float) -> Tuple[int, int, int, int]:
    r, g, b = hsb_to_rgb(hue, saturation, brightness)
    return (r, g, b, int(round(clamp01(alpha) * 255)))


def _polyline_xy(points: np.ndarray, scale: float) -> list:
    return [(float(x) * scale, float(y) * scale) for x, y in points]


def render_frame(
    frame: Frame,
    config: LoopConfig,
    supersample: int = 1,
    background: Sequence[float] | None = None,
) -> Image.Image:
    """Stroke every band of ``frame`` onto a freshly cleared RGB image.

    Bands are drawn in index order so later bands overlay earlier ones.
    With ``supersample`` > 1 the frame is drawn larger and downscaled.
    """
    view = frame.view
    ss = max(1, int(supersample))
    w = max(1, view.width)
    h = max(1, view.height)
    bg = hsb_to_rgb(*(background if background is not None else config.background))
    img = Image.new("RGB", (w * ss, h * ss), color=bg)
    if frame.is_empty or view.width <= 0 or view.height <= 0:
        return img.resize((w, h), Image.LANCZOS) if ss > 1 else img

    draw = ImageDraw.Draw(img, "RGBA")
    width = max(1, int(round(config.stroke_weight * view.scale * ss)))
    for band in frame.bands:
        if len(band.points) < 2:
            continue
        xy = _polyline_xy(view.local_to_surface(band.points), ss)
        color = hsba_to_rgba(band.hue, config.saturation, config.brightness, band.alpha)
        draw.line(xy, fill=color, width=width, joint="curve")

    if ss > 1:
        img = img.resize((w, h), Image.LANCZOS)
    return img
