from __future__ import annotations

import math
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

Point2 = Tuple[float, float]

_NUMBER_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
_SEP_RE = re.compile(r"[\s,]*")
_COMMANDS = "MmLlHhVvCcSsQqTtAaZz"


class OutlineError(ValueError):
    pass


class _PathReader:
    def __init__(self, d: str):
        self.d = d
        self.pos = 0

    def _skip(self) -> None:
        self.pos = _SEP_RE.match(self.d, self.pos).end()

    def at_end(self) -> bool:
        self._skip()
        return self.pos >= len(self.d)

    def command(self) -> Optional[str]:
        self._skip()
        if self.pos < len(self.d) and self.d[self.pos] in _COMMANDS:
            ch = self.d[self.pos]
            self.pos += 1
            return ch
        return None

    def number(self) -> float:
        self._skip()
        m = _NUMBER_RE.match(self.d, self.pos)
        if m is None:
            raise OutlineError(f"expected a number at offset {self.pos} in path data")
        self.pos = m.end()
        value = float(m.group(0))
        if not math.isfinite(value):
            raise OutlineError(f"number out of range at offset {m.start()} in path data")
        return value

    def flag(self) -> bool:
        # arc flags may be packed without separators ("a1 1 0 011 1")
        self._skip()
        if self.pos < len(self.d) and self.d[self.pos] in "01":
            ch = self.d[self.pos]
            self.pos += 1
            return ch == "1"
        raise OutlineError(f"expected an arc flag at offset {self.pos} in path data")


def _cubic(p0, p1, p2, p3, steps: int) -> List[Point2]:
    t = np.linspace(0.0, 1.0, steps + 1)[1:, None]
    a, b, c, d = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    mt = 1.0 - t
    pts = mt**3 * a + 3 * mt**2 * t * b + 3 * mt * t**2 * c + t**3 * d
    return [tuple(p) for p in pts]


def _quadratic(p0, p1, p2, steps: int) -> List[Point2]:
    t = np.linspace(0.0, 1.0, steps + 1)[1:, None]
    a, b, c = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2))
    mt = 1.0 - t
    pts = mt**2 * a + 2 * mt * t * b + t**2 * c
    return [tuple(p) for p in pts]


def _arc(p0: Point2, rx: float, ry: float, phi_deg: float, large: bool, sweep: bool, p1: Point2, steps: int) -> List[Point2]:
    """Elliptical arc from endpoint parameters (SVG 1.1 appendix F.6.5)."""
    if p0 == p1:
        return []
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0:
        return [p1]
    phi = math.radians(phi_deg % 360.0)
    cphi, sphi = math.cos(phi), math.sin(phi)
    dx2 = (p0[0] - p1[0]) / 2.0
    dy2 = (p0[1] - p1[1]) / 2.0
    x1p = cphi * dx2 + sphi * dy2
    y1p = -sphi * dx2 + cphi * dy2

    qx, qy = x1p / rx, y1p / ry
    lam = qx * qx + qy * qy
    if lam > 1.0:
        s = math.sqrt(lam)
        rx *= s
        ry *= s

    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den)) if den > 0 else 0.0
    if large == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx
    cx = cphi * cxp - sphi * cyp + (p0[0] + p1[0]) / 2.0
    cy = sphi * cxp + cphi * cyp + (p0[1] + p1[1]) / 2.0

    def angle(ux, uy, vx, vy):
        return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)

    ux, uy = (x1p - cxp) / rx, (y1p - cyp) / ry
    vx, vy = (-x1p - cxp) / rx, (-y1p - cyp) / ry
    theta1 = angle(1.0, 0.0, ux, uy)
    dtheta = angle(ux, uy, vx, vy)
    if not sweep and dtheta > 0:
        dtheta -= 2 * math.pi
    elif sweep and dtheta < 0:
        dtheta += 2 * math.pi
    if not all(math.isfinite(v) for v in (cx, cy, rx, ry, theta1, dtheta)):
        raise OutlineError("arc parameters overflow")

    n = max(2, int(math.ceil(steps * abs(dtheta) / (math.pi / 2))))
    out = []
    for i in range(1, n + 1):
        a = theta1 + dtheta * i / n
        ex, ey = rx * math.cos(a), ry * math.sin(a)
        out.append((cphi * ex - sphi * ey + cx, sphi * ex + cphi * ey + cy))
    out[-1] = p1
    return out


def _dedupe(points: List[Point2], eps: float = 1e-12) -> List[Point2]:
    if not points:
        return []
    out = [points[0]]
    for p in points[1:]:
        if (p[0] - out[-1][0]) ** 2 + (p[1] - out[-1][1]) ** 2 > eps:
            out.append(p)
    return out


def parse_path_d(d: str, curve_steps: int = 24) -> List[np.ndarray]:
    """Flatten SVG path data into one ``(n, 2)`` array per subpath.

    Curves are split into ``curve_steps`` segments, arcs into ``curve_steps``
    per quarter turn.
    """
    reader = _PathReader(d)
    polys: List[np.ndarray] = []
    curr: List[Point2] = []
    current: Point2 = (0.0, 0.0)
    start: Point2 = (0.0, 0.0)
    last_ctrl: Optional[Point2] = None
    last_cmd = ""
    cmd: Optional[str] = None

    def flush() -> None:
        nonlocal curr
        pts = _dedupe(curr)
        if len(pts) >= 2:
            polys.append(np.array(pts, dtype=np.float64))
        curr = []

    def extend(points: List[Point2]) -> None:
        if not curr:
            curr.append(current)
        curr.extend(points)

    while not reader.at_end():
        c = reader.command()
        if c is not None:
            cmd = c
        elif cmd is None:
            raise OutlineError(f"path data must start with a command (offset {reader.pos})")

        rel = cmd.islower()
        op = cmd.upper()
        ox, oy = current if rel else (0.0, 0.0)

        if op == "Z":
            if curr:
                curr.append(start)
            flush()
            current = start
            last_ctrl = None
            last_cmd = "Z"
            cmd = None
            continue

        if op == "M":
            x, y = reader.number(), reader.number()
            flush()
            current = (ox + x, oy + y)
            start = current
            curr = [current]
            # further pairs after a moveto are implicit linetos
            cmd = "l" if rel else "L"
            last_ctrl = None
            last_cmd = "M"
            continue

        if op == "L":
            x, y = reader.number(), reader.number()
            nxt = (ox + x, oy + y)
            extend([nxt])
            ctrl = None
        elif op == "H":
            x = reader.number()
            nxt = (ox + x, current[1])
            extend([nxt])
            ctrl = None
        elif op == "V":
            y = reader.number()
            nxt = (current[0], oy + y)
            extend([nxt])
            ctrl = None
        elif op == "C":
            c1 = (ox + reader.number(), oy + reader.number())
            c2 = (ox + reader.number(), oy + reader.number())
            nxt = (ox + reader.number(), oy + reader.number())
            extend(_cubic(current, c1, c2, nxt, curve_steps))
            ctrl = c2
        elif op == "S":
            c1 = current
            if last_cmd in ("C", "S") and last_ctrl is not None:
                c1 = (2 * current[0] - last_ctrl[0], 2 * current[1] - last_ctrl[1])
            c2 = (ox + reader.number(), oy + reader.number())
            nxt = (ox + reader.number(), oy + reader.number())
            extend(_cubic(current, c1, c2, nxt, curve_steps))
            ctrl = c2
        elif op == "Q":
            c1 = (ox + reader.number(), oy + reader.number())
            nxt = (ox + reader.number(), oy + reader.number())
            extend(_quadratic(current, c1, nxt, curve_steps))
            ctrl = c1
        elif op == "T":
            c1 = current
            if last_cmd in ("Q", "T") and last_ctrl is not None:
                c1 = (2 * current[0] - last_ctrl[0], 2 * current[1] - last_ctrl[1])
            nxt = (ox + reader.number(), oy + reader.number())
            extend(_quadratic(current, c1, nxt, curve_steps))
            ctrl = c1
        elif op == "A":
            rx, ry, rot = reader.number(), reader.number(), reader.number()
            large, sweep = reader.flag(), reader.flag()
            nxt = (ox + reader.number(), oy + reader.number())
            extend(_arc(current, rx, ry, rot, large, sweep, nxt, curve_steps))
            ctrl = None
        else:  # pragma: no cover
            raise OutlineError(f"unsupported path command {cmd!r}")

        current = nxt
        last_ctrl = ctrl
        last_cmd = op

    flush()
    return polys


def find_first_path_d(root: ET.Element) -> str:
    for elem in root.iter():
        tag = elem.tag.split("}")[-1] if isinstance(elem.tag, str) else ""
        if tag == "path":
            d = elem.attrib.get("d", "").strip()
            if not d:
                raise OutlineError("first <path> has no 'd' attribute")
            return d
    raise OutlineError("no <path> element found")


def load_first_path(svg_path: str | Path, curve_steps: int = 24) -> List[np.ndarray]:
    """Flattened subpaths of the first ``<path>`` element in an SVG file.

    Only the element's own path data is used; transforms are ignored.
    """
    try:
        tree = ET.parse(svg_path)
    except ET.ParseError as e:
        raise OutlineError(f"cannot parse SVG: {e}") from e
    d = find_first_path_d(tree.getroot())
    polys = parse_path_d(d, curve_steps=curve_steps)
    if not polys:
        raise OutlineError("path has no drawable segments")
    return polys
