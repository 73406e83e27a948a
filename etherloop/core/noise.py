from __future__ import annotations

import numpy as np


def _fade(t):
    # Perlin's quintic fade curve
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _grad(h, x, y, z):
    # 12 cube-edge gradients selected by the low four hash bits
    h = h & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, z))
    return np.where(h & 1, -u, u) + np.where(h & 2, -v, v)


def _lerp(a, b, t):
    return a + t * (b - a)


class NoiseField:
    """Seeded 3D gradient noise summed over octaves, returned in [0, 1].

    Identical inputs always give identical outputs for the same seed, and the
    field is continuous in all three coordinates.
    """

    def __init__(self, seed: int = 0, octaves: int = 4, falloff: float = 0.5):
        self.seed = int(seed)
        self.octaves = max(1, int(octaves))
        self.falloff = float(falloff)
        rng = np.random.default_rng(self.seed)
        perm = rng.permutation(256).astype(np.int64)
        self._perm = np.concatenate((perm, perm))

    def _perlin(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        p = self._perm
        fx, fy, fz = np.floor(x), np.floor(y), np.floor(z)
        xi = fx.astype(np.int64) & 255
        yi = fy.astype(np.int64) & 255
        zi = fz.astype(np.int64) & 255
        x, y, z = x - fx, y - fy, z - fz
        u, v, w = _fade(x), _fade(y), _fade(z)

        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        x1 = _lerp(_grad(p[aa], x, y, z), _grad(p[ba], x - 1, y, z), u)
        x2 = _lerp(_grad(p[ab], x, y - 1, z), _grad(p[bb], x - 1, y - 1, z), u)
        y1 = _lerp(x1, x2, v)
        x1 = _lerp(_grad(p[aa + 1], x, y, z - 1), _grad(p[ba + 1], x - 1, y, z - 1), u)
        x2 = _lerp(_grad(p[ab + 1], x, y - 1, z - 1), _grad(p[bb + 1], x - 1, y - 1, z - 1), u)
        y2 = _lerp(x1, x2, v)
        return _lerp(y1, y2, w)

    def sample(self, x, y, z) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)
        x, y, z = np.broadcast_arrays(x, y, z)
        total = np.zeros(x.shape, dtype=np.float64)
        amplitude = 1.0
        frequency = 1.0
        max_amp = 0.0
        for _ in range(self.octaves):
            total += amplitude * self._perlin(x * frequency, y * frequency, z * frequency)
            max_amp += amplitude
            frequency *= 2.0
            amplitude *= self.falloff
        if max_amp > 0:
            total /= max_amp
        return np.clip(0.5 + 0.5 * total, 0.0, 1.0)

    def __call__(self, x: float, y: float, z: float) -> float:
        return float(self.sample(x, y, z))
