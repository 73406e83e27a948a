"""Core animation primitives for Ethereal Loop.

Modules:
- config: immutable animation parameters
- outline: arc-length resampling of the source outline into a centred ring
- noise: deterministic 3D smooth noise
- clock: append-only animation accumulators
- pointer: localized pointer attraction
- view: surface centring, rotation and scale
- contours: per-band closed polylines
- engine: one frame of bands from the pieces above
"""
