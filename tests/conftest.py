"""
Shared fixtures for the etherloop test suite.
"""

import math

import numpy as np
import pytest

from etherloop.core.config import LoopConfig
from etherloop.core.noise import NoiseField
from etherloop.core.outline import OutlineRing


@pytest.fixture
def config():
    """Stock parameters."""
    return LoopConfig()


@pytest.fixture
def small_config():
    """Few bands, so per-frame work stays cheap."""
    return LoopConfig(num_bands=5)


@pytest.fixture
def noise():
    return NoiseField(seed=0)


@pytest.fixture
def diamond_ring():
    """Four points at distance 10 around the origin."""
    return OutlineRing([(10, 0), (0, 10), (-10, 0), (0, -10)])


@pytest.fixture
def circle_ring():
    n = 120
    a = 2 * math.pi * np.arange(n) / n
    return OutlineRing(np.column_stack((200 * np.cos(a), 200 * np.sin(a))))
