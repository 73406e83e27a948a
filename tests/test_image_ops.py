"""Tests for colour conversion, frame rendering and the frame loop."""

import numpy as np
import pytest

from etherloop.core.config import LoopConfig
from etherloop.core.engine import LoopEngine
from etherloop.core.outline import OutlineRing
from etherloop.core.pointer import PointerInput
from etherloop.utils.frame_loop import FrameLoop
from etherloop.utils.image_ops import hsb_to_rgb, hsba_to_rgba, render_frame
from etherloop.utils.recorder import FrameRecorder


class TestColor:
    @pytest.mark.parametrize("hsb,rgb", [
        ((0, 0, 100), (255, 255, 255)),
        ((0, 0, 0), (0, 0, 0)),
        ((0, 100, 100), (255, 0, 0)),
        ((120, 100, 100), (0, 255, 0)),
        ((240, 100, 100), (0, 0, 255)),
        ((360, 100, 100), (255, 0, 0)),
    ])
    def test_hsb_to_rgb(self, hsb, rgb):
        assert hsb_to_rgb(*hsb) == rgb

    def test_alpha_is_clamped(self):
        assert hsba_to_rgba(0, 0, 100, 1.7)[3] == 255
        assert hsba_to_rgba(0, 0, 100, -1)[3] == 0


class TestRenderFrame:
    def test_empty_ring_draws_only_background(self, small_config):
        frame = LoopEngine(OutlineRing.empty(), small_config).step(64, 48)
        img = render_frame(frame, small_config)
        assert img.size == (64, 48)
        arr = np.asarray(img)
        assert np.all(arr == 255)

    def test_bands_leave_ink(self, circle_ring, small_config):
        frame = LoopEngine(circle_ring, small_config).step(400, 400)
        img = render_frame(frame, small_config)
        arr = np.asarray(img).astype(int)
        assert img.mode == "RGB"
        assert (arr.sum(axis=2) < 700).sum() > 100

    def test_supersample_keeps_output_size(self, circle_ring, small_config):
        frame = LoopEngine(circle_ring, small_config).step(120, 90)
        assert render_frame(frame, small_config, supersample=3).size == (120, 90)

    def test_background_override(self, small_config):
        frame = LoopEngine(OutlineRing.empty(), small_config).step(8, 8)
        img = render_frame(frame, small_config, background=(0, 0, 0))
        assert img.getpixel((4, 4)) == (0, 0, 0)

    def test_zero_size_surface(self, circle_ring, small_config):
        frame = LoopEngine(circle_ring, small_config).step(0, 0)
        assert render_frame(frame, small_config).size == (1, 1)


class TestFrameLoop:
    def test_run_captures_every_tick(self, circle_ring, tmp_path):
        cfg = LoopConfig(num_bands=3)
        rec = FrameRecorder(tmp_path)
        loop = FrameLoop(LoopEngine(circle_ring, cfg), PointerInput(), rec)
        rec.start()
        seen = []
        assert loop.run(4, 64, 64, on_frame=lambda i, img: seen.append((i, img.size))) == 4
        assert seen == [(i, (64, 64)) for i in range(4)]
        assert rec.frame_count == 4
        assert loop.last_frame.index == 4

    def test_pointer_input_feeds_engine(self, circle_ring):
        pointer = PointerInput()
        loop = FrameLoop(LoopEngine(circle_ring, LoopConfig(num_bands=2)), pointer)
        loop.tick(200, 200)
        phase = loop.engine.state.wave_phase
        pointer.press(100, 100)
        loop.tick(200, 200)
        assert loop.engine.state.wave_phase == phase
        assert loop.last_frame.pointer.pressed

    def test_tick_without_recorder(self, circle_ring):
        loop = FrameLoop(LoopEngine(circle_ring, LoopConfig(num_bands=1)))
        assert loop.tick(32, 32).size == (32, 32)
