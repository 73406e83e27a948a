from __future__ import annotations

import logging
from typing import Callable, Optional

from PIL import Image

from etherloop.core.engine import Frame, LoopEngine
from etherloop.core.pointer import PointerInput
from etherloop.utils.image_ops import render_frame
from etherloop.utils.recorder import FrameRecorder

logger = logging.getLogger(__name__)


class FrameLoop:
    """One tick = advance the engine, render the bands, capture if recording.

    The host decides the cadence: a Qt timer calls ``tick`` once per display
    frame, ``run`` calls it back to back for offline rendering. Each tick runs
    to completion before the next one starts.
    """

    def __init__(
        self,
        engine: LoopEngine,
        pointer: PointerInput | None = None,
        recorder: FrameRecorder | None = None,
        supersample: int = 1,
    ):
        self.engine = engine
        self.pointer = pointer or PointerInput()
        self.recorder = recorder
        self.supersample = supersample
        self.last_frame: Optional[Frame] = None

    def tick(self, width: int, height: int) -> Image.Image:
        frame = self.engine.step(width, height, self.pointer.snapshot())
        img = render_frame(frame, self.engine.config, supersample=self.supersample)
        self.last_frame = frame
        if self.recorder is not None:
            self.recorder.capture(img)
        return img

    def run(
        self,
        frames: int,
        width: int,
        height: int,
        on_frame: Callable[[int, Image.Image], None] | None = None,
    ) -> int:
        for i in range(max(0, int(frames))):
            img = self.tick(width, height)
            if on_frame is not None:
                on_frame(i, img)
        logger.debug("Rendered %d frames at %dx%d", frames, width, height)
        return max(0, int(frames))
