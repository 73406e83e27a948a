from __future__ import annotations

import io
import logging
import tarfile
import time
from pathlib import Path
from typing import List, Optional

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

FORMATS = ("tar", "gif", "mp4")


class RecorderError(RuntimeError):
    pass


class FrameRecorder:
    """Collects rendered frames while recording and packages them on stop.

    ``start`` and ``stop`` are idempotent. Capturing has no effect on the
    animation itself; frames handed in while not recording are ignored.
    """

    def __init__(
        self,
        out_dir: str | Path = ".",
        name: str = "ethereal_loop",
        fmt: str = "tar",
        fps: int = 30,
        crf: int = 18,
    ):
        fmt = fmt.lower()
        if fmt not in FORMATS:
            raise ValueError(f"unknown export format {fmt!r}; expected one of {', '.join(FORMATS)}")
        self.out_dir = Path(out_dir)
        self.name = name
        self.fmt = fmt
        self.fps = max(1, int(fps))
        self.crf = crf
        self._frames: List[np.ndarray] = []
        self._recording = False

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def start(self) -> None:
        if self._recording:
            return
        self._frames = []
        self._recording = True
        logger.info("Recording started (%d fps, %s)", self.fps, self.fmt)

    def capture(self, image: Image.Image | np.ndarray) -> None:
        if not self._recording:
            return
        if not isinstance(image, Image.Image):
            image = Image.fromarray(np.asarray(image, dtype=np.uint8))
        image = image.convert("RGB")
        # a resize mid-recording must not break the sequence
        if self._frames:
            h, w = self._frames[0].shape[:2]
            if image.size != (w, h):
                image = image.resize((w, h), Image.BICUBIC)
        self._frames.append(np.array(image))

    def stop(self, path: str | Path | None = None) -> Optional[Path]:
        """Stop recording and export. Returns None if nothing was recorded."""
        if not self._recording:
            return None
        frames = self.drain()
        if not frames:
            return None
        return self.export(frames, path)

    def drain(self) -> List[np.ndarray]:
        """Stop recording and hand back the captured frames without exporting."""
        if not self._recording:
            return []
        self._recording = False
        frames, self._frames = self._frames, []
        logger.info("Recording stopped, %d frames captured", len(frames))
        return frames

    def toggle(self) -> Optional[Path]:
        if self._recording:
            return self.stop()
        self.start()
        return None

    def default_path(self) -> Path:
        stamp = time.strftime("%Y%m%d-%H%M%S")
        return self.out_dir / f"{self.name}-{stamp}.{self.fmt}"

    def export(self, frames: List[np.ndarray], path: str | Path | None = None) -> Path:
        out = Path(path) if path is not None else self.default_path()
        try:
            out.parent.mkdir(parents=True, exist_ok=True)
            if self.fmt == "tar":
                write_png_tar(out, frames)
            elif self.fmt == "gif":
                import imageio.v3 as iio
                iio.imwrite(out, frames, extension=".gif", duration=1000.0 / self.fps, loop=0)
            else:
                write_mp4(out, frames, self.fps, self.crf)
        except (OSError, ValueError, RuntimeError) as e:
            raise RecorderError(f"export to {out} failed: {e}") from e
        logger.info("Saved %d frames to %s", len(frames), out)
        return out


def write_png_tar(path: str | Path, frames: List[np.ndarray]) -> None:
    """Numbered PNG frames (0000000.png, 0000001.png, ...) in one tar archive."""
    with tarfile.open(path, "w") as tar:
        for i, fr in enumerate(frames):
            buf = io.BytesIO()
            Image.fromarray(fr, "RGB").save(buf, format="PNG")
            info = tarfile.TarInfo(name=f"{i:07d}.png")
            info.size = buf.tell()
            info.mtime = int(time.time())
            buf.seek(0)
            tar.addfile(info, buf)


def write_mp4(path: str | Path, frames: List[np.ndarray], fps: int, crf: int = 18) -> None:
    import imageio

    writer = imageio.get_writer(
        str(path),
        fps=fps,
        codec="libx264",
        quality=None,
        ffmpeg_log_level="error",
        pixelformat="yuv420p",
        macro_block_size=1,
        ffmpeg_params=["-crf", str(crf)],
    )
    try:
        for fr in frames:
            writer.append_data(fr)
    finally:
        writer.close()
