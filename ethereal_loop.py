# -*- coding: utf-8 -*-
"""
Ethereal Loop
Bands of light drift around an SVG outline, bent by noise, waves and the mouse.

Run:   python ethereal_loop.py --svg logo.svg
Keys:  S starts/stops recording, F toggles fullscreen, Esc quits
"""
import argparse
import logging
import sys
from pathlib import Path

from PIL import Image
from PySide6.QtCore import Qt, QThread, QTimer, Signal
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QApplication, QLabel, QMessageBox, QSizePolicy, QWidget, QVBoxLayout

from etherloop.core.config import ConfigError, LoopConfig, load_config
from etherloop.core.engine import LoopEngine
from etherloop.core.outline import load_outline
from etherloop.core.pointer import PointerInput
from etherloop.utils.frame_loop import FrameLoop
from etherloop.utils.logging_config import setup_logging
from etherloop.utils.recorder import FORMATS, FrameRecorder, RecorderError

logger = logging.getLogger("etherloop.app")


class ExportWorker(QThread):
    # packages the recorded frames off the render thread
    error = Signal(str)
    done = Signal(str)

    def __init__(self, recorder: FrameRecorder, frames):
        super().__init__()
        self.recorder = recorder
        self.frames = frames

    def run(self):
        try:
            out = self.recorder.export(self.frames)
        except RecorderError as e:
            logger.exception("Export failed")
            self.error.emit(str(e))
            return
        self.done.emit(str(out))


class LoopCanvas(QLabel):
    def __init__(self, pointer: PointerInput):
        super().__init__()
        self.pointer = pointer
        self.setMouseTracking(True)
        self.setAlignment(Qt.AlignCenter)
        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self.setMinimumSize(200, 200)

    def mouseMoveEvent(self, e):
        p = e.position()
        self.pointer.move(p.x(), p.y())
        super().mouseMoveEvent(e)

    def mousePressEvent(self, e):
        if e.button() == Qt.LeftButton:
            p = e.position()
            self.pointer.press(p.x(), p.y())
        super().mousePressEvent(e)

    def mouseReleaseEvent(self, e):
        if e.button() == Qt.LeftButton:
            self.pointer.release()
        super().mouseReleaseEvent(e)

    def leaveEvent(self, e):
        self.pointer.leave()
        super().leaveEvent(e)


class MainWindow(QWidget):
    def __init__(self, loop: FrameLoop, fps: int = 60):
        super().__init__()
        self.loop = loop
        self.workers = []
        self.setWindowTitle("Ethereal Loop")
        self.resize(900, 900)

        self.canvas = LoopCanvas(loop.pointer)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.canvas)

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.on_tick)
        self.timer.start(max(1, int(1000 / max(1, fps))))

    def on_tick(self):
        # a resize between ticks only changes the size read here
        w, h = self.canvas.width(), self.canvas.height()
        img = self.loop.tick(w, h)
        self.canvas.setPixmap(QPixmap.fromImage(self.qimage_from_pil(img)))

    def keyPressEvent(self, e):
        if e.key() == Qt.Key_S:
            self.toggle_recording()
        elif e.key() == Qt.Key_F:
            if self.isFullScreen():
                self.showNormal()
            else:
                self.showFullScreen()
        elif e.key() == Qt.Key_Escape:
            self.close()
        else:
            super().keyPressEvent(e)

    def toggle_recording(self):
        rec = self.loop.recorder
        if rec is None:
            return
        if not rec.is_recording:
            rec.start()
            self.setWindowTitle("Ethereal Loop [REC]")
            return
        frames = rec.drain()
        self.setWindowTitle("Ethereal Loop")
        if not frames:
            return
        worker = ExportWorker(rec, frames)
        worker.done.connect(lambda path: logger.info("Export ready: %s", path))
        worker.error.connect(self.on_export_error)
        worker.finished.connect(lambda: self.workers.remove(worker))
        self.workers.append(worker)
        worker.start()

    def on_export_error(self, msg):
        QMessageBox.warning(self, "Export failed", msg)

    def closeEvent(self, e):
        self.timer.stop()
        for w in list(self.workers):
            w.wait()
        super().closeEvent(e)

    @staticmethod
    def qimage_from_pil(pil_img: Image.Image) -> QImage:
        rgb = pil_img.convert('RGBA')
        data = rgb.tobytes('raw', 'RGBA')
        return QImage(data, rgb.width, rgb.height, QImage.Format_RGBA8888).copy()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Noise-driven contour bands around an SVG outline.")
    ap.add_argument("--svg", default="logo.svg", help="SVG file; the first <path> is used")
    ap.add_argument("--config", help="JSON file with parameter overrides")
    ap.add_argument("--fps", type=int, default=60, help="display refresh rate for the window")
    ap.add_argument("--supersample", type=int, default=1, help="render at N x size and downscale")
    ap.add_argument("--format", choices=FORMATS, default="tar", help="export format for recordings")
    ap.add_argument("--record-fps", type=int, default=30, help="frame rate written to exports")
    ap.add_argument("--out-dir", default=".", help="directory for recordings")
    ap.add_argument("--headless", action="store_true", help="render without a window and export")
    ap.add_argument("--frames", type=int, default=300, help="frames to render in headless mode")
    ap.add_argument("--size", default="800x800", help="WIDTHxHEIGHT for headless mode")
    ap.add_argument("--out", help="output file for headless mode")
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument("--log-file")
    return ap


def parse_size(text: str):
    try:
        w, h = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"size must look like 800x600, got {text!r}")
    return w, h


def run_headless(loop: FrameLoop, frames: int, size, out) -> int:
    w, h = size
    loop.recorder.start()
    loop.run(frames, w, h)
    try:
        path = loop.recorder.stop(out)
    except RecorderError:
        logger.exception("Export failed")
        return 1
    if path is None:
        logger.warning("Nothing recorded")
        return 1
    print(f"[OK] {frames} frames written to {path}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        config = load_config(args.config) if args.config else LoopConfig()
    except (OSError, ConfigError) as e:
        logger.error("Config %s rejected: %s", args.config, e)
        return 2

    ring = load_outline(args.svg, config.sample_count)
    engine = LoopEngine(ring, config)
    recorder = FrameRecorder(Path(args.out_dir), fmt=args.format, fps=args.record_fps)
    loop = FrameLoop(engine, PointerInput(), recorder, supersample=args.supersample)

    if args.headless:
        try:
            size = parse_size(args.size)
        except argparse.ArgumentTypeError as e:
            logger.error("%s", e)
            return 2
        return run_headless(loop, args.frames, size, args.out)

    app = QApplication(sys.argv[:1])
    w = MainWindow(loop, fps=args.fps)
    w.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
