import os

# No display needed for painting / widgets
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import cv2
import numpy as np
import pytest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


def make_rgba(width: int, height: int) -> np.ndarray:
    # Opaque gradient, every pixel distinct enough to spot misplaced copies
    ys, xs = np.mgrid[0:height, 0:width]
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., 0] = (xs * 255 // max(1, width - 1)).astype(np.uint8)
    rgba[..., 1] = (ys * 255 // max(1, height - 1)).astype(np.uint8)
    rgba[..., 2] = 128
    rgba[..., 3] = 255
    return rgba


@pytest.fixture
def rgba_100():
    return make_rgba(100, 100)


@pytest.fixture
def png_file(tmp_path):
    rgba = make_rgba(64, 48)
    path = tmp_path / "sample.png"
    ok, buf = cv2.imencode(".png", cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA))
    assert ok
    path.write_bytes(buf.tobytes())
    return path, rgba
