import base64
import logging
from pathlib import Path

import cv2
import numpy as np
from PyQt6.QtCore import QByteArray
from PyQt6.QtGui import QImage

from Model.config import ALLOWED_EXTENSIONS

logger = logging.getLogger(__name__)


class ImageLoadError(ValueError):
    """The selected file is not an image or cannot be decoded."""


def is_allowed_image(path: str) -> bool:
    return Path(path).suffix.lower() in ALLOWED_EXTENSIONS


def _to_uint8(arr: np.ndarray) -> np.ndarray:
    # 16 bit PNG/TIFF -> 8 bit, float images are assumed to be 0..1
    if arr.dtype == np.uint8:
        return arr
    if arr.dtype == np.uint16:
        return (arr // 257).astype(np.uint8)
    if np.issubdtype(arr.dtype, np.floating):
        return np.clip(arr * 255.0, 0, 255).astype(np.uint8)
    return np.clip(arr, 0, 255).astype(np.uint8)


def _cv_to_rgba(arr: np.ndarray) -> np.ndarray:
    # OpenCV hands back GRAY, BGR or BGRA depending on the file
    arr = _to_uint8(arr)
    if arr.ndim == 2:
        return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
    channels = arr.shape[2]
    if channels == 1:
        return cv2.cvtColor(arr[..., 0], cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
    return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)


def qimage_to_numpy_rgba(qimg: QImage) -> np.ndarray:
    # Always convert to RGBA8888 (one uniform format)
    src = qimg.convertToFormat(QImage.Format.Format_RGBA8888)
    w, h = src.width(), src.height()
    bytes_per_line = src.bytesPerLine()

    ptr = src.bits()
    ptr.setsize(bytes_per_line * h)
    arr = np.frombuffer(ptr, dtype=np.uint8).reshape((h, bytes_per_line))

    # Payload without the line padding: w*4
    return arr[:, :w * 4].reshape((h, w, 4)).copy()


def numpy_rgba_to_qimage(rgba: np.ndarray) -> QImage:
    h, w, _ = rgba.shape
    data = np.array(rgba, dtype=np.uint8, order="C")
    # QImage must not point at temporary memory -> copy()
    return QImage(data.data, w, h, 4 * w, QImage.Format.Format_RGBA8888).copy()


def decode_image_bytes(data: bytes) -> np.ndarray:
    """
    Decodes raw file bytes into a read-only RGBA uint8 array of shape (h, w, 4).

    OpenCV covers the usual raster formats; whatever it refuses (GIF on most
    builds) is handed to Qt's image plugins before giving up.
    """
    if not data:
        raise ImageLoadError("File is empty")

    buf = np.frombuffer(data, dtype=np.uint8)
    decoded = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if decoded is not None and decoded.size > 0:
        rgba = _cv_to_rgba(decoded)
    else:
        qimg = QImage.fromData(QByteArray(data))
        if qimg.isNull():
            raise ImageLoadError("Data is not a decodable image")
        rgba = qimage_to_numpy_rgba(qimg)

    rgba = np.ascontiguousarray(rgba)
    rgba.flags.writeable = False
    return rgba


def load_image_file(path: str) -> np.ndarray:
    if not is_allowed_image(path):
        raise ImageLoadError(f"Not a supported image file: {Path(path).name}")
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ImageLoadError(f"Could not read {path}: {e}") from e
    rgba = decode_image_bytes(data)
    logger.info("[LOAD] %s: size=%dx%d", path, rgba.shape[1], rgba.shape[0])
    return rgba


def encode_png(rgba: np.ndarray) -> bytes:
    # cv2 writes BGR(A) order
    ok, buf = cv2.imencode(".png", cv2.cvtColor(np.array(rgba, dtype=np.uint8), cv2.COLOR_RGBA2BGRA))
    if not ok:
        raise RuntimeError("PNG encode failed")
    return buf.tobytes()


def png_bytes_to_data_url(png_bytes: bytes) -> str:
    b64 = base64.b64encode(png_bytes).decode("ascii")
    return f"data:image/png;base64,{b64}"
