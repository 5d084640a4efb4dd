# Model/clip_ops.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

import cv2
import numpy as np

from Model.config import MIN_POLYGON_POINTS
from Model.image_ops import encode_png, png_bytes_to_data_url

logger = logging.getLogger(__name__)

Point = tuple[float, float]


@dataclass(frozen=True, eq=False)
class CroppedResult:
    pixels: np.ndarray              # (h, w, 4) RGBA, transparent outside the polygon
    origin: tuple[int, int]         # top-left corner of the bounding box in the source image
    png_bytes: bytes = field(repr=False)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def data_url(self) -> str:
        return png_bytes_to_data_url(self.png_bytes)

    def save(self, path: str | Path) -> Path:
        out = Path(path)
        out.write_bytes(self.png_bytes)
        logger.info("[SAVE] %dx%d crop written to %s", self.width, self.height, out)
        return out


def bounding_box(points: Sequence[Point]) -> tuple[float, float, float, float]:
    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]
    return min(xs), min(ys), max(xs), max(ys)


def rect_points(x: float, y: float, width: float, height: float) -> list[Point]:
    # Rectangle crop = four-vertex polygon, clockwise from the top-left corner
    return [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]


def polygon_mask(points: Sequence[Point], width: int, height: int, origin: tuple[float, float] = (0.0, 0.0)) -> np.ndarray:
    """
    Rasterizes the closed polygon into a (height, width) uint8 mask, 255 inside.

    Points are translated by -origin first, so the mask is expressed relative
    to the top-left corner of the output raster.
    """
    mask = np.zeros((height, width), dtype=np.uint8)
    if len(points) < MIN_POLYGON_POINTS:
        return mask
    ox, oy = origin
    pts = np.array([(p[0] - ox, p[1] - oy) for p in points], dtype=np.float64)
    cv2.fillPoly(mask, [np.round(pts).astype(np.int32)], 255)
    return mask


def extract_polygon(image: np.ndarray, points: Sequence[Point]) -> Optional[CroppedResult]:
    """
    Cuts the polygon out of an RGBA image.

    The output is sized to the polygon's bounding box. Pixels inside the box
    but outside the polygon (or outside the source image) are fully
    transparent. Returns None when there are fewer than three points or the
    bounding box has no area; neither the image nor the points are modified.
    """
    pts = [(float(x), float(y)) for (x, y) in points]
    if len(pts) < MIN_POLYGON_POINTS:
        logger.warning("[CROP] need at least %d points, got %d", MIN_POLYGON_POINTS, len(pts))
        return None

    min_x, min_y, max_x, max_y = bounding_box(pts)
    w = int(round(max_x - min_x))
    h = int(round(max_y - min_y))
    if w <= 0 or h <= 0:
        logger.info("[CROP] degenerate polygon (bbox %.1f x %.1f), nothing to crop", max_x - min_x, max_y - min_y)
        return None

    ox, oy = int(round(min_x)), int(round(min_y))
    out = np.zeros((h, w, 4), dtype=np.uint8)

    # Copy the part of the bounding box that overlaps the source image
    ih, iw = image.shape[:2]
    sx0, sy0 = max(ox, 0), max(oy, 0)
    sx1, sy1 = min(ox + w, iw), min(oy + h, ih)
    if sx1 > sx0 and sy1 > sy0:
        out[sy0 - oy:sy1 - oy, sx0 - ox:sx1 - ox] = image[sy0:sy1, sx0:sx1, :4]

    mask = polygon_mask(pts, w, h, origin=(ox, oy))
    out[mask == 0] = 0

    out.flags.writeable = False
    logger.info("[CROP] %d points -> %dx%d at (%d, %d)", len(pts), w, h, ox, oy)
    return CroppedResult(pixels=out, origin=(ox, oy), png_bytes=encode_png(out))
