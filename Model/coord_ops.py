# Model/coord_ops.py
from __future__ import annotations
from dataclasses import dataclass

Point = tuple[float, float]


@dataclass(frozen=True)
class DisplayRect:
    # On-screen rectangle the image surface is drawn into (widget coordinates)
    left: float
    top: float
    width: float
    height: float


def _scale_factors(display_rect: DisplayRect, native_width: float, native_height: float) -> tuple[float, float]:
    # Native pixels per displayed pixel. Nothing is displayed on an empty rect, so 1.0 is as good as any.
    sx = native_width / display_rect.width if display_rect.width > 0 else 1.0
    sy = native_height / display_rect.height if display_rect.height > 0 else 1.0
    return sx, sy


def to_image_space(
    pointer_x: float,
    pointer_y: float,
    display_rect: DisplayRect,
    native_width: float,
    native_height: float,
) -> Point:
    """
    Maps a pointer position (widget coordinates) to image-pixel coordinates.

    The display rectangle may be scaled relative to the raster, so the scale is
    computed per axis and per call: the rectangle can change between two events
    whenever the widget is resized. Results outside the image are returned as
    they are, callers decide whether to clamp or ignore them.
    """
    sx, sy = _scale_factors(display_rect, native_width, native_height)
    x = (float(pointer_x) - display_rect.left) * sx
    y = (float(pointer_y) - display_rect.top) * sy
    return (x, y)


def hit_radius_to_image_space(
    radius: float,
    display_rect: DisplayRect,
    native_width: float,
    native_height: float,
) -> float:
    # The grab radius is defined on screen; scale it like the pointer so the same
    # on-screen distance grabs a vertex no matter how large the image is displayed.
    sx, sy = _scale_factors(display_rect, native_width, native_height)
    return radius * max(sx, sy)


def aspect_fit_rect(native_width: float, native_height: float, area_width: float, area_height: float) -> DisplayRect:
    # Largest rectangle with the image's aspect ratio that fits the area, centered
    if native_width <= 0 or native_height <= 0 or area_width <= 0 or area_height <= 0:
        return DisplayRect(0.0, 0.0, 0.0, 0.0)
    s = min(area_width / native_width, area_height / native_height)
    w, h = native_width * s, native_height * s
    return DisplayRect((area_width - w) / 2.0, (area_height - h) / 2.0, w, h)
