# Model/config.py
"""
Static defaults shared by the model, the renderer and the GUI.

Colors are plain RGBA tuples so that the model stays free of Qt; the View
turns them into QColor objects when painting.
"""
from dataclasses import dataclass

RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class CropStyle:
    stroke_rgba: RGBA = (25, 118, 210, 255)      # polygon edges
    fill_rgba: RGBA = (25, 118, 210, 51)         # translucent preview, ~20%
    stroke_width: float = 2.0
    handle_radius: float = 6.0
    handle_rgba: RGBA = (25, 118, 210, 255)
    outline_rgba: RGBA = (255, 255, 255, 255)    # keeps handles visible on dark images
    outline_width: float = 2.0


DEFAULT_STYLE = CropStyle()

# Grab radius around a vertex, in display (screen) pixels
HIT_RADIUS_PX = 10.0

# A polygon needs at least three vertices to enclose an area
MIN_POLYGON_POINTS = 3

DEFAULT_RESULT_NAME = "cropped-image.png"

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif", ".tiff", ".webp"}

# Status line colors: error = orange, info = light grey, ok = green
STATUS_COLORS = {
    "error": "#ff9f1a",
    "info": "#d8d8d8",
    "ok": "#6bd66b",
}
