from typing import Sequence

from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QBrush, QColor, QImage, QPainter, QPainterPath, QPen

from Model.config import CropStyle, DEFAULT_STYLE

Point = tuple[float, float]


def _qcolor(rgba) -> QColor:
    r, g, b, a = rgba
    return QColor(r, g, b, a)


def render_polygon(base: QImage, points: Sequence[Point], style: CropStyle = DEFAULT_STYLE) -> QImage:
    """
    Draws the base image plus the current polygon onto a fresh surface.

    The surface has the base image's native size, so drawing coordinates are
    image-pixel coordinates. Order: image, translucent fill (more than two
    points), edges, vertex handles on top. Redrawn from scratch on every call,
    the same inputs always give the same pixels.
    """
    surface = QImage(base.size(), QImage.Format.Format_ARGB32_Premultiplied)
    surface.fill(Qt.GlobalColor.transparent)

    p = QPainter(surface)
    p.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    p.drawImage(0, 0, base)

    if points:
        path = QPainterPath(QPointF(points[0][0], points[0][1]))
        for (x, y) in points[1:]:
            path.lineTo(QPointF(x, y))

        # 1) Fill the preview region underneath the edges
        if len(points) > 2:
            path.closeSubpath()
            p.fillPath(path, QBrush(_qcolor(style.fill_rgba)))

        # 2) Edges
        pen = QPen(_qcolor(style.stroke_rgba), style.stroke_width)
        p.setPen(pen)
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawPath(path)

        # 3) Handles: filled circle with a light outline so they show on dark and light images
        p.setPen(QPen(_qcolor(style.outline_rgba), style.outline_width))
        p.setBrush(QBrush(_qcolor(style.handle_rgba)))
        r = style.handle_radius
        for (x, y) in points:
            p.drawEllipse(QPointF(x, y), r, r)

    p.end()
    return surface
