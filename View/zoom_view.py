# zoom_view.py
from PyQt6.QtWidgets import QGraphicsPixmapItem, QGraphicsScene, QGraphicsView
from PyQt6.QtGui import QBrush, QColor, QImage, QPainter, QPixmap, QWheelEvent
from PyQt6.QtCore import Qt


class ResultView(QGraphicsView):
    # Shows the cropped result; the transparent area outside the polygon stays visible
    # against the dark background.
    def __init__(self, parent=None):
        super().__init__(parent)
        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setResizeAnchor(QGraphicsView.ViewportAnchor.AnchorViewCenter)
        self.setBackgroundBrush(QBrush(QColor(33, 33, 33)))
        self._item: QGraphicsPixmapItem | None = None
        self._user_zoomed = False
        self._scale_min = 0.05
        self._scale_max = 20.0

    # API for the controller
    def set_image(self, qimg: QImage):
        self.clear_image()
        self._item = self.scene().addPixmap(QPixmap.fromImage(qimg))
        self.scene().setSceneRect(self._item.boundingRect())
        self._user_zoomed = False
        self._fit()

    def clear_image(self):
        self.scene().clear()
        self._item = None
        self.resetTransform()

    def has_image(self) -> bool:
        return self._item is not None

    def wheelEvent(self, e: QWheelEvent):
        if self._item is None:
            return
        angle = e.angleDelta().y()
        if angle == 0:
            return
        # User zooms -> stop fitting on resize
        self._user_zoomed = True
        factor = 1.0015 ** angle
        m = self.transform()
        current = (m.m11() + m.m22()) * 0.5
        new = max(self._scale_min, min(self._scale_max, current * factor))
        factor = new / current
        self.scale(factor, factor)

    def resizeEvent(self, ev):
        super().resizeEvent(ev)
        # Keep the result "fit" only as long as the user has not zoomed
        if not self._user_zoomed:
            self._fit()

    def _fit(self):
        if self._item is None:
            return
        self.resetTransform()
        self.fitInView(self._item, Qt.AspectRatioMode.KeepAspectRatio)
