import logging

from PyQt6.QtCore import Qt, QRectF, pyqtSignal
from PyQt6.QtGui import QImage, QPainter, QPixmap
from PyQt6.QtWidgets import QLabel

from Model.config import HIT_RADIUS_PX
from Model.coord_ops import DisplayRect, aspect_fit_rect, hit_radius_to_image_space, to_image_space

logger = logging.getLogger(__name__)


class ImageDropArea(QLabel):
    # Drag&Drop target and drawing surface for the polygon.

    # The Signals that carry the user-interactions with the canvas to the controller.
    # All coordinates are already mapped to image pixels.
    imageDropped = pyqtSignal(str)                        # path of the dropped image file
    pointerPressed = pyqtSignal(float, float, float)      # x, y, grab radius in image pixels
    pointerMoved = pyqtSignal(float, float)
    pointerReleased = pyqtSignal()
    pointerLeft = pyqtSignal()

    def __init__(self, placeholder: str = "Drop an image here or click 'New Image'"):
        super().__init__(placeholder)
        self.setObjectName("DropArea")
        self.setAcceptDrops(True)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setWordWrap(True)
        self.setMinimumSize(200, 200)

        self._placeholder = placeholder
        # The rendered surface (image + polygon), always at the image's native size
        self._pixmap: QPixmap | None = None
        self._hit_radius_px = HIT_RADIUS_PX
        self._pressed = False

    # Mouse events
    def mousePressEvent(self, e):
        # If no image is loaded yet, nothing will happen
        if self._pixmap and e.button() == Qt.MouseButton.LeftButton:
            rect = self.display_rect()
            img_pt = self._widget_to_image(e.position(), rect)
            # Presses in the margin around the image are not on the image
            if img_pt is not None:
                r = hit_radius_to_image_space(self._hit_radius_px, rect, self._pixmap.width(), self._pixmap.height())
                self._pressed = True
                self.pointerPressed.emit(img_pt[0], img_pt[1], r)
                e.accept()
                return
        super().mousePressEvent(e)

    def mouseMoveEvent(self, e):
        if self._pixmap and self._pressed:
            # Dragging past the border pins the vertex to the image edge
            x, y = self._widget_to_image(e.position(), self.display_rect(), allow_outside=True)
            self.pointerMoved.emit(x, y)
            e.accept()
            return
        super().mouseMoveEvent(e)

    def mouseReleaseEvent(self, e):
        if self._pressed and e.button() == Qt.MouseButton.LeftButton:
            self._pressed = False
            self.pointerReleased.emit()
            e.accept()
            return
        super().mouseReleaseEvent(e)

    def leaveEvent(self, e):
        # Leaving the canvas ends any drag
        self._pressed = False
        self.pointerLeft.emit()
        super().leaveEvent(e)

    # Paint
    def paintEvent(self, e):
        # Show the placeholder text
        if self._pixmap is None:
            super().paintEvent(e)
            return

        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
        rect = self.display_rect()
        p.drawPixmap(QRectF(rect.left, rect.top, rect.width, rect.height), self._pixmap, QRectF(self._pixmap.rect()))
        p.end()

    # Coordinates: the surface is drawn aspect-fitted and centered, the mapping
    # back to image pixels is recomputed on every event since the widget size changes.
    def display_rect(self) -> DisplayRect:
        if not self._pixmap:
            return DisplayRect(0.0, 0.0, 0.0, 0.0)
        return aspect_fit_rect(self._pixmap.width(), self._pixmap.height(), float(self.width()), float(self.height()))

    def _widget_to_image(self, posf, rect: DisplayRect, *, allow_outside: bool = False) -> tuple[float, float] | None:
        w, h = self._pixmap.width(), self._pixmap.height()
        x, y = to_image_space(posf.x(), posf.y(), rect, w, h)
        # Clamp onto the image
        if allow_outside:
            return (max(0.0, min(x, float(w))), max(0.0, min(y, float(h))))
        if 0.0 <= x <= w and 0.0 <= y <= h:
            return (x, y)
        return None

    # Helper functions for Drag&Drop
    def dragEnterEvent(self, event):
        if self._has_local_file(event):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if self._has_local_file(event):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event):
        url = next((u for u in event.mimeData().urls() if u.isLocalFile()), None)
        if not url:
            event.ignore(); return
        # Validation and decoding happen in the controller, so a wrong file gets a message
        path = url.toLocalFile()
        logger.debug("[DND] dropped %s", path)
        event.acceptProposedAction()
        self.imageDropped.emit(path)

    def _has_local_file(self, event) -> bool:
        md = event.mimeData()
        return md.hasUrls() and any(u.isLocalFile() for u in md.urls())

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.update()

    # ---- Public API ----
    def show_qimage(self, qimg: QImage):
        if qimg.isNull():
            return
        self._pixmap = QPixmap.fromImage(qimg)
        self.setText("")
        self.update()

    def clear_image(self):
        self._pixmap = None
        self._pressed = False
        self.setText(self._placeholder)
        self.update()

    def has_image(self) -> bool:
        return self._pixmap is not None

    def set_draw_cursor(self, on: bool):
        self.setCursor(Qt.CursorShape.CrossCursor if on else Qt.CursorShape.ArrowCursor)
