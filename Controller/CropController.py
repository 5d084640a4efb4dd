from __future__ import annotations
import logging
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal, QThreadPool, QRunnable
from PyQt6.QtGui import QImage
from PyQt6.QtWidgets import QFileDialog

from Controller.crop_session import CropSession
from Controller.enums import PointerAction
from Model.config import ALLOWED_EXTENSIONS, DEFAULT_RESULT_NAME, MIN_POLYGON_POINTS
from Model.image_ops import ImageLoadError, is_allowed_image, load_image_file, numpy_rgba_to_qimage
from View.polygon_renderer import render_polygon

logger = logging.getLogger(__name__)

# Worker infrastructure: decoding a large image must not block the GUI-Thread.
# The worker decodes in the QThreadPool and sends the result back to the controller via
# queued connections (threadsafe).

# When a worker is done it emits its load version, the decoded image (or the error) and the path.
class _LoadSignal(QObject):
    finished = pyqtSignal(int, object, str)
    failed = pyqtSignal(int, str, str)


# noinspection PyUnresolvedReferences
class _LoadTask(QRunnable):
    def __init__(self, version: int, path: str, sig: _LoadSignal):
        super().__init__()
        self.version = version # Which load request this task answers
        self.path = path
        self.sig = sig # signal object to emit

    def run(self):
        try:
            rgba = load_image_file(self.path)
        except ImageLoadError as e:
            self.sig.failed.emit(self.version, self.path, str(e))
            return
        except Exception as e:
            # Anything else (cv2.error, MemoryError on huge files) must still end the load
            logger.exception("[LOAD] unexpected error decoding %s", self.path)
            self.sig.failed.emit(self.version, self.path, f"{type(e).__name__}: {e}")
            return
        self.sig.finished.emit(self.version, rgba, self.path)


# --- Controller ---
class CropController(QObject):
    def __init__(self, view):
        super().__init__()
        self.view = view # References the view the controller is responsible for
        self.pool = QThreadPool.globalInstance() # Global threadPool for background Jobs

        # All crop state is owned by the session; it calls back into _render after each change
        self.session = CropSession(on_render=self._render)
        self._base_qimg: Optional[QImage] = None # QImage of the loaded image, converted once per load

        self.sig = _LoadSignal()
        self.sig.finished.connect(self._on_load_finished) # "Bridge" from the Worker back to the GUI-Thread
        self.sig.failed.connect(self._on_load_failed)

        self._wire_view()
        self._update_actions()

    # Wiring - connecting the view (widgets, buttons) with the logic
    def _wire_view(self):
        v = self.view

        v.dropArea.imageDropped.connect(self.load_image)
        v.dropArea.pointerPressed.connect(self._pointer_pressed)
        v.dropArea.pointerMoved.connect(self._pointer_moved)
        v.dropArea.pointerReleased.connect(self.session.pointer_up)
        v.dropArea.pointerLeft.connect(self.session.pointer_leave)

        tb = v.imagePanel.toolbarButtons
        tb["New Image"].clicked.connect(self._on_new_image_clicked)
        tb["Whole Image"].clicked.connect(self._on_whole_image_clicked)
        tb["Reset Points"].clicked.connect(self._on_reset_points_clicked)
        tb["Crop Image"].clicked.connect(self._on_crop_clicked)
        tb["Clear All"].clicked.connect(self._on_clear_all_clicked)
        v.resultPanel.toolbarButtons["Download"].clicked.connect(self._on_download_clicked)

    # Loading
    def load_image(self, path: str):
        if not is_allowed_image(path):
            exts = ", ".join(sorted(e.lstrip(".").upper() for e in ALLOWED_EXTENSIONS))
            self._set_status_text(f"Please select an image file ({exts}).", kind="error")
            return
        # Only the newest request may install its image, older ones are dropped when they finish
        version = self.session.begin_load()
        self._set_status_text(f"Loading {path} ...")
        self.pool.start(_LoadTask(version, path, self.sig))

    def _on_load_finished(self, version: int, rgba, path: str):
        if version != self.session.state.load_version:
            logger.info("[LOAD] ignoring stale result for %s", path)
            return
        # Converted before installing, the session renders right away
        self._base_qimg = numpy_rgba_to_qimage(rgba)
        self.session.finish_load(version, rgba, path)
        self._clear_result_view()
        self.view.dropArea.set_draw_cursor(True)
        h, w = rgba.shape[:2]
        self._set_status_text(f"Loaded {path} ({w}x{h}). Click to add points, drag to move them.", kind="ok")

    def _on_load_failed(self, version: int, path: str, message: str):
        if version != self.session.state.load_version:
            return
        # Crop state stays as it was
        logger.warning("[LOAD] %s: %s", path, message)
        self._set_status_text(f"Could not load image: {message}", kind="error")

    # Pointer handling
    def _pointer_pressed(self, x: float, y: float, hit_radius: float):
        action = self.session.pointer_down(x, y, hit_radius=hit_radius)
        if action is PointerAction.ADD:
            logger.debug("[POINT] added (%.1f, %.1f)", x, y)

    def _pointer_moved(self, x: float, y: float):
        self.session.pointer_move(x, y)

    # Buttons
    def _on_new_image_clicked(self):
        patterns = " ".join(f"*{e}" for e in sorted(ALLOWED_EXTENSIONS))
        path, _ = QFileDialog.getOpenFileName(self.view, "Open Image", "", f"Images ({patterns});;All files (*)")
        if path:
            self.load_image(path)

    def _on_whole_image_clicked(self):
        self.session.select_rect()
        self._clear_result_view()

    def _on_reset_points_clicked(self):
        self.session.reset_points()
        self._clear_result_view()

    def _on_crop_clicked(self):
        # The button is disabled below the minimum, this only guards programmatic calls
        if not self.session.can_crop:
            self._set_status_text(f"Need at least {MIN_POLYGON_POINTS} points to crop", kind="error")
            return
        result = self.session.crop()
        if result is None:
            self._clear_result_view()
            self._set_status_text("The polygon encloses no area, nothing was cropped.", kind="error")
            return
        self.view.resultView.set_image(numpy_rgba_to_qimage(result.pixels))
        self._update_actions()
        self._set_status_text(f"Cropped {result.width}x{result.height} region.", kind="ok")

    def _on_clear_all_clicked(self):
        # Also invalidates a load that is still running
        self.session.begin_load()
        self._base_qimg = None
        self.session.clear_all()
        self._clear_result_view()
        self.view.dropArea.set_draw_cursor(False)
        self._set_status_text("")

    def _on_download_clicked(self):
        result = self.session.result
        if result is None:
            return
        path, _ = QFileDialog.getSaveFileName(self.view, "Save Cropped Image", DEFAULT_RESULT_NAME, "PNG (*.png)")
        if not path:
            return
        try:
            saved = result.save(path)
        except OSError as e:
            self._set_status_text(f"Could not save {path}: {e}", kind="error")
            return
        self._set_status_text(f"Saved cropped image to {saved}", kind="ok")

    # Rendering: redraw image + polygon from scratch after every change
    def _render(self):
        drop = self.view.dropArea
        if self._base_qimg is None or not self.session.has_image:
            drop.clear_image()
        else:
            drop.show_qimage(render_polygon(self._base_qimg, self.session.points.as_list()))
        self._update_actions()

    def _update_actions(self):
        n = len(self.session.points)
        self.view.set_point_count(n)
        tb = self.view.imagePanel.toolbarButtons
        can_crop = self.session.can_crop
        tb["Crop Image"].setEnabled(can_crop)
        tb["Crop Image"].setToolTip("Crop the selected area" if can_crop
                                    else f"Need at least {MIN_POLYGON_POINTS} points to crop")
        tb["Whole Image"].setEnabled(self.session.has_image)
        tb["Reset Points"].setEnabled(self.session.has_image)
        self.view.resultPanel.toolbarButtons["Download"].setEnabled(self.session.result is not None)

    def _clear_result_view(self):
        self.view.resultView.clear_image()
        self._update_actions()

    def _set_status_text(self, msg: str, *, kind: str = "info"):
        self.view.set_status(msg, kind=kind)
