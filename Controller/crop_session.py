from __future__ import annotations
import logging
from typing import Callable, Optional

import numpy as np

from Controller.drag_controller import DragController
from Controller.enums import PointerAction
from Model.clip_ops import CroppedResult, extract_polygon, rect_points
from Model.config import HIT_RADIUS_PX, MIN_POLYGON_POINTS
from Model.image_ops import encode_png
from Model.image_state import CropState
from Model.point_set import PointSet

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class CropSession:
    """
    Owns the crop lifecycle: load image -> edit points -> crop -> hold result -> reset/clear.

    All state lives in one CropState. Every operation that changes what is on
    screen calls on_render() afterwards; there is no implicit dependency
    tracking. Coordinates passed in are already in image-pixel space.
    """

    def __init__(self, on_render: Optional[Callable[[], None]] = None, hit_radius: float = HIT_RADIUS_PX):
        self.on_render = on_render
        self.hit_radius = float(hit_radius)
        self.state = CropState(points=PointSet(hit_radius=self.hit_radius))
        self.drag = DragController(self.state.points)

    # ---- read access ----
    @property
    def image(self) -> Optional[np.ndarray]:
        return self.state.image

    @property
    def points(self) -> PointSet:
        return self.state.points

    @property
    def result(self) -> Optional[CroppedResult]:
        return self.state.result

    @property
    def has_image(self) -> bool:
        return self.state.has_image

    @property
    def can_crop(self) -> bool:
        return self.state.has_image and len(self.state.points) >= MIN_POLYGON_POINTS

    # ---- loading ----
    def begin_load(self) -> int:
        # Each request gets a new version; only the newest one may install its image
        self.state.load_version += 1
        return self.state.load_version

    def finish_load(self, version: int, image: np.ndarray, path: Optional[str] = None) -> bool:
        if version != self.state.load_version:
            logger.info("[LOAD] dropping stale load v%d (latest is v%d): %s", version, self.state.load_version, path)
            return False
        self.install_image(image, path)
        return True

    def install_image(self, image: np.ndarray, path: Optional[str] = None) -> None:
        self.state.image = image
        self.state.path = path
        self.state.result = None
        self._new_point_set()
        self._render()

    # ---- pointer handling ----
    def pointer_down(self, x: float, y: float, hit_radius: Optional[float] = None) -> PointerAction:
        if not self.has_image or self.drag.is_dragging:
            return PointerAction.NONE
        # Grabbing an existing vertex wins over adding one at the same spot
        if self.drag.press((x, y), hit_radius):
            return PointerAction.DRAG
        if self.state.points.add((x, y), hit_radius):
            self._render()
            return PointerAction.ADD
        return PointerAction.NONE

    def pointer_move(self, x: float, y: float) -> bool:
        if not self.drag.move((x, y)):
            return False
        self._render()
        return True

    def pointer_up(self) -> None:
        self.drag.release()

    def pointer_leave(self) -> None:
        self.drag.leave()

    # ---- editing ----
    def select_rect(self, x: float = 0.0, y: float = 0.0, width: Optional[float] = None, height: Optional[float] = None) -> None:
        """Replaces the points by a rectangle, the whole image by default."""
        if not self.has_image:
            return
        w, h = self.state.size
        width = w - x if width is None else width
        height = h - y if height is None else height
        self.drag.release()
        self.state.points.clear()
        for pt in rect_points(x, y, width, height):
            self.state.points.add(pt, hit_radius=0.0)
        self.state.result = None
        self._render()

    def crop(self) -> Optional[CroppedResult]:
        if not self.can_crop:
            logger.warning("[CROP] rejected: image=%s, points=%d", self.has_image, len(self.state.points))
            return None
        # A new crop supersedes the old result, even if this one comes out empty
        self.state.result = extract_polygon(self.state.image, self.state.points.as_list())
        return self.state.result

    def reset_points(self) -> None:
        self.drag.release()
        self.state.points.clear()
        self.state.result = None
        logger.info("[RESET] points cleared")
        self._render()

    def clear_all(self) -> None:
        self.state.image = None
        self.state.path = None
        self.state.result = None
        self._new_point_set()
        logger.info("[RESET] image and points cleared")
        self._render()

    def final_png(self) -> Optional[bytes]:
        # What gets handed on: the crop if there is one, the untouched image otherwise
        if self.state.result is not None:
            return self.state.result.png_bytes
        if self.state.image is not None:
            return encode_png(self.state.image)
        return None

    # ---- helpers ----
    def _new_point_set(self) -> None:
        self.state.points = PointSet(hit_radius=self.hit_radius)
        self.drag = DragController(self.state.points)

    def _render(self) -> None:
        if self.on_render is not None:
            self.on_render()
