from __future__ import annotations
from typing import Optional

from Controller.enums import DragStatus
from Model.point_set import PointSet

Point = tuple[float, float]


class DragController:
    """
    Idle -> Dragging(index) -> Idle.

    At most one vertex is grabbed at a time (single pointer). While a drag is
    running, further presses are ignored until release() or leave().
    """

    def __init__(self, points: PointSet):
        self.points = points
        self._active_index: Optional[int] = None

    @property
    def active_index(self) -> Optional[int]:
        return self._active_index

    @property
    def is_dragging(self) -> bool:
        return self._active_index is not None

    @property
    def status(self) -> DragStatus:
        return DragStatus.DRAGGING if self.is_dragging else DragStatus.IDLE

    def press(self, point: Point, hit_radius: Optional[float] = None) -> bool:
        if self.is_dragging:
            return False
        idx = self.points.hit_test(point, hit_radius)
        if idx is None:
            return False
        self._active_index = idx
        return True

    def move(self, point: Point) -> bool:
        if self._active_index is None:
            return False
        self.points.replace_at(self._active_index, point)
        return True

    def release(self) -> None:
        self._active_index = None

    # Pointer left the canvas: same cleanup as a release, a drag must never stay stuck
    leave = release
