# Model/point_set.py
from __future__ import annotations
from typing import Iterable, Iterator, Optional

from Model.config import HIT_RADIUS_PX

Point = tuple[float, float]


def _euclid(a: Point, b: Point) -> float:
    dx = a[0] - b[0]; dy = a[1] - b[1]
    return (dx*dx + dy*dy) ** 0.5


class PointSet:
    """
    Ordered polygon vertices in image-pixel space.

    Insertion order is edge order: point i connects to point i+1 and the last
    point closes back onto the first for fill and clip. Appends only grow the
    end, so an index stays valid until clear().
    """

    def __init__(self, points: Optional[Iterable[Point]] = None, hit_radius: float = HIT_RADIUS_PX):
        self.hit_radius = float(hit_radius)
        self._points: list[Point] = [(float(x), float(y)) for (x, y) in ([] if points is None else points)]

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> Point:
        return self._points[index]

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __repr__(self) -> str:
        return f"PointSet({self._points!r})"

    def as_list(self) -> list[Point]:
        # Copy, so the renderer / extractor never see later mutations
        return list(self._points)

    def hit_test(self, point: Point, hit_radius: Optional[float] = None) -> Optional[int]:
        # First vertex strictly closer than the radius, None on a miss
        r = self.hit_radius if hit_radius is None else float(hit_radius)
        for i, p in enumerate(self._points):
            if _euclid(p, point) < r:
                return i
        return None

    def add(self, point: Point, hit_radius: Optional[float] = None) -> bool:
        # A click on an existing vertex is "already there", not a move
        if self.hit_test(point, hit_radius) is not None:
            return False
        self._points.append((float(point[0]), float(point[1])))
        return True

    def replace_at(self, index: int, point: Point) -> None:
        self._points[index] = (float(point[0]), float(point[1]))

    def clear(self) -> None:
        self._points.clear()
