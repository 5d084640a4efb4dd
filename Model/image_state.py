from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from Model.clip_ops import CroppedResult
from Model.point_set import PointSet


@dataclass
class CropState:
    path: Optional[str] = None
    image: Optional[np.ndarray] = None            # read-only RGBA, replaced wholesale on load
    points: PointSet = field(default_factory=PointSet)
    result: Optional[CroppedResult] = None        # only set by an explicit crop
    load_version: int = 0                         # bumped per load request, stale loads are dropped

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def size(self) -> tuple[int, int]:
        # (width, height), (0, 0) without image
        if self.image is None:
            return (0, 0)
        h, w = self.image.shape[:2]
        return (int(w), int(h))
