# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from dataclasses import dataclass
from typing import Iterable, Tuple, Union

import numpy as np

from .kinds import COORD_MAX, COORD_MIN
from .models import Node

ArrayLike = Union[float, int, np.ndarray, list]


def _check_axis(axis_size: float) -> None:
    if axis_size <= 0:
        raise ValueError(f"axis size must be positive, got {axis_size}")


def to_canvas(percent: ArrayLike, axis_size: float):
    """Map a stored percentage (0-100) to a pixel offset along one axis."""
    _check_axis(axis_size)
    if np.isscalar(percent):
        return (percent / 100) * axis_size
    return (np.asarray(percent, dtype=np.float64) / 100) * axis_size


def to_percent(pixel: ArrayLike, axis_size: float):
    """
    Map a pixel offset back to a stored percentage.

    Stored coordinates are integers, so the result is rounded to the nearest
    whole percent and clamped to [0, 100].
    """
    _check_axis(axis_size)
    pct = np.clip(np.rint(np.asarray(pixel, dtype=np.float64) / axis_size * 100), COORD_MIN, COORD_MAX)
    if np.ndim(pct) == 0:
        return int(pct)
    return pct.astype(np.int64)


@dataclass(frozen=True)
class ViewBox:
    """The fixed SVG canvas both viewer and editor draw into."""
    width: float = 1200
    height: float = 700

    def attribute(self) -> str:
        return f"0 0 {self.width:g} {self.height:g}"

    def to_canvas(self, x: float, y: float) -> Tuple[float, float]:
        return to_canvas(x, self.width), to_canvas(y, self.height)

    def to_percent(self, px: float, py: float) -> Tuple[int, int]:
        return to_percent(px, self.width), to_percent(py, self.height)

    def project(self, nodes: Iterable[Node]) -> np.ndarray:
        """Pixel positions for many nodes at once, shape (N, 2)."""
        coords = np.array([(n.x, n.y) for n in nodes], dtype=np.float64).reshape(-1, 2)
        return coords / 100 * np.array([self.width, self.height], dtype=np.float64)
