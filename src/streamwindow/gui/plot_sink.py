"""pyqtgraph curve that mirrors one stream's buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

from ..core.models import Sample

if TYPE_CHECKING:
    import pyqtgraph as pg


class PlotCurveSink:
    """
    Render sink backed by a :class:`pyqtgraph.PlotDataItem`.

    The curve plots ``index`` against the first value coordinate. The second
    coordinate (the stream's z level) becomes a vertical offset of
    ``z * z_spacing`` so the streams stack instead of overlapping.
    """

    def __init__(self, curve: pg.PlotDataItem, *, z_spacing: float = 0.0) -> None:
        self.curve = curve
        self.z_spacing = float(z_spacing)
        self._x = np.empty(0, dtype=np.float64)
        self._y = np.empty(0, dtype=np.float64)

    def append(self, samples: Sequence[Sample]) -> None:
        if not samples:
            return
        x, y = self._to_arrays(samples)
        self._x = np.concatenate((self._x, x))
        self._y = np.concatenate((self._y, y))
        self.curve.setData(self._x, self._y)

    def replace_all(self, samples: Sequence[Sample]) -> None:
        self._x, self._y = self._to_arrays(samples)
        self.curve.setData(self._x, self._y)

    def __len__(self) -> int:
        return int(self._x.size)

    def _to_arrays(self, samples: Sequence[Sample]) -> tuple[np.ndarray, np.ndarray]:
        count = len(samples)
        x = np.fromiter((s.index for s in samples), dtype=np.float64, count=count)
        y = np.fromiter(
            (s.values[0] + (s.values[1] if len(s.values) > 1 else 0.0) * self.z_spacing for s in samples),
            dtype=np.float64,
            count=count,
        )
        return x, y
