"""Wrap-continuous datasets that loop indefinitely along the primary axis."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import ArrayLike

from .errors import GenerationError, InvalidConfiguration
from ..data.trace_generator import SampleGenerator

logger = logging.getLogger(__name__)


class CyclicDataset:
    """
    Fixed-length, read-only sequence of coordinate records.

    ``record(i)`` is defined for every non-negative ``i`` and wraps modulo the
    length, so a bounded array stands in for an unbounded input.
    """

    __slots__ = ("_values",)

    def __init__(self, values: ArrayLike) -> None:
        arr = np.array(values, dtype=np.float64)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2 or arr.shape[0] == 0:
            raise InvalidConfiguration("dataset needs at least one coordinate record")
        arr.setflags(write=False)
        self._values = arr

    @property
    def values(self) -> np.ndarray:
        return self._values

    def record(self, position: int) -> tuple[float, ...]:
        row = self._values[position % len(self._values)]
        return tuple(float(v) for v in row)

    def __len__(self) -> int:
        return int(self._values.shape[0])

    def __getitem__(self, position: int) -> tuple[float, ...]:
        return self.record(position)


def mirror_half_cycle(base: np.ndarray) -> np.ndarray:
    """Return ``base ++ reverse(base[1:-1])``.

    The result has ``2 * len(base) - 2`` rows; its first and last rows are
    ``base[0]`` and ``base[1]``, so looping it never jumps more than one step.
    """
    return np.concatenate((base, base[1:-1][::-1]), axis=0)


class CyclicDatasetBuilder:
    """Builds one :class:`CyclicDataset` per stream from a sample generator."""

    def __init__(self, generator: SampleGenerator) -> None:
        self._generator = generator

    async def build(self, half_length: int, z_level: float) -> CyclicDataset:
        """
        Generate ``half_length`` points and turn them into a looping dataset.

        Each generated ``(x, y)`` point becomes the record ``(y, z_level)``.
        Any failure of the generator surfaces as :class:`GenerationError`.
        """
        if half_length < 2:
            raise InvalidConfiguration(f"half length must be >= 2, got {half_length}")

        try:
            points = await self._generator.generate(half_length)
        except GenerationError:
            raise
        except Exception as exc:
            raise GenerationError(f"sample generator failed: {exc}") from exc

        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[0] != half_length or points.shape[1] < 2:
            raise GenerationError(
                f"expected {half_length} (x, y) points, got array of shape {points.shape}"
            )

        base = np.column_stack((points[:, 1], np.full(half_length, float(z_level))))
        dataset = CyclicDataset(mirror_half_cycle(base))
        logger.debug("Built cyclic dataset of %d records at z=%s", len(dataset), z_level)
        return dataset
