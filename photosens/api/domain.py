"""
Handling wavelength domains
"""

from numbers import Integral, Number
from typing import Tuple, Union

import numpy as np

from photosens.err import InvalidConfigurationError


class WavelengthSampling:
    """
    Evenly spaced wavelength axis in the (start, step, count) notation.

    Parameters
    ----------
    start : float
        First wavelength in nm.
    step : float
        Spacing between wavelengths in nm. Must be positive.
    count : int
        Number of wavelength samples. Must be at least one.
    """

    __slots__ = ("_start", "_step", "_count")

    def __init__(self, start: float, step: float, count: int):
        if not isinstance(start, Number) or not np.isfinite(start):
            raise InvalidConfigurationError(f"start must be a finite number, got {start!r}.")
        if not isinstance(step, Number) or not (step > 0):
            raise InvalidConfigurationError(f"step must be a positive number, got {step!r}.")
        if isinstance(count, bool) or not isinstance(count, Integral) or count < 1:
            raise InvalidConfigurationError(f"count must be a positive integer, got {count!r}.")
        self._start = float(start)
        self._step = float(step)
        self._count = int(count)

    @property
    def start(self) -> float:
        return self._start

    @property
    def step(self) -> float:
        return self._step

    @property
    def count(self) -> int:
        return self._count

    @property
    def stop(self) -> float:
        """Last wavelength in nm (inclusive)."""
        return self._start + self._step * (self._count - 1)

    @property
    def wavelengths(self) -> np.ndarray:
        """Wavelength array of shape (count,) in nm."""
        return self._start + self._step * np.arange(self._count)

    def as_tuple(self) -> Tuple[float, float, int]:
        return (self._start, self._step, self._count)

    def __len__(self):
        return self._count

    def __eq__(self, other):
        if not isinstance(other, WavelengthSampling):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        return f"WavelengthSampling(start={self._start}, step={self._step}, count={self._count})"

    @classmethod
    def from_wavelengths(cls, wavelengths: np.ndarray) -> "WavelengthSampling":
        """
        Create a sampling from an evenly spaced wavelength array.

        Raises
        ------
        InvalidConfigurationError
            If the array is empty or not evenly spaced.
        """
        wavelengths = np.asarray(wavelengths, dtype=float)
        if wavelengths.ndim != 1 or wavelengths.size == 0:
            raise InvalidConfigurationError("wavelengths must be a non-empty one-dimensional array.")
        if wavelengths.size == 1:
            return cls(wavelengths[0], 1.0, 1)
        diffs = np.diff(wavelengths)
        if not np.allclose(diffs, diffs[0]):
            raise InvalidConfigurationError("wavelengths must be evenly spaced.")
        return cls(wavelengths[0], diffs[0], wavelengths.size)


def as_sampling(
    sampling: Union[WavelengthSampling, Tuple[float, float, int]]
) -> WavelengthSampling:
    """
    Return a `WavelengthSampling` from a sampling object or a (start, step, count) triplet.
    """
    if isinstance(sampling, WavelengthSampling):
        return sampling
    try:
        start, step, count = sampling
    except (TypeError, ValueError):
        raise InvalidConfigurationError(
            f"sampling must be a (start, step, count) triplet, got {sampling!r}."
        ) from None
    if isinstance(count, float) and count.is_integer():
        count = int(count)
    return WavelengthSampling(start, step, count)
