# planet_generator/noise.py

"""
================================================================================
FIELD GENERATORS
================================================================================
This module provides the generators that produce raw ScalarFields from a map
size and a random source: octave-blended value noise, a distance-from-row
(equator/latitude) gradient, and a constant field.

Data Contract:
---------------
- Inputs:
    - width, height: Map dimensions.
    - rng: A NumPy random Generator. Every random draw comes from it, so the
      output is deterministic for a given generator state.
- Outputs:
    - A ScalarField, normalized to [0, 1] where the generator says so.
- Side Effects: Advances the state of `rng`.
- Invariants: The output has exactly width * height cells. The value noise
  wraps at the edges of the map (it is toroidal).
================================================================================
"""

from typing import Protocol

import numpy as np
from numba import njit

from . import config as DEFAULTS
from .scalar_field import ScalarField


class FieldGenerator(Protocol):
    """
    The interface every layer generator expects from its field sources.
    Any object with a matching `generate` method can be plugged in.
    """

    def generate(self, width: int, height: int, rng: np.random.Generator) -> ScalarField: ...


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a * (1.0 - x) + x * b

@njit
def _smooth_octave(base, octave):
    """
    Samples the white noise at every 2^octave-th cell and bilinearly
    interpolates between those samples. Sample positions past the right or
    bottom edge wrap around to the start of the row/column.
    """
    rows, cols = base.shape
    result = np.zeros((rows, cols))
    period = 1 << octave
    freq = 1.0 / period

    for x in range(cols):
        x0 = (x // period) * period
        x1 = (x0 + period) % cols
        h_blend = (x - x0) * freq

        for y in range(rows):
            y0 = (y // period) * period
            y1 = (y0 + period) % rows
            v_blend = (y - y0) * freq

            top = _lerp(base[y0, x0], base[y0, x1], h_blend)
            bottom = _lerp(base[y1, x0], base[y1, x1], h_blend)
            result[y, x] = _lerp(top, bottom, v_blend)

    return result

@njit
def value_noise_2d(base, octaves=8, persistence=0.75):
    """
    Blends the smoothed octaves of a white noise grid, from the coarsest
    octave down to the finest. The running amplitude is multiplied by the
    persistence before each octave is added, so a low persistence lets the
    fine octaves contribute very little.
    This function is JIT-compiled with Numba.
    """
    rows, cols = base.shape
    total_noise = np.zeros((rows, cols))
    amplitude = 1.0

    for octave in range(octaves - 1, -1, -1):
        amplitude *= persistence
        smooth = _smooth_octave(base, octave)
        for i in range(rows):
            for j in range(cols):
                total_noise[i, j] += smooth[i, j] * amplitude

    return total_noise


class ValueNoiseGenerator:
    """
    Generates smooth, toroidal value noise ("Perlin-like" noise built from
    interpolated white noise rather than gradients).
    """

    def __init__(self, octave_count: int = DEFAULTS.DEFAULT_OCTAVE_COUNT, persistence: float = DEFAULTS.DEFAULT_PERSISTENCE):
        self.octave_count = octave_count
        self.persistence = persistence

    @property
    def octave_count(self) -> int:
        return self._octave_count

    @octave_count.setter
    def octave_count(self, value: int):
        # At least one octave is always blended.
        self._octave_count = value if value is not None and value > 0 else 1

    @property
    def persistence(self) -> float:
        return self._persistence

    @persistence.setter
    def persistence(self, value: float):
        if value is None or value <= 0.0:
            value = DEFAULTS.FALLBACK_PERSISTENCE
        self._persistence = min(float(value), 1.0)

    def generate(self, width: int, height: int, rng: np.random.Generator) -> ScalarField:
        field = ScalarField(width, height)
        # 1. One grid of independent uniform values.
        white_noise = rng.random((field.height, field.width))
        # 2. Smooth and blend the octaves, then bring the result back to [0, 1].
        blended = value_noise_2d(white_noise, self.octave_count, self.persistence)
        field.data[:] = blended.ravel()
        return field.normalize()


class EquatorDistanceGenerator:
    """
    Generates a latitude gradient: 1.0 along the configured row and falling
    linearly to 0.0 at the row furthest from it. Uses no randomness.
    """

    def __init__(self, equator_row: int = 0):
        self.equator_row = equator_row

    def generate(self, width: int, height: int, rng: np.random.Generator = None) -> ScalarField:
        field = ScalarField(width, height)
        equator = min(max(int(self.equator_row), 0), field.height - 1)

        # Distance of each row from the equator, broadcast across the columns.
        row_distance = np.abs(np.arange(field.height, dtype=np.float64) - equator)
        field.as_array()[:, :] = row_distance[:, np.newaxis]

        # The furthest rows hold the largest distance, so flip the field
        # before normalizing to make the equator the peak.
        return field.invert().normalize()


class ConstantGenerator:
    """Generates a field where every cell holds the same value (0 by default)."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def generate(self, width: int, height: int, rng: np.random.Generator = None) -> ScalarField:
        return ScalarField(width, height, fill=self.value)
