# planet_generator/scalar_field.py

"""
================================================================================
SCALAR FIELD
================================================================================
This module provides the ScalarField class, the shared data model of the whole
pipeline: a dense width x height grid holding one float per cell.

Data Contract:
---------------
- Storage: a flat NumPy float64 array of width * height cells. A cell is
  addressed either by its flat index (y * width + x) or by (x, y).
- Inputs (on initialization):
    - width, height: Map dimensions. Non-positive values fall back to the
      defaults in config.py.
    - fill: The value every cell starts with (0.0).
- Side Effects: normalize(), sqrt(), scale_by() and blur() modify the field
  in place. combine_with() and copy() always return a new field.
- Invariants: The dimensions never change after creation. The plain
  accessors assume a valid index; get_wrapped() is the tolerant variant.
================================================================================
"""

import numpy as np
from scipy.ndimage import uniform_filter

from . import config as DEFAULTS


class ScalarField:
    """A width x height grid of floating-point values."""

    def __init__(self, width: int = DEFAULTS.DEFAULT_WIDTH, height: int = DEFAULTS.DEFAULT_HEIGHT, fill: float = 0.0):
        if width is None or width <= 0:
            width = DEFAULTS.DEFAULT_WIDTH
        if height is None or height <= 0:
            height = DEFAULTS.DEFAULT_HEIGHT

        self._width = int(width)
        self._height = int(height)
        self.data = np.full(self._width * self._height, fill, dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> 'ScalarField':
        """Builds a field from a 2D (height, width) array-like."""
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"Expected a 2D array, got shape {values.shape}")
        field = cls(values.shape[1], values.shape[0])
        field.data[:] = values.ravel()
        return field

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> int:
        return self._width * self._height

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"ScalarField({self._width}x{self._height})"

    # --- Cell Access ---

    def index_of(self, x: int, y: int) -> int:
        return y * self._width + x

    def coords_of(self, index: int) -> tuple[int, int]:
        return index % self._width, index // self._width

    def get(self, x: int, y: int = None) -> float:
        """
        Returns the value at (x, y), or at flat index x when y is omitted.
        WARNING: The index is assumed to be valid.
        """
        if y is None:
            return float(self.data[x])
        return float(self.data[y * self._width + x])

    def set(self, x: int, y: int, value: float = None):
        """
        Sets the value at (x, y). Called with two arguments, set(index, value)
        addresses the cell by its flat index instead.
        """
        if value is None:
            self.data[x] = y
        else:
            self.data[y * self._width + x] = value

    def get_wrapped(self, x: int, y: int) -> float:
        """Returns the value at (x, y), wrapping both coordinates around the map."""
        return float(self.data[(y % self._height) * self._width + (x % self._width)])

    def same_shape(self, other: 'ScalarField') -> bool:
        return other is not None and other.width == self._width and other.height == self._height

    def as_array(self) -> np.ndarray:
        """Returns a (height, width) view of the cells. Writes go through to the field."""
        return self.data.reshape(self._height, self._width)

    def copy(self) -> 'ScalarField':
        result = ScalarField(self._width, self._height)
        result.data[:] = self.data
        return result

    def min_value(self) -> float:
        return float(self.data.min())

    def max_value(self) -> float:
        return float(self.data.max())

    # --- Whole-Field Operations ---

    def normalize(self) -> 'ScalarField':
        """
        Rescales every cell linearly so the minimum becomes 0 and the maximum
        becomes 1. If every cell holds the same value, every cell becomes 0.
        """
        min_val = self.data.min()
        value_range = self.data.max() - min_val
        if value_range == 0.0:
            self.data[:] = 0.0
        else:
            self.data -= min_val
            self.data /= value_range
        return self

    def combine_with(self, others) -> 'ScalarField | None':
        """
        Treats this field and each of `others` as the components of a vector
        at every cell and returns a new field holding that vector's squared
        magnitude: r = self^2 + sum(other^2). Call sqrt() on the result for
        the magnitude itself; either way the caller is expected to normalize.

        Returns None if `others` is empty or any field's dimensions differ.
        """
        if not others:
            return None
        for other in others:
            if not self.same_shape(other):
                return None

        result = ScalarField(self._width, self._height)
        result.data[:] = self.data * self.data
        for other in others:
            result.data += other.data * other.data
        return result

    def sqrt(self) -> 'ScalarField':
        """Element-wise square root. Cells must already be non-negative."""
        np.sqrt(self.data, out=self.data)
        return self

    def scale_by(self, factor: float) -> 'ScalarField':
        self.data *= factor
        return self

    def invert(self) -> 'ScalarField':
        """Replaces every value v with max - v, so the peaks become the troughs."""
        self.data[:] = self.data.max() - self.data
        return self

    def blur(self, radius: int) -> 'ScalarField':
        """
        Replaces every cell with the mean of the (2r+1) x (2r+1) box around it.
        The map is toroidal, so the box wraps around the edges.
        """
        if radius <= 0:
            return self
        smoothed = uniform_filter(self.as_array(), size=2 * radius + 1, mode='wrap')
        self.data[:] = smoothed.ravel()
        return self

    def sorted_indices(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Returns (indices, values) for every cell, ordered from the smallest
        value to the largest. The sort is stable, so equal values keep the
        order of their flat indices and the result is reproducible.
        """
        order = np.argsort(self.data, kind='stable')
        return order, self.data[order]


def normalize_over_land(field: ScalarField, height_map: ScalarField, sea_level: float) -> ScalarField | None:
    """
    Normalizes `field` using only the cells that are land in `height_map`
    (height above `sea_level`). Land cells are rescaled into [0, 1] by the
    land-only min/max; ocean cells are set to 0. If there is no land, or every
    land cell holds the same value, the result is all zeros.

    Returns a new field, or None if the two fields differ in size.
    """
    if field is None or not field.same_shape(height_map):
        return None

    result = ScalarField(field.width, field.height)
    land_mask = height_map.data > sea_level
    if not land_mask.any():
        return result

    land_values = field.data[land_mask]
    min_val = land_values.min()
    value_range = land_values.max() - min_val
    if value_range == 0.0:
        return result

    result.data[land_mask] = (land_values - min_val) / value_range
    return result
