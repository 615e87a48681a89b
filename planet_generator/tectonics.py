# planet_generator/tectonics.py

"""
================================================================================
TECTONIC PLATE GENERATION
================================================================================
This module partitions the map into tectonic plates by randomized region
growing. It is a deliberately simple abstraction (Rule 8): instead of
modelling plate age, density and collisions, each plate carries one random
value standing in for all of them.

Data Contract:
---------------
- Inputs:
    - Map dimensions, number of plates, and a NumPy random Generator.
- Outputs:
    - plate_ids (np.ndarray): An int array of width * height cells holding the
      ID (0..N-1) of the plate that owns each cell.
    - plate_values (np.ndarray): One float in [0, 1) per plate.
    - A piecewise-constant ScalarField where every cell holds the value of
      its plate.
- Side Effects: Advances the state of `rng`.
- Invariants: Every cell is claimed by exactly one plate. Neighbors wrap
  around the map edges, so the whole map is always reachable.
================================================================================
"""

import logging

import numpy as np

from . import config as DEFAULTS
from .scalar_field import ScalarField

# Marks a cell no plate has claimed yet.
UNCLAIMED = -1


def wrapped_neighbors(index: int, width: int, height: int) -> tuple[int, int, int, int]:
    """Returns the flat indices of the left, right, up and down neighbors of a cell."""
    x = index % width
    y = index // width
    left = y * width + (x - 1) % width
    right = y * width + (x + 1) % width
    up = ((y - 1) % height) * width + x
    down = ((y + 1) % height) * width + x
    return left, right, up, down


def choose_plate_seeds(width: int, height: int, num_plates: int, rng: np.random.Generator) -> tuple[np.ndarray, list[int]]:
    """
    Picks one distinct random cell per plate. Returns the ownership array with
    those seed cells claimed, and the seed cells themselves.
    """
    plate_ids = np.full(width * height, UNCLAIMED, dtype=np.int64)
    seeds = []
    for plate in range(num_plates):
        # Redraw until an unclaimed cell comes up.
        while True:
            index = int(rng.integers(width)) + int(rng.integers(height)) * width
            if plate_ids[index] == UNCLAIMED:
                break
        plate_ids[index] = plate
        seeds.append(index)
    return plate_ids, seeds


def grow_plates(width: int, height: int, num_plates: int, rng: np.random.Generator) -> np.ndarray:
    """
    Grows `num_plates` plates until the whole map is claimed.

    Each plate keeps a frontier of claimed cells whose neighbors may still be
    free. Every round, each plate with a non-empty frontier removes one random
    cell from it and claims that cell's unclaimed neighbors. Because only one
    random frontier cell is expanded per plate per round, plates grow in
    irregular shapes rather than as circles.
    """
    plate_ids, seeds = choose_plate_seeds(width, height, num_plates, rng)
    frontiers = [[seed] for seed in seeds]

    growing = True
    while growing:
        growing = False
        for plate, frontier in enumerate(frontiers):
            if not frontier:
                continue
            growing = True

            # Swap-remove a random frontier cell.
            pick = int(rng.integers(len(frontier)))
            frontier[pick], frontier[-1] = frontier[-1], frontier[pick]
            cell = frontier.pop()

            for neighbor in wrapped_neighbors(cell, width, height):
                if plate_ids[neighbor] == UNCLAIMED:
                    plate_ids[neighbor] = plate
                    frontier.append(neighbor)

    return plate_ids


class PlateFieldGenerator:
    """
    Generates the tectonics field: a map partitioned into plates, each cell
    holding its plate's random value.
    """

    def __init__(self, num_plates: int = DEFAULTS.DEFAULT_NUM_TECTONIC_PLATES, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.num_plates = num_plates
        # The ownership array and plate values of the most recent run.
        self.plate_ids = None
        self.plate_values = None

    @property
    def num_plates(self) -> int:
        return self._num_plates

    @num_plates.setter
    def num_plates(self, value: int):
        if value is None or value <= 0:
            value = DEFAULTS.DEFAULT_NUM_TECTONIC_PLATES
        self._num_plates = int(value)

    def generate(self, width: int, height: int, rng: np.random.Generator) -> ScalarField:
        field = ScalarField(width, height)

        num_plates = self.num_plates
        if num_plates > field.size:
            self.logger.warning(
                f"Requested {num_plates} plates for a {field.width}x{field.height} map; "
                f"using {field.size}, one per cell."
            )
            num_plates = field.size

        plate_ids = grow_plates(field.width, field.height, num_plates, rng)
        plate_values = rng.random(num_plates)
        field.data[:] = plate_values[plate_ids]

        self.plate_ids = plate_ids
        self.plate_values = plate_values
        self.logger.debug(f"Grew {num_plates} tectonic plates over {field.size} cells.")
        return field
