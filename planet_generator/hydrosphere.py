# planet_generator/hydrosphere.py

"""
================================================================================
HYDROSPHERE
================================================================================
This module handles everything about water except the oceans themselves
(those come from the lithosphere's height map): rivers, the approximate
distance from every land cell to water, and precipitation.

Algorithm:
---------------
1. Combine the height map with a cloud frequency map and a random modifier
   map into a "fitness" map of likely river sources.
2. Start one river at each of the fittest cells and walk it downhill until it
   reaches the ocean or another river, eroding the height map along the way.
3. Approximate every land cell's distance to water (ocean or river) by
   bucketing the water cells and measuring to the nearest bucket average.
4. Combine the cloud map, the river map and the water proximity map into a
   precipitation map, normalized over land only.

Data Contract:
---------------
- Inputs: A height map, the cloud and river source modifier fields, the
  number of rivers, the sea level, and a NumPy random Generator for breaking
  ties between equally low neighbors.
- Outputs: River objects and ScalarFields normalized to [0, 1].
- Side Effects: RiverNetworkBuilder.build() erodes the height map it is given
  in place. HydrosphereGenerator works on a copy of its input height map.
- Invariants: Along every river, from source to terminus, height never
  increases.
================================================================================
"""

import logging
import math
import time
from dataclasses import dataclass, field

import numpy as np
from scipy.spatial import cKDTree

from . import config as DEFAULTS
from .noise import FieldGenerator
from .scalar_field import ScalarField, normalize_over_land
from .tectonics import wrapped_neighbors

# Marks a cell that belongs to no river.
NO_RIVER = -1


class River:
    """
    The cells of a single river. `path` keeps them in the order they were
    walked, from the source to the terminus.
    """

    def __init__(self):
        self.path = []
        self._cells = set()
        # False if the walk got stuck before finding water.
        self.reached_water = False

    def insert(self, x: int, y: int) -> bool:
        """Adds a cell to the end of the river. Returns False if it is already part of it."""
        if (x, y) in self._cells:
            return False
        self._cells.add((x, y))
        self.path.append((x, y))
        return True

    def remove(self, x: int, y: int) -> bool:
        if (x, y) not in self._cells:
            return False
        self._cells.remove((x, y))
        self.path.remove((x, y))
        return True

    def contains(self, x: int, y: int) -> bool:
        return (x, y) in self._cells

    def is_empty(self) -> bool:
        return not self.path

    @property
    def source(self) -> tuple[int, int] | None:
        return self.path[0] if self.path else None

    @property
    def terminus(self) -> tuple[int, int] | None:
        return self.path[-1] if self.path else None

    def __contains__(self, cell) -> bool:
        return tuple(cell) in self._cells

    def __iter__(self):
        return iter(self.path)

    def __len__(self) -> int:
        return len(self.path)

    def __repr__(self) -> str:
        return f"River({len(self.path)} cells, reached_water={self.reached_water})"


class RiverNetworkBuilder:
    """
    Places rivers on a height map and grows each one downhill.

    Each river is a randomized greedy walk over the four wrapped neighbors of
    the current cell. The walk keeps an explicit stack, a parent map to
    rebuild the path, and a visited mask so it never loops. It stops when it
    reaches a cell at or below sea level, or a cell of an earlier river. A
    walk that runs out of unvisited neighbors first is abandoned and leaves
    an empty river; it does not backtrack to try another branch.
    """

    def __init__(self, num_rivers: int = DEFAULTS.DEFAULT_NUM_RIVERS, sea_level: float = DEFAULTS.SEA_LEVEL,
                 rng: np.random.Generator = None, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.num_rivers = num_rivers
        self.sea_level = sea_level
        self.rng = rng if rng is not None else np.random.default_rng()

        # Per-run state: which river created each cell, and every river's
        # path as flat indices with a lookup from cell to path position.
        self._owner = None
        self._paths = []
        self._positions = []

    @property
    def num_rivers(self) -> int:
        return self._num_rivers

    @num_rivers.setter
    def num_rivers(self, value: int):
        self._num_rivers = max(int(value or 0), 0)

    def fitness_field(self, height_map: ScalarField, cloud: ScalarField, modifier: ScalarField = None) -> ScalarField | None:
        """
        Scores every cell as a river source. High, cloudy cells score well;
        the modifier map decorrelates the choice from those two. Ocean cells
        score zero.
        """
        others = [cloud] if modifier is None else [cloud, modifier]
        fitness = height_map.combine_with(others)
        if fitness is None:
            return None

        fitness.data[height_map.data <= self.sea_level] = 0.0
        return fitness.sqrt().normalize()

    def build(self, height_map: ScalarField, cloud: ScalarField, modifier: ScalarField = None) -> list[River] | None:
        """
        Builds the rivers, fittest source first, so later rivers can drain into
        earlier ones. Erodes `height_map` in place. Returns None if the height
        or cloud map is missing or the maps differ in size.
        """
        if height_map is None or cloud is None:
            return None

        fitness = self.fitness_field(height_map, cloud, modifier)
        if fitness is None:
            self.logger.warning("River generation skipped: the input maps differ in size.")
            return None

        self._owner = np.full(height_map.size, NO_RIVER, dtype=np.int64)
        self._paths = []
        self._positions = []

        num_rivers = min(self.num_rivers, height_map.size)
        order, _ = fitness.sorted_indices()
        sources = order[::-1][:num_rivers]

        rivers = []
        # Sources that are already water (ocean, or a cell of an earlier river)
        # give empty rivers too, but they are not dead ends.
        in_water = 0
        for river_id, source in enumerate(sources):
            source = int(source)
            if height_map.data[source] <= self.sea_level or self._owner[source] != NO_RIVER:
                in_water += 1
            river = self._build_river(river_id, source, height_map)
            self.logger.debug(f"River {river_id} from cell {source}: {len(river)} cells.")
            rivers.append(river)

        if in_water:
            self.logger.debug(f"{in_water} of {len(rivers)} river sources were already water.")
        stuck = sum(1 for river in rivers if not river.reached_water) - in_water
        if stuck:
            self.logger.warning(f"{stuck} of {len(rivers)} rivers got stuck before reaching water.")
        return rivers

    def _build_river(self, river_id: int, source: int, height_map: ScalarField) -> River:
        width, height = height_map.width, height_map.height
        heights = height_map.data
        river = River()

        stack = [source]
        parent = {}
        visited = np.zeros(height_map.size, dtype=bool)
        visited[source] = True

        while stack:
            current = stack.pop()

            # Found water: rebuild the path back to the source.
            if heights[current] <= self.sea_level or self._owner[current] != NO_RIVER:
                if current == source:
                    break
                path = [current]
                while current != source:
                    current = parent[current]
                    path.append(current)
                path.reverse()
                self._record(river_id, river, path, width)
                river.reached_water = True
                return river

            neighbors = [n for n in wrapped_neighbors(current, width, height) if not visited[n]]
            if not neighbors:
                continue

            chosen = self._choose_neighbor(neighbors, heights)
            visited[chosen] = True
            parent[chosen] = current
            stack.append(chosen)

            # Erosion: the next cell is never higher than the current one.
            if heights[chosen] > heights[current]:
                self._erode(chosen, heights[current], heights)

        # Either the source was already water or the walk hit a dead end.
        self._paths.append([])
        self._positions.append({})
        return river

    def _choose_neighbor(self, neighbors: list[int], heights: np.ndarray) -> int:
        """
        Picks the next cell: any neighbor that is already a river, otherwise
        the lowest neighbor, with ties broken at random.
        """
        for neighbor in neighbors:
            if self._owner[neighbor] != NO_RIVER:
                return neighbor

        lowest = min(heights[n] for n in neighbors)
        candidates = [n for n in neighbors if heights[n] == lowest]
        if len(candidates) == 1:
            return candidates[0]
        return candidates[int(self.rng.integers(len(candidates)))]

    def _record(self, river_id: int, river: River, path: list[int], width: int):
        for cell in path:
            river.insert(cell % width, cell // width)
            # A terminus shared with an older river stays owned by that river.
            if self._owner[cell] == NO_RIVER:
                self._owner[cell] = river_id
        self._paths.append(path)
        self._positions.append({cell: position for position, cell in enumerate(path)})

    def _erode(self, cell: int, level: float, heights: np.ndarray):
        """
        Lowers `cell` to `level`. If the cell belongs to an older river, the
        lowering carries on downstream along that river, and along whatever
        river it drains into, so no river ever has to flow uphill.
        """
        heights[cell] = level
        river_id = self._owner[cell]
        while river_id != NO_RIVER:
            path = self._paths[river_id]
            position = self._positions[river_id][cell]
            for downstream in path[position + 1:]:
                if heights[downstream] > level:
                    heights[downstream] = level

            terminus = path[-1]
            next_river = self._owner[terminus]
            if next_river == river_id:
                break
            cell, level, river_id = terminus, heights[terminus], next_river


def river_map(width: int, height: int, rivers: list[River]) -> ScalarField:
    """A field holding 1 on every river cell and 0 everywhere else."""
    result = ScalarField(width, height)
    grid = result.as_array()
    for river in rivers or []:
        for x, y in river.path:
            grid[y, x] = 1.0
    return result


def approximate_water_distance(height_map: ScalarField, rivers_field: ScalarField, sea_level: float,
                               bucket_size: int = DEFAULTS.WATER_BUCKET_SIZE) -> ScalarField | None:
    """
    Approximates the distance from every land cell to the nearest water.

    The map is split into square buckets of `bucket_size` cells. Each bucket
    holding water (ocean or river) is reduced to the average position of its
    water cells, and a land cell's distance is the Euclidean distance to the
    nearest of those averages. This costs one lookup per bucket instead of
    one per water cell, at the price of accuracy. Water cells hold 0, and so
    does every cell of a map with no water at all.
    """
    if height_map is None or not height_map.same_shape(rivers_field):
        return None
    if bucket_size is None or bucket_size <= 0:
        bucket_size = DEFAULTS.WATER_BUCKET_SIZE

    width, height = height_map.width, height_map.height
    water_mask = (height_map.as_array() <= sea_level) | (rivers_field.as_array() > 0.5)
    result = ScalarField(width, height)

    water_y, water_x = np.nonzero(water_mask)
    if water_x.size == 0:
        return result

    # 1. Average the water positions within each bucket.
    buckets_per_row = math.ceil(width / bucket_size)
    num_buckets = buckets_per_row * math.ceil(height / bucket_size)
    bucket_ids = (water_y // bucket_size) * buckets_per_row + (water_x // bucket_size)
    counts = np.bincount(bucket_ids, minlength=num_buckets)
    sum_x = np.bincount(bucket_ids, weights=water_x, minlength=num_buckets)
    sum_y = np.bincount(bucket_ids, weights=water_y, minlength=num_buckets)
    occupied = counts > 0
    centers = np.column_stack((sum_x[occupied] / counts[occupied], sum_y[occupied] / counts[occupied]))

    # 2. Measure every dry cell to its nearest bucket average.
    dry_y, dry_x = np.nonzero(~water_mask)
    if dry_x.size:
        tree = cKDTree(centers)
        distances, _ = tree.query(np.column_stack((dry_x, dry_y)))
        result.as_array()[dry_y, dry_x] = distances

    return result


def water_proximity(height_map: ScalarField, rivers_field: ScalarField, sea_level: float,
                    bucket_size: int = DEFAULTS.WATER_BUCKET_SIZE) -> ScalarField | None:
    """
    The approximate water distance turned into a closeness score: normalized
    over land, then inverted so land next to water scores 1. Ocean is 0. If
    every land cell is equally far from water (every land cell a river, for
    instance) all land scores 1. A map without water is 0 everywhere.
    """
    distance = approximate_water_distance(height_map, rivers_field, sea_level, bucket_size)
    if distance is None:
        return None

    # A map with no water at all has nothing to be close to.
    water_mask = (height_map.data <= sea_level) | (rivers_field.data > 0.5)
    if not water_mask.any():
        return distance

    proximity = normalize_over_land(distance, height_map, sea_level)
    land_mask = height_map.data > sea_level
    proximity.data[land_mask] = 1.0 - proximity.data[land_mask]
    return proximity


class PrecipitationComposer:
    """
    Derives precipitation from cloud cover, rivers, and the proximity to
    water. The result is normalized over land only so that extreme values
    over the ocean do not squash the range of rainfall on land.
    """

    def __init__(self, sea_level: float = DEFAULTS.SEA_LEVEL, weights: dict = None,
                 blur_radius: int = DEFAULTS.PRECIPITATION_BLUR_RADIUS):
        self.sea_level = sea_level
        self.weights = {**DEFAULTS.PRECIPITATION_WEIGHTS, **(weights or {})}
        self.blur_radius = blur_radius

    def compose(self, cloud: ScalarField, rivers_field: ScalarField, proximity: ScalarField,
                height_map: ScalarField) -> ScalarField | None:
        if cloud is None or rivers_field is None or proximity is None or height_map is None:
            return None

        precipitation = cloud.copy().scale_by(self.weights['cloud']).combine_with([
            rivers_field.copy().scale_by(self.weights['river']),
            proximity.copy().scale_by(self.weights['water_proximity']),
        ])
        if precipitation is None:
            return None

        precipitation.sqrt().blur(self.blur_radius)
        return normalize_over_land(precipitation, height_map, self.sea_level)


@dataclass
class Hydrosphere:
    """The water layer of a planet."""
    cloud_frequency: ScalarField
    river_source_modifier: ScalarField
    height_map: ScalarField
    sea_level: float
    rivers: list[River] = field(default_factory=list)
    river_field: ScalarField = None
    water_proximity: ScalarField = None
    precipitation: ScalarField = None

    @property
    def num_rivers(self) -> int:
        return len(self.rivers)

    def river(self, index: int) -> River | None:
        if index < 0 or index >= len(self.rivers):
            return None
        return self.rivers[index]

    def river_of(self, x: int, y: int) -> int:
        """The index of the first river containing (x, y), or -1 if none does."""
        for index, river in enumerate(self.rivers):
            if river.contains(x, y):
                return index
        return -1

    def river_map(self) -> ScalarField:
        return river_map(self.height_map.width, self.height_map.height, self.rivers)


class HydrosphereGenerator:
    """
    Generates a Hydrosphere on top of a finished height map. The height map
    is copied first; the rivers erode the copy.
    """

    def __init__(self, width: int = DEFAULTS.DEFAULT_WIDTH, height: int = DEFAULTS.DEFAULT_HEIGHT,
                 num_rivers: int = DEFAULTS.DEFAULT_NUM_RIVERS, sea_level: float = DEFAULTS.SEA_LEVEL,
                 bucket_size: int = DEFAULTS.WATER_BUCKET_SIZE, precipitation_weights: dict = None,
                 blur_radius: int = DEFAULTS.PRECIPITATION_BLUR_RADIUS, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.width = width if width and width > 0 else DEFAULTS.DEFAULT_WIDTH
        self.height = height if height and height > 0 else DEFAULTS.DEFAULT_HEIGHT
        self.num_rivers = num_rivers
        self.sea_level = sea_level
        self.bucket_size = bucket_size
        self.composer = PrecipitationComposer(sea_level, precipitation_weights, blur_radius)

        self.height_map: ScalarField = None
        self.cloud_generator: FieldGenerator = None
        self.river_source_generator: FieldGenerator = None

    def generate(self, cloud_rng: np.random.Generator, modifier_rng: np.random.Generator,
                 river_rng: np.random.Generator) -> Hydrosphere | None:
        if self.height_map is None or self.cloud_generator is None or self.river_source_generator is None:
            self.logger.warning("Hydrosphere generation skipped: the height map or a field generator is not set.")
            return None
        if self.height_map.width != self.width or self.height_map.height != self.height:
            self.logger.warning(
                f"Hydrosphere generation skipped: height map is {self.height_map.width}x{self.height_map.height}, "
                f"expected {self.width}x{self.height}."
            )
            return None

        start_time = time.time()
        hydrosphere = Hydrosphere(
            cloud_frequency=self.cloud_generator.generate(self.width, self.height, cloud_rng),
            river_source_modifier=self.river_source_generator.generate(self.width, self.height, modifier_rng),
            height_map=self.height_map.copy(),
            sea_level=self.sea_level,
        )

        builder = RiverNetworkBuilder(self.num_rivers, self.sea_level, river_rng, self.logger)
        hydrosphere.rivers = builder.build(
            hydrosphere.height_map, hydrosphere.cloud_frequency, hydrosphere.river_source_modifier
        )
        hydrosphere.river_field = hydrosphere.river_map()
        hydrosphere.water_proximity = water_proximity(
            hydrosphere.height_map, hydrosphere.river_field, self.sea_level, self.bucket_size
        )
        hydrosphere.precipitation = self.composer.compose(
            hydrosphere.cloud_frequency, hydrosphere.river_field,
            hydrosphere.water_proximity, hydrosphere.height_map
        )

        river_cells = int(hydrosphere.river_field.data.sum())
        self.logger.info(
            f"Hydrosphere generated in {time.time() - start_time:.2f}s "
            f"({len(hydrosphere.rivers)} rivers covering {river_cells} cells)."
        )
        return hydrosphere
