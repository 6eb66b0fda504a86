"""
Free (non-motif) point generation.

Each region's remaining quota is split into a few macro points, spread
uniformly to anchor large open cells, and many micro points pulled toward
a handful of well separated cluster centers. Points that land in a motif's
exclusion zone are projected out radially and clamped back into the
region; draws are never repeated.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import structlog

from .motifs import ExclusionZone, push_out_of_zones
from .prng import SeededRandom
from .regions import Region

logger = structlog.get_logger()

MACRO_FRACTION = 0.12
MICRO_SKEW = 3.0
MIN_CLUSTERS = 2
MAX_CLUSTERS = 5
CANDIDATES_PER_CLUSTER = 4
MIN_CANDIDATES = 12


@dataclass
class Site:
    """Voronoi generator point; anchored sites belong to a motif."""
    x: float
    y: float
    anchored: bool
    region_index: int

    @property
    def point(self) -> np.ndarray:
        return np.array([self.x, self.y])

    def move_to(self, point) -> None:
        self.x = float(point[0])
        self.y = float(point[1])


def js_round(value: float) -> int:
    """Round half up, as Math.round does."""
    return int(math.floor(value + 0.5))


def split_macro_micro(free: int) -> tuple:
    """Number of macro and micro points for a region's free quota."""
    if free <= 0:
        return 0, 0
    macro = min(free, max(1, js_round(free * MACRO_FRACTION)))
    return macro, free - macro


def place_free_point(point, region: Region, zones: Sequence[ExclusionZone]) -> np.ndarray:
    return region.clamp(push_out_of_zones(point, zones))


def select_cluster_centers(candidates: List[np.ndarray], count: int,
                           rng: SeededRandom) -> List[np.ndarray]:
    """
    Maximin selection of cluster centers from a candidate pool.

    The first center is a random candidate; each following one is the
    candidate farthest from all centers chosen so far (first wins ties).
    """
    if not candidates or count <= 0:
        return []
    pool = np.array(candidates)
    first = rng.randint(len(pool))
    chosen = [first]
    nearest = np.hypot(*(pool - pool[first]).T)
    while len(chosen) < min(count, len(pool)):
        index = int(np.argmax(nearest))
        chosen.append(index)
        nearest = np.minimum(nearest, np.hypot(*(pool - pool[index]).T))
    return [pool[i].copy() for i in chosen]


def generate_free_points(region: Region, free: int, zones: Sequence[ExclusionZone],
                         rng: SeededRandom) -> List[Site]:
    """
    Fill a region's free quota with macro and micro points.

    Args:
        region: Host region
        free: Number of points to place
        zones: Exclusion zones of all motifs
        rng: Seeded generator

    Returns:
        New non-anchored sites
    """
    macro, micro = split_macro_micro(free)
    sites = []

    for _ in range(macro):
        p = place_free_point(region.sample(rng), region, zones)
        sites.append(Site(float(p[0]), float(p[1]), False, region.index))

    if micro > 0:
        clusters = min(micro, max(MIN_CLUSTERS, min(MAX_CLUSTERS, js_round(2 + rng.random() * 3))))
        pool_size = max(MIN_CANDIDATES, CANDIDATES_PER_CLUSTER * clusters)
        candidates = [place_free_point(region.sample(rng), region, zones)
                      for _ in range(pool_size)]
        centers = select_cluster_centers(candidates, clusters, rng)

        for _ in range(micro):
            sample = region.sample(rng)
            center = rng.choice(centers)
            weight = rng.random() ** MICRO_SKEW
            p = place_free_point(center + (sample - center) * weight, region, zones)
            sites.append(Site(float(p[0]), float(p[1]), False, region.index))

    logger.debug("Free points generated", region=region.name, macro=macro, micro=micro)
    return sites
