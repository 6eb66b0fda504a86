"""
Hard minimum-distance enforcement between sites of the same region.

Runs a fixed number of pairwise push passes. Early passes are
interleaved with duplicate separation and exclusion-zone avoidance; the
last two passes only separate, so their result is what the cells are
built from. The passes are a hard cap, not a convergence loop, so a few
pairs may remain slightly too close on crowded boards.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np
import structlog
from scipy.spatial.distance import pdist

from .free_points import Site
from .motifs import ExclusionZone, push_out_of_zones
from .prng import SeededRandom
from .regions import Region
from .relaxation import separate_duplicates

logger = structlog.get_logger()

SEPARATION_FACTOR = 0.6
SEPARATION_PASSES = 5
PURE_SEPARATION_PASSES = 2
COINCIDENT_DISTANCE = 1e-12


@dataclass
class SeparationReport:
    """Per-region minimum distances and residual violations."""
    min_distances: List[float] = field(default_factory=list)
    violations: List[int] = field(default_factory=list)

    @property
    def total_violations(self) -> int:
        return sum(self.violations)


def minimum_distance(area: float, count: int, factor: float = SEPARATION_FACTOR) -> float:
    """Minimum site distance for a region: ``factor * sqrt(area / count)``."""
    if count <= 0:
        return 0.0
    return factor * math.sqrt(area / count)


def count_violations(sites: Sequence[Site], min_dist: float, tolerance: float = 1e-6) -> int:
    """Number of site pairs closer than ``min_dist - tolerance``."""
    if len(sites) < 2:
        return 0
    distances = pdist(np.array([(s.x, s.y) for s in sites]))
    return int(np.count_nonzero(distances < min_dist - tolerance))


def separation_sweep(region: Region, min_dist: float, rng: SeededRandom) -> int:
    """
    Push every too-close pair of a region's sites apart symmetrically.

    Exactly coincident pairs are split along a random direction.

    Returns:
        Number of pairs pushed
    """
    sites = region.sites
    pushed = 0
    for i in range(len(sites)):
        for j in range(i + 1, len(sites)):
            a = sites[i]
            b = sites[j]
            dx = b.x - a.x
            dy = b.y - a.y
            d = math.hypot(dx, dy)
            if d >= min_dist:
                continue
            if d < COINCIDENT_DISTANCE:
                theta = 2 * math.pi * rng.random()
                ux, uy = math.cos(theta), math.sin(theta)
            else:
                ux, uy = dx / d, dy / d
            push = 0.5 * (min_dist - d)
            a.move_to(region.clamp((a.x - ux * push, a.y - uy * push)))
            b.move_to(region.clamp((b.x + ux * push, b.y + uy * push)))
            pushed += 1
    return pushed


def enforce_separation(regions: List[Region], zones: Sequence[ExclusionZone],
                       board_size: float, rng: SeededRandom,
                       passes: int = SEPARATION_PASSES) -> SeparationReport:
    """
    Enforce the per-region minimum distance for a fixed number of passes.

    Args:
        regions: Regions holding their sites
        zones: Motif exclusion zones
        board_size: Board side length
        rng: Seeded generator
        passes: Number of passes

    Returns:
        Report of minimum distances and remaining violations
    """
    min_distances = [minimum_distance(r.area, len(r.sites)) for r in regions]
    all_sites = [s for r in regions for s in r.sites]

    for p in range(passes):
        pushed = sum(separation_sweep(r, d, rng) for r, d in zip(regions, min_distances))

        if p < passes - PURE_SEPARATION_PASSES:
            separate_duplicates(all_sites, regions, board_size)
            for site in all_sites:
                if not site.anchored:
                    region = regions[site.region_index]
                    site.move_to(region.clamp(push_out_of_zones(site.point, zones)))

        logger.debug("Separation pass complete", separation_pass=p + 1, pushed=pushed)

    report = SeparationReport(
        min_distances=min_distances,
        violations=[count_violations(r.sites, d) for r, d in zip(regions, min_distances)],
    )
    logger.info("Separation enforced",
                min_distances=[round(d, 3) for d in min_distances],
                violations=report.violations)
    return report
