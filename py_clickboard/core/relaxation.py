"""
Constrained Lloyd relaxation.

Each iteration builds one Voronoi diagram over all sites of the board,
clips every free site's cell to that site's own region and moves the site
to the clipped cell's centroid. Motif (anchored) sites never move.
"""

import math
from typing import List, Sequence

import numpy as np
import structlog

from .free_points import Site, js_round
from .geometry import polygon_centroid
from .motifs import ExclusionZone, push_out_of_zones
from .regions import Region
from .voronoi_cells import voronoi_cell_polygons

logger = structlog.get_logger()

DEFAULT_RELAX_ITERS = 1
DEDUP_PRECISION = 1000.0
DEDUP_NUDGE_FRACTION = 5e-4
DEDUP_ATTEMPTS = 8
GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


def _site_key(x: float, y: float) -> tuple:
    return js_round(x * DEDUP_PRECISION), js_round(y * DEDUP_PRECISION)


def separate_duplicates(sites: Sequence[Site], regions: List[Region],
                        board_size: float) -> int:
    """
    Separate sites sharing (rounded) coordinates.

    Free sites that collide with an earlier site are moved along a fixed
    spiral of small nudges, re-clamped into their region, until they find
    an unused position or the attempts run out. Anchored sites stay put.

    Returns:
        Number of sites moved
    """
    nudge = DEDUP_NUDGE_FRACTION * board_size
    seen = {_site_key(s.x, s.y) for s in sites if s.anchored}
    moved = 0

    for site in sites:
        if site.anchored:
            continue
        key = _site_key(site.x, site.y)
        if key in seen:
            region = regions[site.region_index]
            origin = site.point
            for attempt in range(DEDUP_ATTEMPTS):
                theta = GOLDEN_ANGLE * attempt
                offset = nudge * (attempt + 1) * np.array([math.cos(theta), math.sin(theta)])
                candidate = region.clamp(origin + offset)
                key = _site_key(candidate[0], candidate[1])
                if key not in seen:
                    break
            site.move_to(candidate)
            moved += 1
        seen.add(key)

    if moved:
        logger.debug("Duplicate sites separated", moved=moved)
    return moved


def relax_sites(regions: List[Region], zones: Sequence[ExclusionZone],
                board_size: float, iterations: int = DEFAULT_RELAX_ITERS) -> None:
    """
    Apply constrained Lloyd relaxation to the sites of all regions.

    Args:
        regions: Regions holding their sites
        zones: Motif exclusion zones
        board_size: Board side length
        iterations: Number of iterations (0 disables relaxation)
    """
    bounds = (0.0, 0.0, board_size, board_size)
    for iteration in range(iterations):
        sites = [s for region in regions for s in region.sites]
        cells = voronoi_cell_polygons([(s.x, s.y) for s in sites], bounds)

        targets = []
        for site, cell in zip(sites, cells):
            if site.anchored or cell is None:
                targets.append(None)
                continue
            region = regions[site.region_index]
            clipped = region.clip(cell)
            if clipped is None:
                targets.append(None)
                continue
            target = push_out_of_zones(polygon_centroid(clipped), zones)
            targets.append(region.clamp(target))

        for site, target in zip(sites, targets):
            if target is not None:
                site.move_to(target)

        separate_duplicates(sites, regions, board_size)
        logger.info("Relaxation iteration complete", iteration=iteration + 1,
                    moved=sum(t is not None for t in targets))
