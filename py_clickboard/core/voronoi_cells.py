"""
Bounded Voronoi cells over scipy.spatial.Voronoi.

Given sites and a bounding rectangle, returns each site's Voronoi cell
clipped to the rectangle. A ring of far guard points closes every cell
before clipping, the same way boundary points pseudo-clip the map grid.
Duplicate, non-finite and out-of-range sites get ``None``.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import QhullError, Voronoi

from .geometry import HalfPlane, clip_polygon

logger = structlog.get_logger()

GUARD_POINTS = 16
GUARD_RADIUS_FACTOR = 10.0

Bounds = Tuple[float, float, float, float]


def bounds_half_planes(bounds: Bounds) -> List[HalfPlane]:
    """Half-planes of an axis-aligned rectangle (x0, y0, x1, y1)."""
    x0, y0, x1, y1 = bounds
    return [
        HalfPlane(-1.0, 0.0, -x0),
        HalfPlane(1.0, 0.0, x1),
        HalfPlane(0.0, -1.0, -y0),
        HalfPlane(0.0, 1.0, y1),
    ]


def get_guard_points(bounds: Bounds) -> np.ndarray:
    """Points on a far circle around the rectangle."""
    x0, y0, x1, y1 = bounds
    cx = 0.5 * (x0 + x1)
    cy = 0.5 * (y0 + y1)
    span = max(x1 - x0, y1 - y0, 1.0)
    radius = span * GUARD_RADIUS_FACTOR
    angles = 2 * np.pi * np.arange(GUARD_POINTS) / GUARD_POINTS
    return np.column_stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)])


def _valid_site_indices(sites: np.ndarray, bounds: Bounds) -> List[int]:
    x0, y0, x1, y1 = bounds
    seen = set()
    valid = []
    for i, (x, y) in enumerate(sites):
        if not (np.isfinite(x) and np.isfinite(y)):
            continue
        if x < x0 or x > x1 or y < y0 or y > y1:
            continue
        key = (float(x), float(y))
        if key in seen:
            continue
        seen.add(key)
        valid.append(i)
    return valid


def _order_around(vertices: np.ndarray, site: np.ndarray) -> np.ndarray:
    angles = np.arctan2(vertices[:, 1] - site[1], vertices[:, 0] - site[0])
    return vertices[np.argsort(angles, kind="stable")]


def voronoi_cell_polygons(sites: Sequence, bounds: Bounds) -> List[Optional[np.ndarray]]:
    """
    Compute the Voronoi cell polygon of each site within a rectangle.

    Args:
        sites: (n, 2) site coordinates
        bounds: Bounding rectangle (x0, y0, x1, y1)

    Returns:
        For each site index, its ordered cell polygon or None
    """
    sites = np.asarray(sites, dtype=np.float64).reshape(-1, 2)
    cells: List[Optional[np.ndarray]] = [None] * len(sites)

    valid = _valid_site_indices(sites, bounds)
    if not valid:
        return cells

    points = np.vstack([sites[valid], get_guard_points(bounds)])
    try:
        vor = Voronoi(points)
    except QhullError as e:
        logger.warning("Voronoi computation failed", sites=len(valid), error=str(e))
        return cells

    box = bounds_half_planes(bounds)
    for local, site_index in enumerate(valid):
        region_idx = vor.point_region[local]
        if region_idx == -1:
            continue
        region = vor.regions[region_idx]
        if -1 in region or len(region) < 3:
            continue
        vertices = _order_around(vor.vertices[region], sites[site_index])
        cells[site_index] = clip_polygon(vertices, box)

    return cells
