"""
Region partitioning of the square board.

Two parallel cut lines with a shared, slightly tilted normal split the
square into three convex regions (left, mid, right). Each of the three
widths along the normal is reserved a minimum fraction of the square's
projected extent, so no region can degenerate and no draw is retried.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import structlog

from .geometry import (
    HalfPlane,
    TriangleFan,
    boundary_clearance,
    build_fan,
    clamp_to_region,
    clip_polygon,
    is_inside_all,
    polygon_area,
    polygon_centroid,
    sample_uniform_in_convex_polygon,
)
from .prng import SeededRandom

logger = structlog.get_logger()

REGION_NAMES = ("left", "mid", "right")
REGION_MIN_WIDTH_FRACTION = 0.18
CUT_MAX_TILT_DEGREES = 18.0


@dataclass
class Region:
    """
    One of the three convex sub-areas of the board.

    The anchor is the polygon centroid, a guaranteed interior point used
    when clamping points back inside.
    """
    name: str
    index: int
    half_planes: List[HalfPlane]
    polygon: np.ndarray
    area: float
    anchor: np.ndarray
    fan: TriangleFan
    quota: int = 0
    sites: list = field(default_factory=list)

    def contains(self, point) -> bool:
        return is_inside_all(point, self.half_planes)

    def clamp(self, point) -> np.ndarray:
        return clamp_to_region(point, self.anchor, self.half_planes)

    def clearance(self, point) -> float:
        return boundary_clearance(point, self.half_planes)

    def sample(self, rng: SeededRandom) -> np.ndarray:
        return sample_uniform_in_convex_polygon(self.polygon, rng, self.fan)

    def clip(self, polygon) -> Optional[np.ndarray]:
        return clip_polygon(polygon, self.half_planes)


def square_half_planes(size: float) -> List[HalfPlane]:
    """The four edges of the square [0, size] x [0, size]."""
    return [
        HalfPlane(-1.0, 0.0, 0.0),
        HalfPlane(1.0, 0.0, size),
        HalfPlane(0.0, -1.0, 0.0),
        HalfPlane(0.0, 1.0, size),
    ]


def square_polygon(size: float) -> np.ndarray:
    return np.array([[0.0, 0.0], [size, 0.0], [size, size], [0.0, size]])


def make_region(name: str, index: int, half_planes: List[HalfPlane],
                size: float) -> Region:
    polygon = clip_polygon(square_polygon(size), half_planes)
    if polygon is None:
        raise ValueError(f"Region {name} is empty")
    return Region(
        name=name,
        index=index,
        half_planes=half_planes,
        polygon=polygon,
        area=polygon_area(polygon),
        anchor=polygon_centroid(polygon),
        fan=build_fan(polygon),
    )


def cut_offsets(normal: np.ndarray, size: float, weights) -> tuple:
    """
    Offsets t1 < t2 of the two cut lines along the normal.

    Each width gets the minimum fraction of the projected extent and the
    remainder is split by the normalized weights.
    """
    corners = square_polygon(size)
    projections = corners @ normal
    lo = float(projections.min())
    extent = float(projections.max()) - lo

    min_width = REGION_MIN_WIDTH_FRACTION * extent
    spare = extent - 3 * min_width
    total = float(sum(weights))
    if total <= 0.0:
        shares = [1.0 / 3.0] * 3
    else:
        shares = [w / total for w in weights]

    widths = [min_width + spare * s for s in shares]
    t1 = lo + widths[0]
    t2 = t1 + widths[1]
    return t1, t2


def partition_square(size: float, rng: SeededRandom) -> List[Region]:
    """
    Split the square into left, mid and right regions.

    Consumes four draws: the tilt of the cut normal and three width weights.

    Args:
        size: Board side length
        rng: Seeded generator

    Returns:
        Regions in left, mid, right order
    """
    tilt = np.radians(CUT_MAX_TILT_DEGREES) * (2.0 * rng.random() - 1.0)
    normal = np.array([np.cos(tilt), np.sin(tilt)])
    weights = [rng.random() for _ in range(3)]
    t1, t2 = cut_offsets(normal, size, weights)

    cut1 = HalfPlane(float(normal[0]), float(normal[1]), t1)
    cut2 = HalfPlane(float(normal[0]), float(normal[1]), t2)
    square = square_half_planes(size)

    regions = [
        make_region("left", 0, square + [cut1], size),
        make_region("mid", 1, square + [cut1.flipped(), cut2], size),
        make_region("right", 2, square + [cut2.flipped()], size),
    ]

    logger.info("Board partitioned",
                tilt_degrees=round(float(np.degrees(tilt)), 3),
                areas=[round(r.area, 3) for r in regions])
    return regions


def merge_half_planes(first: List[HalfPlane], second: List[HalfPlane]) -> List[HalfPlane]:
    """Half-planes of the union of two adjacent regions sharing one cut."""
    shared = {hp for hp in first if hp.flipped() in second}
    merged = []
    for hp in first + second:
        if hp in shared or hp.flipped() in shared or hp in merged:
            continue
        merged.append(hp)
    return merged


def merge_empty_regions(regions: List[Region], size: float) -> List[Region]:
    """
    Merge regions without quota into a neighbour so the board stays tiled.

    Only boards with fewer pieces than regions have empty regions. An
    empty region joins its neighbour that holds pieces, the smaller one
    when both do, and the merged region keeps the name and quota of the
    receiving region. Indices are renumbered left to right.

    Args:
        regions: Regions with quotas assigned, in left-to-right order
        size: Board side length

    Returns:
        Regions covering the square, each with a positive quota
    """
    merged = list(regions)
    while len(merged) > 1:
        empty = next((i for i, r in enumerate(merged) if r.quota == 0), None)
        if empty is None:
            break
        neighbours = [i for i in (empty - 1, empty + 1) if 0 <= i < len(merged)]
        holding = [i for i in neighbours if merged[i].quota > 0] or neighbours
        target = min(holding, key=lambda i: (merged[i].area, i))

        lo, hi = sorted((empty, target))
        receiver = merged[target]
        half_planes = merge_half_planes(merged[lo].half_planes, merged[hi].half_planes)
        region = make_region(receiver.name, lo, half_planes, size)
        region.quota = receiver.quota
        logger.info("Empty region merged", region=merged[empty].name, into=receiver.name)
        merged[lo:hi + 1] = [region]

    for index, region in enumerate(merged):
        region.index = index
    return merged


def largest_regions(regions: List[Region], count: int) -> List[Region]:
    """Regions by descending area; ties keep left-to-right order."""
    order = sorted(regions, key=lambda r: (-r.area, r.index))
    return order[:count]
