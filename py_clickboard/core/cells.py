"""
Final cell construction.

Every region computes its own Voronoi diagram over its final sites and
clips the cells hard to the region boundary. A degenerate cell becomes a
tiny triangle around its site, so each site always yields one polygon.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple

import numpy as np
import structlog

from .geometry import (
    DEGENERATE_AREA,
    fallback_triangle,
    polygon_area,
    polygon_centroid,
    strip_closing_vertex,
)
from .prng import SeededRandom
from .regions import Region
from .voronoi_cells import voronoi_cell_polygons

logger = structlog.get_logger()

FALLBACK_TRIANGLE_FRACTION = 1.2e-3

Point = Tuple[float, float]


class CellShape(NamedTuple):
    """Unlabelled cell geometry."""
    polygon: np.ndarray
    centroid: np.ndarray
    site: np.ndarray
    region_index: int
    anchored: bool


@dataclass(frozen=True)
class Cell:
    """Final board cell: convex polygon, centroid and display label."""
    polygon: Tuple[Point, ...]
    centroid: Point
    label: int
    region: str
    site: Point
    anchored: bool = False

    def to_dict(self) -> dict:
        return {
            "polygon": [list(v) for v in self.polygon],
            "centroid": list(self.centroid),
            "label": self.label,
            "region": self.region,
            "site": list(self.site),
            "anchored": self.anchored,
        }


def _point(p) -> Point:
    return (float(p[0]), float(p[1]))


def fallback_shape(site, region: Region, board_size: float,
                   anchored: bool = False) -> CellShape:
    site = np.asarray(site, dtype=np.float64)
    size = FALLBACK_TRIANGLE_FRACTION * board_size
    triangle = fallback_triangle(site, size, region.anchor, region.half_planes)
    return CellShape(triangle, site.copy(), site.copy(), region.index, anchored)


def region_cell_shapes(region: Region, board_size: float) -> List[CellShape]:
    """Clipped Voronoi cell of each site in a region, in site order."""
    bounds = (0.0, 0.0, board_size, board_size)
    sites = region.sites
    polygons = voronoi_cell_polygons([(s.x, s.y) for s in sites], bounds)

    shapes = []
    for index, (site, polygon) in enumerate(zip(sites, polygons)):
        clipped: Optional[np.ndarray] = None
        if polygon is not None and len(polygon) >= 3:
            clipped = region.clip(strip_closing_vertex(polygon))
        if clipped is None or polygon_area(clipped) < DEGENERATE_AREA:
            logger.warning("Degenerate cell replaced by fallback triangle",
                           region=region.name, site_index=index)
            shapes.append(fallback_shape(site.point, region, board_size, site.anchored))
            continue
        shapes.append(CellShape(clipped, polygon_centroid(clipped), site.point,
                                region.index, site.anchored))
    return shapes


def build_cells(regions: List[Region], board_size: float, piece_count: int) -> List[CellShape]:
    """
    Build exactly ``piece_count`` cell shapes, region by region.

    A mismatched total is truncated, or padded with fallback cells in the
    middle region.
    """
    shapes = []
    for region in regions:
        shapes.extend(region_cell_shapes(region, board_size))

    if len(shapes) != piece_count:
        logger.warning("Cell count mismatch", cells=len(shapes), piece_count=piece_count)
        shapes = shapes[:piece_count]
        middle = regions[len(regions) // 2]
        while len(shapes) < piece_count:
            shapes.append(fallback_shape(middle.anchor, middle, board_size))

    return shapes


def assign_labels(shapes: List[CellShape], regions: List[Region],
                  rng: SeededRandom) -> List[Cell]:
    """Shuffle labels 1..N and assign them in region-then-index order."""
    labels = rng.shuffle(list(range(1, len(shapes) + 1)))
    return [
        Cell(
            polygon=tuple(_point(v) for v in shape.polygon),
            centroid=_point(shape.centroid),
            label=label,
            region=regions[shape.region_index].name,
            site=_point(shape.site),
            anchored=shape.anchored,
        )
        for shape, label in zip(shapes, labels)
    ]
