"""
Structured motifs: rings, rings with a center point, and small grids.

The planner decides how many motifs a board gets, of which kind, and in
which regions, within a global point budget. The builder turns a planned
motif into fixed (anchored) points plus a circular exclusion zone that
keeps free points away from it.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .geometry import rotate
from .prng import SeededRandom
from .regions import Region, largest_regions

logger = structlog.get_logger()

MOTIF_BUDGET_FRACTION = 0.4
ONE_MOTIF_MAX_PIECES = 30
TWO_MOTIF_MAX_PIECES = 70
MOTIF_REGION_RESERVE = 2

RING_MIN_SIDES = 3
RING_MAX_SIDES = 8
GRID_ROWS = (1, 2, 3)
GRID_COLS = (3, 4, 5)

MOTIF_SPACING_FACTOR = 1.0
MOTIF_CLEARANCE_FACTOR = 0.75
CENTER_WALK_STEPS = 16


class MotifKind(str, Enum):
    """Combinatorial motif type."""
    RING = "ring"
    RING_CENTER = "ring+center"
    GRID = "grid"


MIN_POINTS = {
    MotifKind.RING: RING_MIN_SIDES,
    MotifKind.RING_CENTER: RING_MIN_SIDES + 1,
    MotifKind.GRID: GRID_ROWS[0] * GRID_COLS[0],
}


@dataclass(frozen=True)
class MotifSpec:
    """Motif kind plus its shape parameters."""
    kind: MotifKind
    sides: int = 0
    rows: int = 0
    cols: int = 0

    @property
    def point_count(self) -> int:
        if self.kind == MotifKind.RING:
            return self.sides
        if self.kind == MotifKind.RING_CENTER:
            return self.sides + 1
        return self.rows * self.cols


@dataclass
class MotifPlacement:
    """A motif spec bound to its host region."""
    spec: MotifSpec
    region_index: int


@dataclass
class ExclusionZone:
    """Circle that free points must stay outside of."""
    center: np.ndarray
    radius: float

    def contains(self, point) -> bool:
        return math.hypot(point[0] - self.center[0], point[1] - self.center[1]) < self.radius

    def push_out(self, point) -> np.ndarray:
        """Project a point radially onto the zone boundary if it is inside."""
        point = np.asarray(point, dtype=np.float64)
        dx = point[0] - self.center[0]
        dy = point[1] - self.center[1]
        d = math.hypot(dx, dy)
        if d >= self.radius:
            return point.copy()
        if d == 0.0:
            direction = np.array([1.0, 0.0])
        else:
            direction = np.array([dx / d, dy / d])
        return self.center + direction * self.radius


@dataclass
class Motif:
    """An instantiated motif: anchored points and their exclusion zone."""
    spec: MotifSpec
    region_index: int
    center: np.ndarray
    radius: float
    angle: float
    points: List[np.ndarray] = field(default_factory=list)
    zone: Optional[ExclusionZone] = None


def push_out_of_zones(point, zones: Sequence[ExclusionZone]) -> np.ndarray:
    point = np.asarray(point, dtype=np.float64)
    for zone in zones:
        point = zone.push_out(point)
    return point


def motif_count(n: int) -> int:
    if n <= ONE_MOTIF_MAX_PIECES:
        return 1
    if n <= TWO_MOTIF_MAX_PIECES:
        return 2
    return 3


def grid_options() -> List[Tuple[int, int]]:
    """All (rows, cols) grid shapes in enumeration order."""
    return [(rows, cols) for rows in GRID_ROWS for cols in GRID_COLS]


def draw_spec(kind: MotifKind, rng: SeededRandom) -> MotifSpec:
    """Desired shape for a motif kind, before budget limits."""
    if kind == MotifKind.GRID:
        rows, cols = rng.choice(grid_options())
        return MotifSpec(kind, rows=rows, cols=cols)
    sides = RING_MIN_SIDES + rng.randint(RING_MAX_SIDES - RING_MIN_SIDES + 1)
    return MotifSpec(kind, sides=sides)


def fit_spec(spec: MotifSpec, cap: int) -> Optional[MotifSpec]:
    """
    Shrink a spec to the largest feasible option within ``cap`` points.

    Grid shapes with equal point counts resolve to the first in
    enumeration order. Returns None when even the smallest shape of the
    kind does not fit.
    """
    if spec.point_count <= cap:
        return spec
    if spec.kind == MotifKind.GRID:
        best = None
        for rows, cols in grid_options():
            product = rows * cols
            if product <= cap and (best is None or product > best[0] * best[1]):
                best = (rows, cols)
        if best is None:
            return None
        return MotifSpec(MotifKind.GRID, rows=best[0], cols=best[1])

    extra = 1 if spec.kind == MotifKind.RING_CENTER else 0
    sides = cap - extra
    if sides < RING_MIN_SIDES:
        return None
    return MotifSpec(spec.kind, sides=sides)


def plan_motifs(n: int, regions: List[Region], rng: SeededRandom) -> List[MotifPlacement]:
    """
    Decide the motifs for a board.

    Small boards get one motif of any kind in the largest region; medium
    boards a grid plus a ring variant in the two largest regions; large
    boards one of each kind, one per region, in shuffled order. Motifs
    reserve budget sequentially so later motifs always keep their minimum.

    Args:
        n: Piece count
        regions: Regions with quotas assigned
        rng: Seeded generator

    Returns:
        Placements in construction order
    """
    count = motif_count(n)
    if count == 1:
        kinds = [rng.choice(list(MotifKind))]
        hosts = largest_regions(regions, 1)
    elif count == 2:
        kinds = [MotifKind.GRID, rng.choice([MotifKind.RING, MotifKind.RING_CENTER])]
        hosts = largest_regions(regions, 2)
    else:
        kinds = rng.shuffle([MotifKind.RING, MotifKind.RING_CENTER, MotifKind.GRID])
        hosts = list(regions)

    desired = [draw_spec(kind, rng) for kind in kinds]

    budget = int(math.floor(MOTIF_BUDGET_FRACTION * n))
    placements = []
    for i, (spec, region) in enumerate(zip(desired, hosts)):
        owed = sum(MIN_POINTS[s.kind] for s in desired[i + 1:])
        cap = min(region.quota - MOTIF_REGION_RESERVE, budget - owed)

        fitted = fit_spec(spec, cap)
        if fitted is None and spec.kind != MotifKind.RING:
            fitted = fit_spec(MotifSpec(MotifKind.RING, sides=RING_MAX_SIDES), cap)
        if fitted is None:
            logger.info("Motif skipped", kind=spec.kind.value, region=region.name, cap=cap)
            continue

        budget -= fitted.point_count
        placements.append(MotifPlacement(fitted, region.index))

    logger.info("Motifs planned",
                motifs=[(p.spec.kind.value, regions[p.region_index].name, p.spec.point_count)
                        for p in placements])
    return placements


def _extent(spec: MotifSpec, step: float) -> float:
    if spec.kind == MotifKind.GRID:
        return 0.5 * step * math.hypot(spec.cols - 1, spec.rows - 1)
    radius = step / (2.0 * math.sin(math.pi / spec.sides))
    if spec.kind == MotifKind.RING_CENTER:
        radius = max(radius, step)
    return radius


def choose_center(region: Region, needed: float, rng: SeededRandom) -> Tuple[np.ndarray, float]:
    """
    Pick a motif center with at least ``needed`` clearance if possible.

    Samples a start point, then walks toward the region anchor in fixed
    steps and stops at the first position that fits. When none fits, the
    position with the most clearance is returned.

    Returns:
        (center, clearance at center)
    """
    start = region.sample(rng)
    best = start
    best_clearance = region.clearance(start)
    for step in range(CENTER_WALK_STEPS + 1):
        p = start + (region.anchor - start) * (step / CENTER_WALK_STEPS)
        clearance = region.clearance(p)
        if clearance >= needed:
            return p, clearance
        if clearance > best_clearance:
            best, best_clearance = p, clearance
    return best, best_clearance


def motif_points(spec: MotifSpec, center: np.ndarray, radius: float,
                 step: float, angle: float) -> List[np.ndarray]:
    if spec.kind == MotifKind.GRID:
        points = []
        for row in range(spec.rows):
            for col in range(spec.cols):
                offset = ((col - (spec.cols - 1) / 2.0) * step,
                          (row - (spec.rows - 1) / 2.0) * step)
                points.append(center + rotate(offset, angle))
        return points

    points = [center + rotate((radius, 0.0), angle + 2 * math.pi * k / spec.sides)
              for k in range(spec.sides)]
    if spec.kind == MotifKind.RING_CENTER:
        points.append(center.copy())
    return points


def build_motif(spec: MotifSpec, region: Region, rng: SeededRandom) -> Motif:
    """
    Instantiate a motif inside its region.

    Point spacing follows the region's mean site spacing. If the full
    extent plus clearance does not fit around the chosen center, both are
    scaled down to the clearance available there.

    Args:
        spec: Feasible motif spec
        region: Host region (quota assigned)
        rng: Seeded generator

    Returns:
        Motif with points and exclusion zone
    """
    spacing = math.sqrt(region.area / max(region.quota, 1))
    step = MOTIF_SPACING_FACTOR * spacing
    extent = _extent(spec, step)
    margin = MOTIF_CLEARANCE_FACTOR * spacing
    needed = extent + margin

    center, available = choose_center(region, needed, rng)
    if available < needed:
        scale = max(available, 0.0) / needed
        logger.debug("Motif shrunk to fit", region=region.name, scale=round(scale, 4))
        step *= scale
        extent *= scale
        margin *= scale

    angle = 2 * math.pi * rng.random()
    points = motif_points(spec, center, extent, step, angle)

    return Motif(
        spec=spec,
        region_index=region.index,
        center=center,
        radius=extent,
        angle=angle,
        points=points,
        zone=ExclusionZone(center.copy(), extent + margin),
    )
