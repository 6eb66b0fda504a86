"""
Board generation pipeline.

One call turns a seed string and a piece count into exactly that many
labelled cells. The seeded stream is threaded through every stage in a
fixed order, so the order of the calls below is part of the
reproducibility contract:

    partition -> quotas -> motif plan -> motifs -> free points
    -> relaxation -> separation -> cells -> label shuffle
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .allocation import allocate_quotas
from .cells import Cell, assign_labels, build_cells
from .free_points import Site, generate_free_points
from .motifs import ExclusionZone, Motif, build_motif, plan_motifs
from .prng import SeededRandom, make_rng
from .regions import Region, merge_empty_regions, partition_square
from .relaxation import DEFAULT_RELAX_ITERS, relax_sites, separate_duplicates
from .separation import SeparationReport, enforce_separation

logger = structlog.get_logger()

DEFAULT_PIECE_COUNT = 20
DEFAULT_BOARD_SIZE = 1000.0


@dataclass(frozen=True)
class BoardConfig:
    """Inputs of one board generation."""
    seed_str: str = ""
    piece_count: int = DEFAULT_PIECE_COUNT
    relax_iters: int = DEFAULT_RELAX_ITERS
    board_size: float = DEFAULT_BOARD_SIZE

    def validate(self) -> None:
        """Raise ValueError for configurations that cannot be generated."""
        if isinstance(self.piece_count, bool) or not isinstance(self.piece_count, int):
            raise ValueError(f"piece_count must be an integer, got {self.piece_count!r}")
        if self.piece_count <= 0:
            raise ValueError(f"piece_count must be positive, got {self.piece_count}")
        if isinstance(self.relax_iters, bool) or not isinstance(self.relax_iters, int):
            raise ValueError(f"relax_iters must be an integer, got {self.relax_iters!r}")
        if self.relax_iters < 0:
            raise ValueError(f"relax_iters must be non-negative, got {self.relax_iters}")
        try:
            size = float(self.board_size)
        except (TypeError, ValueError):
            raise ValueError(f"board_size must be a number, got {self.board_size!r}")
        if not math.isfinite(size) or size <= 0:
            raise ValueError(f"board_size must be finite and positive, got {self.board_size}")


@dataclass
class RegionSummary:
    """Region description returned with a board."""
    name: str
    polygon: Tuple[Tuple[float, float], ...]
    area: float
    quota: int
    min_distance: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "polygon": [list(v) for v in self.polygon],
            "area": self.area,
            "quota": self.quota,
            "min_distance": self.min_distance,
        }


@dataclass
class MotifSummary:
    """Placed motif description returned with a board."""
    kind: str
    region: str
    point_count: int
    center: Tuple[float, float]
    radius: float
    zone_radius: float
    sides: int = 0
    rows: int = 0
    cols: int = 0

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "region": self.region,
            "point_count": self.point_count,
            "center": list(self.center),
            "radius": self.radius,
            "zone_radius": self.zone_radius,
            "sides": self.sides,
            "rows": self.rows,
            "cols": self.cols,
        }


@dataclass
class Board:
    """A generated board."""
    seed: str
    piece_count: int
    board_size: float
    relax_iters: int
    cells: List[Cell]
    regions: List[RegionSummary] = field(default_factory=list)
    motifs: List[MotifSummary] = field(default_factory=list)
    separation_violations: int = 0

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "piece_count": self.piece_count,
            "board_size": self.board_size,
            "relax_iters": self.relax_iters,
            "regions": [r.to_dict() for r in self.regions],
            "motifs": [m.to_dict() for m in self.motifs],
            "cells": [c.to_dict() for c in self.cells],
            "separation_violations": self.separation_violations,
        }


@dataclass
class GenerationContext:
    """State threaded through one generation; nothing is kept globally."""
    config: BoardConfig
    rng: SeededRandom
    board_size: float
    regions: List[Region] = field(default_factory=list)
    motifs: List[Motif] = field(default_factory=list)
    zones: List[ExclusionZone] = field(default_factory=list)
    separation: Optional[SeparationReport] = None

    @property
    def sites(self) -> List[Site]:
        return [s for region in self.regions for s in region.sites]


def place_motifs(ctx: GenerationContext) -> None:
    placements = plan_motifs(ctx.config.piece_count, ctx.regions, ctx.rng)
    for placement in placements:
        region = ctx.regions[placement.region_index]
        motif = build_motif(placement.spec, region, ctx.rng)
        ctx.motifs.append(motif)
        ctx.zones.append(motif.zone)
        region.sites.extend(
            Site(float(p[0]), float(p[1]), True, region.index) for p in motif.points
        )


def place_free_points(ctx: GenerationContext) -> None:
    for region in ctx.regions:
        free = region.quota - len(region.sites)
        region.sites.extend(generate_free_points(region, free, ctx.zones, ctx.rng))


def _summaries(ctx: GenerationContext) -> Tuple[List[RegionSummary], List[MotifSummary]]:
    min_distances = ctx.separation.min_distances if ctx.separation else [0.0] * len(ctx.regions)
    regions = [
        RegionSummary(
            name=r.name,
            polygon=tuple((float(x), float(y)) for x, y in r.polygon),
            area=r.area,
            quota=r.quota,
            min_distance=d,
        )
        for r, d in zip(ctx.regions, min_distances)
    ]
    motifs = [
        MotifSummary(
            kind=m.spec.kind.value,
            region=ctx.regions[m.region_index].name,
            point_count=len(m.points),
            center=(float(m.center[0]), float(m.center[1])),
            radius=float(m.radius),
            zone_radius=float(m.zone.radius),
            sides=m.spec.sides,
            rows=m.spec.rows,
            cols=m.spec.cols,
        )
        for m in ctx.motifs
    ]
    return regions, motifs


def generate_board(config: BoardConfig) -> Board:
    """
    Generate a board.

    Args:
        config: Seed, piece count, relaxation iterations and board size

    Returns:
        Board with exactly ``config.piece_count`` cells labelled 1..N

    Raises:
        ValueError: If the configuration is invalid
    """
    config.validate()
    board_size = float(config.board_size)
    ctx = GenerationContext(config=config, rng=make_rng(config.seed_str), board_size=board_size)

    logger.info("Generating board", seed=ctx.rng.seed, piece_count=config.piece_count,
                relax_iters=config.relax_iters, board_size=board_size)

    ctx.regions = partition_square(board_size, ctx.rng)
    quotas = allocate_quotas(config.piece_count, [r.area for r in ctx.regions])
    for region, quota in zip(ctx.regions, quotas):
        region.quota = quota
    logger.info("Quotas allocated", quotas=quotas)
    ctx.regions = merge_empty_regions(ctx.regions, board_size)

    place_motifs(ctx)
    place_free_points(ctx)
    separate_duplicates(ctx.sites, ctx.regions, board_size)

    relax_sites(ctx.regions, ctx.zones, board_size, config.relax_iters)
    ctx.separation = enforce_separation(ctx.regions, ctx.zones, board_size, ctx.rng)

    shapes = build_cells(ctx.regions, board_size, config.piece_count)
    cells = assign_labels(shapes, ctx.regions, ctx.rng)

    regions, motifs = _summaries(ctx)
    logger.info("Board generated", seed=ctx.rng.seed, cells=len(cells),
                motifs=[m.kind for m in motifs], rng_calls=ctx.rng.call_count)

    return Board(
        seed=ctx.rng.seed,
        piece_count=config.piece_count,
        board_size=board_size,
        relax_iters=config.relax_iters,
        cells=cells,
        regions=regions,
        motifs=motifs,
        separation_violations=ctx.separation.total_violations,
    )
