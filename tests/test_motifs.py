"""Tests for motif planning and construction."""

import math

import numpy as np
import pytest

from py_clickboard.core.allocation import allocate_quotas
from py_clickboard.core.motifs import (
    MOTIF_BUDGET_FRACTION,
    MOTIF_REGION_RESERVE,
    ExclusionZone,
    MotifKind,
    MotifSpec,
    build_motif,
    fit_spec,
    grid_options,
    motif_count,
    plan_motifs,
    push_out_of_zones,
)
from py_clickboard.core.prng import SeededRandom
from py_clickboard.core.regions import largest_regions, partition_square

SIZE = 1000.0
SEEDS = ["abc", "motif", "ring", "grid", "7", "seed-x", "zz", "board"]


def prepared_regions(seed, n):
    rng = SeededRandom(seed)
    regions = partition_square(SIZE, rng)
    for region, quota in zip(regions, allocate_quotas(n, [r.area for r in regions])):
        region.quota = quota
    return regions, rng


class TestMotifSpec:
    """Test spec sizes and budget fitting."""

    def test_point_counts(self):
        """Test derived point counts."""
        assert MotifSpec(MotifKind.RING, sides=5).point_count == 5
        assert MotifSpec(MotifKind.RING_CENTER, sides=5).point_count == 6
        assert MotifSpec(MotifKind.GRID, rows=2, cols=4).point_count == 8

    def test_grid_options_order(self):
        """Test grid shape enumeration."""
        options = grid_options()
        assert options[0] == (1, 3)
        assert options[-1] == (3, 5)
        assert len(options) == 9

    def test_fit_keeps_feasible(self):
        """Test that feasible specs are unchanged."""
        spec = MotifSpec(MotifKind.RING, sides=4)
        assert fit_spec(spec, 10) is spec

    def test_fit_shrinks_ring(self):
        """Test ring shrinking to the cap."""
        assert fit_spec(MotifSpec(MotifKind.RING, sides=8), 5) == MotifSpec(MotifKind.RING, sides=5)
        assert fit_spec(MotifSpec(MotifKind.RING_CENTER, sides=8), 5) == \
            MotifSpec(MotifKind.RING_CENTER, sides=4)

    def test_fit_shrinks_grid(self):
        """Test grid shrinking to the largest feasible product."""
        assert fit_spec(MotifSpec(MotifKind.GRID, rows=3, cols=5), 6) == \
            MotifSpec(MotifKind.GRID, rows=2, cols=3)
        assert fit_spec(MotifSpec(MotifKind.GRID, rows=3, cols=5), 11) == \
            MotifSpec(MotifKind.GRID, rows=2, cols=5)

    def test_fit_infeasible(self):
        """Test caps below the smallest shape."""
        assert fit_spec(MotifSpec(MotifKind.GRID, rows=2, cols=3), 2) is None
        assert fit_spec(MotifSpec(MotifKind.RING, sides=6), 2) is None
        assert fit_spec(MotifSpec(MotifKind.RING_CENTER, sides=6), 3) is None


class TestMotifPlanner:
    """Test motif plans per piece count."""

    def test_motif_count_thresholds(self):
        """Test the number of motifs per board size."""
        assert [motif_count(n) for n in (12, 20, 30, 31, 50, 70, 71, 100)] == \
            [1, 1, 1, 2, 2, 2, 3, 3]

    @pytest.mark.parametrize("seed", SEEDS)
    def test_small_board(self, seed):
        """Test one motif in the largest region for 20 pieces."""
        regions, rng = prepared_regions(seed, 20)
        plan = plan_motifs(20, regions, rng)
        assert len(plan) == 1
        assert plan[0].region_index == largest_regions(regions, 1)[0].index

    @pytest.mark.parametrize("seed", SEEDS)
    def test_medium_board(self, seed):
        """Test a grid plus a ring variant in the two largest regions for 50 pieces."""
        regions, rng = prepared_regions(seed, 50)
        plan = plan_motifs(50, regions, rng)
        assert len(plan) == 2
        assert plan[0].spec.kind == MotifKind.GRID
        assert plan[1].spec.kind in (MotifKind.RING, MotifKind.RING_CENTER)
        assert {p.region_index for p in plan} == {r.index for r in largest_regions(regions, 2)}

    @pytest.mark.parametrize("seed", SEEDS)
    def test_large_board(self, seed):
        """Test one motif of each kind, one per region, for 100 pieces."""
        regions, rng = prepared_regions(seed, 100)
        plan = plan_motifs(100, regions, rng)
        assert len(plan) == 3
        assert {p.spec.kind for p in plan} == set(MotifKind)
        assert sorted(p.region_index for p in plan) == [0, 1, 2]

    @pytest.mark.parametrize("n", [12, 20, 50, 100])
    @pytest.mark.parametrize("seed", SEEDS)
    def test_budgets(self, seed, n):
        """Test global and regional budgets."""
        regions, rng = prepared_regions(seed, n)
        plan = plan_motifs(n, regions, rng)
        assert sum(p.spec.point_count for p in plan) <= math.floor(MOTIF_BUDGET_FRACTION * n)
        for p in plan:
            assert p.spec.point_count <= regions[p.region_index].quota - MOTIF_REGION_RESERVE

    def test_tiny_board_has_no_motif(self):
        """Test that boards too small for any motif skip it."""
        regions, rng = prepared_regions("abc", 5)
        assert plan_motifs(5, regions, rng) == []


class TestMotifBuilder:
    """Test motif instantiation."""

    @pytest.mark.parametrize("spec", [
        MotifSpec(MotifKind.RING, sides=6),
        MotifSpec(MotifKind.RING_CENTER, sides=5),
        MotifSpec(MotifKind.GRID, rows=2, cols=4),
    ])
    @pytest.mark.parametrize("seed", SEEDS)
    def test_points_inside_region_and_zone(self, seed, spec):
        """Test that motif points lie in their region and zone."""
        regions, rng = prepared_regions(seed, 100)
        region = regions[1]
        motif = build_motif(spec, region, rng)
        assert len(motif.points) == spec.point_count
        for p in motif.points:
            assert region.contains(p)
            assert math.hypot(*(p - motif.zone.center)) <= motif.zone.radius
        assert region.clearance(motif.zone.center) >= motif.zone.radius - 1e-6

    def test_ring_geometry(self):
        """Test that ring points are evenly spaced on a circle."""
        regions, rng = prepared_regions("abc", 100)
        motif = build_motif(MotifSpec(MotifKind.RING, sides=6), regions[0], rng)
        radii = [math.hypot(*(p - motif.center)) for p in motif.points]
        np.testing.assert_allclose(radii, motif.radius)
        chords = [math.hypot(*(motif.points[k] - motif.points[(k + 1) % 6])) for k in range(6)]
        np.testing.assert_allclose(chords, chords[0])

    def test_ring_center_has_center(self):
        """Test that the ring+center motif includes its center."""
        regions, rng = prepared_regions("abc", 100)
        motif = build_motif(MotifSpec(MotifKind.RING_CENTER, sides=4), regions[0], rng)
        assert any(np.array_equal(p, motif.center) for p in motif.points)

    def test_grid_lattice(self):
        """Test that grid points form a regular lattice around the center."""
        regions, rng = prepared_regions("abc", 100)
        motif = build_motif(MotifSpec(MotifKind.GRID, rows=3, cols=3), regions[2], rng)
        np.testing.assert_allclose(np.mean(motif.points, axis=0), motif.center)
        np.testing.assert_allclose(motif.points[4], motif.center)

    def test_deterministic(self):
        """Test that building is reproducible."""
        spec = MotifSpec(MotifKind.GRID, rows=2, cols=3)
        r1, rng1 = prepared_regions("abc", 50)
        r2, rng2 = prepared_regions("abc", 50)
        a = build_motif(spec, r1[0], rng1)
        b = build_motif(spec, r2[0], rng2)
        np.testing.assert_array_equal(a.points, b.points)


class TestExclusionZone:
    """Test exclusion zone projection."""

    def test_push_out_inside_point(self):
        """Test that inside points move to the boundary."""
        zone = ExclusionZone(np.array([0.0, 0.0]), 2.0)
        np.testing.assert_allclose(zone.push_out((1.0, 0.0)), [2.0, 0.0])

    def test_outside_point_unchanged(self):
        """Test that outside points are kept."""
        zone = ExclusionZone(np.array([0.0, 0.0]), 2.0)
        np.testing.assert_array_equal(zone.push_out((3.0, 1.0)), [3.0, 1.0])
        assert not zone.contains((3.0, 1.0))

    def test_center_point(self):
        """Test the coincident case uses a fixed direction."""
        zone = ExclusionZone(np.array([5.0, 5.0]), 1.0)
        np.testing.assert_array_equal(zone.push_out((5.0, 5.0)), [6.0, 5.0])

    def test_multiple_zones(self):
        """Test pushing out of several zones in turn."""
        zones = [ExclusionZone(np.array([0.0, 0.0]), 1.0), ExclusionZone(np.array([10.0, 0.0]), 1.0)]
        np.testing.assert_allclose(push_out_of_zones((10.5, 0.0), zones), [11.0, 0.0])
