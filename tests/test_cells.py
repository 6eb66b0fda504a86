"""Tests for final cell construction and labelling."""

import dataclasses

import numpy as np
import pytest

from py_clickboard.core.cells import assign_labels, build_cells, region_cell_shapes
from py_clickboard.core.free_points import Site
from py_clickboard.core.geometry import polygon_area
from py_clickboard.core.prng import SeededRandom
from py_clickboard.core.regions import partition_square


def quadrant_sites():
    return [Site(25.0, 25.0, False, 0), Site(75.0, 25.0, False, 0),
            Site(25.0, 75.0, True, 0), Site(75.0, 75.0, False, 0)]


class TestRegionCells:
    """Test per-region Voronoi cells."""

    def test_cells_tile_region(self, square_region):
        """Test that region cells cover the region exactly."""
        square_region.sites = quadrant_sites()
        shapes = region_cell_shapes(square_region, 100.0)
        assert len(shapes) == 4
        assert [polygon_area(s.polygon) for s in shapes] == pytest.approx([2500.0] * 4)
        np.testing.assert_allclose(shapes[0].centroid, [25.0, 25.0])
        assert shapes[2].anchored

    def test_cells_clipped_to_region(self):
        """Test that cells never cross their region boundary."""
        rng = SeededRandom("clip")
        regions = partition_square(1000.0, rng)
        for region in regions:
            region.sites = [Site(*region.sample(rng), False, region.index) for _ in range(10)]
            shapes = region_cell_shapes(region, 1000.0)
            assert sum(polygon_area(s.polygon) for s in shapes) == pytest.approx(region.area)
            for shape in shapes:
                for v in shape.polygon:
                    assert region.contains(v)

    def test_duplicate_site_gets_fallback(self, square_region):
        """Test that a degenerate site still yields a polygon."""
        square_region.sites = [Site(30.0, 30.0, False, 0), Site(30.0, 30.0, False, 0),
                               Site(70.0, 70.0, False, 0)]
        shapes = region_cell_shapes(square_region, 100.0)
        assert len(shapes) == 3
        assert len(shapes[1].polygon) == 3
        assert polygon_area(shapes[1].polygon) < 1.0
        np.testing.assert_array_equal(shapes[1].centroid, [30.0, 30.0])

    def test_empty_region(self, square_region):
        """Test that a region without sites has no cells."""
        square_region.sites = []
        assert region_cell_shapes(square_region, 100.0) == []


class TestBuildCells:
    """Test the cell count guarantee."""

    def test_exact_count(self, square_region):
        """Test one cell per site."""
        square_region.sites = quadrant_sites()
        assert len(build_cells([square_region], 100.0, 4)) == 4

    def test_truncates_extra(self, square_region):
        """Test truncation when there are more cells than pieces."""
        square_region.sites = quadrant_sites()
        assert len(build_cells([square_region], 100.0, 3)) == 3

    def test_pads_missing(self, square_region):
        """Test padding with fallback cells in the middle region."""
        square_region.sites = quadrant_sites()
        shapes = build_cells([square_region], 100.0, 6)
        assert len(shapes) == 6
        np.testing.assert_allclose(shapes[-1].centroid, square_region.anchor)


class TestAssignLabels:
    """Test label assignment."""

    def test_labels_are_permutation(self, square_region, rng):
        """Test that labels are 1..N, each used once."""
        square_region.sites = quadrant_sites()
        cells = assign_labels(build_cells([square_region], 100.0, 4), [square_region], rng)
        assert sorted(c.label for c in cells) == [1, 2, 3, 4]
        assert all(c.region == "mid" for c in cells)
        assert rng.call_count == 3

    def test_cells_are_frozen(self, square_region, rng):
        """Test that cells cannot be modified."""
        square_region.sites = quadrant_sites()
        cell = assign_labels(build_cells([square_region], 100.0, 4), [square_region], rng)[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            cell.label = 99
        assert isinstance(cell.polygon, tuple)
        assert isinstance(cell.polygon[0], tuple)

    def test_to_dict(self, square_region, rng):
        """Test serialization."""
        square_region.sites = quadrant_sites()
        cell = assign_labels(build_cells([square_region], 100.0, 4), [square_region], rng)[0]
        data = cell.to_dict()
        assert set(data) == {"polygon", "centroid", "label", "region", "site", "anchored"}
        assert len(data["polygon"]) == len(cell.polygon)
