"""Tests for piece allocation across regions."""

import pytest

from py_clickboard.core.allocation import allocate_quotas


class TestAllocateQuotas:
    """Test proportional allocation."""

    def test_proportional(self):
        """Test floor plus largest remainder."""
        assert allocate_quotas(100, [1.0, 1.0, 2.0]) == [25, 25, 50]

    def test_tie_goes_to_earlier_region(self):
        """Test deterministic tie-breaking."""
        assert allocate_quotas(5, [1.0, 1.0, 1.0]) == [2, 2, 1]

    def test_minimum_one(self):
        """Test that tiny regions still get a piece."""
        quotas = allocate_quotas(20, [0.001, 0.998, 0.001])
        assert quotas[0] == 1
        assert quotas[2] == 1
        assert sum(quotas) == 20

    def test_exactly_three(self):
        """Test one piece per region."""
        assert allocate_quotas(3, [5.0, 1.0, 2.0]) == [1, 1, 1]

    def test_single_piece(self):
        """Test that one piece goes to the largest region."""
        assert allocate_quotas(1, [1.0, 3.0, 2.0]) == [0, 1, 0]

    def test_two_pieces(self):
        """Test that two pieces go to the two largest regions."""
        assert allocate_quotas(2, [1.0, 3.0, 2.0]) == [0, 1, 1]

    @pytest.mark.parametrize("n", [4, 7, 12, 20, 50, 100, 333])
    def test_sum_is_n(self, n):
        """Test that quotas always add up to n."""
        quotas = allocate_quotas(n, [0.21, 0.47, 0.32])
        assert sum(quotas) == n
        assert min(quotas) >= 1

    def test_invalid(self):
        """Test that non-positive counts are rejected."""
        with pytest.raises(ValueError):
            allocate_quotas(0, [1.0, 1.0, 1.0])
