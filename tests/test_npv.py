"""
Unit tests for discounting and totals.
"""

import pytest

from openran_tco.core.npv import discount, discount_factor, sum_totals


class TestDiscounting:
    """Test present-value discounting."""

    def test_year_zero_is_undiscounted(self):
        """Year 0 values are already present value."""
        assert discount_factor(0.08, 0) == 1
        assert discount(1000.0, 0.08, 0) == 1000.0

    def test_discount_factor_compounds(self):
        """Factor is (1 + rate) ** year."""
        assert discount_factor(0.1, 2) == pytest.approx(1.21)

    def test_discount(self):
        """Later years are worth less."""
        assert discount(121.0, 0.1, 2) == pytest.approx(100.0)
        assert discount(110.0, 0.1, 1) == pytest.approx(100.0)

    def test_zero_rate_is_identity(self):
        """A zero discount rate leaves values unchanged."""
        for year in range(5):
            assert discount(500.0, 0.0, year) == 500.0


class TestSumTotals:
    """Test grand totals."""

    def test_sums_each_series(self):
        """Each total is the plain sum of its series."""
        totals = sum_totals([100.0, 0.0], [10.0, 10.0], [110.0, 10.0], [110.0, 9.0])

        assert totals.total_capex == 100.0
        assert totals.total_opex == 20.0
        assert totals.total_tco == 120.0
        assert totals.total_npv == 119.0

    def test_empty_series(self):
        """Empty series sum to zero."""
        totals = sum_totals([], [], [], [])
        assert totals.total_capex == 0
        assert totals.total_npv == 0
