"""
Unit tests for parameter sweeps.
"""

import logging

import pytest

from openran_tco.core.assumptions import ModelAssumptions
from openran_tco.core.engine import ScenarioSnapshot
from openran_tco.core.sweep import (
    SweepParameter,
    apply_assumption_values,
    apply_parameter_values,
    generate_combinations,
    run_sweep,
)
from openran_tco.core.taxonomy import Day, Domain, Layer, ScalingDriver, ScopeType
from openran_tco.storage.models import CostInput, SiteArchetype


def make_input(bucket: str, value: float, day=Day.DAY2, layer=Layer.SITE_OPEX,
               driver=ScalingDriver.PER_SITE) -> CostInput:
    """Create a network-wide test input."""
    return CostInput(
        day=day,
        domain=Domain.RAN,
        layer=layer,
        bucket=bucket,
        scope_type=ScopeType.SITE_ARCHETYPE,
        driver=driver,
        value_number=value
    )


class TestSweepParameter:
    """Test parameter definition and value generation."""

    def test_values_include_both_ends(self):
        """Values are evenly spaced from min to max."""
        assert SweepParameter("lease", 8000, 16000, 3).values() == [8000, 12000, 16000]

    def test_two_steps(self):
        """Two steps give just the endpoints."""
        assert SweepParameter("lease", 1, 2, 2).values() == [1, 2]

    @pytest.mark.parametrize("steps", [0, 1])
    def test_too_few_steps(self, steps):
        """A sweep needs at least two steps."""
        with pytest.raises(ValueError, match="steps"):
            SweepParameter("lease", 0, 1, steps)

    def test_bucket_required(self):
        """A parameter must name a bucket."""
        with pytest.raises(ValueError, match="bucket"):
            SweepParameter("", 0, 1, 2)


class TestGenerateCombinations:
    """Test the cartesian product."""

    def test_no_parameters(self):
        """No parameters is a single base run."""
        assert generate_combinations([]) == [{}]

    def test_first_parameter_varies_slowest(self):
        """Combinations are ordered with the first parameter outermost."""
        combinations = generate_combinations([
            SweepParameter("a", 1, 2, 2),
            SweepParameter("b", 10, 30, 3),
        ])

        assert combinations == [
            {"a": 1, "b": 10}, {"a": 1, "b": 20}, {"a": 1, "b": 30},
            {"a": 2, "b": 10}, {"a": 2, "b": 20}, {"a": 2, "b": 30},
        ]


class TestApplyParameterValues:
    """Test input substitution."""

    def test_replaces_matching_buckets(self):
        """Every input of a swept bucket takes the new value."""
        inputs = [make_input("lease", 100), make_input("lease", 200), make_input("power", 50)]
        updated = apply_parameter_values(inputs, {"lease": 999})

        assert [i.value_number for i in updated] == [999, 999, 50]
        # Originals are untouched
        assert [i.value_number for i in inputs] == [100, 200, 50]

    def test_keeps_other_fields(self):
        """Only the value changes."""
        original = make_input("lease", 100)
        updated = apply_parameter_values([original], {"lease": 5})[0]

        assert updated.bucket == original.bucket
        assert updated.driver == original.driver
        assert updated.scope_type == original.scope_type


class TestApplyAssumptionValues:
    """Test overriding explicit assumptions."""

    def test_overrides_swept_fields(self):
        """Assumption buckets replace the matching fields."""
        base = ModelAssumptions(tco_years=3, discount_rate=0.1)
        updated = apply_assumption_values(base, {"discount_rate": 0.25, "tco_years": 4.9})

        assert updated == ModelAssumptions(tco_years=4, discount_rate=0.25)
        assert base.discount_rate == 0.1

    def test_cost_buckets_leave_assumptions_alone(self):
        """Values for other buckets change nothing."""
        base = ModelAssumptions(tco_years=3)
        assert apply_assumption_values(base, {"lease": 5}) == base


class TestRunSweep:
    """Test sweep execution."""

    def _snapshot(self, assumptions=None) -> ScenarioSnapshot:
        return ScenarioSnapshot(
            inputs=(make_input("lease", 1000), make_input("power", 100)),
            site_archetypes=(SiteArchetype(id="a1", name="Urban", num_sites=10, num_cus=1),),
            assumptions=assumptions or ModelAssumptions(tco_years=2, discount_rate=0.0)
        )

    def test_one_run_per_combination(self):
        """Each combination is computed independently."""
        runs = run_sweep(self._snapshot(), [SweepParameter("lease", 1000, 3000, 3)])

        assert [r.run_index for r in runs] == [0, 1, 2]
        assert [r.parameter_values for r in runs] == [
            {"lease": 1000}, {"lease": 2000}, {"lease": 3000}
        ]
        # (lease + power) * 10 sites * 2 years
        assert [r.total_opex for r in runs] == [22000, 42000, 62000]
        assert all(r.total_tco == r.total_npv for r in runs)

    def test_base_snapshot_unchanged(self):
        """Sweeping never mutates the base scenario."""
        snapshot = self._snapshot()
        run_sweep(snapshot, [SweepParameter("lease", 0, 1, 2)])
        assert snapshot.inputs[0].value_number == 1000

    def test_no_parameters_runs_base(self):
        """Without parameters the sweep is one base run."""
        runs = run_sweep(self._snapshot(), [])
        assert len(runs) == 1
        assert runs[0].parameter_values == {}
        assert runs[0].total_opex == 22000

    def test_sweeps_derived_assumptions(self):
        """Assumption buckets can be swept when assumptions are derived."""
        snapshot = ScenarioSnapshot(
            inputs=(
                make_input("tco_years", 1, day=Day.DAY0, layer=Layer.ASSUMPTIONS,
                           driver=ScalingDriver.FIXED),
                make_input("noc", 100, driver=ScalingDriver.PER_YEAR),
            ),
        )
        runs = run_sweep(snapshot, [SweepParameter("tco_years", 1, 3, 3)])

        assert [r.total_opex for r in runs] == [100, 200, 300]

    def test_sweeps_explicit_discount_rate(self):
        """Sweeping the discount rate changes NPV when assumptions are explicit."""
        snapshot = self._snapshot(ModelAssumptions(tco_years=3, discount_rate=0.1))
        runs = run_sweep(snapshot, [SweepParameter("discount_rate", 0, 0.5, 3)])

        # (1000 + 100) * 10 sites per year, undiscounted
        assert [r.total_tco for r in runs] == [33000, 33000, 33000]
        assert [r.total_npv for r in runs] == [
            pytest.approx(33000),
            pytest.approx(11000 * (1 + 1 / 1.25 + 1 / 1.25 ** 2)),
            pytest.approx(11000 * (1 + 1 / 1.5 + 1 / 1.5 ** 2)),
        ]
        assert snapshot.assumptions.discount_rate == 0.1

    def test_sweeps_explicit_tco_years(self):
        """Sweeping the horizon changes OPEX when assumptions are explicit."""
        snapshot = self._snapshot(ModelAssumptions(tco_years=3, discount_rate=0.0))
        runs = run_sweep(snapshot, [SweepParameter("tco_years", 1, 3, 3)])

        assert [r.total_opex for r in runs] == [11000, 22000, 33000]

    def test_warns_on_unmatched_bucket(self, caplog):
        """A swept bucket no input uses is logged."""
        with caplog.at_level(logging.WARNING, logger="openran_tco.core.sweep"):
            runs = run_sweep(self._snapshot(), [SweepParameter("ghost", 0, 1, 2)])

        assert "'ghost' matches no input" in caplog.text
        assert runs[0].total_tco == runs[1].total_tco

    def test_no_warning_for_matched_buckets(self, caplog):
        """Cost buckets and explicit assumption buckets are not reported."""
        with caplog.at_level(logging.WARNING, logger="openran_tco.core.sweep"):
            run_sweep(self._snapshot(), [
                SweepParameter("lease", 0, 1, 2),
                SweepParameter("discount_rate", 0, 0.1, 2),
            ])

        assert "matches no input" not in caplog.text
