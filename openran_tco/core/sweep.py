"""
Parameter sweeps.

Evaluates a scenario over a grid of bucket values. Each run is an
independent computation on a modified copy of the snapshot; the base
snapshot is never changed.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Sequence

from .assumptions import (
    ASSUMPTION_BUCKETS,
    DISCOUNT_RATE_BUCKET,
    PERPETUAL_SPREAD_YEARS_BUCKET,
    TCO_YEARS_BUCKET,
    ModelAssumptions,
)
from .engine import ScenarioSnapshot, compute_scenario
from openran_tco.storage.models import CostInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepParameter:
    """Evenly spaced values for one bucket, both ends included."""
    bucket: str
    min_value: float
    max_value: float
    steps: int

    def __post_init__(self):
        """Validate the parameter range."""
        if not self.bucket:
            raise ValueError("bucket is required")
        if self.steps < 2:
            raise ValueError("steps must be >= 2")

    def values(self) -> List[float]:
        """All values this parameter takes, from min to max."""
        step = (self.max_value - self.min_value) / (self.steps - 1)
        return [self.min_value + step * i for i in range(self.steps)]


@dataclass(frozen=True)
class SweepRun:
    """Headline totals of one sweep combination."""
    run_index: int
    parameter_values: Dict[str, float]
    total_capex: float
    total_opex: float
    total_tco: float
    total_npv: float


def generate_combinations(parameters: Sequence[SweepParameter]) -> List[Dict[str, float]]:
    """Cartesian product of parameter values.

    The first parameter varies slowest. No parameters yields a single empty
    combination (the base scenario).
    """
    if not parameters:
        return [{}]

    first, rest = parameters[0], parameters[1:]
    rest_combinations = generate_combinations(rest)

    combinations = []
    for value in first.values():
        for combination in rest_combinations:
            combinations.append({first.bucket: value, **combination})
    return combinations


def apply_parameter_values(
    inputs: Sequence[CostInput],
    values: Dict[str, float]
) -> List[CostInput]:
    """Replace ``value_number`` of every input whose bucket is swept.

    Assumption-layer inputs are included, so horizon or discount rate can
    be swept like any cost bucket when assumptions are derived.
    """
    return [
        replace(i, value_number=values[i.bucket]) if i.bucket in values else i
        for i in inputs
    ]


def apply_assumption_values(
    assumptions: ModelAssumptions,
    values: Dict[str, float]
) -> ModelAssumptions:
    """Override explicit assumptions with swept assumption buckets.

    Year counts are truncated to int, as when deriving assumptions.
    """
    changes = {}
    if TCO_YEARS_BUCKET in values:
        changes["tco_years"] = int(values[TCO_YEARS_BUCKET])
    if DISCOUNT_RATE_BUCKET in values:
        changes["discount_rate"] = float(values[DISCOUNT_RATE_BUCKET])
    if PERPETUAL_SPREAD_YEARS_BUCKET in values:
        changes["perpetual_spread_years"] = int(values[PERPETUAL_SPREAD_YEARS_BUCKET])
    return replace(assumptions, **changes)


def run_sweep(
    snapshot: ScenarioSnapshot,
    parameters: Sequence[SweepParameter]
) -> List[SweepRun]:
    """Compute the snapshot once per parameter combination.

    Swept values replace matching inputs. When the snapshot carries
    explicit assumptions, assumption buckets are applied to them as well.

    Args:
        snapshot: Base scenario
        parameters: Buckets to vary

    Returns:
        One SweepRun per combination, in generation order

    Raises:
        ComputationError: If any combination cannot be computed
    """
    _warn_unmatched_buckets(snapshot, parameters)
    combinations = generate_combinations(parameters)
    logger.debug("Running sweep with %d combinations", len(combinations))

    runs = []
    for index, values in enumerate(combinations):
        assumptions = snapshot.assumptions
        if assumptions is not None:
            assumptions = apply_assumption_values(assumptions, values)
        run_snapshot = replace(
            snapshot,
            inputs=tuple(apply_parameter_values(snapshot.inputs, values)),
            assumptions=assumptions
        )
        summary = compute_scenario(run_snapshot)
        runs.append(SweepRun(
            run_index=index,
            parameter_values=values,
            total_capex=summary.total_capex,
            total_opex=summary.total_opex,
            total_tco=summary.total_tco,
            total_npv=summary.total_npv
        ))
    return runs


def _warn_unmatched_buckets(
    snapshot: ScenarioSnapshot,
    parameters: Sequence[SweepParameter]
) -> None:
    known = {i.bucket for i in snapshot.inputs}
    if snapshot.assumptions is not None:
        known |= ASSUMPTION_BUCKETS
    for parameter in parameters:
        if parameter.bucket not in known:
            logger.warning(
                "Swept bucket %r matches no input; its runs repeat the base totals",
                parameter.bucket
            )
