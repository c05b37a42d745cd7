"""
TCO computation engine.

Turns a scenario's cost inputs, topology and assumptions into a
year-by-year CAPEX/OPEX/TCO/NPV projection.

The engine is a pure function of its arguments:
1. No I/O (inputs are supplied, results are returned)
2. No state carried between calls
3. Identical inputs always give identical output
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .assumptions import ModelAssumptions, derive_assumptions
from .errors import ComputationError
from .npv import discount, sum_totals
from .projection import project_cost_input
from .scaling import build_scaling_counts, resolve_multiplier
from .taxonomy import Day, Domain, Layer, day_domain_key
from openran_tco.storage.models import CostInput, DcType, SiteArchetype

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputeResult:
    """Totals for one year of the horizon (0-indexed)."""
    year: int
    capex: float
    opex: float
    tco: float
    npv: float


@dataclass(frozen=True)
class ComputeBreakdown:
    """Contribution of one cost input to one year."""
    day: Day
    domain: Domain
    layer: Layer
    bucket: str
    year: int
    capex: float
    opex: float
    tco: float


@dataclass
class DayDomainTotals:
    """Coarse run-rate aggregate for one day/domain pair."""
    capex: float = 0.0
    opex: float = 0.0
    tco: float = 0.0


@dataclass
class ComputeSummary:
    """Complete result of a computation run."""
    total_capex: float
    total_opex: float
    total_tco: float
    total_npv: float
    by_year: List[ComputeResult]
    by_day_domain: Dict[str, DayDomainTotals] = field(default_factory=dict)
    breakdown: List[ComputeBreakdown] = field(default_factory=list)


@dataclass(frozen=True)
class ScenarioSnapshot:
    """Everything a computation run reads, captured at one point in time.

    ``assumptions`` of None means they are derived from the
    ``layer=assumptions`` inputs.
    """
    inputs: Tuple[CostInput, ...] = ()
    site_archetypes: Tuple[SiteArchetype, ...] = ()
    dc_types: Tuple[DcType, ...] = ()
    assumptions: Optional[ModelAssumptions] = None


def compute(
    inputs: Sequence[CostInput],
    site_archetypes: Sequence[SiteArchetype],
    dc_types: Sequence[DcType],
    assumptions: ModelAssumptions
) -> ComputeSummary:
    """Compute the TCO projection for one scenario version.

    Args:
        inputs: Cost inputs; ``layer=assumptions`` entries are skipped
        site_archetypes: Site archetype topology
        dc_types: Data-center topology
        assumptions: Effective model assumptions

    Returns:
        ComputeSummary with totals, per-year results, day/domain rollup
        and per-input breakdown

    Raises:
        ComputationError: If the horizon is empty, the discount rate is
            not above -1 or a value is not finite
    """
    cost_inputs = [i for i in inputs if i.layer != Layer.ASSUMPTIONS]
    _validate_run(cost_inputs, assumptions)

    years = assumptions.tco_years
    spread_years = assumptions.spread_years
    counts = build_scaling_counts(site_archetypes, dc_types)
    logger.debug(
        "Computing TCO: %d inputs, %d years, discount rate %s, spread %d",
        len(cost_inputs), years, assumptions.discount_rate, spread_years
    )

    year_capex = [0.0] * years
    year_opex = [0.0] * years
    by_day_domain: Dict[str, DayDomainTotals] = {}
    breakdown: List[ComputeBreakdown] = []

    for cost_input in cost_inputs:
        multiplier = resolve_multiplier(
            cost_input.driver,
            cost_input.scope_type,
            cost_input.scope_id,
            counts
        )
        projection = project_cost_input(cost_input, multiplier, years, spread_years)

        for year, (capex, opex) in enumerate(projection.yearly):
            year_capex[year] += capex
            year_opex[year] += opex
            if capex != 0 or opex != 0:
                breakdown.append(ComputeBreakdown(
                    day=cost_input.day,
                    domain=cost_input.domain,
                    layer=cost_input.layer,
                    bucket=cost_input.bucket,
                    year=year,
                    capex=capex,
                    opex=opex,
                    tco=capex + opex
                ))

        # Run-rate approximation: single-year opex figure times the horizon
        key = day_domain_key(cost_input.day, cost_input.domain)
        rollup = by_day_domain.setdefault(key, DayDomainTotals())
        rollup.capex += projection.capex
        rollup.opex += projection.opex * years
        rollup.tco += projection.capex + projection.opex * years

    by_year = _discount_years(year_capex, year_opex, assumptions.discount_rate)
    totals = sum_totals(
        [r.capex for r in by_year],
        [r.opex for r in by_year],
        [r.tco for r in by_year],
        [r.npv for r in by_year]
    )

    return ComputeSummary(
        total_capex=totals.total_capex,
        total_opex=totals.total_opex,
        total_tco=totals.total_tco,
        total_npv=totals.total_npv,
        by_year=by_year,
        by_day_domain=by_day_domain,
        breakdown=breakdown
    )


def resolve_assumptions(snapshot: ScenarioSnapshot) -> ModelAssumptions:
    """Effective assumptions of a snapshot.

    Explicit assumptions win; otherwise they are derived from the
    snapshot's ``layer=assumptions`` inputs.
    """
    if snapshot.assumptions is not None:
        return snapshot.assumptions
    return derive_assumptions(snapshot.inputs)


def compute_scenario(snapshot: ScenarioSnapshot) -> ComputeSummary:
    """Compute a snapshot with its resolved assumptions."""
    return compute(
        snapshot.inputs,
        snapshot.site_archetypes,
        snapshot.dc_types,
        resolve_assumptions(snapshot)
    )


def _validate_run(cost_inputs: List[CostInput], assumptions: ModelAssumptions) -> None:
    """Reject runs that cannot yield a well-formed projection."""
    if assumptions.tco_years < 1:
        raise ComputationError(f"tco_years must be >= 1, got {assumptions.tco_years}")
    if not math.isfinite(assumptions.discount_rate):
        raise ComputationError(
            f"discount_rate must be finite, got {assumptions.discount_rate}"
        )
    # (1 + rate) ** year must stay positive
    if assumptions.discount_rate <= -1:
        raise ComputationError(
            f"discount_rate must be > -1, got {assumptions.discount_rate}"
        )
    for cost_input in cost_inputs:
        if not math.isfinite(cost_input.value_number):
            raise ComputationError(
                f"value_number of {cost_input.day.value}/{cost_input.domain.value}/"
                f"{cost_input.bucket} must be finite, got {cost_input.value_number}"
            )


def _discount_years(
    year_capex: List[float],
    year_opex: List[float],
    discount_rate: float
) -> List[ComputeResult]:
    results = []
    for year, (capex, opex) in enumerate(zip(year_capex, year_opex)):
        tco = capex + opex
        results.append(ComputeResult(
            year=year,
            capex=capex,
            opex=opex,
            tco=tco,
            npv=discount(tco, discount_rate, year)
        ))
    return results
