"""
Cost projection.

Expands a single cost input into its per-year CAPEX/OPEX contribution
across the analysis horizon.

Phasing rules:
1. Day 0 / Day 1 costs are CAPEX, booked in year 0 or spread evenly when
   the license is perpetual and a spread is configured
2. Perpetual software licenses also carry a yearly maintenance OPEX
3. Day 2 costs are OPEX, recurring in full every year
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from .taxonomy import Day, Layer, LicenseModel
from openran_tco.storage.models import CostInput

# Yearly support cost of a perpetual software license, as a share of its price
MAINTENANCE_RATE = 0.15


class CostPhase(Enum):
    """Accounting phase an input falls into."""
    CAPEX = "capex"
    OPEX = "opex"


@dataclass(frozen=True)
class CostProjection:
    """Per-year contribution of one cost input.

    ``capex`` and ``opex`` are the input's single-figure amounts (the
    per-year spread amount for spread CAPEX, the annual amount for OPEX);
    ``yearly`` holds the actual ``(capex, opex)`` pair for each year.
    """
    total_value: float
    phase: CostPhase
    capex: float
    opex: float
    yearly: List[Tuple[float, float]] = field(default_factory=list)


def classify_phase(day: Day) -> CostPhase:
    """Day 0 and Day 1 are CAPEX; Day 2 is OPEX."""
    if day in (Day.DAY0, Day.DAY1):
        return CostPhase.CAPEX
    return CostPhase.OPEX


def project_cost_input(
    cost_input: CostInput,
    multiplier: float,
    tco_years: int,
    spread_years: int = 1
) -> CostProjection:
    """Project one input across the horizon.

    Spread years beyond the horizon are never computed, so that share of a
    spread perpetual cost is dropped.

    Args:
        cost_input: Input to project (must not be an assumptions entry)
        multiplier: Resolved scaling multiplier
        tco_years: Horizon length in years
        spread_years: Perpetual spread setting of the run

    Returns:
        CostProjection with one ``(capex, opex)`` pair per year
    """
    total_value = cost_input.value_number * multiplier
    phase = classify_phase(cost_input.day)
    is_perpetual = cost_input.license_model == LicenseModel.PERPETUAL
    is_spread = is_perpetual and spread_years > 1

    capex = 0.0
    opex = 0.0
    if phase == CostPhase.CAPEX:
        capex = total_value / spread_years if is_spread else total_value
    else:
        opex = total_value

    maintenance = 0.0
    if phase == CostPhase.CAPEX and is_perpetual and cost_input.layer == Layer.SOFTWARE:
        maintenance = total_value * MAINTENANCE_RATE

    yearly = []
    for year in range(tco_years):
        if phase == CostPhase.CAPEX:
            if is_spread:
                year_capex = capex if year < spread_years else 0.0
            else:
                year_capex = capex if year == 0 else 0.0
            year_opex = maintenance
        else:
            year_capex = 0.0
            year_opex = opex
        yearly.append((year_capex, year_opex))

    return CostProjection(
        total_value=total_value,
        phase=phase,
        capex=capex,
        opex=opex,
        yearly=yearly
    )
