"""
Global model assumptions.

Resolves the single effective set of horizon, discounting and amortization
parameters for a computation run.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from .errors import ComputationError
from .taxonomy import Currency, Layer
from openran_tco.storage.models import CostInput

logger = logging.getLogger(__name__)

DEFAULT_TCO_YEARS = 5
DEFAULT_DISCOUNT_RATE = 0.08
DEFAULT_PERPETUAL_SPREAD_YEARS = 1

# Assumption-layer buckets understood by derive_assumptions
TCO_YEARS_BUCKET = "tco_years"
DISCOUNT_RATE_BUCKET = "discount_rate"
PERPETUAL_SPREAD_YEARS_BUCKET = "perpetual_spread_years"
ASSUMPTION_BUCKETS = frozenset({
    TCO_YEARS_BUCKET,
    DISCOUNT_RATE_BUCKET,
    PERPETUAL_SPREAD_YEARS_BUCKET,
})


@dataclass(frozen=True)
class ModelAssumptions:
    """Parameters controlling horizon length, discounting and spreading.

    No range checks happen here: the engine rejects what it cannot compute
    and the scenario loader enforces the editing ranges.
    """
    tco_years: int = DEFAULT_TCO_YEARS
    discount_rate: float = DEFAULT_DISCOUNT_RATE
    perpetual_spread_years: int = DEFAULT_PERPETUAL_SPREAD_YEARS
    currency: Currency = Currency.USD

    @property
    def spread_years(self) -> int:
        """Effective spread; an unset or zero value means no spreading."""
        return self.perpetual_spread_years or 1


def derive_assumptions(inputs: Iterable[CostInput]) -> ModelAssumptions:
    """Build assumptions from ``layer=assumptions`` inputs.

    Starts from the defaults and overwrites each known bucket with the
    input's value. Later inputs win. Unknown buckets are ignored.

    Args:
        inputs: Full input list for a scenario version

    Returns:
        Effective ModelAssumptions

    Raises:
        ComputationError: If a matching assumption value is not finite
    """
    tco_years = DEFAULT_TCO_YEARS
    discount_rate = DEFAULT_DISCOUNT_RATE
    spread_years = DEFAULT_PERPETUAL_SPREAD_YEARS

    for cost_input in inputs:
        if cost_input.layer != Layer.ASSUMPTIONS:
            continue

        bucket = cost_input.bucket
        if bucket not in ASSUMPTION_BUCKETS:
            logger.debug("Ignoring unknown assumption bucket %r", bucket)
            continue

        value = cost_input.value_number
        if not math.isfinite(value):
            raise ComputationError(f"Assumption '{bucket}' must be finite, got {value}")

        if bucket == TCO_YEARS_BUCKET:
            tco_years = int(value)
        elif bucket == DISCOUNT_RATE_BUCKET:
            discount_rate = float(value)
        else:
            spread_years = int(value)

    assumptions = ModelAssumptions(
        tco_years=tco_years,
        discount_rate=discount_rate,
        perpetual_spread_years=spread_years
    )
    logger.debug("Derived assumptions: %s", assumptions)
    return assumptions
