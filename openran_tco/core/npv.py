"""
Discounting and totals.

Discounts yearly TCO to present value and produces grand totals.
"""

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class ProjectionTotals:
    """Undiscounted sums plus the sum of discounted yearly TCO."""
    total_capex: float
    total_opex: float
    total_tco: float
    total_npv: float


def discount_factor(discount_rate: float, year: int) -> float:
    """``(1 + rate) ** year``; year 0 is undiscounted."""
    return (1 + discount_rate) ** year


def discount(value: float, discount_rate: float, year: int) -> float:
    """Present value of ``value`` incurred in ``year``."""
    return value / discount_factor(discount_rate, year)


def sum_totals(
    capex: Sequence[float],
    opex: Sequence[float],
    tco: Sequence[float],
    npv: Sequence[float]
) -> ProjectionTotals:
    """Sum per-year series into grand totals.

    ``total_npv`` is the plain sum of the already-discounted yearly values.
    """
    return ProjectionTotals(
        total_capex=sum(capex),
        total_opex=sum(opex),
        total_tco=sum(tco),
        total_npv=sum(npv)
    )
