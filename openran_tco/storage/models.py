"""
Data models for storage layer.

Defines the scenario records consumed by the engine and the flattened
rows persisted for reporting.
"""

from dataclasses import dataclass
from typing import Optional

from openran_tco.core.taxonomy import (
    Day,
    Domain,
    Layer,
    LicenseModel,
    ScalingDriver,
    ScopeType,
)


@dataclass(frozen=True)
class CostInput:
    """One line of per-unit cost data.

    Read-only for the duration of a computation run. Values are taken as
    given; range checks belong to whatever produced the record.
    """
    day: Day
    domain: Domain
    layer: Layer
    bucket: str
    scope_type: ScopeType
    driver: ScalingDriver
    value_number: float
    scope_id: Optional[str] = None  # None means network-wide aggregate
    license_model: Optional[LicenseModel] = None


@dataclass(frozen=True)
class SiteArchetype:
    """A named class of cell site."""
    id: str
    name: str
    num_sites: int
    num_cus: int

    def __post_init__(self):
        """Validate counts are non-negative."""
        if self.num_sites < 0:
            raise ValueError("num_sites cannot be negative")
        if self.num_cus < 0:
            raise ValueError("num_cus cannot be negative")


@dataclass(frozen=True)
class DcType:
    """A named class of data center."""
    id: str
    name: str
    num_dcs: int

    def __post_init__(self):
        """Validate count is non-negative."""
        if self.num_dcs < 0:
            raise ValueError("num_dcs cannot be negative")


@dataclass(frozen=True)
class ComputedFact:
    """Flattened, persisted row of a compute summary.

    ``metric`` is one of ``total``, ``by_day_domain`` or ``breakdown``.
    """
    scenario_version_id: str
    metric: str
    year: int
    capex: float
    opex: float
    tco: float
    npv: Optional[float] = None
    day: Optional[str] = None
    domain: Optional[str] = None
    layer: Optional[str] = None
    bucket: Optional[str] = None
