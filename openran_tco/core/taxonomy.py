"""
OpenRAN TCO taxonomy.

Canonical axes for classifying cost inputs: lifecycle day, domain, layer,
scope, scaling driver and license model.
"""

from enum import Enum
from typing import Dict


class Day(Enum):
    """Lifecycle phase of a cost."""
    DAY0 = "day0"  # Design + procurement + platform
    DAY1 = "day1"  # Build, install, integrate
    DAY2 = "day2"  # Operations


class Domain(Enum):
    """Cost category grouping. Descriptive only."""
    RAN = "ran"
    CLOUD = "cloud"
    OSS = "oss"


class Layer(Enum):
    """Further classification of a cost within its domain."""
    HARDWARE_BOM = "hardware_bom"
    SOFTWARE = "software"
    SERVICES = "services"
    STAFFING = "staffing"
    SITE_OPEX = "site_opex"
    LIFECYCLE = "lifecycle"
    ASSUMPTIONS = "assumptions"


class ScopeType(Enum):
    """Topology element a cost input is anchored to."""
    SITE_ARCHETYPE = "site_archetype"
    DC_TYPE = "dc_type"
    NETWORK_GLOBAL = "network_global"


class ScalingDriver(Enum):
    """Rule converting a per-unit cost into a network-wide cost."""
    PER_SITE = "per_site"
    PER_CU = "per_cu"
    PER_DC = "per_dc"
    PER_SERVER = "per_server"
    PER_CLUSTER = "per_cluster"
    PER_LICENSE_UNIT = "per_license_unit"
    PER_RAPP = "per_rapp"
    PER_XAPP = "per_xapp"
    PER_INTEGRATION = "per_integration"
    FIXED = "fixed"
    PER_YEAR = "per_year"


class LicenseModel(Enum):
    """Commercial model of a software license."""
    PERPETUAL = "perpetual"
    SUBSCRIPTION = "subscription"


class Currency(Enum):
    """Reporting currency."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


DAY_LABELS: Dict[Day, str] = {
    Day.DAY0: "Day 0 - Design + Procurement + Platform",
    Day.DAY1: "Day 1 - Build, Install, Integrate",
    Day.DAY2: "Day 2 - Operations",
}

DOMAIN_LABELS: Dict[Domain, str] = {
    Domain.RAN: "RAN",
    Domain.CLOUD: "Cloud/CaaS",
    Domain.OSS: "OSS/SMO/RIC",
}

LAYER_LABELS: Dict[Layer, str] = {
    Layer.HARDWARE_BOM: "Hardware BoM",
    Layer.SOFTWARE: "Software Licenses",
    Layer.SERVICES: "Services & Integration",
    Layer.STAFFING: "Staffing",
    Layer.SITE_OPEX: "Site OPEX",
    Layer.LIFECYCLE: "Lifecycle",
    Layer.ASSUMPTIONS: "Assumptions",
}

CURRENCY_SYMBOLS: Dict[Currency, str] = {
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
}


def day_domain_key(day: Day, domain: Domain) -> str:
    """Key used for the day/domain rollup, e.g. ``"day0:ran"``."""
    return f"{day.value}:{domain.value}"
