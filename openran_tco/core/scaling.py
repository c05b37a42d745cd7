"""
Scaling resolution.

Converts network topology into the multiplier that turns a per-unit cost
into a network-wide cost.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from .taxonomy import ScalingDriver, ScopeType
from openran_tco.storage.models import DcType, SiteArchetype

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalingCounts:
    """Topology totals and per-id lookups for one scenario version."""
    total_sites: int = 0
    total_cus: int = 0
    total_dcs: int = 0
    sites_by_id: Dict[str, int] = field(default_factory=dict)
    cus_by_id: Dict[str, int] = field(default_factory=dict)
    dcs_by_id: Dict[str, int] = field(default_factory=dict)


def build_scaling_counts(
    site_archetypes: Iterable[SiteArchetype],
    dc_types: Iterable[DcType]
) -> ScalingCounts:
    """Precompute totals and per-id lookups from topology.

    Args:
        site_archetypes: Site archetypes of the scenario version
        dc_types: Data-center types of the scenario version

    Returns:
        ScalingCounts for multiplier resolution
    """
    sites_by_id: Dict[str, int] = {}
    cus_by_id: Dict[str, int] = {}
    dcs_by_id: Dict[str, int] = {}
    total_sites = 0
    total_cus = 0
    total_dcs = 0

    for archetype in site_archetypes:
        total_sites += archetype.num_sites
        total_cus += archetype.num_cus
        sites_by_id[archetype.id] = archetype.num_sites
        cus_by_id[archetype.id] = archetype.num_cus

    for dc_type in dc_types:
        total_dcs += dc_type.num_dcs
        dcs_by_id[dc_type.id] = dc_type.num_dcs

    return ScalingCounts(
        total_sites=total_sites,
        total_cus=total_cus,
        total_dcs=total_dcs,
        sites_by_id=sites_by_id,
        cus_by_id=cus_by_id,
        dcs_by_id=dcs_by_id
    )


def resolve_multiplier(
    driver: ScalingDriver,
    scope_type: ScopeType,
    scope_id: Optional[str],
    counts: ScalingCounts
) -> int:
    """Number of physical units a per-unit cost applies to.

    Rules:
    - per_site: archetype's site count when scoped to an archetype, else all sites
    - per_cu: archetype's CU count when scoped to an archetype, else all CUs
    - per_dc: DC type's count when scoped to a DC type, else all DCs
    - any other driver: 1

    A scope id missing from the topology resolves to 0, never an error, so
    the cost line drops out of the projection.

    Args:
        driver: Scaling driver of the input
        scope_type: Scope type of the input
        scope_id: Topology element id, or None for network-wide scope
        counts: Precomputed topology counts

    Returns:
        Multiplier for the input's per-unit value
    """
    if driver == ScalingDriver.PER_SITE:
        if scope_type == ScopeType.SITE_ARCHETYPE and scope_id:
            return _lookup(counts.sites_by_id, scope_id, "site archetype")
        return counts.total_sites

    if driver == ScalingDriver.PER_CU:
        if scope_type == ScopeType.SITE_ARCHETYPE and scope_id:
            return _lookup(counts.cus_by_id, scope_id, "site archetype")
        return counts.total_cus

    if driver == ScalingDriver.PER_DC:
        if scope_type == ScopeType.DC_TYPE and scope_id:
            return _lookup(counts.dcs_by_id, scope_id, "dc type")
        return counts.total_dcs

    # Unit-of-account and annual drivers are already expressed as totals
    return 1


def _lookup(counts_by_id: Dict[str, int], scope_id: str, kind: str) -> int:
    if scope_id not in counts_by_id:
        logger.debug("Unknown %s %r, multiplier is 0", kind, scope_id)
        return 0
    return counts_by_id[scope_id]
