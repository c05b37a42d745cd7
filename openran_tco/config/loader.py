"""
Scenario file loading.

Reads a scenario version (assumptions, topology, cost inputs and an
optional sweep definition) from YAML into engine records.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Type, TypeVar

import yaml

from openran_tco.core.assumptions import (
    DEFAULT_DISCOUNT_RATE,
    DEFAULT_PERPETUAL_SPREAD_YEARS,
    DEFAULT_TCO_YEARS,
    ModelAssumptions,
)
from openran_tco.core.engine import ScenarioSnapshot
from openran_tco.core.sweep import SweepParameter
from openran_tco.core.taxonomy import (
    Currency,
    Day,
    Domain,
    Layer,
    LicenseModel,
    ScalingDriver,
    ScopeType,
)
from openran_tco.storage.models import CostInput, DcType, SiteArchetype

E = TypeVar("E", bound=Enum)

MAX_TCO_YEARS = 30
MAX_PERPETUAL_SPREAD_YEARS = 10


def load_scenario(path: str) -> ScenarioSnapshot:
    """Load and validate a scenario from a YAML file.

    Strict validation ensures a typo in a driver or scope never silently
    turns into a zero cost line.

    Args:
        path: Path to YAML scenario file

    Returns:
        Validated ScenarioSnapshot. Its assumptions are None when the file
        has no ``assumptions`` section, so they are derived from the
        assumption-layer inputs at compute time.

    Raises:
        FileNotFoundError: If scenario file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the scenario is invalid
    """
    raw = _read_yaml(path)

    allowed_top_keys = {'assumptions', 'site_archetypes', 'dc_types', 'inputs', 'sweep'}
    unknown_keys = set(raw.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown scenario keys: {unknown_keys}")

    assumptions = None
    if 'assumptions' in raw:
        assumptions = _parse_assumptions(raw['assumptions'])

    archetypes = [
        _parse_site_archetype(item, f"site_archetypes[{i}]")
        for i, item in enumerate(_get_list(raw, 'site_archetypes'))
    ]
    dc_types = [
        _parse_dc_type(item, f"dc_types[{i}]")
        for i, item in enumerate(_get_list(raw, 'dc_types'))
    ]
    _check_unique_ids([a.id for a in archetypes], "site_archetypes")
    _check_unique_ids([d.id for d in dc_types], "dc_types")

    inputs = [
        _parse_cost_input(item, f"inputs[{i}]")
        for i, item in enumerate(_get_list(raw, 'inputs'))
    ]

    return ScenarioSnapshot(
        inputs=tuple(inputs),
        site_archetypes=tuple(archetypes),
        dc_types=tuple(dc_types),
        assumptions=assumptions
    )


def load_sweep_parameters(path: str) -> List[SweepParameter]:
    """Load the ``sweep`` section of a scenario file.

    Args:
        path: Path to YAML scenario file

    Returns:
        Sweep parameters in file order (empty if no sweep section)

    Raises:
        FileNotFoundError: If scenario file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If a sweep parameter is invalid
    """
    raw = _read_yaml(path)
    return [
        _parse_sweep_parameter(item, f"sweep[{i}]")
        for i, item in enumerate(_get_list(raw, 'sweep'))
    ]


def find_unresolved_scope_ids(snapshot: ScenarioSnapshot) -> List[str]:
    """Scope ids referenced by inputs but absent from the topology.

    Such inputs are valid and contribute nothing, so loading does not fail
    on them; callers may want to warn.
    """
    archetype_ids = {a.id for a in snapshot.site_archetypes}
    dc_ids = {d.id for d in snapshot.dc_types}
    missing: List[str] = []
    for cost_input in snapshot.inputs:
        if cost_input.scope_id is None:
            continue
        if cost_input.scope_type == ScopeType.SITE_ARCHETYPE:
            known = archetype_ids
        elif cost_input.scope_type == ScopeType.DC_TYPE:
            known = dc_ids
        else:
            continue
        if cost_input.scope_id not in known and cost_input.scope_id not in missing:
            missing.append(cost_input.scope_id)
    return missing


def _read_yaml(path: str) -> Dict[str, Any]:
    scenario_path = Path(path)
    if not scenario_path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    with open(scenario_path, 'r', encoding='utf-8') as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in scenario file {path}: {e}")

    if not raw:
        raise ValueError("Scenario file is empty")
    if not isinstance(raw, dict):
        raise ValueError("Scenario file must contain a mapping")
    return raw


def _get_list(raw: Dict[str, Any], key: str) -> List[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list")
    return value


def _check_keys(data: Any, path: str, required: set, optional: set = frozenset()) -> None:
    if not isinstance(data, dict):
        raise ValueError(f"'{path}' must be a dictionary")
    unknown_keys = set(data.keys()) - required - optional
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")
    for key in sorted(required):
        if key not in data:
            raise ValueError(f"Missing required '{key}' in {path}")


def _parse_assumptions(data: Any) -> ModelAssumptions:
    """Parse the assumptions section; missing keys fall back to defaults."""
    _check_keys(
        data, "assumptions",
        required=set(),
        optional={'tco_years', 'discount_rate', 'perpetual_spread_years', 'currency'}
    )

    tco_years = data.get('tco_years', DEFAULT_TCO_YEARS)
    if not _is_int(tco_years) or not 1 <= tco_years <= MAX_TCO_YEARS:
        raise ValueError(
            f"'tco_years' in assumptions must be an integer between 1 and {MAX_TCO_YEARS}"
        )

    discount_rate = data.get('discount_rate', DEFAULT_DISCOUNT_RATE)
    if not _is_number(discount_rate) or not 0 <= discount_rate <= 1:
        raise ValueError("'discount_rate' in assumptions must be between 0 and 1")

    spread_years = data.get('perpetual_spread_years', DEFAULT_PERPETUAL_SPREAD_YEARS)
    if not _is_int(spread_years) or not 1 <= spread_years <= MAX_PERPETUAL_SPREAD_YEARS:
        raise ValueError(
            "'perpetual_spread_years' in assumptions must be an integer "
            f"between 1 and {MAX_PERPETUAL_SPREAD_YEARS}"
        )

    currency = Currency.USD
    if 'currency' in data:
        currency = _parse_enum(Currency, data['currency'], "assumptions.currency", lower=False)

    return ModelAssumptions(
        tco_years=tco_years,
        discount_rate=float(discount_rate),
        perpetual_spread_years=spread_years,
        currency=currency
    )


def _parse_site_archetype(data: Any, path: str) -> SiteArchetype:
    _check_keys(data, path, required={'id', 'name', 'num_sites', 'num_cus'})
    return SiteArchetype(
        id=_parse_id(data['id'], f"{path}.id"),
        name=_parse_name(data['name'], f"{path}.name"),
        num_sites=_parse_count(data['num_sites'], f"{path}.num_sites"),
        num_cus=_parse_count(data['num_cus'], f"{path}.num_cus")
    )


def _parse_dc_type(data: Any, path: str) -> DcType:
    _check_keys(data, path, required={'id', 'name', 'num_dcs'})
    return DcType(
        id=_parse_id(data['id'], f"{path}.id"),
        name=_parse_name(data['name'], f"{path}.name"),
        num_dcs=_parse_count(data['num_dcs'], f"{path}.num_dcs")
    )


def _parse_cost_input(data: Any, path: str) -> CostInput:
    """Parse and validate one cost input.

    Args:
        data: Cost input data
        path: Path for error messages

    Returns:
        Validated CostInput

    Raises:
        ValueError: If the input is invalid
    """
    _check_keys(
        data, path,
        required={'day', 'domain', 'layer', 'bucket', 'scope_type', 'driver', 'value'},
        optional={'scope_id', 'license_model'}
    )

    bucket = data['bucket']
    if not isinstance(bucket, str) or not bucket.strip():
        raise ValueError(f"'bucket' in {path} must be a non-empty string")

    value = data['value']
    if not _is_number(value):
        raise ValueError(f"'value' in {path} must be a number")

    scope_id = data.get('scope_id')
    if scope_id is not None:
        scope_id = _parse_id(scope_id, f"{path}.scope_id")

    license_model = data.get('license_model')
    if license_model is not None:
        license_model = _parse_enum(LicenseModel, license_model, f"{path}.license_model")

    return CostInput(
        day=_parse_enum(Day, data['day'], f"{path}.day"),
        domain=_parse_enum(Domain, data['domain'], f"{path}.domain"),
        layer=_parse_enum(Layer, data['layer'], f"{path}.layer"),
        bucket=bucket,
        scope_type=_parse_enum(ScopeType, data['scope_type'], f"{path}.scope_type"),
        scope_id=scope_id,
        driver=_parse_enum(ScalingDriver, data['driver'], f"{path}.driver"),
        value_number=float(value),
        license_model=license_model
    )


def _parse_sweep_parameter(data: Any, path: str) -> SweepParameter:
    _check_keys(data, path, required={'bucket', 'min_value', 'max_value', 'steps'})

    for key in ('min_value', 'max_value'):
        if not _is_number(data[key]):
            raise ValueError(f"'{key}' in {path} must be a number")
    if not _is_int(data['steps']) or data['steps'] < 2:
        raise ValueError(f"'steps' in {path} must be an integer >= 2")
    if not isinstance(data['bucket'], str) or not data['bucket']:
        raise ValueError(f"'bucket' in {path} must be a non-empty string")

    return SweepParameter(
        bucket=data['bucket'],
        min_value=float(data['min_value']),
        max_value=float(data['max_value']),
        steps=data['steps']
    )


def _parse_enum(enum_cls: Type[E], value: Any, path: str, lower: bool = True) -> E:
    if not isinstance(value, str):
        raise ValueError(f"'{path}' must be a string")
    try:
        return enum_cls(value.lower() if lower else value.upper())
    except ValueError:
        valid_values = [member.value for member in enum_cls]
        raise ValueError(f"'{path}' must be one of: {valid_values}")


def _parse_id(value: Any, path: str) -> str:
    # YAML reads bare numbers as int; ids are compared as strings
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"'{path}' must be a string")
    value = str(value)
    if not value.strip():
        raise ValueError(f"'{path}' cannot be empty")
    return value


def _parse_name(value: Any, path: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{path}' is required")
    return value


def _parse_count(value: Any, path: str) -> int:
    if not _is_int(value) or value < 0:
        raise ValueError(f"'{path}' must be a non-negative integer")
    return value


def _check_unique_ids(ids: List[str], path: str) -> None:
    seen = set()
    for item_id in ids:
        if item_id in seen:
            raise ValueError(f"Duplicate id '{item_id}' in {path}")
        seen.add(item_id)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
