"""Insurance catalog loading and validation.

The catalog is declared in the same shape the quoting form has always used:
a list of providers, each with plans whose age tiers are a mapping from a
``"<minAge>-<maxAge>"`` key to a daily price. That mapping is parsed exactly
once, here, into ordered tuples of :class:`AgeTier`. Key order is kept
because the first matching tier wins when tiers overlap.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import get_settings
from .errors import CatalogError
from .models import AgeTier, Catalog, Plan, Provider


logger = logging.getLogger(__name__)


REFERENCE_CATALOG: List[Dict[str, Any]] = [
    {
        "providerId": "intermac",
        "providerName": "Intermac",
        "plans": [
            {
                "planId": "intermac-i85",
                "planName": "Cobertura I85 / I100",
                "rules": {
                    "0-75": 6.83,
                    "76-85": 16.27,
                },
                "minAge": 0,
                "maxAge": 85,
                "minDays": 3,
                "details": [
                    "Asistencia médica por accidente: USD 85,000",
                    "Asistencia médica por enfermedad: USD 85,000",
                    "Cancelación de viaje multicausa: USD 1,000",
                    "Pérdida de equipaje: USD 1,200",
                ],
            },
            {
                "planId": "intermac-economico",
                "planName": "Plan Económico",
                "rules": {
                    "0-75": 5.50,
                },
                "minAge": 0,
                "maxAge": 75,
                "minDays": 3,
                "details": [
                    "Asistencia médica por accidente: USD 40,000",
                    "Asistencia médica por enfermedad: USD 40,000",
                    "Pérdida de equipaje: USD 900",
                ],
            },
            {
                "planId": "intermac-premium",
                "planName": "Plan Premium Plus",
                "rules": {
                    "0-85": 20.00,
                },
                "minAge": 0,
                "maxAge": 85,
                "minDays": 3,
                "details": [
                    "Asistencia médica por accidente: USD 150,000",
                    "Asistencia médica por enfermedad: USD 150,000",
                    "Cancelación de viaje multicausa: USD 5,000",
                    "Pérdida de equipaje: USD 2,000",
                    "Cobertura para deportes extremos",
                ],
            },
        ],
    },
]


def parse_age_range(key: str) -> Tuple[int, int]:
    """Split a ``"<min>-<max>"`` tier key into two integers."""

    parts = str(key).split("-")
    if len(parts) != 2:
        raise CatalogError(f"Invalid age range '{key}'. Expected '<min>-<max>'.")
    try:
        low, high = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise CatalogError(f"Invalid age range '{key}'. Bounds must be integers.") from exc
    if low > high:
        raise CatalogError(f"Invalid age range '{key}'. Minimum age exceeds maximum age.")
    return low, high


def _parse_price(value: Any, where: str) -> Decimal:
    if isinstance(value, bool):
        raise CatalogError(f"{where}: price must be a number, got {value!r}.")
    try:
        price = Decimal(str(value))
    except InvalidOperation as exc:
        raise CatalogError(f"{where}: price must be a number, got {value!r}.") from exc
    if not price.is_finite() or price < 0:
        raise CatalogError(f"{where}: price must be a non-negative number, got {value!r}.")
    return price


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise CatalogError(f"{where}: expected an object, got {value!r}.")
    return value


def _sequence(value: Any, where: str) -> Sequence[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise CatalogError(f"{where}: expected a list, got {value!r}.")
    return value


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    try:
        return data[key]
    except KeyError as exc:
        raise CatalogError(f"{where}: missing required field '{key}'.") from exc


def _parse_int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalogError(f"{where}: expected an integer, got {value!r}.")
    return value


def _parse_plan(data: Any) -> Plan:
    data = _mapping(data, "plan")
    plan_id = str(_require(data, "planId", "plan"))
    where = f"plan '{plan_id}'"
    rules = _require(data, "rules", where)
    if not isinstance(rules, Mapping):
        raise CatalogError(f"{where}: 'rules' must be a mapping of age ranges to prices.")

    tiers = []
    for key, value in rules.items():
        low, high = parse_age_range(key)
        tiers.append(AgeTier(low, high, _parse_price(value, f"{where} tier '{key}'")))

    min_age = _parse_int(_require(data, "minAge", where), f"{where} minAge")
    max_age = _parse_int(_require(data, "maxAge", where), f"{where} maxAge")
    min_days = _parse_int(_require(data, "minDays", where), f"{where} minDays")
    if min_age > max_age:
        raise CatalogError(f"{where}: minAge {min_age} exceeds maxAge {max_age}.")
    if min_days < 1:
        raise CatalogError(f"{where}: minDays must be at least 1, got {min_days}.")

    details = _sequence(data.get("details", []), f"{where} details")
    if not all(isinstance(d, str) for d in details):
        raise CatalogError(f"{where}: details must be a list of strings.")

    return Plan(
        plan_id=plan_id,
        plan_name=str(_require(data, "planName", where)),
        tiers=tuple(tiers),
        min_age=min_age,
        max_age=max_age,
        min_days=min_days,
        details=tuple(details),
    )


def tier_coverage_issues(plan: Plan) -> List[str]:
    """Describe overlaps, gaps and out-of-bounds tiers within a plan.

    These do not change how prices are matched; they are reported so a
    catalog author can spot mistakes.
    """

    issues: List[str] = []
    for i, tier in enumerate(plan.tiers):
        for earlier in plan.tiers[:i]:
            if tier.min_age <= earlier.max_age and earlier.min_age <= tier.max_age:
                issues.append(
                    f"plan '{plan.plan_id}': tier {tier.range_key} overlaps {earlier.range_key}; "
                    f"{earlier.range_key} takes precedence for shared ages"
                )
        if tier.min_age < plan.min_age or tier.max_age > plan.max_age:
            issues.append(
                f"plan '{plan.plan_id}': tier {tier.range_key} falls outside "
                f"plan ages {plan.min_age}-{plan.max_age}"
            )

    expected = plan.min_age
    for tier in sorted(plan.tiers, key=lambda t: (t.min_age, t.max_age)):
        if tier.max_age < plan.min_age:
            continue
        if tier.min_age > expected and expected <= plan.max_age:
            gap_end = min(tier.min_age - 1, plan.max_age)
            issues.append(f"plan '{plan.plan_id}': no tier covers ages {expected}-{gap_end}")
        expected = max(expected, tier.max_age + 1)
        if expected > plan.max_age:
            break
    if expected <= plan.max_age:
        issues.append(f"plan '{plan.plan_id}': no tier covers ages {expected}-{plan.max_age}")
    return issues


def parse_catalog(data: Sequence[Mapping[str, Any]], *, strict: bool = False) -> Catalog:
    """Build a typed :class:`Catalog` from its declarative form."""

    data = _sequence(data, "catalog")

    providers = []
    seen_plans: Dict[str, str] = {}
    for raw_provider in data:
        raw_provider = _mapping(raw_provider, "provider")
        provider_id = str(_require(raw_provider, "providerId", "provider"))
        where = f"provider '{provider_id}'"
        plans = []
        for raw_plan in _sequence(_require(raw_provider, "plans", where), f"{where} plans"):
            plan = _parse_plan(raw_plan)
            if plan.plan_id in seen_plans:
                raise CatalogError(
                    f"Duplicate plan id '{plan.plan_id}' in {where}; "
                    f"already declared by provider '{seen_plans[plan.plan_id]}'."
                )
            seen_plans[plan.plan_id] = provider_id
            issues = tier_coverage_issues(plan)
            if issues and strict:
                raise CatalogError("; ".join(issues))
            for issue in issues:
                logger.warning("Catalog tier coverage: %s", issue)
            plans.append(plan)
        providers.append(
            Provider(
                provider_id=provider_id,
                provider_name=str(_require(raw_provider, "providerName", where)),
                plans=tuple(plans),
            )
        )
    return Catalog(providers=tuple(providers))


def load_catalog(path: Optional[Path] = None, *, strict: bool = False) -> Catalog:
    """Load a catalog from a JSON file, or the built-in reference catalog."""

    if path is None:
        logger.info("Loading built-in reference catalog")
        return parse_catalog(REFERENCE_CATALOG, strict=strict)

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Insurance catalog not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog file {path} is not valid JSON: {exc}") from exc
    logger.info("Loading insurance catalog from %s", path)
    return parse_catalog(data, strict=strict)


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Load and cache the configured catalog for the lifetime of the process."""

    settings = get_settings()
    return load_catalog(settings.catalog_path, strict=settings.strict_catalog)


def catalog_to_dict(catalog: Catalog) -> List[Dict[str, Any]]:
    """Render a catalog back into its declarative form."""

    return [
        {
            "providerId": provider.provider_id,
            "providerName": provider.provider_name,
            "plans": [
                {
                    "planId": plan.plan_id,
                    "planName": plan.plan_name,
                    "rules": {tier.range_key: str(tier.daily_price) for tier in plan.tiers},
                    "minAge": plan.min_age,
                    "maxAge": plan.max_age,
                    "minDays": plan.min_days,
                    "details": list(plan.details),
                }
                for plan in provider.plans
            ],
        }
        for provider in catalog.providers
    ]
