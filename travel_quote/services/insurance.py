"""Travel insurance pricing against the plan catalog."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from ..models import CENTS, Catalog, Plan, Quote, TripRequest


logger = logging.getLogger(__name__)


def price_for_age(plan: Plan, age: int) -> Optional[Decimal]:
    """Return the daily price a plan charges for one traveler, if any.

    Tiers are checked in the order they were declared and the first one
    containing ``age`` wins, even when a later tier also contains it.
    """

    for tier in plan.tiers:
        if tier.contains(age):
            return tier.daily_price
    return None


def plan_applies(plan: Plan, request: TripRequest, days: int) -> bool:
    if days < plan.min_days:
        logger.debug("Plan %s excluded: %s days is below minimum %s", plan.plan_id, days, plan.min_days)
        return False
    for age in request.traveler_ages:
        if age < plan.min_age or age > plan.max_age:
            logger.debug(
                "Plan %s excluded: age %s outside %s-%s", plan.plan_id, age, plan.min_age, plan.max_age
            )
            return False
        if price_for_age(plan, age) is None:
            logger.debug("Plan %s excluded: no tier prices age %s", plan.plan_id, age)
            return False
    return True


def aggregate_quotes(catalog: Catalog, request: TripRequest, days: Optional[int] = None) -> List[Quote]:
    """Price every applicable plan in catalog order."""

    days = request.days if days is None else days
    quotes: List[Quote] = []
    for provider, plan in catalog.iter_plans():
        if not plan_applies(plan, request, days):
            continue
        daily_total = sum(
            (price_for_age(plan, age) for age in request.traveler_ages),
            Decimal("0"),
        )
        total = (daily_total * days).quantize(CENTS, rounding=ROUND_HALF_UP)
        quotes.append(
            Quote(
                provider_name=provider.provider_name,
                plan_id=plan.plan_id,
                plan_name=plan.plan_name,
                total_price=total,
                travelers=request.traveler_count,
                days=days,
                details=plan.details,
            )
        )
    return quotes


def rank_quotes(quotes: Iterable[Quote]) -> List[Quote]:
    """Cheapest first; ties keep their catalog order."""

    return sorted(quotes, key=lambda quote: quote.total_price)
