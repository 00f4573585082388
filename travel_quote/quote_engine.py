"""Core orchestration logic for producing insurance quotes."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from .catalog import get_catalog
from .config import Settings, get_settings
from .errors import InvalidInputError
from .models import Catalog, Quote, QuoteResponse, TripRequest
from .services.insurance import aggregate_quotes, rank_quotes
from .utils import DateLike, parse_iso_date, resolve_trip_days


logger = logging.getLogger(__name__)

MISSING_AGE_MESSAGE = "Please enter the age of every traveler."
NO_COVERAGE_NOTICE = (
    "No coverage was found for the given details. "
    "Check the travelers' ages and the trip length."
)


def _parse_age(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(MISSING_AGE_MESSAGE)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip():
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidInputError(MISSING_AGE_MESSAGE)


def build_trip_request(
    ages: Sequence[Any],
    days: Optional[int] = None,
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
    settings: Optional[Settings] = None,
) -> TripRequest:
    """Validate raw form input and turn it into a :class:`TripRequest`.

    Raises :class:`InvalidInputError` (or :class:`InvalidRangeError` for
    reversed dates) before anything is priced.
    """

    settings = settings or get_settings()
    if not ages:
        raise InvalidInputError("At least one traveler is required.")
    if len(ages) > settings.max_travelers:
        raise InvalidInputError(
            f"For groups larger than {settings.max_travelers} travelers, please contact us."
        )

    parsed = tuple(_parse_age(age) for age in ages)
    for age in parsed:
        if age < 0 or age > settings.max_traveler_age:
            raise InvalidInputError(
                f"Traveler ages must be between 0 and {settings.max_traveler_age}, got {age}."
            )

    resolved_days = resolve_trip_days(days=days, start_date=start_date, end_date=end_date)
    has_dates = start_date is not None and end_date is not None
    return TripRequest(
        traveler_ages=parsed,
        days=resolved_days,
        start_date=parse_iso_date(start_date) if has_dates else None,
        end_date=parse_iso_date(end_date) if has_dates else None,
    )


def evaluate(catalog: Catalog, request: TripRequest) -> List[Quote]:
    """Price a trip against a catalog, cheapest quote first."""

    return rank_quotes(aggregate_quotes(catalog, request))


def generate_quotes(request: TripRequest, catalog: Optional[Catalog] = None) -> QuoteResponse:
    catalog = catalog if catalog is not None else get_catalog()
    quotes = evaluate(catalog, request)
    response = QuoteResponse(request=request, quotes=quotes)
    if quotes:
        response.featured = quotes[0]
        logger.info(
            "Quoted %s plan(s) for %s traveler(s) over %s day(s)",
            len(quotes),
            request.traveler_count,
            request.days,
        )
    else:
        response.notice = NO_COVERAGE_NOTICE
        logger.info("No coverage for ages %s over %s day(s)", list(request.traveler_ages), request.days)
    return response
