"""Utility helpers."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from .errors import InvalidInputError, InvalidRangeError

DateLike = Union[date, str]


def parse_iso_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date '{value}'. Expected YYYY-MM-DD.") from exc


def resolve_trip_days(
    days: Optional[int] = None,
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
) -> int:
    """Return the number of covered days for a trip.

    Both the first and the last calendar day count, so a same-day trip is
    one day long. When dates are given they take precedence over ``days``.
    """

    if start_date is not None or end_date is not None:
        if start_date is None or end_date is None:
            raise InvalidInputError("Both a start date and an end date are required.")
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)
        if end < start:
            raise InvalidRangeError("The end date cannot be before the start date.")
        return (end - start).days + 1

    if days is None:
        raise InvalidInputError("Provide either the number of days or the trip dates.")
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidInputError(f"The number of days must be a whole number, got {days!r}.")
    if days < 1:
        raise InvalidInputError("The trip must last at least 1 day.")
    return days


def format_price(amount: Decimal, currency: str = "USD") -> str:
    """Return a display string like '$1,234.50 USD'."""

    return f"${amount:,.2f} {currency}"
