"""Travel insurance quoting engine."""

from .errors import CatalogError, InvalidInputError, InvalidRangeError, QuoteError
from .models import AgeTier, Catalog, Plan, Provider, Quote, QuoteResponse, TripRequest
from .quote_engine import build_trip_request, evaluate, generate_quotes

__all__ = [
    "AgeTier",
    "Catalog",
    "CatalogError",
    "InvalidInputError",
    "InvalidRangeError",
    "Plan",
    "Provider",
    "Quote",
    "QuoteError",
    "QuoteResponse",
    "TripRequest",
    "build_trip_request",
    "evaluate",
    "generate_quotes",
]
