"""Core data models for the travel insurance quoter."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional, Tuple


CENTS = Decimal("0.01")


@dataclass(frozen=True)
class AgeTier:
    min_age: int
    max_age: int
    daily_price: Decimal

    def contains(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age

    @property
    def range_key(self) -> str:
        return f"{self.min_age}-{self.max_age}"


@dataclass(frozen=True)
class Plan:
    plan_id: str
    plan_name: str
    tiers: Tuple[AgeTier, ...]
    min_age: int
    max_age: int
    min_days: int
    details: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Provider:
    provider_id: str
    provider_name: str
    plans: Tuple[Plan, ...] = ()


@dataclass(frozen=True)
class Catalog:
    providers: Tuple[Provider, ...] = ()

    def iter_plans(self) -> Iterator[Tuple[Provider, Plan]]:
        """Yield every (provider, plan) pair in declaration order."""

        for provider in self.providers:
            for plan in provider.plans:
                yield provider, plan

    def find_plan(self, plan_id: str) -> Optional[Plan]:
        for _, plan in self.iter_plans():
            if plan.plan_id == plan_id:
                return plan
        return None


@dataclass(frozen=True)
class TripRequest:
    traveler_ages: Tuple[int, ...]
    days: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def traveler_count(self) -> int:
        return len(self.traveler_ages)


@dataclass(frozen=True)
class Quote:
    provider_name: str
    plan_id: str
    plan_name: str
    total_price: Decimal
    travelers: int
    days: int
    details: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider_name": self.provider_name,
            "plan_id": self.plan_id,
            "plan_name": self.plan_name,
            "total_price": str(self.total_price.quantize(CENTS)),
            "travelers": self.travelers,
            "days": self.days,
            "details": list(self.details),
        }


@dataclass
class QuoteResponse:
    request: TripRequest
    quotes: List[Quote] = field(default_factory=list)
    featured: Optional[Quote] = None
    notice: Optional[str] = None


def trip_request_to_dict(request: TripRequest) -> Dict[str, Any]:
    return {
        "traveler_ages": list(request.traveler_ages),
        "travelers": request.traveler_count,
        "days": request.days,
        "start_date": request.start_date.isoformat() if request.start_date else None,
        "end_date": request.end_date.isoformat() if request.end_date else None,
    }


def quote_response_to_dict(response: QuoteResponse) -> Dict[str, Any]:
    """Convenience helper for serializing quote responses in APIs."""

    quotes = []
    for quote in response.quotes:
        item = quote.to_dict()
        item["featured"] = quote is response.featured
        quotes.append(item)
    return {
        "request": trip_request_to_dict(response.request),
        "quotes": quotes,
        "notice": response.notice,
    }
