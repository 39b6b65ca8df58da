"""Tier catalog types and price identifier resolvers."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Protocol

TierKey = Literal["hobby", "pro", "enterprise"]
Environment = Literal["test", "production"]
Comparison = Literal[-1, 0, 1]


@dataclass(frozen=True)
class Price:
    amount: int
    price_ids: Mapping[Environment, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "price_ids", MappingProxyType(dict(self.price_ids)))

    def price_id(self, environment: Environment) -> str:
        return self.price_ids[environment]


@dataclass(frozen=True)
class PricedOffering:
    name: str
    quota: int
    num_website_pages_per_project: int
    monthly: Price | None = None
    yearly: Price | None = None

    @property
    def is_paid(self) -> bool:
        return self.monthly is not None or self.yearly is not None

    def monthly_price_id(self, environment: Environment) -> str | None:
        return self.monthly.price_id(environment) if self.monthly else None

    def yearly_price_id(self, environment: Environment) -> str | None:
        return self.yearly.price_id(environment) if self.yearly else None


@dataclass(frozen=True)
class TierDetails:
    name: str
    description: str
    items: tuple[str, ...]
    prices: tuple[PricedOffering, ...]
    notes: tuple[str, ...] = ()
    enterprise: bool = False


class TeamRecord(Protocol):
    is_enterprise_plan: bool
    stripe_price_id: str | None


class TierCatalog:
    """Ordered, read-only tier table bound to one deployment environment.

    Tiers must be given from lowest to highest value; ``compare_plans``
    derives its ordering from that sequence and nothing else.
    """

    def __init__(
        self,
        tiers: Mapping[TierKey, TierDetails],
        environment: Environment = "test",
    ) -> None:
        self._tiers: Mapping[TierKey, TierDetails] = MappingProxyType(dict(tiers))
        self.environment: Environment = environment

    def keys(self) -> list[TierKey]:
        return list(self._tiers)

    def items(self) -> list[tuple[TierKey, TierDetails]]:
        return list(self._tiers.items())

    def tier(self, key: TierKey) -> TierDetails:
        return self._tiers[key]

    def _offerings(self) -> Iterator[tuple[TierKey, TierDetails, PricedOffering]]:
        for key, details in self._tiers.items():
            for offering in details.prices:
                yield key, details, offering

    def _matches(self, offering: PricedOffering, price_id: str) -> bool:
        return (
            offering.monthly_price_id(self.environment) == price_id
            or offering.yearly_price_id(self.environment) == price_id
        )

    def resolve_offering_by_price_id(self, price_id: str) -> PricedOffering | None:
        for _, _, offering in self._offerings():
            if self._matches(offering, price_id):
                return offering
        return None

    def resolve_tier_by_price_id(self, price_id: str) -> TierDetails | None:
        for _, details, offering in self._offerings():
            if self._matches(offering, price_id):
                return details
        return None

    def resolve_tier_key_by_price_id(self, price_id: str) -> TierKey | None:
        for key, _, offering in self._offerings():
            if self._matches(offering, price_id):
                return key
        return None

    def is_yearly(self, price_id: str) -> bool:
        """Return True for yearly identifiers.

        Monthly and unknown identifiers both yield False.
        """
        for _, _, offering in self._offerings():
            if offering.yearly_price_id(self.environment) == price_id:
                return True
        return False

    def compare_plans(self, price_id: str, other_price_id: str) -> Comparison:
        """Order two price identifiers by their position in the catalog.

        Monthly and yearly prices of the same offering compare equal. When
        neither identifier is in the catalog the result is 1, so unknown
        identifiers sort above every known plan.
        """
        if price_id == other_price_id:
            return 0
        for _, _, offering in self._offerings():
            monthly_id = offering.monthly_price_id(self.environment)
            yearly_id = offering.yearly_price_id(self.environment)
            if (monthly_id == price_id and yearly_id == other_price_id) or (
                monthly_id == other_price_id and yearly_id == price_id
            ):
                return 0
            if price_id in (monthly_id, yearly_id):
                return -1
            if other_price_id in (monthly_id, yearly_id):
                return 1
        return 1
