"""Pydantic schemas for API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TeamCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    slug: str = Field(
        min_length=3,
        max_length=80,
        pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$",
    )
    stripe_price_id: str | None = Field(default=None, max_length=255)
    is_enterprise_plan: bool = False


class TeamPlanPatchRequest(BaseModel):
    stripe_price_id: str | None = Field(default=None, max_length=255)
    is_enterprise_plan: bool | None = None


class TeamOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    is_enterprise_plan: bool
    stripe_price_id: str | None
    created_at: datetime
    updated_at: datetime


class TeamPlanChangeOut(BaseModel):
    team: TeamOut
    change: Literal["upgrade", "downgrade", "unchanged"]


class AllowanceOut(BaseModel):
    slug: str
    tier: Literal["hobby", "pro", "enterprise"] | None
    monthly_quota: int
    website_pages_per_project: int
    legacy_price: bool


class PriceOut(BaseModel):
    amount: int
    price_id: str


class OfferingOut(BaseModel):
    name: str
    quota: int
    website_pages_per_project: int
    monthly: PriceOut | None = None
    yearly: PriceOut | None = None


class TierOut(BaseModel):
    key: Literal["hobby", "pro", "enterprise"]
    name: str
    description: str
    enterprise: bool
    items: list[str]
    notes: list[str]
    offerings: list[OfferingOut]


class CatalogOut(BaseModel):
    environment: Literal["test", "production"]
    models: dict[str, str]
    tiers: list[TierOut]


class PriceLookupOut(BaseModel):
    price_id: str
    tier: Literal["hobby", "pro", "enterprise"]
    tier_name: str
    offering: OfferingOut
    yearly: bool


class PlanComparisonOut(BaseModel):
    price_id: str
    other_price_id: str
    result: Literal[-1, 0, 1]
