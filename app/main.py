"""FastAPI app exposing the subscription tier catalog and team allowances."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .billing import (
    CATALOG,
    classify_plan_change,
    compute_monthly_quota,
    compute_per_project_page_allowance,
    is_legacy_price_id,
)
from .catalog import Environment, PricedOffering
from .constants import MODEL_LABELS
from .db import get_db, init_db
from .models import Team
from .schemas import (
    AllowanceOut,
    CatalogOut,
    OfferingOut,
    PlanComparisonOut,
    PriceLookupOut,
    PriceOut,
    TeamCreateRequest,
    TeamOut,
    TeamPlanChangeOut,
    TeamPlanPatchRequest,
    TierOut,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    logger.info("Serving tier catalog with %s price identifiers", CATALOG.environment)
    yield


app = FastAPI(
    title="Subscription Tier Catalog API",
    description="Pricing tiers, Stripe price lookups and per-team usage allowances.",
    version="0.1.0",
    lifespan=lifespan,
)


def serialize_offering(offering: PricedOffering, environment: Environment) -> OfferingOut:
    return OfferingOut(
        name=offering.name,
        quota=offering.quota,
        website_pages_per_project=offering.num_website_pages_per_project,
        monthly=(
            PriceOut(amount=offering.monthly.amount, price_id=offering.monthly.price_id(environment))
            if offering.monthly
            else None
        ),
        yearly=(
            PriceOut(amount=offering.yearly.amount, price_id=offering.yearly.price_id(environment))
            if offering.yearly
            else None
        ),
    )


def get_team_or_404(db: Session, slug: str) -> Team:
    team = db.scalar(select(Team).where(Team.slug == slug))
    if not team:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Team not found.",
        )
    return team


@app.get("/health")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/billing/tiers", response_model=CatalogOut)
def get_tier_catalog() -> CatalogOut:
    tiers = [
        TierOut(
            key=key,
            name=details.name,
            description=details.description,
            enterprise=details.enterprise,
            items=list(details.items),
            notes=list(details.notes),
            offerings=[serialize_offering(offering, CATALOG.environment) for offering in details.prices],
        )
        for key, details in CATALOG.items()
    ]
    return CatalogOut(
        environment=CATALOG.environment,
        models=dict(MODEL_LABELS),
        tiers=tiers,
    )


@app.get("/billing/prices/{price_id}", response_model=PriceLookupOut)
def lookup_price(price_id: str) -> PriceLookupOut:
    tier_key = CATALOG.resolve_tier_key_by_price_id(price_id)
    tier = CATALOG.resolve_tier_by_price_id(price_id)
    offering = CATALOG.resolve_offering_by_price_id(price_id)
    if tier_key is None or tier is None or offering is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unknown price identifier.",
        )
    return PriceLookupOut(
        price_id=price_id,
        tier=tier_key,
        tier_name=tier.name,
        offering=serialize_offering(offering, CATALOG.environment),
        yearly=CATALOG.is_yearly(price_id),
    )


@app.get("/billing/compare", response_model=PlanComparisonOut)
def compare_prices(
    price_id: str = Query(min_length=1),
    other_price_id: str = Query(min_length=1),
) -> PlanComparisonOut:
    return PlanComparisonOut(
        price_id=price_id,
        other_price_id=other_price_id,
        result=CATALOG.compare_plans(price_id, other_price_id),
    )


@app.post("/teams", response_model=TeamOut, status_code=status.HTTP_201_CREATED)
def create_team(payload: TeamCreateRequest, db: Session = Depends(get_db)) -> Team:
    team = Team(
        name=payload.name.strip(),
        slug=payload.slug.strip(),
        stripe_price_id=payload.stripe_price_id or None,
        is_enterprise_plan=payload.is_enterprise_plan,
    )
    db.add(team)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Team slug already exists.",
        ) from None

    db.refresh(team)
    return team


@app.get("/teams/{slug}/allowance", response_model=AllowanceOut)
def get_team_allowance(slug: str, db: Session = Depends(get_db)) -> AllowanceOut:
    team = get_team_or_404(db, slug)
    legacy_price = is_legacy_price_id(team.stripe_price_id)
    if legacy_price and not team.is_enterprise_plan:
        logger.warning(
            "Team %s has legacy price id %s, applying Pro allowances",
            team.slug,
            team.stripe_price_id,
        )

    if team.is_enterprise_plan:
        tier = "enterprise"
    elif team.stripe_price_id:
        tier = CATALOG.resolve_tier_key_by_price_id(team.stripe_price_id)
    else:
        tier = "hobby"

    return AllowanceOut(
        slug=team.slug,
        tier=tier,
        monthly_quota=compute_monthly_quota(team),
        website_pages_per_project=compute_per_project_page_allowance(team),
        legacy_price=legacy_price,
    )


@app.patch("/teams/{slug}/plan", response_model=TeamPlanChangeOut)
def update_team_plan(
    slug: str,
    payload: TeamPlanPatchRequest,
    db: Session = Depends(get_db),
) -> TeamPlanChangeOut:
    team = get_team_or_404(db, slug)
    new_price_id = team.stripe_price_id
    if "stripe_price_id" in payload.model_fields_set:
        new_price_id = payload.stripe_price_id or None
    new_enterprise = team.is_enterprise_plan
    if payload.is_enterprise_plan is not None:
        new_enterprise = payload.is_enterprise_plan

    change = classify_plan_change(
        team.stripe_price_id,
        new_price_id,
        current_enterprise=team.is_enterprise_plan,
        new_enterprise=new_enterprise,
    )
    logger.info(
        "Team %s plan %s: %s (enterprise=%s) -> %s (enterprise=%s)",
        team.slug,
        change,
        team.stripe_price_id,
        team.is_enterprise_plan,
        new_price_id,
        new_enterprise,
    )

    team.stripe_price_id = new_price_id
    team.is_enterprise_plan = new_enterprise
    db.commit()
    db.refresh(team)
    return TeamPlanChangeOut(team=TeamOut.model_validate(team), change=change)
