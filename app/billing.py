"""Team allowance helpers."""

from __future__ import annotations

from typing import Literal

from .catalog import TeamRecord, TierCatalog
from .config import DEPLOYMENT_ENV
from .constants import MAX_ALLOWANCE_FOR_ENTERPRISE, TIERS, UNLIMITED

PlanChange = Literal["upgrade", "downgrade", "unchanged"]

CATALOG = TierCatalog(TIERS, environment=DEPLOYMENT_ENV)


def is_legacy_price_id(price_id: str | None, catalog: TierCatalog = CATALOG) -> bool:
    if not price_id:
        return False
    return catalog.resolve_offering_by_price_id(price_id) is None


def compute_monthly_quota(team: TeamRecord, catalog: TierCatalog = CATALOG) -> int:
    """Return the completions a team may use per billing cycle.

    Stored identifiers that are no longer in the catalog get the current
    Pro quota.
    """
    if team.is_enterprise_plan:
        return MAX_ALLOWANCE_FOR_ENTERPRISE
    if team.stripe_price_id:
        offering = catalog.resolve_offering_by_price_id(team.stripe_price_id)
        if offering:
            return offering.quota
        return catalog.tier("pro").prices[0].quota
    return catalog.tier("hobby").prices[0].quota


def compute_per_project_page_allowance(team: TeamRecord, catalog: TierCatalog = CATALOG) -> int:
    if team.is_enterprise_plan:
        return UNLIMITED
    if team.stripe_price_id:
        offering = catalog.resolve_offering_by_price_id(team.stripe_price_id)
        if offering:
            return offering.num_website_pages_per_project
        return catalog.tier("pro").prices[0].num_website_pages_per_project
    return catalog.tier("hobby").prices[0].num_website_pages_per_project


def classify_plan_change(
    current_price_id: str | None,
    new_price_id: str | None,
    catalog: TierCatalog = CATALOG,
    *,
    current_enterprise: bool = False,
    new_enterprise: bool = False,
) -> PlanChange:
    """Describe a move between two stored plans.

    The enterprise flag ranks above every price and, while set, the stored
    price does not matter. A missing identifier stands for the free tier.
    Priced moves follow ``compare_plans`` rather than the allowances, so a
    move from a legacy identifier to Pro reads as a downgrade even though
    both get Pro allowances.
    """
    if current_enterprise != new_enterprise:
        return "upgrade" if new_enterprise else "downgrade"
    if new_enterprise or current_price_id == new_price_id:
        return "unchanged"
    if not new_price_id:
        return "downgrade" if current_price_id else "unchanged"
    if not current_price_id:
        return "upgrade"
    result = catalog.compare_plans(current_price_id, new_price_id)
    if result < 0:
        return "upgrade"
    if result > 0:
        return "downgrade"
    return "unchanged"
