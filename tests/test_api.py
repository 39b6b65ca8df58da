from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from app import db
from app.billing import CATALOG
from app.main import app

PRO_OFFERING = CATALOG.tier("pro").prices[0]
PRO_MONTHLY = PRO_OFFERING.monthly.price_id(CATALOG.environment)
PRO_YEARLY = PRO_OFFERING.yearly.price_id(CATALOG.environment)


@pytest.fixture()
def client(tmp_path):
    database_url = f"sqlite:///{tmp_path}/test.db"
    db.reset_engine(database_url)
    db.init_db()

    with TestClient(app) as test_client:
        yield test_client


def create_team(client: TestClient, slug: str = "acme-inc", **plan) -> dict:
    response = client.post(
        "/teams",
        json={
            "name": "Acme Inc",
            "slug": slug,
            **plan,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_tier_catalog_lists_tiers_in_order(client: TestClient) -> None:
    response = client.get("/billing/tiers")
    assert response.status_code == 200
    body = response.json()

    assert body["environment"] == CATALOG.environment
    assert body["models"] == {"gpt-4": "GPT-4", "gpt-3.5-turbo": "Chat", "byo": "BYO"}
    assert [tier["key"] for tier in body["tiers"]] == ["hobby", "pro", "enterprise"]

    hobby, pro, enterprise = body["tiers"]
    assert hobby["notes"] == ["* BYO: Bring-your-own API key"]
    assert hobby["offerings"][0]["monthly"] is None
    assert pro["offerings"][0]["monthly"] == {"amount": 120, "price_id": PRO_MONTHLY}
    assert pro["offerings"][0]["yearly"] == {"amount": 100, "price_id": PRO_YEARLY}
    assert enterprise["enterprise"] is True
    assert enterprise["offerings"][0]["quota"] == -1


def test_price_lookup(client: TestClient) -> None:
    monthly = client.get(f"/billing/prices/{PRO_MONTHLY}")
    assert monthly.status_code == 200, monthly.text
    assert monthly.json()["tier"] == "pro"
    assert monthly.json()["tier_name"] == "Pro"
    assert monthly.json()["offering"]["quota"] == 1000
    assert monthly.json()["yearly"] is False

    yearly = client.get(f"/billing/prices/{PRO_YEARLY}")
    assert yearly.status_code == 200
    assert yearly.json()["yearly"] is True

    unknown = client.get("/billing/prices/price_unknown")
    assert unknown.status_code == 404


def test_compare_prices(client: TestClient) -> None:
    same_plan = client.get(
        "/billing/compare",
        params={"price_id": PRO_MONTHLY, "other_price_id": PRO_YEARLY},
    )
    assert same_plan.status_code == 200
    assert same_plan.json()["result"] == 0

    lower = client.get(
        "/billing/compare",
        params={"price_id": PRO_MONTHLY, "other_price_id": "unknown-id"},
    )
    assert lower.json()["result"] == -1

    higher = client.get(
        "/billing/compare",
        params={"price_id": "unknown-id", "other_price_id": PRO_MONTHLY},
    )
    assert higher.json()["result"] == 1

    missing = client.get("/billing/compare", params={"price_id": PRO_MONTHLY})
    assert missing.status_code == 422


def test_create_team_rejects_duplicate_slug(client: TestClient) -> None:
    create_team(client, slug="beta-co")

    duplicate = client.post("/teams", json={"name": "Beta Co", "slug": "beta-co"})
    assert duplicate.status_code == 409


def test_allowance_for_free_pro_and_enterprise_teams(client: TestClient) -> None:
    create_team(client, slug="free-team")
    create_team(client, slug="pro-team", stripe_price_id=PRO_MONTHLY)
    create_team(client, slug="big-team", is_enterprise_plan=True)

    free = client.get("/teams/free-team/allowance").json()
    assert free["tier"] == "hobby"
    assert free["monthly_quota"] == 25
    assert free["website_pages_per_project"] == 100

    pro = client.get("/teams/pro-team/allowance").json()
    assert pro["tier"] == "pro"
    assert pro["monthly_quota"] == 1000
    assert pro["website_pages_per_project"] == 1000
    assert pro["legacy_price"] is False

    enterprise = client.get("/teams/big-team/allowance").json()
    assert enterprise["tier"] == "enterprise"
    assert enterprise["monthly_quota"] == 1_000_000
    assert enterprise["website_pages_per_project"] == -1


def test_allowance_for_legacy_price_logs_warning(
    client: TestClient,
    caplog: pytest.LogCaptureFixture,
) -> None:
    create_team(client, slug="old-team", stripe_price_id="price_retired_plan")

    with caplog.at_level(logging.WARNING, logger="app.main"):
        response = client.get("/teams/old-team/allowance")

    assert response.status_code == 200
    body = response.json()
    assert body["tier"] is None
    assert body["legacy_price"] is True
    assert body["monthly_quota"] == 1000
    assert "legacy price id price_retired_plan" in caplog.text


def test_allowance_for_unknown_team(client: TestClient) -> None:
    response = client.get("/teams/nobody/allowance")
    assert response.status_code == 404


def test_plan_change_is_classified_and_stored(client: TestClient) -> None:
    create_team(client, slug="gamma-labs")

    upgraded = client.patch(
        "/teams/gamma-labs/plan",
        json={"stripe_price_id": PRO_MONTHLY},
    )
    assert upgraded.status_code == 200, upgraded.text
    assert upgraded.json()["change"] == "upgrade"
    assert upgraded.json()["team"]["stripe_price_id"] == PRO_MONTHLY

    switched = client.patch(
        "/teams/gamma-labs/plan",
        json={"stripe_price_id": PRO_YEARLY},
    )
    assert switched.json()["change"] == "unchanged"

    downgraded = client.patch("/teams/gamma-labs/plan", json={"stripe_price_id": None})
    assert downgraded.json()["change"] == "downgrade"
    assert downgraded.json()["team"]["stripe_price_id"] is None

    allowance = client.get("/teams/gamma-labs/allowance").json()
    assert allowance["monthly_quota"] == 25


def test_free_team_moved_to_enterprise_and_back(client: TestClient) -> None:
    create_team(client, slug="free-team")

    promoted = client.patch("/teams/free-team/plan", json={"is_enterprise_plan": True})
    assert promoted.status_code == 200, promoted.text
    assert promoted.json()["change"] == "upgrade"
    assert promoted.json()["team"]["is_enterprise_plan"] is True
    assert client.get("/teams/free-team/allowance").json()["monthly_quota"] == 1_000_000

    demoted = client.patch("/teams/free-team/plan", json={"is_enterprise_plan": False})
    assert demoted.status_code == 200, demoted.text
    assert demoted.json()["change"] == "downgrade"
    assert demoted.json()["team"]["is_enterprise_plan"] is False
    assert client.get("/teams/free-team/allowance").json()["monthly_quota"] == 25


def test_price_only_patch_keeps_enterprise_status(client: TestClient) -> None:
    create_team(client, slug="big-team", is_enterprise_plan=True)

    response = client.patch("/teams/big-team/plan", json={"stripe_price_id": PRO_MONTHLY})
    assert response.status_code == 200, response.text
    assert response.json()["change"] == "unchanged"
    assert response.json()["team"]["is_enterprise_plan"] is True
    assert response.json()["team"]["stripe_price_id"] == PRO_MONTHLY

    allowance = client.get("/teams/big-team/allowance").json()
    assert allowance["tier"] == "enterprise"
    assert allowance["monthly_quota"] == 1_000_000


def test_empty_patch_leaves_plan_untouched(client: TestClient) -> None:
    create_team(client, slug="pro-team", stripe_price_id=PRO_YEARLY)

    response = client.patch("/teams/pro-team/plan", json={})
    assert response.status_code == 200, response.text
    assert response.json()["change"] == "unchanged"
    assert response.json()["team"]["stripe_price_id"] == PRO_YEARLY
    assert response.json()["team"]["is_enterprise_plan"] is False
