"""Pricing tiers and plan allowance definitions."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final, Literal

from .catalog import Price, PricedOffering, TierDetails, TierKey

PricedModel = Literal["gpt-4", "gpt-3.5-turbo", "byo"]

MODEL_LABELS: Final[dict[PricedModel, str]] = {
    "gpt-4": "GPT-4",
    "gpt-3.5-turbo": "Chat",
    "byo": "BYO",
}

# Ordered from lowest to highest value.
TIERS: Final[Mapping[TierKey, TierDetails]] = MappingProxyType({
    "hobby": TierDetails(
        name="Hobby",
        description="For personal and non-commercial projects",
        items=(
            "Unlimited documents",
            "Unlimited BYO* completions",
            "25 GPT-4 completions",
            "100 website pages per project",
            "Public/private GitHub repos",
        ),
        notes=("* BYO: Bring-your-own API key",),
        prices=(
            PricedOffering(
                name="Free",
                quota=25,
                num_website_pages_per_project=100,
            ),
        ),
    ),
    "pro": TierDetails(
        name="Pro",
        description="For production",
        items=(
            "Everything in Hobby, plus:",
            "Prompt templates",
            "Model customization",
            "1000 GPT-4 completions",
            "1000 website pages per project",
            "Analytics (soon)",
        ),
        prices=(
            PricedOffering(
                name="Pro",
                quota=1000,
                num_website_pages_per_project=1000,
                monthly=Price(
                    amount=120,
                    price_ids={
                        "test": "price_1N0TzLCv3sM26vDeQ7VxLKWP",
                        "production": "price_1N0U0ICv3sM26vDes1KHwQ4y",
                    },
                ),
                yearly=Price(
                    amount=100,
                    price_ids={
                        "test": "price_1N0TzLCv3sM26vDeIwhDValY",
                        "production": "price_1N0U0ICv3sM26vDebBlSdU2k",
                    },
                ),
            ),
        ),
    ),
    "enterprise": TierDetails(
        name="Enterprise",
        enterprise=True,
        description="For projects at scale",
        items=(
            "Everything in Pro, plus:",
            "Teams",
            "Integrations",
            "Unbranded prompts",
            "Unlimited completions",
            "Dedicated support",
            "White glove onboarding",
            "Insights (soon)",
        ),
        prices=(
            PricedOffering(
                name="Enterprise",
                quota=-1,
                num_website_pages_per_project=-1,
            ),
        ),
    ),
})

UNLIMITED: Final[int] = -1
MAX_ALLOWANCE_FOR_ENTERPRISE: Final[int] = 1_000_000
