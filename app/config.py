"""Process-wide settings read from the environment."""

from __future__ import annotations

import os

from .catalog import Environment


def resolve_environment(value: str | None) -> Environment:
    if value and value.strip().lower() == "production":
        return "production"
    return "test"


DEPLOYMENT_ENV: Environment = resolve_environment(os.getenv("DEPLOYMENT_ENV"))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/app.db")
