from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import BaseModel

from .constants import (
    DEFAULT_FRIDGE_TEMPERATURE,
    DEFAULT_REMINDER_LEAD_MINUTES,
    DEFAULT_ROOM_TEMPERATURE,
    ON_TIME_TOLERANCE_MINUTES,
)


class TrackingConfig(BaseModel):
    """Settings for live schedule tracking."""

    on_time_tolerance_minutes: int = ON_TIME_TOLERANCE_MINUTES
    default_reminder_lead_minutes: int = DEFAULT_REMINDER_LEAD_MINUTES
    max_retries: int = 0


class DefaultsConfig(BaseModel):
    """Fallback kitchen conditions used when a request file omits them."""

    room_temp_c: float = DEFAULT_ROOM_TEMPERATURE
    fridge_temp_c: float = DEFAULT_FRIDGE_TEMPERATURE


class DoughPlanConfig(BaseModel):
    """Top-level configuration model."""

    database_url: Optional[str] = None
    tracking: TrackingConfig = TrackingConfig()
    defaults: DefaultsConfig = DefaultsConfig()


def load_config(path: Optional[str] = None) -> DoughPlanConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to DOUGHPLAN_CONFIG env
            variable or 'doughplan.yaml' in the current directory.
    """

    config_path = path or os.getenv("DOUGHPLAN_CONFIG", "doughplan.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = DoughPlanConfig(**data)
    else:
        config = DoughPlanConfig()

    env_db_url = os.getenv("DOUGHPLAN_DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    return config
