"""Runtime configuration read from MONEYTRACK_* environment variables."""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from moneytrack.domain.budget import DEFAULT_ALERT_THRESHOLD as DEFAULT_BUDGET_ALERT_THRESHOLD
from moneytrack.domain.errors import ValidationError
from moneytrack.domain.goal import DEFAULT_PACE_BUFFER as DEFAULT_GOAL_PACE_BUFFER

DEFAULT_UPCOMING_DAYS = 30
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Engine settings.

    Attributes:
        db_path: SQLite database path, or None for the default location
        log_level: Minimum level for structured log output
        budget_alert_threshold: Percent of a budget at which new budgets alert
        goal_pace_buffer: Percentage points a goal may lag behind its pace
            and still count as on track
        upcoming_days: Horizon for listing upcoming recurring transactions
    """

    db_path: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL
    budget_alert_threshold: Decimal = DEFAULT_BUDGET_ALERT_THRESHOLD
    goal_pace_buffer: Decimal = DEFAULT_GOAL_PACE_BUFFER
    upcoming_days: int = DEFAULT_UPCOMING_DAYS


def _decimal_setting(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        raise ValidationError(f"{name} must be a number, got '{raw}'")
    if not value.is_finite() or value < 0:
        raise ValidationError(f"{name} must be a non-negative number, got '{raw}'")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from the environment.

    Args:
        env: Mapping to read from; defaults to ``os.environ``

    Raises:
        ValidationError: If a numeric variable cannot be parsed
    """
    if env is None:
        env = os.environ

    upcoming_raw = env.get("MONEYTRACK_UPCOMING_DAYS")
    upcoming_days = DEFAULT_UPCOMING_DAYS
    if upcoming_raw:
        try:
            upcoming_days = int(upcoming_raw)
        except ValueError:
            raise ValidationError(
                f"MONEYTRACK_UPCOMING_DAYS must be an integer, got '{upcoming_raw}'"
            )

    return Settings(
        db_path=env.get("MONEYTRACK_DB_PATH") or None,
        log_level=(env.get("MONEYTRACK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        budget_alert_threshold=_decimal_setting(
            env, "MONEYTRACK_BUDGET_ALERT_THRESHOLD", DEFAULT_BUDGET_ALERT_THRESHOLD
        ),
        goal_pace_buffer=_decimal_setting(
            env, "MONEYTRACK_GOAL_PACE_BUFFER", DEFAULT_GOAL_PACE_BUFFER
        ),
        upcoming_days=upcoming_days,
    )
