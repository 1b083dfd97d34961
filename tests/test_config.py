"""Tests for settings loading."""

from decimal import Decimal

import pytest

from moneytrack.config import Settings, load_settings
from moneytrack.domain.errors import ValidationError


def test_defaults():
    settings = load_settings({})

    assert settings == Settings()
    assert settings.db_path is None
    assert settings.log_level == "WARNING"
    assert settings.budget_alert_threshold == Decimal("80")
    assert settings.goal_pace_buffer == Decimal("10")
    assert settings.upcoming_days == 30


def test_values_from_environment():
    settings = load_settings(
        {
            "MONEYTRACK_DB_PATH": "/tmp/money.db",
            "MONEYTRACK_LOG_LEVEL": "debug",
            "MONEYTRACK_BUDGET_ALERT_THRESHOLD": "90",
            "MONEYTRACK_GOAL_PACE_BUFFER": "5.5",
            "MONEYTRACK_UPCOMING_DAYS": "14",
        }
    )

    assert settings.db_path == "/tmp/money.db"
    assert settings.log_level == "DEBUG"
    assert settings.budget_alert_threshold == Decimal("90")
    assert settings.goal_pace_buffer == Decimal("5.5")
    assert settings.upcoming_days == 14


def test_blank_values_fall_back_to_defaults():
    settings = load_settings({"MONEYTRACK_GOAL_PACE_BUFFER": "  ", "MONEYTRACK_DB_PATH": ""})

    assert settings.goal_pace_buffer == Decimal("10")
    assert settings.db_path is None


@pytest.mark.parametrize(
    "name,value",
    [
        ("MONEYTRACK_BUDGET_ALERT_THRESHOLD", "lots"),
        ("MONEYTRACK_GOAL_PACE_BUFFER", "-1"),
        ("MONEYTRACK_UPCOMING_DAYS", "soon"),
    ],
)
def test_invalid_values(name, value):
    with pytest.raises(ValidationError) as exc_info:
        load_settings({name: value})
    assert name in str(exc_info.value)


def test_environment_threshold_reaches_new_budgets(run_cli, budget_service, owner_id, monkeypatch):
    monkeypatch.setenv("MONEYTRACK_BUDGET_ALERT_THRESHOLD", "65")

    assert run_cli("budget", "add", "Fun", "--amount", "100").exit_code == 0

    [budget] = budget_service.list_budgets(owner_id)
    assert budget.alert_threshold == Decimal("65")


def test_invalid_environment_is_reported(run_cli, monkeypatch):
    monkeypatch.setenv("MONEYTRACK_UPCOMING_DAYS", "soon")

    result = run_cli("account", "list")

    assert result.exit_code == 1
    assert "MONEYTRACK_UPCOMING_DAYS" in result.output
