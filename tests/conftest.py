"""Shared pytest fixtures for moneytrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest
import structlog

from moneytrack.app import AppContext
from moneytrack.config import Settings
from moneytrack.database.factories import create_sqlite_database
from moneytrack.domain.account import AccountService
from moneytrack.domain.budget import BudgetService
from moneytrack.domain.category import CategoryService
from moneytrack.domain.goal import GoalService
from moneytrack.domain.recurrence import RecurrenceService
from moneytrack.domain.transaction import TransactionService

OWNER = "alice"


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any logging configuration a CLI invocation installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def owner_id():
    return OWNER


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def recurrence_service(temp_db):
    """Create a RecurrenceService with a temporary database."""
    return RecurrenceService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db)


@pytest.fixture
def goal_service(temp_db):
    """Create a GoalService with a temporary database."""
    return GoalService(temp_db)


@pytest.fixture
def app(temp_db):
    """Application context over the temporary database."""
    return AppContext(temp_db, OWNER, Settings(db_path=temp_db.database_path))


@pytest.fixture
def sample_account(account_service):
    """Create a checking account with a zero opening balance."""
    return account_service.create_account(owner_id=OWNER, name="Checking")


@pytest.fixture
def funded_account(account_service):
    """Create an account opened with 1000."""
    return account_service.create_account(
        owner_id=OWNER, name="Main", initial_balance=Decimal("1000")
    )


@pytest.fixture
def sample_categories(category_service):
    """Seed the default categories and return them keyed by (type, name)."""
    category_service.seed_defaults(OWNER)
    return {
        (cat.category_type.value, cat.name): cat.id
        for cat in category_service.list_categories(OWNER)
    }


@pytest.fixture
def add_expense(transaction_service, sample_account):
    """Factory adding an expense on the sample account."""

    def _add(amount, day=date(2024, 1, 15), **kwargs):
        return transaction_service.create_transaction(
            owner_id=OWNER,
            account_id=kwargs.pop("account_id", sample_account.id),
            transaction_type=kwargs.pop("transaction_type", "expense"),
            amount=amount,
            date=day,
            **kwargs,
        )

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def reopen(temp_db):
    """Open a second handle on the temporary database, as another process would."""
    handles = []

    def _reopen():
        db = create_sqlite_database(database_path=temp_db.database_path)
        db.connect()
        handles.append(db)
        return db

    yield _reopen

    for db in handles:
        db.disconnect()


@pytest.fixture
def run_cli(cli_runner, temp_db):
    """Invoke the CLI against the temporary database as the test owner."""
    from moneytrack.cli.main import cli

    def _run(*args, input=None):
        return cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "--owner", OWNER, *args],
            input=input,
        )

    return _run
