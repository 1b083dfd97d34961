"""Application state: one storage handle, one owner, the services built on them."""

from datetime import datetime
from typing import Optional

import structlog

from moneytrack.config import Settings, load_settings
from moneytrack.database.base import Database
from moneytrack.database.factories import create_sqlite_database
from moneytrack.domain import (
    AccountService,
    BudgetService,
    CategoryService,
    GoalService,
    RecurrenceService,
    TransactionService,
)
from moneytrack.domain.alerts import collect_alerts
from moneytrack.domain.entities import Alert

logger = structlog.get_logger(__name__)


class AppContext:
    """Explicit application state passed to every command.

    Attributes:
        db: Storage collaborator
        owner_id: The signed-in user all operations act for
        settings: Runtime settings
    """

    def __init__(self, db: Database, owner_id: str, settings: Optional[Settings] = None):
        self.db = db
        self.owner_id = owner_id
        self.settings = settings or Settings()
        self._swept = False

        self.accounts = AccountService(db)
        self.categories = CategoryService(db)
        self.transactions = TransactionService(db)
        self.recurring = RecurrenceService(db)
        self.budgets = BudgetService(db, default_alert_threshold=self.settings.budget_alert_threshold)
        self.goals = GoalService(db, pace_buffer=self.settings.goal_pace_buffer)

    @classmethod
    def open(
        cls, owner_id: str, db_path: Optional[str] = None, settings: Optional[Settings] = None
    ) -> "AppContext":
        """Open the SQLite database and build a context for ``owner_id``."""
        settings = settings or load_settings()
        db = create_sqlite_database(database_path=db_path or settings.db_path)
        db.connect()
        db.initialize_schema()
        return cls(db, owner_id, settings)

    def sweep_once(self, now: Optional[datetime] = None) -> int:
        """Run the recurring sweep at most once per context.

        Returns:
            Number of transactions generated (0 if the sweep already ran)
        """
        if self._swept:
            return 0
        self._swept = True
        return self.recurring.sweep_recurring(self.owner_id, now or datetime.now())

    def alerts(self, now: Optional[datetime] = None) -> list[Alert]:
        """Current budget and goal alerts, highest priority first."""
        now = now or datetime.now()
        return collect_alerts(
            self.budgets.list_progress(self.owner_id, now),
            self.goals.list_progress(self.owner_id, now),
            now,
        )

    def close(self) -> None:
        self.db.disconnect()
        logger.debug("context_closed", owner_id=self.owner_id)
