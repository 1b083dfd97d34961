"""Integration tests for end-to-end workflows."""

from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from moneytrack.domain.account import AccountService


def test_full_workflow(run_cli, temp_db, reopen):
    """Test complete workflow: categories → account → transactions → rent schedule → reconcile."""
    # Step 1: Initialize categories
    result = run_cli("category", "init")
    assert result.exit_code == 0

    # Step 2: Create account
    result = run_cli("account", "create", "Main", "--initial-balance", "1000")
    assert result.exit_code == 0
    account_id = None
    for line in result.output.split("\n"):
        if "ID:" in line:
            # Extract account ID from output like "Created account 'Main' (ID: 1)"
            account_id = int(line.split("ID:")[1].strip().rstrip(")"))
            break
    assert account_id is not None

    # Step 3: Spend some money
    result = run_cli(
        "add", "--account", "Main", "--amount", "200", "--category", "Groceries",
        "--date", "yesterday",
    )
    assert result.exit_code == 0
    assert "New balance: $800.00" in result.output

    # Step 4: Rent that started three months ago catches up immediately
    start = date.today().replace(day=1) - relativedelta(months=3)
    result = run_cli(
        "recurring", "add", "--account", "Main", "--amount", "800", "--description", "Rent",
        "--category", "Housing", "--start-date", start.isoformat(),
    )
    assert result.exit_code == 0

    accounts = AccountService(reopen())
    assert "Generated 3 due transaction(s)" in result.output
    assert accounts.require_account(account_id).balance == Decimal("-1600")

    # Step 5: The register shows every generated occurrence
    result = run_cli("transaction", "list", "--account", "Main")
    assert result.exit_code == 0
    assert "Rent" in result.output

    # Step 6: Running the CLI again generates nothing new
    before = len(accounts.db.list_transactions(account_id=account_id))
    assert "Generated 0 transaction(s)" in run_cli("recurring", "sweep").output
    assert len(accounts.db.list_transactions(account_id=account_id)) == before

    # Step 7: Balance still matches the transaction history
    result = run_cli("account", "reconcile")
    assert result.exit_code == 0
    assert "OK" in result.output
    accounts.verify_balance(account_id)


def test_budget_and_goal_workflow(run_cli):
    """Test budgets and goals feeding the alerts view."""
    assert run_cli("category", "init").exit_code == 0
    assert run_cli("account", "create", "Main", "--initial-balance", "500").exit_code == 0
    assert run_cli("budget", "add", "Dining", "--amount", "100", "--category", "Food & Dining").exit_code == 0
    assert run_cli("goal", "add", "Laptop", "--target", "400").exit_code == 0

    result = run_cli("add", "--account", "Main", "--amount", "120", "--category", "Food & Dining")
    assert result.exit_code == 0
    result = run_cli("goal", "contribute", "1", "310")
    assert result.exit_code == 0

    result = run_cli("alerts")
    assert result.exit_code == 0
    assert "Over budget: Dining is $20.00 over" in result.output
    assert "75% complete: Laptop - $90.00 to go" in result.output

    result = run_cli("goal", "contribute", "1", "90")
    assert "Goal reached!" in result.output

    result = run_cli("alerts")
    assert "Goal achieved: Laptop" in result.output
