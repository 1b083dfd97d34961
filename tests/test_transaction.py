"""Tests for transactions: service behavior and commands."""

from datetime import date
from decimal import Decimal

import pytest

from moneytrack.domain.errors import InvalidAmountError, NotFoundError, ValidationError


def test_create_expense_lowers_balance(transaction_service, account_service, funded_account, owner_id):
    txn = transaction_service.create_transaction(
        owner_id, funded_account.id, "expense", "200", date(2024, 1, 10), description="Groceries"
    )

    assert txn.amount == Decimal("200")
    assert txn.transaction_type.value == "expense"
    assert txn.is_cleared
    assert account_service.require_account(funded_account.id).balance == Decimal("800")


def test_create_income_raises_balance(transaction_service, account_service, funded_account, owner_id):
    transaction_service.create_transaction(
        owner_id, funded_account.id, "income", Decimal("99.99"), date(2024, 1, 10)
    )
    assert account_service.require_account(funded_account.id).balance == Decimal("1099.99")


@pytest.mark.parametrize("amount", ["0", "-10", "abc", None])
def test_create_rejects_bad_amount(transaction_service, account_service, funded_account, owner_id, amount):
    with pytest.raises(InvalidAmountError):
        transaction_service.create_transaction(
            owner_id, funded_account.id, "expense", amount, date(2024, 1, 10)
        )

    assert transaction_service.list_transactions(owner_id) == []
    assert account_service.require_account(funded_account.id).balance == Decimal("1000")


def test_create_rejects_unknown_type(transaction_service, funded_account, owner_id):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            owner_id, funded_account.id, "refund", "10", date(2024, 1, 10)
        )


def test_create_rejects_foreign_account(transaction_service, funded_account):
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            "bob", funded_account.id, "expense", "10", date(2024, 1, 10)
        )


def test_create_rejects_unknown_category(transaction_service, funded_account, owner_id):
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            owner_id, funded_account.id, "expense", "10", date(2024, 1, 10), category_id=999
        )


def test_create_with_category(transaction_service, funded_account, owner_id, sample_categories):
    groceries = sample_categories[("expense", "Groceries")]

    txn = transaction_service.create_transaction(
        owner_id, funded_account.id, "expense", "42.50", date(2024, 1, 10), category_id=groceries
    )

    assert txn.category_id == groceries
    assert transaction_service.list_transactions(owner_id, category_id=groceries) == [txn]


def test_edit_expense_to_income(transaction_service, account_service, sample_account, owner_id):
    """Balance 0, expense 50 gives -50; editing it to income 30 gives +30."""
    txn = transaction_service.create_transaction(
        owner_id, sample_account.id, "expense", "50", date(2024, 1, 10)
    )
    assert account_service.require_account(sample_account.id).balance == Decimal("-50")

    updated = transaction_service.update_transaction(txn.id, transaction_type="income", amount="30")

    assert updated.transaction_type.value == "income"
    assert updated.amount == Decimal("30")
    assert account_service.require_account(sample_account.id).balance == Decimal("30")


def test_edit_non_monetary_fields_keeps_balance(
    transaction_service, account_service, funded_account, owner_id, sample_categories
):
    txn = transaction_service.create_transaction(
        owner_id,
        funded_account.id,
        "expense",
        "50",
        date(2024, 1, 10),
        category_id=sample_categories[("expense", "Gas")],
    )

    updated = transaction_service.update_transaction(
        txn.id, description="Fuel", notes="road trip", is_cleared=False, clear_category=True
    )

    assert updated.description == "Fuel"
    assert updated.notes == "road trip"
    assert not updated.is_cleared
    assert updated.category_id is None
    assert account_service.require_account(funded_account.id).balance == Decimal("950")


def test_edit_with_invalid_amount_changes_nothing(transaction_service, account_service, funded_account, owner_id):
    txn = transaction_service.create_transaction(
        owner_id, funded_account.id, "expense", "50", date(2024, 1, 10)
    )

    with pytest.raises(InvalidAmountError):
        transaction_service.update_transaction(txn.id, amount="-5")

    assert transaction_service.get_transaction(txn.id).amount == Decimal("50")
    assert account_service.require_account(funded_account.id).balance == Decimal("950")


def test_edit_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(12345, amount="5")


def test_delete_restores_balance(transaction_service, account_service, funded_account, owner_id):
    txn = transaction_service.create_transaction(
        owner_id, funded_account.id, "transfer_out", "300", date(2024, 1, 10)
    )
    assert account_service.require_account(funded_account.id).balance == Decimal("700")

    transaction_service.delete_transaction(txn.id)

    assert transaction_service.get_transaction(txn.id) is None
    assert account_service.require_account(funded_account.id).balance == Decimal("1000")


def test_delete_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(12345)


def test_list_filters_by_date_range(transaction_service, funded_account, owner_id):
    for day in (date(2024, 1, 1), date(2024, 1, 15), date(2024, 2, 1)):
        transaction_service.create_transaction(owner_id, funded_account.id, "expense", "1", day)

    january = transaction_service.list_transactions(
        owner_id, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
    )

    assert [t.date for t in january] == [date(2024, 1, 15), date(2024, 1, 1)]


def test_register_running_balances(transaction_service, funded_account, owner_id):
    transaction_service.create_transaction(owner_id, funded_account.id, "expense", "200", date(2024, 1, 5))
    transaction_service.create_transaction(owner_id, funded_account.id, "income", "50", date(2024, 1, 1))

    entries = transaction_service.get_register(funded_account.id)

    assert [e.transaction.date for e in entries] == [date(2024, 1, 5), date(2024, 1, 1)]
    assert [e.running_balance for e in entries] == [Decimal("850"), Decimal("1050")]


def test_add_command(run_cli, account_service, funded_account):
    result = run_cli(
        "add", "--account", "Main", "--amount", "$42.50", "--date", "2024-01-15",
        "--description", "Lunch",
    )

    assert result.exit_code == 0
    assert "Created transaction" in result.output
    assert "New balance: $957.50" in result.output
    assert account_service.require_account(funded_account.id).balance == Decimal("957.50")


def test_add_command_with_category(run_cli, transaction_service, funded_account, sample_categories, owner_id):
    result = run_cli(
        "add", "--account", str(funded_account.id), "--type", "income", "--amount", "2500",
        "--category", "Salary",
    )

    assert result.exit_code == 0
    [txn] = transaction_service.list_transactions(owner_id)
    assert txn.category_id == sample_categories[("income", "Salary")]
    assert txn.date == date.today()


def test_add_command_rejects_negative_amount(run_cli, transaction_service, funded_account, owner_id):
    result = run_cli("add", "--account", "Main", "--amount", "-5")

    assert result.exit_code == 1
    assert "must be positive" in result.output
    assert transaction_service.list_transactions(owner_id) == []


def test_add_command_unknown_account(run_cli):
    result = run_cli("add", "--account", "Nope", "--amount", "5")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_transaction_list_command_with_register(run_cli, transaction_service, funded_account, owner_id):
    transaction_service.create_transaction(
        owner_id, funded_account.id, "expense", "200", date(2024, 1, 5), description="Rent"
    )

    result = run_cli("transaction", "list", "--account", "Main")

    assert result.exit_code == 0
    assert "Found 1 transaction(s)" in result.output
    assert "Rent" in result.output
    assert "$800.00" in result.output


def test_transaction_list_rejects_two_periods(run_cli):
    result = run_cli("transaction", "list", "--this-month", "--last-month")

    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_transaction_update_command(run_cli, transaction_service, account_service, sample_account, owner_id):
    txn = transaction_service.create_transaction(
        owner_id, sample_account.id, "expense", "50", date(2024, 1, 10)
    )

    result = run_cli("transaction", "update", str(txn.id), "--type", "income", "--amount", "30")

    assert result.exit_code == 0
    assert "New balance of 'Checking': $30.00" in result.output
    assert account_service.require_account(sample_account.id).balance == Decimal("30")


def test_transaction_update_foreign_transaction(run_cli, transaction_service, account_service):
    bobs = account_service.create_account("bob", "Bob's")
    txn = transaction_service.create_transaction("bob", bobs.id, "expense", "5", date(2024, 1, 1))

    result = run_cli("transaction", "update", str(txn.id), "--amount", "6")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_transaction_delete_command(run_cli, transaction_service, account_service, funded_account, owner_id):
    txn = transaction_service.create_transaction(
        owner_id, funded_account.id, "expense", "100", date(2024, 1, 10)
    )

    result = run_cli("transaction", "delete", str(txn.id), "--yes")

    assert result.exit_code == 0
    assert f"Deleted transaction {txn.id}" in result.output
    assert account_service.require_account(funded_account.id).balance == Decimal("1000")
