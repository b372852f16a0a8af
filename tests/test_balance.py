"""Tests for the pure balance planning rules."""

from decimal import Decimal

from finance_tracker.ledger import (
    BalanceAdjustment,
    has_sufficient_funds,
    plan_expense_create,
    plan_expense_delete,
    plan_expense_update,
    plan_income_create,
    plan_income_delete,
    plan_income_update,
)


D = Decimal


class TestExpensePlans:
    """Expense create/update/delete adjustment plans."""

    def test_create_charges_linked_account(self):
        """An expense on an account is a funds-checked debit."""
        plan = plan_expense_create(D("200"), 1)
        assert plan == [BalanceAdjustment(1, D("-200"), "expense_charged", requires_funds=True)]
        assert plan[0].required_amount == D("200")

    def test_create_without_account_moves_nothing(self):
        assert plan_expense_create(D("200"), None) == []

    def test_update_unchanged_moves_nothing(self):
        """Same account and same amount means no balance writes at all."""
        assert plan_expense_update(D("50"), 1, D("50"), 1) == []

    def test_update_amount_refunds_then_charges(self):
        """Refund comes first so the charge sees the refunded balance."""
        plan = plan_expense_update(D("50"), 1, D("80"), 1)
        assert [adj.reason for adj in plan] == ["expense_refunded", "expense_charged"]
        assert [(adj.account_id, adj.delta) for adj in plan] == [(1, D("50")), (1, D("-80"))]
        assert plan[1].requires_funds is True
        assert plan[0].requires_funds is False

    def test_update_moves_between_accounts(self):
        plan = plan_expense_update(D("50"), 1, D("50"), 2)
        assert [(adj.account_id, adj.delta) for adj in plan] == [(1, D("50")), (2, D("-50"))]

    def test_update_unlink_only_refunds(self):
        plan = plan_expense_update(D("50"), 1, D("50"), None)
        assert plan == [BalanceAdjustment(1, D("50"), "expense_refunded")]

    def test_update_link_only_charges(self):
        plan = plan_expense_update(D("50"), None, D("60"), 3)
        assert plan == [BalanceAdjustment(3, D("-60"), "expense_charged", requires_funds=True)]

    def test_delete_refunds(self):
        assert plan_expense_delete(D("75.25"), 4) == [
            BalanceAdjustment(4, D("75.25"), "expense_refunded")
        ]
        assert plan_expense_delete(D("75.25"), None) == []


class TestIncomePlans:
    """Income plans mirror expenses with the sign inverted and no funds checks."""

    def test_create_deposits(self):
        assert plan_income_create(D("300"), 1) == [BalanceAdjustment(1, D("300"), "income_deposited")]
        assert plan_income_create(D("300"), None) == []

    def test_update_same_account_applies_signed_delta(self):
        """A correction is a single write of new minus old."""
        plan = plan_income_update(D("300"), 1, D("250"), 1)
        assert plan == [BalanceAdjustment(1, D("-50"), "income_corrected")]

    def test_update_unchanged_moves_nothing(self):
        assert plan_income_update(D("300"), 1, D("300"), 1) == []
        assert plan_income_update(D("300"), None, D("500"), None) == []

    def test_update_moves_between_accounts(self):
        plan = plan_income_update(D("300"), 1, D("400"), 2)
        assert plan == [
            BalanceAdjustment(1, D("-300"), "income_reversed"),
            BalanceAdjustment(2, D("400"), "income_deposited"),
        ]

    def test_no_income_adjustment_requires_funds(self):
        """Reversing an income may take a balance negative."""
        plans = (
            plan_income_update(D("300"), 1, D("400"), 2)
            + plan_income_update(D("300"), 1, D("100"), 1)
            + plan_income_delete(D("300"), 1)
        )
        assert not any(adj.requires_funds for adj in plans)

    def test_delete_reverses(self):
        assert plan_income_delete(D("300"), 1) == [BalanceAdjustment(1, D("-300"), "income_reversed")]


class TestFundsCheck:
    """Tests for the insufficient-funds rule."""

    def test_exact_balance_is_sufficient(self):
        assert has_sufficient_funds(D("200.00"), D("200"))

    def test_short_balance_is_insufficient(self):
        assert not has_sufficient_funds(D("199.99"), D("200"))

    def test_negative_balance_is_insufficient(self):
        assert not has_sufficient_funds(D("-10"), D("0.01"))
