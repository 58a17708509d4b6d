from datetime import date

from spendwise.aggregates import spending_insights
from spendwise.domain import Budget, InsightKind, InsightSeverity, Transaction

TODAY = date(2024, 3, 20)


def make_tx(id, amount, type="expense", category="Food & Dining", date="2024-03-05"):
    return Transaction(id=id, amount=amount, date=date, description="", type=type, category=category)


def test_no_data_no_insights():
    assert spending_insights((), (), TODAY) == []


def test_high_savings_rate():
    trans = (
        make_tx("t1", 1000, type="income", category="Salary"),
        make_tx("t2", 700),
    )
    insights = spending_insights(trans, (), TODAY)

    savings = [i for i in insights if i.kind in (InsightKind.HIGH_SAVINGS, InsightKind.LOW_SAVINGS)]
    assert len(savings) == 1
    assert savings[0].severity == InsightSeverity.SUCCESS
    assert savings[0].title == "Great Savings Rate!"
    assert "30%" in savings[0].description


def test_low_savings_rate():
    trans = (
        make_tx("t1", 1000, type="income", category="Salary"),
        make_tx("t2", 950),
    )
    insights = spending_insights(trans, (), TODAY)
    assert insights[-1].kind == InsightKind.LOW_SAVINGS
    assert insights[-1].severity == InsightSeverity.WARNING


def test_middle_savings_rate_is_silent():
    trans = (
        make_tx("t1", 1000, type="income", category="Salary"),
        make_tx("t2", 850),
    )
    kinds = [i.kind for i in spending_insights(trans, (), TODAY)]
    assert kinds == [InsightKind.TOP_CATEGORY]


def test_top_category_uses_current_month_only():
    trans = (
        make_tx("t1", 40, category="Shopping"),
        make_tx("t2", 900, category="Travel", date="2024-02-10"),
    )
    insights = spending_insights(trans, (), TODAY)

    assert len(insights) == 1
    assert insights[0].severity == InsightSeverity.INFO
    assert insights[0].description == "Shopping accounts for $40.00 of your spending this month."


def test_budget_alert_over_ninety_percent():
    trans = (make_tx("t1", 95),)
    budgets = (Budget("b1", "Food & Dining", 100, "2024-03"),)

    insights = spending_insights(trans, budgets, TODAY)

    assert insights[0].kind == InsightKind.BUDGET_ALERT
    assert insights[0].title == "Food & Dining Budget Alert"
    assert insights[0].description == "You've spent 95% of your Food & Dining budget this month."


def test_budget_at_ninety_percent_is_not_alerted():
    trans = (make_tx("t1", 90),)
    budgets = (Budget("b1", "Food & Dining", 100, "2024-03"),)
    kinds = [i.kind for i in spending_insights(trans, budgets, TODAY)]
    assert InsightKind.BUDGET_ALERT not in kinds


def test_insights_capped_at_three_in_pass_order():
    categories = ["Shopping", "Travel", "Education", "Healthcare"]
    trans = tuple(make_tx(f"t{i}", 100, category=c) for i, c in enumerate(categories))
    trans += (make_tx("inc", 10000, type="income", category="Salary"),)
    budgets = tuple(Budget(f"b{i}", c, 100, "2024-03") for i, c in enumerate(categories))

    insights = spending_insights(trans, budgets, TODAY)

    assert len(insights) == 3
    assert all(i.kind == InsightKind.BUDGET_ALERT for i in insights)


def test_insights_ignore_other_months_budgets():
    trans = (make_tx("t1", 500, date="2024-02-01"),)
    budgets = (Budget("b1", "Food & Dining", 100, "2024-02"),)
    assert spending_insights(trans, budgets, TODAY) == []
