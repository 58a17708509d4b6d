from collections import defaultdict
from datetime import date
from functools import reduce
from typing import Iterable, Optional, Sequence

from spendwise.domain import (
    CATEGORY_COLORS,
    EXPENSE,
    INCOME,
    Budget,
    BudgetComparison,
    CategoryExpense,
    InsightKind,
    InsightSeverity,
    MonthlyExpense,
    SpendingInsight,
    Transaction,
)
from spendwise.formatting import format_currency, format_month, format_month_long

MAX_MONTHS = 12
MAX_INSIGHTS = 3
BUDGET_ALERT_PERCENT = 90
HIGH_SAVINGS_PERCENT = 20
LOW_SAVINGS_PERCENT = 10
DEFAULT_CATEGORY = "Other"


def current_month(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{today.year}-{today.month:02d}"


def month_options(today: Optional[date] = None, before: int = 6, after: int = 6) -> list[tuple[str, str]]:
    """(value, label) pairs for the months around ``today``, oldest first."""
    today = today or date.today()
    options = []
    for offset in range(-before, after + 1):
        idx = today.year * 12 + (today.month - 1) + offset
        key = f"{idx // 12}-{idx % 12 + 1:02d}"
        options.append((key, format_month_long(key)))
    return options


def expense_transactions(trans: Iterable[Transaction]) -> tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == EXPENSE, trans))


def income_transactions(trans: Iterable[Transaction]) -> tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.type == INCOME, trans))


def transactions_in_month(trans: Iterable[Transaction], month: str) -> tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.month == month, trans))


def total_income(trans: Iterable[Transaction]) -> float:
    return reduce(lambda acc, t: acc + t.amount, income_transactions(trans), 0)


def total_expenses(trans: Iterable[Transaction]) -> float:
    return reduce(lambda acc, t: acc + t.amount, expense_transactions(trans), 0)


def balance(trans: Sequence[Transaction]) -> float:
    return total_income(trans) - total_expenses(trans)


def _category(t: Transaction) -> str:
    return t.category or DEFAULT_CATEGORY


def monthly_expenses(trans: Iterable[Transaction]) -> list[MonthlyExpense]:
    """Expense totals per calendar month, oldest first, last 12 months only."""
    amounts: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)

    for t in expense_transactions(trans):
        amounts[t.month] += t.amount
        counts[t.month] += 1

    # "YYYY-MM" keys sort chronologically
    keys = sorted(amounts)[-MAX_MONTHS:]
    return [
        MonthlyExpense(month=format_month(k), key=k, amount=amounts[k], count=counts[k])
        for k in keys
    ]


def category_expenses(trans: Iterable[Transaction]) -> list[CategoryExpense]:
    """Expense totals per category, largest first.

    Colours are assigned by rank, so a category may change colour when the
    ranking changes.
    """
    amounts: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)

    for t in expense_transactions(trans):
        amounts[_category(t)] += t.amount
        counts[_category(t)] += 1

    ordered = sorted(amounts.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryExpense(
            category=name,
            amount=total,
            count=counts[name],
            color=CATEGORY_COLORS[rank % len(CATEGORY_COLORS)],
        )
        for rank, (name, total) in enumerate(ordered)
    ]


def budget_comparisons(
    trans: Iterable[Transaction], budgets: Iterable[Budget], month: str
) -> list[BudgetComparison]:
    """Budget vs actual spend for ``month``, most consumed budget first.

    Only budgeted categories are reported; spend in a category without a
    budget for the month is left out.
    """
    spent: dict[str, float] = defaultdict(float)
    for t in expense_transactions(transactions_in_month(trans, month)):
        spent[_category(t)] += t.amount

    rows = []
    for b in budgets:
        if b.month != month:
            continue
        actual = spent.get(b.category, 0)
        percentage = (actual / b.amount) * 100 if b.amount > 0 else 0
        rows.append((b, actual, percentage))

    rows.sort(key=lambda row: row[2], reverse=True)
    return [
        BudgetComparison(
            category=b.category,
            budgeted=b.amount,
            actual=actual,
            remaining=b.amount - actual,
            percentage=percentage,
            color=CATEGORY_COLORS[rank % len(CATEGORY_COLORS)],
            budget_id=b.id,
        )
        for rank, (b, actual, percentage) in enumerate(rows)
    ]


def _budget_alerts(comparisons: Sequence[BudgetComparison]) -> list[SpendingInsight]:
    return [
        SpendingInsight(
            severity=InsightSeverity.WARNING,
            kind=InsightKind.BUDGET_ALERT,
            title=f"{c.category} Budget Alert",
            description=f"You've spent {c.percentage:.0f}% of your {c.category} budget this month.",
        )
        for c in comparisons
        if c.percentage > BUDGET_ALERT_PERCENT
    ]


def _top_category(month_trans: Sequence[Transaction]) -> list[SpendingInsight]:
    categories = category_expenses(month_trans)
    if not categories:
        return []
    top = categories[0]
    return [
        SpendingInsight(
            severity=InsightSeverity.INFO,
            kind=InsightKind.TOP_CATEGORY,
            title="Top Spending Category",
            description=f"{top.category} accounts for {format_currency(top.amount)} of your spending this month.",
        )
    ]


def _savings_rate(month_trans: Sequence[Transaction]) -> list[SpendingInsight]:
    income = total_income(month_trans)
    expenses = total_expenses(month_trans)
    if income <= 0 or expenses <= 0:
        return []

    rate = (income - expenses) / income * 100
    if rate > HIGH_SAVINGS_PERCENT:
        return [
            SpendingInsight(
                severity=InsightSeverity.SUCCESS,
                kind=InsightKind.HIGH_SAVINGS,
                title="Great Savings Rate!",
                description=f"You're saving {rate:.0f}% of your income this month. Keep it up!",
            )
        ]
    if rate < LOW_SAVINGS_PERCENT:
        return [
            SpendingInsight(
                severity=InsightSeverity.WARNING,
                kind=InsightKind.LOW_SAVINGS,
                title="Low Savings Rate",
                description=f"Consider reducing expenses to increase your savings rate from {rate:.0f}%.",
            )
        ]
    return []


def spending_insights(
    trans: Sequence[Transaction], budgets: Sequence[Budget], today: Optional[date] = None
) -> list[SpendingInsight]:
    """Up to three heuristic observations about the current month.

    Passes run in a fixed order (budget alerts, top category, savings rate)
    and the result is cut to the first three, so many budget alerts can
    crowd out the later passes.
    """
    month = current_month(today)
    month_trans = transactions_in_month(trans, month)

    insights: list[SpendingInsight] = []
    insights += _budget_alerts(budget_comparisons(trans, budgets, month))
    insights += _top_category(expense_transactions(month_trans))
    insights += _savings_rate(month_trans)
    return insights[:MAX_INSIGHTS]
