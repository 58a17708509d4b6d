import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from spendwise import aggregates
from spendwise.domain import Budget, Transaction
from spendwise.events import (
    BUDGET_ADDED,
    BUDGET_DELETED,
    BUDGET_EVENTS,
    BUDGET_UPDATED,
    TRANSACTION_ADDED,
    TRANSACTION_DELETED,
    TRANSACTION_EVENTS,
    TRANSACTION_UPDATED,
    Event,
    EventBus,
)
from spendwise.storage import BUDGETS, TRANSACTIONS, LocalStore
from spendwise.transforms import add_record, delete_record, replace_record

logger = logging.getLogger(__name__)


class Ledger:
    """Owns the in-memory transaction and budget lists.

    Lists are immutable tuples; every mutation swaps in a new tuple and
    publishes an event. The ledger subscribes its own persistence handlers,
    so each mutation re-saves the full list for that slot.
    """

    def __init__(self, store: LocalStore, bus: Optional[EventBus] = None):
        self.store = store
        self.bus = bus or EventBus()
        self.transactions: Tuple[Transaction, ...] = ()
        self.budgets: Tuple[Budget, ...] = ()

        for name in TRANSACTION_EVENTS:
            self.bus.subscribe(name, self._persist_transactions)
        for name in BUDGET_EVENTS:
            self.bus.subscribe(name, self._persist_budgets)

    def load(self) -> "Ledger":
        self.transactions = self.store.load_transactions()
        self.budgets = self.store.load_budgets()
        logger.info(
            "Ledger loaded",
            extra={"transactions": len(self.transactions), "budgets": len(self.budgets)},
        )
        return self

    def _persist_transactions(self, event: Event, payload: dict) -> dict:
        self.store.save_transactions(self.transactions)
        return {"saved": TRANSACTIONS, "records": len(self.transactions)}

    def _persist_budgets(self, event: Event, payload: dict) -> dict:
        self.store.save_budgets(self.budgets)
        return {"saved": BUDGETS, "records": len(self.budgets)}

    def _has(self, records: Sequence, record_id: str) -> bool:
        return any(r.id == record_id for r in records)

    def add_transaction(self, t: Transaction) -> list[dict]:
        self.transactions = add_record(self.transactions, t)
        return self.bus.publish(TRANSACTION_ADDED, {"id": t.id})

    def edit_transaction(self, t: Transaction) -> list[dict]:
        if not self._has(self.transactions, t.id):
            logger.warning("Edit of unknown transaction", extra={"id": t.id})
        self.transactions = replace_record(self.transactions, t)
        return self.bus.publish(TRANSACTION_UPDATED, {"id": t.id})

    def delete_transaction(self, tx_id: str) -> list[dict]:
        if not self._has(self.transactions, tx_id):
            logger.warning("Delete of unknown transaction", extra={"id": tx_id})
        self.transactions = delete_record(self.transactions, tx_id)
        return self.bus.publish(TRANSACTION_DELETED, {"id": tx_id})

    def add_budget(self, b: Budget) -> list[dict]:
        self.budgets = add_record(self.budgets, b)
        return self.bus.publish(BUDGET_ADDED, {"id": b.id})

    def edit_budget(self, b: Budget) -> list[dict]:
        if not self._has(self.budgets, b.id):
            logger.warning("Edit of unknown budget", extra={"id": b.id})
        self.budgets = replace_record(self.budgets, b)
        return self.bus.publish(BUDGET_UPDATED, {"id": b.id})

    def delete_budget(self, budget_id: str) -> list[dict]:
        if not self._has(self.budgets, budget_id):
            logger.warning("Delete of unknown budget", extra={"id": budget_id})
        self.budgets = delete_record(self.budgets, budget_id)
        return self.bus.publish(BUDGET_DELETED, {"id": budget_id})


View = Callable[..., Dict[str, Any]]


def totals_view(transactions, budgets, month, today):
    return {
        "total_income": aggregates.total_income(transactions),
        "total_expenses": aggregates.total_expenses(transactions),
        "balance": aggregates.balance(transactions),
        "transaction_count": len(transactions),
    }


def charts_view(transactions, budgets, month, today):
    return {
        "monthly": aggregates.monthly_expenses(transactions),
        "categories": aggregates.category_expenses(transactions),
    }


def budgets_view(transactions, budgets, month, today):
    return {
        "comparisons": aggregates.budget_comparisons(transactions, budgets, month),
        "budgeted_categories": [b.category for b in budgets if b.month == month],
    }


def insights_view(transactions, budgets, month, today):
    return {"insights": aggregates.spending_insights(transactions, budgets, today)}


DEFAULT_VIEWS: Tuple[View, ...] = (totals_view, charts_view, budgets_view, insights_view)


class DashboardService:
    """Runs a sequence of view functions and merges their outputs.

    Every call recomputes from the given lists; nothing is cached.
    """

    def __init__(self, views: Sequence[View] = DEFAULT_VIEWS):
        self.views = views

    def build(
        self,
        transactions: Sequence[Transaction],
        budgets: Sequence[Budget],
        month: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        month = month or aggregates.current_month(today)
        result: Dict[str, Any] = {"month": month}
        for view in self.views:
            result.update(view(transactions, budgets, month, today))
        return result
