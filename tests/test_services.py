from datetime import date

from spendwise.domain import Budget, Transaction
from spendwise.events import TRANSACTION_ADDED, BUDGET_DELETED, Event, EventBus
from spendwise.services import DashboardService, Ledger
from spendwise.storage import LocalStore


def make_tx(id, amount, type="expense", category="Food & Dining", date="2024-03-05"):
    return Transaction(id=id, amount=amount, date=date, description="", type=type, category=category)


def test_ledger_add_persists_immediately(tmp_path):
    store = LocalStore(tmp_path)
    ledger = Ledger(store).load()

    results = ledger.add_transaction(make_tx("t1", 10))

    assert results == [{"saved": "transactions", "records": 1}]
    assert store.load_transactions() == (make_tx("t1", 10),)


def test_ledger_edit_replaces_by_id(tmp_path):
    store = LocalStore(tmp_path)
    ledger = Ledger(store)
    ledger.add_transaction(make_tx("t1", 10))
    ledger.add_transaction(make_tx("t2", 20))

    ledger.edit_transaction(make_tx("t1", 99))

    assert [t.amount for t in ledger.transactions] == [99, 20]
    assert store.load_transactions() == ledger.transactions


def test_ledger_delete(tmp_path):
    store = LocalStore(tmp_path)
    ledger = Ledger(store)
    ledger.add_transaction(make_tx("t1", 10))
    ledger.add_transaction(make_tx("t2", 20))

    ledger.delete_transaction("t1")

    assert [t.id for t in ledger.transactions] == ["t2"]
    assert [t.id for t in Ledger(store).load().transactions] == ["t2"]


def test_ledger_unknown_id_leaves_list_unchanged(tmp_path):
    ledger = Ledger(LocalStore(tmp_path))
    ledger.add_transaction(make_tx("t1", 10))
    before = ledger.transactions

    ledger.edit_transaction(make_tx("missing", 5))
    ledger.delete_transaction("missing")

    assert ledger.transactions == before


def test_ledger_budgets_roundtrip(tmp_path):
    store = LocalStore(tmp_path)
    ledger = Ledger(store)
    ledger.add_budget(Budget("b1", "Travel", 100, "2024-03"))
    ledger.edit_budget(Budget("b1", "Travel", 250, "2024-03"))

    reloaded = Ledger(store).load()
    assert reloaded.budgets == (Budget("b1", "Travel", 250, "2024-03"),)

    ledger.delete_budget("b1")
    assert store.load_budgets() == ()


def test_ledger_mutations_leave_old_tuples_untouched(tmp_path):
    ledger = Ledger(LocalStore(tmp_path))
    ledger.add_transaction(make_tx("t1", 10))
    snapshot = ledger.transactions

    ledger.add_transaction(make_tx("t2", 20))

    assert len(snapshot) == 1
    assert snapshot is not ledger.transactions


def test_ledger_publishes_on_shared_bus(tmp_path):
    bus = EventBus()
    seen = []

    def audit(event: Event, payload: dict) -> dict:
        seen.append((event.name, payload["id"]))
        return {}

    bus.subscribe(TRANSACTION_ADDED, audit)
    bus.subscribe(BUDGET_DELETED, audit)
    ledger = Ledger(LocalStore(tmp_path), bus)

    ledger.add_transaction(make_tx("t1", 10))
    ledger.add_budget(Budget("b1", "Travel", 100, "2024-03"))
    ledger.delete_budget("b1")

    assert seen == [(TRANSACTION_ADDED, "t1"), (BUDGET_DELETED, "b1")]


def test_dashboard_build():
    trans = (
        make_tx("t1", 1000, type="income", category="Salary"),
        make_tx("t2", 700),
    )
    budgets = (Budget("b1", "Food & Dining", 1000, "2024-03"),)

    view = DashboardService().build(trans, budgets, today=date(2024, 3, 20))

    assert view["month"] == "2024-03"
    assert view["balance"] == 300
    assert view["transaction_count"] == 2
    assert [m.key for m in view["monthly"]] == ["2024-03"]
    assert view["categories"][0].category == "Food & Dining"
    assert view["comparisons"][0].percentage == 70
    assert view["budgeted_categories"] == ["Food & Dining"]
    assert len(view["insights"]) == 2


def test_dashboard_selected_month_does_not_move_insights():
    trans = (make_tx("t1", 50, date="2024-02-01"),)
    budgets = (Budget("b1", "Food & Dining", 100, "2024-02"),)

    view = DashboardService().build(trans, budgets, month="2024-02", today=date(2024, 3, 1))

    assert view["comparisons"][0].actual == 50
    assert view["insights"] == []


def test_dashboard_custom_views():
    def count_view(transactions, budgets, month, today):
        return {"n": len(transactions)}

    view = DashboardService(views=[count_view]).build((), (), month="2024-01")
    assert view == {"month": "2024-01", "n": 0}


def test_dashboard_empty():
    view = DashboardService().build((), (), today=date(2024, 3, 1))
    assert view["monthly"] == []
    assert view["categories"] == []
    assert view["comparisons"] == []
    assert view["insights"] == []
    assert view["balance"] == 0
