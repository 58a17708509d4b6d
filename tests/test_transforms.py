import re

import pytest

from spendwise.domain import Budget, Transaction
from spendwise.transforms import (
    add_record,
    budget_from_dict,
    delete_record,
    generate_id,
    new_budget,
    new_transaction,
    replace_record,
    transaction_from_dict,
    transaction_to_dict,
)


def make_tx(id, amount=10):
    return Transaction(id=id, amount=amount, date="2024-03-01", description="", type="expense", category="Other")


def test_generate_id_shape_and_uniqueness():
    ids = {generate_id() for _ in range(500)}
    assert len(ids) == 500
    assert all(re.fullmatch(r"[0-9a-z]+", i) for i in ids)


def test_add_record_returns_new_tuple():
    trans = (make_tx("t1"),)
    updated = add_record(trans, make_tx("t2"))

    assert len(trans) == 1
    assert [t.id for t in updated] == ["t1", "t2"]


def test_replace_record_keeps_position():
    trans = (make_tx("t1"), make_tx("t2"), make_tx("t3"))
    updated = replace_record(trans, make_tx("t2", amount=99))

    assert [t.amount for t in updated] == [10, 99, 10]
    assert trans[1].amount == 10


def test_delete_record():
    budgets = (Budget("b1", "Travel", 1, "2024-03"), Budget("b2", "Travel", 1, "2024-04"))
    assert [b.id for b in delete_record(budgets, "b1")] == ["b2"]
    assert delete_record(budgets, "zzz") == budgets


def test_new_transaction_stamps_times():
    t = new_transaction(5, "2024-03-01", "Coffee", "expense", "Food & Dining", now="NOW")
    assert t.created_at == "NOW"
    assert t.updated_at == "NOW"
    assert t.id


def test_new_budget_edit_keeps_id():
    old = Budget("b1", "Travel", 100, "2024-03", created_at="THEN", updated_at="THEN")
    b = new_budget("Travel", 150, "2024-03", existing=old, now="NOW")
    assert (b.id, b.created_at, b.updated_at, b.amount) == ("b1", "THEN", "NOW", 150)


def test_transaction_dict_conversion():
    d = {
        "id": "t1", "amount": "12.5", "date": "2024-03-01", "description": "x",
        "type": "income", "category": None, "createdAt": "c", "updatedAt": "u",
    }
    t = transaction_from_dict(d)

    assert t.amount == 12.5
    assert t.category == ""
    assert transaction_to_dict(t)["createdAt"] == "c"


def test_budget_from_dict_requires_fields():
    with pytest.raises(KeyError):
        budget_from_dict({"id": "b1", "amount": 1})
