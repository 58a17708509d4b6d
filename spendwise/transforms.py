import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple, TypeVar

from spendwise.domain import EXPENSE, INCOME, Budget, Transaction

R = TypeVar("R", Transaction, Budget)

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_id() -> str:
    """Millisecond timestamp plus a random suffix, both base 36."""
    stamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(_BASE36, k=11))
    return stamp + suffix


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def transaction_from_dict(d: Mapping[str, Any]) -> Transaction:
    if d["type"] not in (INCOME, EXPENSE):
        raise ValueError(f"unknown transaction type: {d['type']!r}")
    return Transaction(
        id=str(d["id"]),
        amount=float(d["amount"]),
        date=str(d["date"]),
        description=str(d.get("description", "")),
        type=d["type"],
        category=d.get("category") or "",
        created_at=d.get("createdAt", ""),
        updated_at=d.get("updatedAt", ""),
    )


def transaction_to_dict(t: Transaction) -> dict:
    return {
        "id": t.id,
        "amount": t.amount,
        "date": t.date,
        "description": t.description,
        "type": t.type,
        "category": t.category,
        "createdAt": t.created_at,
        "updatedAt": t.updated_at,
    }


def budget_from_dict(d: Mapping[str, Any]) -> Budget:
    return Budget(
        id=str(d["id"]),
        category=str(d["category"]),
        amount=float(d["amount"]),
        month=str(d["month"]),
        created_at=d.get("createdAt", ""),
        updated_at=d.get("updatedAt", ""),
    )


def budget_to_dict(b: Budget) -> dict:
    return {
        "id": b.id,
        "category": b.category,
        "amount": b.amount,
        "month": b.month,
        "createdAt": b.created_at,
        "updatedAt": b.updated_at,
    }


def new_transaction(
    amount: float,
    date: str,
    description: str,
    type: str,
    category: str,
    existing: Optional[Transaction] = None,
    now: Optional[str] = None,
) -> Transaction:
    """Build a transaction; when ``existing`` is given its id and created_at are kept."""
    now = now or now_iso()
    return Transaction(
        id=existing.id if existing else generate_id(),
        amount=amount,
        date=date,
        description=description,
        type=type,
        category=category,
        created_at=existing.created_at if existing else now,
        updated_at=now,
    )


def new_budget(
    category: str,
    amount: float,
    month: str,
    existing: Optional[Budget] = None,
    now: Optional[str] = None,
) -> Budget:
    now = now or now_iso()
    return Budget(
        id=existing.id if existing else generate_id(),
        category=category,
        amount=amount,
        month=month,
        created_at=existing.created_at if existing else now,
        updated_at=now,
    )


def add_record(records: Tuple[R, ...], r: R) -> Tuple[R, ...]:
    return records + (r,)


def replace_record(records: Tuple[R, ...], r: R) -> Tuple[R, ...]:
    return tuple(r if x.id == r.id else x for x in records)


def delete_record(records: Tuple[R, ...], record_id: str) -> Tuple[R, ...]:
    return tuple(filter(lambda x: x.id != record_id, records))
