import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Sequence, Tuple

from spendwise.domain import Budget, Transaction
from spendwise.transforms import (
    budget_from_dict,
    budget_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)

logger = logging.getLogger(__name__)

TRANSACTIONS = "transactions"
BUDGETS = "budgets"
SLOTS = (TRANSACTIONS, BUDGETS)


class LocalStore:
    """Key-value store with one JSON array file per slot.

    Reads never fail: a missing, unreadable or malformed slot is treated as
    empty. Writes replace the whole slot.
    """

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    def _path(self, slot: str) -> Path:
        if slot not in SLOTS:
            raise ValueError(f"unknown storage slot: {slot!r}")
        return self.data_dir / f"{slot}.json"

    def load(self, slot: str) -> list[dict]:
        path = self._path(slot)
        if not path.exists():
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read stored data", extra={"slot": slot, "error": str(e)})
            return []

        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            logger.warning("Stored data is not a list of records", extra={"slot": slot})
            return []
        return data

    def save(self, slot: str, records: Sequence[dict[str, Any]]) -> None:
        path = self._path(slot)
        path.parent.mkdir(parents=True, exist_ok=True)

        # write next to the target and swap in, so readers never see half a file
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{slot}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(records), f, indent=2)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.debug("Saved slot", extra={"slot": slot, "records": len(records)})

    def load_transactions(self) -> Tuple[Transaction, ...]:
        try:
            return tuple(transaction_from_dict(d) for d in self.load(TRANSACTIONS))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed transaction record", extra={"slot": TRANSACTIONS, "error": str(e)})
            return ()

    def save_transactions(self, trans: Sequence[Transaction]) -> None:
        self.save(TRANSACTIONS, [transaction_to_dict(t) for t in trans])

    def load_budgets(self) -> Tuple[Budget, ...]:
        try:
            return tuple(budget_from_dict(d) for d in self.load(BUDGETS))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed budget record", extra={"slot": BUDGETS, "error": str(e)})
            return ()

    def save_budgets(self, budgets: Sequence[Budget]) -> None:
        self.save(BUDGETS, [budget_to_dict(b) for b in budgets])
