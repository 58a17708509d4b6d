from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from spendwise.domain import EXPENSE, INCOME, Budget, Transaction
from spendwise.transforms import new_budget, new_transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

FormErrors = dict[str, str]

AMOUNT_ERROR = "Please enter a valid amount greater than 0"
DATE_ERROR = "Please select a date"
DESCRIPTION_ERROR = "Please enter a description"
CATEGORY_ERROR = "Please select a category"
MONTH_ERROR = "Please select a month"
DUPLICATE_BUDGET_ERROR = "A budget for this category already exists for this month"


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        ...

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        ...

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f):
        return Some(f(self._value))

    def get_or_else(self, default):
        return self._value

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f):
        return self

    def get_or_else(self, default):
        return default

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """Right carries a value, Left carries the reason there is none."""

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        ...

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        ...

    @abstractmethod
    def get_error(self) -> E:
        ...

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f):
        return Right(f(self._value))

    def get_or_else(self, default):
        return self._value

    def get_error(self):
        raise ValueError("Right has no error")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f):
        return self

    def get_or_else(self, default):
        return default

    def get_error(self):
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def find_budget(budgets: Iterable[Budget], category: str, month: str) -> Maybe[Budget]:
    for b in budgets:
        if b.category == category and b.month == month:
            return Some(b)
    return Nothing()


def find_budget_by_id(budgets: Iterable[Budget], budget_id: str) -> Maybe[Budget]:
    for b in budgets:
        if b.id == budget_id:
            return Some(b)
    return Nothing()


def find_transaction(trans: Iterable[Transaction], tx_id: str) -> Maybe[Transaction]:
    for t in trans:
        if t.id == tx_id:
            return Some(t)
    return Nothing()


def parse_amount(raw: Any) -> Maybe[float]:
    """A strictly positive number, or Nothing."""
    if raw is None or isinstance(raw, bool):
        return Nothing()
    try:
        value = float(str(raw).strip())
    except ValueError:
        return Nothing()
    # NaN fails this comparison too
    if not value > 0 or value == float("inf"):
        return Nothing()
    return Some(value)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def validate_transaction_form(
    form: Mapping[str, Any],
    existing: Optional[Transaction] = None,
    now: Optional[str] = None,
) -> Either[FormErrors, Transaction]:
    """Check a transaction form and build the record.

    ``form`` holds the raw field values (amount, date, description, type,
    category). Errors are keyed by field so they can be shown inline.
    """
    errors: FormErrors = {}

    amount = parse_amount(form.get("amount"))
    if amount.is_none():
        errors["amount"] = AMOUNT_ERROR

    tx_date = _as_text(form.get("date"))
    if not tx_date:
        errors["date"] = DATE_ERROR

    description = _as_text(form.get("description")).strip()
    if not description:
        errors["description"] = DESCRIPTION_ERROR

    category = _as_text(form.get("category"))
    if not category:
        errors["category"] = CATEGORY_ERROR

    if errors:
        return Left(errors)

    tx_type = form.get("type") or EXPENSE
    if tx_type not in (INCOME, EXPENSE):
        tx_type = EXPENSE

    return Right(new_transaction(
        amount=amount.get_or_else(0.0),
        date=tx_date,
        description=description,
        type=tx_type,
        category=category,
        existing=existing,
        now=now,
    ))


def validate_budget_form(
    form: Mapping[str, Any],
    existing_categories: Iterable[str] = (),
    existing: Optional[Budget] = None,
    now: Optional[str] = None,
) -> Either[FormErrors, Budget]:
    """Check a budget form; ``existing_categories`` are the ones already budgeted this month."""
    errors: FormErrors = {}

    month = _as_text(form.get("month"))[:7]
    category = _as_text(form.get("category"))
    # the edited budget only keeps its own slot, not the category in other months
    unchanged = existing is not None and (existing.category, existing.month) == (category, month)

    if not category:
        errors["category"] = CATEGORY_ERROR
    elif category in set(existing_categories) and not unchanged:
        errors["category"] = DUPLICATE_BUDGET_ERROR

    amount = parse_amount(form.get("amount"))
    if amount.is_none():
        errors["amount"] = AMOUNT_ERROR

    if not month:
        errors["month"] = MONTH_ERROR

    if errors:
        return Left(errors)

    return Right(new_budget(
        category=category,
        amount=amount.get_or_else(0.0),
        month=month,
        existing=existing,
        now=now,
    ))

