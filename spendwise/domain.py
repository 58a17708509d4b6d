from dataclasses import dataclass
from enum import Enum
from typing import Literal

INCOME = "income"
EXPENSE = "expense"

TransactionType = Literal["income", "expense"]


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float            # always positive, sign comes from type
    date: str                # "2024-03-01"
    description: str
    type: TransactionType
    category: str
    created_at: str = ""     # ISO timestamps
    updated_at: str = ""

    @property
    def month(self) -> str:
        return self.date[:7]


# A planned spend ceiling for one category in one month
@dataclass(frozen=True)
class Budget:
    id: str
    category: str
    amount: float
    month: str  # "YYYY-MM"
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class MonthlyExpense:
    month: str   # display label, e.g. "Mar 2024"
    key: str     # "2024-03"
    amount: float
    count: int


@dataclass(frozen=True)
class CategoryExpense:
    category: str
    amount: float
    count: int
    color: str


@dataclass(frozen=True)
class BudgetComparison:
    category: str
    budgeted: float
    actual: float
    remaining: float
    percentage: float
    color: str
    budget_id: str = ""


class InsightSeverity(str, Enum):
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"


class InsightKind(str, Enum):
    BUDGET_ALERT = "budget_alert"
    TOP_CATEGORY = "top_category"
    HIGH_SAVINGS = "high_savings"
    LOW_SAVINGS = "low_savings"


@dataclass(frozen=True)
class SpendingInsight:
    severity: InsightSeverity
    kind: InsightKind
    title: str
    description: str


EXPENSE_CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Travel",
    "Education",
    "Personal Care",
    "Home & Garden",
    "Gifts & Donations",
    "Other",
)

INCOME_CATEGORIES = (
    "Salary",
    "Freelance",
    "Business",
    "Investments",
    "Rental Income",
    "Gifts",
    "Other",
)

CATEGORY_COLORS = (
    "#3B82F6",  # blue
    "#10B981",  # green
    "#F59E0B",  # amber
    "#EF4444",  # red
    "#8B5CF6",  # purple
    "#F97316",  # orange
    "#06B6D4",  # cyan
    "#84CC16",  # lime
    "#EC4899",  # pink
    "#6B7280",  # gray
    "#14B8A6",  # teal
    "#F43F5E",  # rose
)
