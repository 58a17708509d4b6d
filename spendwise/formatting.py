from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def format_currency(amount: float) -> str:
    """Format an amount as USD with two decimals, e.g. ``-$1,234.50``.

    Half cents round away from zero, so 0.125 shows as ``$0.13``.
    """
    sign = "-" if amount < 0 else ""
    value = Decimal(str(abs(amount))).quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{sign}${value:,.2f}"


def _parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def format_date(value: str | date) -> str:
    """"2024-03-01" -> "Mar 1, 2024"."""
    d = _parse_date(value)
    return f"{d:%b} {d.day}, {d.year}"


def format_month(key: str) -> str:
    d = datetime.strptime(key, "%Y-%m")
    return d.strftime("%b %Y")


def format_month_long(key: str) -> str:
    d = datetime.strptime(key, "%Y-%m")
    return d.strftime("%B %Y")
