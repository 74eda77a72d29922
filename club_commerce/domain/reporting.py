"""Transaction reporting - filtered views and spend aggregates"""

from dataclasses import dataclass
from datetime import tzinfo
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from club_commerce.config import settings
from club_commerce.domain.exceptions import InvalidDateRangeError
from club_commerce.domain.models import PurchasedItem, Transaction
from club_commerce.utils.date_utils import (
    DateBound,
    end_of_day,
    parse_date_bound,
    resolve_timezone,
    start_of_day,
)
from club_commerce.utils.money import plain_number, round_money

CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


@dataclass(frozen=True)
class TransactionFilter:
    """Search, status and inclusive date range applied to a transaction list"""

    search: str = ""
    status: str = "all"
    start_date: DateBound = None
    end_date: DateBound = None


@dataclass(frozen=True)
class TransactionReport:
    """Everything the transactions page shows for one filter selection"""

    transactions: List[Transaction]
    total_spend: Decimal
    spend_by_category: Dict[str, Decimal]

    @property
    def count(self) -> int:
        return len(self.transactions)


def _item_matches(item: PurchasedItem, needle: str) -> bool:
    return (
        needle in item.product_name.casefold()
        or needle in item.category.casefold()
        or needle in plain_number(item.total_price)
    )


def filter_transactions(
    transactions: Sequence[Transaction],
    criteria: TransactionFilter,
    tz: Optional[tzinfo] = None,
) -> List[Transaction]:
    """
    Transactions matching every criterion, in input order.

    Criteria:
    - search: some purchased item's name, category or total price contains
      it, ignoring case (empty matches everything)
    - status: "all" or the exact transaction status
    - start_date / end_date: inclusive calendar days in the report timezone;
      the end bound runs through 23:59:59.999 of that day

    A start date after the end date is not rejected here, it simply matches
    nothing; see validate_date_range.
    """
    tz = tz or resolve_timezone(settings.report_timezone)
    needle = criteria.search.casefold()
    start = parse_date_bound(criteria.start_date)
    end = parse_date_bound(criteria.end_date)
    lower = start_of_day(start, tz) if start else None
    upper = end_of_day(end, tz) if end else None

    matched = []
    for tx in transactions:
        if needle and not any(_item_matches(item, needle) for item in tx.purchased_items):
            continue
        if criteria.status != "all" and tx.status != criteria.status:
            continue
        if lower and tx.timestamp < lower:
            continue
        if upper and tx.timestamp > upper:
            continue
        matched.append(tx)

    return matched


def validate_date_range(start_date: DateBound, end_date: DateBound) -> None:
    """Raise InvalidDateRangeError when both bounds are set and start > end"""
    start = parse_date_bound(start_date)
    end = parse_date_bound(end_date)
    if start and end and start > end:
        raise InvalidDateRangeError("End date must be after start date")


def total_spend(transactions: Iterable[Transaction], category: str = "all") -> Decimal:
    """Sum of purchased item totals, optionally restricted to one category"""
    total = sum(
        (
            item.total_price
            for tx in transactions
            for item in tx.purchased_items
            if category == "all" or item.category == category
        ),
        Decimal("0"),
    )
    return round_money(total)


def spend_by_category(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    """
    Spend per purchased item category, for charting.

    Buckets come from the data, not a fixed list, in first-seen order.
    """
    buckets: Dict[str, Decimal] = {}
    for tx in transactions:
        for item in tx.purchased_items:
            buckets[item.category] = buckets.get(item.category, Decimal("0")) + item.total_price
    return {category: round_money(amount) for category, amount in buckets.items()}


def build_report(
    transactions: Sequence[Transaction],
    criteria: TransactionFilter,
    spend_category: str = "all",
    tz: Optional[tzinfo] = None,
) -> TransactionReport:
    """Filter once, then aggregate the filtered view"""
    filtered = filter_transactions(transactions, criteria, tz)
    return TransactionReport(
        transactions=filtered,
        total_spend=total_spend(filtered, spend_category),
        spend_by_category=spend_by_category(filtered),
    )


def latest_transaction(transactions: Sequence[Transaction]) -> Optional[Transaction]:
    """Most recent purchase; the transactions service lists newest first"""
    return transactions[0] if transactions else None


def format_currency(amount: Decimal, currency: str | None = None) -> str:
    """Display form like '€12.50'"""
    currency = (currency or settings.currency).upper()
    symbol = CURRENCY_SYMBOLS.get(currency)
    value = f"{round_money(amount):,.2f}"
    return f"{symbol}{value}" if symbol else f"{value} {currency}"
