"""Derived views over the full transaction list.

All functions are pure and recompute from scratch on every call. Input is
expected to come from the store, so categories are already normalized.
"""
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from finance_visualizer.core.categories import category_index, color_for
from finance_visualizer.core.models import Transaction


def _round(value: float) -> float:
    return round(value, 2)


def total_expenses(transactions: Iterable[Transaction]) -> float:
    return _round(sum(tx.amount for tx in transactions))


def monthly_series(transactions: Iterable[Transaction]) -> List[Dict[str, object]]:
    """Sum amounts per ``YYYY-MM``, oldest month first.

    Months without transactions are left out rather than zero-filled.
    """
    totals: Dict[str, float] = {}
    for tx in transactions:
        totals[tx.month] = totals.get(tx.month, 0.0) + tx.amount
    return [
        {"month": month, "total": _round(total)}
        for month, total in sorted(totals.items())
    ]


def category_totals(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Sum amounts per category, keyed in first-seen order."""
    totals: Dict[str, float] = {}
    for tx in transactions:
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount
    return {category: _round(total) for category, total in totals.items()}


def top_category(transactions: Iterable[Transaction]) -> Optional[Tuple[str, float]]:
    """Category with the largest total, or ``None`` with no transactions.

    Equal totals go to the label that comes first in the canonical list.
    """
    totals = category_totals(transactions)
    if not totals:
        return None
    best = min(totals.items(), key=lambda item: (-item[1], category_index(item[0])))
    return best


def most_recent(transactions: Sequence[Transaction]) -> Optional[Transaction]:
    """Transaction with the greatest date; the earliest in list order wins a tie."""
    latest: Optional[Transaction] = None
    for tx in transactions:
        if latest is None or tx.date > latest.date:
            latest = tx
    return latest


def category_breakdown(transactions: Iterable[Transaction]) -> List[Dict[str, object]]:
    return [
        {"category": category, "total": total, "color": color_for(category)}
        for category, total in category_totals(transactions).items()
    ]


def build_summary(transactions: Sequence[Transaction]) -> Dict[str, object]:
    """Bundle every derived view into one JSON-ready dict."""
    top = top_category(transactions)
    recent = most_recent(transactions)
    return {
        "transactions": len(transactions),
        "total": total_expenses(transactions),
        "top_category": {"category": top[0], "total": top[1]} if top else None,
        "most_recent": recent.to_dict() if recent else None,
        "monthly": monthly_series(transactions),
        "categories": category_breakdown(transactions),
    }
