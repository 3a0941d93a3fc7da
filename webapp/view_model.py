from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from finance_visualizer.aggregation import (
    category_breakdown,
    monthly_series,
    most_recent,
    top_category,
    total_expenses,
)
from finance_visualizer.core.categories import DEFAULT_CATEGORY
from finance_visualizer.core.models import Transaction
from webapp.charts import BarChart, PieChart, bar_chart, pie_chart

FORM_FIELDS = ("amount", "date", "description", "category")


def empty_form() -> Dict[str, str]:
    return {"amount": "", "date": "", "description": "", "category": DEFAULT_CATEGORY}


def form_from_transaction(tx: Transaction) -> Dict[str, str]:
    return {
        "amount": f"{tx.amount:g}",
        "date": tx.date,
        "description": tx.description,
        "category": tx.category,
    }


@dataclass
class DashboardView:
    """Everything one dashboard render needs, built fresh per request.

    There is no in-flight state on the server: the page itself disables a
    form's submit button once the form is sent.
    """

    transactions: List[Transaction] = field(default_factory=list)
    create_form: Dict[str, str] = field(default_factory=empty_form)
    edit_form: Dict[str, str] = field(default_factory=empty_form)
    editing_id: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None
    dialog_open: bool = False

    def open_editor(self, tx: Transaction, form: Optional[Dict[str, str]] = None) -> None:
        self.editing_id = tx.id
        self.edit_form = form or form_from_transaction(tx)
        self.dialog_open = True

    @property
    def total(self) -> float:
        return total_expenses(self.transactions)

    @property
    def top_category(self):
        return top_category(self.transactions)

    @property
    def most_recent(self) -> Optional[Transaction]:
        return most_recent(self.transactions)

    @property
    def monthly_chart(self) -> BarChart:
        return bar_chart(monthly_series(self.transactions))

    @property
    def category_chart(self) -> PieChart:
        return pie_chart(category_breakdown(self.transactions))
