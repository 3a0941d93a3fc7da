# finance_visualizer/core/models.py
from dataclasses import asdict, dataclass
from typing import Any, Dict

from finance_visualizer.core.categories import DEFAULT_CATEGORY


@dataclass
class Transaction:
    id: str
    amount: float
    date: str
    description: str
    category: str = DEFAULT_CATEGORY

    @property
    def month(self) -> str:
        """Year-month key (``YYYY-MM``) of the ISO date string."""
        return self.date[:7]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
