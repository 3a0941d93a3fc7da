# finance_visualizer/errors.py
from typing import Iterable, Optional


class FinanceVisualizerError(Exception):
    """Base class for errors raised by the transaction service and store."""


class ValidationError(FinanceVisualizerError):
    """A create/update payload is missing a field or carries a bad value."""

    def __init__(self, message: str, fields: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = list(fields or [])


class NotFoundError(FinanceVisualizerError):
    def __init__(self, transaction_id: Optional[str]) -> None:
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


class TransportError(FinanceVisualizerError):
    """The backing store could not be reached or failed mid-operation."""
