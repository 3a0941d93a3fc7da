"""Transaction CRUD over the SQLite store.

Every surface (JSON API, dashboard, CLI, importer) goes through
:class:`TransactionService`, so validation happens in exactly one place.
"""
from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from finance_visualizer import database
from finance_visualizer.core.categories import CATEGORY_LABELS, DEFAULT_CATEGORY, is_known_category
from finance_visualizer.core.models import Transaction
from finance_visualizer.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("amount", "date", "description")
MISSING_FIELDS_MESSAGE = "All fields are required"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _parse_amount(value: Any) -> float:
    # bool is an int subclass; True is not an amount.
    if isinstance(value, bool):
        raise ValidationError("amount must be a number", ["amount"])
    try:
        amount = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError("amount must be a number", ["amount"]) from exc
    if not math.isfinite(amount):
        raise ValidationError("amount must be a number", ["amount"])
    if amount < 0:
        raise ValidationError("amount must not be negative", ["amount"])
    return amount


def _parse_date(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError:
            parsed = None
        # strptime accepts "2024-1-5"; grouping needs the zero-padded form.
        if parsed is not None and parsed.isoformat() == text:
            return text
    raise ValidationError("date must be a YYYY-MM-DD string", ["date"])


def _parse_category(value: Any) -> str:
    if _is_missing(value):
        return DEFAULT_CATEGORY
    label = value.strip() if isinstance(value, str) else value
    if not is_known_category(label):
        raise ValidationError(
            f"category must be one of: {', '.join(CATEGORY_LABELS)}", ["category"]
        )
    return label


def validate_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Check presence and types of a create/update body.

    Returns the normalized ``amount``, ``date``, ``description`` and
    ``category`` values. A zero amount is valid; an absent category takes
    the default label.
    """
    missing = [name for name in REQUIRED_FIELDS if _is_missing(payload.get(name))]
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing)

    description = payload["description"]
    if not isinstance(description, str):
        raise ValidationError("description must be a string", ["description"])

    return {
        "amount": _parse_amount(payload["amount"]),
        "date": _parse_date(payload["date"]),
        "description": description.strip(),
        "category": _parse_category(payload.get("category")),
    }


class TransactionService:
    def __init__(self, db_path: str) -> None:
        self.db_path = str(db_path)

    def list_transactions(self) -> List[Transaction]:
        return database.fetch_transactions(self.db_path)

    def get_transaction(self, tx_id: Optional[str]) -> Transaction:
        tx = database.get_transaction(self.db_path, tx_id) if tx_id else None
        if tx is None:
            raise NotFoundError(tx_id)
        return tx

    def create_transaction(self, payload: Mapping[str, Any]) -> Transaction:
        fields = validate_payload(payload)
        tx = database.insert_transaction(self.db_path, **fields)
        logger.info("Created transaction %s (%s %.2f)", tx.id, tx.date, tx.amount)
        return tx

    def update_transaction(self, payload: Mapping[str, Any]) -> Transaction:
        """Replace the whole record named by ``payload['id']``.

        Raises :class:`NotFoundError` when the id matches nothing.
        """
        tx_id = payload.get("id")
        if _is_missing(tx_id):
            raise ValidationError(MISSING_FIELDS_MESSAGE, ["id"])
        fields = validate_payload(payload)
        tx = Transaction(id=str(tx_id), **fields)
        if not database.replace_transaction(self.db_path, tx):
            raise NotFoundError(tx.id)
        logger.info("Updated transaction %s", tx.id)
        return tx

    def delete_transaction(self, tx_id: Optional[str]) -> bool:
        """Delete by id. Unknown or empty ids are a no-op and return ``False``."""
        if _is_missing(tx_id):
            return False
        removed = database.delete_transaction(self.db_path, str(tx_id))
        if removed:
            logger.info("Deleted transaction %s", tx_id)
        else:
            logger.debug("Delete of unknown transaction %s ignored", tx_id)
        return removed
