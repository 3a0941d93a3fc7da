import logging
import sqlite3
import uuid
from pathlib import Path
from typing import List, Optional

from finance_visualizer.core.categories import normalize_category
from finance_visualizer.core.models import Transaction
from finance_visualizer.errors import TransportError

logger = logging.getLogger(__name__)

_COLUMNS = "id, amount, date, description, category"


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id TEXT PRIMARY KEY,
            amount REAL NOT NULL,
            date TEXT NOT NULL,
            description TEXT NOT NULL,
            category TEXT
        )
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        _init_db(conn)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def _row_to_transaction(row) -> Transaction:
    # The one place a stored category is normalized onto the label set.
    return Transaction(
        id=row[0],
        amount=float(row[1]),
        date=row[2],
        description=row[3],
        category=normalize_category(row[4]),
    )


def new_transaction_id() -> str:
    return uuid.uuid4().hex


def insert_transaction(
    db_path: str,
    amount: float,
    date: str,
    description: str,
    category: str,
) -> Transaction:
    """Insert one record and return it with its newly assigned id."""
    tx_id = new_transaction_id()
    try:
        conn = _connect(db_path)
        try:
            conn.execute(
                f"INSERT INTO transactions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                (tx_id, float(amount), date, description, category),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as exc:
        logger.exception("Insert into %s failed", db_path)
        raise TransportError(f"Failed to insert transaction: {exc}") from exc
    return Transaction(
        id=tx_id,
        amount=float(amount),
        date=date,
        description=description,
        category=category,
    )


def fetch_transactions(db_path: str) -> List[Transaction]:
    """Return every stored transaction, newest date first.

    Rows sharing a date keep their insertion order, so two reads with no
    write in between return the same sequence.
    """
    try:
        conn = _connect(db_path)
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM transactions ORDER BY date DESC, rowid ASC"
            ).fetchall()
        finally:
            conn.close()
    except sqlite3.Error as exc:
        logger.exception("Reading transactions from %s failed", db_path)
        raise TransportError(f"Failed to fetch transactions: {exc}") from exc
    return [_row_to_transaction(r) for r in rows]


def get_transaction(db_path: str, tx_id: str) -> Optional[Transaction]:
    try:
        conn = _connect(db_path)
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM transactions WHERE id = ?", (tx_id,)
            ).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as exc:
        logger.exception("Reading transaction %s from %s failed", tx_id, db_path)
        raise TransportError(f"Failed to fetch transaction: {exc}") from exc
    return _row_to_transaction(row) if row else None


def replace_transaction(db_path: str, tx: Transaction) -> bool:
    """Overwrite every field of the record with ``tx.id``.

    Returns ``False`` when no record has that id; nothing is written then.
    """
    try:
        conn = _connect(db_path)
        try:
            cur = conn.execute(
                """
                UPDATE transactions
                SET amount = ?, date = ?, description = ?, category = ?
                WHERE id = ?
                """,
                (float(tx.amount), tx.date, tx.description, tx.category, tx.id),
            )
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()
    except sqlite3.Error as exc:
        logger.exception("Updating transaction %s in %s failed", tx.id, db_path)
        raise TransportError(f"Failed to update transaction: {exc}") from exc


def delete_transaction(db_path: str, tx_id: str) -> bool:
    """Delete by id; returns whether a row was removed."""
    try:
        conn = _connect(db_path)
        try:
            cur = conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()
    except sqlite3.Error as exc:
        logger.exception("Deleting transaction %s from %s failed", tx_id, db_path)
        raise TransportError(f"Failed to delete transaction: {exc}") from exc
