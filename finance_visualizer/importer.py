# finance_visualizer/importer.py
from typing import List

import yaml

from finance_visualizer.core.models import Transaction
from finance_visualizer.service import TransactionService


def load_transaction_entries(path) -> List[dict]:
    """Read a YAML list of ``{amount, date, description, category}`` entries."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of transactions in {path}")
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"Malformed transaction entry: {entry!r}")
    return data


def import_transactions(service: TransactionService, path) -> List[Transaction]:
    """Create every entry in the file through *service*.

    Entries are validated one by one; the first invalid entry stops the import
    and the ones before it stay stored.
    """
    return [service.create_transaction(entry) for entry in load_transaction_entries(path)]
