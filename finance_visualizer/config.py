from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "db_path": "finance.db",
    "currency_symbol": "₹",
    "api": {
        "host": "127.0.0.1",
        "port": 8000,
    },
    "dashboard": {
        "host": "127.0.0.1",
        "port": 8001,
    },
}

CONFIG_ENV = "FINANCE_VISUALIZER_CONFIG"
DB_ENV = "FINANCE_VISUALIZER_DB"
LOG_LEVEL_ENV = "FINANCE_VISUALIZER_LOG_LEVEL"


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = value
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Load the YAML config at *path* over ``DEFAULT_CONFIG``.

    Without an explicit path the ``FINANCE_VISUALIZER_CONFIG`` variable is
    consulted, then ``config.yaml`` in the working directory. A missing file
    yields the defaults. ``FINANCE_VISUALIZER_DB`` overrides ``db_path``.
    """
    target = Path(path or os.environ.get(CONFIG_ENV) or "config.yaml")
    data: Dict[str, object] = {}
    if target.exists():
        with target.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {target} must contain a mapping")
    config = _merge_defaults(data, DEFAULT_CONFIG)
    db_override = os.environ.get(DB_ENV)
    if db_override:
        config["db_path"] = db_override
    return config


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv(LOG_LEVEL_ENV, "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
