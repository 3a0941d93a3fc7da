from __future__ import annotations

from pathlib import Path

import anyio
from mcp.server.fastmcp import FastMCP

from finance_visualizer.aggregation import build_summary
from finance_visualizer.service import TransactionService

server = FastMCP(
    name="Finance Visualizer",
    instructions="Read-only access to recorded transactions and their summary",
)


def _service(db_path: str) -> TransactionService:
    if not Path(db_path).exists():
        raise FileNotFoundError(f"Database not found: {db_path}")
    return TransactionService(db_path)


@server.tool(name="get_transactions", description="List all transactions, newest first")
async def get_transactions(db_path: str) -> list[dict]:
    """Return every transaction stored in ``db_path``."""
    service = _service(db_path)

    def _run() -> list[dict]:
        return [tx.to_dict() for tx in service.list_transactions()]

    return await anyio.to_thread.run_sync(_run)


@server.tool(
    name="get_summary",
    description="Total, top category, most recent transaction, monthly and category totals",
)
async def get_summary(db_path: str) -> dict:
    service = _service(db_path)

    def _run() -> dict:
        return build_summary(service.list_transactions())

    return await anyio.to_thread.run_sync(_run)


def main() -> None:
    server.run()


if __name__ == "__main__":
    main()
