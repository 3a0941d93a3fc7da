from __future__ import annotations

import argparse
import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import urlparse

from dotenv import load_dotenv

from finance_visualizer.aggregation import build_summary
from finance_visualizer.config import configure_logging, load_config
from finance_visualizer.core.categories import category_table
from finance_visualizer.errors import NotFoundError, TransportError, ValidationError
from finance_visualizer.service import TransactionService

logger = logging.getLogger(__name__)

TRANSACTIONS_PATH = "/api/transactions"
ALLOWED_METHODS = ("GET", "POST", "DELETE", "PUT")


class BadRequest(Exception):
    pass


def _json_response(handler: BaseHTTPRequestHandler, payload: Any, status: int = 200) -> None:
    body = json.dumps(payload).encode("utf-8")
    handler.send_response(status)
    handler.send_header("Content-Type", "application/json")
    handler.send_header("Cache-Control", "no-store")
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    handler.wfile.write(body)


def _empty_response(handler: BaseHTTPRequestHandler, status: int) -> None:
    handler.send_response(status)
    handler.send_header("Content-Length", "0")
    handler.end_headers()


def _read_json_body(handler: BaseHTTPRequestHandler) -> dict:
    try:
        length = int(handler.headers.get("Content-Length") or 0)
    except ValueError as exc:
        raise BadRequest("Invalid Content-Length header") from exc
    if length < 0:
        raise BadRequest("Invalid Content-Length header")
    raw = handler.rfile.read(length) if length else b""
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw.decode("utf-8"))
    except ValueError as exc:
        # Also covers the int digit limit on huge numeric literals.
        raise BadRequest("Invalid JSON body") from exc
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")
    return payload


class FinanceVisualizerHandler(BaseHTTPRequestHandler):
    db_path = "finance.db"

    def log_message(self, format: str, *args: Any) -> None:
        return

    @property
    def service(self) -> TransactionService:
        return TransactionService(self.db_path)

    def do_GET(self) -> None:
        path = urlparse(self.path).path
        if path == TRANSACTIONS_PATH:
            self._dispatch("fetch transactions", self._list)
        elif path == "/api/summary":
            self._dispatch("fetch summary", self._summary)
        elif path == "/api/categories":
            _json_response(self, category_table())
        else:
            _json_response(self, {"error": "not found"}, status=404)

    def do_POST(self) -> None:
        if self._route_transactions():
            self._dispatch("add transaction", self._create)

    def do_PUT(self) -> None:
        if self._route_transactions():
            self._dispatch("update transaction", self._update)

    def do_DELETE(self) -> None:
        if self._route_transactions():
            self._dispatch("delete transaction", self._delete)

    def do_PATCH(self) -> None:
        self._method_not_allowed()

    def do_HEAD(self) -> None:
        self._method_not_allowed()

    def do_OPTIONS(self) -> None:
        self._method_not_allowed()

    def _route_transactions(self) -> bool:
        if urlparse(self.path).path != TRANSACTIONS_PATH:
            _json_response(self, {"error": "not found"}, status=404)
            return False
        return True

    def _method_not_allowed(self) -> None:
        body = f"Method {self.command} Not Allowed".encode("utf-8")
        self.send_response(405)
        self.send_header("Allow", ", ".join(ALLOWED_METHODS))
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _dispatch(self, action: str, operation) -> None:
        try:
            operation()
        except BadRequest as exc:
            _json_response(self, {"error": str(exc)}, status=400)
        except ValidationError as exc:
            _json_response(self, {"error": exc.message, "fields": exc.fields}, status=400)
        except NotFoundError:
            _json_response(self, {"error": "Transaction not found"}, status=404)
        except TransportError:
            logger.error("Failed to %s via %s %s", action, self.command, self.path)
            _json_response(self, {"error": f"Failed to {action}"}, status=500)

    def _list(self) -> None:
        txs = self.service.list_transactions()
        _json_response(self, [tx.to_dict() for tx in txs])

    def _summary(self) -> None:
        _json_response(self, build_summary(self.service.list_transactions()))

    def _create(self) -> None:
        tx = self.service.create_transaction(_read_json_body(self))
        _json_response(self, tx.to_dict(), status=201)

    def _update(self) -> None:
        tx = self.service.update_transaction(_read_json_body(self))
        _json_response(self, tx.to_dict())

    def _delete(self) -> None:
        self.service.delete_transaction(_read_json_body(self).get("id"))
        _empty_response(self, 204)


def make_server(db_path: str, host: str = "127.0.0.1", port: int = 8000) -> ThreadingHTTPServer:
    handler = type(
        "FinanceVisualizerHandler",
        (FinanceVisualizerHandler,),
        {"db_path": db_path},
    )
    return ThreadingHTTPServer((host, port), handler)


def serve(db_path: str, host: str, port: int) -> None:
    server = make_server(db_path, host, port)
    logger.info("Finance Visualizer API running at http://%s:%s (db: %s)", host, port, db_path)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Finance Visualizer JSON API")
    parser.add_argument("--config", dest="config_path", default=None, help="Path to config.yaml")
    parser.add_argument("--env-file", default=None, help="Optional .env file")
    parser.add_argument("--db", dest="db_path", default=None, help="Path to SQLite database")
    parser.add_argument("--host", default=None, help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default: 8000)")
    args = parser.parse_args()

    if args.env_file:
        load_dotenv(args.env_file)
    configure_logging()
    cfg = load_config(args.config_path)
    api_cfg = cfg["api"]
    serve(
        args.db_path or cfg["db_path"],
        args.host or api_cfg["host"],
        args.port or api_cfg["port"],
    )


if __name__ == "__main__":
    main()
