from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlencode

from fastapi import FastAPI, Form, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from finance_visualizer.config import load_config
from finance_visualizer.core.categories import CATEGORIES, color_for
from finance_visualizer.errors import NotFoundError, TransportError, ValidationError
from finance_visualizer.service import TransactionService
from webapp.view_model import FORM_FIELDS, DashboardView

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).with_name("templates")


def _redirect(message: str | None = None, error: str | None = None) -> RedirectResponse:
    params = {key: value for key, value in (("message", message), ("error", error)) if value}
    url = "/?" + urlencode(params) if params else "/"
    return RedirectResponse(url, status_code=303)


def _submitted_form(amount, date, description, category) -> dict:
    values = dict(zip(FORM_FIELDS, (amount, date, description, category)))
    return {key: (value or "") for key, value in values.items()}


def create_app(db_path: str | None = None, currency_symbol: str | None = None) -> FastAPI:
    config = load_config()
    app = FastAPI(title="Finance Visualizer")
    app.state.service = TransactionService(db_path or config["db_path"])

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    symbol = currency_symbol or config["currency_symbol"]
    templates.env.filters["money"] = lambda value: f"{symbol}{float(value):.2f}"
    templates.env.globals["categories"] = CATEGORIES
    templates.env.globals["color_for"] = color_for

    def service(request: Request) -> TransactionService:
        return request.app.state.service

    def render(request: Request, view: DashboardView, status_code: int = 200):
        try:
            view.transactions = service(request).list_transactions()
        except TransportError:
            logger.error("Dashboard could not load transactions")
            view.error = "Failed to fetch transactions."
            status_code = 503
        return templates.TemplateResponse(
            request, "index.html", {"view": view}, status_code=status_code
        )

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    @app.get("/")
    def index(
        request: Request,
        edit: str | None = None,
        message: str | None = None,
        error: str | None = None,
    ):
        view = DashboardView(message=message, error=error)
        if edit:
            try:
                view.open_editor(service(request).get_transaction(edit))
            except NotFoundError:
                view.error = "Transaction not found"
            except TransportError:
                view.error = "Failed to fetch transaction."
        return render(request, view)

    @app.post("/transactions")
    def create_transaction(
        request: Request,
        amount: str | None = Form(None),
        date: str | None = Form(None),
        description: str | None = Form(None),
        category: str | None = Form(None),
    ):
        form = _submitted_form(amount, date, description, category)
        try:
            service(request).create_transaction(form)
        except ValidationError as exc:
            return render(request, DashboardView(create_form=form, error=exc.message), 400)
        except TransportError:
            logger.error("Dashboard could not add transaction")
            return _redirect(error="Failed to add transaction.")
        return _redirect(message="Transaction added")

    @app.post("/transactions/{tx_id}/update")
    def update_transaction(
        request: Request,
        tx_id: str,
        amount: str | None = Form(None),
        date: str | None = Form(None),
        description: str | None = Form(None),
        category: str | None = Form(None),
    ):
        form = _submitted_form(amount, date, description, category)
        try:
            service(request).update_transaction({"id": tx_id, **form})
        except ValidationError as exc:
            view = DashboardView(
                edit_form=form,
                editing_id=tx_id,
                dialog_open=True,
                error=exc.message,
            )
            return render(request, view, 400)
        except NotFoundError:
            return _redirect(error="Transaction not found")
        except TransportError:
            logger.error("Dashboard could not update transaction")
            return _redirect(error="Failed to update transaction.")
        return _redirect(message="Transaction updated")

    @app.post("/transactions/{tx_id}/delete")
    def delete_transaction(request: Request, tx_id: str):
        try:
            service(request).delete_transaction(tx_id)
        except TransportError:
            logger.error("Dashboard could not delete transaction")
            return _redirect(error="Failed to delete transaction.")
        return _redirect(message="Transaction deleted")

    return app


app = create_app()
