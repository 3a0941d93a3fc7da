# finance_visualizer/cli.py
import json

import click
import yaml
from dotenv import load_dotenv

from finance_visualizer.aggregation import build_summary
from finance_visualizer.config import configure_logging, load_config
from finance_visualizer.core.categories import CATEGORY_LABELS
from finance_visualizer.errors import FinanceVisualizerError, NotFoundError, ValidationError
from finance_visualizer.importer import import_transactions
from finance_visualizer.service import TransactionService

category_option = click.option(
    '--category',
    default=CATEGORY_LABELS[0],
    show_default=True,
    type=click.Choice(CATEGORY_LABELS),
    help='Category label'
)


def _fail(exc):
    if isinstance(exc, ValidationError):
        fields = f" ({', '.join(exc.fields)})" if exc.fields else ""
        raise click.ClickException(f"{exc.message}{fields}")
    if isinstance(exc, NotFoundError):
        raise click.ClickException(f"No transaction with id {exc.transaction_id}")
    raise click.ClickException(str(exc))


def _format_amount(ctx, amount):
    return f"{ctx.obj['currency_symbol']}{amount:.2f}"


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (default: $FINANCE_VISUALIZER_CONFIG or ./config.yaml)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with FINANCE_VISUALIZER_* settings'
)
@click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides config)'
)
@click.pass_context
def main(ctx, config_path, env_file, db_path):
    """Record transactions and summarize spending."""
    if env_file:
        load_dotenv(env_file)
    configure_logging()
    cfg = load_config(config_path)
    db_path = db_path or cfg['db_path']
    ctx.obj = {
        'config': cfg,
        'db_path': db_path,
        'currency_symbol': cfg['currency_symbol'],
        'service': TransactionService(db_path),
    }


@main.command('list')
@click.option('--json', 'as_json', is_flag=True, default=False, help='Print JSON instead of a table')
@click.pass_context
def list_cmd(ctx, as_json):
    """List all transactions, newest first."""
    try:
        txs = ctx.obj['service'].list_transactions()
    except FinanceVisualizerError as exc:
        _fail(exc)
    if as_json:
        click.echo(json.dumps([tx.to_dict() for tx in txs], indent=2))
        return
    if not txs:
        click.echo("No transactions recorded.")
        return
    for tx in txs:
        click.echo(
            f"{tx.id}  {tx.date}  {_format_amount(ctx, tx.amount):>12}  "
            f"{tx.category:<10} {tx.description}"
        )


@main.command()
@click.option('--amount', required=True, help='Non-negative amount')
@click.option('--date', 'date_str', required=True, help='Date as YYYY-MM-DD')
@click.option('--description', required=True, help='What the money went on')
@category_option
@click.pass_context
def add(ctx, amount, date_str, description, category):
    """Record a new transaction."""
    payload = {'amount': amount, 'date': date_str, 'description': description, 'category': category}
    try:
        tx = ctx.obj['service'].create_transaction(payload)
    except FinanceVisualizerError as exc:
        _fail(exc)
    click.echo(f"Added {tx.id}: {tx.date} {_format_amount(ctx, tx.amount)} {tx.category} {tx.description}")


@main.command()
@click.argument('tx_id')
@click.option('--amount', required=True, help='Non-negative amount')
@click.option('--date', 'date_str', required=True, help='Date as YYYY-MM-DD')
@click.option('--description', required=True, help='What the money went on')
@category_option
@click.pass_context
def edit(ctx, tx_id, amount, date_str, description, category):
    """Replace every field of transaction TX_ID."""
    payload = {
        'id': tx_id,
        'amount': amount,
        'date': date_str,
        'description': description,
        'category': category,
    }
    try:
        tx = ctx.obj['service'].update_transaction(payload)
    except FinanceVisualizerError as exc:
        _fail(exc)
    click.echo(f"Updated {tx.id}: {tx.date} {_format_amount(ctx, tx.amount)} {tx.category} {tx.description}")


@main.command()
@click.argument('tx_id')
@click.pass_context
def delete(ctx, tx_id):
    """Delete transaction TX_ID (unknown ids are ignored)."""
    try:
        removed = ctx.obj['service'].delete_transaction(tx_id)
    except FinanceVisualizerError as exc:
        _fail(exc)
    click.echo(f"Deleted {tx_id}." if removed else f"No transaction {tx_id}; nothing deleted.")


@main.command()
@click.option('--json', 'as_json', is_flag=True, default=False, help='Print JSON instead of text')
@click.pass_context
def summary(ctx, as_json):
    """Show totals, top category, most recent transaction and monthly totals."""
    try:
        data = build_summary(ctx.obj['service'].list_transactions())
    except FinanceVisualizerError as exc:
        _fail(exc)
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    top = data['top_category']
    recent = data['most_recent']
    click.echo(f"Total Expenses: {_format_amount(ctx, data['total'])}")
    click.echo(
        f"Top Category:   {top['category']} ({_format_amount(ctx, top['total'])})" if top
        else "Top Category:   -"
    )
    click.echo(
        f"Most Recent:    {_format_amount(ctx, recent['amount'])} on {recent['date']} "
        f"- {recent['description']} [{recent['category']}]" if recent
        else "Most Recent:    -"
    )
    if data['monthly']:
        click.echo("\nMonthly Expenses:")
        for row in data['monthly']:
            click.echo(f"  {row['month']}  {_format_amount(ctx, row['total'])}")
    if data['categories']:
        click.echo("\nSpending by Category:")
        for row in data['categories']:
            click.echo(f"  {row['category']:<10} {_format_amount(ctx, row['total'])}")


@main.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_cmd(ctx, path):
    """Bulk-create transactions from a YAML list."""
    try:
        created = import_transactions(ctx.obj['service'], path)
    except (ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(f"Error loading {path}: {exc}")
    except FinanceVisualizerError as exc:
        _fail(exc)
    click.echo(f"Imported {len(created)} transaction(s) into {ctx.obj['db_path']}.")


@main.command()
@click.option('--host', default=None, help='Host to bind')
@click.option('--port', default=None, type=int, help='Port to bind')
@click.pass_context
def serve(ctx, host, port):
    """Run the JSON API."""
    from finance_visualizer.web import serve as run_api

    api_cfg = ctx.obj['config']['api']
    run_api(ctx.obj['db_path'], host or api_cfg['host'], port or api_cfg['port'])


@main.command()
@click.option('--host', default=None, help='Host to bind')
@click.option('--port', default=None, type=int, help='Port to bind')
@click.pass_context
def dashboard(ctx, host, port):
    """Run the web dashboard."""
    import uvicorn

    from webapp.main import create_app

    dash_cfg = ctx.obj['config']['dashboard']
    app = create_app(db_path=ctx.obj['db_path'], currency_symbol=ctx.obj['currency_symbol'])
    uvicorn.run(app, host=host or dash_cfg['host'], port=port or dash_cfg['port'])
