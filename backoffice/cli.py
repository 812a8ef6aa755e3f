"""Back office CLI - serve the API and run syncs from a terminal."""

import asyncio
import json
import uuid
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from panelkit.api.errors import ControlPanelError

from .database import async_session_factory
from .services import control_panel_svc
from .sync import sync_engine
from .sync.errors import SyncError

app = typer.Typer(
    name="backoffice",
    help="Hosting back office - control panel reconciliation",
    no_args_is_help=True,
)
console = Console()

sync_app = typer.Typer(help="Reconcile local records with the control panel")
panels_app = typer.Typer(help="Control panel connectivity and plans")

app.add_typer(sync_app, name="sync")
app.add_typer(panels_app, name="panels")


def _output_result(result: Any) -> None:
    if hasattr(result, "model_dump"):
        result = result.model_dump(mode="json")
    console.print_json(json.dumps(result, default=str, indent=2))


def _run(operation, *args, **kwargs) -> Any:
    """Run an engine operation in a fresh session; errors exit with status 1."""

    async def _go():
        async with async_session_factory() as db:
            return await operation(db, *args, **kwargs)

    try:
        return asyncio.run(_go())
    except (SyncError, ControlPanelError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1)


def _parse_id(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise typer.BadParameter(f"not a valid id: {value}")


@app.command("serve")
def serve(
    port: int = typer.Option(8030, "--port", "-p", help="Port to run on"),
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Launch the back office JSON API."""
    try:
        import uvicorn
    except ImportError:
        console.print("[red]Missing dependencies. Install with: pip install -e '.[server]'[/red]")
        raise typer.Exit(1)

    console.print(f"[bold cyan]Starting back office at http://{host}:{port}[/bold cyan]")
    uvicorn.run("backoffice.app:app", host=host, port=port, reload=reload)


# ============================================================================
# Sync Commands
# ============================================================================


@sync_app.command("customer")
def sync_customer(customer_id: str = typer.Argument(..., help="Local customer ID")):
    """Find or create the customer's remote account."""
    _output_result(_run(sync_engine.sync_customer, _parse_id(customer_id)))


@sync_app.command("hosting")
def sync_hosting(hosting_id: str = typer.Argument(..., help="Local hosting ID")):
    """Sync a hosting record's subscription."""
    _output_result(_run(sync_engine.sync_hosting, _parse_id(hosting_id)))


@sync_app.command("vps")
def sync_vps(vps_id: str = typer.Argument(..., help="Local VPS ID")):
    """Sync a VPS record's subscription."""
    _output_result(_run(sync_engine.sync_vps, _parse_id(vps_id)))


@sync_app.command("website")
def sync_website(website_id: str = typer.Argument(..., help="Local website ID")):
    """Sync a website and its domain."""
    _output_result(_run(sync_engine.sync_website, _parse_id(website_id)))


@sync_app.command("retry")
def sync_retry(
    limit: int = typer.Option(None, "--limit", "-l", min=1, help="Max records to retry"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Retry records whose last sync failed."""
    report = _run(sync_engine.retry_failed_syncs, limit=limit)

    if json_output:
        _output_result(report)
        return

    console.print(
        f"Retried [bold]{report.attempted}[/bold]: "
        f"[green]{report.succeeded} ok[/green], [red]{report.failed} failed[/red]"
    )
    for error in report.errors:
        console.print(f"  [red]{error}[/red]")


# ============================================================================
# Control Panel Commands
# ============================================================================


@panels_app.command("health")
def panels_health(panel_id: str = typer.Argument(..., help="Control panel ID")):
    """Check connectivity to a control panel."""
    _output_result(_run(control_panel_svc.check_health, _parse_id(panel_id)))


@panels_app.command("plans")
def panels_plans(
    panel_id: str = typer.Argument(..., help="Control panel ID"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List remote plans and whether a mapping uses them."""
    plans = _run(control_panel_svc.list_remote_plans, _parse_id(panel_id))

    if json_output:
        _output_result({"plans": plans})
        return

    table = Table(title=f"Remote Plans ({len(plans)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Mapped", style="green")
    for plan in plans:
        table.add_row(plan["id"], plan["name"] or "-", "yes" if plan["mapped"] else "-")
    console.print(table)


if __name__ == "__main__":
    app()
