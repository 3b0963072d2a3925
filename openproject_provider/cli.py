"""
OpenProject Provider CLI - Declarative OpenProject users in Python.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core import ProvisionerCore
from .errors import ProviderError
from .models import ConnectionContext, RemoteUserRecord
from .reconciler import UserReconciler
from .settings import get_settings

# Setup
app = typer.Typer(
    name="openproject-provider",
    help="Declarative OpenProject user management with Pulumi",
    add_completion=False,
)
console = Console()


def configure_logging():
    """Configure logging based on settings."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.callback()
def main():
    """Declarative OpenProject user management with Pulumi."""
    configure_logging()


APP_URL_OPTION = typer.Option(
    None, "--app-url", help="OpenProject base URL (overrides OP_APP_URL)"
)
APIKEY_OPTION = typer.Option(
    None, "--apikey", help="OpenProject API key (overrides OP_APIKEY)"
)


def _get_main_file() -> Path:
    """Check for main.py in current directory and return Path.

    Raises:
        typer.Exit: If main.py is not found
    """
    main_file = Path.cwd() / "main.py"
    if not main_file.exists():
        console.print(
            "[bold red]✗ Error:[/bold red] No main.py found in current directory"
        )
        console.print(
            "[dim]Hint: cd into your project directory that contains main.py[/dim]"
        )
        raise typer.Exit(code=1)
    return main_file


def _create_command_panel(title: str, color: str, base_url: str) -> Panel:
    """Create a Rich Panel for command display."""
    return Panel.fit(
        f"[bold {color}]{title}[/bold {color}]\n"
        f"Directory: {Path.cwd().name}\n"
        f"OpenProject: {base_url}",
        border_style=color,
    )


def _handle_command_error(e: Exception, command_type: str) -> None:
    """Print a failed command and exit with code 1.

    Raises:
        typer.Exit: Always
    """
    console.print(f"\n[bold red]✗ {command_type.capitalize()} failed:[/bold red] {e}")
    raise typer.Exit(code=1)


def _resolve_context(app_url: str | None, apikey: str | None) -> ConnectionContext:
    try:
        return ConnectionContext.from_settings(
            get_settings(), app_url=app_url, apikey=apikey
        )
    except ProviderError as e:
        _handle_command_error(e, "configuration")


def _run_command(
    command_name: str,
    panel_title: str,
    panel_color: str,
    core_method: str,
    success_handler,
    app_url: str | None = None,
    apikey: str | None = None,
):
    """Execute a pipeline command with common setup and error handling.

    Args:
        command_name: Command name for error messages (e.g., "apply", "plan")
        panel_title: Title for the command panel
        panel_color: Border color for the panel
        core_method: Name of the ProvisionerCore method to call
        success_handler: Callable that takes result dict and prints output
        app_url: Optional OpenProject URL override
        apikey: Optional API key override
    """
    main_file = _get_main_file()

    try:
        core = ProvisionerCore(app_url=app_url, apikey=apikey)
    except ProviderError as e:
        _handle_command_error(e, "configuration")

    console.print(_create_command_panel(panel_title, panel_color, core.context.base_url))

    try:
        result = getattr(core, core_method)(main_file)
    except Exception as e:
        _handle_command_error(e, command_name)

    success_handler(result)


def _print_failure(result: dict, what: str) -> None:
    console.print(
        f"\n[bold red]✗ {what} failed:[/bold red] {result.get('error', 'Unknown error')}"
    )
    raise typer.Exit(code=1)


@app.command()
def apply(app_url: str = APP_URL_OPTION, apikey: str = APIKEY_OPTION):
    """Apply declared users: refresh state, then create/replace/delete as needed."""

    def _handle_success(result):
        if not result.get("success"):
            _print_failure(result, "Deployment")

        console.print("\n[bold green]✓ Deployment successful![/bold green]")
        summary = result.get("summary") or {}
        console.print(f"\n[dim]Result: {summary.get('result', 'unknown')}[/dim]")

        changes = summary.get("resource_changes", {})
        if changes:
            console.print(
                f"[dim]Users: +{changes.get('create', 0)} "
                f"±{changes.get('replace', 0)} -{changes.get('delete', 0)}[/dim]"
            )

        if result.get("outputs"):
            console.print("\n[dim]Outputs:[/dim]")
            for key, value in result["outputs"].items():
                console.print(f"  {key}: {value}")

    _run_command(
        command_name="deployment",
        panel_title="OpenProject Apply",
        panel_color="blue",
        core_method="apply",
        success_handler=_handle_success,
        app_url=app_url,
        apikey=apikey,
    )


@app.command()
def plan(app_url: str = APP_URL_OPTION, apikey: str = APIKEY_OPTION):
    """Preview changes without touching OpenProject."""

    def _handle_success(result):
        preview = result.get("preview", {})
        if not preview.get("success"):
            _print_failure(preview, "Preview")

        console.print("\n[bold]Plan Summary:[/bold]")
        console.print(f"  Declared users: {result['resources']}")

        change_summary = preview.get("summary", {}).get("change_summary", {})
        console.print("\n[bold]Planned Changes (preview only):[/bold]")
        console.print(f"  Would create: {change_summary.get('create', 0)}")
        console.print(f"  Would replace: {change_summary.get('replace', 0)}")
        console.print(f"  Would delete: {change_summary.get('delete', 0)}")

        console.print(
            "\n[dim]Run 'openproject-provider apply' to apply these changes.[/dim]"
        )

    _run_command(
        command_name="plan",
        panel_title="OpenProject Plan",
        panel_color="cyan",
        core_method="plan",
        success_handler=_handle_success,
        app_url=app_url,
        apikey=apikey,
    )


@app.command()
def destroy(app_url: str = APP_URL_OPTION, apikey: str = APIKEY_OPTION):
    """Delete every user managed by this project."""

    def _handle_success(result):
        if not result.get("success"):
            _print_failure(result, "Destroy")

        console.print("\n[bold green]✓ Users destroyed successfully![/bold green]")
        summary = result.get("summary") or {}
        console.print(f"\n[dim]Result: {summary.get('result', 'unknown')}[/dim]")

    _run_command(
        command_name="destroy",
        panel_title="OpenProject Destroy",
        panel_color="red",
        core_method="destroy",
        success_handler=_handle_success,
        app_url=app_url,
        apikey=apikey,
    )


def _record_table(record: RemoteUserRecord) -> Table:
    table = Table(title=f"OpenProject user {record.id}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("login", record.login)
    table.add_row("email", record.email)
    table.add_row("firstname", record.firstname)
    table.add_row("lastname", record.lastname)
    return table


@app.command()
def show(
    user_id: str = typer.Argument(..., help="OpenProject user id"),
    app_url: str = APP_URL_OPTION,
    apikey: str = APIKEY_OPTION,
):
    """Read a user straight from OpenProject."""
    context = _resolve_context(app_url, apikey)
    reconciler = UserReconciler(timeout=get_settings().request_timeout)

    try:
        record = reconciler.read(context, user_id)
    except ProviderError as e:
        _handle_command_error(e, "read")

    if record is None:
        console.print(f"[yellow]⚠ User {user_id} does not exist[/yellow]")
        raise typer.Exit(code=1)

    console.print(_record_table(record))


@app.command()
def delete(
    user_id: str = typer.Argument(..., help="OpenProject user id"),
    app_url: str = APP_URL_OPTION,
    apikey: str = APIKEY_OPTION,
):
    """Delete a user straight from OpenProject (bypasses Pulumi state)."""
    context = _resolve_context(app_url, apikey)
    reconciler = UserReconciler(timeout=get_settings().request_timeout)

    try:
        reconciler.delete(context, user_id)
    except ProviderError as e:
        _handle_command_error(e, "delete")

    console.print(f"[bold green]✓ Deleted user {user_id}[/bold green]")


@app.command()
def version():
    """Show the provider version."""
    from . import __version__

    console.print(f"openproject-provider version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
