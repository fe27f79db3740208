"""CLI entry point for sentinel-wipe."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

import sentinel_wipe

app = typer.Typer(
    name="sentinel-wipe",
    help="Operator console for verified storage and Android device erasure.",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger("sentinel_wipe")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _open_store():
    """Open the local store, or return None when it cannot be created."""
    from sentinel_wipe.data.store import DataStore

    try:
        return DataStore()
    except Exception as e:
        logger.warning("Local store unavailable: %s", e)
        return None


def _settings(store, overrides: Optional[dict] = None):
    from sentinel_wipe.core.config import resolve_settings

    return resolve_settings(overrides or {}, store)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging"
    ),
) -> None:
    """Operator console for verified storage and Android device erasure."""
    _configure_logging(verbose)


@app.command()
def run(
    wipe_script: Optional[str] = typer.Option(
        None, "--wipe-script", help="Erase executor script"
    ),
    detect_script: Optional[str] = typer.Option(
        None, "--detect-script", help="Android detector script"
    ),
    android_script: Optional[str] = typer.Option(
        None, "--android-script", help="Android wiper script"
    ),
    sudo: Optional[bool] = typer.Option(
        None, "--sudo/--no-sudo", help="Run privileged commands through sudo"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Abort external commands after N seconds"
    ),
) -> None:
    """Start the interactive wipe console."""
    from sentinel_wipe.core.commands import CommandRunner
    from sentinel_wipe.core.controller import SessionController
    from sentinel_wipe.ui.console import KeyboardInput, RichPresenter

    store = _open_store()
    settings = _settings(store, {
        "wipe_script": wipe_script,
        "detect_script": detect_script,
        "android_wipe_script": android_script,
        "use_sudo": None if sudo is None else str(sudo).lower(),
        "command_timeout": timeout,
    })

    controller = SessionController(
        runner=CommandRunner(settings),
        input_source=KeyboardInput(console),
        sink=RichPresenter(console),
        store=store,
    )
    try:
        controller.run()
    finally:
        if store is not None:
            store.close()
        console.clear()


@app.command("list-disks")
def list_disks() -> None:
    """List wipeable disks with their confirmation token and method."""
    from sentinel_wipe.core.commands import CommandRunner
    from sentinel_wipe.core.confirmation import required_token
    from sentinel_wipe.core.inventory import read_inventory
    from sentinel_wipe.core.methods import select_method

    store = _open_store()
    settings = _settings(store)
    if store is not None:
        store.close()

    devices = read_inventory(CommandRunner(settings))
    if not devices:
        console.print("[yellow]No disks detected.[/]")
        raise typer.Exit(0)

    table = Table(title="Wipeable Disks")
    table.add_column("Device", style="cyan")
    table.add_column("Type")
    table.add_column("Model")
    table.add_column("Serial")
    table.add_column("Size", justify="right")
    table.add_column("Confirm with")
    table.add_column("Method", style="green")

    for dev in devices:
        token = required_token(dev)
        table.add_row(
            dev.node,
            dev.kind,
            dev.model or "Unknown",
            dev.serial or "N/A",
            dev.size,
            "serial" if token != dev.node else "node",
            select_method(dev).value,
        )

    console.print(table)


@app.command("android-devices")
def android_devices() -> None:
    """List devices visible to adb."""
    from sentinel_wipe.core.commands import CommandRunner

    store = _open_store()
    settings = _settings(store)
    if store is not None:
        store.close()

    devices = CommandRunner(settings).list_adb_devices()
    if not devices:
        console.print("[yellow]No adb devices found.[/]")
        raise typer.Exit(0)
    console.print("[bold]ADB devices:[/]")
    for line in devices:
        console.print(f"  {line}", markup=False)


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Entries to show"),
) -> None:
    """Show recently dispatched wipes."""
    store = _open_store()
    if store is None:
        console.print("[red]Local store unavailable.[/]")
        raise typer.Exit(1)
    entries = store.get_wipe_history(limit)
    store.close()

    if not entries:
        console.print("[yellow]No wipes recorded.[/]")
        raise typer.Exit(0)

    table = Table(title="Wipe History")
    table.add_column("When", style="dim")
    table.add_column("Target", style="cyan")
    table.add_column("Kind")
    table.add_column("Method")
    table.add_column("Result")
    table.add_column("Log")

    for entry in entries:
        result = entry["verdict"]
        style = "green" if entry["success"] else "red"
        table.add_row(
            entry["created_at"][:19],
            entry["target"],
            entry["target_kind"],
            entry["method"],
            f"[{style}]{result}[/]",
            entry["log_path"] or "",
        )

    console.print(table)


@app.command()
def config(
    action: str = typer.Argument(
        "get", help="Action: get, set or unset"
    ),
    key: Optional[str] = typer.Argument(
        None, help="Config key (wipe_script, use_sudo, command_timeout, ...)"
    ),
    value: Optional[str] = typer.Argument(
        None, help="Value to set"
    ),
) -> None:
    """View or modify configuration."""
    from sentinel_wipe.core.config import DEFAULTS, validate_config_value
    from sentinel_wipe.data.store import DataStore

    store = DataStore()

    if action == "get":
        if key:
            if key not in DEFAULTS:
                console.print(f"[red]Unknown config key: {key}[/]")
                store.close()
                raise typer.Exit(1)
            val = store.get_config(key)
            console.print(f"{key} = {val or DEFAULTS[key] or '(not set)'}")
        else:
            for k in DEFAULTS:
                val = store.get_config(k)
                console.print(f"{k} = {val or DEFAULTS[k] or '(not set)'}")
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage: sentinel-wipe config set <key> <value>[/]")
            store.close()
            raise typer.Exit(1)
        try:
            normalized = validate_config_value(key, value)
        except ValueError as e:
            console.print(f"[red]{e}[/]")
            store.close()
            raise typer.Exit(1)
        store.set_config(key, normalized)
        console.print(f"[green]Set {key} = {normalized or '(not set)'}[/]")
    elif action == "unset":
        if not key or key not in DEFAULTS:
            console.print("[red]Usage: sentinel-wipe config unset <key>[/]")
            store.close()
            raise typer.Exit(1)
        store.unset_config(key)
        console.print(f"[green]Reset {key} to default[/]")
    else:
        console.print("[red]Unknown action. Use 'get', 'set' or 'unset'.[/]")
        store.close()
        raise typer.Exit(1)

    store.close()


@app.command()
def version() -> None:
    """Print version."""
    console.print(f"sentinel-wipe {sentinel_wipe.__version__}")


if __name__ == "__main__":
    app()
