"""Terminal front end — rich presenter and single-key input."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console, Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from sentinel_wipe.core.models import (
    AndroidView,
    ConfirmView,
    DiskListView,
    InputEvent,
    MenuView,
    MethodView,
    ProgressView,
    ResultView,
    View,
)

TITLE = "VOID - SECURE WIPE UTILITY"
SUBTITLE = "Secure Device Erasure & Attestation"

KEYMAP: dict[str, InputEvent] = {
    "\x1b[A": InputEvent.UP,
    "\x1b[B": InputEvent.DOWN,
    "\xe0H": InputEvent.UP,
    "\xe0P": InputEvent.DOWN,
    "k": InputEvent.UP,
    "j": InputEvent.DOWN,
    "\r": InputEvent.CONFIRM,
    "\n": InputEvent.CONFIRM,
    "b": InputEvent.BACK,
    "B": InputEvent.BACK,
    "q": InputEvent.QUIT,
    "Q": InputEvent.QUIT,
    "r": InputEvent.REFRESH,
    "R": InputEvent.REFRESH,
    "1": InputEvent.MODE_1,
    "2": InputEvent.MODE_2,
}


def map_key(key: str) -> InputEvent:
    return KEYMAP.get(key, InputEvent.OTHER)


class KeyboardInput:
    """Blocking operator input read straight from the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def next_event(self) -> InputEvent:
        try:
            return map_key(typer.getchar())
        except (KeyboardInterrupt, EOFError):
            return InputEvent.QUIT

    def read_line(self, prompt: str) -> str:
        # Console.input keeps the text exactly as typed.
        try:
            return self.console.input(f"[bold]{prompt}[/] ")
        except (KeyboardInterrupt, EOFError):
            return ""


class RichPresenter:
    """Renders controller view-state. Never feeds anything back."""

    def __init__(self, console: Optional[Console] = None, clear: bool = True):
        self.console = console or Console()
        self.clear = clear

    def render(self, view: View) -> None:
        if self.clear:
            self.console.clear()
        self.console.print(Text(TITLE, style="bold", justify="center"))
        self.console.print(Text(SUBTITLE, style="dim", justify="center"))

        if isinstance(view, MenuView):
            self._menu(view)
        elif isinstance(view, DiskListView):
            self._disks(view)
        elif isinstance(view, ConfirmView):
            self._confirm(view)
        elif isinstance(view, MethodView):
            self._method(view)
        elif isinstance(view, ProgressView):
            self._progress(view)
        elif isinstance(view, ResultView):
            self._result(view)
        elif isinstance(view, AndroidView):
            self._android(view)

    def _menu(self, view: MenuView) -> None:
        lines = []
        for i, item in enumerate(view.items):
            if i == view.highlight:
                lines.append(Text(f"> {item}", style="bold black on green"))
            else:
                lines.append(Text(f"  {item}"))
        self.console.print(Panel(Group(*lines), title="Select Wipe Mode"))
        self.console.print("[dim]UP/DOWN: Navigate  ENTER: Select  Q: Quit[/]")

    def _disks(self, view: DiskListView) -> None:
        if not view.devices:
            body = Text("No disks detected", style="yellow")
        else:
            body = Table(box=None, show_header=True, expand=True)
            body.add_column("")
            body.add_column("Device", style="cyan")
            body.add_column("Type")
            body.add_column("Model")
            body.add_column("Size", justify="right")
            for i, dev in enumerate(view.devices):
                style = "bold black on green" if i == view.highlight else None
                body.add_row(
                    ">" if i == view.highlight else "",
                    Text(dev.node),
                    Text(f"[{dev.kind}]"),
                    Text(dev.model or "Unknown"),
                    Text(dev.size),
                    style=style,
                )
        self.console.print(Panel(body, title="Available Disks"))
        self.console.print(
            "[dim]UP/DOWN: Navigate  ENTER: Wipe  R: Refresh  B: Back  Q: Quit[/]"
        )

    def _confirm(self, view: ConfirmView) -> None:
        dev = view.device
        table = Table.grid(padding=(0, 2))
        table.add_row("Selected:", Text(dev.node))
        table.add_row("Model:", Text(dev.model or "Unknown"))
        table.add_row("Serial:", Text(dev.serial or "N/A"))
        table.add_row("Size:", Text(dev.size))
        warning = Text(
            "WARNING: ALL DATA WILL BE PERMANENTLY ERASED!", style="bold red"
        )
        self.console.print(Panel(
            Group(table, Text(""), warning),
            title="Confirm Device Wipe",
            border_style="red",
        ))

    def _method(self, view: MethodView) -> None:
        lines = [
            Text(f"Device:  {view.device.node}"),
            Text(f"Method:  {view.method.value}"),
        ]
        if view.force_real:
            lines.append(Text(
                "Note: FORCE_REAL=1 will be set for real device operation",
                style="yellow",
            ))
        self.console.print(Panel(Group(*lines), title="Confirm Wipe Method"))
        self.console.print("[dim]Press ENTER to proceed, B to cancel[/]")

    def _progress(self, view: ProgressView) -> None:
        parts = [Text(view.message, style="bold", justify="center")]
        if view.percent is not None:
            parts.append(ProgressBar(total=100, completed=view.percent, width=40))
            parts.append(Text(f"{view.percent}%", justify="center"))
        self.console.print(Panel(Group(*parts), title=view.title))

    def _result(self, view: ResultView) -> None:
        color = "green" if view.success else "red"
        status = "[SUCCESS]" if view.success else "[FAILED]"
        parts = [
            Text(status, style=f"bold {color}", justify="center"),
            Text(view.message, justify="center"),
        ]
        if view.details:
            parts.append(Text(""))
            parts.append(Text("Details:"))
            parts.append(Text(view.details.rstrip("\n"), style="dim"))
        self.console.print(
            Panel(Group(*parts), title=view.title, border_style=color)
        )
        self.console.print("[dim]Press any key to continue...[/]")

    def _android(self, view: AndroidView) -> None:
        parts = [
            Text("Detection Mode:"),
            Text(f"  > {view.mode.value}", style="bold black on green"),
            Text(""),
        ]
        if view.identifier:
            parts.append(Text("Detected Device:", style="green"))
            parts.append(Text(f"  {view.identifier}"))
        else:
            parts.append(Text("No device detected", style="yellow"))
        parts.append(Text(""))
        parts.append(Text("Options:"))
        parts.extend(Text(f"  {opt}") for opt in view.options)
        self.console.print(Panel(Group(*parts), title="Android Device Wipe"))
        self.console.print("[dim]1/2: Mode | R: Scan | ENTER: Wipe | B: Back | Q: Quit[/]")
