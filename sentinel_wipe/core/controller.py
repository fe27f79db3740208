"""Session controller — main menu, local-disk flow and Android flow."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Protocol

from sentinel_wipe.core.android import AndroidSession
from sentinel_wipe.core.confirmation import (
    Confirmation,
    ConfirmationProtocol,
    MethodDecision,
    check,
)
from sentinel_wipe.core.inventory import read_inventory
from sentinel_wipe.core.methods import select_method
from sentinel_wipe.core.models import (
    DEVICE_ROOT,
    AndroidMode,
    ConfirmView,
    Device,
    DiskListView,
    Failure,
    InputEvent,
    MenuView,
    MethodView,
    ProgressView,
    ResultView,
    View,
    WipeOutcome,
)
from sentinel_wipe.core.verification import VERDICT_MESSAGES, verify_wipe

logger = logging.getLogger(__name__)

MENU_ITEMS = [
    "Local Disks (NVMe, SSD, HDD)",
    "Android / USB Devices",
]


class Screen(Enum):
    MAIN_MENU = "main_menu"
    LOCAL_DISKS = "local_disks"
    ANDROID = "android"


class PresentationSink(Protocol):
    def render(self, view: View) -> None: ...


class InputSource(Protocol):
    def next_event(self) -> InputEvent: ...

    def read_line(self, prompt: str) -> str: ...


def clamp_highlight(index: int, count: int) -> int:
    """Keep ``index`` inside a list of ``count`` items (0 when empty)."""
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


class SessionController:
    """Owns all console state and drives it one operator event at a time."""

    def __init__(
        self,
        runner,
        input_source: InputSource,
        sink: PresentationSink,
        store=None,
        root: str = DEVICE_ROOT,
    ):
        self.runner = runner
        self.input = input_source
        self.sink = sink
        self.store = store
        self.root = root

        self.screen = Screen.MAIN_MENU
        self.menu_highlight = 0
        self.devices: list[Device] = []
        self.highlight = 0
        self.confirmation = ConfirmationProtocol()
        self.android = AndroidSession()
        self.finished = False

    def run(self) -> None:
        """Block on operator input until quit."""
        while not self.finished:
            self.render()
            self.handle(self.input.next_event())

    def render(self) -> None:
        if self.screen is Screen.MAIN_MENU:
            self.sink.render(MenuView(list(MENU_ITEMS), self.menu_highlight))
        elif self.screen is Screen.LOCAL_DISKS:
            self.sink.render(DiskListView(list(self.devices), self.highlight))
        else:
            self.sink.render(self.android.view())

    def handle(self, event: InputEvent) -> None:
        if event is InputEvent.QUIT:
            self.finished = True
            return
        if self.screen is Screen.MAIN_MENU:
            self._handle_menu(event)
        elif self.screen is Screen.LOCAL_DISKS:
            self._handle_local(event)
        else:
            self._handle_android(event)

    # ── Main menu ────────────────────────────────────────────────────

    def _handle_menu(self, event: InputEvent) -> None:
        if event is InputEvent.UP:
            self.menu_highlight = clamp_highlight(
                self.menu_highlight - 1, len(MENU_ITEMS)
            )
        elif event is InputEvent.DOWN:
            self.menu_highlight = clamp_highlight(
                self.menu_highlight + 1, len(MENU_ITEMS)
            )
        elif event is InputEvent.CONFIRM:
            if self.menu_highlight == 0:
                self.enter_local_disks()
            else:
                self.enter_android()

    def enter_local_disks(self) -> None:
        self.screen = Screen.LOCAL_DISKS
        self.highlight = 0
        self.refresh()

    def enter_android(self) -> None:
        self.screen = Screen.ANDROID
        self.android.reset()

    def back_to_menu(self) -> None:
        self.screen = Screen.MAIN_MENU
        self.android.reset()

    # ── Local disks ──────────────────────────────────────────────────

    def _handle_local(self, event: InputEvent) -> None:
        if event is InputEvent.UP:
            self.highlight = clamp_highlight(self.highlight - 1, len(self.devices))
        elif event is InputEvent.DOWN:
            self.highlight = clamp_highlight(self.highlight + 1, len(self.devices))
        elif event is InputEvent.REFRESH:
            self.refresh()
        elif event is InputEvent.BACK:
            self.back_to_menu()
        elif event is InputEvent.CONFIRM and self.devices:
            self.wipe_selected()

    def refresh(self) -> None:
        """Replace the snapshot wholesale and clamp the highlight."""
        self.devices = read_inventory(self.runner, self.root)
        self.highlight = clamp_highlight(self.highlight, len(self.devices))

    def confirm_identity(self, device: Device) -> Confirmation:
        challenge = self.confirmation.challenge(device)
        self.sink.render(ConfirmView(device, challenge))
        typed = self.input.read_line(challenge.prompt)
        self.confirmation.assign_placeholder(device)
        return check(challenge, typed)

    def confirm_method(self, device: Device, method) -> MethodDecision:
        self.sink.render(MethodView(
            device=device, method=method, force_real=not device.is_loopback,
        ))
        event = self.input.next_event()
        if event is InputEvent.QUIT:
            self.finished = True
        if event is InputEvent.CONFIRM:
            return MethodDecision.PROCEED
        return MethodDecision.CANCEL

    def wipe_selected(self) -> Optional[WipeOutcome]:
        """Run the full gate → dispatch → verify pipeline on the highlight."""
        if not self.devices:
            return None
        device = self.devices[self.highlight]

        if self.confirm_identity(device) is Confirmation.REJECTED:
            logger.info("Confirmation mismatch for %s", device.node)
            self._show_result(ResultView(
                success=False,
                title="Wipe Cancelled",
                message="Serial/node mismatch",
                details=(
                    "The confirmation text did not match. "
                    "Operation aborted for safety."
                ),
                failure=Failure.CONFIRMATION_MISMATCH,
            ))
            return None

        method = select_method(device)
        if self.confirm_method(device, method) is MethodDecision.CANCEL:
            return None

        self.sink.render(ProgressView(
            title="Wiping Device",
            message="Please wait... This may take several minutes",
        ))
        result = self.runner.erase(device.node, method, real=not device.is_loopback)
        outcome = verify_wipe(self.runner, device.node, method, result, self.root)
        self._journal(
            target=device.node,
            target_kind=device.kind,
            method=method.value,
            verdict=outcome.verdict.value,
            success=outcome.success,
            exit_code=outcome.exit_code,
            log_path=result.log_path,
        )

        self._show_result(ResultView(
            success=outcome.success,
            title="Wipe Complete" if outcome.success else "Wipe Failed",
            message=VERDICT_MESSAGES[outcome.verdict],
            details=outcome.details,
            failure=None if outcome.success else Failure.EXECUTION_FAILURE,
        ))
        self.refresh()
        return outcome

    # ── Android ──────────────────────────────────────────────────────

    def _handle_android(self, event: InputEvent) -> None:
        if event is InputEvent.MODE_1:
            self.android.switch_mode(AndroidMode.BOOTLOADER)
        elif event is InputEvent.MODE_2:
            self.android.switch_mode(AndroidMode.DEBUG_BRIDGE)
        elif event is InputEvent.BACK:
            self.back_to_menu()
        elif event is InputEvent.REFRESH:
            self.detect_android()
        elif event is InputEvent.CONFIRM:
            if self.android.target.detected:
                self.wipe_android()
            else:
                self.detect_android()

    def detect_android(self) -> bool:
        mode = self.android.mode
        self.android.begin_detection()
        self.sink.render(ProgressView(
            title="Detecting Android Devices",
            message=f"Scanning for {mode.value} devices...",
        ))
        result = self.runner.detect_android(mode)
        found = self.android.finish_detection(result.stdout)
        if not found:
            self._show_result(ResultView(
                success=False,
                title="Detection Failed",
                message=f"No {mode.value} device found",
                details="Make sure device is connected and in correct mode",
                failure=Failure.DETECTION_FAILURE,
            ))
        return found

    def wipe_android(self) -> bool:
        target = self.android.begin_wipe()
        self.sink.render(ProgressView(
            title="Wiping Android Device",
            message=f"Wiping {target.identifier} via {target.mode.value}",
        ))
        result = self.runner.wipe_android(target.mode, target.identifier)
        self.android.finish_wipe(result.success)
        self._journal(
            target=target.identifier,
            target_kind="android",
            method=target.mode.value,
            verdict="complete" if result.success else "failed",
            success=result.success,
            exit_code=result.exit_code,
            log_path=result.log_path,
        )

        details = (
            f"Device: {target.identifier}\n"
            f"Mode: {target.mode.value}\n"
            f"Log: {result.log_path}"
        )
        if result.error:
            details += f"\nError: {result.error}"
        self._show_result(ResultView(
            success=result.success,
            title="Android Wipe",
            message=(
                "Device wipe completed" if result.success
                else "Wipe operation failed"
            ),
            details=details,
            failure=None if result.success else Failure.EXECUTION_FAILURE,
        ))
        self.android.acknowledge()
        return result.success

    # ── Helpers ──────────────────────────────────────────────────────

    def _show_result(self, view: ResultView) -> None:
        """Render a result and wait for any key; quit is still honored."""
        self.sink.render(view)
        if self.input.next_event() is InputEvent.QUIT:
            self.finished = True

    def _journal(self, **entry) -> None:
        if self.store is None:
            return
        try:
            self.store.record_wipe(**entry)
        except Exception:
            logger.warning("Failed to record wipe in journal", exc_info=True)
