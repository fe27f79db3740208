"""Android session — mode selection, detection and wipe dispatch."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from sentinel_wipe.core.models import AndroidMode, AndroidTarget, AndroidView

FOUND_MARKER = "Found"


class AndroidState(Enum):
    MODE_SELECT = "mode_select"
    DETECTING = "detecting"
    DETECTED = "detected"
    WIPING = "wiping"
    RESULT = "result"


def parse_detection_log(text: str) -> str:
    """Return the token after the last space of the first "Found" line."""
    for line in text.splitlines():
        if FOUND_MARKER in line:
            pos = line.rfind(" ")
            return line[pos + 1:] if pos != -1 else ""
    return ""


class AndroidSession:
    """State machine for one visit to the Android flow.

    The session performs no I/O: the controller runs the detector and wiper
    and feeds their results back through ``finish_detection`` and
    ``finish_wipe``.
    """

    def __init__(self, mode: AndroidMode = AndroidMode.BOOTLOADER):
        self.initial_mode = mode
        self.state = AndroidState.MODE_SELECT
        self.target = AndroidTarget(mode=mode)
        self.last_success: Optional[bool] = None

    @property
    def mode(self) -> AndroidMode:
        return self.target.mode

    def reset(self) -> None:
        self.state = AndroidState.MODE_SELECT
        self.target = AndroidTarget(mode=self.initial_mode)
        self.last_success = None

    def switch_mode(self, mode: AndroidMode) -> None:
        """Change protocol. Any detected target belongs to the old mode."""
        self.target = AndroidTarget(mode=mode)
        self.state = AndroidState.MODE_SELECT

    def begin_detection(self) -> None:
        self.target = AndroidTarget(mode=self.mode)
        self.state = AndroidState.DETECTING

    def finish_detection(self, log_text: str) -> bool:
        if self.state is not AndroidState.DETECTING:
            raise ValueError(f"Not detecting (state: {self.state.value})")
        identifier = parse_detection_log(log_text)
        self.target = AndroidTarget(mode=self.mode, identifier=identifier)
        self.state = (
            AndroidState.DETECTED if identifier else AndroidState.MODE_SELECT
        )
        return bool(identifier)

    def begin_wipe(self) -> AndroidTarget:
        if self.state is not AndroidState.DETECTED or not self.target.detected:
            raise ValueError("No Android device detected")
        self.state = AndroidState.WIPING
        return AndroidTarget(mode=self.mode, identifier=self.target.identifier)

    def finish_wipe(self, success: bool) -> None:
        if self.state is not AndroidState.WIPING:
            raise ValueError(f"Not wiping (state: {self.state.value})")
        self.last_success = success
        self.target = AndroidTarget(mode=self.mode)
        self.state = AndroidState.RESULT

    def acknowledge(self) -> None:
        if self.state is AndroidState.RESULT:
            self.state = AndroidState.MODE_SELECT

    def view(self) -> AndroidView:
        options = [
            "[1] Switch to fastboot mode",
            "[2] Switch to ADB mode",
            "[R] Rescan devices",
        ]
        if self.target.detected:
            options.append("[ENTER] Wipe device")
        else:
            options.append("[ENTER] Scan for devices")
        return AndroidView(
            state=self.state.value,
            mode=self.mode,
            identifier=self.target.identifier,
            options=options,
        )
