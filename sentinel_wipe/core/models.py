"""Core data models for sentinel-wipe."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

DEVICE_ROOT = "/dev/"


class WipeMethod(Enum):
    NVME_FORMAT = "nvme-format"
    WIPEFS_ZAP = "wipefs-zap"
    ATA_SECURE_ERASE = "ata-secure-erase"
    OVERWRITE_ZERO = "overwrite-zero"


class AndroidMode(Enum):
    BOOTLOADER = "fastboot"
    DEBUG_BRIDGE = "adb"


class WipeVerdict(Enum):
    REMOVED = "removed"
    STILL_VISIBLE = "still-visible"
    FAILED = "failed"


class Failure(Enum):
    SOURCE_UNAVAILABLE = "source_unavailable"
    CONFIRMATION_MISMATCH = "confirmation_mismatch"
    EXECUTION_FAILURE = "execution_failure"
    DETECTION_FAILURE = "detection_failure"
    OPERATOR_ABORT = "operator_abort"


class InputEvent(Enum):
    UP = "up"
    DOWN = "down"
    CONFIRM = "confirm"
    BACK = "back"
    QUIT = "quit"
    REFRESH = "refresh"
    MODE_1 = "mode_1"
    MODE_2 = "mode_2"
    OTHER = "other"


@dataclass
class Device:
    name: str
    node: str
    model: str = ""
    serial: str = ""
    size: str = ""
    rotational: bool = False
    serial_synthesized: bool = False

    @property
    def is_loopback(self) -> bool:
        # node is always <root><name>, whatever the root.
        return self.name.startswith("loop")

    @property
    def kind(self) -> str:
        if "nvme" in self.name:
            return "NVMe"
        if self.is_loopback:
            return "Loop"
        return "HDD" if self.rotational else "SSD"


@dataclass
class AndroidTarget:
    mode: AndroidMode = AndroidMode.BOOTLOADER
    identifier: str = ""

    @property
    def detected(self) -> bool:
        return bool(self.identifier)


@dataclass(frozen=True)
class ConfirmationChallenge:
    token: str
    prompt: str
    uses_serial: bool


@dataclass
class CommandResult:
    success: bool
    exit_code: int = 0
    stdout: str = ""
    log_path: Optional[str] = None
    error: str = ""


@dataclass
class WipeOutcome:
    verdict: WipeVerdict
    node: str
    method: WipeMethod
    exit_code: int
    details: str = ""

    @property
    def success(self) -> bool:
        return self.verdict is not WipeVerdict.FAILED


# ---------------------------------------------------------------------------
# View state pushed to the presentation sink
# ---------------------------------------------------------------------------

@dataclass
class MenuView:
    items: list[str]
    highlight: int


@dataclass
class DiskListView:
    devices: list[Device]
    highlight: int


@dataclass
class ConfirmView:
    device: Device
    challenge: ConfirmationChallenge


@dataclass
class MethodView:
    device: Device
    method: WipeMethod
    force_real: bool


@dataclass
class ProgressView:
    title: str
    message: str
    percent: Optional[int] = None


@dataclass
class ResultView:
    success: bool
    title: str
    message: str
    details: str = ""
    failure: Optional[Failure] = None


@dataclass
class AndroidView:
    state: str
    mode: AndroidMode
    identifier: str = ""
    options: list[str] = field(default_factory=list)


View = Union[
    MenuView,
    DiskListView,
    ConfirmView,
    MethodView,
    ProgressView,
    ResultView,
    AndroidView,
]
