"""Identity confirmation — the operator must type the device's own identity."""

from __future__ import annotations

from enum import Enum

from sentinel_wipe.core.models import ConfirmationChallenge, Device

MISMATCH_REASON = "confirmation text did not match"
PLACEHOLDER_PREFIX = "LOOP-"


class Confirmation(Enum):
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class MethodDecision(Enum):
    PROCEED = "proceed"
    CANCEL = "cancel"


def has_reported_serial(device: Device) -> bool:
    return bool(device.serial) and not device.serial_synthesized


def required_token(device: Device) -> str:
    """Serial for real devices that report one, the node otherwise."""
    if not device.is_loopback and has_reported_serial(device):
        return device.serial
    return device.node


def check(challenge: ConfirmationChallenge, typed: str) -> Confirmation:
    """Exact, case-sensitive comparison. No trimming, no fallback."""
    if typed == challenge.token:
        return Confirmation.CONFIRMED
    return Confirmation.REJECTED


class ConfirmationProtocol:
    """Issues challenges and owns the session's placeholder-serial counter.

    A device selected without a serial is given ``LOOP-<n>`` once the
    operator has answered the challenge; ``n`` increases with every
    placeholder handed out during the session. The placeholder is never
    shown on the confirmation screen and never becomes the token.
    """

    def __init__(self, next_placeholder: int = 0):
        self.next_placeholder = next_placeholder

    def challenge(self, device: Device) -> ConfirmationChallenge:
        token = required_token(device)
        uses_serial = not device.is_loopback and has_reported_serial(device)
        if uses_serial:
            prompt = "Type device SERIAL to confirm wipe:"
        else:
            prompt = f"Type device node ({device.node}) to confirm wipe:"
        return ConfirmationChallenge(
            token=token, prompt=prompt, uses_serial=uses_serial
        )

    def assign_placeholder(self, device: Device) -> None:
        """Give a serial-less device its ``LOOP-<n>`` label. Idempotent."""
        if device.serial:
            return
        device.serial = f"{PLACEHOLDER_PREFIX}{self.next_placeholder}"
        device.serial_synthesized = True
        self.next_placeholder += 1
