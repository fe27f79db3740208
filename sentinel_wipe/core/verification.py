"""Post-erase verification — re-enumerate instead of trusting the exit code."""

from __future__ import annotations

from sentinel_wipe.core.inventory import read_inventory
from sentinel_wipe.core.models import (
    DEVICE_ROOT,
    CommandResult,
    Device,
    WipeMethod,
    WipeOutcome,
    WipeVerdict,
)

VERDICT_MESSAGES = {
    WipeVerdict.REMOVED: "Device successfully wiped and removed",
    WipeVerdict.STILL_VISIBLE: "Device wiped but still visible (check details)",
    WipeVerdict.FAILED: "Operation failed - see log for details",
}


def classify(exit_code: int, snapshot: list[Device], node: str) -> WipeVerdict:
    """A zero exit status wins over re-enumeration; non-zero always fails."""
    if exit_code != 0:
        return WipeVerdict.FAILED
    if any(d.node == node for d in snapshot):
        return WipeVerdict.STILL_VISIBLE
    return WipeVerdict.REMOVED


def verify_wipe(
    runner,
    node: str,
    method: WipeMethod,
    result: CommandResult,
    root: str = DEVICE_ROOT,
) -> WipeOutcome:
    runner.rescan(node)
    signatures = runner.signature_report(node)
    snapshot = read_inventory(runner, root)

    exit_code = result.exit_code if result.success else (result.exit_code or 1)
    verdict = classify(exit_code, snapshot, node)

    details = f"Log: {result.log_path}\n" if result.log_path else ""
    if result.error:
        details += f"Error: {result.error}\n"
    if signatures:
        details += "Wipefs output:\n" + signatures
    return WipeOutcome(
        verdict=verdict,
        node=node,
        method=method,
        exit_code=exit_code,
        details=details,
    )
