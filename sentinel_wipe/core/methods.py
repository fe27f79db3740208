"""Wipe method policy."""

from __future__ import annotations

from sentinel_wipe.core.models import Device, WipeMethod


def select_method(device: Device) -> WipeMethod:
    """Map a device to its erase method. First matching rule wins.

    The checks are positional: a node containing both "nvme" and "loop"
    is formatted as NVMe.
    """
    if "nvme" in device.node:
        return WipeMethod.NVME_FORMAT
    if "loop" in device.node:
        return WipeMethod.WIPEFS_ZAP
    if "sd" in device.node or "ATA" in device.model:
        return WipeMethod.ATA_SECURE_ERASE
    return WipeMethod.OVERWRITE_ZERO
