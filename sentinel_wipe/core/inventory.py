"""Inventory — turns ``lsblk -P`` listings into Device records."""

from __future__ import annotations

import logging
import re

from sentinel_wipe.core.models import DEVICE_ROOT, Device

logger = logging.getLogger(__name__)

WIPEABLE_TYPES = ("disk", "loop")

# KEY="quoted value" or KEY=bare-token; unterminated quotes fall through to
# the bare-token branch and keep their quote character.
_TOKEN_RE = re.compile(r'(?<!\S)([^\s=]+)=("[^"]*"(?=\s|$)|\S*)')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


def split_tokens(line: str) -> dict[str, str]:
    """Parse one listing line into a key→value mapping. Last key wins."""
    fields: dict[str, str] = {}
    for key, value in _TOKEN_RE.findall(line):
        fields[key] = _unquote(value)
    return fields


def device_node(name: str, root: str = DEVICE_ROOT) -> str:
    return root + name


def parse_listing(text: str, root: str = DEVICE_ROOT) -> list[Device]:
    """Return the disk and loop devices described by ``text``, in order.

    Nodes are unique within a snapshot; a repeated NAME keeps its first row.
    """
    devices: list[Device] = []
    seen: set[str] = set()
    for line in text.splitlines():
        fields = split_tokens(line)
        if fields.get("TYPE", "") not in WIPEABLE_TYPES:
            continue
        name = fields.get("NAME", "")
        node = device_node(name, root)
        if node in seen:
            logger.debug("Skipping duplicate listing row for %s", node)
            continue
        seen.add(node)
        devices.append(Device(
            name=name,
            node=node,
            model=fields.get("MODEL", ""),
            serial=fields.get("SERIAL", ""),
            size=fields.get("SIZE", ""),
            rotational=fields.get("ROTA", "") == "1",
        ))
    return devices


def read_inventory(runner, root: str = DEVICE_ROOT) -> list[Device]:
    """Take a fresh snapshot. An unavailable source yields an empty list."""
    return parse_listing(runner.list_block_devices(), root)
