"""Settings resolution — CLI flag → env var → local store → default."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "SENTINEL_WIPE_"

DEFAULTS: dict[str, str] = {
    "wipe_script": "/opt/sentinel/scripts/wipe-device.sh",
    "detect_script": "/opt/sentinel/scripts/detect-android.sh",
    "android_wipe_script": "/opt/sentinel/scripts/android-wipe.sh",
    "wipe_log": "/tmp/sentinel-wipe.log",
    "detect_log": "/tmp/sentinel-detect.log",
    "android_log": "/tmp/sentinel-android.log",
    "use_sudo": "true",
    "command_timeout": "",
}

_TRUE = ("1", "true", "on", "yes")
_FALSE = ("0", "false", "off", "no")


@dataclass
class Settings:
    wipe_script: str
    detect_script: str
    android_wipe_script: str
    wipe_log: str
    detect_log: str
    android_log: str
    use_sudo: bool = True
    command_timeout: Optional[float] = None


def validate_config_value(key: str, value: str) -> str:
    """Return the normalized value, or raise ValueError."""
    if key not in DEFAULTS:
        raise ValueError(
            f"Unknown config key: {key}. "
            f"Valid keys: {', '.join(sorted(DEFAULTS))}"
        )
    if key == "use_sudo":
        lowered = value.strip().lower()
        if lowered not in _TRUE + _FALSE:
            raise ValueError("use_sudo must be on/off or true/false")
        return "true" if lowered in _TRUE else "false"
    if key == "command_timeout":
        if value.strip().lower() in ("", "none", "off"):
            return ""
        try:
            seconds = float(value)
        except ValueError:
            raise ValueError("command_timeout must be a number of seconds")
        if seconds <= 0:
            raise ValueError("command_timeout must be positive")
        return str(seconds)
    if not value:
        raise ValueError(f"{key} must not be empty")
    return value


def _lookup(key: str, overrides: dict[str, Any], store) -> str:
    value = overrides.get(key)
    if value is not None:
        return str(value)
    env_value = os.environ.get(ENV_PREFIX + key.upper())
    if env_value:
        return env_value
    if store is not None:
        try:
            stored = store.get_config(key)
        except Exception:
            logger.debug("Config store lookup failed for %s", key, exc_info=True)
            stored = None
        if stored:
            return stored
    return DEFAULTS[key]


def resolve_settings(
    overrides: Optional[dict[str, Any]] = None, store=None
) -> Settings:
    """Build Settings from overrides, environment, store and defaults."""
    overrides = overrides or {}
    raw = {key: _lookup(key, overrides, store) for key in DEFAULTS}

    use_sudo = raw["use_sudo"].strip().lower() not in _FALSE
    timeout: Optional[float] = None
    if raw["command_timeout"]:
        try:
            timeout = float(raw["command_timeout"])
        except ValueError:
            logger.warning(
                "Ignoring invalid command_timeout %r", raw["command_timeout"]
            )
        else:
            if timeout <= 0:
                timeout = None

    return Settings(
        wipe_script=raw["wipe_script"],
        detect_script=raw["detect_script"],
        android_wipe_script=raw["android_wipe_script"],
        wipe_log=raw["wipe_log"],
        detect_log=raw["detect_log"],
        android_log=raw["android_log"],
        use_sudo=use_sudo,
        command_timeout=timeout,
    )
