"""Command runner — invokes the external erase, rescan and Android tools."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from sentinel_wipe.core.config import Settings
from sentinel_wipe.core.models import AndroidMode, CommandResult, WipeMethod

logger = logging.getLogger(__name__)

LSBLK_COMMAND = ["lsblk", "-P", "-o", "NAME,TYPE,SIZE,MODEL,SERIAL,ROTA"]


class CommandRunner:
    """Runs every out-of-process collaborator the console depends on.

    Every call blocks until the child exits. Erase, detect and wipe commands
    are bounded only when ``settings.command_timeout`` is set.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    # ── Inventory source ─────────────────────────────────────────────

    def list_block_devices(self) -> str:
        """Return raw ``lsblk -P`` output, or "" when it is unavailable."""
        try:
            result = subprocess.run(
                LSBLK_COMMAND,
                capture_output=True,
                text=True,
                timeout=self.settings.command_timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Block device listing unavailable: %s", e)
            return ""
        if result.returncode != 0:
            logger.warning(
                "lsblk exited with %d: %s",
                result.returncode, result.stderr.strip(),
            )
            return ""
        return result.stdout

    # ── Erase executor ───────────────────────────────────────────────

    def erase(self, node: str, method: WipeMethod, real: bool) -> CommandResult:
        """Run the wipe script for ``node``; real devices get FORCE_REAL=1."""
        argv = ["bash", self.settings.wipe_script, node, method.value]
        env: Optional[dict[str, str]] = None
        if real:
            if self.settings.use_sudo:
                argv = ["FORCE_REAL=1"] + argv
            else:
                env = {**os.environ, "FORCE_REAL": "1"}
        logger.info("Dispatching %s on %s (real=%s)", method.value, node, real)
        return self._run_logged(
            self._privileged(argv), self.settings.wipe_log, env=env
        )

    def rescan(self, node: str) -> None:
        """Ask the kernel to re-read the partition table. Never raises."""
        try:
            subprocess.run(
                self._privileged(["partprobe", node]),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.settings.command_timeout,
            )
        except Exception as e:
            logger.debug("partprobe %s failed: %s", node, e)

    def signature_report(self, node: str) -> str:
        """Return ``wipefs`` output for ``node``, or "" on any failure."""
        try:
            result = subprocess.run(
                self._privileged(["wipefs", node]),
                capture_output=True,
                text=True,
                timeout=self.settings.command_timeout,
            )
        except Exception as e:
            logger.debug("wipefs %s failed: %s", node, e)
            return ""
        return result.stdout if result.returncode == 0 else ""

    # ── Android detector / wiper ─────────────────────────────────────

    def detect_android(self, mode: AndroidMode) -> CommandResult:
        """Run the detector; the detector log is returned in ``stdout``."""
        result = self._run_logged(
            ["bash", self.settings.detect_script, mode.value],
            self.settings.detect_log,
        )
        result.stdout = _read_log(self.settings.detect_log)
        return result

    def wipe_android(self, mode: AndroidMode, identifier: str) -> CommandResult:
        logger.info("Dispatching Android wipe of %s via %s", identifier, mode.value)
        return self._run_logged(
            ["bash", self.settings.android_wipe_script, mode.value, identifier],
            self.settings.android_log,
        )

    def list_adb_devices(self) -> list[str]:
        """Return the device lines of ``adb devices -l``."""
        try:
            result = subprocess.run(
                ["adb", "devices", "-l"],
                capture_output=True, text=True, timeout=10,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("adb unavailable: %s", e)
            return []
        return [
            line.strip()
            for line in result.stdout.splitlines()
            if "device" in line and "List" not in line
        ]

    # ── Helpers ──────────────────────────────────────────────────────

    def _privileged(self, argv: list[str]) -> list[str]:
        return ["sudo"] + argv if self.settings.use_sudo else argv

    def _run_logged(
        self,
        argv: list[str],
        log_path: str,
        env: Optional[dict[str, str]] = None,
    ) -> CommandResult:
        """Run ``argv`` with stdout and stderr redirected into ``log_path``."""
        timeout = self.settings.command_timeout
        try:
            with open(log_path, "w") as log:
                proc = subprocess.run(
                    argv,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    env=env,
                    timeout=timeout,
                )
        except subprocess.TimeoutExpired:
            return CommandResult(
                success=False,
                exit_code=-1,
                log_path=log_path,
                error=f"Command timed out after {timeout:g} seconds",
            )
        except OSError as e:
            return CommandResult(
                success=False,
                exit_code=-1,
                log_path=log_path,
                error=f"Could not run {argv[0]}: {e}",
            )
        return CommandResult(
            success=proc.returncode == 0,
            exit_code=proc.returncode,
            log_path=log_path,
        )


def _read_log(path: str) -> str:
    try:
        return Path(path).read_text(errors="replace")
    except OSError:
        return ""
