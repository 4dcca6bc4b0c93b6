from __future__ import annotations

import asyncio
import logging
import subprocess
import sys
from collections.abc import Sequence

from fleet_commander.constants import PING_TIMEOUT_S, SYSTEM_CHECK_COMMAND
from fleet_commander.registry import is_loopback
from fleet_commander.services.backend import BackendError
from fleet_commander.services.report_parser import parse_check_output
from fleet_commander.services.terminal import WindowMode, launch_terminal
from fleet_commander.state import DiagnosticResult


def ping_argv(ip: str, timeout_s: int, platform: str | None = None) -> list[str]:
    platform = platform or sys.platform
    if platform == "win32":
        return ["ping", "-n", "1", "-w", str(timeout_s * 1000), ip]
    return ["ping", "-c", "1", "-W", str(timeout_s), ip]


def session_command(hostname: str, ip: str, run_ros: bool, remote_command: str) -> str:
    """Shell command line for an interactive session on ``hostname``."""
    if is_loopback(ip) or hostname == "localhost":
        if run_ros:
            return f"bash -i -c '{remote_command}'"
        return "echo 'Starting Local Terminal'"
    if run_ros:
        return f"ssh -t {hostname} \"bash -i -c '{remote_command}'\""
    return f"ssh {hostname}"


def shutdown_command(hostname: str) -> str:
    return f'ssh -t {hostname} "sudo shutdown -h now"'


class ShellBackend:
    """
    Backend running everything through local processes: ``ping`` for
    reachability, ``ssh`` for remote work and the host terminal emulator for
    interactive sessions.
    """

    def __init__(self, ping_timeout_s: int = PING_TIMEOUT_S) -> None:
        self.ping_timeout_s = ping_timeout_s

    async def _ping(self, ip: str) -> bool:
        try:
            proc = await asyncio.create_subprocess_exec(
                *ping_argv(ip, self.ping_timeout_s),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
            )
            return await proc.wait() == 0
        except OSError as e:
            logging.debug("ping %s could not run: %s", ip, e)
            return False

    async def check_batch_connections(self, targets: Sequence[str]) -> dict[str, bool]:
        ips = list(dict.fromkeys(targets))
        results = await asyncio.gather(*(self._ping(ip) for ip in ips))
        return dict(zip(ips, results))

    async def open_ssh_terminal(
        self, hostname: str, ip: str, run_ros: bool, remote_command: str
    ) -> None:
        launch_terminal(
            session_command(hostname, ip, run_ros, remote_command), WindowMode.TAB
        )

    async def exec_shutdown_command(self, hostname: str) -> None:
        launch_terminal(shutdown_command(hostname), WindowMode.NEW_WINDOW)

    async def run_system_check(self, hostname: str) -> DiagnosticResult:
        try:
            proc = await asyncio.create_subprocess_exec(
                "ssh",
                hostname,
                SYSTEM_CHECK_COMMAND,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise BackendError(f"SSH execution failed: {e}") from e

        stdout_b, stderr_b = await proc.communicate()
        stdout = stdout_b.decode("utf-8", errors="replace")
        stderr = stderr_b.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            raise BackendError(f"Exit code: {proc.returncode}\nStdErr: {stderr}")

        logging.debug("System check output from %s:\n%s", hostname, stdout)
        return parse_check_output(stdout)
