from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from fleet_commander.state import DiagnosticResult


class BackendError(RuntimeError):
    """A backend call failed (transport, process launch, remote exit status)."""


class Backend(Protocol):
    """
    Privileged operations the panel delegates to.

    Every method is a single request that suspends the caller until a response
    or an error arrives. Implementations raise on failure; an individual device
    being unreachable is not a failure and is reported as False.
    """

    async def check_batch_connections(self, targets: Sequence[str]) -> dict[str, bool]:
        ...

    async def open_ssh_terminal(
        self, hostname: str, ip: str, run_ros: bool, remote_command: str
    ) -> None:
        ...

    async def exec_shutdown_command(self, hostname: str) -> None:
        ...

    async def run_system_check(self, hostname: str) -> DiagnosticResult:
        ...
