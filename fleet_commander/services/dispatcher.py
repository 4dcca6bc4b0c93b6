from __future__ import annotations

import logging
from collections.abc import Callable

from fleet_commander.constants import EXTENDED_MODE_COMMAND
from fleet_commander.registry import ControllableTarget
from fleet_commander.services.backend import Backend
from fleet_commander.services.confirmation import ConfirmationGate
from fleet_commander.services.diagnostics import DiagnosticReportModel
from fleet_commander.state import DiagnosticResult, StatusMap, is_online

Notifier = Callable[[str], None]


class ActionDispatcher:
    """
    Issues the privileged remote actions for a target captured by the caller.

    Failures are logged and handed to ``notify`` for the operator; nothing is
    retried and local state always returns to idle.
    """

    def __init__(
        self,
        backend: Backend,
        report: DiagnosticReportModel,
        status_source: Callable[[], StatusMap],
        notify: Notifier | None = None,
        extended_command: str = EXTENDED_MODE_COMMAND,
    ) -> None:
        self.backend = backend
        self.report = report
        self.notify = notify
        self.extended_command = extended_command
        self._status_source = status_source
        self.gate = ConfirmationGate(self.shutdown)

    def _surface(self, message: str) -> None:
        logging.error(message)
        if self.notify is not None:
            self.notify(message)

    # ---- Terminal ----

    async def launch_terminal(
        self, target: ControllableTarget, extended_mode: bool = False
    ) -> bool:
        """Open a session on ``target``; reachability is gated by the caller."""
        command = self.extended_command if extended_mode else ""
        try:
            await self.backend.open_ssh_terminal(
                hostname=target.ssh_identifier,
                ip=target.ip,
                run_ros=extended_mode,
                remote_command=command,
            )
        except Exception as e:
            self._surface(f"Terminal Launch Error ({target.name}): {e}")
            return False
        logging.info(
            "Terminal opened on %s%s", target.name, " (Docker & ROS)" if extended_mode else ""
        )
        return True

    # ---- Shutdown ----

    def request_shutdown(self, target: ControllableTarget) -> None:
        """Arm the confirmation gate; the backend is only called on confirm."""
        self.gate.arm(target)
        logging.info("Shutdown of %s awaiting confirmation", target.name)

    async def shutdown(self, target: ControllableTarget) -> bool:
        try:
            await self.backend.exec_shutdown_command(target.ssh_identifier)
        except Exception as e:
            self._surface(f"Shutdown Error ({target.name}): {e}")
            return False
        logging.warning("Shutdown sent to %s (%s)", target.name, target.ip)
        return True

    # ---- Diagnostics ----

    def can_run_diagnostics(self, target: ControllableTarget) -> bool:
        return not self.report.running and is_online(self._status_source(), target.ip)

    async def run_diagnostics(self, target: ControllableTarget) -> DiagnosticResult | None:
        if self.report.running:
            logging.info("Diagnostics already running, ignoring request for %s", target.name)
            return None
        if not is_online(self._status_source(), target.ip):
            logging.warning("Diagnostics not started: %s is offline", target.name)
            return None

        self.report.begin(target)
        logging.info("Running diagnostics on %s", target.name)
        result: DiagnosticResult | None = None
        try:
            result = await self.backend.run_system_check(target.ssh_identifier)
        except Exception as e:
            self._surface(f"System Check Error ({target.name}): {e}")
        finally:
            self.report.finish(target, result)
        return result
