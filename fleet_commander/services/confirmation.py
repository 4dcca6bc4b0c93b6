from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fleet_commander.registry import ControllableTarget

ShutdownExecutor = Callable[[ControllableTarget], Awaitable[bool]]


class ConfirmationGate:
    """
    Two-state guard in front of shutdown.

    Idle (``pending is None``) and Armed (``pending`` holds the target captured
    when the operator asked for shutdown). ``confirm()`` acts on that captured
    target, not on whatever tab is active when the operator confirms.
    """

    def __init__(self, execute: ShutdownExecutor) -> None:
        self._execute = execute
        self._pending: ControllableTarget | None = None

    @property
    def pending(self) -> ControllableTarget | None:
        return self._pending

    @property
    def armed(self) -> bool:
        return self._pending is not None

    def arm(self, target: ControllableTarget) -> None:
        if self._pending is not None and self._pending != target:
            logging.debug(
                "Shutdown confirmation for %s replaced by %s",
                self._pending.name,
                target.name,
            )
        self._pending = target

    def cancel(self) -> None:
        if self._pending is not None:
            logging.info("Shutdown of %s cancelled", self._pending.name)
        self._pending = None

    async def confirm(self) -> bool:
        """Dispatch shutdown for the armed target. The gate is Idle afterwards."""
        target = self._pending
        if target is None:
            return False
        # Cleared before dispatch so a second confirm cannot fire twice
        self._pending = None
        return await self._execute(target)
