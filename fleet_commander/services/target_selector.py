from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from fleet_commander.registry import ControllableTarget
from fleet_commander.state import StatusMap, is_online


@dataclass(frozen=True)
class ActionState:
    """Which actions a target tab offers for one status snapshot."""

    online: bool
    terminal: bool
    extended_mode: bool
    shutdown: bool
    diagnostics: bool


def action_state(
    target: ControllableTarget, status: StatusMap, diagnostics_running: bool = False
) -> ActionState:
    online = is_online(status, target.ip)
    return ActionState(
        online=online,
        terminal=online,
        extended_mode=online and target.allows_extended_mode,
        shutdown=online,
        diagnostics=online and not diagnostics_running,
    )


class TargetSelector:
    """Tracks the active controllable target; online state is derived on access."""

    def __init__(
        self,
        targets: Sequence[ControllableTarget],
        status_source: Callable[[], StatusMap],
    ) -> None:
        if not targets:
            raise ValueError("TargetSelector needs at least one target")
        self.targets: tuple[ControllableTarget, ...] = tuple(targets)
        self._status_source = status_source
        self._active_index = 0

    @property
    def active_index(self) -> int:
        return self._active_index

    def set_active_index(self, index: int) -> bool:
        if not 0 <= index < len(self.targets):
            logging.debug("Ignoring out-of-range target index %s", index)
            return False
        self._active_index = index
        return True

    def select_key(self, key: str) -> bool:
        for i, target in enumerate(self.targets):
            if target.key == key:
                return self.set_active_index(i)
        return False

    @property
    def active_target(self) -> ControllableTarget:
        return self.targets[self._active_index]

    @property
    def is_active_online(self) -> bool:
        return self.is_online(self.active_target)

    def is_online(self, target: ControllableTarget) -> bool:
        return is_online(self._status_source(), target.ip)
