from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from types import MappingProxyType

from fleet_commander.constants import POLL_INTERVAL_S
from fleet_commander.registry import DeviceRegistry
from fleet_commander.services.backend import Backend
from fleet_commander.state import StatusMap

StatusListener = Callable[[StatusMap], None]


class StatusMonitor:
    """
    Periodic batched reachability polling.

    One ``check_batch_connections`` call per tick covers every non-loopback
    device. Loopback entries are forced online without probing. A new map is
    committed only when it differs from the current one; otherwise the current
    reference is kept so listeners and readers see no change. A failing query
    leaves the current map untouched until the next tick.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        backend: Backend,
        interval_s: float = POLL_INTERVAL_S,
    ) -> None:
        self.registry = registry
        self.backend = backend
        self.interval_s = interval_s
        self._status: StatusMap = MappingProxyType(
            {ip: True for ip in registry.loopback_ips()}
        )
        self._listeners: list[StatusListener] = []
        self._loop_task: asyncio.Task | None = None
        self._poll_task: asyncio.Task | None = None

    @property
    def status(self) -> StatusMap:
        return self._status

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    # ---- Reconciliation ----

    async def poll(self) -> bool:
        """Run one tick. Returns True when a new status map was committed."""
        ips = self.registry.probe_ips()
        result: dict[str, bool] = {}
        if ips:
            try:
                result = await self.backend.check_batch_connections(ips)
            except Exception as e:
                logging.warning("Status query failed, keeping previous status: %s", e)
                return False
        return self._commit(result)

    def _commit(self, result: dict[str, bool]) -> bool:
        candidate = {ip: bool(online) for ip, online in result.items()}
        for ip in self.registry.loopback_ips():
            candidate[ip] = True

        previous = self._status
        if candidate == dict(previous):
            return False

        for ip, online in candidate.items():
            if previous.get(ip) != online:
                logging.info("Device %s is %s", ip, "online" if online else "offline")
        self._status = MappingProxyType(candidate)

        for listener in list(self._listeners):
            try:
                listener(self._status)
            except Exception as e:
                logging.error("Status listener failed: %s", e)
        return True

    # ---- Lifecycle ----

    def start(self) -> None:
        """Poll once now, then every ``interval_s`` seconds."""
        if self.running:
            return
        self._loop_task = asyncio.create_task(self._run())
        logging.debug("Status monitor started (interval=%.1fs)", self.interval_s)

    async def stop(self) -> None:
        for task in (self._loop_task, self._poll_task):
            if task and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._loop_task = None
        self._poll_task = None
        logging.debug("Status monitor stopped")

    async def _run(self) -> None:
        try:
            while True:
                if self._poll_task is not None and not self._poll_task.done():
                    # A slow backend never stacks polls; the late result still lands.
                    logging.debug("Previous status poll still outstanding, skipping tick")
                else:
                    self._poll_task = asyncio.create_task(self.poll())
                await asyncio.sleep(self.interval_s)
        except asyncio.CancelledError:
            pass
