from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from fleet_commander.registry import Device, DeviceRegistry
from fleet_commander.services.diagnostics import DiagnosticReportModel
from fleet_commander.services.dispatcher import ActionDispatcher
from fleet_commander.services.status_monitor import StatusMonitor
from fleet_commander.services.target_selector import TargetSelector
from tests.utils.fakes import FakeBackend
from tests.utils.fleet import BRAVO, CHARLIE, DELTA, LOCAL, SENSOR_IP

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture
def fleet() -> DeviceRegistry:
    """Loopback plus three probed computers and one monitor-only sensor."""
    devices = [
        Device("localhost", LOCAL.ip),
        Device("Bravo PC", BRAVO.ip),
        Device("Charlie PC", CHARLIE.ip),
        Device("Delta PC", DELTA.ip),
        Device("Sensor", SENSOR_IP),
    ]
    return DeviceRegistry.build(devices, [LOCAL, BRAVO, CHARLIE, DELTA])


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def monitor(fleet: DeviceRegistry, backend: FakeBackend) -> AsyncIterator[StatusMonitor]:
    """Monitor with a short interval; stopped after the test so no loop task leaks."""
    m = StatusMonitor(fleet, backend, interval_s=0.01)
    try:
        yield m
    finally:
        await m.stop()


@pytest.fixture
def notices() -> list[str]:
    """Messages the dispatcher surfaced to the operator."""
    return []


@pytest.fixture
def report() -> DiagnosticReportModel:
    return DiagnosticReportModel()


@pytest.fixture
def dispatcher(
    backend: FakeBackend,
    report: DiagnosticReportModel,
    monitor: StatusMonitor,
    notices: list[str],
) -> ActionDispatcher:
    return ActionDispatcher(
        backend,
        report,
        status_source=lambda: monitor.status,
        notify=notices.append,
        extended_command="ros2_start -- bash -i -c byobu",
    )


@pytest.fixture
def selector(fleet: DeviceRegistry, monitor: StatusMonitor) -> TargetSelector:
    return TargetSelector(fleet.targets, status_source=lambda: monitor.status)
