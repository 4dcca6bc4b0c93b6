from __future__ import annotations

import pytest

from fleet_commander.registry import Device, DeviceRegistry, RegistryError, registry
from tests.utils.fleet import BRAVO, LOCAL, SENSOR_IP


@pytest.mark.unit
def test_duplicate_ip_rejected():
    with pytest.raises(RegistryError, match="Duplicate"):
        DeviceRegistry.build([Device("a", "10.0.0.2"), Device("b", "10.0.0.2")], [])


@pytest.mark.unit
def test_target_must_be_monitored():
    with pytest.raises(RegistryError):
        DeviceRegistry.build([Device("a", "10.0.0.9")], [BRAVO])


@pytest.mark.unit
def test_probe_ips_skip_loopback(fleet: DeviceRegistry):
    assert fleet.probe_ips() == ["10.0.0.2", "10.0.0.3", "10.0.0.4", SENSOR_IP]
    assert fleet.loopback_ips() == [LOCAL.ip]
    assert all(not d.is_loopback for d in fleet.grid_devices())


@pytest.mark.unit
def test_visible_targets_hide_local_tab(fleet: DeviceRegistry):
    assert LOCAL in fleet.visible_targets(show_local=True)
    assert LOCAL not in fleet.visible_targets(show_local=False)
    assert len(fleet.visible_targets(show_local=False)) == 3


@pytest.mark.unit
def test_builtin_registry_is_consistent():
    keys = [t.key for t in registry.targets]

    assert len(keys) == len(set(keys))
    assert len(registry.grid_devices()) == 8
    assert {t.name for t in registry.targets if t.allows_extended_mode} == {
        "localhost",
        "kyubic_main",
    }
