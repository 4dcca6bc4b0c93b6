from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

LOOPBACK_IPS: frozenset[str] = frozenset({"127.0.0.1", "localhost"})


def is_loopback(ip: str) -> bool:
    return ip in LOOPBACK_IPS


@dataclass(frozen=True)
class Device:
    """Any monitorable endpoint. Identity is the ip."""

    name: str
    ip: str

    @property
    def is_loopback(self) -> bool:
        return is_loopback(self.ip)


@dataclass(frozen=True)
class ControllableTarget(Device):
    """A device exposed in the action tabs (terminal / shutdown / diagnostics)."""

    key: str = ""
    ssh_identifier: str = ""  # hostname used for ssh, distinct from the display name
    allows_extended_mode: bool = False  # offer the "Docker & ROS" session


class RegistryError(ValueError):
    pass


@dataclass(frozen=True)
class DeviceRegistry:
    devices: tuple[Device, ...]
    targets: tuple[ControllableTarget, ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for device in self.devices:
            if device.ip in seen:
                raise RegistryError(f"Duplicate device ip: {device.ip}")
            seen.add(device.ip)
        for target in self.targets:
            if target.ip not in seen:
                raise RegistryError(
                    f"Target {target.name} ({target.ip}) is not a monitored device"
                )

    @classmethod
    def build(
        cls, devices: Iterable[Device], targets: Iterable[ControllableTarget]
    ) -> "DeviceRegistry":
        return cls(devices=tuple(devices), targets=tuple(targets))

    def probe_ips(self) -> list[str]:
        """Non-loopback ips in registry order, each once."""
        return [d.ip for d in self.devices if not d.is_loopback]

    def loopback_ips(self) -> list[str]:
        return [d.ip for d in self.devices if d.is_loopback]

    def grid_devices(self) -> list[Device]:
        """Devices shown in the status overview (loopback is implied)."""
        return [d for d in self.devices if not d.is_loopback]

    def visible_targets(self, show_local: bool) -> Sequence[ControllableTarget]:
        if show_local:
            return self.targets
        return tuple(t for t in self.targets if not t.is_loopback)


# Controllable computers (main control tabs)
TARGETS: tuple[ControllableTarget, ...] = (
    ControllableTarget(
        name="localhost",
        ip="127.0.0.1",
        key="localhost",
        ssh_identifier="localhost",
        allows_extended_mode=True,
    ),
    ControllableTarget(
        name="kyubic_main",
        ip="192.168.9.100",
        key="main",
        ssh_identifier="kyubic_main",
        allows_extended_mode=True,
    ),
    ControllableTarget(
        name="kyubic_jetson",
        ip="192.168.9.110",
        key="jetson",
        ssh_identifier="kyubic_jetson",
    ),
    ControllableTarget(
        name="kyubic_rpi5",
        ip="192.168.9.120",
        key="rpi5",
        ssh_identifier="kyubic_rpi5",
    ),
)

# Everything shown in the network status overview
DEVICES: tuple[Device, ...] = (
    Device("localhost", "127.0.0.1"),
    Device("Sensor (ESP32)", "192.168.9.5"),
    Device("DVL", "192.168.9.10"),
    Device("GNSS", "192.168.9.20"),
    Device("Main PC", "192.168.9.100"),
    Device("Main KVM", "192.168.9.105"),
    Device("Jetson", "192.168.9.110"),
    Device("Jetson KVM", "192.168.9.115"),
    Device("RPi 5", "192.168.9.120"),
)

registry = DeviceRegistry.build(DEVICES, TARGETS)
