from __future__ import annotations

from nicegui import ui

from fleet_commander.registry import DeviceRegistry
from fleet_commander.state import DeviceState, StatusMap, device_state

_CHIP_ICONS: dict[DeviceState, str] = {"online": "●", "offline": "○", "unknown": "◌"}
_CHIP_CLASSES: dict[DeviceState, str] = {
    "online": "text-positive",
    "offline": "text-negative",
    "unknown": "text-grey",
}


class StatusPage:
    """Network status overview: one chip per monitored device."""

    def __init__(self, registry: DeviceRegistry) -> None:
        self.registry = registry
        # ip -> (icon label, chip row)
        self._chips: dict[str, tuple[ui.label, ui.row]] = {}

    def refresh(self, status: StatusMap) -> None:
        for device in self.registry.grid_devices():
            chip = self._chips.get(device.ip)
            if chip is None:
                continue
            icon, row = chip
            state = device_state(status, device.ip)
            icon.text = _CHIP_ICONS[state]
            icon.classes(replace=_CHIP_CLASSES[state])
            row.classes(replace=f"chip-{state} items-center gap-1 px-2 py-1 rounded")

    def build(self, status: StatusMap) -> None:
        with ui.card().classes("w-full"):
            ui.label("Network Status").classes("text-md font-medium")
            with ui.row().classes("gap-2 flex-wrap"):
                for device in self.registry.grid_devices():
                    with ui.row() as row:
                        icon = ui.label(_CHIP_ICONS["unknown"])
                        ui.label(device.name).classes("text-sm")
                        ui.tooltip(device.ip)
                    self._chips[device.ip] = (icon, row)
        self.refresh(status)
