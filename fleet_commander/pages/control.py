from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from nicegui import ui

from fleet_commander.common.logging_config import attach_ui_log
from fleet_commander.pages.diagnostics import DiagnosticsPage
from fleet_commander.services.diagnostics import DiagnosticReportModel
from fleet_commander.services.dispatcher import ActionDispatcher
from fleet_commander.services.target_selector import TargetSelector, action_state
from fleet_commander.state import StatusMap


def running_text(report: DiagnosticReportModel) -> str:
    if report.running_target is None:
        return ""
    return f"Running on {report.running_target.name}..."


class ControlPage:
    """Target tabs with terminal, shutdown and system check actions."""

    def __init__(
        self,
        selector: TargetSelector,
        dispatcher: ActionDispatcher,
        status_source: Callable[[], StatusMap],
        report_page: DiagnosticsPage,
    ) -> None:
        self.selector = selector
        self.dispatcher = dispatcher
        self.report_page = report_page
        self._status_source = status_source

        # Tabs keyed by target key
        self.tabs: ui.tabs | None = None
        self._tab_widgets: dict[str, ui.tab] = {}

        # Header of the active target card
        self.title_label: ui.label | None = None
        self.ip_label: ui.label | None = None
        self.badge_label: ui.label | None = None
        self.shutdown_button: ui.button | None = None

        # Actions
        self.action_row: ui.row | None = None
        self.searching_row: ui.row | None = None
        self.terminal_button: ui.button | None = None
        self.extended_button: ui.button | None = None
        self.check_button: ui.button | None = None
        self.report_button: ui.button | None = None
        self.check_spinner: ui.spinner | None = None
        self.running_label: ui.label | None = None

        # Shutdown confirmation
        self.confirm_dialog: ui.dialog | None = None
        self.confirm_message: ui.label | None = None

        self.activity_log: ui.log | None = None

    # ---- Actions ----

    def select_tab(self, key: str) -> None:
        if self.selector.select_key(key):
            self.refresh()

    async def launch_terminal(self, extended_mode: bool) -> None:
        await self.dispatcher.launch_terminal(self.selector.active_target, extended_mode)

    def ask_shutdown(self) -> None:
        target = self.selector.active_target
        self.dispatcher.request_shutdown(target)
        if self.confirm_message:
            self.confirm_message.text = (
                f"Are you sure you want to shutdown {target.name}? ({target.ip})"
            )
        if self.confirm_dialog:
            self.confirm_dialog.open()

    def cancel_shutdown(self) -> None:
        self.dispatcher.gate.cancel()
        if self.confirm_dialog:
            self.confirm_dialog.close()

    async def confirm_shutdown(self) -> None:
        pending = self.dispatcher.gate.pending
        if self.confirm_dialog:
            self.confirm_dialog.close()
        if pending is None:
            return
        if await self.dispatcher.gate.confirm():
            ui.notify(f"Shutdown sent to {pending.name}", color="warning")

    async def run_check(self) -> None:
        target = self.selector.active_target
        if not self.dispatcher.can_run_diagnostics(target):
            return
        if self.check_button:
            self.check_button.disable()
        if self.check_spinner:
            self.check_spinner.set_visibility(True)
        run = asyncio.create_task(self.dispatcher.run_diagnostics(target))
        # Let the run mark the report as running before redrawing
        await asyncio.sleep(0)
        self.refresh()
        try:
            result = await run
        finally:
            self.refresh()
        if result is not None:
            self.report_page.open()

    # ---- UI ----

    def refresh(self, status: StatusMap | None = None) -> None:
        """Re-derive every widget from the current status snapshot."""
        status = self._status_source() if status is None else status
        report = self.dispatcher.report

        for target in self.selector.targets:
            tab = self._tab_widgets.get(target.key)
            if tab is None:
                continue
            online = action_state(target, status).online
            tab.props(f"icon={'radio_button_checked' if online else 'radio_button_unchecked'}")
            tab.classes(replace="tab-online text-positive" if online else "tab-offline")

        target = self.selector.active_target
        state = action_state(target, status, diagnostics_running=report.running)

        if self.title_label:
            self.title_label.text = target.name
        if self.ip_label:
            self.ip_label.text = target.ip
        if self.badge_label:
            self.badge_label.text = "📡 ONLINE" if state.online else "⏳ CONNECTING..."
            self.badge_label.classes(
                replace="badge-online text-positive" if state.online else "badge-offline text-grey"
            )
        if self.shutdown_button:
            self.shutdown_button.set_visibility(state.shutdown)
        if self.action_row:
            self.action_row.set_visibility(state.online)
        if self.searching_row:
            self.searching_row.set_visibility(not state.online)
        if self.terminal_button:
            self.terminal_button.set_enabled(state.terminal)
        if self.extended_button:
            self.extended_button.set_visibility(target.allows_extended_mode)
            self.extended_button.set_enabled(state.extended_mode)
        if self.check_button:
            self.check_button.set_enabled(state.diagnostics)
        if self.check_spinner:
            self.check_spinner.set_visibility(report.running)
        if self.running_label:
            self.running_label.text = running_text(report)
            self.running_label.set_visibility(report.running)
        if self.report_button:
            self.report_button.set_visibility(report.has_result and not report.running)

    def build(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Connect Computer").classes("text-md font-medium")
            with ui.tabs(
                value=self.selector.active_target.key,
                on_change=lambda e: self.select_tab(e.value),
            ) as self.tabs:
                for target in self.selector.targets:
                    self._tab_widgets[target.key] = ui.tab(target.key, label=target.name)

            with ui.row().classes("w-full items-center justify-between"):
                with ui.column().classes("gap-0"):
                    self.title_label = ui.label("-").classes("text-lg font-medium")
                    self.ip_label = ui.label("-").classes("text-xs text-grey")
                with ui.row().classes("items-center gap-2"):
                    self.shutdown_button = ui.button(
                        icon="power_settings_new", on_click=self.ask_shutdown
                    ).props("round unelevated color=negative")
                    with self.shutdown_button:
                        ui.tooltip("Shutdown this device")
                    self.badge_label = ui.label("⏳ CONNECTING...").classes("text-sm")

            with ui.row().classes("items-center gap-2") as self.action_row:
                self.terminal_button = ui.button(
                    "💻 Terminal", on_click=lambda: self.launch_terminal(False)
                ).props("unelevated")
                self.extended_button = ui.button(
                    "🚀 Docker & ROS", on_click=lambda: self.launch_terminal(True)
                ).props("unelevated color=primary")
                self.check_button = ui.button(
                    "🩺 System Check", on_click=self.run_check
                ).props("unelevated")
                self.check_spinner = ui.spinner(size="sm")
                self.running_label = ui.label("").classes("text-xs text-grey")
                self.report_button = ui.button(
                    "Report", on_click=self.report_page.open
                ).props("flat")
            with ui.row().classes("items-center gap-2") as self.searching_row:
                ui.spinner(size="sm")
                ui.label("Searching for device...").classes("text-sm text-grey")

        with ui.dialog().props("persistent") as self.confirm_dialog, ui.card():
            ui.label("⚠️ Confirm Shutdown").classes("text-md font-medium")
            self.confirm_message = ui.label("").classes("text-sm")
            with ui.row().classes("w-full justify-end gap-2"):
                ui.button("Cancel", on_click=self.cancel_shutdown).props("flat")
                ui.button("Shutdown Now", on_click=self.confirm_shutdown).props(
                    "unelevated color=negative"
                )

        with ui.card().classes("w-full"):
            ui.label("Activity").classes("text-md font-medium")
            self.activity_log = ui.log(max_lines=200).classes("w-full h-40")
        attach_ui_log(self.activity_log)
        logging.debug("Control page built with %d targets", len(self.selector.targets))

        self.refresh()
