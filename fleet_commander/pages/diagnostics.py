from __future__ import annotations

from nicegui import ui

from fleet_commander.services.diagnostics import DiagnosticReportModel, ReportViewState
from fleet_commander.state import CheckItem


class DiagnosticsPage:
    """System check report dialog."""

    def __init__(self, report: DiagnosticReportModel) -> None:
        self.report = report
        self.view: ReportViewState | None = None
        self.dialog: ui.dialog | None = None
        self.body: ui.column | None = None

    # ---- Actions ----

    def open(self) -> None:
        """Show the stored report with fresh disclosure state."""
        if not self.report.has_result:
            ui.notify("No system check report yet", color="warning")
            return
        if self.report.running:
            ui.notify("System check still running", color="warning")
            return
        self.view = ReportViewState()
        self._render()
        if self.dialog:
            self.dialog.open()

    def close(self) -> None:
        if self.dialog:
            self.dialog.close()

    # ---- UI ----

    def _render_item(self, index: int, item: CheckItem) -> None:
        view = self.view
        assert view is not None
        color = "text-positive" if item.passed else "text-negative"
        title = f"[{item.status.value}] {item.name}"
        if item.has_details:
            with ui.expansion(
                title,
                caption=item.description,
                value=view.is_item_expanded(index),
                on_value_change=lambda _, i=index, it=item: view.toggle_item(i, it),
            ).classes(f"w-full {color}"):
                ui.label(item.details).classes("text-xs font-mono whitespace-pre-wrap")
        else:
            with ui.column().classes("gap-0 px-4 py-1"):
                ui.label(title).classes(f"text-sm {color}")
                if item.description:
                    ui.label(item.description).classes("text-xs text-grey")

    def _render(self) -> None:
        if not self.body or not self.report.result or not self.view:
            return
        view = self.view
        result = self.report.result
        partition = self.report.partition
        target_name = self.report.target.name if self.report.target else "-"

        self.body.clear()
        with self.body:
            ui.label(f"System Check: {target_name}").classes("text-lg font-medium")
            ui.label(
                f"{partition.failed_count} failed / {partition.passed_count} passed"
            ).classes("text-sm")

            if partition.failed:
                with ui.expansion(
                    f"Failed ({partition.failed_count})",
                    value=view.failed_expanded,
                    on_value_change=lambda _: view.toggle_failed(),
                ).classes("w-full text-negative"):
                    for index, item in partition.indexed_failed():
                        self._render_item(index, item)

            if partition.passed:
                with ui.expansion(
                    f"Passed ({partition.passed_count})",
                    value=view.passed_expanded,
                    on_value_change=lambda _: view.toggle_passed(),
                ).classes("w-full"):
                    for index, item in partition.indexed_passed():
                        self._render_item(index, item)

            with ui.expansion(
                "Raw log",
                value=view.raw_expanded,
                on_value_change=lambda _: view.toggle_raw(),
            ).classes("w-full"):
                ui.label(result.detailed or "(empty)").classes(
                    "text-xs font-mono whitespace-pre-wrap"
                )

    def build(self) -> None:
        with ui.dialog() as self.dialog, ui.card().classes("min-w-[480px] max-w-[800px]"):
            self.body = ui.column().classes("w-full gap-2")
            with ui.row().classes("w-full justify-end"):
                ui.button("Close", on_click=self.close).props("flat")
