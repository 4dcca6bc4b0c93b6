from __future__ import annotations

from nicegui import ui

from fleet_commander.constants import DASHBOARD_HOST, DASHBOARD_PORT, VIEWER_PORT


def dashboard_url(host: str | None, port: int, default_host: str = DASHBOARD_HOST) -> str:
    return f"http://{(host or '').strip() or default_host}:{port}"


class DashboardsPage:
    """Links to the web dashboards served by the robot."""

    def __init__(self, default_host: str = DASHBOARD_HOST) -> None:
        self.default_host = default_host
        self.host_input: ui.input | None = None
        self.dashboard_link: ui.link | None = None
        self.viewer_link: ui.link | None = None

    def _update_links(self) -> None:
        host = self.host_input.value if self.host_input else None
        if self.dashboard_link:
            self.dashboard_link.props(
                f'href="{dashboard_url(host, DASHBOARD_PORT, self.default_host)}"'
            )
        if self.viewer_link:
            self.viewer_link.props(
                f'href="{dashboard_url(host, VIEWER_PORT, self.default_host)}"'
            )

    def build(self) -> None:
        with ui.card().classes("w-full"):
            ui.label("Web Dashboards").classes("text-md font-medium")
            with ui.row().classes("items-center gap-4"):
                self.host_input = ui.input(
                    label="Target IP", value=self.default_host, placeholder="Target IP"
                ).props("dense prefix=http://")
                self.dashboard_link = ui.link(
                    "📊 DashBoard",
                    dashboard_url(self.default_host, DASHBOARD_PORT, self.default_host),
                    new_tab=True,
                )
                self.viewer_link = ui.link(
                    "🧊 3d viewer",
                    dashboard_url(self.default_host, VIEWER_PORT, self.default_host),
                    new_tab=True,
                )
            self.host_input.on_value_change(lambda: self._update_links())
