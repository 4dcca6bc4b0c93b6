import argparse
import logging
import sys

from nicegui import app as ng_app
from nicegui import ui

from fleet_commander.common.logging_config import (
    LEVEL_NAMES,
    configure_logging,
    detach_ui_log,
    resolve_level,
)
from fleet_commander.constants import (
    LOG_LEVEL,
    POLL_INTERVAL_S,
    SERVER_HOST,
    SERVER_PORT,
    SHOW_LOCAL_TARGET,
)
from fleet_commander.pages.control import ControlPage
from fleet_commander.pages.dashboards import DashboardsPage
from fleet_commander.pages.diagnostics import DiagnosticsPage
from fleet_commander.pages.status import StatusPage
from fleet_commander.registry import registry
from fleet_commander.services.diagnostics import DiagnosticReportModel
from fleet_commander.services.dispatcher import ActionDispatcher
from fleet_commander.services.shell_backend import ShellBackend
from fleet_commander.services.status_monitor import StatusMonitor
from fleet_commander.services.target_selector import TargetSelector
from fleet_commander.state import StatusMap


def notify_error(message: str) -> None:
    """Action failures stay on screen until the operator dismisses them."""
    ui.notify(message, color="negative", timeout=0, close_button="OK", multi_line=True)


# ------------------------ Core services ------------------------

backend = ShellBackend()
monitor = StatusMonitor(registry, backend, interval_s=POLL_INTERVAL_S)
report = DiagnosticReportModel()
dispatcher = ActionDispatcher(
    backend, report, status_source=lambda: monitor.status, notify=notify_error
)
selector = TargetSelector(
    registry.visible_targets(SHOW_LOCAL_TARGET), status_source=lambda: monitor.status
)

# Page instances
status_page_instance = StatusPage(registry)
diagnostics_page_instance = DiagnosticsPage(report)
control_page_instance = ControlPage(
    selector,
    dispatcher,
    status_source=lambda: monitor.status,
    report_page=diagnostics_page_instance,
)
dashboards_page_instance = DashboardsPage()


def on_status_change(status: StatusMap) -> None:
    status_page_instance.refresh(status)
    control_page_instance.refresh(status)


async def _app_startup() -> None:
    ui.query(".nicegui-content").classes("p-2 gap-2")
    with ui.header().classes("items-center px-3 py-1"):
        ui.label("Fleet Commander").classes("text-md font-medium")

    status_page_instance.build(monitor.status)
    control_page_instance.build()
    dashboards_page_instance.build()
    diagnostics_page_instance.build()

    monitor.add_listener(on_status_change)
    monitor.start()


async def _app_shutdown() -> None:
    monitor.remove_listener(on_status_change)
    if control_page_instance.activity_log is not None:
        detach_ui_log(control_page_instance.activity_log)
    await monitor.stop()


ng_app.on_startup(_app_startup)
ng_app.on_shutdown(_app_shutdown)


def main() -> None:
    parser = argparse.ArgumentParser(description="Fleet Commander control panel")
    parser.add_argument("--host", default=SERVER_HOST, help="Webserver bind host")
    parser.add_argument(
        "--port", type=int, default=SERVER_PORT, help="Webserver bind port"
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=POLL_INTERVAL_S,
        help="Seconds between device status polls",
    )
    parser.add_argument("--log-level", choices=LEVEL_NAMES, help="Set log level")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Enable WARNING logging"
    )
    args, _ = parser.parse_known_args()

    if args.poll_interval <= 0:
        parser.error("--poll-interval must be > 0")
    monitor.interval_s = args.poll_interval

    configure_logging(resolve_level(args.log_level, args.verbose, args.quiet, LOG_LEVEL))
    logging.info("Webserver bind: host=%s port=%s", args.host, args.port)
    logging.info(
        "Monitoring %d devices every %.1fs", len(registry.devices), monitor.interval_s
    )

    ui.run(
        title="Fleet Commander",
        host=args.host,
        port=int(args.port),
        reload=False,
        show=False,
        loop="uvloop" if sys.platform != "win32" else "asyncio",
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
