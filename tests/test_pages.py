"""Page handlers exercised without a client; widgets stay unbuilt."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from fleet_commander.pages import control as control_mod
from fleet_commander.pages import diagnostics as diagnostics_mod
from fleet_commander.pages.control import ControlPage, running_text
from fleet_commander.pages.dashboards import dashboard_url
from fleet_commander.pages.diagnostics import DiagnosticsPage
from tests.utils.fleet import BRAVO, CHARLIE, DELTA, make_result

if TYPE_CHECKING:
    from pytest import MonkeyPatch

    from fleet_commander.services.diagnostics import DiagnosticReportModel
    from fleet_commander.services.dispatcher import ActionDispatcher
    from fleet_commander.services.status_monitor import StatusMonitor
    from fleet_commander.services.target_selector import TargetSelector
    from tests.utils.fakes import FakeBackend


@pytest.fixture
def toasts(monkeypatch: MonkeyPatch) -> list[str]:
    shown: list[str] = []

    def fake_notify(message, **kwargs):
        shown.append(str(message))

    monkeypatch.setattr(control_mod.ui, "notify", fake_notify)
    monkeypatch.setattr(diagnostics_mod.ui, "notify", fake_notify)
    return shown


@pytest.fixture
def report_page(report: DiagnosticReportModel) -> DiagnosticsPage:
    return DiagnosticsPage(report)


@pytest.fixture
def page(
    selector: TargetSelector,
    dispatcher: ActionDispatcher,
    monitor: StatusMonitor,
    report_page: DiagnosticsPage,
) -> ControlPage:
    return ControlPage(selector, dispatcher, lambda: monitor.status, report_page)


@pytest.mark.unit
def test_dashboard_url_falls_back_to_default_host():
    assert dashboard_url("10.0.0.9", 8080) == "http://10.0.0.9:8080"
    assert dashboard_url("  ", 8081, default_host="192.168.9.100") == "http://192.168.9.100:8081"
    assert dashboard_url(None, 8080, default_host="h") == "http://h:8080"


@pytest.mark.unit
def test_report_without_result_warns(report_page: DiagnosticsPage, toasts: list[str]):
    report_page.open()

    assert toasts == ["No system check report yet"]
    assert report_page.view is None


@pytest.mark.unit
def test_report_open_resets_disclosure(report_page: DiagnosticsPage, report: DiagnosticReportModel):
    report.finish(BRAVO, make_result("FAIL", "PASS"))
    report_page.open()
    assert report_page.view is not None
    report_page.view.toggle_passed()

    report_page.open()

    assert report_page.view.passed_expanded is False


@pytest.mark.unit
def test_select_tab_ignores_unknown_key(page: ControlPage, selector: TargetSelector):
    page.select_tab("delta")
    page.select_tab("nope")

    assert selector.active_target == DELTA


@pytest.mark.unit
async def test_shutdown_dialog_flow_targets_armed_device(
    page: ControlPage, backend: FakeBackend, toasts: list[str]
):
    page.select_tab("charlie")
    page.ask_shutdown()
    page.select_tab("delta")

    await page.confirm_shutdown()

    assert backend.shutdown_calls == ["charlie-ssh"]
    assert toasts == [f"Shutdown sent to {CHARLIE.name}"]
    assert page.dispatcher.gate.armed is False


@pytest.mark.unit
async def test_cancelled_shutdown_sends_nothing(
    page: ControlPage, backend: FakeBackend, toasts: list[str]
):
    page.ask_shutdown()
    page.cancel_shutdown()

    await page.confirm_shutdown()

    assert backend.shutdown_calls == []
    assert toasts == []


@pytest.mark.unit
async def test_run_check_stores_report(
    page: ControlPage,
    backend: FakeBackend,
    monitor: StatusMonitor,
    report: DiagnosticReportModel,
    report_page: DiagnosticsPage,
):
    backend.batch_responses.append({BRAVO.ip: True})
    await monitor.poll()
    backend.check_results["bravo-ssh"] = make_result("FAIL", "PASS")
    page.select_tab("bravo")

    await page.run_check()

    assert report.target == BRAVO
    assert report.running is False
    assert report_page.view is not None


@pytest.mark.unit
async def test_run_check_skipped_when_offline(
    page: ControlPage, backend: FakeBackend, report_page: DiagnosticsPage
):
    page.select_tab("bravo")

    await page.run_check()

    assert backend.check_calls == []
    assert report_page.view is None


@pytest.mark.unit
async def test_report_refused_while_check_running(
    page: ControlPage,
    backend: FakeBackend,
    monitor: StatusMonitor,
    report: DiagnosticReportModel,
    report_page: DiagnosticsPage,
    toasts: list[str],
):
    backend.batch_responses.append({BRAVO.ip: True})
    await monitor.poll()
    report.finish(BRAVO, make_result("PASS"))
    backend.check_results["bravo-ssh"] = make_result("FAIL")
    backend.check_gate = asyncio.Event()
    page.select_tab("bravo")

    check = asyncio.create_task(page.run_check())
    await backend.check_started.wait()

    assert report.running is True
    assert running_text(report) == f"Running on {BRAVO.name}..."
    report_page.open()
    assert toasts == ["System check still running"]
    assert report_page.view is None

    backend.check_gate.set()
    await check

    assert running_text(report) == ""
    assert report_page.view is not None
    assert report.failed_count == 1
