from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

import pytest

from fleet_commander.services.target_selector import TargetSelector, action_state
from tests.utils.fleet import BRAVO, CHARLIE, DELTA, LOCAL

if TYPE_CHECKING:
    from fleet_commander.services.status_monitor import StatusMonitor
    from tests.utils.fakes import FakeBackend


@pytest.mark.unit
def test_defaults_to_first_target(selector: TargetSelector):
    assert selector.active_index == 0
    assert selector.active_target == LOCAL


@pytest.mark.unit
@pytest.mark.parametrize("index", [-1, 4, 99])
def test_out_of_range_index_is_ignored(selector: TargetSelector, index: int):
    selector.set_active_index(2)

    assert selector.set_active_index(index) is False
    assert selector.active_target == CHARLIE


@pytest.mark.unit
def test_select_by_key(selector: TargetSelector):
    assert selector.select_key("delta") is True
    assert selector.active_target == DELTA
    assert selector.select_key("missing") is False
    assert selector.active_target == DELTA


@pytest.mark.unit
def test_empty_target_list_rejected():
    with pytest.raises(ValueError):
        TargetSelector([], status_source=lambda: {})


@pytest.mark.unit
async def test_online_state_follows_status_snapshots(
    selector: TargetSelector, monitor: StatusMonitor, backend: FakeBackend
):
    selector.set_active_index(1)
    assert selector.is_active_online is False, "undetermined counts as offline for gating"

    backend.batch_responses.append({BRAVO.ip: True})
    await monitor.poll()
    assert selector.is_active_online is True

    backend.batch_responses.append({BRAVO.ip: False})
    await monitor.poll()
    assert selector.is_active_online is False


@pytest.mark.unit
def test_action_state_offline_disables_everything():
    status = MappingProxyType({LOCAL.ip: True, BRAVO.ip: False})

    state = action_state(BRAVO, status)

    assert not (state.online or state.terminal or state.extended_mode)
    assert not (state.shutdown or state.diagnostics)


@pytest.mark.unit
def test_action_state_extended_mode_requires_permission():
    status = {BRAVO.ip: True, CHARLIE.ip: True}

    assert action_state(BRAVO, status).extended_mode is False
    assert action_state(CHARLIE, status).extended_mode is True


@pytest.mark.unit
def test_action_state_diagnostics_blocked_while_running():
    status = {CHARLIE.ip: True}

    assert action_state(CHARLIE, status).diagnostics is True
    assert action_state(CHARLIE, status, diagnostics_running=True).diagnostics is False
