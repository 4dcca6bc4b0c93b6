from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

# ip -> reachable. Replaced wholesale on every committed poll, never mutated.
StatusMap = Mapping[str, bool]

DeviceState = Literal["online", "offline", "unknown"]


def device_state(status: StatusMap, ip: str) -> DeviceState:
    """Tri-state used by the status grid: a missing entry is still pending."""
    if ip not in status:
        return "unknown"
    return "online" if status[ip] else "offline"


def is_online(status: StatusMap, ip: str) -> bool:
    """Two-state used for gating actions: undetermined counts as offline."""
    return bool(status.get(ip, False))


class CheckStatus(str, enum.Enum):
    PASS = "PASS"
    FAIL = "FAIL"


@dataclass(frozen=True)
class CheckItem:
    name: str
    description: str
    status: CheckStatus
    details: str = ""

    @property
    def passed(self) -> bool:
        return self.status is CheckStatus.PASS

    @property
    def has_details(self) -> bool:
        return bool(self.details and self.details.strip())


@dataclass(frozen=True)
class DiagnosticResult:
    summary: tuple[CheckItem, ...] = field(default_factory=tuple)
    detailed: str = ""  # cleaned detailed report log
    raw: str = ""  # unparsed output window, kept for troubleshooting
