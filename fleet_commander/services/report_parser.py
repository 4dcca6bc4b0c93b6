from __future__ import annotations

import re

from fleet_commander.state import CheckItem, CheckStatus, DiagnosticResult

START_MARKER = "=== Check Start ==="
END_MARKER = "======================="
DETAIL_MARKER = "=== Detailed Report ==="

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")
_STATUS_TAG_RE = re.compile(r"\[(PASS|FAIL)\]")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text).strip()


def _window(text: str) -> str:
    """Cut the output down to the check block, if the markers are present."""
    start = text.find(START_MARKER)
    end = text.rfind(END_MARKER)
    if start < 0 and end < 0:
        return text
    start = max(start, 0)
    stop = end + len(END_MARKER) if end >= 0 else len(text)
    return text[start:stop]


def _details_by_name(detailed: str) -> dict[str, str]:
    details: dict[str, str] = {}
    for line in detailed.splitlines():
        line = line.strip()
        if not line or DETAIL_MARKER in line or "," not in line:
            continue
        name, log = line.split(",", 1)
        name, log = name.strip(), log.strip()
        if name in details:
            details[name] = f"{details[name]}\n{log}"
        else:
            details[name] = log
    return details


def _plugin_error_item(line: str) -> CheckItem:
    idx = line.find("class type ")
    name = "Plugin Load Error"
    if idx >= 0:
        words = line[idx + len("class type ") :].split()
        name = words[0] if words else "Plugin Error"
    return CheckItem(
        name=name,
        description=line,
        status=CheckStatus.FAIL,
        details=f"Raw Error: {line}",
    )


def parse_check_output(text: str) -> DiagnosticResult:
    """
    Parse the output of the remote system health check.

    Summary lines look like ``[PASS] name, description``; the detailed
    section after ``=== Detailed Report ===`` holds ``name, log line`` pairs
    that are attached to the summary item of the same name.
    """
    valid = _window(text)
    summary_part, sep, detail_part = valid.partition(DETAIL_MARKER)
    detailed = strip_ansi(f"{DETAIL_MARKER}{detail_part}") if sep else ""
    details = _details_by_name(detailed)

    items: list[CheckItem] = []
    for raw_line in summary_part.splitlines():
        line = strip_ansi(raw_line)
        tag = _STATUS_TAG_RE.search(line)
        if tag:
            status = CheckStatus(tag.group(1))
            content = line.replace(f"[{status.value}]", "")
            if "," in content:
                name, desc = (s.strip() for s in content.split(",", 1))
            else:
                name, desc = content.strip(), ""
            items.append(
                CheckItem(
                    name=name,
                    description=desc,
                    status=status,
                    details=details.get(name, ""),
                )
            )
        elif line.startswith("Plugin error:"):
            items.append(_plugin_error_item(line))

    return DiagnosticResult(summary=tuple(items), detailed=detailed, raw=valid)
