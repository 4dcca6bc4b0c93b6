from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from fleet_commander.registry import ControllableTarget
from fleet_commander.state import CheckItem, DiagnosticResult


@dataclass(frozen=True)
class ReportPartition:
    failed: tuple[CheckItem, ...]
    passed: tuple[CheckItem, ...]
    failed_indices: tuple[int, ...] = ()  # positions in summary, parallel to failed
    passed_indices: tuple[int, ...] = ()

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def passed_count(self) -> int:
        return len(self.passed)

    def indexed_failed(self) -> list[tuple[int, CheckItem]]:
        return list(zip(self.failed_indices, self.failed))

    def indexed_passed(self) -> list[tuple[int, CheckItem]]:
        return list(zip(self.passed_indices, self.passed))


def partition_items(summary: Iterable[CheckItem]) -> ReportPartition:
    """Stable split into failed and passed items, keeping the original order."""
    failed: list[tuple[int, CheckItem]] = []
    passed: list[tuple[int, CheckItem]] = []
    for index, item in enumerate(summary):
        (passed if item.passed else failed).append((index, item))
    return ReportPartition(
        failed=tuple(item for _, item in failed),
        passed=tuple(item for _, item in passed),
        failed_indices=tuple(i for i, _ in failed),
        passed_indices=tuple(i for i, _ in passed),
    )


class DiagnosticReportModel:
    """
    Latest diagnostic result and the in-flight flag.

    The result is replaced wholesale by each successful run and survives the
    report view being closed. A failed run leaves the previous result in place.
    """

    def __init__(self) -> None:
        self.result: DiagnosticResult | None = None
        self.target: ControllableTarget | None = None  # device the result belongs to
        self.running: bool = False
        self.running_target: ControllableTarget | None = None

    def begin(self, target: ControllableTarget) -> None:
        self.running = True
        self.running_target = target

    def finish(
        self, target: ControllableTarget, result: DiagnosticResult | None
    ) -> None:
        self.running = False
        self.running_target = None
        if result is not None:
            self.result = result
            self.target = target
            logging.info(
                "Diagnostics for %s: %d failed, %d passed",
                target.name,
                self.failed_count,
                self.passed_count,
            )

    @property
    def has_result(self) -> bool:
        return self.result is not None

    @property
    def partition(self) -> ReportPartition:
        return partition_items(self.result.summary if self.result else ())

    @property
    def failed_items(self) -> tuple[CheckItem, ...]:
        return self.partition.failed

    @property
    def passed_items(self) -> tuple[CheckItem, ...]:
        return self.partition.passed

    @property
    def failed_count(self) -> int:
        return len(self.failed_items)

    @property
    def passed_count(self) -> int:
        return len(self.passed_items)


@dataclass
class ReportViewState:
    """Disclosure state of one opening of the report view."""

    failed_expanded: bool = True
    passed_expanded: bool = False
    raw_expanded: bool = False
    expanded_items: set[int] = field(default_factory=set)  # indices into summary

    def toggle_failed(self) -> None:
        self.failed_expanded = not self.failed_expanded

    def toggle_passed(self) -> None:
        self.passed_expanded = not self.passed_expanded

    def toggle_raw(self) -> None:
        self.raw_expanded = not self.raw_expanded

    def is_item_expanded(self, index: int) -> bool:
        return index in self.expanded_items

    def toggle_item(self, index: int, item: CheckItem) -> None:
        if not item.has_details:
            return
        if index in self.expanded_items:
            self.expanded_items.discard(index)
        else:
            self.expanded_items.add(index)
