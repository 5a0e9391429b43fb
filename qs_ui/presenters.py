"""Presenters turning suite objects into console tables."""

from __future__ import annotations

import shlex
from typing import List, Sequence

from qs_runner.api import PlannedInvocation, SuiteReport
from qs_runner.services.doctor import DoctorReport
from qs_ui.ui.console import ConsoleUI


def plan_rows(planned: Sequence[PlannedInvocation]) -> List[List[str]]:
    rows = []
    for position, item in enumerate(planned, start=1):
        options = ", ".join(f"{flag}={value}" for flag, value in item.options) or "-"
        rows.append([str(position), item.label, options, shlex.join(item.command)])
    return rows


def summary_rows(report: SuiteReport) -> List[List[str]]:
    rows = []
    for result in [report.index, *report.runs]:
        rows.append(
            [
                result.label,
                result.run_dir.name,
                f"{result.duration_seconds:.1f}",
                str(len(result.collection.collected)),
                str(len(result.collection.failures)),
            ]
        )
    return rows


def render_plan(ui: ConsoleUI, planned: Sequence[PlannedInvocation]) -> None:
    ui.show_table("Sweep Plan", ["#", "Run", "Options", "Command"], plan_rows(planned))


def render_summary(ui: ConsoleUI, report: SuiteReport) -> None:
    ui.show_table(
        "Sweep Summary",
        ["Run", "Directory", "Seconds", "Artifacts", "Soft failures"],
        summary_rows(report),
    )
    for failure in report.soft_failures:
        ui.show_warning(f"{failure.item}: {failure.reason}")
    ui.show_success(f"Suite complete. All runs saved under: {report.prefix}*")


def render_doctor_report(ui: ConsoleUI, report: DoctorReport) -> bool:
    """Render a doctor report; returns True when all required checks passed."""
    rows = [[check.label, "✓" if check.ok else "✗", check.detail] for check in report.checks]
    ui.show_table("Prerequisites", ["Item", "Status", "Detail"], rows)
    if report.total_failures > 0:
        ui.show_error(f"Found {report.total_failures} failures.")
        return False
    ui.show_success("All checks passed.")
    return True
