"""Single executor invocation: record, pre-clean, run, collect."""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from pathlib import Path
from typing import Callable, Sequence

from qs_common.errors import InvocationError
from qs_runner.models.results import InvocationResult
from qs_runner.services.artifacts import ArtifactCollector, ScratchArea


logger = logging.getLogger(__name__)

COMMAND_FILE = "run_cmd.txt"

CommandRunner = Callable[..., subprocess.CompletedProcess]


def record_command(destination: Path, command: Sequence[str]) -> Path:
    """Persist the exact command line so a failed run stays diagnosable."""
    path = destination / COMMAND_FILE
    path.write_text(shlex.join(command) + "\n", encoding="utf-8")
    return path


class ExecutorInvoker:
    """Run one external command against an explicit scratch area.

    A non-zero exit is raised as ``InvocationError``; artifacts are collected
    only after a successful run. The call blocks until the process exits.
    """

    def __init__(
        self,
        collector: ArtifactCollector,
        runner: CommandRunner | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._collector = collector
        self._runner = runner or subprocess.run
        self._cwd = cwd

    def invoke(
        self,
        destination: Path,
        command: Sequence[str],
        scratch: ScratchArea,
        *,
        label: str | None = None,
    ) -> InvocationResult:
        argv = [str(part) for part in command]
        label = label or destination.name
        destination.mkdir(parents=True, exist_ok=True)
        record_command(destination, argv)

        scratch.ensure()
        scratch.clean()

        logger.info("Running: %s", shlex.join(argv))
        started = time.monotonic()
        try:
            completed = self._runner(argv, cwd=self._cwd, check=False)
        except OSError as exc:
            raise InvocationError(
                f"Could not launch executor for {label}",
                context={"command": argv, "run_dir": destination},
                cause=exc,
            ) from exc
        duration = time.monotonic() - started

        if completed.returncode != 0:
            raise InvocationError(
                f"Executor exited with status {completed.returncode} for {label}",
                returncode=completed.returncode,
                context={"command": argv, "run_dir": destination},
            )

        report = self._collector.collect(destination, scratch)
        logger.info("Saved to: %s (%.1fs)", destination, duration)
        return InvocationResult(
            label=label,
            run_dir=destination,
            command=tuple(argv),
            returncode=completed.returncode,
            duration_seconds=duration,
            collection=report,
        )
