"""Best-effort environment snapshots written into each run directory."""

from __future__ import annotations

import json
import logging
import platform
import subprocess
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from qs_runner.models.results import CollectionReport


logger = logging.getLogger(__name__)

PYTHON_VERSION_FILE = "python_version.txt"
PIP_FREEZE_FILE = "pip_freeze.txt"
SYSTEM_INFO_FILE = "system_info.json"


def collect_platform_info() -> dict[str, Any]:
    """Describe the orchestrating host and interpreter."""
    uname = platform.uname()
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "host": uname.node or platform.node() or "",
        "platform": {
            "system": uname.system,
            "release": uname.release,
            "version": uname.version,
            "machine": uname.machine,
        },
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable or "",
        },
    }


@dataclass
class EnvironmentSnapshotter:
    """Record interpreter version, dependency manifest and host info.

    The interpreter queried is the one that launches the executor, so the
    snapshot describes the benchmark environment rather than this process.
    """

    python: str = "python"
    runner: Callable[..., subprocess.CompletedProcess] | None = None

    def _capture(self, argv: list[str], target: Path) -> None:
        # stderr is folded into the file: `python -V` printed to stderr on old interpreters
        completed = (self.runner or subprocess.run)(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
        target.write_text(completed.stdout or "", encoding="utf-8")
        if completed.returncode != 0:
            raise RuntimeError(f"{' '.join(argv)} exited with {completed.returncode}")

    def snapshot(self, destination: Path, report: CollectionReport) -> None:
        """Write every snapshot file; failures are recorded, never raised."""
        steps: list[tuple[str, Callable[[Path], None]]] = [
            (PYTHON_VERSION_FILE, lambda p: self._capture([self.python, "-V"], p)),
            (PIP_FREEZE_FILE, lambda p: self._capture([self.python, "-m", "pip", "freeze"], p)),
            (
                SYSTEM_INFO_FILE,
                lambda p: p.write_text(json.dumps(collect_platform_info(), indent=2), encoding="utf-8"),
            ),
        ]
        for name, write in steps:
            target = destination / name
            try:
                write(target)
                report.snapshots.append(name)
            except (OSError, subprocess.SubprocessError, RuntimeError) as exc:
                logger.debug("Failed to write environment snapshot %s: %s", name, exc)
                report.record_failure(name, exc)
