"""Environment health checks for the benchmark executor."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from qs_runner.models.config import SuiteConfig

_FIND_SPEC = (
    "import importlib.util, sys; "
    "sys.exit(0 if importlib.util.find_spec(sys.argv[1]) else 1)"
)


@dataclass(frozen=True)
class DoctorCheck:
    label: str
    ok: bool
    required: bool = True
    detail: str = ""


@dataclass
class DoctorReport:
    checks: List[DoctorCheck] = field(default_factory=list)

    @property
    def total_failures(self) -> int:
        return sum(1 for check in self.checks if check.required and not check.ok)


class DoctorService:
    """Check that the suite can launch its executor."""

    def __init__(
        self,
        config: SuiteConfig,
        which: Callable[[str], Optional[str]] | None = None,
        runner: Callable[..., subprocess.CompletedProcess] | None = None,
    ) -> None:
        self.config = config
        self._which = which or shutil.which
        self._runner = runner or subprocess.run

    def _check_module(self) -> DoctorCheck:
        label = f"Executor module ({self.config.executor_module})"
        try:
            completed = self._runner(
                [self.config.python, "-c", _FIND_SPEC, self.config.executor_module],
                cwd=self.config.workdir,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            return DoctorCheck(label, False, detail=str(exc))
        return DoctorCheck(label, completed.returncode == 0)

    def check_all(self) -> DoctorReport:
        report = DoctorReport()
        resolved = self._which(self.config.python)
        report.checks.append(
            DoctorCheck(f"Interpreter ({self.config.python})", resolved is not None, detail=resolved or "")
        )
        if resolved is not None:
            report.checks.append(self._check_module())
        report.checks.append(
            DoctorCheck(
                f"Workdir ({self.config.workdir})",
                self.config.workdir.is_dir(),
            )
        )
        return report
