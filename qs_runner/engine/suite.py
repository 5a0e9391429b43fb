"""Sweep suite driver: prerequisite check, index build, sequential sweep."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from qs_common.errors import PrerequisiteError, RunDirectoryCollisionError
from qs_runner.engine.invoker import ExecutorInvoker
from qs_runner.engine.planning import SweepPoint, build_sweep_groups, plan_sweep
from qs_runner.engine.tagging import RunTagger, eval_prefix, index_prefix
from qs_runner.models.config import SuiteConfig
from qs_runner.models.results import InvocationResult, SuiteReport
from qs_runner.services.artifacts import ArtifactCollector, ScratchArea
from qs_runner.services.commands import benchmark_command, build_index_command
from qs_runner.services.environment import EnvironmentSnapshotter


logger = logging.getLogger(__name__)

INDEX_LABEL = "index"


@dataclass(frozen=True)
class PlannedInvocation:
    """One invocation the suite will perform, in order."""

    label: str
    command: tuple[str, ...]
    options: tuple[tuple[str, object], ...] = ()


@dataclass(frozen=True)
class SuiteProgress:
    """Notification emitted before each invocation starts."""

    label: str
    position: int
    total: int
    run_dir: Path


ProgressCallback = Callable[[SuiteProgress], None]


class SweepSuite:
    """Build the index once, then run every sweep point in its own directory."""

    def __init__(
        self,
        config: SuiteConfig,
        *,
        invoker: ExecutorInvoker | None = None,
        tagger: RunTagger | None = None,
        which: Callable[[str], Optional[str]] | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.scratch = ScratchArea.from_config(config)
        self._invoker = invoker or ExecutorInvoker(
            ArtifactCollector(EnvironmentSnapshotter(python=config.python)),
            cwd=config.workdir,
        )
        self._tagger = tagger or RunTagger()
        self._which = which or shutil.which
        self._progress = progress

    def sweep_points(self) -> list[SweepPoint]:
        return plan_sweep(build_sweep_groups(self.config))

    def plan(self) -> list[PlannedInvocation]:
        """Return every invocation in execution order without running anything."""
        planned = [PlannedInvocation(label=INDEX_LABEL, command=tuple(build_index_command(self.config)))]
        for point in self.sweep_points():
            planned.append(
                PlannedInvocation(
                    label=point.label,
                    command=tuple(benchmark_command(self.config, point.options)),
                    options=point.params,
                )
            )
        return planned

    def check_prerequisites(self) -> None:
        if self._which(self.config.python) is None:
            raise PrerequisiteError(
                f"Missing command: {self.config.python}",
                context={"command": self.config.python},
            )

    def run(self) -> SuiteReport:
        """Execute the whole suite; the first failed invocation propagates."""
        self.check_prerequisites()
        self.scratch.ensure()
        output_root = self.config.output_path
        output_root.mkdir(parents=True, exist_ok=True)

        points = self.sweep_points()
        total = len(points) + 1

        index_dir = output_root / self._tagger.tag(
            index_prefix(self.config.index_size, self.config.dataset, self.config.split),
            INDEX_LABEL,
        )
        logger.info("Building index into %s", index_dir)
        self.scratch.clean_metadata()
        index_result = self._invoke(
            index_dir, build_index_command(self.config), INDEX_LABEL, 1, total
        )

        prefix = eval_prefix(self.config.eval_size, self.config.dataset, self.config.split)
        stamp = self._tagger.stamp()
        report = SuiteReport(
            index=index_result, prefix=str(output_root / self._tagger.prefix(prefix, stamp))
        )

        for position, point in enumerate(points, start=2):
            run_dir = output_root / self._tagger.tag(prefix, point.label, stamp=stamp)
            result = self._invoke(
                run_dir, benchmark_command(self.config, point.options), point.label, position, total
            )
            report.runs.append(result)

        logger.info("Suite complete. All runs saved under: %s*", report.prefix)
        return report

    def _invoke(
        self, run_dir: Path, command: list[str], label: str, position: int, total: int
    ) -> InvocationResult:
        if run_dir.exists():
            raise RunDirectoryCollisionError(
                f"Run directory already exists: {run_dir}", context={"run_dir": run_dir}
            )
        if self._progress is not None:
            self._progress(SuiteProgress(label=label, position=position, total=total, run_dir=run_dir))
        return self._invoker.invoke(run_dir, command, self.scratch, label=label)
