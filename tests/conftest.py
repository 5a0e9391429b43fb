import subprocess
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console
from rich.table import Table

from qs_runner.api import (
    ArtifactCollector,
    ExecutorInvoker,
    RunTagger,
    SuiteConfig,
    SweepSuite,
)


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """
    Custom hook to print statistics by marker at the end of the test session.
    """
    _ = (exitstatus, config)
    # Defined markers in pyproject.toml
    known_markers = {"unit_common", "unit_runner", "unit_ui"}
    marker_stats = defaultdict(lambda: {"passed": 0, "failed": 0, "skipped": 0, "total": 0, "duration": 0.0})

    for outcome in ["passed", "failed", "skipped"]:
        for report in terminalreporter.stats.get(outcome, []):
            # Only count the actual test call, or setup skips
            if report.when == "call" or (report.when == "setup" and report.outcome == "skipped"):
                duration = getattr(report, "duration", 0.0)
                for marker in known_markers:
                    if marker in report.keywords:
                        stats = marker_stats[marker]
                        stats[outcome] += 1
                        stats["total"] += 1
                        stats["duration"] += duration

    if not marker_stats:
        return

    table = Table(title="Test Statistics by Marker", show_header=True, header_style="bold magenta")
    table.add_column("Marker", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Duration (s)", justify="right", style="blue")

    for marker in sorted(marker_stats):
        stats = marker_stats[marker]
        table.add_row(
            marker,
            str(stats["total"]),
            str(stats["passed"]),
            str(stats["failed"]),
            str(stats["skipped"]),
            f"{stats['duration']:.2f}",
        )

    console = Console()
    console.print("\n")
    console.print(table)


@dataclass
class FakeExecutor:
    """Stand-in for ``subprocess.run`` that behaves like the benchmark CLI.

    ``build-index`` writes ``index_meta.json``; ``run-benchmark`` writes the
    three result files plus any ``extra_files``. ``fail_when`` selects argv
    lists that should exit non-zero instead.
    """

    scratch: Path
    extra_files: tuple[str, ...] = ()
    fail_when: Callable[[list[str]], bool] = lambda argv: False
    fail_code: int = 2
    calls: list[list[str]] = field(default_factory=list)

    def __call__(self, argv, cwd=None, check=False, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        if self.fail_when(argv):
            return subprocess.CompletedProcess(argv, self.fail_code)
        self.scratch.mkdir(parents=True, exist_ok=True)
        if "build-index" in argv:
            (self.scratch / "index_meta.json").write_text('{"examples": 200}')
        elif "run-benchmark" in argv:
            marker = " ".join(argv)
            (self.scratch / "results.csv").write_text(f"question,answer\n# {marker}\n")
            (self.scratch / "trulens_leaderboard.csv").write_text("app,score\n")
            (self.scratch / "traces.jsonl").write_text("{}\n")
            for name in self.extra_files:
                (self.scratch / name).write_text("extra")
        return subprocess.CompletedProcess(argv, 0)

    @property
    def operations(self) -> list[str]:
        return [argv[3] for argv in self.calls]


@pytest.fixture
def suite_config(tmp_path: Path) -> SuiteConfig:
    return SuiteConfig(
        index_size=200,
        eval_size=50,
        top_k=[5, 10],
        max_hops=[1, 2],
        bm25_k=[20],
        faiss_k=[20],
        embed_models=["org/model-a"],
        workdir=tmp_path,
    )


@pytest.fixture
def fake_executor(suite_config: SuiteConfig) -> FakeExecutor:
    return FakeExecutor(scratch=suite_config.scratch_path)


@pytest.fixture
def make_suite(fake_executor: FakeExecutor):
    """Build a SweepSuite wired to the fake executor and no environment snapshots."""

    def _make(config: SuiteConfig, **kwargs) -> SweepSuite:
        invoker = ExecutorInvoker(ArtifactCollector(), runner=fake_executor, cwd=config.workdir)
        kwargs.setdefault("which", lambda name: f"/usr/bin/{name}")
        kwargs.setdefault("tagger", RunTagger())
        return SweepSuite(config, invoker=invoker, **kwargs)

    return _make
