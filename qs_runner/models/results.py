"""Result types for invocations and artifact collection.

Invocation outcomes are strict: a failed invocation is raised as
``InvocationError`` and never returned. Collection outcomes are soft: failures
are recorded in a ``CollectionReport`` and never escalated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class SoftFailure:
    """A best-effort step that failed without affecting the suite outcome."""

    item: str
    reason: str


@dataclass
class CollectionReport:
    """What one collector pass did with the scratch area."""

    destination: Path
    moved: list[str] = field(default_factory=list)
    copied: list[str] = field(default_factory=list)
    swept: list[str] = field(default_factory=list)
    snapshots: list[str] = field(default_factory=list)
    failures: list[SoftFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def collected(self) -> list[str]:
        return [*self.moved, *self.copied, *self.swept]

    def record_failure(self, item: str, exc: BaseException | str) -> None:
        self.failures.append(SoftFailure(item=item, reason=str(exc)))


@dataclass(frozen=True)
class InvocationResult:
    """A successful executor invocation and its collected artifacts."""

    label: str
    run_dir: Path
    command: tuple[str, ...]
    returncode: int
    duration_seconds: float
    collection: CollectionReport


@dataclass
class SuiteReport:
    """Outcome of a complete sweep suite."""

    index: InvocationResult
    runs: list[InvocationResult] = field(default_factory=list)
    prefix: str = ""

    @property
    def run_dirs(self) -> list[Path]:
        return [result.run_dir for result in self.runs]

    @property
    def soft_failures(self) -> list[SoftFailure]:
        failures = list(self.index.collection.failures)
        for result in self.runs:
            failures.extend(result.collection.failures)
        return failures
