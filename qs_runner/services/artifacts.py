"""Scratch area handling and artifact collection into run directories."""

from __future__ import annotations

import fnmatch
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from qs_runner.models.config import SuiteConfig
from qs_runner.models.results import CollectionReport


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScratchArea:
    """The executor's shared output location and the files it is known to write.

    ``protected`` lists paths (typically the output root) that live inside the
    scratch area but belong to the orchestrator; the leftover sweep never
    touches them or their ancestors.
    """

    path: Path
    result_files: tuple[str, ...] = ()
    metadata_files: tuple[str, ...] = ()
    preserve: tuple[str, ...] = ()
    protected: tuple[Path, ...] = field(default_factory=tuple)

    @classmethod
    def from_config(cls, config: SuiteConfig) -> "ScratchArea":
        return cls(
            path=config.scratch_path,
            result_files=tuple(config.artifacts.result_files),
            metadata_files=tuple(config.artifacts.metadata_files),
            preserve=tuple(config.artifacts.preserve),
            protected=(config.output_path,),
        )

    def ensure(self) -> Path:
        self.path.mkdir(parents=True, exist_ok=True)
        return self.path

    def present_results(self) -> list[str]:
        return [name for name in self.result_files if (self.path / name).exists()]

    def _remove(self, names: tuple[str, ...]) -> list[str]:
        removed = []
        for name in names:
            target = self.path / name
            try:
                target.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("Could not remove stale scratch file %s: %s", target, exc)
                continue
            removed.append(name)
        return removed

    def clean(self) -> list[str]:
        """Remove leftover known result files; returns the names removed."""
        removed = self._remove(self.result_files)
        if removed:
            logger.info("Removed stale scratch files: %s", ", ".join(removed))
        return removed

    def clean_metadata(self) -> list[str]:
        """Remove metadata files, used before a fresh index build."""
        return self._remove(self.metadata_files)

    def is_protected(self, entry: Path, extra: tuple[Path, ...] = ()) -> bool:
        resolved = entry.resolve()
        for guarded in (*self.protected, *extra):
            guarded = guarded.resolve()
            if resolved == guarded or resolved in guarded.parents or guarded in resolved.parents:
                return True
        return False

    def is_preserved(self, name: str) -> bool:
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.preserve)


class Snapshotter(Protocol):
    def snapshot(self, destination: Path, report: CollectionReport) -> None: ...


class ArtifactCollector:
    """Drain the scratch area into a run directory.

    Every step is best-effort: a failure is logged and recorded in the
    returned report, and collection carries on with the next file.
    """

    def __init__(self, snapshotter: Snapshotter | None = None) -> None:
        self._snapshotter = snapshotter

    def collect(self, destination: Path, scratch: ScratchArea) -> CollectionReport:
        destination.mkdir(parents=True, exist_ok=True)
        report = CollectionReport(destination=destination)

        if self._snapshotter is not None:
            self._snapshotter.snapshot(destination, report)

        claimed: set[str] = set(scratch.metadata_files)
        for name in scratch.result_files:
            source = scratch.path / name
            if not source.exists():
                continue
            claimed.add(name)
            if self._move(source, destination / name, report):
                report.moved.append(name)

        for name in scratch.metadata_files:
            source = scratch.path / name
            if not source.is_file():
                continue
            try:
                shutil.copy2(source, destination / name)
                report.copied.append(name)
            except OSError as exc:
                logger.warning("Failed to copy %s into %s: %s", source, destination, exc)
                report.record_failure(name, exc)

        self._sweep(destination, scratch, claimed, report)

        logger.info(
            "Collected %d artifact(s) into %s (%d soft failure(s))",
            len(report.collected),
            destination,
            len(report.failures),
        )
        return report

    def _sweep(
        self,
        destination: Path,
        scratch: ScratchArea,
        claimed: set[str],
        report: CollectionReport,
    ) -> None:
        """Move every unclaimed scratch entry so nothing leaks into the next run."""
        if not scratch.path.is_dir():
            return
        for entry in sorted(scratch.path.iterdir()):
            name = entry.name
            if (
                name in claimed
                or scratch.is_preserved(name)
                or scratch.is_protected(entry, extra=(destination,))
            ):
                continue
            if self._move(entry, destination / name, report):
                report.swept.append(name)

    @staticmethod
    def _move(source: Path, target: Path, report: CollectionReport) -> bool:
        try:
            shutil.move(str(source), str(target))
        except (OSError, shutil.Error) as exc:
            logger.warning("Failed to move %s to %s: %s", source, target, exc)
            report.record_failure(source.name, exc)
            return False
        return True
