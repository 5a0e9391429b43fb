"""Unit tests for scratch-area collection."""

import shutil
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from qs_runner.models.results import CollectionReport
from qs_runner.services.artifacts import ArtifactCollector, ScratchArea

pytestmark = pytest.mark.unit_runner

RESULT_FILES = ("results.csv", "trulens_leaderboard.csv", "traces.jsonl")


@pytest.fixture
def scratch(tmp_path: Path) -> ScratchArea:
    area = ScratchArea(
        path=tmp_path / "runs",
        result_files=RESULT_FILES,
        metadata_files=("index_meta.json",),
        preserve=("*.lock",),
        protected=(tmp_path / "runs" / "sweeps",),
    )
    area.ensure()
    return area


def _populate(scratch: ScratchArea, *names: str) -> None:
    for name in names:
        (scratch.path / name).write_text(name)


def test_collect_moves_known_results_and_copies_metadata(tmp_path: Path, scratch: ScratchArea) -> None:
    _populate(scratch, *RESULT_FILES, "index_meta.json")
    dest = tmp_path / "runs" / "sweeps" / "run-1"

    report = ArtifactCollector().collect(dest, scratch)

    assert report.ok
    assert sorted(report.moved) == sorted(RESULT_FILES)
    assert report.copied == ["index_meta.json"]
    for name in RESULT_FILES:
        assert (dest / name).read_text() == name
        assert not (scratch.path / name).exists()
    # Metadata stays available to later runs.
    assert (scratch.path / "index_meta.json").exists()
    assert (dest / "index_meta.json").exists()


def test_collect_sweeps_unexpected_leftovers(tmp_path: Path, scratch: ScratchArea) -> None:
    _populate(scratch, "results.csv", "debug.log")
    (scratch.path / "cache").mkdir()
    (scratch.path / "cache" / "blob.bin").write_text("x")
    dest = tmp_path / "out" / "run-1"

    report = ArtifactCollector().collect(dest, scratch)

    assert report.moved == ["results.csv"]
    assert sorted(report.swept) == ["cache", "debug.log"]
    assert (dest / "debug.log").exists()
    assert (dest / "cache" / "blob.bin").exists()
    assert not any(scratch.path.iterdir())


def test_collect_never_sweeps_output_root_or_preserved(tmp_path: Path, scratch: ScratchArea) -> None:
    earlier_run = tmp_path / "runs" / "sweeps" / "run-0"
    earlier_run.mkdir(parents=True)
    (earlier_run / "results.csv").write_text("old")
    _populate(scratch, "faiss.lock")
    dest = tmp_path / "runs" / "sweeps" / "run-1"

    report = ArtifactCollector().collect(dest, scratch)

    assert report.swept == []
    assert (earlier_run / "results.csv").read_text() == "old"
    assert (scratch.path / "faiss.lock").exists()


def test_collect_continues_after_a_failed_move(
    tmp_path: Path, scratch: ScratchArea, monkeypatch: pytest.MonkeyPatch
) -> None:
    _populate(scratch, *RESULT_FILES, "extra.txt")
    dest = tmp_path / "out" / "run-1"
    real_move = shutil.move

    def flaky_move(src, dst, *args, **kwargs):
        if src.endswith("trulens_leaderboard.csv"):
            raise PermissionError("read-only")
        return real_move(src, dst, *args, **kwargs)

    monkeypatch.setattr("qs_runner.services.artifacts.shutil.move", flaky_move)

    report = ArtifactCollector().collect(dest, scratch)

    assert not report.ok
    assert [f.item for f in report.failures] == ["trulens_leaderboard.csv"]
    assert "results.csv" in report.moved and "traces.jsonl" in report.moved
    assert report.swept == ["extra.txt"]


def test_collect_is_idempotent_on_destination(tmp_path: Path, scratch: ScratchArea) -> None:
    dest = tmp_path / "out" / "run-1"
    dest.mkdir(parents=True)
    report = ArtifactCollector().collect(dest, scratch)
    assert report.ok
    assert report.collected == []


def test_collect_records_snapshot_failures_without_raising(tmp_path: Path, scratch: ScratchArea) -> None:
    def failing_snapshot(destination: Path, report: CollectionReport) -> None:
        report.record_failure("pip_freeze.txt", "pip not found")

    snapshotter = MagicMock()
    snapshotter.snapshot.side_effect = failing_snapshot
    _populate(scratch, "results.csv")

    report = ArtifactCollector(snapshotter).collect(tmp_path / "out", scratch)

    snapshotter.snapshot.assert_called_once()
    assert report.moved == ["results.csv"]
    assert [f.item for f in report.failures] == ["pip_freeze.txt"]


def test_scratch_clean_removes_only_known_results(scratch: ScratchArea) -> None:
    _populate(scratch, "results.csv", "traces.jsonl", "index_meta.json", "notes.txt")
    removed = scratch.clean()
    assert sorted(removed) == ["results.csv", "traces.jsonl"]
    assert scratch.present_results() == []
    assert (scratch.path / "index_meta.json").exists()
    assert (scratch.path / "notes.txt").exists()
    assert scratch.clean_metadata() == ["index_meta.json"]
