"""
Command-line interface for qa-sweep.

Builds the retrieval index once, then runs the benchmark sweep (baseline,
top-k, max-hops, retriever depth, embedding model) with each run isolated in
its own directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.markup import escape

from qs_common.api import ConfigurationError, InvocationError, QSError, configure_logging
from qs_runner.api import SuiteConfig, SuiteProgress, SweepSuite, resolve_suite_config
from qs_runner.services.doctor import DoctorService
from qs_ui.presenters import render_doctor_report, render_plan, render_summary
from qs_ui.ui.console import ConsoleUI

SKIPPABLE_GROUPS = {
    "top_k": "top_k",
    "max_hops": "max_hops",
    "retriever_depth": ("bm25_k", "faiss_k"),
    "embed_model": "embed_models",
}


@dataclass
class CLIState:
    """Options collected by the root callback, resolved lazily per command."""

    ui: ConsoleUI
    config_path: Optional[Path] = None
    overrides: Dict[str, Any] = field(default_factory=dict)

    def load_config(self) -> SuiteConfig:
        return resolve_suite_config(self.config_path, self.overrides)


app = typer.Typer(
    help="Build a retrieval index once and sweep QA benchmark runs against it.",
    no_args_is_help=True,
)


def _skip_overrides(skip: List[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in skip:
        fields = SKIPPABLE_GROUPS.get(name)
        if fields is None:
            raise typer.BadParameter(
                f"unknown sweep group '{name}' (choose from {', '.join(sorted(SKIPPABLE_GROUPS))})",
                param_hint="--skip",
            )
        for field_name in (fields,) if isinstance(fields, str) else fields:
            overrides[field_name] = []
    return overrides


@app.callback()
def entry(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML or JSON suite definition."),
    dataset: Optional[str] = typer.Option(None, "--dataset", help="Dataset identifier."),
    split: Optional[str] = typer.Option(None, "--split", help="Dataset split identifier."),
    index_size: Optional[int] = typer.Option(None, "--index-size", help="Examples used to build the index."),
    eval_size: Optional[int] = typer.Option(None, "--eval-size", help="Examples evaluated per run."),
    top_k: Optional[List[int]] = typer.Option(None, "--top-k", help="top-k value to sweep (repeatable)."),
    max_hops: Optional[List[int]] = typer.Option(None, "--max-hops", help="max-hops value to sweep (repeatable)."),
    bm25_k: Optional[List[int]] = typer.Option(None, "--bm25-k", help="bm25 depth to sweep (repeatable)."),
    faiss_k: Optional[List[int]] = typer.Option(None, "--faiss-k", help="faiss depth to sweep (repeatable)."),
    embed_model: Optional[List[str]] = typer.Option(
        None, "--embed-model", help="Embedding model to sweep (repeatable)."
    ),
    skip: Optional[List[str]] = typer.Option(
        None, "--skip", help="Drop a sweep group: top_k, max_hops, retriever_depth, embed_model."
    ),
    python: Optional[str] = typer.Option(None, "--python", help="Interpreter that launches the executor."),
    executor_module: Optional[str] = typer.Option(None, "--executor-module", help="Executor module for `python -m`."),
    workdir: Optional[Path] = typer.Option(None, "--workdir", help="Executor working directory."),
    scratch_dir: Optional[Path] = typer.Option(None, "--scratch-dir", help="Executor output location."),
    output_root: Optional[Path] = typer.Option(None, "--output-root", help="Parent of all run directories."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
    log_json: bool = typer.Option(False, "--log-json", help="Render logs as JSON."),
) -> None:
    """Global options shared by every command."""
    configure_logging(debug=debug, json=True if log_json else None, force=True)
    overrides: Dict[str, Any] = {
        "dataset": dataset,
        "split": split,
        "index_size": index_size,
        "eval_size": eval_size,
        "top_k": top_k or None,
        "max_hops": max_hops or None,
        "bm25_k": bm25_k or None,
        "faiss_k": faiss_k or None,
        "embed_models": embed_model or None,
        "python": python,
        "executor_module": executor_module,
        "workdir": workdir,
        "scratch_dir": scratch_dir,
        "output_root": output_root,
    }
    overrides.update(_skip_overrides(skip or []))
    ctx.obj = CLIState(ui=ConsoleUI(), config_path=config, overrides=overrides)


def _load(state: CLIState) -> SuiteConfig:
    try:
        return state.load_config()
    except ConfigurationError as exc:
        state.ui.show_error(escape(str(exc)))
        for error in exc.context.get("errors", []):
            location = ".".join(str(part) for part in error.get("loc", ())) or "config"
            state.ui.show_error(escape(f"  {location}: {error.get('msg', '')}"))
        raise typer.Exit(1)


@app.command("plan")
def plan_command(ctx: typer.Context) -> None:
    """Show every invocation the suite would run, without running it."""
    state: CLIState = ctx.obj
    suite = SweepSuite(_load(state))
    render_plan(state.ui, suite.plan())


@app.command("run")
def run_command(ctx: typer.Context) -> None:
    """Build the index and run the whole sweep; stops at the first failure."""
    state: CLIState = ctx.obj
    ui = state.ui

    def _announce(progress: SuiteProgress) -> None:
        ui.show_rule(f"[{progress.position}/{progress.total}] {progress.label}")

    suite = SweepSuite(_load(state), progress=_announce)
    try:
        report = suite.run()
    except InvocationError as exc:
        ui.show_error(str(exc))
        run_dir = exc.context.get("run_dir")
        if run_dir:
            ui.show_info(f"Command recorded in: {run_dir}")
        raise typer.Exit(exc.exit_code)
    except QSError as exc:
        ui.show_error(str(exc))
        raise typer.Exit(1)
    except KeyboardInterrupt:
        ui.show_warning("Interrupted; the current run directory keeps only its partial artifacts.")
        raise typer.Exit(130)
    render_summary(ui, report)


@app.command("doctor")
def doctor_command(ctx: typer.Context) -> None:
    """Check that the executor can be launched."""
    state: CLIState = ctx.obj
    report = DoctorService(_load(state)).check_all()
    if not render_doctor_report(state.ui, report):
        raise typer.Exit(1)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
