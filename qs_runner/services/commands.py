"""Executor command line construction."""

from __future__ import annotations

from typing import Any, Mapping

from qs_runner.models.config import SuiteConfig

BUILD_INDEX = "build-index"
RUN_BENCHMARK = "run-benchmark"


def executor_command(
    config: SuiteConfig,
    operation: str,
    max_examples: int,
    options: Mapping[str, Any] | None = None,
) -> list[str]:
    """Render one executor invocation as an argv list.

    ``options`` maps flag names without the leading dashes (``top-k``) to
    values; insertion order is preserved on the command line.
    """
    argv = [
        config.python,
        "-m",
        config.executor_module,
        operation,
        "--dataset",
        config.dataset,
        "--split",
        config.split,
        "--max-examples",
        str(max_examples),
    ]
    for flag, value in (options or {}).items():
        argv.extend([f"--{flag}", str(value)])
    return argv


def build_index_command(config: SuiteConfig) -> list[str]:
    return executor_command(config, BUILD_INDEX, config.index_size)


def benchmark_command(config: SuiteConfig, options: Mapping[str, Any] | None = None) -> list[str]:
    return executor_command(config, RUN_BENCHMARK, config.eval_size, options)
