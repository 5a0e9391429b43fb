"""Sweep suite configuration (canonical definition)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from qs_common.api import ConfigurationError, parse_int_env, parse_list_env

DEFAULT_EMBED_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


class ArtifactContract(BaseModel):
    """Files the benchmark executor is expected to leave in the scratch area."""

    model_config = ConfigDict(frozen=True)

    result_files: List[str] = Field(
        default_factory=lambda: ["results.csv", "trulens_leaderboard.csv", "traces.jsonl"],
        description="Per-run result files; moved into the run directory",
    )
    metadata_files: List[str] = Field(
        default_factory=lambda: ["index_meta.json"],
        description="Suite-wide metadata files; copied so later runs still see them",
    )
    preserve: List[str] = Field(
        default_factory=list,
        description="Glob patterns of scratch entries the leftover sweep must never move",
    )


class SuiteConfig(BaseModel):
    """Main configuration for a sweep suite. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    dataset: str = Field(default="hotpotqa", min_length=1, description="Dataset identifier")
    split: str = Field(default="validation", min_length=1, description="Dataset split identifier")
    index_size: int = Field(default=200, gt=0, description="Examples used to build the index")
    eval_size: int = Field(default=50, gt=0, description="Examples evaluated per benchmark run")

    # Sweep axes; an empty list removes that sweep group.
    top_k: List[int] = Field(default_factory=lambda: [5, 10], description="top-k candidates")
    max_hops: List[int] = Field(default_factory=lambda: [1, 2], description="max-hops candidates")
    bm25_k: List[int] = Field(default_factory=lambda: [20], description="bm25 retriever depths")
    faiss_k: List[int] = Field(default_factory=lambda: [20], description="faiss retriever depths")
    embed_models: List[str] = Field(
        default_factory=lambda: [DEFAULT_EMBED_MODEL],
        description="Embedding model identifiers",
    )

    # Executor wiring
    python: str = Field(default="python", min_length=1, description="Interpreter used to launch the executor")
    executor_module: str = Field(
        default="otel_native_eval.cli", min_length=1, description="Module run with `python -m`"
    )
    workdir: Path = Field(default=Path("."), description="Working directory of the executor process")
    scratch_dir: Path = Field(default=Path("runs"), description="Executor output location (relative to workdir)")
    output_root: Path = Field(
        default=Path("runs/sweeps"), description="Parent of all run directories (relative to workdir)"
    )
    artifacts: ArtifactContract = Field(default_factory=ArtifactContract)

    @field_validator("top_k", "max_hops", "bm25_k", "faiss_k")
    @classmethod
    def _positive_values(cls, values: List[int]) -> List[int]:
        for value in values:
            if value <= 0:
                raise ValueError(f"sweep values must be positive integers, got {value}")
        return values

    @field_validator("embed_models")
    @classmethod
    def _non_blank_models(cls, values: List[str]) -> List[str]:
        if any(not value.strip() for value in values):
            raise ValueError("embedding model identifiers must be non-empty")
        return values

    @model_validator(mode="after")
    def _scratch_outside_workdir(self) -> "SuiteConfig":
        # Leftover scratch entries are swept into run directories.
        scratch = self.scratch_path.resolve()
        workdir = self.workdir.resolve()
        if scratch == workdir or scratch in workdir.parents:
            raise ValueError(
                f"scratch_dir {self.scratch_dir} must not be workdir or one of its parents"
            )
        return self

    @property
    def scratch_path(self) -> Path:
        return self.workdir / self.scratch_dir

    @property
    def output_path(self) -> Path:
        return self.workdir / self.output_root

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SuiteConfig":
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise ConfigurationError(
                "Invalid suite configuration", context={"errors": exc.errors()}, cause=exc
            ) from exc


def load_config_data(filepath: Path) -> dict[str, Any]:
    """Read a YAML or JSON suite definition into a plain mapping."""
    if not filepath.exists():
        raise ConfigurationError(
            f"Configuration file not found: {filepath}", context={"path": filepath}
        )
    # JSON is a subset of YAML, so one parser covers both.
    data = yaml.safe_load(filepath.read_text()) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a mapping at the top level.", context={"path": filepath}
        )
    return data


_LIST_ENV: Dict[str, tuple[str, Callable[[str], Any]]] = {
    "top_k": ("QS_TOP_K_LIST", int),
    "max_hops": ("QS_MAX_HOPS_LIST", int),
    "bm25_k": ("QS_BM25_K_LIST", int),
    "faiss_k": ("QS_FAISS_K_LIST", int),
    "embed_models": ("QS_EMBED_MODELS", str),
}

_STR_ENV: Dict[str, str] = {
    "dataset": "QS_DATASET",
    "split": "QS_SPLIT",
    "python": "QS_PYTHON",
    "executor_module": "QS_EXECUTOR_MODULE",
    "workdir": "QS_WORKDIR",
    "scratch_dir": "QS_SCRATCH_DIR",
    "output_root": "QS_OUTPUT_ROOT",
}

_INT_ENV: Dict[str, str] = {
    "index_size": "QS_INDEX_MAX_EXAMPLES",
    "eval_size": "QS_EVAL_MAX_EXAMPLES",
}


def apply_env_overrides(
    values: MutableMapping[str, Any], environ: Mapping[str, str] | None = None
) -> MutableMapping[str, Any]:
    """Overlay QS_* environment variables on top of file-provided values."""
    env = os.environ if environ is None else environ
    for key, env_var in _STR_ENV.items():
        raw = env.get(env_var)
        if raw:
            values[key] = raw
    for key, env_var in _INT_ENV.items():
        raw = env.get(env_var)
        if raw is None:
            continue
        parsed = parse_int_env(raw)
        if parsed is None:
            raise ConfigurationError(
                f"{env_var} must be an integer", context={"value": raw}
            )
        values[key] = parsed
    for key, (env_var, convert) in _LIST_ENV.items():
        tokens = parse_list_env(env.get(env_var))
        if tokens is None:
            continue
        try:
            values[key] = [convert(token) for token in tokens]
        except ValueError as exc:
            raise ConfigurationError(
                f"{env_var} contains an invalid value", context={"value": env.get(env_var)}, cause=exc
            ) from exc
    return values


def resolve_suite_config(
    config_path: Optional[Path] = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> SuiteConfig:
    """Build the suite config: defaults, then file, then env, then explicit overrides."""
    values: dict[str, Any] = load_config_data(config_path) if config_path else {}
    apply_env_overrides(values, environ)
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value
    return SuiteConfig.from_dict(values)
