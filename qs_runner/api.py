"""Public API surface for qs_runner."""

from qs_runner.engine.invoker import ExecutorInvoker, record_command
from qs_runner.engine.planning import (
    SweepAxis,
    SweepGroup,
    SweepPoint,
    build_sweep_groups,
    plan_sweep,
)
from qs_runner.engine.suite import PlannedInvocation, SuiteProgress, SweepSuite
from qs_runner.engine.tagging import RunTagger, sanitize_component
from qs_runner.models.config import ArtifactContract, SuiteConfig, resolve_suite_config
from qs_runner.models.results import (
    CollectionReport,
    InvocationResult,
    SoftFailure,
    SuiteReport,
)
from qs_runner.services.artifacts import ArtifactCollector, ScratchArea
from qs_runner.services.environment import EnvironmentSnapshotter

__all__ = [
    "ArtifactCollector",
    "ArtifactContract",
    "CollectionReport",
    "EnvironmentSnapshotter",
    "ExecutorInvoker",
    "InvocationResult",
    "PlannedInvocation",
    "RunTagger",
    "ScratchArea",
    "SoftFailure",
    "SuiteConfig",
    "SuiteProgress",
    "SuiteReport",
    "SweepAxis",
    "SweepGroup",
    "SweepPoint",
    "SweepSuite",
    "build_sweep_groups",
    "plan_sweep",
    "record_command",
    "resolve_suite_config",
    "sanitize_component",
]
