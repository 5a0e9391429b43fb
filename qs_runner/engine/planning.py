"""Declarative sweep groups and their expansion into sweep points."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence

from qs_runner.engine.tagging import sanitize_component
from qs_runner.models.config import SuiteConfig


logger = logging.getLogger(__name__)

BASELINE_LABEL = "baseline"


class GroupMode(str, Enum):
    """How a sweep group combines its axes."""

    BASELINE = "baseline"
    SINGLE = "single"
    CROSS = "cross"


@dataclass(frozen=True)
class SweepAxis:
    """One executor flag and the ordered values to try for it."""

    flag: str
    label: str
    values: tuple[Any, ...]

    def point_label(self, value: Any) -> str:
        return f"{self.label}_{sanitize_component(value)}"


@dataclass(frozen=True)
class SweepGroup:
    """A block of sweep points.

    ``SINGLE`` varies each axis on its own while everything else stays at the
    executor defaults; ``CROSS`` runs every combination of its axes.
    """

    name: str
    mode: GroupMode
    axes: tuple[SweepAxis, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SweepPoint:
    """One concrete parameter combination evaluated by a single invocation."""

    group: str
    label: str
    params: tuple[tuple[str, Any], ...] = ()

    @property
    def options(self) -> dict[str, Any]:
        return dict(self.params)


def baseline_group() -> SweepGroup:
    return SweepGroup(name=BASELINE_LABEL, mode=GroupMode.BASELINE)


def single_axis_group(name: str, flag: str, label: str, values: Iterable[Any]) -> SweepGroup:
    axis = SweepAxis(flag=flag, label=label, values=tuple(values))
    return SweepGroup(name=name, mode=GroupMode.SINGLE, axes=(axis,))


def cross_product_group(name: str, axes: Sequence[SweepAxis]) -> SweepGroup:
    return SweepGroup(name=name, mode=GroupMode.CROSS, axes=tuple(axes))


def build_sweep_groups(config: SuiteConfig) -> list[SweepGroup]:
    """Return the suite's sweep groups in execution order."""
    return [
        baseline_group(),
        single_axis_group("top_k", "top-k", "topk", config.top_k),
        single_axis_group("max_hops", "max-hops", "hops", config.max_hops),
        cross_product_group(
            "retriever_depth",
            [
                SweepAxis(flag="bm25-k", label="bm25", values=tuple(config.bm25_k)),
                SweepAxis(flag="faiss-k", label="faiss", values=tuple(config.faiss_k)),
            ],
        ),
        single_axis_group("embed_model", "embed-model", "embed", config.embed_models),
    ]


def expand_group(group: SweepGroup) -> list[SweepPoint]:
    """Expand one group into its sweep points."""
    if group.mode is GroupMode.BASELINE:
        return [SweepPoint(group=group.name, label=BASELINE_LABEL)]

    if group.mode is GroupMode.SINGLE:
        return [
            SweepPoint(
                group=group.name,
                label=axis.point_label(value),
                params=((axis.flag, value),),
            )
            for axis in group.axes
            for value in axis.values
        ]

    if not group.axes:
        return []
    points = []
    for combo in itertools.product(*(axis.values for axis in group.axes)):
        pairs = list(zip(group.axes, combo))
        points.append(
            SweepPoint(
                group=group.name,
                label="__".join(axis.point_label(value) for axis, value in pairs),
                params=tuple((axis.flag, value) for axis, value in pairs),
            )
        )
    return points


def plan_sweep(groups: Sequence[SweepGroup]) -> list[SweepPoint]:
    """Flatten sweep groups into the ordered list of sweep points."""
    points: list[SweepPoint] = []
    for group in groups:
        expanded = expand_group(group)
        if not expanded:
            logger.info("Sweep group '%s' has no values; skipping", group.name)
        points.extend(expanded)
    return points
