"""Run tag generation for sweep run directories."""

from __future__ import annotations

import itertools
import os
from datetime import datetime
from typing import Callable

STAMP_FORMAT = "%Y%m%d_%H%M%S"
SAFE_PLACEHOLDER = "_"


def _separators() -> tuple[str, ...]:
    seps = {"/", os.sep}
    if os.altsep:
        seps.add(os.altsep)
    return tuple(sorted(seps))


def sanitize_component(value: object) -> str:
    """Make a tag component safe to use as a single path segment."""
    text = str(value)
    for sep in _separators():
        text = text.replace(sep, SAFE_PLACEHOLDER)
    return text


class RunTagger:
    """Issue unique, sortable run tags.

    A tag is ``<prefix>_<stamp>__<seq>[_<label>]``. The sequence counter is
    per tagger and strictly increasing, so two tags issued within the same
    second still differ.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or datetime.now
        self._counter = itertools.count(1)

    def stamp(self) -> str:
        return self._clock().strftime(STAMP_FORMAT)

    def prefix(self, prefix: str, stamp: str) -> str:
        """Common leading part of every tag issued with ``prefix`` and ``stamp``."""
        return f"{sanitize_component(prefix)}_{stamp}"

    def tag(self, prefix: str, label: str | None = None, *, stamp: str | None = None) -> str:
        seq = next(self._counter)
        tag = f"{self.prefix(prefix, stamp or self.stamp())}__{seq:03d}"
        if label:
            tag = f"{tag}_{sanitize_component(label)}"
        return tag


def index_prefix(index_size: int, dataset: str, split: str) -> str:
    return f"idx{index_size}_{dataset}_{split}"


def eval_prefix(eval_size: int, dataset: str, split: str) -> str:
    return f"eval{eval_size}_{dataset}_{split}"
