from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Union

UNBOUNDED = math.inf


@dataclass(frozen=True)
class Stage:
    """One allowed value of the tracked picklist field.

    A stage built without a value is the "not found" placeholder: it never
    equals anything, itself included, and sorts neither before nor after
    any other stage.
    """

    value: str | None = None
    label: str | None = None
    index: int | float | None = None

    def has_value(self) -> bool:
        return self.value is not None

    def equals(self, candidate: Union["Stage", str, None]) -> bool:
        if isinstance(candidate, Stage):
            candidate = candidate.value
        if self.value is None or candidate is None:
            return False
        return self.value == candidate

    def is_before(self, other: "Stage") -> bool:
        if self.index is None or other.index is None:
            return False
        return self.index < other.index


def stages_from_picklist(values: Iterable[Any]) -> list[Stage]:
    """Build stages from picklist entries, indexed in supply order.

    Entries may be ``(value, label)`` pairs or objects with ``value`` and
    ``label`` attributes.
    """
    stages: list[Stage] = []
    for index, entry in enumerate(values):
        if isinstance(entry, tuple):
            value, label = entry
        else:
            value, label = entry.value, entry.label
        stages.append(Stage(value=value, label=label, index=index))
    return stages


def find_stage(stages: Iterable[Stage], value: str | None) -> Stage:
    for stage in stages:
        if stage.equals(value):
            return stage
    return Stage()


def stage_after(stages: list[Stage], stage: Stage) -> Stage | None:
    if not isinstance(stage.index, int):
        return None
    position = stage.index + 1
    if position >= len(stages):
        return None
    return stages[position]
