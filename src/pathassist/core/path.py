from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pathassist.core.snapshot import TERMINAL_SENTINEL
from pathassist.core.stage import UNBOUNDED, Stage


@dataclass(frozen=True)
class PathStep:
    stage: Stage
    state: str = "incomplete"
    won: bool = False
    lost: bool = False
    active: bool = False

    @property
    def value(self) -> str | None:
        return self.stage.value

    @property
    def label(self) -> str | None:
        return self.stage.label

    @property
    def is_terminal_choice(self) -> bool:
        return self.stage.value == TERMINAL_SENTINEL

    def to_dict(self) -> dict[str, Any]:
        index = self.stage.index
        return {
            "value": self.value,
            "label": self.label,
            "index": None if index == UNBOUNDED else index,
            "state": self.state,
            "won": self.won,
            "lost": self.lost,
            "active": self.active,
        }


def split_terminal(
    stages: list[Stage],
    closed_ok: str,
    closed_ko: str | None = None,
) -> tuple[list[Stage], Stage | None, Stage | None]:
    open_stages: list[Stage] = []
    ok_stage: Stage | None = None
    ko_stage: Stage | None = None
    for stage in stages:
        if stage.equals(closed_ok):
            ok_stage = stage
            continue
        if closed_ko and stage.equals(closed_ko):
            ko_stage = stage
            continue
        open_stages.append(stage)
    return open_stages, ok_stage, ko_stage


def assemble_path(
    stages: list[Stage],
    current: Stage,
    *,
    closed_ok: str,
    closed_ko: str | None = None,
    last_step_label: str | None = None,
    terminal_sentinel: str = TERMINAL_SENTINEL,
) -> list[Stage]:
    """Return the stages to display, ending in exactly one terminal entry.

    The raw closed values are pulled out of the list. A closed record shows
    the closed stage it is in; an open one gets a synthetic final stage
    carrying the sentinel value, sorted after every real stage.
    """
    open_stages, ok_stage, ko_stage = split_terminal(stages, closed_ok, closed_ko)
    if ok_stage is not None and current.equals(closed_ok):
        terminal = ok_stage
    elif closed_ko and ko_stage is not None and current.equals(closed_ko):
        terminal = ko_stage
    else:
        label = ok_stage.label if ok_stage is not None and ok_stage.label else last_step_label
        terminal = Stage(value=terminal_sentinel, label=label, index=UNBOUNDED)
    return [*open_stages, terminal]


def classify_steps(
    path: list[Stage],
    current: Stage,
    *,
    selected: str | None,
    closed_ok: str,
    closed_ko: str | None = None,
) -> list[PathStep]:
    is_closed_ko = bool(closed_ko) and current.equals(closed_ko)
    steps: list[PathStep] = []
    for stage in path:
        active = stage.equals(selected)
        if stage.equals(current):
            state = "current"
            active = active or not selected
        elif stage.is_before(current) and not is_closed_ko:
            state = "complete"
        else:
            state = "incomplete"
        steps.append(
            PathStep(
                stage=stage,
                state=state,
                won=stage.equals(closed_ok),
                lost=bool(closed_ko) and stage.equals(closed_ko),
                active=active,
            )
        )
    return steps
