"""Interaction scenarios for the path and what confirming each one writes."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from pathassist.config.model import Labels
from pathassist.core.layout import TOKEN, Layout
from pathassist.core.snapshot import ProgressionSnapshot
from pathassist.core.stage import Stage


class Scenario(str, Enum):
    MARK_AS_COMPLETE = "mark_as_complete"
    MARK_AS_CURRENT = "mark_as_current"
    SELECT_CLOSED = "select_closed"
    CHANGE_CLOSED = "change_closed"


# Checked in order; the first rule that applies wins.
SCENARIO_RULES: list[tuple[Scenario, Callable[[ProgressionSnapshot], bool]]] = [
    (
        Scenario.MARK_AS_COMPLETE,
        lambda s: not s.is_closed and not s.has_selection,
    ),
    (
        Scenario.MARK_AS_CURRENT,
        lambda s: not s.is_closed and s.has_selection and not s.selected_terminal,
    ),
    (
        Scenario.SELECT_CLOSED,
        lambda s: not s.is_closed and s.selected_terminal,
    ),
    (
        Scenario.CHANGE_CLOSED,
        lambda s: s.is_closed and s.selected_terminal,
    ),
]


def resolve_scenario(snapshot: ProgressionSnapshot) -> Scenario | None:
    for scenario, applies in SCENARIO_RULES:
        if applies(snapshot):
            return scenario
    return None


def build_layouts(labels: Labels, token: str = TOKEN) -> dict[Scenario, Layout]:
    return {
        Scenario.MARK_AS_COMPLETE: Layout(labels.select_closed, labels.mark_as_complete, token),
        Scenario.MARK_AS_CURRENT: Layout("", labels.mark_as_current, token),
        Scenario.SELECT_CLOSED: Layout(labels.select_closed, labels.select_closed, token),
        Scenario.CHANGE_CLOSED: Layout(labels.select_closed, labels.change_closed, token),
    }


def confirmation_target(
    scenario: Scenario | None,
    snapshot: ProgressionSnapshot,
    *,
    next_stage: Stage | None,
    closed_ok: str,
    closed_ko: str | None = None,
) -> str | None:
    """Return the field value that confirming ``scenario`` writes.

    Closed-ko is never produced here: advancing into either closed value
    lands on closed-ok.
    """
    if scenario is Scenario.MARK_AS_COMPLETE:
        if next_stage is None:
            return None
        if next_stage.equals(closed_ok) or next_stage.equals(closed_ko):
            return closed_ok
        return next_stage.value
    if scenario is Scenario.MARK_AS_CURRENT:
        if snapshot.selected_terminal:
            return closed_ok
        return snapshot.selected_value
    if scenario in (Scenario.SELECT_CLOSED, Scenario.CHANGE_CLOSED):
        return closed_ok
    return None
