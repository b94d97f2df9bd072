from __future__ import annotations

import pytest

from pathassist.config.model import Labels
from pathassist.core.scenario import (
    Scenario,
    build_layouts,
    confirmation_target,
    resolve_scenario,
)
from pathassist.core.snapshot import TERMINAL_SENTINEL, ProgressionSnapshot
from pathassist.core.stage import Stage


def _snapshot(*, closed: bool = False, selected: str | None = None) -> ProgressionSnapshot:
    return ProgressionSnapshot(is_closed=closed, selected_value=selected, current_value="InProgress")


@pytest.mark.parametrize(
    ("closed", "selected", "expected"),
    [
        (False, None, Scenario.MARK_AS_COMPLETE),
        (False, "", Scenario.MARK_AS_COMPLETE),
        (False, "New", Scenario.MARK_AS_CURRENT),
        (False, TERMINAL_SENTINEL, Scenario.SELECT_CLOSED),
        (True, TERMINAL_SENTINEL, Scenario.CHANGE_CLOSED),
        (True, None, None),
        (True, "New", None),
    ],
)
def test_resolve_scenario_priority(closed: bool, selected: str | None, expected: Scenario | None) -> None:
    assert resolve_scenario(_snapshot(closed=closed, selected=selected)) is expected


def test_layout_captions_substitute_field_label() -> None:
    layouts = build_layouts(Labels())

    captions = {scenario: layout.render_action_caption("Status") for scenario, layout in layouts.items()}

    assert captions == {
        Scenario.MARK_AS_COMPLETE: "Mark Status as Complete",
        Scenario.MARK_AS_CURRENT: "Mark as Current Status",
        Scenario.SELECT_CLOSED: "Select Closed Status",
        Scenario.CHANGE_CLOSED: "Change Active Status",
    }
    assert layouts[Scenario.MARK_AS_CURRENT].render_selection_prompt("Status") == ""
    assert layouts[Scenario.CHANGE_CLOSED].render_selection_prompt("Status") == "Select Closed Status"


def test_custom_labels_flow_into_layouts() -> None:
    layouts = build_layouts(Labels(mark_as_complete="Finish {0} ({0})"))

    assert layouts[Scenario.MARK_AS_COMPLETE].render_action_caption("Stage") == "Finish Stage (Stage)"


def test_mark_as_complete_targets_next_stage() -> None:
    target = confirmation_target(
        Scenario.MARK_AS_COMPLETE,
        _snapshot(),
        next_stage=Stage("Review", "Review", 2),
        closed_ok="Done",
    )

    assert target == "Review"


@pytest.mark.parametrize("next_value", ["Done", "Cancelled"])
def test_mark_as_complete_into_closed_value_lands_on_closed_ok(next_value: str) -> None:
    target = confirmation_target(
        Scenario.MARK_AS_COMPLETE,
        _snapshot(),
        next_stage=Stage(next_value, next_value, 2),
        closed_ok="Done",
        closed_ko="Cancelled",
    )

    assert target == "Done"


def test_mark_as_complete_without_next_stage_has_no_target() -> None:
    target = confirmation_target(
        Scenario.MARK_AS_COMPLETE, _snapshot(), next_stage=None, closed_ok="Done"
    )

    assert target is None


def test_mark_as_current_targets_selection() -> None:
    snapshot = _snapshot(selected="New")

    assert (
        confirmation_target(Scenario.MARK_AS_CURRENT, snapshot, next_stage=None, closed_ok="Done")
        == "New"
    )


def test_mark_as_current_with_sentinel_targets_closed_ok() -> None:
    snapshot = ProgressionSnapshot(
        is_closed=False,
        selected_value="final",
        current_value="New",
        terminal_sentinel="final",
    )

    assert (
        confirmation_target(Scenario.MARK_AS_CURRENT, snapshot, next_stage=None, closed_ok="Done")
        == "Done"
    )


@pytest.mark.parametrize("scenario", [Scenario.SELECT_CLOSED, Scenario.CHANGE_CLOSED])
def test_closed_scenarios_always_target_closed_ok(scenario: Scenario) -> None:
    snapshot = _snapshot(closed=scenario is Scenario.CHANGE_CLOSED, selected=TERMINAL_SENTINEL)

    target = confirmation_target(
        scenario,
        snapshot,
        next_stage=Stage("Cancelled", "Cancelled", 3),
        closed_ok="Done",
        closed_ko="Cancelled",
    )

    assert target == "Done"


def test_no_scenario_has_no_target() -> None:
    assert confirmation_target(None, _snapshot(closed=True), next_stage=None, closed_ok="Done") is None
