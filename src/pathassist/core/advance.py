from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Iterable

from pathassist.core import events as ev
from pathassist.core.path import PathStep
from pathassist.core.session import (
    fail_stage,
    open_session,
    path_assembled,
    resolve_events,
    scenario_resolved,
    stage_completed,
    stage_started,
)


def advance_events(
    project_dir: Path,
    *,
    config_path: Path | None = None,
    record_id: str | None = None,
    select: str | None = None,
) -> Iterable[ev.PathassistEvent]:
    """Confirm the pending action on a record's path.

    Without ``select`` this marks the current step complete. With ``select``
    the step is selected first and then confirmed; selecting the final step
    closes the record at once.
    """
    command = "advance"
    assistant = yield from open_session(
        command,
        project_dir,
        config_path=config_path,
        record_id=record_id,
        options={"select": select},
    )
    if assistant is None:
        return
    yield from resolve_events(command, assistant)

    collected: list[ev.PathassistEvent] = []
    assistant.emit = collected.append

    yield stage_started(command, "confirm_update")
    started = time.perf_counter()
    result = None
    if select is not None:
        value = _resolve_selection(assistant.steps, select)
        if value is None:
            labels = [step.label or step.value for step in assistant.steps if step.value is not None]
            yield from fail_stage(
                command,
                "confirm_update",
                started,
                "unknown_step",
                f"'{select}' is not a step on this path.",
                hint="Choose one of: " + ", ".join(labels),
            )
            return
        result = asyncio.run(assistant.select_step(value))
        yield from _drain(collected)
        if result is None:
            yield scenario_resolved(command, assistant)
    if result is None:
        result = asyncio.run(assistant.confirm())
        yield from _drain(collected)
    if result is None:
        yield ev.Warning(
            command=command,
            code="nothing_to_confirm",
            message="There is no pending action for this record.",
        )
        yield stage_completed(command, "confirm_update", started, status="skipped")
        yield ev.CommandCompleted(command=command, ok=True, exit_code=0)
        return
    if not result.ok:
        yield from fail_stage(
            command,
            "confirm_update",
            started,
            "update_error",
            result.message or assistant.labels.generic_error_message,
        )
        return
    yield stage_completed(command, "confirm_update", started)

    yield stage_started(command, "refresh")
    started = time.perf_counter()
    asyncio.run(assistant.load())
    yield from _drain(collected)
    if assistant.error is not None:
        yield from fail_stage(
            command,
            "refresh",
            started,
            assistant.error.code,
            assistant.error_message or "",
        )
        return
    yield path_assembled(command, assistant)
    yield scenario_resolved(command, assistant)
    yield stage_completed(command, "refresh", started)
    yield ev.CommandCompleted(command=command, ok=True, exit_code=0)


def _drain(collected: list[ev.PathassistEvent]) -> Iterable[ev.PathassistEvent]:
    while collected:
        yield collected.pop(0)


def _resolve_selection(steps: list[PathStep], select: str) -> str | None:
    """Map a step value or label to the value to select.

    The synthetic final step is only reachable through its label.
    """
    for step in steps:
        if step.value == select and not step.is_terminal_choice:
            return step.value
    for step in steps:
        if step.label == select:
            return step.value
    return None
