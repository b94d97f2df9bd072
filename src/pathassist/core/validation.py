from __future__ import annotations

from pathassist.core.errors import InsufficientStages, MissingClosedOkValue, PathAssistantError
from pathassist.core.stage import Stage

MIN_STAGES = 2


def find_stage_problems(
    stages: list[Stage],
    closed_ok: str,
    record_type_id: str | None = None,
) -> list[PathAssistantError]:
    problems: list[PathAssistantError] = []
    if not any(stage.equals(closed_ok) for stage in stages):
        problems.append(MissingClosedOkValue(closed_ok, record_type_id))
    if len(stages) < MIN_STAGES:
        problems.append(InsufficientStages(len(stages), record_type_id))
    return problems


def validate_stages(
    stages: list[Stage],
    closed_ok: str,
    record_type_id: str | None = None,
) -> None:
    problems = find_stage_problems(stages, closed_ok, record_type_id)
    if problems:
        raise problems[0]
