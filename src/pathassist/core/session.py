from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Generator

from pathassist.config.load import ConfigError, load_config
from pathassist.config.model import Config
from pathassist.core import events as ev
from pathassist.core.assistant import PathAssistant
from pathassist.core.errors import InsufficientStages, MissingClosedOkValue
from pathassist.core.stages import STAGE_LABELS
from pathassist.plugins.registry import load_source

VALIDATION_ERRORS = (MissingClosedOkValue, InsufficientStages)

StageEvents = Generator[ev.PathassistEvent, None, "PathAssistant | None"]


def open_session(
    command: str,
    project_dir: Path,
    *,
    config_path: Path | None = None,
    record_id: str | None = None,
    options: dict | None = None,
) -> StageEvents:
    """Run the stages every path command starts with.

    Yields the events of config loading, data loading and step validation and
    returns the loaded assistant, or ``None`` after emitting the failure and
    the closing ``CommandCompleted``.
    """
    project_dir = project_dir.resolve()
    config_path = config_path or Path("pathassist.yaml")
    if not config_path.is_absolute():
        config_path = project_dir / config_path

    yield ev.CommandStarted(
        command=command,
        project_dir=project_dir,
        config_path=config_path,
        options={"record_id": record_id, **(options or {})},
    )

    yield stage_started(command, "load_config")
    started = time.perf_counter()
    try:
        config = load_config(project_dir, config_path)
    except (ConfigError, ValueError) as exc:
        yield from fail_stage(command, "load_config", started, "config_error", str(exc))
        return None
    if record_id:
        config = config.model_copy(
            update={"path": config.path.model_copy(update={"record_id": record_id})}
        )
    if not config.path.record_id:
        yield from fail_stage(
            command,
            "load_config",
            started,
            "config_error",
            "No record id configured.",
            hint="Set path.record_id in the config or pass --record.",
        )
        return None
    yield stage_completed(command, "load_config", started)

    yield stage_started(command, "load_data")
    started = time.perf_counter()
    try:
        backend = _open_backend(project_dir, config)
    except Exception as exc:  # noqa: BLE001
        yield from fail_stage(command, "load_data", started, "source_error", str(exc))
        return None
    collected: list[ev.PathassistEvent] = []
    assistant = PathAssistant(
        config.path,
        backend,
        labels=config.labels,
        emit=collected.append,
        command=command,
    )
    asyncio.run(assistant.load())
    yield from collected
    error = assistant.error
    if error is not None and not isinstance(error, VALIDATION_ERRORS):
        yield from fail_stage(command, "load_data", started, error.code, assistant.error_message or "")
        return None
    yield stage_completed(command, "load_data", started)

    yield stage_started(command, "validate_steps")
    started = time.perf_counter()
    if error is not None:
        yield from fail_stage(command, "validate_steps", started, error.code, assistant.error_message or "")
        return None
    if not assistant.current_step.has_value():
        yield ev.Warning(
            command=command,
            code="unknown_current_value",
            message=(
                f"Current {assistant.field_label} value is not one of the available steps."
            ),
        )
    yield stage_completed(command, "validate_steps", started)
    return assistant


def resolve_events(command: str, assistant: PathAssistant) -> Generator[ev.PathassistEvent, None, None]:
    yield stage_started(command, "resolve_scenario")
    started = time.perf_counter()
    yield path_assembled(command, assistant)
    yield scenario_resolved(command, assistant)
    yield stage_completed(command, "resolve_scenario", started)


def path_assembled(command: str, assistant: PathAssistant) -> ev.PathAssembled:
    return ev.PathAssembled(
        command=command,
        record_id=assistant.config.record_id,
        field_api_name=assistant.field_api_name,
        field_label=assistant.field_label,
        current_value=assistant.current_step.value,
        steps=[step.to_dict() for step in assistant.steps],
    )


def scenario_resolved(command: str, assistant: PathAssistant) -> ev.ScenarioResolved:
    scenario = assistant.scenario
    return ev.ScenarioResolved(
        command=command,
        scenario=scenario.value if scenario is not None else None,
        caption=assistant.update_button_text,
        selection_prompt=assistant.selection_prompt,
        target=assistant.pending_target,
        button_disabled=assistant.is_update_button_disabled,
        display_button=assistant.display_update_button,
    )


def _open_backend(project_dir: Path, config: Config):
    source_cls = load_source(config.source.type)
    return source_cls(project_dir, **config.source.with_)


def stage_started(command: str, stage_id: str) -> ev.StageStarted:
    return ev.StageStarted(
        command=command,
        stage_id=stage_id,
        label=STAGE_LABELS[command].get(stage_id, stage_id),
    )


def stage_completed(
    command: str, stage_id: str, started: float, status: str = "success"
) -> ev.StageCompleted:
    return ev.StageCompleted(
        command=command,
        stage_id=stage_id,
        duration_ms=elapsed_ms(started),
        status=status,
    )


def fail_stage(
    command: str,
    stage_id: str,
    started: float,
    error_code: str,
    message: str,
    hint: str | None = None,
) -> Generator[ev.PathassistEvent, None, None]:
    yield ev.StageFailed(
        command=command,
        stage_id=stage_id,
        duration_ms=elapsed_ms(started),
        error_code=error_code,
        message=message,
        hint=hint,
    )
    yield ev.CommandCompleted(command=command, ok=False, exit_code=2)


def elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
