from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class PathassistEvent:
    ts: float = field(default_factory=time.perf_counter)
    level: str = "INFO"
    command: str = ""
    type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _serialize(asdict(self))


@dataclass(frozen=True)
class CommandStarted(PathassistEvent):
    type: str = "CommandStarted"
    project_dir: Path | None = None
    config_path: Path | None = None
    options: dict[str, Any] | None = None


@dataclass(frozen=True)
class CommandCompleted(PathassistEvent):
    type: str = "CommandCompleted"
    ok: bool = True
    exit_code: int = 0


@dataclass(frozen=True)
class StageStarted(PathassistEvent):
    type: str = "StageStarted"
    stage_id: str = ""
    label: str = ""


@dataclass(frozen=True)
class StageCompleted(PathassistEvent):
    type: str = "StageCompleted"
    stage_id: str = ""
    duration_ms: float = 0.0
    status: str = "success"


@dataclass(frozen=True)
class StageFailed(PathassistEvent):
    type: str = "StageFailed"
    level: str = "ERROR"
    stage_id: str = ""
    duration_ms: float = 0.0
    error_code: str = ""
    message: str = ""
    hint: str | None = None


@dataclass(frozen=True)
class Warning(PathassistEvent):
    type: str = "Warning"
    level: str = "WARNING"
    code: str = ""
    message: str = ""
    hint: str | None = None


@dataclass(frozen=True)
class SourceFetchStarted(PathassistEvent):
    type: str = "SourceFetchStarted"
    name: str = ""


@dataclass(frozen=True)
class SourceFetchCompleted(PathassistEvent):
    type: str = "SourceFetchCompleted"
    name: str = ""
    duration_ms: float = 0.0


@dataclass(frozen=True)
class SourceFetchFailed(PathassistEvent):
    type: str = "SourceFetchFailed"
    level: str = "ERROR"
    name: str = ""
    duration_ms: float = 0.0
    message: str = ""


@dataclass(frozen=True)
class ResultDiscarded(PathassistEvent):
    type: str = "ResultDiscarded"
    level: str = "DEBUG"
    name: str = ""
    version: int = 0
    current_version: int = 0


@dataclass(frozen=True)
class ErrorReported(PathassistEvent):
    type: str = "ErrorReported"
    level: str = "ERROR"
    error_code: str = ""
    message: str = ""


@dataclass(frozen=True)
class PathAssembled(PathassistEvent):
    type: str = "PathAssembled"
    record_id: str | None = None
    field_api_name: str | None = None
    field_label: str = ""
    current_value: str | None = None
    steps: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class ScenarioResolved(PathassistEvent):
    type: str = "ScenarioResolved"
    scenario: str | None = None
    caption: str = ""
    selection_prompt: str = ""
    target: str | None = None
    button_disabled: bool = False
    display_button: bool = True


@dataclass(frozen=True)
class StepSelected(PathassistEvent):
    type: str = "StepSelected"
    value: str = ""


@dataclass(frozen=True)
class UpdateDispatched(PathassistEvent):
    type: str = "UpdateDispatched"
    record_id: str | None = None
    field_api_name: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class UpdateCompleted(PathassistEvent):
    type: str = "UpdateCompleted"
    record_id: str | None = None
    value: str | None = None
    duration_ms: float = 0.0


@dataclass(frozen=True)
class UpdateFailed(PathassistEvent):
    type: str = "UpdateFailed"
    level: str = "ERROR"
    record_id: str | None = None
    value: str | None = None
    message: str = ""


@dataclass(frozen=True)
class UpdateRejected(PathassistEvent):
    type: str = "UpdateRejected"
    level: str = "WARNING"
    value: str | None = None
    message: str = ""


@dataclass(frozen=True)
class SourcesDiscovered(PathassistEvent):
    type: str = "SourcesDiscovered"
    sources: list[dict[str, Any]] = field(default_factory=list)


def _serialize(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    return value
