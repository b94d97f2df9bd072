"""Stateful controller behind a rendered path.

The assistant joins the three backend loads (record, object metadata and
picklist values), keeps the user's selection and turns a confirmation into a
single field update. Everything it shows is derived from those inputs on
demand; only the inputs themselves are stored.

Each load is tagged with the configuration version it was started under.
``configure()`` bumps the version, so results that arrive for an older
configuration are dropped instead of overwriting fresh state.

Updates are optimistic: the local record and selection are cleared as soon as
the update is dispatched, and a failure only reports an error. The next
``load()`` converges on whatever the backend holds.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from pathassist.config.model import Labels, PathConfig
from pathassist.core import events as ev
from pathassist.core.errors import (
    DataLoadFailure,
    PathAssistantError,
    UnavailablePicklistField,
    UpdateFailure,
)
from pathassist.core.layout import Layout
from pathassist.core.path import PathStep, assemble_path, classify_steps
from pathassist.core.scenario import (
    Scenario,
    build_layouts,
    confirmation_target,
    resolve_scenario,
)
from pathassist.core.snapshot import TERMINAL_SENTINEL, ProgressionSnapshot
from pathassist.core.stage import Stage, find_stage, stage_after, stages_from_picklist
from pathassist.core.validation import find_stage_problems
from pathassist.sources.models import Backend, ObjectInfo, PicklistValues, RecordData

T = TypeVar("T")
Emit = Callable[[ev.PathassistEvent], None]


@dataclass(frozen=True)
class UpdateResult:
    status: str
    value: str | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class PathAssistant:
    def __init__(
        self,
        config: PathConfig,
        backend: Backend,
        *,
        labels: Labels | None = None,
        emit: Emit | None = None,
        command: str = "",
    ):
        self.labels = labels or Labels()
        self._backend = backend
        self.emit = emit or _discard
        self._command = command
        self._layouts = build_layouts(self.labels)
        self._version = 0
        self._update_in_flight = False
        self.configure(config)

    def configure(self, config: PathConfig) -> None:
        self._version += 1
        self.config = config
        self.record: RecordData | None = None
        self.object_info: ObjectInfo | None = None
        self.possible_steps: list[Stage] | None = None
        self.record_type_id: str | None = None
        self.selected_value: str | None = None
        self.error: PathAssistantError | None = None

    @property
    def version(self) -> int:
        return self._version

    async def load(self) -> bool:
        version = self._version
        config = self.config
        self.error = None
        if not config.record_id:
            self._report(DataLoadFailure("record", "No record id configured."))
            return False

        record, object_info = await asyncio.gather(
            self._fetch("record", self._backend.get_record(config.record_id)),
            self._fetch("object_info", self._backend.get_object_info(config.object_api_name)),
        )
        self.receive_record(version, *record)
        self.receive_object_info(version, *object_info)
        if version != self._version:
            return False

        if self.record_type_id and self.field_api_name:
            picklists = await self._fetch(
                "picklist_values",
                self._backend.get_picklist_values(config.object_api_name, self.record_type_id),
            )
            self.receive_picklist_values(version, *picklists)
        return self.is_loaded

    def receive_record(
        self,
        version: int,
        record: RecordData | None = None,
        error: PathAssistantError | None = None,
    ) -> None:
        if not self._is_current(version, "record"):
            return
        if error is not None:
            self._report(error)
        if record is not None:
            self.record = record
            if record.record_type_id:
                self.record_type_id = record.record_type_id

    def receive_object_info(
        self,
        version: int,
        object_info: ObjectInfo | None = None,
        error: PathAssistantError | None = None,
    ) -> None:
        if not self._is_current(version, "object_info"):
            return
        if error is not None:
            self._report(error)
        if object_info is not None:
            self.object_info = object_info
            if not self.record_type_id:
                self.record_type_id = object_info.default_record_type_id

    def receive_picklist_values(
        self,
        version: int,
        values: PicklistValues | None = None,
        error: PathAssistantError | None = None,
    ) -> None:
        if not self._is_current(version, "picklist_values"):
            return
        if error is not None:
            self._report(error)
            return
        if values is None or not self.field_api_name:
            return
        field = values.picklist_field_values.get(self.field_api_name)
        if field is None:
            self._report(UnavailablePicklistField(self.field_api_name, self.record_type_id))
            return
        self.possible_steps = stages_from_picklist(field.values)
        problems = find_stage_problems(
            self.possible_steps, self.config.closed_ok, self.record_type_id
        )
        if problems:
            self._report(problems[0])

    # Derived state

    @property
    def field_api_name(self) -> str | None:
        return self.config.field_api_name

    @property
    def field_label(self) -> str:
        label = self.object_info.field_label(self.field_api_name) if self.object_info else None
        return label or self.field_api_name or ""

    @property
    def current_step(self) -> Stage:
        value = self.record.field_value(self.field_api_name) if self.record else None
        return find_stage(self.possible_steps or [], value)

    @property
    def next_step(self) -> Stage | None:
        return stage_after(self.possible_steps or [], self.current_step)

    @property
    def is_closed_ok(self) -> bool:
        return self.current_step.equals(self.config.closed_ok)

    @property
    def is_closed_ko(self) -> bool:
        if not self.config.closed_ko:
            return False
        return self.current_step.equals(self.config.closed_ko)

    @property
    def is_closed(self) -> bool:
        return self.is_closed_ok or self.is_closed_ko

    @property
    def is_loaded(self) -> bool:
        return (
            self.record is not None
            and self.object_info is not None
            and self.possible_steps is not None
        )

    @property
    def is_update_in_flight(self) -> bool:
        return self._update_in_flight

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        return self.error.message or self.labels.generic_error_message

    def snapshot(self) -> ProgressionSnapshot:
        return ProgressionSnapshot(
            is_closed=self.is_closed,
            selected_value=self.selected_value,
            current_value=self.current_step.value,
            terminal_sentinel=TERMINAL_SENTINEL,
        )

    @property
    def scenario(self) -> Scenario | None:
        if not self.is_loaded:
            return None
        return resolve_scenario(self.snapshot())

    @property
    def layout(self) -> Layout | None:
        scenario = self.scenario
        return self._layouts[scenario] if scenario is not None else None

    @property
    def update_button_text(self) -> str:
        layout = self.layout
        return layout.render_action_caption(self.field_label) if layout else ""

    @property
    def selection_prompt(self) -> str:
        layout = self.layout
        return layout.render_selection_prompt(self.field_label) if layout else ""

    @property
    def is_update_button_disabled(self) -> bool:
        return not self.current_step.has_value() and not self.selected_value

    @property
    def display_update_button(self) -> bool:
        return not self.config.hide_update_button

    @property
    def pending_target(self) -> str | None:
        return confirmation_target(
            self.scenario,
            self.snapshot(),
            next_stage=self.next_step,
            closed_ok=self.config.closed_ok,
            closed_ko=self.config.closed_ko,
        )

    @property
    def path(self) -> list[Stage]:
        return assemble_path(
            self.possible_steps or [],
            self.current_step,
            closed_ok=self.config.closed_ok,
            closed_ko=self.config.closed_ko,
            last_step_label=self.config.last_step_label,
        )

    @property
    def steps(self) -> list[PathStep]:
        return classify_steps(
            self.path,
            self.current_step,
            selected=self.selected_value,
            closed_ok=self.config.closed_ok,
            closed_ko=self.config.closed_ko,
        )

    # Interaction

    async def select_step(self, value: str) -> UpdateResult | None:
        """Select a step on the path.

        Picking the synthetic final step closes the record right away with
        closed-ok; any other value just becomes the selection.
        """
        if self._update_in_flight:
            return self._reject(value)
        if not self._can_interact():
            return None
        if value == TERMINAL_SENTINEL:
            return await self._update_record(self.config.closed_ok)
        self.selected_value = value
        self.emit(ev.StepSelected(command=self._command, value=value))
        return None

    async def confirm(self) -> UpdateResult | None:
        if self._update_in_flight:
            return self._reject(None)
        if not self._can_interact():
            return None
        target = self.pending_target
        if target is None:
            return None
        return await self._update_record(target)

    async def _update_record(self, value: str) -> UpdateResult:
        version = self._version
        record_id = self.config.record_id or ""
        field = self.field_api_name or ""
        self._update_in_flight = True
        self._reset_component_state()
        self.emit(
            ev.UpdateDispatched(
                command=self._command,
                record_id=record_id,
                field_api_name=field,
                value=value,
            )
        )
        started = time.perf_counter()
        try:
            await self._backend.update_record(record_id, {field: value})
        except Exception as exc:  # noqa: BLE001
            message = str(exc) or self.labels.generic_error_message
            if not self._is_current(version, "update"):
                return UpdateResult(status="discarded", value=value, message=message)
            failure = UpdateFailure(message)
            self._report(failure)
            self.emit(
                ev.UpdateFailed(
                    command=self._command,
                    record_id=record_id,
                    value=value,
                    message=failure.message,
                )
            )
            return UpdateResult(status="failed", value=value, message=failure.message)
        finally:
            self._update_in_flight = False
        if not self._is_current(version, "update"):
            return UpdateResult(status="discarded", value=value)
        self.emit(
            ev.UpdateCompleted(
                command=self._command,
                record_id=record_id,
                value=value,
                duration_ms=_elapsed_ms(started),
            )
        )
        return UpdateResult(status="ok", value=value)

    def _reset_component_state(self) -> None:
        self.record = None
        self.selected_value = None

    def _reject(self, value: str | None) -> UpdateResult:
        message = "An update is already in progress."
        self.emit(ev.UpdateRejected(command=self._command, value=value, message=message))
        return UpdateResult(status="rejected", value=value, message=message)

    def _can_interact(self) -> bool:
        return self.is_loaded and self.error is None

    def _report(self, error: PathAssistantError) -> None:
        self.error = error
        self.emit(
            ev.ErrorReported(
                command=self._command,
                error_code=error.code,
                message=error.message or self.labels.generic_error_message,
            )
        )

    def _is_current(self, version: int, name: str) -> bool:
        if version == self._version:
            return True
        self.emit(
            ev.ResultDiscarded(
                command=self._command,
                name=name,
                version=version,
                current_version=self._version,
            )
        )
        return False

    async def _fetch(
        self, name: str, call: Awaitable[T]
    ) -> tuple[T | None, PathAssistantError | None]:
        self.emit(ev.SourceFetchStarted(command=self._command, name=name))
        started = time.perf_counter()
        try:
            data = await call
        except Exception as exc:  # noqa: BLE001
            message = str(exc) or self.labels.generic_error_message
            self.emit(
                ev.SourceFetchFailed(
                    command=self._command,
                    name=name,
                    duration_ms=_elapsed_ms(started),
                    message=message,
                )
            )
            return None, DataLoadFailure(name, message)
        self.emit(
            ev.SourceFetchCompleted(
                command=self._command,
                name=name,
                duration_ms=_elapsed_ms(started),
            )
        )
        return data, None


def _discard(_: Any) -> None:
    return None


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
