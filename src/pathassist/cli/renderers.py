from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Iterable

from rich import box
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pathassist import __version__
from pathassist.core import events as ev
from pathassist.core.stages import STAGE_ORDER

RULE_WIDTH = 64
RULE_LINE = "-" * RULE_WIDTH
STATUS_GLYPHS = {
    "pending": "⏸",
    "running": "⠋",
    "success": "✅",
    "failed": "❌",
    "skipped": "⏭",
    "warning": "⚠️",
}
STEP_GLYPHS = {
    "complete": "✔",
    "current": "●",
    "incomplete": "○",
}


def run_events(events: Iterable[ev.PathassistEvent], renderer: "Renderer") -> int:
    exit_code = 0
    for event in events:
        renderer.handle(event)
        if isinstance(event, ev.CommandCompleted):
            exit_code = event.exit_code
    renderer.close()
    return exit_code


class Renderer:
    def handle(self, event: ev.PathassistEvent) -> None:  # noqa: D401
        """Handle a single event."""

    def close(self) -> None:
        return None


class PathRichRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console
        self.is_tty = console.is_terminal
        self._command = ""
        self._live: Live | None = None
        self.stage_status: dict[str, str] = {}
        self.stage_elapsed: dict[str, float] = {}
        self._path: ev.PathAssembled | None = None
        self._scenario: ev.ScenarioResolved | None = None
        self._updates: list[ev.PathassistEvent] = []
        self._warnings: list[str] = []
        self._failure: ev.StageFailed | None = None

    def handle(self, event: ev.PathassistEvent) -> None:
        if isinstance(event, ev.CommandStarted):
            self._command = event.command
            self.stage_status = {name: "pending" for name, _ in STAGE_ORDER.get(event.command, [])}
            _print_header(self.console, event)
            if self.is_tty:
                self._live = Live(self._render(), console=self.console, refresh_per_second=10)
                self._live.__enter__()
            return
        if isinstance(event, ev.StageStarted):
            self.stage_status[event.stage_id] = "running"
            self._refresh()
            return
        if isinstance(event, ev.StageCompleted):
            self.stage_status[event.stage_id] = event.status
            self.stage_elapsed[event.stage_id] = event.duration_ms
            self._refresh()
            return
        if isinstance(event, ev.StageFailed):
            self.stage_status[event.stage_id] = "failed"
            self.stage_elapsed[event.stage_id] = event.duration_ms
            self._failure = event
            self._refresh()
            return
        if isinstance(event, ev.SourceFetchFailed):
            self._warnings.append(f"{event.name}: {_redact(event.message)}")
            return
        if isinstance(event, ev.Warning):
            self._warnings.append(_redact(event.message))
            return
        if isinstance(event, ev.PathAssembled):
            self._path = event
            return
        if isinstance(event, ev.ScenarioResolved):
            self._scenario = event
            return
        if isinstance(event, (ev.UpdateDispatched, ev.UpdateCompleted, ev.UpdateFailed, ev.UpdateRejected)):
            self._updates.append(event)
            return
        if isinstance(event, ev.CommandCompleted):
            self._finish(event)

    def close(self) -> None:
        if self._live:
            self._live.__exit__(None, None, None)
            self._live = None

    def _refresh(self) -> None:
        if self._live:
            self._live.update(self._render())

    def _render(self) -> Panel:
        mapping = STAGE_ORDER.get(self._command, [])
        total = len(mapping)
        stage_table = Table(show_header=True, box=box.MINIMAL, show_lines=False)
        stage_table.add_column("#", justify="right", style="dim")
        stage_table.add_column("Stage")
        stage_table.add_column("Status")
        stage_table.add_column("Time", justify="right")
        for index, (stage_id, label) in enumerate(mapping, start=1):
            status = self.stage_status.get(stage_id, "pending")
            elapsed = self.stage_elapsed.get(stage_id)
            duration = _format_duration(elapsed) if elapsed is not None else ""
            stage_table.add_row(f"{index}/{total}", label, _format_status_text(status), duration)
        return Panel(stage_table, title="Stages", box=box.ROUNDED, title_align="left")

    def _finish(self, event: ev.CommandCompleted) -> None:
        if self._live:
            self._live.__exit__(None, None, None)
            self._live = None
        else:
            self.console.print(self._render())
        if self._path is not None:
            self.console.print(_path_table(self._path))
            self.console.print(_path_ribbon(self._path.steps))
        if self._scenario is not None:
            self.console.print(_scenario_panel(self._scenario, self._path))
        for update in self._updates:
            self.console.print(_update_text(update))
        if self._warnings:
            warnings_text = Text("\n".join(f"- {warning}" for warning in self._warnings), style="orange1")
            self.console.print(
                Panel(
                    warnings_text,
                    title="[orange1]Warnings[/orange1]",
                    box=box.ROUNDED,
                    title_align="left",
                    border_style="orange1",
                )
            )
        if self._failure is not None:
            self.console.print(_stage_failure_panel(self._failure))
        status = "success" if event.ok else "failed"
        self.console.print(Text.assemble(Text(f"{self._command}: "), _status_badge(status)))


class PathPlainRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console
        self._command = ""

    def handle(self, event: ev.PathassistEvent) -> None:
        if isinstance(event, ev.CommandStarted):
            self._command = event.command
            _print_header(self.console, event)
            return
        mapping = STAGE_ORDER.get(self._command, [])
        if isinstance(event, ev.StageCompleted):
            line = _format_stage_line(
                _stage_index(event.stage_id, mapping),
                _stage_label(event.stage_id, mapping),
                event.status,
                event.duration_ms,
                total=len(mapping),
                include_status_word=True,
            )
            self.console.print(line, markup=False)
            return
        if isinstance(event, ev.StageFailed):
            label = _stage_label(event.stage_id, mapping)
            self.console.print(f"{label} FAIL: {_redact(event.message)}", markup=False)
            if event.hint:
                self.console.print(f"hint: {_redact(event.hint)}", markup=False)
            return
        if isinstance(event, ev.SourceFetchFailed):
            self.console.print(f"source {event.name}: failed ({_redact(event.message)})", markup=False)
            return
        if isinstance(event, ev.Warning):
            self.console.print(f"Warning: {_redact(event.message)}", markup=False)
            return
        if isinstance(event, ev.PathAssembled):
            self.console.print(
                f"Path {event.field_label} (record {event.record_id}): "
                + " > ".join(_plain_step(step) for step in event.steps),
                markup=False,
            )
            return
        if isinstance(event, ev.ScenarioResolved):
            caption = event.caption or "-"
            if not event.display_button:
                caption = f"{caption} (hidden)"
            elif event.button_disabled:
                caption = f"{caption} (disabled)"
            self.console.print(f"Action: {caption}", markup=False)
            return
        if isinstance(event, (ev.UpdateDispatched, ev.UpdateCompleted, ev.UpdateFailed, ev.UpdateRejected)):
            self.console.print(_update_text(event).plain, markup=False)
            return
        if isinstance(event, ev.CommandCompleted):
            self.console.print("")
            self.console.print(f"{self._command.upper()} {'OK' if event.ok else 'FAIL'}", markup=False)


class PathJsonRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console
        self._stages: dict[str, str] = {}
        self._warnings: list[str] = []
        self._errors: list[dict[str, str]] = []
        self._path: dict[str, Any] | None = None
        self._scenario: dict[str, Any] | None = None
        self._updates: list[dict[str, Any]] = []

    def handle(self, event: ev.PathassistEvent) -> None:
        if isinstance(event, ev.StageCompleted):
            self._stages[event.stage_id] = event.status
            return
        if isinstance(event, ev.StageFailed):
            self._stages[event.stage_id] = "failed"
            self._errors.append(
                {"stage": event.stage_id, "code": event.error_code, "message": _redact(event.message)}
            )
            return
        if isinstance(event, ev.Warning):
            self._warnings.append(_redact(event.message))
            return
        if isinstance(event, ev.PathAssembled):
            self._path = _public(event)
            return
        if isinstance(event, ev.ScenarioResolved):
            self._scenario = _public(event)
            return
        if isinstance(event, (ev.UpdateDispatched, ev.UpdateCompleted, ev.UpdateFailed, ev.UpdateRejected)):
            self._updates.append(_public(event))
            return
        if isinstance(event, ev.CommandCompleted):
            payload = {
                "ok": event.ok,
                "stages": self._stages,
                "path": self._path,
                "scenario": self._scenario,
                "updates": self._updates,
                "warnings": self._warnings,
                "errors": self._errors,
            }
            self.console.print_json(json.dumps(payload, sort_keys=True))


class ListSourcesRichRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console

    def handle(self, event: ev.PathassistEvent) -> None:
        if isinstance(event, ev.CommandStarted):
            _print_header(self.console, event)
            return
        if isinstance(event, ev.SourcesDiscovered):
            table = Table(title="record sources", box=box.ROUNDED, title_justify="left")
            table.add_column("TYPE", style="bold")
            table.add_column("IMPL")
            for source in event.sources:
                table.add_row(source["type_key"], source["impl"])
            self.console.print(table)


class ListSourcesPlainRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console

    def handle(self, event: ev.PathassistEvent) -> None:
        if isinstance(event, ev.CommandStarted):
            _print_header(self.console, event)
            return
        if isinstance(event, ev.SourcesDiscovered):
            self.console.print("record sources:")
            for source in event.sources:
                self.console.print(f"- {source['type_key']}: {source['impl']}", markup=False)


class ListSourcesJsonRenderer(Renderer):
    def __init__(self, console: Console):
        self.console = console
        self._sources: list[dict[str, str]] = []

    def handle(self, event: ev.PathassistEvent) -> None:
        if isinstance(event, ev.SourcesDiscovered):
            self._sources = event.sources
        if isinstance(event, ev.CommandCompleted):
            self.console.print_json(json.dumps({"ok": event.ok, "sources": self._sources}, sort_keys=True))


def _public(event: ev.PathassistEvent) -> dict[str, Any]:
    payload = event.to_dict()
    for key in ("ts", "level", "command"):
        payload.pop(key, None)
    return payload


def _format_duration(elapsed_ms: float) -> str:
    if elapsed_ms < 1000:
        return f"{elapsed_ms:.0f}ms"
    seconds = elapsed_ms / 1000
    if seconds < 10:
        return f"{seconds:.2f}s"
    return f"{seconds:.1f}s"


def _print_header(console: Console, event: ev.CommandStarted) -> None:
    if event.project_dir is None:
        console.print(f"pathassist v{__version__}\n{RULE_LINE}", markup=False)
        return
    config = event.config_path or Path("pathassist.yaml")
    console.print(
        f"pathassist v{__version__} | project: {event.project_dir} | config: {config}\n{RULE_LINE}",
        markup=False,
    )


_REDACT_PATTERN = re.compile(
    r"(?i)\b(authorization|bearer|token|secret|password|api_key)\b\s*[:=]?\s*[^\s]+"
)


def _redact(text: str) -> str:
    if not text:
        return text
    return _REDACT_PATTERN.sub(r"\1: <redacted>", text)


def _format_stage_line(
    index: int,
    label: str,
    status: str,
    elapsed_ms: float | None,
    total: int = 4,
    include_status_word: bool = False,
) -> str:
    glyph = STATUS_GLYPHS.get(status, "?")
    suffix = ""
    if status in {"skipped", "failed"} and not include_status_word:
        suffix = f" {status}"
    if include_status_word and status in {"success", "failed", "skipped"}:
        suffix = f" {_status_word(status)}"
    duration = f"  {_format_duration(elapsed_ms)}" if elapsed_ms is not None else ""
    padding = "." * max(2, 28 - len(label))
    return f"[{index}/{total}] {label} {padding} {glyph}{suffix}{duration}"


def _stage_label(stage_id: str, mapping: list[tuple[str, str]]) -> str:
    for key, label in mapping:
        if key == stage_id:
            return label
    return stage_id


def _stage_index(stage_id: str, mapping: list[tuple[str, str]]) -> int:
    for index, (key, _label) in enumerate(mapping, start=1):
        if key == stage_id:
            return index
    return 0


def _status_word(status: str) -> str:
    return {
        "success": "OK",
        "failed": "FAIL",
        "skipped": "SKIP",
    }.get(status, status.upper())


def _status_badge(status: str) -> Text:
    normalized = status.strip().lower()
    label = {
        "success": "ok",
        "failed": "fail",
        "skipped": "skip",
    }.get(normalized, normalized)
    style = {
        "success": "bold black on green3",
        "failed": "bold white on red3",
        "skipped": "bold white on grey35",
    }.get(normalized, "bold white on grey35")
    return Text(f" {label} ", style=style)


def _step_style(step: dict[str, Any]) -> str:
    if step.get("lost"):
        return "bold red3"
    if step.get("won") and step.get("state") == "current":
        return "bold green3"
    return {
        "current": "bold reverse",
        "complete": "green",
        "incomplete": "bright_black",
    }.get(step.get("state", ""), "default")


def _plain_step(step: dict[str, Any]) -> str:
    glyph = STEP_GLYPHS.get(step.get("state", ""), "?")
    marker = "*" if step.get("active") else ""
    return f"{glyph} {step.get('label') or step.get('value')}{marker}"


def _path_ribbon(steps: list[dict[str, Any]]) -> Text:
    ribbon = Text()
    for position, step in enumerate(steps):
        if position:
            ribbon.append("  ›  ", style="bright_black")
        glyph = STEP_GLYPHS.get(step.get("state", ""), "?")
        ribbon.append(f"{glyph} {step.get('label') or step.get('value')}", style=_step_style(step))
    return ribbon


def _path_table(event: ev.PathAssembled) -> Table:
    table = Table(
        title=f"{event.field_label} path for {event.record_id}",
        show_header=True,
        box=box.MINIMAL,
        title_justify="left",
    )
    table.add_column("#", justify="right")
    table.add_column("STEP", style="bold")
    table.add_column("VALUE")
    table.add_column("STATE")
    for step in event.steps:
        index = step.get("index")
        state = step.get("state", "")
        if step.get("won"):
            state = f"{state}, won"
        if step.get("lost"):
            state = f"{state}, lost"
        if step.get("active"):
            state = f"{state}, active"
        table.add_row(
            "∞" if index is None else str(index),
            step.get("label") or "",
            step.get("value") or "",
            Text(state, style=_step_style(step)),
        )
    return table


def _scenario_panel(event: ev.ScenarioResolved, path: ev.PathAssembled | None) -> Panel:
    lines = [f"scenario: {event.scenario or 'none'}"]
    if event.display_button:
        caption = event.caption or "-"
        if event.button_disabled:
            caption = f"{caption} (disabled)"
        lines.append(f"action:   {caption}")
    if event.target is not None:
        lines.append(f"target:   {event.target}")
    if event.selection_prompt:
        lines.append(f"prompt:   {event.selection_prompt}")
    if path is not None and path.current_value is not None:
        lines.append(f"current:  {path.current_value}")
    return Panel("\n".join(lines), title="Next action", box=box.ROUNDED, title_align="left")


def _update_text(event: ev.PathassistEvent) -> Text:
    if isinstance(event, ev.UpdateDispatched):
        return Text(f"update sent: {event.field_api_name} = {event.value}", style="cyan")
    if isinstance(event, ev.UpdateCompleted):
        return Text(
            f"update saved: {event.value} ({_format_duration(event.duration_ms)})", style="green"
        )
    if isinstance(event, ev.UpdateFailed):
        return Text(f"update failed: {_redact(event.message)}", style="red")
    if isinstance(event, ev.UpdateRejected):
        return Text(f"update rejected: {event.message}", style="orange1")
    return Text("")


def _stage_failure_panel(event: ev.StageFailed) -> Panel:
    body = "\n".join(
        [
            f"stage: {event.stage_id}",
            f"code:  {event.error_code}",
            f"error: {_redact(event.message)}",
        ]
    )
    if event.hint:
        body = "\n".join([body, f"hint:  {_redact(event.hint)}"])
    return Panel(body, title="Path failed", box=box.ROUNDED, title_align="left")


def _format_status_text(status: str) -> str:
    glyph = STATUS_GLYPHS.get(status, "?")
    return f"{glyph} {status}"
