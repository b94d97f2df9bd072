from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from pathassist.cli.renderers import PathJsonRenderer, PathPlainRenderer, PathRichRenderer, run_events
from pathassist.core.advance import advance_events
from pathassist.core.show import show_events


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


@pytest.mark.integration
def test_json_renderer_reports_path_and_scenario(sample_project: Path) -> None:
    console, buffer = _console()

    exit_code = run_events(show_events(sample_project), PathJsonRenderer(console))

    payload = json.loads(buffer.getvalue())
    assert exit_code == 0
    assert payload["ok"] is True
    assert payload["stages"]["resolve_scenario"] == "success"
    assert payload["scenario"]["caption"] == "Mark Status as Complete"
    assert payload["path"]["steps"][-1]["index"] is None


@pytest.mark.integration
def test_plain_renderer_prints_path_and_action(sample_project: Path) -> None:
    console, buffer = _console()

    exit_code = run_events(show_events(sample_project), PathPlainRenderer(console))

    output = buffer.getvalue()
    assert exit_code == 0
    assert "● In Progress" in output
    assert "Action: Mark Status as Complete" in output
    assert "SHOW OK" in output


@pytest.mark.integration
def test_rich_renderer_reports_failed_update_stage(sample_project: Path) -> None:
    console, buffer = _console()

    exit_code = run_events(advance_events(sample_project, select="Nope"), PathRichRenderer(console))

    output = buffer.getvalue()
    assert exit_code == 2
    assert "unknown_step" in output
    assert "Path failed" in output


@pytest.mark.integration
def test_rich_renderer_drives_live_stage_view_on_terminal(sample_project: Path) -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, force_terminal=True, color_system=None)
    renderer = PathRichRenderer(console)

    exit_code = run_events(show_events(sample_project), renderer)

    output = buffer.getvalue()
    assert exit_code == 0
    assert renderer._live is None
    assert renderer.stage_status == {
        "load_config": "success",
        "load_data": "success",
        "validate_steps": "success",
        "resolve_scenario": "success",
    }
    assert "Stages" in output
    assert "Mark Status as Complete" in output
