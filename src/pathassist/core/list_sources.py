from __future__ import annotations

import time
from importlib.metadata import entry_points
from typing import Iterable

from pathassist.core import events as ev
from pathassist.plugins.registry import BUILTIN_SOURCES


def list_sources_events() -> Iterable[ev.PathassistEvent]:
    yield ev.CommandStarted(command="list-sources")

    started = time.perf_counter()
    yield ev.StageStarted(command="list-sources", stage_id="discover_sources", label="Discover sources")
    sources = _discover("pathassist.sources")
    yield ev.SourcesDiscovered(command="list-sources", sources=sources)
    duration_ms = _elapsed_ms(started)
    yield ev.StageCompleted(
        command="list-sources",
        stage_id="discover_sources",
        duration_ms=duration_ms,
        status="success",
    )

    yield ev.CommandCompleted(command="list-sources", ok=True, exit_code=0)


def _discover(group: str) -> list[dict[str, str]]:
    plugins: dict[str, str] = dict(BUILTIN_SOURCES)
    for ep in entry_points(group=group):
        plugins[ep.name] = ep.value
    return [{"type_key": name, "impl": impl} for name, impl in sorted(plugins.items())]


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
