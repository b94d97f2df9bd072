from __future__ import annotations

from pathlib import Path
from typing import Iterable

from pathassist.core import events as ev
from pathassist.core.session import open_session, resolve_events


def show_events(
    project_dir: Path,
    *,
    config_path: Path | None = None,
    record_id: str | None = None,
) -> Iterable[ev.PathassistEvent]:
    assistant = yield from open_session(
        "show",
        project_dir,
        config_path=config_path,
        record_id=record_id,
    )
    if assistant is None:
        return
    yield from resolve_events("show", assistant)
    yield ev.CommandCompleted(command="show", ok=True, exit_code=0)
