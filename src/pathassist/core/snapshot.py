from __future__ import annotations

from dataclasses import dataclass

TERMINAL_SENTINEL = "pathAssistant_selectAClosedStepValue"


@dataclass(frozen=True)
class ProgressionSnapshot:
    is_closed: bool
    selected_value: str | None
    current_value: str | None
    terminal_sentinel: str = TERMINAL_SENTINEL

    @property
    def has_selection(self) -> bool:
        return bool(self.selected_value)

    @property
    def selected_terminal(self) -> bool:
        return self.has_selection and self.selected_value == self.terminal_sentinel
