from __future__ import annotations

from dataclasses import dataclass

TOKEN = "{0}"


@dataclass(frozen=True)
class Layout:
    selection_prompt: str
    action_caption: str
    token: str = TOKEN

    def render_action_caption(self, field_label: str) -> str:
        return self.action_caption.replace(self.token, field_label)

    def render_selection_prompt(self, field_label: str) -> str:
        return self.selection_prompt.replace(self.token, field_label)
