# Prompt fragments and the hidden scene directive.
# Placeholders such as {{char}} are left for the host to substitute.

from __future__ import annotations
from typing import Optional

from .types import TransitionConfig, TransitionRequest

OOC_MARKER = "[OOC Scene Direction]"

DEFAULT_SCENE_NOTE = "Allow the character to transition to a new scene that makes sense."

OUTPUT_CONSTRAINT = "Return only the character's spoken or internal line (no extra narrative)."


def resolve_note(note: Optional[str]) -> str:
    if isinstance(note, str) and note.strip():
        return note
    return DEFAULT_SCENE_NOTE


def resolve_style(style: Optional[str]) -> Optional[str]:
    if isinstance(style, str) and style.strip():
        return style
    return None


def compose_directive(config: TransitionConfig, request: TransitionRequest) -> str:
    lines = [OOC_MARKER]
    if config.scene_change_instructions:
        lines.append(config.scene_change_instructions)
    style = resolve_style(request.style)
    if style:
        lines.append("Style hint: " + style)
    lines.append("Scene notes: " + resolve_note(request.note))
    lines.append(OUTPUT_CONSTRAINT)
    return "\n".join(lines)


def diagnostic_line(note: Optional[str], style: Optional[str], error: Optional[str] = None) -> str:
    """Visible stand-in line used when generation is unavailable or failed."""
    text = f"[DEBUG] Scene transition test - {resolve_note(note)}"
    style = resolve_style(style)
    if style:
        text += f" (style: {style})"
    if error:
        text += f" [error: {error}]"
    return text
