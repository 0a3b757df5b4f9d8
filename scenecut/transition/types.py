# Data models for the scene transition core.
# Configuration is a pydantic model (validated on read); the rest are plain dataclasses.

from __future__ import annotations
import math
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

DEFAULT_MAX_TOKENS = 120

DEFAULT_SCENE_CHANGE_INSTRUCTIONS = (
    "Write a scene transition, using the perspective of {{char}}. If the existing conversation "
    "indicates that the story hand reached the end of an event, describe the beginning of a new "
    "situation where {{char}} and {{user}} would interact again. Otherwise, transition {{char}} and "
    "{{user}} to a new location that would make sense. Describe the sight and sound of the new "
    "environment briefly, then have {{char}} start the interaction with {{user}} in this new setting. "
    "Do not write dialog for {{user}}. If the location change warrants a new outfit and there's "
    "logically a gap in the timeline where {{char}} could have changed, feel free to mention the "
    "outfit change briefly."
)

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


class TransitionError(Exception):
    """Base error for the scene transition core."""


class RequestParseError(TransitionError, ValueError):
    """Invalid command name or parameter value."""


class TransitionConfig(BaseModel):
    """Persisted extension configuration."""
    scene_change_instructions: str = DEFAULT_SCENE_CHANGE_INSTRUCTIONS
    auto_trigger_background: bool = False


def coerce_max_tokens(value: Any) -> int:
    if value is None or value == "":
        return DEFAULT_MAX_TOKENS
    if isinstance(value, bool):
        raise RequestParseError(f"max must be a positive integer, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise RequestParseError(f"max must be a positive integer, got {value!r}") from None
    if not math.isfinite(number) or number <= 0 or number != int(number):
        raise RequestParseError(f"max must be a positive integer, got {value!r}")
    return int(number)


def coerce_flag(value: Any) -> Optional[bool]:
    """Tri-state flag: None stays unset, strings like "true"/"off" become bools."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise RequestParseError(f"background must be true or false, got {value!r}")


@dataclass
class TransitionRequest:
    """One invocation's parameters. Never persisted."""
    note: Optional[str] = None
    style: Optional[str] = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    background: Optional[bool] = None

    @classmethod
    def from_named(cls, named: Optional[Mapping[str, Any]] = None, unnamed: Any = None) -> "TransitionRequest":
        named = dict(named or {})
        unknown = set(named) - {"style", "max", "background"}
        if unknown:
            raise RequestParseError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        style = named.get("style")
        note = unnamed if isinstance(unnamed, str) else None
        return cls(
            note=note,
            style=str(style) if style not in (None, "") else None,
            max_tokens=coerce_max_tokens(named.get("max")),
            background=coerce_flag(named.get("background")),
        )


@dataclass
class GeneratedMessage:
    """An assistant chat entry as the host stores it."""
    mes: str
    name: Optional[str] = None
    is_user: bool = False
    send_date: int = field(default_factory=lambda: int(time.time() * 1000))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GenerationFailure:
    kind: str  # "unavailable" | "error"
    message: str


@dataclass
class GenerationResult:
    """Either generated text or a failure, never both."""
    text: str = ""
    failure: Optional[GenerationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(text=text)

    @classmethod
    def unavailable(cls, message: str) -> "GenerationResult":
        return cls(failure=GenerationFailure(kind="unavailable", message=message))

    @classmethod
    def error(cls, message: str) -> "GenerationResult":
        return cls(failure=GenerationFailure(kind="error", message=message))
