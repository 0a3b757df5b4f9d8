# Host-side interface the scene transition core talks to.
# The core never reaches into global state; it receives a HostContext.

from __future__ import annotations
import inspect
from collections import defaultdict
from typing import Any, Callable, Dict, List, MutableMapping, Optional, Protocol, runtime_checkable


class EventTypes:
    APP_READY = "app_ready"
    MESSAGE_RECEIVED = "message_received"
    CHARACTER_MESSAGE_RENDERED = "character_message_rendered"


class EventSource:
    """Named-event emitter. Handlers may be plain functions or coroutines."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Callable[..., Any]) -> None:
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    async def emit(self, event: str, *args: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            result = handler(*args)
            if inspect.isawaitable(result):
                await result


@runtime_checkable
class HostContext(Protocol):
    """What the core needs from the chat application."""

    chat: List[Dict[str, Any]]
    event_source: EventSource
    extension_settings: MutableMapping[str, Any]

    # Optional capability: None when no generation backend is wired in.
    generate_quiet_prompt: Optional[Callable[..., Any]]

    def save_settings_debounced(self) -> None: ...

    async def save_chat(self) -> None: ...

    def substitute_params(self, text: str) -> str: ...

    def active_character_name(self) -> Optional[str]: ...

    def image_backend_available(self) -> bool: ...

    async def trigger_background_regeneration(self) -> None: ...
