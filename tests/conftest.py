# Shared fixtures: a scriptable in-memory host for the transition core.

import sys
from pathlib import Path

import pytest

# Make project root importable (so `scenecut` is on sys.path)
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from scenecut.host.context import EventSource, EventTypes


class FakeContext:
    """HostContext double. `generate_result` may be a value or an exception to raise."""

    def __init__(self, generate_result="Hello there.", char_name="Seraphina", sd_available=False):
        self.chat = []
        self.event_source = EventSource()
        self.extension_settings = {}
        self.settings_saves = 0
        self.chat_saves = 0
        self.char_name = char_name
        self.sd_available = sd_available
        self.availability_checks = 0
        self.background_calls = 0
        self.background_error = None
        self.save_chat_error = None
        self.generate_calls = []
        self.generate_result = generate_result
        self.generate_quiet_prompt = self._generate
        self.events = []
        self.event_source.on(EventTypes.MESSAGE_RECEIVED, lambda i: self.events.append(("received", i)))
        self.event_source.on(EventTypes.CHARACTER_MESSAGE_RENDERED, lambda i: self.events.append(("rendered", i)))

    async def _generate(self, quiet_prompt, quiet_to_loud=False, max_tokens=None):
        self.generate_calls.append({"quiet_prompt": quiet_prompt, "quiet_to_loud": quiet_to_loud, "max_tokens": max_tokens})
        if isinstance(self.generate_result, Exception):
            raise self.generate_result
        return self.generate_result

    def save_settings_debounced(self):
        self.settings_saves += 1

    async def save_chat(self):
        if self.save_chat_error:
            raise self.save_chat_error
        self.chat_saves += 1
        self.events.append(("saved", len(self.chat) - 1))

    def substitute_params(self, text):
        return text.replace("{{char}}", self.char_name or "").replace("{{user}}", "Alex")

    def active_character_name(self):
        return self.char_name

    def image_backend_available(self):
        self.availability_checks += 1
        return self.sd_available

    async def trigger_background_regeneration(self):
        self.background_calls += 1
        if self.background_error:
            raise self.background_error


@pytest.fixture
def ctx():
    return FakeContext()
