# QuietGenerator: the "quiet generation" capability the host offers to extensions.
# - accepts any model client (Ollama, OpenAI, Echo)
# - builds the message list from recent chat history + a hidden directive
# - returns text without adding a visible turn to the conversation

from __future__ import annotations
import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .types import Message, ModelParams, QuietResponse

logger = logging.getLogger("scenecut.generate")

DEFAULT_CONFIG_PATH = Path(__file__).with_name("config.yaml")


def select_model_client(settings):
    """Pick a model client from process settings: Ollama, then OpenAI, then Echo."""
    if settings.USE_OLLAMA:
        from .clients.ollama_client import OllamaClient
        return OllamaClient(model=settings.OLLAMA_MODEL, host=settings.OLLAMA_HOST)
    if settings.OPENAI_API_KEY:
        from .clients.openai_client import OpenAIClient
        return OpenAIClient(model=settings.OPENAI_MODEL, api_key=settings.OPENAI_API_KEY)
    from .clients.echo_dev_client import EchoDevClient
    return EchoDevClient()


class QuietGenerator:
    def __init__(self, model_client, config_path: Optional[str] = None, history_limit: Optional[int] = None):
        self.model_client = model_client
        self.config_path = str(config_path or DEFAULT_CONFIG_PATH)
        self.cfg = self._load_config()
        self.history_limit = history_limit if history_limit is not None else int(self.cfg.get("history_limit", 20))

    def _load_config(self) -> Dict[str, Any]:
        if not os.path.exists(self.config_path):
            return {}
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _history_messages(self, chat: Sequence[Dict[str, Any]]) -> List[Message]:
        """Map stored chat messages onto model roles, keeping the last `history_limit`."""
        if self.history_limit <= 0:
            return []
        out = []
        for entry in list(chat)[-self.history_limit:]:
            text = entry.get("mes") or ""
            if not text:
                continue
            role = "user" if entry.get("is_user") else "assistant"
            name = entry.get("name")
            content = f"{name}: {text}" if name else text
            out.append(Message(role=role, content=content))
        return out

    def build_messages(self, quiet_prompt: str, chat: Sequence[Dict[str, Any]], quiet_to_loud: bool = False) -> List[Message]:
        system_prompt = (self.cfg.get("system_prompt") or "").strip()
        messages = [Message(role="system", content=system_prompt)] if system_prompt else []
        messages.extend(self._history_messages(chat))
        # quiet-to-loud: the directive rides as a system instruction and the reply
        # is written in the character's voice; otherwise it is a hidden user turn.
        role = "system" if quiet_to_loud else "user"
        messages.append(Message(role=role, content=quiet_prompt))
        return messages

    def generate(
        self,
        quiet_prompt: str,
        chat: Sequence[Dict[str, Any]] = (),
        quiet_to_loud: bool = False,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> QuietResponse:
        messages = self.build_messages(quiet_prompt, chat, quiet_to_loud=quiet_to_loud)
        params = ModelParams(
            temperature=temperature or self.cfg.get("temperature", 0.8),
            max_tokens=max_tokens or self.cfg.get("max_tokens", 120),
        )
        text, meta = self.model_client.generate(messages, params)
        logger.debug("quiet generation via %s returned %d chars", meta.get("engine"), len(text or ""))
        return QuietResponse(text=text, meta=meta)

    async def agenerate(self, quiet_prompt: str, chat: Sequence[Dict[str, Any]] = (), **kwargs) -> QuietResponse:
        """Run `generate` off the event loop; model clients are blocking."""
        return await asyncio.to_thread(self.generate, quiet_prompt, list(chat), **kwargs)
