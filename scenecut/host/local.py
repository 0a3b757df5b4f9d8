# LocalHost: a small file-backed chat host that satisfies HostContext.
#
#   <data_dir>/settings.yaml     extension settings blob (debounced save)
#   <data_dir>/chat.json         the active conversation
#   <data_dir>/characters.yaml   list of {name: ...}; ACTIVE_CHARACTER indexes it

from __future__ import annotations
import asyncio
import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from scenecut.generate import QuietGenerator

from . import images
from .context import EventSource

logger = logging.getLogger("scenecut.host")

_CHAR = re.compile(r"\{\{\s*char\s*\}\}", re.IGNORECASE)
_USER = re.compile(r"\{\{\s*user\s*\}\}", re.IGNORECASE)


class LocalHost:
    def __init__(
        self,
        data_dir: str,
        quiet_generator: Optional[QuietGenerator] = None,
        characters: Optional[List[Dict[str, Any]]] = None,
        character_id: Optional[int] = 0,
        user_name: str = "User",
        settings_delay: float = 1.0,
        image_source: Optional[str] = None,
        image_trigger_url: Optional[str] = None,
        image_trigger_timeout: float = 30.0,
    ):
        self.data_dir = Path(data_dir)
        self.settings_path = self.data_dir / "settings.yaml"
        self.chat_path = self.data_dir / "chat.json"
        self.characters_path = self.data_dir / "characters.yaml"

        self.event_source = EventSource()
        self.extension_settings: Dict[str, Any] = self._load_yaml(self.settings_path, {})
        self.chat: List[Dict[str, Any]] = self._load_chat()
        self.characters = characters if characters is not None else self._load_yaml(self.characters_path, [])
        self.character_id = character_id
        self.user_name = user_name

        self.quiet_generator = quiet_generator
        # capability is absent, not broken, when no generator is wired in
        self.generate_quiet_prompt = self._generate_quiet_prompt if quiet_generator else None

        self.settings_delay = settings_delay
        self.image_source = image_source
        self.image_trigger_url = image_trigger_url
        self.image_trigger_timeout = image_trigger_timeout

        self._save_timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._chat_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings, model_client=None) -> "LocalHost":
        generator = None
        if model_client is not None:
            generator = QuietGenerator(model_client, history_limit=settings.CHAT_HISTORY_LIMIT)
        return cls(
            data_dir=settings.DATA_DIR,
            quiet_generator=generator,
            character_id=settings.ACTIVE_CHARACTER,
            user_name=settings.USER_NAME,
            settings_delay=settings.SETTINGS_SAVE_DELAY,
            image_source=settings.IMAGE_SOURCE,
            image_trigger_url=settings.IMAGE_TRIGGER_URL,
            image_trigger_timeout=settings.IMAGE_TRIGGER_TIMEOUT,
        )

    # -------------------------
    # Loaders
    # -------------------------
    @staticmethod
    def _load_yaml(path: Path, default):
        if not path.exists():
            return default
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, type(default)) else default

    def _load_chat(self) -> List[Dict[str, Any]]:
        if not self.chat_path.exists():
            return []
        with open(self.chat_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, list) else []

    # -------------------------
    # Settings blob
    # -------------------------
    def save_settings_debounced(self) -> None:
        if self.settings_delay <= 0:
            self.flush_settings()
            return
        with self._lock:
            if self._save_timer is not None:
                self._save_timer.cancel()
            self._save_timer = threading.Timer(self.settings_delay, self.flush_settings)
            self._save_timer.daemon = True
            self._save_timer.start()

    def flush_settings(self) -> None:
        with self._lock:
            if self._save_timer is not None:
                self._save_timer.cancel()
                self._save_timer = None
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(dict(self.extension_settings), f, sort_keys=True, allow_unicode=True)
        logger.debug("settings written to %s", self.settings_path)

    # -------------------------
    # Chat
    # -------------------------
    def _write_chat(self) -> None:
        # overlapping saves share one temp path; serialize them and always write the latest chat
        with self._chat_lock:
            messages = list(self.chat)
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp = self.chat_path.with_suffix(".json.tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(messages, f, ensure_ascii=False, indent=2)
            tmp.replace(self.chat_path)

    async def save_chat(self) -> None:
        await asyncio.to_thread(self._write_chat)

    # -------------------------
    # Identity / templating
    # -------------------------
    def active_character_name(self) -> Optional[str]:
        if self.character_id is None:
            return None
        if 0 <= self.character_id < len(self.characters):
            return (self.characters[self.character_id] or {}).get("name")
        return None

    def substitute_params(self, text: str) -> str:
        char_name = self.active_character_name() or ""
        text = _CHAR.sub(lambda _: char_name, text)
        return _USER.sub(lambda _: self.user_name, text)

    # -------------------------
    # Generation / images
    # -------------------------
    async def _generate_quiet_prompt(self, quiet_prompt: str, quiet_to_loud: bool = False, max_tokens: Optional[int] = None) -> str:
        resp = await self.quiet_generator.agenerate(
            quiet_prompt,
            list(self.chat),
            quiet_to_loud=quiet_to_loud,
            max_tokens=max_tokens,
        )
        return resp.text

    def image_backend_available(self) -> bool:
        return images.image_backend_available(self.image_source)

    async def trigger_background_regeneration(self) -> None:
        await asyncio.to_thread(
            images.trigger_background,
            self.image_trigger_url,
            self.image_source,
            self.image_trigger_timeout,
        )

    def close(self) -> None:
        if self._save_timer is not None:
            self.flush_settings()
