# Configuration resolver for the scene transition extension.
# Reads the persisted record under a fixed key and fills every missing option
# with its built-in default. Reads never write back.

from __future__ import annotations
import logging
from typing import Any, Dict

from pydantic import ValidationError

from .types import TransitionConfig, DEFAULT_SCENE_CHANGE_INSTRUCTIONS

logger = logging.getLogger("scenecut.transition")

EXTENSION_NAME = "Scene Transition"
CONFIG_KEY = "scene-transition-settings"

DEFAULTS: Dict[str, Any] = TransitionConfig().model_dump()


class ConfigResolver:
    def __init__(self, ctx):
        self.ctx = ctx

    def _stored(self) -> Dict[str, Any]:
        stored = self.ctx.extension_settings.get(CONFIG_KEY)
        return stored if isinstance(stored, dict) else {}

    def resolve(self) -> TransitionConfig:
        stored = self._stored()
        merged = dict(DEFAULTS)
        for key in DEFAULTS:
            value = stored.get(key)
            if value is None:
                continue
            # each field is checked alone; a bad value only loses its own default
            try:
                merged[key] = getattr(TransitionConfig.model_validate({key: value}), key)
            except ValidationError:
                logger.warning("[%s] ignoring invalid stored value for %s: %r", EXTENSION_NAME, key, value)
        # empty instructions fall back too, not only missing ones
        if not merged["scene_change_instructions"].strip():
            merged["scene_change_instructions"] = DEFAULT_SCENE_CHANGE_INSTRUCTIONS
        return TransitionConfig(**merged)

    def initialize(self) -> bool:
        """Write defaults on first use. Returns True when it actually wrote."""
        if self.ctx.extension_settings.get(CONFIG_KEY) is not None:
            return False
        self.ctx.extension_settings[CONFIG_KEY] = dict(DEFAULTS)
        self.ctx.save_settings_debounced()
        logger.info("[%s] initialized default settings", EXTENSION_NAME)
        return True

    def save(self, config: TransitionConfig) -> TransitionConfig:
        # unknown keys already in the record are kept
        record = dict(self._stored())
        record.update(config.model_dump())
        self.ctx.extension_settings[CONFIG_KEY] = record
        self.ctx.save_settings_debounced()
        return config

    def update(self, **changes: Any) -> TransitionConfig:
        current = self.resolve().model_dump()
        current.update({k: v for k, v in changes.items() if v is not None})
        return self.save(TransitionConfig(**current))

    def reset_instructions(self) -> TransitionConfig:
        return self.update(scene_change_instructions=DEFAULT_SCENE_CHANGE_INSTRUCTIONS)
