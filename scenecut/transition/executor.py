# Transition executor: resolve config → compose directive → generate →
# insert the line as the active character → maybe refresh the background.
#
# Outcome strings are the whole user-facing contract; nothing raises past execute().

from __future__ import annotations
import inspect
import logging
from typing import Optional

from scenecut.host.context import EventTypes, HostContext

from .config import ConfigResolver, EXTENSION_NAME
from .invoker import GenerationInvoker
from .prompts import compose_directive, diagnostic_line
from .trigger import should_trigger_background
from .types import GeneratedMessage, TransitionRequest, DEFAULT_MAX_TOKENS

logger = logging.getLogger("scenecut.transition")

SCENE_LINE_INSERTED = "Scene line inserted."
NO_OUTPUT_GENERATED = "No output generated."


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


def build_assistant_message(ctx: HostContext, text: str) -> GeneratedMessage:
    return GeneratedMessage(mes=text, name=ctx.active_character_name(), is_user=False)


async def insert_assistant_message(ctx: HostContext, text: str) -> int:
    """Append the line to the chat, notify observers, persist. Returns the message id."""
    try:
        msg = build_assistant_message(ctx, text)
        ctx.chat.append(msg.to_dict())
        msg_id = len(ctx.chat) - 1

        await ctx.event_source.emit(EventTypes.MESSAGE_RECEIVED, msg_id)
        await ctx.event_source.emit(EventTypes.CHARACTER_MESSAGE_RENDERED, msg_id)
        await _maybe_await(ctx.save_chat())
        return msg_id
    except Exception:
        logger.exception("[%s] Error inserting message", EXTENSION_NAME)
        raise


class TransitionExecutor:
    def __init__(self, ctx: HostContext):
        self.ctx = ctx
        self.config = ConfigResolver(ctx)
        self.invoker = GenerationInvoker(ctx)

    async def execute(self, request: Optional[TransitionRequest] = None) -> str:
        request = request or TransitionRequest()
        try:
            config = self.config.resolve()
            directive = compose_directive(config, request)
            result = await self.invoker.invoke(directive, request.max_tokens or DEFAULT_MAX_TOKENS)

            if result.ok:
                line = result.text
            else:
                error = result.failure.message if result.failure.kind == "error" else None
                line = diagnostic_line(request.note, request.style, error)

            if not line:
                logger.info("[%s] %s", EXTENSION_NAME, NO_OUTPUT_GENERATED)
                return NO_OUTPUT_GENERATED

            await insert_assistant_message(self.ctx, line)
            await self._refresh_background(request, config)
            logger.info("[%s] %s", EXTENSION_NAME, SCENE_LINE_INSERTED)
            return SCENE_LINE_INSERTED
        except Exception as e:
            logger.exception("[%s] Command execution error", EXTENSION_NAME)
            return f"Error: {e}"

    async def _refresh_background(self, request: TransitionRequest, config) -> bool:
        available = getattr(self.ctx, "image_backend_available", None)
        try:
            if not should_trigger_background(request.background, config, available):
                return False
            await _maybe_await(self.ctx.trigger_background_regeneration())
        except Exception:
            # line is already inserted; background failures never change the outcome
            logger.warning("[%s] Background regeneration failed", EXTENSION_NAME, exc_info=True)
            return False
        return True
