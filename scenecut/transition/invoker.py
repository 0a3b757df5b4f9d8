# Generation invoker: sends the hidden directive through the host's quiet
# generation capability and reports text or a failure, never an exception.

from __future__ import annotations
import inspect
import logging
from typing import Any

from .config import EXTENSION_NAME
from .types import GenerationResult, DEFAULT_MAX_TOKENS

logger = logging.getLogger("scenecut.transition")


def normalize_output(result: Any) -> str:
    if isinstance(result, str):
        return result.strip()
    if result is None:
        return ""
    return str(result).strip()


class GenerationInvoker:
    def __init__(self, ctx):
        self.ctx = ctx

    async def invoke(self, directive: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> GenerationResult:
        generate = getattr(self.ctx, "generate_quiet_prompt", None)
        if generate is None:
            logger.error("[%s] generate_quiet_prompt not available", EXTENSION_NAME)
            return GenerationResult.unavailable("quiet generation is not available")

        try:
            substitute = getattr(self.ctx, "substitute_params", None)
            quiet_prompt = substitute(directive) if substitute else directive
            result = generate(
                quiet_prompt=quiet_prompt,
                quiet_to_loud=True,
                max_tokens=int(max_tokens or DEFAULT_MAX_TOKENS),
            )
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.exception("[%s] Error generating scene line", EXTENSION_NAME)
            return GenerationResult.error(str(e))

        return GenerationResult.success(normalize_output(result))
