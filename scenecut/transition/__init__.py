# Scene transition core: config → directive → quiet generation → insertion → background.

from .types import (
    TransitionConfig,
    TransitionRequest,
    GeneratedMessage,
    GenerationResult,
    GenerationFailure,
    TransitionError,
    RequestParseError,
)
from .config import ConfigResolver, CONFIG_KEY
from .prompts import compose_directive
from .invoker import GenerationInvoker
from .trigger import should_trigger_background
from .executor import TransitionExecutor, SCENE_LINE_INSERTED, NO_OUTPUT_GENERATED
from .command import parse_command, run_command

__all__ = [
    "TransitionConfig",
    "TransitionRequest",
    "GeneratedMessage",
    "GenerationResult",
    "GenerationFailure",
    "TransitionError",
    "RequestParseError",
    "ConfigResolver",
    "CONFIG_KEY",
    "compose_directive",
    "GenerationInvoker",
    "should_trigger_background",
    "TransitionExecutor",
    "SCENE_LINE_INSERTED",
    "NO_OUTPUT_GENERATED",
    "parse_command",
    "run_command",
]
