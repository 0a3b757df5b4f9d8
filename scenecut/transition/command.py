# Command-line surface for scene transitions:
#   /scene [style=...] [max=...] [background=true|false] [free-text scene notes]
# Aliases: /scenecut, /sc

from __future__ import annotations
import logging
import re
from typing import Any, Dict, Tuple

from .config import EXTENSION_NAME
from .executor import TransitionExecutor
from .types import RequestParseError, TransitionRequest

logger = logging.getLogger("scenecut.transition")

COMMAND_NAME = "scene"
COMMAND_ALIASES = ("scenecut", "sc")
NAMED_ARGUMENTS = ("style", "max", "background")

HELP_TEXT = """\
/scene - quietly generate a transition line (OOC prompt hidden)
  style=<hint>          optional style hint (e.g. cinematic, noir)
  max=<tokens>          max tokens limit (default 120)
  background=true|false force or skip background regeneration
  <notes>               optional scene notes (a default is used if omitted)
Example:
  /scene
  /scene style="cinematic" The tavern door slams; the rain outside picks up.
"""


def is_scene_command(name: str) -> bool:
    name = name.lstrip("/").lower()
    return name == COMMAND_NAME or name in COMMAND_ALIASES


_NAMED = re.compile(
    r"^(?P<key>" + "|".join(NAMED_ARGUMENTS) + r""")=(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>\S*))(?:\s+|$)"""
)


def split_command(text: str) -> Tuple[str, Dict[str, Any], str]:
    """Split "/sc style=noir max=80 The door slams." into (name, named, note)."""
    text = (text or "").strip()
    if not text:
        raise RequestParseError("Empty command")
    parts = re.split(r"\s+", text, maxsplit=1)
    name = parts[0].lstrip("/")
    rest = parts[1] if len(parts) > 1 else ""

    named: Dict[str, Any] = {}
    # named arguments come first; the first bare word starts the note
    while True:
        m = _NAMED.match(rest)
        if not m:
            break
        value = m.group("dq")
        if value is None:
            value = m.group("sq")
        if value is None:
            value = m.group("bare")
        named[m.group("key")] = value
        rest = rest[m.end():]
    return name, named, rest.strip()


def parse_command(text: str) -> TransitionRequest:
    name, named, note = split_command(text)
    if not is_scene_command(name):
        raise RequestParseError(f"Unknown command: /{name}")
    return TransitionRequest.from_named(named, note)


async def run_command(executor: TransitionExecutor, text: str) -> str:
    try:
        request = parse_command(text)
    except RequestParseError as e:
        logger.warning("[%s] %s", EXTENSION_NAME, e)
        return f"Error: {e}"
    return await executor.execute(request)
