# Background regeneration decision.
#
# An explicit per-call flag always wins. Otherwise the persisted auto flag
# applies, and only if an image backend is actually configured.

from __future__ import annotations
from typing import Callable, Optional, Union

from .types import TransitionConfig

Availability = Union[bool, Callable[[], bool], None]


def should_trigger_background(
    explicit: Optional[bool],
    config: TransitionConfig,
    sd_available: Availability = None,
) -> bool:
    if explicit is not None:
        return bool(explicit)
    if not config.auto_trigger_background:
        return False
    if callable(sd_available):
        return bool(sd_available())
    return bool(sd_available)
