# Image backend helpers: availability check and background regeneration trigger.
# The image generator itself lives elsewhere; we only know its source id and a trigger URL.

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger("scenecut.host")

# source identifiers an image backend can be configured with
KNOWN_IMAGE_SOURCES = frozenset({
    "extras",
    "horde",
    "auto",
    "vlad",
    "novel",
    "openai",
    "comfy",
    "togetherai",
    "drawthings",
    "pollinations",
    "stability",
    "blockentropy",
    "huggingface",
    "nanogpt",
    "bfl",
    "falai",
    "xai",
})


def image_backend_available(source: Optional[str]) -> bool:
    if not source:
        return False
    return source.strip().lower() in KNOWN_IMAGE_SOURCES


def trigger_background(url: Optional[str], source: Optional[str] = None, timeout: float = 30.0) -> Dict[str, Any]:
    """POST a background regeneration request. Raises on missing URL or HTTP errors."""
    if not url:
        raise RuntimeError("No image trigger URL configured")
    payload = {"mode": "background", "source": source}
    resp = requests.post(url, json=payload, timeout=timeout)
    resp.raise_for_status()
    logger.info("background regeneration requested via %s (%s)", source, resp.status_code)
    try:
        return resp.json()
    except ValueError:
        return {}
