# Dummy model client for local dev and testing without API calls.
# Echoes the most recent instruction back, so a quiet generation still yields text.

from typing import List, Tuple, Dict, Any
from ..types import Message, ModelParams

class EchoDevClient:
    def __init__(self):
        self.model = "echo-dev"

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        last = messages[-1].content if messages else "(no input)"
        text = f"[ECHO RESPONSE]\n{last}"
        meta = {"engine": "echo", "model": self.model, "temp": params.temperature, "max_tokens": params.max_tokens}
        return text, meta
