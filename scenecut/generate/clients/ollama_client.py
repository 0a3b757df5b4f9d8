# Client for Ollama local inference.
# Uses the chat endpoint so system/user/assistant roles survive the trip.

import requests
from typing import List, Tuple, Dict, Any
from ..types import Message, ModelParams

DEFAULT_HOST = "http://localhost:11434"

class OllamaClient:
    def __init__(self, model: str = "mistral:7b-instruct", host: str = DEFAULT_HOST):
        self.model = model
        self.host = host.rstrip("/")

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        payload = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": False,
            "options": {
                "temperature": float(params.temperature or 0.8),
                "num_predict": int(params.max_tokens or 120),
            },
        }
        url = f"{self.host}/api/chat"
        resp = requests.post(url, json=payload, timeout=180)
        resp.raise_for_status()
        data = resp.json()
        text = (data.get("message") or {}).get("content", "")
        return text.strip(), {"engine": "ollama", "model": self.model}
