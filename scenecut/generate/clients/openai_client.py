# Client for the OpenAI Chat Completions API.
# Same interface as OllamaClient.

from typing import List, Optional, Tuple, Dict, Any
from openai import OpenAI
from ..types import Message, ModelParams

class OpenAIClient:
    def __init__(self, model: str = "gpt-4o-mini", api_key: Optional[str] = None):
        self.model = model
        self.client = OpenAI(api_key=api_key)

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        formatted = [{"role": m.role, "content": m.content} for m in messages]
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=formatted,
            temperature=params.temperature or 0.8,
            max_tokens=params.max_tokens or 120,
        )
        text = (resp.choices[0].message.content or "").strip()
        meta = {"engine": "openai", "model": self.model}
        return text, meta
