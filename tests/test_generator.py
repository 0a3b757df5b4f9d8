# ===============================================
# tests/test_generator.py
# Model client selection and client request shapes (no network)
# ===============================================

from dataclasses import fields
from types import SimpleNamespace

from scenecut.generate import EchoDevClient, Message, ModelParams, QuietGenerator, select_model_client
from scenecut.generate.clients import ollama_client
from scenecut.generate.clients.ollama_client import OllamaClient


def make_settings(**overrides):
    base = dict(
        USE_OLLAMA=False,
        OLLAMA_MODEL="mistral:7b-instruct",
        OLLAMA_HOST="http://localhost:11434",
        OPENAI_API_KEY=None,
        OPENAI_MODEL="gpt-4o-mini",
    )
    base.update(overrides)
    return SimpleNamespace(**base)


def test_echo_is_the_fallback_client():
    assert isinstance(select_model_client(make_settings()), EchoDevClient)


def test_ollama_wins_when_enabled():
    client = select_model_client(make_settings(USE_OLLAMA=True, OPENAI_API_KEY="sk-test", OLLAMA_HOST="http://gpu:11434/"))
    assert isinstance(client, OllamaClient)
    assert client.host == "http://gpu:11434"


def test_ollama_sends_chat_payload(monkeypatch):
    sent = {}

    class FakeResponse:
        def raise_for_status(self):
            pass

        def json(self):
            return {"message": {"content": "  The fog parts.  "}}

    def fake_post(url, json=None, timeout=None):
        sent["url"] = url
        sent["json"] = json
        return FakeResponse()

    monkeypatch.setattr(ollama_client.requests, "post", fake_post)
    text, meta = OllamaClient(model="llama3").generate(
        [Message(role="system", content="Go.")],
        ModelParams(temperature=0.5, max_tokens=64),
    )
    assert text == "The fog parts."
    assert meta == {"engine": "ollama", "model": "llama3"}
    assert sent["url"] == "http://localhost:11434/api/chat"
    assert sent["json"]["messages"] == [{"role": "system", "content": "Go."}]
    assert sent["json"]["options"] == {"temperature": 0.5, "num_predict": 64}


def test_quiet_generator_passes_token_budget():
    resp = QuietGenerator(EchoDevClient()).generate("Hello", max_tokens=33)
    assert resp.text == "[ECHO RESPONSE]\nHello"
    assert resp.meta["max_tokens"] == 33


def test_messages_carry_only_role_and_content():
    assert [f.name for f in fields(Message)] == ["role", "content"]
    chat = [{"name": "Alex", "is_user": True, "mes": "hi"}]
    messages = QuietGenerator(EchoDevClient(), history_limit=5).build_messages("Go.", chat)
    assert [vars(m) for m in messages][-2:] == [
        {"role": "user", "content": "Alex: hi"},
        {"role": "user", "content": "Go."},
    ]


def test_clients_are_bound_to_one_model():
    from scenecut.generate.clients.openai_client import OpenAIClient

    assert not hasattr(OllamaClient, "set_model")
    assert not hasattr(OpenAIClient, "set_model")
