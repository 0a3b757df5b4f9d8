# ===============================================
# tests/test_local_host.py
# File-backed host: settings blob, chat, templating, images
# ===============================================

import asyncio
import json

import pytest
import yaml

from scenecut.generate import EchoDevClient, QuietGenerator
from scenecut.host import LocalHost
from scenecut.host import images
from scenecut.transition import CONFIG_KEY, ConfigResolver, TransitionExecutor, TransitionRequest

CHARACTERS = [{"name": "Seraphina"}, {"name": "Captain Vex"}]


def make_host(tmp_path, **kwargs):
    kwargs.setdefault("characters", CHARACTERS)
    kwargs.setdefault("settings_delay", 0)
    return LocalHost(data_dir=str(tmp_path), **kwargs)


def test_settings_round_trip_through_yaml(tmp_path):
    host = make_host(tmp_path)
    assert ConfigResolver(host).initialize() is True
    stored = yaml.safe_load((tmp_path / "settings.yaml").read_text(encoding="utf-8"))
    assert stored[CONFIG_KEY]["auto_trigger_background"] is False

    ConfigResolver(host).update(auto_trigger_background=True)
    reloaded = make_host(tmp_path)
    assert ConfigResolver(reloaded).resolve().auto_trigger_background is True


def test_debounced_save_waits_for_flush(tmp_path):
    host = make_host(tmp_path, settings_delay=60)
    host.extension_settings["x"] = 1
    host.save_settings_debounced()
    host.save_settings_debounced()
    assert not (tmp_path / "settings.yaml").exists()

    host.close()
    assert yaml.safe_load((tmp_path / "settings.yaml").read_text(encoding="utf-8")) == {"x": 1}
    assert host._save_timer is None


def test_substitute_params_is_case_insensitive(tmp_path):
    host = make_host(tmp_path, user_name="Alex", character_id=1)
    assert host.substitute_params("{{char}} greets {{ USER }}.") == "Captain Vex greets Alex."


def test_characters_load_from_yaml(tmp_path):
    (tmp_path / "characters.yaml").write_text("- name: Mira\n", encoding="utf-8")
    host = LocalHost(data_dir=str(tmp_path), character_id=0)
    assert host.active_character_name() == "Mira"
    host.character_id = 5
    assert host.active_character_name() is None


def test_no_generator_means_no_capability(tmp_path):
    assert make_host(tmp_path).generate_quiet_prompt is None


def test_quiet_generation_with_echo_client(tmp_path):
    host = make_host(tmp_path, quiet_generator=QuietGenerator(EchoDevClient()))
    text = asyncio.run(host.generate_quiet_prompt(quiet_prompt="Go north.", quiet_to_loud=True, max_tokens=50))
    assert text == "[ECHO RESPONSE]\nGo north."


def test_quiet_generator_builds_history_and_directive():
    gen = QuietGenerator(EchoDevClient(), history_limit=2)
    chat = [
        {"name": "Alex", "is_user": True, "mes": "first"},
        {"name": "Seraphina", "is_user": False, "mes": "second"},
        {"name": "Alex", "is_user": True, "mes": "third"},
    ]
    messages = gen.build_messages("DIRECTIVE", chat, quiet_to_loud=True)
    assert [(m.role, m.content) for m in messages] == [
        ("assistant", "Seraphina: second"),
        ("user", "Alex: third"),
        ("system", "DIRECTIVE"),
    ]
    assert gen.build_messages("DIRECTIVE", [], quiet_to_loud=False)[-1].role == "user"


def test_transition_persists_chat(tmp_path):
    host = make_host(tmp_path, quiet_generator=QuietGenerator(EchoDevClient()))
    outcome = asyncio.run(TransitionExecutor(host).execute(TransitionRequest(note="Cut to the harbor.")))
    assert outcome == "Scene line inserted."
    saved = json.loads((tmp_path / "chat.json").read_text(encoding="utf-8"))
    assert len(saved) == 1
    assert saved[0]["name"] == "Seraphina"
    assert saved[0]["mes"].startswith("[ECHO RESPONSE]")
    assert "Cut to the harbor." in saved[0]["mes"]
    assert "{{char}}" not in saved[0]["mes"]

    assert make_host(tmp_path).chat == saved


@pytest.mark.parametrize("source, expected", [("comfy", True), (" Auto ", True), ("mystery", False), (None, False), ("", False)])
def test_image_backend_availability(tmp_path, source, expected):
    assert make_host(tmp_path, image_source=source).image_backend_available() is expected


def test_trigger_without_url_raises(tmp_path):
    host = make_host(tmp_path, image_source="comfy")
    with pytest.raises(RuntimeError):
        asyncio.run(host.trigger_background_regeneration())


def test_trigger_posts_to_configured_url(tmp_path, monkeypatch):
    calls = []

    class FakeResponse:
        status_code = 200

        def raise_for_status(self):
            pass

        def json(self):
            return {"ok": True}

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse()

    monkeypatch.setattr(images.requests, "post", fake_post)
    host = make_host(tmp_path, image_source="comfy", image_trigger_url="http://sd.local/bg", image_trigger_timeout=5)
    asyncio.run(host.trigger_background_regeneration())
    assert calls == [("http://sd.local/bg", {"mode": "background", "source": "comfy"}, 5)]


def test_overlapping_transitions_all_persist(tmp_path):
    host = make_host(tmp_path, quiet_generator=QuietGenerator(EchoDevClient()))
    executor = TransitionExecutor(host)

    async def overlap():
        return await asyncio.gather(*(executor.execute(TransitionRequest(note=f"Beat {i}.")) for i in range(40)))

    outcomes = asyncio.run(overlap())
    assert outcomes == ["Scene line inserted."] * 40
    saved = json.loads((tmp_path / "chat.json").read_text(encoding="utf-8"))
    assert len(saved) == 40
    assert saved == host.chat
    assert not (tmp_path / "chat.json.tmp").exists()
