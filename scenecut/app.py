# ============================================================
# Scene Transition FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - /scene command (aliases /scenecut, /sc) and raw /command text
#   - Extension settings (instructions, auto background)
#   - Support for Ollama, OpenAI, or Echo clients
# ============================================================

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Dict, List, Optional, Union
import logging

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

# --- Local imports ---
from scenecut.settings import settings
from scenecut.generate import select_model_client
from scenecut.host import EventTypes, LocalHost
from scenecut.transition import (
    ConfigResolver,
    RequestParseError,
    TransitionExecutor,
    TransitionRequest,
    run_command,
)
from scenecut.transition.command import COMMAND_NAME, COMMAND_ALIASES, HELP_TEXT, is_scene_command, split_command

# ------------------------------------------------------------
# 🪵 Logging
# ------------------------------------------------------------
logger = logging.getLogger("scenecut")
if not logger.handlers:
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
    logger.addHandler(h)
logger.setLevel(settings.LOG_LEVEL.upper())

# ------------------------------------------------------------
# 🔧 Host + model client selection
# ------------------------------------------------------------
@lru_cache(maxsize=1)
def get_host() -> LocalHost:
    return LocalHost.from_settings(settings, model_client=select_model_client(settings))

def get_executor(host=Depends(get_host)) -> TransitionExecutor:
    return TransitionExecutor(host)

def get_config(host=Depends(get_host)) -> ConfigResolver:
    return ConfigResolver(host)

# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    host = app.dependency_overrides.get(get_host, get_host)()
    ConfigResolver(host).initialize()
    await host.event_source.emit(EventTypes.APP_READY)
    logger.info("%s ready (env=%s)", settings.APP_NAME, settings.ENV)
    yield
    close = getattr(host, "close", None)
    if close:
        close()

app = FastAPI(title="Scene Transition API", version="0.1", lifespan=lifespan)

# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class SceneCommand(BaseModel):
    note: Optional[str] = None
    style: Optional[str] = None
    max: Optional[Union[int, str]] = None
    background: Optional[Union[bool, str]] = None

class CommandText(BaseModel):
    text: str

class CommandResult(BaseModel):
    result: str

class SettingsPatch(BaseModel):
    scene_change_instructions: Optional[str] = None
    auto_trigger_background: Optional[bool] = None

class ChatPayload(BaseModel):
    character: Optional[str] = None
    messages: List[Dict[str, Any]]

# ------------------------------------------------------------
# 🎬 Scene transition routes
# ------------------------------------------------------------
async def scene(req: Optional[SceneCommand] = None, executor: TransitionExecutor = Depends(get_executor)):
    req = req or SceneCommand()
    named = {k: v for k, v in req.model_dump(exclude={"note"}).items() if v is not None}
    try:
        request = TransitionRequest.from_named(named, req.note)
    except RequestParseError as e:
        return CommandResult(result=f"Error: {e}")
    return CommandResult(result=await executor.execute(request))

for name in (COMMAND_NAME, *COMMAND_ALIASES):
    app.add_api_route(f"/{name}", scene, methods=["POST"], response_model=CommandResult)

@app.post("/command", response_model=CommandResult)
async def command(req: CommandText, executor: TransitionExecutor = Depends(get_executor)):
    try:
        name, _, _ = split_command(req.text)
    except RequestParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not is_scene_command(name):
        raise HTTPException(status_code=404, detail=f"Unknown command: /{name}")
    return CommandResult(result=await run_command(executor, req.text))

@app.get("/command")
def command_help():
    return {"name": COMMAND_NAME, "aliases": list(COMMAND_ALIASES), "help": HELP_TEXT}

# ------------------------------------------------------------
# ⚙️ Settings
# ------------------------------------------------------------
@app.get("/settings")
def get_settings(config: ConfigResolver = Depends(get_config)):
    return config.resolve().model_dump()

@app.put("/settings")
def update_settings(patch: SettingsPatch, config: ConfigResolver = Depends(get_config)):
    return config.update(**patch.model_dump(exclude_none=True)).model_dump()

@app.post("/settings/reset")
def reset_settings(config: ConfigResolver = Depends(get_config)):
    return config.reset_instructions().model_dump()

# ------------------------------------------------------------
# 💬 Conversation
# ------------------------------------------------------------
@app.get("/chat", response_model=ChatPayload)
def get_chat(host=Depends(get_host)):
    return ChatPayload(character=host.active_character_name(), messages=list(host.chat))

# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.APP_NAME,
    }

@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}

@app.get("/")
def hello():
    return {"message": "Scene Transition service running."}
