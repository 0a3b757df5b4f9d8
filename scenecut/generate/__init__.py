# Generator package

# Makes generate/ importable and exposes key interfaces.

from .quiet import QuietGenerator, select_model_client
from .types import Message, ModelParams, QuietResponse
from .clients.echo_dev_client import EchoDevClient

__all__ = ["QuietGenerator", "select_model_client", "Message", "ModelParams", "QuietResponse", "EchoDevClient"]
