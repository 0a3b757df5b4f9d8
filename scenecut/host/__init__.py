# Host environment: the HostContext interface plus a file-backed reference host.

from .context import EventSource, EventTypes, HostContext
from .local import LocalHost

__all__ = ["EventSource", "EventTypes", "HostContext", "LocalHost"]
