# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from .models import Node, NodeContent
from .store import GraphStore, VIEWER_FALLBACK, dumps_snapshot
from .coords import ViewBox, to_canvas, to_percent
from .config import PublishSettings, load_settings
from .remote import GitHubContentsClient
from .publish import PublishPipeline, PublishResult, is_sha_mismatch
from .errors import NodeGraphError, ConfigurationError, RemoteError, AuthError, ProtocolError

__all__ = [
    "Node",
    "NodeContent",
    "GraphStore",
    "VIEWER_FALLBACK",
    "dumps_snapshot",
    "ViewBox",
    "to_canvas",
    "to_percent",
    "PublishSettings",
    "load_settings",
    "GitHubContentsClient",
    "PublishPipeline",
    "PublishResult",
    "is_sha_mismatch",
    "NodeGraphError",
    "ConfigurationError",
    "RemoteError",
    "AuthError",
    "ProtocolError",
]
