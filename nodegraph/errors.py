# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
from typing import Optional


class NodeGraphError(Exception):
    """Base class for all nodegraph exceptions."""
    pass


class ConfigurationError(NodeGraphError):
    """Raised when publishing is attempted without a token or repository."""
    pass


class ProtocolError(NodeGraphError):
    """Raised for protocol-level problems (invalid server response, etc.)."""
    pass


class RemoteError(NodeGraphError):
    """Raised when the contents API answers with a non-2xx status."""

    def __init__(self, status: Optional[int], message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class AuthError(RemoteError):
    """Raised when authentication fails (401/403)."""
    pass
