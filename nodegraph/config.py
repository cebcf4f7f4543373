# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_FILE_PATH = "data/nodes.json"
DEFAULT_BRANCH = "main"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_COMMIT_MESSAGE = "Update nodes.json via editor"
DEFAULT_TIMEOUT = 10.0


@dataclass
class PublishSettings:
    """Where and how the snapshot gets published."""
    token: Optional[str] = None
    repo: Optional[str] = None
    file_path: str = DEFAULT_FILE_PATH
    branch: str = DEFAULT_BRANCH
    api_url: str = DEFAULT_API_URL
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    timeout: float = DEFAULT_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.token) and bool(self.repo)

    def require(self) -> None:
        if not self.token:
            raise ConfigurationError("GitHub token is not configured (set NODEGRAPH_GITHUB_TOKEN)")
        if not self.repo:
            raise ConfigurationError("GitHub repository is not configured (set NODEGRAPH_GITHUB_REPO)")


def _env(key: str) -> Optional[str]:
    value = os.getenv(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_settings(env_file: Optional[str] = None) -> PublishSettings:
    """
    Build PublishSettings from the environment.

    Values from `env_file` (or a .env found from the working directory) are
    loaded first; variables already set in the process environment win.
    """
    load_dotenv(env_file)

    timeout = _env("NODEGRAPH_TIMEOUT")
    try:
        timeout_value = float(timeout) if timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise ConfigurationError(f"NODEGRAPH_TIMEOUT must be a number, got {timeout!r}")

    return PublishSettings(
        token=_env("NODEGRAPH_GITHUB_TOKEN") or _env("GITHUB_TOKEN"),
        repo=_env("NODEGRAPH_GITHUB_REPO"),
        file_path=_env("NODEGRAPH_FILE_PATH") or DEFAULT_FILE_PATH,
        branch=_env("NODEGRAPH_BRANCH") or DEFAULT_BRANCH,
        api_url=(_env("NODEGRAPH_API_URL") or DEFAULT_API_URL).rstrip("/"),
        timeout=timeout_value,
    )
