# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import base64
import json
import time
from typing import Any, Dict, Optional

import requests

from .config import PublishSettings
from .errors import AuthError, ProtocolError, RemoteError


def _error_message(resp: requests.Response) -> str:
    # Try to parse JSON error message, fallback to text
    try:
        err = resp.json()
        msg = err.get("message") or err.get("error") if isinstance(err, dict) else None
    except ValueError:
        msg = None
    if not msg:
        msg = (resp.text or "").strip() or f"HTTP {resp.status_code}"
    return str(msg)


class GitHubContentsClient:
    """Read-sha / write-with-sha access to one file through the GitHub contents API."""

    def __init__(self, settings: PublishSettings):
        self.settings = settings
        self.url = f"{settings.api_url.rstrip('/')}/repos/{settings.repo}/contents/{settings.file_path.lstrip('/')}"
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/vnd.github.v3+json"})
        if settings.token:
            self.session.headers.update({"Authorization": f"Bearer {settings.token}"})

    def _check(self, resp: requests.Response) -> None:
        if resp.ok:
            return
        if resp.status_code in (401, 403):
            raise AuthError(resp.status_code, f"Authentication failed ({resp.status_code}): {_error_message(resp)}")
        raise RemoteError(resp.status_code, _error_message(resp))

    def _json(self, resp: requests.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            raise ProtocolError("Server returned non-JSON response")
        if not isinstance(data, dict):
            raise ProtocolError("Server returned an unexpected JSON shape")
        return data

    def _get_file(self) -> requests.Response:
        # The contents endpoint can serve a stale sha right after a write,
        # so every read bypasses caches and varies the query string.
        params = {"ref": self.settings.branch, "_": int(time.time() * 1000)}
        headers = {"Cache-Control": "no-cache", "Pragma": "no-cache"}
        return self.session.get(self.url, params=params, headers=headers, timeout=self.settings.timeout)

    def get_sha(self) -> Optional[str]:
        """Current sha of the file, or None if it does not exist yet."""
        resp = self._get_file()
        if resp.status_code == 404:
            return None
        self._check(resp)
        data = self._json(resp)
        sha = data.get("sha")
        if not isinstance(sha, str):
            raise ProtocolError("missing 'sha' in contents response")
        return sha

    def put_content(self, content_b64: str, sha: Optional[str], message: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "message": message or self.settings.commit_message,
            "content": content_b64,
            "branch": self.settings.branch,
        }
        if sha is not None:
            payload["sha"] = sha
        resp = self.session.put(self.url, json=payload, timeout=self.settings.timeout)
        self._check(resp)
        # the write already succeeded; an unreadable body only loses the echo
        try:
            return self._json(resp)
        except ProtocolError:
            return {}

    def fetch_document(self) -> Dict[str, Any]:
        """Download and decode the published JSON document."""
        resp = self._get_file()
        self._check(resp)
        data = self._json(resp)
        encoded = data.get("content")
        if not isinstance(encoded, str):
            raise ProtocolError("missing 'content' in contents response")
        try:
            text = base64.b64decode(encoded).decode("utf-8")
            return json.loads(text)
        except ValueError as e:
            raise ProtocolError(f"remote file is not valid JSON: {e}")
