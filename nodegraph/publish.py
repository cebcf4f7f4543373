# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
import base64
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

import requests

from .config import PublishSettings
from .errors import ConfigurationError, NodeGraphError, RemoteError
from .remote import GitHubContentsClient
from .store import dumps_snapshot

logger = logging.getLogger(__name__)

REASON_OK = "ok"
REASON_NOT_CONFIGURED = "not_configured"
REASON_BUSY = "busy"
REASON_CONFLICT = "conflict"
REASON_ERROR = "error"

CONFLICT_STATUSES = (409, 422)


@dataclass
class PublishResult:
    ok: bool
    reason: str = REASON_OK
    message: str = ""
    status: Optional[int] = None
    attempts: int = 0


def is_sha_mismatch(message: Optional[str] = "") -> bool:
    """
    Heuristic for "your sha is out of date" errors.

    The contents API has no stable error code for this, so the text is
    matched loosely and may under- or over-match.
    """
    text = str(message or "").lower()
    return (
        "does not match" in text
        or ("sha" in text and "match" in text)
        or "stale" in text
    )


def is_version_conflict(error: RemoteError) -> bool:
    return error.status in CONFLICT_STATUSES or is_sha_mismatch(error.message)


def encode_snapshot(snapshot: Union[str, Dict[str, Any]]) -> str:
    """Canonical snapshot text -> UTF-8 -> base64 (ASCII str)."""
    text = snapshot if isinstance(snapshot, str) else dumps_snapshot(snapshot)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class PublishPipeline:
    """
    Pushes snapshots to the configured repository file with sha
    compare-and-swap, retrying when the sha went stale between read and write.

    At most one publish runs at a time; overlapping calls are turned away.
    """

    def __init__(
        self,
        settings: PublishSettings,
        client: Optional[GitHubContentsClient] = None,
        max_attempts: int = 3,
        backoff: float = 0.4,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.settings = settings
        self._client = client
        self.max_attempts = max_attempts
        self.backoff = backoff
        self._sleep = sleep
        self._lock = threading.Lock()

    @property
    def client(self) -> GitHubContentsClient:
        if self._client is None:
            self._client = GitHubContentsClient(self.settings)
        return self._client

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def publish(self, snapshot: Union[str, Dict[str, Any]]) -> PublishResult:
        try:
            self.settings.require()
        except ConfigurationError as e:
            return PublishResult(ok=False, reason=REASON_NOT_CONFIGURED, message=str(e))

        if not self._lock.acquire(blocking=False):
            logger.info("Publish already in progress; ignoring request")
            return PublishResult(ok=False, reason=REASON_BUSY, message="Publish already in progress")

        try:
            content = encode_snapshot(snapshot)
            logger.info("Publishing %s to %s@%s", self.settings.file_path, self.settings.repo, self.settings.branch)
            result = self._publish_with_retries(content)
        except Exception as e:
            logger.exception("Unexpected publish failure")
            result = PublishResult(ok=False, reason=REASON_ERROR, message=str(e) or type(e).__name__)
        finally:
            self._lock.release()

        if result.ok:
            logger.info("Published after %d attempt(s)", result.attempts)
        else:
            logger.error("Publish failed: %s", result.message)
        return result

    def _publish_with_retries(self, content: str) -> PublishResult:
        last = PublishResult(ok=False, reason=REASON_ERROR, message="Unknown publish error")

        for attempt in range(1, self.max_attempts + 1):
            try:
                sha = self.client.get_sha()
            except (NodeGraphError, requests.RequestException) as e:
                return self._failure(e, attempt, prefix="Failed to get file info")

            try:
                self.client.put_content(content, sha)
                return PublishResult(ok=True, reason=REASON_OK, attempts=attempt)
            except RemoteError as e:
                last = self._failure(e, attempt)
                if not is_version_conflict(e):
                    return last
                last.reason = REASON_CONFLICT
            except (NodeGraphError, requests.RequestException) as e:
                return self._failure(e, attempt)

            if attempt < self.max_attempts:
                delay = self.backoff * attempt
                logger.warning("Version conflict on attempt %d (%s); retrying in %.1fs", attempt, last.message, delay)
                self._sleep(delay)

        return last

    @staticmethod
    def _failure(error: Exception, attempt: int, prefix: Optional[str] = None) -> PublishResult:
        message = str(error) or type(error).__name__
        if prefix:
            message = f"{prefix}: {message}"
        return PublishResult(
            ok=False,
            reason=REASON_ERROR,
            message=message,
            status=getattr(error, "status", None),
            attempts=attempt,
        )
