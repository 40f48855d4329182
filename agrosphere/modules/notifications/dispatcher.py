"""
Notification dispatch.

The connection layer receives a ``Notifier`` and treats it as fire-and-forget:
``safe_notify`` logs and swallows any dispatch failure so the caller's
outcome never depends on the notifier being available.
"""
from __future__ import annotations

from typing import Protocol

import httpx
from loguru import logger
from sqlalchemy.orm import sessionmaker

from agrosphere.core.config import (
    NOTIFIER_BACKEND,
    NOTIFY_TIMEOUT_SECONDS,
    NOTIFY_WEBHOOK_URL,
)
from agrosphere.core.db import SessionLocal
from agrosphere.modules.notifications.models import Notification


class Notifier(Protocol):
    def notify(self, user_id: int, kind: str, text: str) -> None:
        ...


class NullNotifier:
    def notify(self, user_id: int, kind: str, text: str) -> None:
        logger.info(f"Notification dropped | user={user_id} kind={kind}")


class DatabaseNotifier:
    """Stores in-app notifications using its own session."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self._session_factory = session_factory

    def notify(self, user_id: int, kind: str, text: str) -> None:
        db = self._session_factory()
        try:
            db.add(Notification(user_id=user_id, kind=kind, message=text))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        logger.info(f"Notification stored | user={user_id} kind={kind}")


class WebhookNotifier:
    """POSTs notifications to an external dispatcher."""

    def __init__(self, url: str, timeout: float = NOTIFY_TIMEOUT_SECONDS):
        if not url:
            raise RuntimeError("NOTIFY_WEBHOOK_URL is not set")
        self.url = url
        self.timeout = timeout

    def notify(self, user_id: int, kind: str, text: str) -> None:
        with httpx.Client(timeout=self.timeout) as client:
            resp = client.post(
                self.url,
                json={"user_id": user_id, "kind": kind, "message": text},
            )
            resp.raise_for_status()

        logger.info(f"Notification posted | user={user_id} kind={kind} status={resp.status_code}")


def safe_notify(notifier: Notifier | None, user_id: int, kind: str, text: str) -> bool:
    if notifier is None:
        return False

    try:
        notifier.notify(user_id, kind, text)
        return True
    except Exception as e:
        logger.warning(f"Notification failed (ignored) | user={user_id} kind={kind} error={e!r}")
        return False


def build_notifier(backend: str = NOTIFIER_BACKEND) -> Notifier:
    if backend == "database":
        return DatabaseNotifier()
    if backend == "webhook":
        return WebhookNotifier(NOTIFY_WEBHOOK_URL)
    if backend == "none":
        return NullNotifier()
    raise RuntimeError(f"Invalid NOTIFIER_BACKEND: {backend}")


_NOTIFIER: Notifier | None = None


# --- FastAPI dependency ---
def get_notifier() -> Notifier:
    global _NOTIFIER
    if _NOTIFIER is None:
        _NOTIFIER = build_notifier()
    return _NOTIFIER
