"""
Live preview slots for generated apps.

Each owner (one open create page) holds at most one preview document. Making a
new preview for an owner releases the old one first, and every preview is
released when the application shuts down.

Owners that never release (a closed tab whose beacon was lost) are cleaned up
two ways: slots older than ``max_age_seconds`` are swept, and once
``max_slots`` are live the oldest slot is evicted to make room.
"""
import asyncio
import logging
import secrets
import time
from typing import Callable, Dict, Optional

from config.settings import get_settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 3600
DEFAULT_MAX_SLOTS = 256


class PreviewManager:
    def __init__(
        self,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        max_slots: int = DEFAULT_MAX_SLOTS,
        clock: Callable[[], float] = time.time,
    ):
        if max_slots < 1:
            raise ValueError("max_slots must be at least 1")
        self.max_age_seconds = max_age_seconds
        self.max_slots = max_slots
        self._clock = clock
        self._documents: Dict[str, str] = {}  # {token: html}
        self._owners: Dict[str, Dict] = {}  # {owner: {'token': ..., 'created_at': ...}}

    @property
    def active_count(self) -> int:
        return len(self._documents)

    def acquire(self, owner: str, html: str) -> str:
        """Register ``html`` as the owner's preview and return its token."""
        self.release(owner)
        self.sweep()
        while len(self._owners) >= self.max_slots:
            self._evict_oldest()

        token = secrets.token_urlsafe(16)
        self._documents[token] = html
        self._owners[owner] = {"token": token, "created_at": self._clock()}
        logger.debug(f"Preview {token} acquired for {owner} ({self.active_count} active)")
        return token

    def get(self, token: str) -> Optional[str]:
        return self._documents.get(token)

    def release(self, owner: str) -> bool:
        details = self._owners.pop(owner, None)
        if not details:
            return False
        self._documents.pop(details["token"], None)
        logger.debug(f"Preview {details['token']} released for {owner}")
        return True

    def release_all(self) -> int:
        released = 0
        for owner in list(self._owners):
            if self.release(owner):
                released += 1
        if released:
            logger.info(f"Released {released} preview(s)")
        return released

    def sweep(self) -> int:
        """Release every slot older than ``max_age_seconds``."""
        now = self._clock()
        expired = [
            owner for owner, details in self._owners.items()
            if now - details["created_at"] > self.max_age_seconds
        ]
        for owner in expired:
            self.release(owner)
        if expired:
            logger.info(f"Swept {len(expired)} expired preview(s) ({self.active_count} active)")
        return len(expired)

    def _evict_oldest(self) -> None:
        oldest_owner = min(self._owners, key=lambda owner: self._owners[owner]["created_at"])
        logger.warning(f"Preview limit of {self.max_slots} reached, evicting slot for {oldest_owner}")
        self.release(oldest_owner)


async def reaper_task(manager: PreviewManager, cleanup_interval_seconds: float = 60):
    """Periodically sweep expired previews until cancelled."""
    while True:
        await asyncio.sleep(cleanup_interval_seconds)
        manager.sweep()


# Global preview manager instance - created on first use
preview_manager = None


def get_preview_manager() -> PreviewManager:
    """Get or create the preview manager using the configured limits"""
    global preview_manager
    if preview_manager is None:
        settings = get_settings()
        preview_manager = PreviewManager(
            max_age_seconds=settings.preview_max_age_seconds,
            max_slots=settings.preview_max_slots,
        )
    return preview_manager
