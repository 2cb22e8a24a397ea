from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass

from app.core.config import settings
from app.services.clock import Clock

_LOG = logging.getLogger("app.notifications")

SEVERITY_INFO = "info"
SEVERITY_SUCCESS = "success"
SEVERITY_ERROR = "error"
SEVERITIES = {SEVERITY_INFO, SEVERITY_SUCCESS, SEVERITY_ERROR}

PHASE_ENTERING = "entering"
PHASE_SHOWN = "shown"
PHASE_LEAVING = "leaving"


@dataclass
class Notification:
    id: int
    message: str
    severity: str
    shown_at: float
    auto_dismiss_at: float
    dismissed_at: float | None = None

    def leaving_since(self) -> float:
        if self.dismissed_at is None:
            return self.auto_dismiss_at
        return min(self.dismissed_at, self.auto_dismiss_at)


class NotificationPresenter:
    """Single-slot toast stack: a new message replaces whatever is on screen."""

    def __init__(
        self,
        clock: Clock,
        *,
        ttl_ms: int | None = None,
        exit_ms: int | None = None,
        enter_ms: int | None = None,
    ):
        self.clock = clock
        self.ttl_ms = settings.NOTIFICATION_TTL_MS if ttl_ms is None else int(ttl_ms)
        self.exit_ms = settings.NOTIFICATION_EXIT_MS if exit_ms is None else int(exit_ms)
        self.enter_ms = settings.NOTIFICATION_ENTER_MS if enter_ms is None else int(enter_ms)
        self._items: list[Notification] = []
        self._ids = itertools.count(1)

    def notify(self, message: str, severity: str = SEVERITY_INFO) -> Notification:
        level = str(severity or "").strip().lower()
        if level not in SEVERITIES:
            raise ValueError(f"unknown notification severity: {severity}")
        # Prior notifications are removed outright, without the exit animation.
        self._items.clear()
        now = self.clock.now_ms()
        item = Notification(
            id=next(self._ids),
            message=str(message),
            severity=level,
            shown_at=now,
            auto_dismiss_at=now + self.ttl_ms,
        )
        self._items.append(item)
        _LOG.info("notify severity=%s message=%s", level, item.message)
        return item

    def dismiss(self, notification_id: int) -> bool:
        now = self.clock.now_ms()
        for item in self._visible(now):
            if item.id == notification_id:
                if item.dismissed_at is None:
                    item.dismissed_at = now
                return True
        return False

    def dismiss_all(self) -> None:
        now = self.clock.now_ms()
        for item in self._visible(now):
            if item.dismissed_at is None:
                item.dismissed_at = now

    def phase(self, item: Notification) -> str:
        now = self.clock.now_ms()
        if now >= item.leaving_since():
            return PHASE_LEAVING
        if now < item.shown_at + self.enter_ms:
            return PHASE_ENTERING
        return PHASE_SHOWN

    def visible(self) -> list[Notification]:
        return list(self._visible(self.clock.now_ms()))

    def latest(self) -> Notification | None:
        items = self.visible()
        return items[-1] if items else None

    def _visible(self, now: float) -> list[Notification]:
        self._items = [item for item in self._items if now < item.leaving_since() + self.exit_ms]
        return self._items
