from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from threading import Lock
from typing import Protocol

import redis

from app.core.config import settings
from app.services.application_form import CHECKBOX_TYPE, FILE_TYPE, ApplicationForm
from app.services.clock import Clock

_LOG = logging.getLogger("app.drafts")

NON_DRAFTABLE_TYPES = {FILE_TYPE, CHECKBOX_TYPE}


class DraftStore(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryDraftStore:
    def __init__(self):
        self._data: dict[str, str] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = str(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data.keys())


class JsonFileDraftStore:
    """Flat ``{key: value}`` JSON document, rewritten on every change."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _LOG.warning("unreadable draft file %s; starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items() if value is not None}

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = str(value)
            self._save(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                data.pop(key)
                self._save(data)


class RedisDraftStore:
    def __init__(self, client: redis.Redis):
        self.client = client

    def get(self, key: str) -> str | None:
        value = self.client.get(key)
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def set(self, key: str, value: str) -> None:
        self.client.set(key, str(value))

    def delete(self, key: str) -> None:
        self.client.delete(key)


def build_draft_store() -> DraftStore:
    redis_url = str(settings.REDIS_URL or "").strip()
    if redis_url:
        try:
            client = redis.Redis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=0.4,
                socket_connect_timeout=0.4,
            )
            client.ping()
            return RedisDraftStore(client)
        except Exception:
            _LOG.warning("Redis draft store unavailable; fallback to file store")
    draft_path = str(settings.DRAFT_FILE_PATH or "").strip()
    if draft_path:
        return JsonFileDraftStore(draft_path)
    return InMemoryDraftStore()


class FormAutoSave:
    """Debounced per-field mirror of form values into a ``DraftStore``.

    Each field has its own quiet period: a burst of inputs on one field ends in
    a single write of the last value once ``debounce_ms`` pass without input.
    """

    def __init__(
        self,
        store: DraftStore,
        *,
        clock: Clock,
        prefix: str | None = None,
        debounce_ms: int | None = None,
    ):
        self.store = store
        self.clock = clock
        self.prefix = settings.DRAFT_KEY_PREFIX if prefix is None else str(prefix)
        self.debounce_ms = settings.AUTOSAVE_DEBOUNCE_MS if debounce_ms is None else int(debounce_ms)
        self._pending: dict[str, tuple[str, float]] = {}

    def key(self, field_name: str) -> str:
        return f"{self.prefix}{field_name}"

    def save(self, field_name: str, value: str, field_type: str = "text") -> None:
        if field_type in NON_DRAFTABLE_TYPES:
            return
        self._pending[field_name] = (str(value), self.clock.now_ms() + self.debounce_ms)

    def pending(self) -> list[str]:
        return list(self._pending.keys())

    def flush_due(self) -> int:
        now = self.clock.now_ms()
        due = [name for name, (_, due_at) in self._pending.items() if due_at <= now]
        for name in due:
            value, _ = self._pending.pop(name)
            self.store.set(self.key(name), value)
        return len(due)

    def flush(self) -> int:
        names = list(self._pending.keys())
        for name in names:
            value, _ = self._pending.pop(name)
            self.store.set(self.key(name), value)
        return len(names)

    def load(self, field_name: str) -> str | None:
        return self.store.get(self.key(field_name))

    def restore(self, form: ApplicationForm) -> list[str]:
        restored: list[str] = []
        for item in form.fields.values():
            if not item.draftable:
                continue
            saved = self.load(item.name)
            if saved:
                item.value = saved
                restored.append(item.name)
        return restored

    def clear_all(self, field_names: Iterable[str]) -> None:
        self._pending.clear()
        for name in field_names:
            self.store.delete(self.key(name))
        _LOG.info("cleared form drafts prefix=%s", self.prefix)
