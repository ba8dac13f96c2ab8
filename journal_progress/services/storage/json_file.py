"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document is the backend for single-device
installs because:
1. The user can open and back up their progress with any editor
2. No database setup required
3. The camelCase layout matches what the web client keeps locally

TRADEOFFS:
- Whole-document rewrite on every save (fine for one user's progress)
- No cross-process locking; the tracker serialises writes per user
  inside one process

Writes go to a temporary file that replaces the document atomically,
so a crash mid-write never leaves a truncated file behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union
from uuid import UUID

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from journal_progress.models.audit import AuditEvent
from journal_progress.models.progress import EarnedBadge, JournalType, StreakState
from journal_progress.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    ProgressStorageInterface,
    StorageError,
    StorageUnavailableError,
    check_badge_update,
)


DOCUMENT_VERSION = 1

_file_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
    reraise=True,
)


def _empty_document() -> dict[str, Any]:
    return {"version": DOCUMENT_VERSION, "users": {}}


class JsonFileProgressStorage(ProgressStorageInterface):
    """
    JSON document implementation of progress storage.

    Layout:
        {"version": 1,
         "users": {"<user_id>": {"streaks": {"mood": {...}},
                                 "badges": [{...}, ...]}}}
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @_file_retry
    def _read_document(self) -> dict[str, Any]:
        if not self._path.exists():
            return _empty_document()
        with self._path.open("r", encoding="utf-8") as f:
            raw = f.read()
        if not raw.strip():
            return _empty_document()
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Progress file {self._path} is corrupt: {e}")
        document.setdefault("users", {})
        return document

    @_file_retry
    def _write_document(self, document: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", dir=str(self._path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _load(self) -> dict[str, Any]:
        try:
            return self._read_document()
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {self._path}: {e}")

    def _save(self, document: dict[str, Any]) -> None:
        try:
            self._write_document(document)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write {self._path}: {e}")

    @staticmethod
    def _user_section(document: dict[str, Any], user_id: str) -> dict[str, Any]:
        section = document["users"].setdefault(user_id, {})
        section.setdefault("streaks", {})
        section.setdefault("badges", [])
        return section

    async def get_streak_state(
        self,
        user_id: str,
        journal_type: JournalType,
    ) -> Optional[StreakState]:
        document = self._load()
        user = document["users"].get(user_id, {})
        raw = user.get("streaks", {}).get(JournalType(journal_type).value)
        return StreakState.model_validate(raw) if raw else None

    async def save_streak_state(self, user_id: str, state: StreakState) -> bool:
        document = self._load()
        section = self._user_section(document, user_id)
        section["streaks"][state.journal_type.value] = state.model_dump(
            mode="json", by_alias=True
        )
        self._save(document)
        return True

    async def list_streak_states(self, user_id: str) -> list[StreakState]:
        document = self._load()
        streaks = document["users"].get(user_id, {}).get("streaks", {})
        return [
            StreakState.model_validate(streaks[t.value])
            for t in JournalType
            if t.value in streaks
        ]

    async def get_badges(self, user_id: str) -> list[EarnedBadge]:
        document = self._load()
        raw_badges = document["users"].get(user_id, {}).get("badges", [])
        return [EarnedBadge.model_validate(raw) for raw in raw_badges]

    async def append_badges(self, user_id: str, badges: list[EarnedBadge]) -> bool:
        document = self._load()
        section = self._user_section(document, user_id)
        stored_ids = {raw.get("id") for raw in section["badges"]}

        incoming_ids = [badge.id for badge in badges]
        duplicates = [
            badge_id for badge_id in incoming_ids
            if badge_id in stored_ids or incoming_ids.count(badge_id) > 1
        ]
        if duplicates:
            raise DuplicateError(f"Badges already earned: {sorted(set(duplicates))}")

        section["badges"].extend(
            badge.model_dump(mode="json", by_alias=True) for badge in badges
        )
        self._save(document)
        return True

    async def update_badge(self, user_id: str, badge: EarnedBadge) -> bool:
        document = self._load()
        section = self._user_section(document, user_id)

        for idx, raw in enumerate(section["badges"]):
            if raw.get("id") == badge.id:
                check_badge_update(EarnedBadge.model_validate(raw), badge)
                section["badges"][idx] = badge.model_dump(mode="json", by_alias=True)
                self._save(document)
                return True

        raise NotFoundError(f"Badge not found: {badge.id}")


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Append-only audit log, one JSON object per line.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @_file_retry
    def _append_line(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    @_file_retry
    def _read_events(self) -> list[AuditEvent]:
        if not self._path.exists():
            return []
        events = []
        with self._path.open("r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    events.append(AuditEvent.from_record(line))
        return events

    async def append_event(self, event: AuditEvent) -> bool:
        try:
            self._append_line(event.to_record())
            return True
        except OSError as e:
            raise StorageUnavailableError(f"Cannot append to {self._path}: {e}")

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        try:
            events = self._read_events()
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {self._path}: {e}")
        return [e for e in events if e.correlation_id == correlation_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        try:
            events = self._read_events()
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {self._path}: {e}")
        return list(reversed(events))[:limit]
