"""Keyed storage for journal entries and weekly summaries.

Entries are keyed by ``(user_id, date)`` and summaries by
``(user_id, week_start)``. Each store has an in-memory implementation and
a JSON-file implementation that loads on construction and rewrites the
whole file on every mutation.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from reflect.errors import DuplicateEntryError, EntryNotFoundError, InvalidRatingError
from reflect.journal.models import VALID_RATINGS, JournalEntry, WeeklySummary

logger = logging.getLogger(__name__)

ENTRY_STORE_FILENAME = ".reflect-entries.json"
SUMMARY_STORE_FILENAME = ".reflect-summaries.json"

EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"gratitude", "did_today", "proud_of", "tomorrow_plan", "rating"}
)


def entry_key(user_id: str, day: date) -> str:
    return f"{user_id}:{day.isoformat()}"


def summary_key(user_id: str, week_start: date) -> str:
    return f"{user_id}:{week_start.isoformat()}"


def _check_rating(rating: int) -> None:
    if rating not in VALID_RATINGS:
        raise InvalidRatingError(
            f"Rating must be in {{-2, -1, 0, 1, 2}}, got {rating!r}"
        )


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


class EntryStore(ABC):
    """Journal entry storage, at most one entry per (user, date)."""

    @abstractmethod
    def create(
        self,
        user_id: str,
        day: date,
        gratitude: str,
        did_today: str,
        proud_of: str,
        tomorrow_plan: str,
        rating: int,
    ) -> JournalEntry:
        """Create an entry. Raises DuplicateEntryError or InvalidRatingError."""

    @abstractmethod
    def edit(self, entry_id: str, **updates: object) -> JournalEntry:
        """Apply a partial update. Raises EntryNotFoundError or InvalidRatingError."""

    @abstractmethod
    def delete(self, entry_id: str) -> None:
        """Remove an entry. Raises EntryNotFoundError."""

    @abstractmethod
    def get(self, entry_id: str) -> JournalEntry | None:
        """Get an entry by ID."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[JournalEntry]:
        """All of a user's entries, sorted by date."""

    def list_range(self, user_id: str, start: date, end: date) -> list[JournalEntry]:
        """A user's entries with ``start <= date <= end``, sorted by date."""
        return [e for e in self.list_for_user(user_id) if start <= e.date <= end]


class MemoryEntryStore(EntryStore):
    """In-process entry store.

    Mutations build a new map, hand it to ``_save`` and swap it in only
    once the save returns. Reads copy the values under the lock.
    """

    def __init__(self) -> None:
        self._entries: dict[str, JournalEntry] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(
        self,
        user_id: str,
        day: date,
        gratitude: str,
        did_today: str,
        proud_of: str,
        tomorrow_plan: str,
        rating: int,
    ) -> JournalEntry:
        _check_rating(rating)
        key = entry_key(user_id, day)
        with self._lock:
            if key in self._entries:
                raise DuplicateEntryError(
                    f"Entry already exists for user {user_id} on {day.isoformat()}"
                )
            entry = JournalEntry(
                id=f"entry-{self._next_id}",
                user_id=user_id,
                date=day,
                gratitude=gratitude,
                did_today=did_today,
                proud_of=proud_of,
                tomorrow_plan=tomorrow_plan,
                rating=rating,
            )
            entries = {**self._entries, key: entry}
            self._commit(entries, self._next_id + 1)
        return entry

    def edit(self, entry_id: str, **updates: object) -> JournalEntry:
        unknown = set(updates) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit fields: {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in updates.items() if v is not None}
        if "rating" in changes:
            _check_rating(changes["rating"])  # type: ignore[arg-type]

        with self._lock:
            key = self._find_key(entry_id)
            updated = self._entries[key].model_copy(update=changes)
            self._commit({**self._entries, key: updated}, self._next_id)
        return updated

    def delete(self, entry_id: str) -> None:
        with self._lock:
            key = self._find_key(entry_id)
            entries = {k: e for k, e in self._entries.items() if k != key}
            self._commit(entries, self._next_id)

    def get(self, entry_id: str) -> JournalEntry | None:
        for entry in self._snapshot():
            if entry.id == entry_id:
                return entry
        return None

    def list_for_user(self, user_id: str) -> list[JournalEntry]:
        entries = [e for e in self._snapshot() if e.user_id == user_id]
        return sorted(entries, key=lambda e: e.date)

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def _snapshot(self) -> list[JournalEntry]:
        with self._lock:
            return list(self._entries.values())

    def _find_key(self, entry_id: str) -> str:
        # Caller holds self._lock.
        for key, entry in self._entries.items():
            if entry.id == entry_id:
                return key
        raise EntryNotFoundError(f"Entry {entry_id} not found")

    def _commit(self, entries: dict[str, JournalEntry], next_id: int) -> None:
        # Caller holds self._lock. If _save raises, nothing changes.
        self._save(entries, next_id)
        self._entries = entries
        self._next_id = next_id

    def _save(self, entries: dict[str, JournalEntry], next_id: int) -> None:
        """Persist the candidate state. No-op in memory."""


class _EntryFile(BaseModel):
    next_id: int = 1
    entries: list[JournalEntry] = Field(default_factory=list)


class JsonEntryStore(MemoryEntryStore):
    """Entry store persisted to a JSON file in ``directory``."""

    def __init__(self, directory: Path) -> None:
        super().__init__()
        self._path = directory / ENTRY_STORE_FILENAME
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            data = _EntryFile.model_validate_json(self._path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Corrupt entry store at %s, starting fresh", self._path)
            return
        self._entries = {entry_key(e.user_id, e.date): e for e in data.entries}
        self._next_id = data.next_id

    def _save(self, entries: dict[str, JournalEntry], next_id: int) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = _EntryFile(next_id=next_id, entries=list(entries.values()))
        self._path.write_text(data.model_dump_json(indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Weekly summaries
# ---------------------------------------------------------------------------


class SummaryStore(ABC):
    """Weekly summary storage, at most one summary per (user, week_start)."""

    @abstractmethod
    def get(self, user_id: str, week_start: date) -> WeeklySummary | None:
        """Get the stored summary for a week, if any."""

    @abstractmethod
    def upsert(self, summary: WeeklySummary) -> None:
        """Insert or replace the summary for its (user, week_start)."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[WeeklySummary]:
        """All of a user's summaries, ordered by week_start."""


class MemorySummaryStore(SummaryStore):
    """In-process summary store."""

    def __init__(self) -> None:
        self._summaries: dict[str, WeeklySummary] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, week_start: date) -> WeeklySummary | None:
        with self._lock:
            return self._summaries.get(summary_key(user_id, week_start))

    def upsert(self, summary: WeeklySummary) -> None:
        with self._lock:
            key = summary_key(summary.user_id, summary.week_start)
            summaries = {**self._summaries, key: summary}
            self._save(summaries)
            self._summaries = summaries

    def list_for_user(self, user_id: str) -> list[WeeklySummary]:
        with self._lock:
            current = list(self._summaries.values())
        summaries = [s for s in current if s.user_id == user_id]
        return sorted(summaries, key=lambda s: s.week_start)

    def count(self) -> int:
        with self._lock:
            return len(self._summaries)

    def _save(self, summaries: dict[str, WeeklySummary]) -> None:
        """Persist the candidate map. No-op in memory."""


class JsonSummaryStore(MemorySummaryStore):
    """Summary store persisted to a JSON file in ``directory``."""

    def __init__(self, directory: Path) -> None:
        super().__init__()
        self._path = directory / SUMMARY_STORE_FILENAME
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            summaries = [WeeklySummary.model_validate(s) for s in raw.get("summaries", [])]
        except (json.JSONDecodeError, ValueError, AttributeError):
            logger.warning("Corrupt summary store at %s, starting fresh", self._path)
            return
        self._summaries = {summary_key(s.user_id, s.week_start): s for s in summaries}

    def _save(self, summaries: dict[str, WeeklySummary]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {"summaries": [s.model_dump(mode="json") for s in summaries.values()]}
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def create_stores(
    directory: Path | None = None,
) -> tuple[EntryStore, SummaryStore]:
    """Create an entry store and a summary store.

    Args:
        directory: Where to keep the JSON files. ``None`` gives in-memory
            stores.

    Returns:
        ``(entry_store, summary_store)``.
    """
    if directory is None:
        logger.debug("Using in-memory stores")
        return MemoryEntryStore(), MemorySummaryStore()
    logger.info("Using JSON stores at %s", directory)
    return JsonEntryStore(directory), JsonSummaryStore(directory)
