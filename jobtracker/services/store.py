from datetime import datetime, timezone
from functools import lru_cache
from itertools import count
from typing import Any


class InMemoryStore:
    """Process-local store backing the single-table legacy tracker."""

    def __init__(self) -> None:
        self.entries: dict[int, dict[str, Any]] = {}
        self._ids = count(1)

    def add_entry(
        self,
        *,
        company: str,
        position: str,
        applied_date: str,
        status: str,
        link: str | None = None,
        notes: str | None = None,
    ) -> dict[str, Any]:
        entry_id = next(self._ids)
        entry = {
            "id": entry_id,
            "company": company,
            "position": position,
            "link": link or None,
            "applied_date": applied_date,
            "status": status,
            "notes": notes or None,
            "created_at": datetime.now(timezone.utc),
        }
        self.entries[entry_id] = entry
        return entry

    def list_entries(self) -> list[dict[str, Any]]:
        return list(self.entries.values())

    def get_entry(self, entry_id: int) -> dict[str, Any] | None:
        return self.entries.get(entry_id)

    def delete_entry(self, entry_id: int) -> dict[str, Any] | None:
        return self.entries.pop(entry_id, None)


@lru_cache
def get_tracker_store() -> InMemoryStore:
    return InMemoryStore()
