"""Operation history persisted as a JSON array, newest first.

The file is rewritten wholesale after every mutation, so an entry is on disk
once `append` returns. Only the newest `MAX_ENTRIES` are kept.
"""
from __future__ import annotations
import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from .settings_store import default_home

logger = logging.getLogger(__name__)

MAX_ENTRIES = 100
EXPORT_LIMIT = 1000
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


@dataclass
class HistoryEntry:
    id: int
    timestamp: str
    type: str
    input: str
    output: Any
    provider: str

    @classmethod
    def from_dict(cls, data: dict) -> 'HistoryEntry':
        return cls(
            id=int(data['id']),
            timestamp=str(data.get('timestamp', '')),
            type=str(data.get('type', '')),
            input=str(data.get('input', '')),
            output=data.get('output'),
            provider=str(data.get('provider', '')),
        )

    def to_dict(self) -> dict:
        return asdict(self)


class HistoryStore:
    HISTORY_FILE = 'history.json'

    def __init__(self, path: Optional[Path] = None, save_enabled: bool = True,
                 max_entries: int = MAX_ENTRIES):
        self.path = Path(path) if path else default_home() / self.HISTORY_FILE
        self.save_enabled = save_enabled
        self.max_entries = max_entries
        self._entries: List[HistoryEntry] = []

    def load(self) -> List[HistoryEntry]:
        self._entries = []
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError('history root is not an array')
            self._entries = [HistoryEntry.from_dict(d) for d in data][:self.max_entries]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable history %s: %s", self.path, e)
            self._entries = []
        return list(self._entries)

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump([e.to_dict() for e in self._entries], f, indent=2, ensure_ascii=False)

    def set_save_enabled(self, enabled: bool) -> None:
        self.save_enabled = bool(enabled)

    def _next_id(self) -> int:
        now_ms = int(time.time() * 1000)
        if self._entries and self._entries[0].id >= now_ms:
            return self._entries[0].id + 1
        return now_ms

    def append(self, op_type: str, input_text: str, output: Any, provider: str) -> Optional[HistoryEntry]:
        if not self.save_enabled:
            return None
        entry = HistoryEntry(
            id=self._next_id(),
            timestamp=datetime.now().strftime(TIMESTAMP_FORMAT),
            type=op_type,
            input=input_text,
            output=output,
            provider=provider,
        )
        self._entries.insert(0, entry)
        del self._entries[self.max_entries:]
        self._save()
        return entry

    def recent(self, limit: int = 10) -> List[HistoryEntry]:
        return self._entries[:max(limit, 0)]

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries = []
        self._save()

    def export_all(self, destination: Path) -> Path:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(destination, 'w', encoding='utf-8') as f:
            json.dump([e.to_dict() for e in self.recent(EXPORT_LIMIT)], f, indent=2, ensure_ascii=False)
        return destination

    @staticmethod
    def default_export_name(day: Optional[datetime] = None) -> str:
        return f"coordkit_history_{(day or datetime.now()).strftime('%Y-%m-%d')}.json"
