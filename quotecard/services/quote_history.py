"""Quote history - most-recent-first list of generated quotes, JSON persisted."""

import json
from pathlib import Path
from typing import List, Optional

from loguru import logger

from quotecard.config import settings
from quotecard.models.history import QuoteHistoryEntry


class QuoteHistory:
    """Capped list of generated quotes backed by a JSON array file."""

    def __init__(self, history_file: Optional[Path] = None, limit: Optional[int] = None):
        self._file = history_file or settings.history_file
        self.limit = limit or settings.history_limit
        self._entries: List[QuoteHistoryEntry] = []
        self.load()

    def load(self) -> List[QuoteHistoryEntry]:
        """(Re)load entries from disk.

        Entries without a non-blank string ``text`` are dropped and only the
        first ``limit`` are kept. Unreadable files give an empty history.
        """
        self._entries = []
        if not self._file.exists():
            return self._entries
        try:
            raw = json.loads(self._file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load quote history from {self._file}: {e}")
            return self._entries

        if not isinstance(raw, list):
            logger.warning(f"Ignoring quote history in {self._file}: expected a JSON array")
            return self._entries

        for item in raw:
            if not isinstance(item, dict):
                continue
            text = item.get("text")
            if not isinstance(text, str) or not text.strip():
                continue
            ts = item.get("ts")
            entry = QuoteHistoryEntry(text=text, ts=ts) if isinstance(ts, int) else QuoteHistoryEntry(text=text)
            self._entries.append(entry)
            if len(self._entries) >= self.limit:
                break

        logger.info(f"Loaded {len(self._entries)} history quotes")
        return self._entries

    def _save(self) -> None:
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            self._file.write_text(
                json.dumps([e.model_dump() for e in self._entries], ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning(f"Failed to save quote history: {e}")

    def entries(self) -> List[QuoteHistoryEntry]:
        """Entries, most recent first."""
        return list(self._entries)

    def texts(self) -> List[str]:
        return [e.text for e in self._entries]

    def add(self, text: str) -> Optional[QuoteHistoryEntry]:
        """Insert a quote at the front; blank text is ignored."""
        if not text or not text.strip():
            return None
        entry = QuoteHistoryEntry(text=text)
        self._entries.insert(0, entry)
        del self._entries[self.limit:]
        self._save()
        return entry

    def clear(self) -> None:
        self._entries = []
        self._save()
        logger.info("Cleared quote history")

    def __len__(self) -> int:
        return len(self._entries)
