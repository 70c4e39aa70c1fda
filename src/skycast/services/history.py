"""Recent-search history and its persistence."""

import json
from pathlib import Path
from typing import Protocol

from loguru import logger

from ..core.config import settings

HISTORY_KEY = "searchHistory"


def push_city(history: tuple[str, ...], city: str, limit: int | None = None) -> tuple[str, ...]:
    """Return a new history with ``city`` first, de-duplicated and capped.

    Example:
        >>> push_city(("Oslo", "Paris"), "Paris")
        ('Paris', 'Oslo')
    """
    limit = limit or settings.HISTORY_LIMIT
    return ((city,) + tuple(item for item in history if item != city))[:limit]


def remove_city(history: tuple[str, ...], city: str) -> tuple[str, ...]:
    return tuple(item for item in history if item != city)


class HistoryStore(Protocol):
    """Persistence for the search history."""

    def load(self) -> tuple[str, ...]: ...

    def save(self, history: tuple[str, ...]) -> None: ...


class MemoryHistoryStore:
    """History store that keeps everything in process memory."""

    def __init__(self, initial: tuple[str, ...] = ()):
        self.saved: tuple[str, ...] = tuple(initial)

    def load(self) -> tuple[str, ...]:
        return self.saved

    def save(self, history: tuple[str, ...]) -> None:
        self.saved = tuple(history)


class JsonFileHistoryStore:
    """History store backed by a small JSON key-value file.

    The file holds an object; the history lives under ``searchHistory`` so other
    keys written by other tools are preserved on save.

    Example:
        >>> store = JsonFileHistoryStore(Path("/tmp/skycast-history.json"))
        >>> store.save(("Paris",))
        >>> store.load()
        ('Paris',)
    """

    def __init__(self, path: Path, limit: int | None = None):
        self.path = Path(path).expanduser()
        self.limit = limit or settings.HISTORY_LIMIT

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Unreadable history file, starting empty", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> tuple[str, ...]:
        entries = self._read().get(HISTORY_KEY, [])
        if not isinstance(entries, list):
            return ()
        return tuple(item for item in entries if isinstance(item, str))[: self.limit]

    def save(self, history: tuple[str, ...]) -> None:
        data = self._read()
        data[HISTORY_KEY] = list(history)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.debug("History saved", entries=len(history))
