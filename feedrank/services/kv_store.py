"""
Key-value store abstraction.

Persists the interaction list and preference profile as JSON strings under two
keys. Implementations: in-memory (tests, ephemeral sessions), JSON file (local).
No transactional guarantee: concurrent writers resolve last-save-wins.
"""

import asyncio
import json
import threading
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, Union


class KeyValueStore(Protocol):
    """Protocol for async string blob storage keyed by name."""

    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def remove(self, *keys: str) -> None:
        """Delete keys; missing keys are ignored."""
        ...


class InMemoryKeyValueStore:
    """Key-value store held in a dict (no persistence across processes)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class JsonFileKeyValueStore:
    """
    Key-value store backed by a single JSON object file (e.g. data/feed_state.json).

    Each read-modify-write runs in one worker thread under a threading.Lock, so
    one instance can be shared across event loops (InteractionStore saves
    through asyncio.run when no loop is running).
    """

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        with open(self._path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self._path}")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp, "w") as f:
            json.dump(data, f, indent=2)
        tmp.replace(self._path)

    def _get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def _update(self, changes: Dict[str, str], removals: Iterable[str] = ()) -> None:
        with self._lock:
            data = self._read()
            data.update(changes)
            for key in removals:
                data.pop(key, None)
            self._write(data)

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._update, {key: value})

    async def remove(self, *keys: str) -> None:
        await asyncio.to_thread(self._update, {}, keys)
