"""Durable string key-value store backed by a JSON file.

Writes go through `PreferencesStore.edit()`, which stages changes and
commits them in a single atomic file replace, so keys edited together are
always persisted together.
"""

from __future__ import annotations

import json
import os
import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from . import config
from .logging_config import log


class Editor:
    """Staged changes for one `edit()` block."""

    def __init__(self) -> None:
        self._puts: Dict[str, str] = {}
        self._removes: set[str] = set()

    def put_string(self, key: str, value: str) -> "Editor":
        """Stage writing `value` under `key`."""
        self._removes.discard(key)
        self._puts[key] = str(value)
        return self

    def remove(self, key: str) -> "Editor":
        """Stage removal of `key`."""
        self._puts.pop(key, None)
        self._removes.add(key)
        return self

    def apply_to(self, data: Dict[str, str]) -> bool:
        """Apply staged changes to `data`; return True when anything changed."""
        changed = False
        for key in self._removes:
            if key in data:
                del data[key]
                changed = True
        for key, value in self._puts.items():
            if data.get(key) != value:
                data[key] = value
                changed = True
        return changed


class PreferencesStore:
    def __init__(self, path: Optional[str] = None) -> None:
        """Open the store at `path` (defaults to `config.PREFS_FILE`)."""
        self.path = str(path or config.PREFS_FILE)
        self._lock = threading.RLock()
        self._data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        """Read the backing file; a missing or corrupt file yields an empty store."""
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError):
            log.warning(f"Preferences file unreadable, starting empty: {self.path}")
            return {}
        if not isinstance(raw, dict):
            log.warning(f"Preferences file has unexpected shape, starting empty: {self.path}")
            return {}
        return {str(k): str(v) for k, v in raw.items() if isinstance(v, str)}

    def _save_locked(self) -> None:
        """Save data locked."""
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + f".tmp-{uuid.uuid4().hex[:8]}"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        finally:
            try:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
            except OSError:
                pass

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value stored under `key`, or `default`."""
        with self._lock:
            return self._data.get(key, default)

    def contains(self, key: str) -> bool:
        """Return True when `key` is stored."""
        with self._lock:
            return key in self._data

    def snapshot(self) -> Dict[str, str]:
        """Return a copy of all stored entries."""
        with self._lock:
            return dict(self._data)

    @contextmanager
    def edit(self) -> Iterator[Editor]:
        """Stage changes and commit them together when the block exits cleanly."""
        editor = Editor()
        with self._lock:
            yield editor
            updated = dict(self._data)
            if not editor.apply_to(updated):
                return
            previous = self._data
            self._data = updated
            try:
                self._save_locked()
            except Exception:
                self._data = previous
                raise
