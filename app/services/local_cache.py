from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

# Session-local keys (one namespace per browser session)
KEY_USER = "user"
KEY_CURRENT_LEAGUE = "current_league"
KEY_SELECTED_SEASON = "selected_season"
KEY_SELECTED_WEEK = "selected_week"

# Shared catalog namespace; its stored_at doubles as the fetched-at timestamp
CATALOG_NAMESPACE = "players"
KEY_CATALOG = "catalog"

_SAFE_NAME = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_fresh(self, max_age_seconds: float, now: float) -> bool:
        return self.age(now) < max_age_seconds


class LocalCache:
    """
    Key/value cache with stored-at timestamps, split into namespaces.
    Entries never expire on their own: callers decide freshness with
    `get_fresh`, and may still read a stale entry with `get`.
    With a directory each namespace is mirrored to <dir>/<namespace>.json.
    """

    def __init__(self, directory: Optional[str | Path] = None, clock: Callable[[], float] = time.time):
        self._dir = Path(directory) if directory else None
        self._clock = clock
        # namespace -> key -> entry
        self._data: Dict[str, Dict[str, CacheEntry]] = {}
        if self._dir is not None:
            self._dir.mkdir(parents=True, exist_ok=True)

    def now(self) -> float:
        return self._clock()

    def _path(self, namespace: str) -> Optional[Path]:
        if self._dir is None:
            return None
        return self._dir / f"{_SAFE_NAME.sub('_', namespace)}.json"

    def _cache_for(self, namespace: str) -> Dict[str, CacheEntry]:
        if namespace not in self._data:
            self._data[namespace] = self._load(namespace)
        return self._data[namespace]

    def _load(self, namespace: str) -> Dict[str, CacheEntry]:
        path = self._path(namespace)
        if path is None or not path.exists():
            return {}
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # a corrupt file is the same as an empty cache
            logger.warning("Ignoring unreadable local cache file %s: %s", path, e)
            return {}
        out: Dict[str, CacheEntry] = {}
        if isinstance(raw, dict):
            for key, item in raw.items():
                if isinstance(item, dict) and "stored_at" in item:
                    out[key] = CacheEntry(value=item.get("value"), stored_at=float(item["stored_at"]))
        return out

    def _flush(self, namespace: str) -> None:
        path = self._path(namespace)
        if path is None:
            return
        entries = self._data.get(namespace, {})
        body = {k: {"stored_at": e.stored_at, "value": e.value} for k, e in entries.items()}
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(body), encoding="utf-8")
        tmp.replace(path)

    # ------------- public API -------------

    def get(self, namespace: str, key: str) -> Optional[CacheEntry]:
        return self._cache_for(namespace).get(key)

    def get_fresh(self, namespace: str, key: str, max_age_seconds: float) -> Optional[CacheEntry]:
        entry = self.get(namespace, key)
        if entry and entry.is_fresh(max_age_seconds, self.now()):
            return entry
        return None

    def set(self, namespace: str, key: str, value: Any) -> CacheEntry:
        entry = CacheEntry(value=value, stored_at=self.now())
        self._cache_for(namespace)[key] = entry
        self._flush(namespace)
        return entry

    def remove(self, namespace: str, key: str) -> None:
        cache = self._cache_for(namespace)
        if cache.pop(key, None) is not None:
            self._flush(namespace)

    def clear(self, namespace: str) -> None:
        self._data[namespace] = {}
        path = self._path(namespace)
        if path is not None and path.exists():
            path.unlink()
