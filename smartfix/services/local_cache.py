import os
import json
from urllib.parse import quote
from typing import Dict, List, Optional, Protocol, Tuple

from smartfix.core.errors import Recovered
from smartfix.core.logger import logger
from smartfix.models.booking import Booking, dump_bookings, parse_bookings

CACHE_KEY_PREFIX = "bookings_"


def cache_key(user_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}{user_id}"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileKeyValueStore:
    """
    Durable key-value store: one file per key under `directory`.
    Each file holds the value as a JSON string.
    """

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        # percent-encoding is one-to-one, so distinct keys never share a file
        safe_key = quote(key, safe="")
        return os.path.join(self.directory, f"{safe_key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def set(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(value, f)
        os.replace(tmp_path, path)


class LocalBookingCache:
    """Per-user list of bookings kept in a KeyValueStore under `bookings_<userId>`."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def read(self, user_id: str) -> Tuple[List[Booking], Optional[Recovered]]:
        key = cache_key(user_id)
        try:
            raw = self.store.get(key)
            if not raw:
                return [], None
            return parse_bookings(raw), None
        except Exception as e:
            logger.warning(f"⚠️ Local cache unreadable for {key}, treating as empty: {e}")
            return [], Recovered(source="local_cache.read", detail=str(e))

    def write(self, user_id: str, bookings: List[Booking]) -> Optional[Recovered]:
        key = cache_key(user_id)
        try:
            self.store.set(key, dump_bookings(bookings))
            logger.debug(f"💾 Cached {len(bookings)} booking(s) under {key}")
            return None
        except Exception as e:
            logger.error(f"❌ Failed to persist local cache {key}: {e}")
            return Recovered(source="local_cache.write", detail=str(e))
