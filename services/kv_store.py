"""
Key-value store backends for the gallery.

The gallery keeps its whole record list under a single key, so a backend only
needs string get/set. Three backends ship here: an in-memory dict (tests), a
JSON file on local disk (default) and a Supabase table.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from supabase import Client, create_client

from config.settings import Settings, get_settings
from services.errors import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """
    Stores all keys in one JSON object on disk.

    Writes go to a temp file in the same directory and are moved into place,
    so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Error reading store file {self.path}: {str(e)}")
            raise PersistenceError(f"Failed to read saved apps: {e.strerror or str(e)}") from e
        try:
            data = json.loads(text)
        except ValueError as e:
            logger.error(f"Store file {self.path} is not valid JSON, ignoring it: {str(e)}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Store file {self.path} does not hold a JSON object, ignoring it")
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".gallery-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                    json.dump(data, tmp_file)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error(f"Error writing store file {self.path}: {str(e)}")
            raise PersistenceError(f"Failed to save app: {e.strerror or str(e)}") from e


class SupabaseKeyValueStore:
    """One row per key in a ``(key text primary key, value text)`` table."""

    def __init__(self, supabase_client: Client, table: str = "kv_store"):
        self.supabase = supabase_client
        self.table = table

    def get(self, key: str) -> Optional[str]:
        try:
            response = self.supabase.table(self.table).select("value").eq("key", key).limit(1).execute()
        except Exception as e:
            logger.error(f"Error reading key {key} from Supabase: {str(e)}", exc_info=True)
            raise PersistenceError("Failed to read saved apps") from e
        if response.data:
            return response.data[0].get("value")
        return None

    def set(self, key: str, value: str) -> None:
        try:
            self.supabase.table(self.table).upsert({"key": key, "value": value}).execute()
        except Exception as e:
            logger.error(f"Error writing key {key} to Supabase: {str(e)}", exc_info=True)
            raise PersistenceError() from e


def create_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """Build the store selected by STORAGE_BACKEND"""
    settings = settings or get_settings()
    backend = settings.storage_backend

    if backend == "memory":
        logger.info("Using in-memory gallery store")
        return InMemoryKeyValueStore()

    if backend == "supabase":
        if not settings.supabase_url:
            raise ValueError("SUPABASE_URL environment variable is required")
        if not settings.supabase_service_key:
            raise ValueError("SUPABASE_SERVICE_KEY environment variable is required")
        logger.info(f"Using Supabase gallery store (table: {settings.supabase_kv_table})")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, settings.supabase_kv_table)

    if backend != "file":
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")

    logger.info(f"Using JSON file gallery store at {settings.storage_path}")
    return JsonFileKeyValueStore(settings.storage_path)
