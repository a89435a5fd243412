"""
Generation service for Prompt2App gallery persistence
"""
import json
import logging
import time
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from config.settings import DEFAULT_STORAGE_KEY, get_settings
from models.generation import GenerationRecord
from services.errors import PersistenceError
from services.kv_store import KeyValueStore, create_store

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class GenerationService:
    """
    Keeps the gallery as one JSON array under a single store key, newest
    first. There is no locking: the last writer wins.
    """

    def __init__(self, store: KeyValueStore, storage_key: str = DEFAULT_STORAGE_KEY):
        self.store = store
        self.storage_key = storage_key

    def _next_id(self, created_at: int, existing: List[GenerationRecord]) -> str:
        candidate = created_at
        for record in existing:
            if record.id.isdigit() and int(record.id) >= candidate:
                candidate = int(record.id) + 1
        return str(candidate)

    def _write(self, records: List[GenerationRecord]) -> None:
        payload = json.dumps([record.to_storage() for record in records])
        try:
            self.store.set(self.storage_key, payload)
        except PersistenceError:
            raise
        except Exception as e:
            logger.error(f"Error saving apps: {str(e)}", exc_info=True)
            raise PersistenceError(f"Failed to save app: {str(e)}") from e

    def _read(self) -> Optional[str]:
        try:
            return self.store.get(self.storage_key)
        except PersistenceError:
            raise
        except Exception as e:
            logger.error(f"Error reading saved apps: {str(e)}", exc_info=True)
            raise PersistenceError(f"Failed to read saved apps: {str(e)}") from e

    async def list_generations(self) -> List[GenerationRecord]:
        """
        Get all saved generations, newest first. A missing value or one that
        does not parse is treated as an empty gallery. Store read failures
        raise PersistenceError so a following write cannot replace records
        that were never loaded.
        """
        raw = self._read()
        if not raw:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("gallery value is not a JSON array")
            return [GenerationRecord.model_validate(item) for item in items]
        except (ValueError, TypeError, PydanticValidationError) as e:
            logger.error(f"Error loading saved apps: {str(e)}")
            return []

    async def create_generation(self, prompt: str, code: str) -> GenerationRecord:
        """
        Save a new generation at the front of the gallery
        """
        existing = await self.list_generations()
        created_at = _now_ms()
        record = GenerationRecord(
            id=self._next_id(created_at, existing),
            prompt=prompt,
            code=code,
            created_at=created_at,
        )
        self._write([record, *existing])
        logger.info(f"Saved generation {record.id} ({len(existing) + 1} in gallery)")
        return record

    async def get_generation_by_id(self, generation_id: str) -> Optional[GenerationRecord]:
        for record in await self.list_generations():
            if record.id == generation_id:
                return record
        return None

    async def delete_generation(self, generation_id: str) -> bool:
        """
        Delete a generation. Unknown ids are not an error; the return value
        says whether anything was removed.
        """
        records = await self.list_generations()
        remaining = [record for record in records if record.id != generation_id]
        self._write(remaining)
        deleted = len(remaining) != len(records)
        if deleted:
            logger.info(f"Deleted generation {generation_id}")
        else:
            logger.info(f"Delete requested for unknown generation {generation_id}")
        return deleted


# Global generation service instance - created on first use
generation_service = None


def get_generation_service() -> GenerationService:
    """Get or create the gallery service backed by the configured store"""
    global generation_service
    if generation_service is None:
        settings = get_settings()
        generation_service = GenerationService(create_store(settings), settings.storage_key)
    return generation_service
