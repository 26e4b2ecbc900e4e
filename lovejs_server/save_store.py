"""
File-backed save store for in-browser game progress.

Each save is an envelope of {"id", "data"} written as indented JSON to
<saves_dir>/<id>.json. Identifiers are reduced to their final path segment
before use so no request can reach outside the saves directory.
"""

import asyncio
import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SAVE_FILE_SUFFIX = ".json"

_SEPARATORS = re.compile(r"[\\/]+")


class SaveStoreError(Exception):
    """Base class for save store failures."""


class BadRequestError(SaveStoreError):
    """A required field was missing from the request."""


class StorageError(SaveStoreError):
    """Reading or writing the saves directory failed."""


def sanitize_id(raw: str) -> str:
    """
    Reduce a caller-supplied identifier to a safe storage key.

    Only the final path segment survives, so "../../etc/passwd" becomes
    "passwd". Returns "" when nothing usable is left.
    """
    segments = [segment for segment in _SEPARATORS.split(raw) if segment]
    if not segments:
        return ""

    safe_id = segments[-1]
    if safe_id in (".", "..") or "\x00" in safe_id:
        return ""
    return safe_id


@dataclass
class SaveRecord:
    """A persisted save: the sanitized id and its opaque payload."""
    id: str
    data: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"id": self.id, "data": self.data}

    @classmethod
    def from_dict(cls, data: Any) -> "SaveRecord":
        """Create from a parsed envelope, rejecting anything else."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")
        if not isinstance(data.get("id"), str):
            raise ValueError("Envelope has no string 'id'")
        if "data" not in data:
            raise ValueError("Envelope has no 'data'")
        payload = data["data"]
        if payload is not None and not isinstance(payload, str):
            raise ValueError("Envelope 'data' is not a string")
        return cls(id=data["id"], data=payload)


class LoadStatus(str, Enum):
    """Outcome of reading a save file."""
    MISSING = "missing"
    FOUND = "found"
    CORRUPT = "corrupt"


@dataclass
class LoadResult:
    """Tagged result of SaveStore.load."""
    status: LoadStatus
    save_id: str
    record: Optional[SaveRecord] = None
    error: Optional[str] = None


class SaveStore:
    """Key-value store mapping sanitized identifiers to save files."""

    def __init__(self, saves_dir: Path):
        """
        Initialize save store.

        Args:
            saves_dir: Directory holding one file per identifier
        """
        self.saves_dir = Path(saves_dir)

        # Ensure directory exists
        self.saves_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, save_id: str) -> Path:
        """Get the save file path for an already sanitized id."""
        return self.saves_dir / f"{save_id}{SAVE_FILE_SUFFIX}"

    def _require_id(self, raw_id: Optional[str]) -> str:
        if not raw_id:
            raise BadRequestError("Missing id")
        save_id = sanitize_id(raw_id)
        if not save_id:
            raise BadRequestError(f"Invalid id: {raw_id!r}")
        try:
            os.fsencode(save_id)
        except UnicodeError:
            raise BadRequestError(f"Id is not a valid filename: {raw_id!r}")
        return save_id

    def save(self, raw_id: Optional[str], data: Optional[str]) -> SaveRecord:
        """
        Save a payload, replacing any previous save with the same id.

        Args:
            raw_id: Caller-supplied identifier
            data: Opaque payload, stored as-is

        Returns:
            The persisted SaveRecord

        Raises:
            BadRequestError: id missing, empty after sanitization, or not
                encodable as a filename
            StorageError: the file could not be written
        """
        save_id = self._require_id(raw_id)
        record = SaveRecord(id=save_id, data=data)
        target = self.path_for(save_id)
        content = json.dumps(record.to_dict(), indent=2)

        # Write atomically
        temp_path = None
        try:
            fd, temp_name = tempfile.mkstemp(
                dir=self.saves_dir, prefix=f".{save_id}.", suffix=".tmp"
            )
            temp_path = Path(temp_name)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

            temp_path.replace(target)
            temp_path = None
        except (OSError, UnicodeError) as e:
            logger.error(f"Failed to save game for id '{save_id}': {e}")
            raise StorageError(f"Failed to save game for id '{save_id}'") from e
        finally:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)

        logger.info(f"Game saved successfully to: {target}")
        return record

    def load(self, raw_id: Optional[str]) -> LoadResult:
        """
        Load the save for an identifier.

        Args:
            raw_id: Caller-supplied identifier

        Returns:
            LoadResult tagged MISSING, FOUND or CORRUPT

        Raises:
            BadRequestError: id missing, empty after sanitization, or not
                encodable as a filename
            StorageError: the file exists but could not be read
        """
        save_id = self._require_id(raw_id)
        path = self.path_for(save_id)

        try:
            content = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            logger.info(f"No save file found for id '{save_id}'.")
            return LoadResult(status=LoadStatus.MISSING, save_id=save_id)
        except (OSError, UnicodeError) as e:
            logger.error(f"Failed to load game for id '{save_id}': {e}")
            raise StorageError(f"Failed to load game for id '{save_id}'") from e

        try:
            record = SaveRecord.from_dict(json.loads(content))
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"Failed to parse save data for id '{save_id}': {e}")
            return LoadResult(status=LoadStatus.CORRUPT, save_id=save_id, error=str(e))

        logger.info(f"Game loaded successfully from: {path}")
        return LoadResult(status=LoadStatus.FOUND, save_id=save_id, record=record)

    async def save_async(self, raw_id: Optional[str], data: Optional[str]) -> SaveRecord:
        """Run save() in a worker thread."""
        return await asyncio.to_thread(self.save, raw_id, data)

    async def load_async(self, raw_id: Optional[str]) -> LoadResult:
        """Run load() in a worker thread."""
        return await asyncio.to_thread(self.load, raw_id)
