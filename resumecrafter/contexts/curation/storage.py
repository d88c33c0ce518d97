"""
Durable key-value storage for the canonical record.

One JSON document per key, stored as <directory>/<key>.json and written
atomically (temp file + replace) so a crash mid-save never leaves a truncated
record behind.
"""

import os
import re
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()
MASTER_RESUME_DIR = Path(os.getenv("MASTER_RESUME_DIR", "data/master"))

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStorage:
    """Directory-backed key-value store with string values."""

    def __init__(self, directory: Path = None):
        """
        Args:
            directory: Storage directory. Defaults to MASTER_RESUME_DIR from environment
        """
        if directory is None:
            directory = MASTER_RESUME_DIR

        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """Stored value for key, or None if nothing is stored."""
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        tmp_path = path.with_name(f"{path.name}.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)

    def __contains__(self, key: str) -> bool:
        return self.path_for(key).exists()
