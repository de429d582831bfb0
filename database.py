import json
import logging
import os
from typing import Any, Dict, List, Optional

from config import settings

logger = logging.getLogger(__name__)

# Default data directory. Tests and callers may override it by assigning
# database.DATA_DIR before a RecordStore is created.
DATA_DIR = settings.data_dir

# Collection names
BOOKS = "books"
MEMBERS = "members"
LOANS = "loans"


class RecordStore:
    """Stores named collections of flat records as JSON files.

    Each collection lives in ``<data_dir>/<name>.json`` as a JSON array. The
    store knows nothing about the records it holds: no validation and no
    relationships. Read and write failures are logged, never raised.
    """

    def __init__(self, data_dir: Optional[str] = None) -> None:
        self.data_dir = data_dir if data_dir is not None else DATA_DIR

    def path_for(self, name: str) -> str:
        return os.path.join(self.data_dir, f"{name}.json")

    def _ensure_directory(self) -> None:
        os.makedirs(self.data_dir, exist_ok=True)

    def load(self, name: str) -> List[Dict[str, Any]]:
        """Return the records of a collection, or an empty list if none can be read."""
        path = self.path_for(name)
        if not os.path.exists(path):
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read {name} from {path}: {e}")
            return []

        if not content.strip():
            return []

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed JSON in {path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Data in {path} is not a list, ignoring it")
            return []
        return data

    def save(self, name: str, records: List[Dict[str, Any]]) -> None:
        """Write a whole collection, replacing what was stored before."""
        path = self.path_for(name)
        try:
            # Encode before opening so a bad record leaves the previous file intact
            payload = json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")
            self._ensure_directory()
            with open(path, "wb") as f:
                f.write(payload)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Could not save {name} to {path}: {e}")
