"""Reads the raw collections from a local JSON export instead of Firestore."""

import json
from typing import Any, Dict, List

from utils.logger import get_logger
from utils.error_handler import DataSourceError

logger = get_logger()

COLLECTIONS = ("marks", "classes", "subjects", "exams")

class SnapshotSource:
    """Serves the four collections from a file shaped like
    {"marks": [...], "classes": [...], "subjects": [...], "exams": [...]}.
    """

    def __init__(self, path: str):
        self.path = path
        logger.info(f"Loading marks snapshot from {path}")
        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            # A missing file is reported as such by the caller, not as a read failure
            raise
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read snapshot {path}: {e}")
            raise DataSourceError(f"Could not read snapshot '{path}': {e}") from e

        if not isinstance(data, dict):
            raise DataSourceError(f"Snapshot '{path}' must contain a JSON object.")
        self._collections: Dict[str, List[Dict[str, Any]]] = {}
        for name in COLLECTIONS:
            documents = data.get(name, [])
            if not isinstance(documents, list):
                raise DataSourceError(f"Snapshot collection '{name}' must be a list.")
            self._collections[name] = documents
        logger.debug("Snapshot loaded: " + ", ".join(f"{name}={len(docs)}" for name, docs in self._collections.items()))

    def _copy(self, name: str) -> List[Dict[str, Any]]:
        return [dict(document) for document in self._collections[name]]

    def get_all_marks(self) -> List[Dict[str, Any]]:
        return self._copy("marks")

    def get_classes(self) -> List[Dict[str, Any]]:
        return self._copy("classes")

    def get_subjects(self) -> List[Dict[str, Any]]:
        return self._copy("subjects")

    def get_exams(self) -> List[Dict[str, Any]]:
        return self._copy("exams")
