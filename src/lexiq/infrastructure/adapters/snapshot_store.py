"""
Snapshot stores: infrastructure adapters for SnapshotRepository.

JsonSnapshotRepository keeps one JSON document per user under a state
directory and replaces it atomically, so a crash never leaves a half-written
snapshot behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import quote

from lexiq.domain.errors import DataError
from lexiq.domain.mastery.models import MasteryState
from lexiq.domain.ports import SnapshotRepository
from lexiq.infrastructure.serialization import mastery_from_dict, mastery_to_dict

logger = logging.getLogger(__name__)


class InMemorySnapshotRepository(SnapshotRepository):
    """Dict-backed store. Snapshots are immutable, so no copying is needed."""

    def __init__(self):
        self._data: dict[str, dict[str, MasteryState]] = {}

    def get(self, user_id: str, object_id: str) -> MasteryState | None:
        return self._data.get(user_id, {}).get(object_id)

    def save(self, user_id: str, object_id: str, state: MasteryState) -> None:
        self._data.setdefault(user_id, {})[object_id] = state

    def load_user(self, user_id: str) -> dict[str, MasteryState]:
        return dict(self._data.get(user_id, {}))


class JsonSnapshotRepository(SnapshotRepository):
    """
    Stores each user's snapshots as ``<state_dir>/<quoted user_id>.json``.

    The user ID is percent-encoded, so distinct IDs never share a file.

    Layout: {"version": 1, "objects": {object_id: mastery_dict, ...}}
    """

    VERSION = 1

    def __init__(self, state_dir: Path):
        self.state_dir = Path(state_dir)

    def _path(self, user_id: str) -> Path:
        if not user_id:
            raise DataError("user_id must be a non-empty string", field="user_id")
        return self.state_dir / f"{quote(user_id, safe='')}.json"

    def _read(self, user_id: str) -> dict[str, dict]:
        path = self._path(user_id)
        if not path.exists():
            return {}
        try:
            doc = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise DataError(f"Corrupt snapshot file {path}: {e}") from e
        objects = doc.get("objects", {}) if isinstance(doc, dict) else None
        if not isinstance(objects, dict):
            raise DataError(f"Snapshot file {path} has no 'objects' mapping")
        return objects

    def _write(self, user_id: str, objects: dict[str, dict]) -> None:
        path = self._path(user_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({"version": self.VERSION, "objects": objects}, indent=2)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, user_id: str, object_id: str) -> MasteryState | None:
        raw = self._read(user_id).get(object_id)
        return mastery_from_dict(raw) if raw is not None else None

    def save(self, user_id: str, object_id: str, state: MasteryState) -> None:
        objects = self._read(user_id)
        objects[object_id] = mastery_to_dict(state)
        self._write(user_id, objects)
        logger.debug(f"Saved snapshot {user_id}/{object_id}")

    def load_user(self, user_id: str) -> dict[str, MasteryState]:
        return {oid: mastery_from_dict(raw) for oid, raw in self._read(user_id).items()}
