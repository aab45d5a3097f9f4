import copy
import json
import logging
from pathlib import Path
from typing import Any

from ghibli_backup.models.records import RESOURCE_KINDS

logger = logging.getLogger(__name__)
COMPLETE_BACKUP_FILENAME = "complete-backup.json"


class BackupStore:
    """Read-only in-memory snapshot of the backed-up resource collections.

    Every kind is loaded from ``<backup_dir>/<kind>.json`` once, at
    construction. A missing or unreadable file only drops that kind.
    """

    def __init__(self, backup_dir: Path | str, kinds: tuple[str, ...] = RESOURCE_KINDS) -> None:
        self.backup_dir = Path(backup_dir)
        self.kinds = kinds
        self._data: dict[str, list[dict[str, Any]]] = {}
        self._corrupt: set[str] = set()
        self._load()

    def _load(self) -> None:
        for kind in self.kinds:
            path = self.backup_dir / f"{kind}.json"
            if not path.is_file():
                logger.info("store.load.missing kind=%s path=%s", kind, path)
                continue
            try:
                items = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning("store.load.failed kind=%s type=%s detail=%s", kind, exc.__class__.__name__, str(exc))
                self._corrupt.add(kind)
                continue
            if not isinstance(items, list):
                logger.warning("store.load.failed kind=%s detail=expected a JSON array", kind)
                self._corrupt.add(kind)
                continue
            self._data[kind] = items
            logger.info("store.load.ok kind=%s items=%d", kind, len(items))
        logger.info("store.loaded kinds=%s corrupt=%s", self.loaded_kinds, sorted(self._corrupt))

    @property
    def loaded_kinds(self) -> list[str]:
        return list(self._data.keys())

    def has_kind(self, kind: str) -> bool:
        return kind in self._data

    def is_corrupt(self, kind: str) -> bool:
        return kind in self._corrupt

    def get_all(self, kind: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._data.get(kind, []))

    def get_by_id(self, kind: str, item_id: str) -> dict[str, Any] | None:
        for item in self._data.get(kind, []):
            if isinstance(item, dict) and item.get("id") == item_id:
                return copy.deepcopy(item)
        return None

    def search(self, kind: str, query: str) -> list[dict[str, Any]]:
        needle = query.lower()
        return [
            copy.deepcopy(item)
            for item in self._data.get(kind, [])
            if needle in self._serialize(item).lower()
        ]

    @staticmethod
    def _serialize(item: Any) -> str:
        return json.dumps(item, ensure_ascii=False, separators=(",", ":"))


def load_complete_backup(path: Path | str) -> dict[str, list[dict[str, Any]]]:
    """Read the aggregate kind -> records file written after a full crawl."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{path} does not contain a kind -> records mapping")
    return {str(kind): list(items) for kind, items in payload.items()}
