from typing import Any

import httpx

from ghibli_backup.errors import SourceStatusError
from ghibli_backup.models.records import is_resource_kind
from ghibli_backup.providers.sources.http import get_json
from ghibli_backup.retrieval.endpoints import normalize_endpoint, parse_endpoint
from ghibli_backup.store.backup import BackupStore

BACKUP_NOT_FOUND = "Backup data not found"
ITEM_NOT_FOUND = "Item not found"
BACKUP_READ_ERROR = "Error reading backup data"


class HttpBackupSource:
    """Backup copy served by the bundled server under its ``/api`` prefix."""

    def __init__(self, base_url: str, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    @property
    def label(self) -> str:
        return "local-http"

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}{normalize_endpoint(endpoint)}"

    async def fetch(self, endpoint: str) -> Any:
        return await get_json(self.url_for(endpoint), transport=self.transport, error_prefix="Local API error!")


class StoreBackupSource:
    """In-process lookup against a BackupStore using the shared endpoint grammar."""

    def __init__(self, store: BackupStore) -> None:
        self.store = store

    @property
    def label(self) -> str:
        return "local-store"

    def url_for(self, endpoint: str) -> str:
        return f"store:{normalize_endpoint(endpoint)}"

    async def fetch(self, endpoint: str) -> Any:
        return resolve(self.store, endpoint)


def resolve(store: BackupStore, endpoint: str) -> Any:
    """Answer an endpoint from the store or raise the status the server would send."""
    ref = parse_endpoint(endpoint)
    url = f"store:{ref.path}"
    if store.is_corrupt(ref.kind):
        raise SourceStatusError(BACKUP_READ_ERROR, status_code=500, url=url)
    if not is_resource_kind(ref.kind) or not store.has_kind(ref.kind):
        raise SourceStatusError(BACKUP_NOT_FOUND, status_code=404, url=url)
    if ref.item_id is None:
        return store.get_all(ref.kind)
    item = store.get_by_id(ref.kind, ref.item_id)
    if item is None:
        raise SourceStatusError(ITEM_NOT_FOUND, status_code=404, url=url)
    return item
