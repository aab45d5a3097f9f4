import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ghibli_backup.config import Settings
from ghibli_backup.errors import (
    BackupUnavailableError,
    GhibliBackupError,
    ResourceNotFoundError,
    SourceError,
    SourceStatusError,
)
from ghibli_backup.providers.sources.base import RecordSource
from ghibli_backup.providers.sources.external import ExternalSource
from ghibli_backup.providers.sources.local import HttpBackupSource, StoreBackupSource
from ghibli_backup.retrieval.endpoints import normalize_endpoint
from ghibli_backup.store.backup import BackupStore

logger = logging.getLogger(__name__)


class ClientMode(str, Enum):
    EXTERNAL = "external"
    LOCAL = "local"


@dataclass
class ClientState:
    """Sticky source preference shared by the clients that hold it.

    Once ``prefer_local`` is set it stays set until ``reset`` is called.
    ``generation`` counts explicit mode changes; a failure observed by a call
    that started before the latest change does not trip the flag.
    """

    prefer_local: bool = False
    generation: int = 0

    @property
    def mode(self) -> ClientMode:
        return ClientMode.LOCAL if self.prefer_local else ClientMode.EXTERNAL

    def trip(self, generation: int) -> bool:
        if generation != self.generation:
            return False
        self.prefer_local = True
        return True

    def reset(self) -> None:
        self.prefer_local = False
        self.generation += 1

    def force_local(self) -> None:
        self.prefer_local = True
        self.generation += 1


class FallbackClient:
    """Fetches from the external API and fails over to the backup copy for good."""

    def __init__(
        self,
        external: RecordSource,
        backup: RecordSource,
        state: ClientState | None = None,
        not_found_triggers_fallback: bool = True,
    ) -> None:
        self.external = external
        self.backup = backup
        self.state = state or ClientState()
        self.not_found_triggers_fallback = not_found_triggers_fallback

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: BackupStore | None = None,
        state: ClientState | None = None,
    ) -> "FallbackClient":
        external = ExternalSource(settings.external_api_base_url, timeout_ms=settings.request_timeout_ms)
        backup: RecordSource
        if store is not None:
            backup = StoreBackupSource(store)
        else:
            backup = HttpBackupSource(settings.local_api_base_url)
        return cls(
            external=external,
            backup=backup,
            state=state,
            not_found_triggers_fallback=settings.external_not_found_triggers_fallback,
        )

    async def fetch_resource(self, endpoint: str) -> Any:
        endpoint = normalize_endpoint(endpoint)

        if self.state.prefer_local:
            logger.info("client.local.direct url=%s", self.backup.url_for(endpoint))
            return await self._fetch_backup(endpoint)

        generation = self.state.generation
        logger.info("client.external.attempt url=%s", self.external.url_for(endpoint))
        try:
            data = await self.external.fetch(endpoint)
        except SourceError as exc:
            if self._is_plain_not_found(exc):
                logger.info("client.external.not_found url=%s", exc.url)
                raise ResourceNotFoundError(endpoint) from exc
            logger.warning("client.external.failed type=%s detail=%s", exc.__class__.__name__, str(exc))
            if not self.state.trip(generation):
                logger.info("client.mode.stale generation=%d current=%d", generation, self.state.generation)
            logger.info("client.fallback.engaged url=%s", self.backup.url_for(endpoint))
            return await self._fetch_backup(endpoint)

        logger.info("client.external.success endpoint=%s", endpoint)
        return data

    async def _fetch_backup(self, endpoint: str) -> Any:
        try:
            data = await self.backup.fetch(endpoint)
        except GhibliBackupError as exc:
            logger.error("client.local.failed type=%s detail=%s", exc.__class__.__name__, str(exc))
            raise BackupUnavailableError() from exc
        logger.info("client.local.success endpoint=%s", endpoint)
        return data

    def _is_plain_not_found(self, exc: SourceError) -> bool:
        if self.not_found_triggers_fallback:
            return False
        return isinstance(exc, SourceStatusError) and exc.is_not_found

    def reset_mode(self) -> None:
        self.state.reset()
        logger.info("client.mode.reset mode=%s", self.state.mode.value)

    def force_local_mode(self) -> None:
        self.state.force_local()
        logger.info("client.mode.forced mode=%s", self.state.mode.value)

    def get_mode(self) -> str:
        return self.state.mode.value
