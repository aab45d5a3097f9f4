import io
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
from PIL import Image
from pydantic import ValidationError

from ghibli_backup.config import Settings
from ghibli_backup.models.records import RESOURCE_KINDS, parse_record
from ghibli_backup.store.backup import COMPLETE_BACKUP_FILENAME

logger = logging.getLogger(__name__)

IMAGE_EXTENSION = ".webp"
IMAGE_URL_PREFIX = "api-backup/images"
LOCAL_API_PREFIX = "/api"
TMDB_PAGE_PREFIX = "https://www.themoviedb.org/t/p"
TMDB_IMAGE_PREFIX = "https://image.tmdb.org/t/p"
_UNSAFE_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


@dataclass
class CrawlSummary:
    counts: dict[str, int] = field(default_factory=dict)
    image_count: int = 0
    failed_kinds: list[str] = field(default_factory=list)


def sanitize_filename(text: str) -> str:
    return _UNSAFE_CHARS.sub("_", text).lower()


def fix_tmdb_url(url: str) -> str:
    """Point TMDB page links at the image host so the download is not redirected."""
    return url.replace(TMDB_PAGE_PREFIX, TMDB_IMAGE_PREFIX)


def image_filename(prefix: str, item: dict[str, Any]) -> str:
    key = str(item.get("id") or item.get("name") or item.get("title") or "")
    return f"{prefix}_{sanitize_filename(key)}{IMAGE_EXTENSION}"


class BackupCrawler:
    """One-shot snapshot of the external API into the backup directory."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport
        self.base_url = settings.external_api_base_url
        self.backup_dir = Path(settings.backup_dir)
        self.images_dir = Path(settings.images_dir)

    async def crawl(self, kinds: tuple[str, ...] = RESOURCE_KINDS) -> CrawlSummary:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        self.images_dir.mkdir(parents=True, exist_ok=True)
        logger.info("crawl.start base_url=%s kinds=%s", self.base_url, list(kinds))

        summary = CrawlSummary()
        all_data: dict[str, list[dict[str, Any]]] = {}
        async with httpx.AsyncClient(
            timeout=self.settings.crawl_timeout_seconds,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            for kind in kinds:
                try:
                    items = await self._fetch_collection(client, kind)
                    logger.info("crawl.fetched kind=%s items=%d", kind, len(items))
                    processed = [await self._process_item(client, kind, item) for item in items]
                    self._write_json(self.backup_dir / f"{kind}.json", processed)
                except (httpx.HTTPError, ValueError, OSError) as exc:
                    logger.error("crawl.kind.failed kind=%s type=%s detail=%s", kind, exc.__class__.__name__, str(exc))
                    summary.failed_kinds.append(kind)
                    continue
                all_data[kind] = processed
                summary.counts[kind] = len(processed)
                logger.info("crawl.saved kind=%s file=%s.json", kind, kind)

        self._write_json(self.backup_dir / COMPLETE_BACKUP_FILENAME, all_data)
        summary.image_count = sum(1 for path in self.images_dir.iterdir() if path.is_file())
        logger.info(
            "crawl.done counts=%s images=%d failed=%s backup_dir=%s images_dir=%s",
            summary.counts,
            summary.image_count,
            summary.failed_kinds,
            self.backup_dir,
            self.images_dir,
        )
        return summary

    async def _fetch_collection(self, client: httpx.AsyncClient, kind: str) -> list[dict[str, Any]]:
        http_response = await client.get(f"{self.base_url}/{kind}")
        http_response.raise_for_status()
        payload = http_response.json()
        if not isinstance(payload, list):
            raise ValueError(f"expected a JSON array for {kind}")
        self._check_records(kind, payload)
        return payload

    @staticmethod
    def _check_records(kind: str, items: list[Any]) -> None:
        """Log records that do not fit the kind's model; they are still saved as-is."""
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                logger.warning("crawl.record.invalid kind=%s index=%d detail=not an object", kind, index)
                continue
            try:
                parse_record(kind, item)
            except ValidationError as exc:
                logger.warning(
                    "crawl.record.invalid kind=%s index=%d id=%s errors=%d",
                    kind,
                    index,
                    item.get("id"),
                    exc.error_count(),
                )

    async def _process_item(self, client: httpx.AsyncClient, kind: str, item: Any) -> Any:
        if not isinstance(item, dict):
            return item
        processed = {key: self._localize(value) for key, value in item.items()}
        label = item.get("name") or item.get("title") or item.get("id")

        if item.get("image"):
            filename = image_filename(kind, item)
            if await self._download_image(client, str(item["image"]), filename, label):
                processed["image"] = f"{IMAGE_URL_PREFIX}/{filename}"

        if item.get("movie_banner"):
            filename = image_filename("banner", item)
            if await self._download_image(client, str(item["movie_banner"]), filename, label):
                processed["movie_banner"] = f"{IMAGE_URL_PREFIX}/{filename}"

        return processed

    def _localize(self, value: Any) -> Any:
        prefix = self.base_url + "/"
        if isinstance(value, str) and value.startswith(prefix):
            return LOCAL_API_PREFIX + value[len(self.base_url):]
        if isinstance(value, list):
            return [self._localize(entry) if isinstance(entry, str) else entry for entry in value]
        return value

    async def _download_image(self, client: httpx.AsyncClient, url: str, filename: str, label: Any) -> bool:
        try:
            http_response = await client.get(fix_tmdb_url(url))
            http_response.raise_for_status()
            self._save_webp(http_response.content, self.images_dir / filename)
        except (httpx.HTTPError, httpx.InvalidURL, OSError, Image.DecompressionBombError) as exc:
            logger.warning("crawl.image.failed item=%s url=%s detail=%s", label, url, str(exc))
            return False
        logger.info("crawl.image.saved file=%s", filename)
        return True

    def _save_webp(self, content: bytes, output_path: Path) -> None:
        with Image.open(io.BytesIO(content)) as image:
            if image.mode not in ("RGB", "RGBA"):
                image = image.convert("RGBA")
            image.save(output_path, format="WEBP", quality=self.settings.image_quality)

    @staticmethod
    def _write_json(path: Path, payload: Any) -> None:
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
