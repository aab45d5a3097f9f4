import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from ghibli_backup.api.schemas import ApiConfig, ErrorResponse
from ghibli_backup.config import Settings, get_settings
from ghibli_backup.errors import InvalidEndpointError, SourceStatusError
from ghibli_backup.providers.sources.local import resolve
from ghibli_backup.store.backup import BackupStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)
LOCAL_API_PREFIX = "/api"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(settings: Settings | None = None, store: BackupStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    store = store or BackupStore(settings.backup_dir)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        _announce(settings, store)
        yield

    app = FastAPI(title="ghibli-backup", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"status": "ok"}

    @app.get("/api-config.js")
    async def api_config() -> Response:
        if settings.use_local_api:
            config = ApiConfig(mode="local", baseUrl=LOCAL_API_PREFIX)
        else:
            config = ApiConfig(mode="external", baseUrl=settings.external_api_base_url)
        return Response(content=config.to_script(), media_type="text/javascript")

    @app.get(LOCAL_API_PREFIX + "/{kind}")
    async def backup_collection(kind: str, q: str | None = None) -> Any:
        response = _lookup(store, f"/{kind}")
        if q is None or isinstance(response, Response):
            return response
        return store.search(kind, q)

    @app.get(LOCAL_API_PREFIX + "/{kind}/{item_id}")
    async def backup_item(kind: str, item_id: str) -> Any:
        return _lookup(store, f"/{kind}/{item_id}")

    if settings.static_root.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_root, html=True), name="static")
    else:
        logger.info("server.static skipped reason=missing root=%s", settings.static_root)

    return app


def _announce(settings: Settings, store: BackupStore) -> None:
    if settings.use_local_api:
        logger.info("server.mode mode=local api=%s/* images=/api-backup/images/*", LOCAL_API_PREFIX)
    else:
        logger.info("server.mode mode=external base_url=%s", settings.external_api_base_url)
    if settings.backup_dir.is_dir():
        logger.info("server.backup available=true dir=%s kinds=%s", settings.backup_dir, store.loaded_kinds)
    else:
        logger.warning("server.backup available=false dir=%s hint=run scripts/crawl_backup.py", settings.backup_dir)


def _lookup(store: BackupStore, endpoint: str) -> Any:
    try:
        return resolve(store, endpoint)
    except SourceStatusError as exc:
        return _error(exc.status_code, str(exc))
    except InvalidEndpointError as exc:
        return _error(404, str(exc))


app = create_app()
