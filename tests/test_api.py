import json
from pathlib import Path

from fastapi.testclient import TestClient

from ghibli_backup.api.app import create_app
from ghibli_backup.config import Settings
from ghibli_backup.store.backup import BackupStore

FILMS = [
    {"id": "f1", "title": "Castle in the Sky"},
    {"id": "f2", "title": "Porco Rosso"},
]


def _client(tmp_path: Path, use_local_api: bool = False) -> TestClient:
    backup_dir = tmp_path / "api-backup"
    backup_dir.mkdir()
    (backup_dir / "films.json").write_text(json.dumps(FILMS), encoding="utf-8")
    (backup_dir / "people.json").write_text("[oops", encoding="utf-8")

    static_root = tmp_path / "public"
    images = static_root / "api-backup" / "images"
    images.mkdir(parents=True)
    (static_root / "index.html").write_text("<h1>Ghibli</h1>", encoding="utf-8")
    (images / "films_f1.webp").write_bytes(b"RIFF0000WEBP")

    settings = Settings(
        BACKUP_DIR=str(backup_dir),
        STATIC_ROOT=str(static_root),
        USE_LOCAL_API=use_local_api,
        EXTERNAL_API_BASE_URL="https://ghibli.test",
    )
    return TestClient(create_app(settings, BackupStore(settings.backup_dir)))


def test_healthz(tmp_path: Path) -> None:
    resp = _client(tmp_path).get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_collection_and_item(tmp_path: Path) -> None:
    client = _client(tmp_path)

    resp = client.get("/api/films")
    assert resp.status_code == 200
    assert resp.json() == FILMS

    resp = client.get("/api/films/f2")
    assert resp.status_code == 200
    assert resp.json() == FILMS[1]


def test_search_query(tmp_path: Path) -> None:
    resp = _client(tmp_path).get("/api/films", params={"q": "PORCO"})
    assert resp.status_code == 200
    assert resp.json() == [FILMS[1]]


def test_missing_backup_and_missing_item_are_404(tmp_path: Path) -> None:
    client = _client(tmp_path)

    resp = client.get("/api/vehicles")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Backup data not found"}

    resp = client.get("/api/films/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Item not found"}


def test_unreadable_backup_is_500(tmp_path: Path) -> None:
    client = _client(tmp_path)

    resp = client.get("/api/people")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Error reading backup data"}

    resp = client.get("/api/people", params={"q": "x"})
    assert resp.status_code == 500


def test_api_config_external_mode(tmp_path: Path) -> None:
    resp = _client(tmp_path).get("/api-config.js")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/javascript")
    assert '"mode":"external"' in resp.text
    assert '"baseUrl":"https://ghibli.test"' in resp.text


def test_api_config_local_mode(tmp_path: Path) -> None:
    resp = _client(tmp_path, use_local_api=True).get("/api-config.js")
    assert resp.text.startswith("window.API_CONFIG = ")
    assert '"mode":"local"' in resp.text
    assert '"baseUrl":"/api"' in resp.text


def test_static_files(tmp_path: Path) -> None:
    client = _client(tmp_path)

    resp = client.get("/")
    assert resp.status_code == 200
    assert "<h1>Ghibli</h1>" in resp.text

    resp = client.get("/api-backup/images/films_f1.webp")
    assert resp.status_code == 200
    assert resp.content == b"RIFF0000WEBP"

    resp = client.get("/missing.html")
    assert resp.status_code == 404
