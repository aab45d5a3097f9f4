#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _bootstrap_pythonpath() -> None:
    import sys

    src = _repo_root() / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


_bootstrap_pythonpath()

from ghibli_backup.config import get_settings  # noqa: E402
from ghibli_backup.errors import GhibliBackupError  # noqa: E402
from ghibli_backup.retrieval.fallback import FallbackClient  # noqa: E402
from ghibli_backup.store.backup import BackupStore  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch one endpoint, falling back to the local backup.")
    parser.add_argument("endpoints", nargs="+", help="Endpoints such as films or /films/<id>.")
    parser.add_argument(
        "--in-process",
        action="store_true",
        help="Answer fallbacks from BACKUP_DIR directly instead of the local server.",
    )
    parser.add_argument("--force-local", action="store_true", help="Skip the external API entirely.")
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    store = BackupStore(settings.backup_dir) if args.in_process else None
    client = FallbackClient.from_settings(settings, store=store)
    if args.force_local:
        client.force_local_mode()
    for endpoint in args.endpoints:
        try:
            data = await client.fetch_resource(endpoint)
        except GhibliBackupError as exc:
            print(f"{endpoint}: {exc}")
            return 1
        print(json.dumps(data, ensure_ascii=False, indent=2))
    print(f"mode={client.get_mode()}")
    return 0


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    return asyncio.run(run(parse_args()))


if __name__ == "__main__":
    raise SystemExit(main())
