#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
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
from ghibli_backup.models.records import RESOURCE_KINDS  # noqa: E402
from ghibli_backup.service.crawler import BackupCrawler  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snapshot the Ghibli API and its images into the local backup.")
    parser.add_argument(
        "--kinds",
        default=",".join(RESOURCE_KINDS),
        help="Comma separated resource kinds to crawl.",
    )
    parser.add_argument("--backup-dir", default="", help="Override BACKUP_DIR.")
    parser.add_argument("--images-dir", default="", help="Override IMAGES_DIR.")
    return parser.parse_args()


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    args = parse_args()
    settings = get_settings()
    updates: dict[str, Path] = {}
    if args.backup_dir:
        updates["backup_dir"] = Path(args.backup_dir)
    if args.images_dir:
        updates["images_dir"] = Path(args.images_dir)
    if updates:
        settings = settings.model_copy(update=updates)

    kinds = tuple(kind.strip() for kind in args.kinds.split(",") if kind.strip())
    unknown = [kind for kind in kinds if kind not in RESOURCE_KINDS]
    if unknown:
        raise SystemExit(f"Unknown resource kinds: {', '.join(unknown)}")

    summary = asyncio.run(BackupCrawler(settings).crawl(kinds))
    print("Backup summary")
    for kind, count in summary.counts.items():
        print(f"  {kind}: {count} items")
    print(f"  images: {summary.image_count} files")
    if summary.failed_kinds:
        print(f"  failed: {', '.join(summary.failed_kinds)}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
