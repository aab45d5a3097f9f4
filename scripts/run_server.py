#!/usr/bin/env python3
from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _bootstrap_pythonpath() -> None:
    import sys

    src = _repo_root() / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


_bootstrap_pythonpath()

from ghibli_backup.config import get_settings  # noqa: E402


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the site and the backup API.")
    parser.add_argument("--host", default=settings.server_host)
    parser.add_argument("--port", type=int, default=settings.server_port)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    uvicorn.run("ghibli_backup.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
