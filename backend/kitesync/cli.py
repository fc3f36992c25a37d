#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import requests

from kitesync.config import settings
from kitesync.errors import InvalidInput, TalkSyncError
from kitesync.services.sync_client import push_kites
from kitesync.services.talk_sync_service import parse_kites_payload, sync_talk_data


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write editor kites back into the talk data source file.")
    sub = parser.add_subparsers(dest="command", required=True)

    sync = sub.add_parser("sync", help="Rewrite the talk data file from a saved app state JSON.")
    sync.add_argument("--input", type=Path, required=True, help="App state JSON with a 'kites' array.")
    sync.add_argument(
        "--target",
        type=Path,
        default=None,
        help=f"Talk data file to rewrite (default: {settings.talk_data_path})",
    )
    sync.add_argument("--dry-run", action="store_true", help="Print the generated array body without writing.")

    push = sub.add_parser("push", help="Send a saved app state to a running sync API.")
    push.add_argument("--input", type=Path, required=True, help="App state JSON with a 'kites' array.")
    push.add_argument("--url", default=None, help=f"API base URL (default: {settings.sync_server_url})")
    push.add_argument("--preview", action="store_true", help="Ask the API for a preview instead of a write.")

    serve = sub.add_parser("serve", help="Run the sync API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _load_state(path: Path) -> dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise InvalidInput(f"{path} is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidInput(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(payload, list):
        return {"kites": payload}
    if not isinstance(payload, dict):
        raise InvalidInput(f"{path} must hold an app state object or a kites array")
    return payload


def _run_sync(args: argparse.Namespace) -> int:
    kites = parse_kites_payload(_load_state(args.input))
    result = sync_talk_data(kites, path=args.target, dry_run=args.dry_run)
    if args.dry_run:
        print(result.region)
        return 0
    if result.written:
        print(f"Wrote {result.kites} kites to {result.path}")
    else:
        print(f"{result.path} already up to date ({result.kites} kites)")
    return 0


def _run_push(args: argparse.Namespace) -> int:
    state = _load_state(args.input)
    kites = state.get("kites")
    if not isinstance(kites, list):
        raise InvalidInput("Missing kites array")
    reply = push_kites(kites, base_url=args.url, preview=args.preview)
    print(json.dumps(reply, indent=2))
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("kitesync.main:app", host=args.host, port=args.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    handlers = {"sync": _run_sync, "push": _run_push, "serve": _run_serve}
    try:
        return handlers[args.command](args)
    except TalkSyncError as exc:
        print(f"{exc.code}: {exc.message}", file=sys.stderr)
        return 1
    except requests.RequestException as exc:
        print(f"push failed: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"io_failure: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
