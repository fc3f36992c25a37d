from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from kitesync.config import settings
from kitesync.errors import InvalidInput, IOFailure, RegionNotFound
from kitesync.schemas import Kite
from kitesync.services.kite_serializer import render_kites
from kitesync.services.region_service import TalkRegion, locate_region, splice_region
from kitesync.services.ts_literals import encode_string
from kitesync.storage import path_lock, read_text_exact, write_text_atomic

logger = logging.getLogger("kitesync.sync")

_KITES_ADAPTER = TypeAdapter(list[Kite])


@dataclass
class SyncResult:
    path: Path
    kites: int
    changed: bool
    written: bool
    region: str
    source: str


def _describe_loc(loc: tuple) -> str:
    # (1, "contentBlocks", 0, "content") -> "kite 1 block 0 content"
    items = list(loc)
    parts: list[str] = []
    if items and isinstance(items[0], int):
        parts.append(f"kite {items.pop(0)}")
    if len(items) >= 2 and items[0] in ("contentBlocks", "blocks") and isinstance(items[1], int):
        parts.append(f"block {items[1]}")
        items = items[2:]
    elif items and items[0] == "speakerNotes":
        parts.append("speaker notes")
        items = items[1:]
    parts.extend(str(item) for item in items)
    return " ".join(parts)


def _format_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for row in exc.errors()[:5]:
        loc = _describe_loc(tuple(row.get("loc", ())))
        parts.append(f"{loc or 'kites'}: {row.get('msg', 'invalid value')}")
    return "; ".join(parts)


def parse_kites(raw: Any) -> list[Kite]:
    if not isinstance(raw, list):
        raise InvalidInput("Missing kites array")
    try:
        return _KITES_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise InvalidInput(f"Invalid kites payload: {_format_validation_error(exc)}") from exc


def parse_kites_payload(payload: Any) -> list[Kite]:
    """Pull the ``kites`` list out of a request body or saved app state."""
    if not isinstance(payload, dict):
        raise InvalidInput("Request body must be an object with a kites array")
    return parse_kites(payload.get("kites"))


def _iter_kite_texts(kites: list[Kite]) -> Iterator[tuple[str, str]]:
    for kite_idx, kite in enumerate(kites):
        for block_idx, block in enumerate(kite.contentBlocks):
            yield f"kite {kite_idx} block {block_idx}", block.content
        if kite.speakerNotes:
            yield f"kite {kite_idx} speaker notes", kite.speakerNotes


def _is_utf8_encodable(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def render_region(kites: list[Kite]) -> str:
    try:
        body = render_kites(kites)
    except ValueError as exc:
        raise InvalidInput(str(exc)) from exc

    if not _is_utf8_encodable(body):
        where = next((label for label, text in _iter_kite_texts(kites) if not _is_utf8_encodable(text)), "kite style")
        raise InvalidInput(f"Content of {where} is not valid UTF-8 text (unpaired surrogate)")
    return body


def _region_breaker(kites: list[Kite], end_marker: str) -> str:
    for label, text in _iter_kite_texts(kites):
        lines = encode_string(text).split("\n")[1:]
        if any(line.rstrip("\r") == end_marker for line in lines):
            return label
    return "kite content"


def _splice_body(source: str, kites: list[Kite], body: str, start_marker: str, end_marker: str) -> str:
    region = locate_region(source, start_marker, end_marker)
    new_source = splice_region(source, region, body)

    # A template literal line equal to the end marker would cut the region short on the next sync.
    expected = TalkRegion(start=region.start, end=region.start + len(body) + 2)
    if locate_region(new_source, start_marker, end_marker) != expected:
        where = _region_breaker(kites, end_marker)
        raise InvalidInput(
            f"Content of {where} has a line consisting of {end_marker!r}, which would end the generated region early"
        )
    return new_source


def apply_kites(
    source: str,
    kites: list[Kite],
    *,
    start_marker: str | None = None,
    end_marker: str | None = None,
) -> tuple[str, str]:
    """Return ``(new_source, region_body)`` with the kites array body regenerated."""
    start_marker = start_marker or settings.talk_array_start
    end_marker = end_marker or settings.talk_array_end

    body = render_region(kites)
    return _splice_body(source, kites, body, start_marker, end_marker), body


def _read_source(path: Path) -> str:
    try:
        return read_text_exact(path)
    except (OSError, UnicodeError) as exc:
        logger.warning("talk_sync_failed path=%s code=%s reason=%s", path, IOFailure.code, exc)
        raise IOFailure(f"Could not read talk data file {path}: {exc}") from exc


def sync_talk_data(
    kites: list[Kite],
    *,
    path: Path | None = None,
    start_marker: str | None = None,
    end_marker: str | None = None,
    dry_run: bool = False,
) -> SyncResult:
    target = Path(path or settings.talk_data_path)
    start_marker = start_marker or settings.talk_array_start
    end_marker = end_marker or settings.talk_array_end

    try:
        body = render_region(kites)
    except InvalidInput as exc:
        logger.warning("talk_sync_failed path=%s code=%s reason=%s", target, exc.code, exc.message)
        raise

    with path_lock(target):
        source = _read_source(target)
        try:
            new_source = _splice_body(source, kites, body, start_marker, end_marker)
        except (RegionNotFound, InvalidInput) as exc:
            logger.warning("talk_sync_failed path=%s code=%s reason=%s", target, exc.code, exc.message)
            raise

        changed = new_source != source
        if dry_run or not changed:
            logger.info(
                "talk_sync_%s path=%s kites=%d",
                "preview" if dry_run else "unchanged",
                target,
                len(kites),
            )
            return SyncResult(
                path=target,
                kites=len(kites),
                changed=changed,
                written=False,
                region=body,
                source=new_source,
            )

        try:
            written_bytes = write_text_atomic(target, new_source)
        except (OSError, UnicodeError) as exc:
            logger.warning("talk_sync_failed path=%s code=%s reason=%s", target, IOFailure.code, exc)
            raise IOFailure(f"Could not write talk data file {target}: {exc}") from exc

    logger.info("talk_sync_written path=%s kites=%d bytes=%d", target, len(kites), written_bytes)
    return SyncResult(
        path=target,
        kites=len(kites),
        changed=True,
        written=True,
        region=body,
        source=new_source,
    )
