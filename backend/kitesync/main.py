from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from kitesync.config import settings
from kitesync.errors import InvalidInput, TalkSyncError
from kitesync.schemas import SyncTalkDataOut, SyncTalkDataPreviewOut
from kitesync.services.talk_sync_service import parse_kites_payload, sync_talk_data

logger = logging.getLogger("kitesync.api")

app = FastAPI(title=settings.app_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _configure_runtime_logging() -> None:
    level = getattr(logging, str(settings.log_level).upper(), logging.INFO)
    logging.getLogger("kitesync").setLevel(level)
    logging.getLogger("kitesync.sync").setLevel(level)
    logging.getLogger("kitesync.api").setLevel(level)


@app.on_event("startup")
def on_startup():
    _configure_runtime_logging()
    logger.info(
        "talk_sync_ready path=%s enabled=%s",
        settings.talk_data_path,
        settings.talk_sync_enabled,
    )


def _status_for(exc: TalkSyncError) -> int:
    if isinstance(exc, InvalidInput):
        return 400
    return 500


def _run_sync(payload: Any, *, dry_run: bool):
    if not settings.talk_sync_enabled:
        raise HTTPException(status_code=403, detail="Talk data sync is disabled")

    try:
        kites = parse_kites_payload(payload)
        return sync_talk_data(kites, dry_run=dry_run)
    except TalkSyncError as exc:
        preview = exc.message[: settings.log_preview_chars]
        logger.error("sync_talk_data_failed code=%s message=%s", exc.code, preview)
        raise HTTPException(status_code=_status_for(exc), detail=exc.as_detail()) from exc


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post(f"{settings.api_prefix}/sync-talk-data", response_model=SyncTalkDataOut)
def sync_talk(payload: Any = Body(...)):
    result = _run_sync(payload, dry_run=False)
    return SyncTalkDataOut(kites=result.kites, changed=result.changed)


@app.post(f"{settings.api_prefix}/sync-talk-data/preview", response_model=SyncTalkDataPreviewOut)
def preview_sync_talk(payload: Any = Body(...)):
    result = _run_sync(payload, dry_run=True)
    return SyncTalkDataPreviewOut(kites=result.kites, changed=result.changed, region=result.region)
