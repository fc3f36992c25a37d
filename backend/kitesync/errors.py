from __future__ import annotations


class TalkSyncError(Exception):
    code = "talk_sync_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_detail(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class InvalidInput(TalkSyncError, ValueError):
    code = "invalid_input"


class RegionNotFound(TalkSyncError, LookupError):
    code = "region_not_found"


class IOFailure(TalkSyncError, OSError):
    code = "io_failure"
