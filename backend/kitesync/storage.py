import os
import shutil
import tempfile
from pathlib import Path
from threading import Lock

_PATH_LOCKS: dict[str, Lock] = {}
_PATH_LOCKS_GUARD = Lock()


def path_lock(path: Path) -> Lock:
    """Return the process-wide writer lock for ``path``."""
    key = str(Path(path).resolve())
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = Lock()
            _PATH_LOCKS[key] = lock
        return lock


def read_text_exact(path: Path) -> str:
    # Bytes are decoded as-is so CRLF line endings survive the round trip.
    return Path(path).read_bytes().decode("utf-8")


def write_text_atomic(path: Path, text: str) -> int:
    path = Path(path)
    payload = text.encode("utf-8")
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            shutil.copymode(path, temp_path)
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    return len(payload)
