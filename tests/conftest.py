import json
from pathlib import Path

import pytest

from talk_samples import TALK_SOURCE


def _eval_ts_string(literal: str) -> str:
    if literal.startswith('"'):
        return json.loads(literal)

    assert literal.startswith("`") and literal.endswith("`"), literal
    inner = literal[1:-1]
    out: list[str] = []
    idx = 0
    while idx < len(inner):
        char = inner[idx]
        if char == "\\":
            out.append(inner[idx + 1])
            idx += 2
            continue
        assert char != "`", "unescaped backtick inside template literal"
        assert inner[idx : idx + 2] != "${", "live interpolation inside template literal"
        out.append(char)
        idx += 1
    return "".join(out)


@pytest.fixture
def ts_eval():
    return _eval_ts_string


@pytest.fixture
def talk_file(tmp_path: Path) -> Path:
    path = tmp_path / "talk-data.ts"
    path.write_bytes(TALK_SOURCE.encode("utf-8"))
    return path


@pytest.fixture
def quote_kite() -> dict:
    return {
        "id": "0b7c1c9e-8a44-4a8e-9a51-3f0f5e4f7d11",
        "contentBlocks": [
            {
                "id": "5b0d8f0e-2f55-4d55-8f2f-64f5e3f3a0aa",
                "type": "h1",
                "content": 'He said "hi"\nand left',
                "position": {"x": 5, "y": 5, "width": 10, "height": 10},
            }
        ],
        "createdAt": "2026-01-01T00:00:00.000Z",
    }
