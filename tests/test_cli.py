import json

import pytest

from kitesync import cli
from kitesync.services import sync_client
from talk_samples import TALK_SOURCE


@pytest.fixture
def state_file(tmp_path, quote_kite):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"kites": [quote_kite], "currentKiteIndex": 0, "currentTheme": "sky"}), encoding="utf-8")
    return path


def test_sync_command_writes_target(state_file, talk_file, capsys):
    code = cli.main(["sync", "--input", str(state_file), "--target", str(talk_file)])

    assert code == 0
    assert "Wrote 1 kites" in capsys.readouterr().out
    assert 'He said "hi"' in talk_file.read_text(encoding="utf-8")


def test_sync_command_accepts_bare_list(tmp_path, talk_file, quote_kite):
    state = tmp_path / "kites.json"
    state.write_text(json.dumps([quote_kite]), encoding="utf-8")

    assert cli.main(["sync", "--input", str(state), "--target", str(talk_file)]) == 0


def test_sync_command_dry_run_prints_region(state_file, talk_file, capsys):
    code = cli.main(["sync", "--input", str(state_file), "--target", str(talk_file), "--dry-run"])

    assert code == 0
    assert "blocks: [" in capsys.readouterr().out
    assert talk_file.read_text(encoding="utf-8") == TALK_SOURCE


def test_sync_command_reports_missing_marker(state_file, tmp_path, capsys):
    target = tmp_path / "other.ts"
    target.write_text("export const NOTHING = [];\n", encoding="utf-8")

    code = cli.main(["sync", "--input", str(state_file), "--target", str(target)])

    assert code == 1
    assert capsys.readouterr().err.startswith("region_not_found:")


def test_sync_command_rejects_invalid_json(tmp_path, talk_file, capsys):
    state = tmp_path / "broken.json"
    state.write_text("{not json", encoding="utf-8")

    assert cli.main(["sync", "--input", str(state), "--target", str(talk_file)]) == 1
    assert capsys.readouterr().err.startswith("invalid_input:")


class _FakeResponse:
    status_code = 200

    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self._payload


def test_push_command_posts_kites(state_file, monkeypatch, capsys, quote_kite):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return _FakeResponse({"success": True, "kites": 1, "changed": True})

    monkeypatch.setattr(sync_client.requests, "post", fake_post)

    code = cli.main(["push", "--input", str(state_file), "--url", "http://sync.local:9000/"])

    assert code == 0
    url, body, timeout = calls[0]
    assert url == "http://sync.local:9000/api/sync-talk-data"
    assert body == {"kites": [quote_kite]}
    assert timeout == 30
    assert json.loads(capsys.readouterr().out)["kites"] == 1


def test_push_command_preview_url(state_file, monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append(url)
        return _FakeResponse({"kites": 1, "changed": True, "region": ""})

    monkeypatch.setattr(sync_client.requests, "post", fake_post)

    assert cli.main(["push", "--input", str(state_file), "--url", "http://sync.local", "--preview"]) == 0
    assert calls == ["http://sync.local/api/sync-talk-data/preview"]


def test_push_command_rejects_scalar_state(tmp_path, monkeypatch, capsys):
    state = tmp_path / "state.json"
    state.write_text("42", encoding="utf-8")
    monkeypatch.setattr(sync_client.requests, "post", lambda *args, **kwargs: pytest.fail("no request expected"))

    assert cli.main(["push", "--input", str(state)]) == 1
    assert capsys.readouterr().err.startswith("invalid_input:")


def test_sync_command_rejects_string_state(tmp_path, talk_file, capsys):
    state = tmp_path / "state.json"
    state.write_text('"kites"', encoding="utf-8")

    assert cli.main(["sync", "--input", str(state), "--target", str(talk_file)]) == 1
    assert capsys.readouterr().err.startswith("invalid_input:")
    assert talk_file.read_text(encoding="utf-8") == TALK_SOURCE


def test_sync_command_rejects_non_utf8_input(tmp_path, talk_file, capsys):
    state = tmp_path / "state.json"
    state.write_bytes(b"\xff\xfe{}")

    assert cli.main(["sync", "--input", str(state), "--target", str(talk_file)]) == 1
    assert capsys.readouterr().err.startswith("invalid_input:")
    assert talk_file.read_text(encoding="utf-8") == TALK_SOURCE
