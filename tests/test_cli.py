"""Tests for the command line client."""

import json
from pathlib import Path

import pytest

from padpool import cli
from padpool.domain.pool_rules import SINGLE_POOL_IDENTIFIER
from padpool.pool_store import PoolStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "config.json").write_text(
        json.dumps({"daysToKeep": 2, "serverDataMode": "single"}), encoding="utf-8"
    )
    return tmp_path


def run(workspace: Path, *args: str) -> int:
    return cli.main(
        ["--config", str(workspace / "config.json"), "--data-dir", str(workspace / "data"), *args]
    )


def test_encode_then_decode(workspace: Path, capsys: pytest.CaptureFixture) -> None:
    PoolStore(workspace / "data").create(SINGLE_POOL_IDENTIFIER)
    original = workspace / "letter.txt"
    original.write_bytes("Dear pool,\n".encode("utf-8") * 20)

    assert run(workspace, "encode", str(original), "--output", str(workspace)) == 0
    key_path = workspace / "letter_key.json"
    key = json.loads(key_path.read_text(encoding="utf-8"))
    assert key["fileExtension"] == "txt"
    assert "valid indefinitely" in capsys.readouterr().out

    out_dir = workspace / "out"
    out_dir.mkdir()
    assert run(workspace, "decode", str(key_path), "--output", str(out_dir)) == 0
    assert (out_dir / "reconstructed_file.txt").read_bytes() == original.read_bytes()


def test_encode_without_pool_fails(workspace: Path) -> None:
    original = workspace / "a.txt"
    original.write_bytes(b"abc")
    assert run(workspace, "encode", str(original), "--output", str(workspace)) == 1


def test_decode_invalid_key_fails(workspace: Path) -> None:
    key_path = workspace / "bad_key.json"
    key_path.write_text('{"date": "2024-06-01"}', encoding="utf-8")
    assert run(workspace, "decode", str(key_path)) == 1


def test_rotate_creates_pool(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    created = []
    monkeypatch.setattr(PoolStore, "create", lambda self, identifier: created.append(identifier))
    assert run(workspace, "rotate") == 0
    assert created == [SINGLE_POOL_IDENTIFIER]
