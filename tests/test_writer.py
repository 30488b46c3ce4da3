from __future__ import annotations

import os
from pathlib import Path

import pytest

from csimplegen.writer import OutputWriteError, OutputWriter


def test_update_creates_parents_and_records_path(tmp_path: Path) -> None:
    writer = OutputWriter()
    target = tmp_path / "a" / "b" / "Out.java"

    assert writer.update(target, "class Out {}\n") is True
    assert target.read_text(encoding="utf-8") == "class Out {}\n"
    assert writer.written == [target]


def test_update_skips_identical_content(tmp_path: Path) -> None:
    target = tmp_path / "Out.java"
    target.write_bytes(b"same\n")
    os.utime(target, ns=(2_000_000_000, 2_000_000_000))
    writer = OutputWriter()

    assert writer.update(target, "same\n") is False
    assert writer.written == []
    assert target.stat().st_mtime_ns == 2_000_000_000


def test_update_rewrites_changed_content(tmp_path: Path) -> None:
    target = tmp_path / "Out.java"
    target.write_text("old\n", encoding="utf-8")

    assert OutputWriter().update(target, "new\n") is True
    assert target.read_text(encoding="utf-8") == "new\n"


def test_dry_run_records_without_writing(tmp_path: Path) -> None:
    writer = OutputWriter(dry_run=True)
    target = tmp_path / "gen" / "Out.java"

    assert writer.update(target, "content\n") is True
    assert writer.written == [target]
    assert not target.exists()
    assert not target.parent.exists()


def test_update_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")

    with pytest.raises(OutputWriteError, match="Cannot write"):
        OutputWriter().update(blocker / "Out.java", "content\n")
