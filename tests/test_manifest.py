from __future__ import annotations

from pathlib import Path

from csimplegen.manifest import GENERATED_MSG, RESOURCE_FILE, ManifestBuilder
from csimplegen.writer import OutputWriter


def test_render_sorts_and_deduplicates() -> None:
    content = ManifestBuilder().render(["b.B$$Csimple1", "a.A$$Csimple2", "a.A$$Csimple1", "b.B$$Csimple1"])

    assert content == (
        f"# {GENERATED_MSG}\n"
        "a.A$$Csimple1\n"
        "a.A$$Csimple2\n"
        "b.B$$Csimple1\n"
    )


def test_render_empty_returns_none() -> None:
    assert ManifestBuilder().render([]) is None


def test_write_places_manifest_under_resource_dir(tmp_path: Path) -> None:
    path = ManifestBuilder().write(tmp_path, ["com.example.MyRoutes$$Csimple1"])

    assert path == tmp_path / RESOURCE_FILE
    assert path.read_text(encoding="utf-8").splitlines() == [
        "# Generated by camel build tools - do NOT edit this file!",
        "com.example.MyRoutes$$Csimple1",
    ]


def test_write_without_identities_creates_nothing(tmp_path: Path) -> None:
    writer = OutputWriter()

    assert ManifestBuilder(writer).write(tmp_path, []) is None
    assert writer.written == []
    assert list(tmp_path.iterdir()) == []
