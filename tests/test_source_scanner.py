"""Tests for route source discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from csimplegen.source_scanner import FilePattern, SourceScanner, compile_patterns

from tests._fixtures.repo_builder import RepoBuilder


def _layout(repo_builder: RepoBuilder) -> Path:
    repo_builder.write(
        {
            "src/main/java/com/example/OrderRoutes.java": "class OrderRoutes {}\n",
            "src/main/java/com/example/legacy/OldRoutes.java": "class OldRoutes {}\n",
            "src/main/java/com/example/Readme.md": "docs\n",
            "src/main/resources/camel/routes.xml": "<routes/>\n",
            "src/main/resources/.git/ignored.xml": "<routes/>\n",
            "src/test/java/com/example/OrderRoutesTest.java": "class OrderRoutesTest {}\n",
        }
    )
    return repo_builder.path()


def _names(files) -> list[str]:
    return [source.relative for source in files]


def _roots(root: Path) -> list[Path]:
    return [root / "src" / "main" / "java", root / "src" / "main" / "resources"]


def test_scan_partitions_by_dialect(repo_builder: RepoBuilder) -> None:
    root = _layout(repo_builder)

    result = SourceScanner().scan(_roots(root))

    assert _names(result.code) == [
        "com/example/OrderRoutes.java",
        "com/example/legacy/OldRoutes.java",
    ]
    assert _names(result.documents) == ["camel/routes.xml"]
    assert len(result) == 3


def test_scan_skips_missing_roots_and_duplicates(repo_builder: RepoBuilder) -> None:
    root = _layout(repo_builder)
    roots = _roots(root) + [root / "src" / "main" / "java", root / "nowhere"]

    result = SourceScanner().scan(roots)

    assert len(result) == 3


def test_scan_includes_tests_only_when_requested(repo_builder: RepoBuilder) -> None:
    root = _layout(repo_builder)
    test_roots = [root / "src" / "test" / "java"]

    without = SourceScanner().scan(_roots(root), test_roots=test_roots)
    with_tests = SourceScanner().scan(_roots(root), test_roots=test_roots, include_test=True)

    assert "com/example/OrderRoutesTest.java" not in _names(without.code)
    assert "com/example/OrderRoutesTest.java" in _names(with_tests.code)


def test_scan_can_disable_dialects(repo_builder: RepoBuilder) -> None:
    root = _layout(repo_builder)

    no_xml = SourceScanner().scan(_roots(root), include_xml=False)
    no_java = SourceScanner().scan(_roots(root), include_java=False)

    assert no_xml.documents == []
    assert len(no_xml.code) == 2
    assert no_java.code == []
    assert len(no_java.documents) == 1


def test_scan_applies_includes_and_excludes(repo_builder: RepoBuilder) -> None:
    root = _layout(repo_builder)

    result = SourceScanner().scan(
        _roots(root),
        includes=["com.example.*"],
        excludes=["com/example/legacy/*"],
    )

    assert _names(result.code) == ["com/example/OrderRoutes.java"]
    assert result.documents == []


def test_scan_exclude_wins_over_include(repo_builder: RepoBuilder) -> None:
    root = _layout(repo_builder)

    result = SourceScanner().scan(_roots(root), includes=["*.java"], excludes=["OrderRoutes.java"])

    assert _names(result.code) == ["com/example/legacy/OldRoutes.java"]


@pytest.mark.parametrize(
    "raw, candidates, expected",
    [
        ("*Routes.java", ["OrderRoutes.java"], True),
        ("com.example.OrderRoutes", ["com.example.OrderRoutes"], True),
        (r".*Old\w+", ["com.example.legacy.OldRoutes"], True),
        ("Order*", ["com/example/OrderRoutes.java", "OrderRoutes.java"], True),
        ("*Test.java", ["OrderRoutes.java"], False),
        ("[unclosed", ["[unclosed"], True),
    ],
)
def test_file_pattern_matches(raw: str, candidates: list[str], expected: bool) -> None:
    assert FilePattern.parse(raw).matches(candidates) is expected


def test_compile_patterns_splits_commas() -> None:
    patterns = compile_patterns(["a, b", "", " c "])

    assert [pattern.raw for pattern in patterns] == ["a", "b", "c"]
    assert FilePattern.parse("[unclosed").regex is None
