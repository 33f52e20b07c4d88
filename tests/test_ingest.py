"""Tree ingestion tests."""

from __future__ import annotations

import pytest

from codescribe.errors import IngestError
from codescribe.ingest import TreeIngestor
from tests._fixtures.project_builder import ProjectBuilder


def _paths(root) -> list[str]:
    return sorted(node.path for node in root.walk() if not node.is_directory)


def test_from_blobs_builds_nested_directories() -> None:
    root = TreeIngestor().from_blobs({"src/a.ts": "export const a = 1;", "README.md": "# Demo"})

    assert root.name == "project"
    assert root.is_directory
    assert _paths(root) == ["README.md", "src/a.ts"]
    src = root.find("src")
    assert src is not None and src.is_directory
    assert src.children[0].content == "export const a = 1;"


def test_duplicate_blob_paths_keep_single_node() -> None:
    root = TreeIngestor().from_blobs({"a.js": "one", "./a.js": "two"})

    files = [node for node in root.walk() if not node.is_directory]
    assert len(files) == 1
    assert files[0].content == "two"


def test_parent_traversal_paths_are_skipped() -> None:
    root = TreeIngestor().from_blobs({"../escape.js": "x", "ok.js": "y"})

    assert _paths(root) == ["ok.js"]


def test_undecodable_bytes_become_empty_content() -> None:
    root = TreeIngestor().from_blobs({"blob.js": b"\xff\xfe\x00bad"})

    node = root.find("blob.js")
    assert node is not None
    assert node.content == ""
    assert node.size == 5


def test_from_archive_names_root_after_archive() -> None:
    data = ProjectBuilder.archive({"src/index.js": "console.log('hi')", "package.json": "{}"})

    root = TreeIngestor().from_archive(data, name="upload.zip")

    assert root.name == "upload"
    assert _paths(root) == ["package.json", "src/index.js"]


def test_zip_blob_expands_under_its_stem() -> None:
    nested = ProjectBuilder.archive({"lib/util.js": "export function util() {}"})

    root = TreeIngestor().from_blobs({"vendor/bundle.zip": nested, "main.js": "import './x';"})

    assert _paths(root) == ["main.js", "vendor/bundle/lib/util.js"]


def test_bad_archive_raises_ingest_error() -> None:
    with pytest.raises(IngestError):
        TreeIngestor().from_archive(b"not a zip file", name="broken.zip")


def test_from_directory_skips_vcs_and_package_caches(project_builder) -> None:
    root_path = project_builder.write(
        {
            "src/index.js": "console.log('x');",
            "node_modules/react/index.js": "module.exports = {};",
            ".git/HEAD": "ref: refs/heads/main",
        }
    )

    root = TreeIngestor().from_directory(root_path)

    assert root.name == "project"
    assert _paths(root) == ["src/index.js"]


def test_from_directory_missing_path_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        TreeIngestor().from_directory(tmp_path / "missing")
