"""Build a uniform FileNode tree from uploaded blobs, zip archives or a directory."""

from __future__ import annotations

import io
import os
import zipfile
from pathlib import Path, PurePosixPath
from typing import Dict, Iterator, Mapping, Tuple, Union

from .errors import IngestError
from .logging import get_logger
from .models import DIRECTORY, FILE, FileNode

Blob = Union[bytes, str]

ROOT_NAME = "project"

# Never worth reading from disk: version control internals and package caches.
_UNREAD_DIRS = {".git", ".hg", ".svn", "node_modules", "__pycache__"}

logger = get_logger("ingest")


class _TreeBuilder:
    """Accumulates nodes for one ingestion pass with memoized directories."""

    def __init__(self, root: FileNode) -> None:
        self.root = root
        self._directories: Dict[str, FileNode] = {root.path: root}

    def directory(self, path: str) -> FileNode:
        existing = self._directories.get(path)
        if existing is not None:
            return existing
        parent_path, _, name = path.rpartition("/")
        parent = self.directory(parent_path)
        node = FileNode(name=name, path=path, kind=DIRECTORY)
        parent.children.append(node)
        self._directories[path] = node
        return node

    def add_file(self, path: str, content: str, size: int) -> FileNode:
        parent_path, _, name = path.rpartition("/")
        parent = self.directory(parent_path)
        for child in parent.children:
            if child.path == path and not child.is_directory:
                logger.debug("Duplicate entry %s replaced", path)
                child.content = content
                child.size = size
                return child
        node = FileNode(name=name, path=path, kind=FILE, content=content, size=size)
        parent.children.append(node)
        return node


def _normalise_path(raw: str) -> str:
    parts = [part for part in PurePosixPath(raw.replace("\\", "/")).parts if part not in {"", ".", "/"}]
    if any(part == ".." for part in parts):
        return ""
    return "/".join(parts)


def _decode(data: Blob, path: str) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Could not decode %s as text; keeping it with empty content", path)
        return ""


def _archive_stem(name: str) -> str:
    base = PurePosixPath(name.replace("\\", "/")).name
    if base.lower().endswith(".zip"):
        base = base[: -len(".zip")]
    return base or "archive"


class TreeIngestor:
    """Turns raw uploads into a single tree rooted at a synthetic project node."""

    def from_blobs(self, blobs: Mapping[str, Blob], *, root_name: str = ROOT_NAME) -> FileNode:
        """Ingest loose files; any ``.zip`` blob expands into a directory of its own."""
        root = FileNode(name=root_name, path="", kind=DIRECTORY)
        builder = _TreeBuilder(root)
        for raw_path, data in blobs.items():
            path = _normalise_path(raw_path)
            if not path:
                logger.warning("Skipping entry with unusable path %r", raw_path)
                continue
            if path.lower().endswith(".zip"):
                data_bytes = data.encode("utf-8") if isinstance(data, str) else data
                parent_path, _, name = path.rpartition("/")
                prefix = f"{parent_path}/{_archive_stem(name)}" if parent_path else _archive_stem(name)
                self._expand_archive(builder, data_bytes, prefix=prefix, label=path)
                continue
            size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
            builder.add_file(path, _decode(data, path), size)
        logger.debug("Ingested %d blobs", len(blobs))
        return root

    def from_archive(self, data: bytes, *, name: str = "archive.zip") -> FileNode:
        """Ingest one zip archive; the root is named after the archive."""
        root = FileNode(name=_archive_stem(name), path="", kind=DIRECTORY)
        builder = _TreeBuilder(root)
        self._expand_archive(builder, data, prefix="", label=name)
        return root

    def from_directory(self, path: str | Path) -> FileNode:
        """Read a local directory into a tree named after the directory."""
        root_path = Path(path).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {path}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {path}")
        blobs: Dict[str, Blob] = {}
        for relative, data in _iter_directory(root_path):
            blobs[relative] = data
        return self.from_blobs(blobs, root_name=root_path.name or ROOT_NAME)

    def _expand_archive(self, builder: _TreeBuilder, data: bytes, *, prefix: str, label: str) -> None:
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, OSError) as exc:
            raise IngestError(f"Could not open archive {label}: {exc}") from exc

        with archive:
            count = 0
            for info in archive.infolist():
                if info.is_dir():
                    continue
                relative = _normalise_path(info.filename)
                if not relative:
                    continue
                path = f"{prefix}/{relative}" if prefix else relative
                try:
                    raw = archive.read(info)
                except (zipfile.BadZipFile, OSError, RuntimeError, NotImplementedError) as exc:
                    logger.warning("Corrupt archive entry %s in %s: %s", info.filename, label, exc)
                    builder.add_file(path, "", info.file_size)
                    continue
                builder.add_file(path, _decode(raw, path), len(raw))
                count += 1
        logger.debug("Expanded %d entries from %s", count, label)


def _iter_directory(root: Path) -> Iterator[Tuple[str, bytes]]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
        dirnames[:] = sorted(name for name in dirnames if name not in _UNREAD_DIRS)
        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            try:
                data = (current_dir / filename).read_bytes()
            except OSError as exc:
                logger.warning("Could not read %s: %s", rel_path, exc)
                data = b""
            yield rel_path, data


__all__ = ["Blob", "ROOT_NAME", "TreeIngestor"]
