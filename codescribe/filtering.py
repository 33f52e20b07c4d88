"""Noise filtering and coarse categorisation of ingested file trees."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .logging import get_logger
from .models import FileNode

IGNORED_DIRECTORIES: tuple[str, ...] = (
    "node_modules",
    "dist",
    "build",
    ".next",
    "out",
    ".git",
    ".vscode",
    ".idea",
    "coverage",
    ".nyc_output",
    "tmp",
    "temp",
    ".cache",
    ".parcel-cache",
    "public/static",
    "static/js",
    "static/css",
)

IGNORED_FILES = {
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    ".DS_Store",
    "Thumbs.db",
    ".env.local",
    ".env.production",
    ".gitignore",
    ".eslintcache",
}

_IGNORED_SUFFIX = re.compile(
    r"\.(?:min\.js|bundle\.js|chunk\.js|map|d\.ts"
    r"|png|jpe?g|gif|svg|ico|webp|woff2?|ttf|eot)$",
    re.IGNORECASE,
)
_TEST_FILE = re.compile(r"\.(?:test|spec|stories)\.(?:js|jsx|ts|tsx)$", re.IGNORECASE)
_MINIFIED_SUFFIX = re.compile(r"\.(?:min|bundle|chunk)\.js$", re.IGNORECASE)
_SINGLE_LETTER_TOKEN = re.compile(r"\b[a-z]\b")

SOURCE_EXTENSIONS = {
    "js", "jsx", "ts", "tsx", "vue", "svelte", "py", "java", "cpp", "c", "go", "rs",
    "php", "rb", "css", "scss", "sass", "less", "styl", "md", "json", "yml", "yaml", "toml",
}
STYLE_EXTENSIONS = {"css", "scss", "sass", "less", "styl"}
DATA_CONFIG_EXTENSIONS = {"json", "yml", "yaml", "toml"}
PROSE_EXTENSIONS = {"md"}

CONFIG_FILES = {
    "webpack.config.js",
    "vite.config.js",
    "rollup.config.js",
    "babel.config.js",
    ".babelrc",
    "tsconfig.json",
    "jsconfig.json",
    "eslint.config.js",
    ".eslintrc",
    "prettier.config.js",
    "tailwind.config.js",
    "postcss.config.js",
}


@dataclass
class FilterOptions:
    """Caller-selected inclusion switches."""

    include_tests: bool = False
    include_styles: bool = True
    include_config: bool = True
    max_file_size_kb: int = 1024
    custom_ignore: List[str] = field(default_factory=list)


@dataclass
class MinifiedThresholds:
    """Tunable limits for the minified-code heuristic."""

    max_lines: int = 10
    min_characters: int = 1000
    max_single_letter_tokens: int = 50


@dataclass
class TreeStats:
    file_count: int = 0
    total_size: int = 0
    source_files: int = 0


logger = get_logger("filtering")


class FileFilter:
    """Marks noise nodes as ignored and categorises the survivors in place."""

    def __init__(
        self,
        options: FilterOptions | None = None,
        thresholds: MinifiedThresholds | None = None,
    ) -> None:
        self.options = options or FilterOptions()
        self.thresholds = thresholds or MinifiedThresholds()

    def apply(self, root: FileNode) -> FileNode:
        """Decide every undecided node below ``root``; decided nodes keep their state."""
        ignored = self._visit(root, is_root=True)
        logger.debug("Filter marked %d nodes as ignored", ignored)
        return root

    def _visit(self, node: FileNode, *, is_root: bool = False) -> int:
        ignored = 0
        if node.ignored is None:
            if node.is_directory:
                node.ignored = False if is_root else self.should_ignore_directory(node)
            else:
                node.ignored = self.should_ignore_file(node)
                if not node.ignored:
                    node.category = self.categorize(node)
            if node.ignored:
                ignored += 1
        if node.is_directory and not node.ignored:
            for child in node.children:
                ignored += self._visit(child)
        return ignored

    def should_ignore_directory(self, node: FileNode) -> bool:
        for entry in IGNORED_DIRECTORIES:
            if "/" in entry:
                if node.path == entry or node.path.endswith(f"/{entry}"):
                    return True
            elif node.name == entry or node.name.startswith(entry):
                return True
        return self._matches_custom(node)

    def should_ignore_file(self, node: FileNode) -> bool:
        name = node.name
        if name in IGNORED_FILES:
            return True
        if _IGNORED_SUFFIX.search(name):
            return True
        if self._matches_custom(node):
            return True
        if not self.options.include_tests and self.is_test_file(node):
            return True
        extension = node.extension
        if not self.options.include_styles and extension in STYLE_EXTENSIONS:
            return True
        if not self.options.include_config and name in CONFIG_FILES:
            return True
        if extension not in SOURCE_EXTENSIONS and name not in CONFIG_FILES:
            return True
        if node.size is not None and node.size > self.options.max_file_size_kb * 1024:
            return True
        return self.is_minified(name, node.content)

    @staticmethod
    def is_test_file(node: FileNode) -> bool:
        if _TEST_FILE.search(node.name):
            return True
        return "__tests__" in node.path.split("/")

    def is_minified(self, name: str, content: str) -> bool:
        if _MINIFIED_SUFFIX.search(name):
            return True
        if not content:
            return False
        line_count = len(content.split("\n"))
        if line_count < self.thresholds.max_lines and len(content) > self.thresholds.min_characters:
            return True
        tokens = _SINGLE_LETTER_TOKEN.findall(content)
        return len(tokens) > self.thresholds.max_single_letter_tokens

    @staticmethod
    def categorize(node: FileNode) -> str:
        name = node.name.lower()
        extension = node.extension
        if node.name in CONFIG_FILES:
            return "config"
        if "readme" in name or extension in PROSE_EXTENSIONS:
            return "documentation"
        if extension in DATA_CONFIG_EXTENSIONS:
            return "config"
        if extension in STYLE_EXTENSIONS:
            return "style"
        return "source"

    def _matches_custom(self, node: FileNode) -> bool:
        return any(pattern and pattern in node.path for pattern in self.options.custom_ignore)

    @staticmethod
    def iter_analyzable(root: FileNode) -> Iterator[FileNode]:
        """Yield surviving files with non-blank content, never descending into ignored directories."""
        if root.ignored:
            return
        for child in root.children:
            if child.ignored:
                continue
            if child.is_directory:
                yield from FileFilter.iter_analyzable(child)
            elif child.content.strip():
                yield child

    @staticmethod
    def stats(root: FileNode) -> TreeStats:
        stats = TreeStats()
        for node in iter_kept(root):
            if node.is_directory:
                continue
            stats.file_count += 1
            stats.total_size += node.size or 0
            if node.category == "source":
                stats.source_files += 1
        return stats


def iter_kept(node: FileNode) -> Iterator[FileNode]:
    """Yield non-ignored nodes, skipping the subtrees of ignored directories."""
    if node.ignored:
        return
    yield node
    for child in node.children:
        yield from iter_kept(child)


def find_first(root: FileNode, name: str) -> Optional[FileNode]:
    """Return the first kept file called ``name`` in depth-first order."""
    for node in iter_kept(root):
        if not node.is_directory and node.name == name:
            return node
    return None


__all__ = [
    "CONFIG_FILES",
    "FileFilter",
    "FilterOptions",
    "IGNORED_DIRECTORIES",
    "IGNORED_FILES",
    "MinifiedThresholds",
    "SOURCE_EXTENSIONS",
    "TreeStats",
    "find_first",
    "iter_kept",
]
