"""Noise filtering and categorisation tests."""

from __future__ import annotations

from codescribe.filtering import FileFilter, FilterOptions, MinifiedThresholds, find_first, iter_kept
from codescribe.ingest import TreeIngestor


def _tree(files):
    return TreeIngestor().from_blobs(files)


def _kept_files(root) -> list[str]:
    return sorted(node.path for node in iter_kept(root) if not node.is_directory)


def test_ignored_directories_and_files_are_marked() -> None:
    root = _tree(
        {
            "src/index.ts": "export const x = 1;",
            "dist/bundle.js": "var a=1;",
            "node_modules/lib/index.js": "module.exports = 1;",
            "package-lock.json": "{}",
            "logo.png": "binary",
            "types/global.d.ts": "declare const x: number;",
        }
    )

    FileFilter().apply(root)

    assert _kept_files(root) == ["src/index.ts"]
    assert root.ignored is False
    assert root.find("dist").ignored is True


def test_apply_is_idempotent() -> None:
    root = _tree({"src/index.ts": "export const x = 1;", "build/out.js": "x"})
    file_filter = FileFilter()

    file_filter.apply(root)
    first = [(node.path, node.ignored, node.category) for node in root.walk()]
    file_filter.apply(root)
    second = [(node.path, node.ignored, node.category) for node in root.walk()]

    assert first == second


def test_decided_nodes_are_not_revisited() -> None:
    root = _tree({"src/index.ts": "export const x = 1;"})
    node = root.find("src/index.ts")
    node.ignored = True

    FileFilter().apply(root)

    assert node.ignored is True
    assert node.category is None


def test_test_files_follow_include_tests_switch() -> None:
    files = {"src/App.test.tsx": "it('works', () => {});", "src/__tests__/util.js": "test();"}

    default_root = _tree(files)
    FileFilter().apply(default_root)
    assert _kept_files(default_root) == []

    inclusive_root = _tree(files)
    FileFilter(FilterOptions(include_tests=True)).apply(inclusive_root)
    assert _kept_files(inclusive_root) == ["src/App.test.tsx", "src/__tests__/util.js"]


def test_styles_and_config_switches() -> None:
    root = _tree({"src/app.css": "body {}", "vite.config.js": "export default {};"})

    FileFilter(FilterOptions(include_styles=False, include_config=False)).apply(root)

    assert _kept_files(root) == []


def test_custom_ignore_matches_path_substring() -> None:
    root = _tree({"src/generated/api.ts": "export {};", "src/app.ts": "export {};"})

    FileFilter(FilterOptions(custom_ignore=["generated"])).apply(root)

    assert _kept_files(root) == ["src/app.ts"]


def test_oversized_files_are_ignored() -> None:
    root = _tree({"src/big.js": "// padding\n" * 200})

    FileFilter(FilterOptions(max_file_size_kb=1)).apply(root)

    assert _kept_files(root) == []


def test_minified_heuristics() -> None:
    file_filter = FileFilter()

    assert file_filter.is_minified("vendor.min.js", "")
    assert file_filter.is_minified("app.js", "var x=1;" * 200)
    assert file_filter.is_minified("app.js", " ".join(["a"] * 51))
    assert not file_filter.is_minified("app.js", "const value = compute();\n")


def test_minified_thresholds_are_configurable() -> None:
    file_filter = FileFilter(thresholds=MinifiedThresholds(max_single_letter_tokens=100))

    assert not file_filter.is_minified("app.js", "\n".join(["a"] * 60))


def test_categories_for_kept_files() -> None:
    root = _tree(
        {
            "README.md": "# Demo",
            "tsconfig.json": "{}",
            "data.yml": "key: value",
            "src/app.scss": "body {}",
            "src/main.ts": "export {};",
        }
    )

    FileFilter().apply(root)

    categories = {node.path: node.category for node in iter_kept(root) if not node.is_directory}
    assert categories == {
        "README.md": "documentation",
        "tsconfig.json": "config",
        "data.yml": "config",
        "src/app.scss": "style",
        "src/main.ts": "source",
    }


def test_iter_analyzable_skips_blank_files() -> None:
    root = _tree({"src/empty.ts": "   \n", "src/main.ts": "export const x = 1;"})
    FileFilter().apply(root)

    assert [node.path for node in FileFilter.iter_analyzable(root)] == ["src/main.ts"]


def test_stats_and_find_first() -> None:
    root = _tree({"package.json": "{}", "src/main.ts": "export {};", "dist/package.json": "{}"})
    FileFilter().apply(root)

    stats = FileFilter.stats(root)

    assert stats.file_count == 2
    assert stats.source_files == 1
    assert find_first(root, "package.json").path == "package.json"
