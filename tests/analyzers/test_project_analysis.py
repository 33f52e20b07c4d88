"""Project-level analysis tests."""

from __future__ import annotations

from codescribe.analyzers import ProjectAnalyzer, detect_project_type, extract_manifest
from codescribe.analyzers.dependencies import (
    categorize,
    categorize_dependencies,
    detect_build_tool,
    detect_technologies,
)
from codescribe.analyzers.heuristics import assess_complexity, categorize_file, is_entry_point
from codescribe.filtering import FileFilter
from codescribe.ingest import TreeIngestor
from tests._fixtures.project_builder import REACT_APP


def _analyze(project_builder, files):
    root = project_builder.tree(files)
    FileFilter().apply(root)
    return ProjectAnalyzer().analyze(root)


def test_react_project_analysis(project_builder) -> None:
    project = _analyze(project_builder, REACT_APP)

    assert project.name == "shop-ui"
    assert project.type == "react"
    assert project.entry_points == []
    categories = {analysis.path: analysis.category for analysis in project.files}
    assert categories == {
        "package.json": "other",
        "src/App.tsx": "component",
        "src/api.ts": "service",
    }
    assert project.architecture.build_tool == "Vite"
    assert project.architecture.patterns == ["Component-Based Architecture", "HTTP Client Pattern"]
    assert project.architecture.technologies == ["react", "Vite"]
    assert [dependency.name for dependency in project.dependencies] == ["react", "axios"]
    assert [dependency.category for dependency in project.dev_dependencies] == ["build", "build"]


def test_unparsable_manifest_is_tolerated(project_builder) -> None:
    project = _analyze(
        project_builder,
        {"package.json": "{ not json", "src/index.js": "console.log('ready');"},
    )

    assert project.manifest is None
    assert project.name == "project"
    assert project.dependencies == []
    assert project.entry_points == ["src/index.js"]


def test_manifest_must_be_an_object(project_builder) -> None:
    root = project_builder.tree({"package.json": "[1, 2, 3]"})
    FileFilter().apply(root)

    assert extract_manifest(root) is None


def test_project_type_from_layout_without_manifest(project_builder) -> None:
    next_root = project_builder.tree({"pages/index.js": "export default function Home() {}"})
    FileFilter().apply(next_root)
    assert detect_project_type(next_root, None) == "nextjs"

    react_root = project_builder.tree({"src/main.js": "render();", "index.html": "<div></div>"})
    assert detect_project_type(react_root, None) == "react"

    FileFilter().apply(react_root)
    assert detect_project_type(react_root, None) == "other"

    plain_root = project_builder.tree({"lib/tool.js": "module.exports = {};"})
    FileFilter().apply(plain_root)
    assert detect_project_type(plain_root, None) == "other"


def test_project_type_follows_dependency_order() -> None:
    manifest = {"dependencies": {"express": "^4.0.0", "react": "^18.0.0"}}

    assert detect_project_type(TreeIngestor().from_blobs({}), manifest) == "react"


def test_dependency_categories_and_inference() -> None:
    assert categorize("react", "^18").category == "framework"
    assert categorize("my-ui-kit", "1.0.0").category == "ui"
    assert categorize("@types/lodash", "4").category == "build"
    assert categorize("left-pad", None).version == ""
    assert categorize("left-pad", None).category == "other"

    runtime, dev = categorize_dependencies({"dependencies": {"axios": "1"}, "devDependencies": "bogus"})
    assert [record.name for record in runtime] == ["axios"]
    assert dev == []


def test_build_tool_detection() -> None:
    assert detect_build_tool({"devDependencies": {"webpack": "5"}}) == "Webpack"
    assert detect_build_tool({"scripts": {"start": "react-scripts start"}}) == "Create React App"
    assert detect_build_tool({"scripts": {"dev": "next dev"}}) == "Next.js"
    assert detect_build_tool({}) is None
    assert detect_technologies(categorize_dependencies({"dependencies": {"antd": "5"}})[0], None) == ["antd"]


def test_file_heuristics() -> None:
    assert categorize_file("src/components/Button.js") == "other"
    assert categorize_file("src/ButtonComponent.js") == "component"
    assert categorize_file("src/apiClient.js") == "service"
    assert categorize_file("src/dateUtils.js") == "utility"
    assert categorize_file("src/types.ts") == "type"
    assert categorize_file("src/app.scss") == "style"
    assert categorize_file("eslint.config.js") == "config"
    assert is_entry_point("src/server.js", "")
    assert is_entry_point("src/bootstrap.js", "createRoot(document.body)")
    assert not is_entry_point("src/widget.js", "export const widget = 1;")
    assert assess_complexity("const x = 1;") == "low"
