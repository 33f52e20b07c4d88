"""File-level heuristics: category, framework, entry point and complexity."""

from __future__ import annotations

import re
from typing import Callable, Optional, Sequence, Tuple

_COMPONENT_SUFFIX = re.compile(r"\.(?:jsx|tsx)$")
_STYLE_SUFFIX = re.compile(r"\.(?:css|scss|sass|less)$")
_FUNCTION_SHAPES = re.compile(r"function\s+\w+|=>\s*\{|\w+\s*=\s*\(")
_CONDITIONALS = re.compile(r"if\s*\(|switch\s*\(|for\s*\(|while\s*\(")

ENTRY_POINT_FILES = {"index.js", "index.ts", "main.js", "main.ts", "app.js", "app.ts", "server.js"}
_BOOTSTRAP_CALLS = ("ReactDOM.render", "createRoot", "app.listen")

COMPLEXITY_LOW = 50
COMPLEXITY_MEDIUM = 150

Probe = Callable[[str, str], bool]

# Order matters: the first probe that fires names the framework.
FRAMEWORK_PROBES: Sequence[Tuple[str, Probe]] = (
    ("react", lambda content, path: "from 'react'" in content or 'from "react"' in content),
    ("vue", lambda content, path: "from 'vue'" in content or "<template>" in content),
    ("angular", lambda content, path: "@angular/" in content or "@Component" in content),
    ("svelte", lambda content, path: "from 'svelte'" in content or ".svelte" in path),
    ("express", lambda content, path: "express" in content or "app.listen" in content),
    ("nextjs", lambda content, path: "next/" in content or "pages/" in path or "app/" in path),
    ("node", lambda content, path: "require(" in content and "import " not in content),
)


def _file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1].lower()


def categorize_file(path: str) -> str:
    """Assign a role category from the file name alone."""
    name = _file_name(path)
    if "component" in name or _COMPONENT_SUFFIX.search(name):
        return "component"
    if any(token in name for token in ("service", "api", "client")):
        return "service"
    if any(token in name for token in ("util", "helper", "lib")):
        return "utility"
    if "type" in name or "interface" in name or name.endswith(".d.ts"):
        return "type"
    if _STYLE_SUFFIX.search(name):
        return "style"
    if "config" in name or "setting" in name:
        return "config"
    if "test" in name or "spec" in name:
        return "test"
    return "other"


def detect_framework(content: str, path: str) -> Optional[str]:
    for name, probe in FRAMEWORK_PROBES:
        if probe(content, path):
            return name
    return None


def is_entry_point(path: str, content: str) -> bool:
    if _file_name(path) in ENTRY_POINT_FILES:
        return True
    return any(call in content for call in _BOOTSTRAP_CALLS)


def complexity_score(content: str) -> float:
    lines = len(content.split("\n"))
    functions = len(_FUNCTION_SHAPES.findall(content))
    conditionals = len(_CONDITIONALS.findall(content))
    return lines * 0.1 + functions * 2 + conditionals * 1.5


def assess_complexity(content: str) -> str:
    score = complexity_score(content)
    if score < COMPLEXITY_LOW:
        return "low"
    if score < COMPLEXITY_MEDIUM:
        return "medium"
    return "high"


__all__ = [
    "ENTRY_POINT_FILES",
    "FRAMEWORK_PROBES",
    "assess_complexity",
    "categorize_file",
    "complexity_score",
    "detect_framework",
    "is_entry_point",
]
