"""Route extraction across registration calls, file-system handlers and UI routes."""

from __future__ import annotations

import re
from typing import List

from ..analyzers.utils import excerpt, find_matching_brace, line_of
from ..models import FileAnalysis
from .base import Extractor
from .models import RouteRecord

_PATH_PROBES = ("/api/", "/routes/", "router", "route")
_CONTENT_PROBES = (
    "app.get",
    "app.post",
    "router.",
    "route(",
    "createbrowserrouter",
    "userouter",
    "express",
)

_VERBS = "get|post|put|delete|patch"
_REGISTRATION = re.compile(rf"\b(?:app|router)\.({_VERBS})\(\s*['\"`]([^'\"`]+)['\"`]")
_CHAINED = re.compile(rf"\.route\(\s*['\"`]([^'\"`]+)['\"`]\s*\)\s*\.({_VERBS})\(")
_HANDLER_EXPORT = re.compile(
    r"export\s+(?:async\s+)?function\s+(GET|POST|PUT|DELETE|PATCH)\s*\([^)]*\)[^{]*\{"
)
_UI_ROUTE = re.compile(r"<Route\s+path=\{?['\"`]([^'\"`]+)['\"`]")
_ROUTE_OBJECT = re.compile(r"\bpath:\s*['\"`]([^'\"`]+)['\"`]")

_MIDDLEWARE = (
    re.compile(r"\.use\(([^)]+)\)"),
    re.compile(r"authenticate\w*"),
    re.compile(r"authorize\w*"),
    re.compile(r"\bcors\b"),
)
_ARROW_HANDLER = re.compile(r"\(([^)]*)\)\s*=>\s*\{([^}]+)\}")
_ROUTE_COMMENT = re.compile(r"/\*\*?([\s\S]*?)\*/|//\s*(.+)$", re.MULTILINE)

_API_PREFIX = re.compile(r"^.*?/api/")
_DYNAMIC_SEGMENT = re.compile(r"\[(?:\.\.\.)?([^\]]+)\]")
_SOURCE_SUFFIX = re.compile(r"\.(?:ts|js|tsx|jsx|mjs)$")
_INDEX_SEGMENT = re.compile(r"/(?:index|route)$")

_MIDDLEWARE_WINDOW = 200
_HANDLER_WINDOW = 300
_HANDLER_LIMIT = 300


def is_route_file(file: FileAnalysis) -> bool:
    path = file.path.lower()
    content = file.content.lower()
    return any(probe in path for probe in _PATH_PROBES) or any(
        probe in content for probe in _CONTENT_PROBES
    )


def file_route_path(path: str) -> str:
    """Translate a file-system routed handler path into its URL pattern."""
    route = _API_PREFIX.sub("/api/", f"/{path}")
    route = _DYNAMIC_SEGMENT.sub(r":\1", route)
    route = _SOURCE_SUFFIX.sub("", route)
    return _INDEX_SEGMENT.sub("", route) or "/"


def middleware_before(content: str, index: int) -> List[str]:
    window = content[max(0, index - _MIDDLEWARE_WINDOW):index]
    found: List[str] = []
    for pattern in _MIDDLEWARE:
        for match in pattern.finditer(window):
            if match.group(0) not in found:
                found.append(match.group(0))
    return found


def handler_after(content: str, index: int) -> str:
    match = _ARROW_HANDLER.search(content[index:index + _HANDLER_WINDOW])
    return match.group(2).strip() if match else ""


def description_before(content: str, index: int) -> str:
    window = content[max(0, index - 100):index]
    matches = list(_ROUTE_COMMENT.finditer(window))
    if not matches:
        return ""
    last = matches[-1]
    text = last.group(1) if last.group(1) is not None else last.group(2)
    return " ".join(part.strip(" *") for part in text.splitlines() if part.strip(" *"))


class RouteExtractor(Extractor):
    name = "routes"

    def supports(self, file: FileAnalysis) -> bool:
        return is_route_file(file)

    def extract(self, file: FileAnalysis) -> List[RouteRecord]:
        content = file.content
        routes = self._registrations(file.path, content)
        routes.extend(self._file_handlers(file.path, content))
        routes.extend(self._ui_routes(file.path, content))
        return routes

    def _registrations(self, path: str, content: str) -> List[RouteRecord]:
        found = []
        for match in _REGISTRATION.finditer(content):
            found.append((match, match.group(1), match.group(2)))
        for match in _CHAINED.finditer(content):
            found.append((match, match.group(2), match.group(1)))
        found.sort(key=lambda item: item[0].start())

        routes: List[RouteRecord] = []
        for match, verb, route_path in found:
            start = match.start()
            routes.append(
                RouteRecord(
                    method=verb.upper(),
                    path=route_path,
                    kind="api",
                    file=path,
                    line=line_of(content, start),
                    handler=handler_after(content, start),
                    middleware=middleware_before(content, start),
                    code=excerpt(content, start - 100, match.end() + 200),
                    description=description_before(content, start),
                )
            )
        return routes

    def _file_handlers(self, path: str, content: str) -> List[RouteRecord]:
        if "/api/" not in f"/{path}":
            return []
        route_path = file_route_path(path)
        routes: List[RouteRecord] = []
        for match in _HANDLER_EXPORT.finditer(content):
            open_index = match.end() - 1
            close_index = find_matching_brace(content, open_index)
            body = content[open_index + 1:close_index].strip()
            routes.append(
                RouteRecord(
                    method=match.group(1),
                    path=route_path,
                    kind="api",
                    file=path,
                    line=line_of(content, match.start()),
                    handler=body[:_HANDLER_LIMIT],
                    middleware=middleware_before(content, match.start()),
                    code=excerpt(content, match.start(), close_index + 1),
                    description=description_before(content, match.start()),
                )
            )
        return routes

    def _ui_routes(self, path: str, content: str) -> List[RouteRecord]:
        routes: List[RouteRecord] = []
        for pattern in (_UI_ROUTE, _ROUTE_OBJECT):
            for match in pattern.finditer(content):
                routes.append(
                    RouteRecord(
                        method="GET",
                        path=match.group(1),
                        kind="page",
                        file=path,
                        line=line_of(content, match.start()),
                        code=excerpt(content, match.start(), match.end() + 100),
                        description=f"Frontend route: {match.group(1)}",
                    )
                )
        return routes


__all__ = ["RouteExtractor", "file_route_path", "is_route_file"]
