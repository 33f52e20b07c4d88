"""Data-access operations: ORM calls, document-store calls, embedded SQL and HTTP clients."""

from __future__ import annotations

import re
from typing import Callable, List, Sequence, Tuple

from ..analyzers.utils import line_of
from ..models import FileAnalysis
from .base import Extractor
from .models import DataOperationRecord

_PATH_PROBES = ("model", "schema", "database", "db", "repositor", "store")
_CONTENT_PROBES = ("prisma", "mongoose", "axios", "fetch(", "select ", "insert into", "delete from")

_PRISMA = re.compile(
    r"\bprisma\.(\w+)\.(create|createMany|findMany|findUnique|findFirst|update|updateMany|upsert|delete|deleteMany)"
    r"\(([^)]*)\)?"
)
_DOCUMENT_STORE = re.compile(
    r"\b([A-Z]\w*)\.(find|findOne|findById|create|insertMany|updateOne|updateMany|findByIdAndUpdate"
    r"|deleteOne|deleteMany|findByIdAndDelete)\(([^)]*)\)?"
)
_DOCUMENT_SAVE = re.compile(r"\b(\w+)\.save\(\s*\)")
_SQL = (
    (re.compile(r"\bSELECT\s+[^;]*?\s+FROM\s+[`\"]?(\w+)"), "SELECT"),
    (re.compile(r"\bINSERT\s+INTO\s+[`\"]?(\w+)"), "INSERT"),
    (re.compile(r"\bUPDATE\s+[`\"]?(\w+)[`\"]?\s+SET\b"), "UPDATE"),
    (re.compile(r"\bDELETE\s+FROM\s+[`\"]?(\w+)"), "DELETE"),
)
_AXIOS = re.compile(r"\baxios\.(get|post|put|delete|patch)\(\s*['\"`]([^'\"`]+)['\"`]")
_FETCH = re.compile(r"\bfetch\(\s*['\"`]([^'\"`]+)['\"`](?:\s*,\s*\{[^}]*?method:\s*['\"`](\w+)['\"`])?")

_VERB_BY_OPERATION = {
    "create": "CREATE",
    "createmany": "CREATE",
    "insertmany": "CREATE",
    "save": "CREATE",
    "insert": "CREATE",
    "post": "CREATE",
    "find": "READ",
    "findone": "READ",
    "findbyid": "READ",
    "findmany": "READ",
    "findunique": "READ",
    "findfirst": "READ",
    "select": "READ",
    "get": "READ",
    "update": "UPDATE",
    "updatemany": "UPDATE",
    "updateone": "UPDATE",
    "upsert": "UPDATE",
    "findbyidandupdate": "UPDATE",
    "put": "UPDATE",
    "patch": "UPDATE",
    "delete": "DELETE",
    "deletemany": "DELETE",
    "deleteone": "DELETE",
    "findbyidanddelete": "DELETE",
}

_URL_SEGMENT = re.compile(r"[A-Za-z][\w-]*")


def infer_verb(operation: str) -> str:
    return _VERB_BY_OPERATION.get(operation.lower(), "UNKNOWN")


def entity_from_url(url: str) -> str:
    """Name the resource of an HTTP call after the last literal path segment."""
    path = url.split("?", 1)[0].split("#", 1)[0]
    if "://" in path:
        path = path.split("://", 1)[1].partition("/")[2]
    for segment in reversed(path.split("/")):
        if not segment or segment.startswith((":", "$", "{")) or segment.isdigit():
            continue
        match = _URL_SEGMENT.fullmatch(segment)
        if match and segment.lower() not in {"api", "v1", "v2", "v3"}:
            return segment
    return ""


def is_data_file(file: FileAnalysis) -> bool:
    path = file.path.lower()
    content = file.content.lower()
    if file.category == "service":
        return True
    return any(probe in path for probe in _PATH_PROBES) or any(probe in content for probe in _CONTENT_PROBES)


Probe = Callable[[str, str], List[DataOperationRecord]]


def _prisma(path: str, content: str) -> List[DataOperationRecord]:
    return [
        DataOperationRecord(
            file=path,
            technology="prisma",
            operation=match.group(2),
            verb=infer_verb(match.group(2)),
            entity=match.group(1),
            parameters=(match.group(3) or "").strip(),
            line=line_of(content, match.start()),
        )
        for match in _PRISMA.finditer(content)
    ]


def _document_store(path: str, content: str) -> List[DataOperationRecord]:
    operations = [
        DataOperationRecord(
            file=path,
            technology="mongoose",
            operation=match.group(2),
            verb=infer_verb(match.group(2)),
            entity=match.group(1),
            parameters=(match.group(3) or "").strip(),
            line=line_of(content, match.start()),
        )
        for match in _DOCUMENT_STORE.finditer(content)
        if match.group(1) not in {"Object", "Array", "Promise", "JSON", "Math", "Date", "Reflect"}
    ]
    operations.extend(
        DataOperationRecord(
            file=path,
            technology="mongoose",
            operation="save",
            verb="CREATE",
            entity=match.group(1),
            line=line_of(content, match.start()),
        )
        for match in _DOCUMENT_SAVE.finditer(content)
    )
    return operations


def _sql(path: str, content: str) -> List[DataOperationRecord]:
    operations: List[DataOperationRecord] = []
    for pattern, statement in _SQL:
        operations.extend(
            DataOperationRecord(
                file=path,
                technology="sql",
                operation=statement,
                verb=infer_verb(statement),
                entity=match.group(1),
                line=line_of(content, match.start()),
            )
            for match in pattern.finditer(content)
        )
    return operations


def _http(path: str, content: str) -> List[DataOperationRecord]:
    operations = [
        DataOperationRecord(
            file=path,
            technology="http",
            operation=match.group(1).upper(),
            verb=infer_verb(match.group(1)),
            entity=entity_from_url(match.group(2)),
            parameters=match.group(2),
            line=line_of(content, match.start()),
        )
        for match in _AXIOS.finditer(content)
    ]
    for match in _FETCH.finditer(content):
        method = (match.group(2) or "GET").upper()
        operations.append(
            DataOperationRecord(
                file=path,
                technology="http",
                operation=method,
                verb=infer_verb(method),
                entity=entity_from_url(match.group(1)),
                parameters=match.group(1),
                line=line_of(content, match.start()),
            )
        )
    return operations


DATA_PROBES: Sequence[Tuple[str, Probe]] = (
    ("prisma", _prisma),
    ("mongoose", _document_store),
    ("sql", _sql),
    ("http", _http),
)


class DataOperationExtractor(Extractor):
    name = "data"

    def supports(self, file: FileAnalysis) -> bool:
        return is_data_file(file)

    def extract(self, file: FileAnalysis) -> List[DataOperationRecord]:
        operations: List[DataOperationRecord] = []
        for _, probe in DATA_PROBES:
            operations.extend(probe(file.path, file.content))
        return operations


__all__ = [
    "DATA_PROBES",
    "DataOperationExtractor",
    "entity_from_url",
    "infer_verb",
    "is_data_file",
]
