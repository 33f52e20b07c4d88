"""Pattern-based symbol extraction for JavaScript/TypeScript-like sources.

Every extractor is total: text that does not match simply produces an empty
list. Matches that start inside a string or comment are discarded.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

from ..models import (
    ClassRecord,
    ExportRecord,
    ImportRecord,
    InterfaceRecord,
    PropertyRecord,
    SymbolRecord,
)
from .utils import (
    code_mask,
    collapse_nested,
    find_matching_brace,
    flatten_doc_comment,
    line_of,
    preceding_doc_comment,
    split_parameters,
)

_FUNCTION = re.compile(
    r"(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s+(?P<name>[\w$]+)\s*(?:<[^>(]*>)?"
    r"\s*\((?P<params>[^)]*)\)(?:\s*:\s*(?P<ret>[^{]+))?\s*\{"
)
_ARROW = re.compile(
    r"(?:export\s+)?(?:const|let|var)\s+(?P<name>[\w$]+)\s*(?::\s*[^=]+?)?=\s*(?:async\s+)?"
    r"\((?P<params>[^)]*)\)(?:\s*:\s*(?P<ret>[^=]+?))?\s*=>"
)
_CLASS = re.compile(
    r"(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(?P<name>[\w$]+)(?:\s*<[^>{]*>)?"
    r"(?:\s+extends\s+(?P<extends>[\w$.]+)(?:\s*<[^>{]*>)?)?"
    r"(?:\s+implements\s+(?P<implements>[^{]+))?\s*\{"
)
_INTERFACE = re.compile(
    r"(?:export\s+)?interface\s+(?P<name>[\w$]+)(?:\s*<[^>{]*>)?(?:\s+extends\s+(?P<extends>[^{]+))?\s*\{"
)
_MEMBER_METHOD = re.compile(
    r"(?:^|(?<=[;{}]))[ \t]*(?P<mods>(?:(?:public|private|protected|static|async|readonly|override|abstract|get|set)\s+)*)"
    r"\*?\s*(?P<name>#?[A-Za-z_$][\w$]*)\s*(?:<[^>(]*>)?\s*\((?P<params>[^)]*)\)"
    r"\s*(?::\s*(?P<ret>[^{;]+?))?\s*\{",
    re.MULTILINE,
)
_MEMBER_ARROW = re.compile(
    r"(?:^|(?<=[;{}]))[ \t]*(?P<mods>(?:(?:public|private|protected|static|readonly)\s+)*)"
    r"(?P<name>#?[A-Za-z_$][\w$]*)\s*(?::\s*[^=;]+?)?\s*=\s*(?P<async>async\s+)?"
    r"\((?P<params>[^)]*)\)\s*(?::\s*(?P<ret>[^=;{]+?))?\s*=>",
    re.MULTILINE,
)
_MEMBER_PROPERTY = re.compile(
    r"^(?P<mods>(?:(?:public|private|protected|static|readonly|declare|override|abstract)\s+)*)"
    r"(?P<name>#?[A-Za-z_$][\w$]*)\s*[?!]?\s*(?::\s*(?P<type>[^=]+?))?\s*(?:=.*)?$"
)
_DECORATOR = re.compile(r"@[\w$.]+(?:\([^)]*\))?\s*")
_INTERFACE_METHOD = re.compile(
    r"^(?:readonly\s+)?(?P<name>[A-Za-z_$][\w$]*)\??\s*(?:<[^>]*>)?\s*\((?P<params>[^)]*)\)\s*(?::\s*(?P<ret>.+))?$"
)
_INTERFACE_PROPERTY = re.compile(r"^(?:readonly\s+)?(?P<name>[A-Za-z_$][\w$]*)\??\s*:\s*(?P<type>.+)$")
_IMPORT = re.compile(
    r"import\s+(?:type\s+)?(?P<clause>[\w$]+(?:\s*,\s*(?:\{[^}]*\}|\*\s+as\s+[\w$]+))?|\{[^}]*\}|\*\s+as\s+[\w$]+)"
    r"\s+from\s+['\"](?P<source>[^'\"]+)['\"]"
)
_SIDE_EFFECT_IMPORT = re.compile(r"import\s+['\"](?P<source>[^'\"]+)['\"]")
_REQUIRE = re.compile(
    r"(?:(?:const|let|var)\s+(?P<target>[\w$]+|\{[^}]*\})\s*=\s*)?require\(\s*['\"](?P<source>[^'\"]+)['\"]\s*\)"
)
_EXPORT = re.compile(
    r"export\s+(?P<default>default\s+)?(?:async\s+)?"
    r"(?:(?P<kind>function\*?|abstract\s+class|class|const|let|var|interface|type|enum)\s+)?(?P<name>[\w$]+)"
)
_EXPORT_LIST = re.compile(r"export\s*\{(?P<names>[^}]*)\}")
_TYPE_ALIAS = re.compile(r"(?:export\s+)?type\s+(?P<name>[\w$]+)\s*(?:<[^>]*>)?\s*=\s*[^;]+;")
_JSDOC = re.compile(r"/\*\*([\s\S]*?)\*/")
_LINE_COMMENT = re.compile(r"(?<![:\w])//\s*(?P<text>.+)")
_COMPONENT = re.compile(
    r"(?:export\s+)?(?:default\s+)?(?:"
    r"(?:const|let)\s+(?P<const>[A-Z][\w$]+)\s*(?::\s*[^=]+?)?=\s*(?:async\s+)?(?:\([^)]*\)|[\w$]+)"
    r"\s*(?::\s*[^=]+?)?\s*=>"
    r"|function\s+(?P<func>[A-Z][\w$]+)\s*\()"
)
_IMPLICIT_MARKUP_RETURN = re.compile(r"=>\s*\(?\s*<")

_NON_MEMBER_NAMES = {
    "constructor", "if", "for", "while", "switch", "catch", "function", "return",
    "do", "else", "try", "with", "new", "typeof", "await", "super",
}
_NON_PROPERTY_NAMES = _NON_MEMBER_NAMES | {
    "get", "set", "static", "async", "public", "private", "protected", "readonly", "break",
    "continue", "throw", "const", "let", "var", "import", "export", "default", "case",
}
_VISIBILITIES = ("public", "private", "protected")


def _is_code(mask: List[bool], index: int) -> bool:
    return 0 <= index < len(mask) and mask[index]


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = " ".join(value.split())
    return cleaned or None


def extract_functions(content: str, *, infer_return_types: bool = False) -> List[SymbolRecord]:
    """Return declared functions and assigned arrow functions, in source order."""
    mask = code_mask(content)
    found: List[Tuple[int, SymbolRecord]] = []

    for match in _FUNCTION.finditer(content):
        name = match.group("name")
        if len(name) <= 1 or not _is_code(mask, match.start()):
            continue
        declaration = match.group(0)
        record = SymbolRecord(
            name=name,
            parameters=split_parameters(match.group("params")),
            return_type=_clean(match.group("ret")),
            line=line_of(content, match.start()),
            is_exported=declaration.startswith("export"),
            is_async=bool(re.search(r"\basync\b", declaration)),
            description=preceding_doc_comment(content, match.start()),
        )
        if infer_return_types and record.return_type is None:
            open_index = match.end() - 1
            body = content[open_index:find_matching_brace(content, open_index, mask) + 1]
            record.return_type = infer_return_type(body)
        found.append((match.start(), record))

    for match in _ARROW.finditer(content):
        name = match.group("name")
        if len(name) <= 1 or not _is_code(mask, match.start()):
            continue
        declaration = match.group(0)
        found.append(
            (
                match.start(),
                SymbolRecord(
                    name=name,
                    parameters=split_parameters(match.group("params")),
                    return_type=_clean(match.group("ret")),
                    line=line_of(content, match.start()),
                    is_exported=declaration.startswith("export"),
                    is_async=bool(re.search(r"=\s*async\b", declaration)),
                    description=preceding_doc_comment(content, match.start()),
                ),
            )
        )

    found.sort(key=lambda item: item[0])
    return [record for _, record in found]


def infer_return_type(body: str) -> Optional[str]:
    if "return " not in body:
        return None
    if "return true" in body or "return false" in body:
        return "boolean"
    if "return [" in body:
        return "array"
    if "return {" in body:
        return "object"
    return None


def extract_classes(content: str) -> List[ClassRecord]:
    """Return class declarations with the members declared directly in their bodies."""
    mask = code_mask(content)
    classes: List[ClassRecord] = []
    for match in _CLASS.finditer(content):
        if not _is_code(mask, match.start()):
            continue
        open_index = match.end() - 1
        close_index = find_matching_brace(content, open_index, mask)
        body_offset = open_index + 1
        body = content[body_offset:close_index]
        implements = match.group("implements")
        classes.append(
            ClassRecord(
                name=match.group("name"),
                line=line_of(content, match.start()),
                extends=match.group("extends"),
                implements=[item.strip() for item in implements.split(",") if item.strip()] if implements else [],
                description=preceding_doc_comment(content, match.start()),
                methods=_class_methods(content, body, body_offset),
                properties=_class_properties(body),
            )
        )
    return classes


def _class_methods(content: str, body: str, body_offset: int) -> List[SymbolRecord]:
    skeleton, positions = collapse_nested(body)
    found: List[Tuple[int, SymbolRecord]] = []
    for match in _MEMBER_METHOD.finditer(skeleton):
        name = match.group("name")
        if name in _NON_MEMBER_NAMES:
            continue
        mods = match.group("mods").split()
        absolute = body_offset + positions[match.start("name")]
        found.append(
            (
                match.start(),
                SymbolRecord(
                    name=name,
                    parameters=split_parameters(match.group("params")),
                    return_type=_clean(match.group("ret")),
                    line=line_of(content, absolute),
                    is_async="async" in mods,
                    description=preceding_doc_comment(content, body_offset + positions[match.start()]),
                ),
            )
        )
    for match in _MEMBER_ARROW.finditer(skeleton):
        name = match.group("name")
        if name in _NON_MEMBER_NAMES:
            continue
        absolute = body_offset + positions[match.start("name")]
        found.append(
            (
                match.start(),
                SymbolRecord(
                    name=name,
                    parameters=split_parameters(match.group("params")),
                    return_type=_clean(match.group("ret")),
                    line=line_of(content, absolute),
                    is_async=bool(match.group("async")),
                ),
            )
        )
    found.sort(key=lambda item: item[0])
    return [record for _, record in found]


def _class_properties(body: str) -> List[PropertyRecord]:
    skeleton, _ = collapse_nested(body)
    properties: List[PropertyRecord] = []
    seen: set[str] = set()
    for segment in re.split(r"[;\n]", skeleton):
        text = _DECORATOR.sub("", segment.strip().lstrip("{}").strip())
        if not text or "(" in text or text.startswith(("{", "}")):
            continue
        match = _MEMBER_PROPERTY.match(text.rstrip(",").strip())
        if not match:
            continue
        name = match.group("name")
        if name in _NON_PROPERTY_NAMES or name in seen:
            continue
        mods = match.group("mods").split()
        visibility = next((mod for mod in mods if mod in _VISIBILITIES), None)
        if visibility is None:
            visibility = "private" if name.startswith("#") else "public"
        properties.append(
            PropertyRecord(
                name=name,
                type=_clean(match.group("type")),
                visibility=visibility,
                is_static="static" in mods,
            )
        )
        seen.add(name)
    return properties


def extract_interfaces(content: str) -> List[InterfaceRecord]:
    mask = code_mask(content)
    interfaces: List[InterfaceRecord] = []
    for match in _INTERFACE.finditer(content):
        if not _is_code(mask, match.start()):
            continue
        open_index = match.end() - 1
        close_index = find_matching_brace(content, open_index, mask)
        skeleton, _ = collapse_nested(content[open_index + 1:close_index])
        properties: List[PropertyRecord] = []
        methods: List[SymbolRecord] = []
        for segment in re.split(r"[;\n]", skeleton):
            text = segment.strip().rstrip(",").strip()
            if not text:
                continue
            method = _INTERFACE_METHOD.match(text)
            if method:
                methods.append(
                    SymbolRecord(
                        name=method.group("name"),
                        parameters=split_parameters(method.group("params")),
                        return_type=_clean(method.group("ret")),
                    )
                )
                continue
            prop = _INTERFACE_PROPERTY.match(text)
            if prop:
                properties.append(PropertyRecord(name=prop.group("name"), type=_clean(prop.group("type"))))
        extends = match.group("extends")
        interfaces.append(
            InterfaceRecord(
                name=match.group("name"),
                line=line_of(content, match.start()),
                extends=[item.strip() for item in extends.split(",") if item.strip()] if extends else [],
                properties=properties,
                methods=methods,
            )
        )
    return interfaces


def _binding_names(clause: str) -> List[str]:
    names: List[str] = []
    for part in clause.strip().strip("{}").split(","):
        binding = part.strip()
        if not binding:
            continue
        binding = re.sub(r"^type\s+", "", binding)
        names.append(re.split(r"\s+as\s+|\s*:\s*", binding)[0].strip())
    return [name for name in names if name]


def extract_imports(content: str) -> List[ImportRecord]:
    mask = code_mask(content)
    found: List[Tuple[int, ImportRecord]] = []
    for match in _IMPORT.finditer(content):
        if not _is_code(mask, match.start()):
            continue
        clause = match.group("clause").strip()
        record = ImportRecord(source=match.group("source"))
        named = re.search(r"\{([^}]*)\}", clause)
        namespace = re.search(r"\*\s+as\s+([\w$]+)", clause)
        default = re.match(r"([\w$]+)", clause)
        if default:
            record.names.append(default.group(1))
            record.is_default = True
        if named:
            record.names.extend(_binding_names(named.group(1)))
        if namespace:
            record.names.append(namespace.group(1))
            record.is_namespace = True
        found.append((match.start(), record))
    for match in _SIDE_EFFECT_IMPORT.finditer(content):
        if _is_code(mask, match.start()):
            found.append((match.start(), ImportRecord(source=match.group("source"))))
    for match in _REQUIRE.finditer(content):
        if not _is_code(mask, match.start()):
            continue
        target = match.group("target")
        record = ImportRecord(source=match.group("source"), kind="require")
        if target and target.startswith("{"):
            record.names.extend(_binding_names(target))
        elif target:
            record.names.append(target)
            record.is_default = True
        found.append((match.start(), record))
    found.sort(key=lambda item: item[0])
    return [record for _, record in found]


_EXPORT_KINDS: Dict[str, str] = {
    "function": "function",
    "function*": "function",
    "class": "class",
    "abstract class": "class",
    "const": "variable",
    "let": "variable",
    "var": "variable",
    "interface": "interface",
    "type": "type",
    "enum": "type",
}
_EXPORT_KEYWORDS = {"type", "interface", "function", "class", "const", "let", "var", "enum", "async", "abstract"}


def extract_exports(content: str) -> List[ExportRecord]:
    mask = code_mask(content)
    exports: List[ExportRecord] = []
    for match in _EXPORT.finditer(content):
        if not _is_code(mask, match.start()):
            continue
        is_default = bool(match.group("default"))
        kind_token = match.group("kind")
        if not kind_token and match.group("name") in _EXPORT_KEYWORDS:
            continue
        if kind_token:
            kind = _EXPORT_KINDS.get(" ".join(kind_token.split()), "variable")
        else:
            kind = "default" if is_default else "variable"
        exports.append(ExportRecord(name=match.group("name"), kind=kind, is_default=is_default))
    for match in _EXPORT_LIST.finditer(content):
        if not _is_code(mask, match.start()):
            continue
        for part in match.group("names").split(","):
            pieces = re.split(r"\s+as\s+", part.strip())
            if not pieces[0]:
                continue
            exported = pieces[-1].strip()
            exports.append(
                ExportRecord(name=exported, kind="default" if exported == "default" else "variable",
                             is_default=exported == "default")
            )
    return exports


def extract_type_aliases(content: str) -> List[ExportRecord]:
    mask = code_mask(content)
    return [
        ExportRecord(name=match.group("name"), kind="type")
        for match in _TYPE_ALIAS.finditer(content)
        if _is_code(mask, match.start())
    ]


def extract_comments(content: str) -> List[str]:
    """Return substantial documentation and line comments."""
    comments: List[str] = []
    for match in _JSDOC.finditer(content):
        text = flatten_doc_comment(match.group(1))
        if len(text) > 20:
            comments.append(text)
    mask = code_mask(content)
    for match in _LINE_COMMENT.finditer(content):
        # Slashes preceded by string or comment text are not the start of a line comment.
        if match.start() > 0 and not _is_code(mask, match.start() - 1):
            continue
        text = match.group("text").strip()
        if len(text) > 20 and "TODO" not in text and "FIXME" not in text:
            comments.append(text)
    return comments


def mark_components(content: str, functions: Iterable[SymbolRecord]) -> List[SymbolRecord]:
    """Flag UI-component-shaped declarations, appending those the function pass missed."""
    records = list(functions)
    by_name = {record.name: record for record in records}
    mask = code_mask(content)
    for match in _COMPONENT.finditer(content):
        if not _is_code(mask, match.start()):
            continue
        name = match.group("const") or match.group("func")
        window = content[match.start():match.start() + 500]
        returns = "return" in window or bool(_IMPLICIT_MARKUP_RETURN.search(window))
        if not returns or not ("<" in window or "jsx" in window):
            continue
        description = f"React component: {name}"
        existing = by_name.get(name)
        if existing is not None:
            existing.is_component = True
            existing.description = existing.description or description
            existing.return_type = existing.return_type or "JSX.Element"
            continue
        record = SymbolRecord(
            name=name,
            parameters=["props"],
            return_type="JSX.Element",
            line=line_of(content, match.start()),
            is_exported=match.group(0).startswith("export"),
            description=description,
            is_component=True,
        )
        records.append(record)
        by_name[name] = record
    return records


__all__ = [
    "extract_classes",
    "extract_comments",
    "extract_exports",
    "extract_functions",
    "extract_imports",
    "extract_interfaces",
    "extract_type_aliases",
    "infer_return_type",
    "mark_components",
]
