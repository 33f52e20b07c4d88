"""UI interaction surfaces: components, forms, bound event handlers and navigation."""

from __future__ import annotations

import re
from typing import List

from ..analyzers.utils import split_parameters
from ..models import FileAnalysis
from .base import Extractor
from .models import (
    ComponentRecord,
    EventHandlerRecord,
    FormField,
    FormRecord,
    InteractionRecord,
    NavigationRecord,
)

_FRONTEND_SUFFIXES = (".tsx", ".jsx", ".vue", ".svelte")
_FRONTEND_CONTENT = ("react", "usestate", "useeffect", "jsx")

_COMPONENT = re.compile(
    r"(?:export\s+(?:default\s+)?)?(?:const\s+([A-Z]\w*)\s*(?::\s*[\w.<>]+\s*)?=\s*(?:async\s+)?"
    r"\(([^)]*)\)\s*(?::\s*[\w.<>]+\s*)?=>|function\s+([A-Z]\w*)\s*\(([^)]*)\))"
)
_JSX_ELEMENT = re.compile(r"<([A-Za-z][\w.]*)[^>]*>")
_HOOK = re.compile(r"\b(use[A-Z]\w*)\s*\(")
_HANDLER_DECLARATION = re.compile(r"(?:const|function)\s+(\w*[Hh]andle\w*)\b")

_FORM = re.compile(r"<form\b([^>]*)>([\s\S]*?)</form>", re.IGNORECASE)
_FORM_NAME = re.compile(r"\b(?:name|id)=['\"]([^'\"]+)['\"]")
_INPUT = re.compile(r"<(input|select|textarea)\b([^>]*)/?>", re.IGNORECASE)
_ATTRIBUTE = re.compile(r"\b([\w-]+)(?:=(?:\{([^}]*)\}|['\"]([^'\"]*)['\"]))?")
_SUBMIT = re.compile(r"onSubmit\s*=\s*\{([^}]+)\}")
_VALIDATION_ATTRIBUTES = ("required", "pattern", "minLength", "maxLength", "min", "max")

_EVENT = re.compile(r"\bon(Click|Submit|Change|Blur|Focus|KeyDown|KeyUp|Input)\s*=\s*\{([^}]+)\}")

_NAVIGATION = (
    (re.compile(r"\bnavigate\(\s*['\"`]([^'\"`]+)['\"`]"), "programmatic"),
    (re.compile(r"\brouter\.(?:push|replace)\(\s*['\"`]([^'\"`]+)['\"`]"), "programmatic"),
    (re.compile(r"<Link\s+(?:to|href)=['\"`]([^'\"`]+)['\"`]"), "link"),
)


def is_frontend_file(file: FileAnalysis) -> bool:
    path = file.path.lower()
    content = file.content.lower()
    if file.category == "component" or path.endswith(_FRONTEND_SUFFIXES) or "component" in path:
        return True
    if any(probe in content for probe in _FRONTEND_CONTENT):
        return True
    return "return (" in content and "<" in content


def _unique(values) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def extract_components(content: str) -> List[ComponentRecord]:
    jsx = _unique(match.group(1) for match in _JSX_ELEMENT.finditer(content))
    hooks = _unique(match.group(1) for match in _HOOK.finditer(content))
    handlers = _unique(match.group(1) for match in _HANDLER_DECLARATION.finditer(content))
    components: List[ComponentRecord] = []
    seen = set()
    for match in _COMPONENT.finditer(content):
        name = match.group(1) or match.group(3)
        if not name or name in seen:
            continue
        seen.add(name)
        raw_props = match.group(2) if match.group(1) else match.group(4)
        components.append(
            ComponentRecord(
                name=name,
                props=split_parameters(raw_props or ""),
                jsx_elements=list(jsx),
                hooks=list(hooks),
                handlers=list(handlers),
            )
        )
    return components


def _attributes(raw: str) -> dict:
    attributes = {}
    for match in _ATTRIBUTE.finditer(raw):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attributes[match.group(1)] = value if value is not None else True
    return attributes


def extract_form_fields(form_body: str) -> List[FormField]:
    fields: List[FormField] = []
    for match in _INPUT.finditer(form_body):
        attributes = _attributes(match.group(2))
        name = attributes.get("name") or attributes.get("id")
        if not isinstance(name, str):
            continue
        tag = match.group(1).lower()
        field_type = attributes.get("type") if tag == "input" else tag
        fields.append(
            FormField(
                name=name,
                type=field_type if isinstance(field_type, str) else "text",
                required="required" in attributes,
                validation=[key for key in _VALIDATION_ATTRIBUTES if key in attributes],
            )
        )
    return fields


def extract_forms(content: str) -> List[FormRecord]:
    forms: List[FormRecord] = []
    for match in _FORM.finditer(content):
        name_match = _FORM_NAME.search(match.group(1))
        submit = _SUBMIT.search(match.group(1)) or _SUBMIT.search(content[match.start():match.start() + 500])
        forms.append(
            FormRecord(
                name=name_match.group(1) if name_match else "",
                fields=extract_form_fields(match.group(2)),
                submit_handler=submit.group(1).strip() if submit else "",
            )
        )
    return forms


def extract_events(content: str) -> List[EventHandlerRecord]:
    return [
        EventHandlerRecord(event=match.group(1).lower(), handler=match.group(2).strip())
        for match in _EVENT.finditer(content)
    ]


def extract_navigation(content: str) -> List[NavigationRecord]:
    navigation: List[NavigationRecord] = []
    for pattern, kind in _NAVIGATION:
        navigation.extend(NavigationRecord(target=match.group(1), kind=kind) for match in pattern.finditer(content))
    return navigation


class InteractionExtractor(Extractor):
    name = "interactions"

    def supports(self, file: FileAnalysis) -> bool:
        return is_frontend_file(file)

    def extract(self, file: FileAnalysis) -> List[InteractionRecord]:
        content = file.content
        record = InteractionRecord(
            file=file.path,
            components=extract_components(content),
            forms=extract_forms(content),
            events=extract_events(content),
            navigation=extract_navigation(content),
        )
        return [] if record.is_empty else [record]


__all__ = [
    "InteractionExtractor",
    "extract_components",
    "extract_events",
    "extract_form_fields",
    "extract_forms",
    "extract_navigation",
    "is_frontend_file",
]
