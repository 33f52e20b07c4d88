"""Questions the assistant answers straight from the analysis, without a model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import DependencyRecord, FileAnalysis, ProjectAnalysis, SymbolRecord
from .models import ChatResponse, CodeSnippet
from .snippets import extract_function_code, language_for, search_term

COMPONENT_LIMIT = 6
SERVICE_LIMIT = 5
FILE_LIMIT = 6
FUNCTION_LIMIT = 6

_API_NAME_HINTS = ("api", "fetch", "get", "post", "create", "update", "delete", "request")
_AUTH_NAME_HINTS = ("auth", "login", "register", "token", "verify", "sign")
_AUTH_DEPENDENCY_HINTS = ("auth", "jwt", "passport", "session", "firebase", "supabase")
_DB_PATH_HINTS = ("model", "schema", "database", "db", "prisma")
_DB_NAME_HINTS = ("create", "find", "update", "delete", "save", "query")
_DB_DEPENDENCY_HINTS = (
    "prisma",
    "mongoose",
    "sequelize",
    "typeorm",
    "knex",
    "mysql",
    "postgres",
    "mongodb",
    "sqlite",
    "supabase",
)
_HTTP_METHOD_HINTS: Tuple[Tuple[str, str], ...] = (
    ("GET", "get"),
    ("POST", "post"),
    ("PUT", "put"),
    ("DELETE", "delete"),
    ("PATCH", "patch"),
)
DEPENDENCY_GROUPS: Tuple[Tuple[str, str], ...] = (
    ("Frameworks", "framework"),
    ("UI Libraries", "ui"),
    ("Styling", "styling"),
    ("API Clients", "api"),
    ("Utilities", "utility"),
    ("Build Tools", "build"),
    ("Testing", "testing"),
    ("Other", "other"),
)

Answer = Callable[[ProjectAnalysis, str], ChatResponse]


@dataclass(frozen=True)
class Intent:
    name: str
    matches: Callable[[str], bool]
    answer: Answer


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(needle in text for needle in needles)


def _params(symbol: SymbolRecord) -> str:
    return ", ".join(symbol.parameters) if symbol.parameters else "None"


def _signature(symbol: SymbolRecord) -> str:
    text = f"`{symbol.name}({', '.join(symbol.parameters)})`"
    if symbol.is_async:
        text += " *(async)*"
    if symbol.return_type:
        text += f" -> {symbol.return_type}"
    return text


def _snippet(file: FileAnalysis, symbol: SymbolRecord, description: str) -> Optional[CodeSnippet]:
    code = extract_function_code(file.content, symbol.name)
    if not code:
        return None
    return CodeSnippet(language=language_for(file.path), code=code, filename=file.path, description=description)


def _all_functions(project: ProjectAnalysis) -> List[Tuple[FileAnalysis, SymbolRecord]]:
    return [(file, function) for file in project.files for function in file.functions]


def _symbol_details(symbol: SymbolRecord, path: str) -> List[str]:
    lines = [f"**File:** `{path}`", f"**Parameters:** {_params(symbol)}"]
    if symbol.return_type:
        lines.append(f"**Returns:** {symbol.return_type}")
    if symbol.is_async:
        lines.append("**Type:** Async function")
    if symbol.is_exported:
        lines.append("**Exported:** Yes")
    if symbol.description:
        lines.append(f"**Description:** {symbol.description}")
    return lines


def _dependency_line(dependency: DependencyRecord, default: str) -> str:
    return f"- **{dependency.name}** ({dependency.version}) - {dependency.description or default}"


def components_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    components = project.files_in_category("component")
    if not components:
        return ChatResponse(
            content=(
                "## Components\n\nNo UI components were detected in this project. It may be backend-only, "
                "or its components may be organised in a way the analysis does not recognise."
            ),
            suggestions=["Show me the project structure", "What type of project is this?", "Show me the main functions"],
        )

    lines = [f"## Components in {project.name}", "", f"Found **{len(components)} components**:", ""]
    snippets: List[CodeSnippet] = []
    for index, file in enumerate(components[:COMPONENT_LIMIT]):
        main = next((f for f in file.functions if f.name[:1].isupper()), file.functions[0] if file.functions else None)
        lines.append(f"### {index + 1}. {_basename(file.path)}")
        lines.append(f"**Path:** `{file.path}`")
        if main is not None:
            lines.append(f"**Main Function:** `{main.name}`")
            lines.append(f"**Parameters:** {_params(main)}")
            if main.return_type:
                lines.append(f"**Returns:** {main.return_type}")
            if main.description:
                lines.append(f"**Description:** {main.description}")
            if index < 2:
                snippet = _snippet(file, main, f"{main.name} component implementation")
                if snippet:
                    snippets.append(snippet)
        lines.append(f"**Functions:** {len(file.functions)}")
        lines.append(f"**Complexity:** {file.complexity}")
        others = [f.name for f in file.functions if f is not main][:3]
        if others:
            lines.append(f"**Other Functions:** {', '.join(others)}")
        lines.append("")
    if len(components) > COMPONENT_LIMIT:
        lines.append(f"*... and {len(components) - COMPONENT_LIMIT} more components*")

    return ChatResponse(
        content="\n".join(lines).strip(),
        snippets=snippets,
        related_files=[file.path for file in components[:5]],
        suggestions=[
            "Show me the code for a specific component",
            "How are components organized?",
            "Show me the most complex components",
        ],
    )


def _is_service_file(file: FileAnalysis) -> bool:
    path = file.path.lower()
    if file.category == "service" or _contains_any(path, ("api", "route", "service")):
        return True
    return any(_contains_any(function.name.lower(), _API_NAME_HINTS[:-1]) for function in file.functions)


def api_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    services = [file for file in project.files if _is_service_file(file)]
    if not services:
        http_files = [
            file.path
            for file in project.files
            if _contains_any(file.content, ("fetch(", "axios", "http", "api"))
        ]
        if not http_files:
            return ChatResponse(
                content="## API Analysis\n\nNo API endpoints or HTTP services were detected in this project.",
                suggestions=["What external libraries are used?", "Show me the project structure"],
            )
        listing = "\n".join(f"{index}. `{path}`" for index, path in enumerate(http_files, start=1))
        return ChatResponse(
            content=f"## HTTP Usage\n\nFound **{len(http_files)} files** with HTTP-related code:\n\n{listing}",
            related_files=http_files,
            suggestions=["How is data fetching handled?", "What external APIs are used?"],
        )

    lines = [
        f"## API & Services in {project.name}",
        "",
        f"Found **{len(services)} service files** with API-related functionality:",
        "",
    ]
    snippets: List[CodeSnippet] = []
    for index, file in enumerate(services[:SERVICE_LIMIT]):
        lines.append(f"### {index + 1}. {_basename(file.path)}")
        lines.append(f"**Path:** `{file.path}`")
        api_functions = [f for f in file.functions if _contains_any(f.name.lower(), _API_NAME_HINTS)]
        if api_functions:
            lines.append("**API Functions:**")
            lines.extend(f"- {_signature(function)}" for function in api_functions[:4])
            if index == 0:
                snippet = _snippet(file, api_functions[0], f"{api_functions[0].name} API function implementation")
                if snippet:
                    snippets.append(snippet)
        else:
            lines.append("**All Functions:**")
            lines.extend(f"- {_signature(function)}" for function in file.functions[:3])
        lines.append(f"**Total Functions:** {len(file.functions)}")
        lines.append(f"**Exports:** {len(file.exports)}")
        lines.append("")

    return ChatResponse(
        content="\n".join(lines).strip(),
        snippets=snippets,
        related_files=[file.path for file in services[:SERVICE_LIMIT]],
        suggestions=["Show me a specific API function", "What HTTP methods are used?", "Show me authentication code"],
    )


def dependencies_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    lines = [f"## Dependencies in {project.name}", ""]
    if project.dependencies:
        lines.extend([f"### Production Dependencies ({len(project.dependencies)})", ""])
        for label, category in DEPENDENCY_GROUPS:
            group = [dependency for dependency in project.dependencies if dependency.category == category]
            if not group:
                continue
            lines.append(f"**{label}:**")
            lines.extend(_dependency_line(dependency, category) for dependency in group[:5])
            lines.append("")
    if project.dev_dependencies:
        lines.extend([f"### Development Dependencies ({len(project.dev_dependencies)})", ""])
        lines.extend(_dependency_line(dependency, dependency.category) for dependency in project.dev_dependencies[:8])
        lines.append("")
    if not project.dependencies and not project.dev_dependencies:
        lines.extend(["No dependencies are declared in a package manifest.", ""])
    if project.architecture.build_tool:
        lines.extend(["### Build Tool", f"**{project.architecture.build_tool}** is used for building and development."])

    return ChatResponse(
        content="\n".join(lines).strip(),
        suggestions=["Show me how dependencies are imported", "What's the purpose of each library?"],
    )


def _group_by_category(files: Sequence[FileAnalysis]) -> Dict[str, List[FileAnalysis]]:
    grouped: Dict[str, List[FileAnalysis]] = {}
    for file in files:
        grouped.setdefault(file.category or "other", []).append(file)
    return grouped


def architecture_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    architecture = project.architecture
    lines = [
        f"## Project Structure: {project.name}",
        "",
        f"**Project Type:** {project.type.capitalize()} Application",
        "",
        "### File Organization",
    ]
    for category, files in _group_by_category(project.files).items():
        lines.append(f"**{category.capitalize()} Files ({len(files)}):**")
        lines.extend(f"- `{file.path}`" for file in files[:5])
        if len(files) > 5:
            lines.append(f"- ... and {len(files) - 5} more")
        lines.append("")
    if architecture.patterns:
        lines.append("### Architecture Patterns")
        lines.extend(f"- {pattern}" for pattern in architecture.patterns)
        lines.append("")
    if architecture.technologies:
        lines.append("### Core Technologies")
        lines.extend(f"- {technology}" for technology in architecture.technologies)
        lines.append("")
    lines.append("### Project Statistics")
    lines.append(f"- **Total files analyzed:** {len(project.files)}")
    for label, category in (
        ("Components", "component"),
        ("Services", "service"),
        ("Utilities", "utility"),
        ("Configuration files", "config"),
        ("Other files", "other"),
    ):
        lines.append(f"- **{label}:** {len(project.files_in_category(category))}")
    if project.entry_points:
        lines.extend(["", "### Entry Points"])
        lines.extend(f"- `{entry}`" for entry in project.entry_points)

    return ChatResponse(
        content="\n".join(lines).strip(),
        suggestions=["How are components organized?", "What design patterns are used?", "Show me the main entry points"],
    )


def files_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    term = search_term(query)
    matching = [
        file
        for file in project.files
        if term in file.path.lower()
        or any(term in function.name.lower() for function in file.functions)
        or any(term in cls.name.lower() for cls in file.classes)
    ]
    if not matching:
        listing = "\n".join(f"- `{file.path}`" for file in project.files[:10])
        return ChatResponse(
            content=f'## File Search Results\n\nNo files found matching "{term}".\n\n**Available files:**\n{listing}',
            suggestions=["Show me all components", "List all files"],
        )

    lines = [f'## Files matching "{term}"', "", f"Found **{len(matching)} files**:", ""]
    snippets: List[CodeSnippet] = []
    for index, file in enumerate(matching[:FILE_LIMIT]):
        lines.append(f"### {index + 1}. {_basename(file.path)}")
        lines.append(f"**Path:** `{file.path}`")
        lines.append(f"**Category:** {file.category}")
        lines.append(f"**Functions:** {len(file.functions)}")
        lines.append(f"**Classes:** {len(file.classes)}")
        if file.functions:
            relevant = next((f for f in file.functions if term in f.name.lower()), file.functions[0])
            lines.append(f"**Main Function:** `{relevant.name}({', '.join(relevant.parameters)})`")
            if index == 0:
                snippet = _snippet(file, relevant, f"{relevant.name} function from {file.path}")
                if snippet:
                    snippets.append(snippet)
        lines.append("")

    return ChatResponse(
        content="\n".join(lines).strip(),
        snippets=snippets,
        related_files=[file.path for file in matching[:FILE_LIMIT]],
        suggestions=[f"Show me the code in {matching[0].path}", "What imports does this file use?"],
    )


def functions_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    term = search_term(query)
    everything = _all_functions(project)
    matching = [
        (file, function)
        for file, function in everything
        if not term or term in function.name.lower() or term in (function.description or "").lower()
    ]
    if not matching:
        listing = "\n".join(f"- `{function.name}` in `{file.path}`" for file, function in everything[:10])
        return ChatResponse(
            content=f'## Function Search\n\nNo functions found matching "{term}".\n\n**Available functions:**\n{listing}',
            suggestions=["Show me all functions", "Find React components"],
        )

    title = f'## Functions matching "{term}"' if term else "## Functions"
    lines = [title, "", f"Found **{len(matching)} functions**:", ""]
    snippets: List[CodeSnippet] = []
    for index, (file, function) in enumerate(matching[:FUNCTION_LIMIT]):
        lines.append(f"### {index + 1}. {function.name}")
        lines.extend(_symbol_details(function, file.path))
        lines.append("")
        if index < 2:
            snippet = _snippet(file, function, f"{function.name} function implementation")
            if snippet:
                snippets.append(snippet)
    if len(matching) > FUNCTION_LIMIT:
        lines.append(f"*... and {len(matching) - FUNCTION_LIMIT} more functions*")

    related: List[str] = []
    for file, _ in matching[:FUNCTION_LIMIT]:
        if file.path not in related:
            related.append(file.path)
    return ChatResponse(
        content="\n".join(lines).strip(),
        snippets=snippets,
        related_files=related,
        suggestions=["Show me how this function is used", "Find all async functions"],
    )


def http_methods_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    by_method: Dict[str, List[Tuple[FileAnalysis, SymbolRecord]]] = {}
    for file, function in _all_functions(project):
        name = function.name.lower()
        for method, hint in _HTTP_METHOD_HINTS:
            if hint in name and not (hint == "get" and "forget" in name):
                by_method.setdefault(method, []).append((file, function))
    if not by_method:
        return ChatResponse(
            content="## HTTP Methods\n\nNo HTTP methods were detected in function names.",
            suggestions=["What API calls are made?", "Show me service functions"],
        )

    lines = ["## HTTP Methods Used", "", f"Found **{len(by_method)} HTTP methods** in the codebase:", ""]
    for method, entries in by_method.items():
        lines.append(f"### {method} Methods ({len(entries)})")
        lines.extend(f"- `{function.name}({', '.join(function.parameters)})` in `{file.path}`" for file, function in entries[:3])
        if len(entries) > 3:
            lines.append(f"- ... and {len(entries) - 3} more")
        lines.append("")

    first_method = next(iter(by_method))
    first_file, first_function = by_method[first_method][0]
    snippet = _snippet(first_file, first_function, f"{first_function.name} - {first_method} method implementation")
    related: List[str] = []
    for entries in by_method.values():
        for file, _ in entries:
            if file.path not in related:
                related.append(file.path)
    return ChatResponse(
        content="\n".join(lines).strip(),
        snippets=[snippet] if snippet else [],
        related_files=related[:5],
        suggestions=["How are POST requests handled?", "Show me error handling for HTTP requests"],
    )


def auth_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    auth_files = [
        file
        for file in project.files
        if "auth" in file.path.lower()
        or any(_contains_any(function.name.lower(), _AUTH_NAME_HINTS[:4]) for function in file.functions)
    ]
    auth_dependencies = [
        dependency for dependency in project.dependencies if _contains_any(dependency.name.lower(), _AUTH_DEPENDENCY_HINTS)
    ]
    if not auth_files:
        return ChatResponse(
            content=(
                "## Authentication\n\nNo authentication-related code was detected. Authentication may be "
                "handled by an external provider, or the application may be public."
            ),
            suggestions=["Find user-related code", "Show me login-related functions"],
        )

    lines = ["## Authentication & Security", "", f"Found **{len(auth_files)} files** with authentication logic:", ""]
    snippets: List[CodeSnippet] = []
    for index, file in enumerate(auth_files):
        lines.append(f"### {index + 1}. {_basename(file.path)}")
        lines.append(f"**Path:** `{file.path}`")
        auth_functions = [f for f in file.functions if _contains_any(f.name.lower(), _AUTH_NAME_HINTS)]
        if auth_functions:
            lines.append("**Auth Functions:**")
            lines.extend(f"- {_signature(function)}" for function in auth_functions)
            if index == 0:
                snippet = _snippet(file, auth_functions[0], f"{auth_functions[0].name} authentication function")
                if snippet:
                    snippets.append(snippet)
        else:
            lines.append("**All Functions:**")
            lines.extend(f"- {_signature(function)}" for function in file.functions[:3])
        lines.append(f"**Total Functions:** {len(file.functions)}")
        lines.append("")
    if auth_dependencies:
        lines.append("### Authentication Dependencies")
        lines.extend(_dependency_line(dependency, "Authentication library") for dependency in auth_dependencies)

    return ChatResponse(
        content="\n".join(lines).strip(),
        snippets=snippets,
        related_files=[file.path for file in auth_files],
        suggestions=["How does login work?", "How are tokens handled?"],
    )


def database_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    db_files = [
        file
        for file in project.files
        if _contains_any(file.path.lower(), _DB_PATH_HINTS)
        or any(_contains_any(function.name.lower(), _DB_NAME_HINTS) for function in file.functions)
    ]
    db_dependencies = [
        dependency for dependency in project.dependencies if _contains_any(dependency.name.lower(), _DB_DEPENDENCY_HINTS)
    ]
    if not db_files and not db_dependencies:
        return ChatResponse(
            content=(
                "## Database\n\nNo database-related code or dependencies were detected. The application may "
                "rely on external services for its data."
            ),
            suggestions=["What external APIs are used?", "Show me data fetching code"],
        )

    lines = ["## Database & Data Management", ""]
    if db_dependencies:
        lines.append("### Database Dependencies")
        lines.extend(_dependency_line(dependency, "Database library") for dependency in db_dependencies)
        lines.append("")
    if db_files:
        lines.extend([f"### Database Files ({len(db_files)})", ""])
        for index, file in enumerate(db_files[:5]):
            lines.append(f"#### {index + 1}. {_basename(file.path)}")
            lines.append(f"**Path:** `{file.path}`")
            operations = [f for f in file.functions if _contains_any(f.name.lower(), _DB_NAME_HINTS)]
            if operations:
                lines.append(f"**Data Functions:** {', '.join(f.name for f in operations[:5])}")
            lines.append("")

    return ChatResponse(
        content="\n".join(lines).strip(),
        related_files=[file.path for file in db_files[:5]],
        suggestions=["How is data validated?", "Show me data fetching code"],
    )


def code_answer(project: ProjectAnalysis, query: str) -> ChatResponse:
    term = search_term(query)
    everything = _all_functions(project)
    matching = [(file, function) for file, function in everything if term and term in function.name.lower()]
    if not matching:
        listing = "\n".join(f"- `{function.name}` in `{file.path}`" for file, function in everything[:8])
        return ChatResponse(
            content=f'## Code Search Results\n\nNo functions found matching "{term}".\n\nAvailable functions include:\n{listing}',
            suggestions=["Show me all functions", "What are the main functions?"],
        )

    lines = [f'## Code for "{term}"', "", f"Found **{len(matching)} matching functions**:", ""]
    snippets: List[CodeSnippet] = []
    related: List[str] = []
    for index, (file, function) in enumerate(matching[:3]):
        lines.append(f"### {index + 1}. {function.name}")
        lines.extend(_symbol_details(function, file.path))
        lines.append("")
        snippet = _snippet(file, function, f"{function.name} function implementation")
        if snippet:
            snippets.append(snippet)
        if file.path not in related:
            related.append(file.path)

    return ChatResponse(
        content="\n".join(lines).strip(),
        snippets=snippets,
        related_files=related,
        suggestions=["Show me how this function is used", "Explain what this code does"],
    )


INTENTS: Tuple[Intent, ...] = (
    Intent("components", lambda q: "component" in q, components_answer),
    Intent("api", lambda q: _contains_any(q, ("api", "endpoint", "route")), api_answer),
    Intent("dependencies", lambda q: _contains_any(q, ("dependenc", "package", "library")), dependencies_answer),
    Intent(
        "architecture",
        lambda q: _contains_any(q, ("architecture", "structure", "organization", "folder")),
        architecture_answer,
    ),
    Intent("files", lambda q: "file" in q and _contains_any(q, ("find", "show", "where")), files_answer),
    Intent("http_methods", lambda q: "http" in q and "method" in q, http_methods_answer),
    Intent(
        "functions",
        lambda q: _contains_any(q, ("function", "method", "show me a specific")),
        functions_answer,
    ),
    Intent("auth", lambda q: _contains_any(q, ("auth", "login", "security")), auth_answer),
    Intent("database", lambda q: _contains_any(q, ("database", "data", "model")), database_answer),
    Intent("code", lambda q: "show me" in q and "code" in q, code_answer),
)


def match_intent(query: str, intents: Sequence[Intent] = INTENTS) -> Optional[Intent]:
    """First intent whose keywords appear in the lowercased question."""
    lowered = query.lower()
    for intent in intents:
        if intent.matches(lowered):
            return intent
    return None


__all__ = ["INTENTS", "Intent", "match_intent"]
