"""Codebase assistant tests."""

from __future__ import annotations

import pytest

from codescribe.chat import CodebaseAssistant, match_intent
from codescribe.chat.assistant import build_chat_prompt
from codescribe.chat.snippets import extract_function_code, search_term
from codescribe.errors import LLMError
from codescribe.ingest import TreeIngestor
from codescribe.llm import LLMRunner
from codescribe.models import (
    ArchitectureSummary,
    DependencyRecord,
    FileAnalysis,
    ProjectAnalysis,
    SymbolRecord,
)

CART_VIEW = "export function CartView(items) {\n  return items.length;\n}\n"
API = (
    "/** Loads the cart */\n"
    "export async function fetchCart() {\n"
    "  return http.get('/cart');\n"
    "}\n"
    "const postOrder = (order) => http.post('/orders', order);\n"
)
SESSION = "export function loginUser(email, password) {\n  return token;\n}\n"


@pytest.fixture
def project() -> ProjectAnalysis:
    return ProjectAnalysis(
        name="shop",
        type="react",
        structure=TreeIngestor().from_blobs({}),
        files=[
            FileAnalysis(
                "src/components/CartView.tsx",
                category="component",
                functions=[SymbolRecord("CartView", ["items"], is_exported=True, is_component=True)],
                content=CART_VIEW,
            ),
            FileAnalysis(
                "src/services/api.ts",
                category="service",
                functions=[
                    SymbolRecord("fetchCart", is_async=True, is_exported=True, description="Loads the cart"),
                    SymbolRecord("postOrder", ["order"]),
                ],
                content=API,
            ),
            FileAnalysis(
                "src/auth/session.js",
                category="utility",
                functions=[SymbolRecord("loginUser", ["email", "password"], is_exported=True)],
                content=SESSION,
            ),
        ],
        dependencies=[
            DependencyRecord("react", "^18.2.0", "framework", "UI library"),
            DependencyRecord("mongoose", "^8.0.0"),
        ],
        dev_dependencies=[DependencyRecord("vite", "^5.0.0", "build")],
        architecture=ArchitectureSummary(["Component-based"], ["React"], "Vite"),
    )


class StubRunner:
    def __init__(self, text: str = "", *, error: Exception | None = None, available: bool = True) -> None:
        self.text = text
        self.error = error
        self.available = available
        self.prompts: list[str] = []

    def run(self, prompt: str, *, system: str | None = None, max_tokens: int | None = None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.mark.parametrize(
    ("question", "intent"),
    [
        ("What components exist?", "components"),
        ("List the API endpoints", "api"),
        ("What packages does it use?", "dependencies"),
        ("Explain the folder layout", "architecture"),
        ("Where is the cart file?", "files"),
        ("Which HTTP methods are used?", "http_methods"),
        ("Show me a specific function", "functions"),
        ("How does login work?", "auth"),
        ("Which database is used?", "database"),
        ("Show me the code for fetchCart", "code"),
        ("Tell me a joke", None),
    ],
)
def test_intents_are_matched_in_order(question: str, intent: str | None) -> None:
    matched = match_intent(question)
    assert (matched.name if matched else None) == intent


def test_search_term_drops_filler_words() -> None:
    assert search_term("Show me the code for fetchCart?") == "fetchcart"
    assert search_term("Where is the cart file?") == "cart"


def test_extract_function_code_keeps_jsdoc_and_body() -> None:
    assert extract_function_code(API, "fetchCart") == (
        "/** Loads the cart */\nexport async function fetchCart() {\n  return http.get('/cart');\n}"
    )
    assert extract_function_code(API, "postOrder") == "const postOrder = (order) => http.post('/orders', order);"
    assert extract_function_code("", "anything") is None
    assert extract_function_code("x" * 700, "missing").endswith("\n// ... rest of file")


def test_components_answer(project: ProjectAnalysis) -> None:
    response = CodebaseAssistant(project).ask("What components are there?")

    assert response.source == "local"
    assert response.intent == "components"
    assert response.content.startswith("## Components in shop")
    assert "Found **1 components**" in response.content
    assert "**Main Function:** `CartView`" in response.content
    assert response.related_files == ["src/components/CartView.tsx"]
    assert response.snippets[0].language == "typescript"
    assert response.snippets[0].code == CART_VIEW.rstrip("\n")


def test_code_answer_returns_matching_function(project: ProjectAnalysis) -> None:
    response = CodebaseAssistant(project).ask("Show me the code for fetchCart")

    assert response.intent == "code"
    assert "### 1. fetchCart" in response.content
    assert "**Type:** Async function" in response.content
    assert response.related_files == ["src/services/api.ts"]
    assert response.snippets[0].code.startswith("/** Loads the cart */")


def test_auth_and_database_answers(project: ProjectAnalysis) -> None:
    auth = CodebaseAssistant(project).ask("How does login work?")
    assert auth.related_files == ["src/auth/session.js"]
    assert "- `loginUser(email, password)`" in auth.content
    assert auth.snippets[0].language == "javascript"

    database = CodebaseAssistant(project).ask("Which database is used?")
    assert "**mongoose** (^8.0.0) - Database library" in database.content


def test_dependencies_answer_groups_by_category(project: ProjectAnalysis) -> None:
    content = CodebaseAssistant(project).ask("What dependencies are used?").content

    assert "### Production Dependencies (2)" in content
    assert "**Frameworks:**\n- **react** (^18.2.0) - UI library" in content
    assert "**Other:**\n- **mongoose** (^8.0.0) - other" in content
    assert "**Vite** is used for building and development." in content


def test_open_question_goes_to_model(project: ProjectAnalysis) -> None:
    runner = StubRunner("It is a shop.\n")

    response = CodebaseAssistant(project, runner).ask("Tell me a joke")

    assert response.source == "ai"
    assert response.content == "It is a shop."
    assert response.intent is None
    assert runner.prompts == [build_chat_prompt(project, "Tell me a joke")]
    assert '"buildTool": "Vite"' in runner.prompts[0]


def test_model_failure_falls_back(project: ProjectAnalysis) -> None:
    runner = StubRunner(error=LLMError("status 429: quota exceeded"))

    response = CodebaseAssistant(project, runner).ask("How can I improve this?")

    assert response.source == "fallback"
    assert response.reason == "status 429: quota exceeded"
    assert response.content.startswith("## Improvement Ideas")


def test_unavailable_runner_gives_help(project: ProjectAnalysis) -> None:
    runner = LLMRunner("openai", api_key=None)
    runner.api_key = None

    response = CodebaseAssistant(project, runner).ask("What can you help with?")

    assert response.source == "fallback"
    assert response.reason == "No model API key configured"
    assert response.content.startswith("## Ask about shop")
    assert response.to_dict()["suggestions"][0] == "What components are in this project?"


def test_model_timeout_falls_back(project: ProjectAnalysis, monkeypatch: pytest.MonkeyPatch) -> None:
    def _urlopen(request, timeout=None):
        raise TimeoutError("The read operation timed out")

    monkeypatch.setattr("codescribe.llm.runner.urlopen", _urlopen)

    response = CodebaseAssistant(project, LLMRunner("gemini", "gemini-pro", api_key="k")).ask("Tell me a joke")

    assert response.source == "fallback"
    assert response.reason == "Model request failed: The read operation timed out"
