"""Workflow and user-story generation tests."""

from __future__ import annotations

import csv
import io
import json

import pytest

from codescribe.augment import (
    WorkflowGenerator,
    build_fallback_result,
    build_workflow_prompt,
    export_workflows,
    extract_json_payload,
    validate_and_repair,
)
from codescribe.augment.export import CSV_HEADERS
from codescribe.augment.fallback import detect_application_type
from codescribe.augment.generator import SOURCE_AI, SOURCE_FALLBACK
from codescribe.augment.prompt import SYSTEM_PROMPT
from codescribe.errors import ExportError, LLMError
from codescribe.ingest import TreeIngestor
from codescribe.llm import LLMRunner
from codescribe.models import ProjectAnalysis
from codescribe.workflows.models import (
    AuthFlow,
    DataOperationRecord,
    RouteRecord,
    WorkflowAnalysisData,
)

MODEL_RESPONSE = """Here is the analysis you asked for:

```json
{
  "projectOverview": {"name": "Shop", "primaryUsers": ["Shoppers"]},
  "userWorkflows": [{"workflowName": "Checkout", "steps": [{"action": "Pay"}]}],
  "userStories": [{"title": "Pay for cart", "priority": "high"}]
}
```
"""


class StubRunner:
    """Duck-typed runner returning canned text or raising."""

    def __init__(self, text: str = "", *, error: Exception | None = None, available: bool = True) -> None:
        self.text = text
        self.error = error
        self.available = available
        self.calls: list[dict] = []

    def run(self, prompt: str, *, system: str | None = None, max_tokens: int | None = None) -> str:
        self.calls.append({"prompt": prompt, "system": system, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def project() -> ProjectAnalysis:
    return ProjectAnalysis(name="shop", type="react", structure=TreeIngestor().from_blobs({}))


@pytest.fixture
def shop_data() -> WorkflowAnalysisData:
    return WorkflowAnalysisData(
        routes=[RouteRecord(method="GET", path="/api/cart", file="src/routes/cart.js")],
        data_operations=[
            DataOperationRecord(file="src/api.ts", technology="http", operation="GET", verb="READ", entity="products"),
            DataOperationRecord(file="src/db.js", technology="mongoose", operation="aggregate"),
        ],
        auth_flow=AuthFlow(methods=["JWT"], flows=["Login Flow"], files=["src/auth.js"]),
    )


def test_extract_json_prefers_fenced_block() -> None:
    assert extract_json_payload(MODEL_RESPONSE)["projectOverview"]["name"] == "Shop"
    assert extract_json_payload('  {"plain": true}  ') == {"plain": True}


@pytest.mark.parametrize("text", ["", "no json at all", "[1, 2, 3]", "```json\n{broken\n```"])
def test_extract_json_rejects_non_objects(text: str) -> None:
    assert extract_json_payload(text) is None


def test_validate_and_repair_fills_defaults() -> None:
    result = validate_and_repair(
        {
            "overview": {"primary_users": "Admins"},
            "userWorkflows": [{"name": "Browse", "steps": [{"action": "Open", "stepNumber": 0}, {"stepNumber": 5}]}],
            "userStories": [
                {"title": "Checkout", "priority": "high", "complexity": "extreme"},
                "junk",
                {"id": "CUSTOM-1", "estimatedEffort": 8},
            ],
        }
    )

    assert result.overview.name == "Unknown Project"
    assert result.overview.primary_users == ["Admins"]
    workflow = result.workflows[0]
    assert (workflow.id, workflow.name) == ("WF001", "Browse")
    assert [step.step_number for step in workflow.steps] == [1, 5]
    assert [story.id for story in result.stories] == ["US001", "CUSTOM-1"]
    assert result.stories[0].priority == "High"
    assert result.stories[0].complexity == "Medium"
    assert result.stories[0].estimated_effort == "3 story points"
    assert result.stories[1].title == "User Story 2"
    assert result.stories[1].estimated_effort == "8"


def test_validate_and_repair_tolerates_missing_payload() -> None:
    result = validate_and_repair(None)

    assert result.overview.application_types == ["Web Application"]
    assert result.workflows == []
    assert result.stories == []


def test_application_type_from_route_keywords() -> None:
    assert detect_application_type(WorkflowAnalysisData()) == "Web Application"
    social = WorkflowAnalysisData(routes=[RouteRecord(method="POST", path="/posts/:id/comments")])
    assert detect_application_type(social) == "Social Media Application"


def test_fallback_result_is_deterministic(shop_data, project) -> None:
    first = build_fallback_result(shop_data, project)
    second = build_fallback_result(shop_data, project)

    assert first == second
    overview = first.overview
    assert overview.description == (
        "A react application with 1 endpoints and 0 user interface components. "
        "Based on code analysis, this appears to be a E-commerce Platform."
    )
    assert overview.business_domain == "E-commerce & Retail"
    assert overview.core_capabilities == ["User Authentication & Authorization", "Data Retrieval & Display"]
    assert [(workflow.id, workflow.name) for workflow in first.workflows] == [
        ("WF001", "User Authentication"),
        ("WF002", "Data Management"),
    ]
    assert [story.title for story in first.stories] == [
        "User Registration",
        "User Login",
        "Read products",
        "Aggregate Data",
    ]
    assert first.stories[0].estimated_effort == "5 story points"
    assert first.stories[1].complexity == "Low"
    assert [capability.category for capability in first.capabilities] == [
        "Authentication & Security",
        "Data Management",
        "API Services",
    ]


def test_fallback_entities_add_user_when_auth_detected(shop_data, project) -> None:
    entities = build_fallback_result(shop_data, project).entities

    assert [entity.name for entity in entities] == ["products", "User"]
    assert entities[0].description == "Represents products data in the system"
    assert entities[0].attributes == ["id", "createdAt", "updatedAt"]
    assert "email" in entities[1].attributes


def test_generator_without_runner_falls_back(shop_data, project) -> None:
    outcome = WorkflowGenerator().generate(shop_data, project)

    assert outcome.source == SOURCE_FALLBACK
    assert outcome.used_fallback is True
    assert outcome.reason == "No model API key configured"
    assert outcome.result == build_fallback_result(shop_data, project)


def test_generator_skips_unavailable_runner(shop_data, project) -> None:
    runner = StubRunner(MODEL_RESPONSE, available=False)

    outcome = WorkflowGenerator(runner).generate(shop_data, project)

    assert outcome.used_fallback is True
    assert runner.calls == []


def test_generator_falls_back_on_model_failure(shop_data, project) -> None:
    runner = StubRunner(error=LLMError("Model request failed with status 500: boom"))

    outcome = WorkflowGenerator(runner).generate(shop_data, project)

    assert outcome.source == SOURCE_FALLBACK
    assert outcome.reason == "Model request failed with status 500: boom"


def test_generator_falls_back_on_model_timeout(shop_data, project, monkeypatch: pytest.MonkeyPatch) -> None:
    def _urlopen(request, timeout=None):
        raise TimeoutError("The read operation timed out")

    monkeypatch.setattr("codescribe.llm.runner.urlopen", _urlopen)

    outcome = WorkflowGenerator(LLMRunner("gemini", "gemini-pro", api_key="k")).generate(shop_data, project)

    assert outcome.source == SOURCE_FALLBACK
    assert outcome.reason == "Model request failed: The read operation timed out"
    assert outcome.result.workflows[0].name == "User Authentication"


def test_generator_falls_back_without_json(shop_data, project) -> None:
    outcome = WorkflowGenerator(StubRunner("I cannot help with that.")).generate(shop_data, project)

    assert outcome.reason == "Model response did not contain a JSON object"
    assert outcome.result.workflows[0].name == "User Authentication"


def test_generator_uses_model_response(shop_data, project) -> None:
    captured = []

    def fake_model(request) -> str:
        captured.append(request)
        return MODEL_RESPONSE

    runner = LLMRunner("gemini", "gemini-pro", runner=fake_model)

    outcome = WorkflowGenerator(runner, max_tokens=512).generate(shop_data, project)

    assert outcome.source == SOURCE_AI
    assert outcome.used_fallback is False
    assert outcome.reason is None
    assert outcome.result.overview.name == "Shop"
    assert outcome.result.overview.primary_users == ["Shoppers"]
    assert outcome.result.workflows[0].id == "WF001"
    assert outcome.result.stories[0].priority == "High"
    request = captured[0]
    assert request.system == SYSTEM_PROMPT
    assert request.max_tokens == 512
    assert request.prompt.startswith("# Code analysis for workflow and user story generation")


def test_prompt_lists_extracted_facts(shop_data, project) -> None:
    prompt = build_workflow_prompt(shop_data, project)

    assert "## API routes and endpoints (1 found)" in prompt
    assert "- **GET /api/cart** (api) in `src/routes/cart.js`" in prompt
    assert "## Data operations (2 operations)" in prompt
    assert "- **http GET** (READ) on products in `src/api.ts`" in prompt
    assert "- **Authentication Methods:** JWT" in prompt
    assert '"userStories"' in prompt


def test_prompt_for_empty_analysis(project) -> None:
    prompt = build_workflow_prompt(WorkflowAnalysisData(), project)

    assert "No routes detected in the codebase." in prompt
    assert "- **Authentication Methods:** None detected" in prompt
    assert "- **Description**: No description available" in prompt


def test_csv_export_quotes_every_cell(shop_data, project) -> None:
    payload = export_workflows(build_fallback_result(shop_data, project), "csv")

    assert payload.filename == "user-stories.csv"
    text = payload.data.decode("utf-8")
    assert text.splitlines()[0] == ",".join(f'"{header}"' for header in CSV_HEADERS)
    rows = list(csv.reader(io.StringIO(text)))
    assert len(rows) == 5
    read_row = rows[3]
    assert read_row[0] == "US003"
    assert read_row[1] == "Read products"
    assert read_row[6] == (
        "User can read products; System validates input data; "
        "Success message is displayed; Data is persisted correctly"
    )
    assert read_row[7] == "Endpoints: /api/products; Components: productsForm; Database: products read"


def test_markdown_and_json_exports(shop_data, project) -> None:
    result = build_fallback_result(shop_data, project)

    markdown = export_workflows(result, "MARKDOWN")
    assert markdown.filename == "ai-workflows-and-user-stories.md"
    text = markdown.data.decode("utf-8")
    assert text.startswith("# shop - Workflows & User Stories")
    assert "### WF001: User Authentication" in text
    assert "### US003: Read products" in text
    assert "- **Technical Endpoint:** `/api/auth/login`" in text

    exported = export_workflows(result, "json")
    assert exported.filename == "workflows-and-user-stories.json"
    assert json.loads(exported.data)["overview"]["name"] == "shop"


def test_markdown_export_for_empty_result() -> None:
    text = export_workflows(validate_and_repair({}), "markdown").data.decode("utf-8")

    assert "No workflows identified." in text
    assert "No user stories identified." in text
    assert "No data entities identified." in text


def test_unknown_workflow_export_format() -> None:
    with pytest.raises(ExportError):
        export_workflows(validate_and_repair({}), "pdf")
