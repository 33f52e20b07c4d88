"""Workflow extractor tests."""

from __future__ import annotations

import textwrap

import pytest

from codescribe.analyzers import ProjectAnalyzer
from codescribe.filtering import FileFilter
from codescribe.models import FileAnalysis
from codescribe.workflows import WorkflowAnalyzer, discover_extractors
from codescribe.workflows.auth import AuthSignalExtractor, fold_signals
from codescribe.workflows.business import BusinessLogicExtractor, is_business_file
from codescribe.workflows.data import DataOperationExtractor, entity_from_url, infer_verb
from codescribe.workflows.interactions import InteractionExtractor
from codescribe.workflows.routes import RouteExtractor, file_route_path, is_route_file
from tests._fixtures.project_builder import REACT_APP


def _file(path: str, content: str, category: str = "other") -> FileAnalysis:
    return FileAnalysis(path=path, category=category, content=textwrap.dedent(content).lstrip("\n"))


EXPRESS_ROUTES = """
    const express = require('express');
    const router = express.Router();

    // List every product in the catalog
    router.get('/products', authenticate, (req, res) => { res.json(products); });
    router.post('/products', (req, res) => { Product.create(req.body); });
    app.route('/orders').delete(handler);
"""


def test_registration_and_chained_routes() -> None:
    file = _file("src/routes/products.js", EXPRESS_ROUTES)

    routes = RouteExtractor().extract(file)

    assert [(route.method, route.path) for route in routes] == [
        ("GET", "/products"),
        ("POST", "/products"),
        ("DELETE", "/orders"),
    ]
    listing = routes[0]
    assert listing.kind == "api"
    assert listing.line == 5
    assert listing.handler == "res.json(products);"
    assert listing.description == "List every product in the catalog"
    assert "router.get('/products'" in listing.code


def test_file_system_handlers_use_path_pattern() -> None:
    file = _file(
        "app/api/users/[id]/route.ts",
        """
        export async function GET(request: Request) {
          return Response.json({ ok: true });
        }

        export async function DELETE(request: Request) {
          return new Response(null, { status: 204 });
        }
        """,
    )

    routes = RouteExtractor().extract(file)

    assert [(route.method, route.path) for route in routes] == [
        ("GET", "/api/users/:id"),
        ("DELETE", "/api/users/:id"),
    ]
    assert routes[0].handler == "return Response.json({ ok: true });"


def test_handler_exports_outside_api_directories_are_ignored() -> None:
    file = _file("src/routes/page.ts", "export async function GET() {\n  return 1;\n}\n")

    assert RouteExtractor().extract(file) == []


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("app/api/users/[id]/route.ts", "/api/users/:id"),
        ("pages/api/auth/[...slug].js", "/api/auth/:slug"),
        ("src/api/index.ts", "/api"),
        ("pages/api/health.ts", "/api/health"),
    ],
)
def test_file_route_path(path: str, expected: str) -> None:
    assert file_route_path(path) == expected


def test_ui_routes_are_pages() -> None:
    file = _file(
        "src/router.tsx",
        """
        <Route path="/checkout" element={<Checkout />} />
        const routes = [{ path: '/profile', element: <Profile /> }];
        """,
    )

    routes = RouteExtractor().extract(file)

    assert [(route.method, route.path, route.kind) for route in routes] == [
        ("GET", "/checkout", "page"),
        ("GET", "/profile", "page"),
    ]
    assert routes[0].description == "Frontend route: /checkout"


def test_route_file_detection() -> None:
    assert is_route_file(_file("src/server.js", "const app = express();"))
    assert is_route_file(_file("src/routes/index.js", "module.exports = {};"))
    assert not is_route_file(_file("src/math.js", "export const add = (a, b) => a + b;"))


def test_http_client_operations() -> None:
    file = _file(
        "src/api.ts",
        """
        export const list = () => axios.get('/api/products');
        export const remove = (id) => fetch('/api/orders/42', { method: 'DELETE' });
        export const load = () => fetch('https://shop.example.com/v1/customers?limit=5');
        """,
        category="service",
    )

    operations = DataOperationExtractor().extract(file)

    assert [(op.technology, op.operation, op.verb, op.entity) for op in operations] == [
        ("http", "GET", "READ", "products"),
        ("http", "DELETE", "DELETE", "orders"),
        ("http", "GET", "READ", "customers"),
    ]
    assert operations[0].parameters == "/api/products"


def test_orm_document_store_and_sql_operations() -> None:
    file = _file(
        "src/db/repository.js",
        """
        const users = await prisma.user.findMany({ where: { active: true } });
        const order = await Order.findById(id);
        const copy = Object.create(null);
        order.save();
        db.query("SELECT id, name FROM accounts WHERE id = $1");
        db.query("INSERT INTO audit_log (event) VALUES ($1)");
        """,
    )

    operations = DataOperationExtractor().extract(file)

    assert [(op.technology, op.operation, op.verb, op.entity) for op in operations] == [
        ("prisma", "findMany", "READ", "user"),
        ("mongoose", "findById", "READ", "Order"),
        ("mongoose", "save", "CREATE", "order"),
        ("sql", "SELECT", "READ", "accounts"),
        ("sql", "INSERT", "CREATE", "audit_log"),
    ]
    assert operations[0].line == 1


def test_sql_requires_uppercase_keywords() -> None:
    file = _file(
        "src/db/prompts.js",
        """
        // select one from the list, then delete from your cart
        const hint = "Please select a plan from the options below";
        db.query(`UPDATE plans SET active = 1`);
        """,
    )

    operations = DataOperationExtractor().extract(file)

    assert [(op.operation, op.entity) for op in operations] == [("UPDATE", "plans")]


def test_entity_and_verb_helpers() -> None:
    assert entity_from_url("/items/:id") == "items"
    assert entity_from_url("/api/v2/") == ""
    assert entity_from_url("/api/${id}") == ""
    assert infer_verb("findByIdAndUpdate") == "UPDATE"
    assert infer_verb("aggregate") == "UNKNOWN"


def test_auth_signals_fold_into_sorted_sets() -> None:
    extractor = AuthSignalExtractor()
    files = [
        _file("src/auth/login.js", "import jwt from 'jsonwebtoken';\nexport function login(req) { return jwt.sign(req.body); }"),
        _file("src/auth/strategy.js", "import passport from 'passport';\nconst strategy = new GoogleProvider();"),
        _file("src/auth/account.js", "export const register = () => {};\nexport const logout = () => {};"),
    ]

    flow = fold_signals(signal for file in files for signal in extractor.extract(file))

    assert flow.methods == ["JWT", "Passport.js"]
    assert flow.providers == ["Google"]
    assert flow.flows == ["Login Flow", "Logout Flow", "Registration Flow"]
    assert flow.files == ["src/auth/account.js", "src/auth/login.js", "src/auth/strategy.js"]
    assert flow.detected is True


def test_business_logic_inventory() -> None:
    file = _file(
        "src/utils/pricing.js",
        """
        function calculateTotal(items) { return items.reduce((acc, item) => acc + item.price, 0); }
        const validateCoupon = (code) => code.length > 3;
        function processOrder(order) { return order; }
        """,
        category="utility",
    )

    records = BusinessLogicExtractor().extract(file)

    assert len(records) == 1
    record = records[0]
    assert record.functions == ["calculateTotal", "processOrder", "validateCoupon"]
    assert record.validations == ["validateCoupon"]
    assert record.calculations == ["calculateTotal"]
    assert record.workflows == ["processOrder"]
    assert not is_business_file(_file("src/app.css", "body {}", category="style"))


def test_form_interactions() -> None:
    file = _file(
        "src/SignupForm.jsx",
        """
        export const SignupForm = ({ onDone }) => {
          const handleSubmit = (event) => onDone(event);
          return (
            <form name="signup" onSubmit={handleSubmit}>
              <input name="email" type="email" required />
              <input id="age" type="number" min="18" />
              <select name="plan"></select>
              <Link to="/terms">Terms</Link>
            </form>
          );
        };
        """,
    )

    records = InteractionExtractor().extract(file)

    assert len(records) == 1
    record = records[0]
    assert [component.name for component in record.components] == ["SignupForm"]
    assert record.components[0].handlers == ["handleSubmit"]
    assert "form" in record.components[0].jsx_elements
    assert "Link" in record.components[0].jsx_elements
    form = record.forms[0]
    assert form.name == "signup"
    assert form.submit_handler == "handleSubmit"
    assert [(field.name, field.type, field.required) for field in form.fields] == [
        ("email", "email", True),
        ("age", "number", False),
        ("plan", "select", False),
    ]
    assert form.fields[1].validation == ["min"]
    assert [(event.event, event.handler) for event in record.events] == [("submit", "handleSubmit")]
    assert [(nav.target, nav.kind) for nav in record.navigation] == [("/terms", "link")]


def test_discover_extractors_honours_selection() -> None:
    assert [extractor.name for extractor in discover_extractors(["AUTH", "routes"])] == ["routes", "auth"]
    with pytest.raises(ValueError):
        discover_extractors(["bogus"])


def test_workflow_analyzer_on_react_project(project_builder) -> None:
    root = project_builder.tree(REACT_APP)
    FileFilter().apply(root)
    project = ProjectAnalyzer().analyze(root)

    data = WorkflowAnalyzer().analyze(project)

    assert data.routes == []
    assert [(op.operation, op.verb, op.entity) for op in data.data_operations] == [("GET", "READ", "products")]
    assert [record.file for record in data.interactions] == ["src/App.tsx"]
    app = data.interactions[0]
    assert [component.name for component in app.components] == ["App"]
    assert app.components[0].hooks == ["useState"]
    assert [(event.event, event.handler) for event in app.events] == [("click", "handleLoad")]
    assert data.auth_flow.detected is False
    assert [record.file for record in data.business_logic] == ["src/api.ts"]
    assert data.business_logic[0].functions == ["fetchProducts"]
    assert set(data.to_dict()) == {"routes", "interactions", "data_operations", "auth_flow", "business_logic"}
