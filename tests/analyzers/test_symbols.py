"""Pattern-based symbol extraction tests."""

from __future__ import annotations

import textwrap

from codescribe.analyzers import CodeParser
from codescribe.analyzers.symbols import (
    extract_classes,
    extract_comments,
    extract_exports,
    extract_functions,
    extract_imports,
    extract_interfaces,
)
from tests._fixtures.project_builder import REACT_APP

CART_SERVICE = textwrap.dedent(
    """
    /** Manages carts for the shop checkout flow. */
    export class CartService extends BaseService implements Disposable {
      private items: Item[] = [];
      static count = 0;
      #secret = 1;

      constructor(private readonly api: Api) {
        super();
      }

      async addItem(item: Item): Promise<void> {
        if (item.qty > 0) {
          this.items.push(item);
        }
      }

      total = (): number => {
        return this.items.reduce((sum, entry) => sum + entry.price, 0);
      };
    }

    function helper() {
      return 1;
    }
    """
)


def test_class_members_stay_inside_class_body() -> None:
    classes = extract_classes(CART_SERVICE)

    assert [cls.name for cls in classes] == ["CartService"]
    cart = classes[0]
    assert cart.extends == "BaseService"
    assert cart.implements == ["Disposable"]
    assert cart.description is not None and cart.description.startswith("Manages carts")
    assert [method.name for method in cart.methods] == ["addItem", "total"]
    assert cart.methods[0].is_async is True
    assert cart.methods[1].return_type == "number"


def test_class_properties_with_visibility() -> None:
    cart = extract_classes(CART_SERVICE)[0]

    properties = {prop.name: prop for prop in cart.properties}
    assert list(properties) == ["items", "count", "#secret"]
    assert properties["items"].visibility == "private"
    assert properties["items"].type == "Item[]"
    assert properties["count"].is_static is True
    assert properties["#secret"].visibility == "private"


def test_top_level_functions_exclude_class_methods() -> None:
    functions = extract_functions(CART_SERVICE)

    assert [function.name for function in functions] == ["helper"]


def test_functions_and_arrows_in_source_order() -> None:
    content = textwrap.dedent(
        """
        export async function loadUser(id: string, options = {}) {
          return fetch(`/users/${id}`);
        }
        const formatName = (first, last) => `${first} ${last}`;
        const f = () => 1;
        """
    )

    functions = extract_functions(content)

    assert [function.name for function in functions] == ["loadUser", "formatName"]
    load_user = functions[0]
    assert load_user.is_exported is True
    assert load_user.is_async is True
    assert load_user.parameters == ["id: string", "options = {}"]
    assert load_user.line == 2


def test_matches_inside_strings_and_comments_are_ignored() -> None:
    content = 'const text = "function fake() {}";\n// function alsoFake() {}\n'

    assert extract_functions(content) == []


def test_return_type_inference_for_typed_sources() -> None:
    content = "export function isReady() {\n  return true;\n}\n"

    functions = extract_functions(content, infer_return_types=True)

    assert functions[0].return_type == "boolean"


def test_interfaces_with_properties_and_methods() -> None:
    content = textwrap.dedent(
        """
        export interface User extends Base, Timestamps {
          id: string;
          name?: string;
          greet(message: string): void;
        }
        """
    )

    interfaces = extract_interfaces(content)

    assert len(interfaces) == 1
    user = interfaces[0]
    assert user.extends == ["Base", "Timestamps"]
    assert [(prop.name, prop.type) for prop in user.properties] == [("id", "string"), ("name", "string")]
    assert [method.name for method in user.methods] == ["greet"]
    assert user.methods[0].parameters == ["message: string"]
    assert user.methods[0].return_type == "void"


def test_imports_cover_es_modules_and_require() -> None:
    content = textwrap.dedent(
        """
        import React, { useState, type FC } from 'react';
        import * as api from './api';
        import './styles.css';
        const fs = require('fs');
        const { join, resolve: resolvePath } = require('path');
        """
    )

    imports = extract_imports(content)

    assert [record.source for record in imports] == ["react", "./api", "./styles.css", "fs", "path"]
    assert imports[0].names == ["React", "useState", "FC"]
    assert imports[0].is_default is True
    assert imports[1].names == ["api"]
    assert imports[1].is_namespace is True
    assert imports[2].names == []
    assert imports[3].kind == "require"
    assert imports[3].names == ["fs"]
    assert imports[4].names == ["join", "resolve"]


def test_exports_include_declarations_and_lists() -> None:
    content = textwrap.dedent(
        """
        export default function App() {}
        export const API_URL = '/api';
        export interface Props { id: string }
        export { helper, internal as publicName };
        """
    )

    exports = [(record.name, record.kind, record.is_default) for record in extract_exports(content)]

    assert exports == [
        ("App", "function", True),
        ("API_URL", "variable", False),
        ("Props", "interface", False),
        ("helper", "variable", False),
        ("publicName", "variable", False),
    ]


def test_comments_keep_substantial_text_only() -> None:
    content = textwrap.dedent(
        """
        // short
        // This comment is long enough to keep around
        // TODO: refactor this later when there is time
        const url = 'http://example.com/some/long/path/here';
        /** Documents the checkout entry point in detail. */
        """
    )

    comments = extract_comments(content)

    assert comments == [
        "Documents the checkout entry point in detail.",
        "This comment is long enough to keep around",
    ]


def test_parser_marks_react_components() -> None:
    analysis = CodeParser().parse("src/App.tsx", textwrap.dedent(REACT_APP["src/App.tsx"]).lstrip("\n"))

    assert analysis.category == "component"
    assert analysis.framework == "react"
    assert [component.name for component in analysis.components] == ["App"]
    assert [function.name for function in analysis.functions] == ["App", "handleLoad"]
    assert analysis.components[0].return_type == "JSX.Element"


def test_parser_tolerates_garbage_input() -> None:
    analysis = CodeParser().parse("src/broken.ts", "class { function ( => {{{{ '")

    assert analysis.path == "src/broken.ts"
    assert analysis.classes == []
