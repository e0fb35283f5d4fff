from __future__ import annotations

import pytest
from pydantic import ValidationError

from artifacts.models.ir import NormalizedArg
from normalize.typescript import JavaScriptNormalizer, TypeScriptNormalizer
from parse.treesitter import parse_source

_FILE = "web/api.ts"


def _chains(source: str, file_path: str = _FILE) -> list:
    root = parse_source(source, "typescript", file_path)
    return TypeScriptNormalizer().normalize_call_chains(root, source, file_path)


def _normalized(source: str, file_path: str = _FILE):
    root = parse_source(source, "typescript", file_path)
    return TypeScriptNormalizer().normalize(root, source, file_path)


def test_segments_read_left_to_right() -> None:
    chains = _chains("a.b(1).c(2).d();\n")

    assert len(chains) == 1
    chain = chains[0]
    assert chain.receiver == "a"
    assert [(s.name, s.is_call) for s in chain.segments] == [
        ("b", True),
        ("c", True),
        ("d", True),
    ]
    assert chain.segments[0].args[0].number_value == 1.0
    assert chain.segments[1].args[0].number_value == 2.0
    assert chain.segments[2].args == ()


def test_nested_chain_is_emitted_once() -> None:
    assert len(_chains("a.b().c();\n")) == 1


def test_argument_variants_in_order() -> None:
    chain = _chains('f(1, "x", true, [1, 2], { k: 1 });\n')[0]

    args = chain.segments[0].args
    assert chain.receiver == ""
    assert [arg.type for arg in args] == ["number", "string", "boolean", "array", "object"]
    assert args[1].string_value == "x"
    assert len(args[3].elements) == 2
    assert args[4].property_map()["k"].type == "number"
    assert args[4].property_map()["k"].number_value == 1.0


def test_shorthand_and_quoted_properties() -> None:
    chain = _chains("save({ id, 'full-name': name, nested: { deep: [] } });\n")[0]

    properties = chain.segments[0].args[0].property_map()
    assert properties["id"].type == "identifier"
    assert properties["id"].value == "id"
    assert properties["full-name"].type == "identifier"
    assert properties["nested"].property_map()["deep"].type == "array"
    assert properties["nested"].property_map()["deep"].elements == ()


def test_null_undefined_and_callbacks_are_unknown() -> None:
    chain = _chains("on(null, undefined, () => 1, make(), a + b);\n")[0]

    assert [(arg.type, arg.label) for arg in chain.segments[0].args] == [
        ("unknown", "null"),
        ("unknown", "null"),
        ("unknown", "closure"),
        ("unknown", "call"),
        ("unknown", "expression"),
    ]


def test_await_is_a_pseudo_segment_after_the_call() -> None:
    chains = _chains("async function main() {\n  await foo.bar();\n}\n")

    assert len(chains) == 1
    assert chains[0].receiver == "foo"
    assert [(s.name, s.is_call, s.args) for s in chains[0].segments] == [
        ("bar", True, ()),
        ("await", False, ()),
    ]


def test_query_builder_chain_inside_destructuring() -> None:
    source = (
        "async function load(db) {\n"
        "  const { data } = await db.from('users').select('*').eq('id', 1);\n"
        "}\n"
    )
    chain = _chains(source)[0]

    assert chain.receiver == "db"
    assert [s.name for s in chain.segments] == ["from", "select", "eq", "await"]
    assert [arg.string_value for arg in chain.segments[0].args] == ["users"]
    assert [arg.type for arg in chain.segments[2].args] == ["string", "number"]


def test_subscript_and_non_null_are_transparent() -> None:
    chain = _chains("rows[0]!.save();\n")[0]

    assert chain.receiver == "rows"
    assert [s.name for s in chain.segments] == ["save"]


def test_property_access_without_call_is_not_a_chain() -> None:
    assert _chains("const n = config.server.port;\n") == []


def test_trailing_property_after_call_is_a_segment() -> None:
    chain = _chains("const n = items.filter(Boolean).length;\n")[0]

    assert [(s.name, s.is_call) for s in chain.segments] == [
        ("filter", True),
        ("length", False),
    ]


def test_tagged_template_passes_one_string_argument() -> None:
    chain = _chains("sql`select 1`;\n")[0]

    assert chain.segments[0].name == "sql"
    assert [arg.type for arg in chain.segments[0].args] == ["string"]
    assert chain.segments[0].args[0].string_value == "select 1"


def test_chain_in_callback_body_is_emitted_separately() -> None:
    chains = _chains("rows.map((row) => row.name.trim());\n")

    assert [c.full_expression for c in chains] == [
        "rows.map((row) => row.name.trim())",
        "row.name.trim()",
    ]


def test_method_static_and_export_detection() -> None:
    source = """
export class Counter {
  private n = 0;

  constructor(start: number) {}

  value(): number {
    return this.n;
  }

  static create(): Counter {
    return new Counter(0);
  }

  private reset(): void {}
}
"""
    functions = {f.name: f for f in _normalized(source).functions}

    assert functions["value"].is_method is True
    assert functions["value"].is_static is False
    assert functions["value"].is_exported is True
    assert functions["value"].class_name == "Counter"
    assert functions["value"].qualified_name == "api.Counter.value"
    assert functions["value"].return_type == "number"

    assert functions["create"].is_method is True
    assert functions["create"].is_static is True
    assert functions["create"].is_exported is True

    assert functions["constructor"].is_constructor is True
    assert functions["constructor"].parameters[0].name == "start"
    assert functions["constructor"].parameters[0].type == "number"
    assert functions["reset"].is_exported is False


def test_functions_declared_and_bound() -> None:
    source = """
export async function fetchAll(url: string, ...rest: string[]): Promise<void> {}
function helper(a = 1) {}
export const double = (n: number) => n * 2;
const inner = function () {};
"""
    functions = {f.name: f for f in _normalized(source).functions}

    assert set(functions) == {"fetchAll", "helper", "double", "inner"}
    assert functions["fetchAll"].is_async is True
    assert functions["fetchAll"].is_exported is True
    assert [(p.name, p.is_rest) for p in functions["fetchAll"].parameters] == [
        ("url", False),
        ("rest", True),
    ]
    assert functions["helper"].is_exported is False
    assert functions["helper"].parameters[0].has_default is True
    assert functions["double"].is_exported is True
    assert functions["double"].start_line == 4
    assert functions["inner"].is_exported is False


def test_classes_interfaces_and_enums() -> None:
    source = """
export interface Repo extends Base {
  find(id: number): Row;
}
export abstract class Users extends Model implements Repo {
  find(id: number): Row { return null; }
}
enum Color { Red, Green }
"""
    classes = {c.name: c for c in _normalized(source).classes}

    assert classes["Repo"].kind == "interface"
    assert classes["Repo"].base_classes == ("Base",)
    assert classes["Repo"].methods == ("find",)
    assert classes["Users"].kind == "class"
    assert classes["Users"].base_classes == ("Model", "Repo")
    assert classes["Users"].is_exported is True
    assert classes["Color"].kind == "enum"
    assert classes["Color"].is_exported is False


def test_import_forms() -> None:
    source = """
import React from "react";
import * as path from "node:path";
import { a, b as c } from "./local";
import type { Row } from "./types";
import "./side-effect";
const fs = require("fs");
const { join, resolve: res } = require("path");
"""
    imports = _normalized(source).imports

    assert [i.source for i in imports] == [
        "react",
        "node:path",
        "./local",
        "./types",
        "./side-effect",
        "fs",
        "path",
    ]
    assert imports[0].names[0].is_default is True
    assert imports[0].names[0].local == "React"
    assert imports[1].names[0].is_namespace is True
    assert [(n.imported, n.local) for n in imports[2].names] == [("a", "a"), ("b", "c")]
    assert imports[3].is_type_only is True
    assert imports[2].is_type_only is False
    assert imports[4].names == ()
    assert imports[5].names[0].local == "fs"
    assert [(n.imported, n.local) for n in imports[6].names] == [
        ("join", "join"),
        ("resolve", "res"),
    ]


def test_export_forms() -> None:
    source = """
export const x = 1, y = 2;
export default main;
export { a as b } from "./m";
export * from "./all";
export * as ns from "./ns";
export type Alias = string;
"""
    exports = _normalized(source).exports

    assert [(e.name, e.source, e.is_re_export) for e in exports] == [
        ("x", None, False),
        ("y", None, False),
        ("default", None, False),
        ("b", "./m", True),
        ("*", "./all", True),
        ("ns", "./ns", True),
        ("Alias", None, False),
    ]
    assert exports[2].is_default is True
    assert exports[4].names[0].imported == "*"
    assert exports[4].names[0].is_namespace is True
    assert exports[6].is_type_only is True


def test_tsx_files_parse_with_tsx_grammar() -> None:
    source = "const el = <div onClick={() => store.dispatch(act())} />;\n"
    chains = _chains(source, "web/view.tsx")

    assert [c.full_expression for c in chains] == ["store.dispatch(act())"]


def test_javascript_normalizer_tags_language() -> None:
    source = "const x = require('x');\nx.y().z();\n"
    root = parse_source(source, "javascript", "lib/x.js")
    normalized = JavaScriptNormalizer().normalize(root, source, "lib/x.js")

    assert [c.language for c in normalized.call_chains] == ["javascript", "javascript"]
    assert normalized.imports[0].language == "javascript"


def test_object_arguments_are_immutable_and_hashable() -> None:
    chain = _chains("f({ k: 1 });\n")[0]
    arg = chain.segments[0].args[0]

    assert hash(chain) == hash(_chains("f({ k: 1 });\n")[0])
    with pytest.raises(TypeError):
        arg.property_map()["k"] = arg  # type: ignore[index]
    with pytest.raises(ValidationError):
        arg.properties = ()  # type: ignore[misc]
    dumped = arg.model_dump()
    assert dumped["properties"]["k"]["number_value"] == 1.0
    assert NormalizedArg.model_validate(dumped) == arg


def test_object_literal_methods_inside_a_class_are_not_methods() -> None:
    source = """
class A {
  handlers = {
    foo() {
      return 1;
    },
  };

  run(): void {}
}
"""
    normalized = _normalized(source)
    functions = {f.name: f for f in normalized.functions}

    assert set(functions) == {"run"}
    assert functions["run"].class_name == "A"
    assert normalized.classes[0].methods == ("run",)


def test_class_field_functions_and_default_export() -> None:
    source = """
export class Job {
  run = async (id: number) => {};
  private stop = function () {};
  static label = "job";
}
export default function () {}
"""
    normalized = _normalized(source)
    functions = {f.name: f for f in normalized.functions}

    assert set(functions) == {"run", "stop", "default"}
    assert functions["run"].is_method is True
    assert functions["run"].class_name == "Job"
    assert functions["run"].qualified_name == "api.Job.run"
    assert functions["run"].is_async is True
    assert functions["run"].is_exported is True
    assert functions["run"].start_line == 3
    assert [p.name for p in functions["run"].parameters] == ["id"]
    assert functions["stop"].is_exported is False
    assert functions["default"].is_exported is True
    assert functions["default"].is_method is False
    assert functions["default"].qualified_name == "api.default"
    assert normalized.classes[0].methods == ("run", "stop")


def test_decorators_skip_comments_and_stop_at_other_members() -> None:
    source = """
class Service {
  @Before()
  setup() {}

  @Get("/a")
  // route handler
  @Auth()
  handle() {}
}
"""
    functions = {f.name: f for f in _normalized(source).functions}

    assert functions["handle"].decorators == ('@Get("/a")', "@Auth()")
    assert functions["setup"].decorators == ("@Before()",)
