from __future__ import annotations

from dataclasses import dataclass, field, replace
from itertools import count

from normalize.arguments import parse_number
from normalize.chains import CallChainWalker
from normalize.nodes import NormalizationContext
from normalize.python import PYTHON_VOCABULARY, PythonArgumentNormalizer
from normalize.typescript import (
    TYPESCRIPT_VOCABULARY,
    TypeScriptArgumentNormalizer,
    TypeScriptNormalizer,
)
from normalize.vocabulary import ChainStep

_ids = count(1)


@dataclass(eq=False)
class FakeNode:
    """Hand-built syntax node for shapes no grammar produces."""

    type: str
    text: str = ""
    children: list[FakeNode] = field(default_factory=list)
    fields: dict[str, FakeNode] = field(default_factory=dict)
    is_named: bool = True
    start_point: tuple[int, int] = (0, 0)
    end_point: tuple[int, int] = (0, 0)
    parent: FakeNode | None = None
    id: int = field(default_factory=lambda: next(_ids))

    def __post_init__(self) -> None:
        for child in self.children:
            child.parent = self

    @property
    def named_children(self) -> list[FakeNode]:
        return [child for child in self.children if child.is_named]

    @property
    def prev_sibling(self) -> FakeNode | None:
        return self._sibling(-1)

    @property
    def next_sibling(self) -> FakeNode | None:
        return self._sibling(1)

    def _sibling(self, offset: int) -> FakeNode | None:
        if self.parent is None:
            return None
        siblings = self.parent.children
        index = siblings.index(self) + offset
        if 0 <= index < len(siblings):
            return siblings[index]
        return None

    def child_by_field_name(self, name: str) -> FakeNode | None:
        return self.fields.get(name)


def test_unknown_node_type_becomes_unknown_without_raising() -> None:
    normalizer = TypeScriptArgumentNormalizer(TYPESCRIPT_VOCABULARY)
    context = NormalizationContext(file_path="x.ts")
    node = FakeNode("made_up_expression", "~~weird~~", start_point=(4, 2))

    arg = normalizer.normalize_argument(node, context)

    assert arg.type == "unknown"
    assert arg.label == "unsupported"
    assert arg.value == "~~weird~~"
    assert (arg.line, arg.column) == (5, 3)
    assert context.fallbacks == 1


def test_documented_unknown_shapes_do_not_count_as_fallbacks() -> None:
    normalizer = TypeScriptArgumentNormalizer(TYPESCRIPT_VOCABULARY)
    context = NormalizationContext(file_path="x.ts")

    labels = [
        normalizer.normalize_argument(FakeNode(node_type, text), context).label
        for node_type, text in (
            ("null", "null"),
            ("arrow_function", "() => 1"),
            ("call_expression", "f()"),
            ("binary_expression", "a + b"),
        )
    ]

    assert labels == ["null", "closure", "call", "expression"]
    assert context.fallbacks == 0


def test_every_argument_is_kept_in_source_order() -> None:
    args_node = FakeNode(
        "arguments",
        children=[
            FakeNode("(", "(", is_named=False),
            FakeNode("number", "1"),
            FakeNode("comment", "/* skip */"),
            FakeNode("mystery", "??"),
            FakeNode("identifier", "x"),
            FakeNode(")", ")", is_named=False),
        ],
    )
    normalizer = TypeScriptArgumentNormalizer(TYPESCRIPT_VOCABULARY)

    args = normalizer.normalize_arguments(args_node)

    assert [(arg.type, arg.value) for arg in args] == [
        ("number", "1"),
        ("unknown", "??"),
        ("identifier", "x"),
    ]


def test_object_with_unexpected_member_keeps_known_pairs() -> None:
    key = FakeNode("property_identifier", "k")
    value = FakeNode("mystery", "<?>")
    pair = FakeNode("pair", "k: <?>", children=[key, value], fields={"key": key, "value": value})
    spread = FakeNode("spread_element", "...rest")
    obj = FakeNode("object", "{ k: <?>, ...rest }", children=[pair, spread])
    normalizer = TypeScriptArgumentNormalizer(TYPESCRIPT_VOCABULARY)

    arg = normalizer.normalize_argument(obj)

    assert arg.type == "object"
    assert set(arg.property_map()) == {"k"}
    assert arg.property_map()["k"].label == "unsupported"


def test_depth_limit_turns_deep_nesting_into_unknown() -> None:
    innermost = FakeNode("number", "1")
    node = innermost
    for _ in range(5):
        node = FakeNode("array", "[...]", children=[node])
    normalizer = TypeScriptArgumentNormalizer(TYPESCRIPT_VOCABULARY, max_depth=2)

    arg = normalizer.normalize_argument(node)

    assert arg.elements[0].elements[0].type == "array"
    deepest = arg.elements[0].elements[0].elements[0]
    assert (deepest.type, deepest.label) == ("unknown", "depth")


def test_python_keyword_with_missing_value_falls_back() -> None:
    name = FakeNode("identifier", "limit")
    node = FakeNode("keyword_argument", "limit=", children=[name], fields={"name": name})
    context = NormalizationContext(file_path="x.py")

    arg = PythonArgumentNormalizer(PYTHON_VOCABULARY).normalize_argument(node, context)

    assert arg.label == "unsupported"
    assert context.fallbacks == 1


def test_bare_identifier_is_not_a_chain() -> None:
    node = FakeNode("identifier", "value")

    assert TypeScriptNormalizer().extract_call_chain(node, "x.ts") is None


def test_parse_number_variants() -> None:
    assert parse_number("1_000u32") == 1000.0
    assert parse_number("0xFF") == 255.0
    assert parse_number("0b101") == 5.0
    assert parse_number("2.5e3") == 2500.0
    assert parse_number("1.5f64") == 1.5
    assert parse_number("10n") == 10.0
    assert parse_number("3j") is None


def _method_call(
    receiver: FakeNode, method: str, text: str, arguments: FakeNode | None = None
) -> FakeNode:
    name = FakeNode("identifier", method)
    fields = {"receiver": receiver, "method": name}
    if arguments is not None:
        fields["arguments"] = arguments
    children = [receiver, name] + ([arguments] if arguments is not None else [])
    return FakeNode("method_call", text, children=children, fields=fields)


def test_method_call_nodes_walk_through_their_receiver() -> None:
    # Grammars with one node per `recv.name(args)` call, such as Ruby's `call`.
    vocabulary = replace(
        TYPESCRIPT_VOCABULARY,
        chain_steps={
            "method_call": ChainStep.METHOD_CALL,
            "identifier": ChainStep.IDENTIFIER,
        },
        method_receiver_field="receiver",
        method_name_field="method",
    )
    walker = CallChainWalker(vocabulary, TypeScriptArgumentNormalizer(vocabulary))
    arguments = FakeNode("arguments", "(1)", children=[FakeNode("number", "1")])
    inner = _method_call(FakeNode("identifier", "db"), "where", "db.where(1)", arguments)
    outer = _method_call(inner, "first", "db.where(1).first")
    root = FakeNode("program", children=[outer])

    chains = walker.normalize_call_chains(root, "x.rb")

    assert len(chains) == 1
    chain = chains[0]
    assert chain.receiver == "db"
    assert chain.full_expression == "db.where(1).first"
    assert [(s.name, s.is_call) for s in chain.segments] == [
        ("where", True),
        ("first", True),
    ]
    assert chain.segments[0].args[0].number_value == 1.0
    assert chain.segments[1].args == ()
    assert walker.is_chain_continuation(inner) is True
    assert walker.is_chain_continuation(outer) is False
