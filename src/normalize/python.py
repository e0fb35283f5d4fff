"""Python normalizer."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from artifacts.models.ir import (
    NormalizedArg,
    UnifiedClass,
    UnifiedExport,
    UnifiedFunction,
    UnifiedImport,
    UnifiedImportedName,
    UnifiedParameter,
)
from normalize.arguments import ArgumentNormalizer
from normalize.base import BaseNormalizer
from normalize.nodes import (
    NormalizationContext,
    build_qualified_name,
    end_position,
    has_child_type,
    position,
    strip_type_annotation,
)
from normalize.vocabulary import ArgShape, ChainStep, LanguageVocabulary
from utils import module_name_for

if TYPE_CHECKING:
    from collections.abc import Iterator

    from artifacts.models.ir import ClassKind, PropertyItems
    from parse.syntax import SyntaxNode

PYTHON_VOCABULARY = LanguageVocabulary(
    language="python",
    chain_steps={
        "call": ChainStep.CALL,
        "attribute": ChainStep.FIELD,
        "await": ChainStep.AWAIT,
        "subscript": ChainStep.TRANSPARENT,
        "parenthesized_expression": ChainStep.TRANSPARENT,
        "identifier": ChainStep.IDENTIFIER,
    },
    arg_shapes={
        "string": ArgShape.STRING,
        "concatenated_string": ArgShape.STRING,
        "integer": ArgShape.NUMBER,
        "float": ArgShape.NUMBER,
        "true": ArgShape.BOOLEAN,
        "false": ArgShape.BOOLEAN,
        "none": ArgShape.NULL,
        "identifier": ArgShape.IDENTIFIER,
        "attribute": ArgShape.IDENTIFIER,
        "dictionary": ArgShape.OBJECT,
        "list": ArgShape.ARRAY,
        "tuple": ArgShape.ARRAY,
        "set": ArgShape.ARRAY,
        "keyword_argument": ArgShape.KEYWORD,
        "call": ArgShape.CALL,
        "lambda": ArgShape.CLOSURE,
        "list_splat": ArgShape.EXPRESSION,
        "dictionary_splat": ArgShape.EXPRESSION,
        "binary_operator": ArgShape.EXPRESSION,
        "unary_operator": ArgShape.EXPRESSION,
        "comparison_operator": ArgShape.EXPRESSION,
        "boolean_operator": ArgShape.EXPRESSION,
        "not_operator": ArgShape.EXPRESSION,
        "conditional_expression": ArgShape.EXPRESSION,
        "subscript": ArgShape.EXPRESSION,
        "await": ArgShape.EXPRESSION,
        "parenthesized_expression": ArgShape.EXPRESSION,
        "list_comprehension": ArgShape.EXPRESSION,
        "dictionary_comprehension": ArgShape.EXPRESSION,
        "set_comprehension": ArgShape.EXPRESSION,
        "generator_expression": ArgShape.EXPRESSION,
        "named_expression": ArgShape.EXPRESSION,
    },
    member_object_field="object",
    member_property_field="attribute",
    operand_fields={"subscript": "value"},
    scope_boundaries=frozenset({"lambda", "function_definition", "class_definition"}),
)

_STRING_PREFIX = re.compile(r"^[rRbBuUfF]{0,2}")
_CONSTRUCTOR_NAMES = frozenset({"__init__", "__new__"})
_PARAMETER_SEPARATORS = frozenset({"positional_separator", "keyword_separator"})
_TYPE_CHECKING_GUARDS = frozenset({"TYPE_CHECKING", "typing.TYPE_CHECKING"})
_ENUM_BASES = frozenset(
    {"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag", "enum.Enum", "enum.IntEnum"}
)
_PROTOCOL_BASES = frozenset({"Protocol", "typing.Protocol"})


class PythonArgumentNormalizer(ArgumentNormalizer):
    def argument_nodes(self, args_node: SyntaxNode) -> list[SyntaxNode]:
        # `f(x for x in xs)` passes a bare generator as the only argument.
        if args_node.type == "generator_expression":
            return [args_node]
        return super().argument_nodes(args_node)

    def string_value(self, node: SyntaxNode) -> str:
        if node.type == "concatenated_string":
            return "".join(self.string_value(part) for part in node.named_children)
        return _string_literal_value(node.text)

    def object_properties(
        self,
        node: SyntaxNode,
        context: NormalizationContext,
        depth: int,
    ) -> PropertyItems:
        properties: dict[str, NormalizedArg] = {}
        for child in node.named_children:
            if child.type != "pair":
                continue
            key = child.child_by_field_name("key")
            value = child.child_by_field_name("value")
            if key is None or value is None:
                continue
            name = _string_literal_value(key.text) if key.type == "string" else key.text
            properties[name] = self.normalize_argument(value, context, depth)
        return tuple(properties.items())

    def keyword_argument(
        self,
        node: SyntaxNode,
        context: NormalizationContext,
        depth: int,
    ) -> NormalizedArg:
        name = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name is None or value is None:
            return super().keyword_argument(node, context, depth)
        normalized = self.normalize_argument(value, context, depth)
        return normalized.model_copy(update={"keyword": name.text})


def _string_literal_value(text: str) -> str:
    body = _STRING_PREFIX.sub("", text, count=1)
    for quote in ('"""', "'''", '"', "'"):
        if len(body) >= 2 * len(quote) and body.startswith(quote) and body.endswith(quote):
            return body[len(quote) : -len(quote)]
    return text


def _is_public(name: str) -> bool:
    if name.startswith("__") and name.endswith("__"):
        return True
    return not name.startswith("_")


def _definition_decorators(node: SyntaxNode) -> list[str]:
    parent = node.parent
    if parent is None or parent.type != "decorated_definition":
        return []
    return [child.text for child in parent.children if child.type == "decorator"]


def _extract_base_classes(node: SyntaxNode) -> list[str]:
    """Base class names from a class definition, as written in source."""
    superclasses = node.child_by_field_name("superclasses")
    if superclasses is None:
        return []

    bases: list[str] = []
    for child in superclasses.named_children:
        if child.type in ("identifier", "attribute"):
            bases.append(child.text)
        elif child.type == "call":
            func_node = child.child_by_field_name("function")
            if func_node is not None:
                bases.append(func_node.text)
        elif child.type == "subscript":
            # Generic[T] -> Generic
            value_node = child.child_by_field_name("value")
            if value_node is not None:
                bases.append(value_node.text)
    return bases


def _parameter(node: SyntaxNode) -> UnifiedParameter | None:
    if node.type == "identifier":
        return UnifiedParameter(name=node.text)
    if node.type in ("list_splat_pattern", "dictionary_splat_pattern"):
        return UnifiedParameter(name=node.text.lstrip("*"), is_rest=True)
    if node.type == "typed_parameter":
        type_node = node.child_by_field_name("type")
        target = node.named_children[0] if node.named_children else node
        return UnifiedParameter(
            name=target.text.lstrip("*"),
            type=type_node.text if type_node is not None else None,
            is_rest=target.type in ("list_splat_pattern", "dictionary_splat_pattern"),
        )
    if node.type in ("default_parameter", "typed_default_parameter"):
        name = node.child_by_field_name("name")
        type_node = node.child_by_field_name("type")
        return UnifiedParameter(
            name=name.text if name is not None else node.text,
            type=type_node.text if type_node is not None else None,
            has_default=True,
        )
    return None


class PythonNormalizer(BaseNormalizer):
    language = "python"
    vocabulary = PYTHON_VOCABULARY
    argument_normalizer_class = PythonArgumentNormalizer

    # -- functions --------------------------------------------------------

    def extract_functions(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedFunction]:
        module_name = module_name_for(file_path, self.language)
        functions: list[UnifiedFunction] = []

        # (node, enclosing scope names, enclosing class if the scope is a class body)
        stack: list[tuple[SyntaxNode, tuple[str, ...], str | None]] = [(root, (), None)]
        while stack:
            node, scopes, class_name = stack.pop()
            child_scopes = scopes
            child_class = class_name

            if node.type == "function_definition":
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    functions.append(
                        self._function(
                            node, name_node.text, scopes, class_name, module_name, file_path
                        )
                    )
                    child_scopes = (*scopes, name_node.text)
                child_class = None
            elif node.type == "class_definition":
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    child_scopes = (*scopes, name_node.text)
                    child_class = name_node.text

            stack.extend(
                (child, child_scopes, child_class) for child in reversed(node.children)
            )

        return functions

    def _function(
        self,
        node: SyntaxNode,
        name: str,
        scopes: tuple[str, ...],
        class_name: str | None,
        module_name: str,
        file_path: str,
    ) -> UnifiedFunction:
        is_method = class_name is not None
        decorators = _definition_decorators(node)
        parameters = self._parameters(node.child_by_field_name("parameters"))
        is_static = is_method and (
            "@staticmethod" in decorators or not parameters
        )

        return_type = node.child_by_field_name("return_type")
        body = node.child_by_field_name("body") or node
        start_line, start_column = position(node)
        end_line, end_column = end_position(node)

        return UnifiedFunction(
            name=name,
            qualified_name=build_qualified_name(module_name, scopes, name),
            file=file_path,
            start_line=start_line,
            end_line=end_line,
            start_column=start_column,
            end_column=end_column,
            parameters=tuple(parameters),
            return_type=strip_type_annotation(return_type.text if return_type else None),
            is_method=is_method,
            is_static=is_static,
            is_exported=_is_public(name),
            is_constructor=is_method and name in _CONSTRUCTOR_NAMES,
            is_async=has_child_type(node, ("async",)),
            class_name=class_name,
            decorators=tuple(decorators),
            body_start_line=position(body)[0],
            body_end_line=end_position(body)[0],
            language=self.language,
        )

    def _parameters(self, params_node: SyntaxNode | None) -> list[UnifiedParameter]:
        if params_node is None:
            return []
        parameters: list[UnifiedParameter] = []
        for child in params_node.named_children:
            if child.type in _PARAMETER_SEPARATORS:
                continue
            parameter = _parameter(child)
            if parameter is not None:
                parameters.append(parameter)
        return parameters

    # -- classes ----------------------------------------------------------

    def extract_classes(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedClass]:
        classes: list[UnifiedClass] = []
        stack: list[SyntaxNode] = [root]
        while stack:
            node = stack.pop()
            if node.type == "class_definition":
                declared = self._class(node, file_path)
                if declared is not None:
                    classes.append(declared)
            stack.extend(reversed(node.children))
        return classes

    def _class(self, node: SyntaxNode, file_path: str) -> UnifiedClass | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None

        base_classes = _extract_base_classes(node)
        kind: ClassKind = "class"
        if any(base in _ENUM_BASES for base in base_classes):
            kind = "enum"
        elif any(base in _PROTOCOL_BASES for base in base_classes):
            kind = "interface"

        methods: list[str] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for statement in body.named_children:
                definition = statement
                if statement.type == "decorated_definition":
                    definition = statement.child_by_field_name("definition") or statement
                if definition.type == "function_definition":
                    method_name = definition.child_by_field_name("name")
                    if method_name is not None:
                        methods.append(method_name.text)

        start_line, _ = position(node)
        end_line, _ = end_position(node)
        return UnifiedClass(
            name=name_node.text,
            kind=kind,
            file=file_path,
            start_line=start_line,
            end_line=end_line,
            base_classes=tuple(base_classes),
            methods=tuple(methods),
            is_exported=_is_public(name_node.text),
            language=self.language,
        )

    # -- imports ----------------------------------------------------------

    def _module_statements(self, root: SyntaxNode) -> Iterator[tuple[SyntaxNode, bool]]:
        """Module-level statements, entering ``if``/``try``/``with`` blocks.

        Yields ``(statement, under_type_checking)`` in source order.
        """
        stack: list[tuple[SyntaxNode, bool]] = [
            (statement, False) for statement in reversed(root.named_children)
        ]
        while stack:
            statement, type_only = stack.pop()
            if statement.type == "block":
                stack.extend(
                    (child, type_only) for child in reversed(statement.named_children)
                )
            elif statement.type == "if_statement":
                condition = statement.child_by_field_name("condition")
                guarded = condition is not None and condition.text in _TYPE_CHECKING_GUARDS
                stack.extend(
                    (block, type_only or guarded)
                    for block in reversed(self._blocks_of(statement))
                )
            elif statement.type in ("try_statement", "with_statement"):
                stack.extend(
                    (block, type_only) for block in reversed(self._blocks_of(statement))
                )
            else:
                yield statement, type_only

    def _blocks_of(self, statement: SyntaxNode) -> list[SyntaxNode]:
        blocks: list[SyntaxNode] = []
        for child in statement.named_children:
            if child.type == "block":
                blocks.append(child)
            elif child.type in (
                "elif_clause",
                "else_clause",
                "except_clause",
                "except_group_clause",
                "finally_clause",
            ):
                blocks.extend(part for part in child.named_children if part.type == "block")
        return blocks

    def extract_imports(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedImport]:
        imports: list[UnifiedImport] = []
        for statement, type_only in self._module_statements(root):
            line = position(statement)[0]
            if statement.type == "import_statement":
                for name_node in statement.named_children:
                    module, local = _import_target(name_node)
                    imports.append(
                        UnifiedImport(
                            source=module,
                            names=(
                                UnifiedImportedName(
                                    imported=module, local=local, is_namespace=True
                                ),
                            ),
                            line=line,
                            is_type_only=type_only,
                            language=self.language,
                        )
                    )
            elif statement.type in ("import_from_statement", "future_import_statement"):
                imports.append(self._from_import(statement, line, type_only))
        return imports

    def _from_import(
        self, statement: SyntaxNode, line: int, type_only: bool
    ) -> UnifiedImport:
        if statement.type == "future_import_statement":
            module = "__future__"
            module_node = None
        else:
            module_node = statement.child_by_field_name("module_name")
            module = module_node.text if module_node is not None else ""

        names: list[UnifiedImportedName] = []
        for child in statement.named_children:
            if module_node is not None and child.id == module_node.id:
                continue
            if child.type == "wildcard_import":
                names.append(UnifiedImportedName(imported="*", local="*", is_namespace=True))
            elif child.type in ("dotted_name", "aliased_import"):
                imported, local = _import_target(child)
                names.append(UnifiedImportedName(imported=imported, local=local))

        return UnifiedImport(
            source=module,
            names=tuple(names),
            line=line,
            is_type_only=type_only,
            language=self.language,
        )

    # -- exports ----------------------------------------------------------

    def extract_exports(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedExport]:
        declared = self._dunder_all(root)
        if declared is not None:
            return [
                UnifiedExport(name=name, line=line, language=self.language)
                for name, line in declared
            ]

        exports: list[UnifiedExport] = []
        for statement in root.named_children:
            definition = statement
            if statement.type == "decorated_definition":
                definition = statement.child_by_field_name("definition") or statement
            if definition.type not in ("function_definition", "class_definition"):
                continue
            name_node = definition.child_by_field_name("name")
            if name_node is None or not _is_public(name_node.text):
                continue
            exports.append(
                UnifiedExport(
                    name=name_node.text,
                    line=position(statement)[0],
                    language=self.language,
                )
            )
        return exports

    def _dunder_all(self, root: SyntaxNode) -> list[tuple[str, int]] | None:
        """Names listed in ``__all__`` assignments, or None if there are none."""
        found: list[tuple[str, int]] | None = None
        for statement in root.named_children:
            if statement.type != "expression_statement":
                continue
            for expression in statement.named_children:
                if expression.type not in ("assignment", "augmented_assignment"):
                    continue
                left = expression.child_by_field_name("left")
                right = expression.child_by_field_name("right")
                if left is None or right is None or left.text != "__all__":
                    continue
                if found is None or expression.type == "assignment":
                    found = []
                line = position(expression)[0]
                found.extend(
                    (_string_literal_value(item.text), line)
                    for item in right.named_children
                    if item.type == "string"
                )
        return found


def _import_target(node: SyntaxNode) -> tuple[str, str]:
    """``(imported, local)`` for a dotted name or an ``x as y`` clause."""
    if node.type == "aliased_import":
        name = node.child_by_field_name("name")
        alias = node.child_by_field_name("alias")
        imported = name.text if name is not None else node.text
        return imported, alias.text if alias is not None else imported
    return node.text, node.text


__all__ = ["PYTHON_VOCABULARY", "PythonArgumentNormalizer", "PythonNormalizer"]
