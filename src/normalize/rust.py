"""Rust normalizer."""

from __future__ import annotations

import re
from dataclasses import dataclass
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
    collect_decorators,
    end_position,
    first_child_of_type,
    position,
    strip_type_annotation,
)
from normalize.vocabulary import ArgShape, ChainStep, LanguageVocabulary
from utils import module_name_for

if TYPE_CHECKING:
    from artifacts.models.ir import ClassKind, PropertyItems
    from parse.syntax import SyntaxNode

RUST_VOCABULARY = LanguageVocabulary(
    language="rust",
    chain_steps={
        "call_expression": ChainStep.CALL,
        "field_expression": ChainStep.FIELD,
        "await_expression": ChainStep.AWAIT,
        "try_expression": ChainStep.TRY,
        "index_expression": ChainStep.TRANSPARENT,
        "parenthesized_expression": ChainStep.TRANSPARENT,
        "identifier": ChainStep.IDENTIFIER,
        "self": ChainStep.IDENTIFIER,
        "super": ChainStep.IDENTIFIER,
        "crate": ChainStep.IDENTIFIER,
        "scoped_identifier": ChainStep.PATH,
    },
    arg_shapes={
        "string_literal": ArgShape.STRING,
        "raw_string_literal": ArgShape.STRING,
        "char_literal": ArgShape.STRING,
        "integer_literal": ArgShape.NUMBER,
        "float_literal": ArgShape.NUMBER,
        "boolean_literal": ArgShape.BOOLEAN,
        "identifier": ArgShape.IDENTIFIER,
        "self": ArgShape.IDENTIFIER,
        "scoped_identifier": ArgShape.IDENTIFIER,
        "field_expression": ArgShape.IDENTIFIER,
        "struct_expression": ArgShape.OBJECT,
        "array_expression": ArgShape.ARRAY,
        "tuple_expression": ArgShape.ARRAY,
        "call_expression": ArgShape.CALL,
        "closure_expression": ArgShape.CLOSURE,
        "async_block": ArgShape.CLOSURE,
        "reference_expression": ArgShape.EXPRESSION,
        "unary_expression": ArgShape.EXPRESSION,
        "binary_expression": ArgShape.EXPRESSION,
        "unit_expression": ArgShape.EXPRESSION,
        "macro_invocation": ArgShape.EXPRESSION,
        "type_cast_expression": ArgShape.EXPRESSION,
        "range_expression": ArgShape.EXPRESSION,
        "index_expression": ArgShape.EXPRESSION,
        "await_expression": ArgShape.EXPRESSION,
        "try_expression": ArgShape.EXPRESSION,
        "if_expression": ArgShape.EXPRESSION,
        "match_expression": ArgShape.EXPRESSION,
        "block": ArgShape.EXPRESSION,
        "parenthesized_expression": ArgShape.EXPRESSION,
    },
    member_object_field="value",
    member_property_field="field",
    path_separator="::",
    callee_wrappers={"generic_function": "function"},
    null_identifiers=frozenset({"None"}),
    scope_boundaries=frozenset({"closure_expression", "async_block", "function_item"}),
    comment_types=frozenset({"line_comment", "block_comment"}),
    non_argument_types=frozenset({"attribute_item"}),
)

_RAW_STRING = re.compile(r'^b?r(#*)"(.*)"\1$', re.DOTALL)

_CONSTRUCTOR_NAMES = frozenset({"new", "default"})
_FUNCTION_TYPES = frozenset({"function_item", "function_signature_item"})
_CLASS_KINDS: dict[str, ClassKind] = {
    "struct_item": "struct",
    "union_item": "struct",
    "enum_item": "enum",
    "trait_item": "trait",
}
_EXPORTED_ITEMS = frozenset(
    {
        "function_item",
        "struct_item",
        "enum_item",
        "union_item",
        "trait_item",
        "const_item",
        "static_item",
        "mod_item",
        "type_item",
    }
)


class RustArgumentNormalizer(ArgumentNormalizer):
    def string_value(self, node: SyntaxNode) -> str:
        text = node.text
        match = _RAW_STRING.match(text)
        if match:
            return match.group(2)
        if text.startswith(("b'", 'b"')):
            text = text[1:]
        if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
            return text[1:-1]
        return text

    def object_properties(
        self,
        node: SyntaxNode,
        context: NormalizationContext,
        depth: int,
    ) -> PropertyItems:
        properties: dict[str, NormalizedArg] = {}
        body = node.child_by_field_name("body")
        if body is None:
            return ()

        for child in body.named_children:
            if child.type == "field_initializer":
                field_node = child.child_by_field_name("field")
                value_node = child.child_by_field_name("value")
                if field_node is None or value_node is None:
                    continue
                properties[field_node.text] = self.normalize_argument(
                    value_node, context, depth
                )
            elif child.type == "shorthand_field_initializer":
                # `Point { x, y }` binds each field to the variable of that name.
                line, column = position(child)
                properties[child.text] = self.identifier(child.text, line, column)
        return tuple(properties.items())


@dataclass(frozen=True)
class _Owner:
    """The impl or trait block enclosing a function."""

    class_name: str
    type_name: str


def _is_pub(node: SyntaxNode) -> bool:
    modifier = first_child_of_type(node, ("visibility_modifier",))
    return modifier is not None and modifier.text.startswith("pub")


def _type_name(node: SyntaxNode | None) -> str:
    if node is None:
        return ""
    if node.type == "generic_type":
        inner = node.child_by_field_name("type")
        if inner is not None:
            return inner.text
    return node.text


def _impl_owner(node: SyntaxNode) -> _Owner:
    type_name = _type_name(node.child_by_field_name("type"))
    trait = node.child_by_field_name("trait")
    if trait is not None:
        return _Owner(class_name=f"{_type_name(trait)} for {type_name}", type_name=type_name)
    return _Owner(class_name=type_name, type_name=type_name)


class RustNormalizer(BaseNormalizer):
    language = "rust"
    vocabulary = RUST_VOCABULARY
    argument_normalizer_class = RustArgumentNormalizer

    # -- functions --------------------------------------------------------

    def extract_functions(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedFunction]:
        module_name = module_name_for(file_path, self.language)
        functions: list[UnifiedFunction] = []

        stack: list[tuple[SyntaxNode, _Owner | None, tuple[str, ...]]] = [(root, None, ())]
        while stack:
            node, owner, modules = stack.pop()
            child_owner = owner
            child_modules = modules

            if node.type in _FUNCTION_TYPES:
                function = self._function(node, owner, modules, module_name, file_path)
                if function is not None:
                    functions.append(function)
                # Items nested in a function body are free functions again.
                child_owner = None
            elif node.type == "impl_item":
                child_owner = _impl_owner(node)
            elif node.type == "trait_item":
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    child_owner = _Owner(class_name=name_node.text, type_name=name_node.text)
            elif node.type == "mod_item":
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    child_modules = (*modules, name_node.text)

            stack.extend(
                (child, child_owner, child_modules) for child in reversed(node.children)
            )

        return functions

    def _function(
        self,
        node: SyntaxNode,
        owner: _Owner | None,
        modules: tuple[str, ...],
        module_name: str,
        file_path: str,
    ) -> UnifiedFunction | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = name_node.text

        parameters, has_receiver = self._parameters(node.child_by_field_name("parameters"))
        is_method = owner is not None
        owners = (*modules, owner.type_name) if owner is not None else modules

        modifiers = first_child_of_type(node, ("function_modifiers",))
        is_async = modifiers is not None and any(
            child.type == "async" for child in modifiers.children
        )

        return_type = node.child_by_field_name("return_type")
        body = node.child_by_field_name("body") or node
        start_line, start_column = position(node)
        end_line, end_column = end_position(node)

        return UnifiedFunction(
            name=name,
            qualified_name=build_qualified_name(module_name, owners, name, "::"),
            file=file_path,
            start_line=start_line,
            end_line=end_line,
            start_column=start_column,
            end_column=end_column,
            parameters=tuple(parameters),
            return_type=strip_type_annotation(return_type.text if return_type else None),
            is_method=is_method,
            is_static=is_method and not has_receiver,
            is_exported=_is_pub(node),
            is_constructor=is_method and name in _CONSTRUCTOR_NAMES,
            is_async=is_async,
            class_name=owner.class_name if owner is not None else None,
            decorators=tuple(
                collect_decorators(
                    node, frozenset({"attribute_item"}), self.vocabulary.comment_types
                )
            ),
            body_start_line=position(body)[0],
            body_end_line=end_position(body)[0],
            language=self.language,
        )

    def _parameters(
        self, params_node: SyntaxNode | None
    ) -> tuple[list[UnifiedParameter], bool]:
        """Parameters in declaration order, and whether a ``self`` receiver is present."""
        parameters: list[UnifiedParameter] = []
        has_receiver = False
        if params_node is None:
            return parameters, has_receiver

        for child in params_node.named_children:
            if child.type == "self_parameter":
                has_receiver = True
                text = child.text
                parameters.append(
                    UnifiedParameter(name="self", type=text if text != "self" else None)
                )
            elif child.type == "parameter":
                pattern = child.child_by_field_name("pattern")
                type_node = child.child_by_field_name("type")
                name = pattern.text if pattern is not None else child.text
                if name == "self":
                    has_receiver = True
                parameters.append(
                    UnifiedParameter(
                        name=name, type=type_node.text if type_node else None
                    )
                )
            elif child.type == "variadic_parameter":
                parameters.append(UnifiedParameter(name="...", is_rest=True))
        return parameters, has_receiver

    # -- classes ----------------------------------------------------------

    def extract_classes(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedClass]:
        classes: list[UnifiedClass] = []
        stack: list[SyntaxNode] = [root]
        while stack:
            node = stack.pop()
            kind = _CLASS_KINDS.get(node.type)
            if kind is not None:
                declared = self._class(node, kind, file_path)
                if declared is not None:
                    classes.append(declared)
            stack.extend(reversed(node.children))
        return classes

    def _class(self, node: SyntaxNode, kind: ClassKind, file_path: str) -> UnifiedClass | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None

        base_classes: list[str] = []
        methods: list[str] = []
        if kind == "trait":
            bounds = node.child_by_field_name("bounds")
            if bounds is not None:
                base_classes = [
                    bound.text
                    for bound in bounds.named_children
                    if bound.type not in self.vocabulary.comment_types
                ]
            body = node.child_by_field_name("body")
            if body is not None:
                for item in body.named_children:
                    if item.type in _FUNCTION_TYPES:
                        method_name = item.child_by_field_name("name")
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
            is_exported=_is_pub(node),
            language=self.language,
        )

    # -- imports / exports ------------------------------------------------

    def _use_declarations(self, root: SyntaxNode) -> list[SyntaxNode]:
        """``use`` items at module level, including inline ``mod`` blocks."""
        found: list[SyntaxNode] = []
        stack: list[SyntaxNode] = [root]
        while stack:
            container = stack.pop()
            for child in container.named_children:
                if child.type == "use_declaration":
                    found.append(child)
                elif child.type == "mod_item":
                    body = child.child_by_field_name("body")
                    if body is not None:
                        stack.append(body)
        found.sort(key=lambda node: node.start_point)
        return found

    def extract_imports(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedImport]:
        imports: list[UnifiedImport] = []
        for declaration in self._use_declarations(root):
            argument = declaration.child_by_field_name("argument")
            if argument is None:
                continue
            line, _ = position(declaration)
            for leaf_source, binding in _use_tree(argument, ""):
                imports.append(
                    UnifiedImport(
                        source=leaf_source,
                        names=(binding,),
                        line=line,
                        language=self.language,
                    )
                )
        return imports

    def extract_exports(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedExport]:
        exports: list[UnifiedExport] = []
        for child in root.named_children:
            if not _is_pub(child):
                continue
            line, _ = position(child)

            if child.type in _EXPORTED_ITEMS:
                name_node = child.child_by_field_name("name")
                if name_node is not None:
                    exports.append(
                        UnifiedExport(name=name_node.text, line=line, language=self.language)
                    )
            elif child.type == "use_declaration":
                argument = child.child_by_field_name("argument")
                if argument is None:
                    continue
                for leaf_source, binding in _use_tree(argument, ""):
                    exports.append(
                        UnifiedExport(
                            name=binding.local,
                            source=leaf_source,
                            names=(binding,),
                            is_re_export=True,
                            line=line,
                            language=self.language,
                        )
                    )
        return exports


def _join_path(prefix: str, path: str) -> str:
    if prefix and path:
        return f"{prefix}::{path}"
    return prefix or path


def _last_segment(path: str) -> str:
    return path.rsplit("::", 1)[-1]


def _use_tree(node: SyntaxNode, prefix: str) -> list[tuple[str, UnifiedImportedName]]:
    """Flatten a use tree into ``(source path, binding)`` leaves."""
    if node.type in ("identifier", "scoped_identifier", "crate", "super", "metavariable"):
        path = _join_path(prefix, node.text)
        name = _last_segment(path)
        return [(path, UnifiedImportedName(imported=name, local=name))]

    if node.type == "self":
        # `use a::b::{self}` imports the module `a::b` itself.
        name = _last_segment(prefix) if prefix else "self"
        return [(prefix or "self", UnifiedImportedName(imported=name, local=name))]

    if node.type == "use_as_clause":
        path_node = node.child_by_field_name("path")
        alias_node = node.child_by_field_name("alias")
        path = _join_path(prefix, path_node.text if path_node else "")
        name = _last_segment(path)
        local = alias_node.text if alias_node is not None else name
        return [(path, UnifiedImportedName(imported=name, local=local))]

    if node.type == "use_wildcard":
        base = node.text.removesuffix("*").removesuffix("::")
        path = _join_path(prefix, base)
        return [(path, UnifiedImportedName(imported="*", local="*", is_namespace=True))]

    if node.type == "scoped_use_list":
        path_node = node.child_by_field_name("path")
        list_node = node.child_by_field_name("list")
        base = _join_path(prefix, path_node.text if path_node else "")
        return _use_tree(list_node, base) if list_node is not None else []

    if node.type == "use_list":
        leaves: list[tuple[str, UnifiedImportedName]] = []
        for child in node.named_children:
            if child.type in ("line_comment", "block_comment"):
                continue
            leaves.extend(_use_tree(child, prefix))
        return leaves

    return []


__all__ = ["RUST_VOCABULARY", "RustArgumentNormalizer", "RustNormalizer"]
