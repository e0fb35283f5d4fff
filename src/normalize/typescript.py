"""TypeScript and JavaScript normalizer.

Both languages share one grammar family, so one normalizer serves both and
only the ``language`` tag differs.
"""

from __future__ import annotations

from dataclasses import replace
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
    first_child_of_type,
    has_child_type,
    position,
    strip_type_annotation,
)
from normalize.vocabulary import ArgShape, ChainStep, LanguageVocabulary
from utils import module_name_for

if TYPE_CHECKING:
    from artifacts.models.ir import ClassKind, PropertyItems
    from parse.syntax import SyntaxNode

_FUNCTION_VALUES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)

TYPESCRIPT_VOCABULARY = LanguageVocabulary(
    language="typescript",
    chain_steps={
        "call_expression": ChainStep.CALL,
        "member_expression": ChainStep.FIELD,
        "await_expression": ChainStep.AWAIT,
        "subscript_expression": ChainStep.TRANSPARENT,
        "non_null_expression": ChainStep.TRANSPARENT,
        "parenthesized_expression": ChainStep.TRANSPARENT,
        "identifier": ChainStep.IDENTIFIER,
        "this": ChainStep.IDENTIFIER,
        "super": ChainStep.IDENTIFIER,
    },
    arg_shapes={
        "string": ArgShape.STRING,
        "template_string": ArgShape.STRING,
        "number": ArgShape.NUMBER,
        "true": ArgShape.BOOLEAN,
        "false": ArgShape.BOOLEAN,
        "null": ArgShape.NULL,
        "undefined": ArgShape.NULL,
        "identifier": ArgShape.IDENTIFIER,
        "this": ArgShape.IDENTIFIER,
        "member_expression": ArgShape.IDENTIFIER,
        "object": ArgShape.OBJECT,
        "array": ArgShape.ARRAY,
        "call_expression": ArgShape.CALL,
        "new_expression": ArgShape.CALL,
        "arrow_function": ArgShape.CLOSURE,
        "function_expression": ArgShape.CLOSURE,
        "function": ArgShape.CLOSURE,
        "generator_function": ArgShape.CLOSURE,
        "binary_expression": ArgShape.EXPRESSION,
        "unary_expression": ArgShape.EXPRESSION,
        "update_expression": ArgShape.EXPRESSION,
        "ternary_expression": ArgShape.EXPRESSION,
        "assignment_expression": ArgShape.EXPRESSION,
        "augmented_assignment_expression": ArgShape.EXPRESSION,
        "await_expression": ArgShape.EXPRESSION,
        "subscript_expression": ArgShape.EXPRESSION,
        "parenthesized_expression": ArgShape.EXPRESSION,
        "non_null_expression": ArgShape.EXPRESSION,
        "as_expression": ArgShape.EXPRESSION,
        "satisfies_expression": ArgShape.EXPRESSION,
        "spread_element": ArgShape.EXPRESSION,
        "regex": ArgShape.EXPRESSION,
        "class": ArgShape.EXPRESSION,
        "jsx_element": ArgShape.EXPRESSION,
        "jsx_self_closing_element": ArgShape.EXPRESSION,
    },
    member_object_field="object",
    member_property_field="property",
    operand_fields={"subscript_expression": "object"},
    null_identifiers=frozenset({"undefined"}),
    scope_boundaries=_FUNCTION_VALUES | {"method_definition", "class_body"},
)

JAVASCRIPT_VOCABULARY = replace(TYPESCRIPT_VOCABULARY, language="javascript")

_FUNCTION_DECLARATIONS = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_signature",
    }
)
_METHOD_DECLARATIONS = frozenset(
    {"method_definition", "abstract_method_signature", "method_signature"}
)
_CLASS_DECLARATIONS = frozenset({"class_declaration", "abstract_class_declaration", "class"})
_CLASS_KINDS: dict[str, ClassKind] = {
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "class": "class",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
}
_TYPE_DECLARATIONS = frozenset({"interface_declaration", "type_alias_declaration"})
# Bodies whose direct members are methods of the enclosing class or interface.
_MEMBER_CONTAINERS = frozenset({"class_body", "interface_body"})
# `x = () => {}` class fields (TypeScript, JavaScript).
_FIELD_DEFINITIONS = frozenset({"public_field_definition", "field_definition"})


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text


class TypeScriptArgumentNormalizer(ArgumentNormalizer):
    def argument_nodes(self, args_node: SyntaxNode) -> list[SyntaxNode]:
        # A tagged template passes its template as the single argument.
        if args_node.type == "template_string":
            return [args_node]
        return super().argument_nodes(args_node)

    def object_properties(
        self,
        node: SyntaxNode,
        context: NormalizationContext,
        depth: int,
    ) -> PropertyItems:
        properties: dict[str, NormalizedArg] = {}
        for child in node.named_children:
            if child.type == "pair":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                if key is None or value is None:
                    continue
                properties[_unquote(key.text)] = self.normalize_argument(
                    value, context, depth
                )
            elif child.type == "shorthand_property_identifier":
                line, column = position(child)
                properties[child.text] = self.identifier(child.text, line, column)
            elif child.type == "method_definition":
                name = child.child_by_field_name("name")
                if name is not None:
                    properties[name.text] = self.unknown(child, "closure")
        return tuple(properties.items())


def _is_export_statement(node: SyntaxNode | None) -> bool:
    return node is not None and node.type == "export_statement"


def _declarator_of(node: SyntaxNode) -> SyntaxNode | None:
    """The ``variable_declarator`` binding a function value, if any."""
    parent = node.parent
    if parent is None or parent.type != "variable_declarator":
        return None
    value = parent.child_by_field_name("value")
    if value is None or value.id != node.id:
        return None
    return parent


def _is_declarator_exported(declarator: SyntaxNode) -> bool:
    declaration = declarator.parent
    return declaration is not None and _is_export_statement(declaration.parent)


def _is_member(node: SyntaxNode) -> bool:
    parent = node.parent
    if parent is None:
        return False
    if parent.type == "object_type":
        # Older grammars give `interface` an `object_type` body.
        return parent.parent is not None and parent.parent.type == "interface_declaration"
    return parent.type in _MEMBER_CONTAINERS


def _member_name(node: SyntaxNode) -> SyntaxNode | None:
    name = node.child_by_field_name("name")
    if name is None:
        # JavaScript `field_definition` names its key `property`.
        name = node.child_by_field_name("property")
    return name


def _field_of(node: SyntaxNode) -> SyntaxNode | None:
    """The class field whose initializer is the function value ``node``."""
    parent = node.parent
    if parent is None or parent.type not in _FIELD_DEFINITIONS or not _is_member(parent):
        return None
    value = parent.child_by_field_name("value")
    if value is None or value.id != node.id:
        return None
    return parent


def _is_default_export(node: SyntaxNode) -> bool:
    parent = node.parent
    return _is_export_statement(parent) and has_child_type(parent, ("default",))


def _method_is_public(node: SyntaxNode) -> bool:
    modifier = first_child_of_type(node, ("accessibility_modifier",))
    if modifier is not None and modifier.text in ("private", "protected"):
        return False
    name = _member_name(node)
    return not (name is not None and name.type == "private_property_identifier")


def _decorators(node: SyntaxNode) -> list[str]:
    """Decorators written before a class member or on a class itself."""
    collected: list[str] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in ("decorator", "comment"):
        if sibling.type == "decorator":
            collected.append(sibling.text)
        sibling = sibling.prev_sibling
    collected.reverse()
    collected.extend(child.text for child in node.children if child.type == "decorator")
    return collected


def _parameter(node: SyntaxNode) -> UnifiedParameter | None:
    if node.type in ("required_parameter", "optional_parameter"):
        pattern = node.child_by_field_name("pattern")
        type_node = node.child_by_field_name("type")
        is_rest = pattern is not None and pattern.type == "rest_pattern"
        name = pattern.text if pattern is not None else node.text
        if is_rest:
            name = name.removeprefix("...")
        return UnifiedParameter(
            name=name,
            type=strip_type_annotation(type_node.text if type_node else None),
            has_default=(
                node.child_by_field_name("value") is not None
                or node.type == "optional_parameter"
            ),
            is_rest=is_rest,
        )
    if node.type == "identifier":
        return UnifiedParameter(name=node.text)
    if node.type == "assignment_pattern":
        left = node.child_by_field_name("left")
        return UnifiedParameter(
            name=left.text if left is not None else node.text, has_default=True
        )
    if node.type == "rest_pattern":
        return UnifiedParameter(name=node.text.removeprefix("..."), is_rest=True)
    if node.type in ("object_pattern", "array_pattern"):
        return UnifiedParameter(name=node.text)
    return None


class TypeScriptNormalizer(BaseNormalizer):
    """Normalizer for TypeScript and TSX. ``JavaScriptNormalizer`` reuses it."""

    language = "typescript"
    vocabulary = TYPESCRIPT_VOCABULARY
    argument_normalizer_class = TypeScriptArgumentNormalizer

    # -- functions --------------------------------------------------------

    def extract_functions(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedFunction]:
        module_name = module_name_for(file_path, self.language)
        functions: list[UnifiedFunction] = []

        stack: list[tuple[SyntaxNode, str | None]] = [(root, None)]
        while stack:
            node, owner = stack.pop()
            child_owner = owner

            if node.type in _FUNCTION_DECLARATIONS:
                function = self._declared_function(node, module_name, file_path)
                if function is not None:
                    functions.append(function)
                child_owner = None
            elif node.type in _METHOD_DECLARATIONS and owner is not None and _is_member(node):
                function = self._method(node, node, owner, module_name, file_path)
                if function is not None:
                    functions.append(function)
                child_owner = None
            elif node.type in _FUNCTION_VALUES:
                function = self._value_function(node, owner, module_name, file_path)
                if function is not None:
                    functions.append(function)
                child_owner = None
            elif node.type in _CLASS_DECLARATIONS or node.type == "interface_declaration":
                name_node = node.child_by_field_name("name")
                child_owner = name_node.text if name_node is not None else None
            elif node.type == "object":
                # Object literal methods do not belong to an enclosing class.
                child_owner = None

            stack.extend((child, child_owner) for child in reversed(node.children))

        return functions

    def _declared_function(
        self, node: SyntaxNode, module_name: str, file_path: str
    ) -> UnifiedFunction | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = name_node.text
        return self._function(
            node,
            name=name,
            qualified_name=build_qualified_name(module_name, (), name),
            file_path=file_path,
            is_exported=_is_export_statement(node.parent),
        )

    def _method(
        self,
        node: SyntaxNode,
        member: SyntaxNode,
        owner: str,
        module_name: str,
        file_path: str,
    ) -> UnifiedFunction | None:
        """A class member; ``member`` is ``node`` itself or the field holding it."""
        name_node = _member_name(member)
        if name_node is None:
            return None
        name = name_node.text
        return self._function(
            node,
            name=name,
            qualified_name=build_qualified_name(module_name, (owner,), name),
            file_path=file_path,
            is_exported=_method_is_public(member),
            class_name=owner,
            is_static=has_child_type(member, ("static",)),
            is_constructor=name == "constructor",
            decorators=_decorators(member),
            span=member,
        )

    def _value_function(
        self, node: SyntaxNode, owner: str | None, module_name: str, file_path: str
    ) -> UnifiedFunction | None:
        declarator = _declarator_of(node)
        if declarator is not None:
            return self._bound_function(node, declarator, module_name, file_path)

        field = _field_of(node)
        if field is not None and owner is not None:
            return self._method(node, field, owner, module_name, file_path)

        if _is_default_export(node):
            return self._function(
                node,
                name="default",
                qualified_name=build_qualified_name(module_name, (), "default"),
                file_path=file_path,
                is_exported=True,
            )
        return None

    def _bound_function(
        self,
        node: SyntaxNode,
        declarator: SyntaxNode,
        module_name: str,
        file_path: str,
    ) -> UnifiedFunction | None:
        name_node = declarator.child_by_field_name("name")
        if name_node is None or name_node.type != "identifier":
            return None
        name = name_node.text
        return self._function(
            node,
            name=name,
            qualified_name=build_qualified_name(module_name, (), name),
            file_path=file_path,
            is_exported=_is_declarator_exported(declarator),
            span=declarator,
        )

    def _function(
        self,
        node: SyntaxNode,
        *,
        name: str,
        qualified_name: str,
        file_path: str,
        is_exported: bool,
        class_name: str | None = None,
        is_static: bool = False,
        is_constructor: bool = False,
        decorators: list[str] | None = None,
        span: SyntaxNode | None = None,
    ) -> UnifiedFunction:
        span = span or node
        start_line, start_column = position(span)
        end_line, end_column = end_position(span)
        body = node.child_by_field_name("body") or node
        return_type = node.child_by_field_name("return_type")

        return UnifiedFunction(
            name=name,
            qualified_name=qualified_name,
            file=file_path,
            start_line=start_line,
            end_line=end_line,
            start_column=start_column,
            end_column=end_column,
            parameters=tuple(self._parameters(node)),
            return_type=strip_type_annotation(return_type.text if return_type else None),
            is_method=class_name is not None,
            is_static=is_static,
            is_exported=is_exported,
            is_constructor=is_constructor,
            is_async=has_child_type(node, ("async",)),
            class_name=class_name,
            decorators=tuple(decorators or ()),
            body_start_line=position(body)[0],
            body_end_line=end_position(body)[0],
            language=self.language,
        )

    def _parameters(self, node: SyntaxNode) -> list[UnifiedParameter]:
        single = node.child_by_field_name("parameter")
        if single is not None:
            parameter = _parameter(single)
            return [parameter] if parameter is not None else []

        params_node = node.child_by_field_name("parameters")
        if params_node is None:
            return []
        parameters: list[UnifiedParameter] = []
        for child in params_node.named_children:
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
            kind = _CLASS_KINDS.get(node.type)
            if kind is not None:
                declared = self._class(node, kind, file_path)
                if declared is not None:
                    classes.append(declared)
            stack.extend(reversed(node.children))
        return classes

    def _class(
        self, node: SyntaxNode, kind: ClassKind, file_path: str
    ) -> UnifiedClass | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None

        base_classes: list[str] = []
        methods: list[str] = []
        body = node.child_by_field_name("body")

        if kind == "class":
            heritage = first_child_of_type(node, ("class_heritage",))
            if heritage is not None:
                base_classes = self._heritage(heritage)
        elif kind == "interface":
            extends = first_child_of_type(node, ("extends_type_clause",))
            if extends is not None:
                base_classes = [child.text for child in extends.named_children]

        if body is not None and kind in ("class", "interface"):
            for member in body.named_children:
                if member.type in _FIELD_DEFINITIONS:
                    value = member.child_by_field_name("value")
                    if value is None or value.type not in _FUNCTION_VALUES:
                        continue
                elif member.type not in _METHOD_DECLARATIONS:
                    continue
                method_name = _member_name(member)
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
            is_exported=_is_export_statement(node.parent),
            language=self.language,
        )

    def _heritage(self, heritage: SyntaxNode) -> list[str]:
        bases: list[str] = []
        for clause in heritage.named_children:
            if clause.type == "extends_clause":
                value = clause.child_by_field_name("value")
                if value is not None:
                    bases.append(value.text)
            elif clause.type == "implements_clause":
                bases.extend(child.text for child in clause.named_children)
            elif clause.type != "comment":
                # JavaScript: `class A extends B` has the expression directly.
                bases.append(clause.text)
        return bases

    # -- imports ----------------------------------------------------------

    def extract_imports(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedImport]:
        imports: list[UnifiedImport] = []
        for statement in root.named_children:
            if statement.type == "import_statement":
                imported = self._import_statement(statement)
                if imported is not None:
                    imports.append(imported)
            elif statement.type in ("lexical_declaration", "variable_declaration"):
                imports.extend(self._require_imports(statement))
        return imports

    def _import_statement(self, node: SyntaxNode) -> UnifiedImport | None:
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return None
        is_type_only = has_child_type(node, ("type",))

        names: list[UnifiedImportedName] = []
        clause = first_child_of_type(node, ("import_clause",))
        if clause is not None:
            for part in clause.named_children:
                if part.type == "identifier":
                    names.append(
                        UnifiedImportedName(
                            imported="default", local=part.text, is_default=True
                        )
                    )
                elif part.type == "namespace_import":
                    local = first_child_of_type(part, ("identifier",))
                    names.append(
                        UnifiedImportedName(
                            imported="*",
                            local=local.text if local is not None else part.text,
                            is_namespace=True,
                        )
                    )
                elif part.type == "named_imports":
                    for specifier in part.named_children:
                        if specifier.type != "import_specifier":
                            continue
                        name = specifier.child_by_field_name("name")
                        alias = specifier.child_by_field_name("alias")
                        if name is None:
                            continue
                        names.append(
                            UnifiedImportedName(
                                imported=name.text,
                                local=alias.text if alias is not None else name.text,
                            )
                        )

        return UnifiedImport(
            source=_unquote(source_node.text),
            names=tuple(names),
            line=position(node)[0],
            is_type_only=is_type_only,
            language=self.language,
        )

    def _require_imports(self, declaration: SyntaxNode) -> list[UnifiedImport]:
        imports: list[UnifiedImport] = []
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            value = declarator.child_by_field_name("value")
            name = declarator.child_by_field_name("name")
            if value is None or name is None or value.type != "call_expression":
                continue
            function = value.child_by_field_name("function")
            arguments = value.child_by_field_name("arguments")
            if function is None or function.text != "require" or arguments is None:
                continue
            sources = [arg for arg in arguments.named_children if arg.type == "string"]
            if not sources:
                continue

            if name.type == "object_pattern":
                names = self._pattern_bindings(name)
            else:
                names = [
                    UnifiedImportedName(imported="*", local=name.text, is_namespace=True)
                ]
            imports.append(
                UnifiedImport(
                    source=_unquote(sources[0].text),
                    names=tuple(names),
                    line=position(declaration)[0],
                    language=self.language,
                )
            )
        return imports

    def _pattern_bindings(self, pattern: SyntaxNode) -> list[UnifiedImportedName]:
        names: list[UnifiedImportedName] = []
        for child in pattern.named_children:
            if child.type == "shorthand_property_identifier_pattern":
                names.append(UnifiedImportedName(imported=child.text, local=child.text))
            elif child.type == "pair_pattern":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                if key is not None and value is not None:
                    names.append(UnifiedImportedName(imported=key.text, local=value.text))
        return names

    # -- exports ----------------------------------------------------------

    def extract_exports(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedExport]:
        exports: list[UnifiedExport] = []
        for statement in root.named_children:
            if statement.type == "export_statement":
                exports.extend(self._export_statement(statement))
        return exports

    def _export_statement(self, node: SyntaxNode) -> list[UnifiedExport]:
        line = position(node)[0]
        is_default = has_child_type(node, ("default",))
        is_type_only = has_child_type(node, ("type",))
        source_node = node.child_by_field_name("source")
        source = _unquote(source_node.text) if source_node is not None else None

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            return [
                UnifiedExport(
                    name=name,
                    is_default=is_default,
                    is_type_only=declaration.type in _TYPE_DECLARATIONS,
                    line=line,
                    language=self.language,
                )
                for name in self._declared_names(declaration, is_default)
            ]

        if node.child_by_field_name("value") is not None:
            return [
                UnifiedExport(name="default", is_default=True, line=line, language=self.language)
            ]

        clause = first_child_of_type(node, ("export_clause",))
        if clause is not None:
            exports: list[UnifiedExport] = []
            for specifier in clause.named_children:
                if specifier.type != "export_specifier":
                    continue
                name = specifier.child_by_field_name("name")
                alias = specifier.child_by_field_name("alias")
                if name is None:
                    continue
                local = alias.text if alias is not None else name.text
                exports.append(
                    UnifiedExport(
                        name=local,
                        source=source,
                        names=(UnifiedImportedName(imported=name.text, local=local),),
                        is_default=local == "default",
                        is_re_export=source is not None,
                        is_type_only=is_type_only,
                        line=line,
                        language=self.language,
                    )
                )
            return exports

        if source is not None:
            namespace = first_child_of_type(node, ("namespace_export",))
            local = "*"
            if namespace is not None:
                alias = namespace.named_children[-1] if namespace.named_children else None
                local = _unquote(alias.text) if alias is not None else namespace.text
            return [
                UnifiedExport(
                    name=local,
                    source=source,
                    names=(UnifiedImportedName(imported="*", local=local, is_namespace=True),),
                    is_re_export=True,
                    is_type_only=is_type_only,
                    line=line,
                    language=self.language,
                )
            ]

        return []

    def _declared_names(self, declaration: SyntaxNode, is_default: bool) -> list[str]:
        if declaration.type in ("lexical_declaration", "variable_declaration"):
            names = []
            for declarator in declaration.named_children:
                if declarator.type == "variable_declarator":
                    name = declarator.child_by_field_name("name")
                    if name is not None:
                        names.append(name.text)
            return names
        name = declaration.child_by_field_name("name")
        if name is not None:
            return [name.text]
        return ["default"] if is_default else []


class JavaScriptNormalizer(TypeScriptNormalizer):
    language = "javascript"
    vocabulary = JAVASCRIPT_VOCABULARY


__all__ = [
    "JAVASCRIPT_VOCABULARY",
    "TYPESCRIPT_VOCABULARY",
    "JavaScriptNormalizer",
    "TypeScriptArgumentNormalizer",
    "TypeScriptNormalizer",
]
