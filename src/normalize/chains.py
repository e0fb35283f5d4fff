"""Call-chain walking shared by every language.

A chain such as ``client.from_("users").select("*").eq("id", 1)`` is parsed
as nested nodes with the last call outermost. The walker starts from that
outermost node and follows the receiver side inwards, prepending one
segment per call or property access, until it reaches the receiver.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from artifacts.models.ir.chains import CallChainSegment, UnifiedCallChain
from normalize.nodes import NormalizationContext, end_position, iter_preorder, position
from normalize.vocabulary import CHAIN_LINK_STEPS, CHAIN_START_STEPS, ChainStep

if TYPE_CHECKING:
    from normalize.arguments import ArgumentNormalizer
    from normalize.vocabulary import LanguageVocabulary
    from parse.syntax import SyntaxNode

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHAIN_DEPTH = 256


@dataclass
class _ChainWalk:
    segments: deque[CallChainSegment] = field(default_factory=deque)
    receiver: str = ""
    spine: list[SyntaxNode] = field(default_factory=list)
    argument_lists: list[SyntaxNode] = field(default_factory=list)


class CallChainWalker:
    """Builds ``UnifiedCallChain`` values from a language vocabulary."""

    def __init__(
        self,
        vocabulary: LanguageVocabulary,
        arguments: ArgumentNormalizer,
        *,
        max_depth: int = DEFAULT_MAX_CHAIN_DEPTH,
    ) -> None:
        self.vocabulary = vocabulary
        self.arguments = arguments
        self.max_depth = max_depth

    def normalize_call_chains(
        self,
        root: SyntaxNode,
        file_path: str,
        context: NormalizationContext | None = None,
    ) -> list[UnifiedCallChain]:
        """Emit one chain per outermost chained expression under ``root``."""
        if context is None:
            context = NormalizationContext(file_path=file_path)

        chains: list[UnifiedCallChain] = []
        for node in iter_preorder(root, context):
            if node.id in context.processed:
                continue
            if self.vocabulary.step_for(node) not in CHAIN_START_STEPS:
                continue
            if self.is_chain_continuation(node):
                continue

            walk = self._walk(node, context)
            if walk is None or not any(segment.is_call for segment in walk.segments):
                continue

            chains.append(self._build(node, walk, file_path))
            self._mark_processed(walk, context)

        return chains

    def extract_call_chain(
        self,
        node: SyntaxNode,
        file_path: str,
        context: NormalizationContext | None = None,
    ) -> UnifiedCallChain | None:
        """Walk one expression. Returns None when it yields no segments."""
        if context is None:
            context = NormalizationContext(file_path=file_path)
        walk = self._walk(node, context)
        if walk is None or not walk.segments:
            return None
        return self._build(node, walk, file_path)

    def is_chain_continuation(self, node: SyntaxNode) -> bool:
        """True when ``node`` is the receiver side of an enclosing chain link."""
        parent = node.parent
        if parent is None:
            return False
        vocab = self.vocabulary
        parent_step = vocab.step_for(parent)
        if vocab.step_for(node) is ChainStep.FIELD and (
            parent_step is ChainStep.CALL or parent.type in vocab.callee_wrappers
        ):
            # A member callee belongs to the chain of the call around it.
            field_name = vocab.callee_wrappers.get(parent.type, vocab.call_function_field)
            callee = parent.child_by_field_name(field_name)
            return callee is not None and callee.id == node.id
        if parent_step not in CHAIN_LINK_STEPS:
            return False
        inner = self._inner_of(parent)
        return inner is not None and inner.id == node.id

    # -- walking ----------------------------------------------------------

    def _walk(
        self, node: SyntaxNode, context: NormalizationContext
    ) -> _ChainWalk | None:
        vocab = self.vocabulary
        walk = _ChainWalk()
        current: SyntaxNode | None = node
        steps = 0

        while current is not None:
            steps += 1
            if steps > self.max_depth:
                line, column = position(node)
                logger.debug(
                    "Dropping chain at %s:%d:%d: deeper than %d links",
                    context.file_path,
                    line,
                    column,
                    self.max_depth,
                )
                return None

            walk.spine.append(current)
            step = vocab.step_for(current)

            if step is ChainStep.METHOD_CALL:
                name_node = current.child_by_field_name(vocab.method_name_field)
                args_node = current.child_by_field_name(vocab.method_arguments_field)
                if name_node is not None:
                    walk.segments.appendleft(
                        self._call_segment(name_node, args_node, walk, context)
                    )
                current = current.child_by_field_name(vocab.method_receiver_field)

            elif step is ChainStep.CALL:
                args_node = current.child_by_field_name(vocab.call_arguments_field)
                callee = self._unwrap_callee(
                    current.child_by_field_name(vocab.call_function_field)
                )
                if callee is None:
                    break
                callee_step = vocab.step_for(callee)

                if callee_step is ChainStep.FIELD:
                    property_node = callee.child_by_field_name(vocab.member_property_field)
                    if property_node is not None:
                        walk.segments.appendleft(
                            self._call_segment(property_node, args_node, walk, context)
                        )
                    walk.spine.append(callee)
                    current = callee.child_by_field_name(vocab.member_object_field)
                elif callee_step is ChainStep.PATH:
                    # Path-qualified calls end the chain at their call site.
                    name, prefix = self._split_path(callee)
                    walk.segments.appendleft(
                        self._call_segment(callee, args_node, walk, context, name=name)
                    )
                    walk.receiver = prefix
                    break
                elif callee_step is ChainStep.IDENTIFIER:
                    walk.segments.appendleft(
                        self._call_segment(callee, args_node, walk, context)
                    )
                    walk.receiver = ""
                    break
                else:
                    walk.receiver = callee.text
                    break

            elif step is ChainStep.FIELD:
                property_node = current.child_by_field_name(vocab.member_property_field)
                if property_node is not None:
                    line, column = position(property_node)
                    walk.segments.appendleft(
                        CallChainSegment(
                            name=property_node.text,
                            is_call=False,
                            line=line,
                            column=column,
                        )
                    )
                current = current.child_by_field_name(vocab.member_object_field)

            elif step in (ChainStep.AWAIT, ChainStep.TRY):
                line, column = position(current)
                walk.segments.appendleft(
                    CallChainSegment(
                        name="await" if step is ChainStep.AWAIT else "?",
                        is_call=False,
                        line=line,
                        column=column,
                    )
                )
                current = vocab.operand_of(current)

            elif step is ChainStep.TRANSPARENT:
                current = vocab.operand_of(current)

            else:
                walk.receiver = current.text
                break

        return walk

    def _call_segment(
        self,
        name_node: SyntaxNode,
        args_node: SyntaxNode | None,
        walk: _ChainWalk,
        context: NormalizationContext,
        *,
        name: str | None = None,
    ) -> CallChainSegment:
        args: list = []
        if args_node is not None:
            walk.argument_lists.append(args_node)
            args = self.arguments.normalize_arguments(args_node, context)
        line, column = position(name_node)
        return CallChainSegment(
            name=name_node.text if name is None else name,
            is_call=True,
            args=tuple(args),
            line=line,
            column=column,
        )

    def _unwrap_callee(self, callee: SyntaxNode | None) -> SyntaxNode | None:
        vocab = self.vocabulary
        for _ in range(self.max_depth):
            if callee is None:
                return None
            wrapper_field = vocab.callee_wrappers.get(callee.type)
            if wrapper_field is not None:
                inner = callee.child_by_field_name(wrapper_field)
                if inner is None:
                    return callee
                callee = inner
            elif vocab.step_for(callee) is ChainStep.TRANSPARENT:
                inner = vocab.operand_of(callee)
                if inner is None:
                    return callee
                callee = inner
            else:
                return callee
        return callee

    def _split_path(self, node: SyntaxNode) -> tuple[str, str]:
        vocab = self.vocabulary
        name_node = node.child_by_field_name(vocab.path_name_field)
        prefix_node = node.child_by_field_name(vocab.path_prefix_field)
        if name_node is not None:
            return name_node.text, prefix_node.text if prefix_node is not None else ""
        prefix, _, name = node.text.rpartition(vocab.path_separator)
        return name, prefix

    def _inner_of(self, node: SyntaxNode) -> SyntaxNode | None:
        """The child the walker descends into from ``node``, if any."""
        vocab = self.vocabulary
        step = vocab.step_for(node)
        if step is ChainStep.METHOD_CALL:
            return node.child_by_field_name(vocab.method_receiver_field)
        if step is ChainStep.FIELD:
            return node.child_by_field_name(vocab.member_object_field)
        if step in (ChainStep.AWAIT, ChainStep.TRY, ChainStep.TRANSPARENT):
            return vocab.operand_of(node)
        # Calls descend through their callee's object, which is a child of
        # the callee rather than of the call itself.
        return None

    # -- output -----------------------------------------------------------

    def _build(
        self, node: SyntaxNode, walk: _ChainWalk, file_path: str
    ) -> UnifiedCallChain:
        line, column = position(node)
        end_line, end_column = end_position(node)
        return UnifiedCallChain(
            receiver=walk.receiver,
            segments=tuple(walk.segments),
            full_expression=node.text,
            file=file_path,
            line=line,
            column=column,
            end_line=end_line,
            end_column=end_column,
            language=self.vocabulary.language,
        )

    def _mark_processed(self, walk: _ChainWalk, context: NormalizationContext) -> None:
        """Mark the chain's own nodes and its argument subtrees as consumed.

        Function-like nodes inside arguments are not entered, so chains in
        callback bodies are still discovered on their own.
        """
        for node in walk.spine:
            context.processed.add(node.id)

        boundaries = self.vocabulary.scope_boundaries
        stack = list(walk.argument_lists)
        while stack:
            node = stack.pop()
            if node.type in boundaries:
                continue
            context.processed.add(node.id)
            stack.extend(node.children)


__all__ = ["DEFAULT_MAX_CHAIN_DEPTH", "CallChainWalker"]
