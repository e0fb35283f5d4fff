"""Language normalizer contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from normalize.arguments import DEFAULT_MAX_ARG_DEPTH, ArgumentNormalizer
from normalize.chains import DEFAULT_MAX_CHAIN_DEPTH, CallChainWalker
from normalize.nodes import NormalizationContext

if TYPE_CHECKING:
    from artifacts.models.ir import (
        NormalizedArg,
        UnifiedCallChain,
        UnifiedClass,
        UnifiedExport,
        UnifiedFunction,
        UnifiedImport,
    )
    from normalize.vocabulary import LanguageVocabulary
    from parse.languages import UnifiedLanguage
    from parse.syntax import SyntaxNode


@dataclass(frozen=True)
class NormalizedFile:
    """The five IR collections for one file plus walk counters."""

    call_chains: list[UnifiedCallChain]
    functions: list[UnifiedFunction]
    classes: list[UnifiedClass]
    imports: list[UnifiedImport]
    exports: list[UnifiedExport]
    nodes_visited: int = 0
    fallback_count: int = 0


class BaseNormalizer(ABC):
    """Base class for per-language normalizers.

    Subclasses provide a ``vocabulary`` (and optionally an
    ``ArgumentNormalizer`` subclass) plus the declaration, import and export
    extractors. Chain walking and argument normalization are shared.

    Instances only hold configuration; all per-file state lives in a
    ``NormalizationContext`` created by each call. One instance can serve
    any number of files, concurrently.
    """

    language: ClassVar[UnifiedLanguage]
    vocabulary: ClassVar[LanguageVocabulary]
    argument_normalizer_class: ClassVar[type[ArgumentNormalizer]] = ArgumentNormalizer

    def __init__(
        self,
        *,
        max_chain_depth: int = DEFAULT_MAX_CHAIN_DEPTH,
        max_arg_depth: int = DEFAULT_MAX_ARG_DEPTH,
    ) -> None:
        self.max_chain_depth = max_chain_depth
        self.max_arg_depth = max_arg_depth
        self.arguments = self.argument_normalizer_class(
            self.vocabulary, max_depth=max_arg_depth
        )
        self.walker = CallChainWalker(
            self.vocabulary, self.arguments, max_depth=max_chain_depth
        )

    def normalize(self, root: SyntaxNode, source: str, file_path: str) -> NormalizedFile:
        """Run every extractor over one file's tree."""
        context = NormalizationContext(file_path=file_path)
        call_chains = self.normalize_call_chains(root, source, file_path, context)
        return NormalizedFile(
            call_chains=call_chains,
            functions=self.extract_functions(root, source, file_path),
            classes=self.extract_classes(root, source, file_path),
            imports=self.extract_imports(root, source, file_path),
            exports=self.extract_exports(root, source, file_path),
            nodes_visited=context.nodes_visited,
            fallback_count=context.fallbacks,
        )

    def normalize_call_chains(
        self,
        root: SyntaxNode,
        source: str,
        file_path: str,
        context: NormalizationContext | None = None,
    ) -> list[UnifiedCallChain]:
        return self.walker.normalize_call_chains(root, file_path, context)

    def extract_call_chain(
        self,
        node: SyntaxNode,
        file_path: str,
        context: NormalizationContext | None = None,
    ) -> UnifiedCallChain | None:
        return self.walker.extract_call_chain(node, file_path, context)

    def normalize_arguments(
        self,
        args_node: SyntaxNode,
        context: NormalizationContext | None = None,
    ) -> list[NormalizedArg]:
        return self.arguments.normalize_arguments(args_node, context)

    def normalize_argument(
        self,
        node: SyntaxNode,
        context: NormalizationContext | None = None,
    ) -> NormalizedArg:
        return self.arguments.normalize_argument(node, context)

    @abstractmethod
    def extract_functions(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedFunction]: ...

    @abstractmethod
    def extract_classes(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedClass]: ...

    @abstractmethod
    def extract_imports(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedImport]: ...

    @abstractmethod
    def extract_exports(
        self, root: SyntaxNode, source: str, file_path: str
    ) -> list[UnifiedExport]: ...


__all__ = ["BaseNormalizer", "NormalizedFile"]
