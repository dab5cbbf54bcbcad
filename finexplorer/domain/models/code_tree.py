"""Domain models for hierarchical account-code trees."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from finexplorer.domain.constants import DEFAULT_LANGUAGE


@dataclass(frozen=True)
class CodeEntry:
    """Flat code definition consumed by the tree builder.

    Attributes:
        code: Account code, hierarchical by prefix.
        labels: Labels keyed by language code.
        value: Optional static value carried by the definition.
    """

    code: str
    labels: Mapping[str, str] = field(default_factory=dict)
    value: Decimal | None = None


@dataclass(frozen=True)
class CodeNode:
    """Immutable node of an account-code tree."""

    code: str
    labels: Mapping[str, str]
    children: tuple["CodeNode", ...] = ()
    level: int = 0
    has_value: bool = False
    value: Decimal | None = None

    def label(self, language: str = DEFAULT_LANGUAGE) -> str:
        """Return the label for a language with sensible fallbacks.

        Args:
            language: Preferred language code.

        Returns:
            str: Label in the preferred language, German, any other
            language, or the code itself.
        """
        if self.labels.get(language):
            return self.labels[language]
        if self.labels.get(DEFAULT_LANGUAGE):
            return self.labels[DEFAULT_LANGUAGE]
        for label in self.labels.values():
            if label:
                return label
        return self.code

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class CodeTree:
    """Account-code tree with metadata computed at build time.

    Attributes:
        root: Synthetic root node with code ``"root"``.
        total_nodes: Number of nodes including the root.
        max_depth: Depth of the deepest node, the root being depth 0.
    """

    root: CodeNode
    total_nodes: int
    max_depth: int

    def iter_nodes(self) -> Iterator[CodeNode]:
        """Yield every node in pre-order, starting with the root."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, code: str) -> CodeNode | None:
        """Return the first node with the given code in pre-order."""
        for node in self.iter_nodes():
            if node.code == code:
                return node
        return None


__all__ = ["CodeEntry", "CodeNode", "CodeTree"]
