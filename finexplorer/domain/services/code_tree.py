"""Build hierarchical account-code trees from flat code definitions."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from finexplorer.domain.constants import ROOT_CODE, ROOT_LABELS
from finexplorer.domain.models.code_tree import CodeEntry, CodeNode, CodeTree


@dataclass
class _DraftNode:
    code: str
    labels: dict[str, str]
    level: int
    has_value: bool = False
    value: Decimal | None = None
    children: list["_DraftNode"] = field(default_factory=list)

    def freeze(self) -> CodeNode:
        return CodeNode(
            code=self.code,
            labels=dict(self.labels),
            children=tuple(child.freeze() for child in self.children),
            level=self.level,
            has_value=self.has_value,
            value=self.value,
        )


def build_tree(entries: Iterable[CodeEntry]) -> CodeTree:
    """Build an account-code tree by prefix matching.

    Entries are inserted shortest code first. Each entry is attached to the
    longest already inserted code that is a strict prefix of its own code,
    or to the synthetic root. Children keep insertion order. Duplicate codes
    are not merged: they become siblings under the same parent.

    Args:
        entries: Flat code definitions.

    Returns:
        CodeTree: Immutable tree rooted at ``"root"`` with node count and
        maximum depth.

    Raises:
        TypeError: If ``entries`` is None.
    """
    if entries is None:
        raise TypeError("build_tree() requires an iterable of CodeEntry")

    candidates = [
        (entry.code.strip(), entry)
        for entry in entries
        if entry.code and entry.code.strip()
    ]
    candidates.sort(key=lambda item: (len(item[0]), item[0]))

    root = _DraftNode(code=ROOT_CODE, labels=dict(ROOT_LABELS), level=0)
    # First node inserted for each code; duplicates never become parents.
    index: dict[str, _DraftNode] = {}

    for code, entry in candidates:
        node = _DraftNode(
            code=code,
            labels=dict(entry.labels),
            level=len(code),
            has_value=entry.value is not None,
            value=entry.value,
        )
        _find_parent(code, index, root).children.append(node)
        index.setdefault(code, node)

    frozen_root = root.freeze()
    total_nodes, max_depth = _measure(frozen_root)
    return CodeTree(
        root=frozen_root,
        total_nodes=total_nodes,
        max_depth=max_depth,
    )


def _find_parent(
    code: str,
    index: dict[str, _DraftNode],
    root: _DraftNode,
) -> _DraftNode:
    for length in range(len(code) - 1, 0, -1):
        parent = index.get(code[:length])
        if parent is not None:
            return parent
    return root


def _measure(root: CodeNode) -> tuple[int, int]:
    total = 0
    max_depth = 0
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        total += 1
        max_depth = max(max_depth, depth)
        stack.extend((child, depth + 1) for child in node.children)
    return total, max_depth


__all__ = ["build_tree"]
