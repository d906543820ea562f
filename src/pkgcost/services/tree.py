"""TreeRenderer — display the dependency DAG as a tree.

A shared dependency appears once per path that reaches it, but only its
first occurrence in a render pass is expanded. Later occurrences become
collapsed placeholders, which keeps output linear in graph size instead of
exploding on stacked diamonds.

Collapsing scope: the first encounter *anywhere in the pass* is canonical,
in depth-first order following each parent's declared dependency order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from pkgcost.domain.graph import ZERO_COST, Cost, PackageNode

VENDOR_SEGMENT = "/vendor/"


def is_vendored(import_path: str) -> bool:
    return VENDOR_SEGMENT in import_path or import_path.startswith("vendor/")


@dataclass(frozen=True)
class TreeEntry:
    """One emitted position in the walk."""

    depth: int
    parent: PackageNode | None
    node: PackageNode
    collapsed: bool = False
    vendored: bool = False


@dataclass
class DisplayNode:
    """Presentation-neutral tree node consumed by the CLI and JSON output."""

    import_path: str
    local: Cost
    rollup: Cost
    children: list[DisplayNode] = field(default_factory=list)
    collapsed: bool = False
    vendored: bool = False
    hidden_children: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "import_path": self.import_path,
            "local": self.local.to_dict(),
            "rollup": self.rollup.to_dict(),
            "collapsed": self.collapsed,
            "vendored": self.vendored,
            "hidden_children": self.hidden_children,
            "children": [child.to_dict() for child in self.children],
        }

    def iter_nodes(self) -> Iterator[DisplayNode]:
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))


class TreeRenderer:
    """Walks a graph from its root and produces a :class:`DisplayNode` tree.

    Args:
        rollup: Roll-up cost lookup (usually ``CostAggregator.compute_rollup``).
        expand_vendored: Also expand the dependencies of vendored packages.
    """

    def __init__(
        self,
        rollup: Callable[[PackageNode], Cost] | None = None,
        *,
        expand_vendored: bool = False,
    ) -> None:
        self._rollup = rollup
        self._expand_vendored = expand_vendored

    def walk(self, root: PackageNode) -> Iterator[TreeEntry]:
        """Lazily yield tree positions in deterministic depth-first order.

        Each call starts a fresh pass with its own expanded-set, so the
        iterator is restartable. Platform nodes are never yielded.
        """
        expanded: set[str] = set()
        stack: list[tuple[int, PackageNode | None, PackageNode]] = [(0, None, root)]
        while stack:
            depth, parent, node = stack.pop()
            if node.is_platform:
                continue

            vendored = is_vendored(node.import_path) and not self._expand_vendored
            if node.import_path in expanded:
                yield TreeEntry(depth, parent, node, collapsed=True, vendored=vendored)
                continue
            expanded.add(node.import_path)
            yield TreeEntry(depth, parent, node, vendored=vendored)

            if vendored:
                continue
            for dep in reversed(node.dependencies):
                stack.append((depth + 1, node, dep))

    def render(self, root: PackageNode) -> DisplayNode:
        """Materialize :meth:`walk` into a nested :class:`DisplayNode` tree."""
        top: DisplayNode | None = None
        # path[d] is the display node most recently emitted at depth d
        path: list[DisplayNode] = []
        for entry in self.walk(root):
            display = self._display(entry)
            del path[entry.depth :]
            if path:
                path[-1].children.append(display)
            else:
                top = display
            path.append(display)

        if top is None:
            # Root itself is a platform package
            return DisplayNode(import_path=root.import_path, local=ZERO_COST, rollup=ZERO_COST)
        return top

    def _display(self, entry: TreeEntry) -> DisplayNode:
        node = entry.node
        hidden = 0
        if entry.collapsed or entry.vendored:
            hidden = sum(1 for dep in node.dependencies if not dep.is_platform)
        return DisplayNode(
            import_path=node.import_path,
            local=node.local_cost or ZERO_COST,
            rollup=self._rollup(node) if self._rollup else ZERO_COST,
            collapsed=entry.collapsed,
            vendored=entry.vendored,
            hidden_children=hidden,
        )


def display_root(root: PackageNode) -> PackageNode:
    """The node a tree should start from: the sole entry point if there is
    exactly one, otherwise the synthetic root."""
    if len(root.dependencies) == 1:
        return root.dependencies[0]
    return root
