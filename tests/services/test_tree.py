"""Tests for TreeRenderer: collapsing, vendored packages, restartability."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from pkgcost.domain.graph import Cost, DependencyGraph, PackageNode
from pkgcost.infrastructure.platform import RootClassifier
from pkgcost.services.builder import GraphBuilder
from pkgcost.services.costs import CostAggregator
from pkgcost.services.tree import TreeRenderer, display_root, is_vendored

from fakes import FakeResolver, FakeScorer, FakeSizes, pkg


@pytest.fixture
def diamond_graph(diamond: FakeResolver, classifier: RootClassifier) -> DependencyGraph:
    return GraphBuilder(diamond, classifier).build(["example.com/a"])


def _outline(renderer: TreeRenderer, root: PackageNode) -> list[tuple[int, str, bool]]:
    return [(e.depth, e.node.import_path, e.collapsed) for e in renderer.walk(root)]


class TestWalk:
    def test_diamond_expands_shared_node_once(self, diamond_graph: DependencyGraph) -> None:
        a = diamond_graph.resolved["example.com/a"]
        assert _outline(TreeRenderer(), a) == [
            (0, "example.com/a", False),
            (1, "example.com/b", False),
            (2, "example.com/d", False),
            (1, "example.com/c", False),
            (2, "example.com/d", True),
        ]

    def test_both_parents_keep_their_edge(self, diamond_graph: DependencyGraph) -> None:
        a = diamond_graph.resolved["example.com/a"]
        parents = {
            e.parent.import_path
            for e in TreeRenderer().walk(a)
            if e.node.import_path == "example.com/d" and e.parent is not None
        }
        assert parents == {"example.com/b", "example.com/c"}

    def test_is_restartable(self, diamond_graph: DependencyGraph) -> None:
        renderer = TreeRenderer()
        a = diamond_graph.resolved["example.com/a"]
        assert _outline(renderer, a) == _outline(renderer, a)

    def test_cycle_emits_back_reference_collapsed(
        self, make_resolver: Callable[..., FakeResolver], classifier: RootClassifier
    ) -> None:
        resolver = make_resolver(pkg("x/a", "x/b"), pkg("x/b", "x/a"))
        graph = GraphBuilder(resolver, classifier).build(["x/a"])
        assert _outline(TreeRenderer(), graph.resolved["x/a"]) == [
            (0, "x/a", False),
            (1, "x/b", False),
            (2, "x/a", True),
        ]

    def test_collapsing_is_global_across_branches(
        self, make_resolver: Callable[..., FakeResolver], classifier: RootClassifier
    ) -> None:
        resolver = make_resolver(
            pkg("x/a", "x/b", "x/c"),
            pkg("x/b", "x/deep"),
            pkg("x/deep", "x/shared"),
            pkg("x/c", "x/shared"),
            pkg("x/shared", "x/leaf"),
            pkg("x/leaf"),
        )
        graph = GraphBuilder(resolver, classifier).build(["x/a"])
        outline = _outline(TreeRenderer(), graph.resolved["x/a"])
        assert (3, "x/shared", False) in outline
        assert (2, "x/shared", True) in outline
        assert [path for _, path, _ in outline].count("x/leaf") == 1

    def test_platform_nodes_are_never_yielded(
        self, make_resolver: Callable[..., FakeResolver], classifier: RootClassifier
    ) -> None:
        resolver = make_resolver(pkg("x/a"))
        graph = GraphBuilder(resolver, classifier).build(["x/a"])
        std, _ = graph.claim("x/std")
        std.apply(pkg("x/std", platform=True))
        graph.resolved["x/a"].dependencies.append(std)

        paths = [e.node.import_path for e in TreeRenderer().walk(graph.resolved["x/a"])]
        assert paths == ["x/a"]


class TestVendored:
    @pytest.fixture
    def vendored_graph(
        self, make_resolver: Callable[..., FakeResolver], classifier: RootClassifier
    ) -> DependencyGraph:
        resolver = make_resolver(
            pkg("x/app", "x/app/vendor/y/lib"),
            pkg("x/app/vendor/y/lib", "x/app/vendor/y/util"),
            pkg("x/app/vendor/y/util"),
        )
        return GraphBuilder(resolver, classifier).build(["x/app"])

    def test_is_vendored(self) -> None:
        assert is_vendored("x/app/vendor/y/lib")
        assert is_vendored("vendor/y/lib")
        assert not is_vendored("x/vendors/lib")

    def test_dependencies_not_expanded(self, vendored_graph: DependencyGraph) -> None:
        entries = list(TreeRenderer().walk(vendored_graph.resolved["x/app"]))
        assert [e.node.import_path for e in entries] == ["x/app", "x/app/vendor/y/lib"]
        assert entries[1].vendored

    def test_display_reports_hidden_dependencies(self, vendored_graph: DependencyGraph) -> None:
        display = TreeRenderer().render(vendored_graph.resolved["x/app"])
        lib = display.children[0]
        assert lib.vendored
        assert lib.children == []
        assert lib.hidden_children == 1

    def test_expand_vendored(self, vendored_graph: DependencyGraph) -> None:
        renderer = TreeRenderer(expand_vendored=True)
        paths = [e.node.import_path for e in renderer.walk(vendored_graph.resolved["x/app"])]
        assert paths == ["x/app", "x/app/vendor/y/lib", "x/app/vendor/y/util"]

    def test_vendored_graph_still_resolved(self, vendored_graph: DependencyGraph) -> None:
        assert "x/app/vendor/y/util" in vendored_graph


class TestRender:
    def test_nested_display_with_rollups(self, diamond_graph: DependencyGraph) -> None:
        aggregator = CostAggregator(FakeSizes(), FakeScorer())
        aggregator.annotate(diamond_graph)
        display = TreeRenderer(aggregator.compute_rollup).render(
            diamond_graph.resolved["example.com/a"]
        )

        assert display.import_path == "example.com/a"
        assert display.rollup == Cost(files=4, size=400, complexity=4)
        assert display.local == Cost(files=1, size=100, complexity=1)
        b, c = display.children
        assert b.children[0].import_path == "example.com/d"
        assert not b.children[0].collapsed
        assert c.children[0].collapsed
        assert c.children[0].rollup == Cost(files=1, size=100, complexity=1)

    def test_collapsed_counts_hidden_children(
        self, make_resolver: Callable[..., FakeResolver], classifier: RootClassifier
    ) -> None:
        resolver = make_resolver(
            pkg("x/a", "x/b", "x/c"),
            pkg("x/b", "x/d"),
            pkg("x/c", "x/d"),
            pkg("x/d", "x/e", "x/f"),
            pkg("x/e"),
            pkg("x/f"),
        )
        graph = GraphBuilder(resolver, classifier).build(["x/a"])
        display = TreeRenderer().render(graph.resolved["x/a"])
        collapsed = [n for n in display.iter_nodes() if n.collapsed]
        assert [(n.import_path, n.hidden_children) for n in collapsed] == [("x/d", 2)]

    def test_to_dict_shape(self, diamond_graph: DependencyGraph) -> None:
        data = TreeRenderer().render(diamond_graph.resolved["example.com/a"]).to_dict()
        assert set(data) == {
            "import_path",
            "local",
            "rollup",
            "collapsed",
            "vendored",
            "hidden_children",
            "children",
        }
        assert data["children"][0]["import_path"] == "example.com/b"

    def test_platform_root_renders_empty(self) -> None:
        node = PackageNode.from_facts(pkg("fmt", platform=True))
        display = TreeRenderer().render(node)
        assert display.import_path == "fmt"
        assert display.children == []


class TestDisplayRoot:
    def test_single_entry_is_the_root(self, diamond_graph: DependencyGraph) -> None:
        assert display_root(diamond_graph.root) is diamond_graph.resolved["example.com/a"]

    def test_multiple_entries_keep_synthetic_root(
        self, diamond: FakeResolver, classifier: RootClassifier
    ) -> None:
        graph = GraphBuilder(diamond, classifier).build(["example.com/b", "example.com/c"])
        assert display_root(graph.root) is graph.root
