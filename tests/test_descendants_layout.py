"""Tests for the top-down descendants layout."""
from __future__ import annotations

import pytest
from conftest import make_person, make_union, padded_intervals_overlap

from heritage.config import DESCENDANTS_DEFAULTS
from heritage.layout import DescendantOptions, NodeKind, compute_descendants_layout
from heritage.layout.descendants import build_descendant_tree, measure_tree
from heritage.models import FamilyGraph

GUTTER = DESCENDANTS_DEFAULTS.h_spacing


def _measure(graph: FamilyGraph, person_id: str, max_depth: int = 10):
    tree = build_descendant_tree(graph, graph.get_person(person_id), max_depth)
    return measure_tree(tree, DESCENDANTS_DEFAULTS)


def _positions(result):
    return {n.id: (n.x, n.y) for n in result.nodes}


class TestTree:
    """Tests for tree building and measurement."""

    def test_leaf_width(self, durham):
        assert _measure(durham, "leo").width == 180

    def test_spouseless_union_with_two_leaves(self, single_parent):
        assert _measure(single_parent, "mary").width == 380

    def test_measured_widths(self, durham):
        tree = _measure(durham, "thomas")
        sam = tree.unions[0].children[0]

        assert sam.person.id == "sam"
        assert sam.width == 440
        assert (tree.left, tree.right) == (-190, 650)

    def test_spouses_collected(self, durham):
        tree = _measure(durham, "thomas")
        assert [b.spouse.id for b in tree.unions] == ["clara", "grace"]
        assert [c.person.id for c in tree.unions[0].children] == ["sam", "nora"]

    def test_depth_truncated(self, durham):
        tree = build_descendant_tree(durham, durham.get_person("thomas"), max_depth=1)
        sam = tree.unions[0].children[0]
        assert sam.unions[0].spouse.id == "alice"
        assert sam.unions[0].children == []

    def test_empty_union_dropped(self):
        graph = FamilyGraph(
            people=[make_person("p", "P")],
            unions=[make_union("u", "p", None, [])],
        )
        tree = _measure(graph, "p")
        assert tree.unions == []
        assert tree.width == 180

    def test_cycle_terminates(self, cyclic):
        tree = _measure(cyclic, "a")
        child = tree.unions[0].children[0]
        assert child.person.id == "b"
        assert child.unions == []


class TestPlacement:
    """Tests for node positions."""

    def test_root_at_start(self, durham):
        result = compute_descendants_layout(durham, "thomas")
        root = result.node("thomas")

        assert (root.x, root.y) == (500, 100)
        assert root.is_focus
        assert root.generation == 0
        assert not result.node("clara").is_focus

    def test_spouse_chain_to_the_right(self, durham):
        pos = _positions(compute_descendants_layout(durham, "thomas"))

        assert pos["u-thomas-clara"] == (630, 100)
        assert pos["clara"] == (760, 100)
        assert pos["u-thomas-grace"] == (890, 100)
        assert pos["grace"] == (1020, 100)

    def test_children_under_their_union(self, durham):
        pos = _positions(compute_descendants_layout(durham, "thomas"))

        assert pos["sam"] == (400, 370)
        assert pos["nora"] == (860, 370)
        assert pos["ben"] == (1060, 370)
        assert pos["u-sam-alice"] == (530, 370)
        assert pos["alice"] == (660, 370)
        assert pos["leo"] == (530, 640)

    def test_spouseless_marker_below_person(self, single_parent):
        result = compute_descendants_layout(single_parent, "mary")
        pos = _positions(result)

        assert pos["u-mary"] == (500, 235)
        assert pos["kid1"] == (400, 370)
        assert pos["kid2"] == (600, 370)
        edge = result.edge("spouse-mary-u-mary")
        assert (edge.source_handle, edge.target_handle) == ("bottom", "top")

    def test_edges(self, durham):
        result = compute_descendants_layout(durham, "thomas")

        edge = result.edge("spouse-thomas-u-thomas-grace")
        assert (edge.source_handle, edge.target_handle) == ("spouse-right", "left")
        edge = result.edge("spouse-grace-u-thomas-grace")
        assert (edge.source_handle, edge.target_handle) == ("spouse-left", "right")
        assert result.edge("child-u-sam-alice-leo") is not None

    def test_child_listed_in_two_unions(self):
        """A child under two of the root's unions is drawn once and linked to both."""
        graph = FamilyGraph(
            people=[make_person(pid, pid) for pid in ["r", "s", "t", "k"]],
            unions=[make_union("u1", "r", "s", ["k"]), make_union("u2", "r", "t", ["k"])],
        )
        result = compute_descendants_layout(graph, "r")

        assert [n.id for n in result.nodes].count("k") == 1
        assert result.edge("child-u1-k") is not None
        edge = result.edge("child-u2-k")
        assert (edge.source, edge.target) == ("u2", "k")

    def test_cycle_not_linked_upward(self, cyclic):
        result = compute_descendants_layout(cyclic, "a")
        assert {e.id for e in result.edges if e.kind.value == "child"} == {"child-u-a-b"}

    def test_max_depth(self, durham):
        result = compute_descendants_layout(durham, "thomas", DescendantOptions(max_depth=0))
        assert set(result.person_ids) == {"thomas", "clara", "grace"}
        assert all(n.generation == 0 for n in result.nodes)

    def test_max_depth_must_not_be_negative(self):
        with pytest.raises(ValueError):
            DescendantOptions(max_depth=-1)

    def test_unknown_root(self, durham):
        result = compute_descendants_layout(durham, "nobody")
        assert result.nodes == []


class TestGuarantees:
    """Tests for overlap and uniqueness."""

    @pytest.mark.parametrize("root", ["walter", "archie", "thomas", "sam"])
    def test_no_overlap(self, durham, root):
        result = compute_descendants_layout(durham, root)
        assert not padded_intervals_overlap(result.nodes, GUTTER)

    @pytest.mark.parametrize("count", range(0, 11))
    def test_no_overlap_wide_families(self, count):
        """Every child has a spouse and children of their own."""
        people = [make_person("root", "Root"), make_person("root-s", "Partner")]
        unions = []
        kids = [f"k{i}" for i in range(count)]
        for kid in kids:
            people += [make_person(kid, kid), make_person(f"{kid}-s", "S")]
            grandkids = [f"{kid}-g{j}" for j in range(count % 3 + 1)]
            people += [make_person(g, g) for g in grandkids]
            unions.append(make_union(f"u-{kid}", kid, f"{kid}-s", grandkids))
        unions.append(make_union("u-root", "root", "root-s", kids))

        result = compute_descendants_layout(FamilyGraph(people=people, unions=unions), "root")
        assert not padded_intervals_overlap(result.nodes, GUTTER)
        assert len(result.nodes_in_generation(1)) == count * 3

    def test_each_node_once(self, durham, cyclic):
        for graph, root in [(durham, "walter"), (cyclic, "a"), (cyclic, "b")]:
            ids = [n.id for n in compute_descendants_layout(graph, root).nodes]
            assert len(ids) == len(set(ids))

    def test_union_marker_kinds(self, durham):
        result = compute_descendants_layout(durham, "walter")
        kinds = {n.id: n.kind for n in result.nodes}
        assert kinds["u-walter-edith"] is NodeKind.UNION
        assert kinds["edith"] is NodeKind.PERSON
