from collections import defaultdict
from dataclasses import replace

import pytest

from builders import (
    SMALL,
    blended_family,
    consanguineous_family,
    couple_with_two_children,
    married_siblings,
    parent,
    spouse,
    three_generations,
    tree,
)
from layout import build_tree_layout
from models import ANCESTORS, DESCENDANTS, FULL, HOURGLASS, LTR, RTL, BuildTreeOptions


def xs(layout):
    return {pid: node.x for pid, node in layout.nodes.items()}


def test_couple_children_centered_under_band():
    layout = build_tree_layout(couple_with_two_children(), SMALL)

    assert xs(layout) == {"A": 0, "B": 100, "C": 0, "D": 100}
    band_center = (layout.nodes["A"].x + layout.nodes["B"].x) / 2
    assert layout.nodes["C"].x - band_center == -50
    assert layout.nodes["D"].x - band_center == 50


def test_rows_are_spaced_by_node_height_and_vertical_spacing():
    layout = build_tree_layout(three_generations(), SMALL)

    assert layout.nodes["R"].y == 0
    assert layout.nodes["X"].y == 70
    assert layout.nodes["X1"].y == 140


def test_root_is_at_origin_in_every_layout_type():
    data = tree(
        ["G", "F", "M", "R", "C"],
        [parent("G", "F"), parent("F", "R"), parent("M", "R"), spouse("F", "M"), parent("R", "C")],
        root="R",
    )
    for layout_type in ("descendants", ANCESTORS, HOURGLASS, FULL):
        layout = build_tree_layout(data, replace(SMALL, layout_type=layout_type))
        assert layout.root.x == 0, layout_type
        assert layout.root.y == 0, layout_type


def test_no_overlap_within_a_row():
    data = tree(
        ["R", "S", "A", "B", "C", "A1", "A2", "B1", "B2", "B3", "BS"],
        [
            spouse("R", "S"),
            parent("R", "A"),
            parent("S", "A"),
            parent("R", "B"),
            parent("R", "C"),
            parent("A", "A1"),
            parent("A", "A2"),
            parent("B", "B1"),
            parent("B", "B2"),
            spouse("B", "BS"),
            parent("BS", "B3"),
        ],
    )
    for direction in ("ltr", "rtl"):
        layout = build_tree_layout(data, replace(SMALL, direction=direction))
        rows = defaultdict(list)
        for node in layout.visible_nodes():
            rows[node.y].append(node.x)
        for row in rows.values():
            row.sort()
            for left, right in zip(row, row[1:]):
                assert right - left >= SMALL.node_width


def test_rtl_mirrors_ltr():
    ltr = build_tree_layout(blended_family(), SMALL)
    rtl = build_tree_layout(blended_family(), replace(SMALL, direction=RTL))

    for pid, node in ltr.nodes.items():
        assert rtl.nodes[pid].x == -node.x
        assert rtl.nodes[pid].y == node.y
    assert rtl.nodes["F"].child_ids == list(reversed(ltr.nodes["F"].child_ids))
    assert [s.partner_id for s in rtl.nodes["F"].spouses] == ["M2", "M1"]
    assert rtl.bounds.min_x == -ltr.bounds.max_x


def test_rtl_reverses_children_of_each_union():
    ltr = build_tree_layout(couple_with_two_children(), SMALL)
    rtl = build_tree_layout(couple_with_two_children(), replace(SMALL, direction=RTL))

    assert ltr.nodes["A"].spouses[0].child_ids == ["C", "D"]
    assert rtl.nodes["A"].child_ids == ["D", "C"]
    assert rtl.nodes["A"].spouses[0].child_ids == ["D", "C"]
    # Union children read in the same order as the nodes sit on screen
    on_screen = sorted(("C", "D"), key=lambda pid: rtl.nodes[pid].x)
    assert rtl.nodes["A"].spouses[0].child_ids == on_screen


def test_collapse_hides_descendants_and_round_trips():
    data = three_generations()
    before = build_tree_layout(data, SMALL)

    collapsed = build_tree_layout(data, SMALL, collapsed_ids=frozenset({"X"}))
    x = collapsed.nodes["X"]
    assert x.is_collapsed
    for pid in ("X1", "X2", "X3"):
        node = collapsed.nodes[pid]
        assert node.is_hidden
        assert (node.x, node.y) == (x.x, x.y)
    assert {n.id for n in collapsed.visible_nodes()} == {"R", "X", "Y"}
    assert all(
        c.from_id not in ("X1", "X2", "X3") and c.to_id not in ("X1", "X2", "X3")
        for c in collapsed.connections
    )

    after = build_tree_layout(data, SMALL)
    assert after == before


def test_collapsed_spouse_folds_whole_band():
    layout = build_tree_layout(couple_with_two_children(), SMALL, collapsed_ids=frozenset({"B"}))

    assert layout.nodes["C"].is_hidden
    assert layout.nodes["D"].is_hidden
    assert not layout.nodes["A"].is_collapsed
    assert layout.nodes["B"].is_collapsed


def test_bounding_box_covers_visible_nodes():
    layout = build_tree_layout(couple_with_two_children(), SMALL)

    assert layout.bounds.min_x == -40
    assert layout.bounds.max_x == 140
    assert layout.bounds.min_y == -20
    assert layout.bounds.max_y == 90
    assert layout.bounds.width == 180
    assert layout.bounds.height == 110


def test_ancestors_hang_above_root():
    data = tree(["R", "F", "M"], [parent("F", "R"), parent("M", "R"), spouse("F", "M")], root="R")

    layout = build_tree_layout(data, replace(SMALL, layout_type=ANCESTORS))

    assert xs(layout) == {"R": 0, "F": -50, "M": 50}
    assert layout.nodes["F"].y == -70
    assert layout.nodes["M"].level == -1


def test_siblings_continue_root_row_to_the_right():
    data = tree(["R", "F", "B"], [parent("F", "R"), parent("F", "B")], root="R")

    layout = build_tree_layout(
        data, replace(SMALL, layout_type=HOURGLASS), BuildTreeOptions(include_siblings=True)
    )

    assert layout.nodes["B"].level == 0
    assert layout.nodes["B"].x == 100
    assert layout.nodes["F"].x == 0


def test_sibling_married_to_sibling_keeps_outside_partner_off_the_root():
    layout = build_tree_layout(
        married_siblings(), replace(SMALL, layout_type=HOURGLASS), BuildTreeOptions(include_siblings=True)
    )

    assert xs(layout) == {"R": 0, "F": 0, "B1": 100, "B2": 200, "S": 300}
    assert layout.nodes["F"].y == -70
    assert {layout.nodes[pid].y for pid in ("R", "B1", "B2", "S")} == {0}


LAYOUT_FAMILIES = {
    "blended": (blended_family, "X"),
    "married_siblings": (married_siblings, "R"),
    "consanguineous": (consanguineous_family, "X"),
}


@pytest.mark.parametrize("include_siblings", [True, False])
@pytest.mark.parametrize("direction", [LTR, RTL])
@pytest.mark.parametrize("layout_type", [DESCENDANTS, ANCESTORS, HOURGLASS, FULL])
@pytest.mark.parametrize("family", sorted(LAYOUT_FAMILIES))
def test_rows_never_overlap(family, layout_type, direction, include_siblings):
    build, root = LAYOUT_FAMILIES[family]
    layout = build_tree_layout(
        build(),
        replace(SMALL, layout_type=layout_type, direction=direction),
        BuildTreeOptions(include_siblings=include_siblings),
        root_person_id=root,
    )

    assert layout.root.id == root
    assert layout.root.x == 0
    rows = defaultdict(list)
    for node in layout.visible_nodes():
        rows[node.y].append((node.x, node.id))
    for row in rows.values():
        row.sort()
        for (left, left_id), (right, right_id) in zip(row, row[1:]):
            assert right - left >= SMALL.node_width, (left_id, right_id)
