from dataclasses import replace

from builders import SMALL, blended_family, couple_with_two_children, parent, spouse, tree
from connections import _num, curved_path, stepped_path
from layout import build_tree_layout
from models import PARENT_CHILD, SIBLING_LINE, SPOUSE_LINE, TreeColorScheme, TreeStyleConfig


def by_id(layout):
    return {c.id: c for c in layout.connections}


def test_stepped_paths_start_at_union_midpoint():
    layout = build_tree_layout(couple_with_two_children(), SMALL)
    lines = by_id(layout)

    assert set(lines) == {"pc-A-C", "pc-B-C", "pc-A-D", "pc-B-D", "sp-A-B"}
    assert lines["pc-A-C"].path == "M 50 20 L 50 35 L 0 35 L 0 50"
    assert lines["pc-B-C"].path == lines["pc-A-C"].path
    assert lines["pc-A-D"].path == "M 50 20 L 50 35 L 100 35 L 100 50"
    assert lines["pc-A-C"].type == PARENT_CHILD
    assert lines["pc-A-C"].relationship.id == "p-A-C"


def test_straight_and_curved_styles():
    data = couple_with_two_children()

    straight = build_tree_layout(data, SMALL, style=TreeStyleConfig(line_style="straight"))
    assert by_id(straight)["pc-A-C"].path == "M 50 20 L 0 50"

    curved = build_tree_layout(data, SMALL, style=TreeStyleConfig(line_style="curved"))
    assert by_id(curved)["pc-A-C"].path == "M 50 20 C 50 27.5, 0 42.5, 0 50"


def test_path_helpers():
    assert stepped_path(0, 0, 10, 10) == "M 0 0 L 0 5 L 10 5 L 10 10"
    assert curved_path(0, 0, 0, 10) == "M 0 0 C 0 2.5, 0 7.5, 0 10"


def test_number_formatting():
    assert _num(3.0) == "3"
    assert _num(12.5) == "12.5"
    assert _num(1 / 3) == "0.33"
    assert _num(-0.001) == "0"
    assert _num(-0.0) == "0"
    assert _num(-7.25) == "-7.25"


def test_spouse_line_is_horizontal_between_node_edges():
    layout = build_tree_layout(couple_with_two_children(), SMALL)

    line = by_id(layout)["sp-A-B"]
    assert line.type == SPOUSE_LINE
    assert line.path == "M 40 0 L 60 0"
    assert not line.is_dashed
    assert line.color == TreeColorScheme().spouse_line


def test_divorced_spouse_line_is_dashed():
    layout = build_tree_layout(blended_family(), SMALL)
    lines = by_id(layout)

    assert lines["sp-F-M2"].is_dashed
    assert lines["sp-F-M2"].color == TreeColorScheme().divorced_line
    assert not lines["sp-F-M1"].is_dashed


def test_sibling_connectors_only_for_partly_shared_parents():
    layout = build_tree_layout(blended_family(), SMALL)
    siblings = {c.id: c for c in layout.connections if c.type == SIBLING_LINE}

    # X, Z and S each have a different set of parents
    assert set(siblings) == {"sb-X-Z", "sb-S-X", "sb-S-Z"}
    assert all(c.is_dashed for c in siblings.values())
    assert siblings["sb-X-Z"].stroke_width == 1

    full_siblings = build_tree_layout(couple_with_two_children(), SMALL)
    assert not any(c.type == SIBLING_LINE for c in full_siblings.connections)


def test_sibling_connectors_can_be_turned_off():
    layout = build_tree_layout(blended_family(), replace(SMALL, show_siblings=False))

    assert not any(c.type == SIBLING_LINE for c in layout.connections)


def test_only_visible_endpoints_are_connected():
    data = tree(["A", "B"], [spouse("A", "B"), spouse("A", "ghost")])

    layout = build_tree_layout(data, SMALL)

    assert [c.id for c in layout.connections] == ["sp-A-B"]


def test_connections_are_deterministic():
    first = build_tree_layout(blended_family(), SMALL)
    second = build_tree_layout(blended_family(), SMALL)

    assert first.connections == second.connections


def test_union_lines_leave_beside_the_partner_nearest_the_child():
    layout = build_tree_layout(blended_family(), SMALL)
    lines = by_id(layout)

    assert [layout.nodes[pid].x for pid in ("F", "M1", "M2")] == [0, 100, 200]
    # F and M1 are adjacent: their midpoint
    assert lines["pc-F-X"].path == "M 50 20 L 50 35 L 100 35 L 100 50"
    assert lines["pc-M1-X"].path == lines["pc-F-X"].path
    # M1 sits between F and M2: the gap beside M2, facing F
    assert lines["pc-F-Z"].path == "M 150 20 L 150 35 L 200 35 L 200 50"
    assert lines["pc-M2-Z"].path == lines["pc-F-Z"].path
    assert lines["pc-F-S"].path == "M 0 20 L 0 35 L 0 35 L 0 50"


def test_collapsed_parent_draws_no_line_to_child_shown_under_another_parent():
    data = tree(
        ["R", "X", "Y", "K"],
        [parent("R", "X"), parent("R", "Y"), parent("Y", "K"), parent("X", "K")],
    )

    expanded = build_tree_layout(data, SMALL)
    collapsed = build_tree_layout(data, SMALL, collapsed_ids=frozenset({"X"}))

    assert "pc-X-K" in by_id(expanded)
    assert not collapsed.nodes["K"].is_hidden
    assert set(by_id(collapsed)) == {"pc-R-X", "pc-R-Y", "pc-Y-K"}


def test_connection_ids_stay_unique_when_person_ids_contain_dashes():
    data = tree(
        ["Z", "a-b", "a", "c", "b-c"],
        [
            parent("Z", "a-b"),
            parent("Z", "a"),
            parent("a-b", "c", rel_id="r1"),
            parent("a", "b-c", rel_id="r2"),
        ],
    )

    layout = build_tree_layout(data, SMALL)
    ids = [c.id for c in layout.connections]

    assert len(ids) == len(set(ids))
    assert "pc-a\\-b-c" in ids
    assert "pc-a-b\\-c" in ids
    assert by_id(layout)["pc-a\\-b-c"].from_id == "a-b"
