"""Coordinate assignment, right-to-left mirroring and bounding box."""

from errors import TreeLayoutError
from models import RTL, BoundingBox, TreeLayoutConfig, TreeNode
from widths import LayoutForest, LayoutUnit, member_offset


def position_nodes(
    forest: LayoutForest,
    nodes: dict[str, TreeNode],
    root_id: str,
    config: TreeLayoutConfig,
) -> BoundingBox:
    """
    Pre-order placement of every node, then mirroring for RTL.

    Coordinates are node centers. y = level * (node_height + vertical_spacing), so
    ancestors get negative y. Each part of the layout is shifted so the root sits at
    x = 0. Nodes folded under a collapsed node take that node's position and are
    marked hidden.
    """
    hidden: dict[str, str] = {}

    down_x: dict[str, float] = {}
    cursor = 0.0
    for unit in forest.down_roots:
        _place(unit, cursor, down_x, hidden, config)
        cursor += unit.width + config.horizontal_spacing
    _recenter(down_x, root_id)

    up_x: dict[str, float] = {}
    if forest.up_root is not None:
        _place(forest.up_root, 0.0, up_x, hidden, config)
        _recenter(up_x, root_id)

    xs = {**up_x, **down_x}

    if forest.sibling_units:
        # Siblings continue the root's row to the right of everything already on it
        row = [pid for pid in xs if nodes[pid].level == 0]
        cursor = max(xs[pid] for pid in row) + config.node_width / 2 + config.horizontal_spacing
        for unit in forest.sibling_units:
            _place(unit, cursor, xs, hidden, config)
            cursor += unit.width + config.horizontal_spacing

    if forest.loose_units:
        cursor = max(xs.values()) + config.node_width / 2 + config.horizontal_spacing
        for unit in forest.loose_units:
            _place(unit, cursor, xs, hidden, config)
            cursor += unit.width + config.horizontal_spacing

    row_height = config.node_height + config.vertical_spacing
    for pid, node in nodes.items():
        anchor = hidden.get(pid)
        node.is_hidden = anchor is not None
        source = anchor if anchor is not None else pid
        if source not in xs:
            raise TreeLayoutError(f"Person {pid!r} was not assigned to any layout unit")
        node.x = xs[source]
        node.y = nodes[source].level * row_height

    if config.direction == RTL:
        mirror(nodes)

    return bounding_box(nodes.values(), config)


def _place(
    unit: LayoutUnit,
    left: float,
    xs: dict[str, float],
    hidden: dict[str, str],
    config: TreeLayoutConfig,
):
    center = left + unit.left
    for i, member in enumerate(unit.band):
        xs[member] = center + member_offset(i, len(unit.band), config)

    if unit.collapsed:
        for child in unit.children:
            for folded in child.walk():
                for member in folded.band:
                    hidden.setdefault(member, unit.primary)
        return

    cursor = center + unit.child_offset - unit.child_block / 2
    for child in unit.children:
        _place(child, cursor, xs, hidden, config)
        cursor += child.width + config.horizontal_spacing


def _recenter(xs: dict[str, float], root_id: str):
    shift = xs.get(root_id, 0.0)
    for pid in xs:
        xs[pid] -= shift


def mirror(nodes: dict[str, TreeNode]):
    """Negate every x and reverse left-to-right orderings. Adding 0.0 turns -0.0 into 0.0."""
    for node in nodes.values():
        node.x = -node.x + 0.0
        node.child_ids.reverse()
        node.spouses.reverse()
        for info in node.spouses:
            info.child_ids.reverse()


def bounding_box(nodes, config: TreeLayoutConfig) -> BoundingBox:
    visible = [n for n in nodes if not n.is_hidden]
    if not visible:
        return BoundingBox()
    half_w = config.node_width / 2
    half_h = config.node_height / 2
    return BoundingBox(
        min_x=min(n.x for n in visible) - half_w,
        max_x=max(n.x for n in visible) + half_w,
        min_y=min(n.y for n in visible) - half_h,
        max_y=max(n.y for n in visible) + half_h,
    )
