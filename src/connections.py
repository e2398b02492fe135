"""Connection lines between positioned nodes."""

from graph import FamilyGraph
from models import (
    PARENT_CHILD,
    SIBLING_LINE,
    SPOUSE_LINE,
    ConnectionLine,
    TreeLayoutConfig,
    TreeNode,
    TreeStyleConfig,
)


def route_connections(
    graph: FamilyGraph,
    nodes: dict[str, TreeNode],
    config: TreeLayoutConfig,
    style: TreeStyleConfig,
) -> tuple[ConnectionLine, ...]:
    """
    Build parent-child, spouse and sibling lines between visible nodes.

    Paths depend only on node positions and ids, never on the order connections are
    produced in, so identical positions always give identical output.
    """
    visible = {pid: node for pid, node in nodes.items() if not node.is_hidden}
    colors = style.color_scheme
    lines: list[ConnectionLine] = []

    # Parent-child
    for child in visible.values():
        # A collapsed parent draws nothing below itself until expanded
        parent_ids = [
            p for p in graph.parents(child.id) if p in visible and not visible[p].is_collapsed
        ]
        union = graph.union_parents(child.id, within=set(parent_ids))
        for parent_id in parent_ids:
            parent = visible[parent_id]
            start_x = parent.x
            if union is not None and parent_id in union:
                partner = visible[union[1] if union[0] == parent_id else union[0]]
                if partner.y == parent.y:
                    start_x = _union_anchor(parent, partner, child, config)
            path = _parent_child_path(
                start_x,
                parent.y + config.node_height / 2,
                child.x,
                child.y - config.node_height / 2,
                style.line_style,
            )
            lines.append(
                ConnectionLine(
                    id=_connection_id("pc", parent_id, child.id),
                    type=PARENT_CHILD,
                    from_id=parent_id,
                    to_id=child.id,
                    path=path,
                    color=colors.parent_child_line,
                    stroke_width=style.stroke_width,
                    relationship=graph.lineage.edges[parent_id, child.id]["relationship"],
                )
            )

    # Spouses
    seen: set[tuple[str, str]] = set()
    for node in visible.values():
        for partner_id in graph.spouses(node.id):
            if partner_id not in visible:
                continue
            pair = tuple(sorted((node.id, partner_id)))
            if pair in seen:
                continue
            seen.add(pair)
            rel = graph.marriage(node.id, partner_id)
            divorced = bool(rel.divorce_date)
            left, right = sorted((node, visible[partner_id]), key=lambda n: (n.x, n.id))
            lines.append(
                ConnectionLine(
                    id=_connection_id("sp", *pair),
                    type=SPOUSE_LINE,
                    from_id=pair[0],
                    to_id=pair[1],
                    path=_line(
                        (left.x + config.node_width / 2, left.y),
                        (right.x - config.node_width / 2, right.y),
                    ),
                    color=colors.divorced_line if divorced else colors.spouse_line,
                    stroke_width=style.stroke_width,
                    is_dashed=divorced,
                    relationship=rel,
                )
            )

    # Siblings whose tie is not already drawn through one shared set of parents
    if config.show_siblings:
        seen = set()
        for node in visible.values():
            parents = frozenset(p for p in graph.parents(node.id) if p in visible)
            for sibling_id in graph.siblings(node.id):
                if sibling_id not in visible:
                    continue
                pair = tuple(sorted((node.id, sibling_id)))
                if pair in seen:
                    continue
                seen.add(pair)
                sibling_parents = frozenset(p for p in graph.parents(sibling_id) if p in visible)
                if parents and parents == sibling_parents:
                    continue
                left, right = sorted((node, visible[sibling_id]), key=lambda n: (n.x, n.id))
                lines.append(
                    ConnectionLine(
                        id=_connection_id("sb", *pair),
                        type=SIBLING_LINE,
                        from_id=pair[0],
                        to_id=pair[1],
                        path=_sibling_path(left, right, config),
                        color=colors.sibling_line,
                        stroke_width=style.stroke_width / 2,
                        is_dashed=True,
                    )
                )

    return tuple(lines)


def _connection_id(kind: str, a: str, b: str) -> str:
    """`kind-a-b` with '\\' and '-' inside person ids backslash-escaped."""
    escaped = [pid.replace("\\", "\\\\").replace("-", "\\-") for pid in (a, b)]
    return "-".join([kind] + escaped)


def _union_anchor(parent: TreeNode, partner: TreeNode, child: TreeNode, config: TreeLayoutConfig) -> float:
    """
    Where a union's lines to `child` leave the spouse row.

    Adjacent partners share the midpoint between them. When other band members sit
    between the partners, lines leave from the spouse gap beside the partner nearest
    the child, on the side facing the other partner.
    """
    gap = config.node_width + config.spouse_spacing
    if abs(partner.x - parent.x) <= gap + 1e-6:
        return (parent.x + partner.x) / 2
    near, far = sorted((parent, partner), key=lambda n: (abs(n.x - child.x), n.x, n.id))
    return near.x + (gap / 2 if far.x > near.x else -gap / 2)


def _parent_child_path(x1: float, y1: float, x2: float, y2: float, line_style: str) -> str:
    if line_style == "straight":
        return _line((x1, y1), (x2, y2))
    if line_style == "curved":
        return curved_path(x1, y1, x2, y2)
    return stepped_path(x1, y1, x2, y2)


def stepped_path(x1: float, y1: float, x2: float, y2: float) -> str:
    """Down from the parent, across at mid height, down into the child."""
    mid_y = (y1 + y2) / 2
    return _path("M", (x1, y1), "L", (x1, mid_y), "L", (x2, mid_y), "L", (x2, y2))


def curved_path(x1: float, y1: float, x2: float, y2: float, curvature: float = 0.5) -> str:
    mid_y = (y1 + y2) / 2
    control_y1 = y1 + (mid_y - y1) * curvature
    control_y2 = y2 - (y2 - mid_y) * curvature
    return (
        f"M {_num(x1)} {_num(y1)} C {_num(x1)} {_num(control_y1)}, "
        f"{_num(x2)} {_num(control_y2)}, {_num(x2)} {_num(y2)}"
    )


def _sibling_path(left: TreeNode, right: TreeNode, config: TreeLayoutConfig) -> str:
    top_left = left.y - config.node_height / 2
    top_right = right.y - config.node_height / 2
    bracket_y = min(top_left, top_right) - config.vertical_spacing / 4
    return _path(
        "M", (left.x, top_left), "L", (left.x, bracket_y), "L", (right.x, bracket_y), "L", (right.x, top_right)
    )


def _line(start: tuple[float, float], end: tuple[float, float]) -> str:
    return _path("M", start, "L", end)


def _path(*parts) -> str:
    out = []
    for part in parts:
        if isinstance(part, str):
            out.append(part)
        else:
            out.append(f"{_num(part[0])} {_num(part[1])}")
    return " ".join(out)


def _num(value: float) -> str:
    """Fixed two-decimal formatting with trailing zeros and negative zero removed."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text
