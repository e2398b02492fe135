"""Viewport helpers: fit and center transforms, culling and hit testing."""

from dataclasses import dataclass

from models import ConnectionLine, TreeInteractionHandlers, TreeLayout, TreeNode


@dataclass(frozen=True)
class Transform:
    translate_x: float
    translate_y: float
    scale: float


@dataclass(frozen=True)
class CullingResult:
    visible_nodes: list[TreeNode]
    visible_connections: list[ConnectionLine]
    total_nodes: int
    culling_enabled: bool

    @property
    def rendered_nodes(self) -> int:
        return len(self.visible_nodes)


def center_transform(layout: TreeLayout, viewport_width: float, viewport_height: float) -> Transform:
    """Fit the whole tree in the viewport and center it, never scaling above 1."""
    bounds = layout.bounds
    if bounds.width <= 0 or bounds.height <= 0:
        return Transform(viewport_width / 2, viewport_height / 2, 1.0)

    scale = min(viewport_width / bounds.width, viewport_height / bounds.height, 1.0)
    translate_x = (viewport_width - bounds.width * scale) / 2 - bounds.min_x * scale
    translate_y = (viewport_height - bounds.height * scale) / 2 - bounds.min_y * scale
    return Transform(translate_x, translate_y, scale)


def center_on_person(
    layout: TreeLayout,
    viewport_width: float,
    viewport_height: float,
    scale: float = 1.0,
    person_id: str | None = None,
) -> Transform:
    """
    Translate so one person sits in the middle of the viewport at `scale`.

    Defaults to the config's center_on_person, then the root.
    """
    person_id = person_id or layout.config.center_on_person or layout.root_id
    node = layout.nodes[person_id]
    return Transform(
        viewport_width / 2 - node.x * scale,
        viewport_height / 2 - node.y * scale,
        scale,
    )


def to_tree_space(x: float, y: float, transform: Transform) -> tuple[float, float]:
    return ((x - transform.translate_x) / transform.scale, (y - transform.translate_y) / transform.scale)


def cull(
    layout: TreeLayout,
    viewport_width: float,
    viewport_height: float,
    transform: Transform,
    buffer: float = 200,
    max_nodes_without_culling: int = 50,
) -> CullingResult:
    """
    Nodes and connections overlapping the viewport, grown by `buffer` screen pixels.

    Small trees are returned whole.
    """
    nodes = layout.visible_nodes()
    if len(nodes) <= max_nodes_without_culling:
        return CullingResult(nodes, list(layout.connections), len(nodes), False)

    min_x, min_y = to_tree_space(-buffer, -buffer, transform)
    max_x, max_y = to_tree_space(viewport_width + buffer, viewport_height + buffer, transform)
    half_w = layout.config.node_width / 2
    half_h = layout.config.node_height / 2

    def overlaps(left, right, top, bottom):
        return left < max_x and right > min_x and top < max_y and bottom > min_y

    shown = [
        n for n in nodes if overlaps(n.x - half_w, n.x + half_w, n.y - half_h, n.y + half_h)
    ]

    connections = []
    for connection in layout.connections:
        a = layout.nodes[connection.from_id]
        b = layout.nodes[connection.to_id]
        if overlaps(
            min(a.x, b.x) - half_w,
            max(a.x, b.x) + half_w,
            min(a.y, b.y) - half_h,
            max(a.y, b.y) + half_h,
        ):
            connections.append(connection)

    return CullingResult(shown, connections, len(nodes), True)


def node_at(layout: TreeLayout, x: float, y: float) -> TreeNode | None:
    """The visible node covering tree-space point (x, y), if any."""
    half_w = layout.config.node_width / 2
    half_h = layout.config.node_height / 2
    for node in layout.visible_nodes():
        if abs(x - node.x) <= half_w and abs(y - node.y) <= half_h:
            return node
    return None


def dispatch_click(
    layout: TreeLayout,
    handlers: TreeInteractionHandlers,
    screen_x: float,
    screen_y: float,
    transform: Transform,
    double: bool = False,
) -> TreeNode | None:
    """
    Route a pointer click at screen coordinates to the matching handler.

    Returns the node that was hit, or None for a background click.
    """
    node = node_at(layout, *to_tree_space(screen_x, screen_y, transform))
    if node is None:
        if handlers.on_background_click:
            handlers.on_background_click()
        return None

    callback = handlers.on_person_double_click if double else handlers.on_person_click
    if callback:
        callback(node.person)
    return node
