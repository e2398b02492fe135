"""Tree layout pipeline: family graph -> levels -> widths -> positions -> connections."""

from connections import route_connections
from generations import assign_generations
from graph import FamilyGraph, build_family_graph
from models import BuildTreeOptions, SpouseInfo, TreeData, TreeLayout, TreeLayoutConfig, TreeNode, TreeStyleConfig
from positioning import position_nodes
from validation import validate_config
from widths import build_layout_forest, measure_units


def build_tree_layout(
    data: TreeData,
    config: TreeLayoutConfig | None = None,
    options: BuildTreeOptions | None = None,
    style: TreeStyleConfig | None = None,
    collapsed_ids=frozenset(),
    highlighted_ids=frozenset(),
    root_person_id: str | None = None,
) -> TreeLayout | None:
    """
    Compute a complete layout for one tree.

    The result is a pure function of the arguments. Any change to data, config or
    the collapsed set means calling this again; layouts are never patched.

    Returns:
        The layout, or None when `data` has no persons.

    Raises:
        ConfigurationError: for an invalid config, before any traversal
        RootNotFoundError: if a requested root person does not exist
    """
    config = config or TreeLayoutConfig()
    options = options or BuildTreeOptions()
    style = style or TreeStyleConfig()
    validate_config(config, options, style)

    if not data.persons:
        return None

    graph = build_family_graph(data, options, root_person_id)
    generations = assign_generations(graph, config, options)
    nodes = _make_nodes(graph, generations.levels, collapsed_ids, highlighted_ids)

    forest = build_layout_forest(graph, generations, collapsed_ids)
    measure_units(forest, nodes, config)
    bounds = position_nodes(forest, nodes, graph.root_id, config)
    connections = route_connections(graph, nodes, config, style)

    return TreeLayout(
        nodes=nodes,
        connections=connections,
        bounds=bounds,
        root_id=graph.root_id,
        config=config,
        diagnostics=tuple(graph.diagnostics),
    )


def _make_nodes(graph: FamilyGraph, levels: dict[str, int], collapsed_ids, highlighted_ids) -> dict[str, TreeNode]:
    nodes = {}
    for pid, level in levels.items():
        nodes[pid] = TreeNode(
            id=pid,
            person=graph.persons[pid],
            level=level,
            parent_ids=[p for p in graph.parents(pid) if p in levels],
            child_ids=[c for c in graph.children(pid) if c in levels],
            spouses=[
                SpouseInfo(
                    partner_id=info.partner_id,
                    relationship=info.relationship,
                    child_ids=[c for c in info.child_ids if c in levels],
                )
                for info in graph.unions(pid)
                if info.partner_id in levels
            ],
            is_collapsed=pid in collapsed_ids,
            is_highlighted=pid in highlighted_ids,
        )
    return nodes
