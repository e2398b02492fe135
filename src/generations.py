"""Generation (level) assignment over the family graph."""

from collections import deque
from dataclasses import dataclass, field

from graph import FamilyGraph
from models import ANCESTORS, DESCENDANTS, FULL, HOURGLASS, BuildTreeOptions, TreeLayoutConfig

# Where a node entered the level map
ROOT = "root"
UP = "up"
DOWN = "down"
SIBLING = "sibling"


@dataclass
class Generations:
    """
    Levels for every node kept in the layout, keyed in person input order.

    `origin` records which pass reached a node; spouses take the origin of the
    partner that pulled them in, and `spouse_only` lists those.
    """

    layout_type: str
    root_id: str
    levels: dict[str, int]
    origin: dict[str, str]
    spouse_only: set[str] = field(default_factory=set)
    sibling_ids: list[str] = field(default_factory=list)
    has_ancestors: bool = False
    has_descendants: bool = False

    def __contains__(self, person_id: str) -> bool:
        return person_id in self.levels

    def is_retained(self, parent_id: str, child_id: str) -> bool:
        """True for parent-child edges that span exactly one generation."""
        return (
            parent_id in self.levels
            and child_id in self.levels
            and self.levels[child_id] == self.levels[parent_id] + 1
        )


def assign_generations(
    graph: FamilyGraph,
    config: TreeLayoutConfig,
    options: BuildTreeOptions | None = None,
) -> Generations:
    """
    Assign a signed generation level to every node reachable for the layout type.

    - descendants: child = parent + 1, taking the minimum parent level on conflicts
    - ancestors: parent = child - 1, keeping the shallowest (maximum) level
    - hourglass: both passes from the root, sharing level 0
    - full: ancestor pass, then a descendant pass seeded from every ancestor

    Spouses inherit their partner's level. Nodes beyond the generation cap are not kept.
    """
    options = options or BuildTreeOptions()
    layout_type = config.layout_type
    root = graph.root_id
    cap = options.max_generations if options.max_generations is not None else config.max_generations

    run_up = layout_type in (ANCESTORS, HOURGLASS, FULL) and options.include_ancestors
    run_down = layout_type in (DESCENDANTS, HOURGLASS, FULL) and options.include_descendants

    levels = {root: 0}
    origin = {root: ROOT}

    if run_up:
        for pid, level in _ancestor_levels(graph, root, cap).items():
            if pid != root:
                levels[pid] = level
                origin[pid] = UP

    if run_down:
        seeds = dict(levels) if layout_type == FULL else {root: 0}
        for pid, level in _descendant_levels(graph, seeds, cap).items():
            if pid not in levels:
                levels[pid] = level
                origin[pid] = DOWN

    sibling_ids: list[str] = []
    if run_up and layout_type != FULL and options.include_siblings:
        for parent in graph.parents(root):
            if levels.get(parent) != -1:
                continue
            for child in graph.children(parent):
                if child not in levels:
                    levels[child] = 0
                    origin[child] = SIBLING
                    sibling_ids.append(child)

    # Spouses join at their partner's level; spouse edges never move a lineage node
    spouse_only: set[str] = set()
    for pid in list(levels):
        for spouse in graph.spouses(pid):
            if spouse not in levels:
                levels[spouse] = levels[pid]
                origin[spouse] = origin[pid]
                spouse_only.add(spouse)

    ordered = {pid: levels[pid] for pid in graph.persons if pid in levels}
    return Generations(
        layout_type=layout_type,
        root_id=root,
        levels=ordered,
        origin={pid: origin[pid] for pid in ordered},
        spouse_only=spouse_only,
        sibling_ids=sibling_ids,
        has_ancestors=run_up,
        has_descendants=run_down,
    )


def _ancestor_levels(graph: FamilyGraph, root: str, cap: int | None) -> dict[str, int]:
    levels = {root: 0}
    queue = deque([root])
    while queue:
        node = queue.popleft()
        candidate = levels[node] - 1
        if cap is not None and -candidate > cap:
            continue
        for parent in graph.parents(node):
            if parent not in levels or candidate > levels[parent]:
                levels[parent] = candidate
                queue.append(parent)
    return levels


def _descendant_levels(graph: FamilyGraph, seeds: dict[str, int], cap: int | None) -> dict[str, int]:
    """Seeds keep their levels; every other node takes the minimum parent level + 1."""
    levels = dict(seeds)
    queue = deque(seeds)
    while queue:
        node = queue.popleft()
        candidate = levels[node] + 1
        if cap is not None and abs(candidate) > cap:
            continue
        for child in graph.children(node):
            if child in seeds:
                continue
            if child not in levels or candidate < levels[child]:
                levels[child] = candidate
                queue.append(child)
    return levels
