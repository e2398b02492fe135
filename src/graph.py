"""NetworkX graph building: persons and relationships to parent/child/spouse adjacency."""

import itertools
from dataclasses import dataclass, field

import networkx as nx

from errors import CycleDetected, DanglingRelationshipWarning, Diagnostic, RootNotFoundError
from models import PARENT, SIBLING, SPOUSE, BuildTreeOptions, Person, Relationship, SpouseInfo, TreeData


@dataclass
class FamilyGraph:
    """
    Adjacency for one tree build.

    `lineage` holds parent -> child edges, `marriages` holds undirected spouse edges.
    Both keep edge insertion order, which is the order of the relationship records,
    so every traversal over them is stable. Siblings are never stored; they are
    derived from shared parents.
    """

    persons: dict[str, Person]
    lineage: nx.DiGraph
    marriages: nx.Graph
    root_id: str
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def parents(self, person_id: str) -> list[str]:
        return list(self.lineage.predecessors(person_id))

    def children(self, person_id: str) -> list[str]:
        return list(self.lineage.successors(person_id))

    def spouses(self, person_id: str) -> list[str]:
        return list(self.marriages.neighbors(person_id))

    def marriage(self, a: str, b: str) -> Relationship:
        return self.marriages.edges[a, b]["relationship"]

    def siblings(self, person_id: str) -> list[str]:
        """Persons sharing at least one parent with `person_id`, full and half siblings alike."""
        found: dict[str, None] = {}
        for parent in self.parents(person_id):
            for child in self.children(parent):
                if child != person_id:
                    found.setdefault(child)
        return list(found)

    def union_children(self, a: str, b: str) -> list[str]:
        """Children recorded for both partners, in `a`'s child order."""
        b_children = set(self.children(b))
        return [c for c in self.children(a) if c in b_children]

    def unions(self, person_id: str) -> list[SpouseInfo]:
        return [
            SpouseInfo(
                partner_id=s,
                relationship=self.marriage(person_id, s),
                child_ids=self.union_children(person_id, s),
            )
            for s in self.spouses(person_id)
        ]

    def union_parents(self, child_id: str, within: set[str] | None = None) -> tuple[str, str] | None:
        """
        The first spouse pair found among a child's parents, or None.

        Only parents in `within` are considered when it is given.
        """
        parents = self.parents(child_id)
        if within is not None:
            parents = [p for p in parents if p in within]
        for p1, p2 in itertools.combinations(parents, 2):
            if self.marriages.has_edge(p1, p2):
                return (p1, p2)
        return None


def build_family_graph(
    data: TreeData,
    options: BuildTreeOptions | None = None,
    root_person_id: str | None = None,
) -> FamilyGraph:
    """
    Build the family graph for one layout computation.

    Relationships that reference unknown persons are skipped and reported as
    DanglingRelationshipWarning. Parent-child edges closing an ancestry cycle are
    dropped and reported as CycleDetected, so the rest of the data still lays out.

    Raises:
        RootNotFoundError: if a requested root is not among `data.persons`
    """
    options = options or BuildTreeOptions()
    persons = {p.id: p for p in data.persons}
    diagnostics: list[Diagnostic] = []

    lineage = nx.DiGraph()
    marriages = nx.Graph()
    lineage.add_nodes_from(persons)
    marriages.add_nodes_from(persons)

    for rel in data.relationships:
        missing = tuple(
            dict.fromkeys(pid for pid in (rel.person1_id, rel.person2_id) if pid not in persons)
        )
        if missing:
            diagnostics.append(
                DanglingRelationshipWarning(
                    message=f"Relationship {rel.id} references unknown person(s): {', '.join(missing)}",
                    relationship_id=rel.id,
                    missing_ids=missing,
                )
            )
            continue

        if rel.relationship_type == PARENT:
            # First record wins for duplicated edges
            if not lineage.has_edge(rel.person1_id, rel.person2_id):
                lineage.add_edge(rel.person1_id, rel.person2_id, relationship=rel)
        elif rel.relationship_type == SPOUSE:
            if rel.person1_id == rel.person2_id:
                continue
            if not marriages.has_edge(rel.person1_id, rel.person2_id):
                marriages.add_edge(rel.person1_id, rel.person2_id, relationship=rel)
        elif rel.relationship_type == SIBLING:
            # Sibling sets come from shared parents only
            continue

    root_id = resolve_root(data, lineage, options, root_person_id)

    start_order = [root_id] + [pid for pid in persons if pid != root_id]
    for parent, child, path in _find_closing_edges(lineage, start_order):
        lineage.remove_edge(parent, child)
        diagnostics.append(
            CycleDetected(
                message=(
                    f"Cycle detected in parent-child relationships: {' -> '.join(path + (child,))}; "
                    f"dropped {parent} -> {child}"
                ),
                parent_id=parent,
                child_id=child,
                path=path,
            )
        )

    return FamilyGraph(
        persons=persons,
        lineage=lineage,
        marriages=marriages,
        root_id=root_id,
        diagnostics=diagnostics,
    )


def resolve_root(
    data: TreeData,
    lineage: nx.DiGraph,
    options: BuildTreeOptions,
    root_person_id: str | None = None,
) -> str:
    """
    Pick the root person.

    Order: explicit argument, then options, then the tree data's own root. Without
    any of those, the first person with no recorded parents, else the first person.
    """
    requested = root_person_id or options.root_person_id or data.root_person_id
    if requested is not None:
        if requested not in lineage:
            raise RootNotFoundError(requested)
        return requested

    for person in data.persons:
        if lineage.in_degree(person.id) == 0:
            return person.id
    return data.persons[0].id


def _find_closing_edges(lineage: nx.DiGraph, start_order: list[str]):
    """
    Depth-first walk over parent -> child edges keeping the current branch as a path.

    Yields (parent, child, path) for every edge pointing back into the current path,
    where `path` runs from `child` down to `parent`.
    """
    done: set[str] = set()
    found = []

    for start in start_order:
        if start in done:
            continue
        path = [start]
        on_path = {start}
        stack = [iter(list(lineage.successors(start)))]

        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                node = path.pop()
                on_path.discard(node)
                done.add(node)
                continue

            if child in on_path:
                found.append((path[-1], child, tuple(path[path.index(child):])))
            elif child not in done:
                path.append(child)
                on_path.add(child)
                stack.append(iter(list(lineage.successors(child))))

    return found
