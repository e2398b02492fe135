"""
Layout units and subtree width calculation.

A layout unit is a band of one primary person plus the spouses drawn beside it,
together with the child units hanging from it. Every kept node sits in exactly
one band, so a child with several recorded parents reserves width under one
parent only (its primary union); the other parent-child edges are drawn without
reserving space.

Units hang downward (children below) in the descendant part of a layout and
upward (parents above) in the ancestor part.
"""

from collections import defaultdict
from dataclasses import dataclass, field

from generations import DOWN, ROOT, SIBLING, UP, Generations
from graph import FamilyGraph
from models import FULL, TreeLayoutConfig, TreeNode


@dataclass
class LayoutUnit:
    primary: str
    band: list[str]  # left to right in canonical left-to-right space
    focus: list[str]  # band members the child block is centered under
    children: list["LayoutUnit"] = field(default_factory=list)
    collapsed: bool = False

    # Filled in by measure_units, relative to the band center
    left: float = 0.0
    right: float = 0.0
    child_offset: float = 0.0
    child_block: float = 0.0

    @property
    def width(self) -> float:
        return self.left + self.right

    @property
    def shown_children(self) -> list["LayoutUnit"]:
        return [] if self.collapsed else self.children

    def walk(self):
        """Pre-order over this unit and every unit below it, collapsed or not."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class LayoutForest:
    down_roots: list[LayoutUnit] = field(default_factory=list)
    up_root: LayoutUnit | None = None
    sibling_units: list[LayoutUnit] = field(default_factory=list)
    loose_units: list[LayoutUnit] = field(default_factory=list)  # placed right of everything else

    def units(self):
        for unit in self.down_roots:
            yield from unit.walk()
        if self.up_root is not None:
            yield from self.up_root.walk()
        for unit in self.sibling_units:
            yield unit
        for unit in self.loose_units:
            yield from unit.walk()


def build_layout_forest(
    graph: FamilyGraph, generations: Generations, collapsed_ids=frozenset()
) -> LayoutForest:
    """Split the kept nodes into layout units and link them into trees."""
    levels = generations.levels
    root = generations.root_id
    collapsed_ids = set(collapsed_ids)

    if generations.layout_type == FULL:
        down_members = set(levels)
        up_members: set[str] = set()
    else:
        down_members = (
            {pid for pid, o in generations.origin.items() if o in (ROOT, DOWN)}
            if generations.has_descendants
            else set()
        )
        up_members = (
            {pid for pid, o in generations.origin.items() if o in (ROOT, UP)}
            if generations.has_ancestors or not generations.has_descendants
            else set()
        )

    claimed: set[str] = set()
    forest = LayoutForest()

    if down_members:
        forest.down_roots = _down_forest(graph, generations, down_members, claimed)
    if up_members:
        if down_members:
            # The root's spouses already sit in the descendant band
            up_members = up_members - claimed | {root}
        forest.up_root, forest.loose_units = _up_tree(graph, generations, up_members, claimed)

    # Siblings first, then partners no sibling band took in (a sibling married to
    # another sibling is claimed before it can claim its own partners)
    sibling_members = {pid for pid, o in generations.origin.items() if o == SIBLING}
    leftovers = [pid for pid in levels if pid in sibling_members]
    for sibling in generations.sibling_ids + leftovers:
        if sibling in claimed:
            continue
        claimed.add(sibling)
        band = [sibling] + _claim_spouses(graph, generations, sibling, claimed, sibling_members)
        forest.sibling_units.append(LayoutUnit(primary=sibling, band=band, focus=[sibling]))

    for unit in forest.units():
        unit.collapsed = any(m in collapsed_ids for m in unit.band)
    return forest


def _claim_spouses(graph, generations, primary, claimed, candidates, anchored=()) -> list[str]:
    level = generations.levels[primary]
    band = []
    for spouse in graph.spouses(primary):
        if (
            spouse in candidates
            and spouse not in claimed
            and spouse not in anchored
            and generations.levels[spouse] == level
        ):
            claimed.add(spouse)
            band.append(spouse)
    return band


def _down_forest(graph: FamilyGraph, generations: Generations, members: set[str], claimed: set[str]):
    levels = generations.levels
    order = {pid: i for i, pid in enumerate(levels)}

    # Primary parent: the first recorded parent one generation up
    primary_parent: dict[str, str] = {}
    for child in levels:
        if child not in members:
            continue
        for parent in graph.parents(child):
            if parent in members and levels[parent] == levels[child] - 1:
                primary_parent[child] = parent
                break

    kids_of: dict[str, list[str]] = defaultdict(list)
    for child, parent in primary_parent.items():
        kids_of[parent].append(child)

    def make_unit(primary: str) -> LayoutUnit:
        claimed.add(primary)
        spouses = _claim_spouses(graph, generations, primary, claimed, members, primary_parent)
        band = [primary] + spouses

        # Group keys in drawing order: the primary's own children, then per spouse
        # the shared children followed by that spouse's own children
        keys = [(primary,)]
        for spouse in spouses:
            keys += [(primary, spouse), (spouse,)]
        by_key: dict[tuple, list[str]] = defaultdict(list)
        for member in band:
            for child in kids_of[member]:
                parents = graph.parents(child)
                spouse = _first_spouse_parent(graph, child, spouses)
                if primary in parents:
                    by_key[(primary, spouse) if spouse else (primary,)].append(child)
                else:
                    by_key[(member,)].append(child)
        groups = [(list(key), by_key[key]) for key in keys if by_key[key]]

        if len(groups) == 1:
            focus = groups[0][0]
        else:
            focus = list(band)

        unit = LayoutUnit(primary=primary, band=band, focus=focus)
        for _, child_ids in groups:
            for child in child_ids:
                if child not in claimed:
                    unit.children.append(make_unit(child))
        return unit

    root = generations.root_id
    tops = sorted(
        (pid for pid in members if pid not in primary_parent),
        key=lambda pid: (pid != root, levels[pid], order[pid]),
    )
    roots = []
    for top in tops:
        if top not in claimed:
            roots.append(make_unit(top))

    # Anything a malformed level map left unplaced becomes its own tree
    for pid in levels:
        if pid in members and pid not in claimed:
            roots.append(make_unit(pid))
    return roots


def _first_spouse_parent(graph: FamilyGraph, child: str, spouses: list[str]) -> str | None:
    parents = graph.parents(child)
    for spouse in spouses:
        if spouse in parents:
            return spouse
    return None


def _up_tree(graph: FamilyGraph, generations: Generations, members: set[str], claimed: set[str]):
    levels = generations.levels
    lineage = {pid for pid in members if pid not in generations.spouse_only}
    root = generations.root_id

    def make_unit(primary: str) -> LayoutUnit:
        claimed.add(primary)
        band = [primary] + _claim_spouses(graph, generations, primary, claimed, members - lineage)
        unit = LayoutUnit(primary=primary, band=band, focus=[primary])
        parents = [
            p
            for p in graph.parents(primary)
            if p in lineage and levels[p] == levels[primary] - 1 and p not in claimed
        ]
        claimed.update(parents)
        for parent in parents:
            unit.children.append(make_unit(parent))
        return unit

    claimed.discard(root)
    top = make_unit(root)
    loose = [make_unit(pid) for pid in levels if pid in members and pid not in claimed]
    return top, loose


def measure_units(forest: LayoutForest, nodes: dict[str, TreeNode], config: TreeLayoutConfig):
    """
    Post-order width pass.

    A band of k members is k node widths plus (k - 1) spouse gaps. A unit spans the
    wider of its band and its child block, where the child block is the children's
    subtree widths plus horizontal spacing between them, centered under the focus
    members (one union, a single parent, or the whole band).
    """
    # The root heads both parts of an hourglass; its recorded width is the descendant one
    roots = [forest.up_root] if forest.up_root is not None else []
    roots += forest.sibling_units + forest.loose_units + forest.down_roots
    for unit in roots:
        _measure(unit, nodes, config)


def _measure(unit: LayoutUnit, nodes: dict[str, TreeNode], config: TreeLayoutConfig) -> float:
    half_band = band_width(len(unit.band), config) / 2
    children = unit.shown_children

    for child in children:
        _measure(child, nodes, config)

    if not children:
        unit.child_block = 0.0
        unit.child_offset = 0.0
        unit.left = unit.right = half_band
    else:
        block = sum(c.width for c in children) + (len(children) - 1) * config.horizontal_spacing
        offset = focus_offset(unit, config)
        unit.child_block = block
        unit.child_offset = offset
        unit.left = max(half_band, block / 2 - offset)
        unit.right = max(half_band, block / 2 + offset)

    for member in unit.band:
        nodes[member].subtree_width = unit.width
    return unit.width


def band_width(members: int, config: TreeLayoutConfig) -> float:
    return members * config.node_width + (members - 1) * config.spouse_spacing


def member_offset(index: int, members: int, config: TreeLayoutConfig) -> float:
    """Center of the band member at `index`, relative to the band center."""
    step = config.node_width + config.spouse_spacing
    return index * step + config.node_width / 2 - band_width(members, config) / 2


def focus_offset(unit: LayoutUnit, config: TreeLayoutConfig) -> float:
    indices = [unit.band.index(m) for m in unit.focus]
    first = member_offset(min(indices), len(unit.band), config)
    last = member_offset(max(indices), len(unit.band), config)
    return (first + last) / 2
