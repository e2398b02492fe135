"""
View and interaction state for a rendered tree.

`reduce_view` is a pure reducer: it returns a new TreeViewState and a flag saying
whether the tree layout has to be rebuilt. It never computes a layout itself.
"""

from dataclasses import dataclass, replace
from typing import NamedTuple

from models import DESCENDANTS, LAYOUT_TYPES, LTR, RTL, TreeLayout

MIN_SCALE = 0.1
MAX_SCALE = 3.0
ZOOM_STEP = 1.2


@dataclass(frozen=True)
class TreeViewState:
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    selected_person_id: str | None = None
    highlighted_person_ids: frozenset[str] = frozenset()
    collapsed_node_ids: frozenset[str] = frozenset()
    layout_type: str = DESCENDANTS
    direction: str = RTL
    search_query: str = ""
    search_results: tuple[str, ...] = ()


# Actions


@dataclass(frozen=True)
class SelectPerson:
    person_id: str | None


@dataclass(frozen=True)
class HighlightPersons:
    person_ids: tuple[str, ...]


@dataclass(frozen=True)
class ClearHighlights:
    pass


@dataclass(frozen=True)
class SetZoom:
    scale: float


@dataclass(frozen=True)
class SetTransform:
    translate_x: float
    translate_y: float
    scale: float


@dataclass(frozen=True)
class ZoomIn:
    pass


@dataclass(frozen=True)
class ZoomOut:
    pass


@dataclass(frozen=True)
class ResetView:
    pass


@dataclass(frozen=True)
class ToggleLayout:
    layout_type: str


@dataclass(frozen=True)
class ToggleDirection:
    pass


@dataclass(frozen=True)
class ToggleCollapse:
    node_id: str


@dataclass(frozen=True)
class Search:
    query: str


@dataclass(frozen=True)
class ClearSearch:
    pass


class ViewUpdate(NamedTuple):
    state: TreeViewState
    needs_relayout: bool


def clamp_scale(scale: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, scale))


def reduce_view(state: TreeViewState, action, layout: TreeLayout | None = None) -> ViewUpdate:
    """
    Apply one action to the view state.

    `layout` is the currently built layout; SEARCH matches against its persons.
    """
    if isinstance(action, SelectPerson):
        return ViewUpdate(replace(state, selected_person_id=action.person_id), False)

    if isinstance(action, HighlightPersons):
        return ViewUpdate(replace(state, highlighted_person_ids=frozenset(action.person_ids)), False)

    if isinstance(action, ClearHighlights):
        return ViewUpdate(replace(state, highlighted_person_ids=frozenset()), False)

    if isinstance(action, SetZoom):
        return ViewUpdate(replace(state, scale=clamp_scale(action.scale)), False)

    if isinstance(action, SetTransform):
        return ViewUpdate(
            replace(
                state,
                translate_x=action.translate_x,
                translate_y=action.translate_y,
                scale=clamp_scale(action.scale),
            ),
            False,
        )

    if isinstance(action, ZoomIn):
        return ViewUpdate(replace(state, scale=clamp_scale(state.scale * ZOOM_STEP)), False)

    if isinstance(action, ZoomOut):
        return ViewUpdate(replace(state, scale=clamp_scale(state.scale / ZOOM_STEP)), False)

    if isinstance(action, ResetView):
        return ViewUpdate(replace(state, scale=1.0, translate_x=0.0, translate_y=0.0), False)

    if isinstance(action, ToggleLayout):
        if action.layout_type not in LAYOUT_TYPES:
            raise ValueError(f"Unknown layout type: {action.layout_type!r}")
        changed = action.layout_type != state.layout_type
        return ViewUpdate(replace(state, layout_type=action.layout_type), changed)

    if isinstance(action, ToggleDirection):
        return ViewUpdate(replace(state, direction=LTR if state.direction == RTL else RTL), True)

    if isinstance(action, ToggleCollapse):
        return ViewUpdate(
            replace(state, collapsed_node_ids=state.collapsed_node_ids ^ {action.node_id}), True
        )

    if isinstance(action, Search):
        results = tuple(search_persons(layout, action.query)) if layout is not None else ()
        return ViewUpdate(
            replace(
                state,
                search_query=action.query,
                search_results=results,
                highlighted_person_ids=frozenset(results),
            ),
            False,
        )

    if isinstance(action, ClearSearch):
        return ViewUpdate(
            replace(state, search_query="", search_results=(), highlighted_person_ids=frozenset()),
            False,
        )

    raise TypeError(f"Unknown view action: {action!r}")


def search_persons(layout: TreeLayout, query: str) -> list[str]:
    """
    Person ids whose display names match `query`, case-insensitively.

    Exact matches rank first, then prefix matches, then substring matches; ties keep
    the layout's node order.
    """
    needle = query.strip().casefold()
    if not needle:
        return []

    ranked = []
    for position, node in enumerate(layout.nodes.values()):
        best = None
        for name in node.person.display_names:
            name = name.casefold()
            if name == needle:
                rank = 0
            elif name.startswith(needle):
                rank = 1
            elif needle in name:
                rank = 2
            else:
                continue
            best = rank if best is None else min(best, rank)
        if best is not None:
            ranked.append((best, position, node.id))

    ranked.sort()
    return [pid for _, _, pid in ranked]
