"""Data classes for family tree entities and layout results."""

from dataclasses import dataclass, field
from typing import Callable

# Relationship types
PARENT = "parent"  # person1 is a parent of person2
SPOUSE = "spouse"
SIBLING = "sibling"

# Layout types and directions
DESCENDANTS = "descendants"
ANCESTORS = "ancestors"
HOURGLASS = "hourglass"
FULL = "full"
LAYOUT_TYPES = (DESCENDANTS, ANCESTORS, HOURGLASS, FULL)

LTR = "ltr"
RTL = "rtl"
DIRECTIONS = (LTR, RTL)

LINE_STYLES = ("straight", "curved", "stepped")
NODE_SHAPES = ("rectangle", "rounded", "circle", "hexagon")
EXPORT_FORMATS = ("png", "jpeg", "svg", "pdf")

# Connection types
PARENT_CHILD = "parent-child"
SPOUSE_LINE = "spouse"
SIBLING_LINE = "sibling"


@dataclass(frozen=True)
class Person:
    id: str
    given_name: str
    gender: str | None = None  # "male", "female" or None
    family_name: str | None = None
    patronymic_chain: str | None = None
    full_name_ar: str | None = None
    full_name_en: str | None = None
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    birth_place: str | None = None
    death_date: str | None = None
    death_place: str | None = None
    is_living: bool = True

    @property
    def display_names(self) -> list[str]:
        names = [self.given_name, self.full_name_ar, self.full_name_en, self.family_name]
        return [n for n in names if n]


@dataclass(frozen=True)
class Relationship:
    id: str
    person1_id: str
    person2_id: str
    relationship_type: str  # parent, spouse, sibling
    marriage_date: str | None = None
    marriage_place: str | None = None
    divorce_date: str | None = None
    divorce_place: str | None = None


@dataclass(frozen=True)
class TreeData:
    persons: tuple[Person, ...]
    relationships: tuple[Relationship, ...]
    root_person_id: str | None = None


@dataclass(frozen=True)
class BuildTreeOptions:
    root_person_id: str | None = None
    max_generations: int | None = None
    include_ancestors: bool = True
    include_descendants: bool = True
    include_siblings: bool = False


@dataclass(frozen=True)
class TreeLayoutConfig:
    layout_type: str = DESCENDANTS
    direction: str = RTL
    node_width: float = 200
    node_height: float = 120
    horizontal_spacing: float = 60  # between siblings
    vertical_spacing: float = 100  # between generations
    spouse_spacing: float = 40
    max_generations: int | None = None
    center_on_person: str | None = None
    show_siblings: bool = True


@dataclass(frozen=True)
class TreeColorScheme:
    male: str = "#3b82f6"
    female: str = "#ec4899"
    unknown: str = "#9ca3af"
    parent_child_line: str = "#64748b"
    spouse_line: str = "#10b981"
    sibling_line: str = "#94a3b8"
    divorced_line: str = "#ef4444"
    background: str = "#ffffff"
    highlight: str = "#f59e0b"
    selection: str = "#3b82f6"


@dataclass(frozen=True)
class TreeStyleConfig:
    color_scheme: TreeColorScheme = field(default_factory=TreeColorScheme)
    font_family: str = "Arial, Helvetica, sans-serif"
    font_size: int = 14
    show_photos: bool = True
    show_dates: bool = True
    show_patronymic: bool = False
    node_shape: str = "rounded"
    line_style: str = "stepped"
    stroke_width: float = 2


@dataclass
class SpouseInfo:
    """A union seen from one partner: the other partner plus the children they share."""

    partner_id: str
    relationship: Relationship
    child_ids: list[str] = field(default_factory=list)


@dataclass
class TreeNode:
    id: str
    person: Person
    x: float = 0.0  # center of the node
    y: float = 0.0
    level: int = 0  # 0 = root, negative = ancestors, positive = descendants
    parent_ids: list[str] = field(default_factory=list)
    child_ids: list[str] = field(default_factory=list)
    spouses: list[SpouseInfo] = field(default_factory=list)
    subtree_width: float = 0.0
    is_collapsed: bool = False
    is_highlighted: bool = False
    is_hidden: bool = False  # folded away under a collapsed node


@dataclass(frozen=True)
class ConnectionLine:
    id: str
    type: str  # parent-child, spouse, sibling
    from_id: str
    to_id: str
    path: str  # SVG path data
    color: str
    stroke_width: float
    is_dashed: bool = False
    relationship: Relationship | None = None


@dataclass(frozen=True)
class BoundingBox:
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class TreeLayout:
    nodes: dict[str, TreeNode]
    connections: tuple[ConnectionLine, ...]
    bounds: BoundingBox
    root_id: str
    config: TreeLayoutConfig
    diagnostics: tuple = ()

    @property
    def root(self) -> TreeNode:
        return self.nodes[self.root_id]

    def visible_nodes(self) -> list[TreeNode]:
        return [n for n in self.nodes.values() if not n.is_hidden]


@dataclass(frozen=True)
class ExportOptions:
    format: str = "png"
    quality: float | None = None  # 0-1, jpeg only
    background_color: str = "#ffffff"
    scale: float = 1.0  # resolution multiplier
    include_watermark: bool = False


@dataclass
class TreeInteractionHandlers:
    """Callbacks the input layer invokes for pointer and keyboard events on rendered shapes."""

    on_person_click: Callable[[Person], None] | None = None
    on_person_hover: Callable[[Person | None], None] | None = None
    on_person_double_click: Callable[[Person], None] | None = None
    on_relationship_click: Callable[[Relationship], None] | None = None
    on_background_click: Callable[[], None] | None = None
