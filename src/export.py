"""Export support: pixel geometry for rasterizers and Graphviz output of a built layout."""

import math
from dataclasses import dataclass
from pathlib import Path

import graphviz

from errors import ConfigurationError
from models import EXPORT_FORMATS, SPOUSE_LINE, ExportOptions, TreeLayout, TreeNode, TreeStyleConfig

EXPORT_PADDING = 50  # tree units around the bounding box
DEFAULT_JPEG_QUALITY = 0.92
POINTS_PER_INCH = 72


@dataclass(frozen=True)
class ExportGeometry:
    """Pixel canvas for one export; tree (x, y) maps to ((x + offset_x) * scale, (y + offset_y) * scale)."""

    width: int
    height: int
    offset_x: float
    offset_y: float
    scale: float
    format: str
    background_color: str
    quality: float | None
    include_watermark: bool

    def to_pixels(self, x: float, y: float) -> tuple[float, float]:
        return ((x + self.offset_x) * self.scale, (y + self.offset_y) * self.scale)

    def node_box(self, node: TreeNode, layout: TreeLayout) -> tuple[float, float, float, float]:
        """(left, top, width, height) of a node in pixels."""
        cfg = layout.config
        left, top = self.to_pixels(node.x - cfg.node_width / 2, node.y - cfg.node_height / 2)
        return (left, top, cfg.node_width * self.scale, cfg.node_height * self.scale)


def export_geometry(layout: TreeLayout, options: ExportOptions | None = None) -> ExportGeometry:
    options = options or ExportOptions()
    if options.format not in EXPORT_FORMATS:
        raise ConfigurationError(f"Unknown export format: {options.format!r}")
    if options.scale <= 0:
        raise ConfigurationError(f"Export scale must be positive, got {options.scale}")

    quality = None
    if options.format == "jpeg":
        quality = DEFAULT_JPEG_QUALITY if options.quality is None else options.quality
        if not 0 < quality <= 1:
            raise ConfigurationError(f"JPEG quality must be in (0, 1], got {quality}")

    bounds = layout.bounds
    return ExportGeometry(
        width=math.ceil((bounds.width + 2 * EXPORT_PADDING) * options.scale),
        height=math.ceil((bounds.height + 2 * EXPORT_PADDING) * options.scale),
        offset_x=EXPORT_PADDING - bounds.min_x,
        offset_y=EXPORT_PADDING - bounds.min_y,
        scale=options.scale,
        format=options.format,
        background_color=options.background_color,
        quality=quality,
        include_watermark=options.include_watermark,
    )


def layout_to_graphviz(layout: TreeLayout, style: TreeStyleConfig | None = None) -> graphviz.Graph:
    """
    Graphviz graph with every visible node pinned at its layout position.

    Meant for `neato -n2`, which keeps the given positions (in points, y pointing up).
    """
    style = style or TreeStyleConfig()
    colors = style.color_scheme
    cfg = layout.config

    G = graphviz.Graph(name="family_tree", engine="neato")
    G.attr(bgcolor=colors.background, splines="line", outputorder="edgesfirst")
    G.attr(
        "node",
        shape="box",
        style="rounded,filled" if style.node_shape == "rounded" else "filled",
        fontname=style.font_family.split(",")[0],
        fontsize=str(style.font_size),
        width=f"{cfg.node_width / POINTS_PER_INCH:.4f}",
        height=f"{cfg.node_height / POINTS_PER_INCH:.4f}",
        fixedsize="true",
    )

    for node in layout.visible_nodes():
        person = node.person
        if person.gender == "male":
            fillcolor = colors.male
        elif person.gender == "female":
            fillcolor = colors.female
        else:
            fillcolor = colors.unknown

        label = person.given_name
        if style.show_dates and (person.birth_date or person.death_date):
            birth_year = person.birth_date[:4] if person.birth_date else ""
            death_year = person.death_date[:4] if person.death_date else ""
            label = f"{label}\n{birth_year}-{death_year}"

        G.node(
            node.id,
            label=label,
            pos=f"{node.x:.2f},{-node.y + 0.0:.2f}!",
            fillcolor=fillcolor,
            color=colors.highlight if node.is_highlighted else "black",
            penwidth="3" if node.is_highlighted else "1",
        )

    for connection in layout.connections:
        G.edge(
            connection.from_id,
            connection.to_id,
            color=connection.color,
            penwidth=str(connection.stroke_width),
            style="dashed" if connection.is_dashed else "solid",
            constraint="false" if connection.type == SPOUSE_LINE else "true",
        )

    return G


def write_layout(layout: TreeLayout, output_path: Path, style: TreeStyleConfig | None = None):
    """Write the layout as DOT source (.dot/.gv) or render it (png, svg, pdf)."""
    G = layout_to_graphviz(layout, style)
    ext = output_path.suffix.lower().lstrip(".")

    if ext in ("dot", "gv"):
        output_path.write_text(G.source, encoding="utf-8")
        return

    if ext not in ("png", "svg", "pdf"):
        ext = "png"
    G.render(outfile=str(output_path), format=ext, neato_no_op=2, cleanup=True)
