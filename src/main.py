"""
1) Read a JSON snapshot of persons and relationships.
2) Check the data for cycles, impossible ages and date ordering.
3) Build the tree layout for the chosen root, layout type and direction.
4) Report diagnostics and layout size.
5) Optionally write the layout as DOT or render it with Graphviz.
"""

import argparse
from pathlib import Path

from errors import TreeLayoutError
from export import export_geometry, write_layout
from graph import build_family_graph
from layout import build_tree_layout
from models import DIRECTIONS, LAYOUT_TYPES, BuildTreeOptions, TreeLayoutConfig
from parsing import read_tree_data
from validation import check_data_quality

MAX_SHOWN = 10


def report(title: str, items: list):
    if not items:
        print(f"  No {title} found")
        return
    print(f"  Found {len(items)} {title}:")
    for item in items[:MAX_SHOWN]:
        print(f"    - {item.message}")
    if len(items) > MAX_SHOWN:
        print(f"    ... and {len(items) - MAX_SHOWN} more")


def main() -> int:
    parser = argparse.ArgumentParser(description="Lay out a family tree from a JSON snapshot.")
    parser.add_argument("input_json", type=Path, help="Path to the tree JSON file.")
    parser.add_argument("--root", help="Person id to center the tree on.")
    parser.add_argument("--layout", choices=LAYOUT_TYPES, default="descendants")
    parser.add_argument("--direction", choices=DIRECTIONS, default="ltr")
    parser.add_argument("--max-generations", type=int, default=None)
    parser.add_argument("--siblings", action="store_true", help="Include the root's siblings.")
    parser.add_argument("--collapse", nargs="*", default=[], help="Person ids to collapse.")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the layout to this file (.dot, .gv, .png, .svg or .pdf).",
    )
    args = parser.parse_args()

    print(f"Reading tree data: {args.input_json}")
    data = read_tree_data(args.input_json, root_person_id=args.root)
    print(f"  Found {len(data.persons)} persons and {len(data.relationships)} relationships")

    config = TreeLayoutConfig(
        layout_type=args.layout,
        direction=args.direction,
        max_generations=args.max_generations,
    )
    options = BuildTreeOptions(include_siblings=args.siblings)

    try:
        print("Checking data quality...")
        if data.persons:
            report("data quality warnings", check_data_quality(build_family_graph(data, options)))

        print(f"Building {args.layout} layout ({args.direction})...")
        layout = build_tree_layout(data, config, options, collapsed_ids=frozenset(args.collapse))
    except TreeLayoutError as e:
        print(f"Error: {e}")
        return 1

    if layout is None:
        print("  Nothing to lay out")
        return 0

    report("layout diagnostics", list(layout.diagnostics))
    visible = layout.visible_nodes()
    print(
        f"  Layout has {len(visible)} visible nodes ({len(layout.nodes)} total) "
        f"and {len(layout.connections)} connections, root {layout.root_id}"
    )
    geometry = export_geometry(layout)
    print(f"  Canvas size: {geometry.width} x {geometry.height} px")

    if args.output:
        write_layout(layout, args.output)
        print(f"Layout saved to {args.output}")

    print("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
