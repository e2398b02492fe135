"""Configuration validation and data-quality checks for family tree data."""

from errors import ConfigurationError, DataQualityWarning
from graph import FamilyGraph
from models import DIRECTIONS, LAYOUT_TYPES, LINE_STYLES, NODE_SHAPES, BuildTreeOptions, TreeLayoutConfig, TreeStyleConfig


def validate_config(
    config: TreeLayoutConfig,
    options: BuildTreeOptions | None = None,
    style: TreeStyleConfig | None = None,
):
    """Raise ConfigurationError for a config the layout cannot be computed with."""
    if config.layout_type not in LAYOUT_TYPES:
        raise ConfigurationError(f"Unknown layout type: {config.layout_type!r}")
    if config.direction not in DIRECTIONS:
        raise ConfigurationError(f"Unknown direction: {config.direction!r}")

    if config.node_width <= 0 or config.node_height <= 0:
        raise ConfigurationError(
            f"Node size must be positive, got {config.node_width}x{config.node_height}"
        )
    for name in ("horizontal_spacing", "vertical_spacing", "spouse_spacing"):
        value = getattr(config, name)
        if value < 0:
            raise ConfigurationError(f"{name} must not be negative, got {value}")

    caps = [config.max_generations]
    if options is not None:
        caps.append(options.max_generations)
    for cap in caps:
        if cap is not None and cap < 0:
            raise ConfigurationError(f"max_generations must not be negative, got {cap}")

    if style is not None:
        if style.line_style not in LINE_STYLES:
            raise ConfigurationError(f"Unknown line style: {style.line_style!r}")
        if style.node_shape not in NODE_SHAPES:
            raise ConfigurationError(f"Unknown node shape: {style.node_shape!r}")
        if style.stroke_width <= 0:
            raise ConfigurationError(f"stroke_width must be positive, got {style.stroke_width}")


def check_data_quality(graph: FamilyGraph) -> list[DataQualityWarning]:
    """
    Check the family graph for:
    - Impossible ages (child born before parent)
    - Parents younger than 12 at a child's birth
    - Death before birth

    Dates are ISO strings (YYYY-MM-DD) and compare as strings.
    """
    warnings: list[DataQualityWarning] = []

    for parent_id, child_id in graph.lineage.edges():
        parent = graph.persons[parent_id]
        child = graph.persons[child_id]

        if not (parent.birth_date and child.birth_date):
            continue

        if child.birth_date < parent.birth_date:
            warnings.append(
                DataQualityWarning(
                    message=f"Impossible: {child.given_name} born before parent {parent.given_name}",
                    person_id=child_id,
                )
            )
        else:
            try:
                parent_year = int(parent.birth_date[:4])
                child_year = int(child.birth_date[:4])
            except ValueError:
                continue
            if child_year - parent_year < 12:
                warnings.append(
                    DataQualityWarning(
                        message=(
                            f"Suspicious: {parent.given_name} was less than 12 years old "
                            f"when {child.given_name} was born"
                        ),
                        person_id=parent_id,
                    )
                )

    for person in graph.persons.values():
        if person.birth_date and person.death_date and person.death_date < person.birth_date:
            warnings.append(
                DataQualityWarning(
                    message=f"Impossible: {person.given_name} died before being born",
                    person_id=person.id,
                )
            )

    return warnings
