"""Adapter to convert a LayoutConfiguration into domain objects.

The document schema mirrors the domain closely; this module is the single
place where document fields are mapped onto engine types, including the
tri-state receiver card caption and the tagged route steps.
"""

from ledwall.application.config.schema import (
    CabinetConfig,
    CabinetStepConfig,
    DataRouteConfig,
    LayoutConfiguration,
    MappingNumbersConfig,
    PowerFeedConfig,
    ProjectConfig,
    StepConfig,
)
from ledwall.domain.entities import (
    Cabinet,
    DataRoute,
    GridSettings,
    Layout,
    LayoutSettings,
    MappingNumberSettings,
    MappingPositionOverride,
    OverviewSettings,
    PowerFeed,
)
from ledwall.domain.value_objects import (
    CabinetStep,
    CabinetType,
    Point2D,
    PointStep,
    RouteStep,
    mode_module_sizes,
)


def config_to_step(step: StepConfig) -> RouteStep:
    """Convert a document step into a domain route step."""
    if isinstance(step, CabinetStepConfig):
        return CabinetStep(cabinet_id=step.cabinet_id, card_index=step.card_index)
    return PointStep(x_mm=step.x_mm, y_mm=step.y_mm)


def config_to_cabinet(config: CabinetConfig) -> Cabinet:
    """Convert a document cabinet into a domain cabinet."""
    anchor = None
    if config.data_anchor is not None:
        anchor = Point2D(config.data_anchor.x, config.data_anchor.y)
    return Cabinet(
        id=config.id,
        type_id=config.type_id,
        x_mm=config.x_mm,
        y_mm=config.y_mm,
        rotation=config.rotation,
        receiver_card_count=config.receiver_card_count,
        receiver_card_label=config.receiver_card_label,
        data_anchor=anchor,
        grid_label_override=config.grid_label,
    )


def config_to_route(config: DataRouteConfig) -> DataRoute:
    return DataRoute(
        id=config.id,
        port=config.port,
        steps=tuple(config_to_step(s) for s in config.steps),
        label_position=config.label_position,
        force_label_bottom=config.force_label_bottom,
    )


def config_to_feed(config: PowerFeedConfig) -> PowerFeed:
    return PowerFeed(
        id=config.id,
        label=config.label,
        breaker=config.breaker,
        connector=config.connector,
        steps=tuple(config_to_step(s) for s in config.steps),
        consumption_w=config.consumption_w,
        label_position=config.label_position,
        custom_label=config.custom_label,
    )


def config_to_mapping_settings(config: MappingNumbersConfig) -> MappingNumberSettings:
    return MappingNumberSettings(
        mode=config.mode,
        restart_per_card=config.restart_per_card,
        labels=tuple(config.labels),
        per_chain=dict(config.per_chain),
        per_endpoint=dict(config.per_endpoint),
        show=config.show,
        position=config.position,
        font_size=config.font_size,
        badge=config.badge,
        position_overrides={
            key: MappingPositionOverride(
                position=override.position,
                anchor_x=override.x,
                anchor_y=override.y,
            )
            for key, override in config.position_overrides.items()
        },
    )


def config_to_settings(config: ProjectConfig) -> LayoutSettings:
    """Convert project settings, filling the mode's default module size."""
    overview = config.overview
    module_size = overview.module_size or mode_module_sizes(config.mode)[0]
    return LayoutSettings(
        name=config.name,
        client=config.client,
        mode=config.mode,
        pitch_mm=config.pitch_mm,
        pitch_is_gob=config.pitch_is_gob,
        controller=config.controller,
        grid=GridSettings(enabled=config.grid.enabled, step_mm=config.grid.step_mm),
        overview=OverviewSettings(
            show_receiver_cards=overview.show_receiver_cards,
            receiver_card_model=overview.receiver_card_model,
            grid_label_axis=overview.grid_label_axis,
            force_port_labels_bottom=overview.force_port_labels_bottom,
            module_size=module_size,
            module_orientation=overview.module_orientation,
            mapping_numbers=config_to_mapping_settings(overview.mapping_numbers),
        ),
        zoom=config.zoom,
    )


def config_to_layout(config: LayoutConfiguration) -> Layout:
    """Convert a validated layout document into a domain snapshot.

    An omitted or empty ``cabinet_types`` list falls back to the catalog of
    the project mode.

    Example:
        >>> config = load_layout(Path("wall.json"))
        >>> layout = config_to_layout(config)
        >>> analysis = AnalyzeLayoutCommand().execute(layout)
    """
    catalog = None
    if config.cabinet_types:
        catalog = tuple(
            CabinetType(type_id=t.type_id, width_mm=t.width_mm, height_mm=t.height_mm)
            for t in config.cabinet_types
        )
    return Layout(
        cabinets=tuple(config_to_cabinet(c) for c in config.cabinets),
        cabinet_types=catalog,
        data_routes=tuple(config_to_route(r) for r in config.data_routes),
        power_feeds=tuple(config_to_feed(f) for f in config.power_feeds),
        settings=config_to_settings(config.project),
    )
