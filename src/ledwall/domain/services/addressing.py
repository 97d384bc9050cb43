"""Cabinet addressing: grid addresses, mapping numbers and card captions."""

from __future__ import annotations

import logging
import math
from collections import Counter

from ..entities import Cabinet, DataRoute, Layout, LayoutSettings, MappingNumberSettings
from ..value_objects import DEFAULT_RECEIVER_CARD_MODEL, CabinetStep, GridLabelAxis
from .geometry import GeometryResolver

logger = logging.getLogger(__name__)

__all__ = [
    "GridAddressLabeler",
    "MappingNumberAssigner",
    "build_sequence",
    "column_label",
    "dominant_card_index",
    "format_label_value",
    "grid_labels",
    "group_positions",
    "mapping_labels",
    "nearest_index",
    "receiver_card_label",
]

GRID_MERGE_TOLERANCE_MM = 1.0


def group_positions(values: list[float], tolerance: float = GRID_MERGE_TOLERANCE_MM) -> list[float]:
    """Cluster sorted values into representatives.

    A new group starts when a value lies more than ``tolerance`` away from
    the current group's first value.
    """
    groups: list[float] = []
    for value in sorted(values):
        if not groups or abs(value - groups[-1]) > tolerance:
            groups.append(value)
    return groups


def nearest_index(values: list[float], target: float) -> int:
    """Index of the value closest to ``target``; the first one wins ties."""
    best_index = 0
    best_distance = math.inf
    for index, value in enumerate(values):
        distance = abs(value - target)
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def column_label(index: int) -> str:
    """Bijective base-26 letters: 0 -> A, 25 -> Z, 26 -> AA."""
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


class GridAddressLabeler:
    """Assigns spreadsheet-style grid addresses to cabinets."""

    def __init__(self, geometry: GeometryResolver) -> None:
        self.geometry = geometry

    def labels(
        self, cabinets: tuple[Cabinet, ...] | list[Cabinet], axis: GridLabelAxis = GridLabelAxis.COLUMNS
    ) -> dict[str, str]:
        """Map cabinet ids to grid addresses.

        Args:
            cabinets: Cabinets to label. Unresolvable cabinets are skipped.
            axis: ``COLUMNS`` gives column letter and row number,
                ``ROWS`` gives row letter and column number.

        Returns:
            Address per cabinet id. Manual overrides win.
        """
        resolved = self.geometry.resolved(cabinets)
        columns = group_positions([rect.x for _, rect in resolved])
        rows = group_positions([rect.y for _, rect in resolved])

        result: dict[str, str] = {}
        for cabinet, rect in resolved:
            override = (cabinet.grid_label_override or "").strip()
            if override:
                result[cabinet.id] = override
                continue
            col = nearest_index(columns, rect.x)
            row = nearest_index(rows, rect.y)
            if axis == GridLabelAxis.ROWS:
                letter_index, number_index = row, col
            else:
                letter_index, number_index = col, row
            result[cabinet.id] = f"{column_label(letter_index)}{number_index + 1}"
        return result


def format_label_value(value: float) -> str:
    """Render a numeric label without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def build_sequence(count: int, labels: tuple[float, ...] | list[float] | None = None) -> list[float]:
    """Build ``count`` mapping labels.

    Finite supplied labels come first; the rest is taken from the odd
    sequence 1, 3, 5, ... at the positions the supplied labels did not fill.

    >>> build_sequence(5, [10, 20])
    [10, 20, 5, 7, 9]
    """
    supplied = [v for v in (labels or ()) if math.isfinite(v)]
    if len(supplied) >= count:
        return supplied[:count]
    return supplied + [1 + i * 2 for i in range(len(supplied), count)]


def _sort_routes(routes: list[DataRoute]) -> list[DataRoute]:
    return sorted(routes, key=lambda r: (r.port, r.id))


def dominant_card_index(route: DataRoute) -> int:
    """Card index used by most endpoints of ``route``.

    Endpoints without an explicit card count as card 0. Ties go to the lower
    index.
    """
    counts = Counter(step.card_index or 0 for step in route.cabinet_steps)
    if not counts:
        return 0
    return min(counts, key=lambda key: (-counts[key], key))


class MappingNumberAssigner:
    """Assigns mapping numbers to route endpoints."""

    def assign(
        self, routes: tuple[DataRoute, ...] | list[DataRoute], settings: MappingNumberSettings
    ) -> dict[str, str]:
        """Map endpoint keys to mapping labels.

        Args:
            routes: Data routes of the layout.
            settings: Mapping-number settings.

        Returns:
            Label per endpoint key (``"<id>"`` or ``"<id>#<card>"``).
        """
        if settings.is_manual:
            return self._assign_manual(list(routes), settings)

        active = [r for r in routes if r.cabinet_steps]
        if not active:
            return {}

        labels: dict[str, str] = {}
        if settings.restart_per_card:
            grouped: dict[int, list[DataRoute]] = {}
            for route in _sort_routes(active):
                grouped.setdefault(dominant_card_index(route), []).append(route)
            for key in sorted(grouped):
                self._label_routes(_sort_routes(grouped[key]), settings.labels, labels)
            return labels

        self._label_routes(_sort_routes(active), settings.labels, labels)
        return labels

    def _label_routes(
        self, routes: list[DataRoute], supplied: tuple[float, ...], labels: dict[str, str]
    ) -> None:
        sequence = build_sequence(len(routes), supplied)
        for route, value in zip(routes, sequence):
            label = format_label_value(value)
            for step in route.cabinet_steps:
                labels[step.key] = label

    def _assign_manual(
        self, routes: list[DataRoute], settings: MappingNumberSettings
    ) -> dict[str, str]:
        labels: dict[str, str] = {}
        for route in routes:
            chain = settings.per_chain.get(route.id)
            for step in route.cabinet_steps:
                direct = settings.per_endpoint.get(step.key)
                value = (direct if direct is not None else chain or "").strip()
                if value:
                    labels[step.key] = value
        # Endpoint overrides outside every route are still reported.
        for key, value in settings.per_endpoint.items():
            trimmed = (value or "").strip()
            if trimmed and key not in labels:
                labels[key] = trimmed
        return labels

    def route_for_endpoint(
        self, routes: tuple[DataRoute, ...] | list[DataRoute], key: str
    ) -> str | None:
        """Id of the first route that visits endpoint ``key``."""
        target = CabinetStep.parse(key)
        for route in routes:
            if any(step == target for step in route.cabinet_steps):
                return route.id
        return None


def receiver_card_label(settings: LayoutSettings, cabinet: Cabinet) -> str | None:
    """Caption drawn on a cabinet's receiver card.

    Returns ``None`` when cards are hidden, the cabinet has no card, or its
    caption is explicitly hidden.
    """
    if not settings.overview.show_receiver_cards:
        return None
    if cabinet.card_count == 0:
        return None
    if cabinet.receiver_card_label is None:
        return None
    custom = cabinet.receiver_card_label.strip()
    if custom:
        return custom
    model = (settings.overview.receiver_card_model or "").strip()
    return model or DEFAULT_RECEIVER_CARD_MODEL


def grid_labels(layout: Layout, geometry: GeometryResolver | None = None) -> dict[str, str]:
    """Grid addresses for every resolvable cabinet in ``layout``."""
    labeler = GridAddressLabeler(geometry or GeometryResolver.for_layout(layout))
    return labeler.labels(layout.cabinets, layout.settings.overview.grid_label_axis)


def mapping_labels(layout: Layout) -> dict[str, str]:
    """Mapping numbers for every route endpoint in ``layout``."""
    return MappingNumberAssigner().assign(
        layout.data_routes, layout.settings.overview.mapping_numbers
    )
