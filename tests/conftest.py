"""Pytest configuration and shared fixtures for LED wall tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from ledwall.domain import (
    Cabinet,
    CabinetStep,
    DataRoute,
    GeometryResolver,
    Layout,
    LayoutSettings,
    PowerFeed,
)
from ledwall.domain.value_objects import CabinetType

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "layouts"


def grid_cabinets(
    columns: int,
    rows: int,
    width: float = 1000.0,
    height: float = 500.0,
    type_id: str = "PANEL",
    **kwargs,
) -> tuple[Cabinet, ...]:
    """Build a row-major grid of touching cabinets named C1, C2, ..."""
    cabinets = []
    for row in range(rows):
        for col in range(columns):
            index = row * columns + col + 1
            cabinets.append(
                Cabinet(
                    id=f"C{index}",
                    type_id=type_id,
                    x_mm=col * width,
                    y_mm=row * height,
                    **kwargs,
                )
            )
    return tuple(cabinets)


@pytest.fixture
def fixtures_path() -> Path:
    return FIXTURES_PATH


@pytest.fixture
def panel_type() -> CabinetType:
    """A 1000 x 500 mm catalog type."""
    return CabinetType(type_id="PANEL", width_mm=1000.0, height_mm=500.0)


@pytest.fixture
def grid_layout(panel_type: CabinetType) -> Layout:
    """A 2 x 2 wall of 1000 x 500 cabinets chained row-major on port 1."""
    cabinets = grid_cabinets(2, 2)
    route = DataRoute(
        id="R1",
        port=1,
        steps=tuple(CabinetStep(c.id) for c in cabinets),
    )
    feed = PowerFeed(
        id="F1",
        label="Circuit 1",
        breaker="220V 20A",
        steps=tuple(CabinetStep(c.id) for c in cabinets),
    )
    return Layout(
        cabinets=cabinets,
        cabinet_types=(panel_type,),
        data_routes=(route,),
        power_feeds=(feed,),
        settings=LayoutSettings(name="Test Wall"),
    )


@pytest.fixture
def geometry(grid_layout: Layout) -> GeometryResolver:
    return GeometryResolver.for_layout(grid_layout)


@pytest.fixture
def make_grid():
    """Factory fixture building row-major cabinet grids."""
    return grid_cabinets
