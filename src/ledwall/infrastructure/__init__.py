"""Infrastructure layer - output formatters and exporters."""

from .formatters import (
    JsonExporter,
    LayoutReportFormatter,
    RouteFormatter,
    ValidationReportFormatter,
)

__all__ = [
    "JsonExporter",
    "LayoutReportFormatter",
    "RouteFormatter",
    "ValidationReportFormatter",
]
