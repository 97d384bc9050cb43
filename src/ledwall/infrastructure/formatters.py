"""Output formatters and exporters for layout analyses."""

from __future__ import annotations

import json
from typing import Any

from ledwall.application.dtos import LayoutAnalysis
from ledwall.domain.value_objects import (
    LabelBox,
    Point2D,
    RoutePath,
    ValidationError,
    ValidationReport,
)


def _fmt_mm(value: float) -> str:
    return f"{value:.1f}"


def _fmt_point(point: Point2D) -> str:
    return f"({point.x:.1f}, {point.y:.1f})"


class ValidationReportFormatter:
    """Formats validation findings for display."""

    def format(self, report: ValidationReport) -> str:
        if not report.findings:
            return "No issues found."

        lines: list[str] = []
        if report.errors:
            lines.append("Errors:")
            lines.extend(self._format_finding(f) for f in report.errors)
        if report.warnings:
            if lines:
                lines.append("")
            lines.append("Warnings:")
            lines.extend(self._format_finding(f) for f in report.warnings)
        return "\n".join(lines)

    def _format_finding(self, finding: ValidationError) -> str:
        return f"  [{finding.code.value}] {finding.message}"


class LayoutReportFormatter:
    """Formats a full analysis as a plain-text report.

    Sections: summary, cabinets, validation, data ports, controller and
    power feeds.
    """

    def __init__(self) -> None:
        self._validation = ValidationReportFormatter()

    def format(self, analysis: LayoutAnalysis) -> str:
        settings = analysis.layout.settings
        title = settings.name or "Layout"
        lines = [
            f"LAYOUT REPORT: {title}",
            "=" * 70,
        ]
        if settings.client:
            lines.append(f"Client: {settings.client}")
        lines.append(
            f"Mode: {settings.mode.value}  Pitch: {settings.pitch_mm:g} mm  "
            f"Controller: {settings.controller.value}"
        )
        if analysis.extent.is_empty:
            lines.append("Wall size: (no resolvable cabinets)")
        else:
            lines.append(
                f"Wall size: {_fmt_mm(analysis.extent.width)} x "
                f"{_fmt_mm(analysis.extent.height)} mm "
                f"({len(analysis.groups)} screen(s))"
            )
        lines.append(
            f"Pixel matrix: {analysis.pixel_matrix.width_px} x "
            f"{analysis.pixel_matrix.height_px} px"
        )
        lines.append("")
        lines.extend(self._format_cabinets(analysis))
        lines.append("")
        lines.append("VALIDATION")
        lines.append("-" * 70)
        lines.append(self._validation.format(analysis.validation))
        lines.append("")
        lines.extend(self._format_ports(analysis))
        lines.append("")
        lines.extend(self._format_controller(analysis))
        lines.append("")
        lines.extend(self._format_feeds(analysis))
        return "\n".join(lines)

    def _format_cabinets(self, analysis: LayoutAnalysis) -> list[str]:
        lines = [
            "CABINETS",
            "-" * 70,
            f"{'Id':<12} {'Grid':<6} {'Type':<16} {'X':>8} {'Y':>8} {'Rot':>4} {'Pixels':>10}",
        ]
        for cabinet in analysis.layout.cabinets:
            grid = analysis.grid_labels.get(cabinet.id, "-")
            pixels = analysis.cabinet_pixels.get(cabinet.id)
            pixel_text = f"{pixels:,}" if pixels is not None else "n/a"
            lines.append(
                f"{cabinet.id:<12} {grid:<6} {cabinet.type_id:<16} "
                f"{cabinet.x_mm:>8.1f} {cabinet.y_mm:>8.1f} {cabinet.rotation:>4} {pixel_text:>10}"
            )
        if not analysis.layout.cabinets:
            lines.append("  (none)")
        return lines

    def _format_ports(self, analysis: LayoutAnalysis) -> list[str]:
        lines = ["DATA PORTS", "-" * 70]
        if not analysis.route_loads:
            lines.append("  (none)")
            return lines
        for load in analysis.route_loads:
            status = "OVER CAPACITY" if load.is_over_capacity else "ok"
            lines.append(
                f"  Port {load.port} ({load.route_id}): {load.load_px:,.0f} / "
                f"{load.max_px:,} px ({load.utilization:.0%}) {status}"
            )
        return lines

    def _format_controller(self, analysis: LayoutAnalysis) -> list[str]:
        lines = ["CONTROLLER", "-" * 70]
        load = analysis.controller_load
        if load is None:
            lines.append("  (not computed)")
            return lines
        lines.append(
            f"  {load.controller.value}: {load.total_px:,} / {load.limits.total_max_px:,} px"
            f"{'  OVER' if load.over_total else ''}"
        )
        if load.limits.max_width_px:
            lines.append(
                f"  Width: {load.width_px} / {load.limits.max_width_px} px"
                f"{'  OVER' if load.over_width else ''}"
            )
        if load.limits.max_height_px:
            lines.append(
                f"  Height: {load.height_px} / {load.limits.max_height_px} px"
                f"{'  OVER' if load.over_height else ''}"
            )
        return lines

    def _format_feeds(self, analysis: LayoutAnalysis) -> list[str]:
        lines = ["POWER FEEDS", "-" * 70]
        if not analysis.feed_loads:
            lines.append("  (none)")
            return lines
        feeds = {feed.id: feed for feed in analysis.layout.power_feeds}
        for load in analysis.feed_loads:
            feed = feeds.get(load.feed_id)
            name = (feed.breaker or feed.label) if feed else load.feed_id
            limit = f"{load.safe_max_w} W" if load.safe_max_w is not None else "no limit"
            status = "OVERLOADED" if load.is_overloaded else "ok"
            lines.append(f"  {name} ({load.feed_id}): {load.load_w} W / {limit} {status}")
        return lines


class RouteFormatter:
    """Formats synthesised route and feed paths as text."""

    def format(self, analysis: LayoutAnalysis) -> str:
        lines = ["DATA ROUTES", "=" * 70]
        if not analysis.route_paths:
            lines.append("  (none)")
        for path in analysis.route_paths:
            lines.extend(self._format_path(path, analysis.mapping_labels))
        lines.append("")
        lines.append("POWER FEEDS")
        lines.append("=" * 70)
        if not analysis.feed_paths:
            lines.append("  (none)")
        for path in analysis.feed_paths:
            lines.extend(self._format_path(path, {}))
        return "\n".join(lines)

    def _format_path(self, path: RoutePath, mapping: dict[str, str]) -> list[str]:
        lines = [f"{path.route_id}:"]
        if path.is_empty:
            lines.append("  (no resolvable endpoints)")
            return lines
        for anchor in path.anchors:
            if anchor.is_free_point:
                lines.append(f"  point {_fmt_point(anchor.point)}")
                continue
            key = anchor.cabinet_id or ""
            if anchor.card_count == 2 and anchor.card_index is not None:
                key = f"{key}#{anchor.card_index}"
            tags = []
            if anchor.port_role is not None:
                tags.append(anchor.port_role.value)
            if anchor.is_virtual:
                tags.append("virtual")
            if key in mapping:
                tags.append(f"map {mapping[key]}")
            suffix = f" [{', '.join(tags)}]" if tags else ""
            lines.append(f"  {key} {_fmt_point(anchor.point)}{suffix}")
        for index, line in enumerate(path.polylines, start=1):
            points = " -> ".join(_fmt_point(p) for p in line)
            lines.append(f"  path {index}: {points}")
        if path.terminal_marker is not None:
            marker = path.terminal_marker
            lines.append(f"  end {_fmt_point(marker.point)} {marker.direction.value}")
        return lines


class JsonExporter:
    """Exports a layout analysis as JSON."""

    def export(self, analysis: LayoutAnalysis) -> str:
        """Export the analysis as a JSON string."""
        return json.dumps(self.to_dict(analysis), indent=2)

    def to_dict(self, analysis: LayoutAnalysis) -> dict[str, Any]:
        controller = analysis.controller_load
        return {
            "extent": None
            if analysis.extent.is_empty
            else {
                "min_x": analysis.extent.min_x,
                "min_y": analysis.extent.min_y,
                "max_x": analysis.extent.max_x,
                "max_y": analysis.extent.max_y,
            },
            "cabinets": [
                {
                    "id": cabinet_id,
                    "x": rect.x,
                    "y": rect.y,
                    "width": rect.width,
                    "height": rect.height,
                    "pixels": analysis.cabinet_pixels.get(cabinet_id, 0),
                    "grid_label": analysis.grid_labels.get(cabinet_id),
                    "card_label": analysis.card_labels.get(cabinet_id),
                }
                for cabinet_id, rect in analysis.bounds.items()
            ],
            "validation": {
                "is_valid": analysis.validation.is_valid,
                "findings": [
                    {
                        "severity": f.severity.value,
                        "code": f.code.value,
                        "message": f.message,
                        "cabinet_ids": list(f.cabinet_ids),
                    }
                    for f in analysis.validation.findings
                ],
            },
            "capacity": {
                "routes": [
                    {
                        "route_id": load.route_id,
                        "port": load.port,
                        "load_px": load.load_px,
                        "max_px": load.max_px,
                        "over_capacity": load.is_over_capacity,
                    }
                    for load in analysis.route_loads
                ],
                "controller": None
                if controller is None
                else {
                    "model": controller.controller.value,
                    "total_px": controller.total_px,
                    "width_px": controller.width_px,
                    "height_px": controller.height_px,
                    "over_capacity": controller.is_over_capacity,
                },
                "pixel_matrix": {
                    "width_px": analysis.pixel_matrix.width_px,
                    "height_px": analysis.pixel_matrix.height_px,
                },
                "feeds": [
                    {
                        "feed_id": load.feed_id,
                        "breaker": load.breaker,
                        "load_w": load.load_w,
                        "safe_max_w": load.safe_max_w,
                        "overloaded": load.is_overloaded,
                    }
                    for load in analysis.feed_loads
                ],
            },
            "mapping_labels": dict(analysis.mapping_labels),
            "routes": [self._path_dict(p) for p in analysis.route_paths],
            "feeds": [self._path_dict(p) for p in analysis.feed_paths],
            "labels": [self._label_dict(label) for label in analysis.labels.labels],
        }

    def _path_dict(self, path: RoutePath) -> dict[str, Any]:
        marker = path.terminal_marker
        return {
            "id": path.route_id,
            "anchors": [
                {
                    "x": a.x,
                    "y": a.y,
                    "cabinet_id": a.cabinet_id,
                    "card_index": a.card_index,
                    "virtual": a.is_virtual,
                    "port_role": a.port_role.value if a.port_role else None,
                }
                for a in path.anchors
            ],
            "polylines": [[[p.x, p.y] for p in line] for line in path.polylines],
            "terminal_marker": None
            if marker is None
            else {"x": marker.point.x, "y": marker.point.y, "direction": marker.direction.value},
        }

    def _label_dict(self, label: LabelBox) -> dict[str, Any]:
        return {
            "kind": label.kind.value,
            "owner_id": label.owner_id,
            "text": list(label.lines),
            "x": label.x,
            "y": label.y,
            "width": label.width,
            "height": label.height,
            "side": label.side.value if label.side else None,
        }
