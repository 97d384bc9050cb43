"""Reading layout documents from disk.

A layout document is checked in three passes, each reported in terms of the
document itself rather than the Python models behind it:

1. the file must exist and hold a JSON object,
2. ``schema_version`` must be present and of a supported major version,
3. the whole document must match :class:`LayoutConfiguration`.

Route and feed steps are a tagged union keyed by ``type``. Problems inside a
step are reported against the step's position (``data_routes[0].steps[2]``)
together with the step kind, and an unknown or missing ``type`` is named as
such.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ledwall.application.config.schema import SUPPORTED_VERSIONS, LayoutConfiguration

logger = logging.getLogger(__name__)

STEP_TYPES = ("cabinet", "point")
_STEP_LISTS = ("steps",)
_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)$")


@dataclass(frozen=True)
class DocumentIssue:
    """One problem found in a layout document.

    Attributes:
        location: Where the problem is, e.g. ``cabinets[0].rotation`` or
            ``line 4, column 12``.
        message: What is wrong, in document terms.
        value: Offending value, when it is a scalar worth echoing.
    """

    location: str
    message: str
    value: Any = None


class LayoutLoadError(Exception):
    """Raised when a layout document cannot be read or does not validate.

    Attributes:
        message: Summary suitable for printing as-is.
        error_type: One of ``file_not_found``, ``file_read_error``,
            ``json_parse``, ``not_an_object``, ``version`` or ``validation``.
        path: Document path, ``None`` for in-memory documents.
        issues: Individual problems, in document order.
    """

    def __init__(
        self,
        message: str,
        error_type: str,
        path: Path | None = None,
        issues: list[DocumentIssue] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.path = path
        self.issues = issues or []

    def __str__(self) -> str:
        return self.message


def document_path(loc: tuple[str | int, ...]) -> str:
    """Render a model location as a document path.

    >>> document_path(("cabinets", 0, "rotation"))
    'cabinets[0].rotation'
    """
    rendered = ""
    for segment in loc:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = str(segment)
    return rendered


def _split_step_tag(loc: tuple[str | int, ...]) -> tuple[tuple[str | int, ...], str | None]:
    """Drop the union tag pydantic inserts after a step index.

    ``("data_routes", 0, "steps", 1, "cabinet", "card_index")`` becomes
    ``("data_routes", 0, "steps", 1, "card_index")`` with kind ``"cabinet"``.
    """
    kept: list[str | int] = []
    kind = None
    for i, segment in enumerate(loc):
        in_step = i >= 2 and isinstance(loc[i - 1], int) and loc[i - 2] in _STEP_LISTS
        if in_step and segment in STEP_TYPES:
            kind = segment
            continue
        kept.append(segment)
    return tuple(kept), kind


def _issue_from_error(error: dict[str, Any]) -> DocumentIssue:
    loc, step_kind = _split_step_tag(tuple(error["loc"]))
    kind = error["type"]
    value = error.get("input")
    expected = ", ".join(STEP_TYPES)

    if kind == "union_tag_invalid":
        tag = (error.get("ctx") or {}).get("tag")
        message = f"unknown step type {tag!r}; expected one of: {expected}"
        value = None
    elif kind == "union_tag_not_found":
        message = f"step has no 'type'; expected one of: {expected}"
        value = None
    elif kind == "extra_forbidden":
        message = "unknown field"
    elif kind == "missing":
        message = "required field is missing"
        value = None
    else:
        message = error["msg"]

    if step_kind is not None:
        message = f"{step_kind} step: {message}"
    if isinstance(value, (dict, list)):
        value = None
    return DocumentIssue(location=document_path(loc), message=message, value=value)


def _describe(issues: list[DocumentIssue], path: Path | None) -> str:
    source = f"Layout document {path}" if path is not None else "Layout document"
    lines = [f"{source} is invalid:"]
    for issue in issues:
        suffix = f" (got: {issue.value!r})" if issue.value is not None else ""
        lines.append(f"  - {issue.location}: {issue.message}{suffix}")
    return "\n".join(lines)


def _check_version(data: dict[str, Any], path: Path | None) -> None:
    supported = ", ".join(sorted(SUPPORTED_VERSIONS))
    if "schema_version" not in data:
        issue = DocumentIssue("schema_version", f"required; supported versions: {supported}")
    else:
        version = data["schema_version"]
        match = _VERSION_PATTERN.match(version) if isinstance(version, str) else None
        if match is None:
            issue = DocumentIssue(
                "schema_version", "expected a 'major.minor' string such as '2.0'", version
            )
        else:
            majors = {v.split(".")[0] for v in SUPPORTED_VERSIONS}
            if match.group(1) in majors:
                return
            issue = DocumentIssue(
                "schema_version", f"unsupported; supported versions: {supported}", version
            )
    raise LayoutLoadError(_describe([issue], path), "version", path, [issue])


def _parse(data: Any, path: Path | None) -> LayoutConfiguration:
    if not isinstance(data, dict):
        issue = DocumentIssue("", f"expected a JSON object, got {type(data).__name__}")
        raise LayoutLoadError(_describe([issue], path), "not_an_object", path, [issue])

    _check_version(data, path)
    try:
        config = LayoutConfiguration.model_validate(data)
    except PydanticValidationError as e:
        issues = [_issue_from_error(err) for err in e.errors()]
        raise LayoutLoadError(_describe(issues, path), "validation", path, issues) from e

    logger.debug(
        f"Parsed layout v{config.schema_version}: {len(config.cabinets)} cabinets, "
        f"{len(config.data_routes)} routes, {len(config.power_feeds)} feeds"
    )
    return config


def load_layout(path: Path) -> LayoutConfiguration:
    """Read and validate a layout document.

    Raises:
        LayoutLoadError: If the file is missing, unreadable, not JSON, or
            does not describe a valid layout.
    """
    path = Path(path)
    if not path.is_file():
        raise LayoutLoadError(f"Layout file not found: {path}", "file_not_found", path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LayoutLoadError(f"Cannot read layout file {path}: {e}", "file_read_error", path) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        issue = DocumentIssue(f"line {e.lineno}, column {e.colno}", e.msg)
        raise LayoutLoadError(
            f"Layout file {path} is not valid JSON ({issue.location}): {e.msg}",
            "json_parse",
            path,
            [issue],
        ) from e

    logger.debug(f"Read layout file {path}")
    return _parse(data, path)


def load_layout_from_dict(data: dict[str, Any]) -> LayoutConfiguration:
    """Validate an in-memory layout document.

    Raises:
        LayoutLoadError: If the document does not describe a valid layout.
    """
    return _parse(data, None)
