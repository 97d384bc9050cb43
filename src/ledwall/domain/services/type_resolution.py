"""Cabinet type resolution strategies.

A cabinet names its type by id. The registered catalog is consulted first;
only when that lookup fails is the id parsed for an embedded ``WxH`` size,
so free-form ids such as "custom 500x500" still resolve.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from ..value_objects import CabinetType

logger = logging.getLogger(__name__)

__all__ = [
    "TypeResolver",
    "CatalogTypeResolver",
    "PatternTypeResolver",
    "CabinetTypeResolver",
]

_SIZE_PATTERN = re.compile(r"(\d+)\s*x\s*(\d+)", re.IGNORECASE)


class TypeResolver(Protocol):
    """Strategy that maps a type id to nominal dimensions."""

    def resolve(self, type_id: str) -> CabinetType | None: ...


class CatalogTypeResolver:
    """Looks type ids up in a registered catalog."""

    def __init__(self, catalog: tuple[CabinetType, ...] | list[CabinetType]) -> None:
        self._types = {t.type_id: t for t in catalog}

    def resolve(self, type_id: str) -> CabinetType | None:
        return self._types.get(type_id)


class PatternTypeResolver:
    """Derives dimensions from a ``<W>x<H>`` fragment in the type id."""

    def resolve(self, type_id: str) -> CabinetType | None:
        match = _SIZE_PATTERN.search(type_id or "")
        if not match:
            return None
        width, height = int(match.group(1)), int(match.group(2))
        if width <= 0 or height <= 0:
            return None
        return CabinetType(type_id=type_id, width_mm=width, height_mm=height)


class CabinetTypeResolver:
    """Chains catalog lookup and pattern parsing, in that order.

    Attributes:
        strategies: Resolvers tried in order; the first hit wins.
    """

    def __init__(self, catalog: tuple[CabinetType, ...] | list[CabinetType]) -> None:
        self.strategies: tuple[TypeResolver, ...] = (
            CatalogTypeResolver(catalog),
            PatternTypeResolver(),
        )

    def resolve(self, type_id: str) -> CabinetType | None:
        """Resolve ``type_id`` or return ``None`` if no strategy matches."""
        for strategy in self.strategies:
            resolved = strategy.resolve(type_id)
            if resolved is not None:
                return resolved
        logger.debug(f"Unresolved cabinet type: {type_id!r}")
        return None
