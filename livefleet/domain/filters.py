"""Flight filter strategies for matching an airline's pilots."""

from __future__ import annotations

from enum import Enum


class FilterType(str, Enum):
    """Supported strategies for selecting the airline's flights."""

    SUFFIX = "suffix"
    VIRTUAL_ORG = "virtual_org"


DEFAULT_FILTER_TYPE: FilterType = FilterType.VIRTUAL_ORG

__all__ = ["FilterType", "DEFAULT_FILTER_TYPE"]
