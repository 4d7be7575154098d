"""Shared domain primitives."""

from __future__ import annotations

import enum

# Sentinel used to differentiate between "not provided" and explicit None.
UNSET = object()


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


__all__ = ["SortOrder", "UNSET"]
