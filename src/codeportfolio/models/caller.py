"""Explicit caller identity passed into every owner-scoped operation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallerContext:
    """Identity resolved from the session provider.

    Attributes:
        user_id: Opaque identifier of the signed-in user.
    """

    user_id: str
