"""Exception hierarchy for value-inspector.

``inspect`` itself never raises for a supported value; these exceptions
travel between the reflection layer and the descriptor builder, which
catches them per member and degrades the report instead.
"""

from __future__ import annotations

__all__ = ["InspectorError", "MemberAccessError"]


class InspectorError(Exception):
    """Base class for all value-inspector errors."""


class MemberAccessError(InspectorError):
    """A member's value could not be read, even under elevated access.

    Attributes:
        member: Name of the member that could not be read.
    """

    def __init__(self, member: str, message: str) -> None:
        super().__init__(message)
        self.member = member
