"""Error taxonomy for the RPG core.

InvariantError marks a programming error (the caller skipped a precondition
check); NotFoundError marks an id that did not resolve. Soft failures such as
an empty inventory are no-ops and never raise.
"""
from __future__ import annotations

from typing import Any


class RpgError(Exception):
    """Base exception for all RPG errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class InvariantError(RpgError):
    """An operation was called in a state it does not allow."""


class NotFoundError(RpgError, LookupError):
    """A record id did not resolve."""

    def __init__(self, entity: str, entity_id: Any) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"No {entity} exists with this id: {entity_id}")
