"""History action (audit entry) domain model.

One immutable record of an action taken on a declaration. Entries are
append-only: they are created by a transition or a manual annotation and are
never updated or deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

# Action label prefix for entries written by the transition engine
TRANSITION_ACTION_PREFIX = "status_changed"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class HistoryAction:
    """An audit entry attached to a declaration.

    Attributes:
        id: Unique identifier.
        declaration_id: Parent declaration reference.
        action: Action label (e.g. "status_changed:New->Transmitted").
        created_at: When the action was recorded (UTC).
        actor_id: Acting user (nullable for system actions).
        notes: Free-text notes (nullable).
    """

    id: str
    declaration_id: str
    action: str
    created_at: datetime = field(default_factory=_utc_now)
    actor_id: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if not self.action.strip():
            raise ValueError("History action label cannot be empty")

    @classmethod
    def create(
        cls,
        declaration_id: str,
        action: str,
        actor_id: str | None = None,
        notes: str | None = None,
    ) -> HistoryAction:
        """Create a new entry with a generated id and current timestamp."""
        return cls(
            id=str(uuid4()),
            declaration_id=declaration_id,
            action=action,
            actor_id=actor_id,
            notes=notes,
        )

    @classmethod
    def for_transition(
        cls,
        declaration_id: str,
        from_status: str,
        to_status: str,
        actor_id: str | None = None,
        notes: str | None = None,
    ) -> HistoryAction:
        """Create the entry recording a status transition."""
        return cls.create(
            declaration_id=declaration_id,
            action=f"{TRANSITION_ACTION_PREFIX}:{from_status}->{to_status}",
            actor_id=actor_id,
            notes=notes,
        )
