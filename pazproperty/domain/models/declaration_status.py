"""Declaration status registry.

Canonical, locale-agnostic enumeration of declaration states and the legal
transition graph. The graph is data: a mapping from each state to the set of
states it may move to. Nothing else in the code base is allowed to invent
status strings.

State Machine:
    New -> Transmitted -> AwaitingDiagnosticMeeting
        -> DiagnosticMeetingScheduled -> QuoteReceived -> InRepair -> Resolved

    Cancelled is reachable from every non-terminal state.

Terminal States:
    Resolved and Cancelled have no outgoing transitions.
"""

from __future__ import annotations

from enum import Enum


class DeclarationStatus(Enum):
    """State in the declaration lifecycle.

    States:
        NEW: Initial state after submission
        TRANSMITTED: Acknowledged and forwarded for triage
        AWAITING_DIAGNOSTIC_MEETING: Provider assigned, meeting not yet planned
        DIAGNOSTIC_MEETING_SCHEDULED: Diagnostic visit has a future date
        QUOTE_RECEIVED: Provider quote received after the diagnostic
        IN_REPAIR: Repair work in progress
        RESOLVED: Intervention completed (terminal)
        CANCELLED: Declaration abandoned (terminal)
    """

    NEW = "New"
    TRANSMITTED = "Transmitted"
    AWAITING_DIAGNOSTIC_MEETING = "AwaitingDiagnosticMeeting"
    DIAGNOSTIC_MEETING_SCHEDULED = "DiagnosticMeetingScheduled"
    QUOTE_RECEIVED = "QuoteReceived"
    IN_REPAIR = "InRepair"
    RESOLVED = "Resolved"
    CANCELLED = "Cancelled"

    def is_terminal(self) -> bool:
        """Check if this state is terminal (no outgoing transitions)."""
        return self in TERMINAL_STATES

    def valid_transitions(self) -> frozenset[DeclarationStatus]:
        """Get the states reachable from this state in one step.

        Returns:
            Frozenset of permitted target states. Empty for terminal states.
        """
        return STATUS_TRANSITION_GRAPH.get(self, frozenset())

    @classmethod
    def parse(cls, value: str | DeclarationStatus) -> DeclarationStatus:
        """Parse a status identifier into a registry member.

        Args:
            value: Status identifier (e.g. "Transmitted") or a member.

        Returns:
            The matching DeclarationStatus.

        Raises:
            ValueError: If the value is not a member of the closed set.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(
                f"Unknown declaration status: {value!r}. Valid statuses: {valid}"
            ) from None


TERMINAL_STATES: frozenset[DeclarationStatus] = frozenset(
    {
        DeclarationStatus.RESOLVED,
        DeclarationStatus.CANCELLED,
    }
)

# Main forward path; Cancelled is added to every non-terminal state below
_FORWARD_PATH: dict[DeclarationStatus, DeclarationStatus] = {
    DeclarationStatus.NEW: DeclarationStatus.TRANSMITTED,
    DeclarationStatus.TRANSMITTED: DeclarationStatus.AWAITING_DIAGNOSTIC_MEETING,
    DeclarationStatus.AWAITING_DIAGNOSTIC_MEETING: DeclarationStatus.DIAGNOSTIC_MEETING_SCHEDULED,
    DeclarationStatus.DIAGNOSTIC_MEETING_SCHEDULED: DeclarationStatus.QUOTE_RECEIVED,
    DeclarationStatus.QUOTE_RECEIVED: DeclarationStatus.IN_REPAIR,
    DeclarationStatus.IN_REPAIR: DeclarationStatus.RESOLVED,
}

STATUS_TRANSITION_GRAPH: dict[DeclarationStatus, frozenset[DeclarationStatus]] = {
    status: (
        frozenset()
        if status in TERMINAL_STATES
        else frozenset({_FORWARD_PATH[status], DeclarationStatus.CANCELLED})
    )
    for status in DeclarationStatus
}


def is_valid_transition(
    from_status: DeclarationStatus, to_status: DeclarationStatus
) -> bool:
    """Check whether ``from_status -> to_status`` is an edge of the graph."""
    return to_status in STATUS_TRANSITION_GRAPH[from_status]


def all_states() -> tuple[DeclarationStatus, ...]:
    """Return every state in lifecycle order (terminal states last)."""
    return tuple(DeclarationStatus)
