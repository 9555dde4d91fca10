"""State transition errors for the declaration lifecycle.

InvalidTransitionError covers requests for edges absent from the status
graph; PreconditionNotMetError covers structurally valid transitions whose
business rule is not satisfied yet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pazproperty.domain.exceptions import PazPropertyError

if TYPE_CHECKING:
    from pazproperty.domain.models.declaration_status import DeclarationStatus


class InvalidTransitionError(PazPropertyError):
    """Raised when a requested status change is not in the transition graph.

    Attributes:
        from_status: Current status of the declaration.
        to_status: Requested target status.
        allowed_transitions: Valid targets from the current status.
    """

    code = "invalid_transition"

    def __init__(
        self,
        from_status: DeclarationStatus,
        to_status: DeclarationStatus,
        allowed_transitions: list[DeclarationStatus] | None = None,
    ) -> None:
        self.from_status = from_status
        self.to_status = to_status
        self.allowed_transitions = sorted(
            allowed_transitions or [], key=lambda s: s.value
        )

        if from_status.is_terminal():
            suffix = f" {from_status.value} is a terminal status."
        elif self.allowed_transitions:
            suffix = (
                f" Valid transitions: {[s.value for s in self.allowed_transitions]}"
            )
        else:
            suffix = ""
        super().__init__(
            f"Invalid transition: {from_status.value} -> {to_status.value}.{suffix}"
        )


class PreconditionNotMetError(PazPropertyError):
    """Raised when a transition is valid in the graph but a business rule fails.

    Reasons:
        provider_required: AwaitingDiagnosticMeeting needs an assigned provider.
        appointment_required: DiagnosticMeetingScheduled needs a future appointment.
        declaration_closed: The declaration is in a terminal status.

    Attributes:
        reason: Machine-readable reason.
    """

    code = "precondition_not_met"

    def __init__(self, reason: str, detail: str | None = None) -> None:
        self.reason = reason
        super().__init__(detail or f"Precondition not met: {reason}")
