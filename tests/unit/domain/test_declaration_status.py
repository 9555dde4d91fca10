"""Unit tests for the declaration status registry and transition graph."""

import pytest

from pazproperty.domain.models.declaration_status import (
    STATUS_TRANSITION_GRAPH,
    TERMINAL_STATES,
    DeclarationStatus,
    all_states,
    is_valid_transition,
)


class TestDeclarationStatus:
    """Tests for the closed set of states."""

    def test_exactly_eight_states(self) -> None:
        assert len(all_states()) == 8
        assert [s.value for s in all_states()] == [
            "New",
            "Transmitted",
            "AwaitingDiagnosticMeeting",
            "DiagnosticMeetingScheduled",
            "QuoteReceived",
            "InRepair",
            "Resolved",
            "Cancelled",
        ]

    def test_parse_known_identifier(self) -> None:
        assert DeclarationStatus.parse("InRepair") is DeclarationStatus.IN_REPAIR

    def test_parse_returns_member_unchanged(self) -> None:
        assert DeclarationStatus.parse(DeclarationStatus.NEW) is DeclarationStatus.NEW

    @pytest.mark.parametrize("value", ["Nouveau", "new", "", "Resolu"])
    def test_parse_rejects_unknown_identifier(self, value: str) -> None:
        with pytest.raises(ValueError, match="Unknown declaration status"):
            DeclarationStatus.parse(value)

    def test_terminal_states(self) -> None:
        assert TERMINAL_STATES == {DeclarationStatus.RESOLVED, DeclarationStatus.CANCELLED}
        assert DeclarationStatus.RESOLVED.is_terminal()
        assert not DeclarationStatus.IN_REPAIR.is_terminal()


class TestTransitionGraph:
    """Tests for the legal transition graph."""

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("New", "Transmitted"),
            ("Transmitted", "AwaitingDiagnosticMeeting"),
            ("AwaitingDiagnosticMeeting", "DiagnosticMeetingScheduled"),
            ("DiagnosticMeetingScheduled", "QuoteReceived"),
            ("QuoteReceived", "InRepair"),
            ("InRepair", "Resolved"),
        ],
    )
    def test_forward_path_edges(self, current: str, target: str) -> None:
        assert is_valid_transition(DeclarationStatus(current), DeclarationStatus(target))

    def test_every_non_terminal_state_can_cancel(self) -> None:
        for status in DeclarationStatus:
            if status.is_terminal():
                continue
            assert is_valid_transition(status, DeclarationStatus.CANCELLED)

    def test_terminal_states_have_no_outgoing_edges(self) -> None:
        for status in TERMINAL_STATES:
            assert status.valid_transitions() == frozenset()
            assert not any(is_valid_transition(status, t) for t in DeclarationStatus)

    def test_skipping_a_step_is_rejected(self) -> None:
        assert not is_valid_transition(DeclarationStatus.NEW, DeclarationStatus.IN_REPAIR)
        assert not is_valid_transition(
            DeclarationStatus.TRANSMITTED, DeclarationStatus.RESOLVED
        )

    def test_backward_moves_are_rejected(self) -> None:
        assert not is_valid_transition(
            DeclarationStatus.IN_REPAIR, DeclarationStatus.QUOTE_RECEIVED
        )

    def test_no_self_loops(self) -> None:
        for status in DeclarationStatus:
            assert not is_valid_transition(status, status)

    def test_graph_covers_every_state(self) -> None:
        assert set(STATUS_TRANSITION_GRAPH) == set(DeclarationStatus)
