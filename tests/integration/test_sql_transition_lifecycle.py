"""Integration tests: the transition engine on the SQLAlchemy repositories."""

from decimal import Decimal

import pytest

from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.application.services.provider_directory import ProviderDirectory
from pazproperty.application.services.transition_engine import (
    TransitionContext,
    TransitionEngine,
)
from pazproperty.domain.errors import InvalidTransitionError, ProviderNotAssignableError
from pazproperty.domain.models.declaration_status import DeclarationStatus
from pazproperty.domain.models.notification import NotificationEventType
from pazproperty.infrastructure.adapters.persistence import SqlHistoryActionRepository
from pazproperty.infrastructure.stubs import NotificationPortStub
from tests.helpers import ADMIN, PROVIDER_USER, declaration_payload, in_days

pytestmark = pytest.mark.integration


class TestSqlLifecycle:
    async def test_new_to_resolved(
        self,
        sql_engine: TransitionEngine,
        sql_store: DeclarationStore,
        notifier: NotificationPortStub,
    ) -> None:
        declaration = await sql_store.create(declaration_payload())

        await sql_engine.transition(declaration.id, "Transmitted", actor=ADMIN)
        await sql_engine.transition(
            declaration.id,
            "AwaitingDiagnosticMeeting",
            TransitionContext(provider_id="p-plumb"),
            actor=ADMIN,
        )
        when = in_days(2)
        await sql_engine.schedule_appointment(
            declaration.id, when.isoformat(), actor=PROVIDER_USER
        )
        await sql_engine.transition(
            declaration.id, "DiagnosticMeetingScheduled", actor=PROVIDER_USER
        )
        await sql_engine.transition(
            declaration.id,
            "QuoteReceived",
            TransitionContext(quote_amount=Decimal("1250.00")),
            actor=PROVIDER_USER,
        )
        await sql_engine.transition(declaration.id, "InRepair", actor=ADMIN)
        await sql_engine.transition(declaration.id, "Resolved", actor=ADMIN)

        final = await sql_store.get(declaration.id)
        assert final.status == DeclarationStatus.RESOLVED
        assert final.version == 7
        assert final.appointment_at == when
        assert final.quote_amount == Decimal("1250.00")
        assert final.resolved_at is not None

        history = await sql_engine.history(declaration.id)
        assert [h.action for h in history] == [
            "status_changed:New->Transmitted",
            "status_changed:Transmitted->AwaitingDiagnosticMeeting",
            "status_changed:AwaitingDiagnosticMeeting->DiagnosticMeetingScheduled",
            "status_changed:DiagnosticMeetingScheduled->QuoteReceived",
            "status_changed:QuoteReceived->InRepair",
            "status_changed:InRepair->Resolved",
        ]

        records = await sql_engine.notifications(declaration.id)
        assert len(records) == 6
        assert records[0].event_type == NotificationEventType.RESOLVED
        assert all(r.delivered for r in records)
        assert notifier.events()[-1] == NotificationEventType.RESOLVED

    async def test_rejected_transition_leaves_row_untouched(
        self,
        sql_engine: TransitionEngine,
        sql_store: DeclarationStore,
        sql_history: SqlHistoryActionRepository,
    ) -> None:
        declaration = await sql_store.create(declaration_payload())

        with pytest.raises(InvalidTransitionError):
            await sql_engine.transition(declaration.id, "Resolved", actor=ADMIN)

        current = await sql_store.get(declaration.id)
        assert current.status == DeclarationStatus.NEW
        assert current.version == 0
        assert await sql_history.list_for_declaration(declaration.id) == []

    async def test_archived_provider_cannot_be_assigned(
        self,
        sql_engine: TransitionEngine,
        sql_store: DeclarationStore,
        sql_directory: ProviderDirectory,
    ) -> None:
        declaration = await sql_store.create(declaration_payload())
        await sql_directory.archive("p-plumb")

        with pytest.raises(ProviderNotAssignableError):
            await sql_engine.assign_provider(declaration.id, "p-plumb", actor=ADMIN)

        assert (await sql_store.get(declaration.id)).provider_id is None
