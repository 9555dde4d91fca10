"""Declaration transition engine.

The single entry point for lifecycle mutation. Every status change,
provider assignment and appointment goes through this service, which:

1. Serializes operations per declaration id (keyed asyncio locks)
2. Validates the move against the status graph, the caller's role and the
   business preconditions
3. Commits lifecycle fields with a version compare-and-swap, reloading and
   re-validating on conflict
4. Appends the audit entry; if that fails the lifecycle write is reverted
5. Dispatches the notification best-effort with a bounded timeout

Transition table:
    New -> Transmitted                                   notify: received
    Transmitted -> AwaitingDiagnosticMeeting             needs provider
    AwaitingDiagnosticMeeting -> DiagnosticMeetingScheduled
                                                         needs future appointment
    DiagnosticMeetingScheduled -> QuoteReceived          notify: admin
    QuoteReceived -> InRepair                            notify: reporter;
                                                         optional quote decision
    InRepair -> Resolved                                 sets resolved_at
    any non-terminal -> Cancelled                        optional reason
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from pazproperty.application.ports.history_action_repository import (
    HistoryActionRepositoryProtocol,
)
from pazproperty.application.ports.notification_log_repository import (
    NotificationLogRepositoryProtocol,
)
from pazproperty.application.ports.notification_port import NotificationPortProtocol
from pazproperty.application.services.access import (
    require_admin,
    require_admin_or_assigned_provider,
    require_authenticated,
)
from pazproperty.application.services.base import LoggingMixin
from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.application.services.provider_directory import ProviderDirectory
from pazproperty.config.declaration_config import DeclarationEngineConfig
from pazproperty.domain.errors.declaration import ConcurrentModificationError
from pazproperty.domain.errors.not_found import ProviderNotFoundError
from pazproperty.domain.errors.notification import NotificationDeliveryFailedError
from pazproperty.domain.errors.state_transition import (
    InvalidTransitionError,
    PreconditionNotMetError,
)
from pazproperty.domain.errors.validation import ValidationError
from pazproperty.domain.exceptions import PazPropertyError
from pazproperty.domain.models.declaration import LIFECYCLE_FIELDS, Declaration
from pazproperty.domain.models.declaration_status import (
    DeclarationStatus,
    is_valid_transition,
)
from pazproperty.domain.models.history_action import (
    TRANSITION_ACTION_PREFIX,
    HistoryAction,
)
from pazproperty.domain.models.identity import SYSTEM_ACTOR, CallerIdentity
from pazproperty.domain.models.notification import (
    NotificationEventType,
    NotificationRecord,
    Recipient,
    RecipientRole,
)
from pazproperty.infrastructure.monitoring.metrics import (
    MetricsCollector,
    get_metrics_collector,
)

EVENT_FOR_STATUS: dict[DeclarationStatus, NotificationEventType] = {
    DeclarationStatus.TRANSMITTED: NotificationEventType.RECEIVED,
    DeclarationStatus.AWAITING_DIAGNOSTIC_MEETING: NotificationEventType.PROVIDER_ASSIGNED,
    DeclarationStatus.DIAGNOSTIC_MEETING_SCHEDULED: NotificationEventType.APPOINTMENT_SCHEDULED,
    DeclarationStatus.QUOTE_RECEIVED: NotificationEventType.QUOTE_READY,
    DeclarationStatus.IN_REPAIR: NotificationEventType.IN_REPAIR,
    DeclarationStatus.RESOLVED: NotificationEventType.RESOLVED,
    DeclarationStatus.CANCELLED: NotificationEventType.CANCELLED,
}

RECIPIENT_ROLES: dict[NotificationEventType, tuple[RecipientRole, ...]] = {
    NotificationEventType.RECEIVED: (RecipientRole.REPORTER, RecipientRole.ADMIN),
    NotificationEventType.PROVIDER_ASSIGNED: (
        RecipientRole.PROVIDER,
        RecipientRole.REPORTER,
    ),
    NotificationEventType.APPOINTMENT_SCHEDULED: (
        RecipientRole.REPORTER,
        RecipientRole.PROVIDER,
        RecipientRole.ADMIN,
    ),
    NotificationEventType.QUOTE_READY: (RecipientRole.ADMIN,),
    NotificationEventType.IN_REPAIR: (RecipientRole.REPORTER,),
    NotificationEventType.RESOLVED: (RecipientRole.REPORTER,),
    NotificationEventType.CANCELLED: (RecipientRole.REPORTER,),
}

# Transitions only an administrator may request
ADMIN_ONLY_TARGETS: frozenset[DeclarationStatus] = frozenset(
    {DeclarationStatus.RESOLVED, DeclarationStatus.CANCELLED}
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_instant(value: str | datetime, field_name: str = "when_iso") -> datetime:
    """Parse an ISO-8601 instant. Naive values are taken as UTC.

    Raises:
        ValidationError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip() if isinstance(value, str) else ""
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(
                "invalid_datetime",
                [field_name],
                message=f"{field_name} is not an ISO-8601 date/time: {value!r}",
            ) from None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class TransitionContext:
    """Optional data supplied with a transition request.

    Attributes:
        provider_id: Provider to link (administrators only).
        appointment_at: Diagnostic appointment; must be in the future.
        meeting_notes: Notes about the diagnostic meeting.
        quote_amount: Quote amount, typically with QuoteReceived.
        quote_approved: Administrator decision on the quote; only with
            InRepair.
        quote_rejection_reason: Required when the quote is rejected.
        reason: Free-text reason recorded on the audit entry (e.g. why a
            declaration was cancelled).
    """

    provider_id: str | None = None
    appointment_at: datetime | None = None
    meeting_notes: str | None = None
    quote_amount: Decimal | None = None
    quote_approved: bool | None = None
    quote_rejection_reason: str | None = None
    reason: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> TransitionContext:
        """Build a context from a request payload (snake or camelCase keys).

        Raises:
            ValidationError: On unknown keys or unparsable values.
        """
        if not data:
            return cls()
        aliases = {
            "providerId": "provider_id",
            "prestador_id": "provider_id",
            "appointmentAt": "appointment_at",
            "whenISO": "appointment_at",
            "meetingNotes": "meeting_notes",
            "quoteAmount": "quote_amount",
            "quoteApproved": "quote_approved",
            "quoteRejectionReason": "quote_rejection_reason",
        }
        values = {aliases.get(k, k): v for k, v in data.items() if v is not None}
        unknown = sorted(set(values) - set(cls.__dataclass_fields__))
        if unknown:
            raise ValidationError("unknown_fields", unknown)

        if "appointment_at" in values:
            values["appointment_at"] = parse_instant(
                values["appointment_at"], "appointment_at"
            )
        if "quote_amount" in values:
            try:
                amount = Decimal(str(values["quote_amount"]))
            except InvalidOperation:
                raise ValidationError("invalid_values", ["quote_amount"]) from None
            if not amount.is_finite() or amount < 0:
                raise ValidationError("invalid_values", ["quote_amount"])
            values["quote_amount"] = amount
        if "quote_approved" in values and not isinstance(values["quote_approved"], bool):
            raise ValidationError("invalid_values", ["quote_approved"])
        return cls(**values)


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a committed transition.

    Attributes:
        declaration: The declaration after the transition.
        history_action: Audit entry appended for the transition.
        notification_delivered: Whether the notification port confirmed
            delivery.
        warnings: Non-fatal problems (notification failures).
    """

    declaration: Declaration
    history_action: HistoryAction
    notification_delivered: bool
    warnings: tuple[NotificationDeliveryFailedError, ...] = field(default=())


class _KeyedLocks:
    """Per-key asyncio locks, dropped once no task holds or waits on them."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


ChangeBuilder = Callable[[Declaration], Awaitable[dict[str, Any]]]


class TransitionEngine(LoggingMixin):
    """Validates and applies declaration lifecycle changes."""

    def __init__(
        self,
        store: DeclarationStore,
        providers: ProviderDirectory,
        history: HistoryActionRepositoryProtocol,
        notification_log: NotificationLogRepositoryProtocol,
        notifier: NotificationPortProtocol,
        config: DeclarationEngineConfig | None = None,
        metrics: MetricsCollector | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._providers = providers
        self._history = history
        self._notification_log = notification_log
        self._notifier = notifier
        self._config = config or DeclarationEngineConfig()
        self._metrics = metrics or get_metrics_collector()
        self._clock = clock
        self._locks = _KeyedLocks()
        self._init_logger(component="declarations")

    @property
    def active_lock_count(self) -> int:
        """Number of declaration ids with a held or awaited lock."""
        return len(self._locks)

    # Transitions

    async def transition(
        self,
        declaration_id: str,
        target_status: DeclarationStatus | str,
        context: TransitionContext | None = None,
        *,
        actor: CallerIdentity = SYSTEM_ACTOR,
    ) -> TransitionResult:
        """Move a declaration to ``target_status``.

        Raises:
            ValidationError: Unknown target status or invalid context.
            DeclarationNotFoundError: Unknown declaration.
            InvalidTransitionError: Edge not in the status graph.
            PermissionDeniedError: Role not allowed for this transition.
            PreconditionNotMetError: provider_required / appointment_required.
            ProviderNotAssignableError: Context provider archived or unknown.
            ConcurrentModificationError: Retry budget exhausted.
        """
        context = context or TransitionContext()
        try:
            target = DeclarationStatus.parse(target_status)
        except ValueError as exc:
            raise ValidationError("unknown_status", ["target_status"], str(exc)) from None

        log = self._log_operation(
            "transition",
            declaration_id=declaration_id,
            to_status=target.value,
            actor_id=actor.user_id,
        )
        log.info("transition_started")

        try:
            async with self._locks.hold(declaration_id):
                result = await self._transition_locked(
                    declaration_id, target, context, actor, log
                )
        except PazPropertyError as exc:
            self._record_rejection(exc, log)
            raise

        self._metrics.increment_transitions(target.value)
        log.info(
            "transition_completed",
            version=result.declaration.version,
            notification_delivered=result.notification_delivered,
            warning_count=len(result.warnings),
        )
        return result

    async def _transition_locked(
        self,
        declaration_id: str,
        target: DeclarationStatus,
        context: TransitionContext,
        actor: CallerIdentity,
        log: Any,
    ) -> TransitionResult:
        async def build(declaration: Declaration) -> dict[str, Any]:
            current = declaration.status
            if not is_valid_transition(current, target):
                raise InvalidTransitionError(
                    current, target, list(current.valid_transitions())
                )
            self._authorize_transition(actor, declaration, target, context)
            return await self._transition_changes(declaration, target, context)

        before, after = await self._commit_with_retry(declaration_id, build, log)

        action = HistoryAction.for_transition(
            declaration_id,
            before.status.value,
            target.value,
            actor_id=actor.user_id,
            notes=context.reason,
        )
        try:
            await self._history.append(action)
        except Exception:
            log.error("history_append_failed", from_status=before.status.value)
            await self._revert(before, after, log)
            raise

        delivered, warnings = await self._notify(after, before.status, context, log)
        return TransitionResult(
            declaration=after,
            history_action=action,
            notification_delivered=delivered,
            warnings=warnings,
        )

    def _authorize_transition(
        self,
        actor: CallerIdentity,
        declaration: Declaration,
        target: DeclarationStatus,
        context: TransitionContext,
    ) -> None:
        operation = f"transition to {target.value}"
        require_authenticated(actor, operation)
        if target in ADMIN_ONLY_TARGETS:
            require_admin(actor, operation)
        if context.provider_id is not None and context.provider_id != declaration.provider_id:
            require_admin(actor, "assign a provider")
        if context.appointment_at is not None:
            require_admin_or_assigned_provider(
                actor, declaration, "schedule an appointment"
            )
        if context.quote_approved is not None:
            require_admin(actor, "decide on a quote")

    async def _transition_changes(
        self,
        declaration: Declaration,
        target: DeclarationStatus,
        context: TransitionContext,
    ) -> dict[str, Any]:
        now = self._clock()
        changes: dict[str, Any] = {"status": target}

        if context.provider_id is not None and context.provider_id != declaration.provider_id:
            await self._providers.ensure_assignable(context.provider_id)
            changes["provider_id"] = context.provider_id
            changes["provider_assigned_at"] = now
        if context.appointment_at is not None:
            # DiagnosticMeetingScheduled reports a past time as appointment_required
            if (
                context.appointment_at <= now
                and target != DeclarationStatus.DIAGNOSTIC_MEETING_SCHEDULED
            ):
                raise ValidationError("appointment_must_be_future", ["appointment_at"])
            changes["appointment_at"] = context.appointment_at
        if context.meeting_notes is not None:
            changes["meeting_notes"] = context.meeting_notes
        if context.quote_amount is not None:
            changes["quote_amount"] = context.quote_amount
        changes.update(self._quote_decision(target, context))

        provider_id = changes.get("provider_id", declaration.provider_id)
        candidate = replace(
            declaration,
            appointment_at=changes.get("appointment_at", declaration.appointment_at),
        )

        if target == DeclarationStatus.AWAITING_DIAGNOSTIC_MEETING and provider_id is None:
            raise PreconditionNotMetError(
                "provider_required",
                "A provider must be assigned before awaiting the diagnostic meeting",
            )
        if (
            target == DeclarationStatus.DIAGNOSTIC_MEETING_SCHEDULED
            and not candidate.has_future_appointment(now)
        ):
            raise PreconditionNotMetError(
                "appointment_required",
                "A future appointment must be set before scheduling the meeting",
            )
        if target == DeclarationStatus.RESOLVED:
            changes["resolved_at"] = now
        return changes

    @staticmethod
    def _quote_decision(
        target: DeclarationStatus, context: TransitionContext
    ) -> dict[str, Any]:
        """Quote approval fields for a QuoteReceived -> InRepair transition.

        Raises:
            ValidationError: If a decision is sent with another target, a
                rejection reason comes without a decision, or a rejection
                has no reason.
        """
        reason = (context.quote_rejection_reason or "").strip() or None
        if context.quote_approved is None:
            if reason is not None:
                raise ValidationError.missing_fields(["quote_approved"])
            return {}
        if target != DeclarationStatus.IN_REPAIR:
            raise ValidationError("quote_decision_not_applicable", ["quote_approved"])
        if not context.quote_approved and reason is None:
            raise ValidationError.missing_fields(["quote_rejection_reason"])
        return {
            "quote_approved": context.quote_approved,
            "quote_rejection_reason": None if context.quote_approved else reason,
        }

    # Provider linkage and appointments

    async def assign_provider(
        self,
        declaration_id: str,
        provider_id: str,
        *,
        actor: CallerIdentity = SYSTEM_ACTOR,
    ) -> Declaration:
        """Link a provider to a declaration without changing its status.

        Raises:
            PermissionDeniedError: Caller is not an administrator.
            DeclarationNotFoundError: Unknown declaration.
            PreconditionNotMetError: Declaration is closed.
            ProviderNotAssignableError: Provider archived or unknown.
        """
        log = self._log_operation(
            "assign_provider",
            declaration_id=declaration_id,
            provider_id=provider_id,
            actor_id=actor.user_id,
        )
        try:
            require_admin(actor, "assign a provider")

            async def build(declaration: Declaration) -> dict[str, Any]:
                self._ensure_open(declaration)
                await self._providers.ensure_assignable(provider_id)
                return {
                    "provider_id": provider_id,
                    "provider_assigned_at": self._clock(),
                }

            async with self._locks.hold(declaration_id):
                _, after = await self._commit_with_retry(declaration_id, build, log)
        except PazPropertyError as exc:
            self._record_rejection(exc, log)
            raise

        log.info("provider_assigned", version=after.version)
        return after

    async def schedule_appointment(
        self,
        declaration_id: str,
        when_iso: str | datetime,
        *,
        actor: CallerIdentity = SYSTEM_ACTOR,
    ) -> Declaration:
        """Set the diagnostic appointment without changing the status.

        Raises:
            ValidationError: Unparsable or past instant.
            DeclarationNotFoundError: Unknown declaration.
            PermissionDeniedError: Caller is neither admin nor the assigned
                provider.
            PreconditionNotMetError: Declaration is closed.
        """
        log = self._log_operation(
            "schedule_appointment",
            declaration_id=declaration_id,
            actor_id=actor.user_id,
        )
        try:
            require_authenticated(actor, "schedule an appointment")
            when = parse_instant(when_iso)
            if when <= self._clock():
                raise ValidationError("appointment_must_be_future", ["when_iso"])

            async def build(declaration: Declaration) -> dict[str, Any]:
                require_admin_or_assigned_provider(
                    actor, declaration, "schedule an appointment"
                )
                self._ensure_open(declaration)
                return {"appointment_at": when}

            async with self._locks.hold(declaration_id):
                _, after = await self._commit_with_retry(declaration_id, build, log)
        except PazPropertyError as exc:
            self._record_rejection(exc, log)
            raise

        log.info("appointment_scheduled", appointment_at=when.isoformat())
        return after

    # Audit trail

    async def annotate(
        self,
        declaration_id: str,
        action: str,
        notes: str | None = None,
        *,
        actor: CallerIdentity = SYSTEM_ACTOR,
    ) -> HistoryAction:
        """Append a manual audit entry.

        Raises:
            ValidationError: Empty action or reserved transition label.
            DeclarationNotFoundError: Unknown declaration.
            PermissionDeniedError: Caller is neither admin nor the assigned
                provider.
        """
        action = (action or "").strip()
        if not action:
            raise ValidationError.missing_fields(["action"])
        if action.startswith(TRANSITION_ACTION_PREFIX):
            raise ValidationError(
                "reserved_action",
                ["action"],
                message=f"Action labels starting with '{TRANSITION_ACTION_PREFIX}' "
                "are written by transitions only",
            )
        declaration = await self._store.get(declaration_id)
        require_admin_or_assigned_provider(actor, declaration, "annotate")

        entry = HistoryAction.create(
            declaration_id, action, actor_id=actor.user_id, notes=notes
        )
        await self._history.append(entry)
        self._log_operation(
            "annotate", declaration_id=declaration_id, actor_id=actor.user_id
        ).info("history_action_recorded", action=action)
        return entry

    async def history(self, declaration_id: str) -> list[HistoryAction]:
        """Audit entries for a declaration, oldest first."""
        await self._store.get(declaration_id)
        return await self._history.list_for_declaration(declaration_id)

    async def notifications(self, declaration_id: str) -> list[NotificationRecord]:
        """Notification log for a declaration, newest first."""
        await self._store.get(declaration_id)
        return await self._notification_log.list_for_declaration(declaration_id)

    # Internals

    def _ensure_open(self, declaration: Declaration) -> None:
        if declaration.is_closed:
            raise PreconditionNotMetError(
                "declaration_closed",
                f"Declaration {declaration.id} is {declaration.status.value}",
            )

    async def _commit_with_retry(
        self, declaration_id: str, build: ChangeBuilder, log: Any
    ) -> tuple[Declaration, Declaration]:
        """Load, validate and compare-and-swap, reloading on version conflicts.

        Returns:
            (declaration before, declaration after)
        """
        attempt = 0
        while True:
            before = await self._store.get(declaration_id)
            changes = await build(before)
            try:
                after = await self._store.commit_lifecycle(
                    declaration_id, before.version, changes
                )
            except ConcurrentModificationError:
                attempt += 1
                if attempt > self._config.max_retries:
                    log.warning("version_conflict_retries_exhausted", attempts=attempt)
                    raise
                log.info("version_conflict_retrying", attempt=attempt)
                continue
            return before, after

    async def _revert(self, before: Declaration, after: Declaration, log: Any) -> None:
        """Restore the lifecycle fields touched by a commit."""
        restore = {
            name: getattr(before, name)
            for name in LIFECYCLE_FIELDS - {"version"}
            if getattr(before, name) != getattr(after, name)
        }
        try:
            await self._store.commit_lifecycle(before.id, after.version, restore)
        except PazPropertyError:
            log.error("lifecycle_revert_failed", version=after.version)
            raise
        log.warning("lifecycle_reverted", restored_status=before.status.value)

    async def _recipients(
        self, declaration: Declaration, event_type: NotificationEventType
    ) -> frozenset[Recipient]:
        recipients: set[Recipient] = set()
        for role in RECIPIENT_ROLES[event_type]:
            if role == RecipientRole.REPORTER and declaration.email:
                recipients.add(Recipient(role, declaration.email))
            elif role == RecipientRole.PROVIDER and declaration.provider_id:
                try:
                    provider = await self._providers.get_by_id(declaration.provider_id)
                except ProviderNotFoundError:
                    continue
                recipients.add(Recipient(role, provider.email))
            elif role == RecipientRole.ADMIN:
                recipients.update(
                    Recipient(role, address) for address in self._config.admin_emails
                )
        return frozenset(recipients)

    def _payload(
        self,
        declaration: Declaration,
        from_status: DeclarationStatus,
        context: TransitionContext,
    ) -> dict[str, Any]:
        def iso(value: datetime | None) -> str | None:
            return value.isoformat() if value else None

        return {
            "declaration_id": declaration.id,
            "from_status": from_status.value,
            "to_status": declaration.status.value,
            "reporter_name": declaration.name,
            "property": declaration.property,
            "city": declaration.city,
            "issue_type": declaration.issue_type.value,
            "urgency": declaration.urgency.value,
            "provider_id": declaration.provider_id,
            "appointment_at": iso(declaration.appointment_at),
            "resolved_at": iso(declaration.resolved_at),
            "quote_amount": (
                str(declaration.quote_amount)
                if declaration.quote_amount is not None
                else None
            ),
            "quote_approved": declaration.quote_approved,
            "reason": context.reason,
        }

    async def _notify(
        self,
        declaration: Declaration,
        from_status: DeclarationStatus,
        context: TransitionContext,
        log: Any,
    ) -> tuple[bool, tuple[NotificationDeliveryFailedError, ...]]:
        """Best-effort dispatch. Never raises; the status change stands."""
        event_type = EVENT_FOR_STATUS[declaration.status]
        recipients = await self._recipients(declaration, event_type)
        if not recipients:
            log.info("notification_skipped_no_recipients", event_type=event_type.value)
            return False, ()

        timeout = self._config.notification_timeout_seconds
        cause: str | None = None
        try:
            delivered = await asyncio.wait_for(
                self._notifier.send(
                    event_type,
                    recipients,
                    self._payload(declaration, from_status, context),
                ),
                timeout=timeout,
            )
            if not delivered:
                cause = "dispatcher reported failure"
        except asyncio.TimeoutError:
            delivered = False
            cause = f"timed out after {timeout}s"
        except Exception as exc:
            delivered = False
            cause = f"{type(exc).__name__}: {exc}"

        await self._record_notification(
            declaration.id, event_type, recipients, delivered, cause, log
        )
        if delivered:
            log.info("notification_delivered", event_type=event_type.value)
            return True, ()

        self._metrics.increment_notification_failures(event_type.value)
        log.warning(
            "notification_delivery_failed", event_type=event_type.value, cause=cause
        )
        warning = NotificationDeliveryFailedError(
            declaration.id, event_type.value, cause or "unknown"
        )
        return False, (warning,)

    async def _record_notification(
        self,
        declaration_id: str,
        event_type: NotificationEventType,
        recipients: frozenset[Recipient],
        delivered: bool,
        error: str | None,
        log: Any,
    ) -> None:
        record = NotificationRecord.create(
            declaration_id=declaration_id,
            event_type=event_type,
            recipients=tuple(sorted(recipients, key=lambda r: (r.role.value, r.address))),
            delivered=delivered,
            error=error,
        )
        try:
            await self._notification_log.append(record)
        except Exception as exc:
            log.warning("notification_log_append_failed", error=str(exc))

    def _record_rejection(self, exc: PazPropertyError, log: Any) -> None:
        self._metrics.increment_transition_rejections(exc.code)
        log.warning("operation_rejected", code=exc.code, reason=exc.message)
