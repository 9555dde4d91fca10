"""Table definitions (SQLAlchemy Core).

Enumerated values are stored as their string values. Timestamps are stored
timezone-aware; backends that drop the offset (SQLite) are read back as UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.ext.asyncio import AsyncEngine

metadata = MetaData()

providers = Table(
    "providers",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("company_name", String(255), nullable=False),
    Column("manager_name", String(255), nullable=False),
    Column("work_category", String(120), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(64)),
    Column("address", String(255)),
    Column("city", String(120)),
    Column("postal_code", String(32)),
    Column("tax_id", String(64)),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("archived_at", DateTime(timezone=True)),
)

declarations = Table(
    "declarations",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255)),
    Column("phone", String(64)),
    Column("property", String(255), nullable=False),
    Column("city", String(120), nullable=False),
    Column("postal_code", String(32), nullable=False),
    Column("issue_type", String(32), nullable=False),
    Column("description", Text, nullable=False),
    Column("urgency", String(16), nullable=False),
    Column("status", String(40), nullable=False, index=True),
    Column("submitted_at", DateTime(timezone=True), nullable=False, index=True),
    Column("provider_id", String(36), ForeignKey("providers.id"), index=True),
    Column("provider_assigned_at", DateTime(timezone=True)),
    Column("appointment_at", DateTime(timezone=True)),
    Column("meeting_notes", Text),
    Column("quote_amount", Numeric(12, 2)),
    Column("quote_approved", Boolean),
    Column("quote_rejection_reason", Text),
    Column("resolved_at", DateTime(timezone=True)),
    Column("external_ref", String(255)),
    Column("version", Integer, nullable=False, default=0),
)

declaration_attachments = Table(
    "declaration_attachments",
    metadata,
    Column(
        "declaration_id",
        String(36),
        ForeignKey("declarations.id"),
        primary_key=True,
    ),
    Column("id", String(36), primary_key=True),
    Column("position", Integer, nullable=False),
    Column("url", Text, nullable=False),
    Column("file_type", String(32), nullable=False),
    Column("uploaded_by", String(255), nullable=False),
    Column("uploaded_at", DateTime(timezone=True), nullable=False),
)

history_actions = Table(
    "history_actions",
    metadata,
    Column("id", String(36), primary_key=True),
    Column(
        "declaration_id",
        String(36),
        ForeignKey("declarations.id"),
        nullable=False,
        index=True,
    ),
    Column("action", String(255), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("actor_id", String(255)),
    Column("notes", Text),
)

notification_log = Table(
    "notification_log",
    metadata,
    Column("id", String(36), primary_key=True),
    Column(
        "declaration_id",
        String(36),
        ForeignKey("declarations.id"),
        nullable=False,
        index=True,
    ),
    Column("event_type", String(40), nullable=False),
    Column("recipients", JSON, nullable=False),
    Column("delivered", Boolean, nullable=False),
    Column("error", Text),
    Column("sent_at", DateTime(timezone=True), nullable=False),
)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables (development and tests; production uses migrations)."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps read back from the database."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def to_db_values(values: dict[str, Any]) -> dict[str, Any]:
    """Convert enum members to their stored string values."""
    return {k: v.value if isinstance(v, Enum) else v for k, v in values.items()}
