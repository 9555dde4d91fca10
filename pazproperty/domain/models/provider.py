"""Service provider domain model.

Providers are third-party companies that can be assigned to declarations.
They are soft-deleted: archiving sets ``archived_at`` and keeps the record
referenceable from historical declarations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# Fields an administrator may change through Provider Directory.update()
PROVIDER_EDITABLE_FIELDS: tuple[str, ...] = (
    "company_name",
    "manager_name",
    "work_category",
    "email",
    "phone",
    "address",
    "city",
    "postal_code",
    "tax_id",
)

PROVIDER_REQUIRED_FIELDS: tuple[str, ...] = (
    "company_name",
    "manager_name",
    "work_category",
    "email",
)


@dataclass(frozen=True, eq=True)
class Provider:
    """A service company.

    Attributes:
        id: Unique identifier.
        company_name: Company name.
        manager_name: Name of the manager / main contact.
        work_category: Kind of work the company performs.
        email: Contact email.
        phone: Contact phone (nullable).
        address: Street address (nullable).
        city: City (nullable).
        postal_code: Postal code (nullable).
        tax_id: Tax identifier (nullable).
        created_at: Creation timestamp (UTC).
        archived_at: Archival timestamp; set means soft-deleted.
    """

    id: str
    company_name: str
    manager_name: str
    work_category: str
    email: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    tax_id: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    archived_at: datetime | None = None

    @property
    def is_archived(self) -> bool:
        """True when the provider has been soft-deleted."""
        return self.archived_at is not None

    def sort_key(self) -> tuple[str, str, str]:
        """Deterministic ordering: work category, company name, then id."""
        return (self.work_category.casefold(), self.company_name.casefold(), self.id)
