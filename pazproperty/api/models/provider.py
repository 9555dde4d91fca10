"""Provider API request/response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pazproperty.api.models.declaration import DateTimeWithZ
from pazproperty.domain.models.provider import Provider


class ProviderFieldsRequest(BaseModel):
    """Provider fields; extras are passed through for the directory to reject."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    company_name: str | None = Field(default=None, alias="companyName")
    manager_name: str | None = Field(default=None, alias="managerName")
    work_category: str | None = Field(default=None, alias="workCategory")
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = Field(default=None, alias="postalCode")
    tax_id: str | None = Field(default=None, alias="taxId")

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ProviderResponse(BaseModel):
    id: str
    company_name: str
    manager_name: str
    work_category: str
    email: str
    phone: str | None
    address: str | None
    city: str | None
    postal_code: str | None
    tax_id: str | None
    created_at: DateTimeWithZ
    archived_at: DateTimeWithZ | None
    assignable: bool

    @classmethod
    def from_domain(cls, provider: Provider) -> "ProviderResponse":
        return cls(
            id=provider.id,
            company_name=provider.company_name,
            manager_name=provider.manager_name,
            work_category=provider.work_category,
            email=provider.email,
            phone=provider.phone,
            address=provider.address,
            city=provider.city,
            postal_code=provider.postal_code,
            tax_id=provider.tax_id,
            created_at=provider.created_at,
            archived_at=provider.archived_at,
            assignable=not provider.is_archived,
        )
