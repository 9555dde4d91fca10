"""Bearer tokens mapped to the test identities."""

from pazproperty.domain.models.identity import CallerIdentity
from tests.helpers.factories import ADMIN, CUSTOMER, OTHER_PROVIDER_USER, PROVIDER_USER

TOKENS: dict[str, CallerIdentity] = {
    "admin-token": ADMIN,
    "provider-token": PROVIDER_USER,
    "other-provider-token": OTHER_PROVIDER_USER,
    "customer-token": CUSTOMER,
}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


ADMIN_HEADERS = bearer("admin-token")
PROVIDER_HEADERS = bearer("provider-token")
OTHER_PROVIDER_HEADERS = bearer("other-provider-token")
CUSTOMER_HEADERS = bearer("customer-token")
