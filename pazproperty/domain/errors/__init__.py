"""Domain errors for PazProperty declarations.

All exceptions inherit from PazPropertyError and carry a machine-readable
``code`` next to the human-readable message.
"""

from pazproperty.domain.errors.authorization import PermissionDeniedError
from pazproperty.domain.errors.declaration import (
    ConcurrentModificationError,
    ForbiddenFieldMutationError,
)
from pazproperty.domain.errors.not_found import (
    DeclarationNotFoundError,
    NotFoundError,
    ProviderNotFoundError,
)
from pazproperty.domain.errors.notification import NotificationDeliveryFailedError
from pazproperty.domain.errors.provider import ProviderNotAssignableError
from pazproperty.domain.errors.state_transition import (
    InvalidTransitionError,
    PreconditionNotMetError,
)
from pazproperty.domain.errors.validation import ValidationError

__all__: list[str] = [
    "ConcurrentModificationError",
    "DeclarationNotFoundError",
    "ForbiddenFieldMutationError",
    "InvalidTransitionError",
    "NotFoundError",
    "NotificationDeliveryFailedError",
    "PermissionDeniedError",
    "PreconditionNotMetError",
    "ProviderNotAssignableError",
    "ProviderNotFoundError",
    "ValidationError",
]
