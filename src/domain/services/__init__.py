"""Domain services."""

from src.domain.services.admin_overview import AdminDataAggregator
from src.domain.services.authorization import AuthorizationResolver
from src.domain.services.complaints import (
    ComplaintAlreadyResolvedError,
    ComplaintNotFoundError,
    ComplaintResolutionError,
    ComplaintResolutionService,
    ComplaintStoreError,
    ReplyValidationError,
)
from src.domain.services.intake import IntakeService
from src.domain.services.roles import (
    RoleMutationError,
    RoleMutationService,
    UnknownAccountError,
)

__all__ = [
    "AdminDataAggregator",
    "AuthorizationResolver",
    "ComplaintAlreadyResolvedError",
    "ComplaintNotFoundError",
    "ComplaintResolutionError",
    "ComplaintResolutionService",
    "ComplaintStoreError",
    "IntakeService",
    "ReplyValidationError",
    "RoleMutationError",
    "RoleMutationService",
    "UnknownAccountError",
]
