"""Domain services for the bookstore."""

from .account_service import AccountService
from .catalog_service import CatalogService
from .content_delivery_service import ContentDeliveryService, DeliveredContent
from .entitlement_service import EntitlementService
from .reading_progress_service import ReadingProgressService
from .token_service import TokenIdentity, TokenService

__all__ = [
    "AccountService",
    "CatalogService",
    "ContentDeliveryService",
    "DeliveredContent",
    "EntitlementService",
    "ReadingProgressService",
    "TokenIdentity",
    "TokenService",
]
