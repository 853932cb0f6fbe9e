"""Custom exceptions for the PlaceHub directory API"""
from typing import Optional, Dict, Any
from uuid import UUID

from placehub.decision.error_codes import ErrorCode


class PlaceHubError(Exception):
    """Base exception for request-scoped domain errors"""

    def __init__(
        self,
        error_code: ErrorCode,
        entity_id: Optional[UUID] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.entity_id = entity_id
        self.context = context or {}
        super().__init__(error_code.message)

    @property
    def message(self) -> str:
        return self.error_code.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            **self.error_code.to_dict(),
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "context": self.context,
        }


class NotFoundError(PlaceHubError):
    """Exception raised when a site, slug, page, subscription or entity is missing"""
    pass


class BadRequestError(PlaceHubError):
    """Exception raised when a request violates a business rule"""
    pass
