"""Error Code Dictionary - standardized error responses for the directory API."""
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional

from enum import Enum


class ErrorKind(str, Enum):
    """HTTP-facing error categories."""

    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"


@dataclass(frozen=True)
class ErrorCode:
    """
    Standardized error code with remediation hints.

    Attributes:
        code: Unique error code identifier (e.g., SUBSCRIPTION_002)
        message: Human-readable error message (some are Hungarian, as shown to editors)
        kind: Error category, mapped to an HTTP status by the exception handlers
        remediation_steps: List of steps to resolve the error
    """

    code: str
    message: str
    kind: ErrorKind = ErrorKind.BAD_REQUEST
    remediation_steps: List[str] = field(default_factory=list)

    def with_message(self, message: str) -> "ErrorCode":
        """Same code with a message carrying request specifics."""
        return ErrorCode(
            code=self.code,
            message=message,
            kind=self.kind,
            remediation_steps=self.remediation_steps,
        )

    def to_dict(self) -> Dict[str, object]:
        """Convert error code to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "kind": self.kind.value,
            "remediation_steps": list(self.remediation_steps),
        }


class ErrorCodeDictionary:
    """
    Catalog of every error the API raises.

    Codes are grouped by area; the prefix names the area and the number is
    stable so the admin console can map codes to translated messages.
    """

    # Request validation (REQUEST_*)
    REQUEST_001: ClassVar[ErrorCode] = ErrorCode(
        code="REQUEST_001",
        message="Language parameter is required. Use hu|en|de.",
        remediation_steps=["Prefix the route with a supported language code"],
    )

    REQUEST_002: ClassVar[ErrorCode] = ErrorCode(
        code="REQUEST_002",
        message="Unsupported lang. Use hu|en|de.",
        remediation_steps=["Use one of: hu, en, de"],
    )

    # Site resolution (SITE_*)
    SITE_001: ClassVar[ErrorCode] = ErrorCode(
        code="SITE_001",
        message="Site not found (default)",
        kind=ErrorKind.NOT_FOUND,
        remediation_steps=[
            "Create the default site or set DEFAULT_SITE_SLUG",
            "Run `placehub db seed` on a fresh database",
        ],
    )

    SITE_002: ClassVar[ErrorCode] = ErrorCode(
        code="SITE_002",
        message="Site key not found",
        kind=ErrorKind.NOT_FOUND,
        remediation_steps=["Check the site key in the URL", "Add a SiteKey for this language"],
    )

    SITE_003: ClassVar[ErrorCode] = ErrorCode(
        code="SITE_003",
        message="Site not found",
        kind=ErrorKind.NOT_FOUND,
    )

    SITE_004: ClassVar[ErrorCode] = ErrorCode(
        code="SITE_004",
        message="Site key already exists for this site and language",
        remediation_steps=["Choose a different slug or edit the existing key"],
    )

    SITE_005: ClassVar[ErrorCode] = ErrorCode(
        code="SITE_005",
        message="Site with this slug already exists",
    )

    SITE_006: ClassVar[ErrorCode] = ErrorCode(
        code="SITE_006",
        message="Invalid slug: slug cannot be empty after normalization",
        remediation_steps=["Use letters or digits in the slug"],
    )

    SITE_007: ClassVar[ErrorCode] = ErrorCode(
        code="SITE_007",
        message="Site key not found",
        kind=ErrorKind.NOT_FOUND,
    )

    SITE_008: ClassVar[ErrorCode] = ErrorCode(
        code="SITE_008",
        message="Site key cannot redirect to itself",
        remediation_steps=["Point redirect_to_id at another key of the site or clear it"],
    )

    # Slug resolution (SLUG_*)
    SLUG_001: ClassVar[ErrorCode] = ErrorCode(
        code="SLUG_001",
        message="Slug not found",
        kind=ErrorKind.NOT_FOUND,
    )

    # Site subscription & entitlements (ENTITLEMENT_*)
    ENTITLEMENT_001: ClassVar[ErrorCode] = ErrorCode(
        code="ENTITLEMENT_001",
        message="Invalid plan override",
        remediation_steps=[
            "Only known limit and feature keys may be overridden",
            "Limits must be non-negative integers or null (unlimited)",
        ],
    )

    ENTITLEMENT_002: ClassVar[ErrorCode] = ErrorCode(
        code="ENTITLEMENT_002",
        message="Kiemelt megjelenés nem érhető el ebben a csomagban.",
        remediation_steps=["Upgrade the site plan to enable featured places"],
    )

    ENTITLEMENT_003: ClassVar[ErrorCode] = ErrorCode(
        code="ENTITLEMENT_003",
        message="Place limit reached for this plan",
        remediation_steps=["Upgrade the site plan or deactivate unused places"],
    )

    # Feature subscriptions (SUBSCRIPTION_*)
    SUBSCRIPTION_001: ClassVar[ErrorCode] = ErrorCode(
        code="SUBSCRIPTION_001",
        message="Feature subscription not found",
        kind=ErrorKind.NOT_FOUND,
    )

    SUBSCRIPTION_002: ClassVar[ErrorCode] = ErrorCode(
        code="SUBSCRIPTION_002",
        message="placeId is required when scope is 'place'",
        remediation_steps=["Pass place_id or switch the scope to 'site'"],
    )

    SUBSCRIPTION_003: ClassVar[ErrorCode] = ErrorCode(
        code="SUBSCRIPTION_003",
        message="placeId must be null when scope is 'site'",
        remediation_steps=["Drop place_id or switch the scope to 'place'"],
    )

    SUBSCRIPTION_004: ClassVar[ErrorCode] = ErrorCode(
        code="SUBSCRIPTION_004",
        message="floorplanLimit is required for FP_CUSTOM plan",
        remediation_steps=["Pass floorplan_limit with the FP_CUSTOM plan key"],
    )

    SUBSCRIPTION_005: ClassVar[ErrorCode] = ErrorCode(
        code="SUBSCRIPTION_005",
        message="Erre a funkcióra már van aktív előfizetés ebben a csomagban.",
        remediation_steps=["Update or cancel the existing subscription instead"],
    )

    SUBSCRIPTION_006: ClassVar[ErrorCode] = ErrorCode(
        code="SUBSCRIPTION_006",
        message="Subscription is already cancelled",
    )

    SUBSCRIPTION_007: ClassVar[ErrorCode] = ErrorCode(
        code="SUBSCRIPTION_007",
        message="Only cancelled subscriptions can be resumed",
    )

    # Places & floorplans (PLACE_*, FLOORPLAN_*)
    PLACE_001: ClassVar[ErrorCode] = ErrorCode(
        code="PLACE_001",
        message="Place not found",
        kind=ErrorKind.NOT_FOUND,
    )

    FLOORPLAN_001: ClassVar[ErrorCode] = ErrorCode(
        code="FLOORPLAN_001",
        message="Floorplan not found",
        kind=ErrorKind.NOT_FOUND,
    )

    FLOORPLAN_002: ClassVar[ErrorCode] = ErrorCode(
        code="FLOORPLAN_002",
        message="Floorplan feature is not available for this place. Please subscribe first.",
        remediation_steps=["Create a FLOORPLANS feature subscription for the place or site"],
    )

    FLOORPLAN_003: ClassVar[ErrorCode] = ErrorCode(
        code="FLOORPLAN_003",
        message="Floorplan limit reached",
        remediation_steps=["Delete the existing floorplan before uploading a new one"],
    )

    FLOORPLAN_004: ClassVar[ErrorCode] = ErrorCode(
        code="FLOORPLAN_004",
        message="Pin not found",
        kind=ErrorKind.NOT_FOUND,
    )

    FLOORPLAN_005: ClassVar[ErrorCode] = ErrorCode(
        code="FLOORPLAN_005",
        message="x and y must be between 0 and 1",
        remediation_steps=["Send pin coordinates normalized to the image size"],
    )

    # Legal pages (LEGAL_*)
    LEGAL_001: ClassVar[ErrorCode] = ErrorCode(
        code="LEGAL_001",
        message="Unsupported legal page. Use imprint|terms|privacy.",
    )

    LEGAL_002: ClassVar[ErrorCode] = ErrorCode(
        code="LEGAL_002",
        message="Legal page not found",
        kind=ErrorKind.NOT_FOUND,
    )

    LEGAL_003: ClassVar[ErrorCode] = ErrorCode(
        code="LEGAL_003",
        message="Legal page translation not found",
        kind=ErrorKind.NOT_FOUND,
        remediation_steps=["Add at least a Hungarian (hu) translation"],
    )

    LEGAL_004: ClassVar[ErrorCode] = ErrorCode(
        code="LEGAL_004",
        message="Legal page already exists for this site",
        remediation_steps=["Edit the existing page instead"],
    )

    # Collections (COLLECTION_*)
    COLLECTION_001: ClassVar[ErrorCode] = ErrorCode(
        code="COLLECTION_001",
        message="Collection not found",
        kind=ErrorKind.NOT_FOUND,
    )

    COLLECTION_002: ClassVar[ErrorCode] = ErrorCode(
        code="COLLECTION_002",
        message="Collection slug already exists",
    )

    COLLECTION_003: ClassVar[ErrorCode] = ErrorCode(
        code="COLLECTION_003",
        message="Collection domain already exists",
    )

    COLLECTION_004: ClassVar[ErrorCode] = ErrorCode(
        code="COLLECTION_004",
        message="Collection item not found",
        kind=ErrorKind.NOT_FOUND,
    )

    COLLECTION_005: ClassVar[ErrorCode] = ErrorCode(
        code="COLLECTION_005",
        message="Item does not belong to collection",
    )

    COLLECTION_006: ClassVar[ErrorCode] = ErrorCode(
        code="COLLECTION_006",
        message="Collection translation not found",
        kind=ErrorKind.NOT_FOUND,
    )

    # Price bands (PRICEBAND_*)
    PRICEBAND_001: ClassVar[ErrorCode] = ErrorCode(
        code="PRICEBAND_001",
        message="Price band not found",
        kind=ErrorKind.NOT_FOUND,
    )

    PRICEBAND_002: ClassVar[ErrorCode] = ErrorCode(
        code="PRICEBAND_002",
        message="Cannot delete price band: it is used by places. Deactivate it instead.",
    )

    @classmethod
    def get_error(cls, code: str) -> Optional[ErrorCode]:
        """
        Look up an error code by its identifier.

        Args:
            code: Error code string (e.g., "LEGAL_002")

        Returns:
            ErrorCode or None if the code is unknown
        """
        value = getattr(cls, code, None)
        return value if isinstance(value, ErrorCode) else None
