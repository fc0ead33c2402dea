"""
Entitlement flags supplied by the identity/subscription service.

The document store enforces nothing; callers (CLI commands, the enhancement
workflow) read these flags to decide which operations they are willing to call.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

PREMIUM_TIERS = ("monthly", "annual", "lifetime")
ACTIVE_STATUS = "active"


class EntitlementError(PermissionError):
    """
    Exception raised when the current user may not use a gated feature.

    Attributes:
        feature: Name of the gated feature (e.g., 'enhancement')
        reason: 'signed_out' or 'not_premium'
    """

    def __init__(self, feature: str, reason: str):
        self.feature = feature
        self.reason = reason
        if reason == "signed_out":
            message = f"Please sign in to use {feature} features"
        else:
            message = f"{feature.capitalize()} is available with Premium plans"
        super().__init__(message)


@dataclass(frozen=True)
class Entitlements:
    """
    Read-only view of what the current user may do.

    Attributes:
        signed_in_user: User identifier (e.g., email), None when signed out
        is_admin: Admin role
        is_super_admin: Super admin role
        is_premium: Active paid subscription
    """

    signed_in_user: Optional[str] = None
    is_admin: bool = False
    is_super_admin: bool = False
    is_premium: bool = False

    @classmethod
    def anonymous(cls) -> "Entitlements":
        return cls()

    @classmethod
    def from_profile(cls, user: Optional[str], profile: Mapping[str, Any]) -> "Entitlements":
        """
        Build entitlements from a stored user profile row.

        Reads is_admin, is_super_admin, subscription_tier and subscription_status.
        A user is premium when the tier is a paid tier and the status is active.
        """
        tier = str(profile.get("subscription_tier") or "free").lower()
        status = str(profile.get("subscription_status") or "").lower()
        return cls(
            signed_in_user=user,
            is_admin=bool(profile.get("is_admin", False)),
            is_super_admin=bool(profile.get("is_super_admin", False)),
            is_premium=tier in PREMIUM_TIERS and status == ACTIVE_STATUS,
        )

    @property
    def is_signed_in(self) -> bool:
        return bool(self.signed_in_user)

    @property
    def can_enhance(self) -> bool:
        """Text enhancement needs a signed-in premium user or an admin."""
        return self.is_signed_in and (self.is_premium or self.is_admin or self.is_super_admin)

    @property
    def role_label(self) -> str:
        if self.is_super_admin:
            return "Super Admin"
        if self.is_admin:
            return "Admin"
        if self.is_premium:
            return "Premium"
        return "Free Plan"

    def require_enhancement(self) -> None:
        """
        Raises:
            EntitlementError: If the user may not use text enhancement
        """
        if not self.is_signed_in:
            raise EntitlementError("AI enhancement", "signed_out")
        if not self.can_enhance:
            raise EntitlementError("AI enhancement", "not_premium")
