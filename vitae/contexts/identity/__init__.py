"""
Identity Context

Responsibilities:
- Represents the signed-in user's role and subscription flags
- Answers which gated features the user may use

Owns: Entitlement flags
Never: Authenticates users or talks to a payment provider
"""

from vitae.contexts.identity.entitlements import EntitlementError, Entitlements

__all__ = ["Entitlements", "EntitlementError"]
