"""
Enumerations for the mfa-session package.

This module contains all enum types used throughout the package
to replace magic strings and improve type safety.
"""

from enum import Enum


class AssumeRoleFailureReason(str, Enum):
    """Causes reported by STS when a role assumption is rejected."""
    MALFORMED_POLICY = "malformed-policy"
    PACKED_POLICY_TOO_LARGE = "packed-policy-too-large"
    REGION_DISABLED = "region-disabled"
    OTHER = "other"


class OrchestratorState(str, Enum):
    """Lifecycle of a single bulk assume invocation."""
    IDLE = "idle"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    DONE = "done"
