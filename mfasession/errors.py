"""
Exception taxonomy for session bootstrap, role assumption and cache lookups.

Callers branch on the exception type and, for ``AssumeRoleFailure``, on
``reason`` to decide whether a retry makes sense.
"""

from typing import Optional

from .enums import AssumeRoleFailureReason

_NON_RETRYABLE_REASONS = frozenset({
    AssumeRoleFailureReason.MALFORMED_POLICY,
    AssumeRoleFailureReason.PACKED_POLICY_TOO_LARGE,
    AssumeRoleFailureReason.REGION_DISABLED,
})


class MFASessionError(Exception):
    """Base class for all errors raised by this package."""

    retryable = False


class AuthFailure(MFASessionError):
    """Raised when STS rejects the MFA token, device serial or local credentials."""
    pass


class TransportFailure(MFASessionError):
    """Raised for network or transport level errors talking to STS."""

    retryable = True


class AssumeRoleFailure(MFASessionError):
    """Raised when STS rejects an AssumeRole request."""

    def __init__(
        self,
        reason: AssumeRoleFailureReason,
        message: str,
        role_arn: Optional[str] = None
    ) -> None:
        super().__init__(f"failed to assume role [{reason.value}]: {message}")
        self.reason = reason
        self.role_arn = role_arn

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.reason not in _NON_RETRYABLE_REASONS


class SessionNotFound(MFASessionError):
    """Raised when no session is cached for an account and region."""

    def __init__(self, account: str, region: str) -> None:
        super().__init__(f"session not found for account '{account}' on region '{region}'")
        self.account = account
        self.region = region


class SessionExpired(MFASessionError):
    """Raised when the cached session credentials are past their expiry."""

    def __init__(self, account: str, region: str) -> None:
        super().__init__(f"session is expired for account '{account}' on region '{region}'")
        self.account = account
        self.region = region


class PreconditionViolation(MFASessionError):
    """Raised when the cache is written for an account that was never ensured."""
    pass
