"""Temporary AWS credentials per account and region from one MFA session."""

from .aws.sessions import SessionHandle
from .cache import SessionCache
from .config import SessionConfig, SessionParams
from .enums import AssumeRoleFailureReason, OrchestratorState
from .errors import (
    AssumeRoleFailure,
    AuthFailure,
    MFASessionError,
    PreconditionViolation,
    SessionExpired,
    SessionNotFound,
    TransportFailure,
)
from .orchestrator import MFASession
from .prompt import ask_mfa, ask_mfa_with_prompt
from .regions import DEFAULT_REGIONS, default_regions
from .types import AssumeFailure, BulkAssumeResult

__all__ = [
    "AssumeFailure",
    "AssumeRoleFailure",
    "AssumeRoleFailureReason",
    "AuthFailure",
    "BulkAssumeResult",
    "DEFAULT_REGIONS",
    "MFASession",
    "MFASessionError",
    "OrchestratorState",
    "PreconditionViolation",
    "SessionCache",
    "SessionConfig",
    "SessionExpired",
    "SessionHandle",
    "SessionNotFound",
    "SessionParams",
    "TransportFailure",
    "ask_mfa",
    "ask_mfa_with_prompt",
    "default_regions",
]
