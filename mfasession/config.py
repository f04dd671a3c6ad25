from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_MFA_DURATION,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_REGION,
    DEFAULT_ROLE_SESSION_NAME,
)
from .regions import default_regions


class SessionParams(BaseModel):
    """Inputs for the MFA base session exchange."""

    model_config = ConfigDict(frozen=True)

    serial_device: str
    mfa_token: str
    # 0 means "use the default" and is normalized when STS is called
    mfa_duration: int = Field(default=DEFAULT_MFA_DURATION, ge=0)
    # Named profile used to pick the local credentials for the exchange
    profile: Optional[str] = None

    @classmethod
    def default(cls, serial_device: str, mfa_token: str) -> "SessionParams":
        return cls(serial_device=serial_device, mfa_token=mfa_token)

    def effective_duration(self) -> int:
        return self.mfa_duration or DEFAULT_MFA_DURATION


class SessionConfig(BaseModel):
    # Region the MFA base session is bound to
    default_region: str = DEFAULT_REGION
    # Fan-out used when assume_bulk is called without regions
    regions: List[str] = Field(default_factory=default_regions)
    # List the regions enabled for the account instead of using regions
    discover_regions: bool = False
    role_session_name: str = DEFAULT_ROLE_SESSION_NAME
    assume_duration: int = Field(default=DEFAULT_MFA_DURATION, gt=0)
    # None runs one worker per (account, region) pair
    max_workers: Optional[int] = Field(default=DEFAULT_MAX_WORKERS, ge=1)
    # Per-call deadline for STS requests
    connect_timeout: float = Field(default=DEFAULT_CONNECT_TIMEOUT, gt=0)
    read_timeout: float = Field(default=DEFAULT_READ_TIMEOUT, gt=0)
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)


class MFASessionConfig(BaseModel):
    serial_device: str
    profile: Optional[str] = None
    mfa_duration: int = Field(default=DEFAULT_MFA_DURATION, ge=0)
    role_name: str
    accounts: List[str]
    # Falls back to session.regions when not set
    regions: Optional[List[str]] = None
    session: SessionConfig = Field(default_factory=SessionConfig)
