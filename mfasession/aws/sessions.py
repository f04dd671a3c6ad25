"""AWS session management utilities."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from boto3.session import Session
from botocore.config import Config
from botocore.credentials import ReadOnlyCredentials
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
)
from mypy_boto3_sts.client import STSClient
from mypy_boto3_sts.type_defs import (
    AssumeRoleResponseTypeDef,
    CredentialsTypeDef,
    GetSessionTokenResponseTypeDef,
)

from ..config import SessionConfig, SessionParams
from ..constants import (
    STS_MALFORMED_POLICY_DOCUMENT,
    STS_PACKED_POLICY_TOO_LARGE,
    STS_REGION_DISABLED,
)
from ..enums import AssumeRoleFailureReason
from ..errors import AssumeRoleFailure, AuthFailure, TransportFailure

logger = logging.getLogger(__name__)

_ASSUME_ROLE_REASONS = {
    STS_MALFORMED_POLICY_DOCUMENT: AssumeRoleFailureReason.MALFORMED_POLICY,
    STS_PACKED_POLICY_TOO_LARGE: AssumeRoleFailureReason.PACKED_POLICY_TOO_LARGE,
    STS_REGION_DISABLED: AssumeRoleFailureReason.REGION_DISABLED,
}

# Local credential problems surface as botocore errors but are auth failures
_LOCAL_CREDENTIAL_ERRORS = (NoCredentialsError, PartialCredentialsError, ProfileNotFound)


@dataclass(frozen=True)
class SessionHandle:
    """
    A boto3 Session built from one set of temporary credentials.

    Attributes:
        session: boto3 Session using the static temporary credentials
        region: Region the session is bound to
        expiration: Timezone-aware expiry reported by STS
    """
    session: Session
    region: str
    expiration: datetime

    @classmethod
    def from_credentials(cls, credentials: CredentialsTypeDef, region: str) -> "SessionHandle":
        """
        Build a handle from an STS Credentials mapping.

        Args:
            credentials: STS Credentials (AccessKeyId, SecretAccessKey, SessionToken, Expiration)
            region: Region to bind the session to

        Returns:
            SessionHandle wrapping a new boto3 Session
        """
        expiration = credentials["Expiration"]
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        session = Session(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
            region_name=region
        )
        return cls(session=session, region=region, expiration=expiration)

    def get(self) -> Session:
        return self.session

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now >= self.expiration


def session_from_credentials(credentials: ReadOnlyCredentials, region: str) -> Session:
    """Build an independent boto3 Session from frozen credentials."""
    return Session(
        aws_access_key_id=credentials.access_key,
        aws_secret_access_key=credentials.secret_key,
        aws_session_token=credentials.token,
        region_name=region
    )


def sts_client_config(config: SessionConfig) -> Config:
    """Build the botocore client config that bounds every STS call."""
    return Config(
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
        retries={"max_attempts": config.max_attempts, "mode": "standard"},
    )


def classify_assume_role_error(error: ClientError, role_arn: str) -> AssumeRoleFailure:
    """
    Map an STS AssumeRole ClientError to an AssumeRoleFailure.

    Args:
        error: ClientError raised by sts.assume_role
        role_arn: ARN of the role that was being assumed

    Returns:
        AssumeRoleFailure carrying the matching reason (OTHER for unknown codes)
    """
    error_code = error.response.get("Error", {}).get("Code", "Unknown")
    reason = _ASSUME_ROLE_REASONS.get(error_code, AssumeRoleFailureReason.OTHER)
    return AssumeRoleFailure(reason, str(error), role_arn=role_arn)


def get_session_token(params: SessionParams, config: SessionConfig) -> CredentialsTypeDef:
    """
    Exchange an MFA token for temporary credentials.

    Args:
        params: MFA device serial, token, duration and optional profile
        config: Session configuration (client timeouts)

    Returns:
        STS Credentials for the MFA session

    Raises:
        AuthFailure: If STS rejects the token/serial or local credentials are unusable
        TransportFailure: If STS cannot be reached
    """
    logger.debug(f"Requesting session token for MFA device {params.serial_device}")
    try:
        source_session = Session(profile_name=params.profile) if params.profile else Session()
        sts: STSClient = source_session.client("sts", config=sts_client_config(config))
        resp: GetSessionTokenResponseTypeDef = sts.get_session_token(
            SerialNumber=params.serial_device,
            TokenCode=params.mfa_token,
            DurationSeconds=params.effective_duration()
        )
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        raise AuthFailure(f"failed to get a session token ({error_code}): {e}") from e
    except _LOCAL_CREDENTIAL_ERRORS as e:
        raise AuthFailure(f"failed to get a session token: {e}") from e
    except BotoCoreError as e:
        raise TransportFailure(f"failed to get a session token: {e}") from e

    return resp["Credentials"]


def assume_role(
    base_session: Session,
    role_arn: str,
    region: str,
    config: SessionConfig
) -> SessionHandle:
    """
    Assume an IAM role and return a handle with temporary credentials.

    Args:
        base_session: Session to use for assuming role
        role_arn: ARN of the role to assume
        region: Region the returned session is bound to
        config: Session configuration (session name, duration, client timeouts)

    Returns:
        SessionHandle with assumed role credentials

    Raises:
        AssumeRoleFailure: If STS rejects the role assumption
        TransportFailure: If STS cannot be reached
    """
    logger.debug(f"Assuming {role_arn} in {region}")
    try:
        sts: STSClient = base_session.client(
            "sts",
            region_name=region,
            config=sts_client_config(config)
        )
        resp: AssumeRoleResponseTypeDef = sts.assume_role(
            RoleArn=role_arn,
            RoleSessionName=config.role_session_name,
            DurationSeconds=config.assume_duration
        )
    except ClientError as e:
        raise classify_assume_role_error(e, role_arn) from e
    except BotoCoreError as e:
        raise TransportFailure(f"failed to assume role {role_arn}: {e}") from e

    return SessionHandle.from_credentials(resp["Credentials"], region)
