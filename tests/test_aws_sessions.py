"""
Tests for mfasession.aws.sessions module.

Tests for session handles, the MFA token exchange and role assumption.
"""

import pytest
from datetime import datetime, timedelta, timezone
from botocore.config import Config
from botocore.credentials import ReadOnlyCredentials
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ProfileNotFound,
)
from unittest.mock import ANY, MagicMock, patch

from mfasession.aws.sessions import (
    SessionHandle,
    assume_role,
    classify_assume_role_error,
    get_session_token,
    session_from_credentials,
    sts_client_config,
)
from mfasession.config import SessionConfig, SessionParams
from mfasession.enums import AssumeRoleFailureReason
from mfasession.errors import AssumeRoleFailure, AuthFailure, TransportFailure

ROLE_ARN = "arn:aws:iam::123456789012:role/TestRole"
EXPIRATION = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


def _credentials(expiration: datetime = EXPIRATION) -> dict:
    return {
        "AccessKeyId": "FAKE_ACCESS_KEY_ID",
        "SecretAccessKey": "FAKE_SECRET_ACCESS_KEY",
        "SessionToken": "FAKE_SESSION_TOKEN",
        "Expiration": expiration,
    }


def _client_error(code: str, operation: str = "AssumeRole") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} message"}}, operation)


class TestSessionHandle:
    """Test SessionHandle construction and expiry."""

    def test_from_credentials_builds_session(self) -> None:
        """Test that credentials and region are passed to the boto3 Session."""
        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_new_session = MagicMock()
            mock_session_class.return_value = mock_new_session

            handle = SessionHandle.from_credentials(_credentials(), "eu-west-1")

            mock_session_class.assert_called_once_with(
                aws_access_key_id="FAKE_ACCESS_KEY_ID",
                aws_secret_access_key="FAKE_SECRET_ACCESS_KEY",
                aws_session_token="FAKE_SESSION_TOKEN",
                region_name="eu-west-1"
            )
            assert handle.get() is mock_new_session
            assert handle.region == "eu-west-1"
            assert handle.expiration == EXPIRATION

    def test_from_credentials_naive_expiration_is_utc(self) -> None:
        """Test that a naive Expiration is treated as UTC."""
        naive = datetime(2030, 1, 1, 12, 0)
        with patch("mfasession.aws.sessions.Session"):
            handle = SessionHandle.from_credentials(_credentials(naive), "us-east-1")

        assert handle.expiration == EXPIRATION
        assert handle.expiration.tzinfo is not None

    def test_not_expired_before_expiration(self) -> None:
        """Test that a handle valid for an hour is not expired now."""
        now = datetime.now(timezone.utc)
        handle = SessionHandle(session=MagicMock(), region="us-east-1", expiration=now + timedelta(seconds=3600))

        assert handle.is_expired(now) is False
        assert handle.is_expired() is False

    def test_expired_after_expiration(self) -> None:
        """Test that a handle valid for an hour is expired one second after."""
        now = datetime.now(timezone.utc)
        handle = SessionHandle(session=MagicMock(), region="us-east-1", expiration=now + timedelta(seconds=3600))

        assert handle.is_expired(now + timedelta(seconds=3601)) is True

    def test_naive_now_is_treated_as_utc(self) -> None:
        """Test that a naive now is compared as UTC instead of raising."""
        handle = SessionHandle(session=MagicMock(), region="us-east-1", expiration=EXPIRATION)

        assert handle.is_expired(datetime(2030, 1, 1, 11, 59)) is False
        assert handle.is_expired(datetime(2030, 1, 1, 12, 0)) is True

    def test_handle_is_immutable(self) -> None:
        """Test that a handle cannot be rebound to another region."""
        handle = SessionHandle(session=MagicMock(), region="us-east-1", expiration=EXPIRATION)

        with pytest.raises(AttributeError):
            handle.region = "us-west-2"  # type: ignore[misc]


class TestSessionFromCredentials:
    """Test session_from_credentials function."""

    def test_session_from_credentials(self) -> None:
        """Test that frozen credentials and region are passed to a new boto3 Session."""
        credentials = ReadOnlyCredentials("ASIABASE", "base-secret", "base-token")

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            session = session_from_credentials(credentials, "ap-south-1")

        mock_session_class.assert_called_once_with(
            aws_access_key_id="ASIABASE",
            aws_secret_access_key="base-secret",
            aws_session_token="base-token",
            region_name="ap-south-1"
        )
        assert session is mock_session_class.return_value


class TestStsClientConfig:
    """Test sts_client_config function."""

    def test_sts_client_config_uses_session_config(self) -> None:
        """Test that timeouts and retries come from SessionConfig."""
        config = SessionConfig(connect_timeout=2, read_timeout=7, max_attempts=4)

        client_config = sts_client_config(config)

        assert isinstance(client_config, Config)
        assert client_config.connect_timeout == 2
        assert client_config.read_timeout == 7
        assert client_config.retries == {"max_attempts": 4, "mode": "standard"}


class TestClassifyAssumeRoleError:
    """Test mapping of STS error codes to failure reasons."""

    def test_malformed_policy(self) -> None:
        failure = classify_assume_role_error(_client_error("MalformedPolicyDocument"), ROLE_ARN)
        assert failure.reason == AssumeRoleFailureReason.MALFORMED_POLICY
        assert failure.retryable is False

    def test_packed_policy_too_large(self) -> None:
        failure = classify_assume_role_error(_client_error("PackedPolicyTooLarge"), ROLE_ARN)
        assert failure.reason == AssumeRoleFailureReason.PACKED_POLICY_TOO_LARGE
        assert failure.retryable is False

    def test_region_disabled(self) -> None:
        failure = classify_assume_role_error(_client_error("RegionDisabledException"), ROLE_ARN)
        assert failure.reason == AssumeRoleFailureReason.REGION_DISABLED
        assert failure.retryable is False

    def test_other_error_code(self) -> None:
        """Test that unknown codes map to OTHER and keep the role ARN."""
        failure = classify_assume_role_error(_client_error("AccessDenied"), ROLE_ARN)
        assert failure.reason == AssumeRoleFailureReason.OTHER
        assert failure.role_arn == ROLE_ARN
        assert failure.retryable is True
        assert "AccessDenied" in str(failure)
        assert "[other]" in str(failure)


class TestAssumeRole:
    """Test assume_role function."""

    def test_assume_role_success(self) -> None:
        """Test successful role assumption."""
        mock_base_session = MagicMock()
        mock_sts_client = MagicMock()
        mock_base_session.client.return_value = mock_sts_client
        mock_sts_client.assume_role.return_value = {"Credentials": _credentials()}
        config = SessionConfig(role_session_name="TestSession", assume_duration=900)

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_new_session = MagicMock()
            mock_session_class.return_value = mock_new_session

            result = assume_role(mock_base_session, ROLE_ARN, "ap-south-1", config)

        mock_base_session.client.assert_called_once_with("sts", region_name="ap-south-1", config=ANY)
        mock_sts_client.assume_role.assert_called_once_with(
            RoleArn=ROLE_ARN,
            RoleSessionName="TestSession",
            DurationSeconds=900
        )
        assert result.get() is mock_new_session
        assert result.region == "ap-south-1"
        assert result.expiration == EXPIRATION

    def test_assume_role_client_error(self) -> None:
        """Test that a ClientError becomes AssumeRoleFailure with the original chained."""
        mock_base_session = MagicMock()
        mock_sts_client = MagicMock()
        mock_base_session.client.return_value = mock_sts_client
        error = _client_error("RegionDisabledException")
        mock_sts_client.assume_role.side_effect = error

        with pytest.raises(AssumeRoleFailure) as exc_info:
            assume_role(mock_base_session, ROLE_ARN, "me-south-1", SessionConfig())

        assert exc_info.value.reason == AssumeRoleFailureReason.REGION_DISABLED
        assert exc_info.value.__cause__ is error

    def test_assume_role_transport_error(self) -> None:
        """Test that botocore transport errors become TransportFailure."""
        mock_base_session = MagicMock()
        mock_sts_client = MagicMock()
        mock_base_session.client.return_value = mock_sts_client
        mock_sts_client.assume_role.side_effect = EndpointConnectionError(
            endpoint_url="https://sts.us-east-1.amazonaws.com"
        )

        with pytest.raises(TransportFailure) as exc_info:
            assume_role(mock_base_session, ROLE_ARN, "us-east-1", SessionConfig())

        assert exc_info.value.retryable is True
        assert ROLE_ARN in str(exc_info.value)


class TestGetSessionToken:
    """Test get_session_token function."""

    def test_get_session_token_success(self) -> None:
        """Test MFA exchange with the default credential chain."""
        params = SessionParams.default("arn:aws:iam::111111111111:mfa/alice", "123456")

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_sts_client = MagicMock()
            mock_session_class.return_value.client.return_value = mock_sts_client
            mock_sts_client.get_session_token.return_value = {"Credentials": _credentials()}

            result = get_session_token(params, SessionConfig())

        mock_session_class.assert_called_once_with()
        mock_session_class.return_value.client.assert_called_once_with("sts", config=ANY)
        mock_sts_client.get_session_token.assert_called_once_with(
            SerialNumber="arn:aws:iam::111111111111:mfa/alice",
            TokenCode="123456",
            DurationSeconds=3600
        )
        assert result["AccessKeyId"] == "FAKE_ACCESS_KEY_ID"

    def test_get_session_token_with_profile(self) -> None:
        """Test that the named profile selects the source credentials."""
        params = SessionParams(serial_device="SERIAL", mfa_token="654321", profile="ops")

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_sts_client = MagicMock()
            mock_session_class.return_value.client.return_value = mock_sts_client
            mock_sts_client.get_session_token.return_value = {"Credentials": _credentials()}

            get_session_token(params, SessionConfig())

        mock_session_class.assert_called_once_with(profile_name="ops")

    def test_get_session_token_zero_duration_uses_default(self) -> None:
        """Test that a zero duration is sent to STS as 3600 seconds."""
        params = SessionParams(serial_device="SERIAL", mfa_token="654321", mfa_duration=0)

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_sts_client = MagicMock()
            mock_session_class.return_value.client.return_value = mock_sts_client
            mock_sts_client.get_session_token.return_value = {"Credentials": _credentials()}

            get_session_token(params, SessionConfig())

        assert mock_sts_client.get_session_token.call_args.kwargs["DurationSeconds"] == 3600

    def test_get_session_token_rejected_token(self) -> None:
        """Test that an STS rejection becomes AuthFailure."""
        params = SessionParams.default("SERIAL", "000000")

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_sts_client = MagicMock()
            mock_session_class.return_value.client.return_value = mock_sts_client
            mock_sts_client.get_session_token.side_effect = _client_error("AccessDenied", "GetSessionToken")

            with pytest.raises(AuthFailure) as exc_info:
                get_session_token(params, SessionConfig())

        assert "AccessDenied" in str(exc_info.value)
        assert exc_info.value.retryable is False

    def test_get_session_token_unknown_profile(self) -> None:
        """Test that a missing profile becomes AuthFailure."""
        params = SessionParams(serial_device="SERIAL", mfa_token="123456", profile="missing")

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_session_class.side_effect = ProfileNotFound(profile="missing")

            with pytest.raises(AuthFailure):
                get_session_token(params, SessionConfig())

    def test_get_session_token_no_credentials(self) -> None:
        """Test that missing local credentials become AuthFailure."""
        params = SessionParams.default("SERIAL", "123456")

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_sts_client = MagicMock()
            mock_session_class.return_value.client.return_value = mock_sts_client
            mock_sts_client.get_session_token.side_effect = NoCredentialsError()

            with pytest.raises(AuthFailure):
                get_session_token(params, SessionConfig())

    def test_get_session_token_transport_error(self) -> None:
        """Test that a connection timeout becomes TransportFailure."""
        params = SessionParams.default("SERIAL", "123456")

        with patch("mfasession.aws.sessions.Session") as mock_session_class:
            mock_sts_client = MagicMock()
            mock_session_class.return_value.client.return_value = mock_sts_client
            mock_sts_client.get_session_token.side_effect = ConnectTimeoutError(
                endpoint_url="https://sts.amazonaws.com"
            )

            with pytest.raises(TransportFailure):
                get_session_token(params, SessionConfig())
