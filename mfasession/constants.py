"""
Constants module for session defaults.

This module contains the default values shared by the bootstrap,
the orchestrator and the CLI. Per-run overrides live in
``mfasession.config.SessionConfig``.
"""

# Default validity for MFA and assumed-role credentials, in seconds
DEFAULT_MFA_DURATION = 3600

# Region the MFA base session is bound to
DEFAULT_REGION = "us-west-2"

# Format: arn:aws:iam::<account-id>:role/<role-name>
ROLE_ARN_TEMPLATE = "arn:aws:iam::{account}:role/{role_name}"

DEFAULT_ROLE_SESSION_NAME = "mfa-session"

DEFAULT_MFA_PROMPT = "Enter MFA:"

# Bulk assume worker pool size
DEFAULT_MAX_WORKERS = 10

# botocore client settings used for STS calls
DEFAULT_CONNECT_TIMEOUT = 5
DEFAULT_READ_TIMEOUT = 10
DEFAULT_MAX_ATTEMPTS = 3

# STS error codes reported by AssumeRole
STS_MALFORMED_POLICY_DOCUMENT = "MalformedPolicyDocument"
STS_PACKED_POLICY_TOO_LARGE = "PackedPolicyTooLarge"
STS_REGION_DISABLED = "RegionDisabledException"
