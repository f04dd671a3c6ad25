"""
Utility functions used across the mfasession codebase.
"""

from .constants import ROLE_ARN_TEMPLATE


def build_role_arn(account: str, role_name: str) -> str:
    """
    Build the IAM role ARN for a role in an account.

    Args:
        account: 12-digit account ID
        role_name: Role name without path

    Returns:
        ARN in format: arn:aws:iam::<account>:role/<role_name>
    """
    return ROLE_ARN_TEMPLATE.format(account=account, role_name=role_name)


def format_pair(account: str, region: str) -> str:
    """Format a consistent (account, region) identifier string."""
    return f"{account}/{region}"
