"""
Centralized output handling with consistent formatting.

This module provides a single point of control for all user-facing output,
ensuring consistent formatting and making it easy to modify output behavior.
"""

import json
from typing import Any, Optional

from .aws.sessions import SessionHandle
from .types import BulkAssumeResult
from .utils import format_pair


class OutputHandler:
    """Centralized output handling with consistent formatting."""

    @staticmethod
    def error(title: str, error: Exception) -> None:
        """
        Print formatted error message.

        Args:
            title: Error title
            error: Exception that occurred
        """
        print(f"\n🚨 {title}:\n{error}\n")

    @staticmethod
    def success(title: str, data: Optional[Any] = None) -> None:
        """
        Print formatted success message.

        Args:
            title: Success message title
            data: Optional data to display (dict will be JSON formatted)
        """
        print(f"\n✅ {title}")
        if not data:
            return

        if isinstance(data, dict):
            print(json.dumps(data, indent=2, default=str))
            return

        print(data)

    @staticmethod
    def section_header(title: str) -> None:
        """
        Print section header with divider.

        Args:
            title: Section title
        """
        print("\n" + "=" * 80)
        print(title)
        print("=" * 80)

    @staticmethod
    def cached_session(account: str, region: str, handle: SessionHandle) -> None:
        """Print one cached session line with its expiry."""
        print(f"  {format_pair(account, region)}  expires {handle.expiration.isoformat()}")

    @staticmethod
    def bulk_result(result: BulkAssumeResult) -> None:
        """
        Print the failures of a bulk assume, or a success line when there are none.

        Args:
            result: Result returned by MFASession.assume_bulk
        """
        if result.ok:
            OutputHandler.success(f"Assumed {result.role_name} in {len(result.succeeded)} account/region pairs")
            return

        OutputHandler.section_header(
            f"FAILED TO ASSUME {result.role_name} ({len(result.failures)} of {result.total} pairs)"
        )
        for failure in result.failures:
            print(f"  {format_pair(failure.account, failure.region)}: {failure.error}")
