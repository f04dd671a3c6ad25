"""
Shared data types for bulk role assumption results.

This module contains the data classes returned by the orchestrator
to avoid circular import issues between the cache, the orchestrator
and the CLI.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import MFASessionError

AccountRegion = Tuple[str, str]
"""An (account id, region name) pair."""


@dataclass(frozen=True)
class AssumeFailure:
    """A single (account, region) pair whose role assumption failed."""
    account: str
    region: str
    error: MFASessionError


@dataclass
class BulkAssumeResult:
    """
    Outcome of one bulk assume invocation.

    Successes and failures are kept in the order the pairs were
    dispatched (accounts first, then regions), not completion order.
    """
    role_name: str
    succeeded: List[AccountRegion] = field(default_factory=list)
    failures: List[AssumeFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failures)

    def failed_pairs(self) -> List[AccountRegion]:
        return [(failure.account, failure.region) for failure in self.failures]
