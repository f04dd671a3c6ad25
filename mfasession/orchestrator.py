"""
Bulk role assumption across accounts and regions.

``MFASession`` holds the MFA base session and a ``SessionCache``. A bulk
assume submits one unit of work per (account, region) pair to a bounded
thread pool; each successful unit writes its session into the cache and
each failed unit is recorded in the returned ``BulkAssumeResult``. The call
returns only once every unit has finished.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from .aws.sessions import SessionHandle, assume_role, session_from_credentials
from .bootstrap import new_base_session
from .cache import SessionCache, SessionVisitor
from .config import SessionConfig, SessionParams
from .enums import OrchestratorState
from .errors import MFASessionError
from .regions import discover_regions
from .types import AccountRegion, AssumeFailure, BulkAssumeResult
from .utils import build_role_arn, format_pair

logger = logging.getLogger(__name__)


class MFASession:
    """
    MFA base session plus the cache of sessions assumed from it.

    Attributes:
        base_session: Handle for the MFA-derived credentials
        config: Session configuration used for every STS call
        cache: Cache populated by assume_bulk
        state: State of the most recent assume_bulk invocation
    """

    def __init__(
        self,
        base_session: SessionHandle,
        config: Optional[SessionConfig] = None,
        cache: Optional[SessionCache] = None
    ) -> None:
        self.base_session = base_session
        self.config = config if config is not None else SessionConfig()
        self.cache = cache if cache is not None else SessionCache()
        self.state = OrchestratorState.IDLE
        # boto3 Sessions are not thread-safe; each unit builds its own from these
        self._base_credentials = base_session.get().get_credentials().get_frozen_credentials()

    @classmethod
    def create(cls, params: SessionParams, config: Optional[SessionConfig] = None) -> "MFASession":
        """
        Bootstrap the MFA base session and return a ready MFASession.

        Raises:
            AuthFailure: If STS rejects the token/serial or local credentials are unusable
            TransportFailure: If STS cannot be reached
        """
        if config is None:
            config = SessionConfig()
        return cls(new_base_session(params, config), config)

    def get(self, account: str, region: str) -> SessionHandle:
        """Return the cached session for an account and region (see SessionCache.get)."""
        return self.cache.get(account, region)

    def for_each_session(self, visitor: SessionVisitor) -> None:
        self.cache.for_each(visitor)

    def assume(self, role_arn: str, region: str) -> SessionHandle:
        """
        Assume a role from the base session.

        Args:
            role_arn: ARN of the role to assume
            region: Region the new session is bound to

        Returns:
            SessionHandle for the assumed role

        Raises:
            AssumeRoleFailure: If STS rejects the role assumption
            TransportFailure: If STS cannot be reached
        """
        session = session_from_credentials(self._base_credentials, region)
        return assume_role(session, role_arn, region, self.config)

    def fan_out_regions(self) -> List[str]:
        """
        Return the regions used when assume_bulk is called without regions.

        With config.discover_regions set, the regions enabled for the base
        session account are listed through EC2; if that fails the configured
        regions are used instead.
        """
        if not self.config.discover_regions:
            return list(self.config.regions)

        try:
            session = session_from_credentials(self._base_credentials, self.base_session.region)
            return discover_regions(session)
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"Region discovery failed, using configured regions: {e}")
            return list(self.config.regions)

    def assume_bulk(
        self,
        role_name: str,
        accounts: Sequence[str],
        regions: Optional[Sequence[str]] = None
    ) -> BulkAssumeResult:
        """
        Assume role_name in every (account, region) pair and cache the sessions.

        A failing pair never stops the other pairs. Duplicate accounts or
        regions are collapsed so each cache slot is written at most once.

        Args:
            role_name: Name of the role to assume in each account
            accounts: Account IDs
            regions: Region names (defaults to fan_out_regions())

        Returns:
            BulkAssumeResult listing succeeded pairs and captured failures
        """
        if regions is None:
            regions = self.fan_out_regions()

        account_ids = list(dict.fromkeys(accounts))
        region_names = list(dict.fromkeys(regions))
        pairs: List[AccountRegion] = [
            (account, region) for account in account_ids for region in region_names
        ]

        for account in account_ids:
            self.cache.ensure_account(account)

        logger.info(
            f"Assuming role {role_name} in {len(account_ids)} accounts "
            f"across {len(region_names)} regions"
        )

        outcomes = self._run_units(role_name, pairs)

        result = BulkAssumeResult(role_name=role_name)
        for pair in pairs:
            error = outcomes[pair]
            if error is None:
                result.succeeded.append(pair)
            else:
                result.failures.append(AssumeFailure(account=pair[0], region=pair[1], error=error))

        logger.info(
            f"Role {role_name} assumed for {len(result.succeeded)} of {result.total} pairs, "
            f"{len(result.failures)} failed"
        )
        return result

    def _run_units(
        self,
        role_name: str,
        pairs: List[AccountRegion]
    ) -> Dict[AccountRegion, Optional[MFASessionError]]:
        outcomes: Dict[AccountRegion, Optional[MFASessionError]] = {}
        self._set_state(OrchestratorState.DISPATCHING)

        try:
            if not pairs:
                self._set_state(OrchestratorState.DRAINING)
                return outcomes

            max_workers = min(self.config.max_workers or len(pairs), len(pairs))
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                future_to_pair = {
                    executor.submit(self._assume_pair, role_name, account, region): (account, region)
                    for account, region in pairs
                }
                self._set_state(OrchestratorState.DRAINING)

                for future in as_completed(future_to_pair):
                    pair = future_to_pair[future]
                    try:
                        outcomes[pair] = future.result()
                    except Exception as e:
                        logger.error(
                            f"Unexpected error assuming {role_name} for {format_pair(*pair)}: {e}",
                            exc_info=True
                        )
                        error = MFASessionError(f"unexpected error assuming role {role_name}: {e!r}")
                        error.__cause__ = e
                        outcomes[pair] = error
        finally:
            self._set_state(OrchestratorState.DONE)

        return outcomes

    def _assume_pair(self, role_name: str, account: str, region: str) -> Optional[MFASessionError]:
        """Assume the role for one pair and cache it; return the error instead of raising."""
        role_arn = build_role_arn(account, role_name)
        try:
            handle = self.assume(role_arn, region)
        except MFASessionError as e:
            logger.warning(f"Failed to assume {role_name} for {format_pair(account, region)}: {e}")
            return e

        self.cache.put(account, region, handle)
        logger.debug(f"Cached session for {format_pair(account, region)}")
        return None

    def _set_state(self, state: OrchestratorState) -> None:
        logger.debug(f"Bulk assume state: {self.state.value} -> {state.value}")
        self.state = state
