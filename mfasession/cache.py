"""
Concurrent two-level cache of role sessions.

Sessions are stored as ``account -> region -> SessionHandle``. The outer
mapping is guarded by one lock and each account owns its own lock for its
region slots, so writers for different accounts never wait on each other.
Account entries are never removed once ensured.
"""

import threading
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .aws.sessions import SessionHandle
from .errors import PreconditionViolation, SessionExpired, SessionNotFound


SessionVisitor = Callable[[str, str, SessionHandle], None]
"""Callback invoked with (account, region, handle) by SessionCache.for_each."""


class _AccountSessions:
    """Region slots for a single account."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._regions: Dict[str, SessionHandle] = {}

    def put(self, region: str, handle: SessionHandle) -> None:
        with self._lock:
            self._regions[region] = handle

    def get(self, region: str) -> Optional[SessionHandle]:
        with self._lock:
            return self._regions.get(region)

    def snapshot(self) -> List[Tuple[str, SessionHandle]]:
        with self._lock:
            return list(self._regions.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._regions)


class SessionCache:
    """Thread-safe mapping of (account, region) to SessionHandle."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: Dict[str, _AccountSessions] = {}

    def ensure_account(self, account: str) -> None:
        """
        Create the region mapping for an account if it does not exist yet.

        Idempotent: an existing account keeps its cached sessions.

        Args:
            account: Account ID
        """
        with self._lock:
            if account not in self._accounts:
                self._accounts[account] = _AccountSessions()

    def _account(self, account: str) -> Optional[_AccountSessions]:
        with self._lock:
            return self._accounts.get(account)

    def put(self, account: str, region: str, handle: SessionHandle) -> None:
        """
        Insert or overwrite the session for an account and region.

        Args:
            account: Account ID, previously passed to ensure_account
            region: Region name
            handle: Session to cache

        Raises:
            PreconditionViolation: If ensure_account was never called for the account
        """
        sessions = self._account(account)
        if sessions is None:
            raise PreconditionViolation(
                f"account '{account}' must be ensured before caching a session for region '{region}'"
            )
        sessions.put(region, handle)

    def get(self, account: str, region: str) -> SessionHandle:
        """
        Return the cached session for an account and region.

        Expiry is checked at call time; expired sessions are not purged.

        Args:
            account: Account ID
            region: Region name

        Returns:
            The cached SessionHandle

        Raises:
            SessionNotFound: If nothing is cached for the pair
            SessionExpired: If the cached credentials are past their expiry
        """
        sessions = self._account(account)
        handle = sessions.get(region) if sessions is not None else None
        if handle is None:
            raise SessionNotFound(account, region)
        if handle.is_expired():
            raise SessionExpired(account, region)
        return handle

    def for_each(self, visitor: SessionVisitor) -> None:
        """
        Call visitor once per cached (account, region, handle) triple.

        Order is unspecified. Each account's regions are read from a snapshot,
        so puts running concurrently may or may not be observed. If the visitor
        raises, iteration stops and the exception propagates.

        Args:
            visitor: Callable taking (account, region, handle)
        """
        for account, region, handle in self._iter_entries():
            visitor(account, region, handle)

    def _iter_entries(self) -> Iterator[Tuple[str, str, SessionHandle]]:
        with self._lock:
            accounts = list(self._accounts.items())
        for account, sessions in accounts:
            for region, handle in sessions.snapshot():
                yield account, region, handle

    def accounts(self) -> List[str]:
        """Return the IDs of every ensured account."""
        with self._lock:
            return list(self._accounts)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        account, region = pair
        sessions = self._account(account)
        return sessions is not None and sessions.get(region) is not None

    def __len__(self) -> int:
        with self._lock:
            accounts = list(self._accounts.values())
        return sum(len(sessions) for sessions in accounts)
