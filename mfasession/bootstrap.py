"""
MFA base session bootstrap.

Exchanges an MFA token for temporary credentials once per process run.
The resulting session is the source every role assumption is made from.
"""

import logging
from typing import Optional

from .aws.sessions import SessionHandle, get_session_token
from .config import SessionConfig, SessionParams

logger = logging.getLogger(__name__)


def new_base_session(params: SessionParams, config: Optional[SessionConfig] = None) -> SessionHandle:
    """
    Create the MFA base session.

    Performs exactly one STS GetSessionToken call; the call is not retried here.

    Args:
        params: MFA device serial, token, duration and optional profile
        config: Session configuration (defaults to SessionConfig())

    Returns:
        SessionHandle bound to config.default_region

    Raises:
        AuthFailure: If STS rejects the token/serial or local credentials are unusable
        TransportFailure: If STS cannot be reached
    """
    if config is None:
        config = SessionConfig()

    credentials = get_session_token(params, config)
    handle = SessionHandle.from_credentials(credentials, config.default_region)
    logger.info(f"Obtained MFA base session valid until {handle.expiration.isoformat()}")
    return handle
