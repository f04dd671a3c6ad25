from typing import Dict
import argparse
import logging
import sys

from .config import MFASessionConfig, SessionParams
from .errors import AuthFailure, TransportFailure
from .orchestrator import MFASession
from .output import OutputHandler
from .prompt import ask_mfa
from .usage import load_yaml_config, parse_cli_args, merge_configs

logger = logging.getLogger(__name__)


def setup_configuration(cli_args: argparse.Namespace, yaml_config: Dict) -> MFASessionConfig:
    """
    Merge and validate configuration from YAML and CLI arguments.

    Args:
        cli_args: Parsed command line arguments
        yaml_config: Configuration loaded from YAML file

    Returns:
        Validated MFASessionConfig object

    Raises:
        SystemExit: If configuration validation fails
    """
    try:
        final_config = merge_configs(yaml_config, cli_args)
    except (ValueError, TypeError) as e:
        OutputHandler.error("Configuration Error", e)
        sys.exit(1)

    OutputHandler.success("Final Config", final_config.model_dump())

    return final_config


def build_session_params(final_config: MFASessionConfig, cli_args: argparse.Namespace) -> SessionParams:
    """
    Build the MFA exchange parameters, prompting for the token when needed.

    Args:
        final_config: Validated configuration
        cli_args: Parsed command line arguments (may carry mfa_token)

    Returns:
        SessionParams for the bootstrap
    """
    mfa_token = getattr(cli_args, "mfa_token", None) or ask_mfa()
    return SessionParams(
        serial_device=final_config.serial_device,
        mfa_token=mfa_token,
        mfa_duration=final_config.mfa_duration,
        profile=final_config.profile,
    )


def create_mfa_session(params: SessionParams, final_config: MFASessionConfig) -> MFASession:
    """
    Bootstrap the MFA session, exiting on failure.

    Raises:
        SystemExit: If STS rejects the MFA exchange or cannot be reached
    """
    try:
        return MFASession.create(params, final_config.session)
    except AuthFailure as e:
        OutputHandler.error("Authentication Error", e)
        logger.error(f"MFA authentication failed: {e}", exc_info=True)
        sys.exit(1)
    except TransportFailure as e:
        OutputHandler.error("Connection Error", e)
        logger.error(f"Could not reach STS: {e}", exc_info=True)
        sys.exit(1)


def main() -> None:
    """Main entry point for mfa-session."""
    logging.basicConfig(level=logging.INFO)

    cli_args = parse_cli_args()
    yaml_config = load_yaml_config(cli_args.config)

    final_config = setup_configuration(cli_args, yaml_config)
    params = build_session_params(final_config, cli_args)
    mfa_session = create_mfa_session(params, final_config)

    result = mfa_session.assume_bulk(
        final_config.role_name,
        final_config.accounts,
        final_config.regions,
    )

    OutputHandler.section_header("CACHED SESSIONS")
    mfa_session.for_each_session(OutputHandler.cached_session)
    OutputHandler.bulk_result(result)

    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
