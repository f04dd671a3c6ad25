import argparse
import yaml
from typing import Any, Dict, List
from .config import MFASessionConfig

# CLI options that override fields of the nested session config
SESSION_CLI_FIELDS = ("max_workers", "discover_regions")


def _comma_separated(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Dictionary containing the loaded configuration, or empty dict if file not found
    """
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"Config file '{path}' not found. Continuing without it.")
        return {}


def parse_cli_args() -> argparse.Namespace:
    """
    Parse command line arguments for the mfa-session tool.

    Returns:
        Parsed command line arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="mfa-session",
        description="mfa-session - assume a role across AWS accounts and regions from one MFA session"
    )

    parser.add_argument(
        '--config',
        required=True,
        type=str,
        help='Path to config YAML'
    )

    # MFA (override YAML if provided)
    parser.add_argument(
        '--serial-device',
        dest='serial_device',
        type=str,
        help='ARN or serial number of the MFA device'
    )
    parser.add_argument(
        '--profile',
        dest='profile',
        type=str,
        help='Named AWS profile used for the MFA exchange'
    )
    parser.add_argument(
        '--mfa-duration',
        dest='mfa_duration',
        type=int,
        help='Validity of the MFA session in seconds (default 3600)'
    )
    parser.add_argument(
        '--mfa-token',
        dest='mfa_token',
        type=str,
        help='MFA token code (prompted for when omitted)'
    )

    # Fan-out
    parser.add_argument(
        '--role-name',
        dest='role_name',
        type=str,
        help='Role name to assume in every account'
    )
    parser.add_argument(
        '--accounts',
        dest='accounts',
        type=_comma_separated,
        help='Comma separated account IDs'
    )
    parser.add_argument(
        '--regions',
        dest='regions',
        type=_comma_separated,
        help='Comma separated regions (default: built-in region list)'
    )
    parser.add_argument(
        '--discover-regions',
        dest='discover_regions',
        action='store_true',
        default=argparse.SUPPRESS,
        help='Use the regions enabled for the MFA account when --regions is not given'
    )
    parser.add_argument(
        '--max-workers',
        dest='max_workers',
        type=int,
        help='Maximum concurrent role assumptions (default 10)'
    )

    return parser.parse_args()


def merge_configs(yaml_config: Dict[str, Any], cli_args: argparse.Namespace) -> MFASessionConfig:
    """
    Merge YAML configuration with CLI arguments and validate the result.

    Args:
        yaml_config: Configuration loaded from YAML file
        cli_args: Parsed command line arguments

    Returns:
        Validated MFASessionConfig object

    Raises:
        ValueError: If configuration validation fails
        TypeError: If configuration has type errors
    """
    # Start with YAML
    merged = yaml_config.copy()
    session = dict(merged.get("session") or {})

    # Apply CLI overrides (only if CLI provided them)
    cli_values = {k: v for k, v in vars(cli_args).items() if v is not None}
    merged.update({
        k: v for k, v in cli_values.items()
        if k in MFASessionConfig.model_fields and k != "session"
    })
    session.update({k: v for k, v in cli_values.items() if k in SESSION_CLI_FIELDS})
    merged["session"] = session

    # Validate and return final config (will raise if required fields missing or wrong types)
    return MFASessionConfig(**merged)
