"""Interactive MFA token prompt."""

import sys

from .constants import DEFAULT_MFA_PROMPT


def ask_mfa_with_prompt(prompt: str) -> str:
    """
    Ask for an MFA token using a custom prompt.

    Blocks until a line is read from stdin.

    Args:
        prompt: Text printed before reading

    Returns:
        The line read, without its trailing line terminator
    """
    print(prompt, end="", flush=True)
    text = sys.stdin.readline()
    return text.rstrip("\r\n")


def ask_mfa() -> str:
    """Ask for an MFA token using the default prompt."""
    return ask_mfa_with_prompt(DEFAULT_MFA_PROMPT)
