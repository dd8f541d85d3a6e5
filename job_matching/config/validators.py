"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List

from .duration import DurationParseError, parse_duration


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Inspect a raw configuration mapping for settings that are valid but unwise.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    accounts = config_dict.get("accounts", {})
    if isinstance(accounts, dict):
        ttl = accounts.get("verification_code_ttl")
        if isinstance(ttl, str):
            try:
                if parse_duration(ttl) < 300:
                    warning_messages.append(
                        f"Short verification_code_ttl ({ttl}) may expire before emails arrive"
                    )
            except DurationParseError:
                # Reported as a hard error by model validation
                pass

    server = config_dict.get("server", {})
    if isinstance(server, dict) and server.get("host") == "0.0.0.0":
        warning_messages.append(
            "server.host is 0.0.0.0; the API trusts X-User-Id and must sit behind a gateway"
        )

    known_sections = {"server", "matching", "accounts", "email", "logging"}
    for key in sorted(set(config_dict) - known_sections):
        warning_messages.append(f"Unknown configuration section '{key}' will be ignored")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
