"""
Configuration management for the connection string helpers.
Supports environment variables for the redaction defaults.
"""
import os

# Application constants
APP_VERSION = "1.0.0"

# Redaction settings
REPLACEMENT_STRING = os.getenv('MCS_REPLACEMENT_STRING', '<credentials>')
REDACT_USERNAMES = os.getenv('MCS_REDACT_USERNAMES', 'True').lower() == 'true'


def get_redaction_defaults():
    """
    Get the defaults used by redact_connection_string.

    Returns:
        dict: redact_usernames and replacement_string as configured.
    """
    return {
        'redact_usernames': REDACT_USERNAMES,
        'replacement_string': REPLACEMENT_STRING,
    }


def validate_config():
    """Validate configuration on startup."""
    if not REPLACEMENT_STRING:
        raise ValueError("Replacement string for redaction must not be empty.")

    return True
