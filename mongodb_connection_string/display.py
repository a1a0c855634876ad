"""
Connection string display helpers.
Provides a credential-free summary of a connection string for display purposes.
"""
import logging
from html import escape
from urllib.parse import unquote

from .connection_string import ConnectionString
from .errors import MongoParseError

logger = logging.getLogger(__name__)

FALLBACK_DISPLAY = "[Connection String Provided]"


def sanitize_for_display(connection_string):
    """
    Sanitize connection string for safe HTML display.
    Removes credentials and options and escapes HTML special characters.

    Args:
        connection_string (str): Connection string to sanitize

    Returns:
        str: Sanitized string safe for HTML display
    """
    try:
        parsed = ConnectionString(connection_string)
    except MongoParseError as e:
        logger.error(f"Error sanitizing connection string for display: {e}")
        return FALLBACK_DISPLAY

    hosts_str = ", ".join(escape(host) for host in parsed.hosts)

    # Include database name if present (without credentials)
    database = unquote(parsed.pathname.lstrip("/"))
    if database:
        return f"{hosts_str} (database: {escape(database)})"
    return hosts_str
