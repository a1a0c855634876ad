"""
redact.py

This module contains the function for masking credentials in connection
strings before they are logged or displayed.

The input is not validated as a MongoDB connection string. Only the
userinfo, the credential-bearing query parameters and the AWS session token
inside authMechanismProperties are rewritten; every other character of the
input, including its percent-encoding, is passed through unchanged.

Functions:
    redact_connection_string(uri, redact_usernames, replacement_string): Mask credentials in a URI.
"""
import logging
import re
from urllib.parse import unquote_plus

from .config import get_redaction_defaults
from .record import CommaAndColonSeparatedRecord

logger = logging.getLogger(__name__)

# Query parameters whose values are always masked.
SENSITIVE_PARAMETERS = {"tlscertificatekeyfilepassword", "proxypassword"}
# Query parameters masked only when usernames are redacted.
SENSITIVE_USERNAME_PARAMETERS = {"proxyusername"}

AUTH_MECHANISM_PROPERTIES = "authmechanismproperties"
AWS_SESSION_TOKEN = "AWS_SESSION_TOKEN"

AUTHORITY_END = re.compile(r"[/?#]")
QUERY_START = re.compile(r"[?#]")
# "user:" prefix of a userinfo whose password holds unescaped "/", "?" or "#".
USERNAME_PREFIX = re.compile(r"[^/?#@:]*:")
# Separators of authMechanismProperties, literal or percent-encoded.
PROPERTY_SEPARATOR = re.compile(r"(,|%2C)", re.IGNORECASE)
PROPERTY_KEY_VALUE = re.compile(r"^(.*?)(:|%3A)(.*)$", re.IGNORECASE | re.DOTALL)


def _split_authority(uri):
    """
    Split uri into the text up to "//", the authority, and the rest.

    The authority normally ends at the first "/", "?" or "#". When it holds
    no "@" but starts with a "user:" prefix, the password contains one of
    those characters unescaped. The authority is then extended to the host
    list after the last "@" that comes before the "?" or "#" following the
    first "@".
    """
    scheme_end = uri.find("//")
    if scheme_end == -1:
        return "", "", uri

    start = scheme_end + 2
    match = AUTHORITY_END.search(uri, start)
    end = match.start() if match else len(uri)

    if "@" not in uri[start:end] and USERNAME_PREFIX.match(uri, start):
        first_at = uri.find("@", end)
        if first_at != -1:
            query_start = QUERY_START.search(uri, first_at)
            at = uri.rfind("@", first_at, query_start.start() if query_start else len(uri))
            match = AUTHORITY_END.search(uri, at)
            end = match.start() if match else len(uri)

    return uri[:start], uri[start:end], uri[end:]


def _redact_userinfo(userinfo, redact_usernames, replacement_string):
    if redact_usernames:
        return replacement_string

    username, separator, password = userinfo.partition(":")
    if not separator or not password:
        return userinfo
    return f"{username}:{replacement_string}"


def _redact_mechanism_properties(raw_value, replacement_string):
    """
    Mask the AWS_SESSION_TOKEN entry of a raw authMechanismProperties value.

    Args:
        raw_value (str): The value exactly as it appears in the query string.
        replacement_string (str): Token substituted for the session token.

    Returns:
        str: raw_value with only the session token replaced.
    """
    properties = CommaAndColonSeparatedRecord(unquote_plus(raw_value))
    if not properties.get(AWS_SESSION_TOKEN):
        return raw_value

    parts = PROPERTY_SEPARATOR.split(raw_value)
    # Even indexes hold entries, odd indexes the separators between them.
    for index in range(0, len(parts), 2):
        match = PROPERTY_KEY_VALUE.match(parts[index])
        if match is None or not match.group(3):
            continue
        if unquote_plus(match.group(1)).lower() == AWS_SESSION_TOKEN.lower():
            parts[index] = f"{match.group(1)}{match.group(2)}{replacement_string}"
    return "".join(parts)


def _redact_query(query, redact_usernames, replacement_string):
    sensitive = set(SENSITIVE_PARAMETERS)
    if redact_usernames:
        sensitive |= SENSITIVE_USERNAME_PARAMETERS

    segments = query.split("&")
    for index, segment in enumerate(segments):
        raw_key, separator, raw_value = segment.partition("=")
        if not separator or not raw_value:
            continue

        key = unquote_plus(raw_key).lower()
        if key in sensitive:
            segments[index] = f"{raw_key}={replacement_string}"
        elif key == AUTH_MECHANISM_PROPERTIES:
            redacted = _redact_mechanism_properties(raw_value, replacement_string)
            segments[index] = f"{raw_key}={redacted}"
    return "&".join(segments)


def redact_connection_string(uri, redact_usernames=None, replacement_string=None):
    """
    Replace the credentials in a connection string with a placeholder.

    The string only needs a URL-like shape; any scheme is accepted. The
    userinfo is the part of the authority before its last "@", also when
    an unescaped "/", "?" or "#" in the password cuts the authority short.

    Args:
        uri (str): The connection string to redact.
        redact_usernames (bool, optional): Mask the username together with the
            password, and mask proxyUsername. Defaults to
            config.REDACT_USERNAMES (True).
        replacement_string (str, optional): Token written in place of each
            masked value. Defaults to config.REPLACEMENT_STRING
            ("<credentials>").

    Returns:
        str: The redacted connection string. Input without credentials is
        returned unchanged.

    Example:
        >>> redact_connection_string("mongodb://admin:pw@host/db?proxyPassword=bar")
        'mongodb://<credentials>@host/db?proxyPassword=<credentials>'
    """
    defaults = get_redaction_defaults()
    if redact_usernames is None:
        redact_usernames = defaults["redact_usernames"]
    if replacement_string is None:
        replacement_string = defaults["replacement_string"]

    head, authority, tail = _split_authority(uri)
    userinfo, at, host_list = authority.rpartition("@")
    if at and userinfo:
        userinfo = _redact_userinfo(userinfo, redact_usernames, replacement_string)
        authority = f"{userinfo}@{host_list}"

    before_hash, hash_separator, fragment = tail.partition("#")
    path, query_separator, query = before_hash.partition("?")
    if query:
        query = _redact_query(query, redact_usernames, replacement_string)

    redacted = f"{head}{authority}{path}{query_separator}{query}{hash_separator}{fragment}"
    if redacted != uri:
        logger.debug("Redacted credentials from connection string")
    return redacted
