"""
connection_string.py

This module contains the ConnectionString class, a structured and mutable view
of a "mongodb://" or "mongodb+srv://" URI.

Unlike a generic URL, a MongoDB connection string may name several hosts in
its authority ("mongodb://a:27017,b:27018/"). The host list is exposed as a
plain Python list owned by the instance, so appending to it or assigning items
is reflected the next time the string is rendered.

Constants:
    SCHEME (str): Prefix of a standard connection string.
    SRV_SCHEME (str): Prefix of a connection string resolved through DNS SRV.
    INVALID_SCHEME_MESSAGE (str): Error message for an unrecognized scheme.

Classes:
    ConnectionString: Parsed connection string with live hosts and search params.
"""
import ipaddress
import logging
import re
from urllib.parse import quote, unquote

from pymongo.uri_parser import parse_host

from .errors import MongoParseError
from .redact import redact_connection_string
from .search_params import CaseInsensitiveSearchParams

logger = logging.getLogger(__name__)

SCHEME = "mongodb://"
SRV_SCHEME = "mongodb+srv://"
PROTOCOLS = ("mongodb:", "mongodb+srv:")

INVALID_SCHEME_MESSAGE = (
    'Invalid scheme, expected connection string to start with "mongodb://" or "mongodb+srv://"'
)

# Hostname, IPv4 address or percent-encoded socket path, without the port.
HOST_NAME = re.compile(r"^(?:[A-Za-z0-9.-]|%[0-9A-Fa-f]{2})+$")
IPV6_HOST = re.compile(r"^\[([^\[\]]+)\](?::(.*))?$")
PORT = re.compile(r"^[0-9]+$")
AUTHORITY_END = re.compile(r"[/?#]")
UNESCAPED_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")
# gen-delims that must be percent-encoded inside userinfo
USERINFO_RESERVED = re.compile(r"[@\[\]]")

# Characters written as-is in userinfo; everything else is percent-encoded.
USERINFO_SAFE = "!$&'()*+,"


def _decode_userinfo(value):
    if USERINFO_RESERVED.search(value):
        raise MongoParseError(
            "Username and password must be escaped according to RFC 3986"
        )
    if UNESCAPED_PERCENT.search(value):
        raise MongoParseError("Username or password contains malformed percent-encoding")
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as e:
        raise MongoParseError("Username or password is not valid percent-encoded UTF-8") from e


def _parse_userinfo(userinfo, loose_validation):
    """
    Split and decode the userinfo part of the authority.

    Args:
        userinfo (str): Everything before the last "@" of the authority.
        loose_validation (bool): Allow an empty username with a password.

    Returns:
        tuple: The decoded (username, password).

    Raises:
        MongoParseError: If the userinfo is empty, badly escaped, or has an
            empty username in strict mode.
    """
    if userinfo in ("", ":"):
        raise MongoParseError("URI contained empty userinfo section")

    username, _, password = userinfo.partition(":")
    if not username and not loose_validation:
        raise MongoParseError("URI contained empty userinfo section")
    if ":" in password:
        raise MongoParseError("Password contains unescaped characters")

    return _decode_userinfo(username), _decode_userinfo(password)


def _split_host_port(host):
    """
    Split a host token into its address and raw port text.

    The port is whatever follows the closing bracket of an IPv6 literal, or
    the last ":" of any other token. A ".sock" suffix gets no special
    treatment here, so "a:1.sock" has the port "1.sock".

    Returns:
        tuple: (address, port), where port is None when the token has no ":".

    Raises:
        MongoParseError: If the address part is malformed.
    """
    if host.startswith("["):
        match = IPV6_HOST.match(host)
        if match is None:
            raise MongoParseError("Invalid IPv6 address literal in host list")
        try:
            ipaddress.IPv6Address(match.group(1))
        except ValueError as e:
            raise MongoParseError("Invalid IPv6 address literal in host list") from e
        return match.group(1), match.group(2)

    address, separator, port = host.rpartition(":")
    if not separator:
        address, port = host, None
    if not HOST_NAME.match(address):
        raise MongoParseError("Host contains invalid characters")
    return address, port


def _validate_host(host, is_srv):
    """
    Validate a single host token.

    Args:
        host (str): A token of the host list, e.g. "db1:27017" or "[::1]".
        is_srv (bool): Whether the token is a mongodb+srv service name.

    Returns:
        int or None: The explicit port, or None when the token has no port.
    """
    if not host:
        raise MongoParseError("Empty host (or extra comma in host list)")

    _, port = _split_host_port(host)
    if port is None:
        return None
    if is_srv:
        raise MongoParseError("mongodb+srv URI cannot have port number")
    if not PORT.match(port):
        raise MongoParseError("Port must be an integer between 1 and 65535")

    try:
        _, port = parse_host(host, None)
    except ValueError as e:
        raise MongoParseError(f"Invalid host: {e}") from e
    return port


def _validate_hosts(hosts, is_srv):
    if not hosts:
        raise MongoParseError("Protocol and host list are required")

    for host in hosts:
        _validate_host(host, is_srv)

    if is_srv and len(hosts) != 1:
        raise MongoParseError("mongodb+srv URI cannot have multiple service names")


def _split_connection_string(uri, loose_validation):
    """
    Split a connection string into its validated components.

    Args:
        uri (str): The connection string.
        loose_validation (bool): Relax the empty-username rule.

    Returns:
        dict: protocol, username, password, hosts, pathname, search and hash.

    Raises:
        MongoParseError: If the string is not a valid connection string.
    """
    if not isinstance(uri, str) or not uri.startswith((SCHEME, SRV_SCHEME)):
        raise MongoParseError(INVALID_SCHEME_MESSAGE)

    protocol, _, remainder = uri.partition("//")

    match = AUTHORITY_END.search(remainder)
    end = match.start() if match else len(remainder)
    authority, rest = remainder[:end], remainder[end:]

    username = password = ""
    userinfo, at, host_list = authority.rpartition("@")
    if at:
        username, password = _parse_userinfo(userinfo, loose_validation)

    hosts = host_list.split(",") if host_list else []
    _validate_hosts(hosts, protocol == "mongodb+srv:")

    before_hash, _, fragment = rest.partition("#")
    pathname, _, query = before_hash.partition("?")

    return {
        "protocol": protocol,
        "username": username,
        "password": password,
        "hosts": hosts,
        "pathname": pathname or "/",
        "search": f"?{query}" if query else "",
        "hash": f"#{fragment}" if fragment else "",
    }


def _read_only(name):
    def getter(self):
        return ""

    def setter(self, value):
        raise AttributeError(
            f"Cannot set {name} on a ConnectionString, modify the hosts list instead"
        )

    return property(getter, setter)


class ConnectionString:
    """
    A parsed MongoDB connection string.

    Construction either succeeds with a fully validated instance or raises
    MongoParseError. Afterwards the instance is a plain mutable value:
    credentials, path, query and fragment can be reassigned, the hosts list
    can be mutated in place, and search_params edits are reflected in search.

    Attributes:
        protocol (str): "mongodb:" or "mongodb+srv:".
        username (str): Decoded username, "" when absent.
        password (str): Decoded password, "" when absent.
        hosts (list): Host tokens such as "localhost:27017" or "[::1]".
        pathname (str): Path, "/" when absent.
        search (str): Raw query string with its "?", or "".
        search_params (CaseInsensitiveSearchParams): Parsed view of search.
        hash (str): Raw fragment with its "#", or "".
    """

    def __init__(self, uri, loose_validation=False):
        """
        Parse and validate a connection string.

        Args:
            uri (str): The connection string to parse.
            loose_validation (bool): Accept an empty username with a non-empty
                password ("mongodb://:password@host"). The scheme and the
                mongodb+srv host rules are enforced regardless.

        Raises:
            MongoParseError: If the string is not a valid connection string.
        """
        try:
            parts = _split_connection_string(uri, loose_validation)
        except MongoParseError as e:
            logger.debug(f"Rejected connection string: {e}")
            raise

        self._protocol = parts["protocol"]
        self._username = parts["username"]
        self._password = parts["password"]
        self._hosts = parts["hosts"]
        self._pathname = parts["pathname"]
        self._hash = parts["hash"]
        self._search = parts["search"]
        self._search_params = CaseInsensitiveSearchParams(
            self._search, on_change=self._sync_search
        )

    def _sync_search(self):
        serialized = str(self._search_params)
        self._search = f"?{serialized}" if serialized else ""

    host = _read_only("host")
    hostname = _read_only("hostname")
    port = _read_only("port")

    @property
    def href(self):
        return str(self)

    @href.setter
    def href(self, value):
        raise AttributeError("Cannot set href on a ConnectionString, create a new instance instead")

    @property
    def protocol(self):
        return self._protocol

    @protocol.setter
    def protocol(self, value):
        if not value.endswith(":"):
            value = f"{value}:"
        if value not in PROTOCOLS:
            raise MongoParseError(INVALID_SCHEME_MESSAGE)
        self._protocol = value

    @property
    def is_srv(self):
        return self._protocol == "mongodb+srv:"

    @property
    def username(self):
        return self._username

    @username.setter
    def username(self, value):
        self._username = value

    @property
    def password(self):
        return self._password

    @password.setter
    def password(self, value):
        self._password = value

    @property
    def hosts(self):
        return self._hosts

    @hosts.setter
    def hosts(self, value):
        if isinstance(value, str):
            raise TypeError("hosts must be a list of host strings, not a str")
        self._hosts = list(value)

    @property
    def pathname(self):
        return self._pathname

    @pathname.setter
    def pathname(self, value):
        if not value.startswith("/"):
            value = f"/{value}"
        self._pathname = value

    @property
    def search(self):
        return self._search

    @search.setter
    def search(self, value):
        query = value[1:] if value.startswith("?") else value
        self._search = f"?{query}" if query else ""
        self._search_params._replace(query)

    @property
    def search_params(self):
        return self._search_params

    @property
    def hash(self):
        return self._hash

    @hash.setter
    def hash(self, value):
        fragment = value[1:] if value.startswith("#") else value
        self._hash = f"#{fragment}" if fragment else ""

    def typed_search_params(self):
        """
        Return the search params object for callers that annotate which
        option names they expect. No runtime restriction is applied.
        """
        return self._search_params

    def clone(self):
        """
        Return a copy that shares no hosts or search params storage.
        """
        duplicate = object.__new__(type(self))
        duplicate._protocol = self._protocol
        duplicate._username = self._username
        duplicate._password = self._password
        duplicate._hosts = list(self._hosts)
        duplicate._pathname = self._pathname
        duplicate._hash = self._hash
        duplicate._search = self._search
        duplicate._search_params = self._search_params.copy(on_change=duplicate._sync_search)
        return duplicate

    def __copy__(self):
        return self.clone()

    def __deepcopy__(self, memo):
        return self.clone()

    def redact(self, redact_usernames=None, replacement_string=None):
        """
        Return this connection string with credentials masked.

        See redact_connection_string for the meaning of the arguments.
        """
        return redact_connection_string(
            str(self),
            redact_usernames=redact_usernames,
            replacement_string=replacement_string,
        )

    def _auth_string(self):
        if not self._username and not self._password:
            return ""
        auth = quote(self._username, safe=USERINFO_SAFE)
        if self._password:
            auth += ":" + quote(self._password, safe=USERINFO_SAFE)
        return f"{auth}@"

    def __str__(self):
        return (
            f"{self._protocol}//{self._auth_string()}{','.join(self._hosts)}"
            f"{self._pathname}{self._search}{self._hash}"
        )

    def __eq__(self, other):
        if not isinstance(other, ConnectionString):
            return NotImplemented
        return (
            self._protocol == other._protocol
            and self._username == other._username
            and self._password == other._password
            and self._hosts == other._hosts
            and self._pathname == other._pathname
            and self._search == other._search
            and self._hash == other._hash
        )

    __hash__ = None

    def __repr__(self):
        return f"ConnectionString({self.redact()!r})"
