"""
Parse, mutate, serialize and redact MongoDB connection strings.

Example:
    >>> from mongodb_connection_string import ConnectionString, redact_connection_string
    >>> cs = ConnectionString("mongodb://localhost:27017,otherhost/?replicaSet=rs0")
    >>> cs.hosts
    ['localhost:27017', 'otherhost']
    >>> cs.search_params.get("REPLICASET")
    'rs0'
    >>> redact_connection_string("mongodb://admin:pw@localhost/")
    'mongodb://<credentials>@localhost/'
"""
from .config import APP_VERSION as __version__
from .connection_string import ConnectionString
from .display import sanitize_for_display
from .errors import MongoParseError
from .record import CommaAndColonSeparatedRecord
from .redact import redact_connection_string
from .search_params import CaseInsensitiveSearchParams

__all__ = [
    "CaseInsensitiveSearchParams",
    "CommaAndColonSeparatedRecord",
    "ConnectionString",
    "MongoParseError",
    "redact_connection_string",
    "sanitize_for_display",
]
