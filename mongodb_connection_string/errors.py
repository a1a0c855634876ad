"""
Error types raised while parsing MongoDB connection strings.
"""
from pymongo.errors import InvalidURI


class MongoParseError(InvalidURI):
    """Raised when a connection string cannot be parsed or fails validation."""
    pass
