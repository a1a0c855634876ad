"""
record.py

This module contains the codec for option values made of comma-separated
"key:value" pairs, such as authMechanismProperties
("SERVICE_NAME:mongodb,AWS_SESSION_TOKEN:token").

Classes:
    CommaAndColonSeparatedRecord: Ordered, case-insensitive mapping over that syntax.
"""
from collections.abc import MutableMapping


class CommaAndColonSeparatedRecord(MutableMapping):
    """
    An ordered mapping parsed from a "k:v,k:v" string.

    Keys compare case-insensitively. The stored casing is the one seen first
    (or the one passed when a new key is set), while a repeated key takes the
    last value seen. Only the first colon of an entry separates key from
    value, so "A:B:C" maps "A" to "B:C", and an entry without a colon maps to
    the empty string.
    """

    def __init__(self, from_string=None):
        """
        Parse the record.

        Args:
            from_string (str, optional): The raw option value. None and "" give
                an empty record.
        """
        # lower-cased key -> [stored key, value]
        self._entries = {}
        for entry in (from_string or "").split(","):
            if not entry:
                continue
            key, _, value = entry.partition(":")
            self[key] = value

    def __getitem__(self, key):
        return self._entries[key.lower()][1]

    def __setitem__(self, key, value):
        slot = self._entries.get(key.lower())
        if slot is None:
            self._entries[key.lower()] = [key, value]
        else:
            slot[1] = value

    def __delitem__(self, key):
        del self._entries[key.lower()]

    def __iter__(self):
        return (slot[0] for slot in self._entries.values())

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return isinstance(key, str) and key.lower() in self._entries

    def set(self, key, value):
        self[key] = value
        return self

    def has(self, key):
        return key in self

    def delete(self, key):
        """
        Remove key if present.

        Returns:
            bool: True if an entry was removed.
        """
        return self._entries.pop(key.lower(), None) is not None

    @property
    def size(self):
        return len(self)

    def __str__(self):
        return ",".join(f"{key}:{value}" for key, value in self._entries.values())

    def __repr__(self):
        return f"CommaAndColonSeparatedRecord({str(self)!r})"
