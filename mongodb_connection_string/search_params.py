"""
search_params.py

This module contains the query-string multimap used by ConnectionString.
MongoDB connection options are case-insensitive, so every lookup, update and
delete compares keys case-insensitively while the casing written by the user
is kept for serialization.

Classes:
    CaseInsensitiveSearchParams: Ordered multimap of query parameters.
"""
from urllib.parse import parse_qsl, quote_plus


class CaseInsensitiveSearchParams:
    """
    An ordered multimap of query parameters with case-insensitive keys.

    Duplicate keys are legal and keep their order. Each entry remembers the
    casing it was stored with, which is the casing rendered by str().

    Attributes:
        _entries (list): [key, value] pairs in insertion order.
        _on_change (callable): Called with no arguments after every mutation.
    """

    def __init__(self, query="", on_change=None):
        """
        Initialize the multimap from a raw query string.

        Args:
            query (str): A query string, with or without the leading "?".
            on_change (callable, optional): Invoked after each mutation so the
                owner can refresh its serialized form.
        """
        self._entries = []
        self._on_change = on_change
        self._load(query)

    def _load(self, query):
        if query.startswith("?"):
            query = query[1:]
        self._entries = [
            [key, value] for key, value in parse_qsl(query, keep_blank_values=True)
        ]

    def _replace(self, query):
        # Used by the owner when its raw search string is assigned; does not
        # call back into the owner.
        self._load(query)

    def _changed(self):
        if self._on_change is not None:
            self._on_change()

    @staticmethod
    def _matches(entry, key):
        return entry[0].lower() == key.lower()

    def get(self, key):
        """
        Return the first value stored for key, or None.
        """
        for entry in self._entries:
            if self._matches(entry, key):
                return entry[1]
        return None

    def get_all(self, key):
        """
        Return every value stored for key, in order.
        """
        return [entry[1] for entry in self._entries if self._matches(entry, key)]

    def has(self, key):
        return any(self._matches(entry, key) for entry in self._entries)

    def set(self, key, value):
        """
        Set key to a single value.

        The first matching entry keeps its position and casing and receives the
        new value; all other entries for the key are removed. When nothing
        matches, a new entry is appended with the casing given here.

        Args:
            key (str): The parameter name.
            value (str): The new value.
        """
        value = str(value)
        kept = []
        found = False
        for entry in self._entries:
            if self._matches(entry, key):
                if found:
                    continue
                entry[1] = value
                found = True
            kept.append(entry)
        if not found:
            kept.append([key, value])
        self._entries = kept
        self._changed()

    def append(self, key, value):
        """
        Add a new entry without touching existing entries for the same key.

        The new entry reuses the casing of the first existing entry for the
        key, so all values of one option render under one spelling.
        """
        for entry in self._entries:
            if self._matches(entry, key):
                key = entry[0]
                break
        self._entries.append([key, str(value)])
        self._changed()

    def delete(self, key):
        """
        Remove every entry whose key matches case-insensitively.
        """
        self._entries = [entry for entry in self._entries if not self._matches(entry, key)]
        self._changed()

    def keys(self):
        return [entry[0] for entry in self._entries]

    def values(self):
        return [entry[1] for entry in self._entries]

    def items(self):
        return [(entry[0], entry[1]) for entry in self._entries]

    def copy(self, on_change=None):
        """
        Return an independent copy of the multimap.

        Args:
            on_change (callable, optional): Mutation callback for the copy.

        Returns:
            CaseInsensitiveSearchParams: A copy sharing no entry storage.
        """
        duplicate = CaseInsensitiveSearchParams(on_change=on_change)
        duplicate._entries = [list(entry) for entry in self._entries]
        return duplicate

    def __contains__(self, key):
        return self.has(key)

    def __iter__(self):
        return iter(self.items())

    def __len__(self):
        return len(self._entries)

    def __eq__(self, other):
        if not isinstance(other, CaseInsensitiveSearchParams):
            return NotImplemented
        return self.items() == other.items()

    def __str__(self):
        return "&".join(
            f"{quote_plus(key, safe='*')}={quote_plus(value, safe='*')}"
            for key, value in self._entries
        )

    def __repr__(self):
        return f"CaseInsensitiveSearchParams({self.items()!r})"
