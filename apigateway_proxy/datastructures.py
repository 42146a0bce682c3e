"""
Data structures for requests built from gateway events.

Header multimap, URL value and client address.
"""

from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple
from urllib.parse import parse_qs, urlunsplit


class Address(NamedTuple):
    """Client address - named tuple with host and port."""

    host: Optional[str]
    """Host IP address."""
    port: int = 0
    """Port is always 0 as it's not provided by API Gateway."""


class URL(NamedTuple):
    """
    Parsed request URL.

    The gateway only ever hands over an absolute path, so there is no scheme
    and the authority is just the host.
    """

    path: str = "/"
    query: str = ""
    host: str = ""
    scheme: str = ""
    fragment: str = ""

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.host, self.path, self.query, self.fragment))

    @property
    def query_params(self) -> Dict[str, List[str]]:
        """Decoded query string, every value of every key."""
        return parse_qs(self.query, keep_blank_values=True)


class Headers:
    """
    Case-insensitive multimap of header fields.

    Entries keep insertion order and the spelling of the name they were added
    with. A field added three times is three entries, never a comma-joined one.
    """

    def __init__(self, raw: Optional[Iterable[Tuple[str, str]]] = None):
        self._entries: List[Tuple[str, str]] = []
        for name, value in raw or ():
            self.add(name, value)

    def add(self, name: str, value: str) -> None:
        """Append a value, keeping any existing ones."""
        self._entries.append((name, str(value)))

    def set(self, name: str, value: str) -> None:
        """Replace every value of ``name`` with a single one."""
        self.remove(name)
        self._entries.append((name, str(value)))

    def remove(self, name: str) -> None:
        key = name.lower()
        self._entries = [(n, v) for n, v in self._entries if n.lower() != key]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of ``name``, or ``default``."""
        key = name.lower()
        for n, v in self._entries:
            if n.lower() == key:
                return v
        return default

    def get_all(self, name: str) -> List[str]:
        key = name.lower()
        return [v for n, v in self._entries if n.lower() == key]

    def keys(self) -> List[str]:
        """Distinct field names, spelled as first added."""
        seen: Dict[str, str] = {}
        for n, _ in self._entries:
            seen.setdefault(n.lower(), n)
        return list(seen.values())

    def items(self) -> List[Tuple[str, str]]:
        """Every entry as a (name, value) pair."""
        return list(self._entries)

    def to_dict(self) -> Dict[str, str]:
        """Single-value view: the last value of each field wins."""
        names = {n.lower(): n for n in self.keys()}
        result: Dict[str, str] = {}
        for n, v in self._entries:
            result[names[n.lower()]] = v
        return result

    def to_multi_dict(self) -> Dict[str, List[str]]:
        names = {n.lower(): n for n in self.keys()}
        result: Dict[str, List[str]] = {}
        for n, v in self._entries:
            result.setdefault(names[n.lower()], []).append(v)
        return result

    def copy(self) -> "Headers":
        return Headers(self._entries)

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __setitem__(self, name: str, value: str) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        if name not in self:
            raise KeyError(name)
        self.remove(name)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        return any(n.lower() == key for n, _ in self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return sorted((n.lower(), v) for n, v in self._entries) == sorted(
            (n.lower(), v) for n, v in other._entries
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._entries!r})"
