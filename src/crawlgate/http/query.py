"""Query string access for the routing decision."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Blank values are kept, so ``?_escaped_fragment_=`` and a bare
    ``?_escaped_fragment_`` both contain the key. The raw string is kept
    verbatim for building outbound URLs.
    """

    __slots__ = ("_params", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        object.__setattr__(self, "_raw", query_string)
        params = parse_qs(query_string.decode("latin-1"), keep_blank_values=True)
        object.__setattr__(self, "_params", params)

    def __getitem__(self, key: str) -> str:
        return self._params[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    @property
    def raw(self) -> str:
        """The query string as received, without the leading ``?``."""
        return self._raw.decode("latin-1")
