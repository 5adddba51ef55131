"""Case-insensitive request headers over the raw ASGI byte pairs.

Values are decoded as latin-1, so ``value.encode("latin-1")`` gives back
the exact bytes the client sent (needed when a header is forwarded).
"""

from collections.abc import Iterable, Iterator, Mapping


def _lookup_key(name: str) -> bytes:
    return name.lower().encode("latin-1")


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    Repeated names keep their first value; the gateway only reads
    single-valued headers (``host``, ``user-agent``, ``x-forwarded-*``).
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "Headers":
        """Build headers from ``(name, value)`` string pairs."""
        return cls(tuple((_lookup_key(name), value.encode("latin-1")) for name, value in pairs))

    def __getitem__(self, key: str) -> str:
        wanted = _lookup_key(key)
        for name, value in self._raw:
            if name.lower() == wanted:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        wanted = _lookup_key(key)
        return any(name.lower() == wanted for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        names = dict.fromkeys(name.decode("latin-1").lower() for name, _ in self._raw)
        return iter(names)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*, or *default*."""
        try:
            return self[key]
        except KeyError:
            return default

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Header byte pairs exactly as the ASGI server passed them."""
        return self._raw
