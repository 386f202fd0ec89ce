"""Request query string: kept verbatim for redirects, parsed for lookups."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Parsed query parameters; the first occurrence of a key wins.

    ``raw`` is the query string as received, without the ``?``. The
    trailing-slash redirect appends it to the new location untouched.
    """

    __slots__ = ("_params", "raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self.raw: str = query_string.decode("latin-1")
        params: dict[str, str] = {}
        for key, value in parse_qsl(self.raw, keep_blank_values=True):
            params.setdefault(key, value)
        self._params = params

    def __getitem__(self, key: str) -> str:
        return self._params[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"QueryParams({self.raw!r})"
