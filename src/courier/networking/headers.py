"""Raw HTTP header block parsing."""

from __future__ import annotations

from typing import Iterator, Union

# Key under which the status line / preamble is stored.
STATUS_LINE = 0

HeaderKey = Union[str, int]

FOLD_SEPARATOR = "\r\n\t"


class HeaderMap:
    """Ordered multimap of response headers.

    Every value is a list of strings, one entry per occurrence of the name, in
    the order the lines appeared. Names are kept exactly as received, so
    lookups are case-sensitive.
    """

    def __init__(self) -> None:
        self._values: dict[HeaderKey, list[str]] = {}

    def add(self, name: HeaderKey, value: str) -> None:
        self._values.setdefault(name, []).append(value)

    def set(self, name: HeaderKey, value: str) -> None:
        self._values[name] = [value]

    def fold(self, name: HeaderKey, continuation: str) -> None:
        """Append a continuation line to the latest value of ``name``."""
        values = self._values[name]
        values[-1] = values[-1] + FOLD_SEPARATOR + continuation

    def get(self, name: HeaderKey, default: str | None = None) -> str | None:
        """Return the first value for ``name``."""
        values = self._values.get(name)
        if not values:
            return default
        return values[0]

    def get_all(self, name: HeaderKey) -> list[str]:
        return list(self._values.get(name, []))

    @property
    def status_line(self) -> str | None:
        return self.get(STATUS_LINE)

    def items(self) -> Iterator[tuple[HeaderKey, list[str]]]:
        for name, values in self._values.items():
            yield name, list(values)

    def to_dict(self) -> dict[HeaderKey, str | list[str]]:
        """Render single occurrences as strings and repeats as lists."""
        return {
            name: values[0] if len(values) == 1 else list(values)
            for name, values in self._values.items()
        }

    def __getitem__(self, name: HeaderKey) -> list[str]:
        return list(self._values[name])

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[HeaderKey]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderMap):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"HeaderMap({self.to_dict()!r})"


def parse_headers(raw: bytes | str) -> HeaderMap:
    """Parse a raw header block into a :class:`HeaderMap`.

    Lines are split on the first colon. A line without a colon that starts
    with a tab continues the most recent header. Before any header has been
    seen, colon-less lines (the status line, blank lines) are stored under
    :data:`STATUS_LINE`, the last one winning. After that, colon-less lines
    that are not continuations are dropped; that covers the blank separator
    and the status lines of any later responses in a redirect chain. An empty
    block yields an empty map.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("iso-8859-1")

    headers = HeaderMap()
    if not raw:
        return headers
    current: str | None = None

    for line in raw.split("\n"):
        name, sep, value = line.partition(":")
        if sep:
            headers.add(name, value.strip())
            current = name
        elif line.startswith("\t") and current is not None:
            headers.fold(current, line.strip())
        elif current is None:
            headers.set(STATUS_LINE, line.strip())

    return headers
