"""Route pattern parsing and path normalization.

A pattern is a path whose segments are literals or capture markers::

    "/articles"            -> [literal "articles"]
    "/articles/:id"        -> [literal "articles", capture "id"]
    "/static/*filepath"    -> [literal "static", catch-all "filepath"]

A capture always spans a whole segment. A catch-all swallows the rest of
the path and must come last.
"""

import posixpath
from dataclasses import dataclass
from enum import Enum

from switchyard.errors import InvalidPattern

CAPTURE_MARKER = ":"
CATCH_ALL_MARKER = "*"
MARKERS = frozenset({CAPTURE_MARKER, CATCH_ALL_MARKER})


class SegmentKind(Enum):
    LITERAL = "literal"
    CAPTURE = "capture"
    CATCH_ALL = "catch_all"


@dataclass(frozen=True, slots=True)
class Segment:
    """A parsed segment of a route pattern.

    Literal:    ``articles``  (kind=LITERAL, value="articles")
    Capture:    ``:id``       (kind=CAPTURE, value="id")
    Catch-all:  ``*filepath`` (kind=CATCH_ALL, value="filepath")
    """

    kind: SegmentKind
    value: str

    @property
    def is_capture(self) -> bool:
        return self.kind is not SegmentKind.LITERAL

    def __str__(self) -> str:
        if self.kind is SegmentKind.CAPTURE:
            return f"{CAPTURE_MARKER}{self.value}"
        if self.kind is SegmentKind.CATCH_ALL:
            return f"{CATCH_ALL_MARKER}{self.value}"
        return self.value


@dataclass(frozen=True, slots=True)
class Pattern:
    """A parsed, normalized route pattern.

    ``path`` is the normalized pattern string and doubles as the route's
    identity. ``trailing_slash`` records whether the pattern ends in
    ``/``; the matcher compares it against the request path to tell a
    trailing-slash-only difference apart from a real match.
    """

    path: str
    segments: tuple[Segment, ...]
    trailing_slash: bool = False

    @property
    def names(self) -> tuple[str, ...]:
        """Capture names in declaration order."""
        return tuple(seg.value for seg in self.segments if seg.is_capture)

    @property
    def has_catch_all(self) -> bool:
        return bool(self.segments) and self.segments[-1].kind is SegmentKind.CATCH_ALL

    def __str__(self) -> str:
        return self.path


def clean_path(path: str) -> str:
    """Return the canonical form of *path*.

    Prepends a missing leading ``/``, collapses repeated slashes and
    resolves ``.`` and ``..``. A trailing slash survives cleaning.
    """
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    cleaned = posixpath.normpath(path)
    # normpath keeps exactly two leading slashes (POSIX allows it)
    if cleaned.startswith("//"):
        cleaned = cleaned[1:]
    if path.endswith("/") and cleaned != "/":
        cleaned += "/"
    return cleaned


def split_segments(path: str) -> list[str]:
    """Split a cleaned path into its segments. The root has none."""
    stripped = path.strip("/")
    if not stripped:
        return []
    return stripped.split("/")


def join_paths(prefix: str, path: str) -> str:
    """Mount *path* under *prefix*.

    The prefix's own trailing slash is not significant, so
    ``join_paths("/api/", "user/:id")`` is ``"/api/user/:id"``.
    A *path* of ``/`` mounts at the prefix itself.
    """
    base = clean_path(prefix).rstrip("/")
    tail = clean_path(path)
    if tail == "/":
        return base or "/"
    return base + tail


def parse_pattern(raw: str) -> Pattern:
    """Parse and validate a route pattern string.

    Raises ``InvalidPattern`` if the pattern is empty, a marker has no
    name, a marker sits inside a segment, a catch-all is not last, or
    two captures share a name.
    """
    if not raw:
        raise InvalidPattern(raw, "pattern is empty")

    path = clean_path(raw)
    trailing_slash = path != "/" and path.endswith("/")
    parts = split_segments(path)

    segments: list[Segment] = []
    seen: set[str] = set()
    for index, part in enumerate(parts):
        marker = part[0]
        if marker not in MARKERS:
            if any(m in part for m in MARKERS):
                msg = f"marker inside segment {part!r}; captures must span a whole segment"
                raise InvalidPattern(raw, msg)
            segments.append(Segment(SegmentKind.LITERAL, part))
            continue

        name = part[1:]
        if not name:
            raise InvalidPattern(raw, f"unnamed {marker!r} capture")
        if any(m in name for m in MARKERS):
            raise InvalidPattern(raw, f"capture name {name!r} contains another marker")
        if name in seen:
            raise InvalidPattern(raw, f"duplicate capture name {name!r}")
        seen.add(name)

        if marker == CATCH_ALL_MARKER:
            if index != len(parts) - 1 or trailing_slash:
                msg = f"catch-all {part!r} must be the final segment"
                raise InvalidPattern(raw, msg)
            segments.append(Segment(SegmentKind.CATCH_ALL, name))
        else:
            segments.append(Segment(SegmentKind.CAPTURE, name))

    return Pattern(path=path, segments=tuple(segments), trailing_slash=trailing_slash)
