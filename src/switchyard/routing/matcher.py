"""Lock-step matching of a request path against a parsed pattern."""

from dataclasses import dataclass, field

from switchyard.routing.pattern import Pattern, SegmentKind, split_segments


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of matching one pattern against one path.

    ``matched`` means the segments line up. ``trailing_slash_differs``
    is only ever set together with ``matched`` and marks a match that
    differs from the pattern by a trailing slash alone; such a result
    must not be dispatched as-is.
    """

    matched: bool
    trailing_slash_differs: bool = False
    params: dict[str, str] = field(default_factory=dict)

    @property
    def is_exact(self) -> bool:
        return self.matched and not self.trailing_slash_differs


def split_trailing_slash(path: str) -> tuple[str, bool]:
    """Strip one trailing ``/`` from *path* and report whether it was there.

    The root path is returned unchanged.
    """
    if path != "/" and path.endswith("/"):
        return path[:-1], True
    return path, False


def match(pattern: Pattern, path: str) -> MatchResult:
    """Match a cleaned request *path* against *pattern*.

    Returns a fresh ``MatchResult`` each call; the params dict is never
    shared between calls.
    """
    stripped, had_trailing_slash = split_trailing_slash(path)
    parts = split_segments(stripped)
    params: dict[str, str] = {}

    index = 0
    for seg in pattern.segments:
        if seg.kind is SegmentKind.CATCH_ALL:
            params[seg.value] = "/".join(parts[index:])
            index = len(parts)
            break
        if index == len(parts):
            return MatchResult(matched=False)
        part = parts[index]
        if seg.kind is SegmentKind.CAPTURE:
            params[seg.value] = part
        elif seg.value != part:
            return MatchResult(matched=False)
        index += 1

    if index != len(parts):
        return MatchResult(matched=False)

    return MatchResult(
        matched=True,
        trailing_slash_differs=had_trailing_slash != pattern.trailing_slash,
        params=params,
    )
