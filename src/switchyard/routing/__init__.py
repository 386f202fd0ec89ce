"""Routing — pattern parsing, matching, and the ordered route table.

Routes are registered during setup and scanned in registration order
once the router starts serving.
"""

from switchyard.routing.matcher import MatchResult, match
from switchyard.routing.pattern import Pattern, Segment, SegmentKind, clean_path, parse_pattern
from switchyard.routing.route import (
    Matched,
    MatchOutcome,
    MethodMismatch,
    NoMatch,
    Route,
    TrailingSlashOnly,
)
from switchyard.routing.table import RouteTable

__all__ = [
    "MatchOutcome",
    "MatchResult",
    "Matched",
    "MethodMismatch",
    "NoMatch",
    "Pattern",
    "Route",
    "RouteTable",
    "Segment",
    "SegmentKind",
    "TrailingSlashOnly",
    "clean_path",
    "match",
    "parse_pattern",
]
