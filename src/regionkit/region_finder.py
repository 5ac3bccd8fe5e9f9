"""Region finder: pair region markers into labeled spans and extract them.

Marker pairing is LIFO, so regions may nest: an end marker always closes
the most recently opened region that is still open. Buffers come out in
end-marker order (inner regions before the regions that enclose them).

    text ──parse──> trivia ──match_regions──> Region* ──slice+format──> Buffer*
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from regionkit.errors import UnbalancedRegionError
from regionkit.formatting import SnippetFormatter
from regionkit.trivia import Trivia, TriviaKind, TriviaParser, parser_for
from regionkit.workspace_types import (
    REGION_SEPARATOR,
    Buffer,
    BufferId,
    Err,
    Ok,
    Result,
    SourceSpan,
)

log = logging.getLogger("regionkit.region_finder")


@dataclass(frozen=True, slots=True)
class Region:
    """A matched start/end marker pair.

    ``label`` is ``"<document_name>@<name>"``; ``content_span`` excludes both
    markers and includes all interior whitespace.
    """

    start_marker: Trivia
    end_marker: Trivia
    name: str
    label: str

    @property
    def content_span(self) -> SourceSpan:
        return SourceSpan(self.start_marker.span.end, self.end_marker.span.start)


@dataclass(frozen=True, slots=True)
class UnbalancedMarker:
    """Why marker matching failed, and where."""

    offset: int
    reason: str


def match_regions(
    trivia: Sequence[Trivia],
    document_name: str,
) -> Result[tuple[Region, ...], UnbalancedMarker]:
    """Pair REGION_START/REGION_END trivia with a LIFO stack.

    Trivia are de-duplicated by span first, so a marker reachable from more
    than one node is counted once. Never guesses: a stray end marker or a
    start marker left open at end of input is an ``Err``.
    """
    seen: set[SourceSpan] = set()
    stack: list[Trivia] = []
    regions: list[Region] = []
    for item in trivia:
        if item.span in seen:
            continue
        seen.add(item.span)
        if item.kind is TriviaKind.REGION_START:
            stack.append(item)
        elif item.kind is TriviaKind.REGION_END:
            if not stack:
                return Err(UnbalancedMarker(
                    item.span.start, "end marker has no open region to close",
                ))
            start = stack.pop()
            regions.append(Region(
                start_marker=start,
                end_marker=item,
                name=start.name,
                label=f"{document_name}{REGION_SEPARATOR}{start.name}",
            ))
    if stack:
        dangling = stack[-1]
        return Err(UnbalancedMarker(
            dangling.span.start, f"region {dangling.name!r} is never closed",
        ))
    return Ok(tuple(regions))


def find_regions(
    text: str,
    document_name: str,
    parser: TriviaParser | None = None,
) -> tuple[Region, ...]:
    """Parse ``text`` and return its regions, raising on unbalanced markers."""
    parsed = (parser or parser_for(document_name)).parse(text)
    match match_regions(parsed.iter_trivia(), document_name):
        case Ok(value=regions):
            log.debug("Found %d region(s) in %s", len(regions), document_name)
            return regions
        case Err(error=problem):
            raise UnbalancedRegionError(document_name, problem.offset, problem.reason)
    raise AssertionError("unreachable")


def extract_buffers(
    text: str,
    document_name: str,
    *,
    parser: TriviaParser | None = None,
    formatter: SnippetFormatter | None = None,
) -> list[Buffer]:
    """Extract one formatted Buffer per region, in end-marker order.

    Regions sharing a name are all emitted with the same id; callers decide
    how to handle the collision.
    """
    fmt = formatter or SnippetFormatter()
    buffers: list[Buffer] = []
    for region in find_regions(text, document_name, parser):
        # The formatter trims; it needs the first line's indent to dedent
        snippet = region.content_span.slice(text)
        buffers.append(Buffer(
            id=BufferId(document_name, region.name),
            content=fmt.format(snippet),
            position=0,
        ))
    return buffers
