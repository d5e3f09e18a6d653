"""Locate and classify formatting spans in informal Markdown.

Each span kind has its own matcher. At any scan position the next span is the
match with the lowest start offset; when several kinds start at the same
offset, the kind declared first in ``SpanKind`` wins. This is the same
leftmost-match rule a single combined alternation would give, so ``***x***``
is bold-italic and never bold with leftover asterisks.

Span content is never rescanned: whatever sits between the delimiters belongs
to that span alone.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Final


class SpanKind(str, Enum):
    CODE_BLOCK = "code_block"
    INLINE_CODE = "inline_code"
    BOLD_ITALIC = "bold_italic"
    BOLD = "bold"
    STRIKE = "strike"
    ITALIC_STAR = "italic_star"
    ITALIC_UNDERSCORE = "italic_underscore"
    LINK = "link"


# Declaration order is the tie-break order.
_PATTERNS: Final[tuple[tuple[SpanKind, re.Pattern[str]], ...]] = (
    (SpanKind.CODE_BLOCK, re.compile(r"```(.*?)```", re.S)),
    (SpanKind.INLINE_CODE, re.compile(r"`([^`\n]+)`")),
    (SpanKind.BOLD_ITALIC, re.compile(r"\*{3}([^\n\r\u2028\u2029]+?)\*{3}")),
    (SpanKind.BOLD, re.compile(r"\*{2}([^\n\r\u2028\u2029]+?)\*{2}")),
    (SpanKind.STRIKE, re.compile(r"~~([^\n\r\u2028\u2029]+?)~~")),
    (SpanKind.ITALIC_STAR, re.compile(r"\*([^*\n]+?)\*")),
    # An underscore between word characters (file_name) is never a delimiter.
    (SpanKind.ITALIC_UNDERSCORE, re.compile(r"(?<!\w)_([^_\n]+?)_(?!\w)")),
    (SpanKind.LINK, re.compile(r"\[([^\]]*)\]\(([^)]*)\)")),
)


@dataclass(frozen=True)
class Span:
    kind: SpanKind
    start: int
    end: int
    source: str
    content: str
    url: str | None = None


@dataclass(frozen=True)
class Segment:
    source: str
    span: Span | None = None

    @property
    def is_gap(self) -> bool:
        return self.span is None


def _span_from_match(kind: SpanKind, match: re.Match[str]) -> Span:
    return Span(
        kind=kind,
        start=match.start(),
        end=match.end(),
        source=match.group(0),
        content=match.group(1),
        url=match.group(2) if kind is SpanKind.LINK else None,
    )


def _earliest(
    text: str,
    pos: int,
    pending: dict[SpanKind, re.Match[str] | None],
) -> Span | None:
    best: tuple[SpanKind, re.Match[str]] | None = None
    for kind, pattern in _PATTERNS:
        if kind not in pending:
            pending[kind] = pattern.search(text, pos)
        else:
            match = pending[kind]
            # A match that starts before pos overlaps a span already taken.
            if match is not None and match.start() < pos:
                pending[kind] = pattern.search(text, pos)
        match = pending[kind]
        if match is None:
            continue
        if best is None or match.start() < best[1].start():
            best = (kind, match)
    if best is None:
        return None
    return _span_from_match(*best)


def next_span(text: str, pos: int = 0) -> Span | None:
    """Return the first span starting at or after ``pos``, or None."""
    return _earliest(text, pos, {})


def iter_spans(text: str) -> Iterator[Span]:
    # Matches that start at or after the current position are still the
    # leftmost for their kind, so they are kept between steps.
    pending: dict[SpanKind, re.Match[str] | None] = {}
    pos = 0
    while True:
        span = _earliest(text, pos, pending)
        if span is None:
            return
        yield span
        pos = span.end


def iter_segments(text: str) -> Iterator[Segment]:
    pos = 0
    for span in iter_spans(text):
        if span.start > pos:
            yield Segment(text[pos : span.start])
        yield Segment(span.source, span)
        pos = span.end
    if pos < len(text):
        yield Segment(text[pos:])
