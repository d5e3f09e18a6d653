from __future__ import annotations

import logging
import re
from typing import Final

from tgmarkdown.scanner import Span, SpanKind, iter_segments

logger = logging.getLogger(__name__)

_SPECIAL_CHARS: Final = r"\\_\*\[\]\(\)~`>#+\-=|{}.!"
_SPECIAL_RE: Final = re.compile(f"([{_SPECIAL_CHARS}])")

_VERBATIM: Final = frozenset({SpanKind.CODE_BLOCK, SpanKind.INLINE_CODE})
_WRAPPERS: Final[dict[SpanKind, tuple[str, str]]] = {
    SpanKind.BOLD_ITALIC: ("*_", "_*"),
    SpanKind.BOLD: ("*", "*"),
    SpanKind.STRIKE: ("~", "~"),
    SpanKind.ITALIC_STAR: ("_", "_"),
    SpanKind.ITALIC_UNDERSCORE: ("_", "_"),
}


def escape_markdown_v2(text: str) -> str:
    if not text:
        return ""
    return _SPECIAL_RE.sub(r"\\\1", text)


def escape_link_url(url: str) -> str:
    # Inside the parentheses of a link only ")" has to be escaped.
    return url.replace(")", "\\)")


def normalize_newlines(text: str) -> str:
    """Turn the two-character ``\\n`` shorthand into a real line break."""
    return text.replace("\\n", "\n")


def render_span(span: Span) -> str:
    # Code is sent as typed; Telegram's escaping inside code entities is not applied.
    if span.kind in _VERBATIM:
        return span.source
    if span.kind is SpanKind.LINK:
        return f"[{escape_markdown_v2(span.content)}]({escape_link_url(span.url or '')})"
    prefix, suffix = _WRAPPERS[span.kind]
    return f"{prefix}{escape_markdown_v2(span.content)}{suffix}"


def convert(text: str) -> str:
    """Convert informal Markdown to Telegram MarkdownV2.

    Recognized spans are rendered with Telegram's delimiters, everything else
    is escaped. Unterminated markup is kept as literal text, so the call never
    fails.
    """
    if not text:
        return ""
    text = normalize_newlines(text)
    parts: list[str] = []
    spans = 0
    for segment in iter_segments(text):
        if segment.span is None:
            parts.append(escape_markdown_v2(segment.source))
        else:
            spans += 1
            parts.append(render_span(segment.span))
    result = "".join(parts)
    logger.debug("Converted %d chars with %d spans into %d chars", len(text), spans, len(result))
    return result
