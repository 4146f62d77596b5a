"""
Text processing utilities for prompt construction.

Keeps email bodies within prompt budgets without cutting sentences in half,
and produces short previews of thread history.
"""

import re
from datetime import date
from typing import Optional


_SENTENCE_END = re.compile(r"[.!?](?:\s|$)")


def truncate_at_sentence_boundary(text: str, max_chars: int) -> str:
    """
    Truncate text at the nearest sentence boundary before max_chars.

    Falls back to the last word boundary (if it keeps at least 80% of the
    budget), then to a hard cut.

    Examples:
        >>> truncate_at_sentence_boundary("Hello. World. Test.", 15)
        'Hello. World.'
        >>> truncate_at_sentence_boundary("short", 10)
        'short'
    """
    if len(text) <= max_chars:
        return text

    segment = text[:max_chars]
    matches = list(_SENTENCE_END.finditer(segment))
    if matches:
        cutoff = matches[-1].end()
        if segment[cutoff - 1:cutoff].isspace():
            cutoff -= 1
        return text[:cutoff]

    last_space = segment.rfind(" ")
    if last_space > max_chars * 0.8:
        return text[:last_space]

    return text[:max_chars]


def preview(text: str, max_chars: int = 500, ellipsis: str = "...") -> str:
    """
    First max_chars characters, with an ellipsis appended when anything was cut.

    Examples:
        >>> preview("abcdef", 3)
        'abc...'
        >>> preview("abc", 3)
        'abc'
    """
    if len(text) <= max_chars:
        return text
    return f"{text[:max_chars]}{ellipsis}"


def format_email_for_llm(
    from_addr: Optional[str] = None,
    to_addr: Optional[str] = None,
    subject: Optional[str] = None,
    sent_date: Optional[str] = None,
    body: Optional[str] = None,
) -> str:
    """
    Render an email as header lines followed by a blank line and the body.

    Missing fields are omitted.
    """
    lines = []
    if from_addr:
        lines.append(f"From: {from_addr}")
    if to_addr:
        lines.append(f"To: {to_addr}")
    if subject:
        lines.append(f"Subject: {subject}")
    if sent_date:
        lines.append(f"Date: {sent_date}")
    if body:
        lines.append("")
        lines.append(body)
    return "\n".join(lines)


def today_for_llm(today: Optional[date] = None) -> str:
    """Current date as YYYY-MM-DD, so the model can resolve relative dates."""
    return (today or date.today()).isoformat()
