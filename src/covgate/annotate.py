"""Colour a function's source by which profile blocks executed."""

from __future__ import annotations

import click

from .correlator import FunctionCoverage

EXECUTED_COLOR = "green"
UNEXECUTED_COLOR = "red"


def render_source(coverage: FunctionCoverage, src: bytes, *, color: bool = True) -> str:
    """Return the function's source with executed blocks green and missed blocks red.

    Text outside any block is left unstyled. With ``color`` disabled the plain
    source slice is returned.
    """

    function = coverage.function
    start, end = function.start_offset, function.end_offset
    if end <= start:
        return ""
    boundaries = coverage.profile.boundaries(src) if coverage.profile is not None else []

    segments: list[tuple[str | None, bytes]] = []
    current: str | None = None
    cursor = start
    for boundary in boundaries:
        if boundary.offset < start or boundary.offset > end:
            continue
        if boundary.offset > cursor:
            segments.append((current, src[cursor:boundary.offset]))
            cursor = boundary.offset
        if boundary.start:
            current = EXECUTED_COLOR if boundary.count > 0 else UNEXECUTED_COLOR
        else:
            current = None
    if cursor < end:
        segments.append((current, src[cursor:end]))

    rendered: list[str] = []
    for fg, chunk in segments:
        text = chunk.decode("utf-8", errors="replace")
        rendered.append(click.style(text, fg=fg) if color and fg else text)
    return "".join(rendered)


__all__ = ["EXECUTED_COLOR", "UNEXECUTED_COLOR", "render_source"]
