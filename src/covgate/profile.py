"""Parse ``go test -coverprofile`` output into per-file block lists."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import re

from .errors import ProfileFormatError
from .logging_config import get_logger
from .syntax import Position, Range

LOGGER = get_logger(__name__)

MODE_PREFIX = "mode: "
MODES = frozenset({"set", "count", "atomic"})

_LINE_RE = re.compile(r"^(.+):([0-9]+)\.([0-9]+),([0-9]+)\.([0-9]+) ([0-9]+) ([0-9]+)$")


@dataclass(frozen=True)
class ProfileBlock:
    """One instrumented block: a source range, its statements and hit count."""

    range: Range
    statement_count: int
    hit_count: int


@dataclass(frozen=True)
class Boundary:
    """Start or end of a profile block expressed as a byte offset into the source."""

    offset: int
    start: bool
    count: int


@dataclass(frozen=True)
class Profile:
    """Coverage blocks for a single source file, sorted by start position."""

    file_name: str
    mode: str
    blocks: tuple[ProfileBlock, ...] = ()

    def boundaries(self, src: bytes) -> list[Boundary]:
        """Map block ranges onto byte offsets of ``src``.

        Blocks whose positions fall outside ``src`` are ignored.
        """

        line_starts = [0]
        for index, byte in enumerate(src):
            if byte == 0x0A:
                line_starts.append(index + 1)

        def offset(position: Position) -> int | None:
            if position.line < 1 or position.line > len(line_starts):
                return None
            value = line_starts[position.line - 1] + position.column - 1
            return value if value <= len(src) else None

        boundaries: list[Boundary] = []
        for block in self.blocks:
            start = offset(block.range.start)
            end = offset(block.range.end)
            if start is None or end is None:
                continue
            boundaries.append(Boundary(offset=start, start=True, count=block.hit_count))
            boundaries.append(Boundary(offset=end, start=False, count=0))
        # ends sort before starts at the same offset so adjacent blocks do not nest
        boundaries.sort(key=lambda item: (item.offset, item.start))
        return boundaries


def _parse_block(line: str, line_number: int) -> tuple[str, ProfileBlock]:
    match = _LINE_RE.match(line)
    if match is None:
        raise ProfileFormatError(
            f"line {line!r} doesn't match expected format",
            context={"line_number": line_number},
        )
    file_name = match.group(1)
    start_line, start_col, end_line, end_col, num_stmt, count = (
        int(value) for value in match.groups()[1:]
    )
    block = ProfileBlock(
        range=Range(Position(start_line, start_col), Position(end_line, end_col)),
        statement_count=num_stmt,
        hit_count=count,
    )
    return file_name, block


def _merge_blocks(file_name: str, mode: str, blocks: list[ProfileBlock]) -> tuple[ProfileBlock, ...]:
    ordered = sorted(blocks, key=lambda block: block.range.start)
    merged: list[ProfileBlock] = []
    for block in ordered:
        if merged and merged[-1].range == block.range:
            last = merged[-1]
            if last.statement_count != block.statement_count:
                raise ProfileFormatError(
                    f"inconsistent statement count: changed from {last.statement_count} "
                    f"to {block.statement_count}",
                    context={"file": file_name, "range": str(block.range)},
                )
            if mode == "set":
                hits = last.hit_count | block.hit_count
            else:
                hits = last.hit_count + block.hit_count
            merged[-1] = replace(last, hit_count=hits)
            continue
        merged.append(block)
    return tuple(merged)


def parse_profiles(text: str) -> list[Profile]:
    """Parse profile ``text`` into one :class:`Profile` per source file.

    The first line must declare the mode. Any line that does not parse fails
    the whole profile; no partial result is returned.
    """

    mode: str | None = None
    grouped: dict[str, list[ProfileBlock]] = {}
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip("\r")
        if mode is None:
            if not line.startswith(MODE_PREFIX):
                raise ProfileFormatError(f"bad mode line: {line!r}", context={"line_number": line_number})
            mode = line[len(MODE_PREFIX):].strip()
            if mode not in MODES:
                raise ProfileFormatError(f"unknown coverage mode {mode!r}", context={"line_number": line_number})
            continue
        if not line.strip():
            continue
        file_name, block = _parse_block(line, line_number)
        grouped.setdefault(file_name, []).append(block)

    if mode is None:
        raise ProfileFormatError("coverage profile is empty")

    profiles = [
        Profile(file_name=file_name, mode=mode, blocks=_merge_blocks(file_name, mode, blocks))
        for file_name, blocks in sorted(grouped.items())
    ]
    for profile in profiles:
        LOGGER.debug("parsed profile", extra={"file": profile.file_name, "blocks": len(profile.blocks)})
    return profiles


def load_profiles(path: Path | str) -> list[Profile]:
    """Read and parse the profile stored at ``path``."""

    profile_path = Path(path)
    try:
        text = profile_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileFormatError(
            f"could not read coverage profile {profile_path}", context={"path": str(profile_path)}
        ) from exc
    return parse_profiles(text)


__all__ = [
    "Boundary",
    "MODES",
    "Profile",
    "ProfileBlock",
    "load_profiles",
    "parse_profiles",
]
