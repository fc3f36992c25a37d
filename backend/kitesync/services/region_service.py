from __future__ import annotations

from dataclasses import dataclass

from kitesync.errors import RegionNotFound


@dataclass(frozen=True)
class TalkRegion:
    start: int
    end: int


def _ends_line(source: str, pos: int) -> bool:
    return pos == len(source) or source.startswith("\n", pos) or source.startswith("\r\n", pos)


def locate_region(source: str, start_marker: str, end_marker: str) -> TalkRegion:
    """Find the generated array body between the declaration header and its closing line.

    ``start`` points right after the header; ``end`` points at the first character of
    the first following line that consists solely of ``end_marker``.
    """
    start_idx = source.find(start_marker)
    if start_idx == -1:
        raise RegionNotFound(f"Could not find start marker {start_marker!r} in talk data source")

    start = start_idx + len(start_marker)
    newline_idx = source.find(f"\n{end_marker}", start)
    while newline_idx != -1 and not _ends_line(source, newline_idx + 1 + len(end_marker)):
        newline_idx = source.find(f"\n{end_marker}", newline_idx + 1)
    if newline_idx == -1:
        raise RegionNotFound(f"Could not find closing {end_marker!r} line after {start_marker!r}")

    return TalkRegion(start=start, end=newline_idx + 1)


def splice_region(source: str, region: TalkRegion, body: str) -> str:
    return source[: region.start] + "\n" + body + "\n" + source[region.end :]
