"""
SRT parsing, writing, and subtitle format conversion utilities.
"""

import logging
import re
from collections.abc import Callable

from .models import TimedBlock, Timestamp, TranscriptionSegment

logger = logging.getLogger("localizer")

INDEX_RE = re.compile(r"^\d+$")
TIME_RANGE_RE = re.compile(
    r"^\s*(\d{1,2}:\d{2}:\d{2}[,.]\d{3})\s*-->\s*(\d{1,2}:\d{2}:\d{2}[,.]\d{3})"
)
_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
_SBV_TIME_RE = re.compile(r"^\s*(\d{1,2}:\d{2}:\d{2}\.\d{3})\s*,\s*(\d{1,2}:\d{2}:\d{2}\.\d{3})\s*$")
_SRT_TS_COMMA_RE = re.compile(r"(\d{1,2}:\d{2}:\d{2}),(\d{3})")
_VTT_INDEX_RE = re.compile(r"^\d+\n(?=[ \t]*\d{1,2}:\d{2}:\d{2}[,.]\d{3}\s*-->)", re.M)

VTT_HEADER = "WEBVTT"


def normalize_newlines(text: str) -> str:
    """Convert CRLF/CR line endings to LF and drop a leading byte order mark."""
    return (text or "").removeprefix("\ufeff").replace("\r\n", "\n").replace("\r", "\n")


def split_srt_blocks(text: str) -> list[str]:
    """Split SRT text on blank-line boundaries into raw block strings."""
    normalized = normalize_newlines(text).strip()
    if not normalized:
        return []
    return _BLOCK_SPLIT_RE.split(normalized)


def parse_srt_text(text: str) -> list[TimedBlock]:
    """Parse SRT content into timed blocks, skipping malformed ones."""
    out: list[TimedBlock] = []
    for raw in split_srt_blocks(text):
        lines = raw.split("\n")
        if len(lines) < 2 or not INDEX_RE.match(lines[0].strip()):
            logger.debug(f"Skipping block without index line: {raw[:40]!r}")
            continue
        m = TIME_RANGE_RE.match(lines[1])
        if not m:
            logger.debug(f"Skipping block without time range: {raw[:40]!r}")
            continue
        try:
            block = TimedBlock(
                index=int(lines[0].strip()),
                start=Timestamp.parse(m.group(1)),
                end=Timestamp.parse(m.group(2)),
                lines=[ln.strip() for ln in lines[2:]],
            )
        except ValueError as e:
            logger.debug(f"Skipping invalid block: {e}")
            continue
        out.append(block)
    return out


def format_srt(blocks: list[TimedBlock]) -> str:
    """Serialize blocks to SRT, renumbering from 1."""
    out = []
    for i, b in enumerate(blocks, 1):
        lines = [str(i), f"{b.start.format(',')} --> {b.end.format(',')}", *b.lines]
        out.append("\n".join(lines) + "\n")
    return "\n".join(out)


def write_srt(blocks: list[TimedBlock], path: str) -> None:
    """Write blocks to SRT file."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_srt(blocks))


def parse_srt(path: str) -> list[TimedBlock]:
    """Parse SRT file into blocks."""
    with open(path, encoding="utf-8-sig") as f:
        return parse_srt_text(f.read())


def srt_to_vtt(srt: str) -> str:
    """Convert SRT text to WebVTT.

    Purely textual: timestamp commas become periods, index lines are dropped
    and the WEBVTT header is prepended. Blocks are not reparsed.
    """
    converted = _SRT_TS_COMMA_RE.sub(r"\1.\2", normalize_newlines(srt))
    converted = _VTT_INDEX_RE.sub("", converted).strip()
    return f"{VTT_HEADER}\n\n{converted}"


def sbv_to_srt(sbv: str) -> str:
    """Convert YouTube SBV captions to SRT."""

    def to_srt_time(t: str) -> str:
        try:
            return Timestamp.parse(t).format(",")
        except ValueError:
            return "00:00:00,000"

    lines = normalize_newlines(sbv).split("\n")
    out: list[str] = []
    i = 0
    index = 1
    while i < len(lines):
        while i < len(lines) and not lines[i].strip():
            i += 1
        if i >= len(lines):
            break
        m = _SBV_TIME_RE.match(lines[i])
        if not m:
            i += 1
            continue
        start, end = to_srt_time(m.group(1)), to_srt_time(m.group(2))
        i += 1
        text_lines: list[str] = []
        while i < len(lines) and lines[i].strip():
            text_lines.append(lines[i])
            i += 1
        out.append(f"{index}\n{start} --> {end}\n" + "\n".join(text_lines) + "\n")
        index += 1
    return "\n".join(out)


def segments_to_srt(
    segments: list[TranscriptionSegment], text_transform: Callable[[str], str] | None = None
) -> str:
    """Build SRT text from speech-to-text segments."""
    out = []
    for i, seg in enumerate(segments, 1):
        text = text_transform(seg.text) if text_transform else seg.text
        start = Timestamp.from_milliseconds(seg.start_ms)
        end = Timestamp.from_milliseconds(seg.end_ms)
        out.append(f"{i}\n{start} --> {end}\n{text}\n")
    return "\n".join(out)
