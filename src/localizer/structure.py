"""
Structural checks shared by chunked translation and proofreading.

Blocks are handled as raw SRT strings so that whatever the model returns can
be compared line by line against the source without reformatting it.
"""

from .languages import language_tag
from .models import TranslationChunk
from .srt_utils import INDEX_RE, TIME_RANGE_RE, normalize_newlines, split_srt_blocks


class StructuralValidationFailure(Exception):
    """Generated SRT does not have the same block layout as its source."""


def chunk_blocks(blocks: list[str], chunk_size: int) -> list[TranslationChunk]:
    """Partition blocks positionally into chunks of at most ``chunk_size``."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    return [
        TranslationChunk(position=n, blocks=blocks[i : i + chunk_size])
        for n, i in enumerate(range(0, len(blocks), chunk_size), 1)
    ]


def block_lines(block: str) -> list[str]:
    return [ln.strip() for ln in block.split("\n")]


def check_structure(source_blocks: list[str], output_blocks: list[str]) -> None:
    """Raise StructuralValidationFailure unless both sides line up.

    Only shape is checked: block count, an integer first line and a time
    range second line in every block. Text content is not compared.
    """
    if len(output_blocks) != len(source_blocks):
        raise StructuralValidationFailure(
            f"block count changed: {len(source_blocks)} -> {len(output_blocks)}"
        )
    for n, (src, out) in enumerate(zip(source_blocks, output_blocks, strict=True), 1):
        src_lines, out_lines = block_lines(src), block_lines(out)
        if len(src_lines) < 2 or len(out_lines) < 2:
            raise StructuralValidationFailure(f"block {n} has fewer than 2 lines")
        if not INDEX_RE.match(src_lines[0]) or not INDEX_RE.match(out_lines[0]):
            raise StructuralValidationFailure(f"block {n} has no index line")
        if not TIME_RANGE_RE.match(src_lines[1]) or not TIME_RANGE_RE.match(out_lines[1]):
            raise StructuralValidationFailure(f"block {n} has no time range line")


def validate_output(source_blocks: list[str], output: str) -> list[str]:
    """Split generated text into blocks and check them against the source."""
    output_blocks = split_srt_blocks(output)
    check_structure(source_blocks, output_blocks)
    return output_blocks


def merge_structure(source_block: str, output_block: str) -> str:
    """Keep the source index and time lines, take text lines from the output."""
    header = source_block.split("\n")[:2]
    text = [ln.rstrip() for ln in output_block.split("\n")[2:]]
    return "\n".join(header + text)


def renumber_blocks(blocks: list[str]) -> list[str]:
    """Rewrite index lines as 1..N by position; blocks without one are left alone."""
    out = []
    for i, block in enumerate(blocks, 1):
        lines = block.split("\n")
        if lines and INDEX_RE.match(lines[0].strip()):
            lines[0] = str(i)
        out.append("\n".join(lines))
    return out


def join_blocks(blocks: list[str]) -> str:
    if not blocks:
        return ""
    return "\n\n".join(b.strip("\n") for b in blocks) + "\n"


def tag_srt_text(srt: str, language_code: str) -> str:
    """Prefix every subtitle text line with the language tag.

    Lines are classified by their position in the block: an index line
    followed by a time range, and that time range, form the header and are
    left untouched together with blank lines. Anything after the header is
    text, even if it looks like a number or contains ``-->``.
    """
    tag = language_tag(language_code)
    lines = normalize_newlines(srt).split("\n")
    out = []
    in_header = True
    for i, line in enumerate(lines):
        if not line.strip():
            in_header = True
            out.append(line)
            continue
        if in_header:
            next_line = lines[i + 1] if i + 1 < len(lines) else ""
            if INDEX_RE.match(line.strip()) and TIME_RANGE_RE.match(next_line):
                out.append(line)
                continue
            if TIME_RANGE_RE.match(line):
                in_header = False
                out.append(line)
                continue
        in_header = False
        out.append(f"{tag} {line}")
    return "\n".join(out)
