"""
Translation of subtitles and plain text into any target language.

SRT documents are translated in fixed-size chunks. Every chunk response is
checked against the source layout and retried; a chunk that never validates
is translated one block at a time, and a block that still fails keeps its
original text. The returned document always has the same blocks and timings
as the input.
"""

import logging

from .generation import GenerationFailure, TextGenerator
from .languages import get_language_name, language_tag
from .models import TranslationChunk
from .srt_utils import INDEX_RE, TIME_RANGE_RE, split_srt_blocks
from .structure import (
    StructuralValidationFailure,
    chunk_blocks,
    join_blocks,
    merge_structure,
    renumber_blocks,
    tag_srt_text,
    validate_output,
)

logger = logging.getLogger("localizer")

CHUNK_SIZE = 40
MAX_ATTEMPTS = 3
TRANSLATION_TEMPERATURE = 0.1  # Low temperature for consistent structure


def build_srt_system_prompt(target_language: str) -> str:
    name = get_language_name(target_language)
    return (
        f"You are a subtitle translator. Translate the SRT subtitle file contents into {name} "
        f"(language code: {target_language}).\n"
        "Rules:\n"
        "- Strictly preserve SRT structure: keep index numbers and timecodes exactly the same.\n"
        "- Only translate the subtitle text lines.\n"
        "- Do not merge or split subtitle blocks.\n"
        "- Do not add commentary."
    )


def _strip_echoed_header(lines: list[str]) -> list[str]:
    """Drop index/time lines the model may echo back for a text-only request."""
    if len(lines) >= 2 and INDEX_RE.match(lines[0].strip()) and TIME_RANGE_RE.match(lines[1]):
        return lines[2:]
    if lines and TIME_RANGE_RE.match(lines[0]):
        return lines[1:]
    return lines


def _header_length(lines: list[str]) -> int:
    """Number of leading index/time lines in a raw block."""
    if len(lines) >= 2 and TIME_RANGE_RE.match(lines[1]):
        return 2
    if lines and TIME_RANGE_RE.match(lines[0]):
        return 1
    return 0


async def _translate_block(
    generator: TextGenerator, block: str, system: str, temperature: float
) -> str:
    """Translate the text lines of a single block, keeping its header."""
    lines = block.split("\n")
    header_len = _header_length(lines)
    header, text_lines = lines[:header_len], lines[header_len:]
    if not any(ln.strip() for ln in text_lines):
        return block
    label = header[0].strip() if header else "?"

    try:
        translated = await generator.generate(system, "\n".join(text_lines), temperature)
    except GenerationFailure as e:
        logger.warning(f"Block {label}: translation failed, keeping original text ({e})")
        return block
    except Exception:
        logger.exception(f"Block {label}: unexpected error, keeping original text")
        return block

    new_lines = [ln.rstrip() for ln in _strip_echoed_header(translated.split("\n")) if ln.strip()]
    if not new_lines:
        return block
    return "\n".join(header + new_lines)


async def _translate_chunk(
    generator: TextGenerator,
    chunk: TranslationChunk,
    system: str,
    *,
    max_attempts: int,
    temperature: float,
) -> list[str]:
    for attempt in range(1, max_attempts + 1):
        try:
            output = await generator.generate(system, chunk.text, temperature)
            output_blocks = validate_output(chunk.blocks, output)
        except (GenerationFailure, StructuralValidationFailure) as e:
            logger.warning(f"Chunk {chunk.position}: attempt {attempt}/{max_attempts} failed: {e}")
            continue
        except Exception:
            logger.exception(f"Chunk {chunk.position}: attempt {attempt}/{max_attempts} raised")
            continue

        logger.debug(f"Chunk {chunk.position}: validated on attempt {attempt}")
        return [
            merge_structure(src, out)
            for src, out in zip(chunk.blocks, output_blocks, strict=True)
        ]

    logger.warning(
        f"Chunk {chunk.position}: falling back to per-block translation ({len(chunk.blocks)} blocks)"
    )
    out = []
    for block in chunk.blocks:
        out.append(await _translate_block(generator, block, system, temperature))
    return out


async def translate_srt_preserve_timing(
    generator: TextGenerator | None,
    srt: str,
    target_language: str,
    *,
    chunk_size: int = CHUNK_SIZE,
    max_attempts: int = MAX_ATTEMPTS,
    temperature: float = TRANSLATION_TEMPERATURE,
    renumber: bool = True,
) -> str:
    """
    Translate an SRT document while preserving indices and timings.

    Args:
        generator: Text generator, or None when no API key is configured
        srt: SRT document text
        target_language: Target language code (e.g. "fr", "pt-br")
        chunk_size: Maximum number of blocks per request
        max_attempts: Attempts per chunk before per-block fallback
        temperature: Sampling temperature for every request
        renumber: Rewrite index lines as 1..N over the whole document

    Returns:
        Translated SRT with the same number of blocks as the input. Blocks
        that could not be translated keep their original text. Without a
        generator, text lines are only prefixed with the language tag.
    """
    if generator is None:
        logger.info(f"No OpenAI client for SRT ({target_language}), tagging only")
        return tag_srt_text(srt, target_language)

    blocks = split_srt_blocks(srt)
    if not blocks:
        return srt

    chunks = chunk_blocks(blocks, chunk_size)
    system = build_srt_system_prompt(target_language)
    logger.info(
        f"Translating {len(blocks)} blocks to {get_language_name(target_language)} "
        f"in {len(chunks)} chunk(s)..."
    )

    translated: list[str] = []
    for chunk in chunks:
        translated.extend(
            await _translate_chunk(
                generator, chunk, system, max_attempts=max_attempts, temperature=temperature
            )
        )

    if renumber:
        translated = renumber_blocks(translated)
    result = join_blocks(translated)
    logger.info(f"SRT translated ({target_language}): {len(srt)} -> {len(result)} characters")
    return result


async def translate_text(
    generator: TextGenerator | None,
    text: str,
    target_language: str,
    temperature: float = 0.2,
) -> str:
    """Translate free text; tags the original with the language code on failure."""
    tag = language_tag(target_language)
    if generator is None:
        return f"{tag} {text}"
    if not text.strip():
        return text

    system = (
        "You are a professional translator. Translate the user's text into "
        f"{get_language_name(target_language)}. Preserve meaning, tone, punctuation, "
        "and do not add commentary."
    )
    try:
        return await generator.generate(system, text, temperature)
    except GenerationFailure as e:
        logger.warning(f"Text translation to {target_language} failed: {e}")
        return f"{tag} {text}"
    except Exception:
        logger.exception(f"Text translation to {target_language} raised")
        return f"{tag} {text}"
