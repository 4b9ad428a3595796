"""
Transcript proofreading with GPT while preserving SRT structure.
"""

import logging

from .generation import GenerationFailure, TextGenerator
from .languages import get_language_name
from .srt_utils import split_srt_blocks
from .structure import StructuralValidationFailure, join_blocks, merge_structure, validate_output

logger = logging.getLogger("localizer")

PROOFREAD_TEMPERATURE = 0.1


async def proofread_srt_preserve_timing(
    generator: TextGenerator | None, srt: str, language: str = "ro"
) -> str:
    """Correct spelling, grammar and diacritics of an SRT in a single request.

    The input is returned untouched when no generator is configured, the
    request fails, or the response does not keep the block layout.
    """
    if generator is None:
        logger.info(f"No OpenAI client for proofreading ({language}), passthrough")
        return srt

    blocks = split_srt_blocks(srt)
    if not blocks:
        return srt

    name = get_language_name(language)
    system = (
        f"You are a careful {name} subtitle editor. Correct spelling, grammar, punctuation "
        f"and diacritics of the SRT subtitle file contents without changing meaning. "
        f"Keep the text in {name}.\n"
        "Rules:\n"
        "- Strictly preserve SRT structure: keep index numbers and timecodes exactly the same.\n"
        "- Only edit the subtitle text lines.\n"
        "- Do not merge or split subtitle blocks.\n"
        "- Do not add commentary."
    )

    logger.info(f"Proofreading {len(blocks)} blocks ({name}) …")
    try:
        output = await generator.generate(system, join_blocks(blocks), PROOFREAD_TEMPERATURE)
        output_blocks = validate_output(blocks, output)
    except (GenerationFailure, StructuralValidationFailure) as e:
        logger.warning(f"Proofreading ({language}) failed, using original: {e}")
        return srt
    except Exception:
        logger.exception(f"Proofreading ({language}) raised, using original")
        return srt

    return join_blocks(
        [merge_structure(src, out) for src, out in zip(blocks, output_blocks, strict=True)]
    )
