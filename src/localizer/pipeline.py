"""
Localization pipeline: prepare the source transcript, then translate
subtitles and metadata for every target language and store the artifacts.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from tqdm.asyncio import tqdm

from .generation import TextGenerator
from .models import LanguageResult, PreparedTranscript, TranscriptionSegment, TranslatedMetadata
from .polish import proofread_srt_preserve_timing
from .srt_utils import sbv_to_srt, segments_to_srt, srt_to_vtt
from .store import InMemoryJobStore, slugify
from .translation import CHUNK_SIZE, MAX_ATTEMPTS, translate_srt_preserve_timing
from .youtube import format_titles_description, translate_title_and_description

logger = logging.getLogger("localizer")

SAMPLE_SRT = "1\n00:00:01,000 --> 00:00:04,000\nBună ziua și bun venit la acest tutorial...\n"
DEFAULT_TITLE = "Proiect"
DEFAULT_DESCRIPTION = "Descriere automată"

CaptionFetcher = Callable[[], Awaitable[str | None]]
Transcriber = Callable[[], Awaitable[list[TranscriptionSegment]]]


async def _load_transcript(
    srt_content: str | None,
    sbv_content: str | None,
    fetch_captions: CaptionFetcher | None,
    transcribe: Transcriber | None,
    force_stt: bool,
) -> tuple[str, str]:
    if srt_content and srt_content.strip():
        return srt_content, "uploaded"
    if sbv_content and sbv_content.strip():
        return sbv_to_srt(sbv_content), "uploaded"
    if force_stt and transcribe is not None:
        return segments_to_srt(await transcribe()), "stt"
    if fetch_captions is not None:
        captions = await fetch_captions()
        if captions:
            return captions, "captions"
        logger.info("No usable captions; falling back to speech-to-text")
    if transcribe is not None:
        return segments_to_srt(await transcribe()), "stt"
    return SAMPLE_SRT, "sample"


async def prepare_transcript(
    generator: TextGenerator | None,
    *,
    srt_content: str | None = None,
    sbv_content: str | None = None,
    fetch_captions: CaptionFetcher | None = None,
    transcribe: Transcriber | None = None,
    force_stt: bool = False,
    proofread: bool = True,
    language: str = "ro",
) -> PreparedTranscript:
    """Build the source transcript from the first available input and proofread it.

    Precedence: uploaded SRT, uploaded SBV, forced speech-to-text, captions,
    speech-to-text, built-in sample. Collaborator errors fall back to the sample.
    """
    try:
        srt, source = await _load_transcript(
            srt_content, sbv_content, fetch_captions, transcribe, force_stt
        )
    except Exception as e:
        logger.warning(f"Could not prepare transcript ({e}); using sample")
        srt, source = SAMPLE_SRT, "sample"

    logger.info(f"Transcript source: {source}")
    if proofread:
        srt = await proofread_srt_preserve_timing(generator, srt, language)
    return PreparedTranscript(srt=srt, source=source)


async def localize_language(
    generator: TextGenerator | None,
    source_srt: str,
    language: str,
    *,
    base_title: str = DEFAULT_TITLE,
    base_description: str = DEFAULT_DESCRIPTION,
    chunk_size: int = CHUNK_SIZE,
    max_attempts: int = MAX_ATTEMPTS,
    proofread: bool = True,
) -> LanguageResult:
    """Translate subtitles and metadata into one language."""
    srt = await translate_srt_preserve_timing(
        generator, source_srt, language, chunk_size=chunk_size, max_attempts=max_attempts
    )
    if proofread and generator is not None:
        srt = await proofread_srt_preserve_timing(generator, srt, language)
    meta = await translate_title_and_description(generator, base_title, base_description, language)
    return LanguageResult(
        language=language,
        srt=srt,
        vtt=srt_to_vtt(srt),
        title=meta.title,
        description=meta.description,
    )


async def run_job(
    store: InMemoryJobStore,
    job_id: str,
    generator: TextGenerator | None,
    source_srt: str,
    *,
    base_title: str | None = None,
    base_description: str = DEFAULT_DESCRIPTION,
    chunk_size: int = CHUNK_SIZE,
    max_attempts: int = MAX_ATTEMPTS,
    max_concurrent: int = 3,
    proofread: bool = True,
    show_progress: bool = False,
) -> list[LanguageResult]:
    """Produce and store all artifacts of a job.

    Languages run concurrently (bounded by ``max_concurrent``); each
    language's chunks are still translated one after another.
    """
    job = store.get_job(job_id)
    if job is None:
        raise KeyError(f"Unknown job: {job_id}")

    title = base_title or job.title or DEFAULT_TITLE
    slug = slugify(title) or f"job_{job.id}"
    store.update_job(job_id, status="processing", progress=0.0)

    try:
        if job.generate_subtitles:
            src_lang = "ro" if job.source_language == "auto" else job.source_language
            store.add_artifact(job_id, src_lang, f"{slug}_{src_lang}.srt", "subtitle-srt", source_srt)
            store.add_artifact(
                job_id, src_lang, f"{slug}_{src_lang}.vtt", "subtitle-vtt", srt_to_vtt(source_srt)
            )
        store.update_job(job_id, progress=10.0)

        results: list[LanguageResult] = []
        if job.generate_translations and job.languages:
            semaphore = asyncio.Semaphore(max_concurrent)
            done = 0

            async def process_language(language: str) -> LanguageResult:
                nonlocal done
                async with semaphore:
                    result = await localize_language(
                        generator,
                        source_srt,
                        language,
                        base_title=title,
                        base_description=base_description,
                        chunk_size=chunk_size,
                        max_attempts=max_attempts,
                        proofread=proofread,
                    )
                done += 1
                store.update_job(job_id, progress=10.0 + 90.0 * done / len(job.languages))
                return result

            results = await tqdm.gather(
                *(process_language(lang) for lang in job.languages),
                desc="Languages",
                disable=not show_progress,
            )

            for r in results:
                store.add_artifact(job_id, r.language, f"{slug}_{r.language}.srt", "subtitle-srt", r.srt)
                store.add_artifact(job_id, r.language, f"{slug}_{r.language}.vtt", "subtitle-vtt", r.vtt)
                store.add_artifact(
                    job_id,
                    r.language,
                    f"{slug}_{r.language}_titles_descriptions.txt",
                    "titles-descriptions",
                    format_titles_description(TranslatedMetadata(r.title, r.description)),
                )
    except Exception as e:
        logger.error(f"Job {job_id} failed: {e}")
        store.update_job(job_id, status="error", error_message=str(e))
        raise

    store.update_job(job_id, status="completed", progress=100.0, completed_at=time.time())
    logger.info(f"Job {job_id} completed: {len(store.list_artifacts(job_id))} artifacts")
    return list(results)
