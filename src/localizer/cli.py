"""
Command-line interface for the video localization pipeline.
"""

import argparse
import asyncio
import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from .generation import create_generator
from .package import package_root, write_package
from .pipeline import DEFAULT_DESCRIPTION, prepare_transcript, run_job
from .store import InMemoryJobStore
from .translation import CHUNK_SIZE, MAX_ATTEMPTS

logger = logging.getLogger("localizer")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def positive_int(value: str) -> int:
    """argparse type for options that must be at least 1."""
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(
        description="Video localization: proofread subtitles, translate them and package results"
    )

    # IO
    ap.add_argument("--input", required=True, help="Source subtitles (.srt or .sbv)")
    ap.add_argument("--outdir", default="out", help="Directory for generated files")
    ap.add_argument("--zip", action="store_true", help="Also write a zip package of all artifacts")

    # Job
    ap.add_argument(
        "--languages",
        default="",
        help="Comma-separated target language codes (e.g. 'en,fr,de')",
    )
    ap.add_argument("--source-language", default="ro", help="Language of the input subtitles")
    ap.add_argument("--title", default=None, help="Video title (default: input file name)")
    ap.add_argument("--description", default=DEFAULT_DESCRIPTION, help="Video description")
    ap.add_argument("--skip-subtitles", action="store_true", help="Do not emit source-language files")
    ap.add_argument("--skip-proofread", action="store_true")

    # GPT
    ap.add_argument("--gpt-model", default=None, help="Chat model (default: $OPENAI_MODEL or gpt-4o-mini)")
    ap.add_argument(
        "--require-openai",
        action="store_true",
        help="Fail instead of tagging text when OPENAI_API_KEY is missing",
    )
    ap.add_argument("--chunk-size", type=positive_int, default=CHUNK_SIZE, help="Subtitle blocks per request")
    ap.add_argument(
        "--max-attempts", type=positive_int, default=MAX_ATTEMPTS, help="Attempts per chunk before per-block fallback"
    )
    ap.add_argument(
        "--max-concurrent", type=positive_int, default=3, help="Languages translated at the same time"
    )

    # Logging
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return ap.parse_args(argv)


async def main_async(argv: list[str] | None = None) -> None:
    """Main async CLI entry point."""
    load_dotenv()

    args = parse_args(argv)
    setup_logging(args.verbose)

    input_path = Path(args.input)
    if not input_path.exists():
        raise RuntimeError(f"Input subtitles not found: {input_path}")
    raw = input_path.read_text(encoding="utf-8-sig")
    is_sbv = input_path.suffix.lower() == ".sbv"

    generator = create_generator(model=args.gpt_model, strict=args.require_openai)

    prepared = await prepare_transcript(
        generator,
        srt_content=None if is_sbv else raw,
        sbv_content=raw if is_sbv else None,
        proofread=not args.skip_proofread,
        language=args.source_language,
    )
    logger.info(f"Loaded transcript -> {input_path} ({prepared.source})")

    languages = [lang.strip() for lang in args.languages.split(",") if lang.strip()]
    store = InMemoryJobStore()
    job = store.create_job(
        args.title or input_path.stem,
        languages,
        source_language=args.source_language,
        generate_subtitles=not args.skip_subtitles,
        generate_translations=bool(languages),
    )

    await run_job(
        store,
        job.id,
        generator,
        prepared.srt,
        base_description=args.description,
        chunk_size=args.chunk_size,
        max_attempts=args.max_attempts,
        max_concurrent=args.max_concurrent,
        proofread=not args.skip_proofread,
        show_progress=True,
    )

    os.makedirs(args.outdir, exist_ok=True)
    manifest = []
    for artifact in store.list_artifacts(job.id):
        found = store.get_artifact_content(artifact.id)
        if found is None:
            continue
        out_path = os.path.join(args.outdir, artifact.filename)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(found[1])
        manifest.append(
            {
                "language": artifact.language,
                "type": artifact.type,
                "filename": artifact.filename,
                "size_bytes": artifact.size_bytes,
            }
        )
        logger.info(f"Saved {artifact.type} ({artifact.language}) -> {out_path}")

    manifest_path = os.path.join(args.outdir, "artifacts.json")
    with open(manifest_path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, ensure_ascii=False, indent=2)

    if args.zip:
        zip_path = os.path.join(args.outdir, f"{package_root(store, job.id)}.zip")
        write_package(store, job.id, zip_path)
        logger.info(f"Saved package -> {zip_path}")

    logger.info(f"Done ({len(manifest)} files) -> {args.outdir}")


def main() -> None:
    """Main CLI entry point."""
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
