"""
YouTube captions and title/description translation.
"""

import logging
import re
from urllib.parse import quote

import httpx

from .generation import GenerationFailure, TextGenerator
from .languages import get_language_name, language_tag
from .models import CaptionTrack, TranslatedMetadata

logger = logging.getLogger("localizer")

_TITLE_RE = re.compile(r"Title:\s*([^\n]+)", re.I)
_DESCRIPTION_RE = re.compile(r"Description:\s*([\s\S]+)", re.I)

DEFAULT_PREFER_LANGS = ("ro", "en")
HTTP_OK = 200


def parse_caption_tracks(player_response: dict) -> list[CaptionTrack]:
    """Extract caption tracks from a YouTube player response."""
    renderer = ((player_response or {}).get("captions") or {}).get(
        "playerCaptionsTracklistRenderer"
    ) or {}
    captions = renderer.get("captionTracks")
    if not isinstance(captions, list):
        return []
    tracks = []
    for entry in captions:
        if not isinstance(entry, dict) or not entry.get("baseUrl"):
            continue
        tracks.append(
            CaptionTrack(
                base_url=entry["baseUrl"],
                language_code=entry.get("languageCode"),
                kind=entry.get("kind"),
                name=(entry.get("name") or {}).get("simpleText"),
                vss_id=entry.get("vssId"),
            )
        )
    return tracks


def pick_caption_track(
    tracks: list[CaptionTrack], prefer_langs: tuple[str, ...] | list[str] = DEFAULT_PREFER_LANGS
) -> CaptionTrack | None:
    """Pick the best caption track, preferring human-made tracks in the given languages."""

    def norm(s: str | None) -> str:
        return (s or "").lower()

    def is_asr(t: CaptionTrack) -> bool:
        return norm(t.kind) == "asr"

    for pref in prefer_langs:
        base = norm(pref).split("-")[0]
        candidates = [
            t
            for t in tracks
            if norm(t.language_code) in (base, norm(pref))
            or norm(t.language_code).startswith(base + "-")
        ]
        if candidates:
            human = next((t for t in candidates if not is_asr(t)), None)
            return human or candidates[0]

    any_human = next((t for t in tracks if not is_asr(t)), None)
    return any_human or (tracks[0] if tracks else None)


def build_caption_url(track: CaptionTrack, tlang: str | None = None) -> str:
    url = track.base_url
    url += ("&" if "?" in url else "?") + "fmt=srt"
    if tlang:
        url += f"&tlang={quote(tlang)}"
    return url


async def fetch_captions_srt(
    track: CaptionTrack, tlang: str | None = None, timeout: float = 30.0
) -> str | None:
    """Download a caption track as SRT; None on any HTTP problem."""
    url = build_caption_url(track, tlang)
    try:
        async with httpx.AsyncClient(follow_redirects=True, timeout=timeout) as client:
            r = await client.get(url, headers={"User-Agent": "video-localizer/1.0"})
    except httpx.HTTPError as e:
        logger.warning(f"Caption download failed ({track.language_code}): {e}")
        return None
    if r.status_code != HTTP_OK:
        logger.warning(f"Caption download failed ({track.language_code}): HTTP {r.status_code}")
        return None
    return r.text


async def fetch_preferred_captions(
    tracks: list[CaptionTrack], prefer_langs: tuple[str, ...] | list[str] = DEFAULT_PREFER_LANGS
) -> tuple[CaptionTrack, str] | None:
    if not tracks:
        return None
    track = pick_caption_track(tracks, prefer_langs)
    if track is None:
        return None
    srt = await fetch_captions_srt(track)
    if not srt:
        return None
    logger.info(f"Using {track.kind or 'manual'} captions ({track.language_code})")
    return track, srt


def _tagged_metadata(title: str, description: str, target_language: str) -> TranslatedMetadata:
    tag = language_tag(target_language)
    return TranslatedMetadata(title=f"{title} {tag}", description=f"{tag} {description}")


async def translate_title_and_description(
    generator: TextGenerator | None,
    title: str,
    description: str,
    target_language: str,
) -> TranslatedMetadata:
    """Translate YouTube title and description in one request."""
    if generator is None:
        logger.info(f"No OpenAI client for titles/descriptions ({target_language}), tagging")
        return _tagged_metadata(title, description, target_language)

    prompt = f"""Translate the following YouTube video metadata into {get_language_name(target_language)}:
Title:
{title}

Description:
{description}

Return the result strictly in this format:
Title: <translated title>
Description: <translated description>"""

    try:
        txt = await generator.generate(
            "You translate YouTube titles and descriptions clearly and naturally.",
            prompt,
            temperature=0.2,
        )
    except GenerationFailure as e:
        logger.warning(f"Title/description translation failed ({target_language}): {e}")
        return _tagged_metadata(title, description, target_language)
    except Exception:
        logger.exception(f"Title/description translation raised ({target_language})")
        return _tagged_metadata(title, description, target_language)

    title_match = _TITLE_RE.search(txt)
    desc_match = _DESCRIPTION_RE.search(txt)
    translated = TranslatedMetadata(
        title=(title_match.group(1) if title_match else title).strip(),
        description=(desc_match.group(1) if desc_match else description).strip(),
    )
    logger.info(
        f"Titles/descriptions translated ({target_language}): "
        f"title {len(translated.title)} chars, description {len(translated.description)} chars"
    )
    return translated


def format_titles_description(meta: TranslatedMetadata) -> str:
    return f"Title: {meta.title}\n\nDescription: {meta.description}"
