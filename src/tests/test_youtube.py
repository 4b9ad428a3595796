"""
Tests for YouTube captions and metadata translation.
"""

import asyncio

import httpx

from localizer.generation import GenerationFailure
from localizer.models import CaptionTrack, TranslatedMetadata
from localizer.youtube import (
    build_caption_url,
    fetch_captions_srt,
    fetch_preferred_captions,
    format_titles_description,
    parse_caption_tracks,
    pick_caption_track,
    translate_title_and_description,
)


def test_parse_caption_tracks():
    player_response = {
        "captions": {
            "playerCaptionsTracklistRenderer": {
                "captionTracks": [
                    {
                        "baseUrl": "https://example.com/timedtext?v=abc&lang=ro",
                        "languageCode": "ro",
                        "name": {"simpleText": "Romanian"},
                        "vssId": ".ro",
                    },
                    {"languageCode": "en"},
                    {"baseUrl": "https://example.com/timedtext?v=abc&lang=en", "languageCode": "en", "kind": "asr"},
                ]
            }
        }
    }

    tracks = parse_caption_tracks(player_response)

    assert [t.language_code for t in tracks] == ["ro", "en"]
    assert tracks[0].name == "Romanian"
    assert tracks[1].kind == "asr"
    assert parse_caption_tracks({}) == []
    assert parse_caption_tracks({"captions": None}) == []


def test_pick_caption_track_prefers_human_tracks():
    """Preferred languages first, human-made over auto-generated."""
    ro_asr = CaptionTrack(base_url="u1", language_code="ro", kind="asr")
    ro_human = CaptionTrack(base_url="u2", language_code="ro-RO")
    en = CaptionTrack(base_url="u3", language_code="en")
    de = CaptionTrack(base_url="u4", language_code="de")

    assert pick_caption_track([ro_asr, en, ro_human]) is ro_human
    assert pick_caption_track([ro_asr, en]) is ro_asr
    assert pick_caption_track([en, de], ["fr", "de"]) is de
    assert pick_caption_track([ro_asr, de], ["fr"]) is de
    assert pick_caption_track([ro_asr], ["fr"]) is ro_asr
    assert pick_caption_track([]) is None


def test_build_caption_url():
    track = CaptionTrack(base_url="https://example.com/timedtext?v=abc")

    assert build_caption_url(track) == "https://example.com/timedtext?v=abc&fmt=srt"
    assert build_caption_url(CaptionTrack(base_url="https://x/t"), "pt-BR") == "https://x/t?fmt=srt&tlang=pt-BR"


def _mock_client(monkeypatch, handler):
    real_client = getattr(httpx.AsyncClient, "real_client", httpx.AsyncClient)

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    factory.real_client = real_client
    monkeypatch.setattr(httpx, "AsyncClient", factory)


def test_fetch_captions_srt(monkeypatch, sample_srt):
    def handler(request):
        assert request.url.params["fmt"] == "srt"
        return httpx.Response(200, text=sample_srt)

    _mock_client(monkeypatch, handler)
    track = CaptionTrack(base_url="https://example.com/timedtext?v=abc", language_code="ro")

    assert asyncio.run(fetch_captions_srt(track)) == sample_srt
    assert asyncio.run(fetch_preferred_captions([track])) == (track, sample_srt)


def test_fetch_captions_srt_errors(monkeypatch):
    track = CaptionTrack(base_url="https://example.com/timedtext", language_code="ro")

    _mock_client(monkeypatch, lambda request: httpx.Response(404))
    assert asyncio.run(fetch_captions_srt(track)) is None
    assert asyncio.run(fetch_preferred_captions([track])) is None

    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    _mock_client(monkeypatch, refuse)
    assert asyncio.run(fetch_captions_srt(track)) is None


def test_translate_title_and_description(stub_generator):
    gen = stub_generator("Title: Bonjour à tous\nDescription: Une vidéo\nsur deux lignes\n")

    meta = asyncio.run(translate_title_and_description(gen, "Salut", "Un video", "fr"))

    assert meta == TranslatedMetadata(title="Bonjour à tous", description="Une vidéo\nsur deux lignes")
    system, user, _ = gen.calls[0]
    assert "YouTube" in system
    assert "French" in user
    assert "Salut" in user and "Un video" in user


def test_translate_metadata_missing_labels_keep_originals(stub_generator):
    gen = stub_generator("Bonjour à tous")

    meta = asyncio.run(translate_title_and_description(gen, "Salut", "Un video", "fr"))

    assert meta == TranslatedMetadata(title="Salut", description="Un video")


def test_translate_metadata_fallbacks(stub_generator):
    tagged = TranslatedMetadata(title="Salut [DE]", description="[DE] Un video")

    assert asyncio.run(translate_title_and_description(None, "Salut", "Un video", "de")) == tagged

    failing = stub_generator(GenerationFailure("401"))
    assert asyncio.run(translate_title_and_description(failing, "Salut", "Un video", "de")) == tagged


def test_format_titles_description():
    meta = TranslatedMetadata(title="T", description="D")

    assert format_titles_description(meta) == "Title: T\n\nDescription: D"


def test_translate_metadata_unexpected_errors_never_escape(stub_generator):
    gen = stub_generator(RuntimeError("bug"))

    meta = asyncio.run(translate_title_and_description(gen, "T", "D", "fr"))

    assert meta == TranslatedMetadata(title="T [FR]", description="[FR] D")
