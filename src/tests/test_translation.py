"""
Tests for chunked SRT translation.
"""

import asyncio

from localizer.generation import GenerationFailure
from localizer.models import TimedBlock, Timestamp
from localizer.srt_utils import format_srt, parse_srt_text, split_srt_blocks
from localizer.translation import translate_srt_preserve_timing, translate_text

FRENCH = "1\n00:00:01,000 --> 00:00:04,000\nBonjour\n\n2\n00:00:04,000 --> 00:00:06,000\nMonde\n"
MERGED = "1\n00:00:01,000 --> 00:00:06,000\nBonjour Monde\n"


def make_srt(n: int) -> str:
    blocks = [
        TimedBlock(
            index=i + 1,
            start=Timestamp.from_milliseconds(i * 2000),
            end=Timestamp.from_milliseconds(i * 2000 + 1500),
            lines=[f"Line {i + 1}"],
        )
        for i in range(n)
    ]
    return format_srt(blocks)


def echo(system, user):
    return user


def test_valid_chunk_returned_verbatim(stub_generator, sample_srt):
    """A structurally valid response is used as is."""
    gen = stub_generator(FRENCH)

    result = asyncio.run(translate_srt_preserve_timing(gen, sample_srt, "fr"))

    assert result == FRENCH
    assert len(gen.calls) == 1
    system, user, temperature = gen.calls[0]
    assert "French" in system
    assert "timecodes" in system
    assert user == sample_srt.strip()
    assert temperature <= 0.2


def test_merged_blocks_fall_back_per_block(stub_generator, sample_srt):
    """Three failed validations trigger per-block translation of text lines only."""
    gen = stub_generator(MERGED)

    result = asyncio.run(translate_srt_preserve_timing(gen, sample_srt, "fr"))

    assert len(gen.calls) == 5
    assert gen.users[3:] == ["Hello", "World"]
    blocks = parse_srt_text(result)
    assert len(blocks) == 2
    # Echoed index/time lines from the per-block response are dropped
    assert blocks[0].lines == ["Bonjour Monde"]
    assert blocks[0].end == Timestamp.parse("00:00:04,000")
    assert blocks[1].start == Timestamp.parse("00:00:04,000")


def test_no_generator_tags_text_lines(sample_srt):
    """Without an API key only text lines get the language tag."""
    result = asyncio.run(translate_srt_preserve_timing(None, sample_srt, "fr"))

    assert result == (
        "1\n00:00:01,000 --> 00:00:04,000\n[FR] Hello\n\n"
        "2\n00:00:04,000 --> 00:00:06,000\n[FR] World\n"
    )


def test_total_failure_passes_original_through(stub_generator, sample_srt):
    """When every request fails the original document comes back."""
    gen = stub_generator(GenerationFailure("service down"))

    result = asyncio.run(translate_srt_preserve_timing(gen, sample_srt, "de"))

    assert result == sample_srt
    assert len(gen.calls) == 3 + 2


def test_unexpected_errors_never_escape(stub_generator, sample_srt):
    gen = stub_generator(RuntimeError("bug"))

    result = asyncio.run(translate_srt_preserve_timing(gen, sample_srt, "de"))

    assert result == sample_srt


def test_retry_succeeds_on_second_attempt(stub_generator, sample_srt):
    gen = stub_generator([MERGED, FRENCH])

    result = asyncio.run(translate_srt_preserve_timing(gen, sample_srt, "fr"))

    assert result == FRENCH
    assert len(gen.calls) == 2


def test_chunk_boundaries_keep_all_blocks(stub_generator):
    """81 blocks in chunks of 40 give the same document as one big chunk."""
    srt = make_srt(81)
    chunked = stub_generator(echo)
    single = stub_generator(echo)

    out_chunked = asyncio.run(translate_srt_preserve_timing(chunked, srt, "es", chunk_size=40))
    out_single = asyncio.run(translate_srt_preserve_timing(single, srt, "es", chunk_size=81))

    assert len(chunked.calls) == 3
    assert len(single.calls) == 1
    assert len(parse_srt_text(out_chunked)) == 81
    assert out_chunked == out_single == srt


def test_invalid_responses_keep_block_count(stub_generator):
    srt = make_srt(45)
    gen = stub_generator("Sorry, I cannot help with that.")

    result = asyncio.run(translate_srt_preserve_timing(gen, srt, "it", chunk_size=40))

    assert len(split_srt_blocks(result)) == 45
    # 2 chunks x 3 attempts, then one request per block
    assert len(gen.calls) == 6 + 45


def test_source_timings_are_kept(stub_generator, sample_srt):
    """A valid response with drifted timecodes still gets the source timing."""
    drifted = FRENCH.replace("00:00:04,000 --> 00:00:06,000", "00:00:04,500 --> 00:00:07,000")
    gen = stub_generator(drifted)

    result = asyncio.run(translate_srt_preserve_timing(gen, sample_srt, "fr"))

    assert result == FRENCH


def test_indices_renumbered_globally(stub_generator):
    srt = "5\n00:00:01,000 --> 00:00:02,000\nA\n\n9\n00:00:03,000 --> 00:00:04,000\nB\n"
    gen = stub_generator(echo)

    renumbered = asyncio.run(translate_srt_preserve_timing(gen, srt, "fr"))
    kept = asyncio.run(translate_srt_preserve_timing(gen, srt, "fr", renumber=False))

    assert [b.split("\n")[0] for b in split_srt_blocks(renumbered)] == ["1", "2"]
    assert [b.split("\n")[0] for b in split_srt_blocks(kept)] == ["5", "9"]


def test_block_without_text_is_not_sent(stub_generator):
    srt = "1\n00:00:01,000 --> 00:00:02,000\n\n\n2\n00:00:03,000 --> 00:00:04,000\nHi\n"
    gen = stub_generator(["not srt", "not srt", "not srt", "Salut"])

    result = asyncio.run(translate_srt_preserve_timing(gen, srt, "fr"))

    assert gen.users[3:] == ["Hi"]
    assert "Salut" in result


def test_empty_document_is_returned_unchanged(stub_generator):
    gen = stub_generator(echo)

    assert asyncio.run(translate_srt_preserve_timing(gen, "", "fr")) == ""
    assert gen.calls == []


def test_translate_text(stub_generator):
    gen = stub_generator("Bonjour")

    assert asyncio.run(translate_text(gen, "Hello", "fr")) == "Bonjour"
    assert asyncio.run(translate_text(None, "Hello", "fr")) == "[FR] Hello"

    failing = stub_generator(GenerationFailure("timeout"))
    assert asyncio.run(translate_text(failing, "Hello", "fr")) == "[FR] Hello"


def test_byte_order_mark_does_not_break_first_chunk(stub_generator, sample_srt):
    gen = stub_generator(echo)

    result = asyncio.run(translate_srt_preserve_timing(gen, "\ufeff" + sample_srt, "fr"))

    assert len(gen.calls) == 1
    assert result == sample_srt


def test_tagging_follows_block_layout():
    """Numeric text lines and text containing an arrow are still tagged."""
    srt = (
        "1\n00:00:01,000 --> 00:00:02,000\n2024\n\n"
        "2\n00:00:03,000 --> 00:00:04,000\nLeft --> right\n"
    )

    result = asyncio.run(translate_srt_preserve_timing(None, srt, "fr"))

    assert result == (
        "1\n00:00:01,000 --> 00:00:02,000\n[FR] 2024\n\n"
        "2\n00:00:03,000 --> 00:00:04,000\n[FR] Left --> right\n"
    )


def test_block_without_index_keeps_its_time_line(stub_generator):
    """Per-block fallback sends every text line of a block that has no index."""
    srt = "00:00:01,000 --> 00:00:02,000\nFirst line\nSecond line\n"
    gen = stub_generator(["not srt", "not srt", "not srt", "Première ligne\nDeuxième ligne"])

    result = asyncio.run(translate_srt_preserve_timing(gen, srt, "fr"))

    assert gen.users[3:] == ["First line\nSecond line"]
    assert result == "00:00:01,000 --> 00:00:02,000\nPremière ligne\nDeuxième ligne\n"
