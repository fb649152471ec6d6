import pytest

from summarizer.prompts import (
    SYSTEM_PROMPT,
    SummaryType,
    build_prompt,
    describe,
    estimate_tokens,
    load_prompt,
    max_output_tokens,
)


@pytest.mark.parametrize("summary_type, expected", [
    ("short", 800),
    ("detailed", 2000),
    ("very_detailed", 4000),
])
def test_output_tokens_scale_with_granularity(summary_type, expected):
    assert max_output_tokens(summary_type, 5_000) == expected
    assert max_output_tokens(summary_type, 100_000) == expected


@pytest.mark.parametrize("summary_type, expected", [
    (SummaryType.SHORT, 1200),
    (SummaryType.DETAILED, 3000),
    (SummaryType.VERY_DETAILED, 4096),
])
def test_long_sources_get_boosted_tokens_with_ceiling(summary_type, expected):
    assert max_output_tokens(summary_type, 100_001) == expected


def test_every_summary_type_has_a_template():
    for summary_type in SummaryType:
        assert "{content}" in load_prompt(summary_type)


def test_build_prompt_inserts_content_and_chunk_tag():
    prompt = build_prompt("short", "Lin Feng entered the Azure Sect.", chunk_info="Part 1 of 3")

    assert prompt.startswith("[Part 1 of 3]\n\n")
    assert "Lin Feng entered the Azure Sect." in prompt
    assert "{content}" not in prompt
    assert prompt.rstrip().endswith("Summary (3-5 bullet points):")


def test_build_prompt_without_chunk_tag():
    prompt = build_prompt(SummaryType.VERY_DETAILED, "text")

    assert not prompt.startswith("[")
    assert prompt.rstrip().endswith("Very Detailed Chapter Summary:")


def test_unknown_type_uses_detailed_prompt():
    assert build_prompt("epic", "text") == build_prompt("detailed", "text")
    assert max_output_tokens("epic", 10) == 2000


def test_content_with_braces_is_inserted_verbatim():
    prompt = build_prompt("detailed", "Status window: {HP: 100}")

    assert "Status window: {HP: 100}" in prompt


def test_parse_summary_type():
    assert SummaryType.parse("very-detailed") is SummaryType.VERY_DETAILED
    assert SummaryType.parse(" Short ") is SummaryType.SHORT
    assert SummaryType.parse(SummaryType.DETAILED) is SummaryType.DETAILED
    with pytest.raises(ValueError, match="Unknown summary type"):
        SummaryType.parse("medium")


def test_describe_and_estimate():
    assert describe("short") == "Short Summary (Key events only)"
    assert describe("nope") == "Summary"
    assert estimate_tokens("a" * 400) == 100
    assert "summarizes" in SYSTEM_PROMPT
