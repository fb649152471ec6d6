import math
import re

import pytest

from summarizer.chunker import Chunk, split_into_chunks
from fakes import sentences


def _without_whitespace(text: str) -> str:
    return re.sub(r"\s", "", text)


def test_text_that_fits_is_one_unchanged_chunk():
    chunks = split_into_chunks("Chapter 1\n\nShort.  ", 100)

    assert chunks == [Chunk(index=1, total=1, text="Chapter 1\n\nShort.  ")]


def test_blank_text_gives_no_chunks():
    assert split_into_chunks("   \n\n  ", 100) == []


@pytest.mark.parametrize("size", [0, -5])
def test_non_positive_chunk_size_is_rejected(size):
    with pytest.raises(ValueError):
        split_into_chunks("some text", size)


def test_prefers_paragraph_break_in_tail_window():
    text = "a" * 70 + "\n\n" + "b" * 50 + ". " + "c" * 100

    chunks = split_into_chunks(text, 100)

    assert [c.text for c in chunks] == ["a" * 70, "b" * 50 + ". " + "c" * 48, "c" * 52]


def test_falls_back_to_sentence_break():
    text = "x" * 80 + ". " + "y" * 80

    chunks = split_into_chunks(text, 100)

    assert [c.text for c in chunks] == ["x" * 80 + ".", "y" * 80]


def test_breaks_after_cjk_sentence_terminator():
    text = "甲" * 80 + "。" + "乙" * 80

    chunks = split_into_chunks(text, 100)

    assert [c.text for c in chunks] == ["甲" * 80 + "。", "乙" * 80]


def test_break_before_sixty_percent_is_ignored():
    text = "x" * 50 + ". " + "y" * 100

    chunks = split_into_chunks(text, 100)

    assert [len(c) for c in chunks] == [100, 52]
    assert chunks[0].text.startswith("x" * 50 + ". ")


def test_hard_cut_without_boundaries():
    chunks = split_into_chunks("z" * 250, 100)

    assert [len(c) for c in chunks] == [100, 100, 50]


def test_boundaries_disabled_ignores_sentences():
    chunks = split_into_chunks(sentences(10), 100, boundaries=False)

    assert len(chunks[0]) == 100
    assert len(chunks) == math.ceil(len(sentences(10)) / 100)


def test_chunks_are_indexed_from_one_with_total():
    chunks = split_into_chunks(sentences(60), 850)

    assert [c.index for c in chunks] == [1, 2, 3]
    assert all(c.total == 3 for c in chunks)
    assert chunks[1].label == "Part 2 of 3"


def test_split_is_deterministic():
    text = sentences(300) + "\n\n" + sentences(50, "Qi surged! ")

    assert split_into_chunks(text, 777) == split_into_chunks(text, 777)


def test_early_paragraph_breaks_stay_within_chunk_bound():
    # A paragraph every 61 chars would give one chunk per paragraph
    text = ("p" * 61 + "\n\n") * 20

    chunks = split_into_chunks(text, 100)

    assert len(chunks) <= math.ceil(len(text) / 100) + 1


TEXTS = [
    sentences(200),
    ("Lin Feng bowed. " * 7 + "\n\n") * 40,
    "他拔出了剑。" * 500,
    "word " * 3000,
    "n" * 5000,
    ("Hmph! Tch? " * 13 + "\n\n" + "The elder frowned. " * 9) * 15,
]


@pytest.mark.parametrize("text", TEXTS)
@pytest.mark.parametrize("chunk_size", [97, 250, 1000])
def test_split_invariants(text, chunk_size):
    chunks = split_into_chunks(text, chunk_size)

    assert chunks
    assert all(c.text.strip() for c in chunks)
    assert all(len(c) <= chunk_size for c in chunks)
    assert len(chunks) <= math.ceil(len(text) / chunk_size) + 1
    assert _without_whitespace("".join(c.text for c in chunks)) == _without_whitespace(text)
