"""Tests for reading-time estimates."""

import pytest

from blogapi.services.ingestion.reading_time import compute_reading_time


def test_500_words_at_default_speed_is_two_minutes():
    result = compute_reading_time(" ".join(["word"] * 500))
    assert result.words == 500
    assert result.minutes == 2
    assert result.text == "2 min read"


def test_partial_minutes_round_up_in_text():
    result = compute_reading_time(" ".join(["word"] * 300))
    assert result.minutes == pytest.approx(1.2)
    assert result.text == "2 min read"


def test_whitespace_tokenization():
    result = compute_reading_time("one\ttwo\n\nthree   four\r\nfive")
    assert result.words == 5


def test_custom_speed():
    result = compute_reading_time(" ".join(["w"] * 100), words_per_minute=100)
    assert result.minutes == 1
    assert result.text == "1 min read"


def test_empty_text():
    result = compute_reading_time("")
    assert result.words == 0
    assert result.minutes == 0
    assert result.text == "0 min read"


def test_frontmatter_words_are_counted():
    raw = "---\ntitle: Hi\n---\nbody"
    assert compute_reading_time(raw).words == 5


def test_rejects_non_positive_speed():
    with pytest.raises(ValueError):
        compute_reading_time("text", words_per_minute=0)
