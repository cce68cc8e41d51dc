from __future__ import annotations

from dtrack_suppressor.config.tokens import mask_token


def test_mask_token_shows_prefix_only():
    masked = mask_token("odt_abcdefghijklmnopqrstuvwxyz")
    assert masked == "odt_abcd..."
    assert "xyz" not in masked


def test_mask_token_short_tokens_fully_masked():
    assert mask_token("short") == "***"
    assert mask_token("12345678") == "***"


def test_mask_token_missing():
    assert mask_token(None) == "<none>"
    assert mask_token("") == "<none>"


def test_mask_token_custom_visible_length():
    assert mask_token("abcdefghijkl", visible=4) == "abcd..."
