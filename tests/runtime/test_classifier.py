"""Unit tests for the smart simulator's keyword classifier."""

from __future__ import annotations

import pytest

from gencomputer.runtime.simulator.classifier import (
    ASCII_ART,
    DEFAULT_GROCERIES,
    GENERIC_ITEMS,
    classify,
    extract_items,
    match_category,
)


def test_shopping_list_after_colon() -> None:
    profile = classify("Can you make a shopping list: milk, eggs, bread")
    assert profile.category == "shopping"
    assert profile.title == "🛒 Shopping Companion"
    assert profile.items == ["🛒 milk", "🛒 eggs", "🛒 bread"]
    assert profile.custom_content is None


def test_shopping_list_prefers_quoted_items() -> None:
    profile = classify('buy "oat milk" and "dark chocolate": ignored, list')
    assert profile.items == ["🛒 oat milk", "🛒 dark chocolate"]


def test_shopping_list_defaults() -> None:
    profile = classify("I need to buy groceries")
    assert profile.items == [f"🛒 {item}" for item in DEFAULT_GROCERIES]


def test_colon_without_comma_uses_defaults() -> None:
    assert extract_items("groceries: milk") == [f"🛒 {item}" for item in DEFAULT_GROCERIES]


def test_extract_items_custom_defaults() -> None:
    assert extract_items("nothing here", defaults=["tea"]) == ["🛒 tea"]


def test_first_matching_rule_wins() -> None:
    # "shop" (shopping) is checked before "blog".
    assert match_category("shop for my blog") == "shopping"
    # "write" (blog) is checked before "app" (code).
    assert match_category("write about my app") == "blog"


def test_match_is_case_insensitive_substring() -> None:
    assert match_category("Plan a VACATION") == "travel"
    assert match_category("Draft a Tweet") == "social"
    # "art" is matched anywhere, including inside other words.
    assert match_category("start a diet") == "ascii"


def test_ascii_profile_uses_custom_content() -> None:
    profile = classify("draw some ascii art")
    assert profile.category == "ascii"
    assert profile.custom_content == ASCII_ART
    assert profile.items == []


@pytest.mark.parametrize(
    ("command", "category"),
    [
        ("Write a blog post about cats", "blog"),
        ("implement a login page", "code"),
        ("plan a trip to Rome", "travel"),
        ("social media campaign", "social"),
    ],
)
def test_category_table(command: str, category: str) -> None:
    profile = classify(command)
    assert profile.category == category
    assert profile.items
    assert profile.tip


def test_generic_profile_echoes_short_command() -> None:
    profile = classify("organise the garage")
    assert profile.category == "generic"
    assert profile.title == "📋 Project Brief: organise the garage"
    assert profile.items == list(GENERIC_ITEMS)


def test_generic_title_truncated() -> None:
    command = "x" * 80
    profile = classify(command)
    echo = profile.title.removeprefix("📋 Project Brief: ")
    assert echo == "x" * 50 + "..."
    assert len(echo) <= 53


def test_classify_empty_command() -> None:
    profile = classify("")
    assert profile.category == "generic"
    assert profile.title == "📋 Project Brief: "


def test_generic_title_is_single_line() -> None:
    profile = classify("hello\n# injected heading\r\n\tthere")
    assert profile.title == "📋 Project Brief: hello # injected heading there"


def test_colon_items_stop_at_line_break() -> None:
    assert extract_items("shopping list: milk, eggs\nand also, bread") == ["🛒 milk", "🛒 eggs"]
