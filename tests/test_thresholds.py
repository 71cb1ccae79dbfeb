# tests/test_thresholds.py

from __future__ import annotations

import pytest

from item_models.thresholds import (
    THRESHOLD_SPAN,
    THRESHOLD_START,
    legacy_string_hash,
    threshold_for,
    threshold_for_key,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", 0),
        ("a", 97),
        ("ab", 3105),
        ("red_apple/red_apple", 3153549833),
        ("fruit/apple/green_apple", 1841752750),
        ("blocks/crate/crate", 1651146898),
        # running value leaves the int32 range; only the shift wraps
        ("swords/katana/katana", 13292107786),
        ("palm/glowing_review/issue_1/issue_1", 4681890967),
        # non-ASCII and astral characters hash by UTF-16 code unit
        ("é/ü", 225622),
        ("🍎/apple", 1478861213),
    ],
)
def test_legacy_string_hash_known_values(text: str, expected: int) -> None:
    assert legacy_string_hash(text) == expected


@pytest.mark.parametrize(
    "folder, model_id, expected",
    [
        ("red_apple", "red_apple", 3582600),
        ("fruit/red_apple", "red_apple", 4230257),
        ("crates/oak_crate", "oak_crate", 3680427),
        ("green_apple", "green_apple", 7769298),
        ("swords/katana", "katana", 2140553),
    ],
)
def test_threshold_for_known_values(folder: str, model_id: str, expected: int) -> None:
    assert threshold_for(folder, model_id) == expected
    assert threshold_for_key(f"{folder}/{model_id}") == expected


def test_threshold_is_deterministic_and_in_range() -> None:
    keys = [f"folder_{i}/model_{i}" for i in range(200)]
    first = [threshold_for_key(k) for k in keys]
    second = [threshold_for_key(k) for k in keys]

    assert first == second
    for value in first:
        assert THRESHOLD_START <= value < THRESHOLD_START + THRESHOLD_SPAN


def test_threshold_depends_on_folder_and_id() -> None:
    assert threshold_for("a", "b") == threshold_for_key("a/b")
    assert threshold_for("fruit/red_apple", "red_apple") != threshold_for("red_apple", "red_apple")
