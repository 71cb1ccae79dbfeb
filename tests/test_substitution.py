# tests/test_substitution.py

from __future__ import annotations

from item_models.substitution import substitute_placeholders


REPLACEMENTS = {
    "$model": "supermodel:item/red_apple/red_apple",
    "$type": "apple",
    "$parent": "",
    "$folder": "red_apple",
    "$id": "red_apple",
    "$fallback": {"type": "model", "model": "item/apple"},
}


def test_whole_string_leaves_are_replaced() -> None:
    template = {
        "type": "select",
        "property": "display_context",
        "cases": [{"when": "gui", "model": {"type": "model", "model": "$model"}}],
        "fallback": "$fallback",
    }

    result = substitute_placeholders(template, REPLACEMENTS)

    assert result["cases"][0]["model"]["model"] == "supermodel:item/red_apple/red_apple"
    assert result["fallback"] == {"type": "model", "model": "item/apple"}
    # the template itself is untouched
    assert template["fallback"] == "$fallback"


def test_keys_and_partial_strings_are_not_replaced() -> None:
    template = {"$model": "$type", "label": "my $type model", "nested": ["$id", "x$id"]}

    result = substitute_placeholders(template, REPLACEMENTS)

    assert "$model" in result
    assert result["$model"] == "apple"
    assert result["label"] == "my $type model"
    assert result["nested"] == ["red_apple", "x$id"]


def test_non_string_leaves_pass_through() -> None:
    template = {"scale": [1, 2.5, None], "enabled": True, "threshold": 12}
    assert substitute_placeholders(template, REPLACEMENTS) == template


def test_subtree_replacements_are_independent_copies() -> None:
    template = {"a": "$fallback", "b": "$fallback"}

    result = substitute_placeholders(template, REPLACEMENTS)
    result["a"]["model"] = "changed"

    assert result["b"]["model"] == "item/apple"
    assert REPLACEMENTS["$fallback"]["model"] == "item/apple"


def test_template_without_placeholders_round_trips() -> None:
    template = {"type": "model", "model": "minecraft:item/stick", "tints": [{"type": "constant", "value": -1}]}
    assert substitute_placeholders(template, REPLACEMENTS) == template
