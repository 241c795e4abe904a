import json
import time

import pytest

from mixology.services.parsing import response_extractor
from mixology.services.parsing.profiles import vocabulary_config_for
from mixology.services.parsing.response_extractor import (
    DEFAULT_NAME,
    INGREDIENTS_PLACEHOLDER,
    STRATEGY_DEFAULT,
    STRATEGY_DIRECT_JSON,
    STRATEGY_EMBEDDED_JSON,
    STRATEGY_MARKDOWN,
    STRATEGY_NAME_DETAIL,
    default_recipe,
    extract_recipes,
)
from mixology.services.parsing.vocabulary import IngredientVocabularyFilter


def test_markdown_reply_with_preamble():
    text = (
        "Here are some ideas:\n# Gin Basil Smash\nIngredients:\n- 2oz Gin\n- 1oz lemon juice\n"
        "Instructions:\n1. Shake with ice\n2. Strain"
    )
    result = extract_recipes(text)
    assert result.strategy == STRATEGY_MARKDOWN
    assert result.parse_succeeded
    assert len(result.recipes) == 1
    recipe = result.recipes[0]
    assert recipe.name == "Gin Basil Smash"
    assert recipe.ingredients == ("60 ml Gin", "30 ml lemon juice")
    assert recipe.instructions == ("Shake with ice", "Strain")
    assert recipe.is_custom


def test_direct_json_array():
    text = json.dumps(
        [
            {
                "name": "Gin Sour",
                "ingredients": ["2 oz Gin", {"name": "Lemon juice", "amount": "1", "unit": "oz"}],
                "instructions": "1. Shake with ice. 2. Strain.",
                "youtubeVideos": [{"id": "abc123XYZ", "title": "How to"}, {"id": "x"}, {"id": "zzzzzz"}],
            }
        ]
    )
    result = extract_recipes(text, expected_count=1)
    assert result.strategy == STRATEGY_DIRECT_JSON
    recipe = result.recipes[0]
    assert recipe.id == "custom-1"
    assert recipe.ingredients == ("60 ml Gin", "30 ml Lemon juice")
    assert recipe.instructions == ("Shake with ice.", "Strain.")
    # only the first two entries are considered, then invalid ids are dropped
    assert [v.id for v in recipe.youtube_videos] == ["abc123XYZ"]
    assert recipe.youtube_videos[0].title == "How to"


def test_fenced_json_object_with_cocktails_key():
    text = '```json\n{"cocktails": [{"name": "Paloma", "ingredients": ["Tequila"], "instructions": ["Build over ice"]}]}\n```'
    result = extract_recipes(text)
    assert result.strategy == STRATEGY_DIRECT_JSON
    assert result.recipes[0].name == "Paloma"
    assert result.recipes[0].instructions == ("Build over ice",)


def test_json_embedded_in_prose():
    text = (
        "Sure! Here you go:\n"
        '[{"name": "Paloma", "ingredients": ["2 oz Tequila", "Grapefruit soda"], "instructions": "Build over ice."}]\n'
        "Enjoy!"
    )
    result = extract_recipes(text)
    assert result.strategy == STRATEGY_EMBEDDED_JSON
    assert result.recipes[0].ingredients == ("60 ml Tequila", "Grapefruit soda")
    assert result.recipes[0].instructions == ("Build over ice.",)


def test_numbered_titles_with_inline_sections():
    text = (
        "1. Negroni Sbagliato\n"
        "Ingredients: Campari, sweet vermouth, prosecco\n"
        "Instructions: Build over ice and stir gently.\n"
        "\n"
        "2. Americano\n"
        "Ingredients: Campari, sweet vermouth, soda water\n"
        "Instructions: Build in a highball glass."
    )
    result = extract_recipes(text)
    assert result.strategy == STRATEGY_MARKDOWN
    assert [r.name for r in result.recipes] == ["Negroni Sbagliato", "Americano"]
    assert result.recipes[0].ingredients == ("Campari", "sweet vermouth", "prosecco")
    assert result.recipes[1].instructions == ("Build in a highball glass.",)


def test_name_detail_lines():
    text = "Try these:\nPaloma: Tequila with grapefruit soda and lime.\nNote: use fresh juice always."
    result = extract_recipes(text)
    assert result.strategy == STRATEGY_NAME_DETAIL
    assert len(result.recipes) == 1
    recipe = result.recipes[0]
    assert recipe.name == "Paloma"
    assert recipe.ingredients == (INGREDIENTS_PLACEHOLDER,)
    assert recipe.instructions == ("Tequila with grapefruit soda and lime.",)


def test_unparseable_reply_yields_default_recipe():
    result = extract_recipes("Sorry, I can't help with that.")
    assert result.strategy == STRATEGY_DEFAULT
    assert not result.parse_succeeded
    assert result.recipes == (default_recipe(),)
    assert result.recipes[0].name == DEFAULT_NAME


@pytest.mark.parametrize(
    "text",
    ["", "   \n\t", "{not json", "[1, 2, 3]", "random words without structure", None, "```", "# \n## Ingredients"],
)
def test_extraction_is_never_empty(text):
    result = extract_recipes(text)
    assert len(result.recipes) >= 1


def test_parse_succeeded_only_false_for_default():
    good = extract_recipes('[{"name": "Daiquiri", "ingredients": ["2 oz rum"], "instructions": "Shake."}]')
    bad = extract_recipes("nothing to see")
    assert good.parse_succeeded and good.recipes[0].name != DEFAULT_NAME
    assert not bad.parse_succeeded and bad.recipes[0].name == DEFAULT_NAME


def test_json_array_keeps_count_and_names_verbatim():
    records = [
        {"name": "Corpse Reviver #2", "ingredients": ["Gin"], "instructions": "Shake."},
        {"name": "Bee's Knees", "ingredients": ["Gin", "Honey"], "instructions": "Shake."},
        {"name": "Aviation", "ingredients": ["Gin"], "instructions": "Shake."},
    ]
    result = extract_recipes(json.dumps(records), expected_count=3)
    assert len(result.recipes) == 3
    assert [r.name for r in result.recipes] == ["Corpse Reviver #2", "Bee's Knees", "Aviation"]


def test_missing_fields_get_placeholders():
    result = extract_recipes('[{"name": "", "ingredients": []}]')
    recipe = result.recipes[0]
    assert recipe.name == "Unknown Cocktail"
    assert recipe.ingredients == (INGREDIENTS_PLACEHOLDER,)
    assert recipe.instructions == ("Instructions not available",)


def test_conversational_ingredient_lines_are_dropped():
    text = json.dumps(
        [{"name": "Mojito", "ingredients": ["Here are the ingredients", "- 2 oz white rum", "Mint"], "instructions": "Muddle."}]
    )
    result = extract_recipes(text, vocabulary=IngredientVocabularyFilter(vocabulary_config_for("strict")))
    assert result.recipes[0].ingredients == ("60 ml white rum", "Mint")


def test_video_urls_are_reduced_to_ids():
    text = json.dumps(
        [
            {
                "name": "Martini",
                "ingredients": ["Gin"],
                "instructions": "Stir.",
                "youtubeVideos": ["https://www.youtube.com/watch?v=dQw4w9WgXcQ"],
            }
        ]
    )
    result = extract_recipes(text)
    assert result.recipes[0].youtube_videos[0].id == "dQw4w9WgXcQ"


def test_json_nested_in_a_wrapper_object_inside_prose():
    text = 'Result: {"data": {"name": "Sidecar", "ingredients": ["Cognac"], "instructions": "Shake."}} done'
    result = extract_recipes(text)
    assert result.strategy == STRATEGY_EMBEDDED_JSON
    assert result.recipes[0].name == "Sidecar"


@pytest.mark.parametrize("text", ["[{" * 20000, "{" * 40000, '[{"name": ' * 2000])
def test_unbalanced_brackets_do_not_stall_extraction(text):
    start = time.perf_counter()
    result = extract_recipes(text)
    elapsed = time.perf_counter() - start
    assert result.recipes == (default_recipe(),)
    assert elapsed < 1.0


def _raise_runtime_error(text):
    raise RuntimeError("stage blew up")


def test_failing_stage_falls_through_to_next(monkeypatch):
    monkeypatch.setattr(
        response_extractor,
        "_STAGES",
        (
            (STRATEGY_DIRECT_JSON, _raise_runtime_error),
            (STRATEGY_NAME_DETAIL, response_extractor._name_detail),
        ),
    )
    result = extract_recipes("Paloma: Tequila with grapefruit soda and lime.")
    assert result.parse_succeeded
    assert result.strategy == STRATEGY_NAME_DETAIL
    assert [r.name for r in result.recipes] == ["Paloma"]


def test_every_stage_failing_yields_default(monkeypatch):
    monkeypatch.setattr(
        response_extractor,
        "_STAGES",
        tuple((name, _raise_runtime_error) for name, _ in response_extractor._STAGES),
    )
    result = extract_recipes('[{"name": "Daiquiri", "ingredients": ["rum"], "instructions": "Shake."}]')
    assert not result.parse_succeeded
    assert result.strategy == STRATEGY_DEFAULT
    assert result.recipes == (default_recipe(),)
