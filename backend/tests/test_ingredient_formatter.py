from mixology.services.parsing.ingredient_formatter import (
    NamedAmountIngredient,
    NamedQuantityIngredient,
    OpaqueIngredient,
    StringIngredient,
    classify_ingredient,
    format_ingredient,
)


def test_classify_shapes():
    assert isinstance(classify_ingredient("2 oz Gin"), StringIngredient)
    assert classify_ingredient({"name": "Gin", "amount": "2", "unit": "oz"}) == NamedAmountIngredient("Gin", "2", "oz")
    assert classify_ingredient({"name": "Gin", "measure": 2}) == NamedAmountIngredient("Gin", "2", "")
    assert classify_ingredient({"name": "Lime", "quantity": 1}) == NamedQuantityIngredient("Lime", "1")
    assert isinstance(classify_ingredient({"item": "Gin"}), OpaqueIngredient)
    assert isinstance(classify_ingredient(42), OpaqueIngredient)


def test_string_ingredient_converts_ounces():
    assert format_ingredient("2 oz Gin") == "60 ml Gin"
    assert format_ingredient("  1   oz  lemon juice ") == "30 ml lemon juice"


def test_named_amount_with_ounce_unit():
    assert format_ingredient({"name": "Gin", "amount": "2", "unit": "oz"}) == "60 ml Gin"
    assert format_ingredient({"name": "Lime juice", "amount": 0.75, "unit": "ounces"}) == "23 ml Lime juice"


def test_named_amount_other_units_pass_through():
    assert format_ingredient({"name": "Angostura bitters", "amount": "2", "unit": "dashes"}) == "2 dashes Angostura bitters"
    assert format_ingredient({"name": "Soda water", "amount": "to top", "unit": "oz"}) == "to top Soda water"


def test_named_amount_with_ounces_hidden_in_amount():
    assert format_ingredient({"name": "Gin", "amount": "2 oz"}) == "60 ml Gin"
    assert format_ingredient({"name": "Gin", "amount": "2 oz", "unit": "oz"}) == "60 ml Gin"


def test_named_quantity():
    assert format_ingredient({"name": "Lime", "quantity": 1}) == "1 Lime"
    assert format_ingredient({"name": "Vodka", "quantity": "2 oz"}) == "60 ml Vodka"


def test_opaque_values_are_flattened():
    assert format_ingredient({"item": "Gin", "qty": "2"}) == "item: Gin, qty: 2"
    assert format_ingredient(["Gin", "Tonic"]) == "Gin, Tonic"
    assert format_ingredient(3.0) == "3"
