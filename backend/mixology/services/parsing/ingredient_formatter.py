"""
Render one ingredient, in whatever shape a model returned it, as a display line.

Observed shapes:
- "2 oz Gin"                                   -> StringIngredient
- {"name", "amount" | "measure", "unit"}       -> NamedAmountIngredient
- {"name", "quantity"}                         -> NamedQuantityIngredient
- anything else ({"item": ...}, numbers, ...)  -> OpaqueIngredient
"""

import re
from dataclasses import dataclass
from typing import Any, Union

from mixology.services.parsing.units import (
    convert_oz_to_ml,
    is_ounce_unit,
    ounces_to_ml,
    parse_amount,
)

_OPAQUE_NOISE_RE = re.compile(r"[{}\[\]\"']")


@dataclass(frozen=True)
class StringIngredient:
    text: str


@dataclass(frozen=True)
class NamedAmountIngredient:
    name: str
    amount: str = ""
    unit: str = ""


@dataclass(frozen=True)
class NamedQuantityIngredient:
    name: str
    quantity: str


@dataclass(frozen=True)
class OpaqueIngredient:
    value: Any


Ingredient = Union[StringIngredient, NamedAmountIngredient, NamedQuantityIngredient, OpaqueIngredient]


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def classify_ingredient(raw: Any) -> Ingredient:
    if isinstance(raw, str):
        return StringIngredient(raw)
    if isinstance(raw, dict):
        name = raw.get("name")
        if isinstance(name, str) and name.strip():
            amount = raw.get("amount", raw.get("measure"))
            if amount is None and "quantity" in raw:
                if "unit" not in raw:
                    return NamedQuantityIngredient(name.strip(), _as_text(raw["quantity"]))
                amount = raw["quantity"]
            return NamedAmountIngredient(name.strip(), _as_text(amount), _as_text(raw.get("unit")))
    return OpaqueIngredient(raw)


def _format_named_amount(ing: NamedAmountIngredient) -> str:
    amount, unit = ing.amount, ing.unit
    if is_ounce_unit(unit):
        ounces = parse_amount(amount)
        if ounces is not None:
            return " ".join([str(ounces_to_ml(ounces)), "ml", ing.name])
        # "to top" + "oz" reads as "to top oz"; keep only the amount text
        unit = ""
    # "2 oz" may still hide in the amount when the unit field is empty
    return convert_oz_to_ml(" ".join(part for part in (amount, unit, ing.name) if part))


def _format_opaque(value: Any) -> str:
    if isinstance(value, dict):
        text = ", ".join(f"{key}: {_as_text(val)}" for key, val in value.items())
    elif isinstance(value, (list, tuple)):
        text = ", ".join(_as_text(item) for item in value)
    else:
        text = _as_text(value)
    text = _OPAQUE_NOISE_RE.sub("", text)
    return " ".join(text.split())


def format_ingredient(raw: Any) -> str:
    ing = classify_ingredient(raw)
    if isinstance(ing, StringIngredient):
        return " ".join(convert_oz_to_ml(ing.text).split())
    if isinstance(ing, NamedAmountIngredient):
        return _format_named_amount(ing)
    if isinstance(ing, NamedQuantityIngredient):
        return convert_oz_to_ml(" ".join(part for part in (ing.quantity, ing.name) if part))
    return _format_opaque(ing.value)
