import json
from pathlib import Path
from typing import Any

from mixology.errors import MalformedCatalogEntry
from mixology.logging import get_logger
from mixology.models import Catalog, CatalogIngredient, CatalogRecipe

logger = get_logger(__name__)


def _require(record: dict, key: str, where: str) -> Any:
    if key not in record:
        raise MalformedCatalogEntry(f"{where}: missing field {key!r}")
    return record[key]


def _ingredient_table(records: dict) -> dict[int, dict]:
    table: dict[int, dict] = {}
    for entry in records.get("ingredients") or []:
        ing_id = _require(entry, "id", "ingredient")
        name = _require(entry, "name", f"ingredient {ing_id}")
        if not isinstance(name, str) or not name.strip():
            raise MalformedCatalogEntry(f"ingredient {ing_id}: blank name")
        if ing_id in table:
            raise MalformedCatalogEntry(f"ingredient {ing_id}: duplicate id")
        table[ing_id] = entry
    return table


def _build_recipe(entry: dict, table: dict[int, dict]) -> CatalogRecipe:
    recipe_id = _require(entry, "id", "recipe")
    where = f"recipe {recipe_id}"
    refs = entry.get("ingredients") or []
    if not refs:
        raise MalformedCatalogEntry(f"{where}: a recipe needs at least one ingredient")
    ingredients = []
    for ref in refs:
        ing_id = _require(ref, "id", where)
        known = table.get(ing_id)
        if known is None:
            raise MalformedCatalogEntry(f"{where}: unknown ingredient id {ing_id}")
        ingredients.append(
            CatalogIngredient(
                id=ing_id,
                name=known["name"].strip(),
                amount=str(ref.get("amount", "")),
                unit=str(ref.get("unit", "")),
                category=known.get("category", ""),
            )
        )
    return CatalogRecipe(
        id=recipe_id,
        name=_require(entry, "name", where),
        description=entry.get("description", ""),
        instructions=entry.get("instructions", ""),
        image=entry.get("image", ""),
        ingredients=tuple(ingredients),
    )


def build_catalog(records: dict) -> Catalog:
    """Validate raw catalog records and freeze them into a Catalog.

    Recipes reference ingredients by id; every referenced id must exist in the
    ingredient table and every recipe must use at least one ingredient.
    """
    if not isinstance(records, dict):
        raise MalformedCatalogEntry("catalog root must be an object")
    table = _ingredient_table(records)
    recipes = []
    seen: set = set()
    for entry in records.get("recipes") or []:
        recipe = _build_recipe(entry, table)
        if recipe.id in seen:
            raise MalformedCatalogEntry(f"recipe {recipe.id}: duplicate id")
        seen.add(recipe.id)
        recipes.append(recipe)
    return Catalog(recipes=tuple(recipes))


def load_catalog(path: Path | str) -> Catalog:
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        records = json.load(fh)
    catalog = build_catalog(records)
    logger.info("catalog.loaded path=%s recipes=%s", path.name, len(catalog))
    return catalog
