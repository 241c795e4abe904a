from typing import Iterable, List, Optional

from mixology.errors import InvalidInput
from mixology.logging import get_logger
from mixology.models import Catalog, CatalogRecipe, MatchResult
from mixology.services.parsing.units import round_half_up

logger = get_logger(__name__)


def normalize_ingredient(name: str) -> str:
    return name.strip().lower()


def normalize_available(ingredients: Iterable[str]) -> frozenset[str]:
    """Lowercased, trimmed names with blanks dropped. Raises InvalidInput if nothing is left."""
    if ingredients is None or isinstance(ingredients, str):
        raise InvalidInput("ingredients must be a list of names")
    available = frozenset(normalize_ingredient(i) for i in ingredients if isinstance(i, str) and i.strip())
    if not available:
        raise InvalidInput("at least one ingredient is required")
    return available


def score_recipe(recipe: CatalogRecipe, available: frozenset[str]) -> MatchResult:
    missing = tuple(
        ing.name for ing in recipe.ingredients if normalize_ingredient(ing.name) not in available
    )
    total = len(recipe.ingredients)
    have = total - len(missing)
    return MatchResult(
        recipe=recipe,
        missing_ingredients=missing,
        can_make=not missing,
        match_percentage=round_half_up(100 * have / total),
    )


class CatalogMatcher:
    """Scores every catalog recipe against the ingredients a user has on hand."""

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def match(self, ingredients: Iterable[str], limit: Optional[int] = None) -> List[MatchResult]:
        if limit is not None and limit <= 0:
            raise InvalidInput("limit must be positive")
        available = normalize_available(ingredients)
        results = [score_recipe(recipe, available) for recipe in self.catalog]
        # sorted() is stable: ties keep catalog order
        results = sorted(results, key=lambda r: (not r.can_make, -r.match_percentage))
        logger.info(
            "catalog.match available=%s makeable=%s recipes=%s",
            len(available),
            sum(1 for r in results if r.can_make),
            len(results),
        )
        return results[:limit] if limit is not None else results
