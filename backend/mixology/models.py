from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class CatalogIngredient:
    id: int
    name: str
    amount: str = ""
    unit: str = ""
    category: str = ""


@dataclass(frozen=True)
class CatalogRecipe:
    id: int
    name: str
    description: str
    instructions: str
    image: str
    ingredients: Tuple[CatalogIngredient, ...]


@dataclass(frozen=True)
class Catalog:
    """Immutable set of bundled recipes. Build it with `load_catalog` or `Catalog.from_records`."""

    recipes: Tuple[CatalogRecipe, ...]

    def __len__(self) -> int:
        return len(self.recipes)

    def __iter__(self):
        return iter(self.recipes)

    def get(self, recipe_id: int) -> Optional[CatalogRecipe]:
        for recipe in self.recipes:
            if recipe.id == recipe_id:
                return recipe
        return None

    def all_ingredient_names(self) -> list[str]:
        """Sorted unique ingredient display names across every recipe."""
        return sorted({ing.name for recipe in self.recipes for ing in recipe.ingredients})

    @classmethod
    def from_records(cls, records: dict) -> "Catalog":
        from mixology.services.catalog.loader import build_catalog

        return build_catalog(records)


@dataclass(frozen=True)
class MatchResult:
    recipe: CatalogRecipe
    missing_ingredients: Tuple[str, ...]
    can_make: bool
    match_percentage: int


@dataclass(frozen=True)
class YoutubeVideo:
    id: str
    title: str = ""


@dataclass(frozen=True)
class GeneratedRecipe:
    id: str
    name: str
    ingredients: Tuple[str, ...]
    instructions: Tuple[str, ...]
    youtube_videos: Tuple[YoutubeVideo, ...] = ()
    is_custom: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ExtractionResult:
    recipes: Tuple[GeneratedRecipe, ...]
    parse_succeeded: bool
    strategy: str
