from pydantic import BaseModel, ConfigDict, Field

from mixology.models import CatalogRecipe, GeneratedRecipe, MatchResult


class CocktailIngredientOut(BaseModel):
    id: int
    name: str
    amount: str = ""
    unit: str = ""
    category: str = ""


class CocktailOut(BaseModel):
    id: int
    name: str
    description: str = ""
    instructions: str = ""
    image: str = ""
    ingredients: list[CocktailIngredientOut]

    @classmethod
    def from_recipe(cls, recipe: CatalogRecipe) -> "CocktailOut":
        return cls(
            id=recipe.id,
            name=recipe.name,
            description=recipe.description,
            instructions=recipe.instructions,
            image=recipe.image,
            ingredients=[
                CocktailIngredientOut(
                    id=ing.id, name=ing.name, amount=ing.amount, unit=ing.unit, category=ing.category
                )
                for ing in recipe.ingredients
            ],
        )


class CocktailMatchOut(CocktailOut):
    model_config = ConfigDict(populate_by_name=True)

    missing_ingredients: list[str] = Field(alias="missingIngredients")
    can_make: bool = Field(alias="canMake")
    match_percentage: int = Field(alias="matchPercentage")

    @classmethod
    def from_match(cls, result: MatchResult) -> "CocktailMatchOut":
        base = CocktailOut.from_recipe(result.recipe)
        return cls(
            **base.model_dump(),
            missing_ingredients=list(result.missing_ingredients),
            can_make=result.can_make,
            match_percentage=result.match_percentage,
        )


class MatchRequest(BaseModel):
    ingredients: list[str]
    limit: int | None = None


class IngredientsResponse(BaseModel):
    ingredients: list[str]


class SuggestionRequest(BaseModel):
    ingredients: list[str]
    count: int | None = None


class YoutubeVideoOut(BaseModel):
    id: str
    title: str = ""


class GeneratedRecipeOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    ingredients: list[str]
    instructions: list[str]
    youtube_videos: list[YoutubeVideoOut] = Field(default_factory=list, alias="youtubeVideos")
    is_custom: bool = Field(default=True, alias="isCustom")

    @classmethod
    def from_recipe(cls, recipe: GeneratedRecipe) -> "GeneratedRecipeOut":
        return cls(
            id=recipe.id,
            name=recipe.name,
            ingredients=list(recipe.ingredients),
            instructions=list(recipe.instructions),
            youtube_videos=[YoutubeVideoOut(id=v.id, title=v.title) for v in recipe.youtube_videos],
            is_custom=recipe.is_custom,
        )


class SuggestionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    suggestions: list[GeneratedRecipeOut]
    parse_succeeded: bool = Field(alias="parseSucceeded")
    strategy: str


class AnalyzeImageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str | None = Field(default=None, alias="imageBase64")


class AnalyzeImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    all_detected: list[str] = Field(alias="allDetected")
