from fastapi import APIRouter, Depends, HTTPException

from mixology.api.deps import get_catalog
from mixology.errors import InvalidInput
from mixology.logging import get_logger
from mixology.models import Catalog
from mixology.schemas.cocktail import CocktailMatchOut, CocktailOut, IngredientsResponse, MatchRequest
from mixology.services.catalog.matcher import CatalogMatcher
from mixology.utils.timing import time_span

router = APIRouter()
logger = get_logger(__name__)


@router.get("/cocktails", response_model=list[CocktailOut])
def list_cocktails(catalog: Catalog = Depends(get_catalog)) -> list[CocktailOut]:
    return [CocktailOut.from_recipe(recipe) for recipe in catalog]


@router.get("/ingredients", response_model=IngredientsResponse)
def list_ingredients(catalog: Catalog = Depends(get_catalog)) -> IngredientsResponse:
    return IngredientsResponse(ingredients=catalog.all_ingredient_names())


@router.post("/cocktails/match", response_model=list[CocktailMatchOut])
def match_cocktails(body: MatchRequest, catalog: Catalog = Depends(get_catalog)) -> list[CocktailMatchOut]:
    with time_span("cocktails.match", ingredients=len(body.ingredients)) as span:
        try:
            results = CatalogMatcher(catalog).match(body.ingredients, limit=body.limit)
        except InvalidInput as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        span["results"] = len(results)
    return [CocktailMatchOut.from_match(result) for result in results]
