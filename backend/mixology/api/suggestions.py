from fastapi import APIRouter, Depends, HTTPException

from mixology.api.deps import get_text_chain, get_vocabulary
from mixology.config import settings
from mixology.errors import AllProvidersFailed, InvalidInput
from mixology.logging import get_logger
from mixology.schemas.cocktail import GeneratedRecipeOut, SuggestionRequest, SuggestionResponse
from mixology.services.llm.providers import ProviderChain
from mixology.services.parsing.vocabulary import IngredientVocabularyFilter
from mixology.services.suggestions import generate_suggestions
from mixology.utils.timing import time_span

router = APIRouter()
logger = get_logger(__name__)


@router.post("/suggestions", response_model=SuggestionResponse)
def post_suggestions(
    body: SuggestionRequest,
    chain: ProviderChain = Depends(get_text_chain),
    vocabulary: IngredientVocabularyFilter = Depends(get_vocabulary),
) -> SuggestionResponse:
    count = body.count if body.count is not None else settings.suggestion_count
    with time_span("suggestions.total", ingredients=len(body.ingredients), count=count) as span:
        try:
            result = generate_suggestions(body.ingredients, chain, count=count, vocabulary=vocabulary)
        except InvalidInput as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except AllProvidersFailed as exc:
            logger.error("suggestions.providers_failed errors=%s", exc.errors)
            raise HTTPException(status_code=503, detail=str(exc))
        span["strategy"] = result.strategy
    return SuggestionResponse(
        suggestions=[GeneratedRecipeOut.from_recipe(recipe) for recipe in result.recipes],
        parse_succeeded=result.parse_succeeded,
        strategy=result.strategy,
    )
