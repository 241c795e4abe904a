from fastapi import APIRouter, Depends, HTTPException

from mixology.api.deps import get_vision_chain, get_vocabulary
from mixology.errors import AllProvidersFailed, InvalidInput
from mixology.logging import get_logger
from mixology.schemas.cocktail import AnalyzeImageRequest, AnalyzeImageResponse
from mixology.services.llm.providers import ProviderChain
from mixology.services.parsing.vocabulary import IngredientVocabularyFilter
from mixology.services.suggestions import analyze_image
from mixology.utils.timing import time_span

router = APIRouter()
logger = get_logger(__name__)


@router.post("/analyze-image", response_model=AnalyzeImageResponse)
def post_analyze_image(
    body: AnalyzeImageRequest,
    chain: ProviderChain = Depends(get_vision_chain),
    vocabulary: IngredientVocabularyFilter = Depends(get_vocabulary),
) -> AnalyzeImageResponse:
    with time_span("analyze_image.total") as span:
        try:
            detected = analyze_image(body.image_base64 or "", chain, vocabulary=vocabulary)
        except InvalidInput as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except AllProvidersFailed as exc:
            logger.error("analyze_image.providers_failed errors=%s", exc.errors)
            raise HTTPException(status_code=503, detail=str(exc))
        span["detected"] = len(detected)
    return AnalyzeImageResponse(all_detected=detected)
