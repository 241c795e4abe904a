from typing import Iterable, List, Optional

from mixology.errors import InvalidInput
from mixology.logging import get_logger
from mixology.models import ExtractionResult
from mixology.services.catalog.matcher import normalize_available
from mixology.services.llm.prompts import (
    BARTENDER_SYSTEM_PROMPT,
    IMAGE_ANALYSIS_PROMPT_VERSION,
    SUGGESTION_PROMPT_VERSION,
    image_analysis_prompt,
    suggestion_prompt,
)
from mixology.services.llm.providers import ProviderChain
from mixology.services.parsing.response_extractor import extract_recipes
from mixology.services.parsing.vocabulary import IngredientVocabularyFilter

logger = get_logger(__name__)


def generate_suggestions(
    ingredients: Iterable[str],
    chain: ProviderChain,
    count: int = 3,
    vocabulary: Optional[IngredientVocabularyFilter] = None,
) -> ExtractionResult:
    """Ask the provider chain for custom cocktails and parse the reply.

    Raises InvalidInput for an empty ingredient list and AllProvidersFailed when no
    vendor answers. A reply that cannot be parsed still yields the default recipe.
    """
    if count <= 0:
        raise InvalidInput("count must be positive")
    names = sorted(normalize_available(ingredients))
    logger.info("suggestions.request ingredients=%s count=%s", len(names), count)
    reply = chain.complete(
        BARTENDER_SYSTEM_PROMPT,
        suggestion_prompt(names, count),
        prompt_name="cocktail_suggestions",
        prompt_version=SUGGESTION_PROMPT_VERSION,
    )
    return extract_recipes(reply, expected_count=count, vocabulary=vocabulary)


def analyze_image(
    image_base64: str,
    chain: ProviderChain,
    vocabulary: Optional[IngredientVocabularyFilter] = None,
) -> List[str]:
    """Names of the ingredients a vision model sees in a base64-encoded photo."""
    if not isinstance(image_base64, str) or not image_base64.strip():
        raise InvalidInput("image is required")
    vocabulary = vocabulary or IngredientVocabularyFilter()
    # drop a data-URL prefix; the provider adds its own
    payload = image_base64.split(",", 1)[1] if image_base64.startswith("data:") else image_base64
    reply = chain.describe_image(
        payload.strip(),
        image_analysis_prompt(vocabulary.config.emphasize_brands),
        prompt_name="image_analysis",
        prompt_version=IMAGE_ANALYSIS_PROMPT_VERSION,
    )
    return vocabulary.parse_detected_ingredients(reply)
