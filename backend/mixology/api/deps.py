from fastapi import Request

from mixology.config import settings
from mixology.models import Catalog
from mixology.services.catalog.loader import load_catalog
from mixology.services.llm.providers import ProviderChain, build_text_chain, build_vision_chain
from mixology.services.parsing.profiles import vocabulary_config_from_settings
from mixology.services.parsing.vocabulary import IngredientVocabularyFilter


def get_catalog(request: Request) -> Catalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        catalog = load_catalog(settings.catalog_path)
        request.app.state.catalog = catalog
    return catalog


def get_text_chain() -> ProviderChain:
    return build_text_chain(settings)


def get_vision_chain() -> ProviderChain:
    return build_vision_chain(settings)


def get_vocabulary() -> IngredientVocabularyFilter:
    return IngredientVocabularyFilter(vocabulary_config_from_settings(settings))
