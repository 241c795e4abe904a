"""
Extraction profiles: named presets for how aggressively model output is filtered.

The token limit and brand exemplars were tuned by hand against real vision-model
replies. They trade recall for precision and the exemplar list is known to be
incomplete; extend it through settings rather than editing the filter.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple


class ExtractionProfile(str, Enum):
    STRICT = "strict"
    STANDARD = "standard"
    BRAND_AWARE = "brand_aware"


CONVERSATIONAL_DENYLIST: Tuple[str, ...] = (
    "i don't see",
    "cannot identify",
    "i can help",
    "i can see",
    "here are",
    "the ingredients",
    "please let me",
    "based on",
    "following ingredients",
    "let me know",
    "need more",
    "visible in the image",
    "that's all",
    "that i can",
)

DEFAULT_BRAND_EXEMPLARS: Tuple[str, ...] = (
    "fever-tree",
    "tito's",
    "grey goose",
    "jack daniel's",
    "bombay sapphire",
    "captain morgan",
    "st-germain",
    "angostura",
)

EXTENDED_BRAND_EXEMPLARS: Tuple[str, ...] = DEFAULT_BRAND_EXEMPLARS + (
    "hendrick's",
    "jose cuervo",
    "don julio",
    "johnnie walker",
    "maker's mark",
    "bacardi",
    "cointreau",
    "grand marnier",
    "aperol",
    "campari",
    "q mixers",
)


@dataclass(frozen=True)
class VocabularyConfig:
    max_tokens: int = 4
    brand_exemplars: Tuple[str, ...] = DEFAULT_BRAND_EXEMPLARS
    denylist: Tuple[str, ...] = CONVERSATIONAL_DENYLIST
    emphasize_brands: bool = False

    def with_overrides(
        self,
        max_tokens: Optional[int] = None,
        extra_exemplars: Iterable[str] = (),
    ) -> "VocabularyConfig":
        exemplars = self.brand_exemplars + tuple(
            e.strip().lower() for e in extra_exemplars if e and e.strip()
        )
        return replace(
            self,
            max_tokens=self.max_tokens if max_tokens is None else max_tokens,
            brand_exemplars=exemplars,
        )


_PROFILE_CONFIGS = {
    ExtractionProfile.STRICT: VocabularyConfig(max_tokens=3),
    ExtractionProfile.STANDARD: VocabularyConfig(),
    ExtractionProfile.BRAND_AWARE: VocabularyConfig(
        max_tokens=5,
        brand_exemplars=EXTENDED_BRAND_EXEMPLARS,
        emphasize_brands=True,
    ),
}


def resolve_profile(value: "str | ExtractionProfile | None") -> ExtractionProfile:
    if isinstance(value, ExtractionProfile):
        return value
    try:
        return ExtractionProfile((value or ExtractionProfile.STANDARD.value).strip().lower())
    except ValueError:
        raise ValueError(
            f"unknown extraction profile {value!r}; expected one of "
            + ", ".join(p.value for p in ExtractionProfile)
        ) from None


def vocabulary_config_for(profile: "str | ExtractionProfile | None") -> VocabularyConfig:
    return _PROFILE_CONFIGS[resolve_profile(profile)]


def vocabulary_config_from_settings(settings) -> VocabularyConfig:
    return vocabulary_config_for(settings.extraction_profile).with_overrides(
        max_tokens=settings.vocabulary_max_tokens,
        extra_exemplars=settings.vocabulary_brand_exemplars,
    )
