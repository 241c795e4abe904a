import json
import re
from dataclasses import dataclass
from typing import List, Optional

from mixology.logging import get_logger
from mixology.services.parsing.profiles import VocabularyConfig

logger = get_logger(__name__)

_BULLET_RE = re.compile(r"^[\s•\-–—*+]+")
_NUMERIC_PREFIX_RE = re.compile(r"^\d+\s*[.)]\s*")
_QUOTES = "\"'“”‘’`"
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_SPLIT_RE = re.compile(r",|\n|\\n")


@dataclass(frozen=True)
class VocabularyDecision:
    keep: bool
    text: str = ""


def clean_line(line: str) -> str:
    text = _BULLET_RE.sub("", line or "").strip()
    text = _NUMERIC_PREFIX_RE.sub("", text).strip()
    text = text.strip(_QUOTES + "*_").strip()
    return text.rstrip(".").strip().strip(_QUOTES).strip()


def _fold(text: str) -> str:
    return text.lower().replace("’", "'").replace("‘", "'")


class IngredientVocabularyFilter:
    """Separates real ingredient names from conversational filler in model output."""

    def __init__(self, config: Optional[VocabularyConfig] = None) -> None:
        self.config = config or VocabularyConfig()

    def is_conversational(self, line: str) -> bool:
        folded = _fold(line)
        return any(phrase in folded for phrase in self.config.denylist)

    def has_brand_exemplar(self, line: str) -> bool:
        folded = _fold(line)
        return any(_fold(brand) in folded for brand in self.config.brand_exemplars)

    def check(self, line: str) -> VocabularyDecision:
        text = clean_line(line)
        if not text or self.is_conversational(text):
            return VocabularyDecision(keep=False)
        if len(text.split()) > self.config.max_tokens and not self.has_brand_exemplar(text):
            return VocabularyDecision(keep=False)
        return VocabularyDecision(keep=True, text=text)

    def filter_lines(self, lines: List[str]) -> List[str]:
        kept = []
        for line in lines:
            decision = self.check(line)
            if decision.keep:
                kept.append(decision.text)
            elif line and line.strip():
                logger.debug("vocabulary.discard line=%r", line.strip()[:80])
        return kept

    def parse_detected_ingredients(self, content: str) -> List[str]:
        """Ingredient names from an image-analysis reply: a JSON array if present, else a comma/newline list."""
        if not content or not content.strip():
            return []
        if m := _JSON_ARRAY_RE.search(content):
            try:
                data = json.loads(m.group(0))
            except ValueError:
                logger.debug("vocabulary.json_array_invalid falling back to split")
            else:
                if isinstance(data, list):
                    items = [item if isinstance(item, str) else str(item) for item in data if item is not None]
                    detected = self.filter_lines(items)
                    logger.info("vocabulary.detected source=json count=%s", len(detected))
                    return detected
        detected = self.filter_lines(_SPLIT_RE.split(content))
        logger.info("vocabulary.detected source=text count=%s", len(detected))
        return detected
