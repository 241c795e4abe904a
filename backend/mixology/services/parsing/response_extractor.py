"""
Structured cocktail records from free-form text-generation output.

Models are asked for a JSON array but answer in whatever shape they like, so the
reply goes through a cascade; the first stage that yields records wins:

    direct_json    the whole reply (code fences removed) is JSON
    embedded_json  a JSON array (or object) somewhere inside prose
    markdown       "# Name" / "1. Name" sections with Ingredients/Instructions blocks
    name_detail    "Name: free text" lines
    default        one placeholder record

A stage that cannot parse its input yields nothing and the next stage runs.
Nothing is raised to the caller; total failure is the placeholder record with
parse_succeeded=False.
"""

import json
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from mixology.logging import get_logger
from mixology.models import ExtractionResult, GeneratedRecipe, YoutubeVideo
from mixology.services.parsing.ingredient_formatter import format_ingredient
from mixology.services.parsing.instruction_formatter import format_instructions
from mixology.services.parsing.vocabulary import IngredientVocabularyFilter

logger = get_logger(__name__)

STRATEGY_DIRECT_JSON = "direct_json"
STRATEGY_EMBEDDED_JSON = "embedded_json"
STRATEGY_MARKDOWN = "markdown"
STRATEGY_NAME_DETAIL = "name_detail"
STRATEGY_DEFAULT = "default"

DEFAULT_NAME = "Default Cocktail"
UNKNOWN_NAME = "Unknown Cocktail"
INGREDIENTS_PLACEHOLDER = "See instructions for details"
MAX_VIDEOS = 2
MIN_NAME_LENGTH = 3

_RECORD_LIST_KEYS = ("cocktails", "recipes", "suggestions")
_VIDEO_KEYS = ("youtubeVideos", "youtube_videos", "videos")

_FENCE_RE = re.compile(r"```[\w-]*[ \t]*\n?(.*?)```", re.DOTALL)
_ARRAY_OF_OBJECTS_START_RE = re.compile(r"\[\s*\{")
# bounds the work spent on prose full of stray brackets
_MAX_DECODE_ATTEMPTS = 200
_DECODER = json.JSONDecoder()

_INGREDIENT_KEYWORDS = r"ingredients|you(?:'|’)?ll need|you will need"
_INSTRUCTION_KEYWORDS = r"instructions|directions|method|preparation|steps"
# "Ingredients:", "**Method**", "## Instructions", "Ingredients (serves 2): gin, lime"
_SECTION_RE = re.compile(
    rf"^[#*_>\s]*(?:(?P<ingredients>{_INGREDIENT_KEYWORDS})|(?P<instructions>{_INSTRUCTION_KEYWORDS}))\b"
    r"(?:[^:\n]{0,20}:|[*_\s]*$)[*_\s]*(?P<rest>.*)$",
    re.IGNORECASE,
)
_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s*(?P<title>.+?)\s*#*\s*$")
_NUMBERED_TITLE_RE = re.compile(
    r"^\s*\d+\s*[.)]\s+(?P<title>[*_]*[A-Za-z][\w '’&()\-]*?[*_]*)\s*:?\s*$"
)
_TITLE_PREFIX_RE = re.compile(r"^(?:cocktail|recipe|drink|option)\s*#?\s*\d+\s*[:.)\-–—]\s*", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"^(?:[-•–—+]\s*|\*(?!\*)\s*|\d+\s*[.)]\s+)")
_BULLET_ITEM_RE = re.compile(r"^(?:[-•–—+]|\*(?!\*))")
_NUMBERED_ITEM_RE = re.compile(r"^\d+\s*[.)]\s+")
_INLINE_LIST_SPLIT_RE = re.compile(r",\s*(?![^()]*\))")
_MAX_TITLE_WORDS = 8
_MAX_PLAIN_INGREDIENT_WORDS = 8

_NAME_DETAIL_RE = re.compile(
    r"^[ \t]*(?:[-*•]\s*|\d+\s*[.)]\s*)?[*_]*"
    r"(?P<name>[A-Z][\w'’&]*(?:[ \t]+(?:[A-Z&][\w'’&]*|of|and|the|on|de|la|in))*)"
    r"[*_]*[ \t]*(?::|[ \t][-–—])[ \t]*[*_]*[ \t]*(?P<detail>.+)$",
    re.MULTILINE,
)
_NOT_A_NAME = frozenset({
    "note", "notes", "tip", "tips", "garnish", "glass", "glassware", "serve", "serves",
    "enjoy", "optional", "variation", "variations", "ingredients", "instructions",
    "directions", "method", "preparation", "steps", "step", "description", "flavor",
    "flavour", "taste", "yield", "total", "prep time",
})
_MIN_NAME_DETAIL_NAME = 3
_MIN_NAME_DETAIL_TEXT = 10

_VIDEO_ID_NOISE_RE = re.compile(r"[\"'{}\[\],\s]")
_VIDEO_TITLE_NOISE_RE = re.compile(r"[\"{}\[\]]")
_YOUTUBE_URL_ID_RE = re.compile(r"(?:v=|youtu\.be/|embed/|shorts/)([\w-]{4,})")

Candidate = Dict[str, Any]


def default_recipe() -> GeneratedRecipe:
    return GeneratedRecipe(
        id="custom-default",
        name=DEFAULT_NAME,
        ingredients=("Use the ingredients you have available",),
        instructions=("Mix all ingredients together. We couldn't parse the AI response properly.",),
    )


# -- JSON stages ------------------------------------------------------------


def _strip_code_fences(text: str) -> str:
    fenced = _FENCE_RE.search(text)
    if fenced:
        return fenced.group(1).strip()
    return text.replace("```", "").strip()


def _candidates_from_data(data: Any) -> List[Candidate]:
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    if isinstance(data, dict):
        for key in _RECORD_LIST_KEYS:
            value = data.get(key)
            if isinstance(value, list):
                return [item for item in value if isinstance(item, dict)]
        if "name" in data and ("ingredients" in data or "instructions" in data):
            return [data]
    return []


def _direct_json(text: str) -> List[Candidate]:
    body = _strip_code_fences(text)
    if not body:
        return []
    try:
        data = json.loads(body)
    except (ValueError, RecursionError):
        logger.debug("extract.direct_json not_json")
        return []
    return _candidates_from_data(data)


def _object_starts(text: str) -> Iterator[int]:
    index = text.find("{")
    while index != -1:
        yield index
        index = text.find("{", index + 1)


def _decoded_values(text: str, starts: Iterator[int]) -> Iterator[Any]:
    """The first complete JSON value at each start offset; offsets that do not decode are skipped."""
    for attempt, start in enumerate(starts):
        if attempt >= _MAX_DECODE_ATTEMPTS:
            logger.debug("extract.embedded_json gave_up attempts=%s", attempt)
            return
        try:
            yield _DECODER.raw_decode(text, start)[0]
        except (ValueError, RecursionError):
            continue


def _embedded_json(text: str) -> List[Candidate]:
    array_starts = (m.start() for m in _ARRAY_OF_OBJECTS_START_RE.finditer(text))
    for kind, starts in (("array", array_starts), ("object", _object_starts(text))):
        for value in _decoded_values(text, starts):
            candidates = _candidates_from_data(value)
            if candidates:
                return candidates
        logger.debug("extract.embedded_json no_records kind=%s", kind)
    return []


# -- markdown stage ---------------------------------------------------------


def _clean_title(raw: str) -> Optional[str]:
    title = raw.strip().strip("*_#").strip()
    title = title.rstrip(":").strip().strip("*_").strip()
    title = _TITLE_PREFIX_RE.sub("", title).strip().strip("*_").strip()
    title = " ".join(title.split())
    if len(title) < MIN_NAME_LENGTH or _SECTION_RE.match(title):
        return None
    return title


def _heading_boundaries(lines: List[str]) -> List[Tuple[int, str]]:
    boundaries = []
    for index, line in enumerate(lines):
        m = _HEADING_RE.match(line)
        if not m:
            continue
        title = _clean_title(m.group("title"))
        if title:
            boundaries.append((index, title))
    return boundaries


def _numbered_boundaries(lines: List[str]) -> List[Tuple[int, str]]:
    """Numbered title lines, skipping numbered steps inside an Ingredients/Instructions block."""
    boundaries = []
    in_section = False
    section_has_content = False
    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            if in_section and section_has_content:
                in_section = False
            continue
        header = _SECTION_RE.match(stripped)
        if header:
            in_section = True
            section_has_content = bool(header.group("rest").strip())
            continue
        if in_section:
            section_has_content = True
            continue
        m = _NUMBERED_TITLE_RE.match(stripped)
        if not m or len(m.group("title").split()) > _MAX_TITLE_WORDS:
            continue
        title = _clean_title(m.group("title"))
        if title:
            boundaries.append((index, title))
    return boundaries


def _split_sections(text: str) -> List[Tuple[str, str]]:
    lines = text.splitlines()
    boundaries = _heading_boundaries(lines) or _numbered_boundaries(lines)
    sections = []
    for position, (line_index, title) in enumerate(boundaries):
        end = boundaries[position + 1][0] if position + 1 < len(boundaries) else len(lines)
        sections.append((title, "\n".join(lines[line_index + 1:end])))
    return sections


def _strip_list_marker(line: str) -> str:
    return _LIST_ITEM_RE.sub("", line).strip()


def _looks_like_plain_ingredient(line: str) -> bool:
    return len(line.split()) <= _MAX_PLAIN_INGREDIENT_WORDS and not line.endswith((".", ":"))


def _split_inline_list(text: str) -> List[str]:
    return [part.strip() for part in _INLINE_LIST_SPLIT_RE.split(text) if part.strip()]


def _parse_section_body(body: str) -> Tuple[List[str], str, bool]:
    """Returns (ingredient lines, instruction text, has_structure)."""
    mode = None
    saw_ingredient_header = False
    saw_instruction_header = False
    header_ingredients: List[str] = []
    instruction_lines: List[str] = []
    loose: List[str] = []

    for raw in body.splitlines():
        line = raw.strip()
        if not line:
            if mode == "instructions" and instruction_lines:
                mode = None
            continue
        header = _SECTION_RE.match(line)
        if header:
            rest = header.group("rest").strip()
            if header.group("ingredients"):
                mode = "ingredients"
                saw_ingredient_header = True
                header_ingredients.extend(_split_inline_list(rest))
            else:
                mode = "instructions"
                saw_instruction_header = True
                if rest:
                    instruction_lines.append(rest)
            continue
        if mode == "ingredients":
            if _LIST_ITEM_RE.match(line) or _looks_like_plain_ingredient(line):
                header_ingredients.append(_strip_list_marker(line))
                continue
            # prose after the list closes the block
            mode = None
            loose.append(line)
        elif mode == "instructions":
            instruction_lines.append(line)
        else:
            loose.append(line)

    if saw_ingredient_header:
        ingredients = header_ingredients
        remaining = loose
    else:
        picked = [i for i, line in enumerate(loose) if _BULLET_ITEM_RE.match(line)]
        if not picked and saw_instruction_header:
            # steps live in the instructions block, so numbered lines outside it are ingredients
            picked = [i for i, line in enumerate(loose) if _NUMBERED_ITEM_RE.match(line)]
        chosen = set(picked)
        ingredients = [_strip_list_marker(loose[i]) for i in picked]
        remaining = [line for i, line in enumerate(loose) if i not in chosen]

    instructions = "\n".join(instruction_lines) if instruction_lines else "\n".join(remaining)
    has_structure = saw_ingredient_header or saw_instruction_header or bool(ingredients)
    return [i for i in ingredients if i], instructions, has_structure


def _markdown(text: str) -> List[Candidate]:
    parsed = []
    for title, body in _split_sections(text):
        ingredients, instructions, has_structure = _parse_section_body(body)
        if not ingredients and not instructions.strip():
            logger.debug("extract.markdown empty_section name=%s", title)
            continue
        parsed.append((has_structure, {"name": title, "ingredients": ingredients, "instructions": instructions}))
    # "# Suggestions for you" style intro headings carry no recipe structure
    if any(structured for structured, _ in parsed):
        return [candidate for structured, candidate in parsed if structured]
    return [candidate for _, candidate in parsed]


# -- last resort ------------------------------------------------------------


def _name_detail(text: str) -> List[Candidate]:
    candidates = []
    for m in _NAME_DETAIL_RE.finditer(text):
        name = m.group("name").strip()
        detail = m.group("detail").strip().strip("*_").strip()
        if len(name) <= _MIN_NAME_DETAIL_NAME or len(detail) <= _MIN_NAME_DETAIL_TEXT:
            continue
        if name.lower() in _NOT_A_NAME or _SECTION_RE.match(name):
            continue
        candidates.append({"name": name, "ingredients": [], "instructions": detail})
    return candidates


# -- field sanitization -----------------------------------------------------


def _ingredient_items(raw: Any) -> List[Any]:
    if isinstance(raw, (list, tuple)):
        return list(raw)
    if isinstance(raw, str):
        items = []
        for line in raw.replace("\\n", "\n").splitlines():
            items.extend(_split_inline_list(line))
        return items
    return []


def _sanitize_ingredients(raw: Any, vocabulary: IngredientVocabularyFilter) -> List[str]:
    out = []
    for item in _ingredient_items(raw):
        if item is None:
            continue
        if isinstance(item, str):
            item = _strip_list_marker(item.strip())
            if not item or vocabulary.is_conversational(item):
                continue
        text = format_ingredient(item)
        if text:
            out.append(text)
    return out


def _clean_video_id(value: Any) -> str:
    text = str(value) if isinstance(value, (str, int)) else ""
    text = _VIDEO_ID_NOISE_RE.sub("", text)
    m = _YOUTUBE_URL_ID_RE.search(text)
    return m.group(1) if m else text


def _clean_video_title(value: Any) -> str:
    text = value if isinstance(value, str) else ""
    text = _VIDEO_TITLE_NOISE_RE.sub("", text)
    return " ".join(text.split()).strip(",'").strip()


def _sanitize_videos(raw: Any) -> List[YoutubeVideo]:
    if not isinstance(raw, list):
        return []
    videos = []
    for entry in raw[:MAX_VIDEOS]:
        if isinstance(entry, dict):
            video_id = _clean_video_id(entry.get("id") or entry.get("videoId") or entry.get("url"))
            title = _clean_video_title(entry.get("title"))
        elif isinstance(entry, str):
            video_id, title = _clean_video_id(entry), ""
        else:
            continue
        if len(video_id) <= 3:
            logger.debug("extract.video_discarded id=%r", video_id)
            continue
        videos.append(YoutubeVideo(id=video_id, title=title))
    return videos


def _sanitize(candidate: Candidate, position: int, vocabulary: IngredientVocabularyFilter) -> GeneratedRecipe:
    name = candidate.get("name")
    name = name.strip() if isinstance(name, str) else ""
    ingredients = _sanitize_ingredients(candidate.get("ingredients"), vocabulary)
    videos_raw = next((candidate[key] for key in _VIDEO_KEYS if key in candidate), None)
    return GeneratedRecipe(
        id=f"custom-{position}",
        name=name or UNKNOWN_NAME,
        ingredients=tuple(ingredients or [INGREDIENTS_PLACEHOLDER]),
        instructions=tuple(format_instructions(candidate.get("instructions"))),
        youtube_videos=tuple(_sanitize_videos(videos_raw)),
    )


_STAGES: Tuple[Tuple[str, Callable[[str], List[Candidate]]], ...] = (
    (STRATEGY_DIRECT_JSON, _direct_json),
    (STRATEGY_EMBEDDED_JSON, _embedded_json),
    (STRATEGY_MARKDOWN, _markdown),
    (STRATEGY_NAME_DETAIL, _name_detail),
)


def extract_recipes(
    text: str,
    expected_count: Optional[int] = None,
    vocabulary: Optional[IngredientVocabularyFilter] = None,
) -> ExtractionResult:
    """Parse one model reply into recipes. Never raises and never returns an empty sequence."""
    vocabulary = vocabulary or IngredientVocabularyFilter()
    content = text if isinstance(text, str) else ""
    logger.info("extract.start chars=%s expected=%s", len(content), expected_count)

    for strategy, stage in _STAGES:
        try:
            candidates = stage(content)
            recipes = [
                _sanitize(candidate, position, vocabulary)
                for position, candidate in enumerate(candidates, start=1)
            ]
        except Exception as exc:  # noqa: BLE001 - a broken stage must fall through to the next one
            logger.warning("extract.stage_failed name=%s error=%s", strategy, exc)
            continue
        recipes = [recipe for recipe in recipes if recipe.name]
        if not recipes:
            logger.debug("extract.stage_empty name=%s", strategy)
            continue
        logger.info("extract.end strategy=%s recipes=%s", strategy, len(recipes))
        if expected_count and len(recipes) != expected_count:
            logger.warning(
                "extract.count_mismatch strategy=%s expected=%s got=%s",
                strategy,
                expected_count,
                len(recipes),
            )
        return ExtractionResult(recipes=tuple(recipes), parse_succeeded=True, strategy=strategy)

    logger.warning("extract.default no stage produced recipes chars=%s", len(content))
    return ExtractionResult(recipes=(default_recipe(),), parse_succeeded=False, strategy=STRATEGY_DEFAULT)
