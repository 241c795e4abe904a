SUGGESTION_PROMPT_VERSION = "v2"
IMAGE_ANALYSIS_PROMPT_VERSION = "v2"

BARTENDER_SYSTEM_PROMPT = """You are a professional bartender with expertise in creating custom cocktails.
Create unique cocktail recipes based on the available ingredients. Be creative but practical."""

SUGGESTION_TEMPLATE = """I have these ingredients available: ${ingredients}.
Suggest ${count} cocktails I can make.

Return ONLY a JSON array, no prose before or after it. Each element:
{"name": "Cocktail name",
 "ingredients": ["2 oz Gin", "1 oz fresh lemon juice"],
 "instructions": "1. First step. 2. Second step.",
 "youtubeVideos": [{"id": "<youtube video id>", "title": "<video title>"}]}

Rules:
- Use measurements on every ingredient line.
- youtubeVideos is optional; include at most 2 and only ids you are sure exist.
"""

IMAGE_ANALYSIS_TEMPLATE = """This is an image of ingredients that could be used for cocktails. Please identify all visible ingredients (fruits, liquors, mixers, garnishes, etc.) that could be used in cocktail making. List ONLY the names of the ingredients you can see, separated by commas. Be specific but concise (e.g., 'lime' not 'green citrus fruit'). If you see bottles, try to identify what type of alcohol or mixer they contain."""

IMAGE_ANALYSIS_BRAND_TEMPLATE = IMAGE_ANALYSIS_TEMPLATE + """
When a label is readable, name the brand together with the product (e.g., 'Fever-Tree tonic water', 'Bombay Sapphire gin')."""


def render(template: str, **values: object) -> str:
    out = template
    for key, value in values.items():
        out = out.replace("${" + key + "}", str(value))
    return out


def suggestion_prompt(ingredients: list[str], count: int) -> str:
    return render(SUGGESTION_TEMPLATE, ingredients=", ".join(ingredients), count=count)


def image_analysis_prompt(emphasize_brands: bool = False) -> str:
    return IMAGE_ANALYSIS_BRAND_TEMPLATE if emphasize_brands else IMAGE_ANALYSIS_TEMPLATE
