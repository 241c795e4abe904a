"""
Imperial -> metric volume conversion for cocktail measures.

Uses a fixed 1 oz = 30 ml factor (not 29.5735) so bar measures come out as round
numbers: 2 oz -> 60 ml, 0.75 oz -> 23 ml. Rounding is half-up.
"""

import math
import re
from typing import Optional

OZ_TO_ML = 30

_OUNCE_UNITS = frozenset({
    "oz", "oz.", "ounce", "ounces", "fl oz", "fl. oz", "fl.oz", "floz",
    "fluid ounce", "fluid ounces",
})

# "1 1/2" | "1/2" | "1.5" | "2"
_AMOUNT = r"\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?"
_OZ_IN_TEXT_RE = re.compile(
    rf"(?<![\d/.-])({_AMOUNT})\s*(?:fl\.?\s*)?(?:oz|ounces?)\b",
    re.IGNORECASE,
)
_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)/(\d+)$")
_FRACTION_RE = re.compile(r"^(\d+)/(\d+)$")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_amount(value: object) -> Optional[float]:
    """Parse "2", "0.75", "1/2", "1 1/2" (or a number). Returns None for "to top", "8-10", etc."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = str(value or "").strip()
    if not text:
        return None
    if m := _MIXED_RE.match(text):
        denominator = int(m.group(3))
        if denominator == 0:
            return None
        return int(m.group(1)) + int(m.group(2)) / denominator
    if m := _FRACTION_RE.match(text):
        denominator = int(m.group(2))
        if denominator == 0:
            return None
        return int(m.group(1)) / denominator
    try:
        amount = float(text)
    except ValueError:
        return None
    return amount if math.isfinite(amount) else None


def is_ounce_unit(unit: object) -> bool:
    if not isinstance(unit, str):
        return False
    return " ".join(unit.lower().split()) in _OUNCE_UNITS


def ounces_to_ml(ounces: float) -> int:
    return round_half_up(ounces * OZ_TO_ML)


def convert_oz_to_ml(text: str) -> str:
    """Replace every ounce measure in free text: "2oz Gin" -> "60 ml Gin"."""
    if not text:
        return text

    def _replace(match: re.Match) -> str:
        ounces = parse_amount(" ".join(match.group(1).split()))
        if ounces is None:
            return match.group(0)
        return f"{ounces_to_ml(ounces)} ml"

    return _OZ_IN_TEXT_RE.sub(_replace, text)
