import re
from typing import Any, List

NO_INSTRUCTIONS = "Instructions not available"

_LABEL_RE = re.compile(
    r"\"instructions\"\s*:|\b(?:instructions|directions|method|preparation|steps)\s*:",
    re.IGNORECASE,
)
_STRUCTURAL_RE = re.compile(r"[\[\]{}\"]")
# "Step 3:" after any whitespace; "1." / "2)" only where a step can start: the start of
# the text, a new line, or after a sentence ends. "1.5 oz" and "add 2. things" are not markers.
_STEP_MARKER_RE = re.compile(
    r"(?:^|(?<=\s))(?P<label>step\s*\d+\s*[:.)\-]?)"
    r"|(?:^|(?<=[\n.!?:;]))\s*(?P<number>\d+\s*[.)](?!\d))",
    re.IGNORECASE,
)
_LEADING_MARKER_RE = re.compile(
    r"^\s*(?:step\s*\d+\s*[:.)\-]?|\d+\s*[.)](?!\d))\s*",
    re.IGNORECASE,
)
_SENTENCE_END_RE = re.compile(r"(?<!\d)\.(?:\s|$)")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=\D\.)\s+")


def clean_instruction_text(text: str) -> str:
    """Remove escape sequences and JSON/markdown debris that models leave in instruction blobs."""
    cleaned = (
        text.replace("\\r\\n", "\n")
        .replace("\\n", "\n")
        .replace("\\r", "")
        .replace("\r", "")
        .replace("\\t", " ")
        .replace("\t", " ")
        .replace("\\'", "'")
        .replace('\\"', '"')
        .replace("```", "")
    )
    cleaned = _LABEL_RE.sub("", cleaned)
    cleaned = _STRUCTURAL_RE.sub("", cleaned)
    lines = [" ".join(line.split()).rstrip(",").strip() for line in cleaned.split("\n")]
    return "\n".join(line for line in lines if line).strip().strip(",").strip()


def _split_at_markers(text: str) -> List[str]:
    starts = [
        m.start("label") if m.group("label") else m.start("number")
        for m in _STEP_MARKER_RE.finditer(text)
    ]
    bounds = starts + [len(text)]
    pieces = [text[: starts[0]]]
    pieces.extend(text[start:end] for start, end in zip(bounds, bounds[1:]))
    return pieces


def _split_sentences(text: str) -> List[str]:
    out = []
    for sentence in _SENTENCE_SPLIT_RE.split(text):
        sentence = sentence.strip()
        if sentence and sentence[-1] not in ".!?":
            sentence += "."
        out.append(sentence)
    return out


def split_steps(text: str) -> List[str]:
    if _STEP_MARKER_RE.search(text):
        pieces = _split_at_markers(text)
    elif _SENTENCE_END_RE.search(text):
        pieces = _split_sentences(text)
    elif "\n" in text:
        pieces = text.split("\n")
    else:
        pieces = [text]
    steps = []
    for piece in pieces:
        step = " ".join(_LEADING_MARKER_RE.sub("", piece).split())
        if step:
            steps.append(step)
    return steps


def format_instructions(value: Any) -> List[str]:
    """Turn an instructions string, or list of strings, into ordered steps without numbering."""
    if isinstance(value, (list, tuple)):
        # one element per step already; only strip debris and numbering
        steps = []
        for item in value:
            if not isinstance(item, str):
                continue
            step = " ".join(_LEADING_MARKER_RE.sub("", clean_instruction_text(item)).split())
            if step:
                steps.append(step)
        return steps or [NO_INSTRUCTIONS]
    if not isinstance(value, str) or not value.strip():
        return [NO_INSTRUCTIONS]
    return split_steps(clean_instruction_text(value)) or [NO_INSTRUCTIONS]
