"""Recover a weekly plan from free-form LLM output.

Providers wrap JSON in prose or code fences, leave raw newlines inside string
values, drop separators, or stop mid-structure when they hit a token limit.
Parsing is therefore layered: candidates come first from the text with only
fences and BOMs removed, then from a normalized copy with straightened quotes
and no trailing commas. Each candidate gets a direct ``json.loads`` before a
repaired version of the same candidate. Nothing partial is ever returned.
"""

import json
import logging
import re
from enum import Enum

from pydantic import ValidationError

from diet_planner.domain.errors import PlanDecodeError
from diet_planner.domain.plan import WeeklyPlan

_CODE_FENCE = re.compile(r"```[A-Za-z0-9_-]*")
_MISSING_COMMA = re.compile(r'"(\s*)\n(\s*)"')
_SMART_QUOTES = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "„": '"',
        "‘": "'",
        "’": "'",
    }
)
_CLOSERS = {"{": "}", "[": "]"}

_logger = logging.getLogger(__name__)


class _ScanState(Enum):
    NORMAL = "normal"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


def parse_plan(raw: str) -> WeeklyPlan:
    """Decode provider text into a ``WeeklyPlan`` or raise ``PlanDecodeError``."""
    data = extract_json_object(raw)
    try:
        return WeeklyPlan.model_validate(data)
    except ValidationError as exc:
        raise PlanDecodeError(
            "Response JSON does not match the weekly plan structure "
            f"({exc.error_count()} validation errors): {_first_validation_error(exc)}"
        ) from exc


def extract_json_object(raw: str) -> dict[str, object]:
    """Return the most plausible JSON object contained in ``raw``."""
    candidates = extract_candidates(strip_wrappers(raw))
    for candidate in extract_candidates(preprocess(raw)):
        if candidate not in candidates:
            candidates.append(candidate)

    errors: list[str] = []
    for index, candidate in enumerate(candidates):
        try:
            return _load_object(candidate)
        except ValueError as exc:
            errors.append(str(exc))
        try:
            result = _load_object(repair_json_text(candidate))
        except ValueError as exc:
            errors.append(str(exc))
            continue
        _logger.info("Recovered JSON with repaired candidate #%s", index + 1)
        return result

    first_error = errors[0] if errors else "no JSON candidate found"
    raise PlanDecodeError(
        "Model response could not be parsed as JSON. "
        f"Parse error: {first_error}. "
        f"Tried {len(errors)} strategies. "
        f"Raw response length: {len(raw)} characters."
    )


def strip_wrappers(raw: str) -> str:
    """Remove code fences and BOMs, leaving the JSON text itself untouched."""
    return _CODE_FENCE.sub("", raw).replace("\ufeff", "").strip()


def preprocess(raw: str) -> str:
    """Strip wrappers, straighten quotes and drop trailing commas."""
    text = strip_wrappers(raw).translate(_SMART_QUOTES)
    return drop_trailing_commas(text)


def drop_trailing_commas(text: str) -> str:
    """Remove commas directly before ``}`` or ``]`` outside string literals."""
    out: list[str] = []
    state = _ScanState.NORMAL
    for char in text:
        if state is _ScanState.ESCAPED:
            state = _ScanState.IN_STRING
        elif state is _ScanState.IN_STRING:
            if char == "\\":
                state = _ScanState.ESCAPED
            elif char == '"':
                state = _ScanState.NORMAL
        elif char == '"':
            state = _ScanState.IN_STRING
        elif char in "}]":
            index = len(out) - 1
            while index >= 0 and out[index].isspace():
                index -= 1
            if index >= 0 and out[index] == ",":
                del out[index]
        out.append(char)
    return "".join(out)


def extract_candidates(text: str) -> list[str]:
    """Return distinct candidate substrings in the order they are tried."""
    candidates: list[str] = []
    if text:
        candidates.append(text)
    first = text.find("{")
    last = text.rfind("}")
    if first >= 0 and last > first:
        candidates.append(text[first : last + 1])
    scanned = extract_first_object(text)
    if scanned:
        candidates.append(scanned)

    unique: list[str] = []
    for candidate in candidates:
        if candidate not in unique:
            unique.append(candidate)
    return unique


def extract_first_object(text: str) -> str | None:
    """Return the first complete top-level ``{...}`` span, string-aware."""
    state = _ScanState.NORMAL
    depth = 0
    start = -1
    for index, char in enumerate(text):
        if state is _ScanState.ESCAPED:
            state = _ScanState.IN_STRING
            continue
        if state is _ScanState.IN_STRING:
            if char == "\\":
                state = _ScanState.ESCAPED
            elif char == '"':
                state = _ScanState.NORMAL
            continue
        if char == '"':
            state = _ScanState.IN_STRING
        elif char == "{":
            if depth == 0:
                start = index
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0 and start != -1:
                return text[start : index + 1]
            if depth < 0:
                return None
    return None


def repair_json_text(text: str) -> str:
    """Repair common LLM JSON defects with a single string-aware scan.

    Raw newlines inside strings become ``\\n`` and carriage returns are
    dropped. A missing comma between a closing quote, a newline and the next
    opening quote is inserted. An unterminated final string is closed, and
    every container still open at the end is closed innermost first, so an
    open array is closed before the object that encloses it.
    """
    out: list[str] = []
    open_stack: list[str] = []
    state = _ScanState.NORMAL
    for char in text:
        if state is _ScanState.ESCAPED:
            out.append("n" if char == "\n" else char)
            state = _ScanState.IN_STRING
            continue
        if state is _ScanState.IN_STRING:
            if char == "\\":
                state = _ScanState.ESCAPED
            elif char == '"':
                state = _ScanState.NORMAL
            elif char == "\n":
                out.append("\\n")
                continue
            elif char == "\r":
                continue
            out.append(char)
            continue

        if char == '"':
            state = _ScanState.IN_STRING
        elif char in _CLOSERS:
            open_stack.append(char)
        elif char in ("}", "]") and open_stack and _CLOSERS[open_stack[-1]] == char:
            open_stack.pop()
        out.append(char)

    if state is _ScanState.ESCAPED:
        out.pop()
        state = _ScanState.IN_STRING
    if state is _ScanState.IN_STRING:
        out.append('"')

    repaired = _MISSING_COMMA.sub('",\n"', "".join(out))
    if open_stack:
        repaired = repaired.rstrip()
        if repaired.endswith(","):
            repaired = repaired[:-1]
        repaired += "".join(_CLOSERS[opener] for opener in reversed(open_stack))
    return repaired.strip()


def _load_object(candidate: str) -> dict[str, object]:
    parsed = json.loads(candidate)
    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _first_validation_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}"
