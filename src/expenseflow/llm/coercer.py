"""Tolerant decoding of JSON objects embedded in model output."""
import json
import re
from typing import Any, Dict, Optional

from ..utils.logger import get_logger

logger = get_logger()

TRAILING_COMMA = re.compile(r",\s*([\]}])")


def _repair(candidate: str) -> str:
    """Fix the mistakes models commonly make in otherwise valid JSON."""
    repaired = candidate.replace("“", '"').replace("”", '"')
    return TRAILING_COMMA.sub(r"\1", repaired)


def coerce_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Extract the single JSON object wrapped in prose or markdown fences.

    The substring from the first ``{`` to the last ``}`` is parsed; a strict
    parse is tried first, then one after light repair.

    Args:
        text: Raw model response

    Returns:
        The decoded object, or None when the text is uncoercible
    """
    if not text or not isinstance(text, str):
        return None

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        logger.debug("No JSON object delimiters found in model response")
        return None

    candidate = text[start:end + 1]
    for attempt in (candidate, _repair(candidate)):
        try:
            data = json.loads(attempt, strict=False)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
        return None

    logger.debug(f"Uncoercible model response: {text[:200]}")
    return None
