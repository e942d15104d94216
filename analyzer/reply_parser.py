"""
Extracts the recommendation JSON object from a reasoning service reply.

Replies often wrap the JSON in prose or code fences, so the first balanced
{...} object in the text is taken, honouring braces inside string literals.
"""

import json
import logging
from typing import Optional

from infrastructure.errors import ParseError
from models.recommendation import Recommendation

logger = logging.getLogger('fpl_analyzer.llm')


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced JSON object in text, or None."""
    start = text.find('{')
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    return None


def parse_recommendation(reply: str) -> Recommendation:
    """
    Parse a reasoning service reply into a Recommendation.

    Raises:
        ParseError: no JSON object found, invalid JSON, or schema mismatch
    """
    candidate = extract_json_object(reply or "")
    if candidate is None:
        raise ParseError("Could not find a JSON object in the reply", raw_reply=reply)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ParseError(f"Reply JSON is malformed: {e}", raw_reply=reply)

    try:
        return Recommendation.from_dict(data)
    except ParseError as e:
        logger.error(f"ReplyParser: Schema mismatch - {e}")
        raise ParseError(str(e), raw_reply=reply)
