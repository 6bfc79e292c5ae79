from __future__ import annotations

import json
from typing import Any, Optional

from jsonschema import ValidationError, validate

WRAPPER_KEYS = ("text", "result", "content", "output")

# A model sometimes answers {"text": "..."} instead of the raw text.
WRAPPER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "minProperties": 1,
    "maxProperties": 1,
    "patternProperties": {
        "^(" + "|".join(WRAPPER_KEYS) + ")$": {"type": "string"},
    },
    "additionalProperties": False,
}


def unwrap_json_wrapper(text: str) -> Optional[str]:
    """Return the inner string of a single-key wrapper object, else None.

    Only one level is unwrapped and anything that is not exactly such an
    object (malformed JSON, extra keys, non-string value) is rejected.
    """

    candidate = text.strip()
    if not (candidate.startswith("{") and candidate.endswith("}")):
        return None
    try:
        # Models often emit raw newlines inside the string value.
        data = json.loads(candidate, strict=False)
    except ValueError:
        return None
    try:
        validate(instance=data, schema=WRAPPER_SCHEMA)
    except ValidationError:
        return None
    return next(iter(data.values()))
