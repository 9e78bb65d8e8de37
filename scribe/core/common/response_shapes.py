# File: scribe/core/common/response_shapes.py
"""
Normalization of loosely-shaped provider payloads.

Hosted inference APIs answer with a bare string, an array, or an object
whose interesting field name varies per model. Each helper here tries the
known shapes in a fixed order and raises ResponseShapeError when none
match, instead of guessing.
"""

from typing import Any

from scribe.core.errors import ResponseShapeError

# Priority order for object-shaped payloads carrying a URL
URL_KEYS = ("output", "url", "image", "result", "prediction")

MAX_DEPTH = 4


def extract_output_url(payload: Any) -> str:
    """
    Returns the first non-empty string found in a generation payload.

    Shapes, in order: "url" | ["url", ...] | {"output"|"url"|"image"|"result"|"prediction": <shape>}
    """
    found = _first_string(payload, depth=0)
    if found is None:
        raise ResponseShapeError(payload)
    return found


def _first_string(payload: Any, depth: int):
    if depth > MAX_DEPTH:
        return None

    if isinstance(payload, str):
        return payload.strip() or None

    if isinstance(payload, (list, tuple)):
        if not payload:
            return None
        return _first_string(payload[0], depth + 1)

    if isinstance(payload, dict):
        for key in URL_KEYS:
            if key in payload:
                found = _first_string(payload[key], depth + 1)
                if found is not None:
                    return found
        return None

    return None
