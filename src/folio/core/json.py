"""JSON serialization helpers."""

import json
from typing import Any

import orjson


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Serialize an object to a JSON string.

    Compact output goes through orjson; indented output uses the standard
    library for readable formatting.

    Args:
        obj: Object to serialize
        **kwargs: Passed to json.dumps when indenting

    Returns:
        JSON string
    """
    if kwargs.get("indent"):
        return json.dumps(obj, ensure_ascii=False, **kwargs)
    return orjson.dumps(obj).decode("utf-8")


__all__ = ["safe_json_dumps"]
