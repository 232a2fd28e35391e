"""Encode/decode helpers for list and map columns persisted as JSON text."""
from __future__ import annotations

import json
from typing import Any


def dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def load_json_list(raw: object) -> list:
    """Decode a stored JSON array. Absent or malformed values become ``[]``."""
    if isinstance(raw, list):
        return raw
    if not raw or not isinstance(raw, str):
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return value if isinstance(value, list) else []


def load_json_object(raw: object) -> dict:
    """Decode a stored JSON object. Absent or malformed values become ``{}``."""
    if isinstance(raw, dict):
        return raw
    if not raw or not isinstance(raw, str):
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return value if isinstance(value, dict) else {}
