"""JSON rendering for CLI results."""

from __future__ import annotations

import json


def print_json(payload: object) -> None:
    """Print a JSON document with camelCase keys on stdout."""
    print(json.dumps(_camel_keys(payload), indent=2))


def _camel_keys(payload: object) -> object:
    if isinstance(payload, dict):
        return {_camel_case(str(key)): _camel_keys(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_camel_keys(item) for item in payload]
    return payload


def _camel_case(key: str) -> str:
    if key.startswith("_") or "_" not in key:
        return key
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)
