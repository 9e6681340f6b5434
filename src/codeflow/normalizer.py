"""Map provider user payloads onto the canonical profile shape.

A profile is a flat ``dict[str, str]`` with at least a ``uid`` key. The
generic mapping keeps every key of the provider payload; provider
strategies narrow it down by passing a ``field_map`` of
``{canonical_key: payload_key}``.

Value conversion:

- ``None`` -- key omitted.
- ``str`` -- unchanged.
- ``bool`` -- ``"true"`` / ``"false"``.
- other scalars -- ``str(value)``.
- lists and mappings -- compact JSON.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

logger = logging.getLogger(__name__)

UID_KEY = "uid"


def normalize(
    payload: Any,
    uid_field: str = UID_KEY,
    field_map: Optional[Mapping[str, str]] = None,
) -> Any:
    """Normalize a raw user payload into a canonical profile.

    Args:
        payload: The decoded user-info response.
        uid_field: Payload key holding the provider's user identifier.
        field_map: Optional ``{canonical_key: payload_key}`` mapping. When
            given, only mapped keys are emitted.

    Returns:
        The normalized profile. A payload that is not a mapping is
        returned unchanged.
    """
    if not isinstance(payload, Mapping):
        logger.warning(
            "User payload is a %s, not an object; returning it unchanged",
            type(payload).__name__,
        )
        return payload

    if field_map is None:
        pairs = payload.items()
    else:
        pairs = ((key, payload.get(source)) for key, source in field_map.items())

    profile: dict[str, str] = {}
    for key, value in pairs:
        converted = _to_string(value)
        if converted is not None:
            profile[str(key)] = converted

    uid = _to_string(payload.get(uid_field))
    if uid is not None:
        profile[UID_KEY] = uid
    elif UID_KEY not in profile:
        logger.warning("User payload has no '%s' field; profile has no uid", uid_field)

    return profile


def _to_string(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)
