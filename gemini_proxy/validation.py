# gemini_proxy/validation.py
"""
Inbound request checks (no network).

validate_path_segment(value, field_name)  -> value, or InvalidPathSegmentError
parse_json_body(raw)                      -> decoded JSON object/array

Path variables are interpolated straight into the upstream URL, so anything
outside a conservative allow-list is rejected instead of being encoded.
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional

from .errors import InvalidPathSegmentError, InvalidRequestBodyError

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._\-]{0,127}$")


def validate_path_segment(value: Optional[str], field_name: str) -> str:
    if value is None or not value:
        raise InvalidPathSegmentError(f"Missing {field_name}.")
    if not _SEGMENT_RE.match(value):
        raise InvalidPathSegmentError(
            f"Invalid {field_name}.",
            details=f"{field_name} may only contain letters, digits, '.', '_' and '-' (got {value!r})",
        )
    return value


def parse_json_body(raw: bytes) -> Any:
    """Decode the inbound body; an empty body counts as ``{}``."""
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidRequestBodyError("Request body must be valid JSON.", details=str(e)) from None
    if not isinstance(data, (dict, list)):
        raise InvalidRequestBodyError("Request body must be a JSON object or array.")
    return data
