"""
Mocktail Common Utilities

Shared helpers used by matchers, the loader and the mock server.
"""

import json
from typing import Any, Dict, Iterable, Optional, Union


def safe_json_parse(data: Union[str, bytes, None], default: Any = None) -> Any:
    """
    Safely parse JSON text or bytes with error handling.

    Args:
        data: JSON string or bytes to parse
        default: Default value to return if parsing fails

    Returns:
        Parsed JSON object, or default if parsing fails

    Example:
        payload = safe_json_parse(request.body.to_bytes(), default={})
    """
    if not data:
        return default

    try:
        return json.loads(data)
    except (json.JSONDecodeError, TypeError, ValueError):
        return default


def normalize_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Lower-case header names for case-insensitive comparison."""
    if not headers:
        return {}
    return {str(k).lower(): str(v) for k, v in headers.items()}


def filter_response_headers(
    headers: Dict[str, str],
    skip: Iterable[str] = ('content-length', 'transfer-encoding', 'connection')
) -> Dict[str, str]:
    """
    Drop headers the ASGI layer must compute itself.

    Args:
        headers: Response headers from a mock
        skip: Header names (lower-case) to remove

    Returns:
        Filtered copy of headers
    """
    skipped = set(skip)
    return {k: v for k, v in headers.items() if k.lower() not in skipped}
