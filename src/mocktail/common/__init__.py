"""
Mocktail Common Utilities

Shared utilities and helpers used across Mocktail modules.
"""

from .utils import safe_json_parse, normalize_headers, filter_response_headers

__all__ = [
    'safe_json_parse',
    'normalize_headers',
    'filter_response_headers',
]
