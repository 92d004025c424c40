"""
Mocktail Request Matchers

Predicates over a Request used to decide whether a mock applies.

Every matcher is an immutable value: two matchers built from the same
arguments compare equal, which is what lets a MockSet reject duplicate mocks.

Features:
- Method and path matching (exact, prefix, wildcard pattern)
- Header and query parameter matching
- Body matching (raw content and JSON-aware)
- Arbitrary callables as an escape hatch
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Tuple

from ..request import Request
from ..common.utils import safe_json_parse

_MISSING = object()


def _json_equal(actual: Any, expected: Any) -> bool:
    """
    Compare JSON values structurally, keeping scalar types apart.

    true is not 1 and 1 is not 1.0. Tuples in the expected value compare
    like JSON arrays.
    """
    if isinstance(actual, dict) and isinstance(expected, dict):
        return actual.keys() == expected.keys() and all(
            _json_equal(actual[key], expected[key]) for key in actual
        )
    if isinstance(actual, (list, tuple)) and isinstance(expected, (list, tuple)):
        return len(actual) == len(expected) and all(
            _json_equal(a, e) for a, e in zip(actual, expected)
        )
    return type(actual) is type(expected) and actual == expected


class Matcher:
    """Base class for request matchers."""

    name: str = 'matcher'

    def matches(self, request: Request) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class AnyMatcher(Matcher):
    """Matches every request."""

    name = 'any'

    def matches(self, request: Request) -> bool:
        return True


@dataclass(frozen=True)
class MethodMatcher(Matcher):
    """Matches the HTTP method (case-insensitive)."""

    method: str
    name = 'method'

    def __post_init__(self):
        object.__setattr__(self, 'method', self.method.upper())

    def matches(self, request: Request) -> bool:
        return request.method == self.method


@dataclass(frozen=True)
class PathMatcher(Matcher):
    """Matches the exact request path."""

    path: str
    name = 'path'

    def matches(self, request: Request) -> bool:
        return request.path == self.path


@dataclass(frozen=True)
class PathPrefixMatcher(Matcher):
    """Matches paths starting with a prefix."""

    prefix: str
    name = 'path_prefix'

    def matches(self, request: Request) -> bool:
        return request.path.startswith(self.prefix)


@dataclass(frozen=True)
class PathPatternMatcher(Matcher):
    """
    Matches paths against a wildcard pattern.

    Supports patterns like:
    - /users/* (any single segment)
    - /users/** (any number of segments)
    - /users/{id} (named parameter, one segment)
    """

    pattern: str
    name = 'path_pattern'
    _regex: Any = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self):
        object.__setattr__(self, '_regex', compile_path_pattern(self.pattern))

    def matches(self, request: Request) -> bool:
        return bool(self._regex.match(request.path))


def compile_path_pattern(pattern: str) -> 're.Pattern':
    """Convert a wildcard path pattern into an anchored regex."""
    parts = []
    for token in re.split(r'(\*\*|\*|\{[^}]+\})', pattern):
        if token == '**':
            parts.append('.*')
        elif token == '*' or (token.startswith('{') and token.endswith('}')):
            parts.append('[^/]+')
        else:
            parts.append(re.escape(token))
    return re.compile('^' + ''.join(parts) + '$')


@dataclass(frozen=True)
class HeaderMatcher(Matcher):
    """Matches a single header name/value pair."""

    header: str
    value: str
    name = 'header'

    def __post_init__(self):
        object.__setattr__(self, 'header', self.header.lower())

    def matches(self, request: Request) -> bool:
        return request.header(self.header) == self.value


@dataclass(frozen=True)
class HeadersMatcher(Matcher):
    """Matches when every given header pair is present on the request."""

    headers: Tuple[Tuple[str, str], ...]
    name = 'headers'

    def __post_init__(self):
        pairs = tuple(sorted((k.lower(), v) for k, v in dict(self.headers).items()))
        object.__setattr__(self, 'headers', pairs)

    def matches(self, request: Request) -> bool:
        return all(request.header(k) == v for k, v in self.headers)


@dataclass(frozen=True)
class HeaderExistsMatcher(Matcher):
    """Matches when a header is present, whatever its value."""

    header: str
    name = 'header_exists'

    def __post_init__(self):
        object.__setattr__(self, 'header', self.header.lower())

    def matches(self, request: Request) -> bool:
        return request.header(self.header) is not None


@dataclass(frozen=True)
class QueryParamMatcher(Matcher):
    """Matches when a query parameter has the given value."""

    key: str
    value: str
    name = 'query_param'

    def matches(self, request: Request) -> bool:
        return self.value in request.query_values(self.key)


@dataclass(frozen=True)
class QueryParamsMatcher(Matcher):
    """Matches when every given query pair is present."""

    params: Tuple[Tuple[str, str], ...]
    name = 'query_params'

    def __post_init__(self):
        pairs = tuple(sorted((str(k), str(v)) for k, v in dict(self.params).items()))
        object.__setattr__(self, 'params', pairs)

    def matches(self, request: Request) -> bool:
        return all(v in request.query_values(k) for k, v in self.params)


@dataclass(frozen=True)
class QueryParamExistsMatcher(Matcher):
    """Matches when a query parameter is present."""

    key: str
    name = 'query_param_exists'

    def matches(self, request: Request) -> bool:
        return any(key == self.key for key, _ in request.query)


@dataclass(frozen=True)
class BodyMatcher(Matcher):
    """Matches the full request body content, regardless of chunking."""

    body: bytes
    name = 'body'

    def matches(self, request: Request) -> bool:
        return request.body.to_bytes() == self.body


@dataclass(frozen=True)
class JsonBodyMatcher(Matcher):
    """Matches when the request body parses to an equal JSON value."""

    value: Any
    name = 'json'

    def matches(self, request: Request) -> bool:
        parsed = safe_json_parse(request.body.to_bytes(), default=_MISSING)
        if parsed is _MISSING:
            return False
        return _json_equal(parsed, self.value)


@dataclass(frozen=True)
class FunctionMatcher(Matcher):
    """
    Matches using an arbitrary callable.

    Two function matchers are equal only when they wrap the same callable.
    """

    func: Callable[[Request], bool]
    name = 'function'

    def matches(self, request: Request) -> bool:
        return bool(self.func(request))
