"""
Mocktail Mock Builders

Explicit two-phase builders used to describe a mock:

- When: what requests the mock applies to (a list of matchers)
- Then: what response the mock returns

Both builders are plain mutable objects passed to a build function; every
method returns the builder so calls can be chained.

Example:
    def build(when, then):
        when.post().path('/users').json({'name': 'Jane'})
        then.created().json({'id': 1, 'name': 'Jane'})

    mock = Mock.build(build)
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..body import Body, BytesLike
from ..request import Request
from ..response import Response
from ..common.utils import normalize_headers
from .matcher import (
    AnyMatcher,
    BodyMatcher,
    FunctionMatcher,
    HeaderExistsMatcher,
    HeaderMatcher,
    HeadersMatcher,
    JsonBodyMatcher,
    Matcher,
    MethodMatcher,
    PathMatcher,
    PathPatternMatcher,
    PathPrefixMatcher,
    QueryParamExistsMatcher,
    QueryParamMatcher,
    QueryParamsMatcher,
)


class When:
    """Describes which requests a mock applies to."""

    def __init__(self):
        self._matchers: List[Matcher] = []

    def matcher(self, matcher: Matcher) -> 'When':
        """Add a matcher (ignored if an equal one is already present)."""
        if matcher not in self._matchers:
            self._matchers.append(matcher)
        return self

    def matchers(self) -> Tuple[Matcher, ...]:
        return tuple(self._matchers)

    def any(self) -> 'When':
        return self.matcher(AnyMatcher())

    def method(self, method: str) -> 'When':
        return self.matcher(MethodMatcher(method))

    def get(self) -> 'When':
        return self.method('GET')

    def post(self) -> 'When':
        return self.method('POST')

    def put(self) -> 'When':
        return self.method('PUT')

    def patch(self) -> 'When':
        return self.method('PATCH')

    def delete(self) -> 'When':
        return self.method('DELETE')

    def head(self) -> 'When':
        return self.method('HEAD')

    def options(self) -> 'When':
        return self.method('OPTIONS')

    def path(self, path: str) -> 'When':
        return self.matcher(PathMatcher(path))

    def path_prefix(self, prefix: str) -> 'When':
        return self.matcher(PathPrefixMatcher(prefix))

    def path_pattern(self, pattern: str) -> 'When':
        return self.matcher(PathPatternMatcher(pattern))

    def header(self, name: str, value: str) -> 'When':
        return self.matcher(HeaderMatcher(name, value))

    def headers(self, headers: Dict[str, str]) -> 'When':
        return self.matcher(HeadersMatcher(tuple(headers.items())))

    def header_exists(self, name: str) -> 'When':
        return self.matcher(HeaderExistsMatcher(name))

    def query_param(self, key: str, value: str) -> 'When':
        return self.matcher(QueryParamMatcher(key, value))

    def query_params(self, params: Dict[str, str]) -> 'When':
        return self.matcher(QueryParamsMatcher(tuple(params.items())))

    def query_param_exists(self, key: str) -> 'When':
        return self.matcher(QueryParamExistsMatcher(key))

    def body(self, body: Body) -> 'When':
        """Match the request body content (chunking is ignored)."""
        return self.matcher(BodyMatcher(body.to_bytes()))

    def bytes(self, data: BytesLike) -> 'When':
        return self.body(Body.from_bytes(data))

    def text(self, text: str) -> 'When':
        return self.body(Body.from_bytes(text))

    def json(self, value: Any) -> 'When':
        """Match a JSON request body by parsed value."""
        return self.matcher(JsonBodyMatcher(value))

    def json_lines(self, values: Iterable[Any]) -> 'When':
        return self.body(Body.from_json_lines(values))

    def pb(self, message: Any) -> 'When':
        return self.body(Body.from_protobuf(message))

    def func(self, predicate: Callable[[Request], bool]) -> 'When':
        """Match with an arbitrary predicate over the request."""
        return self.matcher(FunctionMatcher(predicate))


class Then:
    """Describes the response a mock returns."""

    def __init__(self):
        self._status = 200
        self._headers: Dict[str, str] = {}
        self._body = Body.empty()
        self._message: Optional[str] = None

    def response(self) -> Response:
        """Build a new Response from the current state."""
        return Response(
            status=self._status,
            headers=dict(self._headers),
            body=self._body.copy(),
            message=self._message
        )

    def status(self, status: int) -> 'Then':
        if not 100 <= int(status) <= 599:
            raise ValueError(f"Invalid HTTP status code: {status}")
        self._status = int(status)
        return self

    def ok(self) -> 'Then':
        return self.status(200)

    def created(self) -> 'Then':
        return self.status(201)

    def no_content(self) -> 'Then':
        return self.status(204)

    def error(self, status: int, message: str) -> 'Then':
        """Set an error status with a message."""
        self.status(status)
        self._message = message
        return self

    def bad_request(self) -> 'Then':
        return self.status(400)

    def unauthorized(self) -> 'Then':
        return self.status(401)

    def forbidden(self) -> 'Then':
        return self.status(403)

    def not_found(self) -> 'Then':
        return self.status(404)

    def internal_server_error(self) -> 'Then':
        return self.status(500)

    def message(self, message: str) -> 'Then':
        self._message = message
        return self

    def header(self, name: str, value: str) -> 'Then':
        self._headers[name.lower()] = value
        return self

    def headers(self, headers: Dict[str, str]) -> 'Then':
        self._headers.update(normalize_headers(headers))
        return self

    def body(self, body: Body) -> 'Then':
        self._body = body
        return self

    def bytes(self, data: BytesLike) -> 'Then':
        return self.body(Body.from_bytes(data))

    def bytes_stream(self, chunks: Iterable[BytesLike]) -> 'Then':
        return self.body(Body.from_chunks(chunks))

    def text(self, text: str) -> 'Then':
        self._headers.setdefault('content-type', 'text/plain; charset=utf-8')
        return self.body(Body.from_bytes(text))

    def json(self, value: Any) -> 'Then':
        self._headers.setdefault('content-type', 'application/json')
        return self.body(Body.from_json(value))

    def json_lines(self, values: Iterable[Any]) -> 'Then':
        self._headers.setdefault('content-type', 'application/x-ndjson')
        return self.body(Body.from_json_lines(values))

    def pb(self, message: Any) -> 'Then':
        self._headers.setdefault('content-type', 'application/x-protobuf')
        return self.body(Body.from_protobuf(message))

    def pb_stream(self, messages: Iterable[Any]) -> 'Then':
        self._headers.setdefault('content-type', 'application/x-protobuf')
        return self.body(Body.from_protobuf_stream(messages))
