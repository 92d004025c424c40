"""
Tests for Mocktail Request Matchers

Tests the matcher predicates including:
- Method and path matching (exact, prefix, wildcard pattern)
- Header and query parameter matching
- Body matching (raw content and JSON-aware)
- Value equality used for duplicate detection
"""

import pytest

from mocktail.body import Body
from mocktail.request import Request
from mocktail.mock.matcher import (
    AnyMatcher,
    BodyMatcher,
    FunctionMatcher,
    HeaderExistsMatcher,
    HeaderMatcher,
    HeadersMatcher,
    JsonBodyMatcher,
    MethodMatcher,
    PathMatcher,
    PathPatternMatcher,
    PathPrefixMatcher,
    QueryParamExistsMatcher,
    QueryParamMatcher,
    QueryParamsMatcher,
    compile_path_pattern,
)


@pytest.fixture
def sample_request():
    """Sample request for matching tests."""
    return Request.from_url(
        'POST',
        'https://api.example.com/users/123/orders?status=open&limit=10',
        headers={
            'Authorization': 'Bearer token123',
            'Content-Type': 'application/json'
        },
        body=b'{"name": "John Doe", "email": "john@example.com"}'
    )


class TestMethodAndPath:
    """Test method and path matchers."""

    def test_any(self, sample_request):
        """Test AnyMatcher matches everything."""
        assert AnyMatcher().matches(sample_request)
        assert AnyMatcher().matches(Request())

    def test_method(self, sample_request):
        """Test method matching is case-insensitive."""
        assert MethodMatcher('post').matches(sample_request)
        assert not MethodMatcher('GET').matches(sample_request)

    def test_path(self, sample_request):
        """Test exact path matching."""
        assert PathMatcher('/users/123/orders').matches(sample_request)
        assert not PathMatcher('/users/123').matches(sample_request)

    def test_path_prefix(self, sample_request):
        """Test path prefix matching."""
        assert PathPrefixMatcher('/users').matches(sample_request)
        assert not PathPrefixMatcher('/products').matches(sample_request)

    @pytest.mark.parametrize('pattern,expected', [
        ('/users/*/orders', True),
        ('/users/{id}/orders', True),
        ('/users/**', True),
        ('/**/orders', True),
        ('/users/*', False),
        ('/users/{id}', False),
        ('/products/**', False),
    ])
    def test_path_pattern(self, sample_request, pattern, expected):
        """Test wildcard path patterns."""
        assert PathPatternMatcher(pattern).matches(sample_request) is expected

    def test_path_pattern_escapes_literals(self):
        """Test regex metacharacters in patterns are literal."""
        regex = compile_path_pattern('/files/report.v1/*')

        assert regex.match('/files/report.v1/a')
        assert not regex.match('/files/reportXv1/a')


class TestHeadersAndQuery:
    """Test header and query parameter matchers."""

    def test_header(self, sample_request):
        """Test single header matching is case-insensitive on the name."""
        assert HeaderMatcher('AUTHORIZATION', 'Bearer token123').matches(sample_request)
        assert not HeaderMatcher('Authorization', 'Bearer other').matches(sample_request)

    def test_headers(self, sample_request):
        """Test all given headers must be present."""
        assert HeadersMatcher((('content-type', 'application/json'),)).matches(sample_request)
        assert not HeadersMatcher((
            ('content-type', 'application/json'),
            ('x-missing', '1'),
        )).matches(sample_request)

    def test_header_exists(self, sample_request):
        """Test header presence matching."""
        assert HeaderExistsMatcher('Authorization').matches(sample_request)
        assert not HeaderExistsMatcher('X-Api-Key').matches(sample_request)

    def test_query_param(self, sample_request):
        """Test query parameter value matching."""
        assert QueryParamMatcher('status', 'open').matches(sample_request)
        assert not QueryParamMatcher('status', 'closed').matches(sample_request)

    def test_query_params(self, sample_request):
        """Test all given query pairs must be present."""
        assert QueryParamsMatcher((('status', 'open'), ('limit', '10'))).matches(sample_request)
        assert not QueryParamsMatcher((('status', 'open'), ('page', '1'))).matches(sample_request)

    def test_query_param_repeated(self):
        """Test matching any of a repeated parameter's values."""
        request = Request.from_url('GET', '/search?tag=a&tag=b')

        assert QueryParamMatcher('tag', 'b').matches(request)

    def test_query_param_exists(self, sample_request):
        """Test query parameter presence matching."""
        assert QueryParamExistsMatcher('limit').matches(sample_request)
        assert not QueryParamExistsMatcher('page').matches(sample_request)


class TestBodyMatching:
    """Test body matchers."""

    def test_body_exact(self, sample_request):
        """Test raw body content matching."""
        content = b'{"name": "John Doe", "email": "john@example.com"}'

        assert BodyMatcher(content).matches(sample_request)
        assert not BodyMatcher(b'{}').matches(sample_request)

    def test_body_ignores_chunking(self):
        """Test a chunked request body matches its concatenated content."""
        request = Request(body=Body.from_chunks([b'hel', b'lo']))

        assert BodyMatcher(b'hello').matches(request)
        assert request.body.chunk_count() == 2

    def test_json_body(self, sample_request):
        """Test JSON matching ignores formatting and key order."""
        matcher = JsonBodyMatcher({'email': 'john@example.com', 'name': 'John Doe'})

        assert matcher.matches(sample_request)

    def test_json_body_mismatch(self, sample_request):
        """Test different JSON does not match."""
        assert not JsonBodyMatcher({'name': 'Jane'}).matches(sample_request)

    def test_json_body_invalid_json(self):
        """Test non-JSON bodies never match."""
        request = Request(body=b'not json')

        assert not JsonBodyMatcher(None).matches(request)
        assert not JsonBodyMatcher(None).matches(Request())

    def test_json_body_null(self):
        """Test a literal null body matches None."""
        assert JsonBodyMatcher(None).matches(Request(body=b'null'))

    @pytest.mark.parametrize('expected,body', [
        ({'a': True}, b'{"a":1}'),
        ({'a': 1}, b'{"a":true}'),
        ({'a': 1}, b'{"a":1.0}'),
        ([0], b'[false]'),
    ])
    def test_json_body_scalar_types_distinct(self, expected, body):
        """Test booleans, integers and floats are not interchangeable."""
        assert not JsonBodyMatcher(expected).matches(Request(body=body))

    def test_json_body_tuple_as_array(self):
        """Test tuples in the expected value compare like arrays."""
        assert JsonBodyMatcher({'ids': (1, 2)}).matches(Request(body=b'{"ids":[1,2]}'))


class TestFunctionMatcher:
    """Test callable matchers."""

    def test_function(self, sample_request):
        """Test predicate result is used."""
        matcher = FunctionMatcher(lambda request: request.path.endswith('/orders'))

        assert matcher.matches(sample_request)
        assert not matcher.matches(Request(path='/other'))


class TestMatcherEquality:
    """Test value equality of matchers."""

    def test_equal_values(self):
        """Test matchers with equal arguments are equal."""
        assert MethodMatcher('get') == MethodMatcher('GET')
        assert PathMatcher('/a') == PathMatcher('/a')
        assert PathPatternMatcher('/a/*') == PathPatternMatcher('/a/*')
        assert JsonBodyMatcher({'a': 1}) == JsonBodyMatcher({'a': 1})
        assert HeadersMatcher((('A', '1'), ('b', '2'))) == HeadersMatcher((('b', '2'), ('a', '1')))

    def test_different_types_not_equal(self):
        """Test different matcher kinds are never equal."""
        assert PathMatcher('/a') != PathPrefixMatcher('/a')

    def test_function_identity(self):
        """Test function matchers compare by callable identity."""
        def predicate(request):
            return True

        assert FunctionMatcher(predicate) == FunctionMatcher(predicate)
        assert FunctionMatcher(predicate) != FunctionMatcher(lambda request: True)
