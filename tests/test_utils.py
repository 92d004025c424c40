"""
Tests for utility functions module.

Tests safe_json_parse(), normalize_headers() and filter_response_headers().
"""

import pytest

from mocktail.common.utils import filter_response_headers, normalize_headers, safe_json_parse


class TestSafeJsonParse:
    """Test suite for safe_json_parse() function."""

    def test_parse_text(self):
        """Test parsing a JSON string."""
        assert safe_json_parse('{"a": 1}') == {'a': 1}

    def test_parse_bytes(self):
        """Test parsing JSON bytes."""
        assert safe_json_parse(b'[1, 2]') == [1, 2]

    @pytest.mark.parametrize('data', [None, '', b''])
    def test_empty_returns_default(self, data):
        """Test empty input returns the default."""
        assert safe_json_parse(data, default={}) == {}

    def test_invalid_returns_default(self):
        """Test invalid JSON returns the default."""
        assert safe_json_parse('not json', default='fallback') == 'fallback'

    def test_invalid_utf8_returns_default(self):
        """Test undecodable bytes return the default."""
        assert safe_json_parse(b'\xff\xfe\xfa') is None


class TestNormalizeHeaders:
    """Test suite for normalize_headers() function."""

    def test_lowercases_names(self):
        """Test header names are lower-cased and values kept."""
        result = normalize_headers({'Content-Type': 'Application/JSON', 'X-Count': 3})

        assert result == {'content-type': 'Application/JSON', 'x-count': '3'}

    def test_none(self):
        """Test None produces an empty dict."""
        assert normalize_headers(None) == {}


class TestFilterResponseHeaders:
    """Test suite for filter_response_headers() function."""

    def test_drops_transport_headers(self):
        """Test hop-by-hop and length headers are removed."""
        headers = {
            'Content-Length': '10',
            'transfer-encoding': 'chunked',
            'Connection': 'keep-alive',
            'content-type': 'application/json'
        }

        assert filter_response_headers(headers) == {'content-type': 'application/json'}

    def test_custom_skip(self):
        """Test a custom skip list."""
        headers = {'x-secret': '1', 'x-public': '2'}

        assert filter_response_headers(headers, skip=('x-secret',)) == {'x-public': '2'}

    def test_returns_copy(self):
        """Test the input dict is not modified."""
        headers = {'content-length': '1'}

        filter_response_headers(headers)

        assert headers == {'content-length': '1'}
