"""
Mocktail Request

Simulated HTTP request value matched against registered mocks.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse, parse_qsl

from .body import Body, BytesLike
from .common.utils import normalize_headers


@dataclass
class Request:
    """
    An incoming (simulated) HTTP request.

    Header names are stored lower-cased and the method upper-cased so that
    matchers can compare them directly. Query parameters keep their order and
    may repeat.

    Example:
        request = Request.from_url(
            'POST',
            'http://localhost/users?page=2',
            headers={'Content-Type': 'application/json'},
            body=b'{"name": "Jane"}'
        )
    """

    method: str = 'GET'
    path: str = '/'
    query: List[Tuple[str, str]] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Body = field(default_factory=Body.empty)

    def __post_init__(self):
        self.method = self.method.upper()
        self.headers = normalize_headers(self.headers)
        if not isinstance(self.body, Body):
            self.body = Body.from_bytes(self.body)

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[BytesLike] = None
    ) -> 'Request':
        """
        Build a request from a full URL or a path with a query string.

        Args:
            method: HTTP method
            url: Absolute URL or path (query string is parsed)
            headers: Request headers
            body: Request body as bytes, text or Body

        Returns:
            Request instance
        """
        parsed = urlparse(url)
        if body is None:
            request_body = Body.empty()
        elif isinstance(body, Body):
            request_body = body
        else:
            request_body = Body.from_bytes(body)

        return cls(
            method=method,
            path=parsed.path or '/',
            query=parse_qsl(parsed.query, keep_blank_values=True),
            headers=dict(headers or {}),
            body=request_body
        )

    def header(self, name: str) -> Optional[str]:
        """Get a header value (case-insensitive)."""
        return self.headers.get(name.lower())

    def query_values(self, name: str) -> List[str]:
        """Get all values of a query parameter, in order."""
        return [value for key, value in self.query if key == name]
