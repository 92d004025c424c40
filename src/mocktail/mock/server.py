"""
Mocktail Mock Server

FastAPI application that serves responses from a MockSet.

The server is an ASGI app: mount it in a test client or run it with any ASGI
server. It does not bind sockets itself.

Features:
- First-match-wins selection through MockSet
- Streaming responses (one frame per body chunk) or buffered responses
- Configurable fallback for unmatched requests
- Admin API for metrics and runtime mock management
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request as HTTPRequest, Response as HTTPResponse
from fastapi.responses import JSONResponse, StreamingResponse

from ..body import Body
from ..request import Request
from ..response import Response
from ..common.utils import filter_response_headers
from .config import MockConfig
from .loader import MockLoader
from .mock_set import MockSet

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


@dataclass
class MockMetrics:
    """Track mock server metrics."""

    total_requests: int = 0
    matched_requests: int = 0
    unmatched_requests: int = 0
    start_time: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        uptime_seconds = (datetime.now() - datetime.fromisoformat(self.start_time)).total_seconds()
        return {
            'total_requests': self.total_requests,
            'matched_requests': self.matched_requests,
            'unmatched_requests': self.unmatched_requests,
            'match_rate': round((self.matched_requests / self.total_requests * 100) if self.total_requests > 0 else 0, 2),
            'uptime_seconds': round(uptime_seconds, 2),
            'start_time': self.start_time
        }


class MockServer:
    """
    FastAPI-based mock server backed by a MockSet.

    All access to the MockSet goes through a single lock, since the set
    itself is not thread-safe.

    Example:
        mocks = MockSet()
        mocks.mock(lambda when, then: (when.get().path('/health'), then.text('ok')))

        server = MockServer(mocks)
        client = TestClient(server.app)
        client.get('/health').text  # 'ok'

        # From a definitions file
        server = MockServer.from_file('mocks.yaml')
    """

    def __init__(
        self,
        mocks: Optional[MockSet] = None,
        config: Optional[MockConfig] = None
    ):
        """
        Initialize mock server.

        Args:
            mocks: MockSet to serve (a new empty set if None)
            config: Optional MockConfig for server behavior
        """
        self.mocks = mocks if mocks is not None else MockSet()
        self.config = config or MockConfig()
        self.metrics = MockMetrics()
        self.lock = threading.Lock()

        self.logger = logging.getLogger("mocktail.server")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.app = self._create_app()

    @classmethod
    def from_file(cls, mock_file: str, config: Optional[MockConfig] = None) -> 'MockServer':
        """Create a server from a mock definitions file."""
        return cls(MockLoader(mock_file).load(), config=config)

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes."""
        app = FastAPI(
            title="Mocktail Mock Server",
            description="Mock HTTP server serving registered mocks",
            version="1.0.0"
        )

        # Admin API routes
        if self.config.admin_enabled:
            prefix = self.config.admin_prefix

            @app.get(f"{prefix}/metrics")
            async def get_metrics():
                """Get server metrics."""
                return JSONResponse(content=self.metrics.to_dict())

            @app.post(f"{prefix}/reset")
            async def reset():
                """Reset metrics and recorded mock usage."""
                with self.lock:
                    self.metrics = MockMetrics()
                    self.mocks.reset_calls()
                return JSONResponse(content={'status': 'reset'})

            @app.get(f"{prefix}/mocks")
            async def list_mocks():
                """List registered mocks in match order."""
                with self.lock:
                    summary = self._summarize_mocks()
                return JSONResponse(content={'total': len(summary), 'mocks': summary})

            @app.delete(f"{prefix}/mocks")
            async def clear_mocks():
                """Remove all mocks."""
                with self.lock:
                    count = len(self.mocks)
                    self.mocks.clear()
                return JSONResponse(content={'status': 'cleared', 'cleared_count': count})

            @app.delete(f"{prefix}/mocks/{{index}}")
            async def remove_mock(index: int):
                """Remove the mock at a position."""
                with self.lock:
                    try:
                        removed = self.mocks.remove(index)
                    except IndexError as e:
                        return JSONResponse(content={'error': str(e)}, status_code=404)
                return JSONResponse(content={
                    'status': 'removed',
                    'index': index,
                    'priority': removed.priority
                })

        # Main catch-all route for mocking
        @app.api_route("/{path:path}", methods=HTTP_METHODS)
        async def mock_request(request: HTTPRequest, path: str):
            """Handle incoming requests and serve mock responses."""
            return await self._handle_request(request)

        return app

    def _summarize_mocks(self) -> List[Dict[str, Any]]:
        return [
            {
                'index': index,
                'priority': mock.priority,
                'limit': mock.limit,
                'remaining': mock.remaining,
                'calls': mock.calls,
                'matchers': [repr(m) for m in mock.matchers],
                'status': mock.response.status
            }
            for index, mock in enumerate(self.mocks)
        ]

    async def _handle_request(self, http_request: HTTPRequest) -> HTTPResponse:
        """
        Match an incoming request and build the HTTP response.

        Args:
            http_request: FastAPI Request object

        Returns:
            Response from the matched mock, or the fallback response
        """
        request = Request(
            method=http_request.method,
            path=http_request.url.path,
            query=list(http_request.query_params.multi_items()),
            headers=dict(http_request.headers),
            body=Body.from_bytes(await http_request.body())
        )

        self.logger.debug(f"Incoming: {request.method} {request.path}")

        with self.lock:
            self.metrics.total_requests += 1
            matched = self.mocks.match_by_request(request)
            if matched is not None:
                self.metrics.matched_requests += 1
            else:
                self.metrics.unmatched_requests += 1

        if matched is None:
            self.logger.warning(f"No mock matched {request.method} {request.path}")
            return HTTPResponse(
                content=self.config.fallback_body,
                status_code=self.config.fallback_status,
                media_type="application/json",
                headers={'X-Mocktail-Matched': 'false'}
            )

        return self._create_response(matched.response)

    def _create_response(self, response: Response) -> HTTPResponse:
        """
        Create a FastAPI response from a matched mock's response.

        The mock's response is a private copy, so its body can be consumed.
        """
        headers = filter_response_headers(response.headers)
        headers['X-Mocktail-Matched'] = 'true'

        body = response.body
        if body.is_empty() and response.message:
            body = Body.from_json({'error': response.message})
            headers.setdefault('content-type', 'application/json')

        if self.config.stream_responses:
            return StreamingResponse(
                body.stream(),
                status_code=response.status,
                headers=headers
            )

        return HTTPResponse(
            content=body.drain_all(),
            status_code=response.status,
            headers=headers
        )


def create_mock_server(
    mocks: Optional[MockSet] = None,
    mock_file: Optional[str] = None,
    config_file: Optional[str] = None,
    **config_overrides: Any
) -> MockServer:
    """
    Convenience function to create and configure a mock server.

    Args:
        mocks: MockSet to serve
        mock_file: Mock definitions file, used when mocks is None
        config_file: YAML config file
        **config_overrides: MockConfig fields overriding the file settings

    Returns:
        Configured MockServer instance

    Example:
        server = create_mock_server(mock_file='mocks.yaml', stream_responses=False)
    """
    settings: Dict[str, Any] = {}
    if config_file:
        settings = vars(MockConfig.from_yaml(config_file)).copy()
    settings.update(config_overrides)
    config = MockConfig.from_dict(settings)

    if mocks is None and mock_file:
        mocks = MockLoader(mock_file).load()

    return MockServer(mocks, config=config)
