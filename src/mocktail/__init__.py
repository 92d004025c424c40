"""
Mocktail

HTTP test doubles: register mocks, match simulated requests against them in
priority order and serve chunked response bodies.

The FastAPI server lives in mocktail.mock.server and is imported on demand.
"""

from .body import Body, BodyEncodingError
from .request import Request
from .response import Response
from .mock import Mock, MockSet, MockConfig, MockLoader, When, Then, DEFAULT_PRIORITY

__all__ = [
    'Body',
    'BodyEncodingError',
    'Request',
    'Response',
    'Mock',
    'MockSet',
    'MockConfig',
    'MockLoader',
    'When',
    'Then',
    'DEFAULT_PRIORITY',
]

__version__ = '1.0.0'
