"""
Mocktail Mock Module

Mock registration, selection and serving.

This module provides:
- Request matchers and When/Then builders
- Mock and MockSet (priority-ordered, first-match-wins selection)
- YAML/JSON mock definition loading
- FastAPI-based mock server
"""

from .matcher import (
    Matcher,
    AnyMatcher,
    MethodMatcher,
    PathMatcher,
    PathPrefixMatcher,
    PathPatternMatcher,
    HeaderMatcher,
    HeadersMatcher,
    HeaderExistsMatcher,
    QueryParamMatcher,
    QueryParamsMatcher,
    QueryParamExistsMatcher,
    BodyMatcher,
    JsonBodyMatcher,
    FunctionMatcher,
)
from .builder import When, Then
from .mock import Mock, DEFAULT_PRIORITY
from .mock_set import MockSet
from .config import MockConfig
from .loader import MockLoader, mock_from_dict

__all__ = [
    # Matchers
    'Matcher',
    'AnyMatcher',
    'MethodMatcher',
    'PathMatcher',
    'PathPrefixMatcher',
    'PathPatternMatcher',
    'HeaderMatcher',
    'HeadersMatcher',
    'HeaderExistsMatcher',
    'QueryParamMatcher',
    'QueryParamsMatcher',
    'QueryParamExistsMatcher',
    'BodyMatcher',
    'JsonBodyMatcher',
    'FunctionMatcher',

    # Builders
    'When',
    'Then',

    # Mocks
    'Mock',
    'DEFAULT_PRIORITY',
    'MockSet',

    # Configuration
    'MockConfig',
    'MockLoader',
    'mock_from_dict',
]
