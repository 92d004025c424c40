"""
Mocktail Mock Loader

Builds a MockSet from mock definition files (YAML or JSON).

Supported layouts:
- {"mocks": [...]}  (wrapped format, may sit next to a "server" section)
- [...]             (direct list format)

Each definition looks like:

    - priority: 1          # optional, default 5
      limit: 2             # optional, default unlimited
      when:
        method: POST
        path: /users
        headers: {content-type: application/json}
        query: {page: "1"}
        json: {name: Jane}
      then:
        status: 201
        json: {id: 1}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .builder import Then, When
from .mock import DEFAULT_PRIORITY, Mock
from .mock_set import MockSet

logger = logging.getLogger("mocktail.loader")

WHEN_KEYS = {
    'method': str,
    'path': str,
    'path_prefix': str,
    'path_pattern': str,
    'headers': dict,
    'header_exists': list,
    'query': dict,
    'body': str,
    'json': object,
}
THEN_KEYS = {
    'status': int,
    'headers': dict,
    'body': str,
    'json': object,
    'json_lines': list,
    'message': str,
}


def _check_section(section: str, data: Any, allowed: Dict[str, type], index: int):
    if not isinstance(data, dict):
        raise ValueError(
            f"Mock #{index}: '{section}' must be a mapping, got {type(data).__name__}"
        )
    unknown = set(data) - set(allowed)
    if unknown:
        raise ValueError(
            f"Mock #{index}: unknown '{section}' keys: {', '.join(sorted(unknown))}"
        )
    for key, value in data.items():
        expected = allowed[key]
        if (isinstance(value, bool) and expected is int) or not isinstance(value, expected):
            raise ValueError(
                f"Mock #{index}: '{section}.{key}' must be {expected.__name__}, "
                f"got {type(value).__name__}"
            )


def _apply_when(when: When, data: Dict[str, Any]):
    if 'method' in data:
        when.method(data['method'])
    if 'path' in data:
        when.path(data['path'])
    if 'path_prefix' in data:
        when.path_prefix(data['path_prefix'])
    if 'path_pattern' in data:
        when.path_pattern(data['path_pattern'])
    if 'headers' in data:
        when.headers({str(k): str(v) for k, v in data['headers'].items()})
    for name in data.get('header_exists', []):
        if not isinstance(name, str):
            raise ValueError(f"'header_exists' entries must be strings, got {name!r}")
        when.header_exists(name)
    if 'query' in data:
        when.query_params({str(k): str(v) for k, v in data['query'].items()})
    if 'body' in data:
        when.text(data['body'])
    if 'json' in data:
        when.json(data['json'])


def _apply_then(then: Then, data: Dict[str, Any]):
    if 'status' in data:
        then.status(data['status'])
    if 'headers' in data:
        then.headers({str(k): str(v) for k, v in data['headers'].items()})
    if 'body' in data:
        then.text(data['body'])
    if 'json' in data:
        then.json(data['json'])
    if 'json_lines' in data:
        then.json_lines(data['json_lines'])
    if 'message' in data:
        then.message(data['message'])


def mock_from_dict(data: Dict[str, Any], index: int = 0) -> Mock:
    """
    Build a Mock from a definition mapping.

    Raises:
        ValueError: If the definition is malformed
    """
    if not isinstance(data, dict):
        raise ValueError(f"Mock #{index}: expected a mapping, got {type(data).__name__}")

    when_data = data.get('when') or {}
    then_data = data.get('then') or {}
    _check_section('when', when_data, WHEN_KEYS, index)
    _check_section('then', then_data, THEN_KEYS, index)

    when, then = When(), Then()
    _apply_when(when, when_data)
    _apply_then(then, then_data)

    return Mock(
        matchers=when.matchers(),
        response=then.response(),
        priority=data.get('priority', DEFAULT_PRIORITY),
        limit=data.get('limit')
    )


class MockLoader:
    """
    Loader for mock definition files.

    Example:
        loader = MockLoader("mocks.yaml")
        mocks = loader.load()

        mocks.match_by_request(Request.from_url('GET', '/health'))
    """

    def __init__(self, file_path: str):
        """
        Initialize mock loader.

        Args:
            file_path: Path to a .yaml/.yml or .json definition file
        """
        self.file_path = Path(file_path)

    def load_definitions(self) -> List[Dict[str, Any]]:
        """
        Read raw definitions from the file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the format is invalid or unrecognized
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"Mock file not found: {self.file_path}")

        with open(self.file_path, 'r', encoding='utf-8') as f:
            if self.file_path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        if isinstance(data, dict):
            if 'mocks' in data:
                return data['mocks'] or []
            raise ValueError(
                f"Unexpected format in {self.file_path}. "
                f"Expected dict with 'mocks' key or a list of mocks. "
                f"Found keys: {list(data.keys())}"
            )
        elif isinstance(data, list):
            return data
        elif data is None:
            return []
        else:
            raise ValueError(
                f"Unexpected format in {self.file_path}. "
                f"Expected dict or list, got {type(data).__name__}"
            )

    def load(self) -> MockSet:
        """Load definitions and build a MockSet."""
        definitions = self.load_definitions()
        mocks = MockSet.from_mocks(
            mock_from_dict(definition, index) for index, definition in enumerate(definitions)
        )
        logger.info(f"Loaded {len(mocks)} mocks from {self.file_path}")
        return mocks

    @staticmethod
    def load_from_file(file_path: str) -> MockSet:
        """Convenience method to load a MockSet in one call."""
        return MockLoader(file_path).load()
