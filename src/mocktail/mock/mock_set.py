"""
Mocktail Mock Set

Ordered collection of mocks and the selection engine that picks the mock
for an incoming request.

Selection is first-match-wins under priority order: entries are kept sorted
by ascending priority (stable, so equal priorities keep insertion order) and
the first entry whose matchers accept the request and whose usage limit is
not exhausted is selected.

A MockSet is not thread-safe. Callers serving concurrent requests must guard
every call with a single lock (MockServer does this).
"""

import logging
from typing import Callable, Iterable, Iterator, List, Optional

from ..request import Request
from .builder import Then, When
from .mock import Mock

logger = logging.getLogger("mocktail.mock_set")


class MockSet:
    """
    A set of mocks in match-priority order.

    Example:
        mocks = MockSet()
        mocks.mock(lambda when, then: (when.get().path('/users'), then.json([])))
        mocks.mock_with_options(
            priority=1,
            limit=1,
            build_fn=lambda when, then: (
                when.get().path('/users'),
                then.internal_server_error()
            )
        )

        mocks.match_by_request(Request(path='/users')).response.status  # 500
        mocks.match_by_request(Request(path='/users')).response.status  # 200
    """

    def __init__(self):
        self._mocks: List[Mock] = []

    @classmethod
    def from_mocks(cls, mocks: Iterable[Mock]) -> 'MockSet':
        """Create a set by inserting each mock in turn."""
        mock_set = cls()
        mock_set.extend(mocks)
        return mock_set

    def __len__(self) -> int:
        return len(self._mocks)

    def is_empty(self) -> bool:
        return not self._mocks

    def __contains__(self, mock: object) -> bool:
        return mock in self._mocks

    def __getitem__(self, index: int) -> Mock:
        return self._mocks[index]

    def __iter__(self) -> Iterator[Mock]:
        return iter(list(self._mocks))

    def insert(self, mock: Mock) -> bool:
        """
        Insert a mock unless an equal one is already registered.

        Returns:
            True if the mock was inserted, False if it was a duplicate
        """
        if mock in self._mocks:
            logger.debug(f"Ignoring duplicate mock (priority {mock.priority})")
            return False

        self._mocks.append(mock)
        # list.sort is stable: equal priorities keep insertion order
        self._mocks.sort(key=lambda m: m.priority)
        logger.debug(f"Inserted mock with priority {mock.priority} ({len(self._mocks)} total)")
        return True

    def extend(self, mocks: Iterable[Mock]):
        for mock in mocks:
            self.insert(mock)

    def mock(self, build_fn: Callable[[When, Then], object]) -> bool:
        """Build a mock with default options and insert it."""
        return self.insert(Mock.build(build_fn))

    def mock_with_options(
        self,
        priority: int,
        limit: Optional[int],
        build_fn: Callable[[When, Then], object]
    ) -> bool:
        """
        Build a mock with a priority and optional usage limit and insert it.

        Args:
            priority: Match priority (lower matches first)
            limit: Maximum number of matches, or None for unlimited
            build_fn: Callable receiving (when, then) builders

        Returns:
            True if inserted, False if an equal mock already exists
        """
        mock = Mock.build(build_fn).with_priority(priority)
        if limit is not None:
            mock = mock.with_limit(limit)
        return self.insert(mock)

    def find(self, predicate: Callable[[Mock], bool]) -> Optional[Mock]:
        """Return the first mock (in priority order) satisfying predicate."""
        for mock in self._mocks:
            if predicate(mock):
                return mock
        return None

    def match_by_request(self, request: Request) -> Optional[Mock]:
        """
        Select the mock for a request.

        The selected entry's usage is recorded on the stored mock, so a mock
        with limit N is returned exactly N times. The returned value is an
        independent copy: consuming its body leaves the stored mock intact.

        Args:
            request: Incoming request

        Returns:
            Copy of the matched mock, or None if nothing matches
        """
        for mock in self._mocks:
            if mock.matches(request):
                mock.record_call()
                logger.debug(
                    f"Matched {request.method} {request.path} "
                    f"(priority {mock.priority}, remaining {mock.remaining})"
                )
                return mock.copy()

        logger.debug(f"No mock matched {request.method} {request.path}")
        return None

    def remove(self, index: int) -> Mock:
        """
        Remove and return the mock at a position.

        Raises:
            IndexError: If index is out of range
        """
        if not -len(self._mocks) <= index < len(self._mocks):
            raise IndexError(
                f"Mock index {index} out of range for set of {len(self._mocks)} mocks"
            )
        return self._mocks.pop(index)

    def clear(self):
        self._mocks.clear()

    def reset_calls(self):
        """Forget recorded usage so limited mocks can match again."""
        for mock in self._mocks:
            mock.calls = 0

    def into_list(self) -> List[Mock]:
        """Move all mocks out of the set, leaving it empty."""
        mocks, self._mocks = self._mocks, []
        return mocks

    def __repr__(self) -> str:
        return f"MockSet({len(self._mocks)} mocks)"
