"""
Mocktail Mock

A registered (matchers, response, priority, usage limit) entry.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple

from ..request import Request
from ..response import Response
from .builder import Then, When
from .matcher import Matcher

DEFAULT_PRIORITY = 5
MAX_PRIORITY = 255


def _validate_priority(priority: int) -> int:
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise ValueError(f"Priority must be an integer, got {priority!r}")
    if not 0 <= priority <= MAX_PRIORITY:
        raise ValueError(f"Priority must be between 0 and {MAX_PRIORITY}, got {priority}")
    return priority


def _validate_limit(limit: Optional[int]) -> Optional[int]:
    if limit is None:
        return None
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValueError(f"Limit must be a non-negative integer or None, got {limit!r}")
    return limit


@dataclass(eq=False)
class Mock:
    """
    A mock: request matchers plus the response to return.

    Lower priority values are matched first. A mock with a limit can be
    selected at most `limit` times; after that it never matches again.

    Equality covers matchers, response, priority and limit. The number of
    calls already served is not part of it.

    Example:
        mock = Mock.build(
            lambda when, then: (when.get().path('/health'), then.text('ok'))
        ).with_limit(1)
    """

    matchers: Tuple[Matcher, ...] = ()
    response: Response = field(default_factory=Response)
    priority: int = DEFAULT_PRIORITY
    limit: Optional[int] = None
    calls: int = 0

    def __post_init__(self):
        self.matchers = tuple(self.matchers)
        _validate_priority(self.priority)
        _validate_limit(self.limit)

    @classmethod
    def from_specs(cls, when: When, then: Then) -> 'Mock':
        """Combine populated builders into a mock."""
        return cls(matchers=when.matchers(), response=then.response())

    @classmethod
    def build(cls, build_fn: Callable[[When, Then], object]) -> 'Mock':
        """
        Create a mock by letting build_fn populate fresh builders.

        Args:
            build_fn: Callable receiving (when, then); its return value is ignored

        Returns:
            Mock with default priority and no limit
        """
        when, then = When(), Then()
        build_fn(when, then)
        return cls.from_specs(when, then)

    def with_priority(self, priority: int) -> 'Mock':
        return replace(self, priority=priority, response=self.response.copy())

    def with_limit(self, limit: Optional[int]) -> 'Mock':
        return replace(self, limit=limit, response=self.response.copy())

    @property
    def remaining(self) -> Optional[int]:
        """Uses left before the mock is exhausted, or None if unlimited."""
        if self.limit is None:
            return None
        return max(self.limit - self.calls, 0)

    def is_exhausted(self) -> bool:
        return self.remaining == 0

    def matches(self, request: Request) -> bool:
        """True if the mock is not exhausted and every matcher accepts the request."""
        if self.is_exhausted():
            return False
        return all(matcher.matches(request) for matcher in self.matchers)

    def record_call(self):
        self.calls += 1

    def copy(self) -> 'Mock':
        """
        Copy with an independent response body.

        Matchers are immutable and shared with the original, so user
        predicates are never copied.
        """
        return replace(self, response=self.response.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mock):
            return NotImplemented
        return (
            self.matchers == other.matchers
            and self.response == other.response
            and self.priority == other.priority
            and self.limit == other.limit
        )

    __hash__ = None
