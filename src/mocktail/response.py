"""
Mocktail Response

Canned response returned by a matched mock.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .body import Body


@dataclass
class Response:
    """A mock HTTP response."""

    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    body: Body = field(default_factory=Body.empty)
    message: Optional[str] = None

    def is_error(self) -> bool:
        """True for 4xx and 5xx statuses."""
        return self.status >= 400

    def copy(self) -> 'Response':
        """Return a copy with an independent body."""
        return Response(
            status=self.status,
            headers=dict(self.headers),
            body=self.body.copy(),
            message=self.message
        )
