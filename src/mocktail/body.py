"""
Mocktail Body

Chunked message body for mock requests and responses.

A body is an ordered queue of byte chunks. Chunk boundaries matter when the
body is streamed (one frame per chunk) but never for comparison: two bodies
are equal when their concatenated content is equal.

Features:
- Raw bytes, JSON, newline-delimited JSON and protobuf constructors
- Destructive consumption chunk-by-chunk or all at once
- Non-destructive iteration, equality and ordering
"""

import json
from collections import deque
from functools import total_ordering
from typing import Any, Deque, Iterable, Iterator, Optional, Union

BytesLike = Union[bytes, bytearray, memoryview, str]


class BodyEncodingError(ValueError):
    """Raised when a value cannot be encoded into a body."""


def _to_bytes(data: BytesLike) -> bytes:
    """Coerce a bytes-like value (or UTF-8 text) into immutable bytes."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode('utf-8')
    raise TypeError(f"Cannot convert {type(data).__name__} to bytes")


def _encode_json(value: Any) -> bytes:
    try:
        return json.dumps(value, separators=(',', ':')).encode('utf-8')
    except (TypeError, ValueError) as e:
        raise BodyEncodingError(f"Value is not JSON serializable: {e}") from e


def _encode_protobuf(message: Any) -> bytes:
    serialize = getattr(message, 'SerializeToString', None)
    if serialize is None:
        raise BodyEncodingError(
            f"Expected a protobuf message, got {type(message).__name__}"
        )
    try:
        return serialize()
    except Exception as e:
        # protobuf raises EncodeError for messages with missing required fields
        raise BodyEncodingError(f"Failed to encode protobuf message: {e}") from e


@total_ordering
class Body:
    """
    The body of a mock request or response.

    Example:
        body = Body.from_json_lines([{'id': 1}, {'id': 2}])
        len(body)            # 18
        body.next_chunk()    # b'{"id":1}\\n'
        body.drain_all()     # b'{"id":2}\\n'
        body.is_empty()      # True
    """

    __slots__ = ('_chunks',)

    def __init__(self, chunks: Optional[Iterable[BytesLike]] = None):
        self._chunks: Deque[bytes] = deque()
        if isinstance(chunks, (bytes, bytearray, memoryview, str)):
            raise TypeError(
                f"Body() takes an iterable of chunks, got {type(chunks).__name__}; "
                f"use Body.from_bytes() for a single buffer"
            )
        if chunks is not None:
            for chunk in chunks:
                data = _to_bytes(chunk)
                # Empty chunks would produce empty frames
                if data:
                    self._chunks.append(data)

    @classmethod
    def empty(cls) -> 'Body':
        """Create an empty body."""
        return cls()

    @classmethod
    def from_bytes(cls, data: BytesLike) -> 'Body':
        """Create a single-chunk body from raw bytes (or UTF-8 text)."""
        return cls([data])

    @classmethod
    def from_chunks(cls, items: Iterable[BytesLike]) -> 'Body':
        """Create a streaming body with one chunk per item."""
        return cls(items)

    @classmethod
    def from_json(cls, value: Any) -> 'Body':
        """
        Create a single-chunk JSON body.

        Raises:
            BodyEncodingError: If value is not JSON serializable
        """
        return cls([_encode_json(value)])

    @classmethod
    def from_json_lines(cls, values: Iterable[Any]) -> 'Body':
        """
        Create a newline-delimited JSON body, one record per chunk.

        Every chunk is the compact JSON encoding followed by a single b'\\n'.

        Raises:
            BodyEncodingError: If any value is not JSON serializable
        """
        return cls([_encode_json(value) + b'\n' for value in values])

    @classmethod
    def from_protobuf(cls, message: Any) -> 'Body':
        """
        Create a single-chunk body from a protobuf message.

        Raises:
            BodyEncodingError: If the message cannot be serialized
        """
        return cls([_encode_protobuf(message)])

    @classmethod
    def from_protobuf_stream(cls, messages: Iterable[Any]) -> 'Body':
        """
        Create a streaming body with one protobuf message per chunk.

        No delimiter is added between messages; framing is up to the caller.

        Raises:
            BodyEncodingError: If any message cannot be serialized
        """
        return cls([_encode_protobuf(message) for message in messages])

    def is_empty(self) -> bool:
        """Return True if no bytes remain."""
        return len(self) == 0

    def __len__(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)

    def chunk_count(self) -> int:
        """Number of remaining chunks."""
        return len(self._chunks)

    def next_chunk(self) -> Optional[bytes]:
        """
        Remove and return the oldest remaining chunk.

        Returns:
            The chunk, or None once the body is exhausted
        """
        if self._chunks:
            return self._chunks.popleft()
        return None

    def stream(self) -> Iterator[bytes]:
        """
        Consume the body as a stream of frames.

        Each frame is exactly one stored chunk, in order. The generator ends
        as soon as the queue is empty.
        """
        while True:
            chunk = self.next_chunk()
            if chunk is None:
                return
            yield chunk

    def drain_all(self) -> bytes:
        """
        Remove and return all remaining bytes as one buffer.

        Calling it again returns b''.
        """
        data = b''.join(self._chunks)
        self._chunks.clear()
        return data

    def to_bytes(self) -> bytes:
        """Return the concatenated content without consuming it."""
        return b''.join(self._chunks)

    def __iter__(self) -> Iterator[bytes]:
        # Iterate over a snapshot so consumption during iteration is safe
        return iter(tuple(self._chunks))

    def copy(self) -> 'Body':
        """Return an independent body with the same chunks."""
        clone = Body()
        clone._chunks = deque(self._chunks)
        return clone

    def __copy__(self) -> 'Body':
        return self.copy()

    def __deepcopy__(self, memo) -> 'Body':
        # Chunks are immutable bytes, a new queue is enough
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Body):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __lt__(self, other: 'Body') -> bool:
        if not isinstance(other, Body):
            return NotImplemented
        return self.to_bytes() < other.to_bytes()

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Body(chunks={self.chunk_count()}, length={len(self)})"
