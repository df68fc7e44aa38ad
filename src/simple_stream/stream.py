import contextlib
import io
import logging
import os
from collections.abc import Iterator
from typing import IO

logger = logging.getLogger(__name__)


class OutOfBoundError(ValueError):
    def __init__(self, message: str, requested: int, *args) -> None:
        super().__init__(message, *args)
        self.requested = requested


class PositionOutOfBoundError(OutOfBoundError):
    def __init__(self, requested: int, length: int, *args) -> None:
        super().__init__(
            f"Requested position {requested}, but stream length is {length}",
            requested,
            *args,
        )
        self.length = length


class StreamNotInMemoryError(TypeError):
    def __init__(self, stream: IO[bytes], *args) -> None:
        super().__init__(
            f"Stream {type(stream).__name__} is not backed by memory",
            *args,
        )
        self.stream = stream


class FixedBytesIO(io.BytesIO):
    """In-memory stream that may be overwritten in place but never resized."""

    def __init__(self, initial_bytes: bytes = b"") -> None:
        super().__init__(initial_bytes)
        self._size = len(initial_bytes)

    def write(self, data, /) -> int:
        if self.tell() + memoryview(data).nbytes > self._size:
            raise io.UnsupportedOperation("Memory stream is not expandable")
        return super().write(data)

    def writelines(self, lines, /) -> None:
        for line in lines:
            self.write(line)

    def truncate(self, size: int | None = None, /) -> int:
        if (self.tell() if size is None else size) != self._size:
            raise io.UnsupportedOperation("Memory stream is not resizable")
        return self._size


class StreamState:
    """Position and length accounting over an exclusively owned byte source.

    The source must be seekable. Every terminal operation closes it, and
    none of them may be issued twice.
    """

    def __init__(self, stream: IO[bytes]) -> None:
        self._stream = stream

    @property
    def stream(self) -> IO[bytes]:
        return self._stream

    @property
    def in_memory(self) -> bool:
        return isinstance(self._stream, io.BytesIO)

    @property
    def length(self) -> int:
        if self.in_memory:
            with self._stream.getbuffer() as view:
                return view.nbytes
        current = self._stream.tell()
        end = self._stream.seek(0, os.SEEK_END)
        self._stream.seek(current)
        return end

    @property
    def position(self) -> int:
        return self._stream.tell()

    @position.setter
    def position(self, position: int) -> None:
        self.set_position(position)

    @property
    def remaining(self) -> int:
        return self.length - self.position

    def set_position(self, position: int) -> None:
        if not 0 <= position <= (length := self.length):
            raise PositionOutOfBoundError(position, length)
        self._stream.seek(position)
        logger.debug("Stream repositioned to %d", position)

    @contextlib.contextmanager
    def temporary_position(self, position: int) -> Iterator[int]:
        """Seek to `position` for the duration of the block, then restore."""
        original = self.position
        self.set_position(position)
        try:
            yield position
        finally:
            self._stream.seek(original)

    def get_bytes(self) -> bytes:
        if self.in_memory:
            return self._stream.getvalue()
        with self.temporary_position(0):
            return self._stream.read()

    def detach(self) -> IO[bytes]:
        """Give up ownership of the source without closing it."""
        stream = self._stream
        del self._stream
        return stream

    def finish(self) -> None:
        self._stream.close()
        logger.debug("Stream finished")

    def finish_bytes(self) -> bytes:
        if not self.in_memory:
            raise StreamNotInMemoryError(self._stream)
        data = self._stream.getvalue()
        self.finish()
        return data

    def finish_write(
        self, path: str | os.PathLike[str], overwrite: bool = False
    ) -> None:
        # snapshot first, the target may be the source file itself
        data = self.get_bytes()
        # "xb" refuses an existing file before anything is truncated
        with open(path, "wb" if overwrite else "xb") as file:
            try:
                file.write(data)
            finally:
                self.finish()
        logger.debug("Stream written to %s", path)
