import logging
import os
from collections.abc import Iterable
from typing import IO, Literal, Self

from simple_stream.enums import VarintLengthType
from simple_stream.stream import (
    FixedBytesIO,
    OutOfBoundError,
    StreamNotInMemoryError,
    StreamState,
)

logger = logging.getLogger(__name__)


class ReadOutOfBoundError(OutOfBoundError):
    def __init__(self, requested: int, remaining: int, *args) -> None:
        super().__init__(
            f"Cannot read {requested} bytes with {remaining} bytes left",
            requested,
            *args,
        )
        self.remaining = remaining


class SimpleReader:
    """Reader over an owned, seekable byte source.

    Decoders consult `big_endian` and `varint_length` before every
    primitive they decode. Build one through the `from_*` constructors.
    """

    def __init__(
        self,
        state: StreamState,
        big_endian: bool = False,
        varint_type: VarintLengthType = VarintLengthType.INT32,
    ) -> None:
        self._state = state
        self.big_endian = big_endian
        self.varint_type = varint_type
        self.is_disposed = False

    @classmethod
    def from_reader(cls, reader: "SimpleReader", big_endian: bool = False) -> Self:
        """Take over the source of another reader, which is left disposed."""
        stream = reader._state.detach()
        reader.is_disposed = True
        logger.debug("Reader adopted stream %r", stream)
        return cls(StreamState(stream), big_endian)

    @classmethod
    def from_stream(cls, stream: IO[bytes], big_endian: bool = False) -> Self:
        return cls(StreamState(stream), big_endian)

    @classmethod
    def from_bytes(cls, data: bytes, big_endian: bool = False) -> Self:
        return cls(StreamState(FixedBytesIO(bytes(data))), big_endian)

    @classmethod
    def from_list(cls, data: Iterable[int], big_endian: bool = False) -> Self:
        return cls(StreamState(FixedBytesIO(bytes(data))), big_endian)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str], big_endian: bool = False) -> Self:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"No file found at {os.fspath(path)!r}")
        logger.debug("Opening %s", path)
        return cls(StreamState(open(path, "r+b")), big_endian)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args) -> None:
        self.dispose()

    def __repr__(self) -> str:
        if self.is_disposed:
            return f"<{type(self).__name__} disposed>"
        return (
            f"<{type(self).__name__} position={self.position} length={self.length}"
            f" byteorder={self.byteorder} varint_type={self.varint_type.name}>"
        )

    @property
    def stream(self) -> IO[bytes]:
        return self._state.stream

    @property
    def length(self) -> int:
        return self._state.length

    @property
    def position(self) -> int:
        return self._state.position

    @position.setter
    def position(self, position: int) -> None:
        self.set_position(position)

    @property
    def remaining(self) -> int:
        return self._state.remaining

    @property
    def byteorder(self) -> Literal["big", "little"]:
        return "big" if self.big_endian else "little"

    @property
    def varint_type(self) -> VarintLengthType:
        return self._varint_type

    @varint_type.setter
    def varint_type(self, varint_type: int) -> None:
        self._varint_type = VarintLengthType(varint_type)

    @property
    def varint_length(self) -> int:
        return int(self._varint_type)

    def set_position(self, position: int) -> None:
        self._state.set_position(position)

    def read(self, length: int) -> bytes:
        if not 0 <= length <= (remaining := self.remaining):
            raise ReadOutOfBoundError(length, remaining)
        return self.stream.read(length)

    def read_all(self) -> bytes:
        return self.stream.read()

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_int(self, size: int, signed: bool = False) -> int:
        return int.from_bytes(self.read(size), self.byteorder, signed=signed)

    def read_uint16(self) -> int:
        return self.read_int(2)

    def read_uint32(self) -> int:
        return self.read_int(4)

    def read_uint64(self) -> int:
        return self.read_int(8)

    def read_int16(self) -> int:
        return self.read_int(2, signed=True)

    def read_int32(self) -> int:
        return self.read_int(4, signed=True)

    def read_int64(self) -> int:
        return self.read_int(8, signed=True)

    def get_bytes(self) -> bytes:
        return self._state.get_bytes()

    def finish(self) -> None:
        self.dispose()

    def finish_bytes(self) -> bytes:
        if not self._state.in_memory:
            raise StreamNotInMemoryError(self.stream)
        data = self._state.get_bytes()
        self.dispose()
        return data

    def finish_write(
        self, path: str | os.PathLike[str], overwrite: bool = False
    ) -> None:
        try:
            self._state.finish_write(path, overwrite)
        finally:
            # the source is closed once the target could be opened
            if self.stream.closed:
                self.is_disposed = True

    def dispose(self) -> None:
        if self.is_disposed:
            return
        self._state.finish()
        self.is_disposed = True
        logger.debug("Reader disposed")
