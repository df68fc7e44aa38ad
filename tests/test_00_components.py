import io
from io import BytesIO

import pytest
from simple_stream.enums import VarintLengthType
from simple_stream.stream import (
    FixedBytesIO,
    PositionOutOfBoundError,
    StreamNotInMemoryError,
    StreamState,
)


def test_varint_length_type():
    assert [int(varint) for varint in VarintLengthType] == [1, 2, 4, 8]
    assert VarintLengthType(4) is VarintLengthType.INT32

    with pytest.raises(ValueError):
        VarintLengthType(3)


def test_memory_state():
    state = StreamState(BytesIO(b"\x01\x02\x03\x04"))
    assert state.in_memory
    assert state.length == 4
    assert state.position == 0
    assert state.remaining == 4

    for position in range(state.length + 1):
        state.set_position(position)
        assert state.position == position
        assert state.remaining == state.length - position

    state.position = 1
    assert state.get_bytes() == b"\x01\x02\x03\x04"
    assert state.position == 1
    assert state.length == 4

    assert state.finish_bytes() == b"\x01\x02\x03\x04"
    assert state.stream.closed


def test_position_out_of_bound():
    state = StreamState(BytesIO(b"1234"))

    with pytest.raises(PositionOutOfBoundError) as exc_info:
        state.set_position(5)
    assert exc_info.value.requested == 5
    assert exc_info.value.length == 4

    with pytest.raises(ValueError):
        state.set_position(-1)
    assert state.position == 0


def test_temporary_position():
    state = StreamState(BytesIO(b"1234567890"))
    state.set_position(3)
    with state.temporary_position(7) as position:
        assert position == 7
        assert state.stream.read(2) == b"89"
    assert state.position == 3


def test_file_state(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"1234567890")

    state = StreamState(path.open("r+b"))
    assert not state.in_memory
    state.set_position(4)
    assert state.length == 10
    assert state.remaining == 6
    assert state.get_bytes() == b"1234567890"
    assert state.position == 4

    with pytest.raises(StreamNotInMemoryError):
        state.finish_bytes()
    assert not state.stream.closed

    state.finish()
    assert state.stream.closed


def test_finish_write(tmp_path):
    target = tmp_path / "target.bin"
    target.write_bytes(b"original")

    state = StreamState(BytesIO(b"replacement"))
    with pytest.raises(FileExistsError):
        state.finish_write(target)
    assert target.read_bytes() == b"original"
    assert not state.stream.closed

    state.finish_write(target, overwrite=True)
    assert target.read_bytes() == b"replacement"
    assert state.stream.closed


def test_finish_write_new_file(tmp_path):
    target = tmp_path / "new.bin"
    state = StreamState(BytesIO(b"12345"))
    state.set_position(3)
    state.finish_write(target)
    assert target.read_bytes() == b"12345"


def test_detach():
    stream = BytesIO(b"1234")
    state = StreamState(stream)
    assert state.detach() is stream
    assert not stream.closed


def test_finish_write_onto_source(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"1234567890")

    state = StreamState(path.open("r+b"))
    state.finish_write(path, overwrite=True)
    assert path.read_bytes() == b"1234567890"


def test_fixed_bytes_io():
    stream = FixedBytesIO(b"1234")
    stream.seek(1)
    assert stream.write(b"ab") == 2
    assert stream.getvalue() == b"1ab4"

    with pytest.raises(io.UnsupportedOperation):
        stream.write(b"xyz")
    with pytest.raises(io.UnsupportedOperation):
        stream.writelines([b"c", b"de"])
    with pytest.raises(io.UnsupportedOperation):
        stream.truncate(2)
    assert stream.truncate(4) == 4
    assert stream.getvalue() == b"1abc"

    state = StreamState(stream)
    assert state.in_memory
    assert state.length == 4
