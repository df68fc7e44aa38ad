from .enums import VarintLengthType as VarintLengthType
from .reader import ReadOutOfBoundError as ReadOutOfBoundError
from .reader import SimpleReader as SimpleReader
from .stream import FixedBytesIO as FixedBytesIO
from .stream import OutOfBoundError as OutOfBoundError
from .stream import PositionOutOfBoundError as PositionOutOfBoundError
from .stream import StreamNotInMemoryError as StreamNotInMemoryError
from .stream import StreamState as StreamState
