from enum import IntEnum


class VarintLengthType(IntEnum):
    """Fixed widths, in bytes, a varint may occupy."""

    INT8 = 1
    INT16 = 2
    INT32 = 4
    INT64 = 8
