# byte_source.py
import io
import struct

from .errors import TruncatedData


class ByteSource:
    """Sequential and random-access reads over an immutable byte sequence."""

    def __init__(self, stream):
        self.stream = stream

    @classmethod
    def wrap(cls, source):
        if isinstance(source, cls):
            return source
        if isinstance(source, (bytes, bytearray, memoryview)):
            return cls(io.BytesIO(bytes(source)))
        return cls(source)

    def tell(self):
        return self.stream.tell()

    def seek(self, pos):
        self.stream.seek(pos)

    def read_exact(self, size):
        position = self.stream.tell()
        try:
            data = self.stream.read(size)
        except OSError as e:
            raise TruncatedData(f"Failed reading {size} bytes at offset {position}: {e}") from e
        if len(data) != size:
            raise TruncatedData(
                f"Expected {size} bytes at offset {position}, got {len(data)}"
            )
        return data

    def read_struct(self, fmt):
        return struct.unpack(fmt, self.read_exact(struct.calcsize(fmt)))

    def read_uint8(self):
        return self.read_exact(1)[0]

    def read_int32(self):
        return struct.unpack('<i', self.read_exact(4))[0]

    def read_uint32(self):
        return struct.unpack('<I', self.read_exact(4))[0]


class BitReader:
    """Reads bit fields from a byte buffer, least significant bit first."""

    def __init__(self, data, offset=0):
        self.data = data
        self.position = offset
        self.value = 0
        self.bits = 0

    def read(self, count):
        while self.bits < count:
            self.value |= self.data[self.position] << self.bits
            self.position += 1
            self.bits += 8
        result = self.value & ((1 << count) - 1)
        self.value >>= count
        self.bits -= count
        return result
