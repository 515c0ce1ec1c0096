from struct import unpack

from ..errors import FormatError, TruncatedStream


class BinaryDecoder:
    """Decoder for the avro binary format.

    NOTE: All attributes and methods on this class should be considered
    private.

    Parameters
    ----------
    source: ByteSource
        Input stream

    """

    def __init__(self, source):
        self.source = source

    def _read(self, size):
        data = self.source.read(size)
        if len(data) < size:
            raise TruncatedStream(
                f"expected {size} bytes but only {len(data)} were available"
            )
        return data

    def read_null(self):
        """null is written as zero bytes."""
        return None

    def read_boolean(self):
        """A boolean is written as a single byte whose value is either 0
        (false) or 1 (true).
        """

        # technically 0x01 == true and 0x00 == false, but many languages will
        # cast anything other than 0 to True and only 0 to False
        return self._read(1)[0] != 0

    def read_long(self):
        """int and long values are written using variable-length, zig-zag
        coding."""
        b = self._read(1)[0]
        n = b & 0x7F
        shift = 7

        while (b & 0x80) != 0:
            b = self._read(1)[0]
            n |= (b & 0x7F) << shift
            shift += 7

        return (n >> 1) ^ -(n & 1)

    read_int = read_long

    def read_float(self):
        """A float is written as 4 bytes, little-endian IEEE 754."""
        return unpack("<f", self._read(4))[0]

    def read_double(self):
        """A double is written as 8 bytes, little-endian IEEE 754."""
        return unpack("<d", self._read(8))[0]

    def read_bytes(self):
        """Bytes are encoded as a long followed by that many bytes of data."""
        size = self.read_long()
        if size < 0:
            raise FormatError(f"negative bytes length {size}")
        return self._read(size)

    def read_utf8(self):
        """A string is encoded as a long followed by that many bytes of UTF-8
        encoded character data.
        """
        return self.read_bytes().decode()

    def read_fixed(self, size):
        """Fixed instances are encoded using the number of bytes declared in the
        schema."""
        return self._read(size)

    def read_enum(self):
        """An enum is encoded by a int, representing the zero-based position of the
        symbol in the schema.
        """
        return self.read_long()

    def read_index(self):
        """A union is encoded by first writing a long value indicating the
        zero-based position within the union of the schema of its value.
        """
        return self.read_long()

    def iter_blocks(self):
        """Arrays and maps are encoded as a series of blocks. Each block
        consists of a long count value, followed by that many items. A block
        with count zero indicates the end.

        If a block's count is negative, then the count is followed immediately
        by a long block size, indicating the number of bytes in the block.
        The actual count in this case is the absolute value of the count
        written.
        """
        block_count = self.read_long()
        while block_count != 0:
            if block_count < 0:
                block_count = -block_count
                # Read block size, unused
                self.read_long()

            for _ in range(block_count):
                yield
            block_count = self.read_long()
