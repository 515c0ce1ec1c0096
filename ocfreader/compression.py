"""Selection and dispatch of block decompression"""

import logging
import zlib
from binascii import crc32
from enum import Enum
from struct import unpack
from typing import Optional
from warnings import warn

from .errors import DependencyMissing, FormatError, UnknownCodec

logger = logging.getLogger(__name__)


class Codec(Enum):
    NULL = "null"
    DEFLATE = "deflate"
    SNAPPY = "snappy"
    ZSTANDARD = "zstandard"


def resolve(codec_name: Optional[str]) -> Codec:
    """Return the :class:`Codec` named in the header metadata. A missing name
    means the null codec."""
    if codec_name is None:
        return Codec.NULL
    try:
        return Codec(codec_name)
    except ValueError:
        raise UnknownCodec(codec_name)


def missing_codec_lib(codec, *libraries):
    def missing(data):
        raise DependencyMissing.create(codec, libraries)

    return missing


def null_decompress(data):
    """Blocks in the "null" codec are stored as is."""
    return data


def deflate_decompress(data):
    """Decompress a block in the "deflate" codec."""
    # -15 is the log of the window size; negative indicates "raw" (no
    # zlib headers) decompression.  See zlib.h.
    decompressor = zlib.decompressobj(-15)
    return decompressor.decompress(data) + decompressor.flush()


DECOMPRESSORS = {
    Codec.NULL: null_decompress,
    Codec.DEFLATE: deflate_decompress,
}


def snappy_decompress(data):
    """Decompress a block in the "snappy" codec.

    The last 4 bytes are the big-endian CRC32 of the uncompressed data. When
    the checksum does not match, the uncompressed bytes are decompressed a
    second time, which recovers blocks some writers compressed twice.
    """
    if len(data) < 4:
        raise FormatError(f"snappy block of {len(data)} bytes has no checksum")
    (crc,) = unpack(">I", data[-4:])
    uncompressed = snappy_uncompress(data[:-4])
    if crc32(uncompressed) & 0xFFFFFFFF == crc:
        return uncompressed

    logger.warning(
        "snappy block checksum mismatch, decompressing the block a second time"
    )
    return snappy_uncompress(uncompressed)


try:
    from cramjam import snappy

    def snappy_uncompress(data):
        return bytes(snappy.decompress_raw(data))

except ImportError:
    try:
        import snappy

        snappy_uncompress = snappy.decompress
        warn(
            "Snappy decompression will use `cramjam` in the future. Please make sure you have `cramjam` installed",
            DeprecationWarning,
        )
    except ImportError:
        DECOMPRESSORS[Codec.SNAPPY] = missing_codec_lib("snappy", "cramjam")
    else:
        DECOMPRESSORS[Codec.SNAPPY] = snappy_decompress
else:
    DECOMPRESSORS[Codec.SNAPPY] = snappy_decompress


def zstandard_decompress(data):
    """Decompress a block in the "zstandard" codec."""
    # decompressobj copes with frames that do not record their content size
    return zstd.ZstdDecompressor().decompressobj().decompress(data)


try:
    import zstandard as zstd
except ImportError:
    DECOMPRESSORS[Codec.ZSTANDARD] = missing_codec_lib("zstandard", "zstandard")
else:
    DECOMPRESSORS[Codec.ZSTANDARD] = zstandard_decompress


def decompress(codec: Codec, data: bytes) -> bytes:
    """Decompress a block payload with the given codec."""
    return DECOMPRESSORS[codec](data)
