from .binary_decoder import BinaryDecoder
from .source import ByteSource, BytesSource, FileSource, open_source

__all__ = ["BinaryDecoder", "ByteSource", "BytesSource", "FileSource", "open_source"]
