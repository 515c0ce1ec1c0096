from abc import ABC, abstractmethod
from io import BytesIO
from os import SEEK_CUR, SEEK_SET
from typing import IO, Union


class ByteSource(ABC):
    """Seekable stream of bytes a container file is read from."""

    @abstractmethod
    def read(self, n: int) -> bytes:
        pass

    @abstractmethod
    def seek(self, offset: int, whence: int = SEEK_SET) -> int:
        pass

    @abstractmethod
    def tell(self) -> int:
        pass

    @abstractmethod
    def is_eof(self) -> bool:
        pass

    @abstractmethod
    def close(self):
        pass


class FileSource(ByteSource):
    """:class:`ByteSource` over a binary file object.

    Parameters
    ----------
    fo
        Seekable file-like object opened in binary mode
    """

    def __init__(self, fo: IO):
        self.fo = fo

    def read(self, n):
        return self.fo.read(n)

    def seek(self, offset, whence=SEEK_SET):
        return self.fo.seek(offset, whence)

    def tell(self):
        return self.fo.tell()

    def is_eof(self):
        # File objects have no end-of-file flag, so peek one byte
        if self.fo.read(1):
            self.fo.seek(-1, SEEK_CUR)
            return False
        return True

    def close(self):
        self.fo.close()


class BytesSource(FileSource):
    """:class:`ByteSource` over bytes held in memory."""

    def __init__(self, data: bytes):
        super().__init__(BytesIO(data))
        self._size = len(data)

    def is_eof(self):
        return self.fo.tell() >= self._size


def open_source(path_or_buffer: Union[str, bytes, IO, ByteSource]) -> ByteSource:
    """Return a :class:`ByteSource` for a path, a bytes object, a binary file
    object or an existing source."""
    if isinstance(path_or_buffer, ByteSource):
        return path_or_buffer
    if isinstance(path_or_buffer, str):
        return FileSource(open(path_or_buffer, "rb"))
    if isinstance(path_or_buffer, (bytes, bytearray, memoryview)):
        return BytesSource(bytes(path_or_buffer))
    return FileSource(path_or_buffer)
