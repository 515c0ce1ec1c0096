"""Python code for reading avro object container files"""

import logging
from os import SEEK_CUR
from typing import IO, Iterator, List, Optional, Union

from .compression import Codec, decompress, resolve
from .const import CODEC_KEY, MAGIC, SCHEMA_KEY, SYNC_SIZE
from .datum import DatumReader, RecordDecoder
from .errors import FormatError, UnknownCodec
from .header import read_header
from .io.binary_decoder import BinaryDecoder
from .io.source import ByteSource, BytesSource, open_source
from .schema import load_schema_json
from .types import AvroMessage, Schema

logger = logging.getLogger(__name__)


class ContainerReader(Iterator[AvroMessage]):
    """Iterator over records in an avro object container file.

    The header is read when the reader is created. Blocks are then read one
    at a time as records are requested, so the whole file is never held in
    memory.

    Parameters
    ----------
    source
        :class:`~ocfreader.io.source.ByteSource`, path, bytes or binary file
        object to read from
    record_decoder
        :class:`~ocfreader.datum.RecordDecoder` used for the header metadata
        and every record. Defaults to a :class:`~ocfreader.datum.DatumReader`


    Example::

        from ocfreader import ContainerReader
        with ContainerReader('some-file.avro') as avro_reader:
            for record in avro_reader:
                process_record(record)

    .. attribute:: metadata

        Key-value pairs in the header metadata, values are bytes

    .. attribute:: sync_marker

        The 16 byte token that follows every block

    .. attribute:: codec

        The :class:`~ocfreader.compression.Codec` used when writing

    .. attribute:: writer_schema

        The schema used when writing
    """

    def __init__(
        self,
        source: Union[str, bytes, IO, ByteSource],
        record_decoder: Optional[RecordDecoder] = None,
    ):
        self._source = open_source(source)
        self._decoder = BinaryDecoder(self._source)
        if record_decoder is None:
            record_decoder = DatumReader()
        self.record_decoder = record_decoder

        try:
            self._open()
        except Exception:
            # The file was opened here, nobody else can close it
            if isinstance(source, str):
                self._source.close()
            raise

        self._block_count = 0
        self._block_decoder = self._decoder
        self._blocks_read = 0
        self._done = False

    def _open(self):
        header = read_header(self._source, self._decoder, self.record_decoder)
        self.metadata = header.metadata
        self.sync_marker = header.sync_marker

        codec_name = self.metadata.get(CODEC_KEY)
        if codec_name is not None:
            try:
                codec_name = codec_name.decode()
            except UnicodeDecodeError:
                raise UnknownCodec(codec_name)
        self.codec = resolve(codec_name)

        try:
            schema_bytes = self.metadata[SCHEMA_KEY]
        except KeyError:
            raise FormatError(f"header metadata has no {SCHEMA_KEY!r} entry")
        self.writer_schema = load_schema_json(schema_bytes)
        self.record_decoder.set_writer_schema(self.writer_schema)

        logger.debug("opened container file with codec %s", self.codec.value)

    def __iter__(self):
        return self

    def __next__(self) -> AvroMessage:
        if self._done:
            raise StopIteration

        while self._block_count == 0:
            if self._source.is_eof() or (self._skip_sync() and self._source.is_eof()):
                self._done = True
                raise StopIteration
            self._read_block()

        record = self.record_decoder.read(self._block_decoder)
        self._block_count -= 1
        return record

    def _skip_sync(self):
        """Consume the sync marker if the stream is positioned on one.

        Anything else is taken to be the start of the next block header and
        is left in place.
        """
        proposed_sync_marker = self._source.read(SYNC_SIZE)
        if proposed_sync_marker == self.sync_marker:
            return True

        self._source.seek(-len(proposed_sync_marker), SEEK_CUR)
        # No marker is expected between the header and the first block
        if self._blocks_read:
            logger.warning(
                "sync marker not found after block %d at offset %d, "
                + "reading the next block header in place",
                self._blocks_read,
                self._source.tell(),
            )
        return False

    def _read_block(self):
        offset = self._source.tell()
        block_count = self._decoder.read_long()
        length = self._decoder.read_long()
        if block_count < 0 or length < 0:
            raise FormatError(
                f"invalid block header at offset {offset}: "
                + f"{block_count} records, {length} bytes"
            )
        self._blocks_read += 1
        logger.debug(
            "block %d at offset %d: %d records, %d bytes",
            self._blocks_read,
            offset,
            block_count,
            length,
        )

        if block_count == 0:
            self._decoder.read_fixed(length)
        elif self.codec is Codec.NULL:
            self._block_decoder = self._decoder
        else:
            data = decompress(self.codec, self._decoder.read_fixed(length))
            self._block_decoder = BinaryDecoder(BytesSource(data))
        self._block_count = block_count

    def data(self) -> List[AvroMessage]:
        """Read every remaining record in the file."""
        return list(self)

    def close(self):
        """Close the underlying source."""
        self._source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def reader(
    path_or_buffer: Union[str, bytes, IO, ByteSource],
    reader_schema: Optional[Schema] = None,
) -> ContainerReader:
    """Open a container file for reading with the default record decoder.

    Parameters
    ----------
    path_or_buffer
        Path, bytes or binary file object
    reader_schema
        Reader schema, checked against the writer schema at open time


    Example::

        from ocfreader import reader
        with open('some-file.avro', 'rb') as fo:
            for record in reader(fo):
                process_record(record)
    """
    return ContainerReader(path_or_buffer, DatumReader(reader_schema))


def is_container(path_or_buffer: Union[str, bytes, IO]) -> bool:
    """Return True if path (or buffer) starts with the container file magic.

    Parameters
    ----------
    path_or_buffer
        Path to file, bytes or binary file object
    """
    if isinstance(path_or_buffer, (bytes, bytearray)):
        return bytes(path_or_buffer[: len(MAGIC)]) == MAGIC

    fp: IO
    if isinstance(path_or_buffer, str):
        fp = open(path_or_buffer, "rb")
        close = True
    else:
        fp = path_or_buffer
        close = False

    try:
        header = fp.read(len(MAGIC))
        return header == MAGIC
    finally:
        if close:
            fp.close()
