import logging
from os import SEEK_SET
from typing import NamedTuple

from .const import MAGIC, MAGIC_SIZE, METADATA_SCHEMA, SYNC_SIZE
from .errors import NotAContainerFile, TruncatedStream
from .types import Metadata

logger = logging.getLogger(__name__)


class Header(NamedTuple):
    metadata: Metadata
    sync_marker: bytes


def read_header(source, decoder, record_decoder) -> Header:
    """Read the header of a container file from the start of `source`.

    Parameters
    ----------
    source: ByteSource
        Input stream, rewound to offset 0
    decoder: BinaryDecoder
        Decoder over `source`
    record_decoder: RecordDecoder
        Used to decode the metadata map
    """
    source.seek(0, SEEK_SET)

    magic = source.read(MAGIC_SIZE)
    if len(magic) < MAGIC_SIZE:
        raise NotAContainerFile(
            "Not an Avro data file: shorter than the Avro magic block"
        )
    if magic != MAGIC:
        raise NotAContainerFile(
            f"Not an Avro data file: {magic!r} does not match {MAGIC!r}"
        )

    metadata = record_decoder.read_data(METADATA_SCHEMA, METADATA_SCHEMA, decoder)

    sync_marker = source.read(SYNC_SIZE)
    if len(sync_marker) < SYNC_SIZE:
        raise TruncatedStream("cannot read sync marker - header is truncated")

    logger.debug("read header with metadata keys %s", sorted(metadata))
    return Header(metadata, sync_marker)
