"""Streaming reader for avro object container files.

Example usage::

    import ocfreader

    with ocfreader.reader('some-file.avro') as avro_reader:
        schema = avro_reader.writer_schema

        for record in avro_reader:
            process_record(record)

A custom :class:`~ocfreader.datum.RecordDecoder` can be plugged in to decode
records differently::

    from ocfreader import ContainerReader

    with ContainerReader('some-file.avro', MyRecordDecoder()) as avro_reader:
        records = avro_reader.data()
"""

__version_info__ = (0, 3, 0)
__version__ = "%s.%s.%s" % __version_info__


import ocfreader.compression
import ocfreader.datum
import ocfreader.errors
import ocfreader.container

ContainerReader = ocfreader.container.ContainerReader
reader = ocfreader.container.reader
is_container = ocfreader.container.is_container
RecordDecoder = ocfreader.datum.RecordDecoder
DatumReader = ocfreader.datum.DatumReader
Codec = ocfreader.compression.Codec
FormatError = ocfreader.errors.FormatError
NotAContainerFile = ocfreader.errors.NotAContainerFile
UnknownCodec = ocfreader.errors.UnknownCodec
DependencyMissing = ocfreader.errors.DependencyMissing
TruncatedStream = ocfreader.errors.TruncatedStream

__all__ = [n for n in locals().keys() if not n.startswith("_")] + ["__version__"]
