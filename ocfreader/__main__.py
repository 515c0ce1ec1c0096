import json
import logging
import sys

import ocfreader
from ocfreader.compression import Codec
from ocfreader.const import SCHEMA_KEY
from ocfreader.io.source import BytesSource


class CleanJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, bytes):
            return obj.decode("iso-8859-1")
        else:
            return json.JSONEncoder.default(self, obj)


def main(argv=None):
    from argparse import ArgumentParser

    argv = argv or sys.argv

    parser = ArgumentParser(
        description="iter over avro container file, emit records as JSON"
    )
    parser.add_argument("file", help="file(s) to parse, use `-' for stdin", nargs="*")
    parser.add_argument(
        "--schema",
        help="dump schema instead of records",
        action="store_true",
        default=False,
    )
    parser.add_argument(
        "--metadata",
        help="dump metadata instead of records",
        action="store_true",
        default=False,
    )
    parser.add_argument(
        "--codecs", help="print supported codecs", action="store_true", default=False
    )
    parser.add_argument(
        "--version", action="version", version=f"ocfreader {ocfreader.__version__}"
    )
    parser.add_argument(
        "-p", "--pretty", help="pretty print json", action="store_true", default=False
    )
    parser.add_argument(
        "-v", "--verbose", help="log block reads", action="store_true", default=False
    )
    args = parser.parse_args(argv[1:])

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    if args.codecs:
        print("\n".join(sorted(codec.value for codec in Codec)))
        sys.exit(0)

    files = args.file or ["-"]
    for filename in files:
        if filename == "-":
            # Resync seeks backwards, which stdin cannot do
            source = BytesSource(sys.stdin.buffer.read())
        else:
            source = filename

        with ocfreader.ContainerReader(source) as reader:
            if args.schema:
                json.dump(reader.writer_schema, sys.stdout, indent=4)
                sys.stdout.write("\n")
                continue

            elif args.metadata:
                metadata = {
                    key: value
                    for key, value in reader.metadata.items()
                    if key != SCHEMA_KEY
                }
                json.dump(metadata, sys.stdout, indent=4, cls=CleanJSONEncoder)
                sys.stdout.write("\n")
                continue

            indent = 4 if args.pretty else None
            for record in reader:
                json.dump(record, sys.stdout, indent=indent, cls=CleanJSONEncoder)
                sys.stdout.write("\n")
                sys.stdout.flush()


if __name__ == "__main__":
    main()
