class FormatError(ValueError):
    """The stream is not a well formed object container file."""


class NotAContainerFile(FormatError):
    pass


class UnknownCodec(FormatError):
    def __init__(self, codec):
        super().__init__(f"Unrecognized codec: {codec}")
        self.codec = codec


class DependencyMissing(ValueError):
    @classmethod
    def create(cls, codec, libraries):
        return cls(
            f"{codec} codec is supported but you need to install one of the "
            + f"following libraries: {libraries}"
        )


class TruncatedStream(EOFError):
    pass


class SchemaResolutionError(Exception):
    pass


class SchemaParseException(Exception):
    pass


class UnknownType(ValueError):
    def __init__(self, name):
        super().__init__(name)
        self.name = name
