class ReadError(Exception):
    pass


class WriteError(Exception):
    pass


class GrammarError(ReadError):
    """Input did not match the expected grammar at `position`.

    `lineno` is 1-based, `span` holds the offending bytes up to the end of
    the line.
    """

    def __init__(self, message, position=None, lineno=None, span=b""):
        self.message = message
        self.position = position
        self.lineno = lineno
        self.span = span
        super().__init__(message)

    def __str__(self):
        if self.lineno is None:
            return self.message
        return f"{self.message} (line {self.lineno}: {self.span!r})"

    @classmethod
    def from_error(cls, err, message=None):
        return cls(
            message if message is not None else err.message,
            err.position,
            err.lineno,
            err.span,
        )


class HeaderError(GrammarError):
    pass


class BigEndianError(HeaderError):
    pass


class CorruptEndiannessError(HeaderError):
    pass


class SectionError(GrammarError):
    pass


class UnsupportedDialectError(ReadError):
    def __init__(self, header):
        self.header = header
        super().__init__(
            f"reading MSH {header.version.value} {header.storage.value} bodies "
            "is not supported"
        )
