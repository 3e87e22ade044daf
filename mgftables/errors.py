"""Exception types raised while reading MGF files"""

from typing import Optional


class MGFError(Exception):
    """Base type for all errors raised by :mod:`mgftables`"""


class CannotOpenSource(MGFError, OSError):
    """
    The input source could not be opened for reading.

    Attributes
    ----------
    source : object
        The path or object that was requested
    """

    def __init__(self, source, reason: Optional[Exception] = None):
        self.source = source
        self.reason = reason
        message = f"Cannot open source {source!r}"
        if reason is not None:
            message += f": {reason}"
        super().__init__(message)


class CannotAllocate(MGFError, MemoryError):
    """Reserving storage for the output columns failed"""

    def __init__(self, requested: int, reason: Optional[Exception] = None):
        self.requested = requested
        self.reason = reason
        super().__init__(f"Cannot allocate memory for {requested} entries")


class MGFParseError(MGFError, ValueError):
    """
    A content error in the MGF stream.

    Attributes
    ----------
    line_number : int
        The 1-based number of the offending line
    """

    line_number: int

    def __init__(self, message: str, line_number: int):
        self.line_number = line_number
        super().__init__(f"{message} on line {line_number}")


class MalformedField(MGFParseError):
    """A numeric header field's value is not a number"""

    field_name: str

    def __init__(self, line_number: int, field_name: str):
        self.field_name = field_name
        super().__init__(f"Malformed {field_name} entry", line_number)


class MalformedFragment(MGFParseError):
    """A data line does not hold a parseable m/z and intensity pair"""

    def __init__(self, line_number: int):
        super().__init__("Malformed mz/intensity pair", line_number)


class UndecodableLine(MGFParseError):
    """A line's bytes are not valid in the source's text encoding"""

    encoding: str

    def __init__(self, line_number: int, encoding: str):
        self.encoding = encoding
        super().__init__(f"Line is not valid {encoding} text", line_number)


class UnterminatedSpectrum(MGFParseError):
    """
    The input ended inside a spectrum block.

    :attr:`line_number` points at the ``BEGIN IONS`` line that was never closed.
    """

    def __init__(self, line_number: int):
        super().__init__("Spectrum is missing END IONS, block opened", line_number)


class ParseAborted(MGFError):
    """The host asked the parser to stop"""

    def __init__(self, line_number: int):
        self.line_number = line_number
        super().__init__(f"Parsing aborted after line {line_number}")
