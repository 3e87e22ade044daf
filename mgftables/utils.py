"""Helper module for I/O operations"""

import os
import io
import gzip
import logging

from collections import deque
from typing import Iterable, Optional, Tuple, Union

from .errors import CannotOpenSource, UndecodableLine

DEFAULT_BUFFER_SIZE = int(2e6)
GZIP_MAGIC = b"\037\213"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


SourceType = Union[str, os.PathLike, io.IOBase, Iterable[str]]


class LineSource(object):
    """
    Supply the lines of a stream or iterator one at a time with their line endings
    removed.

    The most recently read line can be pushed back, so that a state machine can look
    at a line, decide it belongs to another state, and read it again there.

    Attributes
    ----------
    stream : :class:`io.IOBase` or :class:`Iterator`
        The object lines are pulled from
    line_number : int
        The 1-based number of the most recently returned line, 0 before the first read
    bytes_read : int
        The number of bytes (or characters, for text streams) consumed so far
    last_line : str
        The most recently returned line
    """

    pushed: deque
    line_number: int
    bytes_read: int
    last_line: Optional[str]
    encoding: str
    _stream_is_file_like: bool
    _owns_stream: bool

    def __init__(self, stream, encoding: str = "utf8", owns_stream: bool = False):
        self._stream_is_file_like = hasattr(stream, "readline")
        if not self._stream_is_file_like:
            stream = iter(stream)
        self.stream = stream
        self.encoding = encoding
        self.pushed = deque()
        self.line_number = 0
        self.bytes_read = 0
        self.last_line = None
        self._owns_stream = owns_stream

    @classmethod
    def from_source(cls, source: SourceType, encoding: str = "utf8") -> "LineSource":
        """
        Build a :class:`LineSource` for a path, a file-like object or an iterable of lines.

        Paths and binary streams are routed through :func:`open_stream`, which handles
        gzip compression, and their lines are decoded one at a time with ``encoding``.
        Text streams and plain iterables are read as they are.

        Raises
        ------
        :class:`~.CannotOpenSource`
            If a path cannot be opened.
        """
        if isinstance(source, (str, os.PathLike)):
            return cls(open_stream(source, "rb", closing=True), encoding=encoding, owns_stream=True)
        if isinstance(source, io.TextIOBase):
            return cls(source, encoding=encoding)
        if hasattr(source, "read"):
            return cls(open_stream(source, "rb"), encoding=encoding, owns_stream=True)
        try:
            return cls(source, encoding=encoding)
        except TypeError as err:
            raise CannotOpenSource(source, err) from err

    def _read_raw(self) -> Optional[Union[str, bytes]]:
        if self._stream_is_file_like:
            line = self.stream.readline()
            if not line:
                return None
            return line
        return next(self.stream, None)

    def next_line(self) -> Tuple[str, bool]:
        """
        Read the next line.

        Returns
        -------
        line : str
            The line text without its trailing ``\\n`` or ``\\r\\n``
        has_more : bool
            :const:`False` once the input is exhausted, in which case ``line`` is empty

        Raises
        ------
        :class:`~.UndecodableLine`
            If the line is not valid text in :attr:`encoding`
        """
        if self.pushed:
            line = self.pushed.popleft()
            self.last_line = line
            return line, True
        try:
            line = self._read_raw()
        except UnicodeDecodeError as err:
            # a caller's text stream decodes ahead, so this line number may be early
            raise UndecodableLine(self.line_number + 1, err.encoding) from err
        if line is None:
            return "", False
        self.bytes_read += len(line)
        self.line_number += 1
        if isinstance(line, bytes):
            try:
                line = line.decode(self.encoding)
            except UnicodeDecodeError as err:
                raise UndecodableLine(self.line_number, self.encoding) from err
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        self.last_line = line
        return line, True

    def push_line(self, line: Optional[str] = None):
        """Put ``line``, or the last line read, back at the front of the source"""
        if line is None:
            line = self.last_line
            self.last_line = None
        if line is None:
            raise ValueError(
                "Cannot push empty value after the backtrack line is consumed"
            )
        self.pushed.appendleft(line)

    def close(self):
        if self._owns_stream:
            self.stream.close()

    def __iter__(self):
        while True:
            line, has_more = self.next_line()
            if not has_more:
                break
            yield line

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def test_gzipped(f) -> bool:
    """
    Checks the first two bytes of the
    passed file for gzip magic numbers

    Parameters
    ----------
    f : file-like or path-like
        The file to test

    Returns
    -------
    bool
    """
    if isinstance(f, (str, os.PathLike)):
        with io.open(f, "rb") as handle:
            return handle.read(2) == GZIP_MAGIC
    if hasattr(f, "peek"):
        return f.peek(2)[:2] == GZIP_MAGIC
    try:
        current = f.tell()
        assert current >= 0
    except OSError:
        return False
    magic = f.read(2)
    f.seek(current)
    return magic == GZIP_MAGIC


class _NotClosingWrapper:
    """Proxy a caller-owned stream so that closing a reader stacked on it leaves it open"""

    stream: io.IOBase

    def __init__(self, stream) -> None:
        self.stream = stream

    def __getattr__(self, attrib: str):
        attr = getattr(self.stream, attrib)
        return attr

    def close(self):
        logger.debug("Releasing stream handle %r", self.stream)

    def __iter__(self):
        return iter(self.stream)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def open_stream(
    f: Union[io.IOBase, os.PathLike, str],
    mode="rt",
    buffer_size: Optional[int] = None,
    encoding: Optional[str] = "utf8",
    newline=None,
    closing=False,
):
    """
    Select the file reading type for the given path or stream.

    Detects whether the file is gzip encoded.

    Parameters
    ----------
    f : str, os.PathLike, or io.IOBase
        The path to open or a binary stream to read from
    mode : str
        Either ``"rt"`` for a text handle or ``"rb"`` for a binary one
    closing : bool
        Whether closing the returned handle should also close ``f`` when ``f``
        is a stream. Paths are always closed.

    Raises
    ------
    :class:`~.CannotOpenSource`
        If ``f`` is a path that cannot be opened.
    """
    if buffer_size is None:
        buffer_size = DEFAULT_BUFFER_SIZE
    if "r" not in mode:
        raise NotImplementedError(
            "Haven't implemented automatic output stream determination"
        )
    if not hasattr(f, "read"):
        try:
            f = io.open(f, "rb")
        except OSError as err:
            raise CannotOpenSource(f, err) from err
    elif not closing:
        f = _NotClosingWrapper(f)

    if hasattr(f, "peek"):
        buffered_reader = f
    else:
        buffered_reader = io.BufferedReader(f, buffer_size)

    if test_gzipped(buffered_reader):
        logger.debug("Reading %r as a gzip stream", f)
        handle = gzip.GzipFile(fileobj=buffered_reader, mode="rb")
    else:
        handle = buffered_reader
    if "b" not in mode:
        handle = io.TextIOWrapper(handle, encoding=encoding, newline=newline)
    return handle


def estimate_source_size(source) -> Optional[int]:
    """
    Probe the size in bytes of ``source`` without consuming it.

    Returns
    -------
    int or None
        The size of a file on disk or a seekable stream, the total length of an
        in-memory list of lines, or :const:`None` when it cannot be known.
    """
    if isinstance(source, (str, os.PathLike)):
        try:
            return os.path.getsize(source)
        except OSError:
            return None
    if isinstance(source, (list, tuple)):
        return sum(map(len, source))
    if hasattr(source, "seek") and hasattr(source, "tell"):
        try:
            if not source.seekable():
                return None
            begin_loc = source.tell()
            source.seek(0, os.SEEK_END)
            file_size = source.tell()
            source.seek(begin_loc)
        except (OSError, ValueError):
            return None
        return file_size - begin_loc
    return None
