"""
Read MGF (Mascot Generic Format) spectra into linked tables.

The parser reads its input once, line by line, and moves between three states:
waiting for ``BEGIN IONS``, reading header ``KEY=value`` lines, and reading
``mz intensity`` data lines. A line that belongs to the other state is pushed back
onto the :class:`~.LineSource` and read again after the state changes.

Only ``TITLE``, ``RTINSECONDS``, ``PEPMASS``, ``CHARGE`` and ``SCANS`` are
recognized; every other header line is ignored.
"""

import enum
import logging
import dataclasses

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np
import pandas as pd

from .buffers import GrowableArray, reservation_for
from .const import (
    BEGIN_IONS,
    END_IONS,
    TITLE,
    RTINSECONDS,
    CHARGE,
    SCANS,
    PEPMASS,
    DIGITS,
    NUMBER_PATTERN,
    DEFAULT_PROGRESS_INTERVAL,
    DEFAULT_CHECK_INTERVAL,
)
from .errors import (
    MalformedField, MalformedFragment, ParseAborted, UndecodableLine, UnterminatedSpectrum
)
from .tables import MGFTables
from .utils import LineSource, SourceType, estimate_source_size

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class ParserState(enum.Enum):
    idle = "idle"
    header = "header"
    fragments = "fragments"


@dataclass
class ParseOptions:
    """
    Settings for a single :func:`parse` call.

    None of the progress related settings change what is parsed.

    Attributes
    ----------
    show_progress : bool
        Log progress messages at INFO level every ``progress_interval`` spectra
    progress : Callable[[float], None], optional
        Receives the fraction of the input consumed every ``progress_interval``
        spectra and once more with ``1.0`` at the end
    should_abort : Callable[[], bool], optional
        Polled every ``check_interval`` lines. Parsing stops with
        :class:`~.ParseAborted` when it returns :const:`True`
    strict : bool
        Raise :class:`~.UnterminatedSpectrum` when the input ends inside a spectrum
        instead of keeping the partial spectrum
    progress_interval : int
        The number of spectra between progress reports
    check_interval : int
        The number of lines between abort checks
    size_hint : int, optional
        The input size in bytes, used to pre-size the output columns. Probed from
        the source when not given
    encoding : str
        The text encoding of paths and binary streams
    """

    show_progress: bool = False
    progress: Optional[Callable[[float], None]] = None
    should_abort: Optional[Callable[[], bool]] = None
    strict: bool = False
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    check_interval: int = DEFAULT_CHECK_INTERVAL
    size_hint: Optional[int] = None
    encoding: str = "utf8"

    def __post_init__(self):
        if self.progress_interval < 1:
            raise ValueError(f"progress_interval must be at least 1, got {self.progress_interval}")
        if self.check_interval < 1:
            raise ValueError(f"check_interval must be at least 1, got {self.check_interval}")


def _parse_number(token: str) -> float:
    # float() alone would also take "nan", "inf" and "1_000"
    if NUMBER_PATTERN.fullmatch(token) is None:
        raise ValueError(f"{token!r} is not a decimal number")
    return float(token)


def _parse_leading_float(value: str) -> float:
    tokens = value.split(None, 1)
    if not tokens:
        raise ValueError("No value given")
    return _parse_number(tokens[0])


class MGFParser:
    """
    A single-use state machine turning MGF lines into :class:`~.MGFTables`.

    Attributes
    ----------
    line_source : :class:`~.LineSource`
        Where lines are read from
    options : :class:`ParseOptions`
        The settings for this run
    state : :class:`ParserState`
        The current state of the machine
    source_size : int or None
        The size of the input in bytes, if it could be determined
    """

    line_source: LineSource
    options: ParseOptions
    state: ParserState
    source_size: Optional[int]

    def __init__(self, source: SourceType, options: Optional[ParseOptions] = None):
        if options is None:
            options = ParseOptions()
        self.options = options
        if options.size_hint is not None:
            self.source_size = options.size_hint
        else:
            self.source_size = estimate_source_size(source)
        self.line_source = LineSource.from_source(source, encoding=options.encoding)

        n_spectra, n_fragments = reservation_for(self.source_size)
        logger.debug("Reserving space for %d spectra and %d fragments", n_spectra, n_fragments)
        try:
            self.title = []
            self.charge = []
            self.scans = []
            self.rt_in_seconds = GrowableArray(np.float64, n_spectra)
            self.pepmass = GrowableArray(np.float64, n_spectra)
            self.first_entry = GrowableArray(np.int64, n_spectra)
            self.last_entry = GrowableArray(np.int64, n_spectra)
            self.mz = GrowableArray(np.float64, n_fragments)
            self.intensity = GrowableArray(np.float64, n_fragments)
        except MemoryError:
            self.line_source.close()
            raise

        self.state = ParserState.idle
        self._block_start_line = 0

    @property
    def n_spectra(self) -> int:
        return len(self.title)

    def _error(self, error: Exception) -> Exception:
        line_number = getattr(error, "line_number", self.line_source.line_number)
        logger.error("Error on line %d: %s", line_number, error)
        return error

    def _begin_spectrum(self, line_number: int):
        logger.debug("Begin ions on line %d", line_number)
        self.title.append("")
        self.rt_in_seconds.append(np.nan)
        self.pepmass.append(np.nan)
        self.charge.append("")
        self.scans.append("")
        current_entry = len(self.mz) + 1
        self.first_entry.append(current_entry)
        self.last_entry.append(current_entry - 1)
        self._block_start_line = line_number
        self.state = ParserState.header
        if self.n_spectra % self.options.progress_interval == 0:
            self._report_progress()

    def _end_spectrum(self):
        self.last_entry[-1] = len(self.mz)
        self.state = ParserState.idle

    def _handle_idle(self, line: str):
        if line == BEGIN_IONS:
            self._begin_spectrum(self.line_source.line_number)

    def _handle_header(self, line: str):
        line_number = self.line_source.line_number
        if line.startswith(TITLE):
            self.title[-1] = line[len(TITLE):]
        elif line.startswith(RTINSECONDS):
            try:
                self.rt_in_seconds[-1] = _parse_leading_float(line[len(RTINSECONDS):])
            except ValueError as err:
                raise self._error(MalformedField(line_number, "RTINSECONDS")) from err
        elif line.startswith(CHARGE):
            self.charge[-1] = line[len(CHARGE):]
        elif line.startswith(SCANS):
            self.scans[-1] = line[len(SCANS):]
        elif line.startswith(PEPMASS):
            try:
                self.pepmass[-1] = _parse_leading_float(line[len(PEPMASS):])
            except ValueError as err:
                raise self._error(MalformedField(line_number, "PEPMASS")) from err
        elif line[:1] in DIGITS:
            self.line_source.push_line(line)
            self.state = ParserState.fragments
        elif line == END_IONS:
            logger.debug("End ions on line %d", line_number)
            self._end_spectrum()
        elif line == BEGIN_IONS:
            logger.warning(
                "BEGIN IONS on line %d inside the spectrum opened on line %d, ignoring it",
                line_number, self._block_start_line)

    def _handle_fragment(self, line: str):
        if line[:1] not in DIGITS:
            self.line_source.push_line(line)
            self.state = ParserState.header
            return
        tokens = line.split(None, 2)
        if len(tokens) < 2:
            raise self._error(MalformedFragment(self.line_source.line_number))
        try:
            mz = _parse_number(tokens[0])
            intensity = _parse_number(tokens[1])
        except ValueError as err:
            raise self._error(MalformedFragment(self.line_source.line_number)) from err
        self.mz.append(mz)
        self.intensity.append(intensity)

    def _check_abort(self):
        should_abort = self.options.should_abort
        if should_abort is None:
            return
        line_number = self.line_source.line_number
        if line_number % self.options.check_interval == 0 and should_abort():
            logger.info("Aborting after line %d, %d spectra read", line_number, self.n_spectra)
            raise ParseAborted(line_number)

    def _progress_fraction(self) -> float:
        if not self.source_size:
            return 0.0
        return min(self.line_source.bytes_read / self.source_size, 1.0)

    def _report_progress(self):
        if self.options.show_progress:
            logger.info(
                "... Parsed %d bytes, %d spectra read", self.line_source.bytes_read, self.n_spectra)
        if self.options.progress is not None:
            self.options.progress(self._progress_fraction())

    def _finish(self):
        if self.state != ParserState.idle:
            if self.options.strict:
                raise self._error(UnterminatedSpectrum(self._block_start_line))
            logger.warning(
                "Input ended inside the spectrum opened on line %d, keeping %d fragments",
                self._block_start_line, len(self.mz) - self.first_entry[-1] + 1)
            self._end_spectrum()
        if self.options.show_progress:
            logger.info(
                "Processed %d bytes, %d spectra and %d fragments read",
                self.line_source.bytes_read, self.n_spectra, len(self.mz))
        if self.options.progress is not None:
            self.options.progress(1.0)

    def parse(self) -> MGFTables:
        """
        Consume the whole input.

        Returns
        -------
        :class:`~.MGFTables`

        Raises
        ------
        :class:`~.MalformedField`
            If ``RTINSECONDS`` or ``PEPMASS`` is not a number
        :class:`~.MalformedFragment`
            If a data line does not start with two numbers
        :class:`~.UndecodableLine`
            If a line is not valid text in the configured encoding
        :class:`~.UnterminatedSpectrum`
            If ``strict`` is set and the last spectrum is never closed
        :class:`~.ParseAborted`
            If ``should_abort`` returned :const:`True`
        """
        handlers = {
            ParserState.idle: self._handle_idle,
            ParserState.header: self._handle_header,
            ParserState.fragments: self._handle_fragment,
        }
        with self.line_source:
            while True:
                try:
                    line, has_more = self.line_source.next_line()
                except UndecodableLine as err:
                    raise self._error(err)
                if not has_more:
                    break
                self._check_abort()
                handlers[self.state](line)
        self._finish()
        return MGFTables.from_columns(
            self.title,
            self.rt_in_seconds.to_array(),
            self.pepmass.to_array(),
            self.charge,
            self.scans,
            self.first_entry.to_array(),
            self.last_entry.to_array(),
            self.mz.to_array(),
            self.intensity.to_array(),
        )


def parse(source: SourceType, options: Optional[ParseOptions] = None, **kwargs) -> MGFTables:
    """
    Parse an MGF file into a spectrum table and a fragment table.

    Parameters
    ----------
    source : str, os.PathLike, io.IOBase, or Iterable[str]
        A path, an open text or binary stream, or an iterable of lines. Gzip
        compressed paths and binary streams are decompressed on the fly.
    options : :class:`ParseOptions`, optional
        The parse settings
    **kwargs
        Used to build or override fields of ``options``

    Returns
    -------
    :class:`~.MGFTables`
    """
    if options is None:
        options = ParseOptions(**kwargs)
    elif kwargs:
        options = dataclasses.replace(options, **kwargs)
    return MGFParser(source, options).parse()


def read_mgf(source: SourceType, **kwargs) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Parse an MGF file and render the result as :class:`pandas.DataFrame` objects.

    Returns
    -------
    spectra : :class:`pandas.DataFrame`
        Columns ``title``, ``rtInSeconds``, ``pepmass``, ``charge``, ``scans``,
        ``firstEntry`` and ``lastEntry``
    fragments : :class:`pandas.DataFrame`
        Columns ``mz`` and ``intensity``
    """
    return parse(source, **kwargs).to_dataframes()
