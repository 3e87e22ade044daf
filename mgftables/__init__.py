"""Read MGF (Mascot Generic Format) spectra into linked spectrum and fragment tables."""

from mgftables.errors import (
    MGFError, CannotOpenSource, CannotAllocate, MGFParseError, MalformedField, MalformedFragment,
    UndecodableLine, UnterminatedSpectrum, ParseAborted
)
from mgftables.tables import SpectrumRecord, SpectrumTable, FragmentTable, MGFTables
from mgftables.parser import MGFParser, ParseOptions, ParserState, parse, read_mgf
from mgftables.utils import LineSource, open_stream
from mgftables.writer import write_mgf
