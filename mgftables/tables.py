"""
Tabular Results
---------------

Parsing an MGF file produces two linked tables. :class:`SpectrumTable` has one
row per ``BEGIN IONS`` block and :class:`FragmentTable` has one row per
m/z and intensity pair across all blocks. Each spectrum row refers to its
fragments through the 1-based, inclusive ``first_entry`` and ``last_entry``
columns. A spectrum without fragments has ``last_entry == first_entry - 1``.
"""
import math
import textwrap

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .const import (
    TITLE_COLUMN,
    RT_COLUMN,
    PEPMASS_COLUMN,
    CHARGE_COLUMN,
    SCANS_COLUMN,
    FIRST_ENTRY_COLUMN,
    LAST_ENTRY_COLUMN,
    MZ_COLUMN,
    INTENSITY_COLUMN,
)


@dataclass
class SpectrumRecord:
    """
    A single row of a :class:`SpectrumTable`.

    Attributes
    ----------
    index : int
        The 0-based position of the spectrum in the file
    title : str
        The ``TITLE`` value, empty if absent
    rt_in_seconds : float
        The ``RTINSECONDS`` value, NaN if absent
    pepmass : float
        The leading ``PEPMASS`` value, NaN if absent
    charge : str
        The raw ``CHARGE`` value, empty if absent
    scans : str
        The raw ``SCANS`` value, empty if absent
    first_entry : int
        The 1-based index of the spectrum's first fragment
    last_entry : int
        The 1-based index of the spectrum's last fragment
    """

    index: int
    title: str
    rt_in_seconds: float
    pepmass: float
    charge: str
    scans: str
    first_entry: int
    last_entry: int

    @property
    def n_fragments(self) -> int:
        return self.last_entry - self.first_entry + 1

    @property
    def retention_time(self) -> Optional[float]:
        """The retention time in seconds, or :const:`None` if it was not given"""
        if math.isnan(self.rt_in_seconds):
            return None
        return self.rt_in_seconds

    @property
    def precursor_mz(self) -> Optional[float]:
        """The precursor mass, or :const:`None` if it was not given"""
        if math.isnan(self.pepmass):
            return None
        return self.pepmass

    def fragment_slice(self) -> slice:
        """The 0-based :class:`slice` of this spectrum's rows in the fragment columns"""
        return slice(self.first_entry - 1, self.last_entry)


class SpectrumTable:
    """
    Column-oriented spectrum metadata.

    Attributes
    ----------
    title : list[str]
    rt_in_seconds : :class:`numpy.ndarray`
    pepmass : :class:`numpy.ndarray`
    charge : list[str]
    scans : list[str]
    first_entry : :class:`numpy.ndarray`
    last_entry : :class:`numpy.ndarray`
    """

    title: List[str]
    rt_in_seconds: np.ndarray
    pepmass: np.ndarray
    charge: List[str]
    scans: List[str]
    first_entry: np.ndarray
    last_entry: np.ndarray

    def __init__(self, title: Sequence[str], rt_in_seconds: Sequence[float], pepmass: Sequence[float],
                 charge: Sequence[str], scans: Sequence[str], first_entry: Sequence[int],
                 last_entry: Sequence[int]):
        self.title = list(title)
        self.rt_in_seconds = np.asarray(rt_in_seconds, dtype=np.float64)
        self.pepmass = np.asarray(pepmass, dtype=np.float64)
        self.charge = list(charge)
        self.scans = list(scans)
        self.first_entry = np.asarray(first_entry, dtype=np.int64)
        self.last_entry = np.asarray(last_entry, dtype=np.int64)
        lengths = {len(column) for column in self._columns()}
        if len(lengths) > 1:
            raise ValueError(f"Spectrum columns have mismatched lengths: {sorted(lengths)}")

    @classmethod
    def empty(cls) -> "SpectrumTable":
        return cls([], [], [], [], [], [], [])

    def _columns(self) -> Tuple:
        return (self.title, self.rt_in_seconds, self.pepmass, self.charge, self.scans,
                self.first_entry, self.last_entry)

    def __len__(self):
        return len(self.title)

    def __getitem__(self, i: int) -> SpectrumRecord:
        n = len(self)
        if i < 0:
            i += n
        if not 0 <= i < n:
            raise IndexError(i)
        return SpectrumRecord(
            i,
            self.title[i],
            float(self.rt_in_seconds[i]),
            float(self.pepmass[i]),
            self.charge[i],
            self.scans[i],
            int(self.first_entry[i]),
            int(self.last_entry[i]),
        )

    def __iter__(self) -> Iterator[SpectrumRecord]:
        for i in range(len(self)):
            yield self[i]

    def head(self, n: int) -> "SpectrumTable":
        return self.__class__(*[column[:n] for column in self._columns()])

    def __eq__(self, other):
        if not isinstance(other, SpectrumTable):
            return NotImplemented
        return (
            self.title == other.title
            and self.charge == other.charge
            and self.scans == other.scans
            and np.array_equal(self.rt_in_seconds, other.rt_in_seconds, equal_nan=True)
            and np.array_equal(self.pepmass, other.pepmass, equal_nan=True)
            and np.array_equal(self.first_entry, other.first_entry)
            and np.array_equal(self.last_entry, other.last_entry)
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Render the table as a :class:`pandas.DataFrame`"""
        return pd.DataFrame({
            TITLE_COLUMN: pd.Series(self.title, dtype=object),
            RT_COLUMN: self.rt_in_seconds,
            PEPMASS_COLUMN: self.pepmass,
            CHARGE_COLUMN: pd.Series(self.charge, dtype=object),
            SCANS_COLUMN: pd.Series(self.scans, dtype=object),
            FIRST_ENTRY_COLUMN: self.first_entry,
            LAST_ENTRY_COLUMN: self.last_entry,
        })

    def __repr__(self):
        return f"{self.__class__.__name__}(<{len(self)} spectra>)"


class FragmentTable:
    """
    Column-oriented m/z and intensity pairs.

    Attributes
    ----------
    mz : :class:`numpy.ndarray`
    intensity : :class:`numpy.ndarray`
    """

    mz: np.ndarray
    intensity: np.ndarray

    def __init__(self, mz: Sequence[float], intensity: Sequence[float]):
        self.mz = np.asarray(mz, dtype=np.float64)
        self.intensity = np.asarray(intensity, dtype=np.float64)
        if len(self.mz) != len(self.intensity):
            raise ValueError(
                f"Fragment columns have mismatched lengths: {len(self.mz)} != {len(self.intensity)}")

    @classmethod
    def empty(cls) -> "FragmentTable":
        return cls([], [])

    def __len__(self):
        return len(self.mz)

    def __getitem__(self, i: Union[int, slice]) -> Union[Tuple[float, float], "FragmentTable"]:
        if isinstance(i, slice):
            return self.__class__(self.mz[i], self.intensity[i])
        return float(self.mz[i]), float(self.intensity[i])

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for mz, intensity in zip(self.mz, self.intensity):
            yield float(mz), float(intensity)

    def __eq__(self, other):
        if not isinstance(other, FragmentTable):
            return NotImplemented
        return np.array_equal(self.mz, other.mz) and np.array_equal(self.intensity, other.intensity)

    def to_dataframe(self) -> pd.DataFrame:
        """Render the table as a :class:`pandas.DataFrame`"""
        return pd.DataFrame({MZ_COLUMN: self.mz, INTENSITY_COLUMN: self.intensity})

    def __repr__(self):
        template = f"{self.__class__.__name__}("
        lines = [f"({mz}, {intensity})" for mz, intensity in self]
        if not lines:
            return template + "[])"
        return template + "[\n%s])" % textwrap.indent(",\n".join(lines), " " * 2)


class MGFTables:
    """
    The spectrum and fragment tables read from one MGF source.

    Attributes
    ----------
    spectra : :class:`SpectrumTable`
        One row per spectrum
    fragments : :class:`FragmentTable`
        One row per fragment, ordered by spectrum
    """

    spectra: SpectrumTable
    fragments: FragmentTable

    def __init__(self, spectra: Optional[SpectrumTable] = None, fragments: Optional[FragmentTable] = None):
        if spectra is None:
            spectra = SpectrumTable.empty()
        if fragments is None:
            fragments = FragmentTable.empty()
        self.spectra = spectra
        self.fragments = fragments

    @classmethod
    def from_columns(cls, title, rt_in_seconds, pepmass, charge, scans, first_entry, last_entry,
                     mz, intensity) -> "MGFTables":
        """Assemble both tables from their raw columns"""
        return cls(
            SpectrumTable(title, rt_in_seconds, pepmass, charge, scans, first_entry, last_entry),
            FragmentTable(mz, intensity),
        )

    def fragments_for(self, i: int) -> FragmentTable:
        """Get the fragments of the ``i``-th spectrum"""
        return self.fragments[self.spectra[i].fragment_slice()]

    def check_ranges(self):
        """
        Verify that the spectrum ranges tile the fragment table in order.

        Raises
        ------
        ValueError
            If a range overlaps its neighbour, leaves a gap, or falls outside the
            fragment table.
        """
        expected = 1
        for record in self.spectra:
            if record.first_entry != expected:
                raise ValueError(
                    f"Spectrum {record.index} starts at {record.first_entry}, expected {expected}")
            if record.n_fragments < 0:
                raise ValueError(
                    f"Spectrum {record.index} has an inverted range "
                    f"[{record.first_entry}, {record.last_entry}]")
            expected = record.last_entry + 1
        if expected - 1 != len(self.fragments):
            raise ValueError(
                f"Spectrum ranges cover {expected - 1} fragments but the table holds {len(self.fragments)}")

    def head(self, n: int) -> "MGFTables":
        """Keep only the first ``n`` spectra and their fragments"""
        spectra = self.spectra.head(n)
        if len(spectra):
            end = int(spectra.last_entry[-1])
        else:
            end = 0
        return self.__class__(spectra, self.fragments[:end])

    def to_dataframes(self) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Render both tables as :class:`pandas.DataFrame` objects.

        Returns
        -------
        spectra : :class:`pandas.DataFrame`
        fragments : :class:`pandas.DataFrame`
        """
        return self.spectra.to_dataframe(), self.fragments.to_dataframe()

    def __iter__(self) -> Iterator[Tuple[SpectrumRecord, FragmentTable]]:
        for record in self.spectra:
            yield record, self.fragments[record.fragment_slice()]

    def __len__(self):
        return len(self.spectra)

    def __eq__(self, other):
        if not isinstance(other, MGFTables):
            return NotImplemented
        return self.spectra == other.spectra and self.fragments == other.fragments

    def __repr__(self):
        return f"{self.__class__.__name__}(spectra={len(self.spectra)}, fragments={len(self.fragments)})"
