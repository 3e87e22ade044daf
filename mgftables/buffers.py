"""Append-only numeric columns backed by :mod:`numpy` arrays"""
import logging

from typing import Optional, Tuple

import numpy as np

from .const import BYTES_PER_FRAGMENT, BYTES_PER_SPECTRUM, MIN_CAPACITY, MAX_RESERVATION
from .errors import CannotAllocate

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def _allocate(capacity: int, dtype) -> np.ndarray:
    try:
        return np.empty(capacity, dtype=dtype)
    except MemoryError as err:
        raise CannotAllocate(capacity, err) from err


class GrowableArray:
    """
    A numeric column that is appended to one value at a time.

    Storage is reserved up front and doubled whenever it fills, so appends are
    amortized constant time and there is no upper bound on the length.

    Attributes
    ----------
    dtype : :class:`numpy.dtype`
        The element type of the column
    """

    _data: np.ndarray
    _size: int

    def __init__(self, dtype=np.float64, capacity: int = MIN_CAPACITY):
        self.dtype = np.dtype(dtype)
        self._data = _allocate(max(int(capacity), MIN_CAPACITY), self.dtype)
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    def _grow(self):
        new_capacity = self.capacity * 2
        logger.debug("Growing %s column from %d to %d entries", self.dtype, self.capacity, new_capacity)
        data = _allocate(new_capacity, self.dtype)
        data[:self._size] = self._data[:self._size]
        self._data = data

    def append(self, value):
        if self._size == self.capacity:
            self._grow()
        self._data[self._size] = value
        self._size += 1

    def __len__(self):
        return self._size

    def _check_index(self, i: int) -> int:
        if i < 0:
            i += self._size
        if not 0 <= i < self._size:
            raise IndexError(i)
        return i

    def __getitem__(self, i: int):
        return self._data[self._check_index(i)]

    def __setitem__(self, i: int, value):
        self._data[self._check_index(i)] = value

    def to_array(self) -> np.ndarray:
        """Copy the filled part of the column into a right-sized array"""
        return self._data[:self._size].copy()

    def __repr__(self):
        return f"{self.__class__.__name__}({self.dtype}, size={self._size}, capacity={self.capacity})"


def reservation_for(size_bytes: Optional[int]) -> Tuple[int, int]:
    """
    Estimate how many spectra and fragments an input of ``size_bytes`` holds.

    Returns
    -------
    n_spectra : int
    n_fragments : int
    """
    if not size_bytes or size_bytes < 0:
        return MIN_CAPACITY, MIN_CAPACITY
    n_spectra = min(max(size_bytes // BYTES_PER_SPECTRUM, MIN_CAPACITY), MAX_RESERVATION)
    n_fragments = min(max(size_bytes // BYTES_PER_FRAGMENT, MIN_CAPACITY), MAX_RESERVATION)
    return n_spectra, n_fragments
