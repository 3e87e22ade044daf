"""Write :class:`~.MGFTables` back out as MGF text using :mod:`pyteomics`"""
import logging
import math

from typing import Any, Dict, Iterator

from pyteomics import mgf

from .tables import MGFTables

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

KEY_ORDER = ["title", "pepmass", "rtinseconds", "charge", "scans"]


def _verbatim_repr(key: str, value: Any) -> str:
    return f"{key.upper()}={value}"


# CHARGE and SCANS are free-form and must not be reinterpreted on the way out
PARAM_FORMATTERS = {
    "pepmass": _verbatim_repr,
    "charge": _verbatim_repr,
    "scans": _verbatim_repr,
}


def iter_spectrum_dicts(tables: MGFTables) -> Iterator[Dict[str, Any]]:
    """
    Convert each spectrum into the mapping :func:`pyteomics.mgf.write` expects.

    Missing values are left out of ``params``.
    """
    for record, fragments in tables:
        params = {}
        if record.title:
            params["title"] = record.title
        if not math.isnan(record.pepmass):
            params["pepmass"] = record.pepmass
        if not math.isnan(record.rt_in_seconds):
            params["rtinseconds"] = record.rt_in_seconds
        if record.charge:
            params["charge"] = record.charge
        if record.scans:
            params["scans"] = record.scans
        yield {
            "params": params,
            "m/z array": fragments.mz,
            "intensity array": fragments.intensity,
        }


def write_mgf(tables: MGFTables, output=None):
    """
    Write ``tables`` in MGF format.

    Parameters
    ----------
    tables : :class:`~.MGFTables`
        The spectra to write
    output : str or file, optional
        A path or a writable text stream. Defaults to standard output.

    Returns
    -------
    file
    """
    logger.debug("Writing %d spectra with %d fragments", len(tables.spectra), len(tables.fragments))
    return mgf.write(
        iter_spectrum_dicts(tables),
        output=output,
        key_order=KEY_ORDER,
        fragment_format="{} {}",
        write_charges=False,
        use_numpy=False,
        param_formatters=PARAM_FORMATTERS,
    )
