"""A collection of constants"""

import re

BEGIN_IONS = "BEGIN IONS"
END_IONS = "END IONS"

TITLE = "TITLE="
RTINSECONDS = "RTINSECONDS="
CHARGE = "CHARGE="
SCANS = "SCANS="
PEPMASS = "PEPMASS="

DIGITS = frozenset("0123456789")

# Plain decimal or scientific notation, e.g. "500", "-1.5", ".25", "1.2e+03"
NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# Column names of the rendered data frames
TITLE_COLUMN = "title"
RT_COLUMN = "rtInSeconds"
PEPMASS_COLUMN = "pepmass"
CHARGE_COLUMN = "charge"
SCANS_COLUMN = "scans"
FIRST_ENTRY_COLUMN = "firstEntry"
LAST_ENTRY_COLUMN = "lastEntry"

MZ_COLUMN = "mz"
INTENSITY_COLUMN = "intensity"

SPECTRUM_COLUMNS = (
    TITLE_COLUMN,
    RT_COLUMN,
    PEPMASS_COLUMN,
    CHARGE_COLUMN,
    SCANS_COLUMN,
    FIRST_ENTRY_COLUMN,
    LAST_ENTRY_COLUMN,
)

FRAGMENT_COLUMNS = (MZ_COLUMN, INTENSITY_COLUMN)

# Reservation hints derived from the input size
BYTES_PER_FRAGMENT = 16
BYTES_PER_SPECTRUM = 4096
MIN_CAPACITY = 64
MAX_RESERVATION = 2 ** 26

DEFAULT_PROGRESS_INTERVAL = 1000
DEFAULT_CHECK_INTERVAL = 10000
