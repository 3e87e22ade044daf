import math
import unittest

import numpy as np
import pandas as pd

from mgftables import MGFTables, SpectrumTable, FragmentTable, SpectrumRecord, parse

from .common import datafile


def make_tables():
    return MGFTables.from_columns(
        ["a", "b", "c"],
        [1.0, np.nan, 3.0],
        [100.0, 200.0, np.nan],
        ["1+", "", "2+"],
        ["", "7", ""],
        [1, 3, 3],
        [2, 2, 4],
        [10.0, 20.0, 30.0, 40.0],
        [1.0, 2.0, 3.0, 4.0],
    )


class TestSpectrumTable(unittest.TestCase):

    def test_record(self):
        tables = make_tables()
        record = tables.spectra[1]
        self.assertIsInstance(record, SpectrumRecord)
        self.assertEqual(record.index, 1)
        self.assertEqual(record.scans, "7")
        self.assertIsNone(record.retention_time)
        self.assertEqual(record.n_fragments, 0)
        self.assertEqual(record.fragment_slice(), slice(2, 2))
        self.assertEqual(tables.spectra[-1].title, "c")
        with self.assertRaises(IndexError):
            tables.spectra[3]

    def test_mismatched_columns(self):
        with self.assertRaises(ValueError):
            SpectrumTable(["a"], [1.0], [1.0], [""], [""], [1], [])
        with self.assertRaises(ValueError):
            FragmentTable([1.0], [])

    def test_equality_with_nan(self):
        self.assertEqual(make_tables(), make_tables())
        other = make_tables()
        other.spectra.title[0] = "z"
        self.assertNotEqual(make_tables(), other)

    def test_dataframe(self):
        spectra, fragments = make_tables().to_dataframes()
        self.assertIsInstance(spectra, pd.DataFrame)
        self.assertEqual(spectra["firstEntry"].tolist(), [1, 3, 3])
        self.assertTrue(math.isnan(spectra["pepmass"].iloc[2]))
        self.assertEqual(fragments["mz"].tolist(), [10.0, 20.0, 30.0, 40.0])


class TestMGFTables(unittest.TestCase):

    def test_fragments_for(self):
        tables = make_tables()
        self.assertEqual(list(tables.fragments_for(0)), [(10.0, 1.0), (20.0, 2.0)])
        self.assertEqual(len(tables.fragments_for(1)), 0)
        self.assertEqual(list(tables.fragments_for(2)), [(30.0, 3.0), (40.0, 4.0)])

    def test_iteration(self):
        pairs = list(make_tables())
        self.assertEqual([record.title for record, _ in pairs], ["a", "b", "c"])
        self.assertEqual([len(fragments) for _, fragments in pairs], [2, 0, 2])

    def test_check_ranges(self):
        make_tables().check_ranges()
        broken = make_tables()
        broken.spectra.first_entry[1] = 2
        with self.assertRaises(ValueError):
            broken.check_ranges()
        short = MGFTables(make_tables().spectra, FragmentTable([1.0], [1.0]))
        with self.assertRaises(ValueError):
            short.check_ranges()

    def test_head(self):
        tables = parse(datafile("example.mgf"))
        head = tables.head(2)
        self.assertEqual(len(head), 2)
        self.assertEqual(len(head.fragments), 5)
        head.check_ranges()
        self.assertEqual(len(tables.head(0).fragments), 0)
        self.assertEqual(tables.head(10), tables)

    def test_empty(self):
        tables = MGFTables()
        self.assertEqual(len(tables), 0)
        tables.check_ranges()
        spectra, fragments = tables.to_dataframes()
        self.assertEqual(len(spectra), 0)
        self.assertEqual(len(fragments), 0)


if __name__ == "__main__":
    unittest.main()
