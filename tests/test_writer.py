import io
import os
import tempfile
import unittest

from mgftables import parse, write_mgf
from mgftables.writer import iter_spectrum_dicts

from .common import datafile


class TestWriteMGF(unittest.TestCase):

    def test_reparse_matches(self):
        tables = parse(datafile("example.mgf"))
        buffer = io.StringIO()
        write_mgf(tables, buffer)
        buffer.seek(0)
        self.assertEqual(parse(buffer), tables)

    def test_missing_fields_omitted(self):
        tables = parse(io.StringIO("BEGIN IONS\nTITLE=only\n100.0 1.0\nEND IONS\n"))
        buffer = io.StringIO()
        write_mgf(tables, buffer)
        text = buffer.getvalue()
        self.assertIn("TITLE=only\n", text)
        self.assertNotIn("PEPMASS", text)
        self.assertNotIn("RTINSECONDS", text)
        self.assertNotIn("CHARGE", text)
        self.assertIn("100.0 1.0\n", text)

    def test_free_form_values_verbatim(self):
        tables = parse(io.StringIO("BEGIN IONS\nCHARGE=2+ and 3+\nSCANS=10-12\nEND IONS\n"))
        params = next(iter_spectrum_dicts(tables))["params"]
        self.assertEqual(params, {"charge": "2+ and 3+", "scans": "10-12"})
        buffer = io.StringIO()
        write_mgf(tables, buffer)
        self.assertIn("CHARGE=2+ and 3+\n", buffer.getvalue())
        self.assertIn("SCANS=10-12\n", buffer.getvalue())

    def test_write_to_path(self):
        tables = parse(datafile("example.mgf"))
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out.mgf")
            write_mgf(tables, path)
            self.assertEqual(parse(path), tables)


if __name__ == "__main__":
    unittest.main()
