import io
import os
import gzip
import tempfile
import unittest

from mgftables.utils import LineSource, open_stream, test_gzipped as is_gzipped, estimate_source_size
from mgftables.errors import CannotOpenSource, UndecodableLine

from .common import datafile, PipeStream


class TestLineSource(unittest.TestCase):

    def test_line_endings(self):
        source = LineSource(["a\n", "b\r\n", "c"])
        self.assertEqual(source.next_line(), ("a", True))
        self.assertEqual(source.next_line(), ("b", True))
        self.assertEqual(source.next_line(), ("c", True))
        self.assertEqual(source.next_line(), ("", False))
        self.assertEqual(source.line_number, 3)

    def test_blank_lines_are_not_end_of_input(self):
        source = LineSource(io.StringIO("\n\nx\n"))
        self.assertEqual(list(source), ["", "", "x"])

    def test_push_line(self):
        source = LineSource(io.StringIO("one\ntwo\n"))
        source.next_line()
        line, _ = source.next_line()
        self.assertEqual(source.line_number, 2)
        source.push_line()
        self.assertEqual(source.next_line(), (line, True))
        self.assertEqual(source.line_number, 2)
        self.assertEqual(source.next_line(), ("", False))

    def test_push_twice_fails(self):
        source = LineSource(["one\n"])
        source.next_line()
        source.push_line()
        with self.assertRaises(ValueError):
            source.push_line()

    def test_bytes_lines(self):
        source = LineSource([b"BEGIN IONS\r\n"])
        self.assertEqual(source.next_line(), ("BEGIN IONS", True))
        self.assertEqual(source.bytes_read, 12)

    def test_from_path_closes_stream(self):
        with LineSource.from_source(datafile("example.mgf")) as source:
            first, has_more = source.next_line()
            stream = source.stream
        self.assertTrue(has_more)
        self.assertEqual(first, "MASS=Monoisotopic")
        self.assertTrue(stream.closed)

    def test_caller_stream_left_open(self):
        buffer = io.BytesIO(b"BEGIN IONS\nEND IONS\n")
        with LineSource.from_source(buffer) as source:
            self.assertEqual(list(source), ["BEGIN IONS", "END IONS"])
        self.assertFalse(buffer.closed)

    def test_unreadable_source(self):
        with self.assertRaises(CannotOpenSource):
            LineSource.from_source(12)

    def test_undecodable_line(self):
        source = LineSource.from_source(io.BytesIO(b"BEGIN IONS\nTITLE=caf\xe9\n"))
        self.assertEqual(source.next_line(), ("BEGIN IONS", True))
        with self.assertRaises(UndecodableLine) as ctx:
            source.next_line()
        self.assertEqual(ctx.exception.line_number, 2)
        self.assertIn("line 2", str(ctx.exception))

    def test_alternate_encoding(self):
        source = LineSource.from_source(io.BytesIO(b"TITLE=caf\xe9\n"), encoding="latin-1")
        self.assertEqual(list(source), ["TITLE=caf\u00e9"])


class TestOpenStream(unittest.TestCase):

    def test_gzip_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "example.mgf.gz")
            with open(datafile("example.mgf"), "rb") as fh:
                raw = fh.read()
            with gzip.open(path, "wb") as fh:
                fh.write(raw)
            self.assertTrue(is_gzipped(path))
            self.assertFalse(is_gzipped(datafile("example.mgf")))
            with open_stream(path, "rt") as stream:
                self.assertEqual(stream.read(), raw.decode("utf8"))

    def test_gzip_pipe(self):
        data = gzip.compress(b"BEGIN IONS\n100.0 1.0\nEND IONS\n")
        self.assertTrue(is_gzipped(io.BufferedReader(PipeStream(data))))
        with open_stream(PipeStream(data), "rt") as stream:
            self.assertEqual(stream.read(), "BEGIN IONS\n100.0 1.0\nEND IONS\n")

    def test_plain_pipe(self):
        with open_stream(PipeStream(b"BEGIN IONS\n"), "rt") as stream:
            self.assertEqual(stream.read(), "BEGIN IONS\n")

    def test_missing_path(self):
        with self.assertRaises(CannotOpenSource) as ctx:
            open_stream(datafile("missing.mgf"))
        self.assertIsInstance(ctx.exception, OSError)

    def test_binary_mode(self):
        stream = open_stream(io.BytesIO(b"abc"), "rb")
        self.assertEqual(stream.read(), b"abc")

    def test_write_mode_unsupported(self):
        with self.assertRaises(NotImplementedError):
            open_stream(io.BytesIO(), "w")


class TestEstimateSourceSize(unittest.TestCase):

    def test_path(self):
        self.assertEqual(estimate_source_size(datafile("example.mgf")),
                         os.path.getsize(datafile("example.mgf")))

    def test_stream_position_preserved(self):
        buffer = io.BytesIO(b"0123456789")
        buffer.seek(4)
        self.assertEqual(estimate_source_size(buffer), 6)
        self.assertEqual(buffer.tell(), 4)

    def test_unknown(self):
        self.assertIsNone(estimate_source_size(iter(["a\n"])))
        self.assertIsNone(estimate_source_size(datafile("missing.mgf")))
        self.assertEqual(estimate_source_size(["ab\n", "c\n"]), 5)


if __name__ == "__main__":
    unittest.main()
