import io
import os

data_path = os.path.join(os.path.dirname(__file__), "test_data")


def datafile(name):
    return os.path.join(data_path, name)


def lines_of(text):
    return text.splitlines(keepends=True)


class PipeStream(io.RawIOBase):
    """A readable binary stream that cannot seek or tell, like a pipe"""

    def __init__(self, data):
        self._buffer = io.BytesIO(data)

    def readable(self):
        return True

    def readinto(self, b):
        chunk = self._buffer.read(len(b))
        b[:len(chunk)] = chunk
        return len(chunk)
