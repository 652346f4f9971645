from __future__ import annotations

import gzip
import io
import zlib
from typing import Iterator, Sequence

from ..error import ErrorKind, MmpioError, for_file, new_error, parse_error, schema_error

DELIM = "\t"
GZIP_MAGIC = b"\x1f\x8b"


class Compression:
    NONE = "none"
    GZIP = "gzip"
    AUTO = "auto"

    ALL = (NONE, GZIP, AUTO)


def open_text(path: str, compression: str) -> io.TextIOBase:
    if compression not in Compression.ALL:
        raise new_error(
            "Unrecognized compression type '{}'. Possible values are: {}.".format(
                compression, ", ".join(Compression.ALL)
            )
        )
    try:
        raw = open(path, "rb")
    except OSError as exc:
        raise for_file(path, exc) from exc
    if compression == Compression.AUTO:
        magic = raw.read(2)
        raw.seek(0)
        compression = Compression.GZIP if magic == GZIP_MAGIC else Compression.NONE
    if compression == Compression.GZIP:
        return io.TextIOWrapper(gzip.GzipFile(fileobj=raw), encoding="utf-8", newline="")
    return io.TextIOWrapper(raw, encoding="utf-8", newline="")


class TsvReader(Iterator[tuple]):
    """Lazily reads a tab separated file, projecting each row onto `columns`.

    Columns are resolved against the header when the reader is created, so a
    missing column fails before any row is produced. When a header name repeats,
    the first column with that name is used. Rows whose field count
    differs from the header abort the read.
    """

    def __init__(self, path: str, columns: Sequence[str], compression: str = Compression.NONE) -> None:
        self.path = path
        self.columns = list(columns)
        self._handle = open_text(path, compression)
        self._i_line = 1
        try:
            header_line = self._read_line()
            if header_line is None:
                raise schema_error("File is empty, expected a header line.")
            self.header = header_line.split(DELIM)
            index_by_name: dict[str, int] = {}
            for i, name in enumerate(self.header):
                index_by_name.setdefault(name, i)
            self._indices = [self._index_of(index_by_name, name) for name in self.columns]
        except Exception as exc:
            self.close()
            raise for_file(path, exc) from exc

    def _index_of(self, index_by_name: dict[str, int], name: str) -> int:
        try:
            return index_by_name[name]
        except KeyError as exc:
            raise schema_error(
                "Could not find column '{}' in header. Available columns: {}".format(
                    name, ", ".join(self.header)
                )
            ) from exc

    def _read_line(self) -> str | None:
        while True:
            try:
                line = self._handle.readline()
            except (OSError, EOFError, UnicodeDecodeError, zlib.error) as exc:
                raise MmpioError(ErrorKind.IO, f"Could not read line {self._i_line}: {exc}") from exc
            if line == "":
                return None
            line = line.rstrip("\r\n")
            if line:
                return line
            self._i_line += 1

    def __iter__(self) -> "TsvReader":
        return self

    def __next__(self) -> tuple:
        if self._handle.closed:
            raise StopIteration
        self._i_line += 1
        try:
            line = self._read_line()
        except Exception as exc:
            self.close()
            raise for_file(self.path, exc) from exc
        if line is None:
            self.close()
            raise StopIteration
        parts = line.split(DELIM)
        if len(parts) != len(self.header):
            self.close()
            raise for_file(
                self.path,
                parse_error(
                    "Line {} has {} fields, but the header has {}.".format(
                        self._i_line, len(parts), len(self.header)
                    )
                ),
            )
        return tuple(parts[i] for i in self._indices)

    def __enter__(self) -> "TsvReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._handle.close()
