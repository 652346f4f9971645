from __future__ import annotations

from dataclasses import dataclass


class ErrorKind:
    MMPIO = "MMP::io error"
    CONFIG = "configuration error"
    IO = "I/O error"
    SCHEMA = "schema error"
    PARSE = "parse error"
    JSON_DE = "JSON deserialization error"
    TOML_DE = "TOML deserialization error"
    TOML_SER = "TOML serialization error"


@dataclass
class MmpioError(Exception):
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


def new_error(message: str) -> MmpioError:
    return MmpioError(ErrorKind.MMPIO, message)


def config_error(message: str) -> MmpioError:
    return MmpioError(ErrorKind.CONFIG, message)


def schema_error(message: str) -> MmpioError:
    return MmpioError(ErrorKind.SCHEMA, message)


def parse_error(message: str) -> MmpioError:
    return MmpioError(ErrorKind.PARSE, message)


def for_file(file: str, exc: Exception) -> MmpioError:
    if isinstance(exc, MmpioError):
        return MmpioError(exc.kind, f"{file}: {exc.message}")
    return MmpioError(ErrorKind.IO, f"{file}: {exc}")


def for_context(context: str, exc: Exception) -> MmpioError:
    if isinstance(exc, MmpioError):
        return MmpioError(exc.kind, f"{context}: {exc.message}")
    return MmpioError(ErrorKind.MMPIO, f"{context}: {exc}")
