from __future__ import annotations

from pathlib import Path

from ..error import ErrorKind, MmpioError


def check_parent_dir_exists(path: str) -> None:
    parent = Path(path).parent
    if str(parent) != "" and not parent.exists():
        raise MmpioError(ErrorKind.IO, f"Directory {parent} does not exist")


def check_file_exists(path: str) -> None:
    if not Path(path).is_file():
        raise MmpioError(ErrorKind.IO, f"File {path} does not exist")
