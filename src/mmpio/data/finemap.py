from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from ..error import for_file
from .records import FineMapRow
from .tsv import Compression, TsvReader
from .variant import parse_locus_id

if TYPE_CHECKING:
    from ..options.config import DatasetConfig


class finemap_cols:
    VARIANT = "v"
    PIP = "cs_specific_prob"
    CS = "cs"

    ALL = [VARIANT, PIP, CS]


def read_finemap_rows(dataset: "DatasetConfig") -> Iterator[FineMapRow]:
    if not dataset.finemap_file:
        return
    path = dataset.finemap_file
    with TsvReader(path, finemap_cols.ALL, Compression.NONE) as reader:
        for variant, pip, cs in reader:
            try:
                key = parse_locus_id(variant)
            except Exception as exc:
                raise for_file(path, exc) from exc
            yield FineMapRow(tag=dataset.tag, key=key, pip=pip, cs=cs)
