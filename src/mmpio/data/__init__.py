from .records import (
    MISSING,
    DatasetStats,
    FineMapRow,
    SummaryRow,
    VariantRecord,
    parse_float_na,
)
from .variant import VariantKey, parse_locus_id, sorted_keys
from .tsv import Compression, TsvReader
from .sumstats import read_summary_rows
from .finemap import read_finemap_rows

__all__ = [
    "MISSING",
    "DatasetStats",
    "FineMapRow",
    "SummaryRow",
    "VariantRecord",
    "parse_float_na",
    "VariantKey",
    "parse_locus_id",
    "sorted_keys",
    "Compression",
    "TsvReader",
    "read_summary_rows",
    "read_finemap_rows",
]
