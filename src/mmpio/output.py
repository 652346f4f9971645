from __future__ import annotations

import csv
from typing import Iterable, Mapping

from .data import MISSING, VariantKey, VariantRecord, sorted_keys
from .error import for_file
from .math.meta import MetaStats, meta_for_test
from .options.config import Config

NOT_COMPUTED = MISSING
KEY_COLS = ["chrom", "pos", "ref", "alt"]
STATS_COLS = ["pval", "beta", "sebeta", "af", "pip", "cs"]
META_COLS = ["meta_beta", "meta_sebeta", "meta_pval", "meta_hetpval"]


def format_header(config: Config) -> list[str]:
    header = list(KEY_COLS)
    for dataset in config.inputs:
        header.extend(f"{dataset.tag}_{suffix}" for suffix in STATS_COLS)
    for test in config.heterogeneity_tests:
        header.extend(f"{test.tag}_{suffix}" for suffix in META_COLS)
    return header


def format_meta(meta: MetaStats | None) -> list[str]:
    if meta is None:
        return [NOT_COMPUTED] * len(META_COLS)
    return [
        "%f" % meta.beta,
        "%f" % meta.sebeta,
        "%e" % meta.pval,
        "%e" % meta.hetpval,
    ]


def format_record(record: VariantRecord, config: Config) -> list[str]:
    key = record.key
    row = [key.chrom, key.pos, key.ref, key.alt]
    for dataset in config.inputs:
        stats = record.for_tag(dataset.tag)
        if stats is None:
            row.extend([MISSING] * len(STATS_COLS))
        else:
            row.extend(
                [stats.pval, stats.beta, stats.sebeta, stats.af, stats.pip, stats.cs]
            )
    for test in config.heterogeneity_tests:
        row.extend(format_meta(meta_for_test(record, test)))
    return row


def iter_rows(
    config: Config, records: Mapping[VariantKey, VariantRecord]
) -> Iterable[list[str]]:
    yield format_header(config)
    for key in sorted_keys(records.keys()):
        yield format_record(records[key], config)


def write_output(
    config: Config, records: Mapping[VariantKey, VariantRecord], out_file: str
) -> int:
    """Write the merged table, returning the number of variant rows."""
    rows = list(iter_rows(config, records))
    try:
        with open(out_file, "w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle, delimiter="\t", lineterminator="\n")
            writer.writerows(rows)
    except OSError as exc:
        raise for_file(out_file, exc) from exc
    return len(rows) - 1
