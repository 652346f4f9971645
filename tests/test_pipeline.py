import gzip

import pytest

from mmpio.data import MISSING, VariantKey
from mmpio.error import ErrorKind, MmpioError
from mmpio.options.config import DatasetConfig, SumstatCols
from mmpio.pipeline import collect_stats, merge_fine_mapping, select_variants

HEADER = ["#chrom", "pos", "ref", "alt", "pval", "beta", "sebeta", "af_alt"]
COLS = SumstatCols(
    chrom="#chrom",
    pos="pos",
    ref="ref",
    alt="alt",
    pval="pval",
    beta="beta",
    sebeta="sebeta",
    af="af_alt",
)


def _write_sumstats(path, rows):
    lines = ["\t".join(HEADER)] + ["\t".join(row) for row in rows]
    with gzip.open(path, "wt", encoding="utf-8") as handle:
        handle.write("\n".join(lines) + "\n")
    return str(path)


def _write_finemap(path, rows):
    lines = ["\t".join(["region", "v", "cs", "cs_specific_prob"])]
    lines += ["\t".join(["r1", v, cs, pip]) for v, cs, pip in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


def _dataset(tag, file, threshold=1e-6, finemap_file=None):
    return DatasetConfig(
        tag=tag,
        file=file,
        cols=COLS,
        pval_threshold=threshold,
        finemap_file=finemap_file,
    )


def _two_datasets(tmp_path):
    a = _dataset(
        "A",
        _write_sumstats(
            tmp_path / "a.tsv.gz",
            [
                ["1", "100", "A", "T", "1e-8", "0.5", "0.1", "0.2"],
                ["1", "200", "C", "G", "0.5", "0.1", "0.1", "0.3"],
                ["2", "300", "G", "A", "NA", "NA", "NA", "NA"],
                ["3", "400", "T", "C", "1e-6", "0.2", "0.1", "0.4"],
            ],
        ),
    )
    b = _dataset(
        "B",
        _write_sumstats(
            tmp_path / "b.tsv.gz",
            [
                ["1", "200", "C", "G", "1e-3", "0.3", "0.2", "0.1"],
                ["2", "300", "G", "A", "1e-7", "0.4", "0.1", "0.2"],
                ["3", "400", "T", "C", "0.01", "0.2", "0.1", "0.4"],
            ],
        ),
        threshold=5e-3,
    )
    return a, b


def test_selection_uses_each_dataset_threshold(tmp_path):
    a, b = _two_datasets(tmp_path)
    selected = select_variants([a, b], verbose=False)
    assert selected == {
        VariantKey("1", "100", "A", "T"),
        VariantKey("1", "200", "C", "G"),
        VariantKey("2", "300", "G", "A"),
    }


def test_selection_threshold_is_exclusive(tmp_path):
    a, _ = _two_datasets(tmp_path)
    selected = select_variants([a], verbose=False)
    assert VariantKey("3", "400", "T", "C") not in selected


def test_selection_na_pval_never_selects(tmp_path):
    a, _ = _two_datasets(tmp_path)
    selected = select_variants([a], verbose=False)
    assert VariantKey("2", "300", "G", "A") not in selected


def test_selection_bad_pval_is_fatal(tmp_path):
    bad = _dataset(
        "bad",
        _write_sumstats(
            tmp_path / "bad.tsv.gz",
            [["1", "100", "A", "T", "tiny", "0.5", "0.1", "0.2"]],
        ),
    )
    with pytest.raises(MmpioError) as info:
        select_variants([bad], verbose=False)
    assert info.value.kind == ErrorKind.PARSE
    assert "tiny" in str(info.value)
    assert "bad.tsv.gz" in str(info.value)


def test_selection_missing_column_is_fatal(tmp_path):
    a, _ = _two_datasets(tmp_path)
    broken = DatasetConfig(
        tag="A",
        file=a.file,
        cols=SumstatCols(**{**COLS.__dict__, "af": "af"}),
        pval_threshold=1e-6,
    )
    with pytest.raises(MmpioError) as info:
        select_variants([broken], verbose=False)
    assert info.value.kind == ErrorKind.SCHEMA


def test_collect_keeps_selected_rows_per_dataset(tmp_path):
    a, b = _two_datasets(tmp_path)
    selected = select_variants([a, b], verbose=False)
    records = collect_stats([a, b], selected, verbose=False)
    assert set(records) == selected
    only_a = records[VariantKey("1", "100", "A", "T")]
    assert [item.tag for item in only_a.stats] == ["A"]
    both = records[VariantKey("1", "200", "C", "G")]
    assert sorted(item.tag for item in both.stats) == ["A", "B"]
    stats_b = both.for_tag("B")
    assert (stats_b.pval, stats_b.beta, stats_b.sebeta, stats_b.af) == (
        "1e-3",
        "0.3",
        "0.2",
        "0.1",
    )
    assert stats_b.pip == MISSING
    assert stats_b.cs == MISSING


def test_collect_is_idempotent(tmp_path):
    a, b = _two_datasets(tmp_path)
    selected = select_variants([a, b], verbose=False)

    def as_sets(records):
        return {
            key: {
                (s.tag, s.pval, s.beta, s.sebeta, s.af, s.pip, s.cs)
                for s in record.stats
            }
            for key, record in records.items()
        }

    first = collect_stats([a, b], selected, verbose=False)
    second = collect_stats([a, b], selected, verbose=False)
    assert as_sets(first) == as_sets(second)


def test_collect_duplicate_row_keeps_first(tmp_path, capsys):
    dup = _dataset(
        "D",
        _write_sumstats(
            tmp_path / "dup.tsv.gz",
            [
                ["1", "100", "A", "T", "1e-8", "0.5", "0.1", "0.2"],
                ["1", "100", "A", "T", "1e-9", "0.9", "0.1", "0.2"],
            ],
        ),
    )
    selected = select_variants([dup], verbose=False)
    records = collect_stats([dup], selected, verbose=False)
    record = records[VariantKey("1", "100", "A", "T")]
    assert len(record.stats) == 1
    assert record.stats[0].beta == "0.5"
    assert "Warning" in capsys.readouterr().out


def test_fine_mapping_only_updates_existing_pairs(tmp_path):
    a, b = _two_datasets(tmp_path)
    a = _dataset(
        "A",
        a.file,
        finemap_file=_write_finemap(
            tmp_path / "a.finemap.tsv",
            [
                ("chr1:100:A:T", "1", "0.91"),
                ("chr1:100:A:T", "2", "0.05"),
                ("chr3:400:T:C", "3", "0.5"),
                ("chr9:9:A:C", "4", "0.7"),
            ],
        ),
    )
    b = _dataset(
        "B",
        b.file,
        threshold=5e-3,
        finemap_file=_write_finemap(
            tmp_path / "b.finemap.tsv",
            [("chr1:100:A:T", "7", "0.4"), ("1:200:C:G", "8", "0.2")],
        ),
    )
    selected = select_variants([a, b], verbose=False)
    records = collect_stats([a, b], selected, verbose=False)
    n_applied = merge_fine_mapping([a, b], records, verbose=False)

    assert n_applied == 2
    first = records[VariantKey("1", "100", "A", "T")]
    assert [item.tag for item in first.stats] == ["A"]
    assert (first.for_tag("A").pip, first.for_tag("A").cs) == ("0.91", "1")
    second = records[VariantKey("1", "200", "C", "G")]
    assert (second.for_tag("B").pip, second.for_tag("B").cs) == ("0.2", "8")
    assert (second.for_tag("A").pip, second.for_tag("A").cs) == (MISSING, MISSING)
    assert VariantKey("3", "400", "T", "C") not in records
    assert VariantKey("9", "9", "A", "C") not in records


def test_fine_mapping_without_file_leaves_missing(tmp_path):
    a, b = _two_datasets(tmp_path)
    selected = select_variants([a, b], verbose=False)
    records = collect_stats([a, b], selected, verbose=False)
    assert merge_fine_mapping([a, b], records, verbose=False) == 0
    for record in records.values():
        for stats in record.stats:
            assert stats.pip == MISSING
            assert stats.cs == MISSING


def test_fine_mapping_bad_key_is_fatal(tmp_path):
    a, _ = _two_datasets(tmp_path)
    a = _dataset(
        "A",
        a.file,
        finemap_file=_write_finemap(tmp_path / "bad.finemap.tsv", [("1:100:A", "1", "0.9")]),
    )
    records = collect_stats([a], select_variants([a], verbose=False), verbose=False)
    with pytest.raises(MmpioError) as info:
        merge_fine_mapping([a], records, verbose=False)
    assert info.value.kind == ErrorKind.SCHEMA
    assert "bad.finemap.tsv" in str(info.value)
