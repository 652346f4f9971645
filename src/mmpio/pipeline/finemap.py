from __future__ import annotations

from typing import AbstractSet, Callable, Mapping, Sequence

from ..data import FineMapRow, VariantKey, VariantRecord, read_finemap_rows
from ..options.config import DatasetConfig
from ..util.threads import fan_in
from .observer import DatasetObserver, announce


class FineMapWorkerLauncher:
    def __init__(self, selected: AbstractSet[VariantKey], verbose: bool = True) -> None:
        self.selected = selected
        self.verbose = verbose

    def launch(
        self, dataset: DatasetConfig, emit: Callable[[FineMapRow], None], i_thread: int
    ) -> None:
        announce(dataset, self.verbose)
        for row in read_finemap_rows(dataset):
            if row.key in self.selected:
                emit(row)


def merge_fine_mapping(
    datasets: Sequence[DatasetConfig],
    records: Mapping[VariantKey, VariantRecord],
    observer: DatasetObserver | None = None,
    verbose: bool = True,
) -> int:
    """Fill PIP and credible set into existing (dataset, variant) entries.

    Rows for pairs that are not already in `records` are dropped. Returns the
    number of entries updated.
    """
    with_finemap = [item for item in datasets if item.finemap_file]
    observer = observer or DatasetObserver(with_finemap, verbose)
    launcher = FineMapWorkerLauncher(frozenset(records.keys()), verbose)
    n_applied = 0
    for row in fan_in(launcher, with_finemap, observer):
        record = records.get(row.key)
        if record is None:
            continue
        stats = record.for_tag(row.tag)
        if stats is None:
            continue
        if stats.set_fine_mapping(row):
            n_applied += 1
    return n_applied
