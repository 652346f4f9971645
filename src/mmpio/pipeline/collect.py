from __future__ import annotations

from typing import AbstractSet, Callable, Sequence

from ..data import SummaryRow, VariantKey, VariantRecord, read_summary_rows
from ..options.config import DatasetConfig
from ..util.threads import fan_in
from .observer import DatasetObserver, announce


class CollectWorkerLauncher:
    def __init__(self, selected: AbstractSet[VariantKey], verbose: bool = True) -> None:
        self.selected = selected
        self.verbose = verbose

    def launch(
        self, dataset: DatasetConfig, emit: Callable[[SummaryRow], None], i_thread: int
    ) -> None:
        announce(dataset, self.verbose)
        for row in read_summary_rows(dataset):
            if row.key in self.selected:
                emit(row)


def collect_stats(
    datasets: Sequence[DatasetConfig],
    selected: AbstractSet[VariantKey],
    observer: DatasetObserver | None = None,
    verbose: bool = True,
) -> dict[VariantKey, VariantRecord]:
    observer = observer or DatasetObserver(datasets, verbose)
    records: dict[VariantKey, VariantRecord] = {}
    launcher = CollectWorkerLauncher(frozenset(selected), verbose)
    for row in fan_in(launcher, list(datasets), observer):
        record = records.get(row.key)
        if record is None:
            record = VariantRecord(key=row.key)
            records[row.key] = record
        if not record.add(row):
            print(
                f"Warning: {row.tag} lists variant {row.key} more than once, "
                "keeping the first row."
            )
    return records
