from __future__ import annotations

from typing import Callable, Sequence

from ..data import VariantKey, read_summary_rows
from ..data.records import parse_float_for
from ..error import for_file
from ..options.config import DatasetConfig
from ..util.threads import fan_in
from .observer import DatasetObserver, announce


class SelectionWorkerLauncher:
    def __init__(self, verbose: bool = True) -> None:
        self.verbose = verbose

    def launch(
        self, dataset: DatasetConfig, emit: Callable[[VariantKey], None], i_thread: int
    ) -> None:
        announce(dataset, self.verbose)
        threshold = dataset.pval_threshold
        what = f"p-value in column '{dataset.cols.pval}'"
        for row in read_summary_rows(dataset):
            try:
                pval = parse_float_for(row.pval, what)
            except Exception as exc:
                raise for_file(dataset.file, exc) from exc
            # NaN never compares below the threshold.
            if pval < threshold:
                emit(row.key)


def select_variants(
    datasets: Sequence[DatasetConfig],
    observer: DatasetObserver | None = None,
    verbose: bool = True,
) -> set[VariantKey]:
    """Keys with p-value strictly below the threshold in at least one dataset."""
    observer = observer or DatasetObserver(datasets, verbose)
    selected: set[VariantKey] = set()
    for key in fan_in(SelectionWorkerLauncher(verbose), list(datasets), observer):
        selected.add(key)
    return selected
