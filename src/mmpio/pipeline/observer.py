from __future__ import annotations

from typing import Sequence

from ..options.config import DatasetConfig
from ..util.threads import PhaseObserver


class DatasetObserver(PhaseObserver):
    def __init__(self, datasets: Sequence[DatasetConfig], verbose: bool = True) -> None:
        self.tags = [item.tag for item in datasets]
        self.verbose = verbose
        self.n_received = 0
        self.n_done = 0

    def going_to_start_phase(self, n_threads: int) -> None:
        self.n_received = 0
        self.n_done = 0

    def worker_done(self, i_thread: int) -> None:
        self.n_done += 1
        if self.verbose:
            print(f"* done {self.tags[i_thread]}")

    def completed_phase(self, n_received: int) -> None:
        self.n_received = n_received


def announce(dataset: DatasetConfig, verbose: bool) -> None:
    if verbose:
        print(f"- processing {dataset.tag}")
