from __future__ import annotations

from datetime import datetime

from .util.duration_format import format_duration


class Reporter:
    def __init__(self, n_steps: int, verbose: bool = True) -> None:
        self.n_steps = n_steps
        self.verbose = verbose
        self.start_time = datetime.now()
        self.start_time_step = datetime.now()

    def step(self, i_step: int, message: str) -> None:
        self.start_time_step = datetime.now()
        if self.verbose:
            print(f"[{i_step}/{self.n_steps}] {message}")

    def step_done(self, summary: str) -> None:
        if not self.verbose:
            return
        elapsed_step = format_duration(datetime.now() - self.start_time_step)
        elapsed_total = format_duration(datetime.now() - self.start_time)
        print(f"  {summary} in {elapsed_step}. Total time is {elapsed_total}")
