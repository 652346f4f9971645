from __future__ import annotations

from dataclasses import dataclass

from .options.config import Config
from .output import write_output
from .pipeline import collect_stats, merge_fine_mapping, select_variants
from .report import Reporter

N_STEPS = 4


@dataclass
class MergeSummary:
    n_selected: int = 0
    n_variants: int = 0
    n_rows: int = 0
    n_fine_mapped: int = 0
    n_written: int = 0


def run_merge(config: Config, out_file: str | None = None, verbose: bool = True) -> MergeSummary:
    out_file = out_file or config.output_file
    reporter = Reporter(N_STEPS, verbose)
    summary = MergeSummary()

    reporter.step(1, "Checking variant selection...")
    selected = select_variants(config.inputs, verbose=verbose)
    summary.n_selected = len(selected)
    reporter.step_done(f"Selected {summary.n_selected} variants")

    reporter.step(2, "Getting variant statistics...")
    records = collect_stats(config.inputs, selected, verbose=verbose)
    summary.n_variants = len(records)
    summary.n_rows = sum(len(record.stats) for record in records.values())
    reporter.step_done(
        f"Collected {summary.n_rows} rows for {summary.n_variants} variants"
    )

    reporter.step(3, "Getting variant fine mapping statistics...")
    summary.n_fine_mapped = merge_fine_mapping(config.inputs, records, verbose=verbose)
    reporter.step_done(f"Applied {summary.n_fine_mapped} fine mapping rows")

    reporter.step(4, f"Computing heterogeneity tests & writing output to {out_file} ...")
    summary.n_written = write_output(config, records, out_file)
    reporter.step_done(f"Wrote {summary.n_written} variants")
    return summary
