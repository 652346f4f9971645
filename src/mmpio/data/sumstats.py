from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from .records import SummaryRow
from .tsv import TsvReader
from .variant import VariantKey

if TYPE_CHECKING:
    from ..options.config import DatasetConfig


def read_summary_rows(dataset: "DatasetConfig") -> Iterator[SummaryRow]:
    with TsvReader(dataset.file, dataset.cols.as_list(), dataset.compression) as reader:
        for chrom, pos, ref, alt, pval, beta, sebeta, af in reader:
            yield SummaryRow(
                tag=dataset.tag,
                key=VariantKey(chrom=chrom, pos=pos, ref=ref, alt=alt),
                pval=pval,
                beta=beta,
                sebeta=sebeta,
                af=af,
            )
