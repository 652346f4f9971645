from __future__ import annotations

import math
from dataclasses import dataclass, field

from ..error import parse_error
from .variant import VariantKey

MISSING = "NA"


def parse_float_na(text: str) -> float:
    """Parse a float, reading the literal 'NA' as NaN.

    Digit separators and surrounding whitespace are rejected even though
    `float()` would accept them.
    """
    if text == MISSING:
        return math.nan
    if "_" in text or text != text.strip():
        raise ValueError(f"could not convert string to float: {text!r}")
    return float(text)


def parse_float_for(text: str, what: str) -> float:
    try:
        return parse_float_na(text)
    except ValueError as exc:
        raise parse_error(f"Could not parse {what} '{text}' as float.") from exc


@dataclass
class SummaryRow:
    tag: str
    key: VariantKey
    pval: str
    beta: str
    sebeta: str
    af: str


@dataclass
class FineMapRow:
    tag: str
    key: VariantKey
    pip: str
    cs: str


@dataclass
class DatasetStats:
    tag: str
    pval: str
    beta: str
    sebeta: str
    af: str
    pip: str = MISSING
    cs: str = MISSING
    has_fine_mapping: bool = False

    @classmethod
    def from_summary_row(cls, row: SummaryRow) -> "DatasetStats":
        return cls(
            tag=row.tag,
            pval=row.pval,
            beta=row.beta,
            sebeta=row.sebeta,
            af=row.af,
        )

    def set_fine_mapping(self, row: FineMapRow) -> bool:
        if self.has_fine_mapping:
            return False
        self.pip = row.pip
        self.cs = row.cs
        self.has_fine_mapping = True
        return True


@dataclass
class VariantRecord:
    key: VariantKey
    stats: list[DatasetStats] = field(default_factory=list)

    def for_tag(self, tag: str) -> DatasetStats | None:
        for item in self.stats:
            if item.tag == tag:
                return item
        return None

    def add(self, row: SummaryRow) -> bool:
        if self.for_tag(row.tag) is not None:
            return False
        self.stats.append(DatasetStats.from_summary_row(row))
        return True
