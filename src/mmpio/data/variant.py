from __future__ import annotations

from dataclasses import dataclass

from ..error import schema_error

LOCUS_ID_SEP = ":"
CHROM_PREFIX = "chr"


@dataclass(frozen=True)
class VariantKey:
    chrom: str
    pos: str
    ref: str
    alt: str

    def __str__(self) -> str:
        return LOCUS_ID_SEP.join((self.chrom, self.pos, self.ref, self.alt))

    def sort_key(self) -> tuple:
        chrom_is_num = self.chrom.isdecimal()
        pos_is_num = self.pos.isdecimal()
        return (
            0 if chrom_is_num else 1,
            int(self.chrom) if chrom_is_num else 0,
            self.chrom,
            0 if pos_is_num else 1,
            int(self.pos) if pos_is_num else 0,
            self.pos,
            self.ref,
            self.alt,
        )


def strip_chrom_prefix(chrom: str) -> str:
    if chrom[: len(CHROM_PREFIX)].lower() == CHROM_PREFIX:
        return chrom[len(CHROM_PREFIX) :]
    return chrom


def parse_locus_id(value: str) -> VariantKey:
    """Parse a `chrom:pos:ref:alt` id, e.g. `chr1:100:A:T`, into a VariantKey.

    A leading `chr` on the chromosome is dropped so the key matches the
    four-column keys read from summary statistics.
    """
    parts = value.split(LOCUS_ID_SEP)
    if len(parts) != 4:
        raise schema_error(
            f"Could not parse variant from value '{value}'. "
            "Expected format: 'chrom:pos:ref:alt'."
        )
    chrom, pos, ref, alt = parts
    return VariantKey(chrom=strip_chrom_prefix(chrom), pos=pos, ref=ref, alt=alt)


def sorted_keys(keys) -> list[VariantKey]:
    return sorted(keys, key=VariantKey.sort_key)
