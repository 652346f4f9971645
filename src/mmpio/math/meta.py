from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..data.records import VariantRecord, parse_float_for
from ..error import MmpioError, for_context
from ..options.config import HeterogeneityTestConfig

SQRT_2 = math.sqrt(2.0)


@dataclass
class MetaStats:
    beta: float
    sebeta: float
    pval: float
    hetpval: float
    q: float = 0.0


def normal_two_sided_p(z: float) -> float:
    return math.erfc(abs(z) / SQRT_2)


def chi2_df1_survival(q: float) -> float:
    if q <= 0.0:
        return 1.0
    return math.erfc(math.sqrt(q / 2.0))


def fixed_effect_meta(betas: Sequence[float], sebetas: Sequence[float]) -> MetaStats:
    """Inverse-variance weighted fixed-effect meta-analysis with Cochran's Q.

    Inputs must be of equal length, finite, and have non-zero standard errors.
    """
    beta = np.asarray(betas, dtype=float)
    se = np.asarray(sebetas, dtype=float)
    weights = 1.0 / (se * se)
    sum_weights = float(np.sum(weights))
    sum_weighted_betas = float(np.sum(beta * weights))
    meta_beta = sum_weighted_betas / sum_weights
    meta_se = math.sqrt(1.0 / sum_weights)
    z = abs(sum_weighted_betas) / math.sqrt(sum_weights)
    q = float(np.sum(weights * (beta - meta_beta) ** 2))
    return MetaStats(
        beta=meta_beta,
        sebeta=meta_se,
        pval=normal_two_sided_p(z),
        hetpval=chi2_df1_survival(q),
        q=q,
    )


def _is_usable(beta: float, sebeta: float) -> bool:
    return math.isfinite(beta) and math.isfinite(sebeta) and sebeta != 0.0


def meta_for_test(record: VariantRecord, test: HeterogeneityTestConfig) -> MetaStats | None:
    """Meta stats for one variant over the datasets named by `test`.

    Returns None (not computed) unless every named dataset has a numeric beta
    and standard error for this variant.
    """
    betas: list[float] = []
    sebetas: list[float] = []
    is_complete = True
    for tag in test.compare:
        stats = record.for_tag(tag)
        if stats is None:
            is_complete = False
            continue
        try:
            beta = parse_float_for(stats.beta, "beta")
            sebeta = parse_float_for(stats.sebeta, "sebeta")
        except MmpioError as exc:
            raise for_context(f"dataset {tag}, variant {record.key}", exc) from exc
        if not _is_usable(beta, sebeta):
            is_complete = False
            continue
        betas.append(beta)
        sebetas.append(sebeta)
    if not is_complete or len(betas) < 2:
        return None
    return fixed_effect_meta(betas, sebetas)
