from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib
import tomli_w

from ..data.tsv import Compression
from ..error import ErrorKind, MmpioError, config_error

DEFAULT_OUTPUT_FILE = "mmp.tsv"


class keys:
    INPUTS = "inputs"
    HETEROGENEITY_TESTS = "heterogeneity_tests"
    OUTPUT_FILE = "output_file"
    TAG = "tag"
    FILEPATH = "filepath"
    COL_CHROM = "col_chrom"
    COL_POS = "col_pos"
    COL_REF = "col_ref"
    COL_ALT = "col_alt"
    COL_PVAL = "col_pval"
    COL_BETA = "col_beta"
    COL_SEBETA = "col_sebeta"
    COL_AF = "col_af"
    PVAL_THRESHOLD = "pval_threshold"
    FINEMAP_FILEPATH = "finemap_filepath"
    FINEMAP_FILEPATH_ALIASES = ("finemap_filepath", "fine_mapping_filepath")
    COMPRESSION = "compression"
    COMPARE = "compare"

    REQUIRED_INPUT = (
        TAG,
        FILEPATH,
        COL_CHROM,
        COL_POS,
        COL_REF,
        COL_ALT,
        COL_PVAL,
        COL_BETA,
        COL_SEBETA,
        COL_AF,
        PVAL_THRESHOLD,
    )


@dataclass(frozen=True)
class SumstatCols:
    chrom: str
    pos: str
    ref: str
    alt: str
    pval: str
    beta: str
    sebeta: str
    af: str

    def as_list(self) -> list[str]:
        return [
            self.chrom,
            self.pos,
            self.ref,
            self.alt,
            self.pval,
            self.beta,
            self.sebeta,
            self.af,
        ]


@dataclass(frozen=True)
class DatasetConfig:
    tag: str
    file: str
    cols: SumstatCols
    pval_threshold: float
    finemap_file: Optional[str] = None
    compression: str = Compression.GZIP


@dataclass(frozen=True)
class HeterogeneityTestConfig:
    tag: str
    compare: tuple[str, ...]


@dataclass
class Config:
    inputs: list[DatasetConfig]
    heterogeneity_tests: list[HeterogeneityTestConfig]
    output_file: str = DEFAULT_OUTPUT_FILE

    def input_tags(self) -> list[str]:
        return [item.tag for item in self.inputs]


def _missing_key_error(key: str, index: int, section: str) -> MmpioError:
    return config_error(
        f"Missing '{key}' key of element #{index} in the '{section}' section "
        "of the configuration file."
    )


def _dataset_from_dict(item: dict, index: int) -> DatasetConfig:
    if not isinstance(item, dict):
        raise config_error(f"Element #{index} in the '{keys.INPUTS}' section is not a table.")
    for key in keys.REQUIRED_INPUT:
        value = item.get(key)
        if value is None or value == "":
            raise _missing_key_error(key, index, keys.INPUTS)
    finemap_file = None
    for alias in keys.FINEMAP_FILEPATH_ALIASES:
        if item.get(alias):
            finemap_file = str(item[alias])
            break
    try:
        pval_threshold = float(item[keys.PVAL_THRESHOLD])
    except (TypeError, ValueError) as exc:
        raise config_error(
            "Invalid '{}' of element #{} in the '{}' section: {!r}".format(
                keys.PVAL_THRESHOLD, index, keys.INPUTS, item[keys.PVAL_THRESHOLD]
            )
        ) from exc
    cols = SumstatCols(
        chrom=str(item[keys.COL_CHROM]),
        pos=str(item[keys.COL_POS]),
        ref=str(item[keys.COL_REF]),
        alt=str(item[keys.COL_ALT]),
        pval=str(item[keys.COL_PVAL]),
        beta=str(item[keys.COL_BETA]),
        sebeta=str(item[keys.COL_SEBETA]),
        af=str(item[keys.COL_AF]),
    )
    return DatasetConfig(
        tag=str(item[keys.TAG]),
        file=str(item[keys.FILEPATH]),
        cols=cols,
        pval_threshold=pval_threshold,
        finemap_file=finemap_file,
        compression=str(item.get(keys.COMPRESSION, Compression.GZIP)),
    )


def _test_from_dict(item: dict, index: int) -> HeterogeneityTestConfig:
    if not isinstance(item, dict):
        raise config_error(
            f"Element #{index} in the '{keys.HETEROGENEITY_TESTS}' section is not a table."
        )
    if not item.get(keys.TAG):
        raise _missing_key_error(keys.TAG, index, keys.HETEROGENEITY_TESTS)
    compare = item.get(keys.COMPARE)
    if compare is None:
        raise _missing_key_error(keys.COMPARE, index, keys.HETEROGENEITY_TESTS)
    if isinstance(compare, str) or not isinstance(compare, list):
        raise config_error(
            f"'{keys.COMPARE}' of element #{index} in the '{keys.HETEROGENEITY_TESTS}' "
            "section must be a list of dataset tags."
        )
    return HeterogeneityTestConfig(
        tag=str(item[keys.TAG]),
        compare=tuple(str(tag) for tag in compare),
    )


def config_from_dict(data: dict) -> Config:
    if not isinstance(data, dict):
        raise config_error("Configuration must be a table at the top level.")
    inputs_data = data.get(keys.INPUTS)
    if inputs_data is None:
        raise config_error(f"Missing '{keys.INPUTS}' field in the configuration file.")
    tests_data = data.get(keys.HETEROGENEITY_TESTS)
    if tests_data is None:
        raise config_error(
            f"Missing '{keys.HETEROGENEITY_TESTS}' field in the configuration file."
        )
    inputs = [_dataset_from_dict(item, index) for index, item in enumerate(inputs_data)]
    tests = [_test_from_dict(item, index) for index, item in enumerate(tests_data)]
    return Config(
        inputs=inputs,
        heterogeneity_tests=tests,
        output_file=str(data.get(keys.OUTPUT_FILE) or DEFAULT_OUTPUT_FILE),
    )


def load_config(path: str) -> Config:
    if Path(path).suffix.lower() == ".toml":
        try:
            with open(path, "rb") as handle:
                data = tomllib.load(handle)
        except Exception as exc:
            raise MmpioError(ErrorKind.TOML_DE, f"{path}: {exc}") from exc
    else:
        try:
            with open(path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except Exception as exc:
            raise MmpioError(ErrorKind.JSON_DE, f"{path}: {exc}") from exc
    return config_from_dict(data)


def config_to_dict(config: Config) -> dict:
    def dataset_to_dict(item: DatasetConfig) -> dict:
        data = {
            keys.TAG: item.tag,
            keys.FILEPATH: item.file,
            keys.COL_CHROM: item.cols.chrom,
            keys.COL_POS: item.cols.pos,
            keys.COL_REF: item.cols.ref,
            keys.COL_ALT: item.cols.alt,
            keys.COL_PVAL: item.cols.pval,
            keys.COL_BETA: item.cols.beta,
            keys.COL_SEBETA: item.cols.sebeta,
            keys.COL_AF: item.cols.af,
            keys.PVAL_THRESHOLD: item.pval_threshold,
            keys.COMPRESSION: item.compression,
        }
        # TOML has no null, so an absent fine-mapping file is left out.
        if item.finemap_file:
            data[keys.FINEMAP_FILEPATH] = item.finemap_file
        return data

    return {
        keys.OUTPUT_FILE: config.output_file,
        keys.INPUTS: [dataset_to_dict(item) for item in config.inputs],
        keys.HETEROGENEITY_TESTS: [
            {keys.TAG: item.tag, keys.COMPARE: list(item.compare)}
            for item in config.heterogeneity_tests
        ],
    }


def dump_config(config: Config) -> str:
    try:
        return tomli_w.dumps(config_to_dict(config))
    except Exception as exc:
        raise MmpioError(ErrorKind.TOML_SER, str(exc)) from exc
