from __future__ import annotations

from .data.tsv import Compression
from .error import config_error
from .options.config import Config


def check_config(config: Config) -> None:
    if not config.inputs:
        raise config_error("No summary stat provided in the configuration file. Need at least 1.")
    seen_tags: set[str] = set()
    for item in config.inputs:
        if item.tag in seen_tags:
            raise config_error(f"Duplicate dataset tag '{item.tag}'.")
        seen_tags.add(item.tag)
        if not item.pval_threshold > 0.0:
            raise config_error(
                "P-value threshold of {} must be > 0, got {}.".format(
                    item.tag, item.pval_threshold
                )
            )
        if item.compression not in Compression.ALL:
            raise config_error(
                "Unrecognized compression '{}' for {}. Possible values are: {}.".format(
                    item.compression, item.tag, ", ".join(Compression.ALL)
                )
            )
    known_tags = set(config.input_tags())
    seen_tests: set[str] = set()
    for test in config.heterogeneity_tests:
        if test.tag in seen_tests:
            raise config_error(f"Duplicate heterogeneity test tag '{test.tag}'.")
        seen_tests.add(test.tag)
        if len(set(test.compare)) < 2:
            raise config_error(
                "Need at least 2 GWAS to run heterogeneity test {}. Instead got: {}".format(
                    test.tag, list(test.compare)
                )
            )
        if len(set(test.compare)) != len(test.compare):
            raise config_error(
                "Heterogeneity test {} lists a dataset more than once: {}".format(
                    test.tag, list(test.compare)
                )
            )
        for tag in test.compare:
            if tag not in known_tags:
                raise config_error(
                    f"Heterogeneity test {test.tag} references unknown dataset {tag}."
                )
