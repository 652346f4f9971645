from __future__ import annotations

from dataclasses import replace

from .check import check_config
from .error import MmpioError, for_file, new_error
from .merge import run_merge
from .options.check_pre import check_prerequisites
from .options.cli import ConvertConfigOptions, MergeOptions, get_choice
from .options.config import dump_config, load_config
from .util.files import check_parent_dir_exists


def merge_or_check(options: MergeOptions) -> None:
    config = load_config(options.config_file)
    if options.output_file:
        config = replace(config, output_file=options.output_file)
    check_config(config)
    check_prerequisites(config)
    if options.dry:
        print("User picked dry run only, so doing nothing.")
        return
    run_merge(config, verbose=not options.quiet)


def convert_config(options: ConvertConfigOptions) -> None:
    config = load_config(options.in_file)
    check_config(config)
    check_parent_dir_exists(options.out_file)
    config_string = dump_config(config)
    try:
        with open(options.out_file, "w", encoding="utf-8") as handle:
            handle.write(config_string)
    except OSError as exc:
        raise for_file(options.out_file, exc) from exc
    print(f"Wrote configuration for {len(config.inputs)} datasets to {options.out_file}")


def run(argv: list[str] | None = None) -> None:
    choice = get_choice(argv)
    if isinstance(choice, MergeOptions):
        merge_or_check(choice)
    elif isinstance(choice, ConvertConfigOptions):
        convert_config(choice)
    else:
        raise new_error("Unknown choice")


def main(argv: list[str] | None = None) -> None:
    try:
        run(argv)
        print("Done!")
    except MmpioError as exc:
        print(f"Error: {exc}")
        raise SystemExit(1) from exc
