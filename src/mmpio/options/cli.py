from __future__ import annotations

import argparse
from dataclasses import dataclass

from .. import __version__
from ..error import MmpioError, config_error

MERGE = "merge"
CONVERT_CONFIG = "convert-config"


@dataclass
class MergeOptions:
    config_file: str
    output_file: str | None
    dry: bool
    quiet: bool


@dataclass
class ConvertConfigOptions:
    in_file: str
    out_file: str


def _missing_option_error(name: str, long_opt: str, short_opt: str) -> MmpioError:
    return config_error(f"Missing {name} option ('--{long_opt}' or '-{short_opt}').")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mmpio",
        description="Merge GWAS summary statistics, fine-mapping and meta-analysis.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    merge = subparsers.add_parser(MERGE)
    merge.add_argument("-f", "--conf-file", dest="conf_file")
    merge.add_argument(
        "-o",
        "--output",
        dest="output_file",
        help="Output path (TSV), overrides output_file of the config.",
    )
    merge.add_argument("-d", "--dry", action="store_true")
    merge.add_argument("-q", "--quiet", action="store_true")

    convert = subparsers.add_parser(CONVERT_CONFIG)
    convert.add_argument("-i", "--in-file", dest="in_file")
    convert.add_argument("-o", "--out-file", dest="out_file")

    return parser


def get_choice(argv: list[str] | None = None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == MERGE:
        if not args.conf_file:
            raise _missing_option_error("config file", "conf-file", "f")
        return MergeOptions(
            config_file=args.conf_file,
            output_file=args.output_file,
            dry=bool(args.dry),
            quiet=bool(args.quiet),
        )

    if args.command == CONVERT_CONFIG:
        if not args.in_file:
            raise _missing_option_error("input config file", "in-file", "i")
        if not args.out_file:
            raise _missing_option_error("output TOML config file", "out-file", "o")
        return ConvertConfigOptions(in_file=args.in_file, out_file=args.out_file)

    raise config_error(f"Unknown subcommand {args.command}.")
