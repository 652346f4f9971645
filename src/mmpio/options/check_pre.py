from ..error import config_error
from .config import Config
from ..util.files import check_file_exists, check_parent_dir_exists


def check_prerequisites(config: Config) -> None:
    for item in config.inputs:
        check_file_exists(item.file)
        if item.finemap_file:
            check_file_exists(item.finemap_file)
    if not config.output_file:
        raise config_error("No output file specified.")
    check_parent_dir_exists(config.output_file)
