"""External packaging tool integration."""

from .ignore import IGNORE_FILE_NAME, load_ignore_globs, merge_ignore_globs
from .options import OUTPUT_STYLES, PackOptions, build_pack_command
from .runner import PackerError, run_packer

__all__ = [
    "IGNORE_FILE_NAME",
    "OUTPUT_STYLES",
    "PackOptions",
    "PackerError",
    "build_pack_command",
    "load_ignore_globs",
    "merge_ignore_globs",
    "run_packer",
]
