"""Output path policy for transcodes.

Paths are handled as plain POSIX strings rather than pathlib objects: the
resolved path is part of a command line that must match the backend's
byte for byte, and inputs are server-side paths that need not exist
locally.
"""

from __future__ import annotations

import re

from ffweb.domain import OutputConfig, OutputPathType

DEFAULT_OUTPUT_DIR = "/output"
DEFAULT_SUFFIX = "_transcoded"
DEFAULT_CONTAINER = "mp4"

_SEPARATOR_RUN = re.compile(r"/+")
_EXTENSION = re.compile(r"\.[^/.]+$")


def normalize_separators(path: str) -> str:
    """Collapse any run of ``/`` into a single separator."""
    return _SEPARATOR_RUN.sub("/", path)


def output_filename(input_path: str, output: OutputConfig) -> str:
    """Build the output file name: input stem + suffix + container extension.

    Only the last extension is stripped (``a.tar.mkv`` -> ``a.tar``).
    """
    basename = input_path[input_path.rfind("/") + 1 :]
    stem = _EXTENSION.sub("", basename)
    suffix = output.suffix or DEFAULT_SUFFIX
    container = output.container or DEFAULT_CONTAINER
    return f"{stem}{suffix}.{container}"


def resolve_output_path(
    input_path: str,
    output: OutputConfig,
    default_output_dir: str | None = None,
) -> str:
    """Resolve where a transcode of ``input_path`` is written.

    Args:
        input_path: Absolute path of the source file.
        output: Output policy from the transcode config.
        default_output_dir: Backend default output directory. Empty or None
            falls back to ``/output``.

    Returns:
        The output file path. For OVERWRITE this is ``input_path`` itself;
        callers must warn the user that the source will be replaced.
    """
    if output.path_type == OutputPathType.OVERWRITE:
        return input_path

    default_dir = default_output_dir or DEFAULT_OUTPUT_DIR
    source_dir = input_path[: max(input_path.rfind("/"), 0)]
    source_dir_name = source_dir[source_dir.rfind("/") + 1 :]

    if output.path_type == OutputPathType.SOURCE:
        directory = source_dir
    elif output.path_type == OutputPathType.CUSTOM:
        directory = output.custom_path or default_dir
    elif source_dir_name:
        # DEFAULT: group outputs by the name of the source folder
        directory = f"{default_dir}/{source_dir_name}"
    else:
        directory = default_dir

    return normalize_separators(f"{directory}/{output_filename(input_path, output)}")
