"""Transcode command synthesis.

Module organization:
- paths.py: output path policy (resolve_output_path)
- command.py: FFmpeg token synthesis and argv expansion
- hdr.py: HDR preservation args and transfer placeholder handling
- params.py: quote-aware splitting of free-form parameters

Usage:
    from ffweb.synthesis import synthesize, command_as_string
    tokens = synthesize(config, "/videos/a.mkv", "/output")
"""

from .command import (
    FFMPEG_PROGRAM,
    VIDEO_ENCODERS,
    build_argv,
    build_audio_args,
    build_hwaccel_args,
    build_video_args,
    command_as_string,
    preview_command,
    select_video_encoder,
    synthesize,
)
from .hdr import (
    TRANSFER_PLACEHOLDER,
    build_hdr_preservation_args,
    fill_transfer_placeholder,
)
from .params import (
    INPUT_PLACEHOLDER,
    OUTPUT_PLACEHOLDER,
    split_params,
)
from .paths import (
    normalize_separators,
    output_filename,
    resolve_output_path,
)

__all__ = [
    # Command synthesis
    "FFMPEG_PROGRAM",
    "VIDEO_ENCODERS",
    "build_argv",
    "build_audio_args",
    "build_hwaccel_args",
    "build_video_args",
    "command_as_string",
    "preview_command",
    "select_video_encoder",
    "synthesize",
    # HDR
    "TRANSFER_PLACEHOLDER",
    "build_hdr_preservation_args",
    "fill_transfer_placeholder",
    # Parameters
    "INPUT_PLACEHOLDER",
    "OUTPUT_PLACEHOLDER",
    "split_params",
    # Paths
    "normalize_separators",
    "output_filename",
    "resolve_output_path",
]
