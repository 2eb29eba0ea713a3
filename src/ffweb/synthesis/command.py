"""FFmpeg command synthesis.

Turns a TranscodeConfig into the exact token sequence the backend runs.
The same function drives the local preview and the server's
/preview-command endpoint, so the two always agree byte for byte.

Token order in simple mode is a hard contract: hardware decode flags must
precede ``-i`` and the output path is always last.
"""

from __future__ import annotations

import logging

from ffweb.domain import (
    AudioCodec,
    AudioConfig,
    EncoderType,
    HardwareAccel,
    TranscodeConfig,
    VideoConfig,
)

from .hdr import TransferCharacteristic, build_hdr_preservation_args
from .params import split_params, substitute_placeholders
from .paths import resolve_output_path

logger = logging.getLogger(__name__)

FFMPEG_PROGRAM = "ffmpeg"

# (hardware path, codec family) -> ffmpeg encoder. Exhaustive by construction.
VIDEO_ENCODERS: dict[tuple[HardwareAccel, EncoderType], str] = {
    (HardwareAccel.CPU, EncoderType.H265): "libx265",
    (HardwareAccel.CPU, EncoderType.AV1): "libsvtav1",
    (HardwareAccel.NVIDIA, EncoderType.H265): "hevc_nvenc",
    (HardwareAccel.NVIDIA, EncoderType.AV1): "av1_nvenc",
    (HardwareAccel.INTEL, EncoderType.H265): "hevc_qsv",
    (HardwareAccel.INTEL, EncoderType.AV1): "av1_qsv",
    (HardwareAccel.AMD, EncoderType.H265): "hevc_amf",
    (HardwareAccel.AMD, EncoderType.AV1): "av1_amf",
}

# Input-side decode acceleration; AMD AMF and CPU need none
HWACCEL_INPUT_ARGS: dict[HardwareAccel, tuple[str, ...]] = {
    HardwareAccel.NVIDIA: ("-hwaccel", "cuda", "-hwaccel_output_format", "cuda"),
    HardwareAccel.INTEL: ("-hwaccel", "qsv", "-hwaccel_output_format", "qsv"),
}

# Unitless 0-51 quality value; only the flag name differs per encoder family
QUALITY_FLAGS: dict[HardwareAccel, str] = {
    HardwareAccel.CPU: "-crf",
    HardwareAccel.NVIDIA: "-cq",
    HardwareAccel.INTEL: "-global_quality",
    HardwareAccel.AMD: "-qp_i",
}


def select_video_encoder(encoder: EncoderType, hardware_accel: HardwareAccel) -> str:
    """Return the ffmpeg encoder name for a codec family on a hardware path."""
    return VIDEO_ENCODERS[(hardware_accel, encoder)]


def build_hwaccel_args(hardware_accel: HardwareAccel) -> list[str]:
    """Build input-side hardware acceleration args (placed before ``-i``)."""
    return list(HWACCEL_INPUT_ARGS.get(hardware_accel, ()))


def build_video_args(
    config: TranscodeConfig,
    source_is_hdr: bool | None = None,
    source_transfer: TransferCharacteristic | None = None,
) -> list[str]:
    """Build codec, preset, quality and HDR arguments.

    Args:
        config: Transcode configuration.
        source_is_hdr: Result of probing the source. False skips HDR
            preservation; None (not probed) keeps it.
        source_transfer: Source transfer characteristic if known.

    Returns:
        List of FFmpeg arguments for the video stream.
    """
    video: VideoConfig = config.video
    args = ["-c:v", select_video_encoder(config.encoder, config.hardware_accel)]

    if video.preset:
        # AMF names its speed/quality tradeoff -quality; everyone else -preset
        flag = "-quality" if config.hardware_accel == HardwareAccel.AMD else "-preset"
        args.extend([flag, video.preset])

    if video.crf is not None:
        args.extend([QUALITY_FLAGS[config.hardware_accel], str(video.crf)])

    if video.preserve_hdr and source_is_hdr is not False:
        args.extend(
            build_hdr_preservation_args(
                config.encoder, config.hardware_accel, source_transfer
            )
        )

    return args


def build_audio_args(audio: AudioConfig) -> list[str]:
    """Build audio arguments. Stream copy never carries bitrate or channels."""
    if audio.codec == AudioCodec.COPY:
        return ["-c:a", "copy"]

    args = ["-c:a", audio.codec.value]
    if audio.bitrate:
        args.extend(["-b:a", audio.bitrate])
    if audio.channels:
        args.extend(["-ac", str(audio.channels)])
    return args


def synthesize(
    config: TranscodeConfig,
    input_path: str,
    default_output_dir: str | None = None,
    source_is_hdr: bool | None = None,
    source_transfer: TransferCharacteristic | None = None,
    program: str = FFMPEG_PROGRAM,
) -> list[str]:
    """Synthesize the FFmpeg invocation for one input file.

    Args:
        config: Transcode configuration.
        input_path: Source file path.
        default_output_dir: Backend default output directory.
        source_is_hdr: Whether the source is HDR, if probed.
        source_transfer: Source transfer characteristic, if probed.
        program: Program name emitted as the first token.

    Returns:
        Ordered command-line tokens. Extra parameters and advanced-mode
        custom commands are kept as single opaque tokens; see build_argv().
    """
    output_path = resolve_output_path(input_path, config.output, default_output_dir)
    cmd = [program]

    if config.uses_custom_command:
        custom = config.custom_command.strip()
        cmd.append(substitute_placeholders(custom, input_path, output_path))
        return cmd

    cmd.extend(build_hwaccel_args(config.hardware_accel))
    cmd.extend(["-i", input_path])

    # Keep every stream and the container metadata
    cmd.extend(["-map", "0", "-map_metadata", "0"])

    cmd.extend(build_video_args(config, source_is_hdr, source_transfer))
    cmd.extend(build_audio_args(config.audio))

    # Subtitles and attachments (fonts) are always passed through
    cmd.extend(["-c:s", "copy", "-c:t", "copy"])

    if config.extra_params and config.extra_params.strip():
        cmd.append(config.extra_params.strip())

    cmd.append(output_path)
    return cmd


def build_argv(
    config: TranscodeConfig,
    input_path: str,
    default_output_dir: str | None = None,
    source_is_hdr: bool | None = None,
    source_transfer: TransferCharacteristic | None = None,
    program: str = FFMPEG_PROGRAM,
) -> list[str]:
    """Synthesize the command as a process argv.

    Same invocation as synthesize(), with the opaque fragments split into
    individual arguments. In advanced mode the custom command is split
    before placeholder substitution, so paths containing spaces stay one
    argument.
    """
    if config.uses_custom_command:
        output_path = resolve_output_path(
            input_path, config.output, default_output_dir
        )
        return [
            program,
            *(
                substitute_placeholders(arg, input_path, output_path)
                for arg in split_params(config.custom_command)
            ),
        ]

    tokens = synthesize(
        config,
        input_path,
        default_output_dir,
        source_is_hdr=source_is_hdr,
        source_transfer=source_transfer,
        program=program,
    )
    if config.extra_params and config.extra_params.strip():
        # Extra params are always the second-to-last token
        return [*tokens[:-2], *split_params(tokens[-2]), tokens[-1]]
    return tokens


def command_as_string(cmd: list[str]) -> str:
    """Human-readable version of the command, as shown in previews."""
    return " ".join(cmd)


def preview_command(
    config: TranscodeConfig,
    input_path: str = "input.mp4",
    default_output_dir: str | None = None,
) -> str:
    """Synthesize and render the preview string for a config."""
    command = command_as_string(synthesize(config, input_path, default_output_dir))
    logger.debug("Preview for %s: %s", input_path, command)
    return command
