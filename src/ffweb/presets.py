"""Built-in preset catalogue.

Built-in presets are immutable: the backend rejects edits and deletes, and
the API client refuses them locally (see BuiltinPresetError). They all use
the CPU encoders, write MKV next to the default output tree and pass tuned
encoder parameters through ``extra_params``.
"""

from __future__ import annotations

from ffweb.domain import (
    AudioCodec,
    AudioConfig,
    EncoderType,
    HardwareAccel,
    OutputConfig,
    OutputPathType,
    Preset,
    TranscodeConfig,
    VideoConfig,
)

_X265_BALANCED = (
    "high-tier=1:preset=slow:me=umh:subme=5:merange=48:weightb=1:"
    "bframes=5:ref=3:aq-mode=4"
)
_X265_STANDARD = (
    "high-tier=1:preset=slow:me=umh:subme=5:merange=48:weightb=1:ref=3:"
    "bframes=8:b-adapt=2:aq-mode=4:aq-strength=1:rd=3:rskip=1:"
    "rc-lookahead=60:psy-rd=1.6:deblock=0,-1"
)
_X265_EDITING = (
    "high-tier=1:ctu=32:me=star:subme=5:merange=48:bframes=4:ref=3:crf=17:"
    "rd=3:rskip=1:rc-lookahead=120:tune=grain"
)
_SVTAV1_HQ = (
    "keyint=12s:scd=1:enable-tf=2:tf-strength=2:enable-qm=1:"
    "enable-variance-boost=1:variance-boost-curve=2:variance-boost-strength=2:"
    "variance-octile=2:enable-dlf=2:sharpness=6"
)
_SVTAV1_BALANCED = (
    "keyint=12s:scd=1:enable-tf=2:tf-strength=2:enable-dlf=2:sharpness=4"
)
_SVTAV1_FAST = "keyint=10s:scd=1:scm=0:enable-tf=2:tf-strength=2:sharpness=4"


def _h265(crf: int, suffix: str, x265_params: str) -> TranscodeConfig:
    return TranscodeConfig(
        encoder=EncoderType.H265,
        hardware_accel=HardwareAccel.CPU,
        video=VideoConfig(crf=crf, preset="slow"),
        audio=AudioConfig(codec=AudioCodec.COPY),
        output=OutputConfig(
            container="mkv", suffix=suffix, path_type=OutputPathType.DEFAULT
        ),
        extra_params=(
            f'-profile:v main10 -x265-params "{x265_params}" -fps_mode passthrough'
        ),
    )


def _av1(
    crf: int, preset: str, bitrate: str, suffix: str, svt_params: str
) -> TranscodeConfig:
    return TranscodeConfig(
        encoder=EncoderType.AV1,
        hardware_accel=HardwareAccel.CPU,
        video=VideoConfig(crf=crf, preset=preset),
        audio=AudioConfig(codec=AudioCodec.OPUS, bitrate=bitrate, channels=2),
        output=OutputConfig(
            container="mkv", suffix=suffix, path_type=OutputPathType.DEFAULT
        ),
        extra_params=f'-svtav1-params "{svt_params}"',
    )


BUILTIN_PRESETS: tuple[Preset, ...] = (
    Preset(
        id="builtin-h265-balanced",
        name="H.265 Balanced Quality",
        description="Stable, high quality, strong compatibility",
        config=_h265(23, "_h265_balanced", _X265_BALANCED),
        is_builtin=True,
    ),
    Preset(
        id="builtin-h265-standard",
        name="H.265 Standard Quality",
        description="Fine-tuned quality/compression balance, higher ceiling",
        config=_h265(23, "_h265_standard", _X265_STANDARD),
        is_builtin=True,
    ),
    Preset(
        id="builtin-h265-editing",
        name="H.265 Editing Archive",
        description="Optimized for editing software, lower decode pressure",
        config=_h265(17, "_h265_edit", _X265_EDITING),
        is_builtin=True,
    ),
    Preset(
        id="builtin-av1-hq",
        name="AV1 High Quality",
        description="High quality AV1 encoding for archival",
        config=_av1(28, "4", "192k", "_av1_hq", _SVTAV1_HQ),
        is_builtin=True,
    ),
    Preset(
        id="builtin-av1-balanced",
        name="AV1 Balanced",
        description="Balanced AV1 encoding for general use",
        config=_av1(32, "6", "128k", "_av1", _SVTAV1_BALANCED),
        is_builtin=True,
    ),
    Preset(
        id="builtin-av1-fast",
        name="AV1 Fast",
        description="Fast AV1 encoding for quick conversion",
        config=_av1(35, "8", "96k", "_av1_fast", _SVTAV1_FAST),
        is_builtin=True,
    ),
)


def get_builtin_preset(preset_id: str) -> Preset | None:
    """Return the built-in preset with ``preset_id``, or None."""
    for preset in BUILTIN_PRESETS:
        if preset.id == preset_id:
            return preset
    return None


def is_builtin_id(preset_id: str) -> bool:
    """True if ``preset_id`` names a built-in preset."""
    return get_builtin_preset(preset_id) is not None
