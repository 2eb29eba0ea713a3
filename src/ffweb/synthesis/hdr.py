"""HDR preservation arguments.

Synthesis is pure and cannot probe the source file, so the transfer
characteristic (PQ or HLG) is an injected parameter. When it is not known
the literal placeholder ``<auto>`` is emitted and whoever has the real
colorimetry substitutes it with fill_transfer_placeholder().
"""

from __future__ import annotations

import logging
from typing import Literal

from ffweb.domain import EncoderType, HardwareAccel

logger = logging.getLogger(__name__)

TRANSFER_PLACEHOLDER = "<auto>"

TransferCharacteristic = Literal["smpte2084", "arib-std-b67"]

# ffmpeg/x265 transfer name -> SVT-AV1 numeric transfer-characteristics
_SVTAV1_TRANSFER_CODES: dict[str, str] = {
    "smpte2084": "16",  # PQ (HDR10)
    "arib-std-b67": "18",  # HLG
}

HDR_PIX_FMT = "yuv420p10le"


def svtav1_transfer_code(transfer: str) -> str:
    """Map a transfer name to SVT-AV1's numeric code (placeholder passes through)."""
    return _SVTAV1_TRANSFER_CODES.get(transfer, transfer)


def build_hdr_preservation_args(
    encoder: EncoderType,
    hardware_accel: HardwareAccel,
    transfer: TransferCharacteristic | None = None,
) -> list[str]:
    """Build FFmpeg arguments that keep HDR metadata through the encode.

    Args:
        encoder: Target codec family.
        hardware_accel: Encoder implementation.
        transfer: Source transfer characteristic, or None if not yet known.

    Returns:
        10-bit pixel format followed by encoder-specific colorimetry args.
    """
    trc = transfer or TRANSFER_PLACEHOLDER
    args = ["-pix_fmt", HDR_PIX_FMT]

    if hardware_accel == HardwareAccel.CPU:
        if encoder == EncoderType.H265:
            x265_params = (
                "hdr-opt=1:repeat-headers=1:colorprim=bt2020:"
                f"transfer={trc}:colormatrix=bt2020nc"
            )
            args.extend(["-profile:v", "main10", "-x265-params", x265_params])
        else:
            svtav1_params = (
                "color-primaries=9:"
                f"transfer-characteristics={svtav1_transfer_code(trc)}:"
                "matrix-coefficients=9"
            )
            args.extend(["-svtav1-params", svtav1_params])
    else:
        args.extend(
            [
                "-profile:v",
                "main10",
                "-color_primaries",
                "bt2020",
                "-color_trc",
                trc,
                "-colorspace",
                "bt2020nc",
            ]
        )

    return args


def fill_transfer_placeholder(
    tokens: list[str], transfer: TransferCharacteristic
) -> list[str]:
    """Substitute the real transfer characteristic into synthesized tokens.

    Handles the plain ``-color_trc`` value, the x265 ``transfer=`` key and the
    numeric SVT-AV1 ``transfer-characteristics=`` key.

    Args:
        tokens: Output of synthesize() for an HDR-preserving config.
        transfer: Transfer characteristic detected on the source.

    Returns:
        A new token list; tokens without the placeholder are unchanged.
    """
    if transfer not in _SVTAV1_TRANSFER_CODES:
        raise ValueError(f"Unknown transfer characteristic: {transfer}")

    filled: list[str] = []
    for token in tokens:
        if TRANSFER_PLACEHOLDER in token:
            token = token.replace(
                f"transfer-characteristics={TRANSFER_PLACEHOLDER}",
                f"transfer-characteristics={svtav1_transfer_code(transfer)}",
            ).replace(TRANSFER_PLACEHOLDER, transfer)
        filled.append(token)

    logger.debug("Filled HDR transfer placeholder with %s", transfer)
    return filled
