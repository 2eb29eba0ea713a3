"""ffweb - FFmpeg transcode command synthesis and live task telemetry.

The core of the package is pure and dependency-light:

- ffweb.synthesis: output path policy and FFmpeg command synthesis
- ffweb.telemetry: resilient WebSocket progress channel
- ffweb.tasks: task state machine and the telemetry-backed task store

Usage:
    from ffweb.synthesis import resolve_output_path, synthesize
    from ffweb.telemetry import connect
"""

__version__ = "0.4.0"
