"""Free-form parameter handling.

Extra parameters and advanced-mode custom commands are opaque strings in
the synthesized preview. Before they can be handed to a process they are
split into argv entries here.
"""

from __future__ import annotations

INPUT_PLACEHOLDER = "[[INPUT]]"
OUTPUT_PLACEHOLDER = "[[OUTPUT]]"

_QUOTES = ('"', "'")


def split_params(params: str) -> list[str]:
    """Split a parameter string on spaces, honoring single and double quotes.

    Quotes group characters and are removed; there is no escape handling,
    so ``-x265-params "a=1:b=2"`` yields ``["-x265-params", "a=1:b=2"]``.
    An unterminated quote runs to the end of the string.

    Args:
        params: Raw parameter string.

    Returns:
        List of arguments (empty for blank input).
    """
    args: list[str] = []
    current: list[str] = []
    quote: str | None = None

    for char in params:
        if quote is None and char in _QUOTES:
            quote = char
        elif quote is not None and char == quote:
            quote = None
        elif quote is None and char == " ":
            if current:
                args.append("".join(current))
                current = []
        else:
            current.append(char)

    if current:
        args.append("".join(current))
    return args


def substitute_placeholders(arg: str, input_path: str, output_path: str) -> str:
    """Replace the literal [[INPUT]] and [[OUTPUT]] placeholders in ``arg``."""
    return arg.replace(INPUT_PLACEHOLDER, input_path).replace(
        OUTPUT_PLACEHOLDER, output_path
    )
