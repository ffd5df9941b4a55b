"""Permission bit parsing and formatting.

Supports the two notations accepted wherever a file mode can be given:
octal ("644", "0644", "0o644") and symbolic ("rw-r--r--", "-rw-r--r--").
"""

import re

# Symbolic flag for each position of a 9-character permission string.
_SYMBOLIC_BITS: tuple[tuple[str, int], ...] = (
    ("r", 0o400),
    ("w", 0o200),
    ("x", 0o100),
    ("r", 0o040),
    ("w", 0o020),
    ("x", 0o010),
    ("r", 0o004),
    ("w", 0o002),
    ("x", 0o001),
)

_OCTAL_RE = re.compile(r"^(?:0o|0)?([0-7]{1,4})$")

MAX_MODE = 0o7777


def parse_mode(value: int | str) -> int:
    """Parse a file mode into permission bits.

    Args:
        value: Integer mode, octal string or symbolic string.

    Returns:
        Permission bits in the range 0 to 0o7777.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(value, bool):
        msg = f"Invalid file mode: {value!r}"
        raise ValueError(msg)

    if isinstance(value, int):
        if not 0 <= value <= MAX_MODE:
            msg = f"File mode out of range (0-0o7777): {value:o}"
            raise ValueError(msg)
        return value

    text = value.strip()
    match = _OCTAL_RE.match(text)
    if match:
        return int(match.group(1), 8)

    # Leading type character as printed by ls (e.g. "-rw-r--r--", "drwxr-xr-x")
    if len(text) == 10:
        text = text[1:]

    if len(text) != 9:
        msg = f"Invalid file mode: {value!r}"
        raise ValueError(msg)

    bits = 0
    for char, (flag, bit) in zip(text, _SYMBOLIC_BITS, strict=True):
        if char == flag:
            bits |= bit
        elif char != "-":
            msg = f"Invalid file mode: {value!r}"
            raise ValueError(msg)
    return bits


def format_mode(bits: int) -> str:
    """Render permission bits in symbolic notation (e.g. "rwxr-xr-x")."""
    return "".join(flag if bits & bit else "-" for flag, bit in _SYMBOLIC_BITS)


def format_octal(bits: int) -> str:
    """Render permission bits as a zero-padded octal string (e.g. "0755")."""
    return f"{bits:04o}"
