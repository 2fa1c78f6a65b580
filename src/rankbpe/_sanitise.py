"""
Helpers for rendering raw token bytes in log and error messages.
"""

import unicodedata


def _escape_char(c: str) -> str:
    # control category codes vary: Cc, Cf, Cs etc. so check the first letter
    if unicodedata.category(c)[0] == "C":
        return f"\\u{ord(c):04x}"
    return c


def render_bytes(b: bytes, limit: int = 64) -> str:
    """
    Decode token bytes as UTF-8 for display, escaping control characters.

    Invalid UTF-8 is shown as U+FFFD. Output longer than ``limit`` characters
    is truncated with an ellipsis.
    """
    rendered = "".join(_escape_char(c) for c in b.decode("utf-8", errors="replace"))
    if len(rendered) > limit:
        rendered = rendered[:limit] + "..."
    return rendered
