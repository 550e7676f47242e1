"""
escaping.py

Keeps interpolation placeholders (%{count}, {name}) and backslash escape runs
(\\n, \\t, \\r) away from the translator by wrapping them in
<span class='notranslate'> markers, and removes the markers again afterwards.
"""

import html
import re

NOTRANSLATE_OPEN = "<span class='notranslate'>"
NOTRANSLATE_CLOSE = "</span>"

# Escape runs come first in the alternation; placeholders may contain encoded
# newlines since \S matches the backslash sequence.
PROTECT_RE = re.compile(
    r"(?:\\[nrt]|[\n\r\t])+"
    r"|%?\{[^\s{}]*\}",
    re.MULTILINE,
)

NOTRANSLATE_RE = re.compile(
    r"""<span\s+class\s*=\s*["']notranslate["'][^>]*>([^<]*)</span\s*>""",
    re.IGNORECASE,
)


def escape(text: str) -> str:
    """Wrap every placeholder and escape run in its own notranslate span."""
    return PROTECT_RE.sub(
        lambda m: NOTRANSLATE_OPEN + m.group(0) + NOTRANSLATE_CLOSE, text
    )


def unescape(text: str) -> str:
    """
    Drop the notranslate spans, keeping their content, and undo any HTML
    entity encoding the translator applied (&amp; -> &, &#39; -> ').
    """
    return html.unescape(NOTRANSLATE_RE.sub(r"\1", text))
