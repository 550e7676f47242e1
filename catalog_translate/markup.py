"""
markup.py

Flattens a nested catalog mapping into a string of nested <div> blocks so an
HTML-aware translation service only touches leaf text, and parses that string
back into a mapping afterwards.

    {"en": {"greeting": "hi"}}  <->  <div key='en'><div key='greeting'>hi</div></div>

Only the block structure produced by encode() is understood. Keys are written
as-is inside the `key` attribute and are never translated.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from .errors import MarkupError

OPEN_TAG = "<div key='{key}'>"
CLOSE_TAG = "</div>"

# A block tag may carry extra attributes (translators sometimes add them);
# only `key` is read, `name` is accepted for older markup.
TAG_RE = re.compile(r"<div\b(?P<attrs>[^>]*)>|</div\s*>", re.IGNORECASE)
KEY_ATTR_RE = re.compile(
    r"""\b(?P<attr>key|name)\s*=\s*(?:'(?P<sq>[^']*)'|"(?P<dq>[^"]*)")""",
    re.IGNORECASE,
)

# Token kinds
OPEN = "open"
CLOSE = "close"
TEXT = "text"


# ── Encode ─────────────────────────────────────────────────────────────────────

def encode(mapping: dict) -> str:
    """Encode a nested mapping as nested <div key='...'> blocks, in order."""
    parts: list[str] = []
    _encode_into(mapping, parts)
    return "".join(parts)


def _encode_into(mapping: dict, parts: list[str]) -> None:
    for key, value in mapping.items():
        parts.append(OPEN_TAG.format(key=key))
        if isinstance(value, dict):
            _encode_into(value, parts)
        elif value is None:
            parts.append("")
        else:
            parts.append(str(value))
        parts.append(CLOSE_TAG)


# ── Tokenizer ──────────────────────────────────────────────────────────────────

def _block_key(attrs: str, position: int) -> str:
    found: dict[str, str] = {}
    for m in KEY_ATTR_RE.finditer(attrs):
        value = m.group("sq") if m.group("sq") is not None else m.group("dq")
        found.setdefault(m.group("attr").lower(), value)
    if "key" in found:
        return found["key"]
    if "name" in found:
        return found["name"]
    raise MarkupError(f"block without a key attribute at offset {position}")


def tokenize(markup: str) -> Iterator[tuple[str, str, int]]:
    """
    Split markup into (kind, value, offset) tokens.
    OPEN carries the block key, TEXT the raw text, CLOSE an empty string.
    """
    pos = 0
    for m in TAG_RE.finditer(markup):
        if m.start() > pos:
            yield TEXT, markup[pos : m.start()], pos
        if m.group(0).startswith("</"):
            yield CLOSE, "", m.start()
        else:
            yield OPEN, _block_key(m.group("attrs"), m.start()), m.start()
        pos = m.end()
    if pos < len(markup):
        yield TEXT, markup[pos:], pos


# ── Decode ─────────────────────────────────────────────────────────────────────

class _Parser:
    """
    Stack-based parser over block tokens.

    At an OPEN token the following tokens decide, in this order:
      leaf block    OPEN [TEXT] CLOSE          -> key = stripped text
      nested block  OPEN [blank TEXT] OPEN     -> push a new mapping for key
    A CLOSE token pops the current mapping.
    """

    def __init__(self, markup: str) -> None:
        self._tokens = list(tokenize(markup))
        self._i = 0
        self._stack: list[dict] = [{}]

    def parse(self) -> dict:
        while self._i < len(self._tokens):
            kind, value, offset = self._tokens[self._i]
            if kind == OPEN:
                self._open(value, offset)
            elif kind == CLOSE:
                self._close(offset)
            else:
                self._between_blocks(value, offset)
        if len(self._stack) != 1:
            raise MarkupError(f"{len(self._stack) - 1} block(s) left unclosed")
        return self._stack[0]

    def _peek(self, ahead: int) -> Optional[tuple[str, str, int]]:
        j = self._i + ahead
        return self._tokens[j] if j < len(self._tokens) else None

    def _open(self, key: str, offset: int) -> None:
        nxt = self._peek(1)
        after = self._peek(2)

        # leaf block
        if nxt is not None and nxt[0] == CLOSE:
            self._stack[-1][key] = ""
            self._i += 2
            return
        if nxt is not None and nxt[0] == TEXT and after is not None and after[0] == CLOSE:
            self._stack[-1][key] = nxt[1].strip()
            self._i += 3
            return

        # nested block
        if nxt is not None and nxt[0] == OPEN:
            self._push(key)
            self._i += 1
            return
        if nxt is not None and nxt[0] == TEXT and not nxt[1].strip():
            if after is not None and after[0] == OPEN:
                self._push(key)
                self._i += 2
                return

        raise MarkupError(f"block {key!r} at offset {offset} is not closed properly")

    def _push(self, key: str) -> None:
        child: dict = {}
        self._stack[-1][key] = child
        self._stack.append(child)

    def _close(self, offset: int) -> None:
        if len(self._stack) == 1:
            raise MarkupError(f"unexpected closing block at offset {offset}")
        self._stack.pop()
        self._i += 1

    def _between_blocks(self, text: str, offset: int) -> None:
        if text.strip():
            raise MarkupError(f"unexpected text {text.strip()[:30]!r} at offset {offset}")
        self._i += 1


def decode(markup: str) -> dict:
    """Parse markup produced by encode() back into a nested mapping."""
    if not markup:
        return {}
    return _Parser(markup).parse()


def count_leaves(mapping: dict) -> int:
    return sum(
        count_leaves(value) if isinstance(value, dict) else 1
        for value in mapping.values()
    )
