"""Syntax Repair — single-pass state machine that balances model-emitted JSON text.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - One left-to-right pass, no backtracking; lookahead only to classify a quote or a bare word
    - Scanner states are explicit (OUTSIDE, IN_STRING, ESCAPED): a character is either a
      string boundary or a literal to escape, never both
    - Closers are only ever appended at the end, in nesting order; a stray closer with no
      matching opener is kept as-is for the structural stage
    - Idempotent: repair_syntax(repair_syntax(x)) == repair_syntax(x)

Design Decisions:
    - Prose/fence stripping folded into the scan: text before the first opener is skipped,
      text after the top-level value closes is dropped (ADR: one notion of "inside a string")
    - A quote inside a string closes it only when the next significant character is
      structural (, : } ]) or end-of-text — otherwise it is a raw quote and gets escaped
    - Lookahead skips exactly what the OUTSIDE state drops (whitespace, control characters,
      backtick runs), so a fence between a key and its colon classifies the same on every pass
    - Trailing commas, bare identifier keys, Python literals and invalid escapes are fixed
      here too: they are the other lexical defects models produce
      (ADR: keeps the structural stage structural)
"""

import re
from enum import Enum


class ScanState(str, Enum):
    OUTSIDE = "outside"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


_OPENERS = "{["
_CLOSERS = "}]"
_MATCHING_CLOSER = {"{": "}", "[": "]"}
_MATCHING_OPENER = {"}": "{", "]": "["}
_WHITESPACE = frozenset(" \t\n\r")
_VALID_ESCAPES = frozenset('"\\/bfnrt')
_HEX_4 = re.compile(r"[0-9a-fA-F]{4}")
_FENCE = re.compile(r"`{3,}[A-Za-z0-9_+-]*")
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_JSON_LITERALS = frozenset({"true", "false", "null"})
_PYTHON_LITERALS = {"True": "true", "False": "false", "None": "null"}
_VALUE_START = frozenset('"{[]}-0123456789')


def repair_syntax(text: str) -> str:
    """Return a syntactically balanced version of the first JSON value in `text`.

    Text without any `{` or `[` comes back stripped and otherwise unchanged.
    """
    return JsonScanner(text).run()


def find_start(text: str) -> int:
    """Index of the first opener of the structured value, -1 when there is none.

    The first `{` wins; a `[` directly in front of it (only whitespace between)
    marks an array of objects and wins instead.
    """
    brace = text.find("{")
    if brace == -1:
        return text.find("[")
    bracket = text.rfind("[", 0, brace)
    if bracket != -1 and not text[bracket + 1:brace].strip():
        return bracket
    return brace


class JsonScanner:
    """Character-level repairer. One instance per input text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.out: list[str] = []
        self.stack: list[str] = []
        self.state = ScanState.OUTSIDE
        self.last_sig = ""
        self.pending_ws: list[str] = []
        self.pending_comma = False

    def run(self) -> str:
        start = find_start(self.text)
        if start == -1:
            return self.text.strip()

        i = start
        n = len(self.text)
        while i < n:
            if self.state is ScanState.OUTSIDE:
                i = self._outside(i)
                if not self.stack:
                    break  # top-level value closed; the rest is prose
            elif self.state is ScanState.IN_STRING:
                i = self._in_string(i)
            else:
                i = self._escaped(i)
        self._finish()
        return "".join(self.out)

    # -- OUTSIDE ---------------------------------------------------------------

    def _outside(self, i: int) -> int:
        c = self.text[i]
        if c in _WHITESPACE:
            self.pending_ws.append(c)
            return i + 1
        if ord(c) < 0x20:
            return i + 1
        if c == "`":
            fence = _FENCE.match(self.text, i)
            return fence.end() if fence else i + 1
        if c == ",":
            if self.last_sig and self.last_sig not in _OPENERS:
                self.pending_comma = True
            return i + 1
        if c in _OPENERS:
            self._flush(c)
            self.out.append(c)
            self.stack.append(c)
            self.last_sig = c
            return i + 1
        if c in _CLOSERS:
            self._close(c)
            return i + 1
        if c == '"':
            self._flush(c)
            self.out.append(c)
            self.state = ScanState.IN_STRING
            return i + 1
        if c.isalpha() or c == "_":
            return self._bare_word(i)
        self._flush(c)
        self.out.append(c)
        self.last_sig = c
        return i + 1

    def _bare_word(self, i: int) -> int:
        """Quote an identifier used as a key; map Python literals used as values."""
        word = _IDENTIFIER.match(self.text, i)
        token = word.group(0)
        expects_key = bool(self.stack) and self.stack[-1] == "{" and (
            self.pending_comma or self.last_sig == "{"
        )
        if expects_key and _next_significant(self.text, word.end()) == ":":
            self._flush('"')
            self.out.append(f'"{token}"')
            self.last_sig = '"'
            return word.end()
        token = _PYTHON_LITERALS.get(token, token)
        self._flush(token[0])
        self.out.append(token)
        self.last_sig = token[-1]
        return word.end()

    def _close(self, c: str) -> None:
        opener = _MATCHING_OPENER[c]
        self.pending_comma = False  # trailing comma
        self._flush(c)
        if opener not in self.stack:
            self.out.append(c)  # over-closed: left for the structural stage
            self.last_sig = c
            return
        while self.stack[-1] != opener:
            self.out.append(_MATCHING_CLOSER[self.stack.pop()])
        self.stack.pop()
        self.out.append(c)
        self.last_sig = c

    def _flush(self, c: str) -> None:
        """Emit whatever separator the next significant character `c` needs."""
        if self.pending_comma:
            self.out.append(",")
        elif self.last_sig and self.last_sig in _CLOSERS and c in _OPENERS:
            self.out.append(",")  # }{  }[  ]{  ][
        elif (
            self.last_sig == '"' and c == '"'
            and any(ch in "\n\r" for ch in self.pending_ws)
        ):
            self.out.append(",")  # "a": "x"\n"b": ...
        self.pending_comma = False
        self.out.extend(self.pending_ws)
        self.pending_ws.clear()

    # -- IN_STRING -------------------------------------------------------------

    def _in_string(self, i: int) -> int:
        text = self.text
        c = text[i]
        if c == "\\":
            self.out.append(c)
            self.state = ScanState.ESCAPED
        elif c == '"':
            if _closes_string(text, i + 1):
                self.out.append(c)
                self.state = ScanState.OUTSIDE
                self.last_sig = '"'
            else:
                self.out.append('\\"')
        elif c == "\r":
            if not text.startswith("\n", i + 1):
                self.out.append("\\n")
        elif c == "\n":
            self.out.append("\\n")
        elif c == "\t":
            self.out.append("\\t")
        elif ord(c) >= 0x20:
            self.out.append(c)
        return i + 1

    # -- ESCAPED ---------------------------------------------------------------

    def _escaped(self, i: int) -> int:
        text = self.text
        c = text[i]
        if c in _VALID_ESCAPES or (c == "u" and _HEX_4.match(text, i + 1)):
            self.out.append(c)
        elif c in "\r\n":
            # backslash-newline: the model meant an escaped newline
            self.out.append("n")
            if c == "\r" and text.startswith("\n", i + 1):
                i += 1
        elif ord(c) < 0x20:
            return i + 1
        else:
            self.out.append("\\" + c)
        self.state = ScanState.IN_STRING
        return i + 1

    # -- End of text -----------------------------------------------------------

    def _finish(self) -> None:
        if self.state is ScanState.ESCAPED:
            self.out.append("\\")
        if self.state is not ScanState.OUTSIDE:
            self.out.append('"')
            self.state = ScanState.OUTSIDE
        self.pending_comma = False
        self.pending_ws.clear()
        while self.stack:
            self.out.append(_MATCHING_CLOSER[self.stack.pop()])


# --- Lookahead helpers ---------------------------------------------------------

def _skip_whitespace(text: str, i: int) -> int:
    n = len(text)
    while i < n and text[i] in _WHITESPACE:
        i += 1
    return i


def _skip_dropped(text: str, i: int) -> int:
    """Skip what the OUTSIDE state drops: whitespace, control characters and backtick runs."""
    n = len(text)
    while i < n:
        c = text[i]
        if c in _WHITESPACE or ord(c) < 0x20:
            i += 1
        elif c == "`":
            fence = _FENCE.match(text, i)
            i = fence.end() if fence else i + 1
        else:
            break
    return i


def _next_significant(text: str, i: int) -> str:
    """Next character the scanner would emit at or after `i`; "" at end-of-text."""
    j = _skip_dropped(text, i)
    return text[j] if j < len(text) else ""


def _closes_string(text: str, i: int) -> bool:
    """Decide whether the quote just before `i` ends the string it is in."""
    j = _skip_whitespace(text, i)
    if j >= len(text) or text.startswith("```", j):
        return True
    j = _skip_dropped(text, j)
    if j >= len(text):
        return True
    nxt = text[j]
    if nxt in ":}]":
        return True
    if nxt == '"':
        return any(ch in "\n\r" for ch in text[i:j])
    if nxt != ",":
        return False
    # A comma only ends the string when a key or value can follow it
    k = _skip_dropped(text, j + 1)
    if k >= len(text) or text[k] in _VALUE_START:
        return True
    word = _IDENTIFIER.match(text, k)
    if not word:
        return False
    return (
        word.group(0) in _JSON_LITERALS
        or _next_significant(text, word.end()) == ":"
    )
