"""Line-oriented parser for gettext .po catalogs."""

from __future__ import annotations

import re

from .models import Catalog, MessageEntry, SourcePosition, SourceSpan

# --- Regex patterns ---

# Editors count lines on \r\n, \r and \n only (str.splitlines() knows more).
RE_LINE_BREAK = re.compile(r"\r\n|\r|\n")
RE_KEYWORD = re.compile(r'^\s*(msgctxt|msgid_plural|msgid|msgstr)(?:\[(\d+)\])?\s*(?=")')
RE_OCTAL_ESCAPE = re.compile(r"[0-7]{1,3}")
RE_HEX_ESCAPE = re.compile(r"x([0-9a-fA-F]{1,2})")

_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "?": "?",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


class ParseError(ValueError):
    """Malformed catalog syntax at a 1-indexed line/column."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column


class _PendingEntry:
    """Accumulates the keyword lines of one entry until it is complete."""

    def __init__(self, line: int) -> None:
        self.line = line
        self.context: list[str] | None = None
        self.key: list[str] | None = None
        self.key_span: SourceSpan | None = None
        self.plural_key: list[str] | None = None
        self.values: list[list[str]] = []
        self.value_span: SourceSpan | None = None
        # Field that receives continuation strings
        self.target: str | None = None

    @property
    def complete(self) -> bool:
        return bool(self.values)

    def extend(self, value: str, span: SourceSpan) -> None:
        if self.target == "msgctxt":
            self.context.append(value)
        elif self.target == "msgid":
            self.key.append(value)
            self.key_span.end = span.end
        elif self.target == "msgid_plural":
            self.plural_key.append(value)
        else:
            self.values[-1].append(value)
            if len(self.values) == 1:
                self.value_span.end = span.end

    def to_entry(self) -> MessageEntry:
        return MessageEntry(
            key="".join(self.key),
            key_location=self.key_span,
            translated_values=["".join(parts) for parts in self.values],
            value_location=self.value_span,
            context="".join(self.context) if self.context is not None else None,
            plural_key="".join(self.plural_key) if self.plural_key is not None else None,
        )


def _read_string(line: str, start: int, lineno: int) -> tuple[str, SourceSpan]:
    """Decode the quoted string starting at index *start* of *line*.

    Returns the decoded value and its span (closing quote included).
    Anything but whitespace after the closing quote is an error.
    """
    chars: list[str] = []
    i = start + 1
    while i < len(line):
        ch = line[i]
        if ch == '"':
            rest = line[i + 1:]
            if rest.strip():
                column = i + 2 + (len(rest) - len(rest.lstrip()))
                raise ParseError("unexpected text after string", lineno, column)
            span = SourceSpan(
                start=SourcePosition(line=lineno, column=start + 1),
                end=SourcePosition(line=lineno, column=i + 2),
            )
            return "".join(chars), span
        if ch != "\\":
            chars.append(ch)
            i += 1
            continue

        i += 1
        if i >= len(line):
            break
        esc = line[i]
        if esc in _SIMPLE_ESCAPES:
            chars.append(_SIMPLE_ESCAPES[esc])
            i += 1
            continue
        m = RE_OCTAL_ESCAPE.match(line, i)
        if m:
            chars.append(chr(int(m.group(), 8)))
            i = m.end()
            continue
        m = RE_HEX_ESCAPE.match(line, i)
        if m:
            chars.append(chr(int(m.group(1), 16)))
            i = m.end()
            continue
        raise ParseError(f"invalid escape sequence '\\{esc}'", lineno, i)

    raise ParseError("unterminated string", lineno, start + 1)


def parse_text(text: str) -> Catalog:
    """Parse catalog text into its message entries, in document order.

    Comments (including obsolete ``#~`` entries) are skipped without being
    interpreted.  Raises :class:`ParseError` on malformed syntax.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    messages: list[MessageEntry] = []
    pending: _PendingEntry | None = None

    for lineno_0, line in enumerate(RE_LINE_BREAK.split(text)):
        lineno = lineno_0 + 1
        stripped = line.strip()

        if not stripped or stripped.startswith("#"):
            continue

        indent = len(line) - len(line.lstrip())

        # --- Continuation string ---
        if stripped.startswith('"'):
            if pending is None or pending.target is None:
                raise ParseError("string without a preceding keyword", lineno, indent + 1)
            value, span = _read_string(line, indent, lineno)
            pending.extend(value, span)
            continue

        m = RE_KEYWORD.match(line)
        if not m:
            word = stripped.split()[0]
            raise ParseError(f"unexpected '{word}'", lineno, indent + 1)

        keyword = m.group(1)
        value, span = _read_string(line, m.end(), lineno)

        # --- msgctxt: always opens a new entry ---
        if keyword == "msgctxt":
            if pending is not None and not pending.complete:
                raise ParseError("msgctxt before msgstr of previous entry", lineno, indent + 1)
            if pending is not None:
                messages.append(pending.to_entry())
            pending = _PendingEntry(lineno)
            pending.context = [value]
            pending.target = "msgctxt"
            continue

        # --- msgid: opens a new entry unless it follows a lone msgctxt ---
        if keyword == "msgid":
            if pending is not None and pending.complete:
                messages.append(pending.to_entry())
                pending = None
            if pending is not None and pending.key is not None:
                raise ParseError("msgid before msgstr of previous entry", lineno, indent + 1)
            if pending is None:
                pending = _PendingEntry(lineno)
            pending.key = [value]
            pending.key_span = span
            pending.target = "msgid"
            continue

        if pending is None or pending.key is None:
            raise ParseError(f"{keyword} without msgid", lineno, indent + 1)

        # --- msgid_plural ---
        if keyword == "msgid_plural":
            if pending.complete or pending.plural_key is not None:
                raise ParseError("misplaced msgid_plural", lineno, indent + 1)
            pending.plural_key = [value]
            pending.target = "msgid_plural"
            continue

        # --- msgstr / msgstr[N] ---
        pending.values.append([value])
        if len(pending.values) == 1:
            pending.value_span = span
        pending.target = "msgstr"

    if pending is not None:
        if not pending.complete:
            raise ParseError("entry has no msgstr", pending.line, 1)
        messages.append(pending.to_entry())

    return Catalog(messages=messages)
