"""Parsers for translation table files.

Supported formats:
    - ``.strings``: ``"key" = "value";`` pairs with C-style comments, in
      UTF-8 or BOM-marked UTF-16. Compiled (binary or XML) property lists
      with the same extension are accepted as well.
    - ``.json``: a flat object whose values are all strings.

Every parser raises ``ValueError`` on malformed input; callers decide what
an unparseable table means.
"""

import json
import plistlib
from pathlib import Path

__all__ = ["load_table", "parse_table", "parse_strings", "parse_json_table"]

_UNQUOTED_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_.:$-/")
_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r", "'": "'", "0": "\0"}


def _decode_text(data: bytes) -> str:
    if data.startswith((b"\xff\xfe", b"\xfe\xff")):
        return data.decode("utf-16")
    return data.decode("utf-8-sig")


class _StringsReader:
    """Single-pass reader over the text of a ``.strings`` file."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, message: str) -> ValueError:
        line = self.text.count("\n", 0, self.pos) + 1
        return ValueError(f"{message} (line {line})")

    def skip_blank(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end + 1
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise self.error("Unterminated comment")
                self.pos = end + 2
            else:
                return

    def at_end(self) -> bool:
        self.skip_blank()
        return self.pos >= len(self.text)

    def expect(self, ch: str) -> None:
        self.skip_blank()
        if self.pos >= len(self.text) or self.text[self.pos] != ch:
            raise self.error(f"Expected '{ch}'")
        self.pos += 1

    def peek(self) -> str:
        self.skip_blank()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def read_token(self) -> str:
        self.skip_blank()
        if self.pos >= len(self.text):
            raise self.error("Unexpected end of file")
        if self.text[self.pos] == '"':
            return self._read_quoted()
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in _UNQUOTED_CHARS:
            self.pos += 1
        if start == self.pos:
            raise self.error(f"Unexpected character {self.text[self.pos]!r}")
        return self.text[start:self.pos]

    def _read_quoted(self) -> str:
        text = self.text
        self.pos += 1
        out: list[str] = []
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '"':
                self.pos += 1
                return "".join(out)
            if ch == "\\":
                self.pos += 1
                if self.pos >= len(text):
                    break
                esc = text[self.pos]
                if esc in ("u", "U"):
                    hex_digits = text[self.pos + 1:self.pos + 5]
                    if len(hex_digits) != 4:
                        raise self.error("Truncated unicode escape")
                    try:
                        out.append(chr(int(hex_digits, 16)))
                    except ValueError as e:
                        raise self.error(f"Invalid unicode escape \\{esc}{hex_digits}") from e
                    self.pos += 5
                    continue
                out.append(_ESCAPES.get(esc, esc))
                self.pos += 1
                continue
            out.append(ch)
            self.pos += 1
        raise self.error("Unterminated string")


def parse_strings(data: bytes) -> dict[str, str]:
    """Parse the contents of a ``.strings`` file."""
    if data.startswith(b"bplist00") or data.lstrip().startswith(b"<?xml"):
        return _parse_plist(data)

    try:
        text = _decode_text(data)
    except UnicodeDecodeError as e:
        raise ValueError(f"Undecodable strings file: {e}") from e

    reader = _StringsReader(text)
    table: dict[str, str] = {}
    while not reader.at_end():
        key = reader.read_token()
        if reader.peek() == ";":
            # "key"; is shorthand for "key" = "key";
            value = key
        else:
            reader.expect("=")
            value = reader.read_token()
        reader.expect(";")
        table[key] = value
    return table


def _parse_plist(data: bytes) -> dict[str, str]:
    try:
        payload = plistlib.loads(data)
    except Exception as e:
        raise ValueError(f"Invalid property list: {e}") from e
    return _string_mapping(payload)


def _string_mapping(payload: object) -> dict[str, str]:
    if not isinstance(payload, dict):
        raise ValueError("Table root is not a dictionary")
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in payload.items()):
        raise ValueError("Table contains non-string entries")
    return dict(payload)


def parse_json_table(data: bytes) -> dict[str, str]:
    """Parse a flat JSON object of strings."""
    try:
        payload = json.loads(_decode_text(data))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Invalid JSON table: {e}") from e
    return _string_mapping(payload)


def parse_table(data: bytes, suffix: str = ".strings") -> dict[str, str]:
    """Parse table bytes according to the file suffix.

    Files without a known suffix are tried as JSON first, then as ``.strings``.
    """
    if suffix == ".json":
        return parse_json_table(data)
    if suffix == ".strings":
        return parse_strings(data)
    try:
        return parse_json_table(data)
    except ValueError:
        return parse_strings(data)


def load_table(path: Path) -> dict[str, str]:
    """Read and parse a table file.

    Raises:
        OSError: The file cannot be read
        ValueError: The file cannot be parsed
    """
    return parse_table(path.read_bytes(), path.suffix)
