"""Decode and normalize file paths reported by git.

With `core.quotePath` enabled (the default) git prints non-ASCII filename
bytes as C-style octal escapes inside double quotes, e.g.
`"\\344\\270\\255\\346\\226\\207.txt"` for `中文.txt`. macOS filesystems may
also hand back NFD-decomposed names. unescape_git_path turns any of these
into one canonical NFC string so that the same human-visible filename always
compares equal.

Only text that is exactly what git's quoting would produce is decoded; an
unquoted name is taken literally, backslashes included. That keeps
unescape_git_path a no-op on its own output.
"""

from __future__ import annotations

import unicodedata
from typing import Optional, Union

# Bytes git escapes with a letter instead of \NNN
_C_ESCAPES: dict[int, bytes] = {
    0x07: b"a",
    0x08: b"b",
    0x09: b"t",
    0x0A: b"n",
    0x0B: b"v",
    0x0C: b"f",
    0x0D: b"r",
    0x22: b'"',
    0x5C: b"\\",
}
_ESCAPE_LETTERS: dict[int, int] = {letter[0]: byte for byte, letter in _C_ESCAPES.items()}
_OCTAL_DIGITS = frozenset(b"01234567")


def _git_quote(raw: bytes, *, escape_non_ascii: bool) -> bytes:
    """Quote raw path bytes the way git does; unquoted when nothing needs escaping."""
    quoted = bytearray()
    escaped = False
    for byte in raw:
        if byte in _C_ESCAPES:
            quoted += b"\\" + _C_ESCAPES[byte]
        elif byte < 0x20 or byte == 0x7F or (escape_non_ascii and byte >= 0x80):
            quoted += b"\\%03o" % byte
        else:
            quoted.append(byte)
            continue
        escaped = True
    if not escaped:
        return bytes(raw)
    return b'"' + bytes(quoted) + b'"'


def _decode_escapes(inner: bytes) -> bytes:
    """Turn \\NNN and single-letter escapes back into raw bytes."""
    buffer = bytearray()
    i = 0
    length = len(inner)
    while i < length:
        byte = inner[i]
        if byte == 0x5C and i + 1 < length:
            octal = inner[i + 1 : i + 4]
            if len(octal) == 3 and set(octal) <= _OCTAL_DIGITS and int(octal, 8) <= 0xFF:
                buffer.append(int(octal, 8))
                i += 4
                continue
            letter = inner[i + 1]
            if letter in _ESCAPE_LETTERS:
                buffer.append(_ESCAPE_LETTERS[letter])
                i += 2
                continue
        buffer.append(byte)
        i += 1
    return bytes(buffer)


def _unquote(text: str) -> Optional[bytes]:
    """Raw bytes of a git-quoted path, or None when text is not git output.

    Both `core.quotePath` settings are accepted: with it disabled, bytes
    above 0x7F are left as UTF-8 instead of being octal-escaped.
    """
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return None
    try:
        encoded = text.encode("utf-8")
    except UnicodeEncodeError:
        return None

    raw = _decode_escapes(encoded[1:-1])
    if encoded in (_git_quote(raw, escape_non_ascii=True), _git_quote(raw, escape_non_ascii=False)):
        return raw
    return None


def unescape_git_path(raw: Union[bytes, str]) -> str:
    """Return the canonical (unescaped, NFC) form of a git path.

    Accepts raw bytes or text, quoted or not. The result is idempotent:
    unescape_git_path(unescape_git_path(x)) == unescape_git_path(x).
    Zero-width joiners, combining marks and multi-code-point emoji pass
    through untouched apart from NFC composition. Undecodable bytes survive
    as surrogate escapes.
    """
    if isinstance(raw, (bytes, bytearray)):
        text = bytes(raw).decode("utf-8", errors="surrogateescape")
    else:
        text = raw
    text = unicodedata.normalize("NFC", text)

    unquoted = _unquote(text)
    if unquoted is None:
        return text

    decoded = unicodedata.normalize("NFC", unquoted.decode("utf-8", errors="surrogateescape"))
    if _unquote(decoded) is not None:
        # The name itself reads as git output; decoding it would not be stable
        return text
    return decoded


def paths_equal(left: Union[bytes, str], right: Union[bytes, str]) -> bool:
    """Compare two git paths by their canonical form."""
    return unescape_git_path(left) == unescape_git_path(right)
