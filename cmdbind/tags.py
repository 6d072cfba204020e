r"""
Field annotation grammar.

A descriptor field carries a short annotation string that decides how the
field is exposed on the command line:

    [!|?|=]["<default>"] <description>

- '!' marks a required positional argument.
- '?' marks an optional positional argument.
- '=' marks a flag that must supply a quoted default ('="John" Name of a person').
- anything else (including nothing) marks a flag; a quoted default may still
  appear as the very first token ('"." Directory to list').

Defaults are double-quoted literals with backslash escapes (\", \\, \n, \t,
\xhh, \uhhhh, \Uhhhhhhhh, \ooo). A literal with an invalid escape yields an
empty default; an unterminated literal (or '=' without a literal) makes the
whole annotation a plain description with no marker.

Quick example:
    >>> parse_tag('?"."    Directory to list')
    ('.', 'Directory to list', <Marker.OPTIONAL: '?'>)
"""
import enum
import re


class Marker(enum.StrEnum):
    """
    role marker found at the head of an annotation.

    NONE is the not-a-marker sentinel: the field is a plain flag.
    """
    REQUIRED = "!"
    OPTIONAL = "?"
    DEFAULT = "="
    NONE = ""


_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}

_ESCAPE = re.compile(
    r"\\(?:"
    r"(?P<char>[abfnrtv\\\"])"
    r"|x(?P<byte>[0-9A-Fa-f]{2})"
    r"|u(?P<short>[0-9A-Fa-f]{4})"
    r"|U(?P<long>[0-9A-Fa-f]{8})"
    r"|(?P<octal>[0-7]{3})"
    r"|(?P<bad>.?)"
    r")",
    re.DOTALL,
)


def _unescape(match):
    if match["char"] is not None:
        return _ESCAPES[match["char"]]
    if match["byte"] is not None:
        return chr(int(match["byte"], 16))
    if (point := match["short"] or match["long"]) is not None:
        if (point := int(point, 16)) > 0x10FFFF:
            raise ValueError("escaped code point out of range")
        return chr(point)
    if match["octal"] is not None:
        if (point := int(match["octal"], 8)) > 0xFF:
            raise ValueError("octal escape out of range")
        return chr(point)
    raise ValueError("invalid escape sequence %r" % match[0])


def unquote(literal, /):
    """
    decode a double-quoted literal, e.g. '"a\\"b"' -> 'a"b'.

    raises ValueError when the literal is not quoted or holds an invalid escape.
    """
    if not isinstance(literal, str):
        raise TypeError("unquote() argument must be a string")
    if len(literal) < 2 or literal[0] != '"' or literal[-1] != '"':
        raise ValueError("unquote() argument must be a double-quoted literal")
    body = literal[1:-1]
    if re.search(r'(?<!\\)(?:\\\\)*"', body):
        raise ValueError("unquote() argument has an unescaped quote")
    return _ESCAPE.sub(_unescape, body)


def quote(text, /):
    """
    inverse of unquote() for display: wrap text in double quotes, escaping
    backslashes, quotes and control characters.
    """
    if not isinstance(text, str):
        raise TypeError("quote() argument must be a string")
    reverse = {value: key for key, value in _ESCAPES.items()}
    parts = ['"']
    for char in text:
        point = ord(char)
        if char in reverse:
            parts.append("\\" + reverse[char])
        elif char.isprintable():
            parts.append(char)
        elif point <= 0xFF:
            parts.append("\\x%02x" % point)
        elif point <= 0xFFFF:
            parts.append("\\u%04x" % point)
        else:
            parts.append("\\U%08x" % point)
    parts.append('"')
    return "".join(parts)


def _closing(tag, start):
    """
    index of the quote closing the literal opened at tag[start], or -1.
    """
    index = start + 1
    while index < len(tag) and tag[index] != '"':
        if tag[index] == "\\":
            index += 1
        index += 1
    return index if index < len(tag) else -1


def parse_tag(tag, /):
    """
    split a field annotation into (default, description, marker).

    parameters
    - tag: str
      the raw annotation string (may be empty).

    returns
    - default: str, the unquoted default literal or "".
    - description: str, the remaining text, whitespace-trimmed.
    - marker: Marker, REQUIRED/OPTIONAL/DEFAULT or NONE when no marker applies.

    fallbacks
    - unterminated quote: ("", whole tag trimmed, Marker.NONE).
    - '=' not followed by a quoted literal: ("", whole tag trimmed, Marker.NONE).
    """
    if not isinstance(tag, str):
        raise TypeError("parse_tag() argument must be a string")

    marker = Marker.NONE
    index = 0
    if tag[:1] in ("!", "?", "="):
        marker = Marker(tag[0])
        index = 1

    default = ""
    if tag[index:index + 1] == '"':
        if (end := _closing(tag, index)) < 0:
            return "", tag.strip(), Marker.NONE
        try:
            default = unquote(tag[index:end + 1])
        except ValueError:
            default = ""
        index = end + 1
    elif marker is Marker.DEFAULT:
        return "", tag.strip(), Marker.NONE

    return default, tag[index:].strip(), marker


__all__ = (
    "Marker",
    "quote",
    "unquote",
    "parse_tag",
)
