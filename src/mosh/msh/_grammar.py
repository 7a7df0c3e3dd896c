"""
Token parsers for the text parts of MSH files.

Every parser takes the whole input `buf` (bytes) and a cursor `pos`, and
returns the new cursor, or a `(value, pos)` pair for parsers that produce a
value. A mismatch raises `GrammarError` and leaves nothing consumed; callers
hold on to their own cursor, so retrying at the old position is always safe.
"""
import re

from .._exceptions import GrammarError
from .._mesh import MAX_TAG

_hspace = re.compile(rb"[ \t]*")
_hspace1 = re.compile(rb"[ \t]+")
_whitespace = re.compile(rb"\s*")
_blank_lines = re.compile(rb"(?:[ \t]*\r?\n)*")
# end of input only terminates a line at the true end of the buffer
_eol = re.compile(rb"[ \t]*(?:\r?\n|\Z)")
_uint = re.compile(rb"[0-9]+")
_double = re.compile(
    rb"[-+]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_quoted = re.compile(rb'"([^"\r\n]*)"')


def line_span(buf, pos):
    end = buf.find(b"\n", pos)
    if end == -1:
        end = len(buf)
    return buf[pos:end].rstrip(b"\r")


def fail(message, buf, pos):
    """Build (not raise) a GrammarError pointing at `pos`."""
    return GrammarError(message, pos, buf.count(b"\n", 0, pos) + 1, line_span(buf, pos))


def literal(buf, pos, text):
    if not buf.startswith(text, pos):
        raise fail(f"expected {text.decode()!r}", buf, pos)
    return pos + len(text)


def hspace(buf, pos):
    return _hspace.match(buf, pos).end()


def hspace1(buf, pos):
    m = _hspace1.match(buf, pos)
    if m is None:
        raise fail("expected whitespace", buf, pos)
    return m.end()


def skip_whitespace(buf, pos):
    return _whitespace.match(buf, pos).end()


def skip_blank_lines(buf, pos):
    return _blank_lines.match(buf, pos).end()


def end_of_line(buf, pos):
    m = _eol.match(buf, pos)
    if m is None:
        raise fail("expected end of line", buf, pos)
    return m.end()


def tag_line(buf, pos, text):
    """A literal tag such as b"$Nodes" alone on its line."""
    return end_of_line(buf, literal(buf, pos, text))


def at_tag_line(buf, pos, text):
    """Non-consuming check for `tag_line`."""
    return buf.startswith(text, pos) and _eol.match(buf, pos + len(text)) is not None


def uint(buf, pos):
    m = _uint.match(buf, pos)
    if m is None:
        raise fail("expected unsigned integer", buf, pos)
    value = int(m.group())
    if value > MAX_TAG:
        raise fail(f"integer {value} does not fit in 64 bits", buf, pos)
    return value, m.end()


def double(buf, pos):
    m = _double.match(buf, pos)
    if m is None:
        raise fail("expected floating point number", buf, pos)
    return float(m.group()), m.end()


def quoted(buf, pos):
    m = _quoted.match(buf, pos)
    if m is None:
        raise fail("expected double-quoted string", buf, pos)
    try:
        text = m.group(1).decode("utf-8")
    except UnicodeDecodeError as e:
        raise fail(f"quoted string is not valid UTF-8 ({e.reason})", buf, pos) from e
    return text, m.end()
